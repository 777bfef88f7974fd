from typing import List

from pydantic import BaseModel

from urlscan.models.result import ValidationResult


class ValidationSummary(BaseModel):
    """Per-status tally of a validation run."""

    total: int
    indexed: int
    no_index: int
    not_found: int
    errors: int
    """Everything that is neither indexed, noindexed nor a 404 (invalid URLs,
    server errors, empty pages)."""


class UploadResponse(BaseModel):
    filename: str
    urls_found: int
    results: List[ValidationResult]
    summary: ValidationSummary
