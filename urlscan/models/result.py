from enum import Enum
from typing import Dict

from pydantic import BaseModel, ConfigDict, Field


class ValidationStatus(str, Enum):
    """Outcome of validating one URL.  Values are the labels shown in reports."""

    INDEXED = "Indexed"
    INVALID = "Invalid URL"
    NOT_FOUND = "404 Not Found"
    SERVER_ERROR = "Server Error"
    NO_INDEX = "NoIndex Found"
    EMPTY_PAGE = "Empty Page"


class Category(str, Enum):
    JOB_LISTINGS = "Job Listings"
    ARTICLES = "Articles"
    NEWS = "News"
    EVENTS = "Events"
    COMPANY = "Company"
    PRODUCTS = "Products"
    SUPPORT = "Support"
    UNCATEGORIZED = "Uncategorized"


class ValidationResult(BaseModel):
    """Verdict for a single URL.  Never mutated once built."""

    model_config = ConfigDict(frozen=True)

    url: str = Field(min_length=1)
    status: ValidationStatus
    details: str = ""
    category: Category = Category.UNCATEGORIZED
    meta_tags: Dict[str, str] = Field(default_factory=dict)
