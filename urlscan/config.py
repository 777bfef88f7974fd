"""Centralised settings for the URLScan service.

Values can be overridden via environment variables or a `.env` file in the
project root (loaded automatically when this module is imported).
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (one level up from this package)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Fetching
    # ------------------------------------------------------------------
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("URLSCAN_REQUEST_TIMEOUT", "50.0"))
    )
    max_concurrency: int = field(
        default_factory=lambda: int(os.environ.get("URLSCAN_MAX_CONCURRENCY", "8"))
    )

    # ------------------------------------------------------------------
    # Result cache
    # ------------------------------------------------------------------
    cache_ttl: float = field(
        default_factory=lambda: float(os.environ.get("URLSCAN_CACHE_TTL", "1800"))
    )

    # ------------------------------------------------------------------
    # API
    # ------------------------------------------------------------------
    batch_timeout: float = field(
        default_factory=lambda: float(os.environ.get("URLSCAN_BATCH_TIMEOUT", "300.0"))
    )
    max_urls: int = field(
        default_factory=lambda: int(os.environ.get("URLSCAN_MAX_URLS", "10000"))
    )
    rate_limit: str = field(
        default_factory=lambda: os.environ.get("URLSCAN_RATE_LIMIT", "30/minute")
    )
    log_level: str = field(
        default_factory=lambda: os.environ.get("URLSCAN_LOG_LEVEL", "INFO").upper()
    )


# Module-level singleton, import this everywhere:
#   from urlscan.config import settings
settings = Settings()
