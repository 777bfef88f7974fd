"""URL list extraction from uploaded ``.txt`` / ``.csv`` files."""

import csv
from typing import List, Optional

ALLOWED_EXTENSIONS = (".txt", ".csv")


def _is_candidate(value: Optional[str]) -> bool:
    return bool(value) and value.startswith("http")


def _url_from_line(line: str, is_csv: bool) -> Optional[str]:
    """Return the URL carried by *line*, or None.

    CSV files contribute their first column; text files one URL per line.
    """
    candidate = next(csv.reader([line]))[0].strip() if is_csv else line
    return candidate if _is_candidate(candidate) else None


def extract_urls(filename: str, content: str) -> List[str]:
    """Return the distinct URLs listed in an uploaded file, in file order.

    Blank lines and entries that do not start with ``http`` are skipped.
    Whether an entry is a well-formed URL is left to the validator.
    """
    is_csv = filename.lower().endswith(".csv")
    seen: set = set()
    urls: List[str] = []
    for raw_line in content.splitlines():
        line = raw_line.strip()
        if not line:
            continue
        url = _url_from_line(line, is_csv)
        if url and url not in seen:
            seen.add(url)
            urls.append(url)
    return urls
