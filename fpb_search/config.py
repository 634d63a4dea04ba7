"""
Runtime configuration for the search service.

Values are read once from the environment at import time. Defaults
point at the public free-programming-books data set and site so the
service works out of the box.
"""

import os
from pathlib import Path
from typing import Optional

# Published JSON export of the free-programming-books markdown files
CATALOG_URL = os.getenv(
    "FPB_CATALOG_URL",
    "https://raw.githubusercontent.com/FreeEbookFoundationBot/"
    "free-programming-books-json/main/fpb.json",
)

# Optional local copy of the catalog; takes precedence over the URL
_catalog_file = os.getenv("FPB_CATALOG_FILE")
CATALOG_FILE: Optional[Path] = Path(_catalog_file) if _catalog_file else None

# Base of the rendered per-language book pages that listings link to
LISTINGS_BASE_URL = os.getenv(
    "FPB_LISTINGS_BASE_URL",
    "https://ebookfoundation.github.io/free-programming-books/books",
).rstrip("/")

FETCH_TIMEOUT = float(os.getenv("FPB_FETCH_TIMEOUT", "10"))

LOG_LEVEL = os.getenv("FPB_LOG_LEVEL", "INFO").upper()

# Search tuning
FUZZY_THRESHOLD = 0.2
MAX_RESULTS = 40
MAX_LISTINGS = 5
