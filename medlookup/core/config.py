"""Environment-driven settings for the Medication Lookup API.

Values are read once at import time. ``medlookup.main`` calls
``load_dotenv()`` before importing anything else, so a local ``.env``
file is honoured.
"""

import os
from pathlib import Path


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name, "")
    try:
        return float(value) if value.strip() else default
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name, "")
    try:
        return int(value) if value.strip() else default
    except ValueError:
        return default


# openFDA drug label API
OPENFDA_API_KEY = os.getenv("OPENFDA_API_KEY", "")
OPENFDA_BASE_URL = os.getenv("OPENFDA_BASE_URL", "https://api.fda.gov/drug/label.json")
OPENFDA_TIMEOUT = _env_float("OPENFDA_TIMEOUT", 30.0)

# Curated dataset
DEFAULT_MEDICATIONS_CSV_PATH = Path(__file__).resolve().parent.parent / "data" / "medications.csv"
MEDICATIONS_CSV_PATH = Path(os.getenv("MEDICATIONS_CSV_PATH", "") or DEFAULT_MEDICATIONS_CSV_PATH)

# Startup enrichment
ENRICH_ON_STARTUP = _env_bool("ENRICH_ON_STARTUP", True)
RETAIN_UNENRICHED_MEDICATIONS = _env_bool("RETAIN_UNENRICHED_MEDICATIONS", False)
ENRICHMENT_RETRY_DELAY = _env_float("ENRICHMENT_RETRY_DELAY", 0.5)
ENRICHMENT_PACE_DELAY = _env_float("ENRICHMENT_PACE_DELAY", 0.15)

# Search
SEARCH_RESULT_LIMIT = _env_int("SEARCH_RESULT_LIMIT", 20)
MIN_QUERY_LENGTH = 2

# CORS (comma-separated list of origins)
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "")
