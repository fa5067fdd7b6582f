"""Helpers for turning openFDA label fields into display strings.

openFDA returns most label sections as arrays of HTML-ish text fragments.
Only the first fragment is shown to patients.
"""

import re
from typing import Any

MAX_FIELD_LENGTH = 500
MAX_BRAND_NAMES = 3

_TAG_PATTERN = re.compile(r"<[^>]*>")
_WHITESPACE_PATTERN = re.compile(r"\s+")

# Shown when a label section is missing or empty
PRIMARY_USE_FALLBACK = "Consult healthcare provider for usage information"
HOW_TO_TAKE_FALLBACK = "Follow your doctor's instructions"
WARNINGS_FALLBACK = "Consult your healthcare provider for warnings"
SIDE_EFFECTS_FALLBACK = "Consult your healthcare provider for side effect information"


def _as_fragments(value: Any) -> list[str]:
    """Normalize a label field to a list of strings; a bare string counts as one fragment."""
    if isinstance(value, str):
        return [value]
    if isinstance(value, list):
        return [v for v in value if isinstance(v, str)]
    return []


def extract_text(fragments: list[str] | str | None) -> str:
    """Extract a single display string from a label field.

    Args:
        fragments: Raw text fragments as returned by openFDA, or None.

    Returns:
        The first fragment with markup removed, trimmed and truncated to
        MAX_FIELD_LENGTH characters. Empty string when there is nothing
        to extract.
    """
    values = _as_fragments(fragments)
    if not values:
        return ""

    cleaned = _TAG_PATTERN.sub("", values[0]).strip()
    return cleaned[:MAX_FIELD_LENGTH]


def medication_id_from_name(name: str) -> str:
    """Derive a medication id from a generic name ("Folic Acid" -> "folic-acid")."""
    return _WHITESPACE_PATTERN.sub("-", name.strip().lower())


def join_brand_names(brand_names: list[str] | str | None, limit: int = MAX_BRAND_NAMES) -> str:
    """Join the first ``limit`` brand names with a comma."""
    names = [name.strip() for name in _as_fragments(brand_names) if name.strip()]
    return ", ".join(names[:limit])
