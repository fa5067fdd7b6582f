"""Loader for the curated medications CSV."""

import csv
import logging
from pathlib import Path

from pydantic import ValidationError

from medlookup.models import Medication

logger = logging.getLogger(__name__)

CSV_COLUMNS = (
    "id",
    "genericName",
    "brandNames",
    "primaryUse",
    "howToTake",
    "warnings",
    "sideEffects",
)


def load_curated_medications(csv_path: str | Path) -> list[Medication]:
    """Load curated medications from a CSV file.

    Rows without an id or generic name are skipped. A missing or unreadable
    file yields an empty list so the service can still start.

    Args:
        csv_path: Path to the CSV file.

    Returns:
        Medications in file order, with ``source`` unset.
    """
    path = Path(csv_path)
    medications: list[Medication] = []

    try:
        with path.open(mode="r", encoding="utf-8-sig", newline="") as f:
            reader = csv.DictReader(f)
            missing = [c for c in CSV_COLUMNS if c not in (reader.fieldnames or [])]
            if missing:
                logger.error(f"Medications CSV {path} is missing columns: {', '.join(missing)}")
                return []

            for line_number, row in enumerate(reader, start=2):
                values = {k.strip(): (v or "").strip() for k, v in row.items() if k}
                if not values.get("id") or not values.get("genericName"):
                    logger.warning(f"Skipping row {line_number} in {path.name}: missing id or genericName")
                    continue
                try:
                    medications.append(Medication(**{c: values.get(c, "") for c in CSV_COLUMNS}))
                except ValidationError as e:
                    logger.warning(f"Skipping invalid row {line_number} in {path.name}: {e}")
    except (OSError, csv.Error, UnicodeDecodeError) as e:
        logger.error(f"Error loading medications CSV {path}: {e}")
        return []

    logger.info(f"Loaded {len(medications)} curated medications from {path.name}")
    return medications
