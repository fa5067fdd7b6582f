"""Pydantic models for the Medication Lookup API.

Field names are snake_case in Python and camelCase on the wire, matching the
column names of the curated medications CSV.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


MedicationSource = Literal["curated", "external"]


def to_camel(string: str) -> str:
    """Convert snake_case to camelCase."""
    components = string.split("_")
    return components[0] + "".join(word.capitalize() for word in components[1:])


class Medication(BaseModel):
    """Patient-facing facts about a single medication.

    Attributes:
        id: Stable lowercase-hyphenated identifier. Taken verbatim from the
            curated dataset, or derived from the generic name for records
            that only exist in openFDA.
        generic_name: Generic (non-proprietary) name.
        brand_names: Up to three brand names, comma-joined.
        primary_use: What the medication is used for.
        how_to_take: Dosage and administration guidance.
        warnings: Important warnings.
        side_effects: Common adverse reactions.
        source: Where the record came from, None for records that have not
            been through a merge yet.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        serialize_by_alias=True,
    )

    id: str = Field(..., min_length=1, description="Stable medication identifier")
    generic_name: str = Field(..., description="Generic name")
    brand_names: str = Field(default="", description="Comma-joined brand names")
    primary_use: str = Field(default="", description="Primary use / indications")
    how_to_take: str = Field(default="", description="Dosage and administration")
    warnings: str = Field(default="", description="Warnings")
    side_effects: str = Field(default="", description="Adverse reactions")
    source: MedicationSource | None = Field(
        default=None,
        description="Data source: 'curated' or 'external'",
    )

    def with_source(self, source: MedicationSource) -> "Medication":
        """Return a copy of this record tagged with ``source``."""
        return self.model_copy(update={"source": source})


class ServiceStatus(BaseModel):
    """Runtime status of the lookup service."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        serialize_by_alias=True,
    )

    medications: int
    openfda_configured: bool
    enrich_on_startup: bool
