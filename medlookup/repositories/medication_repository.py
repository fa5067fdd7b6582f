from __future__ import annotations

from typing import Iterable

from medlookup.models import Medication


class MedicationStore:
    """In-memory collection of curated medications keyed by id.

    Populated once at startup and read-only afterwards, apart from a full
    replace via ``set_medications``.
    """

    def __init__(self, medications: Iterable[Medication] | None = None) -> None:
        self._medications: dict[str, Medication] = {}
        if medications is not None:
            self.set_medications(medications)

    def __len__(self) -> int:
        return len(self._medications)

    def set_medications(self, medications: Iterable[Medication]) -> None:
        # build first, then swap, so readers never see a half-filled store
        replacement: dict[str, Medication] = {}
        for med in medications:
            replacement[med.id] = med
        self._medications = replacement

    def get_all(self) -> list[Medication]:
        return list(self._medications.values())

    def get_by_id(self, medication_id: str) -> Medication | None:
        return self._medications.get(medication_id)

    def search_substring(self, query: str) -> list[Medication]:
        """Case-insensitive substring match on generic or brand names, in store order."""
        q = query.lower()
        return [
            med
            for med in self._medications.values()
            if q in med.generic_name.lower() or q in med.brand_names.lower()
        ]
