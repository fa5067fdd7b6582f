"""Search across curated medications and live openFDA results."""

import logging

from medlookup.core.config import MIN_QUERY_LENGTH, SEARCH_RESULT_LIMIT
from medlookup.models import Medication
from medlookup.repositories.medication_repository import MedicationStore
from medlookup.services.data_aggregator import DataAggregator, get_data_aggregator
from medlookup.services.openfda_service import OpenFDAService

logger = logging.getLogger(__name__)


class MedicationSearchService:
    """Combines curated substring matches with openFDA search results.

    Result order:
    1. curated medications whose generic or brand names contain the query;
    2. curated medications that only matched because openFDA returned a label
       with the same generic name (curated data wins);
    3. openFDA-only medications.

    No ranking is applied within a group.
    """

    def __init__(
        self,
        store: MedicationStore,
        openfda_service: OpenFDAService,
        aggregator: DataAggregator | None = None,
        result_limit: int = SEARCH_RESULT_LIMIT,
    ) -> None:
        self._store = store
        self._openfda = openfda_service
        self._aggregator = aggregator or get_data_aggregator()
        self._result_limit = result_limit

    def _build_curated_lookup(self) -> dict[str, Medication]:
        lookup: dict[str, Medication] = {}
        for med in self._store.get_all():
            lookup[med.generic_name.lower()] = med
            lookup[med.id] = med
        return lookup

    async def search(self, query: str) -> list[Medication]:
        """Search medications by name.

        Args:
            query: User search text.

        Returns:
            Deduplicated medications, curated first. Empty for queries
            shorter than two characters.
        """
        term = query.strip()
        if len(term) < MIN_QUERY_LENGTH:
            return []

        curated_lookup = self._build_curated_lookup()

        matching_curated = [
            self._aggregator.tag(med, "curated")
            for med in self._store.search_substring(term)
        ]
        matched_ids = {med.id for med in matching_curated}

        external_results = await self._openfda.fetch_many(term, limit=self._result_limit)

        name_matched: list[Medication] = []
        external_only: list[Medication] = []

        for external in external_results:
            curated = curated_lookup.get(external.generic_name.lower()) or curated_lookup.get(external.id)

            if curated is None:
                external_only.append(self._aggregator.tag(external, "external"))
                continue

            if curated.id in matched_ids:
                continue

            merged = self._aggregator.merge(external, curated)
            if merged is not None:
                name_matched.append(merged)
                matched_ids.add(curated.id)

        logger.info(
            f"Search returned {len(matching_curated)} curated, "
            f"{len(name_matched)} name-matched and {len(external_only)} openFDA-only results"
        )
        return matching_curated + name_matched + external_only
