"""Startup enrichment of curated medications with openFDA data.

Each curated record is looked up in openFDA one at a time, with a fixed pause
between records to stay under the openFDA rate limit. Records are processed
strictly in sequence; running lookups concurrently would break the pacing.
"""

import asyncio
import logging

from medlookup.core.config import (
    ENRICHMENT_PACE_DELAY,
    ENRICHMENT_RETRY_DELAY,
    RETAIN_UNENRICHED_MEDICATIONS,
)
from medlookup.models import Medication
from medlookup.repositories.medication_repository import MedicationStore
from medlookup.services.data_aggregator import DataAggregator, get_data_aggregator
from medlookup.services.openfda_service import OpenFDAService

logger = logging.getLogger(__name__)


class HybridLoader:
    """Joins curated medications with their openFDA counterparts.

    By default a curated record whose openFDA lookup misses twice is dropped
    from the enriched set. Pass ``retain_unenriched=True`` to keep it with its
    curated data instead.
    """

    def __init__(
        self,
        openfda_service: OpenFDAService,
        aggregator: DataAggregator | None = None,
        retry_delay: float = ENRICHMENT_RETRY_DELAY,
        pace_delay: float = ENRICHMENT_PACE_DELAY,
        retain_unenriched: bool = RETAIN_UNENRICHED_MEDICATIONS,
    ) -> None:
        self._openfda = openfda_service
        self._aggregator = aggregator or get_data_aggregator()
        self._retry_delay = retry_delay
        self._pace_delay = pace_delay
        self._retain_unenriched = retain_unenriched

    async def _fetch_with_retry(self, generic_name: str) -> Medication | None:
        external = await self._openfda.fetch_one(generic_name)
        if external is None:
            logger.info(f"Retrying openFDA lookup for {generic_name}...")
            await asyncio.sleep(self._retry_delay)
            external = await self._openfda.fetch_one(generic_name)
        return external

    async def load(self, curated: list[Medication]) -> list[Medication]:
        """Enrich curated medications with openFDA data.

        Args:
            curated: Curated medications in CSV order.

        Returns:
            The enriched medications, in CSV order.
        """
        logger.info(f"Enriching {len(curated)} curated medications from openFDA...")
        medications: list[Medication] = []
        enriched_count = 0

        for curated_med in curated:
            external = await self._fetch_with_retry(curated_med.generic_name)

            if external is not None:
                merged = self._aggregator.merge(external, curated_med)
                if merged is not None:
                    medications.append(merged)
                    enriched_count += 1
                    logger.info(f"Loaded {curated_med.generic_name} from openFDA (merged with curated data)")
            elif self._retain_unenriched:
                medications.append(self._aggregator.tag(curated_med, "curated"))
                logger.info(f"Loaded {curated_med.generic_name} from curated data only")
            else:
                logger.warning(
                    f"Dropping {curated_med.id}: no openFDA data for "
                    f"{curated_med.generic_name} after retry"
                )

            await asyncio.sleep(self._pace_delay)

        logger.info(
            f"Loaded {len(medications)}/{len(curated)} medications "
            f"({enriched_count} enriched from openFDA)"
        )
        return medications

    async def populate(self, store: MedicationStore, curated: list[Medication]) -> int:
        """Enrich ``curated`` and replace the store contents with the result.

        Returns:
            Number of medications now in the store.
        """
        medications = await self.load(curated)
        store.set_medications(medications)
        return len(store)
