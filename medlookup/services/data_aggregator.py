"""Data aggregation service for combining curated and openFDA medication data."""

import logging

from medlookup.models import Medication, MedicationSource

logger = logging.getLogger(__name__)


class DataAggregator:
    """Merges curated medication records with their openFDA counterparts.

    Curated content is clinically reviewed, so it wins on every field.
    openFDA only fills in brand names the curated record is missing.
    """

    def merge(
        self,
        external: Medication | None,
        curated: Medication | None,
    ) -> Medication | None:
        """Merge an openFDA record into a curated record.

        Args:
            external: Record built from openFDA, if any.
            curated: Record from the curated dataset, if any.

        Returns:
            None when both are missing, the present record unchanged when
            only one is given, otherwise a curated-tagged record with the
            curated id and text fields.
        """
        if external is None and curated is None:
            return None
        if curated is None:
            return external
        if external is None:
            return curated

        brand_names = curated.brand_names or external.brand_names or ""
        if not curated.brand_names and brand_names:
            logger.debug(f"Filled brand names for {curated.id} from openFDA: {brand_names}")

        return curated.model_copy(
            update={
                "brand_names": brand_names,
                "source": "curated",
            }
        )

    def tag(self, medication: Medication, source: MedicationSource) -> Medication:
        """Return a copy of ``medication`` tagged with ``source``."""
        return medication.with_source(source)


_data_aggregator: DataAggregator | None = None


def get_data_aggregator() -> DataAggregator:
    """Get the singleton DataAggregator instance."""
    global _data_aggregator
    if _data_aggregator is None:
        _data_aggregator = DataAggregator()
    return _data_aggregator
