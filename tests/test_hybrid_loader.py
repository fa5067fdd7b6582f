"""Tests for the startup HybridLoader."""

import pytest
from unittest.mock import AsyncMock, MagicMock, call, patch

from medlookup.models import Medication
from medlookup.repositories.medication_repository import MedicationStore
from medlookup.services.hybrid_loader import HybridLoader


def _fda(generic_name: str, brand_names: str = "FDA Brand") -> Medication:
    return Medication(
        id=generic_name.lower(),
        generic_name=generic_name.upper(),
        brand_names=brand_names,
        primary_use="FDA use",
        how_to_take="FDA directions",
        warnings="FDA warnings",
        side_effects="FDA side effects",
    )


def _openfda(fetch_one_side_effect):
    service = MagicMock()
    service.fetch_one = AsyncMock(side_effect=fetch_one_side_effect)
    return service


def _loader(service, **kwargs) -> HybridLoader:
    kwargs.setdefault("retry_delay", 0)
    kwargs.setdefault("pace_delay", 0)
    return HybridLoader(service, **kwargs)


class TestHybridLoader:
    """Test suite for HybridLoader."""

    @pytest.mark.asyncio
    async def test_merges_each_curated_record(self, sample_curated_medications):
        """Test that every found record is merged with curated data winning."""
        service = _openfda(lambda name: _fda(name))
        medications = await _loader(service).load(sample_curated_medications)

        assert [m.id for m in medications] == ["aspirin", "metformin", "ibuprofen-200mg"]
        assert all(m.source == "curated" for m in medications)

        aspirin = medications[0]
        assert aspirin.generic_name == "Aspirin"
        assert aspirin.primary_use == "Relieves pain and fever."
        assert aspirin.brand_names == "Bayer, Ecotrin"

        # Ibuprofen has no curated brand names, so openFDA fills them in
        assert medications[2].brand_names == "FDA Brand"

    @pytest.mark.asyncio
    async def test_lookups_use_generic_name_in_order(self, sample_curated_medications):
        service = _openfda(lambda name: _fda(name))
        await _loader(service).load(sample_curated_medications)

        assert service.fetch_one.await_args_list == [
            call("Aspirin"),
            call("Metformin"),
            call("Ibuprofen"),
        ]

    @pytest.mark.asyncio
    async def test_retries_once_after_miss(self, sample_curated_medications):
        """Test that a first miss is retried and the retry result is used."""
        service = _openfda([None, _fda("Aspirin")])
        medications = await _loader(service).load(sample_curated_medications[:1])

        assert service.fetch_one.await_count == 2
        assert [m.id for m in medications] == ["aspirin"]

    @pytest.mark.asyncio
    async def test_no_retry_after_hit(self, sample_curated_medications):
        service = _openfda([_fda("Aspirin")])
        await _loader(service).load(sample_curated_medications[:1])

        assert service.fetch_one.await_count == 1

    @pytest.mark.asyncio
    async def test_double_miss_drops_record(self, sample_curated_medications):
        """Test that a record missing from openFDA twice is dropped."""

        async def fetch_one(name):
            return None if name == "Ibuprofen" else _fda(name)

        service = _openfda(fetch_one)
        medications = await _loader(service).load(sample_curated_medications)

        assert [m.id for m in medications] == ["aspirin", "metformin"]
        assert service.fetch_one.await_count == 4

    @pytest.mark.asyncio
    async def test_double_miss_retained_when_configured(self, sample_curated_medications):
        service = _openfda(lambda name: None)
        medications = await _loader(service, retain_unenriched=True).load(
            sample_curated_medications
        )

        assert [m.id for m in medications] == ["aspirin", "metformin", "ibuprofen-200mg"]
        assert all(m.source == "curated" for m in medications)
        assert medications[2].brand_names == ""

    @pytest.mark.asyncio
    async def test_delays_between_records_and_before_retry(self, sample_curated_medications):
        """Test retry and pacing delays are applied in sequence."""
        service = _openfda([_fda("Aspirin"), None, None, _fda("Ibuprofen")])
        loader = HybridLoader(service, retry_delay=0.5, pace_delay=0.15)

        with patch("medlookup.services.hybrid_loader.asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
            medications = await loader.load(sample_curated_medications)

        assert [c.args[0] for c in mock_sleep.await_args_list] == [0.15, 0.5, 0.15, 0.15]
        assert [m.id for m in medications] == ["aspirin", "ibuprofen-200mg"]

    @pytest.mark.asyncio
    async def test_empty_input(self):
        service = _openfda(lambda name: None)
        assert await _loader(service).load([]) == []
        service.fetch_one.assert_not_called()

    @pytest.mark.asyncio
    async def test_populate_replaces_store(self, sample_curated_medications):
        """Test that populate swaps the store contents for the enriched set."""
        store = MedicationStore([Medication(id="stale", generic_name="Stale")])

        async def fetch_one(name):
            return None if name == "Ibuprofen" else _fda(name)

        count = await _loader(_openfda(fetch_one)).populate(store, sample_curated_medications)

        assert count == 2
        assert store.get_by_id("stale") is None
        assert store.get_by_id("ibuprofen-200mg") is None
        assert store.get_by_id("metformin").source == "curated"
