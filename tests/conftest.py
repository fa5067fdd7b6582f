"""Pytest fixtures for Medication Lookup API tests.

This module provides shared fixtures for testing the FastAPI application,
including a test client wired to a fresh medication store and a stubbed
openFDA service, plus common test data.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from medlookup.main import app
from medlookup.models import Medication
from medlookup.repositories.medication_repository import MedicationStore
from medlookup.routers.medications import get_medication_store
from medlookup.services.openfda_service import get_openfda_service


@pytest.fixture
def sample_curated_medications():
    """Curated medications as loaded from the CSV (no source tag).

    Returns:
        list[Medication]: Three curated records.
    """
    return [
        Medication(
            id="aspirin",
            generic_name="Aspirin",
            brand_names="Bayer, Ecotrin",
            primary_use="Relieves pain and fever.",
            how_to_take="Take with food.",
            warnings="Do not give to children with viral illness.",
            side_effects="Stomach upset",
        ),
        Medication(
            id="metformin",
            generic_name="Metformin",
            brand_names="Glucophage",
            primary_use="Lowers blood sugar.",
            how_to_take="Take with meals.",
            warnings="Avoid heavy alcohol use.",
            side_effects="Diarrhea, nausea",
        ),
        Medication(
            id="ibuprofen-200mg",
            generic_name="Ibuprofen",
            brand_names="",
            primary_use="Relieves pain and inflammation.",
            how_to_take="Take with food or milk.",
            warnings="May cause stomach bleeding.",
            side_effects="Heartburn",
        ),
    ]


@pytest.fixture
def medication_store(sample_curated_medications):
    """A fresh store holding the sample curated medications."""
    return MedicationStore(sample_curated_medications)


@pytest.fixture
def mock_openfda():
    """Stub openFDA service that returns no data by default."""
    service = MagicMock()
    service.is_configured = False
    service.fetch_one = AsyncMock(return_value=None)
    service.fetch_many = AsyncMock(return_value=[])
    return service


@pytest.fixture
def client(medication_store, mock_openfda):
    """Create a test client for the FastAPI application.

    The lifespan hook is not run, so nothing is loaded from the CSV or
    openFDA; the store and openFDA service are injected instead.

    Returns:
        TestClient: A test client instance for making requests to the API.
    """
    app.dependency_overrides[get_medication_store] = lambda: medication_store
    app.dependency_overrides[get_openfda_service] = lambda: mock_openfda
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def openfda_label():
    """Raw openFDA drug label for aspirin.

    Returns:
        dict: Label in the shape returned by the label endpoint.
    """
    return {
        "openfda": {
            "generic_name": ["ASPIRIN"],
            "brand_name": ["Bayer Aspirin", "Ecotrin", "St. Joseph", "Bufferin"],
        },
        "indications_and_usage": ["<p>Uses</p> temporarily relieves minor aches and pains"],
        "dosage_and_administration": ["<b>Directions</b> drink a full glass of water with each dose"],
        "warnings": ["Reye's syndrome: children and teenagers should not use this medicine"],
        "adverse_reactions": ["stomach bleeding"],
    }
