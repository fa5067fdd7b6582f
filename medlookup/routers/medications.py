"""Medications router for the Medication Lookup API.

Provides endpoints for listing curated medications, fetching one by id and
searching curated and openFDA data together.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from medlookup.core.config import ENRICH_ON_STARTUP, MIN_QUERY_LENGTH
from medlookup.models import Medication, ServiceStatus
from medlookup.repositories.medication_repository import MedicationStore
from medlookup.services import MedicationSearchService, OpenFDAService, get_openfda_service

logger = logging.getLogger(__name__)


def _sanitize_for_log(value: str, max_length: int = 100) -> str:
    """Sanitize a string for safe logging to prevent log injection."""
    sanitized = "".join(c if c.isprintable() and c not in "\n\r\t" else " " for c in value)
    if len(sanitized) > max_length:
        sanitized = sanitized[:max_length] + "..."
    return sanitized


def get_medication_store(request: Request) -> MedicationStore:
    """Return the store owned by the running application."""
    return request.app.state.medication_store


def get_search_service(
    store: Annotated[MedicationStore, Depends(get_medication_store)],
    openfda: Annotated[OpenFDAService, Depends(get_openfda_service)],
) -> MedicationSearchService:
    return MedicationSearchService(store, openfda)


router = APIRouter()


@router.get(
    "/medications",
    response_model=list[Medication],
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    summary="List medications",
    description="Return every curated medication, enriched with openFDA brand names.",
)
async def list_medications(
    store: Annotated[MedicationStore, Depends(get_medication_store)],
) -> list[Medication]:
    return store.get_all()


async def _search(query: str, service: MedicationSearchService) -> list[Medication]:
    if len(query.strip()) < MIN_QUERY_LENGTH:
        return []
    logger.info("Searching medications for: %s", _sanitize_for_log(query))
    return await service.search(query)


@router.get(
    "/medications/search",
    response_model=list[Medication],
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    summary="Search medications",
    description="Search curated medications and openFDA labels by generic or brand name.",
)
async def search_medications(
    service: Annotated[MedicationSearchService, Depends(get_search_service)],
    q: Annotated[str, Query(max_length=200)] = "",
) -> list[Medication]:
    """Search medications.

    Curated matches come first, followed by medications only known to
    openFDA. Queries shorter than two characters return an empty list.
    """
    return await _search(q, service)


@router.get(
    "/medications/search/{query}",
    response_model=list[Medication],
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    summary="Search medications (path form)",
    description="Same as GET /medications/search?q=, with the query in the path.",
)
async def search_medications_by_path(
    query: str,
    service: Annotated[MedicationSearchService, Depends(get_search_service)],
) -> list[Medication]:
    return await _search(query, service)


@router.get(
    "/medications/{medication_id}",
    response_model=Medication,
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    summary="Get medication",
    description="Return a single curated medication by id.",
)
async def get_medication(
    medication_id: str,
    store: Annotated[MedicationStore, Depends(get_medication_store)],
) -> Medication:
    medication = store.get_by_id(medication_id)
    if medication is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Medication not found",
        )
    return medication


@router.get(
    "/status",
    response_model=ServiceStatus,
    status_code=status.HTTP_200_OK,
    summary="Get service status",
    description="Report how many medications are loaded and whether openFDA is configured.",
)
async def get_status(
    store: Annotated[MedicationStore, Depends(get_medication_store)],
    openfda: Annotated[OpenFDAService, Depends(get_openfda_service)],
) -> ServiceStatus:
    return ServiceStatus(
        medications=len(store),
        openfda_configured=openfda.is_configured,
        enrich_on_startup=ENRICH_ON_STARTUP,
    )
