"""Services package for the Medication Lookup API."""

from medlookup.services.curated_source import load_curated_medications
from medlookup.services.data_aggregator import DataAggregator, get_data_aggregator
from medlookup.services.hybrid_loader import HybridLoader
from medlookup.services.medication_search_service import MedicationSearchService
from medlookup.services.openfda_service import OpenFDAService, get_openfda_service

__all__ = [
    "DataAggregator",
    "get_data_aggregator",
    "HybridLoader",
    "MedicationSearchService",
    "OpenFDAService",
    "get_openfda_service",
    "load_curated_medications",
]
