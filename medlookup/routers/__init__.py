"""Routers package for API endpoints.

This package contains the FastAPI routers for the Medication Lookup API.
"""

from medlookup.routers import medications

__all__ = ["medications"]
