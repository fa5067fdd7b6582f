"""openFDA drug label service for patient-facing medication information.

openFDA exposes FDA-approved drug labels through a Lucene-style query API.
No API key is required, but requests without one are limited to roughly
40 per minute (240 per minute with a key).

Label fields used:
- openfda.generic_name: generic names
- openfda.brand_name: brand names
- indications_and_usage: primary use
- dosage_and_administration: how to take
- warnings: warnings
- adverse_reactions: side effects

openFDA answers a query with no matches with HTTP 404, which is treated as
an empty result rather than an error.
"""

import logging
import re
from typing import Any

import httpx

from medlookup.core.config import (
    MIN_QUERY_LENGTH,
    OPENFDA_API_KEY,
    OPENFDA_BASE_URL,
    OPENFDA_TIMEOUT,
    SEARCH_RESULT_LIMIT,
)
from medlookup.models import Medication
from medlookup.services.text_extraction import (
    HOW_TO_TAKE_FALLBACK,
    PRIMARY_USE_FALLBACK,
    SIDE_EFFECTS_FALLBACK,
    WARNINGS_FALLBACK,
    extract_text,
    join_brand_names,
    medication_id_from_name,
)

logger = logging.getLogger(__name__)

USER_AGENT = "MedicationLookup/0.1 httpx"

# Lucene query syntax characters that must be backslash-escaped in a bare term
_QUERY_SPECIAL_CHARS = set('+-&|!(){}[]^"~*?:\\/')
_WHITESPACE_PATTERN = re.compile(r"\s")


class OpenFDAService:
    """Service for querying openFDA drug labels.

    Both lookups fail closed: transport errors, non-2xx responses and bad
    JSON are logged and reported as "no data", never raised.

    Example usage:
        service = OpenFDAService()
        medication = await service.fetch_one("Metformin")
        matches = await service.fetch_many("ibu", limit=10)
    """

    def __init__(
        self,
        api_key: str = OPENFDA_API_KEY,
        base_url: str = OPENFDA_BASE_URL,
        timeout: float = OPENFDA_TIMEOUT,
    ) -> None:
        """Initialize the openFDA service.

        Args:
            api_key: Optional openFDA API key.
            base_url: Drug label endpoint.
            timeout: HTTP request timeout in seconds.
        """
        self._http_client: httpx.AsyncClient | None = None
        self._api_key = api_key
        self._base_url = base_url
        self._timeout = timeout

    @property
    def is_configured(self) -> bool:
        """Whether an API key is set. openFDA also works without one."""
        return bool(self._api_key)

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client with proper headers."""
        if self._http_client is None or self._http_client.is_closed:
            self._http_client = httpx.AsyncClient(
                timeout=self._timeout,
                headers={
                    "User-Agent": USER_AGENT,
                    "Accept": "application/json",
                },
            )
        return self._http_client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._http_client and not self._http_client.is_closed:
            await self._http_client.aclose()
            self._http_client = None

    @staticmethod
    def _escape_query_string(value: str) -> str:
        """Escape a value for embedding inside a quoted openFDA search term."""
        return value.replace("\\", "\\\\").replace('"', '\\"')

    async def _query_labels(self, search: str, limit: int) -> list[dict[str, Any]]:
        """Run a label query and return the raw ``results`` list.

        Args:
            search: openFDA search expression.
            limit: Maximum number of results.

        Returns:
            List of label dicts, empty on any failure or when nothing matched.
        """
        params: dict[str, Any] = {"search": search, "limit": limit}
        if self._api_key:
            params["api_key"] = self._api_key

        try:
            client = await self._get_client()
            response = await client.get(self._base_url, params=params)

            if response.status_code == 404:
                logger.info(f"No openFDA labels matched: {search}")
                return []

            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"openFDA API error {e.response.status_code} for {search}")
            return []
        except httpx.HTTPError as e:
            logger.error(f"openFDA request failed for {search}: {e}")
            return []
        except ValueError as e:
            logger.error(f"openFDA returned invalid JSON for {search}: {e}")
            return []

        if not isinstance(data, dict):
            return []
        results = data.get("results")
        if not isinstance(results, list):
            return []
        return [r for r in results if isinstance(r, dict)]

    @staticmethod
    def _escape_prefix_term(value: str) -> str:
        """Escape a single unquoted term so a trailing ``*`` acts as a prefix wildcard."""
        return "".join(f"\\{c}" if c in _QUERY_SPECIAL_CHARS else c for c in value)

    def _build_search_query(self, term: str) -> str:
        """Build the generic/brand name query for a user search term.

        Single words use the unquoted prefix form (``field:term*``). Terms with
        whitespace cannot carry a wildcard, so they are matched as a phrase.
        """
        if _WHITESPACE_PATTERN.search(term):
            quoted = f'"{self._escape_query_string(term)}"'
            return f"openfda.generic_name:{quoted} OR openfda.brand_name:{quoted}"

        prefix = f"{self._escape_prefix_term(term)}*"
        return f"openfda.generic_name:{prefix} OR openfda.brand_name:{prefix}"

    @staticmethod
    def _openfda_section(label: dict[str, Any]) -> dict[str, Any]:
        openfda = label.get("openfda")
        return openfda if isinstance(openfda, dict) else {}

    def _parse_label(self, label: dict[str, Any], medication_id: str, generic_name: str) -> Medication:
        """Map an openFDA label to a Medication with ``source`` unset."""
        openfda = self._openfda_section(label)

        return Medication(
            id=medication_id,
            generic_name=generic_name,
            brand_names=join_brand_names(openfda.get("brand_name")),
            primary_use=extract_text(label.get("indications_and_usage")) or PRIMARY_USE_FALLBACK,
            how_to_take=extract_text(label.get("dosage_and_administration")) or HOW_TO_TAKE_FALLBACK,
            warnings=extract_text(label.get("warnings")) or WARNINGS_FALLBACK,
            side_effects=extract_text(label.get("adverse_reactions")) or SIDE_EFFECTS_FALLBACK,
        )

    @staticmethod
    def _first(values: Any) -> str:
        if isinstance(values, str):
            return values.strip()
        if isinstance(values, list):
            for value in values:
                if isinstance(value, str) and value.strip():
                    return value.strip()
        return ""

    async def fetch_one(self, generic_name: str) -> Medication | None:
        """Look up a single medication by exact generic name.

        Args:
            generic_name: Generic name as it appears in the curated dataset.

        Returns:
            Medication built from the first matching label, or None.
        """
        name = generic_name.strip()
        if not name:
            return None

        search = f'openfda.generic_name:"{self._escape_query_string(name)}"'
        results = await self._query_labels(search, limit=1)
        if not results:
            logger.info(f"No openFDA data found for {name}")
            return None

        label = results[0]
        fda_generic_name = self._first(self._openfda_section(label).get("generic_name"))

        return self._parse_label(
            label,
            medication_id=medication_id_from_name(name),
            generic_name=fda_generic_name or name,
        )

    async def fetch_many(self, query: str, limit: int = SEARCH_RESULT_LIMIT) -> list[Medication]:
        """Search labels by generic or brand name prefix.

        Args:
            query: User search text.
            limit: Maximum number of labels to request.

        Returns:
            Medications deduplicated by id, in openFDA result order.
        """
        term = query.strip()
        if len(term) < MIN_QUERY_LENGTH:
            return []

        search = self._build_search_query(term)
        results = await self._query_labels(search, limit=limit)

        medications: list[Medication] = []
        seen_ids: set[str] = set()

        for label in results:
            openfda = self._openfda_section(label)
            name = self._first(openfda.get("generic_name")) or self._first(openfda.get("brand_name"))
            if not name:
                continue

            medication = self._parse_label(
                label,
                medication_id=medication_id_from_name(name),
                generic_name=name,
            )
            if medication.id in seen_ids:
                continue
            seen_ids.add(medication.id)
            medications.append(medication)

        logger.info(f"openFDA search returned {len(medications)} unique medications")
        return medications


_openfda_service: OpenFDAService | None = None


def get_openfda_service() -> OpenFDAService:
    """Get the singleton OpenFDAService instance."""
    global _openfda_service
    if _openfda_service is None:
        _openfda_service = OpenFDAService()
    return _openfda_service
