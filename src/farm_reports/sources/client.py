"""Farm records API client and the readers built on it."""

from typing import Any

import httpx

from farm_reports.common.config import FarmApiConfig
from farm_reports.common.logging import get_logger
from farm_reports.sources.interfaces import (
    ActivityRecord,
    EquipmentRecord,
    FieldRecord,
    IActivityReader,
    IEquipmentReader,
    IFieldReader,
    ITaskReader,
    TaskRecord,
)

logger = get_logger(__name__)


class FarmApiError(Exception):
    """Exception for farm records API errors."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_body: Any = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body


class FarmApiClient:
    """Async client for the farm records API.

    Each collection is served as a JSON list at ``GET /<collection>``, or as
    ``{"data": [...]}``.

    Usage:
        async with FarmApiClient(config) as client:
            fields = await client.get_fields()
    """

    def __init__(self, config: FarmApiConfig, transport: httpx.AsyncBaseTransport | None = None):
        """Initialize client.

        Args:
            config: API configuration.
            transport: Optional httpx transport (used for testing).
        """
        self.config = config
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "FarmApiClient":
        """Async context manager entry."""
        headers = {"Accept": "application/json"}
        if self.config.api_token:
            headers["Authorization"] = f"Bearer {self.config.api_token}"
        self._client = httpx.AsyncClient(
            base_url=self.config.base_url,
            headers=headers,
            timeout=self.config.timeout_seconds,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get HTTP client, raising if not initialized."""
        if self._client is None:
            raise RuntimeError("Client not initialized. Use async context manager.")
        return self._client

    async def _fetch_collection(self, endpoint: str) -> list[dict[str, Any]]:
        """Fetch one collection of raw records.

        Args:
            endpoint: Collection path, e.g. "/fields".

        Returns:
            List of raw record dicts.

        Raises:
            FarmApiError: On transport errors, non-200 responses or bad payloads.
        """
        try:
            response = await self.client.get(endpoint)
        except httpx.HTTPError as e:
            logger.error("farm_api_request_failed", endpoint=endpoint, error=str(e))
            raise FarmApiError(f"Request to {endpoint} failed: {e}") from e

        if response.status_code != 200:
            raise FarmApiError(
                f"API error: {response.status_code}",
                status_code=response.status_code,
                response_body=response.text,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise FarmApiError(f"Invalid JSON from {endpoint}") from e

        if isinstance(payload, dict):
            payload = payload.get("data")
        if not isinstance(payload, list):
            raise FarmApiError(f"Unexpected payload shape from {endpoint}", response_body=payload)

        logger.debug("farm_api_collection_fetched", endpoint=endpoint, count=len(payload))
        return payload

    async def get_fields(self) -> list[FieldRecord]:
        return [FieldRecord.from_dict(r) for r in await self._fetch_collection("/fields")]

    async def get_tasks(self) -> list[TaskRecord]:
        return [TaskRecord.from_dict(r) for r in await self._fetch_collection("/tasks")]

    async def get_activities(self) -> list[ActivityRecord]:
        return [ActivityRecord.from_dict(r) for r in await self._fetch_collection("/activities")]

    async def get_equipment(self) -> list[EquipmentRecord]:
        return [EquipmentRecord.from_dict(r) for r in await self._fetch_collection("/equipment")]


class ApiFieldReader(IFieldReader):
    def __init__(self, client: FarmApiClient):
        self.client = client

    async def get_all(self) -> list[FieldRecord]:
        return await self.client.get_fields()


class ApiTaskReader(ITaskReader):
    def __init__(self, client: FarmApiClient):
        self.client = client

    async def get_all(self) -> list[TaskRecord]:
        return await self.client.get_tasks()


class ApiActivityReader(IActivityReader):
    def __init__(self, client: FarmApiClient):
        self.client = client

    async def get_all(self) -> list[ActivityRecord]:
        return await self.client.get_activities()


class ApiEquipmentReader(IEquipmentReader):
    def __init__(self, client: FarmApiClient, fuel_price: float | None = None):
        self.client = client
        if fuel_price is not None:
            self.fuel_price = fuel_price

    async def get_all(self) -> list[EquipmentRecord]:
        return await self.client.get_equipment()
