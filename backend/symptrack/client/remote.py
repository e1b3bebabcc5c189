"""HTTP client for the remote store's REST API.

Maps transport failures and error statuses onto the RemoteStoreError family
so callers can tell a rejected payload (400) from a missing record (404)
from an unreachable server. No retries and no backoff.
"""
import logging
from datetime import datetime

import httpx
from pydantic import ValidationError

from symptrack.core.config import settings
from symptrack.core.errors import (
    RemoteNotFoundError,
    RemoteStoreError,
    RemoteUnavailableError,
    RemoteValidationError,
)
from symptrack.models.catalog import CatalogItem
from symptrack.models.symptoms import Symptom, SymptomCreate

logger = logging.getLogger(__name__)


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return f"HTTP {response.status_code}"


class RemoteStore:
    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    @classmethod
    def from_settings(cls) -> "RemoteStore":
        return cls(
            httpx.AsyncClient(
                base_url=settings.API_BASE_URL,
                timeout=httpx.Timeout(settings.REMOTE_TIMEOUT_SECONDS),
            )
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("Remote store unreachable: %s %s: %s", method, path, exc)
            raise RemoteUnavailableError(f"Could not reach the server: {exc}") from exc

        if response.is_success:
            return response

        message = _error_message(response)
        logger.warning(
            "Remote store error: %s %s -> %d %s", method, path, response.status_code, message
        )
        if response.status_code == 400:
            raise RemoteValidationError(message, status_code=400)
        if response.status_code == 404:
            raise RemoteNotFoundError(message, status_code=404)
        raise RemoteStoreError(message, status_code=response.status_code)

    async def _json(self, method: str, path: str, **kwargs):
        response = await self._request(method, path, **kwargs)
        try:
            return response.json()
        except ValueError as exc:
            raise RemoteStoreError(
                f"Malformed response from {path}", status_code=response.status_code
            ) from exc

    @staticmethod
    def _parse(model, payload):
        try:
            if isinstance(payload, list):
                return [model.model_validate(row) for row in payload]
            return model.model_validate(payload)
        except ValidationError as exc:
            raise RemoteStoreError(f"Unexpected response shape: {exc}") from exc

    # -- symptoms -----------------------------------------------------------

    async def list_symptoms(self) -> list[Symptom]:
        return self._parse(Symptom, await self._json("GET", "/api/symptoms"))

    async def get_symptom(self, symptom_id: int) -> Symptom:
        return self._parse(Symptom, await self._json("GET", f"/api/symptoms/{symptom_id}"))

    async def symptoms_in_range(self, start: datetime, end: datetime) -> list[Symptom]:
        params = {"startDate": start.isoformat(), "endDate": end.isoformat()}
        return self._parse(
            Symptom, await self._json("GET", "/api/symptoms/range", params=params)
        )

    async def create_symptom(self, payload: SymptomCreate) -> Symptom:
        return self._parse(
            Symptom, await self._json("POST", "/api/symptoms", json=payload.to_wire())
        )

    async def delete_symptom(self, symptom_id: int) -> None:
        await self._request("DELETE", f"/api/symptoms/{symptom_id}")

    # -- catalogs -----------------------------------------------------------

    async def list_triggers(self) -> list[CatalogItem]:
        return self._parse(CatalogItem, await self._json("GET", "/api/triggers"))

    async def create_trigger(self, name: str) -> CatalogItem:
        return self._parse(
            CatalogItem, await self._json("POST", "/api/triggers", json={"name": name})
        )

    async def list_common_symptoms(self) -> list[CatalogItem]:
        return self._parse(CatalogItem, await self._json("GET", "/api/common-symptoms"))

    async def create_common_symptom(self, name: str) -> CatalogItem:
        return self._parse(
            CatalogItem,
            await self._json("POST", "/api/common-symptoms", json={"name": name}),
        )
