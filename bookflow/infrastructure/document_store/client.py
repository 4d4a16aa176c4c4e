from __future__ import annotations

import logging
from typing import Any

import httpx

from bookflow.application.exceptions import ConflictError, NetworkError, NotFoundError, ValidationError
from bookflow.core.config import settings


class DocumentStoreClient:
    """Thin async REST client for the hosted document store."""

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = (base_url or settings.DOCUMENT_STORE_BASE_URL or "").rstrip("/")
        self._api_key = api_key or settings.DOCUMENT_STORE_API_KEY
        self._logger = logging.getLogger(__name__)

        if not self._base_url:
            raise ValueError("DOCUMENT_STORE_BASE_URL is required for the document store")

        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers=headers,
            timeout=timeout or settings.DOCUMENT_STORE_TIMEOUT_SECONDS,
            transport=transport,
        )

    async def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return await self._request("GET", path, params=params)

    async def post(self, path: str, payload: dict[str, Any]) -> Any:
        return await self._request("POST", path, json=payload)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.TransportError as e:
            self._logger.error("Document store unreachable", extra={"path": path, "error": str(e)})
            raise NetworkError(f"Document store unreachable: {e}") from e

        status = response.status_code
        if status == 404:
            raise NotFoundError(f"{path} not found")
        if status == 409:
            raise ConflictError(_detail(response) or "Time slot is no longer available")
        if status in (400, 422):
            raise ValidationError(_detail(response) or "Document store rejected the request")
        if status >= 500:
            self._logger.error("Document store error", extra={"path": path, "error": f"status={status}"})
            raise NetworkError(f"Document store returned {status}")

        try:
            response.raise_for_status()
            return response.json() if response.content else None
        except (httpx.HTTPStatusError, ValueError) as e:
            raise NetworkError(f"Unexpected document store response: {e}") from e


def _detail(response: httpx.Response) -> str | None:
    try:
        data = response.json()
    except ValueError:
        return response.text or None
    if isinstance(data, dict):
        detail = data.get("detail") or data.get("error")
        return str(detail) if detail else None
    return None
