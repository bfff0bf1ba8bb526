from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Protocol, Sequence, Tuple

import httpx

from barberbook.services.exceptions import DownstreamServiceError

logger = logging.getLogger(__name__)

# (column, operator, value); operators follow PostgREST naming.
Filter = Tuple[str, str, Any]
Row = Dict[str, Any]

SUPPORTED_OPERATORS = {"eq", "neq", "gt", "gte", "lt", "lte", "in", "is"}


class TableGateway(Protocol):
    """Table-level data access shared by the live client and the mock store."""

    async def select(
        self,
        table: str,
        *,
        filters: Sequence[Filter] = (),
        order: Sequence[str] = (),
        limit: int | None = None,
    ) -> List[Row]: ...

    async def insert(self, table: str, rows: Row | List[Row]) -> List[Row]: ...

    async def update(
        self, table: str, values: Row, *, filters: Sequence[Filter]
    ) -> List[Row]: ...

    async def upsert(
        self, table: str, rows: Row | List[Row], *, on_conflict: str
    ) -> List[Row]: ...

    async def delete(self, table: str, *, filters: Sequence[Filter]) -> List[Row]: ...


def _literal(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def encode_filters(filters: Iterable[Filter]) -> List[Tuple[str, str]]:
    """Translate filters into PostgREST query parameters."""
    params: List[Tuple[str, str]] = []
    for column, operator, value in filters:
        if operator not in SUPPORTED_OPERATORS:
            raise ValueError(f"Unsupported filter operator: {operator!r}")
        if operator == "in":
            joined = ",".join(_literal(item) for item in value)
            params.append((column, f"in.({joined})"))
        else:
            params.append((column, f"{operator}.{_literal(value)}"))
    return params


class SupabaseClient:
    """Async HTTP client for the hosted Postgres REST and storage endpoints."""

    def __init__(
        self,
        base_url: str | None,
        *,
        api_key: str | None = None,
        service_role_key: str | None = None,
        timeout: float = 10.0,
        use_mock_data: bool = True,
        storage_bucket: str = "barbershop-assets",
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = str(base_url).rstrip("/") if base_url else None
        self._timeout = timeout
        self.use_mock_data = use_mock_data or not self._base_url
        self.storage_bucket = storage_bucket
        token = service_role_key or api_key
        self._headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if api_key:
            self._headers["apikey"] = api_key
        if token:
            self._headers["Authorization"] = f"Bearer {token}"
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        if not self.use_mock_data and self._base_url:
            self._client = self._build_client()

    def _build_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=f"{self._base_url}/rest/v1",
            timeout=self._timeout,
            headers=self._headers,
            transport=self._transport,
        )

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()

    async def _ensure_client(self) -> httpx.AsyncClient:
        if self.use_mock_data or not self._base_url:
            raise RuntimeError("HTTP client requested while running in mock mode")
        if self._client is None:
            self._client = self._build_client()
        return self._client

    async def _request(
        self,
        method: str,
        table: str,
        *,
        params: List[Tuple[str, str]] | None = None,
        payload: Any = None,
        prefer: str | None = None,
    ) -> List[Row]:
        client = await self._ensure_client()
        headers = {"Prefer": prefer} if prefer else None
        try:
            logger.debug("%s /%s params=%s", method, table, params)
            response = await client.request(
                method, f"/{table}", params=params, json=payload, headers=headers
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.exception(
                "Data store returned error %s for %s /%s",
                exc.response.status_code,
                method,
                table,
            )
            raise DownstreamServiceError(
                "Data store returned an error response",
                status_code=exc.response.status_code,
                cause=exc,
            ) from exc
        except httpx.RequestError as exc:
            logger.exception("Unable to reach data store: %s", exc)
            raise DownstreamServiceError(
                "Unable to reach data store", status_code=None, cause=exc
            ) from exc

        if not response.content:
            return []
        data = response.json()
        if isinstance(data, dict):
            return [data]
        return list(data)

    async def select(
        self,
        table: str,
        *,
        filters: Sequence[Filter] = (),
        order: Sequence[str] = (),
        limit: int | None = None,
    ) -> List[Row]:
        params = [("select", "*")] + encode_filters(filters)
        if order:
            params.append(("order", ",".join(order)))
        if limit is not None:
            params.append(("limit", str(limit)))
        return await self._request("GET", table, params=params)

    async def insert(self, table: str, rows: Row | List[Row]) -> List[Row]:
        return await self._request(
            "POST", table, payload=rows, prefer="return=representation"
        )

    async def update(
        self, table: str, values: Row, *, filters: Sequence[Filter]
    ) -> List[Row]:
        if not filters:
            raise ValueError("Refusing to update without filters")
        return await self._request(
            "PATCH",
            table,
            params=encode_filters(filters),
            payload=values,
            prefer="return=representation",
        )

    async def upsert(
        self, table: str, rows: Row | List[Row], *, on_conflict: str
    ) -> List[Row]:
        return await self._request(
            "POST",
            table,
            params=[("on_conflict", on_conflict)],
            payload=rows,
            prefer="resolution=merge-duplicates,return=representation",
        )

    async def delete(self, table: str, *, filters: Sequence[Filter]) -> List[Row]:
        if not filters:
            raise ValueError("Refusing to delete without filters")
        return await self._request(
            "DELETE",
            table,
            params=encode_filters(filters),
            prefer="return=representation",
        )

    def public_url(self, path: str) -> str:
        """Public object URL for a storage path inside the configured bucket."""
        base = self._base_url or ""
        return f"{base}/storage/v1/object/public/{self.storage_bucket}/{path.lstrip('/')}"

