"""Hosted backend client speaking the PostgREST dialect over HTTP."""

import logging
from datetime import date, datetime
from typing import Any, Mapping, Sequence

import httpx
from pydantic_core import to_jsonable_python

from ..core.exceptions import (
    BackendError,
    BackendUnavailableError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from .base import DataBackend, Embed, Filter, FilterOp, ProcedureCall, Row, SelectQuery

logger = logging.getLogger(__name__)

RETURN_REPRESENTATION = "return=representation"


def _encode_scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def _quote(value: Any) -> str:
    text = _encode_scalar(value).replace("\\", "\\\\").replace('"', '\\"')
    return f'"{text}"'


def encode_filter(flt: Filter) -> tuple[str, str]:
    """Encode a filter as a ``column=op.value`` query parameter."""
    if flt.op is FilterOp.IN:
        values = ",".join(_quote(v) for v in flt.value)
        return flt.column, f"in.({values})"
    return flt.column, f"{flt.op.value}.{_encode_scalar(flt.value)}"


def encode_embed(embed: Embed) -> str:
    hint = "!inner" if embed.inner else ""
    return f"{embed.table}{hint}({','.join(embed.columns)})"


def encode_select(query: SelectQuery) -> list[tuple[str, str]]:
    """Encode a select query as PostgREST query parameters."""
    select = ",".join(["*", *(encode_embed(embed) for embed in query.embeds)])
    params = [("select", select)]
    params.extend(encode_filter(flt) for flt in query.filters)
    if query.order:
        params.append((
            "order",
            ",".join(
                f"{order.column}.{'asc' if order.ascending else 'desc'}"
                for order in query.order
            ),
        ))
    if query.limit is not None:
        params.append(("limit", str(query.limit)))
    return params


class RestBackend(DataBackend):
    """
    Data backend for the hosted backend-as-a-service.

    The endpoint URL and public API key are not checked at construction; a
    client missing either fails with ``BackendUnavailableError`` on first use.
    """

    def __init__(
        self,
        url: str | None,
        api_key: str | None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.url = url.rstrip("/") if url else url
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def _get_client(self) -> httpx.AsyncClient:
        if not self.url or not self.api_key:
            raise BackendUnavailableError(
                detail="Backend endpoint URL and API key must both be configured"
            )
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=f"{self.url}/rest/v1",
                headers={
                    "apikey": self.api_key,
                    "Authorization": f"Bearer {self.api_key}",
                },
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def select(self, query: SelectQuery) -> list[Row]:
        return await self._request(
            "GET", f"/{query.table}", target=query.table, params=encode_select(query)
        )

    async def insert(self, table: str, rows: Sequence[Mapping[str, Any]]) -> list[Row]:
        if not rows:
            return []
        return await self._request(
            "POST",
            f"/{table}",
            target=table,
            json=to_jsonable_python(list(rows)),
            prefer=RETURN_REPRESENTATION,
        )

    async def update(
        self, table: str, values: Mapping[str, Any], filters: Sequence[Filter]
    ) -> list[Row]:
        return await self._request(
            "PATCH",
            f"/{table}",
            target=table,
            params=[encode_filter(flt) for flt in filters],
            json=to_jsonable_python(dict(values)),
            prefer=RETURN_REPRESENTATION,
        )

    async def delete(self, table: str, filters: Sequence[Filter]) -> list[Row]:
        return await self._request(
            "DELETE",
            f"/{table}",
            target=table,
            params=[encode_filter(flt) for flt in filters],
            prefer=RETURN_REPRESENTATION,
        )

    async def rpc(self, call: ProcedureCall) -> list[Row]:
        return await self._request(
            "POST",
            f"/rpc/{call.name}",
            target=call.name,
            params=[encode_filter(flt) for flt in call.filters],
            json=to_jsonable_python(dict(call.params)),
        )

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _request(
        self,
        method: str,
        path: str,
        *,
        target: str,
        params: list[tuple[str, str]] | None = None,
        json: Any = None,
        prefer: str | None = None,
    ) -> list[Row]:
        client = self._get_client()
        headers = {"Prefer": prefer} if prefer else None

        try:
            response = await client.request(
                method, path, params=params, json=json, headers=headers
            )
        except httpx.TimeoutException as e:
            logger.warning(
                "Backend request timed out",
                extra={"method": method, "target": target, "error": str(e)}
            )
            raise BackendUnavailableError(detail=f"Backend request timed out: {e}") from e
        except httpx.TransportError as e:
            logger.warning(
                "Backend request failed",
                extra={"method": method, "target": target, "error": str(e)}
            )
            raise BackendUnavailableError(detail=f"Backend request failed: {e}") from e

        if response.status_code >= 400:
            raise self._error_from_response(response, target)

        if not response.content:
            return []
        payload = response.json()
        if isinstance(payload, dict):
            return [payload]
        return payload

    @staticmethod
    def _error_from_response(response: httpx.Response, target: str) -> BackendError:
        """Map an error response onto the backend error taxonomy."""
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        status = response.status_code
        code = str(body.get("code") or "")
        message = body.get("message") or response.text or f"Backend returned HTTP {status}"
        extensions = {
            key: body[key] for key in ("details", "hint") if body.get(key)
        }
        extensions["status"] = status
        if code:
            extensions["backend_code"] = code

        logger.warning(
            "Backend returned an error",
            extra={"target": target, "status": status, "backend_code": code, "error": message}
        )

        if status >= 500:
            return BackendUnavailableError(detail=message, extensions=extensions)
        if code == "23505":
            return ConflictError(detail=message, conflicting_resource={"table": target})
        if code.startswith(("22", "23")):
            return ValidationError(detail=message, extensions=extensions)
        if code == "PGRST116" or status == 404:
            return NotFoundError(resource_type=target, detail=message)
        if status == 409:
            return ConflictError(detail=message, conflicting_resource={"table": target})
        if status in (401, 403):
            return BackendError(detail=message, extensions=extensions)
        return ValidationError(detail=message, extensions=extensions)
