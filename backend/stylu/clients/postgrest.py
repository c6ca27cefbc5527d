"""
Thin client for the Supabase PostgREST data API.

Filters are carried as structured ``(column, operator, value)`` triples and
handed to ``requests`` as query parameters, so identifiers and dates coming
from callers are always url-encoded rather than spliced into the URL.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

import requests

from ..core.exceptions import ExternalServiceError, UpstreamError

logger = logging.getLogger(__name__)

Filter = Tuple[str, str, Any]


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    return str(value)


class Query:
    """Fluent builder for PostgREST select/filter/order parameters."""

    def __init__(self, columns: Optional[str] = None):
        self.columns = columns
        self.filters: List[Filter] = []
        self.ordering: List[Tuple[str, bool]] = []

    def select(self, columns: str) -> "Query":
        self.columns = columns
        return self

    def eq(self, column: str, value: Any) -> "Query":
        self.filters.append((column, "eq", value))
        return self

    def gte(self, column: str, value: Any) -> "Query":
        self.filters.append((column, "gte", value))
        return self

    def lte(self, column: str, value: Any) -> "Query":
        self.filters.append((column, "lte", value))
        return self

    def order(self, column: str, descending: bool = False) -> "Query":
        self.ordering.append((column, descending))
        return self

    def to_params(self) -> List[Tuple[str, str]]:
        params: List[Tuple[str, str]] = []
        for column, op, value in self.filters:
            params.append((column, f"{op}.{_format_value(value)}"))
        if self.columns:
            params.append(("select", self.columns))
        if self.ordering:
            params.append(("order", ",".join(
                f"{column}.{'desc' if descending else 'asc'}" for column, descending in self.ordering
            )))
        return params

    def __repr__(self) -> str:
        return f"Query({self.to_params()!r})"


class SupabaseClient:
    """Issues authenticated REST calls against ``{base_url}/rest/v1``.

    Every call carries the caller's bearer token plus the project's static API
    key. A non-2xx answer raises ``UpstreamError`` with the downstream status
    and raw body; transport failures raise ``ExternalServiceError``.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
        fixed_token: Optional[str] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self.session = session or requests.Session()
        # Service-credential clients ignore the per-call token
        self.fixed_token = fixed_token

    def _url(self, table: str) -> str:
        return f"{self.base_url}/rest/v1/{table}"

    def _headers(self, token: Optional[str], returning: bool = False) -> Dict[str, str]:
        bearer = self.fixed_token or token
        headers = {"apikey": self.api_key}
        if bearer:
            headers["Authorization"] = f"Bearer {bearer}"
        if returning:
            headers["Prefer"] = "return=representation"
        return headers

    def _send(
        self,
        method: str,
        table: str,
        token: Optional[str],
        params: Optional[Sequence[Tuple[str, str]]] = None,
        payload: Any = None,
        returning: bool = False,
    ) -> Any:
        try:
            response = self.session.request(
                method,
                self._url(table),
                params=list(params or []),
                json=payload,
                headers=self._headers(token, returning=returning),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"{method} {table} failed before a response arrived: {e}")
            raise ExternalServiceError("Supabase", str(e))

        logger.debug(f"{method} {table} -> {response.status_code}")
        if not response.ok:
            logger.warning(f"{method} {table} returned {response.status_code}: {response.text[:200]}")
            raise UpstreamError(response.status_code, response.text)

        if not response.content:
            return None
        return response.json()

    def select(self, table: str, query: Query, token: Optional[str] = None) -> List[Dict[str, Any]]:
        rows = self._send("GET", table, token, params=query.to_params())
        return rows or []

    def insert(
        self,
        table: str,
        rows: Any,
        token: Optional[str] = None,
        returning: bool = True,
    ) -> List[Dict[str, Any]]:
        result = self._send("POST", table, token, payload=rows, returning=returning)
        return result or []

    def update(
        self,
        table: str,
        values: Dict[str, Any],
        query: Query,
        token: Optional[str] = None,
        returning: bool = False,
    ) -> List[Dict[str, Any]]:
        result = self._send("PATCH", table, token, params=query.to_params(), payload=values, returning=returning)
        return result or []

    def delete(self, table: str, query: Query, token: Optional[str] = None) -> None:
        self._send("DELETE", table, token, params=query.to_params())

    def close(self) -> None:
        self.session.close()
