"""REST data backend: implements the DataBackend port over httpx.

Talks to the store's JSON API (``/products``, ``/sales``,
``/accounting/invoices`` ...). Each call is a single request with the
configured timeout; failures are raised as domain exceptions and never
retried.
"""

import logging
from typing import Any

import httpx

from backoffice.application.interfaces import DataBackend, Domain, RawRecord
from backoffice.domain.exceptions import (
    BackendError,
    DuplicateEntityError,
    EntityNotFoundError,
)

logger = logging.getLogger(__name__)

RESOURCE_PATHS: dict[Domain, str] = {
    Domain.PRODUCTS: "/products",
    Domain.SALES: "/sales",
    Domain.INVOICES: "/accounting/invoices",
    Domain.PAYMENTS: "/accounting/payments",
    Domain.EMPLOYEES: "/employees",
    Domain.PROVIDERS: "/providers",
}

_ENTITY_NAMES: dict[Domain, str] = {
    Domain.PRODUCTS: "Product",
    Domain.SALES: "Sale",
    Domain.INVOICES: "Invoice",
    Domain.PAYMENTS: "Payment",
    Domain.EMPLOYEES: "Employee",
    Domain.PROVIDERS: "Provider",
}

# Envelope keys some list endpoints wrap their records in.
_LIST_ENVELOPE_KEYS = ("content", "data", "items")


def _unwrap_list(operation: str, data: Any) -> list[RawRecord]:
    if data is None:
        return []
    if isinstance(data, dict):
        for key in _LIST_ENVELOPE_KEYS:
            if isinstance(data.get(key), list):
                data = data[key]
                break
    if not isinstance(data, list):
        raise BackendError(operation, None, "expected a JSON list of records")
    return data


def _require_record(operation: str, data: Any) -> RawRecord:
    if not isinstance(data, dict):
        raise BackendError(operation, None, "expected a JSON object in the response")
    return data


class RestDataBackend(DataBackend):
    """Infrastructure adapter that connects to the back-office REST API.

    Reuses an injected ``httpx.AsyncClient`` when given one; otherwise a
    short-lived client is opened per request.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8080/api",
        *,
        timeout: float = 10.0,
        token: str = "",
        http_client: httpx.AsyncClient | None = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._token = token
        self._http_client = http_client

    def _get_headers(self) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    def _url(self, domain: Domain, *parts: object) -> str:
        path = RESOURCE_PATHS[domain]
        suffix = "".join(f"/{part}" for part in parts)
        return f"{self._base_url}{path}{suffix}"

    async def _get_client(self) -> httpx.AsyncClient:
        """Return the injected client or create a new one."""
        if self._http_client is not None:
            return self._http_client
        return httpx.AsyncClient(timeout=self._timeout)

    async def _request(
        self,
        operation: str,
        domain: Domain,
        method: str,
        url: str,
        *,
        record_id: int | str | None = None,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        client = await self._get_client()
        should_close = self._http_client is None

        try:
            logger.debug("%s %s", method, url)
            response = await client.request(
                method, url, headers=self._get_headers(), json=json, params=params
            )

            if not response.is_success:
                self._raise_backend_error(operation, domain, response, record_id)

            if not response.content:
                return None
            try:
                return response.json()
            except ValueError as exc:
                raise BackendError(
                    operation, response.status_code, "response body is not valid JSON"
                ) from exc

        except httpx.HTTPError as exc:
            raise BackendError(operation, None, str(exc) or type(exc).__name__) from exc

        finally:
            if should_close:
                await client.aclose()

    # ── DataBackend port ──────────────────────────────────────────────

    async def list(self, domain: Domain) -> list[RawRecord]:
        data = await self._request(f"list {domain.value}", domain, "GET", self._url(domain))
        return _unwrap_list(f"list {domain.value}", data)

    async def create(self, domain: Domain, payload: dict[str, Any]) -> RawRecord:
        operation = f"create {domain.value}"
        data = await self._request(operation, domain, "POST", self._url(domain), json=payload)
        return _require_record(operation, data)

    async def update(
        self, domain: Domain, record_id: int | str, payload: dict[str, Any]
    ) -> RawRecord:
        operation = f"update {domain.value}"
        data = await self._request(
            operation,
            domain,
            "PUT",
            self._url(domain, record_id),
            record_id=record_id,
            json=payload,
        )
        return _require_record(operation, data)

    async def remove(self, domain: Domain, record_id: int | str) -> None:
        await self._request(
            f"remove {domain.value}",
            domain,
            "DELETE",
            self._url(domain, record_id),
            record_id=record_id,
        )

    async def patch(
        self,
        domain: Domain,
        record_id: int | str,
        action: str | None = None,
        params: dict[str, Any] | None = None,
    ) -> RawRecord | None:
        parts: list[object] = [record_id]
        if action:
            parts.append(action)
        data = await self._request(
            f"patch {domain.value}",
            domain,
            "PATCH",
            self._url(domain, *parts),
            record_id=record_id,
            params=params,
        )
        return data if isinstance(data, dict) else None

    # ── Response handling ─────────────────────────────────────────────

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            data = response.json()
        except ValueError:
            return response.text or response.reason_phrase
        if isinstance(data, dict):
            for key in ("error", "message"):
                value = data.get(key)
                if isinstance(value, str) and value:
                    return value
        return response.text or response.reason_phrase

    def _raise_backend_error(
        self,
        operation: str,
        domain: Domain,
        response: httpx.Response,
        record_id: int | str | None,
    ) -> None:
        """Map a non-2xx response to the matching domain exception."""
        message = self._error_message(response)
        entity_type = _ENTITY_NAMES[domain]

        if response.status_code == 404 and record_id is not None:
            raise EntityNotFoundError(entity_type, record_id)
        if response.status_code == 409:
            raise DuplicateEntityError(entity_type, "record", message)

        raise BackendError(operation, response.status_code, message)
