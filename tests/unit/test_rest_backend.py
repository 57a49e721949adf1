"""Unit tests for the RestDataBackend."""

import json

import httpx
import pytest

from backoffice.application.interfaces import Domain
from backoffice.domain.exceptions import (
    BackendError,
    DuplicateEntityError,
    EntityNotFoundError,
)
from backoffice.infrastructure.http import RestDataBackend

BASE_URL = "http://backoffice.test/api"


# ── Helpers ──


def _backend(handler, token: str = "") -> tuple[RestDataBackend, list[httpx.Request]]:
    """Backend over a mock transport that records every request it sees."""
    seen: list[httpx.Request] = []

    def recording_handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return handler(request)

    client = httpx.AsyncClient(transport=httpx.MockTransport(recording_handler))
    return RestDataBackend(BASE_URL, token=token, http_client=client), seen


def _json_response(status_code: int = 200, data=None) -> httpx.Response:
    return httpx.Response(status_code, json=data)


# ── Tests ──


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("domain", "path"),
    [
        (Domain.PRODUCTS, "/api/products"),
        (Domain.SALES, "/api/sales"),
        (Domain.INVOICES, "/api/accounting/invoices"),
        (Domain.PAYMENTS, "/api/accounting/payments"),
        (Domain.EMPLOYEES, "/api/employees"),
        (Domain.PROVIDERS, "/api/providers"),
    ],
)
async def test_list_hits_resource_path(domain, path):
    backend, seen = _backend(lambda r: _json_response(data=[{"id": 1}]))

    records = await backend.list(domain)

    assert records == [{"id": 1}]
    assert seen[0].method == "GET"
    assert seen[0].url.path == path


@pytest.mark.asyncio
async def test_list_unwraps_paginated_envelope():
    backend, _ = _backend(lambda r: _json_response(data={"content": [{"id": 1}], "total": 1}))

    assert await backend.list(Domain.PRODUCTS) == [{"id": 1}]


@pytest.mark.asyncio
async def test_create_posts_json_and_sends_token():
    backend, seen = _backend(
        lambda r: _json_response(201, {"id": 9, **json.loads(r.content)}), token="secret"
    )

    record = await backend.create(Domain.PROVIDERS, {"name": "Textiles SA"})

    assert record == {"id": 9, "name": "Textiles SA"}
    assert seen[0].method == "POST"
    assert seen[0].headers["Authorization"] == "Bearer secret"


@pytest.mark.asyncio
async def test_update_puts_to_record_url():
    backend, seen = _backend(lambda r: _json_response(data={"id": 4, "name": "x"}))

    await backend.update(Domain.EMPLOYEES, 4, {"name": "x"})

    assert seen[0].method == "PUT"
    assert seen[0].url.path == "/api/employees/4"


@pytest.mark.asyncio
async def test_remove_accepts_empty_body():
    backend, seen = _backend(lambda r: httpx.Response(204))

    assert await backend.remove(Domain.PRODUCTS, 3) is None
    assert seen[0].method == "DELETE"
    assert seen[0].url.path == "/api/products/3"


@pytest.mark.asyncio
async def test_patch_builds_action_url_and_query():
    backend, seen = _backend(lambda r: _json_response(data={"id": 5, "status": "INACTIVE"}))

    record = await backend.patch(Domain.EMPLOYEES, 5, "status", {"status": "INACTIVE"})

    assert record == {"id": 5, "status": "INACTIVE"}
    assert seen[0].method == "PATCH"
    assert seen[0].url.path == "/api/employees/5/status"
    assert seen[0].url.params["status"] == "INACTIVE"


@pytest.mark.asyncio
async def test_patch_without_body_returns_none():
    backend, seen = _backend(lambda r: httpx.Response(200))

    assert await backend.patch(Domain.SALES, 1, "cancel") is None
    assert seen[0].url.path == "/api/sales/1/cancel"


@pytest.mark.asyncio
async def test_error_message_is_taken_from_body():
    backend, _ = _backend(lambda r: _json_response(400, {"error": "Código inválido"}))

    with pytest.raises(BackendError) as exc_info:
        await backend.create(Domain.PRODUCTS, {"code": ""})

    assert exc_info.value.status_code == 400
    assert exc_info.value.message == "Código inválido"
    assert "create products" in str(exc_info.value)


@pytest.mark.asyncio
async def test_not_found_and_conflict_map_to_domain_errors():
    backend, _ = _backend(lambda r: _json_response(404, {"message": "missing"}))
    with pytest.raises(EntityNotFoundError):
        await backend.update(Domain.PRODUCTS, 77, {})

    backend, _ = _backend(lambda r: _json_response(409, {"message": "code already used"}))
    with pytest.raises(DuplicateEntityError):
        await backend.create(Domain.PRODUCTS, {})


@pytest.mark.asyncio
async def test_transport_failure_becomes_backend_error_without_status():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    backend, _ = _backend(handler)

    with pytest.raises(BackendError) as exc_info:
        await backend.list(Domain.SALES)

    assert exc_info.value.status_code is None


@pytest.mark.asyncio
async def test_non_list_response_is_rejected():
    backend, _ = _backend(lambda r: _json_response(data={"unexpected": True}))

    with pytest.raises(BackendError):
        await backend.list(Domain.SALES)
