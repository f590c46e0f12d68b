"""
Unit tests for the admin API client against an ``httpx.MockTransport``.
"""

from __future__ import annotations

import asyncio
import json
from decimal import Decimal
from typing import Any, Callable, Dict, List

import httpx
import pytest

from chicken_admin.core.config import Config
from chicken_admin.core.errors import NotImplementedBackendError, UnauthorizedError
from chicken_admin.domain.filters import BetFilters, UserFilters
from chicken_admin.domain.models import BetStatus
from chicken_admin.integrations.admin_api_client import AdminApiClient, AuthSession, ListPage
from chicken_admin.integrations.api_result import ApiFailure, ApiSuccess, unwrap_envelope


def ok(data: Any) -> Dict[str, Any]:
    return {"status": "0000", "data": data}


def make_client(
    handler: Callable[[httpx.Request], httpx.Response],
    *,
    token: str | None = "token-123",
    on_unauthorized: Callable[[], None] | None = None,
) -> AdminApiClient:
    return AdminApiClient(
        "http://admin.test",
        "/admin/api/v1",
        credential_provider=lambda: token,
        on_unauthorized=on_unauthorized,
        transport=httpx.MockTransport(handler),
        timeout=5,
    )


def run(client: AdminApiClient, coro_factory: Callable[[AdminApiClient], Any]) -> Any:
    async def scenario() -> Any:
        async with client:
            return await coro_factory(client)

    return asyncio.run(scenario())


BET_ROW = {
    "id": "bet-1",
    "userId": "u1",
    "agentId": "agent007",
    "difficulty": "HARD",
    "betAmount": "250.00",
    "currency": "INR",
    "status": "WON",
    "betPlacedAt": "2024-03-10T10:00:00.000Z",
    "winAmount": "500.00",
}


def test_list_request_sends_sorted_params_and_bearer_token():
    seen: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json=ok({"rows": [BET_ROW], "pagination": {"page": 2, "limit": 20, "total": 21}}),
        )

    filters = BetFilters(agent_id="agent007", platform="", status=BetStatus.WON, page=2)
    result = run(make_client(handler), lambda client: client.get_bets(filters))

    assert isinstance(result, ApiSuccess)
    page = result.data
    assert isinstance(page, ListPage)
    assert page.rows[0].id == "bet-1"
    assert page.rows[0].bet_amount == Decimal("250.00")
    assert page.pagination.total_pages == 2

    request = seen[0]
    assert request.url.path == "/admin/api/v1/bets"
    assert dict(request.url.params) == {"agentId": "agent007", "limit": "20", "page": "2", "status": "WON"}
    assert request.headers["Authorization"] == "Bearer token-123"


def test_list_rows_fall_back_to_domain_key_and_page_is_clamped():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json=ok({"users": [{"userId": "u1", "agentId": "a1", "betLimit": "1000"}], "pagination": {"page": 9, "limit": 20, "total": 45}}),
        )

    result = run(make_client(handler), lambda client: client.get_users(UserFilters(page=9)))

    assert result.ok
    assert result.data.rows[0].user_id == "u1"
    assert result.data.pagination.page == 3
    assert result.data.pagination.total_pages == 3


def test_totals_request_omits_pagination():
    seen: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json=ok({"totalBets": 21, "totalBetAmount": "5250", "totalWinAmount": "3000", "netRevenue": "2250"}),
        )

    result = run(make_client(handler), lambda client: client.get_bet_totals(BetFilters(agent_id="agent007", page=4)))

    assert result.data.total_bets == 21
    assert result.data.net_revenue == Decimal("2250")
    assert seen[0].url.path == "/admin/api/v1/bets/totals"
    assert dict(seen[0].url.params) == {"agentId": "agent007"}


def test_login_sends_no_token_and_returns_session():
    seen: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json=ok(
                {
                    "accessToken": "fresh",
                    "refreshToken": "refresh-1",
                    "admin": {"id": "1", "username": "root", "role": "SUPER_ADMIN"},
                }
            ),
        )

    result = run(make_client(handler), lambda client: client.login("root", "secret-pass"))

    assert isinstance(result.data, AuthSession)
    assert result.data.access_token == "fresh"
    assert result.data.admin.is_super_admin
    assert "Authorization" not in seen[0].headers
    assert json.loads(seen[0].content) == {"username": "root", "password": "secret-pass"}


def test_non_success_envelope_becomes_failure():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"status": "1001", "message": "Agent not found"})

    result = run(make_client(handler), lambda client: client.get_agent("ghost"))

    assert isinstance(result, ApiFailure)
    assert result.error.status == "1001"
    assert result.message == "Agent not found"


def test_unauthorized_triggers_callback():
    invalidated: List[bool] = []

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"status": "401", "message": "jwt expired"})

    client = make_client(handler, on_unauthorized=lambda: invalidated.append(True))
    result = run(client, lambda c: c.get_dashboard_stats())

    assert isinstance(result.error, UnauthorizedError)
    assert invalidated == [True]


def test_failed_login_does_not_invalidate_session():
    invalidated: List[bool] = []

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"status": "401", "message": "Invalid credentials"})

    client = make_client(handler, on_unauthorized=lambda: invalidated.append(True))
    result = run(client, lambda c: c.login("root", "wrong-pass"))

    assert not result.ok
    assert not isinstance(result.error, UnauthorizedError)
    assert result.message == "Invalid credentials"
    assert invalidated == []


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(501, json={"status": "NOT_IMPLEMENTED", "message": "Coming soon"}),
        httpx.Response(200, json={"status": "NOT_IMPLEMENTED", "message": "Coming soon"}),
    ],
)
def test_not_implemented_backend(response: httpx.Response):
    result = run(make_client(lambda request: response), lambda client: client.create_config("a.b", "1"))

    assert isinstance(result.error, NotImplementedBackendError)
    assert result.message == "Coming soon"


def test_http_error_status_is_reported():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text="upstream exploded")

    result = run(make_client(handler), lambda client: client.get_configs())

    assert result.error.status == "HTTP_500"
    assert result.error.http_status == 500


def test_transport_errors_are_returned_not_raised():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    result = run(make_client(handler), lambda client: client.get_bets(BetFilters()))

    assert not result.ok
    assert result.error.status == "TRANSPORT"
    assert "connection refused" in result.message


def test_malformed_payload_is_a_failure():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=ok(None))

    result = run(make_client(handler), lambda client: client.get_bet_totals(BetFilters()))

    assert not result.ok
    assert result.error.status == "MALFORMED"


def test_user_mutations_address_composite_key():
    seen: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=ok({}))

    async def calls(client: AdminApiClient) -> None:
        await client.update_user("u 1", "agent007", {"betLimit": "500"})
        await client.delete_user("u1", "agent007")

    run(make_client(handler), calls)

    assert [(r.method, r.url.raw_path.decode()) for r in seen] == [
        ("PATCH", "/admin/api/v1/users/u%201/agent007"),
        ("DELETE", "/admin/api/v1/users/u1/agent007"),
    ]
    assert json.loads(seen[0].content) == {"betLimit": "500"}


def test_unwrap_envelope_rejects_non_objects():
    result = unwrap_envelope(["not", "an", "envelope"], 200)

    assert isinstance(result, ApiFailure)
    assert result.error.status == "MALFORMED"


def test_client_root_comes_from_config(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(Config, "ADMIN_API_BASE_URL", "https://admin.example/")
    monkeypatch.setattr(Config, "ADMIN_API_PREFIX", "admin/api/v1")

    assert AdminApiClient().api_root == Config.api_root() == "https://admin.example/admin/api/v1"
    assert AdminApiClient("http://localhost:3000", "/v2").api_root == "http://localhost:3000/v2"
