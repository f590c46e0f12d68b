"""
Admin API client for the Chicken Road console.

This module wraps every admin endpoint behind one ``httpx.AsyncClient``.
Each call returns an ``ApiResult``; HTTP, transport and envelope failures are
reported as ``ApiFailure`` and never raised.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, List, Mapping, Optional, TypeVar
from urllib.parse import quote

import httpx
import structlog

from chicken_admin.core.config import Config
from chicken_admin.core.errors import (
    NOT_IMPLEMENTED_STATUS,
    TRANSPORT_STATUS,
    ApiRequestError,
    NotImplementedBackendError,
    UnauthorizedError,
)
from chicken_admin.domain.filters import AgentFilters, BetFilters, FilterSet, PlayerSummaryFilters, UserFilters
from chicken_admin.domain.models import (
    Admin,
    Agent,
    AgentTotals,
    AgentWithStats,
    Bet,
    BetTotals,
    DashboardStats,
    FilterOptions,
    GameConfig,
    Pagination,
    PlayerSummary,
    PlayerSummaryTotals,
    User,
)
from chicken_admin.integrations.api_result import ApiFailure, ApiResult, ApiSuccess, unwrap_envelope
from chicken_admin.services.query_builder import build_query_params, build_totals_params, to_query_string

logger = structlog.get_logger(__name__)

R = TypeVar("R")

CredentialProvider = Callable[[], Optional[str]]


@dataclass(frozen=True)
class ListPage(Generic[R]):
    """One page of rows plus its pagination metadata."""

    rows: List[R]
    pagination: Pagination


@dataclass(frozen=True)
class AuthSession:
    access_token: str
    refresh_token: Optional[str]
    admin: Optional[Admin]


def _segment(value: str) -> str:
    return quote(str(value), safe="")


class AdminApiClient:
    """Client for the versioned admin REST API."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        prefix: Optional[str] = None,
        *,
        credential_provider: Optional[CredentialProvider] = None,
        on_unauthorized: Optional[Callable[[], None]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[float] = None,
    ):
        """
        Initialize the admin API client.

        Args:
            base_url: Server origin, defaults to ``Config.ADMIN_API_BASE_URL``
            prefix: Versioned API prefix, defaults to ``Config.ADMIN_API_PREFIX``
            credential_provider: Called per request to obtain the bearer token
            on_unauthorized: Called when a protected endpoint answers 401
            transport: Optional httpx transport (tests use ``httpx.MockTransport``)
            timeout: Request timeout in seconds
        """
        self.api_root = Config.api_root(base_url, prefix)
        self.credential_provider = credential_provider
        self.on_unauthorized = on_unauthorized
        self._transport = transport
        self._timeout = timeout if timeout is not None else Config.ADMIN_API_TIMEOUT_SECONDS
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.api_root,
                timeout=httpx.Timeout(self._timeout),
                transport=self._transport,
                headers={"Accept": "application/json"},
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()

    async def __aenter__(self) -> "AdminApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    # ------------------------------------------------------------------ transport

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Mapping[str, str]] = None,
        json: Optional[Mapping[str, Any]] = None,
        authenticated: bool = True,
    ) -> ApiResult:
        headers: Dict[str, str] = {}
        if authenticated and self.credential_provider is not None:
            token = self.credential_provider()
            if token:
                headers["Authorization"] = f"Bearer {token}"

        try:
            response = await self._get_client().request(
                method,
                path,
                params=dict(params) if params else None,
                json=dict(json) if json is not None else None,
                headers=headers,
            )
        except httpx.HTTPError as e:
            logger.error(
                "admin_api_transport_error",
                method=method,
                path=path,
                query=to_query_string(params or {}),
                error=str(e),
            )
            return ApiFailure(ApiRequestError(f"Network error: {e}", status=TRANSPORT_STATUS))

        try:
            payload = response.json()
        except ValueError:
            payload = None
        server_message = payload.get("message") if isinstance(payload, dict) else None

        if response.status_code == 401:
            if not authenticated:
                return ApiFailure(
                    ApiRequestError(server_message or "Invalid username or password", status="HTTP_401", http_status=401)
                )
            logger.warning("admin_api_unauthorized", method=method, path=path)
            if self.on_unauthorized is not None:
                self.on_unauthorized()
            return ApiFailure(UnauthorizedError())

        if response.status_code == 501:
            return self._failed(method, path, NotImplementedBackendError(server_message or NotImplementedBackendError().message))

        if response.is_error:
            error = ApiRequestError(
                server_message or f"Request failed with HTTP {response.status_code}",
                status=f"HTTP_{response.status_code}",
                http_status=response.status_code,
            )
            return self._failed(method, path, error)

        result = unwrap_envelope(payload, response.status_code)
        if isinstance(result, ApiFailure):
            error = result.error
            if error.status == NOT_IMPLEMENTED_STATUS:
                error = NotImplementedBackendError(error.message, http_status=response.status_code)
            return self._failed(method, path, error)
        return result

    def _failed(self, method: str, path: str, error: ApiRequestError) -> ApiFailure:
        logger.error(
            "admin_api_request_failed",
            method=method,
            path=path,
            status=error.status,
            http_status=error.http_status,
            message=error.message,
        )
        return ApiFailure(error)

    @staticmethod
    def _map(result: ApiResult, parser: Callable[[Any], Any]) -> ApiResult:
        """Parse the success payload, turning schema mismatches into failures."""
        if isinstance(result, ApiFailure):
            return result
        try:
            return ApiSuccess(parser(result.data))
        except (KeyError, ValueError, TypeError, AttributeError) as e:
            logger.error("admin_api_malformed_payload", error=str(e))
            return ApiFailure(ApiRequestError(f"Malformed response from admin API: {e}", status="MALFORMED"))

    @staticmethod
    def _page_parser(row_key: str, factory: Callable[[Mapping[str, Any]], R], filters: FilterSet) -> Callable[[Any], ListPage[R]]:
        def parse(data: Any) -> ListPage[R]:
            raw_rows = data.get("rows")
            if raw_rows is None:
                raw_rows = data.get(row_key, [])
            return ListPage(
                rows=[factory(item) for item in raw_rows],
                pagination=Pagination.from_payload(
                    data.get("pagination"),
                    requested_page=filters.page,
                    requested_limit=filters.limit,
                ),
            )

        return parse

    async def _list(self, path: str, row_key: str, factory: Callable[[Mapping[str, Any]], R], filters: FilterSet) -> ApiResult:
        result = await self._request("GET", path, params=build_query_params(filters))
        return self._map(result, self._page_parser(row_key, factory, filters))

    async def _totals(self, path: str, factory: Callable[[Mapping[str, Any]], Any], filters: FilterSet) -> ApiResult:
        result = await self._request("GET", path, params=build_totals_params(filters))
        return self._map(result, factory)

    # ==================== Authentication ====================

    async def login(self, username: str, password: str) -> ApiResult:
        result = await self._request(
            "POST",
            "/auth/login",
            json={"username": username, "password": password},
            authenticated=False,
        )
        return self._map(result, self._parse_session)

    async def logout(self) -> ApiResult:
        return await self._request("POST", "/auth/logout")

    async def refresh_token(self, refresh_token: str) -> ApiResult:
        result = await self._request(
            "POST",
            "/auth/refresh",
            json={"refreshToken": refresh_token},
            authenticated=False,
        )
        return self._map(result, self._parse_session)

    async def get_me(self) -> ApiResult:
        result = await self._request("GET", "/auth/me")
        return self._map(result, lambda data: Admin.from_payload(data.get("admin", data)))

    @staticmethod
    def _parse_session(data: Any) -> AuthSession:
        admin_payload = data.get("admin")
        return AuthSession(
            access_token=str(data["accessToken"]),
            refresh_token=data.get("refreshToken"),
            admin=Admin.from_payload(admin_payload) if admin_payload else None,
        )

    # ==================== Bets ====================

    async def get_bets(self, filters: BetFilters) -> ApiResult:
        return await self._list("/bets", "bets", Bet.from_payload, filters)

    async def get_bet_totals(self, filters: BetFilters) -> ApiResult:
        return await self._totals("/bets/totals", BetTotals.from_payload, filters)

    async def get_bet(self, bet_id: str) -> ApiResult:
        result = await self._request("GET", f"/bets/{_segment(bet_id)}")
        return self._map(result, lambda data: Bet.from_payload(data.get("bet", data)))

    async def get_bet_filter_options(self) -> ApiResult:
        result = await self._request("GET", "/bets/filter-options")
        return self._map(result, FilterOptions.from_payload)

    # ==================== Agents ====================

    async def get_agents(self, filters: AgentFilters) -> ApiResult:
        return await self._list("/agents", "agents", AgentWithStats.from_payload, filters)

    async def get_agent_totals(self, filters: AgentFilters) -> ApiResult:
        return await self._totals("/agents/totals", AgentTotals.from_payload, filters)

    async def get_agent_filter_options(self) -> ApiResult:
        result = await self._request("GET", "/agents/filter-options")
        return self._map(result, FilterOptions.from_payload)

    async def get_agent(self, agent_id: str) -> ApiResult:
        result = await self._request("GET", f"/agents/{_segment(agent_id)}")
        return self._map(result, lambda data: Agent.from_payload(data.get("agent", data)))

    async def create_agent(self, data: Mapping[str, Any]) -> ApiResult:
        return await self._request("POST", "/agents", json=data)

    async def update_agent(self, agent_id: str, data: Mapping[str, Any]) -> ApiResult:
        return await self._request("PATCH", f"/agents/{_segment(agent_id)}", json=data)

    async def delete_agent(self, agent_id: str) -> ApiResult:
        return await self._request("DELETE", f"/agents/{_segment(agent_id)}")

    # ==================== Player summary ====================

    async def get_player_summary(self, filters: PlayerSummaryFilters) -> ApiResult:
        return await self._list("/player-summary", "players", PlayerSummary.from_payload, filters)

    async def get_player_summary_totals(self, filters: PlayerSummaryFilters) -> ApiResult:
        return await self._totals("/player-summary/totals", PlayerSummaryTotals.from_payload, filters)

    async def get_player_summary_filter_options(self) -> ApiResult:
        result = await self._request("GET", "/player-summary/filter-options")
        return self._map(result, FilterOptions.from_payload)

    # ==================== Users ====================

    async def get_users(self, filters: UserFilters) -> ApiResult:
        return await self._list("/users", "users", User.from_payload, filters)

    async def get_user(self, user_id: str, agent_id: str) -> ApiResult:
        result = await self._request("GET", f"/users/{_segment(user_id)}/{_segment(agent_id)}")
        return self._map(result, lambda data: User.from_payload(data.get("user", data)))

    async def create_user(self, data: Mapping[str, Any]) -> ApiResult:
        return await self._request("POST", "/users", json=data)

    async def update_user(self, user_id: str, agent_id: str, data: Mapping[str, Any]) -> ApiResult:
        return await self._request("PATCH", f"/users/{_segment(user_id)}/{_segment(agent_id)}", json=data)

    async def delete_user(self, user_id: str, agent_id: str) -> ApiResult:
        return await self._request("DELETE", f"/users/{_segment(user_id)}/{_segment(agent_id)}")

    # ==================== Config ====================

    async def get_configs(self) -> ApiResult:
        result = await self._request("GET", "/config")

        def parse(data: Any) -> List[GameConfig]:
            items = data.get("configs", data.get("rows", [])) if isinstance(data, dict) else data
            return [GameConfig.from_payload(item) for item in items]

        return self._map(result, parse)

    async def get_config(self, key: str) -> ApiResult:
        result = await self._request("GET", f"/config/{_segment(key)}")
        return self._map(result, lambda data: GameConfig.from_payload(data.get("config", data)))

    async def create_config(self, key: str, value: str) -> ApiResult:
        return await self._request("POST", "/config", json={"key": key, "value": value})

    async def update_config(self, key: str, value: str) -> ApiResult:
        return await self._request("PATCH", f"/config/{_segment(key)}", json={"value": value})

    async def delete_config(self, key: str) -> ApiResult:
        return await self._request("DELETE", f"/config/{_segment(key)}")

    # ==================== Dashboard ====================

    async def get_dashboard_stats(self) -> ApiResult:
        result = await self._request("GET", "/dashboard/overview")
        return self._map(result, DashboardStats.from_payload)
