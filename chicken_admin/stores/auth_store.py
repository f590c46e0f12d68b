"""
Authenticated session for the console.

The access token lives in memory only. The API client reads it per request
through ``credential_provider`` and calls ``invalidate`` on HTTP 401.
"""

from __future__ import annotations

from typing import Any, Optional

import httpx

from chicken_admin.core.errors import ApiRequestError, FormValidationError
from chicken_admin.domain.models import Admin
from chicken_admin.integrations.admin_api_client import AdminApiClient, AuthSession
from chicken_admin.integrations.api_result import ApiFailure, ApiResult
from chicken_admin.stores.base import BaseStore, StoreStatus
from chicken_admin.utils.logging_config import get_logger

logger = get_logger(__name__)


class AuthStore(BaseStore):
    domain = "auth"

    def __init__(self, api: Any = None):
        super().__init__(api)
        self.admin: Optional[Admin] = None
        self.access_token: Optional[str] = None
        self.refresh_token: Optional[str] = None
        self.session_expired = False

    # ------------------------------------------------------------------ session

    @property
    def is_authenticated(self) -> bool:
        return bool(self.access_token)

    @property
    def is_super_admin(self) -> bool:
        return self.admin is not None and self.admin.is_super_admin

    @property
    def agent_id(self) -> Optional[str]:
        return self.admin.agent_id if self.admin else None

    def credential_provider(self) -> Optional[str]:
        return self.access_token

    def invalidate(self) -> None:
        """Drop the session after the backend rejected the token."""
        if self.access_token is not None:
            logger.warning("session_invalidated", username=self.admin.username if self.admin else None)
        self._clear()
        self.session_expired = True
        self._notify()

    def _clear(self) -> None:
        self.admin = None
        self.access_token = None
        self.refresh_token = None
        self.is_loading = False
        self.status = StoreStatus.IDLE
        self.has_loaded = False

    def _start_session(self, session: AuthSession) -> None:
        self.access_token = session.access_token
        self.refresh_token = session.refresh_token or self.refresh_token
        if session.admin is not None:
            self.admin = session.admin
        self.session_expired = False

    # ------------------------------------------------------------------ actions

    async def login(self, username: str, password: str) -> ApiResult:
        username = (username or "").strip()
        if not username or not password:
            raise FormValidationError("Username and password are required", field="username" if not username else "password")

        result = await self._load("login", lambda: self.api.login(username, password), self._start_session)
        if isinstance(result, ApiFailure):
            return result
        logger.info("admin_logged_in", username=username)
        if self.admin is None:
            await self.load_me()
        return result

    async def load_me(self) -> ApiResult:
        def replace(admin: Admin) -> None:
            self.admin = admin

        return await self._load("load_me", self.api.get_me, replace)

    async def refresh(self) -> ApiResult:
        if not self.refresh_token:
            self.invalidate()
            return ApiFailure(ApiRequestError("No refresh token available", status="NO_SESSION"))
        result = await self._load("refresh", lambda: self.api.refresh_token(self.refresh_token), self._start_session)
        if isinstance(result, ApiFailure):
            self.invalidate()
        return result

    async def logout(self) -> None:
        """End the session locally; the server call is best effort."""
        if self.access_token and self.api is not None:
            result = await self.api.logout()
            if isinstance(result, ApiFailure):
                logger.warning("logout_request_failed", message=result.message)
        self._clear()
        self.session_expired = False
        self.error = None
        self._notify()


def connect_api_client(
    auth: AuthStore,
    base_url: Optional[str] = None,
    prefix: Optional[str] = None,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    timeout: Optional[float] = None,
) -> AdminApiClient:
    """Create an API client wired to ``auth`` for bearer tokens and 401 handling."""
    client = AdminApiClient(
        base_url,
        prefix,
        credential_provider=auth.credential_provider,
        on_unauthorized=auth.invalidate,
        transport=transport,
        timeout=timeout,
    )
    auth.api = client
    return client
