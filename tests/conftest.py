"""Shared fixtures for the console core tests."""

from __future__ import annotations

import asyncio
from collections import defaultdict, deque
from typing import Any, Deque, Dict, List, Optional, Sequence, Tuple

import pytest

from chicken_admin.core.config import Config
from chicken_admin.core.errors import ApiRequestError
from chicken_admin.domain.models import Pagination
from chicken_admin.integrations.admin_api_client import ListPage
from chicken_admin.integrations.api_result import ApiFailure, ApiSuccess

LIST_ENDPOINTS = {"get_bets", "get_agents", "get_player_summary", "get_users"}


@pytest.fixture(autouse=True)
def console_config(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(Config, "CONSOLE_TIMEZONE", "Asia/Kolkata")
    monkeypatch.setattr(Config, "DEFAULT_PAGE_LIMIT", 20)
    monkeypatch.setattr(Config, "MAX_PAGE_LIMIT", 100)
    monkeypatch.setattr(Config, "DEFAULT_CURRENCY", "INR")


class FakeAdminApi:
    """
    In-memory admin API.

    Results can be queued per endpoint, optionally behind an ``asyncio.Event``
    so a test controls the order in which concurrent calls resolve. Endpoints
    with nothing queued answer with a generated page or an empty success.
    """

    def __init__(self) -> None:
        self.calls: List[Tuple[str, Tuple[Any, ...]]] = []
        self._queued: Dict[str, Deque[Tuple[Any, Optional[asyncio.Event]]]] = defaultdict(deque)

    @staticmethod
    def page(rows: Sequence[Any], *, page: int = 1, limit: int = 20, total: Optional[int] = None) -> ApiSuccess:
        return ApiSuccess(
            ListPage(
                rows=list(rows),
                pagination=Pagination(page=page, limit=limit, total=len(rows) if total is None else total),
            )
        )

    @staticmethod
    def failure(message: str = "Something went wrong", status: str = "9999") -> ApiFailure:
        return ApiFailure(ApiRequestError(message, status=status))

    def queue(self, name: str, result: Any, gate: Optional[asyncio.Event] = None) -> None:
        self._queued[name].append((result, gate))

    def called(self, name: str) -> List[Tuple[Any, ...]]:
        return [args for call_name, args in self.calls if call_name == name]

    def _default(self, name: str, args: Tuple[Any, ...]) -> Any:
        if name in LIST_ENDPOINTS:
            filters = args[0]
            rows = [f"{name}-p{filters.page}-{index}" for index in range(3)]
            return self.page(rows, page=filters.page, limit=filters.limit, total=45)
        if name.endswith("_totals"):
            return ApiSuccess({"endpoint": name})
        return ApiSuccess({})

    async def _call(self, name: str, *args: Any) -> Any:
        self.calls.append((name, args))
        if self._queued[name]:
            result, gate = self._queued[name].popleft()
        else:
            result, gate = self._default(name, args), None
        if gate is not None:
            await gate.wait()
        return result

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)

        async def endpoint(*args: Any) -> Any:
            return await self._call(name, *args)

        return endpoint


@pytest.fixture
def fake_api() -> FakeAdminApi:
    return FakeAdminApi()
