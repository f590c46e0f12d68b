"""Dashboard overview counters."""

from __future__ import annotations

from typing import Any, Optional

from chicken_admin.domain.models import DashboardStats
from chicken_admin.integrations.api_result import ApiResult
from chicken_admin.stores.base import BaseStore


class DashboardStore(BaseStore):
    domain = "dashboard"

    def __init__(self, api: Any):
        super().__init__(api)
        self.stats: Optional[DashboardStats] = None

    async def fetch_stats(self) -> ApiResult:
        def replace(stats: DashboardStats) -> None:
            self.stats = stats

        return await self._load("fetch_stats", self.api.get_dashboard_stats, replace)
