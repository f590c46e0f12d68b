"""Bets list, aggregate totals and bet detail."""

from __future__ import annotations

from typing import Any, Optional

from chicken_admin.domain.filters import BetFilters
from chicken_admin.domain.models import Bet, BetTotals
from chicken_admin.integrations.api_result import ApiResult
from chicken_admin.services.paginated_fetcher import DomainEndpoints, PaginatedFetcher
from chicken_admin.stores.base import DomainStore


class BetStore(DomainStore[BetFilters]):
    domain = "bets"
    filters_cls = BetFilters

    def __init__(self, api: Any, fetcher: Optional[PaginatedFetcher] = None):
        super().__init__(api, fetcher)
        self.totals: Optional[BetTotals] = None
        self.selected: Optional[Bet] = None

    def _endpoints(self) -> DomainEndpoints:
        return DomainEndpoints(list_call=self.api.get_bets, totals_call=self.api.get_bet_totals)

    def _filter_options_call(self):
        return self.api.get_bet_filter_options

    async def fetch_bet(self, bet_id: str) -> ApiResult:
        def select(bet: Bet) -> None:
            self.selected = bet

        self.selected = None
        return await self._load("fetch_bet", lambda: self.api.get_bet(bet_id), select)
