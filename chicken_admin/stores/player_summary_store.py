"""Per-player aggregates with totals over the whole filtered set."""

from __future__ import annotations

from typing import Any, Optional

from chicken_admin.domain.filters import PlayerSummaryFilters
from chicken_admin.domain.models import PlayerSummaryTotals
from chicken_admin.services.paginated_fetcher import DomainEndpoints, PaginatedFetcher
from chicken_admin.stores.base import DomainStore


class PlayerSummaryStore(DomainStore[PlayerSummaryFilters]):
    domain = "player-summary"
    filters_cls = PlayerSummaryFilters

    def __init__(self, api: Any, fetcher: Optional[PaginatedFetcher] = None):
        super().__init__(api, fetcher)
        self.totals: Optional[PlayerSummaryTotals] = None

    def _endpoints(self) -> DomainEndpoints:
        return DomainEndpoints(
            list_call=self.api.get_player_summary,
            totals_call=self.api.get_player_summary_totals,
        )

    def _filter_options_call(self):
        return self.api.get_player_summary_filter_options
