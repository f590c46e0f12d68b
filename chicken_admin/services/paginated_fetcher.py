"""
Paginated list + totals fetcher.

Issues the list call and the totals call for one domain concurrently and
folds both results into a ``FetchOutcome``. Every call gets a per-domain
request token; an outcome that resolves after a newer request was issued for
the same domain comes back marked ``stale`` so the caller can drop it.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional

from chicken_admin.core.errors import ApiRequestError
from chicken_admin.domain.filters import FilterSet
from chicken_admin.domain.models import Pagination
from chicken_admin.integrations.api_result import ApiFailure, ApiResult, ApiSuccess
from chicken_admin.services.query_builder import build_query_params, to_query_string
from chicken_admin.utils.logging_config import get_logger

logger = get_logger(__name__)

ListCall = Callable[[FilterSet], Awaitable[ApiResult]]
TotalsCall = Callable[[FilterSet], Awaitable[ApiResult]]


@dataclass(frozen=True)
class FetchOutcome:
    """Result of one list + totals round trip."""

    domain: str
    request_id: int
    filters: FilterSet
    rows: List[Any] = field(default_factory=list)
    pagination: Optional[Pagination] = None
    totals: Optional[Any] = None
    error: Optional[ApiRequestError] = None
    totals_error: Optional[ApiRequestError] = None
    stale: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class DomainEndpoints:
    list_call: ListCall
    totals_call: Optional[TotalsCall] = None


class PaginatedFetcher:
    """Runs list/totals fetches for registered domains with last-request-wins sequencing."""

    def __init__(self, endpoints: Optional[Dict[str, DomainEndpoints]] = None):
        self._endpoints: Dict[str, DomainEndpoints] = dict(endpoints or {})
        self._latest: Dict[str, int] = {}

    def register(self, domain: str, list_call: ListCall, totals_call: Optional[TotalsCall] = None) -> None:
        self._endpoints[domain] = DomainEndpoints(list_call=list_call, totals_call=totals_call)

    def latest_request_id(self, domain: str) -> int:
        return self._latest.get(domain, 0)

    def is_latest(self, domain: str, request_id: int) -> bool:
        return self._latest.get(domain, 0) == request_id

    async def fetch(self, domain: str, filters: FilterSet) -> FetchOutcome:
        """
        Fetch one page and the aggregate totals for ``filters``.

        A list failure yields an outcome with ``error`` set and no rows. A
        totals failure is non-fatal: the outcome carries ``totals=None`` and
        ``totals_error``.

        Raises:
            KeyError: If ``domain`` was never registered.
        """
        endpoints = self._endpoints[domain]
        request_id = self._latest.get(domain, 0) + 1
        self._latest[domain] = request_id

        logger.debug(
            "fetch_started",
            domain=domain,
            request_id=request_id,
            query=to_query_string(build_query_params(filters)),
        )

        if endpoints.totals_call is not None:
            list_result, totals_result = await asyncio.gather(
                endpoints.list_call(filters),
                endpoints.totals_call(filters),
            )
        else:
            list_result, totals_result = await endpoints.list_call(filters), None

        stale = not self.is_latest(domain, request_id)

        if isinstance(list_result, ApiFailure):
            return FetchOutcome(
                domain=domain,
                request_id=request_id,
                filters=filters,
                error=list_result.error,
                stale=stale,
            )

        page = list_result.data
        totals = None
        totals_error = None
        if isinstance(totals_result, ApiSuccess):
            totals = totals_result.data
        elif isinstance(totals_result, ApiFailure):
            totals_error = totals_result.error
            logger.warning(
                "totals_fetch_failed",
                domain=domain,
                request_id=request_id,
                status=totals_error.status,
                message=totals_error.message,
            )

        return FetchOutcome(
            domain=domain,
            request_id=request_id,
            filters=filters,
            rows=list(page.rows),
            pagination=page.pagination,
            totals=totals,
            totals_error=totals_error,
            stale=stale,
        )
