"""
Store base classes.

``BaseStore`` carries the status/error/listener plumbing shared by every
store. ``DomainStore`` adds the paginated list + totals state for the
filterable views and owns the applied filter set for its domain.

State machine: IDLE -> LOADING -> READY | ERROR, and READY/ERROR -> LOADING
on the next fetch. Request failures land in ``error``; they are never raised.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, ClassVar, Generic, List, Optional, Tuple, Type, TypeVar

from chicken_admin.core.errors import ApiRequestError
from chicken_admin.domain.filters import FilterSet
from chicken_admin.domain.models import FilterOptions, Pagination
from chicken_admin.integrations.api_result import ApiFailure, ApiResult
from chicken_admin.services.paginated_fetcher import DomainEndpoints, FetchOutcome, PaginatedFetcher
from chicken_admin.utils.logging_config import get_logger

logger = get_logger(__name__)

F = TypeVar("F", bound=FilterSet)

Listener = Callable[["BaseStore"], None]


class StoreStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


@dataclass(frozen=True)
class StoreSnapshot:
    """Immutable view of a domain store handed to rendering code."""

    domain: str
    status: StoreStatus
    rows: Tuple[Any, ...]
    pagination: Pagination
    totals: Optional[Any]
    applied_filters: FilterSet
    is_loading: bool
    error: Optional[str]
    has_loaded: bool


class BaseStore:
    """Status, error banner and change listeners."""

    domain: ClassVar[str] = ""

    def __init__(self, api: Any):
        self.api = api
        self.status = StoreStatus.IDLE
        self.is_loading = False
        self.error: Optional[ApiRequestError] = None
        self.has_loaded = False
        self._listeners: List[Listener] = []
        self._sequence = 0

    @property
    def error_message(self) -> Optional[str]:
        return self.error.message if self.error else None

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; returns a callable that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    def _begin(self) -> int:
        self._sequence += 1
        self.is_loading = True
        self.error = None
        self.status = StoreStatus.LOADING
        self._notify()
        return self._sequence

    def _is_current(self, token: int) -> bool:
        return token == self._sequence

    def _succeed(self) -> None:
        self.is_loading = False
        self.error = None
        self.has_loaded = True
        self.status = StoreStatus.READY
        self._notify()

    def _fail(self, error: ApiRequestError, action: str) -> None:
        self.is_loading = False
        self.error = error
        self.status = StoreStatus.ERROR
        logger.error(
            "store_request_failed",
            domain=self.domain,
            action=action,
            status=error.status,
            message=error.message,
        )
        self._notify()

    def dismiss_error(self) -> None:
        """Clear the error banner; data is left as is."""
        if self.error is None:
            return
        self.error = None
        self.status = StoreStatus.READY if self.has_loaded else StoreStatus.IDLE
        self._notify()

    async def _load(self, action: str, call: Callable[[], Any], apply: Callable[[Any], None]) -> ApiResult:
        """Run a single read round trip and hand its data to ``apply``."""
        token = self._begin()
        result = await call()
        if not self._is_current(token):
            logger.debug("stale_result_discarded", domain=self.domain, action=action, token=token)
            return result
        if isinstance(result, ApiFailure):
            self._fail(result.error, action)
            return result
        apply(result.data)
        self._succeed()
        return result


class DomainStore(BaseStore, Generic[F]):
    """
    Paginated list + totals store for one filterable domain.

    Subclasses set ``domain`` and ``filters_cls`` and implement
    ``_endpoints()``.
    """

    filters_cls: ClassVar[Type[FilterSet]] = FilterSet

    def __init__(self, api: Any, fetcher: Optional[PaginatedFetcher] = None):
        super().__init__(api)
        self.fetcher = fetcher or PaginatedFetcher()
        endpoints = self._endpoints()
        self.fetcher.register(self.domain, endpoints.list_call, endpoints.totals_call)

        self.rows: List[Any] = []
        self.applied_filters: F = self.filters_cls()  # type: ignore[assignment]
        self.requested_filters: F = self.applied_filters
        self.pagination = Pagination.empty(self.applied_filters.limit)
        self.totals: Optional[Any] = None
        self.filter_options = FilterOptions()

    def _endpoints(self) -> DomainEndpoints:
        raise NotImplementedError

    def _filter_options_call(self) -> Optional[Callable[[], Any]]:
        return None

    def snapshot(self) -> StoreSnapshot:
        return StoreSnapshot(
            domain=self.domain,
            status=self.status,
            rows=tuple(self.rows),
            pagination=self.pagination,
            totals=self.totals,
            applied_filters=self.applied_filters,
            is_loading=self.is_loading,
            error=self.error_message,
            has_loaded=self.has_loaded,
        )

    async def fetch(self, filters: Optional[F] = None) -> FetchOutcome:
        """
        Fetch a page for ``filters`` (defaults to the applied filters).

        On success rows, pagination, totals (when delivered) and applied
        filters are replaced together. On failure only ``error`` changes.
        Outcomes superseded by a newer fetch are discarded.
        """
        filters = filters if filters is not None else self.applied_filters
        self.requested_filters = filters
        self.is_loading = True
        self.error = None
        self.status = StoreStatus.LOADING
        self._notify()

        outcome = await self.fetcher.fetch(self.domain, filters)

        if outcome.stale:
            logger.debug("stale_fetch_discarded", domain=self.domain, request_id=outcome.request_id)
            return outcome

        if outcome.error is not None:
            self._fail(outcome.error, "fetch")
            return outcome

        self.rows = list(outcome.rows)
        self.pagination = outcome.pagination or Pagination.empty(filters.limit)
        if outcome.totals is not None:
            self.totals = outcome.totals
        self.applied_filters = filters
        logger.info(
            "store_fetch_succeeded",
            domain=self.domain,
            request_id=outcome.request_id,
            rows=len(self.rows),
            total=self.pagination.total,
        )
        self._succeed()
        return outcome

    async def refresh(self) -> FetchOutcome:
        return await self.fetch(self.applied_filters)

    async def load_filter_options(self) -> FilterOptions:
        """Load dropdown values; failures keep the previous options."""
        call = self._filter_options_call()
        if call is None:
            return self.filter_options
        result = await call()
        if isinstance(result, ApiFailure):
            logger.warning("filter_options_failed", domain=self.domain, message=result.message)
            return self.filter_options
        self.filter_options = result.data
        self._notify()
        return self.filter_options

    async def _mutate(self, action: str, call: Callable[[], Any]) -> ApiResult:
        """
        Run a create/update/delete round trip.

        Success refetches with the most recently requested filters, which
        may still be in flight; failure sets ``error`` and keeps the
        current rows.
        """
        self.is_loading = True
        self.error = None
        self.status = StoreStatus.LOADING
        self._notify()
        result = await call()
        if isinstance(result, ApiFailure):
            self._fail(result.error, action)
            return result
        logger.info("store_mutation_succeeded", domain=self.domain, action=action)
        await self.fetch(self.requested_filters)
        return result
