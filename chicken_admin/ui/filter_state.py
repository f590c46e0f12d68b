"""
Draft/applied filter reconciliation shared by the paginated views.

One instance per mounted view. The draft is what the filter controls show;
the applied set is what the last committed fetch used. Deep-link seeds are
merged once at mount. Every commit goes through ``FilterSet.normalized`` so
an invalid draft never reaches the store. Pinned values (an agent admin's
own ``agentId``) are forced onto every filter set this state produces.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Callable, Dict, Generic, Mapping, Optional, TypeVar, Union

from chicken_admin.core.errors import FilterValidationError
from chicken_admin.domain.date_ranges import (
    DateRange,
    QuickRange,
    last_two_months_range,
    match_quick_range,
    quick_range,
    this_month_range,
    this_week_range,
)
from chicken_admin.domain.filters import AgentFilters, BetFilters, FilterSet, PlayerSummaryFilters, UserFilters
from chicken_admin.services.paginated_fetcher import FetchOutcome
from chicken_admin.stores.base import DomainStore
from chicken_admin.utils.logging_config import get_logger

logger = get_logger(__name__)

F = TypeVar("F", bound=FilterSet)


def default_bet_filters(now: Optional[datetime] = None) -> BetFilters:
    week = this_week_range(now)
    return BetFilters(from_date=week.from_date, to_date=week.to_date)


def default_player_summary_filters(now: Optional[datetime] = None) -> PlayerSummaryFilters:
    window = last_two_months_range(now)
    return PlayerSummaryFilters(from_date=window.from_date, to_date=window.to_date)


def default_agent_filters(now: Optional[datetime] = None) -> AgentFilters:
    month = this_month_range(now)
    return AgentFilters(from_date=month.from_date, to_date=month.to_date)


def default_user_filters(now: Optional[datetime] = None) -> UserFilters:
    return UserFilters()


DEFAULT_FILTER_FACTORIES: Dict[str, Callable[[Optional[datetime]], FilterSet]] = {
    "bets": default_bet_filters,
    "player-summary": default_player_summary_filters,
    "agents": default_agent_filters,
    "users": default_user_filters,
}


class FilterReconciliation(Generic[F]):
    """Draft, applied and externally seeded filters for one domain view."""

    def __init__(
        self,
        store: DomainStore[F],
        defaults_factory: Callable[[], F],
        *,
        clock: Optional[Callable[[], Optional[datetime]]] = None,
        pinned: Optional[Mapping[str, Any]] = None,
    ):
        self.store = store
        self.defaults_factory = defaults_factory
        self._clock = clock or (lambda: None)
        self._pinned: Dict[str, Any] = dict(pinned or {})
        self._external: Dict[str, Any] = {}
        self._seeded = False

        if store.has_loaded:
            self._applied: F = self._pin(store.applied_filters)
        else:
            self._applied = self._pin(defaults_factory())
        self._draft: F = self._applied

    @classmethod
    def for_store(
        cls,
        store: DomainStore[F],
        *,
        clock: Optional[Callable[[], Optional[datetime]]] = None,
        pinned: Optional[Mapping[str, Any]] = None,
    ) -> "FilterReconciliation[F]":
        """Build a reconciliation using the store domain's default date window."""
        factory = DEFAULT_FILTER_FACTORIES[store.domain]
        now = clock or (lambda: None)
        return cls(store, lambda: factory(now()), clock=clock, pinned=pinned)  # type: ignore[arg-type,return-value]

    # ------------------------------------------------------------------ draft

    def get_draft(self) -> F:
        return self._draft

    def get_applied(self) -> F:
        return self._applied

    @property
    def external_seed(self) -> Dict[str, Any]:
        return dict(self._external)

    @property
    def pinned(self) -> Dict[str, Any]:
        return dict(self._pinned)

    def _pin(self, filters: F) -> F:
        if not self._pinned:
            return filters
        return filters.with_changes(page=filters.page, **self._pinned)

    @property
    def is_dirty(self) -> bool:
        """True when the draft differs from the applied filters."""
        return not self._draft.same_filters(self._applied)

    def set_draft_field(self, key: str, value: Any) -> F:
        """
        Update one draft field.

        Raises:
            FilterValidationError: Unknown field or a value outside its
                enumerated set.
        """
        self._draft = self._pin(self._draft.with_changes(**{key: value}))
        return self._draft

    def active_quick_range(self) -> Optional[QuickRange]:
        return match_quick_range(self._draft.date_from, self._draft.date_to, self._clock())

    # ------------------------------------------------------------------ commits

    async def commit(self) -> FetchOutcome:
        """
        Validate the draft, make it the applied set and fetch page 1.

        Raises:
            FilterValidationError: Draft and applied state are left untouched
                and no fetch is issued.
        """
        try:
            filters = self._pin(self._draft).with_pagination(page=1).normalized()
        except FilterValidationError as e:
            logger.info(
                "filter_commit_rejected",
                domain=self.store.domain,
                field=e.field,
                message=e.message,
            )
            raise
        self._draft = filters
        self._applied = filters
        return await self.store.fetch(filters)

    async def apply_quick_range(self, preset: Union[QuickRange, str, DateRange]) -> FetchOutcome:
        """Put the preset's bounds into the draft and commit straight away."""
        if isinstance(preset, DateRange):
            window = preset
        else:
            window = quick_range(preset, self._clock())
        previous = self._draft
        self._draft = self._draft.with_date_range(window.from_date, window.to_date)
        try:
            return await self.commit()
        except FilterValidationError:
            self._draft = previous
            raise

    async def seed_from_external(self, overrides: Mapping[str, Any]) -> Optional[FetchOutcome]:
        """
        Merge deep-link values into the filters once, at mount.

        Seeds win over the domain defaults. When the store already holds an
        applied set with a date range, that set is the base and its dates are
        kept whatever the seed says. Values that fail validation are dropped.
        Returns ``None`` on every call after the first.
        """
        if self._seeded:
            return None
        self._seeded = True

        applied = self.store.applied_filters
        keep_dates = applied.has_date_range
        base: F = applied if keep_dates else self.defaults_factory()

        seed = self._accepted_seed(base, overrides)
        if keep_dates:
            seed = {name: value for name, value in seed.items() if name not in base.date_fields()}
        pinned_fields = {base.resolve_field(key) for key in self._pinned}
        seed = {name: value for name, value in seed.items() if name not in pinned_fields}
        self._external = seed

        merged = self._pin(base.with_changes(**seed) if seed else base)
        try:
            filters = merged.normalized()
        except FilterValidationError as e:
            logger.warning("seed_dates_rejected", domain=self.store.domain, message=e.message)
            seed = {name: value for name, value in seed.items() if name not in base.date_fields()}
            self._external = seed
            filters = self._pin(base.with_changes(**seed) if seed else base).normalized()

        logger.info("filters_seeded", domain=self.store.domain, seed=sorted(seed), kept_dates=keep_dates)
        self._draft = filters
        self._applied = filters
        return await self.store.fetch(filters)

    def _accepted_seed(self, base: F, overrides: Mapping[str, Any]) -> Dict[str, Any]:
        accepted: Dict[str, Any] = {}
        for key, value in overrides.items():
            try:
                name = base.resolve_field(key)
                coerced = base.coerce_value(name, value)
            except FilterValidationError as e:
                logger.warning("seed_value_rejected", domain=self.store.domain, key=key, message=e.message)
                continue
            if coerced is not None:
                accepted[name] = coerced
        return accepted

    async def reset_to_default(self, preserve_external: bool = False) -> FetchOutcome:
        """Restore the default filters, optionally keeping the deep-link seed, and commit."""
        draft = self.defaults_factory()
        if preserve_external and self._external:
            draft = draft.with_changes(**self._external)
        self._draft = draft
        return await self.commit()

    # ------------------------------------------------------------------ paging

    async def change_page(self, page: Any) -> FetchOutcome:
        """
        Fetch another page of the applied filters.

        Raises:
            FilterValidationError: ``page`` is not a positive integer.
        """
        filters = self._pin(self._applied).with_pagination(page=page)
        self._applied = filters
        self._draft = self._draft.with_pagination(page=filters.page)
        return await self.store.fetch(filters)

    async def change_limit(self, limit: Any) -> FetchOutcome:
        """Change the page size and go back to page 1."""
        filters = self._pin(self._applied).with_pagination(page=1, limit=limit)
        self._applied = filters
        self._draft = self._draft.with_pagination(page=1, limit=filters.limit)
        return await self.store.fetch(filters)

    async def retry(self) -> FetchOutcome:
        return await self.store.fetch(self._applied)
