"""
Typed filter sets for the paginated console views.

Each domain (bets, player summary, agents, users) has one frozen dataclass.
Fields fall into four categories with their own normalisation rules:

- identity/text filters: trimmed, ``None`` and ``""`` both mean "no filter"
- enumerated filters: must belong to a closed ``Enum``; anything else is rejected
- date range: ISO8601 strings, normalised to start/end of the console day
- pagination: positive integers, ``page`` resets to 1 on any other change

Attribute names are snake_case; the wire (query string / URL) uses camelCase.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Dict, Mapping, Optional, Tuple, Type, TypeVar

from chicken_admin.core.config import Config
from chicken_admin.core.errors import FilterValidationError
from chicken_admin.domain.models import BetStatus, Difficulty
from chicken_admin.utils.datetime_helpers import end_of_day_iso, parse_utc_iso, start_of_day_iso, to_console_date

F = TypeVar("F", bound="FilterSet")

PAGINATION_FIELDS: Tuple[str, str] = ("page", "limit")


def wire_name(attr: str) -> str:
    """Convert ``from_date`` into ``fromDate``."""
    head, *rest = attr.split("_")
    return head + "".join(part.title() for part in rest)


def _clean_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _coerce_positive_int(name: str, value: Any, default: int) -> int:
    if value is None or (isinstance(value, str) and not value.strip()):
        return default
    if isinstance(value, bool):
        raise FilterValidationError(f"{name} must be a positive integer", field=name)
    try:
        number = int(str(value).strip()) if isinstance(value, str) else int(value)
    except (TypeError, ValueError):
        raise FilterValidationError(f"{name} must be a positive integer", field=name) from None
    if isinstance(value, float) and value != number:
        raise FilterValidationError(f"{name} must be a positive integer", field=name)
    if number < 1:
        raise FilterValidationError(f"{name} must be a positive integer", field=name)
    return number


def _coerce_enum(name: str, enum_cls: Type[Enum], value: Any) -> Optional[Enum]:
    if value is None:
        return None
    if isinstance(value, enum_cls):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return enum_cls(text.upper())
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise FilterValidationError(f"Invalid {name}: {text}. Allowed: {allowed}", field=name) from None


@dataclass(frozen=True)
class FilterSet:
    """Base filter set; subclasses declare their own filter fields."""

    page: int = 1
    limit: int = Config.DEFAULT_PAGE_LIMIT

    TEXT_FIELDS: ClassVar[Tuple[str, ...]] = ()
    ENUM_FIELDS: ClassVar[Dict[str, Type[Enum]]] = {}
    DATE_FROM_FIELD: ClassVar[Optional[str]] = None
    DATE_TO_FIELD: ClassVar[Optional[str]] = None

    # ------------------------------------------------------------------ fields

    @classmethod
    def field_names(cls) -> Tuple[str, ...]:
        return tuple(f.name for f in dataclasses.fields(cls))

    @classmethod
    def date_fields(cls) -> Tuple[str, ...]:
        return tuple(name for name in (cls.DATE_FROM_FIELD, cls.DATE_TO_FIELD) if name)

    @classmethod
    def resolve_field(cls, key: str) -> str:
        """Accept either the attribute name or its wire name."""
        names = cls.field_names()
        if key in names:
            return key
        for name in names:
            if wire_name(name) == key:
                return name
        raise FilterValidationError(f"Unknown filter field: {key}", field=key)

    @classmethod
    def coerce_value(cls, name: str, value: Any) -> Any:
        """Normalise a raw control value for ``name`` according to its category."""
        if name == "page":
            return _coerce_positive_int(name, value, 1)
        if name == "limit":
            limit = _coerce_positive_int(name, value, Config.DEFAULT_PAGE_LIMIT)
            if limit > Config.MAX_PAGE_LIMIT:
                raise FilterValidationError(
                    f"limit cannot exceed {Config.MAX_PAGE_LIMIT}", field=name
                )
            return limit
        if name in cls.ENUM_FIELDS:
            return _coerce_enum(name, cls.ENUM_FIELDS[name], value)
        return _clean_text(value)

    # ------------------------------------------------------------------ building

    @classmethod
    def from_mapping(cls: Type[F], values: Mapping[str, Any]) -> F:
        """Build a filter set from attribute or wire keys; unknown keys are rejected."""
        return cls().with_changes(**{cls.resolve_field(key): value for key, value in values.items()})

    def with_changes(self: F, **changes: Any) -> F:
        """
        Return a copy with ``changes`` applied.

        Changing any non-pagination field resets ``page`` to 1 unless the
        caller sets ``page`` explicitly in the same call.
        """
        if not changes:
            return self
        coerced: Dict[str, Any] = {}
        for key, value in changes.items():
            name = self.resolve_field(key)
            coerced[name] = self.coerce_value(name, value)

        filter_changed = any(
            name not in PAGINATION_FIELDS and getattr(self, name) != value
            for name, value in coerced.items()
        )
        if filter_changed and "page" not in coerced:
            coerced["page"] = 1
        return dataclasses.replace(self, **coerced)

    def with_pagination(self: F, *, page: Optional[int] = None, limit: Optional[int] = None) -> F:
        changes: Dict[str, Any] = {}
        if page is not None:
            changes["page"] = self.coerce_value("page", page)
        if limit is not None:
            changes["limit"] = self.coerce_value("limit", limit)
        return dataclasses.replace(self, **changes)

    def filter_values(self) -> Dict[str, Any]:
        """Non-pagination fields, including empty ones."""
        return {name: getattr(self, name) for name in self.field_names() if name not in PAGINATION_FIELDS}

    def same_filters(self, other: "FilterSet") -> bool:
        return type(self) is type(other) and self.filter_values() == other.filter_values()

    # ------------------------------------------------------------------ dates

    @property
    def date_from(self) -> Optional[str]:
        return getattr(self, self.DATE_FROM_FIELD) if self.DATE_FROM_FIELD else None

    @property
    def date_to(self) -> Optional[str]:
        return getattr(self, self.DATE_TO_FIELD) if self.DATE_TO_FIELD else None

    @property
    def has_date_range(self) -> bool:
        return bool(self.date_from and self.date_to)

    def with_date_range(self: F, from_date: Optional[str], to_date: Optional[str]) -> F:
        if not self.DATE_FROM_FIELD or not self.DATE_TO_FIELD:
            raise FilterValidationError(f"{type(self).__name__} has no date range")
        return self.with_changes(**{self.DATE_FROM_FIELD: from_date, self.DATE_TO_FIELD: to_date})

    # ------------------------------------------------------------------ validation

    def validate(self) -> None:
        """
        Check enum membership, pagination bounds and date ordering.

        Raises:
            FilterValidationError: On the first violated rule.
        """
        for name, enum_cls in self.ENUM_FIELDS.items():
            _coerce_enum(name, enum_cls, getattr(self, name))
        self.coerce_value("page", self.page)
        self.coerce_value("limit", self.limit)

        bounds = {}
        for name in self.date_fields():
            value = getattr(self, name)
            if not value:
                continue
            try:
                to_console_date(value)
                bounds[name] = value
            except ValueError:
                raise FilterValidationError(f"{name} is not a valid ISO-8601 date: {value}", field=name) from None

        if self.DATE_FROM_FIELD in bounds and self.DATE_TO_FIELD in bounds:
            start = parse_utc_iso(start_of_day_iso(bounds[self.DATE_FROM_FIELD]))
            end = parse_utc_iso(end_of_day_iso(bounds[self.DATE_TO_FIELD]))
            if start > end:
                raise FilterValidationError(
                    f"{wire_name(self.DATE_FROM_FIELD)} must not be after {wire_name(self.DATE_TO_FIELD)}",
                    field=self.DATE_FROM_FIELD,
                )

    def normalized(self: F) -> F:
        """Validate and return a copy with dates snapped to day boundaries."""
        self.validate()
        changes: Dict[str, Any] = {}
        for name, enum_cls in self.ENUM_FIELDS.items():
            changes[name] = _coerce_enum(name, enum_cls, getattr(self, name))
        for name in self.TEXT_FIELDS:
            changes[name] = _clean_text(getattr(self, name))
        if self.DATE_FROM_FIELD and self.date_from:
            changes[self.DATE_FROM_FIELD] = start_of_day_iso(self.date_from)
        if self.DATE_TO_FIELD and self.date_to:
            changes[self.DATE_TO_FIELD] = end_of_day_iso(self.date_to)
        return dataclasses.replace(self, **changes)

    def to_wire(self) -> Dict[str, Any]:
        """Raw values keyed by wire name (empty values included)."""
        values: Dict[str, Any] = {}
        for name in self.field_names():
            value = getattr(self, name)
            if isinstance(value, Enum):
                value = value.value
            values[wire_name(name)] = value
        return values


@dataclass(frozen=True)
class BetFilters(FilterSet):
    user_id: Optional[str] = None
    agent_id: Optional[str] = None
    platform: Optional[str] = None
    game: Optional[str] = None
    currency: Optional[str] = None
    status: Optional[BetStatus] = None
    difficulty: Optional[Difficulty] = None
    from_date: Optional[str] = None
    to_date: Optional[str] = None

    TEXT_FIELDS: ClassVar[Tuple[str, ...]] = ("user_id", "agent_id", "platform", "game", "currency")
    ENUM_FIELDS: ClassVar[Dict[str, Type[Enum]]] = {"status": BetStatus, "difficulty": Difficulty}
    DATE_FROM_FIELD: ClassVar[Optional[str]] = "from_date"
    DATE_TO_FIELD: ClassVar[Optional[str]] = "to_date"


@dataclass(frozen=True)
class PlayerSummaryFilters(FilterSet):
    player_id: Optional[str] = None
    agent_id: Optional[str] = None
    platform: Optional[str] = None
    game: Optional[str] = None
    from_date: Optional[str] = None
    to_date: Optional[str] = None

    TEXT_FIELDS: ClassVar[Tuple[str, ...]] = ("player_id", "agent_id", "platform", "game")
    DATE_FROM_FIELD: ClassVar[Optional[str]] = "from_date"
    DATE_TO_FIELD: ClassVar[Optional[str]] = "to_date"


@dataclass(frozen=True)
class AgentFilters(FilterSet):
    agent_id: Optional[str] = None
    platform: Optional[str] = None
    game: Optional[str] = None
    from_date: Optional[str] = None
    to_date: Optional[str] = None

    TEXT_FIELDS: ClassVar[Tuple[str, ...]] = ("agent_id", "platform", "game")
    DATE_FROM_FIELD: ClassVar[Optional[str]] = "from_date"
    DATE_TO_FIELD: ClassVar[Optional[str]] = "to_date"


@dataclass(frozen=True)
class UserFilters(FilterSet):
    agent_id: Optional[str] = None
    currency: Optional[str] = None
    search: Optional[str] = None
    created_from: Optional[str] = None
    created_to: Optional[str] = None

    TEXT_FIELDS: ClassVar[Tuple[str, ...]] = ("agent_id", "currency", "search")
    DATE_FROM_FIELD: ClassVar[Optional[str]] = "created_from"
    DATE_TO_FIELD: ClassVar[Optional[str]] = "created_to"
