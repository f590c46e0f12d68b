"""
Entity, pagination and totals models for the admin console.

Payloads arrive from the admin API with camelCase keys; every model exposes a
``from_payload`` constructor that tolerates missing optional fields and
coerces money values into ``Decimal``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from chicken_admin.core.config import Config

ZERO = Decimal("0.00")


class AdminRole(str, Enum):
    SUPER_ADMIN = "SUPER_ADMIN"
    AGENT = "AGENT"


class BetStatus(str, Enum):
    PENDING = "PENDING"
    WON = "WON"
    LOST = "LOST"
    CANCELLED = "CANCELLED"


class Difficulty(str, Enum):
    EASY = "EASY"
    MEDIUM = "MEDIUM"
    HARD = "HARD"
    DAREDEVIL = "DAREDEVIL"


def _to_decimal(value: Any, default: Optional[Decimal] = ZERO) -> Optional[Decimal]:
    """Safely coerce a value to Decimal, returning ``default`` on failure."""
    if value is None or value == "":
        return default
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        return default


def _to_int(value: Any, default: int = 0) -> int:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        try:
            return int(float(value))
        except (TypeError, ValueError):
            return default


def _opt_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value)
    return text or None


@dataclass(frozen=True)
class Pagination:
    """Page metadata for a list response.

    ``total_pages`` is always derived from ``total`` and ``limit`` so the two
    can never disagree, whatever the server sent.
    """

    page: int = 1
    limit: int = 20
    total: int = 0

    @property
    def total_pages(self) -> int:
        if self.limit <= 0:
            return 0
        return math.ceil(self.total / self.limit)

    @property
    def offset(self) -> int:
        return max(0, (self.page - 1) * self.limit)

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @classmethod
    def empty(cls, limit: Optional[int] = None) -> "Pagination":
        return cls(page=1, limit=limit or Config.DEFAULT_PAGE_LIMIT, total=0)

    @classmethod
    def from_payload(
        cls,
        payload: Optional[Mapping[str, Any]],
        *,
        requested_page: int = 1,
        requested_limit: Optional[int] = None,
    ) -> "Pagination":
        """
        Build pagination from a server payload, falling back to the request.

        The page is clamped into ``[1, max(total_pages, 1)]``.
        """
        payload = payload or {}
        limit = _to_int(payload.get("limit"), requested_limit or Config.DEFAULT_PAGE_LIMIT)
        if limit <= 0:
            limit = requested_limit or Config.DEFAULT_PAGE_LIMIT
        total = max(0, _to_int(payload.get("total"), 0))
        page = _to_int(payload.get("page"), requested_page)
        draft = cls(page=1, limit=limit, total=total)
        page = min(max(page, 1), max(draft.total_pages, 1))
        return cls(page=page, limit=limit, total=total)

    def to_dict(self) -> Dict[str, int]:
        return {
            "page": self.page,
            "limit": self.limit,
            "total": self.total,
            "totalPages": self.total_pages,
        }


@dataclass(frozen=True)
class Admin:
    id: str
    username: str
    role: AdminRole
    agent_id: Optional[str] = None
    email: Optional[str] = None
    full_name: Optional[str] = None

    @property
    def is_super_admin(self) -> bool:
        return self.role is AdminRole.SUPER_ADMIN

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "Admin":
        return cls(
            id=str(payload.get("id", "")),
            username=str(payload.get("username", "")),
            role=AdminRole(payload.get("role", AdminRole.AGENT.value)),
            agent_id=_opt_str(payload.get("agentId")),
            email=_opt_str(payload.get("email")),
            full_name=_opt_str(payload.get("fullName")),
        )


@dataclass(frozen=True)
class Bet:
    id: str
    user_id: str
    agent_id: str
    difficulty: Difficulty
    bet_amount: Decimal
    currency: str
    status: BetStatus
    bet_placed_at: str
    win_amount: Optional[Decimal] = None
    settled_at: Optional[str] = None
    external_platform_tx_id: Optional[str] = None
    operator_id: Optional[str] = None
    round_id: Optional[str] = None
    platform: Optional[str] = None
    game: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "Bet":
        return cls(
            id=str(payload["id"]),
            user_id=str(payload.get("userId", "")),
            agent_id=str(payload.get("agentId", "")),
            difficulty=Difficulty(payload.get("difficulty", Difficulty.EASY.value)),
            bet_amount=_to_decimal(payload.get("betAmount")),
            currency=str(payload.get("currency") or Config.DEFAULT_CURRENCY),
            status=BetStatus(payload.get("status", BetStatus.PENDING.value)),
            bet_placed_at=str(payload.get("betPlacedAt", "")),
            win_amount=_to_decimal(payload.get("winAmount"), None),
            settled_at=_opt_str(payload.get("settledAt")),
            external_platform_tx_id=_opt_str(payload.get("externalPlatformTxId")),
            operator_id=_opt_str(payload.get("operatorId")),
            round_id=_opt_str(payload.get("roundId")),
            platform=_opt_str(payload.get("platform")),
            game=_opt_str(payload.get("game")),
        )


@dataclass(frozen=True)
class AgentStatistics:
    user_count: int = 0
    total_bets: int = 0
    total_bet_volume: Decimal = ZERO


@dataclass(frozen=True)
class Agent:
    agent_id: str
    agent_ip_address: str
    callback_url: str
    is_whitelisted: bool
    created_at: str = ""
    updated_at: str = ""
    cert: Optional[str] = None
    statistics: Optional[AgentStatistics] = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "Agent":
        stats_payload = payload.get("statistics")
        statistics = None
        if isinstance(stats_payload, Mapping):
            statistics = AgentStatistics(
                user_count=_to_int(stats_payload.get("userCount")),
                total_bets=_to_int(stats_payload.get("totalBets")),
                total_bet_volume=_to_decimal(stats_payload.get("totalBetVolume")),
            )
        return cls(
            agent_id=str(payload["agentId"]),
            agent_ip_address=str(payload.get("agentIPaddress", "")),
            callback_url=str(payload.get("callbackURL", "")),
            is_whitelisted=bool(payload.get("isWhitelisted", False)),
            created_at=str(payload.get("createdAt", "")),
            updated_at=str(payload.get("updatedAt", "")),
            cert=_opt_str(payload.get("cert")),
            statistics=statistics,
        )


@dataclass(frozen=True)
class AgentWithStats:
    """One agent / platform / game aggregate row on the agent stats view."""

    agent_id: str
    platform: str
    game: str
    bet_count: int
    bet_amount: Decimal
    win_loss: Decimal
    adjustment: Decimal
    total_win_loss: Decimal
    margin_percent: Decimal
    company_total_win_loss: Decimal
    agent_ip_address: Optional[str] = None
    callback_url: Optional[str] = None
    is_whitelisted: Optional[bool] = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "AgentWithStats":
        whitelisted = payload.get("isWhitelisted")
        return cls(
            agent_id=str(payload["agentId"]),
            platform=str(payload.get("platform", "")),
            game=str(payload.get("game", "")),
            bet_count=_to_int(payload.get("betCount")),
            bet_amount=_to_decimal(payload.get("betAmount")),
            win_loss=_to_decimal(payload.get("winLoss")),
            adjustment=_to_decimal(payload.get("adjustment")),
            total_win_loss=_to_decimal(payload.get("totalWinLoss")),
            margin_percent=_to_decimal(payload.get("marginPercent")),
            company_total_win_loss=_to_decimal(payload.get("companyTotalWinLoss")),
            agent_ip_address=_opt_str(payload.get("agentIPaddress")),
            callback_url=_opt_str(payload.get("callbackURL")),
            is_whitelisted=None if whitelisted is None else bool(whitelisted),
        )


@dataclass(frozen=True)
class PlayerSummary:
    """One player / platform / game aggregate row."""

    player_id: str
    platform: str
    game: str
    bet_count: int
    bet_amount: Decimal
    player_win_loss: Decimal
    total_win_loss: Decimal

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "PlayerSummary":
        return cls(
            player_id=str(payload["playerId"]),
            platform=str(payload.get("platform", "")),
            game=str(payload.get("game", "")),
            bet_count=_to_int(payload.get("betCount")),
            bet_amount=_to_decimal(payload.get("betAmount")),
            player_win_loss=_to_decimal(payload.get("playerWinLoss")),
            total_win_loss=_to_decimal(payload.get("totalWinLoss")),
        )


@dataclass(frozen=True)
class User:
    user_id: str
    agent_id: str
    currency: str
    bet_limit: Decimal
    created_at: str = ""
    updated_at: str = ""
    username: Optional[str] = None
    language: Optional[str] = None
    avatar: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "User":
        return cls(
            user_id=str(payload["userId"]),
            agent_id=str(payload.get("agentId", "")),
            currency=str(payload.get("currency") or Config.DEFAULT_CURRENCY),
            bet_limit=_to_decimal(payload.get("betLimit")),
            created_at=str(payload.get("createdAt", "")),
            updated_at=str(payload.get("updatedAt", "")),
            username=_opt_str(payload.get("username")),
            language=_opt_str(payload.get("language")),
            avatar=_opt_str(payload.get("avatar")),
        )


@dataclass(frozen=True)
class GameConfig:
    id: int
    key: str
    value: str
    updated_at: str = ""

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "GameConfig":
        return cls(
            id=_to_int(payload.get("id")),
            key=str(payload["key"]),
            value=str(payload.get("value", "")),
            updated_at=str(payload.get("updatedAt", "")),
        )


@dataclass(frozen=True)
class DashboardStats:
    total_users: int
    total_agents: int
    active_users: int
    total_bets: int
    total_bet_volume: Decimal
    total_win_amount: Decimal
    net_revenue: Decimal
    recent_activity: List[Dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "DashboardStats":
        activity = payload.get("recentActivity") or []
        return cls(
            total_users=_to_int(payload.get("totalUsers")),
            total_agents=_to_int(payload.get("totalAgents")),
            active_users=_to_int(payload.get("activeUsers")),
            total_bets=_to_int(payload.get("totalBets")),
            total_bet_volume=_to_decimal(payload.get("totalBetVolume")),
            total_win_amount=_to_decimal(payload.get("totalWinAmount")),
            net_revenue=_to_decimal(payload.get("netRevenue")),
            recent_activity=[dict(item) for item in activity if isinstance(item, Mapping)],
        )


@dataclass(frozen=True)
class FilterOptions:
    """Distinct values available for dropdown filters."""

    platforms: List[str] = field(default_factory=list)
    games: List[str] = field(default_factory=list)
    currencies: List[str] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "FilterOptions":
        def _values(key: str) -> List[str]:
            raw = payload.get(key) or []
            return sorted({str(item) for item in raw if item not in (None, "")})

        return cls(
            platforms=_values("platforms"),
            games=_values("games"),
            currencies=_values("currencies"),
        )


# Totals are aggregates over every row matching the filters, never the page slice.


@dataclass(frozen=True)
class BetTotals:
    total_bets: int
    total_bet_amount: Decimal
    total_win_amount: Decimal
    net_revenue: Decimal

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "BetTotals":
        return cls(
            total_bets=_to_int(payload.get("totalBets")),
            total_bet_amount=_to_decimal(payload.get("totalBetAmount")),
            total_win_amount=_to_decimal(payload.get("totalWinAmount")),
            net_revenue=_to_decimal(payload.get("netRevenue")),
        )


@dataclass(frozen=True)
class AgentTotals:
    total_bet_count: int
    total_bet_amount: Decimal
    total_win_loss: Decimal
    total_margin_percent: Decimal
    company_total_win_loss: Decimal

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "AgentTotals":
        return cls(
            total_bet_count=_to_int(payload.get("totalBetCount")),
            total_bet_amount=_to_decimal(payload.get("totalBetAmount")),
            total_win_loss=_to_decimal(payload.get("totalWinLoss")),
            total_margin_percent=_to_decimal(payload.get("totalMarginPercent")),
            company_total_win_loss=_to_decimal(payload.get("companyTotalWinLoss")),
        )


@dataclass(frozen=True)
class PlayerSummaryTotals:
    total_players: int
    total_bet_count: int
    total_bet_amount: Decimal
    total_player_win_loss: Decimal
    total_win_loss: Decimal

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "PlayerSummaryTotals":
        return cls(
            total_players=_to_int(payload.get("totalPlayers")),
            total_bet_count=_to_int(payload.get("totalBetCount")),
            total_bet_amount=_to_decimal(payload.get("totalBetAmount")),
            total_player_win_loss=_to_decimal(payload.get("totalPlayerWinLoss")),
            total_win_loss=_to_decimal(payload.get("totalWinLoss")),
        )
