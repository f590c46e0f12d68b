"""Role-based page access for the console navigation."""

from __future__ import annotations

from enum import Enum
from typing import Dict, FrozenSet, List, Optional

from chicken_admin.domain.models import Admin, AdminRole


class Page(str, Enum):
    DASHBOARD = "dashboard"
    USERS = "users"
    BETS = "bets"
    AGENT_STATS = "agents-stats"
    AGENTS = "agents"
    PLAYER_SUMMARY = "player-summary"
    CONFIG = "config"


PAGE_LABELS: Dict[Page, str] = {
    Page.DASHBOARD: "Dashboard",
    Page.USERS: "Users",
    Page.BETS: "Bet History",
    Page.AGENT_STATS: "Agent Stats",
    Page.AGENTS: "Agents",
    Page.PLAYER_SUMMARY: "Player Summary",
    Page.CONFIG: "Game Config",
}

_BOTH: FrozenSet[AdminRole] = frozenset({AdminRole.SUPER_ADMIN, AdminRole.AGENT})
_SUPER_ONLY: FrozenSet[AdminRole] = frozenset({AdminRole.SUPER_ADMIN})

PAGE_ROLES: Dict[Page, FrozenSet[AdminRole]] = {
    Page.DASHBOARD: _BOTH,
    Page.USERS: _BOTH,
    Page.BETS: _BOTH,
    Page.AGENT_STATS: _BOTH,
    Page.AGENTS: _SUPER_ONLY,
    Page.PLAYER_SUMMARY: _SUPER_ONLY,
    Page.CONFIG: _SUPER_ONLY,
}

# Domains whose filters carry an agentId that agent admins may not change.
AGENT_SCOPED_DOMAINS: FrozenSet[str] = frozenset({"bets", "users", "agents"})


def can_access(admin: Optional[Admin], page: Page | str) -> bool:
    """Unauthenticated sessions and unknown pages are denied."""
    if admin is None:
        return False
    try:
        target = Page(page)
    except ValueError:
        return False
    return admin.role in PAGE_ROLES[target]


def visible_pages(admin: Optional[Admin]) -> List[Page]:
    """Navigation entries for ``admin``, in menu order."""
    return [page for page in Page if can_access(admin, page)]


def scope_overrides(admin: Optional[Admin], domain: Optional[str] = None) -> Dict[str, str]:
    """
    Filter values forced onto an agent admin's queries.

    Super admins get no overrides; agent admins are pinned to their own
    ``agentId`` on the agent-scoped domains.
    """
    if admin is None or admin.is_super_admin or not admin.agent_id:
        return {}
    if domain is not None and domain not in AGENT_SCOPED_DOMAINS:
        return {}
    return {"agentId": admin.agent_id}
