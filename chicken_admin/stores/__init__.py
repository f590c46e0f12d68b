"""Store package exports."""

from .agent_store import AgentStore
from .auth_store import AuthStore, connect_api_client
from .base import BaseStore, DomainStore, StoreSnapshot, StoreStatus
from .bet_store import BetStore
from .config_store import ConfigStore
from .dashboard_store import DashboardStore
from .player_summary_store import PlayerSummaryStore
from .user_store import UserStore

__all__ = [
    "AgentStore",
    "AuthStore",
    "BaseStore",
    "BetStore",
    "ConfigStore",
    "DashboardStore",
    "DomainStore",
    "PlayerSummaryStore",
    "StoreSnapshot",
    "StoreStatus",
    "UserStore",
    "connect_api_client",
]
