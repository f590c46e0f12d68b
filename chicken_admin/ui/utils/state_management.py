"""
Session state helpers for Streamlit pages.

Stores and the API client are created once per browser session and kept in
``st.session_state`` so a page remount sees the filters applied earlier.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping, Optional, Sequence, TypeVar

import streamlit as st
import structlog

from chicken_admin.integrations.admin_api_client import AdminApiClient
from chicken_admin.stores.agent_store import AgentStore
from chicken_admin.stores.auth_store import AuthStore, connect_api_client
from chicken_admin.stores.bet_store import BetStore
from chicken_admin.stores.config_store import ConfigStore
from chicken_admin.stores.dashboard_store import DashboardStore
from chicken_admin.stores.player_summary_store import PlayerSummaryStore
from chicken_admin.stores.user_store import UserStore
from chicken_admin.ui.filter_state import FilterReconciliation
from chicken_admin.ui.utils.access import scope_overrides

logger = structlog.get_logger(__name__)
T = TypeVar("T")

STATE_PREFIX = "chicken_admin_"

STORE_FACTORIES = {
    "bets": BetStore,
    "agents": AgentStore,
    "player-summary": PlayerSummaryStore,
    "users": UserStore,
}


def get_or_create_state_value(key: str, loader: Callable[[], T]) -> T:
    """
    Simple session-state cache helper.
    """
    if key not in st.session_state:
        st.session_state[key] = loader()
    return st.session_state[key]


def get_auth_store() -> AuthStore:
    return get_or_create_state_value(f"{STATE_PREFIX}auth", AuthStore)


def get_api_client() -> AdminApiClient:
    auth = get_auth_store()
    return get_or_create_state_value(f"{STATE_PREFIX}api", lambda: connect_api_client(auth))


def get_domain_store(domain: str):
    """Return the session's store for a paginated domain (``bets``, ``agents`` ...)."""
    factory = STORE_FACTORIES[domain]
    return get_or_create_state_value(f"{STATE_PREFIX}store_{domain}", lambda: factory(get_api_client()))


def get_config_store() -> ConfigStore:
    return get_or_create_state_value(f"{STATE_PREFIX}store_config", lambda: ConfigStore(get_api_client()))


def get_dashboard_store() -> DashboardStore:
    return get_or_create_state_value(f"{STATE_PREFIX}store_dashboard", lambda: DashboardStore(get_api_client()))


def get_filter_state(domain: str, seed: Optional[Mapping[str, Any]] = None) -> FilterReconciliation:
    """
    Filter state for the current page mount, bound to the session store.

    Reruns of the same page reuse it. A new deep-link seed or a change in the
    signed-in admin's scope starts a new mount, so ``seed_from_external``
    runs again for it. The store and its applied filters are kept.
    """
    store = get_domain_store(domain)
    pinned = scope_overrides(get_auth_store().admin, domain)
    key = f"{STATE_PREFIX}filters_{domain}"
    mount_key = f"{key}_mount"

    state = st.session_state.get(key)
    mounted_seed, mounted_pinned = st.session_state.get(mount_key, (None, None))
    seed_values = dict(seed) if seed is not None else mounted_seed
    if state is None or seed_values != mounted_seed or pinned != mounted_pinned:
        state = FilterReconciliation.for_store(store, pinned=pinned)
        st.session_state[key] = state
        st.session_state[mount_key] = (seed_values, pinned)
        logger.debug("filter_state_mounted", domain=domain, seed=sorted(seed_values or {}), pinned=sorted(pinned))
    return state


def reset_page_state(prefixes: Optional[Sequence[str]] = None) -> None:
    """
    Remove keys from ``st.session_state`` that start with any of the prefixes.

    Args:
        prefixes: Prefixes to match; defaults to every console key.
    """
    prefixes = tuple(prefixes or (STATE_PREFIX,))
    try:
        state_keys = list(st.session_state.keys())
    except (AttributeError, RuntimeError):
        return

    removed = [key for key in state_keys if any(key.startswith(prefix) for prefix in prefixes)]
    for key in removed:
        st.session_state.pop(key, None)
    logger.debug("session_state_reset", removed=len(removed))
