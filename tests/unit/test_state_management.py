"""
Unit tests for per-session store holders.
"""

import asyncio
from typing import Any, Dict

import pytest

from chicken_admin.domain.models import Admin, AdminRole
from chicken_admin.stores import AuthStore, BetStore
from chicken_admin.ui.filter_state import FilterReconciliation
from chicken_admin.ui.utils import state_management


AGENT_ADMIN = Admin(id="2", username="agentadmin", role=AdminRole.AGENT, agent_id="agent001")


class DummyStreamlit:
    def __init__(self) -> None:
        self.session_state: Dict[str, Any] = {}


@pytest.fixture
def dummy_st(monkeypatch: pytest.MonkeyPatch) -> DummyStreamlit:
    dummy = DummyStreamlit()
    monkeypatch.setattr(state_management, "st", dummy)
    return dummy


def test_get_or_create_state_value_calls_loader_once(dummy_st):
    calls = []

    def loader():
        calls.append(1)
        return {"value": len(calls)}

    first = state_management.get_or_create_state_value("k", loader)
    second = state_management.get_or_create_state_value("k", loader)

    assert first is second
    assert calls == [1]


def test_stores_are_shared_within_a_session(dummy_st):
    store = state_management.get_domain_store("bets")

    assert isinstance(store, BetStore)
    assert state_management.get_domain_store("bets") is store
    assert store.api is state_management.get_api_client()


def test_api_client_is_wired_to_auth_store(dummy_st):
    auth = state_management.get_auth_store()
    client = state_management.get_api_client()

    assert isinstance(auth, AuthStore)
    assert auth.api is client
    assert client.on_unauthorized == auth.invalidate


def test_filter_state_is_bound_to_session_store(dummy_st):
    filters = state_management.get_filter_state("agents")

    assert isinstance(filters, FilterReconciliation)
    assert filters.store is state_management.get_domain_store("agents")
    assert filters.get_draft().has_date_range


def test_reset_page_state_only_clears_console_keys(dummy_st):
    dummy_st.session_state["other_widget"] = 1
    state_management.get_auth_store()

    state_management.reset_page_state()

    assert dummy_st.session_state == {"other_widget": 1}


def test_config_and_dashboard_stores_share_the_client(dummy_st):
    config_store = state_management.get_config_store()
    dashboard_store = state_management.get_dashboard_store()

    assert config_store is state_management.get_config_store()
    assert config_store.api is dashboard_store.api is state_management.get_api_client()


def test_new_deep_link_starts_a_new_mount(dummy_st, fake_api):
    """
    Given bets already seeded from ?agentId=agent007
    When the page is opened again with ?agentId=agent008
    Then the new seed is applied while plain reruns keep the same state
    """
    store = BetStore(fake_api)
    dummy_st.session_state[f"{state_management.STATE_PREFIX}store_bets"] = store

    def mount(seed):
        state = state_management.get_filter_state("bets", seed)
        return state, asyncio.run(state.seed_from_external(seed))

    first, _ = mount({"agentId": "agent007"})
    rerun, rerun_outcome = mount({"agentId": "agent007"})
    second, outcome = mount({"agentId": "agent008"})

    assert rerun is first
    assert rerun_outcome is None
    assert state_management.get_filter_state("bets") is second
    assert second is not first
    assert outcome is not None
    assert second.get_applied().agent_id == "agent008"
    assert store.applied_filters.agent_id == "agent008"


def test_agent_admin_filter_state_is_pinned(dummy_st):
    state = state_management.get_filter_state("users")
    assert state.pinned == {}

    state_management.get_auth_store().admin = AGENT_ADMIN
    pinned = state_management.get_filter_state("users")

    assert pinned is not state
    assert pinned.pinned == {"agentId": "agent001"}
    assert pinned.get_draft().agent_id == "agent001"
    assert state_management.get_filter_state("player-summary").pinned == {}
