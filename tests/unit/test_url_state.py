"""
Unit tests for deep-link query parameter helpers.
"""

from __future__ import annotations

from typing import Any, Dict

import pytest

from chicken_admin.domain.filters import BetFilters, PlayerSummaryFilters
from chicken_admin.ui.helpers import url_state


class DummyStreamlit:
    def __init__(self, params: Dict[str, Any] | None = None) -> None:
        self.query_params: Dict[str, Any] = dict(params or {})


def test_normalize_query_value():
    assert url_state.normalize_query_value(["agent007", "other"]) == "agent007"
    assert url_state.normalize_query_value([]) is None
    assert url_state.normalize_query_value("  ") is None
    assert url_state.normalize_query_value(7) == "7"


def test_extract_seed_keeps_allowed_non_empty_keys():
    params = {"agentId": "agent007", "userId": "", "playerId": ["p1"], "page": "4"}

    assert url_state.extract_seed(params) == {"agentId": "agent007", "playerId": "p1"}
    assert url_state.extract_seed(params, ["page"]) == {"page": "4"}


def test_read_seed_from_streamlit(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(url_state, "st", DummyStreamlit({"agentId": "agent007", "tab": "bets"}))

    assert url_state.read_seed() == {"agentId": "agent007"}


def test_read_query_params_without_streamlit_api(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(url_state, "st", object())

    assert url_state.read_query_params() == {}


def test_update_query_params_updates_mapping(monkeypatch: pytest.MonkeyPatch):
    dummy = DummyStreamlit({"agentId": "agent001"})
    monkeypatch.setattr(url_state, "st", dummy)

    assert url_state.update_query_params({"agentId": "agent007", "userId": "u1"}) is True
    assert dummy.query_params == {"agentId": "agent007", "userId": "u1"}

    assert url_state.update_query_params({"userId": None}) is True
    assert "userId" not in dummy.query_params

    # No change should return False
    assert url_state.update_query_params({"agentId": "agent007"}) is False


def test_sync_query_params_mirrors_applied_identity_filters(monkeypatch: pytest.MonkeyPatch):
    dummy = DummyStreamlit({"agentId": "stale", "playerId": "p1", "tab": "summary"})
    monkeypatch.setattr(url_state, "st", dummy)

    changed = url_state.sync_query_params(BetFilters(user_id="u9", platform="SPADE"))

    assert changed is True
    # playerId is not a bets filter, so it is left alone.
    assert dummy.query_params == {"userId": "u9", "playerId": "p1", "tab": "summary"}


def test_sync_query_params_is_a_noop_when_in_step(monkeypatch: pytest.MonkeyPatch):
    dummy = DummyStreamlit({"playerId": "p1"})
    monkeypatch.setattr(url_state, "st", dummy)

    assert url_state.sync_query_params(PlayerSummaryFilters(player_id="p1")) is False
