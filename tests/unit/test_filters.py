"""
Unit tests for filter set normalisation and validation.
"""

import pytest

from chicken_admin.core.errors import FilterValidationError
from chicken_admin.domain.filters import AgentFilters, BetFilters, PlayerSummaryFilters, UserFilters, wire_name
from chicken_admin.domain.models import BetStatus, Difficulty


def test_wire_names_are_camel_case():
    assert wire_name("from_date") == "fromDate"
    assert wire_name("agent_id") == "agentId"
    assert wire_name("created_to") == "createdTo"
    assert wire_name("page") == "page"


def test_changing_a_filter_resets_page():
    filters = BetFilters(page=3)

    changed = filters.with_changes(platform="SPADE")

    assert changed.page == 1
    assert changed.platform == "SPADE"


def test_explicit_page_survives_filter_change():
    changed = BetFilters(page=3).with_changes(platform="SPADE", page=4)

    assert changed.page == 4


def test_setting_the_same_value_keeps_page():
    filters = BetFilters(page=3, platform="SPADE")

    assert filters.with_changes(platform=" SPADE ").page == 3


def test_wire_keys_are_accepted_and_text_is_trimmed():
    filters = PlayerSummaryFilters().with_changes(playerId="  p-42 ", agentId="")

    assert filters.player_id == "p-42"
    assert filters.agent_id is None


def test_unknown_field_is_rejected():
    with pytest.raises(FilterValidationError) as excinfo:
        BetFilters().with_changes(colour="red")
    assert excinfo.value.field == "colour"


def test_enum_values_are_coerced_or_rejected():
    filters = BetFilters().with_changes(status="won", difficulty="Hard")

    assert filters.status is BetStatus.WON
    assert filters.difficulty is Difficulty.HARD

    with pytest.raises(FilterValidationError):
        BetFilters().with_changes(status="REFUNDED")


@pytest.mark.parametrize("page", [0, -1, "abc", 1.5, True])
def test_malformed_page_is_rejected(page):
    with pytest.raises(FilterValidationError):
        BetFilters().with_pagination(page=page)


def test_limit_is_capped():
    assert BetFilters().with_pagination(limit="50").limit == 50
    with pytest.raises(FilterValidationError):
        BetFilters().with_pagination(limit=101)


def test_from_mapping_accepts_wire_keys():
    filters = AgentFilters.from_mapping({"agentId": "agent007", "page": "2", "limit": 50})

    assert filters.agent_id == "agent007"
    assert filters.page == 2
    assert filters.limit == 50


def test_reversed_date_range_is_rejected():
    filters = BetFilters(from_date="2024-03-10", to_date="2024-03-01")

    with pytest.raises(FilterValidationError) as excinfo:
        filters.validate()
    assert excinfo.value.field == "from_date"


def test_same_day_range_is_valid():
    BetFilters(from_date="2024-03-10", to_date="2024-03-10").validate()


@pytest.mark.parametrize("value", ["not-a-date", "2024-13-01"])
def test_unparseable_dates_are_rejected(value):
    with pytest.raises(FilterValidationError):
        BetFilters(from_date=value).validate()


def test_normalized_snaps_dates_to_console_day_bounds():
    filters = BetFilters(from_date="2024-03-10", to_date="2024-03-10", platform=" SPADE ").normalized()

    assert filters.from_date == "2024-03-09T18:30:00.000Z"
    assert filters.to_date == "2024-03-10T18:29:59.999Z"
    assert filters.platform == "SPADE"


def test_normalized_is_idempotent():
    once = BetFilters(from_date="2024-03-01T10:00:00Z", to_date="2024-03-10").normalized()

    assert once.normalized() == once


def test_user_date_range_uses_created_fields():
    filters = UserFilters().with_date_range("2024-01-01", "2024-01-31")

    assert filters.created_from == "2024-01-01"
    assert filters.created_to == "2024-01-31"
    assert filters.has_date_range


def test_same_filters_ignores_pagination():
    assert BetFilters(platform="SPADE", page=1).same_filters(BetFilters(platform="SPADE", page=5, limit=50))
    assert not BetFilters(platform="SPADE").same_filters(BetFilters(platform="JILI"))
