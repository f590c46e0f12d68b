"""URL query parameter helpers for deep-link filter seeds."""

from __future__ import annotations

from typing import Any, Dict, Iterable, MutableMapping, Optional, Sequence, Union

import streamlit as st

from chicken_admin.domain.filters import FilterSet
from chicken_admin.services.query_builder import build_query_params

DEFAULT_SEED_KEYS: tuple[str, ...] = ("agentId", "userId", "playerId")


def normalize_query_value(value: Any) -> Optional[str]:
    """
    Coerce Streamlit query param values into normalized strings.
    """
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        if not value:
            return None
        value = value[0]
    text = str(value).strip()
    return text or None


def read_query_params() -> Dict[str, Any]:
    """
    Read the current query parameters, or an empty mapping outside a script run.
    """
    params = getattr(st, "query_params", None)
    if params is None:
        return {}
    try:
        return dict(params)
    except (AttributeError, RuntimeError, TypeError):
        return {}


def extract_seed(params: Dict[str, Any], allowed_keys: Iterable[str] = DEFAULT_SEED_KEYS) -> Dict[str, str]:
    """
    Pick the deep-link filter values out of ``params``.

    Only ``allowed_keys`` are kept; blank values are dropped.
    """
    seed: Dict[str, str] = {}
    for key in allowed_keys:
        value = normalize_query_value(params.get(key))
        if value is not None:
            seed[key] = value
    return seed


def read_seed(allowed_keys: Iterable[str] = DEFAULT_SEED_KEYS) -> Dict[str, str]:
    return extract_seed(read_query_params(), allowed_keys)


def update_query_params(
    updates: Dict[str, Optional[Union[str, Sequence[str]]]],
) -> bool:
    """
    Bulk update query parameters.

    Args:
        updates: Mapping of query parameter names to new values. ``None`` removes
            a parameter.

    Returns:
        True when any value changed and the URL was updated.
    """
    if not updates:
        return False
    params = getattr(st, "query_params", None)
    if not isinstance(params, MutableMapping):
        return False
    return _apply_updates_to_mapping(params, {key: _normalize_update_value(value) for key, value in updates.items()})


def sync_query_params(filters: FilterSet, keys: Iterable[str] = DEFAULT_SEED_KEYS) -> bool:
    """
    Mirror the applied identity filters into the URL so a reload keeps the deep link.

    Keys the filter set does not carry are left alone.
    """
    built = build_query_params(filters)
    wire_keys = set(filters.to_wire())
    updates = {key: built.get(key) for key in keys if key in wire_keys}
    return update_query_params(updates)


def _normalize_update_value(value: Optional[Union[str, Sequence[str]]]) -> Optional[str]:
    if value is None:
        return None
    return normalize_query_value(value)


def _apply_updates_to_mapping(
    params: MutableMapping[str, Any],
    updates: Dict[str, Optional[str]],
) -> bool:
    changed = False
    for key, value in updates.items():
        if value is None:
            if key in params:
                del params[key]
                changed = True
            continue

        if normalize_query_value(params.get(key)) == value:
            continue
        params[key] = value
        changed = True
    return changed
