"""
Query parameter builder for the admin API list and totals endpoints.

Maps a typed filter set onto the canonical query-parameter contract:

- empty fields (``None`` or whitespace-only strings) are omitted entirely
- dates pass through verbatim; callers normalise them before committing
- ``page`` and ``limit`` are stringified
- keys are emitted in sorted order so equal filters give equal output

Everything here is pure.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlencode

from chicken_admin.domain.filters import PAGINATION_FIELDS, FilterSet, wire_name

_PAGINATION_WIRE_KEYS = frozenset(wire_name(name) for name in PAGINATION_FIELDS)


def _to_param(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, bool):
        return "true" if value else "false"
    text = str(value).strip()
    return text or None


def build_query_params(filters: FilterSet) -> Dict[str, str]:
    """
    Build the list-endpoint query parameters for ``filters``.

    Returns:
        Mapping of wire key to string value, sorted by key.
    """
    params: Dict[str, str] = {}
    for key, raw in filters.to_wire().items():
        value = _to_param(raw)
        if value is None:
            continue
        params[key] = value
    return dict(sorted(params.items()))


def build_totals_params(filters: FilterSet) -> Dict[str, str]:
    """Same as :func:`build_query_params` without ``page``/``limit``."""
    return {
        key: value
        for key, value in build_query_params(filters).items()
        if key not in _PAGINATION_WIRE_KEYS
    }


def to_query_string(params: Mapping[str, str]) -> str:
    """Canonical ``a=1&b=2`` rendering used for logging and memo keys."""
    return urlencode(sorted(params.items()))


__all__ = ["build_query_params", "build_totals_params", "to_query_string"]
