"""Turn arbitrary cache keys into comparable strings."""

from __future__ import annotations

import json
from typing import Any

PREFIX = "__cache__"


def _fallback(obj: Any) -> Any:
    # Sets have no order; encode members first so the sort is stable.
    if isinstance(obj, (set, frozenset)):
        members = sorted(_encode(m) for m in obj)
        return {"__" + type(obj).__name__ + "__": members}
    if isinstance(obj, bytes):
        return {"__bytes__": obj.hex()}
    return {"__" + type(obj).__qualname__ + "__": repr(obj)}


def _encode(key: Any) -> str:
    try:
        return json.dumps(key, sort_keys=True, separators=(",", ":"), default=_fallback)
    except (TypeError, ValueError):
        # Mixed-type dict keys can't be sorted, circular structures can't be dumped.
        return json.dumps({"__" + type(key).__qualname__ + "__": repr(key)})


def normalize(key: Any, prefix: str = PREFIX) -> str:
    """Return the lookup string for ``key``.

    Strings are used verbatim. Everything else is dumped as compact JSON
    with sorted mapping keys, so equal dicts match regardless of insertion
    order while lists keep their element order.

    Known aliasing: JSON turns mapping keys into strings, so ``{1: "a"}``
    and ``{"1": "a"}`` share a key, as do ``"1"`` and ``1``. Objects JSON
    cannot encode fall back to ``repr()``, which for plain classes includes
    the memory address, so two equal-looking instances never share a key
    unless the class defines a stable ``__repr__``.
    """
    if isinstance(key, str):
        return prefix + key
    return prefix + _encode(key)
