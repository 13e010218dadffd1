"""Per-entry rewriting of mappings: custom pair filters and key masking."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from re import Pattern
from typing import Any, Callable

MASK_TOKEN = "***"

PairFilter = Callable[[Any, Any], "Iterable[tuple[Any, Any]] | Mapping[Any, Any] | None"]


def _filtered_pairs(pair_filter: PairFilter | None, key: Any, value: Any) -> list[tuple[Any, Any]]:
    """Run the pair filter for one entry; ``None`` keeps the entry as it is."""
    if pair_filter is None:
        return [(key, value)]
    result = pair_filter(key, value)
    if result is None:
        return [(key, value)]
    if isinstance(result, Mapping):
        return list(result.items())
    return [(new_key, new_value) for new_key, new_value in result]


def transform_pairs(
    mapping: Mapping[Any, Any],
    *,
    pair_filter: PairFilter | None = None,
    mask_pattern: Pattern[str] | None = None,
) -> tuple[dict[Any, Any], bool]:
    """Return a rewritten copy of ``mapping`` and whether anything changed.

    ``pair_filter(key, value)`` may return zero or more replacement pairs, so an
    entry can be dropped, renamed, masked or fanned out. Afterwards every key
    whose text matches ``mask_pattern`` gets its value replaced by
    ``MASK_TOKEN``. A value that already is the mask token is left alone.
    """
    out: dict[Any, Any] = {}
    modified = False
    for key, value in mapping.items():
        pairs = _filtered_pairs(pair_filter, key, value)
        if len(pairs) != 1 or pairs[0][0] != key or pairs[0][1] is not value:
            modified = True
        for new_key, new_value in pairs:
            if mask_pattern is not None and mask_pattern.search(str(new_key)):
                if not (isinstance(new_value, str) and new_value == MASK_TOKEN):
                    new_value = MASK_TOKEN
                    modified = True
            if new_key in out:
                modified = True
            out[new_key] = new_value
    return out, modified
