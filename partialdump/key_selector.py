"""Choose which mapping entries survive when a mapping must be shortened."""

from __future__ import annotations

from collections.abc import Collection, Mapping
from typing import Any


def drop_hidden_keys(mapping: Mapping[Any, Any], hidden: Collection[Any] = ()) -> dict[Any, Any]:
    """Return a copy of ``mapping`` without the hidden keys."""
    return {key: value for key, value in mapping.items() if key not in hidden}


def select_keys(
    mapping: Mapping[Any, Any],
    limit: int,
    *,
    protected: Collection[Any] = (),
    deprioritized: Collection[Any] = (),
    hidden: Collection[Any] = (),
) -> dict[Any, Any]:
    """Reduce ``mapping`` to at most ``limit`` keys.

    Keys are removed in three stages, stopping as soon as the mapping fits:
    every hidden key, then deprioritized keys, then any key that is not
    protected. The limit is raised to the number of distinct protected keys so
    all of them can be kept. Hidden keys are removed even when they are also protected.

    Within a stage keys are visited from the last one to the first one, so the
    leading entries of an ordered mapping are the ones that survive.
    """
    limit = max(limit, len(set(protected)))
    reduced = drop_hidden_keys(mapping, hidden)

    for key in reversed(list(reduced)):
        if len(reduced) <= limit:
            return reduced
        if key in deprioritized:
            del reduced[key]

    for key in reversed(list(reduced)):
        if len(reduced) <= limit:
            break
        if key not in protected:
            del reduced[key]
    return reduced
