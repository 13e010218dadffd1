"""Public entry points for compact, partial dumps of data structures.

Typical use::

    dump_partial([1, "some long string", 3, 4, 5, 6, 7])
    # "[1, 'some long string', 3, 4, 5, ...]"

    dump_partial(data, more_data, {"max_total_len": 50, "max_keys": 4})
    dump_partial(data, max_keys=4, precious_keys=["id"])

The output always fits on one line. It is meant for logs, debug output and
audit trails and is not guaranteed to evaluate back to the original value.
"""

from __future__ import annotations

import sys
from collections.abc import Mapping
from typing import Any, TextIO

from .config import DumpOptions
from .engine import PartialDumper


class PartialDumpUsageError(TypeError):
    """Raised when dump_partial is called with an unusable argument list."""


def _split_arguments(values: tuple[Any, ...], overrides: dict[str, Any]) -> tuple[tuple[Any, ...], DumpOptions]:
    """Separate data values from the trailing options argument.

    A trailing options argument is only recognised when more than one
    positional argument is given; a single argument is always data.
    """
    if not values:
        raise PartialDumpUsageError("dump_partial() needs at least one value to dump")
    if len(values) == 1:
        return values, DumpOptions.model_validate(overrides)

    *data, last = values
    if isinstance(last, (DumpOptions, Mapping)):
        base = dict(last)
    else:
        raise PartialDumpUsageError(
            "when dumping more than one value the last argument must be an options mapping, "
            f"got {type(last).__name__}"
        )
    return tuple(data), DumpOptions.model_validate({**base, **overrides})


def dump_partial(*values: Any, **options: Any) -> str:
    """Dump one or more values compactly and potentially partially.

    Compactly means comments, indentation and newlines are removed so the
    output fits in one line. Partially means only a limited scalar length,
    number of sequence elements and number of mapping keys are shown, and the
    whole line is capped to ``max_total_len`` characters. See ``DumpOptions``
    for the recognised options.
    """
    data, opts = _split_arguments(values, options)
    return PartialDumper(opts).dump(*data)


dumpp = dump_partial


def print_partial(*values: Any, file: TextIO | None = None, **options: Any) -> str:
    """Dump values like ``dump_partial`` and write the line to ``file`` (stderr by default)."""
    out = dump_partial(*values, **options)
    print(out, file=file if file is not None else sys.stderr)
    return out


class LazyPartial:
    """Defer a partial dump until the object is formatted.

    Intended for logging calls, where nothing should be rendered unless the
    record is actually emitted::

        LOG.debug("request payload %s", LazyPartial(payload, max_keys=8))
    """

    def __init__(self, *values: Any, **options: Any) -> None:
        self._data, self._options = _split_arguments(values, options)

    def __str__(self) -> str:
        return PartialDumper(self._options).dump(*self._data)

    def __repr__(self) -> str:
        return f"LazyPartial({self})"
