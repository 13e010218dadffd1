"""Generic value-to-text renderer with a per-node filter hook.

The renderer turns nested Python values into Python-literal-like text and asks
an optional filter at every node whether it wants to replace the value, supply
pre-rendered text, attach a comment or hide mapping keys. It knows nothing
about truncation; the partial dumper plugs its policy in through the filter.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable

DEFAULT_WIDTH = 80
DEFAULT_INDENT = 2

_KEEP = object()


class NodeKind(str, Enum):
    """Shape of one value node."""

    SCALAR = "scalar"
    SEQUENCE = "sequence"
    MAPPING = "mapping"


def classify(value: Any) -> NodeKind:
    """Return the node shape of a value."""
    if isinstance(value, Mapping):
        return NodeKind.MAPPING
    if isinstance(value, (list, tuple, set, frozenset)):
        return NodeKind.SEQUENCE
    return NodeKind.SCALAR


@dataclass(frozen=True)
class NodeContext:
    """Where the renderer currently is, as seen by a node filter."""

    kind: NodeKind
    depth: int
    path: str
    class_name: str
    ancestors: frozenset[int] = field(default_factory=frozenset)

    @property
    def is_scalar(self) -> bool:
        return self.kind is NodeKind.SCALAR

    @property
    def is_sequence(self) -> bool:
        return self.kind is NodeKind.SEQUENCE

    @property
    def is_mapping(self) -> bool:
        return self.kind is NodeKind.MAPPING


@dataclass(frozen=True)
class FilterResult:
    """Instruction returned by a node filter.

    ``value`` replaces the node (its children are still filtered), ``dump`` is
    used verbatim as the node text, ``comment`` is emitted as a ``# ...`` line
    above the node and ``hide_keys`` removes entries from a mapping node.
    """

    value: Any = _KEEP
    dump: str | None = None
    comment: str | None = None
    hide_keys: tuple[Any, ...] = ()

    @property
    def replaces_value(self) -> bool:
        return self.value is not _KEEP


NodeFilter = Callable[[NodeContext, Any], "FilterResult | None"]


def scalar_repr(value: Any) -> str:
    """Return ``repr(value)`` without ever raising."""
    try:
        return repr(value)
    except Exception as exc:
        return f"<{type(value).__qualname__} (repr failed: {type(exc).__name__}: {exc})>"


class Renderer:
    """Render values into nested, syntactically balanced text."""

    def __init__(
        self,
        *,
        node_filter: NodeFilter | None = None,
        width: int = DEFAULT_WIDTH,
        indent: int = DEFAULT_INDENT,
    ) -> None:
        self._filter = node_filter
        self._width = width
        self._indent = indent

    def render(
        self,
        *values: Any,
        depth: int = 0,
        path: str | None = None,
        ancestors: frozenset[int] = frozenset(),
    ) -> str:
        """Render one value, or several values as a parenthesised group.

        ``depth``, ``path`` and ``ancestors`` seed the node context so a nested
        render of part of a larger value reports its real location and still
        detects cycles through the outer value.
        """
        if len(values) == 1:
            comment, text = self._node(values[0], depth, path or "value", 0, ancestors)
            return f"# {comment}\n{text}" if comment else text
        items = []
        for index, value in enumerate(values):
            comment, text = self._node(value, depth, f"values[{index}]", 1, ancestors)
            items.append((comment, text))
        return self._layout("(", ")", items, 0)

    def _node(
        self,
        value: Any,
        depth: int,
        path: str,
        level: int,
        ancestors: frozenset[int],
    ) -> tuple[str | None, str]:
        """Return ``(comment, text)`` for one node."""
        kind = classify(value)
        if kind is not NodeKind.SCALAR and id(value) in ancestors:
            return None, f"<Recursion on {type(value).__name__} with id={id(value)}>"

        comment = None
        hide_keys: tuple[Any, ...] = ()
        if self._filter is not None:
            ctx = NodeContext(
                kind=kind,
                depth=depth,
                path=path,
                class_name=type(value).__name__,
                ancestors=ancestors,
            )
            result = self._filter(ctx, value)
            if result is not None:
                comment = result.comment
                if result.dump is not None:
                    return comment, result.dump
                if result.replaces_value:
                    value = result.value
                    kind = classify(value)
                hide_keys = tuple(result.hide_keys)

        if kind is NodeKind.SCALAR:
            return comment, scalar_repr(value)

        inner = ancestors | {id(value)}
        if kind is NodeKind.MAPPING:
            items = []
            for key, item in value.items():
                if key in hide_keys:
                    continue
                key_text = scalar_repr(key)
                item_comment, item_text = self._node(item, depth + 1, f"{path}[{key_text}]", level + 1, inner)
                items.append((item_comment, f"{key_text}: {item_text}"))
            return comment, self._layout("{", "}", items, level)

        items = [
            self._node(item, depth + 1, f"{path}[{index}]", level + 1, inner)
            for index, item in enumerate(value)
        ]
        if isinstance(value, (set, frozenset)):
            if not items:
                return comment, "set()"
            return comment, self._layout("{", "}", items, level)
        if isinstance(value, tuple):
            if len(items) == 1 and items[0][0] is None and "\n" not in items[0][1]:
                return comment, f"({items[0][1]},)"
            return comment, self._layout("(", ")", items, level)
        return comment, self._layout("[", "]", items, level)

    def _layout(
        self,
        opener: str,
        closer: str,
        items: list[tuple[str | None, str]],
        level: int,
    ) -> str:
        """Join item texts on one line when they fit, one per line otherwise."""
        texts = [text for _, text in items]
        one_line = opener + ", ".join(texts) + closer
        multiline = any(comment for comment, _ in items) or any("\n" in text for text in texts)
        if not multiline and level * self._indent + len(one_line) <= self._width:
            return one_line

        pad = " " * (self._indent * (level + 1))
        lines = [opener]
        for comment, text in items:
            if comment:
                lines.append(f"{pad}# {comment}")
            lines.append(f"{pad}{text},")
        lines.append(" " * (self._indent * level) + closer)
        return "\n".join(lines)
