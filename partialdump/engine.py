"""Truncation engine: decides per node whether to clip, shrink or keep it.

The engine does not walk values itself. It is installed as the renderer's node
filter and reacts to every node the renderer visits. When a container has to
be reduced, the reduced copy is rendered by a nested pass of the same engine
and the truncation marker is patched into that text before it is handed back
to the outer renderer as pre-rendered text.
"""

from __future__ import annotations

import logging
import re
import sys
from collections.abc import Mapping
from dataclasses import dataclass
from itertools import islice
from typing import Any

from .budget import ELLIPSIS, finalize
from .config import DumpOptions
from .key_selector import drop_hidden_keys, select_keys
from .pair_transform import transform_pairs
from .renderer import FilterResult, NodeContext, NodeKind, Renderer, scalar_repr

LOG = logging.getLogger(__name__)

_TRAILING_CLOSER_RE = re.compile(r"(?:,\s*)?([\]\)}])$")
_EMPTY_CONTAINERS = {"[]", "()", "{}"}
# Only comments make the renderer break a container over several lines.
_ONE_LINE_WIDTH = sys.maxsize


def mark_truncated(text: str) -> str:
    """Insert ``, ...`` before the closing delimiter of rendered container text.

    An optional trailing ``, `` is absorbed so the marker is never preceded by
    a doubled separator. An empty container becomes ``[...]`` / ``{...}``.
    """
    if text in _EMPTY_CONTAINERS:
        return f"{text[0]}{ELLIPSIS}{text[1]}"
    return _TRAILING_CLOSER_RE.sub(rf", {ELLIPSIS}\1", text, count=1)


@dataclass(frozen=True)
class RenderPass:
    """State of one (possibly nested) rendering pass.

    ``root_depth`` is the depth of a root node that an outer pass already
    reduced, ``None`` for an outermost pass. Nested (inner) passes render text
    that is spliced into a parent's output, so the total-length cap is off.
    ``skip_pair_filter_once`` means the root mapping was already transformed.
    """

    root_depth: int | None = None
    skip_pair_filter_once: bool = False

    @property
    def inner(self) -> bool:
        return self.root_depth is not None


OUTER_PASS = RenderPass()


class PartialDumper:
    """Render values compactly and partially according to ``DumpOptions``."""

    def __init__(self, options: DumpOptions | None = None) -> None:
        self._opts = options if options is not None else DumpOptions()

    @property
    def options(self) -> DumpOptions:
        return self._opts

    def dump(self, *values: Any) -> str:
        """Render values into one bounded line."""
        return self._render(values, OUTER_PASS)

    def _render(self, values: tuple[Any, ...], render_pass: RenderPass, **seed: Any) -> str:
        def node_filter(ctx: NodeContext, value: Any) -> FilterResult | None:
            return self._filter(render_pass, ctx, value)

        raw = Renderer(node_filter=node_filter, width=_ONE_LINE_WIDTH).render(*values, **seed)
        return finalize(raw, 0 if render_pass.inner else self._opts.max_total_len)

    def _render_reduced(self, ctx: NodeContext, original: Any, reduced: Any, *, skip_pair_filter: bool) -> str:
        """Render ``reduced`` in a nested pass, in place of ``original`` at ``ctx``.

        The original container stays on the ancestor chain so cycles through
        it are still detected inside the reduced copy.
        """
        nested = RenderPass(root_depth=ctx.depth, skip_pair_filter_once=skip_pair_filter)
        return self._render(
            (reduced,),
            nested,
            depth=ctx.depth,
            path=ctx.path,
            ancestors=ctx.ancestors | {id(original)},
        )

    def _filter(self, render_pass: RenderPass, ctx: NodeContext, value: Any) -> FilterResult | None:
        opts = self._opts
        reduced_root = render_pass.root_depth == ctx.depth

        if ctx.kind is NodeKind.SCALAR:
            result = self._clip_scalar(value)
            if result is not None:
                return result
        elif ctx.kind is NodeKind.SEQUENCE:
            if not reduced_root and opts.max_elems and len(value) > opts.max_elems:
                return self._truncate_sequence(ctx, value)
        else:
            result = self._reduce_mapping(
                ctx,
                value,
                transform=not (reduced_root and render_pass.skip_pair_filter_once),
                check_size=not reduced_root,
            )
            if result is not None:
                return result

        # The root of a nested pass was already handled by the outer pass.
        if opts.dd_filter is not None and not reduced_root:
            return opts.dd_filter(ctx, value)
        return None

    def _clip_scalar(self, value: Any) -> FilterResult | None:
        max_len = self._opts.max_len
        if not max_len:
            return None
        keep = max_len - len(ELLIPSIS)
        if isinstance(value, str):
            if len(value) > max_len:
                return FilterResult(value=value[:keep] + ELLIPSIS)
            return None
        if isinstance(value, (bytes, bytearray)):
            if len(value) > max_len:
                return FilterResult(value=bytes(value[:keep]) + ELLIPSIS.encode())
            return None
        text = scalar_repr(value)
        if len(text) > max_len:
            return FilterResult(dump=text[:keep] + ELLIPSIS)
        return None

    def _truncate_sequence(self, ctx: NodeContext, value: Any) -> FilterResult:
        max_elems = self._opts.max_elems
        LOG.debug("Truncating %s at %s: %d > %d elements", ctx.class_name, ctx.path, len(value), max_elems)
        head = islice(value, max_elems)
        if isinstance(value, (set, frozenset)):
            reduced: Any = set(head)
        elif isinstance(value, tuple):
            reduced = tuple(head)
        else:
            reduced = list(head)
        text = self._render_reduced(ctx, value, reduced, skip_pair_filter=False)
        return FilterResult(dump=mark_truncated(text))

    def _reduce_mapping(
        self,
        ctx: NodeContext,
        value: Mapping[Any, Any],
        *,
        transform: bool,
        check_size: bool,
    ) -> FilterResult | None:
        opts = self._opts
        working: dict[Any, Any] = dict(value)
        modified = False
        if transform:
            working, modified = transform_pairs(
                value,
                pair_filter=opts.pair_filter,
                mask_pattern=opts.mask_keys_regex,
            )
            if opts.hide_keys:
                visible = drop_hidden_keys(working, opts.hide_keys)
                modified = modified or len(visible) != len(working)
                working = visible

        max_keys = opts.effective_max_keys
        truncated = check_size and bool(max_keys) and len(value) > max_keys
        if truncated:
            LOG.debug("Truncating %s at %s: %d > %d keys", ctx.class_name, ctx.path, len(value), max_keys)
            working = select_keys(
                working,
                max_keys,
                protected=opts.precious_keys,
                deprioritized=opts.worthless_keys,
                hidden=opts.hide_keys,
            )
        if not (modified or truncated):
            return None

        text = self._render_reduced(ctx, value, working, skip_pair_filter=True)
        return FilterResult(dump=mark_truncated(text) if truncated else text)
