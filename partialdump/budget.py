"""Single-line normalization and the total-length cap."""

from __future__ import annotations

import re

ELLIPSIS = "..."

_COMMENT_LINE_RE = re.compile(r"^\s*#.*", re.MULTILINE)
_INDENT_RE = re.compile(r"^\s+", re.MULTILINE)
_OPENER_BREAK_RE = re.compile(r"([\[\(\{])\n+")
_CLOSER_BREAK_RE = re.compile(r",?\n+([\]\)\}])")
_NEWLINES_RE = re.compile(r"\n+")


def normalize_text(raw: str) -> str:
    """Drop comment lines and indentation, and fold everything onto one line."""
    text = _COMMENT_LINE_RE.sub("", raw)
    text = _INDENT_RE.sub("", text)
    text = _OPENER_BREAK_RE.sub(r"\1", text)
    text = _CLOSER_BREAK_RE.sub(r"\1", text)
    text = _NEWLINES_RE.sub(" ", text)
    return text.strip()


def finalize(raw: str, max_total_len: int) -> str:
    """Normalize rendered text and cap it to ``max_total_len`` characters.

    A cut result keeps ``max_total_len - 3`` characters followed by ``...``.
    ``max_total_len == 0`` disables the cap.
    """
    out = normalize_text(raw)
    if max_total_len and len(out) > max_total_len:
        out = out[: max(max_total_len - len(ELLIPSIS), 0)] + ELLIPSIS
    return out
