"""Command line front end: dump JSON or YAML documents as one bounded line."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, TextIO

import yaml
from pydantic import ValidationError

from .config import DumpOptions, load_config
from .engine import PartialDumper
from .logging_utils import setup_logging

LOG = logging.getLogger(__name__)

_FLAG_OPTIONS = (
    "max_total_len",
    "max_len",
    "max_keys",
    "max_elems",
    "precious_keys",
    "worthless_keys",
    "hide_keys",
    "mask_keys_regex",
)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="partialdump",
        description="Dump JSON or YAML documents compactly and potentially partially on one line.",
    )
    parser.add_argument("--config", default=None, help="Path to config YAML")
    parser.add_argument("--format", choices=["json", "yaml"], default="json", help="Input document format")
    parser.add_argument("--max-total-len", type=int, default=None, help="Cap on the whole output line (0 disables)")
    parser.add_argument("--max-len", type=int, default=None, help="Clip scalars longer than this (0 disables)")
    parser.add_argument("--max-keys", type=int, default=None, help="Show at most this many mapping keys (0 disables)")
    parser.add_argument("--max-elems", type=int, default=None, help="Show at most this many elements (0 disables)")
    parser.add_argument("--precious-key", dest="precious_keys", action="append", default=None, help="Never drop this key")
    parser.add_argument("--worthless-key", dest="worthless_keys", action="append", default=None, help="Drop this key first")
    parser.add_argument("--hide-key", dest="hide_keys", action="append", default=None, help="Always drop this key")
    parser.add_argument("--mask-keys-regex", default=None, help="Mask values of keys matching this regex")
    parser.add_argument("files", nargs="*", help="Input files, '-' or nothing for stdin")
    return parser


def _read_documents(handle: TextIO, fmt: str) -> list[Any]:
    """Parse every document from one input stream."""
    if fmt == "yaml":
        return list(yaml.safe_load_all(handle))
    return [json.load(handle)]


def _load_inputs(files: list[str], fmt: str) -> list[Any]:
    documents: list[Any] = []
    for name in files or ["-"]:
        if name == "-":
            documents.extend(_read_documents(sys.stdin, fmt))
            continue
        with open(name, "r", encoding="utf-8") as handle:
            documents.extend(_read_documents(handle, fmt))
        LOG.debug("Loaded %s", name)
    return documents


def main(argv: list[str] | None = None) -> None:
    """CLI entry point that loads configuration and prints one partial dump."""

    def fail(message: str, exit_code: int = 2) -> None:
        """Print startup error and terminate process."""
        print(f"ERROR: {message}", file=sys.stderr)
        raise SystemExit(exit_code)

    args = _build_parser().parse_args(argv)

    try:
        cfg = load_config(args.config)
        overrides = {name: getattr(args, name) for name in _FLAG_OPTIONS if getattr(args, name) is not None}
        options = DumpOptions.model_validate({**dict(cfg.options), **overrides})
    except ValidationError as exc:
        fail(f"Invalid configuration: {exc}")
    except Exception as exc:
        fail(f"Failed to load configuration: {exc}")

    setup_logging(cfg.logging, options)

    try:
        documents = _load_inputs(args.files, args.format)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        fail(f"Failed to read input: {exc}")

    if not documents:
        fail("No input documents")

    print(PartialDumper(options).dump(*documents))


if __name__ == "__main__":
    main()
