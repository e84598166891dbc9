"""Command-line interface for symbol-importer."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from document.sketch_file import (
    FILE_SELECTION_ERROR,
    FILE_SELECTION_TEXT,
    close_document,
    has_sketch_extension,
    open_document,
)
from reconcile.errors import SymbolCycleError, SymbolImportError
from reconcile.importer import import_symbols, plan_import
from reconcile.keys import MatchMode
from reconcile.report import build_report, write_report
from settings.config import ConfigError, ImporterConfig, load_config
from verify.verify import check_symbol_graph

IMPORT_BY_NAME = "import-by-name"


def _add_common_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--root",
        default=".",
        help="Directory holding symbolimport.toml (default: .)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log merge decisions (-v info, -vv debug)",
    )


def _add_document_pair(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("target", help="Sketch document to import symbols into")
    parser.add_argument("source", help=FILE_SELECTION_TEXT)


def _add_by_name(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--by-name",
        action="store_true",
        help="Match existing symbols by name instead of identifier",
    )


def _add_import_outputs(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--out",
        default=None,
        help="Where to write the merged document (default: overwrite target)",
    )
    parser.add_argument(
        "--report",
        default=None,
        help="Write a JSON report of every merged symbol to this path",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="symbolimport")
    subparsers = parser.add_subparsers(dest="command", required=True)

    import_parser = subparsers.add_parser(
        "import", help="Import symbols, matching by identifier"
    )
    _add_document_pair(import_parser)
    _add_by_name(import_parser)
    _add_import_outputs(import_parser)
    _add_common_options(import_parser)

    by_name_parser = subparsers.add_parser(
        IMPORT_BY_NAME, help="Import symbols, matching by name"
    )
    _add_document_pair(by_name_parser)
    _add_import_outputs(by_name_parser)
    _add_common_options(by_name_parser)

    plan_parser = subparsers.add_parser(
        "plan", help="Show the merge order and decisions without writing anything"
    )
    _add_document_pair(plan_parser)
    _add_by_name(plan_parser)
    _add_common_options(plan_parser)

    check_parser = subparsers.add_parser(
        "check", help="Check the symbol relationships of a document"
    )
    check_parser.add_argument("document", help="Sketch document to check")
    _add_by_name(check_parser)
    _add_common_options(check_parser)

    return parser


def _configure_logging(level_name: str, verbose: int) -> None:
    level: int | str = level_name
    if verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _resolve_mode(args: argparse.Namespace, config: ImporterConfig) -> MatchMode:
    if args.command == IMPORT_BY_NAME or getattr(args, "by_name", False):
        return MatchMode.NAME
    return MatchMode(config.match_by)


def _resolve_path(value: str) -> Path:
    return Path(value).expanduser().resolve()


def _handle_import(
    args: argparse.Namespace, config: ImporterConfig, mode: MatchMode
) -> int:
    target = _resolve_path(args.target)
    source = _resolve_path(args.source)
    output = _resolve_path(args.out) if args.out else None
    try:
        result = import_symbols(
            target, source, mode=mode, config=config, output_path=output
        )
    except SymbolImportError as exc:
        sys.stderr.write(f"{exc}\n")
        return 2
    except OSError as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 2

    sys.stdout.write(f"{result.message}\n")
    if args.report:
        report = build_report(result, source=source, target=output or target)
        write_report(_resolve_path(args.report), report)
    return 0


def _handle_plan(
    args: argparse.Namespace, config: ImporterConfig, mode: MatchMode
) -> int:
    source_path = _resolve_path(args.source)
    if not has_sketch_extension(source_path):
        sys.stderr.write(f"{FILE_SELECTION_ERROR}\n")
        return 2
    target = open_document(_resolve_path(args.target))
    source = open_document(source_path)
    try:
        if source is None or target is None:
            sys.stderr.write(f"{FILE_SELECTION_ERROR}\n")
            return 2
        try:
            plan = plan_import(target, source, mode=mode, config=config)
        except SymbolCycleError as exc:
            sys.stderr.write(f"{exc}\n")
            return 2
    finally:
        close_document(source)
        close_document(target)

    for index, entry in enumerate(plan, 1):
        sys.stdout.write(
            f"{index}. {entry.action} {entry.name} [{entry.key}] -> {entry.page}\n"
        )
    added = sum(1 for entry in plan if entry.action == "added")
    sys.stdout.write(f"{added} to add, {len(plan) - added} to update.\n")
    return 0


def _handle_check(
    args: argparse.Namespace, config: ImporterConfig, mode: MatchMode
) -> int:
    document = open_document(_resolve_path(args.document))
    if document is None:
        sys.stderr.write(f"{FILE_SELECTION_ERROR}\n")
        return 2
    try:
        result = check_symbol_graph(document, mode)
    finally:
        close_document(document)

    if not result.ok:
        for cycle in result.cycles:
            sys.stderr.write(f"cycle: {', '.join(cycle)}\n")
        for missing in result.missing:
            sys.stderr.write(f"missing: {missing.instance} -> {missing.symbol_id}\n")
        for key in result.duplicate_keys:
            sys.stderr.write(f"duplicate: {key}\n")
        return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(_resolve_path(args.root))
    except ConfigError as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 2

    _configure_logging(config.log_level, args.verbose)
    mode = _resolve_mode(args, config)

    if args.command in {"import", IMPORT_BY_NAME}:
        return _handle_import(args, config, mode)

    if args.command == "plan":
        return _handle_plan(args, config, mode)

    if args.command == "check":
        return _handle_check(args, config, mode)

    raise AssertionError


if __name__ == "__main__":
    raise SystemExit(main())
