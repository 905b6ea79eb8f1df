"""Command-line interface for archguard-core."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from engine.run import prepare_run
from logging_config import setup_logging
from model.loader import ModelLoadError
from report.render import render
from rules.catalog import CatalogError, load_catalog
from rules.config import ConfigError, load_config, resolve_catalog_path
from verify.verify import verify_determinism

EXIT_LOAD_ERROR = 2

_LOAD_ERRORS = (ConfigError, CatalogError, ModelLoadError)


def _add_common_paths(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("model", help="Symbol Model JSON file")
    parser.add_argument(
        "--root",
        default=".",
        help="Directory holding archguard.toml (default: .)",
    )
    parser.add_argument(
        "--catalog",
        default=None,
        help="Rule catalog JSON file (default: config catalog or built-in rules)",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="archguard")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("-q", "--quiet", action="store_true", help="Errors only")
    subparsers = parser.add_subparsers(dest="command", required=True)

    check_parser = subparsers.add_parser("check", help="Analyze a Symbol Model")
    _add_common_paths(check_parser)
    check_parser.add_argument(
        "--format",
        choices=["text", "json"],
        default=None,
        help="Report format (default: config report format)",
    )
    check_parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Worker threads for pattern analysis (default: config workers)",
    )

    validate_parser = subparsers.add_parser(
        "validate", help="Load the Symbol Model and rule catalog only"
    )
    _add_common_paths(validate_parser)

    verify_parser = subparsers.add_parser(
        "verify", help="Verify determinism of the report"
    )
    _add_common_paths(verify_parser)
    verify_parser.add_argument(
        "--runs", type=int, default=2, help="Number of runs to compare (default: 2)"
    )

    rules_parser = subparsers.add_parser("rules", help="List the active rules")
    rules_parser.add_argument(
        "--root",
        default=".",
        help="Directory holding archguard.toml (default: .)",
    )
    rules_parser.add_argument("--catalog", default=None, help="Rule catalog JSON file")

    return parser


def _resolve_catalog(catalog: str | None) -> Path | None:
    if catalog is None:
        return None
    return Path(catalog).expanduser().resolve()


def _report_load_error(exc: Exception) -> int:
    sys.stderr.write(f"error: {exc}\n")
    return EXIT_LOAD_ERROR


def _handle_check(root: Path, args: argparse.Namespace) -> int:
    try:
        config = load_config(root)
        if args.workers is not None:
            config = config.model_copy(update={"workers": max(args.workers, 1)})
        run = prepare_run(
            Path(args.model),
            root=root,
            config=config,
            catalog_path=_resolve_catalog(args.catalog),
        )
    except _LOAD_ERRORS as exc:
        return _report_load_error(exc)

    run.analyze()
    report = run.report()
    fmt = args.format or config.report.format
    sys.stdout.write(render(report, fmt).decode("utf-8"))
    return report.exit_status


def _handle_validate(root: Path, args: argparse.Namespace) -> int:
    try:
        run = prepare_run(
            Path(args.model), root=root, catalog_path=_resolve_catalog(args.catalog)
        )
    except _LOAD_ERRORS as exc:
        return _report_load_error(exc)

    sys.stdout.write(
        f"ok: {len(run.model.modules)} modules, "
        f"{len(run.model.symbols_by_id)} symbols, {len(run.catalog)} rules\n"
    )
    return 0


def _handle_verify(root: Path, args: argparse.Namespace) -> int:
    try:
        run = prepare_run(
            Path(args.model), root=root, catalog_path=_resolve_catalog(args.catalog)
        )
    except _LOAD_ERRORS as exc:
        return _report_load_error(exc)

    try:
        result = verify_determinism(run.model, run.catalog, run.config, runs=args.runs)
    except ValueError as exc:
        sys.stderr.write(f"error: {exc}\n")
        return EXIT_LOAD_ERROR

    if not result.ok:
        for index in result.mismatches:
            sys.stderr.write(f"mismatch: run {index} ({result.digests[index]})\n")
        return 1
    sys.stdout.write(f"deterministic: {result.digests[0]}\n")
    return 0


def _handle_rules(root: Path, args: argparse.Namespace) -> int:
    try:
        config = load_config(root)
        catalog_path = _resolve_catalog(args.catalog)
        if catalog_path is None and config.catalog is not None:
            catalog_path = resolve_catalog_path(root, config.catalog)
        catalog = load_catalog(catalog_path, disabled=config.disabled_rules)
    except (ConfigError, CatalogError) as exc:
        return _report_load_error(exc)

    for rule in catalog:
        sys.stdout.write(
            f"{rule.id}\t{rule.severity.value}\t{rule.category.value}\t"
            f"{rule.priority.value}\n"
        )
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    setup_logging(verbose=args.verbose, quiet=args.quiet)
    root = Path(args.root).expanduser().resolve()

    if args.command == "check":
        return _handle_check(root, args)

    if args.command == "validate":
        return _handle_validate(root, args)

    if args.command == "verify":
        return _handle_verify(root, args)

    if args.command == "rules":
        return _handle_rules(root, args)

    raise AssertionError


if __name__ == "__main__":
    raise SystemExit(main())
