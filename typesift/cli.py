"""CLI entrypoints for typesift commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .classifier import GeneratedTypeClassifier
from .config import ConfigError, SiftConfig, load_config
from .engines import IlspyEngine
from .logging import configure_logging
from .pipeline import DecompilationPipeline
from .report import write_run_report
from .rules import discover_rules


def _add_verbosity_options(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    default: object = argparse.SUPPRESS if suppress_default else False
    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=default,
        help="Log skipped generated types and other debug detail.",
    )
    group.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        default=default,
        help="Only log warnings and errors to the console.",
    )


def _add_config_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        default=None,
        help="Path to .typesift.yml or its directory (defaults to current directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="typesift",
        description="Decompile important managed modules into one source file per authored type.",
    )
    _add_verbosity_options(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser(
        "run",
        help="Decompile every important module in the source directory.",
    )
    _add_verbosity_options(run_parser, suppress_default=True)
    _add_config_option(run_parser)
    run_parser.add_argument("--source", default=None, help="Directory containing *.dll modules.")
    run_parser.add_argument("--output", default=None, help="Root directory for decompiled output.")
    run_parser.add_argument(
        "--prefix",
        action="append",
        default=None,
        help="Important module name prefix (repeatable, case-insensitive).",
    )
    run_parser.add_argument(
        "--report",
        default=None,
        help="Write a JSON run report to this path (relative paths land in the output root).",
    )
    run_parser.add_argument(
        "--log-file",
        default=None,
        help="Write a DEBUG run log to this path (relative paths land in the output root).",
    )

    classify_parser = subparsers.add_parser(
        "classify",
        help="Show whether type names would be treated as compiler generated.",
    )
    _add_verbosity_options(classify_parser, suppress_default=True)
    _add_config_option(classify_parser)
    classify_parser.add_argument("names", nargs="+", help="Simple type names to classify.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for typesift commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        config = _load(args)
    except ConfigError as exc:
        parser.exit(1, f"Invalid configuration: {exc}\n")

    log_file = config.output.log_file if args.command == "run" else None
    log_path = config.output_path(log_file) if log_file is not None else None
    try:
        configure_logging(verbose=bool(args.verbose), quiet=bool(args.quiet), log_file=log_path)
    except OSError as exc:
        parser.exit(1, f"Unable to open log file {log_path}: {exc}\n")

    if args.command == "run":
        _run(parser, config)
    elif args.command == "classify":
        try:
            classifier = _classifier_for(config)
        except ValueError as exc:
            parser.exit(1, f"Invalid classifier settings: {exc}\n")
        for name in args.names:
            rule = classifier.match(name)
            verdict = f"generated ({rule})" if rule else "authored"
            print(f"{name}: {verdict}")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _load(args: argparse.Namespace) -> SiftConfig:
    config_path = Path(args.config) if args.config else Path.cwd()
    config = load_config(config_path)
    if args.command != "run":
        return config
    report = Path(args.report) if args.report else None
    log_file = Path(args.log_file) if args.log_file else None
    return config.with_overrides(
        source_dir=Path(args.source) if args.source else None,
        output_dir=Path(args.output) if args.output else None,
        important_prefixes=args.prefix,
        report_file=report,
        log_file=log_file,
    )


def _classifier_for(config: SiftConfig) -> GeneratedTypeClassifier:
    return GeneratedTypeClassifier(
        discover_rules(
            extra_prefixes=config.classifier.extra_prefixes,
            extra_patterns=config.classifier.extra_patterns,
            disabled=config.classifier.disabled,
        )
    )


def _build_pipeline(config: SiftConfig) -> DecompilationPipeline:
    engine = IlspyEngine(config.engine.executable, timeout=config.engine.timeout)
    return DecompilationPipeline(config, engine, classifier=_classifier_for(config))


def _run(parser: argparse.ArgumentParser, config: SiftConfig) -> None:
    try:
        pipeline = _build_pipeline(config)
    except ValueError as exc:
        parser.exit(1, f"Invalid classifier settings: {exc}\n")

    try:
        summary = pipeline.run()
    except (FileNotFoundError, NotADirectoryError) as exc:
        parser.exit(1, f"{exc}\n")
    except OSError as exc:
        parser.exit(1, f"Unable to create output directory {config.output_dir}: {exc}\n")

    report_file = config.output.report_file
    if report_file is not None:
        target = config.output_path(report_file)
        try:
            write_run_report(summary, target)
        except OSError as exc:
            print(f"Unable to write run report {target}: {exc}", file=sys.stderr)
        else:
            print(f"Run report written to {_relativize(target)}")

    print(
        f"Decompiled {summary.processed} type(s) into {_relativize(config.output_dir)} "
        f"({summary.skipped_generated} generated skipped, {summary.failed_types} failed, "
        f"{len(summary.failed_modules)} module(s) failed)"
    )


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
