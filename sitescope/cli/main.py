"""
Command line entrypoint for SiteScope.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from sitescope import __version__
from sitescope.cli.command_handlers import AnalyzeOptions, handle_analyze, handle_health, handle_report
from sitescope.config import load_config
from sitescope.core.exceptions import SiteScopeError
from sitescope.core.logging_utils import configure_logging

logger = logging.getLogger(__name__)


def _split_patterns(values: Optional[List[str]]) -> Optional[List[str]]:
    """Accept repeated flags as well as comma separated lists."""
    if not values:
        return None
    patterns: List[str] = []
    for value in values:
        patterns.extend(p.strip() for p in value.split(",") if p.strip())
    return patterns


def _clean_root_argument(root: Path | None) -> Path:
    if root is None:
        return Path.cwd()
    return Path(str(root).strip('"\''))


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("root", type=Path, nargs="?", default=None, help="Project root (defaults to the current directory)")
    parser.add_argument("--config", default=None, help="Config file (defaults to <root>/sitescope.yaml)")
    parser.add_argument(
        "--include",
        action="append",
        default=None,
        help="Glob pattern to include (repeatable or comma separated)",
    )
    parser.add_argument(
        "--exclude",
        action="append",
        default=None,
        help="Glob pattern to exclude (repeatable or comma separated)",
    )
    parser.add_argument("--log-level", default=None, help="Override the configured log level")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log a project overview")


def build_parser() -> argparse.ArgumentParser:
    """Create the CLI argument parser."""

    parser = argparse.ArgumentParser(prog="sitescope", description="SiteScope project structure analyzer")
    parser.add_argument("--version", action="version", version=f"sitescope {__version__}")
    subcommands = parser.add_subparsers(dest="command", required=True)

    analyze_parser = subcommands.add_parser("analyze", help="Analyze a project directory")
    _add_common_arguments(analyze_parser)
    analyze_parser.add_argument(
        "-f",
        "--format",
        choices=("console", "json"),
        default="console",
        help="Output format",
    )
    analyze_parser.add_argument("-o", "--output", type=Path, default=None, help="Write the report to this file")
    analyze_parser.add_argument("--top", type=int, default=5, help="Number of largest files to list")

    health_parser = subcommands.add_parser("health", help="Quick project health check")
    _add_common_arguments(health_parser)

    report_parser = subcommands.add_parser("report", help="Display a saved JSON analysis")
    report_parser.add_argument(
        "-i",
        "--input",
        type=Path,
        default=Path("analysis-result.json"),
        help="JSON document written by 'analyze --format json'",
    )
    report_parser.add_argument(
        "-f",
        "--format",
        choices=("console", "json"),
        default="console",
        help="Output format",
    )
    report_parser.add_argument("-o", "--output", type=Path, default=None, help="Write the report to this file")
    report_parser.add_argument("--top", type=int, default=5, help="Number of largest files to list")
    report_parser.add_argument("--config", default=None, help="Config file (defaults to ./sitescope.yaml)")
    report_parser.add_argument("--log-level", default=None, help="Override the configured log level")

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entrypoint for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # report has no project root; its config comes from the working directory
    root = _clean_root_argument(getattr(args, "root", None))
    config = load_config(root, config_file=args.config)
    active_level = configure_logging(
        args.log_level or config.logging.level,
        log_file=config.logging.path,
        reset_on_start=config.logging.reset_on_start,
    )
    logger.debug("Log level set to %s", active_level)

    try:
        if args.command == "report":
            payload = handle_report(args.input, output_format=args.format, output=args.output, top=args.top)
            if args.output is None:
                print(payload)
            else:
                print(f"Report written to {args.output}")
            return

        options = AnalyzeOptions(
            root=root,
            include=_split_patterns(args.include),
            exclude=_split_patterns(args.exclude),
            verbose=args.verbose,
        )
        if args.command == "analyze":
            payload = handle_analyze(config, options, output_format=args.format, output=args.output, top=args.top)
            if args.output is None:
                print(payload)
            else:
                print(f"Report written to {args.output}")
        elif args.command == "health":
            print(handle_health(config, options))
    except SiteScopeError as e:
        logger.error("%s (%s)", e, e.code)
        raise SystemExit(1) from e


if __name__ == "__main__":
    main()
