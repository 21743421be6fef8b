import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from sitescope.config import SiteScopeConfig
from sitescope.core import SiteAnalyzer, summarize
from sitescope.core.models import AnalysisResult, AnalysisSummary, IssueSeverity
from sitescope.report import document_to_result, load_document, render_console, render_json

logger = logging.getLogger(__name__)


@dataclass
class AnalyzeOptions:
    """Options shared by the analyze and health commands."""

    root: Path
    include: list[str] | None = None
    exclude: list[str] | None = None
    verbose: bool = False


def _apply_overrides(config: SiteScopeConfig, options: AnalyzeOptions) -> SiteScopeConfig:
    if options.include:
        config.scan.include = list(options.include)
    if options.exclude:
        config.scan.exclude = list(options.exclude)
    return config


def _run(config: SiteScopeConfig, options: AnalyzeOptions) -> tuple[AnalysisResult, AnalysisSummary]:
    analyzer = SiteAnalyzer(options.root, config=_apply_overrides(config, options), verbose=options.verbose)
    result = analyzer.analyze()
    return result, summarize(result)


def handle_analyze(
    config: SiteScopeConfig,
    options: AnalyzeOptions,
    output_format: str = "console",
    output: Optional[Path] = None,
    top: int = 5,
) -> str:
    """Analyze a project and return (or write) the rendered report."""
    logger.info("Analyzing project at %s", options.root)
    result, summary = _run(config, options)

    if output_format == "json":
        payload = render_json(result, summary, timestamp=output is not None)
    else:
        payload = render_console(result, summary, top=top)

    if output:
        output.write_text(payload, encoding="utf-8")
        logger.info("Wrote %s report to %s", output_format, output)
    return payload


def handle_health(config: SiteScopeConfig, options: AnalyzeOptions, shown_errors: int = 5, shown_warnings: int = 3) -> str:
    """Quick health check: score, top issues and recommendations."""
    result, summary = _run(config, options)

    lines = [f"Health score: {summary.health_score}/100"]
    errors = [i for i in result.issues if i.severity is IssueSeverity.ERROR]
    warnings = [i for i in result.issues if i.severity is IssueSeverity.WARNING]
    if errors:
        lines.append(f"Errors: {len(errors)}")
        lines.extend(f"  - {issue.message}" for issue in errors[:shown_errors])
    if warnings:
        lines.append(f"Warnings: {len(warnings)}")
        lines.extend(f"  - {issue.message}" for issue in warnings[:shown_warnings])
    if summary.recommendations:
        lines.append("Recommendations:")
        lines.extend(f"  - {rec}" for rec in summary.recommendations)
    return "\n".join(lines)


def handle_report(input_path: Path, output_format: str = "console", output: Optional[Path] = None, top: int = 5) -> str:
    """Re-render a JSON document saved by ``analyze --format json``."""
    logger.info("Loading analysis from %s", input_path)
    result, summary = document_to_result(load_document(input_path))

    if output_format == "json":
        payload = render_json(result, summary, timestamp=output is not None)
    else:
        payload = render_console(result, summary, top=top)

    if output:
        output.write_text(payload, encoding="utf-8")
        logger.info("Wrote %s report to %s", output_format, output)
    return payload
