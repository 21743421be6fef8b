"""Render an analysis result as console text or a JSON document."""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from ..core.analyzer import summarize
from ..core.models import AnalysisResult, AnalysisSummary, FileCategory, IssueSeverity
from .models import AnalysisDocument

SCHEMA_VERSION = "1.0"


def build_document(
    result: AnalysisResult,
    summary: Optional[AnalysisSummary] = None,
    generated_at: Optional[datetime] = None,
) -> AnalysisDocument:
    """Validate ``result`` into the serializable document model."""
    summary = summary or summarize(result)
    data: Dict[str, Any] = result.to_dict()
    complexity = data["metrics"]["complexity"]
    if isinstance(complexity["average_file_size"], float) and math.isnan(complexity["average_file_size"]):
        complexity["average_file_size"] = None
    data["summary"] = summary.to_dict()
    data["schema_version"] = SCHEMA_VERSION
    if generated_at is not None:
        data["generated_at"] = generated_at.isoformat()
    return AnalysisDocument.model_validate(data)


def render_json(result: AnalysisResult, summary: Optional[AnalysisSummary] = None, timestamp: bool = False) -> str:
    generated_at = datetime.now(timezone.utc) if timestamp else None
    document = build_document(result, summary, generated_at=generated_at)
    return document.model_dump_json(by_alias=True, indent=2)


def render_console(result: AnalysisResult, summary: Optional[AnalysisSummary] = None, top: int = 5) -> str:
    """Return a human readable multi-line report."""
    summary = summary or summarize(result)
    structure = result.structure
    metrics = result.metrics

    lines = [
        f"Project: {structure.root_path}",
        f"Files: {summary.total_files}",
        f"Lines: {summary.total_lines}",
        f"Dependencies: {summary.total_dependencies}",
        f"Components: {summary.total_components}",
        f"Health score: {summary.health_score}/100",
    ]

    category_parts = [
        f"{category.value}: {len(structure.files_in(category))}"
        for category in FileCategory
        if structure.files_in(category)
    ]
    if category_parts:
        lines.append(f"By category: {', '.join(category_parts)}")

    complexity = metrics.complexity
    average = "n/a" if math.isnan(complexity.average_file_size) else f"{complexity.average_file_size:.0f}"
    lines.append("")
    lines.append("Metrics:")
    lines.append(f"  - Average file size: {average} lines")
    lines.append(f"  - Dependency depth: {complexity.dependency_depth}")
    lines.append(f"  - Coupling: {metrics.maintainability.coupling:.2f}")
    lines.append(f"  - Component reusability: {metrics.maintainability.component_reusability}%")
    lines.append(
        f"  - Test coverage (name match): {metrics.test_coverage.coverage_percentage}% "
        f"({metrics.test_coverage.tested_components}/{summary.total_components} components, "
        f"{metrics.test_coverage.total_test_files} test files)"
    )

    if complexity.largest_files:
        lines.append("")
        lines.append("Largest files:")
        for f in complexity.largest_files[:top]:
            lines.append(f"  - {f.relative_path} ({f.line_count} lines)")

    if result.issues:
        counts = ", ".join(f"{summary.issue_counts.get(s.value, 0)} {s.value}" for s in IssueSeverity)
        lines.append("")
        lines.append(f"Issues ({counts}):")
        for issue in result.issues:
            location = f" [{issue.file}]" if issue.file else ""
            lines.append(f"  - [{issue.severity.value.upper()}] {issue.message}{location}")

    if summary.recommendations:
        lines.append("")
        lines.append("Recommendations:")
        for rec in summary.recommendations:
            lines.append(f"  - {rec}")

    return "\n".join(lines)
