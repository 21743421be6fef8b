"""Read a saved analysis document back into core records."""

from __future__ import annotations

import logging
import math
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple, Type, TypeVar

from pydantic import ValidationError

from ..core.exceptions import ReportError
from ..core.models import (
    AnalysisResult,
    AnalysisSummary,
    Classification,
    ComplexityMetrics,
    ComponentRecord,
    DependencyEdge,
    DirectoryInfo,
    FileCategory,
    FileDescriptor,
    Issue,
    IssueKind,
    IssueSeverity,
    MaintainabilityMetrics,
    ProjectMetrics,
    ProjectStructure,
    RelationKind,
    TestCoverageMetrics,
)
from .models import AnalysisDocument, FileEntry

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)


def load_document(path: Path) -> AnalysisDocument:
    """Parse and validate a JSON document written by ``analyze --format json``."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ReportError(f"Cannot read analysis file {path}: {e}", details={"path": str(path)}) from e
    try:
        return AnalysisDocument.model_validate_json(text)
    except ValidationError as e:
        raise ReportError(
            f"Invalid analysis file {path}: {e.error_count()} validation error(s)",
            details={"path": str(path), "errors": e.errors(include_url=False)},
        ) from e


def _enum(enum_cls: Type[E], value: str, fallback: Optional[E] = None) -> E:
    try:
        return enum_cls(value)
    except ValueError:
        if fallback is None:
            raise ReportError(f"Unknown {enum_cls.__name__} value: {value!r}") from None
        logger.debug("Unknown %s value %r, using %s", enum_cls.__name__, value, fallback.value)
        return fallback


def _file(entry: FileEntry) -> FileDescriptor:
    return FileDescriptor(
        path=entry.path,
        relative_path=entry.relative_path,
        name=entry.name,
        extension=entry.extension,
        size_bytes=entry.size_bytes,
        line_count=entry.line_count,
        category=_enum(FileCategory, entry.category, FileCategory.OTHER),
    )


def document_to_result(document: AnalysisDocument) -> Tuple[AnalysisResult, AnalysisSummary]:
    """Rebuild the result and the stored summary from ``document``.

    Components whose classification is not one this tool produces are
    tagged :attr:`Classification.UNKNOWN`.
    """
    structure_entry = document.project_structure
    grouped: dict[FileCategory, List[FileDescriptor]] = {category: [] for category in FileCategory}
    for entries in structure_entry.files_by_category.values():
        for entry in entries:
            descriptor = _file(entry)
            grouped[descriptor.category].append(descriptor)

    structure = ProjectStructure(
        root_path=structure_entry.root_path,
        total_files=structure_entry.total_files,
        total_lines=structure_entry.total_lines,
        files_by_category={category: tuple(files) for category, files in grouped.items()},
        directories=tuple(
            DirectoryInfo(
                path=d.path,
                name=d.name,
                file_count=d.file_count,
                subdirectories=tuple(d.subdirectories),
            )
            for d in structure_entry.directories
        ),
    )

    dependencies = tuple(
        DependencyEdge(
            source=d.from_,
            target=d.to,
            relation=_enum(RelationKind, d.relation),
            imported_names=tuple(d.imports),
        )
        for d in document.dependencies
    )

    components = tuple(
        ComponentRecord(
            name=c.name,
            file_path=c.file_path,
            export_kind=c.export_kind,
            is_component=c.is_component,
            classification=_enum(Classification, c.classification, Classification.UNKNOWN),
            usage_count=c.usage_count,
        )
        for c in document.components
    )

    complexity = document.metrics.complexity
    maintainability = document.metrics.maintainability
    coverage = document.metrics.test_coverage
    metrics = ProjectMetrics(
        complexity=ComplexityMetrics(
            average_file_size=math.nan if complexity.average_file_size is None else complexity.average_file_size,
            largest_files=tuple(_file(f) for f in complexity.largest_files),
            cyclomatic_complexity=complexity.cyclomatic_complexity,
            dependency_depth=complexity.dependency_depth,
        ),
        maintainability=MaintainabilityMetrics(
            component_reusability=maintainability.component_reusability,
            code_duplication=maintainability.code_duplication,
            coupling=maintainability.coupling,
            cohesion=maintainability.cohesion,
        ),
        test_coverage=TestCoverageMetrics(
            total_test_files=coverage.total_test_files,
            tested_components=coverage.tested_components,
            coverage_percentage=coverage.coverage_percentage,
        ),
    )

    issues = tuple(
        Issue(
            kind=_enum(IssueKind, i.kind),
            severity=_enum(IssueSeverity, i.severity),
            message=i.message,
            file=i.file,
            suggestion=i.suggestion,
        )
        for i in document.issues
    )

    summary_entry = document.summary
    summary = AnalysisSummary(
        total_files=summary_entry.total_files,
        total_lines=summary_entry.total_lines,
        total_dependencies=summary_entry.total_dependencies,
        total_components=summary_entry.total_components,
        issue_counts=dict(summary_entry.issue_counts),
        health_score=summary_entry.health_score,
        recommendations=list(summary_entry.recommendations),
    )

    result = AnalysisResult(
        structure=structure,
        dependencies=dependencies,
        components=components,
        metrics=metrics,
        issues=issues,
    )
    return result, summary
