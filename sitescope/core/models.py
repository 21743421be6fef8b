"""
Data model shared by every stage of the analysis pipeline.

Records produced by one stage are never mutated by a later one: descriptors,
facts, edges and issues are frozen, and aggregates are built once per run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class FileCategory(str, Enum):
    """Inferred role of a scanned file."""
    SOURCE_TYPED = "source-typed"
    SOURCE_UNTYPED = "source-untyped"
    UI_COMPONENT = "ui-component-file"
    ROUTE_ENTRY = "route-entry"
    LAYOUT_ENTRY = "layout-entry"
    CONFIG = "config"
    TEST = "test"
    STYLE = "style"
    DOC = "doc"
    DATA = "structured-data"
    OTHER = "other"


class RelationKind(str, Enum):
    """How an import specifier relates the importing file to its target."""
    RELATIVE = "relative"
    INTERNAL_ALIAS = "internal-alias"
    EXTERNAL = "external"


class Classification(str, Enum):
    """Confidence tag of a component classification.

    ``HEURISTIC`` means the record was produced by text sniffing, which is the
    only detector implemented. ``UNKNOWN`` is reserved for records whose origin
    cannot be vouched for (e.g. loaded from a foreign report).
    """
    HEURISTIC = "heuristic"
    UNKNOWN = "unknown"


class IssueKind(str, Enum):
    HEALTH = "no-tests-or-missing-manifest"
    CIRCULAR_DEPENDENCY = "circular-dependency"
    LARGE_FILE = "large-file"
    COMPLEX_COMPONENT = "complex-component"


class IssueSeverity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True, slots=True)
class WalkedFile:
    """A file record as enumerated by the source walker."""

    path: str
    relative_path: str
    name: str
    extension: str
    size_bytes: int
    line_count: int


@dataclass(frozen=True, slots=True)
class FileDescriptor:
    """A walked file together with the category inferred by the scanner."""

    path: str
    relative_path: str
    name: str
    extension: str
    size_bytes: int
    line_count: int
    category: FileCategory

    @classmethod
    def from_walked(cls, walked: WalkedFile, category: FileCategory) -> "FileDescriptor":
        return cls(
            path=walked.path,
            relative_path=walked.relative_path,
            name=walked.name,
            extension=walked.extension,
            size_bytes=walked.size_bytes,
            line_count=walked.line_count,
            category=category,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": self.path,
            "relative_path": self.relative_path,
            "name": self.name,
            "extension": self.extension,
            "size_bytes": self.size_bytes,
            "line_count": self.line_count,
            "category": self.category.value,
        }


@dataclass(frozen=True, slots=True)
class ImportFact:
    """One static import declaration."""

    module_specifier: str
    bound_names: Tuple[str, ...] = ()
    is_default: bool = False
    is_namespace: bool = False
    line: int = 0


@dataclass(frozen=True, slots=True)
class ExportFact:
    """One exported name. ``kind`` is None for ``export { ... }`` lists."""

    name: str
    is_default: bool = False
    line: int = 0
    kind: Optional[str] = None


@dataclass(frozen=True, slots=True)
class Declaration:
    """A top-level function or variable declaration and its source text."""

    name: str
    kind: str  # "function" or "variable"
    text: str
    is_default: bool = False
    line: int = 0


@dataclass(frozen=True, slots=True)
class SourceFacts:
    """Everything the syntax front-end knows about one source file."""

    path: str
    imports: Tuple[ImportFact, ...] = ()
    exports: Tuple[ExportFact, ...] = ()
    declarations: Tuple[Declaration, ...] = ()


@dataclass(frozen=True, slots=True)
class DependencyEdge:
    """A directed import relation between two canonical identities.

    ``target`` is a file identity for relative/alias edges and the raw
    package specifier for external ones.
    """

    source: str
    target: str
    relation: RelationKind
    imported_names: Tuple[str, ...] = ()

    @property
    def is_internal(self) -> bool:
        return self.relation is not RelationKind.EXTERNAL

    def to_dict(self) -> Dict[str, Any]:
        return {
            "from": self.source,
            "to": self.target,
            "relation": self.relation.value,
            "imports": list(self.imported_names),
        }


@dataclass(frozen=True, slots=True)
class ComponentRecord:
    """A declaration flagged as a UI component by the classifier."""

    name: str
    file_path: str
    export_kind: str  # "default" or "named"
    is_component: bool = True
    classification: Classification = Classification.HEURISTIC
    # Usage counting is not implemented; always zero.
    usage_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "file_path": self.file_path,
            "export_kind": self.export_kind,
            "is_component": self.is_component,
            "classification": self.classification.value,
            "usage_count": self.usage_count,
        }


@dataclass(frozen=True, slots=True)
class DirectoryInfo:
    path: str
    name: str
    file_count: int
    subdirectories: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": self.path,
            "name": self.name,
            "file_count": self.file_count,
            "subdirectories": list(self.subdirectories),
        }


@dataclass(frozen=True, slots=True)
class ProjectStructure:
    """Scanned files grouped by category plus the directory census."""

    root_path: str
    total_files: int
    total_lines: int
    files_by_category: Dict[FileCategory, Tuple[FileDescriptor, ...]]
    directories: Tuple[DirectoryInfo, ...] = ()

    def all_files(self) -> List[FileDescriptor]:
        """Return every file, grouped in category declaration order."""
        files: List[FileDescriptor] = []
        for category in FileCategory:
            files.extend(self.files_by_category.get(category, ()))
        return files

    def files_in(self, category: FileCategory) -> Tuple[FileDescriptor, ...]:
        return self.files_by_category.get(category, ())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "root_path": self.root_path,
            "total_files": self.total_files,
            "total_lines": self.total_lines,
            "files_by_category": {
                category.value: [f.to_dict() for f in self.files_in(category)]
                for category in FileCategory
            },
            "directories": [d.to_dict() for d in self.directories],
        }


@dataclass(frozen=True, slots=True)
class Issue:
    kind: IssueKind
    severity: IssueSeverity
    message: str
    file: Optional[str] = None
    suggestion: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "kind": self.kind.value,
            "severity": self.severity.value,
            "message": self.message,
        }
        if self.file is not None:
            data["file"] = self.file
        if self.suggestion is not None:
            data["suggestion"] = self.suggestion
        return data


@dataclass(frozen=True, slots=True)
class ComplexityMetrics:
    average_file_size: float
    largest_files: Tuple[FileDescriptor, ...]
    cyclomatic_complexity: int
    dependency_depth: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "average_file_size": self.average_file_size,
            "largest_files": [f.to_dict() for f in self.largest_files],
            "cyclomatic_complexity": self.cyclomatic_complexity,
            "dependency_depth": self.dependency_depth,
        }


@dataclass(frozen=True, slots=True)
class MaintainabilityMetrics:
    component_reusability: int
    code_duplication: int
    coupling: float
    cohesion: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "component_reusability": self.component_reusability,
            "code_duplication": self.code_duplication,
            "coupling": self.coupling,
            "cohesion": self.cohesion,
        }


@dataclass(frozen=True, slots=True)
class TestCoverageMetrics:
    """Name-matching estimate of how many components have a test file."""

    __test__ = False  # not a pytest class

    total_test_files: int
    tested_components: int
    coverage_percentage: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_test_files": self.total_test_files,
            "tested_components": self.tested_components,
            "coverage_percentage": self.coverage_percentage,
        }


@dataclass(frozen=True, slots=True)
class ProjectMetrics:
    complexity: ComplexityMetrics
    maintainability: MaintainabilityMetrics
    test_coverage: TestCoverageMetrics

    def to_dict(self) -> Dict[str, Any]:
        return {
            "complexity": self.complexity.to_dict(),
            "maintainability": self.maintainability.to_dict(),
            "test_coverage": self.test_coverage.to_dict(),
        }


@dataclass(frozen=True, slots=True)
class AnalysisResult:
    """Everything one analysis run produced. Pure data."""

    structure: ProjectStructure
    dependencies: Tuple[DependencyEdge, ...]
    components: Tuple[ComponentRecord, ...]
    metrics: ProjectMetrics
    issues: Tuple[Issue, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "project_structure": self.structure.to_dict(),
            "dependencies": [d.to_dict() for d in self.dependencies],
            "components": [c.to_dict() for c in self.components],
            "metrics": self.metrics.to_dict(),
            "issues": [i.to_dict() for i in self.issues],
        }


@dataclass(slots=True)
class AnalysisSummary:
    """Headline numbers derived from an :class:`AnalysisResult`."""

    total_files: int
    total_lines: int
    total_dependencies: int
    total_components: int
    issue_counts: Dict[str, int] = field(default_factory=dict)
    health_score: int = 100
    recommendations: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_files": self.total_files,
            "total_lines": self.total_lines,
            "total_dependencies": self.total_dependencies,
            "total_components": self.total_components,
            "issue_counts": dict(self.issue_counts),
            "health_score": self.health_score,
            "recommendations": list(self.recommendations),
        }
