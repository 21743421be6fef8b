"""Pydantic models describing the serialized analysis document."""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class FileEntry(BaseModel):
    """A scanned file."""

    path: str
    relative_path: str
    name: str
    extension: str
    size_bytes: int
    line_count: int
    category: str


class DirectoryEntry(BaseModel):
    path: str
    name: str
    file_count: int
    subdirectories: List[str] = Field(default_factory=list)


class ProjectStructureEntry(BaseModel):
    root_path: str
    total_files: int
    total_lines: int
    files_by_category: Dict[str, List[FileEntry]]
    directories: List[DirectoryEntry] = Field(default_factory=list)


class DependencyEntry(BaseModel):
    """A dependency edge. ``to`` is a package name for external edges."""

    from_: str = Field(alias="from")
    to: str
    relation: str
    imports: List[str] = Field(default_factory=list)

    model_config = {"populate_by_name": True}


class ComponentEntry(BaseModel):
    name: str
    file_path: str
    export_kind: str
    is_component: bool
    classification: str
    usage_count: int = 0


class ComplexityEntry(BaseModel):
    average_file_size: Optional[float] = Field(
        default=None, description="Average line count; null for an empty project."
    )
    largest_files: List[FileEntry] = Field(default_factory=list)
    cyclomatic_complexity: int = 0
    dependency_depth: int = 0


class MaintainabilityEntry(BaseModel):
    component_reusability: int = 0
    code_duplication: int = 0
    coupling: float = 0
    cohesion: int = 0


class CoverageEntry(BaseModel):
    total_test_files: int = 0
    tested_components: int = 0
    coverage_percentage: int = Field(
        default=0, description="Name-matching estimate, not execution coverage."
    )


class MetricsEntry(BaseModel):
    complexity: ComplexityEntry
    maintainability: MaintainabilityEntry
    test_coverage: CoverageEntry


class IssueEntry(BaseModel):
    kind: str
    severity: str
    message: str
    file: Optional[str] = None
    suggestion: Optional[str] = None


class SummaryEntry(BaseModel):
    total_files: int
    total_lines: int
    total_dependencies: int
    total_components: int
    issue_counts: Dict[str, int]
    health_score: int
    recommendations: List[str] = Field(default_factory=list)


class AnalysisDocument(BaseModel):
    """Top level serialized analysis."""

    schema_version: str = Field(default="1.0", description="Version of the document schema.")
    generated_at: Optional[str] = Field(default=None, description="ISO timestamp of the render.")
    summary: SummaryEntry
    project_structure: ProjectStructureEntry
    dependencies: List[DependencyEntry] = Field(default_factory=list)
    components: List[ComponentEntry] = Field(default_factory=list)
    metrics: MetricsEntry
    issues: List[IssueEntry] = Field(default_factory=list)
