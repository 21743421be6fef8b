"""Derived metrics: complexity, maintainability and a test coverage estimate."""

from __future__ import annotations

import math
from typing import Iterable, List, Optional, Sequence

from .graph import GraphAnalyzer
from .models import (
    ComplexityMetrics,
    ComponentRecord,
    DependencyEdge,
    FileCategory,
    FileDescriptor,
    MaintainabilityMetrics,
    ProjectMetrics,
    ProjectStructure,
    TestCoverageMetrics,
)
from ..config.config import ThresholdsConfig


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


def percentage(part: int, whole: int) -> int:
    return round_half_up(part / whole * 100) if whole > 0 else 0


class MetricsCalculator:
    """Pure computation over the outputs of the earlier stages."""

    def __init__(self, thresholds: Optional[ThresholdsConfig] = None) -> None:
        self.thresholds = thresholds or ThresholdsConfig()

    def calculate(
        self,
        structure: ProjectStructure,
        edges: Sequence[DependencyEdge],
        components: Sequence[ComponentRecord],
        dependency_depth: Optional[int] = None,
    ) -> ProjectMetrics:
        if dependency_depth is None:
            dependency_depth = GraphAnalyzer(edges).dependency_depth()
        return ProjectMetrics(
            complexity=self.complexity(structure.all_files(), dependency_depth),
            maintainability=self.maintainability(components, edges),
            test_coverage=self.test_coverage(structure, components),
        )

    def complexity(self, files: Sequence[FileDescriptor], dependency_depth: int) -> ComplexityMetrics:
        # NaN for an empty project; consumers have to guard against it
        if files:
            average = float(round_half_up(sum(f.line_count for f in files) / len(files)))
        else:
            average = math.nan
        largest = sorted(files, key=lambda f: f.line_count, reverse=True)[: self.thresholds.largest_files_count]
        return ComplexityMetrics(
            average_file_size=average,
            largest_files=tuple(largest),
            cyclomatic_complexity=0,  # not computed
            dependency_depth=dependency_depth,
        )

    @staticmethod
    def maintainability(
        components: Sequence[ComponentRecord],
        edges: Sequence[DependencyEdge],
    ) -> MaintainabilityMetrics:
        reused = sum(1 for c in components if c.usage_count > 1)
        return MaintainabilityMetrics(
            component_reusability=percentage(reused, len(components)),
            code_duplication=0,  # not computed
            coupling=coupling(edges),
            cohesion=0,  # not computed
        )

    @staticmethod
    def test_coverage(structure: ProjectStructure, components: Sequence[ComponentRecord]) -> TestCoverageMetrics:
        """Estimate coverage by matching component names against test file names.

        No test is executed: a component counts as tested when its lowercased
        name appears in the lowercased name or path of any test file.
        """
        test_files = structure.files_in(FileCategory.TEST)
        tested = count_tested_components(test_files, components)
        return TestCoverageMetrics(
            total_test_files=len(test_files),
            tested_components=tested,
            coverage_percentage=percentage(tested, len(components)),
        )


def coupling(edges: Sequence[DependencyEdge]) -> float:
    """Edges per distinct node (sources and targets); 0 without edges."""
    nodes = {e.source for e in edges} | {e.target for e in edges}
    return len(edges) / len(nodes) if nodes else 0


def count_tested_components(test_files: Iterable[FileDescriptor], components: Iterable[ComponentRecord]) -> int:
    haystacks: List[str] = []
    for f in test_files:
        haystacks.append(f.name.lower())
        haystacks.append(f.path.lower())
    tested = 0
    for component in components:
        needle = component.name.lower()
        if any(needle in hay for hay in haystacks):
            tested += 1
    return tested
