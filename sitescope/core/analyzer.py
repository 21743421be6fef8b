"""
Analysis facade: runs the pipeline stages in order and assembles the result.

Stages: scan -> dependencies -> components -> graph -> metrics -> issues.
Each stage completes before the next starts and returns fresh collections.
"""

from __future__ import annotations

import logging
import math
import time
from collections import Counter
from pathlib import Path
from typing import Any, Callable, Iterable, List, Optional, Sequence, TypeVar

from .components import ComponentClassifier
from .dependencies import DependencyExtractor
from .exceptions import AnalyzeError, SiteScopeError
from .graph import GraphAnalyzer
from .issues import IssueDetector
from .language import ParseSession
from .metrics import MetricsCalculator
from .models import (
    AnalysisResult,
    AnalysisSummary,
    DependencyEdge,
    IssueKind,
    IssueSeverity,
    WalkedFile,
)
from .scanner import ProjectScanner
from .walker import SourceWalker, validate_root
from ..config.config import SiteScopeConfig

logger = logging.getLogger(__name__)

T = TypeVar("T")

ERROR_PENALTY = 10
WARNING_PENALTY = 3
LOW_COVERAGE_THRESHOLD = 50
LOW_COVERAGE_PENALTY = 15
MEDIUM_COVERAGE_THRESHOLD = 80
MEDIUM_COVERAGE_PENALTY = 5
LARGE_AVERAGE_FILE_SIZE = 150


def compute_health_score(error_count: int, warning_count: int, coverage_percentage: float) -> int:
    """100 minus issue penalties and a coverage penalty, clamped to [0, 100]."""
    score = 100 - ERROR_PENALTY * error_count - WARNING_PENALTY * warning_count
    if coverage_percentage < LOW_COVERAGE_THRESHOLD:
        score -= LOW_COVERAGE_PENALTY
    elif coverage_percentage < MEDIUM_COVERAGE_THRESHOLD:
        score -= MEDIUM_COVERAGE_PENALTY
    return max(0, min(100, score))


def build_recommendations(result: AnalysisResult) -> List[str]:
    recommendations: List[str] = []
    complexity = result.metrics.complexity
    if result.metrics.test_coverage.coverage_percentage < MEDIUM_COVERAGE_THRESHOLD:
        recommendations.append("Improve test coverage")
    if complexity.largest_files:
        recommendations.append("Split large files")
    if any(issue.kind is IssueKind.CIRCULAR_DEPENDENCY for issue in result.issues):
        recommendations.append("Resolve circular dependencies")
    if not math.isnan(complexity.average_file_size) and complexity.average_file_size > LARGE_AVERAGE_FILE_SIZE:
        recommendations.append("Keep file sizes in check")
    return recommendations


def summarize(result: AnalysisResult) -> AnalysisSummary:
    """Headline numbers and health score for ``result``."""
    severities = Counter(issue.severity for issue in result.issues)
    issue_counts = {severity.value: severities.get(severity, 0) for severity in IssueSeverity}
    return AnalysisSummary(
        total_files=result.structure.total_files,
        total_lines=result.structure.total_lines,
        total_dependencies=len(result.dependencies),
        total_components=len(result.components),
        issue_counts=issue_counts,
        health_score=compute_health_score(
            issue_counts[IssueSeverity.ERROR.value],
            issue_counts[IssueSeverity.WARNING.value],
            result.metrics.test_coverage.coverage_percentage,
        ),
        recommendations=build_recommendations(result),
    )


class SiteAnalyzer:
    """The single entry point external collaborators call."""

    def __init__(
        self,
        root: Path,
        config: Optional[SiteScopeConfig] = None,
        verbose: bool = False,
    ) -> None:
        self.root = Path(root)
        self.config = config or SiteScopeConfig(project_root=self.root)
        self.verbose = verbose

    def analyze(self, walked_files: Optional[Iterable[WalkedFile]] = None) -> AnalysisResult:
        """Run every stage and return the aggregated result.

        ``walked_files`` replaces the built-in source walker when given.

        Raises:
            ConfigurationError: the project root is missing or unreadable.
            AnalyzeError: a stage failed unexpectedly.
        """
        root = validate_root(self.root)
        start_time = time.time()
        thresholds = self.config.thresholds
        max_workers = self.config.scan.max_workers
        logger.info("Analyzing project at %s", root)

        if walked_files is None:
            walker = SourceWalker(
                root,
                include=self.config.scan.include,
                exclude=self.config.scan.exclude,
                max_workers=max_workers,
            )
            walked = self._run_stage("walk", walker.walk)
        else:
            walked = list(walked_files)

        scanner = ProjectScanner(root)
        structure = self._run_stage("scan", scanner.scan, walked)
        health_findings = ProjectScanner.check_health(structure, thresholds)
        if self.verbose:
            ProjectScanner.describe(structure)
        files = structure.all_files()

        with ParseSession(max_workers=max_workers) as session:
            extractor = DependencyExtractor(structure.root_path, self.config.aliases)
            edges = self._run_stage("dependencies", extractor.extract, files, session)
            components = self._run_stage("components", ComponentClassifier().classify, files, session)

        edges = self._checked_edges(edges, {f.path for f in files})
        graph = self._run_stage("graph", GraphAnalyzer(edges).analyze)
        metrics = self._run_stage(
            "metrics",
            MetricsCalculator(thresholds).calculate,
            structure,
            edges,
            components,
            graph.dependency_depth,
        )
        issues = self._run_stage(
            "issues",
            IssueDetector(thresholds).detect,
            structure,
            health_findings,
            graph.cycles,
            components,
        )

        logger.info("Analysis completed in %.2fs", time.time() - start_time)
        return AnalysisResult(
            structure=structure,
            dependencies=tuple(edges),
            components=tuple(components),
            metrics=metrics,
            issues=tuple(issues),
        )

    @staticmethod
    def _run_stage(name: str, func: Callable[..., T], *args: Any) -> T:
        try:
            return func(*args)
        except SiteScopeError:
            raise
        except Exception as e:
            raise AnalyzeError(f"Stage '{name}' failed: {e}", details={"stage": name}) from e

    @staticmethod
    def _checked_edges(edges: Sequence[DependencyEdge], scanned: set[str]) -> List[DependencyEdge]:
        """Drop edges whose source is not a scanned file, with a warning."""
        kept = []
        for edge in edges:
            if edge.source not in scanned:
                logger.warning("Dropping edge from unscanned file %s -> %s", edge.source, edge.target)
                continue
            kept.append(edge)
        return kept
