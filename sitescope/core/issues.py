"""Convert health findings, cycles and size thresholds into issues."""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from .models import ComponentRecord, FileDescriptor, Issue, IssueKind, IssueSeverity, ProjectStructure
from ..config.config import ThresholdsConfig

CYCLE_SEPARATOR = " → "


class IssueDetector:
    """Emit issues in a fixed order: health, cycles, large files, complex components."""

    def __init__(self, thresholds: Optional[ThresholdsConfig] = None) -> None:
        self.thresholds = thresholds or ThresholdsConfig()

    def detect(
        self,
        structure: ProjectStructure,
        health_findings: Sequence[str],
        cycles: Sequence[Sequence[str]],
        components: Sequence[ComponentRecord],
    ) -> List[Issue]:
        files = structure.all_files()
        issues: List[Issue] = []
        issues.extend(self.health_issues(health_findings))
        issues.extend(self.cycle_issues(cycles))
        issues.extend(self.large_file_issues(files))
        issues.extend(self.complex_component_issues(files, components))
        return issues

    @staticmethod
    def health_issues(findings: Sequence[str]) -> List[Issue]:
        return [
            Issue(kind=IssueKind.HEALTH, severity=IssueSeverity.WARNING, message=finding)
            for finding in findings
        ]

    @staticmethod
    def cycle_issues(cycles: Sequence[Sequence[str]]) -> List[Issue]:
        return [
            Issue(
                kind=IssueKind.CIRCULAR_DEPENDENCY,
                severity=IssueSeverity.ERROR,
                message=f"Circular dependency detected: {CYCLE_SEPARATOR.join(cycle)}",
                suggestion="break the cycle.",
            )
            for cycle in cycles
        ]

    def large_file_issues(self, files: Sequence[FileDescriptor]) -> List[Issue]:
        limit = self.thresholds.large_file_lines
        return [
            Issue(
                kind=IssueKind.LARGE_FILE,
                severity=IssueSeverity.WARNING,
                message=f"Large file detected: {f.name} ({f.line_count} lines)",
                file=f.path,
                suggestion="split the file.",
            )
            for f in files
            if f.line_count > limit
        ]

    def complex_component_issues(
        self,
        files: Sequence[FileDescriptor],
        components: Sequence[ComponentRecord],
    ) -> List[Issue]:
        limit = self.thresholds.complex_component_lines
        lines_by_path: Dict[str, int] = {}
        for f in files:
            lines_by_path.setdefault(f.path, f.line_count)

        issues = []
        for component in components:
            lines = lines_by_path.get(component.file_path)
            if lines is not None and lines > limit:
                issues.append(Issue(
                    kind=IssueKind.COMPLEX_COMPONENT,
                    severity=IssueSeverity.WARNING,
                    message=f"Complex component: {component.name}",
                    file=component.file_path,
                    suggestion="split the component.",
                ))
        return issues
