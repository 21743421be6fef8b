from sitescope.config import ThresholdsConfig
from sitescope.core.issues import IssueDetector
from sitescope.core.models import (
    ComponentRecord,
    FileDescriptor,
    IssueKind,
    IssueSeverity,
    ProjectStructure,
)
from sitescope.core.scanner import ProjectScanner, categorize


def _file(rel, lines):
    name = rel.rsplit("/", 1)[-1]
    return FileDescriptor(
        path=f"/p/{rel}",
        relative_path=rel,
        name=name,
        extension="." + name.rsplit(".", 1)[-1],
        size_bytes=lines,
        line_count=lines,
        category=categorize(rel),
    )


def _structure(files):
    return ProjectStructure(
        root_path="/p",
        total_files=len(files),
        total_lines=sum(f.line_count for f in files),
        files_by_category=ProjectScanner.group_by_category(files),
    )


def test_large_file_threshold_is_exclusive():
    structure = _structure([_file("lib/big.ts", 301), _file("lib/edge.ts", 300)])

    issues = IssueDetector().detect(structure, [], [], [])

    assert len(issues) == 1
    issue = issues[0]
    assert issue.kind is IssueKind.LARGE_FILE
    assert issue.severity is IssueSeverity.WARNING
    assert issue.message == "Large file detected: big.ts (301 lines)"
    assert issue.file == "/p/lib/big.ts"
    assert issue.suggestion == "split the file."


def test_issue_order():
    structure = _structure([_file("components/Board.tsx", 320), _file("components/Card.tsx", 250)])
    components = [
        ComponentRecord(name="Board", file_path="/p/components/Board.tsx", export_kind="default"),
        ComponentRecord(name="Card", file_path="/p/components/Card.tsx", export_kind="named"),
    ]

    issues = IssueDetector(ThresholdsConfig()).detect(
        structure,
        ["No test files found"],
        [["/p/a.ts", "/p/b.ts", "/p/a.ts"]],
        components,
    )

    assert [i.kind for i in issues] == [
        IssueKind.HEALTH,
        IssueKind.CIRCULAR_DEPENDENCY,
        IssueKind.LARGE_FILE,
        IssueKind.COMPLEX_COMPONENT,
        IssueKind.COMPLEX_COMPONENT,
    ]
    assert issues[0].message == "No test files found"
    assert issues[0].severity is IssueSeverity.WARNING
    assert issues[1].severity is IssueSeverity.ERROR
    assert issues[1].message == "Circular dependency detected: /p/a.ts → /p/b.ts → /p/a.ts"
    assert [i.message for i in issues[3:]] == ["Complex component: Board", "Complex component: Card"]


def test_complex_component_uses_threshold():
    structure = _structure([_file("components/Small.tsx", 200)])
    component = ComponentRecord(name="Small", file_path="/p/components/Small.tsx", export_kind="named")

    assert IssueDetector().detect(structure, [], [], [component]) == []
    lowered = IssueDetector(ThresholdsConfig(complex_component_lines=150))
    assert [i.kind for i in lowered.detect(structure, [], [], [component])] == [IssueKind.COMPLEX_COMPONENT]


def test_issue_to_dict_omits_empty_fields():
    (issue,) = IssueDetector.health_issues(["package.json not found"])

    assert issue.to_dict() == {
        "kind": "no-tests-or-missing-manifest",
        "severity": "warning",
        "message": "package.json not found",
    }
