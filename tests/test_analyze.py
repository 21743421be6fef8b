import pytest

from sitescope.config import SiteScopeConfig
from sitescope.core import SiteAnalyzer, compute_health_score, summarize
from sitescope.core.exceptions import AnalyzeError, ConfigurationError
from sitescope.core.models import IssueKind, RelationKind


def _make_project(root):
    files = {
        "app/page.tsx": (
            'import { Button } from "@/components/Button";\n\n'
            "export default function Landing() {\n"
            "  return (\n"
            "    <main>\n"
            "      <Button />\n"
            "    </main>\n"
            "  );\n"
            "}\n"
        ),
        "components/Button.tsx": (
            'import { cn } from "../lib/utils";\n\n'
            "export const Button = () => {\n"
            '  return <button className={cn("btn")}>Save</button>;\n'
            "};\n"
        ),
        "lib/utils.ts": 'export function cn(...classes: string[]) {\n  return classes.join(" ");\n}\n',
        "__tests__/button.test.tsx": (
            'import { Button } from "@/components/Button";\n\n'
            'describe("Button", () => {\n'
            '  it("is defined", () => {\n'
            "    expect(Button).toBeDefined();\n"
            "  });\n"
            "});\n"
        ),
        "package.json": "{}\n",
    }
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)


def test_health_score_formula():
    assert compute_health_score(2, 1, 40) == 62
    assert compute_health_score(0, 0, 100) == 100
    assert compute_health_score(0, 0, 79) == 95
    assert compute_health_score(20, 0, 0) == 0


def test_analyze_project(tmp_path):
    _make_project(tmp_path)

    result = SiteAnalyzer(tmp_path).analyze()
    summary = summarize(result)

    assert result.structure.total_files == 4
    assert sorted(c.name for c in result.components) == ["Button", "Landing"]
    assert [e.relation for e in result.dependencies] == [
        RelationKind.RELATIVE,
        RelationKind.INTERNAL_ALIAS,
        RelationKind.INTERNAL_ALIAS,
    ]
    root = result.structure.root_path
    assert {e.target for e in result.dependencies} == {
        f"{root}/lib/utils.ts",
        f"{root}/components/Button.tsx",
    }
    assert result.metrics.test_coverage.coverage_percentage == 50
    # Button is expanded first, so the walk from page.tsx adds no depth
    assert result.metrics.complexity.dependency_depth == 1
    # package.json is outside the default include patterns
    assert [i.message for i in result.issues] == [
        "package.json not found",
        "tsconfig.json not found (TypeScript projects)",
    ]
    assert summary.health_score == 100 - 2 * 3 - 5
    assert summary.issue_counts == {"error": 0, "warning": 2, "info": 0}


def test_include_patterns_from_config(tmp_path):
    _make_project(tmp_path)
    config = SiteScopeConfig(project_root=tmp_path)
    config.scan.include = ["**/*.{ts,tsx}", "package.json"]

    result = SiteAnalyzer(tmp_path, config=config).analyze()

    assert result.structure.total_files == 5
    assert [i.message for i in result.issues] == ["tsconfig.json not found (TypeScript projects)"]


def test_analyze_reports_cycles(tmp_path):
    (tmp_path / "a.ts").write_text('import { b } from "./b";\nexport const a = 1;\n')
    (tmp_path / "b.ts").write_text('import { a } from "./a";\nexport const b = 2;\n')

    result = SiteAnalyzer(tmp_path).analyze()

    cycles = [i for i in result.issues if i.kind is IssueKind.CIRCULAR_DEPENDENCY]
    root = result.structure.root_path
    assert [i.message for i in cycles] == [f"Circular dependency detected: {root}/a.ts → {root}/b.ts → {root}/a.ts"]
    assert "Resolve circular dependencies" in summarize(result).recommendations


def test_analyze_is_idempotent(tmp_path):
    _make_project(tmp_path)
    analyzer = SiteAnalyzer(tmp_path)

    assert analyzer.analyze().to_dict() == analyzer.analyze().to_dict()


def test_parse_failure_does_not_abort(tmp_path):
    _make_project(tmp_path)
    (tmp_path / "lib" / "broken.ts").write_text("export function broken() {\n")

    result = SiteAnalyzer(tmp_path).analyze()

    assert result.structure.total_files == 5
    assert all(not e.source.endswith("broken.ts") for e in result.dependencies)


def test_empty_project(tmp_path):
    result = SiteAnalyzer(tmp_path).analyze()
    summary = summarize(result)

    assert result.structure.total_files == 0
    assert summary.health_score == 100 - 3 * 3 - 15
    assert "Improve test coverage" in summary.recommendations


def test_missing_root_is_configuration_error(tmp_path):
    with pytest.raises(ConfigurationError):
        SiteAnalyzer(tmp_path / "missing").analyze()


def test_unexpected_stage_failure_is_wrapped(tmp_path, monkeypatch):
    def _boom(self, *args):
        raise KeyError("boom")

    monkeypatch.setattr("sitescope.core.analyzer.IssueDetector.detect", _boom)

    with pytest.raises(AnalyzeError) as excinfo:
        SiteAnalyzer(tmp_path).analyze()
    assert excinfo.value.details == {"stage": "issues"}
