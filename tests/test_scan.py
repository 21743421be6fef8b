from pathlib import Path

import pytest

from sitescope.config import ThresholdsConfig
from sitescope.core.models import FileCategory
from sitescope.core.scanner import ProjectScanner, categorize, take_directory_census
from sitescope.core.walker import SourceWalker


def _scan(root: Path, include=("**/*",)):
    walked = SourceWalker(root, include=list(include)).walk()
    return ProjectScanner(root).scan(walked)


@pytest.mark.parametrize(
    "relative_path, expected",
    [
        ("app/page.tsx", FileCategory.ROUTE_ENTRY),
        ("app/dashboard/layout.js", FileCategory.LAYOUT_ENTRY),
        ("__tests__/page.tsx", FileCategory.ROUTE_ENTRY),
        ("__tests__/lib/utils.ts", FileCategory.TEST),
        ("components/Button.spec.tsx", FileCategory.TEST),
        ("lib/data.test.ts", FileCategory.TEST),
        ("package.json", FileCategory.CONFIG),
        ("next.config.js", FileCategory.CONFIG),
        ("components/Button.tsx", FileCategory.UI_COMPONENT),
        ("lib/utils.ts", FileCategory.SOURCE_TYPED),
        ("legacy/widget.jsx", FileCategory.SOURCE_UNTYPED),
        ("app/globals.css", FileCategory.STYLE),
        ("README.md", FileCategory.DOC),
        ("data/boards.json", FileCategory.DATA),
        ("Makefile", FileCategory.OTHER),
    ],
)
def test_categorize(relative_path, expected):
    assert categorize(relative_path) is expected


def test_category_groups_sum_to_total(tmp_path):
    for rel in ["app/page.tsx", "components/Button.tsx", "lib/utils.ts", "app/globals.css", "README.md"]:
        path = tmp_path / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("x\ny")

    structure = _scan(tmp_path)

    assert structure.total_files == 5
    assert sum(len(files) for files in structure.files_by_category.values()) == structure.total_files
    assert structure.total_lines == 10
    assert [f.name for f in structure.files_in(FileCategory.ROUTE_ENTRY)] == ["page.tsx"]


def test_directory_census_skips_ignored_directories(tmp_path):
    (tmp_path / "src" / "components").mkdir(parents=True)
    (tmp_path / "src" / "lib").mkdir()
    (tmp_path / "node_modules" / "react").mkdir(parents=True)
    (tmp_path / ".git").mkdir()
    (tmp_path / "src" / "components" / "Button.tsx").write_text("")
    (tmp_path / "src" / "lib" / "a.ts").write_text("")
    (tmp_path / "node_modules" / "react" / "index.js").write_text("")

    directories, counts = take_directory_census(tmp_path)

    assert directories == ["src", "src/components", "src/lib"]
    assert counts == {"src/components": 1, "src/lib": 1}


def test_scan_records_directories(tmp_path):
    (tmp_path / "src" / "components").mkdir(parents=True)
    (tmp_path / "src" / "components" / "Button.tsx").write_text("")

    structure = _scan(tmp_path)

    by_name = {d.name: d for d in structure.directories}
    assert by_name["src"].subdirectories == ("src/components",)
    assert by_name["src"].file_count == 0
    assert by_name["components"].file_count == 1
    assert Path(by_name["components"].path).is_absolute()


def test_health_reports_missing_manifests_and_tests(tmp_path):
    (tmp_path / "index.ts").write_text("export const a = 1;")

    findings = ProjectScanner.check_health(_scan(tmp_path))

    assert findings == [
        "package.json not found",
        "tsconfig.json not found (TypeScript projects)",
        "No test files found",
    ]


def test_health_flags_low_test_ratio_and_large_files(tmp_path):
    (tmp_path / "package.json").write_text("{}")
    (tmp_path / "tsconfig.json").write_text("{}")
    (tmp_path / "components").mkdir()
    for name in ["A", "B", "C", "D"]:
        (tmp_path / "components" / f"{name}.tsx").write_text("")
    (tmp_path / "components" / "A.test.tsx").write_text("")
    (tmp_path / "lib").mkdir()
    (tmp_path / "lib" / "big.ts").write_text("\n".join(["x"] * 301))

    findings = ProjectScanner.check_health(_scan(tmp_path), ThresholdsConfig())

    assert findings == [
        "Test files may be too few (1 tests for 4 component files)",
        "Found 1 large files (more than 300 lines)",
    ]
