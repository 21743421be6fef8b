import json

import pytest

from sitescope.cli.main import build_parser, main


def _project(root):
    (root / "lib").mkdir()
    (root / "lib" / "a.ts").write_text('import { b } from "./b";\nexport const a = 1;\n')
    (root / "lib" / "b.ts").write_text("export const b = 2;\n")
    (root / "legacy").mkdir()
    (root / "legacy" / "old.ts").write_text("export const old = 0;\n")


def test_parser_defaults():
    args = build_parser().parse_args(["analyze"])

    assert args.root is None
    assert args.format == "console"
    assert args.output is None


def test_analyze_json_to_stdout(tmp_path, capsys):
    _project(tmp_path)

    main(["analyze", str(tmp_path), "--format", "json"])

    data = json.loads(capsys.readouterr().out)
    assert data["summary"]["total_files"] == 3
    assert data["dependencies"][0]["from"].endswith("lib/a.ts")
    assert data["dependencies"][0]["to"].endswith("lib/b.ts")


def test_analyze_exclude_flag(tmp_path, capsys):
    _project(tmp_path)

    main(["analyze", str(tmp_path), "--format", "json", "--exclude", "legacy/**,dist/**"])

    data = json.loads(capsys.readouterr().out)
    assert data["summary"]["total_files"] == 2


def test_analyze_writes_output_file(tmp_path, capsys):
    _project(tmp_path)
    output = tmp_path / "report.json"

    main(["analyze", str(tmp_path), "-f", "json", "-o", str(output)])

    assert "Report written to" in capsys.readouterr().out
    data = json.loads(output.read_text(encoding="utf-8"))
    assert data["generated_at"]


def test_health_command(tmp_path, capsys):
    _project(tmp_path)

    main(["health", str(tmp_path)])

    out = capsys.readouterr().out
    assert out.startswith("Health score: ")
    assert "package.json not found" in out
    assert "Improve test coverage" in out


def test_missing_root_exits_with_error(tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        main(["analyze", str(tmp_path / "missing")])
    assert excinfo.value.code == 1


def test_report_renders_saved_analysis(tmp_path, capsys):
    _project(tmp_path)
    saved = tmp_path / "analysis.json"
    main(["analyze", str(tmp_path), "-f", "json", "-o", str(saved)])
    capsys.readouterr()

    main(["report", "--input", str(saved)])

    out = capsys.readouterr().out
    assert "Files: 3" in out
    assert "Dependencies: 1" in out


def test_report_json_keeps_summary(tmp_path, capsys):
    _project(tmp_path)
    saved = tmp_path / "analysis.json"
    main(["analyze", str(tmp_path), "-f", "json", "-o", str(saved)])
    capsys.readouterr()

    main(["report", "-i", str(saved), "--format", "json"])

    data = json.loads(capsys.readouterr().out)
    original = json.loads(saved.read_text(encoding="utf-8"))
    assert data["summary"] == original["summary"]
    assert data["dependencies"] == original["dependencies"]


def test_report_parser_defaults():
    args = build_parser().parse_args(["report"])

    assert args.input.name == "analysis-result.json"
    assert args.format == "console"


def test_report_missing_input_exits_with_error(tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        main(["report", "--input", str(tmp_path / "missing.json")])
    assert excinfo.value.code == 1
