import logging

import pytest

from sitescope.core.dependencies import DependencyExtractor, classify_specifier
from sitescope.core.language import ParseSession
from sitescope.core.models import RelationKind
from sitescope.core.scanner import ProjectScanner
from sitescope.core.walker import SourceWalker


def _write(root, rel, content):
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)


def _files(root):
    structure = ProjectScanner(root).scan(SourceWalker(root).walk())
    return structure.root_path, structure.all_files()


@pytest.mark.parametrize(
    "specifier, expected",
    [
        ("./button", RelationKind.RELATIVE),
        ("../lib/utils", RelationKind.RELATIVE),
        ("@/components/ui/dialog", RelationKind.INTERNAL_ALIAS),
        ("~/lib/data", RelationKind.INTERNAL_ALIAS),
        ("utils", RelationKind.INTERNAL_ALIAS),
        # single-segment package names are indistinguishable from bare internal names
        ("react", RelationKind.INTERNAL_ALIAS),
        ("@dnd-kit/core", RelationKind.EXTERNAL),
        ("next/link", RelationKind.EXTERNAL),
    ],
)
def test_classify_specifier(specifier, expected):
    assert classify_specifier(specifier) is expected


def test_extract_resolves_relative_and_alias_targets(tmp_path):
    _write(tmp_path, "src/a.ts", 'import { b } from "./b";\nimport C from "@/src/c";\nimport Link from "next/link";\n')
    _write(tmp_path, "src/b.ts", "export const b = 1;\n")
    _write(tmp_path, "src/c.tsx", "export default function C() {\n  return <div />;\n}\n")
    root, files = _files(tmp_path)

    with ParseSession() as session:
        edges = DependencyExtractor(root).extract(files, session)

    assert [(e.source, e.target, e.relation) for e in edges] == [
        (f"{root}/src/a.ts", f"{root}/src/b.ts", RelationKind.RELATIVE),
        (f"{root}/src/a.ts", f"{root}/src/c.tsx", RelationKind.INTERNAL_ALIAS),
        (f"{root}/src/a.ts", "next/link", RelationKind.EXTERNAL),
    ]
    assert edges[0].imported_names == ("b",)
    assert edges[0].to_dict()["from"] == f"{root}/src/a.ts"


def test_extract_resolves_directory_index(tmp_path):
    _write(tmp_path, "app.ts", 'import { ui } from "./components";\n')
    _write(tmp_path, "components/index.ts", "export const ui = 1;\n")
    root, files = _files(tmp_path)

    with ParseSession() as session:
        (edge,) = DependencyExtractor(root).extract(files, session)

    assert edge.target == f"{root}/components/index.ts"


def test_unresolved_target_keeps_normalized_path(tmp_path):
    _write(tmp_path, "src/deep/a.ts", 'import x from "../missing";\n')
    root, files = _files(tmp_path)

    with ParseSession() as session:
        (edge,) = DependencyExtractor(root).extract(files, session)

    assert edge.target == f"{root}/src/missing"
    assert edge.is_internal


def test_configured_alias_directory(tmp_path):
    _write(tmp_path, "src/app.ts", 'import { cn } from "@lib/utils";\n')
    _write(tmp_path, "src/lib/utils.ts", "export function cn() {}\n")
    root, files = _files(tmp_path)

    with ParseSession() as session:
        (edge,) = DependencyExtractor(root, {"@lib/": "src/lib"}).extract(files, session)

    assert edge.relation is RelationKind.INTERNAL_ALIAS
    assert edge.target == f"{root}/src/lib/utils.ts"


def test_parse_failure_skips_file(tmp_path, caplog):
    _write(tmp_path, "broken.ts", 'import a from "./a";\nfunction f() {\n')
    _write(tmp_path, "ok.ts", 'import a from "./a";\n')
    root, files = _files(tmp_path)

    with caplog.at_level(logging.WARNING):
        with ParseSession() as session:
            edges = DependencyExtractor(root).extract(files, session)

    assert [e.source for e in edges] == [f"{root}/ok.ts"]
    assert "Skipping broken.ts" in caplog.text


def test_extract_exports(tmp_path):
    _write(tmp_path, "lib/utils.ts", "export function cn() {}\nexport const VERSION = 1;\nconst hidden = 2;\n")
    root, files = _files(tmp_path)

    with ParseSession() as session:
        exports = DependencyExtractor.extract_exports(files, session)

    assert [e.name for e in exports[f"{root}/lib/utils.ts"]] == ["cn", "VERSION"]
