"""Project scanning: categorize walked files and take a directory census."""

from __future__ import annotations

import logging
import os
import posixpath
from collections import defaultdict
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from .models import DirectoryInfo, FileCategory, FileDescriptor, ProjectStructure, WalkedFile
from .paths import canonical_identity, normalize_path
from .walker import should_skip_directory
from ..config.config import ThresholdsConfig

logger = logging.getLogger(__name__)

ROUTE_MARKERS = frozenset({"page.tsx", "page.js"})
LAYOUT_MARKERS = frozenset({"layout.tsx", "layout.js"})
TEST_DIRECTORY_MARKERS = frozenset({"__tests__"})
TEST_NAME_MARKERS = (".test.", ".spec.")
CONFIG_FILES = frozenset({
    "package.json",
    "tsconfig.json",
    "next.config.ts",
    "next.config.js",
    "tailwind.config.js",
    "eslint.config.mjs",
    "jest.config.js",
})

PACKAGE_MANIFEST = "package.json"
TYPE_CONFIG_MANIFEST = "tsconfig.json"

EXTENSION_CATEGORIES: Dict[str, FileCategory] = {
    ".tsx": FileCategory.UI_COMPONENT,
    ".ts": FileCategory.SOURCE_TYPED,
    ".js": FileCategory.SOURCE_UNTYPED,
    ".jsx": FileCategory.SOURCE_UNTYPED,
    ".css": FileCategory.STYLE,
    ".scss": FileCategory.STYLE,
    ".sass": FileCategory.STYLE,
    ".md": FileCategory.DOC,
    ".mdx": FileCategory.DOC,
    ".json": FileCategory.DATA,
}


def categorize(relative_path: str) -> FileCategory:
    """Infer the category of a file from its relative path.

    Rules apply by priority: route/layout markers, then test markers, then
    known config names, then the extension.
    """
    path = normalize_path(relative_path)
    basename = posixpath.basename(path)

    if basename in ROUTE_MARKERS:
        return FileCategory.ROUTE_ENTRY
    if basename in LAYOUT_MARKERS:
        return FileCategory.LAYOUT_ENTRY

    directories = path.split("/")[:-1]
    if any(part in TEST_DIRECTORY_MARKERS for part in directories):
        return FileCategory.TEST
    if any(marker in basename for marker in TEST_NAME_MARKERS):
        return FileCategory.TEST

    if basename in CONFIG_FILES:
        return FileCategory.CONFIG

    extension = posixpath.splitext(basename)[1].lower()
    return EXTENSION_CATEGORIES.get(extension, FileCategory.OTHER)


def take_directory_census(root: Path) -> Tuple[List[str], Dict[str, int]]:
    """Walk ``root`` and return (relative directories, direct file counts).

    Directories are listed in walk order; the root itself is keyed ``""`` in
    the counts. A directory that cannot be read is logged and its subtree
    skipped.
    """
    directories: List[str] = []
    file_counts: Dict[str, int] = defaultdict(int)

    def _on_error(error: OSError) -> None:
        logger.warning("Directory read failed, skipping %s: %s", error.filename, error)

    for dirpath, dirnames, filenames in os.walk(root, onerror=_on_error):
        rel_dir = normalize_path(os.path.relpath(dirpath, root))
        if rel_dir == ".":
            rel_dir = ""
        dirnames[:] = sorted(d for d in dirnames if not should_skip_directory(d))
        for d in dirnames:
            directories.append(f"{rel_dir}/{d}" if rel_dir else d)
        if filenames:
            file_counts[rel_dir] += len(filenames)

    return directories, dict(file_counts)


def immediate_subdirectories(parent: str, all_directories: Iterable[str]) -> List[str]:
    """Directories exactly one level below ``parent`` (relative paths)."""
    prefix = parent + "/"
    return [
        d for d in all_directories
        if d.startswith(prefix) and "/" not in d[len(prefix):]
    ]


class ProjectScanner:
    """Build a :class:`ProjectStructure` from walked files."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)
        self.root_id = canonical_identity(self.root)

    def scan(self, walked_files: Iterable[WalkedFile]) -> ProjectStructure:
        files = [FileDescriptor.from_walked(w, categorize(w.relative_path)) for w in walked_files]
        grouped = self.group_by_category(files)
        directories, file_counts = take_directory_census(self.root)

        structure = ProjectStructure(
            root_path=self.root_id,
            total_files=len(files),
            total_lines=sum(f.line_count for f in files),
            files_by_category=grouped,
            directories=tuple(self._build_directory_infos(directories, file_counts)),
        )
        logger.info(
            "Scanned %d files (%d lines) in %d directories",
            structure.total_files,
            structure.total_lines,
            len(structure.directories),
        )
        return structure

    @staticmethod
    def group_by_category(files: Iterable[FileDescriptor]) -> Dict[FileCategory, Tuple[FileDescriptor, ...]]:
        buckets: Dict[FileCategory, List[FileDescriptor]] = {category: [] for category in FileCategory}
        for f in files:
            buckets[f.category].append(f)
        return {category: tuple(items) for category, items in buckets.items()}

    def _build_directory_infos(self, directories: List[str], file_counts: Dict[str, int]) -> List[DirectoryInfo]:
        infos = []
        for d in directories:
            infos.append(DirectoryInfo(
                path=normalize_path(posixpath.join(self.root_id, d)),
                name=posixpath.basename(d) or posixpath.basename(self.root_id),
                file_count=file_counts.get(d, 0),
                subdirectories=tuple(immediate_subdirectories(d, directories)),
            ))
        return infos

    @staticmethod
    def check_health(
        structure: ProjectStructure,
        thresholds: Optional[ThresholdsConfig] = None,
    ) -> List[str]:
        """Return structural findings as human readable strings."""
        thresholds = thresholds or ThresholdsConfig()
        findings: List[str] = []

        config_names = {f.name for f in structure.files_in(FileCategory.CONFIG)}
        if PACKAGE_MANIFEST not in config_names:
            findings.append(f"{PACKAGE_MANIFEST} not found")
        if TYPE_CONFIG_MANIFEST not in config_names:
            findings.append(f"{TYPE_CONFIG_MANIFEST} not found (TypeScript projects)")

        test_files = len(structure.files_in(FileCategory.TEST))
        component_files = len(structure.files_in(FileCategory.UI_COMPONENT))
        if test_files == 0:
            findings.append("No test files found")
        elif component_files > 0 and test_files / component_files < thresholds.min_test_ratio:
            findings.append(
                f"Test files may be too few ({test_files} tests for {component_files} component files)"
            )

        large_files = [f for f in structure.all_files() if f.line_count > thresholds.large_file_lines]
        if large_files:
            findings.append(
                f"Found {len(large_files)} large files (more than {thresholds.large_file_lines} lines)"
            )

        return findings

    @staticmethod
    def describe(structure: ProjectStructure) -> None:
        """Log a project overview at INFO level."""
        logger.info("Project overview for %s", structure.root_path)
        logger.info("  directories: %d", len(structure.directories))
        logger.info("  files: %d", structure.total_files)
        logger.info("  lines: %s", f"{structure.total_lines:,}")

        for category in FileCategory:
            files = structure.files_in(category)
            if files:
                lines = sum(f.line_count for f in files)
                logger.info("  %s: %d files (%d lines)", category.value, len(files), lines)

        main_directories = sorted(
            (d for d in structure.directories if not d.name.startswith(".") and d.file_count > 0),
            key=lambda d: d.file_count,
            reverse=True,
        )[:10]
        for d in main_directories:
            logger.info("  dir %s: %d files", d.name, d.file_count)
