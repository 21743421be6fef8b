"""Source walker: enumerate candidate files under a project root."""

from __future__ import annotations

import concurrent.futures
import logging
import os
import time
from pathlib import Path
from typing import Iterable, Iterator, List

from .exceptions import ConfigurationError
from .models import WalkedFile
from .paths import canonical_identity, expand_patterns, matches_any, normalize_path
from ..config.config import DEFAULT_EXCLUDE, DEFAULT_INCLUDE

logger = logging.getLogger(__name__)

# Directories never descended into, whatever the patterns say
SKIP_DIRECTORIES = frozenset({
    "node_modules",
    ".git",
    ".next",
    "dist",
    "build",
    "coverage",
    ".vercel",
    ".npm",
    ".pnpm-store",
})


def should_skip_directory(name: str) -> bool:
    """Return whether a directory name is on the skip-list or dot-prefixed."""
    return name in SKIP_DIRECTORIES or name.startswith(".")


def count_lines(text: str) -> int:
    """Physical line count as newline-separated segments."""
    return len(text.split("\n"))


def validate_root(root: Path) -> Path:
    """Return the resolved root or raise :class:`ConfigurationError`."""
    try:
        resolved = Path(root).resolve()
    except OSError as e:
        raise ConfigurationError(f"Cannot resolve project root {root}: {e}", details={"root": str(root)}) from e
    if not resolved.is_dir():
        raise ConfigurationError(f"Project root is not a directory: {resolved}", details={"root": str(resolved)})
    if not os.access(resolved, os.R_OK | os.X_OK):
        raise ConfigurationError(f"Project root is not readable: {resolved}", details={"root": str(resolved)})
    return resolved


class SourceWalker:
    """Enumerate files matching include patterns and not matching excludes."""

    def __init__(
        self,
        root: Path,
        include: Iterable[str] | None = None,
        exclude: Iterable[str] | None = None,
        max_workers: int | None = None,
    ) -> None:
        self.root = validate_root(root)
        self.root_id = canonical_identity(self.root)
        self.include = expand_patterns(include if include is not None else DEFAULT_INCLUDE)
        self.exclude = expand_patterns(exclude if exclude is not None else DEFAULT_EXCLUDE)
        self.max_workers = max_workers

    def walk(self) -> List[WalkedFile]:
        """Return walked files sorted by relative path.

        File reads run on a thread pool; every future is collected before
        returning, so callers always see the complete set.
        """
        start_time = time.time()
        paths = list(self._iter_candidates())

        results: List[WalkedFile] = []
        with concurrent.futures.ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            future_to_path = {executor.submit(self._read_file, path): path for path in paths}
            for future in concurrent.futures.as_completed(future_to_path):
                path = future_to_path[future]
                try:
                    results.append(future.result())
                except (OSError, ValueError) as e:
                    logger.warning("Failed to read file %s: %s", path, e)

        results.sort(key=lambda f: f.relative_path)
        logger.debug("Walked %d files in %.4fs", len(results), time.time() - start_time)
        return results

    def _iter_candidates(self) -> Iterator[Path]:
        def _on_error(error: OSError) -> None:
            logger.warning("Cannot read directory %s: %s", error.filename, error)

        for dirpath, dirnames, filenames in os.walk(self.root, onerror=_on_error):
            current = Path(dirpath)
            rel_dir = normalize_path(os.path.relpath(current, self.root))
            if rel_dir == ".":
                rel_dir = ""

            # In-place pruning keeps os.walk out of skipped subtrees
            dirnames[:] = sorted(
                d for d in dirnames
                if not should_skip_directory(d) and not self._directory_excluded(f"{rel_dir}/{d}".lstrip("/"))
            )

            for name in sorted(filenames):
                if name.startswith("."):
                    continue
                rel_path = f"{rel_dir}/{name}".lstrip("/")
                if not matches_any(rel_path, self.include):
                    continue
                if matches_any(rel_path, self.exclude):
                    continue
                yield current / name

    def _directory_excluded(self, rel_dir: str) -> bool:
        for pattern in self.exclude:
            if pattern.endswith("/**") and matches_any(rel_dir, [pattern[:-3]]):
                return True
        return False

    def _read_file(self, path: Path) -> WalkedFile:
        stat = path.stat()
        text = path.read_bytes().decode("utf-8", errors="replace")
        identity = canonical_identity(path)
        return WalkedFile(
            path=identity,
            relative_path=normalize_path(os.path.relpath(identity, self.root_id)),
            name=path.name,
            extension=path.suffix,
            size_bytes=stat.st_size,
            line_count=count_lines(text),
        )
