"""Path normalization and glob helpers shared by the pipeline stages."""

from __future__ import annotations

import fnmatch
import os
import posixpath
import re
from pathlib import Path
from typing import Iterable, List

_BRACE_RE = re.compile(r"\{([^{}]*)\}")


def normalize_path(path: str | os.PathLike[str]) -> str:
    """Return the canonical POSIX form of ``path`` (no ``..``, no backslashes)."""
    text = os.fspath(path).replace("\\", "/")
    if not text:
        return text
    return posixpath.normpath(text)


def canonical_identity(path: str | os.PathLike[str]) -> str:
    """Return the resolved, normalized absolute path used as a graph key."""
    return normalize_path(Path(path).resolve())


def expand_braces(pattern: str) -> List[str]:
    """Expand ``{a,b}`` alternations, which :mod:`fnmatch` does not support.

    >>> expand_braces("**/*.{ts,tsx}")
    ['**/*.ts', '**/*.tsx']
    """
    match = _BRACE_RE.search(pattern)
    if not match:
        return [pattern]
    head, tail = pattern[: match.start()], pattern[match.end() :]
    expanded: List[str] = []
    for option in match.group(1).split(","):
        expanded.extend(expand_braces(head + option + tail))
    return expanded


def expand_patterns(patterns: Iterable[str]) -> List[str]:
    expanded: List[str] = []
    for pattern in patterns:
        for item in expand_braces(pattern.strip()):
            if item and item not in expanded:
                expanded.append(item)
    return expanded


def globstar_variants(pattern: str) -> List[str]:
    """Expand each ``**/`` segment into itself and its zero-directory form.

    >>> globstar_variants("src/**/*.ts")
    ['src/**/*.ts', 'src/*.ts']
    """
    index = pattern.find("**/")
    if index == -1:
        return [pattern]
    head, tail = pattern[:index], pattern[index + 3 :]
    variants: List[str] = []
    for rest in globstar_variants(tail):
        variants.append(head + "**/" + rest)
        if not head or head.endswith("/"):
            variants.append(head + rest)
    return variants


def matches_pattern(relative_path: str, pattern: str) -> bool:
    """Glob match on a POSIX relative path.

    ``*`` crosses directory separators as in :mod:`fnmatch`; every ``**/``
    segment also matches zero directories.
    """
    return any(fnmatch.fnmatchcase(relative_path, p) for p in globstar_variants(pattern))


def matches_any(relative_path: str, patterns: Iterable[str]) -> bool:
    return any(matches_pattern(relative_path, p) for p in patterns)
