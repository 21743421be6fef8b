"""Turn import declarations into directed dependency edges."""

from __future__ import annotations

import logging
import posixpath
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from .language import SOURCE_EXTENSIONS, ParseSession
from .models import DependencyEdge, ExportFact, FileDescriptor, ImportFact, RelationKind
from .paths import normalize_path

logger = logging.getLogger(__name__)

DEFAULT_ALIASES: Dict[str, str] = {"@/": ".", "~/": "."}

# Order in which extensions are tried when a specifier omits one
RESOLUTION_EXTENSIONS = (".ts", ".tsx", ".js", ".jsx")


def source_files(files: Iterable[FileDescriptor]) -> List[FileDescriptor]:
    """Files the syntax front-end can handle."""
    return [f for f in files if f.extension in SOURCE_EXTENSIONS]


def classify_specifier(specifier: str, alias_prefixes: Iterable[str] = DEFAULT_ALIASES) -> RelationKind:
    """Classify a module specifier.

    A bare name with no separator (``utils``) counts as internal, which also
    catches single-segment packages such as ``react``; only scoped or nested
    specifiers are recognized as external.
    """
    if specifier.startswith("./") or specifier.startswith("../"):
        return RelationKind.RELATIVE
    if any(specifier.startswith(prefix) for prefix in alias_prefixes):
        return RelationKind.INTERNAL_ALIAS
    if "/" not in specifier and not specifier.startswith("@"):
        return RelationKind.INTERNAL_ALIAS
    return RelationKind.EXTERNAL


class DependencyExtractor:
    """Build the dependency edge list for a set of source files."""

    def __init__(self, root_path: str, aliases: Optional[Mapping[str, str]] = None) -> None:
        self.root_path = normalize_path(root_path)
        alias_map = DEFAULT_ALIASES if aliases is None else aliases
        # longest prefix first so "@/lib/" wins over "@/"
        self.aliases: Dict[str, str] = {
            prefix: normalize_path(posixpath.join(self.root_path, target))
            for prefix, target in sorted(alias_map.items(), key=lambda item: -len(item[0]))
        }

    def extract(self, files: Sequence[FileDescriptor], session: ParseSession) -> List[DependencyEdge]:
        """Return one edge per import declaration, in file then line order."""
        sources = source_files(files)
        known = {f.path for f in sources}
        session.load(f.path for f in sources)

        edges: List[DependencyEdge] = []
        for f in sources:
            facts = session.facts_for(f.path)
            if facts is None:
                logger.warning("Skipping %s: %s", f.relative_path, session.failures.get(f.path, "parse failed"))
                continue
            for imp in facts.imports:
                edges.append(self.edge_for(f.path, imp, known))

        logger.info("Extracted %d dependencies from %d files", len(edges), len(sources))
        return edges

    def edge_for(self, source: str, imp: ImportFact, known: Optional[set[str]] = None) -> DependencyEdge:
        relation = classify_specifier(imp.module_specifier, self.aliases)
        if relation is RelationKind.EXTERNAL:
            target = imp.module_specifier
        else:
            target = self.resolve(source, imp.module_specifier, known or set())
        return DependencyEdge(
            source=source,
            target=target,
            relation=relation,
            imported_names=tuple(imp.bound_names),
        )

    def resolve(self, importer: str, specifier: str, known: set[str]) -> str:
        """Rewrite a relative or alias specifier into a canonical path.

        Alias prefixes map onto their configured directory; every other
        specifier is joined onto the importer's directory. When the joined
        path names a scanned file (directly, with a source extension, or as a
        directory index) that file's identity is returned.
        """
        base = None
        for prefix, directory in self.aliases.items():
            if specifier.startswith(prefix):
                base = normalize_path(posixpath.join(directory, specifier[len(prefix):]))
                break
        if base is None:
            base = normalize_path(posixpath.join(posixpath.dirname(importer), specifier))

        for candidate in self._candidates(base):
            if candidate in known:
                return candidate
        return base

    @staticmethod
    def _candidates(base: str) -> List[str]:
        candidates = [base]
        candidates.extend(base + ext for ext in RESOLUTION_EXTENSIONS)
        candidates.extend(posixpath.join(base, "index" + ext) for ext in RESOLUTION_EXTENSIONS)
        return candidates

    @staticmethod
    def extract_exports(files: Sequence[FileDescriptor], session: ParseSession) -> Dict[str, List[ExportFact]]:
        """Exported names per source file; unparseable files are left out."""
        sources = source_files(files)
        session.load(f.path for f in sources)
        exports: Dict[str, List[ExportFact]] = {}
        for f in sources:
            facts = session.facts_for(f.path)
            if facts is None:
                logger.warning("Export analysis skipped %s", f.relative_path)
                continue
            exports[f.path] = list(facts.exports)
        return exports
