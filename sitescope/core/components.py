"""
Heuristic UI component detection.

A declaration is treated as a component when its text either returns markup
(``return <`` or ``return (<``) or calls a hook (``useSomething(``). This is
text sniffing, not semantic analysis: ordinary functions that happen to match
are reported (false positives) and components built through indirection, such
as ``memo(Inner)`` or factories, are missed (false negatives).
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, List, Sequence

from .language import ParseSession
from .models import Classification, ComponentRecord, Declaration, FileDescriptor

logger = logging.getLogger(__name__)

MARKUP_RETURN_PATTERN = re.compile(r"return\s*\(?\s*<")
HOOK_CALL_PATTERN = re.compile(r"\buse[A-Z]\w*\(")

PRIMARY_MARKUP_EXTENSION = ".tsx"
SECONDARY_MARKUP_EXTENSION = ".jsx"
COMPONENT_NAME_MARKER = "Component"


def looks_like_component(code: str) -> bool:
    """Return True when ``code`` returns markup or calls a hook."""
    return bool(MARKUP_RETURN_PATTERN.search(code) or HOOK_CALL_PATTERN.search(code))


def is_candidate_file(file: FileDescriptor) -> bool:
    if file.extension == PRIMARY_MARKUP_EXTENSION:
        return True
    return file.extension == SECONDARY_MARKUP_EXTENSION and COMPONENT_NAME_MARKER in file.name


class ComponentClassifier:
    """Flag top-level functions and variables that look like UI components."""

    def classify(self, files: Sequence[FileDescriptor], session: ParseSession) -> List[ComponentRecord]:
        candidates = [f for f in files if is_candidate_file(f)]
        session.load(f.path for f in candidates)

        components: List[ComponentRecord] = []
        for f in candidates:
            facts = session.facts_for(f.path)
            if facts is None:
                logger.warning("Component analysis skipped %s: %s", f.relative_path, session.failures.get(f.path, "parse failed"))
                continue
            components.extend(self.classify_declarations(f.path, facts.declarations))

        logger.info("Detected %d components in %d candidate files", len(components), len(candidates))
        return components

    @staticmethod
    def classify_declarations(file_path: str, declarations: Iterable[Declaration]) -> List[ComponentRecord]:
        records = []
        for decl in declarations:
            if not decl.text or not looks_like_component(decl.text):
                continue
            records.append(ComponentRecord(
                name=decl.name,
                file_path=file_path,
                export_kind="default" if decl.is_default else "named",
                is_component=True,
                classification=Classification.HEURISTIC,
                usage_count=0,
            ))
        return records
