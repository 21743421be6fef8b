"""Per-run cache of syntax front-end results."""

from __future__ import annotations

import concurrent.futures
import logging
from pathlib import Path
from typing import Dict, Iterable, Optional

from ..exceptions import ParseError
from ..models import SourceFacts
from .js_ts import SOURCE_EXTENSIONS, parse_js_ts_source

logger = logging.getLogger(__name__)


class ParseSession:
    """Parse results for one analysis run.

    The session accumulates facts for every file it is asked about and is
    passed explicitly to the stages that need them. It is discarded with
    :meth:`close` (or by leaving the ``with`` block) when the run ends; no
    state outlives it.
    """

    def __init__(self, max_workers: int | None = None) -> None:
        self.max_workers = max_workers
        self._facts: Dict[str, SourceFacts] = {}
        self._failures: Dict[str, str] = {}
        self._closed = False

    def __enter__(self) -> "ParseSession":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def failures(self) -> Dict[str, str]:
        """Mapping of file identity -> parse failure message."""
        return dict(self._failures)

    def __contains__(self, path: str) -> bool:
        return path in self._facts or path in self._failures

    def add_source(self, path: str, text: str) -> Optional[SourceFacts]:
        """Parse ``text`` as the content of ``path`` and remember the outcome."""
        self._ensure_open()
        try:
            facts = parse_js_ts_source(text, path)
        except ParseError as e:
            self._record_failure(path, str(e))
            return None
        self._facts[path] = facts
        return facts

    def load(self, paths: Iterable[str]) -> None:
        """Read and parse every path not seen yet.

        Reads run on a thread pool; the call returns only once all of them
        have completed.
        """
        self._ensure_open()
        pending = [
            p for p in dict.fromkeys(paths)
            if p not in self and Path(p).suffix in SOURCE_EXTENSIONS
        ]
        if not pending:
            return

        with concurrent.futures.ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            future_to_path = {executor.submit(self._read_and_parse, path): path for path in pending}
            for future in concurrent.futures.as_completed(future_to_path):
                path = future_to_path[future]
                try:
                    self._facts[path] = future.result()
                except ParseError as e:
                    self._record_failure(path, str(e))
        logger.debug("Parsed %d files (%d failures)", len(pending), len(self._failures))

    def facts_for(self, path: str) -> Optional[SourceFacts]:
        """Return facts for ``path``, parsing it on demand; None on failure."""
        self._ensure_open()
        if path in self._failures:
            return None
        if path not in self._facts:
            try:
                self._facts[path] = self._read_and_parse(path)
            except ParseError as e:
                self._record_failure(path, str(e))
                return None
        return self._facts[path]

    def close(self) -> None:
        self._facts.clear()
        self._failures.clear()
        self._closed = True

    def _ensure_open(self) -> None:
        if self._closed:
            raise RuntimeError("ParseSession is closed")

    def _record_failure(self, path: str, message: str) -> None:
        logger.debug("Parse failure for %s: %s", path, message)
        self._failures[path] = message

    @staticmethod
    def _read_and_parse(path: str) -> SourceFacts:
        try:
            text = Path(path).read_bytes().decode("utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ParseError(f"Could not read {path}: {e}", details={"path": path}) from e
        return parse_js_ts_source(text, path)
