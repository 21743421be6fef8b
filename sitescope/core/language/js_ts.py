"""
JavaScript/TypeScript front-end built on regex heuristics.

This is not a parser. Source text is first masked (comments, string and
template contents blanked, offsets preserved) so that delimiter depth can be
tracked; static imports, exports and top-level declarations are then matched
at depth zero. Regex literals and JSX text containing comment markers can
confuse the masking; files whose delimiters do not balance raise
:class:`ParseError`.
"""

from __future__ import annotations

import bisect
import re
from typing import List, Optional, Tuple

from ..exceptions import ParseError
from ..models import Declaration, ExportFact, ImportFact, SourceFacts

SOURCE_EXTENSIONS = frozenset({".ts", ".tsx", ".js", ".jsx"})

_OPENERS = "{(["
_CLOSERS = "})]"

# import Foo, { a as b } from "x" / import * as ns from 'x' / import type {T} from "x"
import_pattern = re.compile(
    r"^[ \t]*(?P<kw>import)\s+(?:type\s+)?(?P<clause>[\w$*{}\s,]+?)\s*from\s*(?P<q>['\"])(?P<spec>[^'\"\n]+)(?P=q)",
    re.MULTILINE,
)
# import "./side-effect.css"
side_effect_import_pattern = re.compile(
    r"^[ \t]*(?P<kw>import)\s*(?P<q>['\"])(?P<spec>[^'\"\n]+)(?P=q)",
    re.MULTILINE,
)

# function foo() / export default async function Foo() / export function* gen()
func_decl_pattern = re.compile(
    r"^[ \t]*(?P<export>export\s+(?P<default>default\s+)?)?(?:declare\s+)?(?:async\s+)?function\b\s*\*?\s*(?P<name>[A-Za-z_$][\w$]*)?",
    re.MULTILINE,
)
var_decl_pattern = re.compile(
    r"^[ \t]*(?P<export>export\s+)?(?:declare\s+)?(?P<keyword>const|let|var)\s+",
    re.MULTILINE,
)
class_decl_pattern = re.compile(
    r"^[ \t]*export\s+(?P<default>default\s+)?(?:abstract\s+)?class\b\s*(?P<name>[A-Za-z_$][\w$]*)?",
    re.MULTILINE,
)
interface_decl_pattern = re.compile(
    r"^[ \t]*export\s+(?:declare\s+)?interface\s+(?P<name>[A-Za-z_$][\w$]*)",
    re.MULTILINE,
)
export_list_pattern = re.compile(r"^[ \t]*export\s+(?:type\s+)?\{(?P<names>[^}]*)\}", re.MULTILINE)

_declarator_start = re.compile(r"^\s*[A-Za-z_$][\w$]*\s*(?:[:=!]|$)")
_identifier = re.compile(r"[A-Za-z_$][\w$]*")
# characters ending a line that continues onto the next one
_CONTINUATION_END = set("=+-*/%&|^!?:,.<>([{")
_CONTINUATION_START = set(".?:+-*/%&|^=,)]}>")
_EXPRESSION_CONTEXT = set("=(,:?&|+-![")


def _closes_on_line(text: str, start: int) -> bool:
    """Whether the quote at ``start`` is closed before the end of its line."""
    quote = text[start]
    j = start + 1
    while j < len(text) and text[j] != "\n":
        if text[j] == "\\":
            j += 2
            continue
        if text[j] == quote:
            return True
        j += 1
    return False


def mask_source(text: str) -> str:
    """Blank comments and string/template contents, keeping offsets and newlines.

    A quote only opens a string when its closing quote is on the same line, so
    an apostrophe in JSX text (``Don't``) is left as code.
    """
    out = list(text)
    n = len(text)
    i = 0
    state = "code"
    quote = ""
    template_stack: List[int] = []

    while i < n:
        c = text[i]
        nxt = text[i + 1] if i + 1 < n else ""

        if state == "code":
            if c == "/" and nxt == "/":
                out[i] = out[i + 1] = " "
                state = "line"
                i += 2
                continue
            if c == "/" and nxt == "*":
                out[i] = out[i + 1] = " "
                state = "block"
                i += 2
                continue
            if c in "'\"" and _closes_on_line(text, i):
                state, quote = "string", c
            elif c == "`":
                state = "template"
            elif template_stack:
                if c == "{":
                    template_stack[-1] += 1
                elif c == "}":
                    if template_stack[-1] == 0:
                        template_stack.pop()
                        out[i] = " "
                        state = "template"
                    else:
                        template_stack[-1] -= 1
            i += 1
        elif state == "line":
            if c == "\n":
                state = "code"
            else:
                out[i] = " "
            i += 1
        elif state == "block":
            if c == "*" and nxt == "/":
                out[i] = out[i + 1] = " "
                state = "code"
                i += 2
                continue
            if c != "\n":
                out[i] = " "
            i += 1
        elif state == "string":
            if c == "\\" and nxt and nxt != "\n":
                out[i] = out[i + 1] = " "
                i += 2
                continue
            if c == quote or c == "\n":
                state = "code"
            else:
                out[i] = " "
            i += 1
        else:  # template
            if c == "\\" and nxt:
                out[i] = " "
                if nxt != "\n":
                    out[i + 1] = " "
                i += 2
                continue
            if c == "`":
                state = "code"
            elif c == "$" and nxt == "{":
                out[i] = out[i + 1] = " "
                template_stack.append(0)
                state = "code"
                i += 2
                continue
            elif c != "\n":
                out[i] = " "
            i += 1

    return "".join(out)


def _depth_map(masked: str) -> List[int]:
    """Delimiter depth *before* each character of ``masked``."""
    depths = [0] * (len(masked) + 1)
    depth = 0
    for i, c in enumerate(masked):
        depths[i] = depth
        if c in _OPENERS:
            depth += 1
        elif c in _CLOSERS:
            depth -= 1
            if depth < 0:
                raise ParseError(f"Unbalanced '{c}' at offset {i}", details={"offset": i})
    depths[len(masked)] = depth
    if depth != 0:
        raise ParseError(f"{depth} unclosed delimiter(s) at end of file", details={"depth": depth})
    return depths


class _SourceIndex:
    """Offsets, line numbers and delimiter matching over masked text."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.masked = mask_source(text)
        self.depths = _depth_map(self.masked)
        self._line_starts = [0] + [m.end() for m in re.finditer("\n", text)]

    def line_of(self, offset: int) -> int:
        return bisect.bisect_right(self._line_starts, offset)

    def top_level(self, offset: int) -> bool:
        return self.depths[offset] == 0

    def previous_code_char(self, offset: int) -> str:
        j = offset - 1
        while j >= 0 and self.masked[j].isspace():
            j -= 1
        return self.masked[j] if j >= 0 else ""

    def match_delimiter(self, open_offset: int) -> int:
        """Offset of the delimiter closing the one at ``open_offset``."""
        depth = self.depths[open_offset]
        for j in range(open_offset + 1, len(self.masked)):
            if self.masked[j] in _CLOSERS and self.depths[j] == depth + 1:
                return j
        raise ParseError(f"No closing delimiter for offset {open_offset}")

    def statement_end(self, start: int) -> int:
        """End offset (exclusive) of the depth-0 statement starting at ``start``."""
        masked = self.masked
        n = len(masked)
        j = start
        while j < n:
            c = masked[j]
            if self.depths[j] == 0:
                if c == ";":
                    return j + 1
                if c == "\n" and not self._continues(j):
                    return j
            j += 1
        return n

    def _continues(self, newline: int) -> bool:
        before = self.previous_code_char(newline)
        if not before or before in _CONTINUATION_END:
            return True
        k = newline + 1
        while k < len(self.masked) and self.masked[k].isspace():
            k += 1
        return k < len(self.masked) and self.masked[k] in _CONTINUATION_START


def _parse_import_clause(clause: str) -> Tuple[Tuple[str, ...], bool, bool]:
    """Return (bound names, is_default, is_namespace) for an import clause."""
    names: List[str] = []
    is_default = False
    is_namespace = False

    braces = re.search(r"\{([^}]*)\}", clause)
    head = clause[: braces.start()] if braces else clause

    for part in (p.strip() for p in head.split(",")):
        if not part:
            continue
        namespace = re.fullmatch(r"\*\s*as\s+([A-Za-z_$][\w$]*)", part)
        if namespace:
            names.append(namespace.group(1))
            is_namespace = True
        elif _identifier.fullmatch(part):
            names.append(part)
            is_default = True

    if braces:
        for spec in (s.strip() for s in braces.group(1).split(",")):
            if not spec:
                continue
            spec = re.sub(r"^type\s+", "", spec)
            alias = re.fullmatch(r"([\w$]+)\s+as\s+([A-Za-z_$][\w$]*)", spec)
            names.append(alias.group(2) if alias else spec)

    return tuple(names), is_default, is_namespace


def _extract_imports(index: _SourceIndex) -> List[ImportFact]:
    found: List[Tuple[int, ImportFact]] = []
    for pattern in (import_pattern, side_effect_import_pattern):
        # matched on masked text so comments inside the clause are blanks;
        # the specifier is read back from the source at the same offsets
        for match in pattern.finditer(index.masked):
            kw = match.start("kw")
            if not index.top_level(kw):
                continue
            clause = match.groupdict().get("clause") or ""
            names, is_default, is_namespace = _parse_import_clause(clause)
            found.append((kw, ImportFact(
                module_specifier=index.text[match.start("spec") : match.end("spec")],
                bound_names=names,
                is_default=is_default,
                is_namespace=is_namespace,
                line=index.line_of(kw),
            )))
    found.sort(key=lambda item: item[0])
    return [fact for _, fact in found]


def _function_text_end(index: _SourceIndex, start: int) -> int:
    masked = index.masked
    paren = masked.find("(", start)
    if paren == -1:
        return index.statement_end(start)
    close = index.match_delimiter(paren)
    j = close + 1
    while j < len(masked):
        c = masked[j]
        if c == "{" and index.depths[j] == index.depths[paren]:
            return index.match_delimiter(j) + 1
        if c == ";" and index.depths[j] == index.depths[paren]:
            # overload signature or ambient declaration
            return j + 1
        j += 1
    return len(masked)


def _split_declarators(index: _SourceIndex, start: int, end: int) -> List[Tuple[int, int]]:
    """Split a variable statement body into declarator spans at depth-0 commas."""
    spans: List[Tuple[int, int]] = []
    seg_start = start
    for j in range(start, end):
        if index.masked[j] == "," and index.depths[j] == 0:
            if _declarator_start.match(index.masked[j + 1 : end]):
                spans.append((seg_start, j))
                seg_start = j + 1
    spans.append((seg_start, end))
    return spans


def _initializer_offset(index: _SourceIndex, start: int, end: int) -> Optional[int]:
    masked = index.masked
    base = index.depths[start]
    for j in range(start, end):
        if masked[j] == "=" and index.depths[j] == base:
            prev = masked[j - 1] if j > 0 else ""
            nxt = masked[j + 1] if j + 1 < len(masked) else ""
            if nxt in "=>" or prev in "=!<>":
                continue
            return j + 1
    return None


def _extract_functions(index: _SourceIndex) -> Tuple[List[Declaration], List[ExportFact]]:
    declarations: List[Declaration] = []
    exports: List[ExportFact] = []
    for match in func_decl_pattern.finditer(index.masked):
        start = match.start() + (len(match.group(0)) - len(match.group(0).lstrip()))
        if not index.top_level(start) or index.previous_code_char(start) in _EXPRESSION_CONTEXT:
            continue
        end = _function_text_end(index, start)
        name = match.group("name") or ""
        is_default = bool(match.group("default"))
        line = index.line_of(start)
        declarations.append(Declaration(
            name=name or "Anonymous",
            kind="function",
            text=index.text[start:end],
            is_default=is_default,
            line=line,
        ))
        if match.group("export"):
            exports.append(ExportFact(name=name or "anonymous", is_default=is_default, line=line, kind="function"))
    return declarations, exports


def _extract_variables(index: _SourceIndex) -> Tuple[List[Declaration], List[ExportFact]]:
    declarations: List[Declaration] = []
    exports: List[ExportFact] = []
    for match in var_decl_pattern.finditer(index.masked):
        start = match.start() + (len(match.group(0)) - len(match.group(0).lstrip()))
        if not index.top_level(start) or index.previous_code_char(start) in _EXPRESSION_CONTEXT:
            continue
        body_start = match.end()
        end = index.statement_end(body_start)
        line = index.line_of(start)
        for seg_start, seg_end in _split_declarators(index, body_start, end):
            k = seg_start
            while k < seg_end and index.masked[k].isspace():
                k += 1
            name_match = _identifier.match(index.masked, k, seg_end)
            if not name_match:
                continue  # destructuring pattern
            name = name_match.group(0)
            init = _initializer_offset(index, name_match.end(), seg_end)
            text = index.text[init:seg_end].strip().rstrip(";").strip() if init is not None else ""
            declarations.append(Declaration(name=name, kind="variable", text=text, is_default=False, line=line))
            if match.group("export"):
                exports.append(ExportFact(name=name, is_default=False, line=line, kind="variable"))
    return declarations, exports


def _extract_other_exports(index: _SourceIndex) -> List[ExportFact]:
    exports: List[ExportFact] = []
    for match in export_list_pattern.finditer(index.masked):
        if not index.top_level(match.start("names") - 1):
            continue
        line = index.line_of(match.start())
        for spec in (s.strip() for s in match.group("names").split(",")):
            if not spec:
                continue
            spec = re.sub(r"^type\s+", "", spec)
            alias = re.fullmatch(r"[\w$]+\s+as\s+([A-Za-z_$][\w$]*)", spec)
            exports.append(ExportFact(name=alias.group(1) if alias else spec, is_default=False, line=line))
    for match in class_decl_pattern.finditer(index.masked):
        if index.top_level(match.start()):
            exports.append(ExportFact(
                name=match.group("name") or "anonymous",
                is_default=bool(match.group("default")),
                line=index.line_of(match.start()),
                kind="class",
            ))
    for match in interface_decl_pattern.finditer(index.masked):
        if index.top_level(match.start()):
            exports.append(ExportFact(
                name=match.group("name"),
                is_default=False,
                line=index.line_of(match.start()),
                kind="interface",
            ))
    return exports


def parse_js_ts_source(source_code: str, path: str = "<memory>") -> SourceFacts:
    """Extract static imports, exports and top-level declarations.

    Functions are listed before variables, each in source order.
    """
    try:
        index = _SourceIndex(source_code)
        imports = _extract_imports(index)
        functions, function_exports = _extract_functions(index)
        variables, variable_exports = _extract_variables(index)
        other_exports = _extract_other_exports(index)
    except ParseError as e:
        raise ParseError(f"{path}: {e}", details={"path": path, **e.details}) from e

    exports = sorted(function_exports + variable_exports + other_exports, key=lambda x: x.line)
    return SourceFacts(
        path=path,
        imports=tuple(imports),
        exports=tuple(exports),
        declarations=tuple(functions + variables),
    )
