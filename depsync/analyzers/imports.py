"""Tree-sitter powered import extraction for TypeScript sources."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import tree_sitter_typescript
from tree_sitter import Language, Node, Parser

from ..logging import get_logger

_LANGUAGE_FACTORIES = {
    "typescript": tree_sitter_typescript.language_typescript,
    "tsx": tree_sitter_typescript.language_tsx,
}

# import ... from 'x' / import 'x'
_IMPORT_DECLARATION = "import_statement"
# import x = require('x')
_IMPORT_EQUALS = "import_require_clause"

# The grammar has no rule for `export import x = require('x')` and recovers
# it as an ERROR node.
_EXPORTED_IMPORT_EQUALS = re.compile(
    rb"""(?:export\s+)?import\s+[\w$]+\s*=\s*require\s*\(\s*"""
    rb"""('(?:[^'\\\n]|\\.)*'|"(?:[^"\\\n]|\\.)*")\s*\)\s*;?"""
)

_ESCAPE = re.compile(r"\\(u\{[0-9a-fA-F]+\}|u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|\r\n|[\s\S])")
_SIMPLE_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "b": "\b", "f": "\f", "v": "\v", "0": "\0"}
_LINE_CONTINUATIONS = {"\r\n", "\n", "\r", "\u2028", "\u2029"}

SOURCE_GLOB = "src/**/*.ts*"

logger = get_logger("imports")


class SourceParseError(ValueError):
    """Raised when a source file does not parse cleanly."""

    def __init__(self, path: str, line: int | None = None) -> None:
        location = f"{path}:{line}" if line is not None else path
        super().__init__(f"Unable to parse {location}")
        self.path = path
        self.line = line


class ImportExtractor:
    """Collects literal module references from import-like statements."""

    def __init__(self) -> None:
        self._parsers: Dict[str, Parser] = {}

    def extract(self, path: Path) -> List[str]:
        """Return the module references named in the file at ``path``."""
        source = path.read_text(encoding="utf-8")
        return self.extract_source(source, path=str(path))

    def extract_source(self, source: str, *, path: str = "<source>") -> List[str]:
        """Return the module references named in ``source``.

        Raises ``SourceParseError`` for syntax errors other than the recovered
        ``export import x = require(...)`` form.
        """
        source_bytes = source.encode("utf-8")
        tree = self._get_parser(path).parse(source_bytes)
        return self._collect(tree.root_node, source_bytes, path)

    def _get_parser(self, path: str) -> Parser:
        language_key = "tsx" if path.lower().endswith(".tsx") else "typescript"
        parser = self._parsers.get(language_key)
        if parser is None:
            language = Language(_LANGUAGE_FACTORIES[language_key]())
            parser = Parser(language)
            self._parsers[language_key] = parser
        return parser

    def _collect(self, root: Node, source_bytes: bytes, path: str) -> List[str]:
        found: List[Tuple[int, str]] = []
        # end of the last recovered statement; nodes starting before it are consumed
        consumed = 0
        stack = [root]
        while stack:
            node = stack.pop()
            if node.start_byte < consumed:
                continue
            if node.type == "ERROR" or node.is_missing:
                match = None if node.is_missing else _match_exported_import(node, source_bytes)
                if match is None:
                    raise SourceParseError(path, node.start_point[0] + 1)
                # drop partial results the parser recovered inside the statement
                found = [entry for entry in found if entry[0] < match.start()]
                value = _unquote(match.group(1).decode("utf-8", errors="ignore"))
                found.append((match.start(1), value))
                consumed = match.end()
                continue
            if node.type in (_IMPORT_DECLARATION, _IMPORT_EQUALS):
                specifier = _source_string(node)
                if specifier is not None:
                    found.append(
                        (specifier.start_byte, _string_value(specifier, source_bytes))
                    )
            stack.extend(reversed(node.children))
        return [value for _, value in found]


def extract_package_imports(
    pkg_path: Path, extractor: ImportExtractor | None = None
) -> List[str]:
    """Extract the imports of every TypeScript file under ``src/``."""
    extractor = extractor or ImportExtractor()
    imports: List[str] = []
    filenames = sorted(path for path in pkg_path.glob(SOURCE_GLOB) if path.is_file())
    for filename in filenames:
        found = extractor.extract(filename)
        logger.debug("Found %d imports in %s", len(found), filename)
        imports.extend(found)
    return imports


def _match_exported_import(node: Node, source_bytes: bytes) -> Optional[re.Match[bytes]]:
    """Match the recovered statement starting at the error node or one of its ancestors."""
    candidate: Optional[Node] = node
    while candidate is not None:
        match = _EXPORTED_IMPORT_EQUALS.match(source_bytes, candidate.start_byte)
        if match is not None and match.end() >= node.end_byte:
            return match
        candidate = candidate.parent
    return None


def _source_string(node: Node) -> Optional[Node]:
    source = node.child_by_field_name("source")
    if source is not None:
        return source
    if node.type == _IMPORT_EQUALS:
        for child in node.children:
            if child.type == "string":
                return child
    return None


def _string_value(node: Node, source_bytes: bytes) -> str:
    text = source_bytes[node.start_byte : node.end_byte].decode("utf-8", errors="ignore")
    return _unquote(text)


def _unquote(literal: str) -> str:
    """Return the value of a quoted string literal with escapes resolved."""
    return _ESCAPE.sub(_unescape, literal[1:-1])


def _unescape(match: re.Match[str]) -> str:
    sequence = match.group(1)
    if sequence in _SIMPLE_ESCAPES:
        return _SIMPLE_ESCAPES[sequence]
    if sequence in _LINE_CONTINUATIONS:
        return ""
    if sequence.startswith("u{"):
        return chr(int(sequence[2:-1], 16))
    if len(sequence) > 1 and sequence[0] in "ux":
        return chr(int(sequence[1:], 16))
    return sequence


__all__ = [
    "ImportExtractor",
    "SOURCE_GLOB",
    "SourceParseError",
    "extract_package_imports",
]
