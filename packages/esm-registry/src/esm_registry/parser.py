# SPDX-License-Identifier: MIT
"""Parsing of compiled JavaScript modules with tree-sitter.

The rewriter edits text by character offset while tree-sitter reports UTF-8
byte offsets. ParsedModule hides the conversion: every pass asks it for node
spans and never touches ``start_byte``/``end_byte`` directly.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Optional

import tree_sitter_javascript
from tree_sitter import Language, Node, Parser, Tree

logger = logging.getLogger(__name__)

JAVASCRIPT = Language(tree_sitter_javascript.language())

# Top-level nodes that are not statements
NON_STATEMENTS = frozenset({"comment", "hash_bang_line"})


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A syntax problem reported by the parser.

    Attributes:
        line: 1-based line number
        column: 1-based column (in characters)
        message: Human readable description
    """

    line: int
    column: int
    message: str

    def __str__(self) -> str:
        return f"{self.line}:{self.column}: {self.message}"


class ModuleParseError(Exception):
    """Raised when module source cannot be parsed."""

    def __init__(self, module_id: str, diagnostics: list[Diagnostic]):
        self.module_id = module_id
        self.diagnostics = diagnostics
        details = "; ".join(str(d) for d in diagnostics)
        super().__init__(f"Syntax error in {module_id}: {details}")


@lru_cache(maxsize=1)
def _parser() -> Parser:
    return Parser(JAVASCRIPT)


def _byte_to_char_offsets(source: str) -> list[int]:
    """Map every UTF-8 byte offset of ``source`` to its character offset."""
    offsets: list[int] = []
    for index, char in enumerate(source):
        offsets.extend([index] * len(char.encode("utf-8", "surrogatepass")))
    offsets.append(len(source))
    return offsets


@dataclass
class ParsedModule:
    """A parsed module and its original text.

    Attributes:
        source: The module text
        module_id: Label used in diagnostics
        tree: The tree-sitter syntax tree
    """

    source: str
    module_id: str
    tree: Tree
    _offsets: Optional[list[int]] = field(default=None, repr=False)

    @property
    def root(self) -> Node:
        return self.tree.root_node

    def statements(self) -> list[Node]:
        """Return the top-level statements in source order."""
        return [node for node in self.root.named_children if node.type not in NON_STATEMENTS]

    def start(self, node: Node) -> int:
        """Return the character offset where ``node`` starts."""
        if self._offsets is None:
            return node.start_byte
        return self._offsets[node.start_byte]

    def end(self, node: Node) -> int:
        """Return the character offset where ``node`` ends."""
        if self._offsets is None:
            return node.end_byte
        return self._offsets[node.end_byte]

    def text(self, node: Node) -> str:
        """Return the source text of ``node``."""
        return self.source[self.start(node):self.end(node)]

    def position(self, offset: int) -> tuple[int, int]:
        """Return the 1-based (line, column) of a character offset."""
        line = self.source.count("\n", 0, offset) + 1
        column = offset - (self.source.rfind("\n", 0, offset) + 1) + 1
        return line, column

    def diagnostics(self) -> list[Diagnostic]:
        """Collect ERROR and missing nodes in source order."""
        if not self.root.has_error:
            return []

        found: list[Diagnostic] = []
        stack = [self.root]
        while stack:
            node = stack.pop()
            if node.is_missing:
                line, column = self.position(self.start(node))
                found.append(Diagnostic(line, column, f"Missing {node.type}"))
                continue
            if node.type == "ERROR":
                line, column = self.position(self.start(node))
                lines = self.text(node).splitlines()
                snippet = lines[0][:30] if lines else ""
                found.append(Diagnostic(line, column, f"Unexpected {snippet!r}"))
                continue
            stack.extend(child for child in node.children if child.has_error)

        found.sort(key=lambda d: (d.line, d.column))
        return found


def parse_module(source: str, module_id: str = "<module>") -> ParsedModule:
    """Parse JavaScript module source.

    Args:
        source: Compiled JavaScript text
        module_id: Label used in error messages

    Returns:
        ParsedModule wrapping the syntax tree

    Raises:
        ModuleParseError: If the source contains syntax errors
    """
    data = source.encode("utf-8", "surrogatepass")
    tree = _parser().parse(data)
    offsets = None if len(data) == len(source) else _byte_to_char_offsets(source)

    parsed = ParsedModule(source=source, module_id=module_id, tree=tree, _offsets=offsets)
    diagnostics = parsed.diagnostics()
    if diagnostics:
        logger.debug("Parsing %s produced %d diagnostics", module_id, len(diagnostics))
        raise ModuleParseError(module_id, diagnostics)

    return parsed
