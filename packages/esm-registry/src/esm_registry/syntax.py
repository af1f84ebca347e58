# SPDX-License-Identifier: MIT
"""Syntax tree helpers shared by the rewrite passes."""

from __future__ import annotations

import json
import re
from typing import TYPE_CHECKING

from tree_sitter import Node

if TYPE_CHECKING:
    from .parser import ParsedModule

# Node kinds that introduce a function scope
FUNCTION_TYPES = frozenset(
    {
        "function_declaration",
        "generator_function_declaration",
        "function_expression",
        "function",
        "generator_function",
        "arrow_function",
        "method_definition",
    }
)

CLASS_TYPES = frozenset({"class_declaration", "class"})

# Declarations that bind a name in the enclosing block
DECLARATION_TYPES = frozenset(
    {"function_declaration", "generator_function_declaration", "class_declaration"}
)

# Destructuring pattern nodes (object/array patterns and their parts)
PATTERN_TYPES = frozenset(
    {
        "object_pattern",
        "array_pattern",
        "pair_pattern",
        "rest_pattern",
        "assignment_pattern",
        "object_assignment_pattern",
    }
)

IDENTIFIER_NAME = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")

# Leading "./" markers of a relative specifier, extra slashes included
RELATIVE_PREFIX = re.compile(r"^\./+")

_SIMPLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}


def is_identifier_name(name: str) -> bool:
    """Return True if ``name`` can follow a dot in a member expression."""
    return bool(IDENTIFIER_NAME.match(name))


def member_access(obj: str, name: str) -> str:
    """Render ``obj.name``, falling back to bracket access.

    Examples:
        >>> member_access("__import_0__", "ref")
        '__import_0__.ref'
        >>> member_access("__import_0__", "kebab-name")
        '__import_0__["kebab-name"]'
    """
    if is_identifier_name(name):
        return f"{obj}.{name}"
    return f"{obj}[{json.dumps(name)}]"


def registry_key(specifier: str) -> str:
    """Return the registry key a specifier resolves to.

    Relative specifiers drop their leading ``./``; anything else is used
    verbatim.
    """
    return RELATIVE_PREFIX.sub("", specifier)


def is_relative(specifier: str) -> bool:
    return specifier.startswith("./")


def _decode_escape(sequence: str) -> str:
    body = sequence[1:]
    if not body:
        return ""
    if body.startswith("u{"):
        return chr(int(body[2:-1], 16))
    if body[0] in "ux" and len(body) > 1:
        return chr(int(body[1:], 16))
    if body in _SIMPLE_ESCAPES:
        return _SIMPLE_ESCAPES[body]
    if body[0] in "\r\n\u2028\u2029":
        # line continuation
        return ""
    return body


def string_value(parsed: "ParsedModule", node: Node) -> str:
    """Return the value of a ``string`` literal node."""
    parts: list[str] = []
    for child in node.named_children:
        if child.type == "escape_sequence":
            parts.append(_decode_escape(parsed.text(child)))
        else:
            parts.append(parsed.text(child))
    return "".join(parts)


def export_name(parsed: "ParsedModule", node: Node) -> str:
    """Return the name of an import/export specifier part (identifier or string)."""
    if node.type == "string":
        return string_value(parsed, node)
    return parsed.text(node)


def extract_identifiers(node: Node | None, nodes: list[Node] | None = None) -> list[Node]:
    """Collect the identifier nodes bound by a declaration target.

    Handles plain identifiers, object patterns (with defaults and rest),
    array patterns (with holes and rest), assignment patterns and member
    expressions (whose base object is collected).
    """
    if nodes is None:
        nodes = []
    if node is None:
        return nodes

    kind = node.type
    if kind in ("identifier", "shorthand_property_identifier_pattern"):
        nodes.append(node)
    elif kind == "member_expression":
        base = node
        while base.type == "member_expression":
            base = base.child_by_field_name("object")
        if base is not None and base.type == "identifier":
            nodes.append(base)
    elif kind == "object_pattern":
        for prop in node.named_children:
            if prop.type == "pair_pattern":
                extract_identifiers(prop.child_by_field_name("value"), nodes)
            elif prop.type == "object_assignment_pattern":
                extract_identifiers(prop.child_by_field_name("left"), nodes)
            elif prop.type in ("rest_pattern", "shorthand_property_identifier_pattern"):
                extract_identifiers(prop, nodes)
    elif kind == "array_pattern":
        for element in node.named_children:
            extract_identifiers(element, nodes)
    elif kind == "rest_pattern":
        for child in node.named_children:
            extract_identifiers(child, nodes)
    elif kind == "assignment_pattern":
        extract_identifiers(node.child_by_field_name("left"), nodes)

    return nodes


def extract_names(parsed: "ParsedModule", node: Node) -> list[str]:
    """Return the names bound by a declaration target, in source order."""
    return [parsed.text(identifier) for identifier in extract_identifiers(node)]


def declared_names(parsed: "ParsedModule", declaration: Node) -> list[str]:
    """Return the names a top-level declaration introduces.

    Accepts variable declarations (``const``/``let``/``var``) and function,
    generator or class declarations.
    """
    if declaration.type in ("lexical_declaration", "variable_declaration"):
        names: list[str] = []
        for declarator in declaration.named_children:
            if declarator.type == "variable_declarator":
                names.extend(extract_names(parsed, declarator.child_by_field_name("name")))
        return names

    name = declaration.child_by_field_name("name")
    if name is None:
        return []
    return [parsed.text(name)]


def source_node(statement: Node) -> Node | None:
    """Return the ``from '...'`` string of an import or export statement."""
    source = statement.child_by_field_name("source")
    if source is not None:
        return source
    for child in statement.named_children:
        if child.type == "string":
            return child
    return None
