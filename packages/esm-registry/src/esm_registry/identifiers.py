# SPDX-License-Identifier: MIT
"""Rebinding of references to imported names.

Once imports are removed, every reference to an imported local name must
read through the import record instead. The rewrite depends on where the
reference appears:

- ``{ x }`` in an object literal becomes ``{ x: __import_0__.x }``
- ``{ x }`` in a destructuring pattern is left alone, except on the left of
  an assignment expression, where it is expanded like an object literal
- ``class A extends Base`` gets a ``const Base = __import_0__.Base;`` helper
  before its top-level statement (once per name)
- anything else is replaced in place

Names shadowed by a parameter or an inner declaration are not touched.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from .syntax import (
    CLASS_TYPES,
    DECLARATION_TYPES,
    FUNCTION_TYPES,
    PATTERN_TYPES,
    extract_names,
    is_identifier_name,
)

if TYPE_CHECKING:
    from tree_sitter import Node

    from .context import RewriteContext

logger = logging.getLogger(__name__)

# Nodes that never contain references to module-level bindings
SKIPPED_TYPES = frozenset({"comment", "export_clause", "namespace_export", "string"})

# Function expressions whose own name is visible inside them
NAMED_EXPRESSION_TYPES = frozenset({"function_expression", "function", "generator_function"})

_ENTER, _LEAVE, _POP_SCOPE = range(3)


def _field(node: "Node", name: str) -> Optional["Node"]:
    return node.child_by_field_name(name)


class IdentifierRewriter:
    """Rewrites references to imported bindings in the module body.

    The rewriter walks statements with an explicit stack, keeping the chain
    of ancestors and the names declared by enclosing inner scopes.
    """

    def __init__(self, ctx: "RewriteContext") -> None:
        self.ctx = ctx
        self.rewritten = 0
        self._scopes: list[set[str]] = []
        self._statement: Optional["Node"] = None

    def run(self) -> int:
        """Rewrite all top-level statements except imports.

        Returns:
            Number of references rewritten
        """
        if not len(self.ctx.imports):
            return 0

        for statement in self.ctx.parsed.statements():
            if statement.type == "import_statement":
                continue
            self._statement = statement
            if statement.type == "export_statement":
                for name in ("declaration", "value"):
                    target = _field(statement, name)
                    if target is not None:
                        self._walk(target, [statement])
            else:
                self._walk(statement, [])

        logger.debug("%s: rewrote %d imported references", self.ctx.parsed.module_id, self.rewritten)
        return self.rewritten

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------
    def _walk(self, root: "Node", ancestors: list["Node"]) -> None:
        stack: list[tuple[int, "Node"]] = [(_ENTER, root)]
        while stack:
            action, node = stack.pop()
            if action == _LEAVE:
                ancestors.pop()
                continue
            if action == _POP_SCOPE:
                self._scopes.pop()
                continue

            self._visit(node, ancestors)

            children = [c for c in node.named_children if c.type not in SKIPPED_TYPES]
            if not children:
                continue

            stack.append((_LEAVE, node))
            declared = self._declared_in(node)
            if declared:
                self._scopes.append(declared)
                stack.append((_POP_SCOPE, node))
            ancestors.append(node)
            stack.extend((_ENTER, child) for child in reversed(children))

    def _visit(self, node: "Node", ancestors: list["Node"]) -> None:
        kind = node.type
        if kind not in ("identifier", "shorthand_property_identifier", "shorthand_property_identifier_pattern"):
            return

        parsed = self.ctx.parsed
        name = parsed.text(node)
        binding = self.ctx.imports.get(name)
        if binding is None or self._is_shadowed(name):
            return

        buffer = self.ctx.buffer
        expression = binding.expression

        if kind == "shorthand_property_identifier":
            buffer.insert_after(parsed.end(node), f": {expression}")
        elif kind == "shorthand_property_identifier_pattern":
            if not self._in_destructuring_assignment(ancestors):
                return
            buffer.insert_after(parsed.end(node), f": {expression}")
        elif self._is_declaration(node, ancestors):
            return
        elif self._is_superclass(node, ancestors) and not is_identifier_name(expression):
            if name not in self.ctx.helper_constants:
                self.ctx.helper_constants.add(name)
                buffer.insert_before(parsed.start(self._statement), f"const {name} = {expression};\n")
        else:
            buffer.replace(parsed.start(node), parsed.end(node), expression)

        self.rewritten += 1

    # ------------------------------------------------------------------
    # Syntactic role
    # ------------------------------------------------------------------
    def _is_shadowed(self, name: str) -> bool:
        return any(name in scope for scope in self._scopes)

    @staticmethod
    def _pattern_owner(ancestors: list["Node"]) -> Optional["Node"]:
        """Return the first ancestor that is not part of a destructuring pattern."""
        for ancestor in reversed(ancestors):
            if ancestor.type not in PATTERN_TYPES:
                return ancestor
        return None

    def _in_destructuring_assignment(self, ancestors: list["Node"]) -> bool:
        owner = self._pattern_owner(ancestors)
        return owner is not None and owner.type == "assignment_expression"

    def _is_declaration(self, node: "Node", ancestors: list["Node"]) -> bool:
        """Return True if ``node`` declares a name rather than reading one."""
        if not ancestors:
            return False
        parent = ancestors[-1]
        kind = parent.type

        if kind == "variable_declarator":
            return _field(parent, "name") == node
        if kind in FUNCTION_TYPES or kind in CLASS_TYPES:
            return _field(parent, "name") == node or _field(parent, "parameter") == node
        if kind == "formal_parameters":
            return True
        if kind == "catch_clause":
            return _field(parent, "parameter") == node
        if kind == "for_in_statement":
            return _field(parent, "left") == node and _field(parent, "kind") is not None
        if kind in ("assignment_pattern", "object_assignment_pattern") and _field(parent, "right") == node:
            return False
        if kind in PATTERN_TYPES:
            owner = self._pattern_owner(ancestors)
            if owner is None:
                return True
            if owner.type == "assignment_expression":
                return False
            if owner.type == "for_in_statement":
                return _field(owner, "kind") is not None
            return True
        return False

    @staticmethod
    def _is_superclass(node: "Node", ancestors: list["Node"]) -> bool:
        if len(ancestors) < 2:
            return False
        heritage, owner = ancestors[-1], ancestors[-2]
        return (
            heritage.type == "class_heritage"
            and owner.type == "class_declaration"
            and heritage.named_children[-1] == node
        )

    # ------------------------------------------------------------------
    # Scopes
    # ------------------------------------------------------------------
    def _declared_in(self, node: "Node") -> set[str]:
        """Return the names an inner scope rooted at ``node`` declares."""
        parsed = self.ctx.parsed
        kind = node.type
        names: set[str] = set()

        if kind in FUNCTION_TYPES:
            parameters = _field(node, "parameters")
            if parameters is not None:
                for param in parameters.named_children:
                    names.update(extract_names(parsed, param))
            parameter = _field(node, "parameter")
            if parameter is not None:
                names.update(extract_names(parsed, parameter))
            if kind in NAMED_EXPRESSION_TYPES:
                own_name = _field(node, "name")
                if own_name is not None:
                    names.add(parsed.text(own_name))
            body = _field(node, "body")
            if body is not None and body.type == "statement_block":
                names.update(self._hoisted_vars(body))
        elif kind == "class":
            # A class expression's own name is bound inside the class only
            own_name = _field(node, "name")
            if own_name is not None:
                names.add(parsed.text(own_name))
        elif kind in ("statement_block", "class_static_block"):
            names.update(self._block_declarations(node.named_children))
        elif kind == "switch_body":
            for case in node.named_children:
                names.update(self._block_declarations(case.named_children))
        elif kind == "for_statement":
            initializer = _field(node, "initializer")
            if initializer is not None:
                names.update(self._block_declarations([initializer]))
        elif kind == "for_in_statement":
            if _field(node, "kind") is not None:
                names.update(extract_names(parsed, _field(node, "left")))
        elif kind == "catch_clause":
            parameter = _field(node, "parameter")
            if parameter is not None:
                names.update(extract_names(parsed, parameter))

        return names

    def _block_declarations(self, statements: list["Node"]) -> set[str]:
        parsed = self.ctx.parsed
        names: set[str] = set()
        for statement in statements:
            if statement.type in ("lexical_declaration", "variable_declaration"):
                for declarator in statement.named_children:
                    if declarator.type == "variable_declarator":
                        names.update(extract_names(parsed, _field(declarator, "name")))
            elif statement.type in DECLARATION_TYPES:
                name = _field(statement, "name")
                if name is not None:
                    names.add(parsed.text(name))
        return names

    def _hoisted_vars(self, body: "Node") -> set[str]:
        """Collect ``var`` names declared anywhere in a function body."""
        parsed = self.ctx.parsed
        names: set[str] = set()
        stack = list(body.named_children)
        while stack:
            node = stack.pop()
            if node.type in FUNCTION_TYPES or node.type in CLASS_TYPES:
                continue
            if node.type == "variable_declaration":
                for declarator in node.named_children:
                    if declarator.type == "variable_declarator":
                        names.update(extract_names(parsed, _field(declarator, "name")))
            stack.extend(node.named_children)
        return names


def rewrite_identifiers(ctx: "RewriteContext") -> int:
    """Rewrite references to imported bindings; returns the number rewritten."""
    return IdentifierRewriter(ctx).run()
