# SPDX-License-Identifier: MIT
"""Export registration.

Export statements are converted into registrations against the module
record. Registrations are queued and emitted after the module body, each
wrapping its value in a zero-argument accessor so reads always see the
current value of the binding:

    let count = 0; export { count }
        -> let count = 0;
           ...
           __export__(__module__, "count", () => count)

``export default <expr>`` is rewritten in place to an assignment onto the
record's ``default`` slot.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from .syntax import (
    declared_names,
    export_name,
    member_access,
    source_node,
    string_value,
)

if TYPE_CHECKING:
    from tree_sitter import Node

    from .config import RewriteOptions
    from .context import RewriteContext

logger = logging.getLogger(__name__)

# Default exports that keep their own binding when they carry a name
NAMED_DEFAULT_TYPES = frozenset(
    {
        "function_declaration",
        "generator_function_declaration",
        "class_declaration",
        "function_expression",
        "function",
        "generator_function",
        "class",
    }
)


@dataclass(frozen=True, slots=True)
class ExportRegistration:
    """A live export queued for emission after the module body.

    Attributes:
        exported_name: Name visible to importers
        value_expression: Expression evaluated on every read
    """

    exported_name: str
    value_expression: str

    def render(self, options: "RewriteOptions") -> str:
        return (
            f"{options.export_helper}({options.module_binding}, "
            f"{json.dumps(self.exported_name)}, () => {self.value_expression})"
        )


@dataclass(frozen=True, slots=True)
class StarExport:
    """An ``export * from`` forwarding every key but ``default``.

    Names the module exports explicitly take precedence over forwarded ones.
    Only own keys of the record count as present, so names such as
    ``toString`` are still forwarded.
    """

    record_id: str
    specifier: str

    def render(self, options: "RewriteOptions") -> str:
        record = self.record_id
        module = options.module_binding
        return (
            f"for (const key of Object.keys({record})) {{\n"
            f'  if (key !== "default" && !Object.prototype.hasOwnProperty.call({module}, key)) {{\n'
            f"    {options.export_helper}({module}, key, () => {record}[key])\n"
            f"  }}\n"
            f"}}"
        )


def _keyword(node: "Node", kind: str) -> Optional["Node"]:
    for child in node.children:
        if child.type == kind:
            return child
    return None


def _child_of_type(node: "Node", kind: str) -> Optional["Node"]:
    for child in node.named_children:
        if child.type == kind:
            return child
    return None


def _queue(ctx: "RewriteContext", exported_name: str, expression: str) -> None:
    ctx.exports.append(ExportRegistration(exported_name, expression))
    ctx.export_names.append(exported_name)


def _register_default(ctx: "RewriteContext", node: "Node", prefix_start: int) -> None:
    parsed = ctx.parsed
    target = node.child_by_field_name("declaration") or node.child_by_field_name("value")
    name = target.child_by_field_name("name") if target.type in NAMED_DEFAULT_TYPES else None

    if name is not None:
        # Keep `function f() {}` / `class F {}` as declarations so the name
        # stays bound in module scope.
        ctx.buffer.delete(prefix_start, parsed.start(target))
        _queue(ctx, "default", parsed.text(name))
        return

    ctx.buffer.replace(prefix_start, parsed.start(target), f"{ctx.options.module_binding}.default = ")
    ctx.export_names.append("default")


def _register_specifiers(ctx: "RewriteContext", clause: "Node", record_id: Optional[str]) -> None:
    parsed = ctx.parsed
    for spec in clause.named_children:
        if spec.type != "export_specifier":
            continue
        name = export_name(parsed, spec.child_by_field_name("name"))
        alias = spec.child_by_field_name("alias")
        exported = export_name(parsed, alias) if alias is not None else name

        if record_id is not None:
            _queue(ctx, exported, member_access(record_id, name))
        else:
            _queue(ctx, exported, ctx.imports.expression_for(name) or name)


def register_exports(ctx: "RewriteContext") -> None:
    """Convert every top-level export statement into registrations."""
    parsed = ctx.parsed
    for node in parsed.statements():
        if node.type != "export_statement":
            continue

        keyword = _keyword(node, "export")
        prefix_start = parsed.start(keyword) if keyword is not None else parsed.start(node)

        if _keyword(node, "default") is not None:
            _register_default(ctx, node, prefix_start)
            continue

        declaration = node.child_by_field_name("declaration")
        if declaration is not None:
            for name in declared_names(parsed, declaration):
                _queue(ctx, name, name)
            ctx.buffer.delete(prefix_start, parsed.start(declaration))
            continue

        clause = _child_of_type(node, "export_clause")
        source = source_node(node)
        if source is None:
            # export { a, b as c }
            if clause is not None:
                _register_specifiers(ctx, clause, None)
        else:
            specifier = string_value(parsed, source)
            record_id = ctx.imports.record_for(specifier)
            namespace = _child_of_type(node, "namespace_export")
            if namespace is not None:
                alias = namespace.named_children[-1]
            else:
                alias = _child_of_type(node, "identifier")
            if clause is not None:
                _register_specifiers(ctx, clause, record_id)
            elif alias is not None:
                # export * as ns from './x'
                _queue(ctx, export_name(parsed, alias), record_id)
            else:
                ctx.exports.append(StarExport(record_id, specifier))

        ctx.buffer.delete(parsed.start(node), parsed.end(node))

    logger.debug("%s: %d export statements queued", parsed.module_id, len(ctx.exports))
