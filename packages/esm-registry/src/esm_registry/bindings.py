# SPDX-License-Identifier: MIT
"""Import binding table.

Every top-level ``import`` statement is removed from the module and its
local names are recorded here, mapped to the expression that replaces them
at each point of use:

    import Foo from './foo'         Foo -> __import_0__.default
    import { bar as b } from 'x'    b   -> __import_1__.bar
    import * as ns from './foo'     ns  -> __import_0__

One record identifier is allocated per distinct specifier; the envelope
turns each record into a registry lookup.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterator, Optional

from .syntax import export_name, member_access, source_node, string_value

if TYPE_CHECKING:
    from tree_sitter import Node

    from .config import RewriteOptions
    from .context import RewriteContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ImportBinding:
    """A module-local name introduced by an import.

    Attributes:
        local_name: Name used in the module body
        record_id: Identifier of the imported module record
        specifier: Module specifier as written in the source
        imported_name: Exported name read from the record, None for a namespace
    """

    local_name: str
    record_id: str
    specifier: str
    imported_name: Optional[str] = None

    @property
    def is_namespace(self) -> bool:
        return self.imported_name is None

    @property
    def expression(self) -> str:
        """Return the expression replacing ``local_name`` at point of use."""
        if self.imported_name is None:
            return self.record_id
        return member_access(self.record_id, self.imported_name)


class ImportBindingTable:
    """Maps local names to import bindings and specifiers to record ids."""

    def __init__(self, options: "RewriteOptions") -> None:
        self._options = options
        self._records: dict[str, str] = {}
        self._bindings: dict[str, ImportBinding] = {}

    def __contains__(self, name: object) -> bool:
        return name in self._bindings

    def __iter__(self) -> Iterator[ImportBinding]:
        return iter(self._bindings.values())

    def __len__(self) -> int:
        return len(self._bindings)

    @property
    def records(self) -> dict[str, str]:
        """Return ``specifier -> record id`` in order of first appearance."""
        return dict(self._records)

    def record_for(self, specifier: str) -> str:
        """Return the record id of ``specifier``, allocating one if needed."""
        record_id = self._records.get(specifier)
        if record_id is None:
            record_id = self._options.record_id(len(self._records))
            self._records[specifier] = record_id
        return record_id

    def add(self, local_name: str, specifier: str, imported_name: Optional[str] = None) -> ImportBinding:
        """Bind ``local_name`` to an export of ``specifier`` (or its namespace)."""
        binding = ImportBinding(
            local_name=local_name,
            record_id=self.record_for(specifier),
            specifier=specifier,
            imported_name=imported_name,
        )
        self._bindings[local_name] = binding
        return binding

    def get(self, name: str) -> Optional[ImportBinding]:
        return self._bindings.get(name)

    def expression_for(self, name: str) -> Optional[str]:
        """Return the replacement expression of ``name``, or None if not imported."""
        binding = self._bindings.get(name)
        return binding.expression if binding is not None else None


def _bind_clause(ctx: "RewriteContext", clause: "Node", specifier: str) -> None:
    parsed = ctx.parsed
    for child in clause.named_children:
        if child.type == "identifier":
            ctx.imports.add(parsed.text(child), specifier, "default")
        elif child.type == "namespace_import":
            for name in child.named_children:
                if name.type == "identifier":
                    ctx.imports.add(parsed.text(name), specifier)
        elif child.type == "named_imports":
            for spec in child.named_children:
                if spec.type != "import_specifier":
                    continue
                name = spec.child_by_field_name("name")
                alias = spec.child_by_field_name("alias")
                imported = export_name(parsed, name)
                local = parsed.text(alias) if alias is not None else imported
                ctx.imports.add(local, specifier, imported)


def collect_imports(ctx: "RewriteContext") -> None:
    """Record every top-level import and delete the statement.

    Side-effect imports (``import './x'``) allocate a record without
    bindings so the module is still looked up.
    """
    parsed = ctx.parsed
    for node in parsed.statements():
        if node.type != "import_statement":
            continue

        source = source_node(node)
        specifier = string_value(parsed, source)
        ctx.imports.record_for(specifier)
        for child in node.named_children:
            if child.type == "import_clause":
                _bind_clause(ctx, child, specifier)

        ctx.buffer.delete(parsed.start(node), parsed.end(node))

    logger.debug(
        "%s: %d import bindings from %d modules",
        parsed.module_id,
        len(ctx.imports),
        len(ctx.imports.records),
    )
