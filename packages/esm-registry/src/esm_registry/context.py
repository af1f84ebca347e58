# SPDX-License-Identifier: MIT
"""Mutable state shared by the rewrite passes of one transform."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from patch_buffer import PatchBuffer

from .bindings import ImportBindingTable
from .config import RewriteOptions
from .exports import ExportRegistration, StarExport
from .parser import ParsedModule


@dataclass
class RewriteContext:
    """Everything a pass reads or writes, passed explicitly to each pass.

    Attributes:
        parsed: The parsed module
        buffer: Patch buffer over the module text
        options: Names used by generated code
        imports: Import binding table (complete before identifier rewriting)
        exports: Queued trailing export statements, in source order
        export_names: Statically known exported names, in source order
        helper_constants: Names that received a ``const`` helper declaration
        dynamic_imports: Number of dynamic imports rewritten
    """

    parsed: ParsedModule
    buffer: PatchBuffer
    options: RewriteOptions
    imports: ImportBindingTable
    exports: list[Union[ExportRegistration, StarExport]] = field(default_factory=list)
    export_names: list[str] = field(default_factory=list)
    helper_constants: set[str] = field(default_factory=set)
    dynamic_imports: int = 0

    @classmethod
    def create(cls, parsed: ParsedModule, options: RewriteOptions) -> "RewriteContext":
        return cls(
            parsed=parsed,
            buffer=PatchBuffer(parsed.source),
            options=options,
            imports=ImportBindingTable(options),
        )

