# SPDX-License-Identifier: MIT
"""Rewrite compiled ES modules into scripts that register in a module registry.

The transform removes ``import`` statements, turns exports into live
registrations on a module record, rebinds references to imported names and
points relative dynamic imports at the registry loader, so independently
compiled modules can reference each other by id without a native module
loader.

Example:
    >>> from esm_registry import transform, module_id_for
    >>>
    >>> script = "import { ref } from './reactivity'\\nexport const n = ref(1)"
    >>> result = transform(script, module_id_for(script))
    >>> result.exports
    ['n']
    >>> result.imports
    ['./reactivity']
"""

__version__ = "0.1.0"

from .bindings import (
    ImportBinding,
    ImportBindingTable,
    collect_imports,
)
from .config import (
    RewriteOptions,
    RewriteOptionsError,
)
from .context import RewriteContext
from .dynamic_imports import rewrite_dynamic_imports
from .envelope import emit_envelope
from .exports import (
    ExportRegistration,
    StarExport,
    register_exports,
)
from .identifiers import (
    IdentifierRewriter,
    rewrite_identifiers,
)
from .parser import (
    Diagnostic,
    ModuleParseError,
    ParsedModule,
    parse_module,
)
from .transform import (
    ModuleRewriteError,
    TransformResult,
    module_id_for,
    transform,
    transform_source,
)

__all__ = [
    # Transform
    "transform",
    "transform_source",
    "module_id_for",
    "TransformResult",
    "ModuleRewriteError",
    # Config
    "RewriteOptions",
    "RewriteOptionsError",
    # Parser
    "parse_module",
    "ParsedModule",
    "Diagnostic",
    "ModuleParseError",
    # Passes
    "RewriteContext",
    "ImportBinding",
    "ImportBindingTable",
    "collect_imports",
    "ExportRegistration",
    "StarExport",
    "register_exports",
    "IdentifierRewriter",
    "rewrite_identifiers",
    "rewrite_dynamic_imports",
    "emit_envelope",
]
