# SPDX-License-Identifier: MIT
"""ES module to registry script transform.

Example:
    Original:
        import { ref } from './reactivity'
        export const count = ref(0)

    Rewritten (module id "counter"):
        const __modules__ = globalThis.__modules__ || (globalThis.__modules__ = {})
        ...
        const __module__ = __modules__["counter"] = { [Symbol.toStringTag]: "Module" }
        const __import_0__ = __require__("reactivity")

        const count = __import_0__.ref(0)
        __export__(__module__, "count", () => count)
        export default __module__
"""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass, field
from typing import Optional

from patch_buffer import PatchError

from .bindings import collect_imports
from .config import RewriteOptions
from .context import RewriteContext
from .dynamic_imports import rewrite_dynamic_imports
from .envelope import emit_envelope
from .exports import register_exports
from .identifiers import rewrite_identifiers
from .parser import parse_module

logger = logging.getLogger(__name__)


class ModuleRewriteError(Exception):
    """Raised when the rewrite passes produce conflicting edits."""

    def __init__(self, module_id: str, message: str):
        self.module_id = module_id
        super().__init__(f"Failed to rewrite {module_id}: {message}")


@dataclass
class TransformResult:
    """Result of transforming one module.

    Attributes:
        code: The rewritten script
        module_id: Registry key of the module
        exports: Exported names, in source order (``export *`` not expanded)
        imports: Imported specifiers, in record order
        dynamic_imports: Number of dynamic imports pointed at the registry
        rewritten_references: Number of imported references rebound
    """

    code: str
    module_id: str
    exports: list[str] = field(default_factory=list)
    imports: list[str] = field(default_factory=list)
    dynamic_imports: int = 0
    rewritten_references: int = 0


def module_id_for(script: str, css: str = "") -> str:
    """Return a deterministic module id derived from the module content.

    Args:
        script: Compiled script text
        css: Compiled stylesheet text

    Returns:
        First 16 hex characters of the SHA256 of script and stylesheet
    """
    digest = hashlib.sha256()
    digest.update(script.encode("utf-8", "surrogatepass"))
    digest.update(b"\0")
    digest.update(css.encode("utf-8", "surrogatepass"))
    return digest.hexdigest()[:16]


def transform(
    script: str,
    module_id: str,
    css: Optional[str] = None,
    *,
    options: Optional[RewriteOptions] = None,
) -> TransformResult:
    """Rewrite an ES module into a script registering itself in the module registry.

    Args:
        script: Compiled JavaScript module text
        module_id: Registry key of the module, also used in diagnostics
        css: Optional compiled stylesheet appended to the shared stylesheet
        options: Names used by the generated code

    Returns:
        TransformResult with the rewritten code

    Raises:
        ModuleParseError: If the script cannot be parsed
        ModuleRewriteError: If the rewrite passes produce conflicting edits
        ValueError: If the module id is empty
    """
    if not isinstance(module_id, str) or not module_id:
        raise ValueError("module_id must be a non-empty string")

    options = options or RewriteOptions()
    parsed = parse_module(script, module_id)
    ctx = RewriteContext.create(parsed, options)

    try:
        collect_imports(ctx)
        register_exports(ctx)
        references = rewrite_identifiers(ctx)
        rewrite_dynamic_imports(ctx)
    except PatchError as e:
        raise ModuleRewriteError(module_id, str(e)) from e

    emit_envelope(ctx, module_id, css)

    logger.debug(
        "Transformed %s: %d exports, %d imports, %d dynamic imports",
        module_id,
        len(ctx.export_names),
        len(ctx.imports.records),
        ctx.dynamic_imports,
    )

    return TransformResult(
        code=ctx.buffer.serialize(),
        module_id=module_id,
        exports=list(ctx.export_names),
        imports=list(ctx.imports.records),
        dynamic_imports=ctx.dynamic_imports,
        rewritten_references=references,
    )


def transform_source(
    script: str,
    module_id: str,
    css: Optional[str] = None,
    *,
    options: Optional[RewriteOptions] = None,
) -> str:
    """Rewrite an ES module and return only the code."""
    return transform(script, module_id, css, options=options).code
