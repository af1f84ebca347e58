# SPDX-License-Identifier: MIT
"""Registry bootstrap around the rewritten module body.

Generated layout (default names):

    const __modules__ = globalThis.__modules__ || (globalThis.__modules__ = {})
    globalThis.__css__ = globalThis.__css__ || ""
    const __export__ = ...        live export helper
    const __require__ = ...       registry lookup, throws when missing
    const __dynamic_import__ = ...
    const __module__ = __modules__["<id>"] = { [Symbol.toStringTag]: "Module" }
    const __import_0__ = __require__("foo")

    <module body>

    __export__(__module__, "name", () => name)
    globalThis.__css__ += "<css>"
    export default __module__

Imported modules must be registered before the importing module runs.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Optional

from .syntax import registry_key

if TYPE_CHECKING:
    from .context import RewriteContext


def render_header(ctx: "RewriteContext", module_id: str) -> str:
    """Return the bootstrap block placed before the module body."""
    opts = ctx.options
    host = opts.host
    registry = opts.registry_property
    stylesheet = f"{host}.{opts.stylesheet_property}"

    lines = [
        f"const {registry} = {host}.{registry} || ({host}.{registry} = {{}})",
        f'{stylesheet} = {stylesheet} || ""',
        f"const {opts.export_helper} = (record, name, get) => "
        f"Object.defineProperty(record, name, {{ enumerable: true, configurable: true, get }})",
        f"const {opts.require_helper} = (id) => {{",
        f'  if (!(id in {registry})) throw new Error("Module not registered: " + id)',
        f"  return {registry}[id]",
        "}",
        f"const {opts.dynamic_import_helper} = (id) => "
        f"new Promise((resolve) => resolve({opts.require_helper}(id)))",
        f"const {opts.module_binding} = {registry}[{json.dumps(module_id)}] = "
        f'{{ [Symbol.toStringTag]: "Module" }}',
    ]
    for specifier, record_id in ctx.imports.records.items():
        lines.append(f"const {record_id} = {opts.require_helper}({json.dumps(registry_key(specifier))})")

    return "\n".join(lines) + "\n\n"


def render_trailer(ctx: "RewriteContext", css: Optional[str]) -> str:
    """Return registrations, stylesheet and default export appended after the body."""
    opts = ctx.options
    parts = [entry.render(opts) for entry in ctx.exports]
    if css:
        parts.append(f"{opts.host}.{opts.stylesheet_property} += {json.dumps(css)}")
    if opts.emit_default_export:
        parts.append(f"export default {opts.module_binding}")

    if not parts:
        return ""
    return "\n" + "\n".join(parts) + "\n"


def emit_envelope(ctx: "RewriteContext", module_id: str, css: Optional[str] = None) -> None:
    """Prepend the registry bootstrap and append the trailing statements."""
    ctx.buffer.prepend(render_header(ctx, module_id))
    trailer = render_trailer(ctx, css)
    if trailer:
        ctx.buffer.append(trailer)
