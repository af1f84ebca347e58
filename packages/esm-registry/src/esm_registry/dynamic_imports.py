# SPDX-License-Identifier: MIT
"""Dynamic import normalization.

Transforms:
    import('./foo')     -> __dynamic_import__("foo")
    import('.//a/b.js') -> __dynamic_import__("a/b.js")

Preserves:
    import(name)        (not a literal)
    import(`./${x}`)    (template literal)
    import('../foo')    (not ./-relative)
    import('vue')       (bare specifier)
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

from .syntax import is_relative, registry_key, string_value

if TYPE_CHECKING:
    from tree_sitter import Node

    from .context import RewriteContext

logger = logging.getLogger(__name__)


def _dynamic_import_calls(root: "Node"):
    """Yield call expressions whose callee is ``import``."""
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "call_expression":
            callee = node.child_by_field_name("function")
            if callee is not None and callee.type == "import":
                yield node
        stack.extend(reversed(node.named_children))


def rewrite_dynamic_imports(ctx: "RewriteContext") -> int:
    """Point relative dynamic imports at the registry loader.

    Returns:
        Number of calls rewritten
    """
    parsed = ctx.parsed
    for statement in parsed.statements():
        if statement.type == "import_statement":
            continue

        for call in _dynamic_import_calls(statement):
            arguments = call.child_by_field_name("arguments")
            args = [a for a in arguments.named_children if a.type != "comment"] if arguments else []
            if len(args) != 1 or args[0].type != "string":
                logger.debug("%s: leaving non-literal dynamic import %r", parsed.module_id, parsed.text(call))
                continue

            specifier = string_value(parsed, args[0])
            if not is_relative(specifier):
                logger.debug("%s: leaving non-relative dynamic import %r", parsed.module_id, specifier)
                continue

            callee = call.child_by_field_name("function")
            ctx.buffer.replace(parsed.start(callee), parsed.end(callee), ctx.options.dynamic_import_helper)
            ctx.buffer.replace(parsed.start(args[0]), parsed.end(args[0]), json.dumps(registry_key(specifier)))
            ctx.dynamic_imports += 1

    return ctx.dynamic_imports
