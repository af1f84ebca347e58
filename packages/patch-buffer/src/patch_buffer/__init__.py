# SPDX-License-Identifier: MIT
"""Incremental text patching addressed by original offsets.

This package provides a small editing engine used by source-to-source
rewriters: edits are always expressed against the untouched input string,
so independent passes can patch a file without recomputing positions after
each other's changes.

Example:
    >>> from patch_buffer import PatchBuffer
    >>>
    >>> buf = PatchBuffer("let a = b")
    >>> buf.replace(8, 9, "mod.b")
    >>> buf.prepend("// generated\\n")
    >>> buf.serialize()
    '// generated\\nlet a = mod.b'
"""

__version__ = "0.1.0"

from .buffer import (
    OverlappingEditError,
    PatchBuffer,
    PatchError,
)
from .chunk import SourceChunk

__all__ = [
    "PatchBuffer",
    "SourceChunk",
    "PatchError",
    "OverlappingEditError",
]
