# SPDX-License-Identifier: MIT
"""Source chunks: spans of original text owned by a PatchBuffer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass(slots=True)
class SourceChunk:
    """A contiguous span of the original text.

    Attributes:
        start: Offset of the first character (inclusive)
        end: Offset past the last character (exclusive)
        original: The original text of the span
        replacement: Replacement text, ``""`` once deleted, ``None`` if untouched
        left: Text inserted before the span, in call order
        right: Text inserted after the span, in call order
    """

    start: int
    end: int
    original: str
    replacement: Optional[str] = None
    left: list[str] = field(default_factory=list)
    right: list[str] = field(default_factory=list)

    @property
    def edited(self) -> bool:
        """Return True if the body was replaced or deleted."""
        return self.replacement is not None

    @property
    def body(self) -> str:
        """Return the effective body text, without insertions."""
        if self.replacement is None:
            return self.original
        return self.replacement

    def content(self) -> str:
        """Return insertions plus body, as serialized."""
        return "".join(self.left) + self.body + "".join(self.right)

    def split(self, index: int) -> SourceChunk:
        """Split this chunk at an absolute offset and return the tail chunk.

        The head keeps the left insertions, the tail takes over the right
        insertions. Edited chunks cannot be split.
        """
        if self.edited:
            raise ValueError(f"Cannot split edited chunk [{self.start}, {self.end}) at {index}")

        offset = index - self.start
        tail = SourceChunk(
            start=index,
            end=self.end,
            original=self.original[offset:],
            right=self.right,
        )
        self.original = self.original[:offset]
        self.end = index
        self.right = []
        return tail
