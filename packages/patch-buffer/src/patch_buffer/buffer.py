# SPDX-License-Identifier: MIT
"""Incremental text patching over an immutable base string.

Every edit is addressed with offsets into the *original* string, no matter
how many edits were applied before it. The buffer keeps the original text
partitioned into chunks; edits split chunks at their boundaries and attach
replacement or inserted text to them. Serialization walks the chunks in
offset order.

Example:
    >>> buf = PatchBuffer("export const a = 1")
    >>> buf.delete(0, 7)
    >>> buf.insert_after(18, ";")
    >>> buf.serialize()
    'const a = 1;'
"""

from __future__ import annotations

from bisect import bisect_right, insort

from .chunk import SourceChunk


class PatchError(Exception):
    """Base class for patch buffer errors."""

    pass


class OverlappingEditError(PatchError):
    """Raised when an edit touches a range that was already replaced or deleted."""

    def __init__(self, start: int, end: int, existing: SourceChunk):
        self.start = start
        self.end = end
        self.existing = existing
        super().__init__(
            f"Edit [{start}, {end}) overlaps an edited range "
            f"[{existing.start}, {existing.end})"
        )


class PatchBuffer:
    """Text buffer that accepts edits expressed in original offsets."""

    def __init__(self, original: str) -> None:
        if not isinstance(original, str):
            raise TypeError(f"PatchBuffer expects str, got {type(original).__name__}")

        self.original = original
        self._intro: list[str] = []
        self._outro: list[str] = []
        # Text inserted after offset 0 / before the final offset; these
        # positions have no chunk on the corresponding side.
        self._head: list[str] = []
        self._tail: list[str] = []

        first = SourceChunk(0, len(original), original)
        self._chunks: list[SourceChunk] = [first]
        self._starts: list[int] = [0]
        self._by_start: dict[int, SourceChunk] = {0: first}
        self._by_end: dict[int, SourceChunk] = {len(original): first}

    def __len__(self) -> int:
        return len(self.original)

    def __str__(self) -> str:
        return self.serialize()

    def __repr__(self) -> str:
        return f"PatchBuffer(chunks={len(self._chunks)}, length={len(self.original)})"

    # ------------------------------------------------------------------
    # Global edits
    # ------------------------------------------------------------------
    def prepend(self, text: str) -> None:
        """Place text before everything, including earlier prepends."""
        self._intro.insert(0, text)

    def append(self, text: str) -> None:
        """Place text after everything, including earlier appends."""
        self._outro.append(text)

    # ------------------------------------------------------------------
    # Positional edits
    # ------------------------------------------------------------------
    def insert_before(self, pos: int, text: str) -> None:
        """Insert text immediately before the character at ``pos``."""
        self._check_offset(pos)
        if pos == len(self.original):
            self._tail.append(text)
            return
        self._split(pos)
        self._by_start[pos].left.append(text)

    def insert_after(self, pos: int, text: str) -> None:
        """Insert text immediately after the character at ``pos - 1``."""
        self._check_offset(pos)
        if pos == 0:
            self._head.append(text)
            return
        self._split(pos)
        self._by_end[pos].right.append(text)

    def replace(self, start: int, end: int, text: str) -> None:
        """Replace the original range ``[start, end)`` with ``text``.

        Raises:
            OverlappingEditError: If part of the range was already edited
            ValueError: If the range is empty or inverted
        """
        self._check_range(start, end)
        if start == end:
            raise ValueError(
                f"Cannot replace an empty range at {start}; use insert_before or insert_after"
            )
        self._edit(start, end, text)

    def delete(self, start: int, end: int) -> None:
        """Delete the original range ``[start, end)``."""
        self._check_range(start, end)
        if start == end:
            return
        self._edit(start, end, "")

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------
    def slice(self, start: int, end: int) -> str:
        """Return the original text between two offsets."""
        self._check_range(start, end)
        return self.original[start:end]

    def has_changed(self) -> bool:
        """Return True if serializing would differ from the original text."""
        return self.serialize() != self.original

    def chunks(self) -> list[SourceChunk]:
        """Return the chunks in offset order."""
        return list(self._chunks)

    def serialize(self) -> str:
        """Produce the patched text."""
        parts = [*self._intro, *self._head]
        parts.extend(chunk.content() for chunk in self._chunks)
        parts.extend(self._tail)
        parts.extend(self._outro)
        return "".join(parts)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _check_offset(self, pos: int) -> None:
        if not 0 <= pos <= len(self.original):
            raise IndexError(f"Offset {pos} out of range [0, {len(self.original)}]")

    def _check_range(self, start: int, end: int) -> None:
        self._check_offset(start)
        self._check_offset(end)
        if start > end:
            raise ValueError(f"Range start {start} is after end {end}")

    def _locate(self, index: int) -> int:
        """Return the list position of the chunk containing ``index``."""
        return bisect_right(self._starts, index) - 1

    def _split(self, index: int) -> None:
        """Ensure a chunk boundary exists at ``index``."""
        if index in self._by_start or index in self._by_end:
            return

        position = self._locate(index)
        chunk = self._chunks[position]
        if chunk.edited:
            raise OverlappingEditError(index, index, chunk)

        tail = chunk.split(index)
        self._chunks.insert(position + 1, tail)
        insort(self._starts, index)
        self._by_start[index] = tail
        self._by_end[index] = chunk
        self._by_end[tail.end] = tail

    def _check_unedited(self, start: int, end: int) -> None:
        """Raise if any chunk intersecting ``[start, end)`` was already edited."""
        position = self._locate(start)
        while position < len(self._chunks) and self._chunks[position].start < end:
            chunk = self._chunks[position]
            if chunk.edited:
                raise OverlappingEditError(start, end, chunk)
            position += 1

    def _edit(self, start: int, end: int, text: str) -> None:
        self._check_unedited(start, end)
        self._split(start)
        self._split(end)

        position = self._locate(start)
        affected: list[SourceChunk] = []
        while position < len(self._chunks) and self._chunks[position].start < end:
            affected.append(self._chunks[position])
            position += 1

        first, *rest = affected
        first.replacement = text
        for chunk in rest:
            chunk.replacement = ""
