"""Offset-tracked text mutation."""

from __future__ import annotations


class EditCursor:
    """Applies edits keyed by offsets into the text the cursor started from.

    Edits must arrive left to right. The cursor keeps the signed length delta
    of everything applied so far and maps each original offset to
    ``original + delta`` in the mutating buffer.

    Example:
        >>> cursor = EditCursor("let s; s += 1;")
        >>> cursor.replace(0, 6, "let s = 0;")
        >>> cursor.text
        'let s = 0; s += 1;'
    """

    def __init__(self, text: str):
        self.original = text
        self.delta = 0
        self._parts: list[str] = []
        self._consumed = 0  # original offset up to which text has been emitted
        self._edits: list[tuple[int, int, int]] = []  # (original_start, inserted, removed)

    def effective(self, original_offset: int) -> int:
        """Position of ``original_offset`` in the mutated buffer."""
        return original_offset + self.delta

    def to_original(self, offset: int) -> int:
        """Map a mutated-buffer offset back into the original text.

        Offsets inside inserted text map to the start of the edit.
        """
        delta = 0
        for original_start, inserted, removed in self._edits:
            start = original_start + delta
            if offset < start:
                break
            if offset < start + inserted:
                return original_start
            delta += inserted - removed
        return offset - delta

    def insert(self, original_offset: int, text: str) -> None:
        self.replace(original_offset, original_offset, text)

    def replace(self, original_start: int, original_end: int, text: str) -> None:
        if original_start < self._consumed:
            raise ValueError(
                f"edit at {original_start} is left of the last edit ({self._consumed})"
            )
        if not original_start <= original_end <= len(self.original):
            raise ValueError(f"invalid edit range {original_start}..{original_end}")
        self._parts.append(self.original[self._consumed:original_start])
        self._parts.append(text)
        self._consumed = original_end
        self._edits.append((original_start, len(text), original_end - original_start))
        self.delta += len(text) - (original_end - original_start)

    @property
    def text(self) -> str:
        return "".join(self._parts) + self.original[self._consumed:]
