"""Undo/redo over pure edit commands."""

from __future__ import annotations

from typing import List, Optional

from ..flowchart.model import Flowchart
from .commands import EditCommand


class EditHistory:
    """Snapshot history for one flowchart.

    Commands are applied with `apply`; `undo` and `redo` step through the
    snapshots. Applying a new command discards the redo stack.
    """

    def __init__(self, flowchart: Flowchart, *, limit: Optional[int] = 100):
        self._current = flowchart
        self._undo: List[Flowchart] = []
        self._redo: List[Flowchart] = []
        self._limit = limit

    @property
    def current(self) -> Flowchart:
        return self._current

    @property
    def can_undo(self) -> bool:
        return bool(self._undo)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    def apply(self, command: EditCommand) -> Flowchart:
        updated = command.apply(self._current)
        self._undo.append(self._current)
        if self._limit is not None and len(self._undo) > self._limit:
            self._undo.pop(0)
        self._redo.clear()
        self._current = updated
        return updated

    def undo(self) -> Flowchart:
        if self._undo:
            self._redo.append(self._current)
            self._current = self._undo.pop()
        return self._current

    def redo(self) -> Flowchart:
        if self._redo:
            self._undo.append(self._current)
            self._current = self._redo.pop()
        return self._current

    def reset(self, flowchart: Flowchart) -> None:
        """Replace the chart (e.g. after regenerating) and drop all history."""
        self._current = flowchart
        self._undo.clear()
        self._redo.clear()
