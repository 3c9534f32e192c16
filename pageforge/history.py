"""Linear undo/redo history.

A command is an opaque pair of closures captured when the edit was made. The
history never looks inside them; it only keeps them in order and moves a
cursor. Recording after an undo discards the redo branch.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Tuple

DEFAULT_HISTORY_LIMIT = 50


@dataclass
class Command:
    label: str
    forward: Callable[[], None]
    inverse: Callable[[], None]
    timestamp: float = field(default_factory=time.time)

    def apply(self) -> None:
        self.forward()

    def revert(self) -> None:
        self.inverse()


class CommandHistory:
    """Capacity-bounded command log with a cursor on the last applied command.

    ``cursor == -1`` means nothing to undo.
    """

    def __init__(self, limit: int = DEFAULT_HISTORY_LIMIT, logger: Any = None) -> None:
        if limit < 1:
            raise ValueError("limit must be an integer >= 1")
        self._limit = limit
        self._entries: List[Command] = []
        self._cursor = -1
        self._logger = logger or logging.getLogger(__name__)

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def entries(self) -> Tuple[Command, ...]:
        return tuple(self._entries)

    @property
    def can_undo(self) -> bool:
        return self._cursor >= 0

    @property
    def can_redo(self) -> bool:
        return self._cursor < len(self._entries) - 1

    def labels(self) -> List[str]:
        return [c.label for c in self._entries]

    def current(self) -> Optional[Command]:
        return self._entries[self._cursor] if self._cursor >= 0 else None

    def record(self, command: Command) -> None:
        """Append an already-applied command, dropping anything past the cursor."""
        del self._entries[self._cursor + 1 :]
        self._entries.append(command)

        overflow = len(self._entries) - self._limit
        if overflow > 0:
            del self._entries[:overflow]
        self._cursor = len(self._entries) - 1

    def execute(self, command: Command) -> None:
        """Apply ``command`` and record it."""
        command.apply()
        self.record(command)

    def undo(self) -> bool:
        if not self.can_undo:
            self._logger.debug("undo: nothing to undo")
            return False
        self._entries[self._cursor].revert()
        self._cursor -= 1
        return True

    def redo(self) -> bool:
        if not self.can_redo:
            self._logger.debug("redo: nothing to redo")
            return False
        self._entries[self._cursor + 1].apply()
        self._cursor += 1
        return True

    def clear(self) -> None:
        self._entries.clear()
        self._cursor = -1

    def __len__(self) -> int:
        return len(self._entries)
