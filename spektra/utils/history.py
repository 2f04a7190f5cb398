# History management for undo/redo functionality
"""
Provides a generic history stack for undo/redo operations, plus the
adjustment-vector history used by the editor.
"""

from typing import TypeVar, Generic, Optional, List, Callable
from dataclasses import dataclass, field
from copy import deepcopy
import time

from .logger import get_logger
from ..config import settings

logger = get_logger(__name__)

T = TypeVar('T')


@dataclass
class HistoryEntry(Generic[T]):
    """A single entry in the history stack."""
    state: T
    description: str = ""
    timestamp: float = field(default_factory=time.time)


class HistoryStack(Generic[T]):
    """
    Generic history stack supporting undo/redo operations.

    The top of the undo stack is the current state, so undo needs at
    least two entries.
    """

    def __init__(
        self,
        max_size: int = 50,
        deep_copy: bool = True,
        on_change: Optional[Callable[[], None]] = None
    ):
        """
        Initialize the history stack.

        Args:
            max_size: Maximum number of history entries to keep.
            deep_copy: Whether to deep copy states when pushing.
            on_change: Optional callback when history changes.
        """
        self._undo_stack: List[HistoryEntry[T]] = []
        self._redo_stack: List[HistoryEntry[T]] = []
        self._max_size = max_size
        self._deep_copy = deep_copy
        self._on_change = on_change
        self._is_applying = False  # Prevent recursive pushes during undo/redo

    def push(self, state: T, description: str = "") -> None:
        """Push a new state; clears anything that could have been redone."""
        if self._is_applying:
            return

        if self._deep_copy:
            state = deepcopy(state)

        self._undo_stack.append(HistoryEntry(state=state, description=description))
        self._redo_stack.clear()

        while len(self._undo_stack) > self._max_size:
            self._undo_stack.pop(0)

        logger.debug("History push: %s (stack size: %d)", description or "unnamed", len(self._undo_stack))
        self._notify_change()

    def undo(self) -> Optional[T]:
        """
        Undo the last action and return the previous state.

        Returns:
            The previous state, or None if nothing to undo.
        """
        if not self.can_undo():
            logger.debug("Nothing to undo")
            return None

        self._is_applying = True
        try:
            self._redo_stack.append(self._undo_stack.pop())

            entry = self._undo_stack[-1]
            logger.debug("Undo: restored to '%s'", entry.description or "unnamed")
            self._notify_change()
            return self._copy(entry.state)
        finally:
            self._is_applying = False

    def redo(self) -> Optional[T]:
        """
        Redo the last undone action and return the restored state.

        Returns:
            The restored state, or None if nothing to redo.
        """
        if not self.can_redo():
            logger.debug("Nothing to redo")
            return None

        self._is_applying = True
        try:
            entry = self._redo_stack.pop()
            self._undo_stack.append(entry)

            logger.debug("Redo: restored to '%s'", entry.description or "unnamed")
            self._notify_change()
            return self._copy(entry.state)
        finally:
            self._is_applying = False

    def can_undo(self) -> bool:
        """Check if undo is available."""
        return len(self._undo_stack) > 1

    def can_redo(self) -> bool:
        """Check if redo is available."""
        return len(self._redo_stack) > 0

    def clear(self) -> None:
        """Clear all history."""
        self._undo_stack.clear()
        self._redo_stack.clear()
        logger.debug("History cleared")
        self._notify_change()

    def get_undo_description(self) -> Optional[str]:
        """Get description of the action that would be undone."""
        if self._undo_stack:
            return self._undo_stack[-1].description
        return None

    def get_undo_count(self) -> int:
        """Get number of available undo steps."""
        return max(0, len(self._undo_stack) - 1)

    def get_redo_count(self) -> int:
        """Get number of available redo steps."""
        return len(self._redo_stack)

    def get_current_state(self) -> Optional[T]:
        """Get the current state without modifying history."""
        if self._undo_stack:
            return self._copy(self._undo_stack[-1].state)
        return None

    def _copy(self, state: T) -> T:
        return deepcopy(state) if self._deep_copy else state

    def _notify_change(self) -> None:
        """Notify listeners of history change."""
        if self._on_change:
            try:
                self._on_change()
            except Exception:
                logger.exception("Error in history change callback")


class AdjustmentHistory(HistoryStack):
    """
    History of adjustment vectors.

    Vectors are immutable, so states are stored as-is. The stack is seeded
    with an initial vector and never undoes past it.

    A slider drag produces a burst of values; recording them with
    ``coalesce=True`` folds changes that share a description and arrive
    within ``debounce_seconds`` of each other into a single entry.
    """

    def __init__(
        self,
        initial=None,
        max_size: Optional[int] = None,
        on_change: Optional[Callable[[], None]] = None,
        debounce_seconds: Optional[float] = None,
    ):
        # Imported here to keep utils free of an import cycle with processing
        from ..processing.adjustments import AdjustmentVector

        if max_size is None:
            max_size = settings.HISTORY_DEFAULTS["max_size"]
        if debounce_seconds is None:
            debounce_seconds = settings.HISTORY_DEFAULTS["debounce_seconds"]
        super().__init__(max_size=max_size, deep_copy=False, on_change=on_change)
        self._debounce = debounce_seconds
        self.push(initial if initial is not None else AdjustmentVector(), "initial")

    def record(self, vector, description: str = "", coalesce: bool = False) -> bool:
        """
        Push `vector` unless it equals the current state.

        Args:
            vector: The new AdjustmentVector.
            description: Label for the change, e.g. "set exposure".
            coalesce: Replace the newest entry instead of pushing when it has
                the same description and was recorded within the debounce window.

        Returns:
            True if the history changed.
        """
        if vector == self.get_current_state():
            return False

        if coalesce and self._can_coalesce(description):
            top = self._undo_stack[-1]
            top.state = vector
            top.timestamp = time.time()
            self._redo_stack.clear()
            logger.debug("History coalesced: %s", description)
            self._notify_change()
            return True

        self.push(vector, description)
        return True

    def _can_coalesce(self, description: str) -> bool:
        # The seed entry is never rewritten
        if len(self._undo_stack) < 2:
            return False
        top = self._undo_stack[-1]
        return top.description == description and (time.time() - top.timestamp) < self._debounce
