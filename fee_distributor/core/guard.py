"""
Non-reentrant guard with all-or-nothing state rollback.
"""

import copy
import functools
from contextlib import contextmanager
from typing import Any, Callable, Iterator, Optional, TypeVar

import structlog

from .exceptions import ReentrancyError
from .types import DistributorState


logger = structlog.get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


class ReentrancyGuard:
    """
    Single-writer guard for a distributor instance.

    At most one mutating call may be in flight. A nested call raises
    ReentrancyError before touching any state. When the outer call raises,
    the state captured on entry (or at the last checkpoint) is restored in
    place. The event log is append-only and is never copied; a rollback
    truncates it to the length it had at the restore point.
    """

    def __init__(self):
        self._operation: Optional[str] = None
        self._snapshot: Optional[DistributorState] = None
        self._events_mark = 0

    @property
    def entered(self) -> bool:
        return self._operation is not None

    @property
    def operation(self) -> Optional[str]:
        return self._operation

    def checkpoint(self, state: DistributorState) -> None:
        """Commit mutations made so far by the running call; a later failure rolls back only to here."""
        if self._operation is None:
            return
        # Share the event list with the snapshot instead of copying it
        self._snapshot = copy.deepcopy(state, {id(state.events): state.events})
        self._events_mark = len(state.events)

    def _restore(self, state: DistributorState) -> None:
        events = state.events
        del events[self._events_mark:]
        state.__dict__.update(self._snapshot.__dict__)
        state.events = events

    @contextmanager
    def atomic(
        self,
        state: DistributorState,
        operation: str,
        on_rollback: Optional[Callable[[], None]] = None,
    ) -> Iterator[None]:
        if self._operation is not None:
            logger.warning(
                "Reentrant call rejected",
                operation=operation,
                in_flight=self._operation
            )
            raise ReentrancyError(operation)

        self._operation = operation
        self.checkpoint(state)
        try:
            yield
        except BaseException:
            # Restore in place so components holding the state see the rollback
            self._restore(state)
            if on_rollback is not None:
                on_rollback()
            raise
        finally:
            self._operation = None
            self._snapshot = None
            self._events_mark = 0


def non_reentrant(method: F) -> F:
    """
    Run a distributor method under its guard.

    Expects self._guard and self.state; self._after_rollback, if present,
    runs after a failed call's state has been restored.
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        on_rollback = getattr(self, "_after_rollback", None)
        with self._guard.atomic(self.state, method.__name__, on_rollback):
            return method(self, *args, **kwargs)

    return wrapper  # type: ignore[return-value]
