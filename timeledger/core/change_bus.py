"""Change bus — synchronous, instance-scoped dispatch of ledger changes.

Each Tracker owns one bus.  Handlers are plain callables registered per
change kind (or for every kind) and run in registration order, on the
caller's thread, before ``publish`` returns.
"""

from __future__ import annotations

from collections.abc import Callable

from timeledger.models.events import ChangeKind, LedgerChange

ChangeHandler = Callable[[LedgerChange], None]


class ChangeBus:
    """Routes ``LedgerChange`` events to registered handlers."""

    def __init__(self) -> None:
        self._handlers: dict[ChangeKind, list[ChangeHandler]] = {
            kind: [] for kind in ChangeKind
        }
        self._catch_all: list[ChangeHandler] = []

    def register_handler(
        self, handler: ChangeHandler, kind: ChangeKind | None = None
    ) -> None:
        """Register ``handler`` for ``kind``, or for every kind when ``None``."""
        if kind is None:
            self._catch_all.append(handler)
        else:
            self._handlers[kind].append(handler)

    def publish(self, change: LedgerChange) -> LedgerChange:
        """Dispatch ``change`` and hand it back to the caller."""
        for handler in (*self._handlers[change.kind], *self._catch_all):
            handler(change)
        return change
