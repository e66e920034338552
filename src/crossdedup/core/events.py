"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/events.py
Structured run events emitted by the engine.

Every decision (group found, canonical chosen, action planned/applied/skipped/failed)
is emitted as a RunEvent into an EventSink. Module loggers only add step-by-step
detail. RunReport is the default sink; it keeps everything for the caller and
fans events out to listeners, e.g. the logging listener in utils/logging_setup.py.
"""

import logging
import threading
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol, List, Optional, Callable

from crossdedup.core.models import (
    ContentGroup, RelinkAction, ActionResult, ActionStatus, RunStats, ResolvedGroup
)

logger = logging.getLogger(__name__)


class EventKind(Enum):
    GROUP_DISCOVERED = "group-discovered"
    CANONICAL_SELECTED = "canonical-selected"
    NO_CANONICAL = "no-canonical"
    ACTION_PLANNED = "action-planned"
    ACTION_APPLIED = "action-applied"
    ACTION_SKIPPED = "action-skipped"
    ACTION_FAILED = "action-failed"
    ENUMERATION_ERROR = "enumeration-error"
    HASH_FAILED = "hash-failed"
    PLANNING_INCONSISTENCY = "planning-inconsistency"


@dataclass
class RunEvent:
    kind: EventKind
    message: str = ""
    path: Optional[str] = None
    group: Optional[ContentGroup] = None
    action: Optional[RelinkAction] = None
    result: Optional[ActionResult] = None

    def __repr__(self):
        return f"<RunEvent {self.kind.value} {self.path or ''}>"


class EventSink(Protocol):
    """Anything that accepts engine events."""
    def emit(self, event: RunEvent) -> None: ...


class NullSink:
    """Discards every event. Used when a component runs without a report."""
    def emit(self, event: RunEvent) -> None:
        pass


class RunReport:
    """
    Collects events, groups, actions and results of a single run.
    Safe to emit into from hashing worker threads. Listeners are called
    synchronously for each event; a failing listener is logged and never
    interrupts the engine.
    """

    def __init__(self):
        self.events: List[RunEvent] = []
        self.groups: List[ContentGroup] = []
        self.resolved: List[ResolvedGroup] = []
        self.actions: List[RelinkAction] = []
        self.results: List[ActionResult] = []
        self.stats = RunStats()
        self.dry_run: bool = True
        self._counts: Counter = Counter()
        self._listeners: List[Callable[[RunEvent], None]] = []
        self._lock = threading.Lock()

    def add_listener(self, listener: Callable[[RunEvent], None]) -> None:
        self._listeners.append(listener)

    def emit(self, event: RunEvent) -> None:
        with self._lock:
            self.events.append(event)
            self._counts[event.kind] += 1
        for listener in self._listeners:
            try:
                listener(event)
            except Exception as e:
                logger.warning(f"Error in event listener: {e}")

    def count(self, kind: EventKind) -> int:
        return self._counts[kind]

    def events_of(self, kind: EventKind) -> List[RunEvent]:
        return [e for e in self.events if e.kind == kind]

    def results_with(self, status: ActionStatus) -> List[ActionResult]:
        return [r for r in self.results if r.status == status]

    @property
    def applied(self) -> List[ActionResult]:
        return self.results_with(ActionStatus.APPLIED)

    @property
    def skipped(self) -> List[ActionResult]:
        return self.results_with(ActionStatus.SKIPPED)

    @property
    def failed(self) -> List[ActionResult]:
        return self.results_with(ActionStatus.FAILED)

    @property
    def data_loss(self) -> List[ActionResult]:
        return [r for r in self.results if r.data_loss]

    @property
    def bytes_reclaimed(self) -> int:
        """Bytes freed by applied (or, in a dry run, would-be applied) actions."""
        return sum(r.action.size for r in self.applied)

    @property
    def has_failures(self) -> bool:
        return bool(self.failed)
