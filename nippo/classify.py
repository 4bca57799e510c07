"""Event classifiers.

``TypedEvents`` narrows the fetched window to one event type and
exposes per-action views. ``PullRequests`` and ``Issues`` wrap a
``TypedEvents`` and add date-scoped accessors for the report.

Classifiers never do I/O; they filter the event list given at
construction. Payload fields are parsed on access, so a malformed event
raises MalformedPayloadError from the accessor that needs it.
"""

from __future__ import annotations

from datetime import date, tzinfo
from typing import Optional, Protocol, runtime_checkable

from nippo.errors import MalformedPayloadError
from nippo.events import ISSUES_EVENT, PULL_REQUEST_EVENT, Event, local_date


@runtime_checkable
class Classifier(Protocol):
    """Capability shared by TypedEvents and the pull-request and issue classifiers."""

    def all(self) -> list[Event]: ...

    def events_by_action(self, action: str) -> list[Event]: ...


class TypedEvents:
    """Events of one type with per-action accessors."""

    def __init__(self, events: list[Event], event_type: str):
        self.event_type = event_type
        self._events = [e for e in events if e.type == event_type]

    def all(self) -> list[Event]:
        return list(self._events)

    def events_by_action(self, action: str) -> list[Event]:
        return [e for e in self._events if e.action == action]

    def assigned(self) -> list[Event]:
        return self.events_by_action("assigned")

    def unassigned(self) -> list[Event]:
        return self.events_by_action("unassigned")

    def labeled(self) -> list[Event]:
        return self.events_by_action("labeled")

    def unlabeled(self) -> list[Event]:
        return self.events_by_action("unlabeled")

    def opened(self) -> list[Event]:
        return self.events_by_action("opened")

    def closed(self) -> list[Event]:
        return self.events_by_action("closed")

    def reopened(self) -> list[Event]:
        return self.events_by_action("reopened")

    def synchronize(self) -> list[Event]:
        return self.events_by_action("synchronize")


class PullRequests:
    """Pull-request events split into opened, merged and unmerged.

    "Opened" means still open as far as the window shows: a pull request
    that was also closed in the window is reported only as merged or
    unmerged.
    """

    def __init__(self, events: list[Event], tz: Optional[tzinfo] = None):
        self.events = TypedEvents(events, PULL_REQUEST_EVENT)
        self.tz = tz

    def all(self) -> list[Event]:
        return self.events.all()

    def events_by_action(self, action: str) -> list[Event]:
        return self.events.events_by_action(action)

    def assigned(self) -> list[Event]:
        return self.events.assigned()

    def unassigned(self) -> list[Event]:
        return self.events.unassigned()

    def labeled(self) -> list[Event]:
        return self.events.labeled()

    def unlabeled(self) -> list[Event]:
        return self.events.unlabeled()

    def reopened(self) -> list[Event]:
        return self.events.reopened()

    def synchronize(self) -> list[Event]:
        return self.events.synchronize()

    def closed(self) -> list[Event]:
        return self.events.closed()

    def merged(self) -> list[Event]:
        return [e for e in self.closed() if e.pull_request.merged]

    def unmerged(self) -> list[Event]:
        return [e for e in self.closed() if not e.pull_request.merged]

    def opened(self) -> list[Event]:
        closed_ids = {e.pull_request.id for e in self.merged() + self.unmerged()}
        return [e for e in self.events.opened() if e.pull_request.id not in closed_ids]

    def opened_at(self, day: date) -> list[Event]:
        return [e for e in self.opened() if local_date(e.pull_request.created_at, self.tz) == day]

    def merged_at(self, day: date) -> list[Event]:
        return [e for e in self.merged() if self._on(e.pull_request.merged_at, e, "merged_at", day)]

    def unmerged_at(self, day: date) -> list[Event]:
        return [e for e in self.unmerged() if self._on(e.pull_request.closed_at, e, "closed_at", day)]

    def _on(self, moment, event: Event, name: str, day: date) -> bool:
        if moment is None:
            raise MalformedPayloadError(f"payload.pull_request.{name}", event.id)
        return local_date(moment, self.tz) == day


class Issues:
    """Issue events split into opened and closed.

    As with pull requests, an issue closed in the window is not reported
    as opened. Both ``opened_at`` and ``closed_at`` compare the issue's creation
    date unless ``closed_by="closed"``, in which case ``closed_at`` uses
    the issue's closing date.
    """

    def __init__(self, events: list[Event], tz: Optional[tzinfo] = None, closed_by: str = "created"):
        if closed_by not in ("created", "closed"):
            raise ValueError(f"closed_by must be 'created' or 'closed', got {closed_by!r}")
        self.events = TypedEvents(events, ISSUES_EVENT)
        self.tz = tz
        self.closed_by = closed_by

    def all(self) -> list[Event]:
        return self.events.all()

    def events_by_action(self, action: str) -> list[Event]:
        return self.events.events_by_action(action)

    def assigned(self) -> list[Event]:
        return self.events.assigned()

    def unassigned(self) -> list[Event]:
        return self.events.unassigned()

    def labeled(self) -> list[Event]:
        return self.events.labeled()

    def unlabeled(self) -> list[Event]:
        return self.events.unlabeled()

    def reopened(self) -> list[Event]:
        return self.events.reopened()

    def synchronize(self) -> list[Event]:
        return self.events.synchronize()

    def opened(self) -> list[Event]:
        closed_ids = {e.issue.id for e in self.closed()}
        return [e for e in self.events.opened() if e.issue.id not in closed_ids]

    def closed(self) -> list[Event]:
        return self.events.closed()

    def opened_at(self, day: date) -> list[Event]:
        return [e for e in self.opened() if local_date(e.issue.created_at, self.tz) == day]

    def closed_at(self, day: date) -> list[Event]:
        if self.closed_by == "created":
            return [e for e in self.closed() if local_date(e.issue.created_at, self.tz) == day]
        result = []
        for e in self.closed():
            closed_at = e.issue.closed_at
            if closed_at is None:
                raise MalformedPayloadError("payload.issue.closed_at", e.id)
            if local_date(closed_at, self.tz) == day:
                result.append(e)
        return result
