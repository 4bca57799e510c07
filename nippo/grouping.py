"""Last-state reducer: folds a day's events into one record per entity.

Each issue or pull request (keyed by URL) ends up under its latest
state transition. Terminal states (closed, merged, rejected) are sticky:
a later or earlier "opened" never moves an entity back to "opened".
Comments count toward the entity; an entity that was only commented on
is filed under "commented".
"""

from __future__ import annotations

import logging
from datetime import date, tzinfo
from typing import Optional

from nippo.events import (
    ISSUE_COMMENT_EVENT,
    ISSUES_EVENT,
    PULL_REQUEST_EVENT,
    PULL_REQUEST_REVIEW_COMMENT_EVENT,
    Event,
)

logger = logging.getLogger("nippo.grouping")

ISSUE = "issue"
PULL_REQUEST = "pull_request"

OPENED = "opened"
CLOSED = "closed"
MERGED = "merged"
REJECTED = "rejected"
COMMENTED = "commented"

TERMINAL_STATES = frozenset({CLOSED, MERGED, REJECTED})

# Section -> action -> url -> {"title", "author", "number", "repo", "comments"}
Grouped = dict[str, dict[str, dict[str, dict]]]


def next_state(current: Optional[str], action: str, merged: bool = False, is_pull_request: bool = False) -> Optional[str]:
    """Apply one observed action to an entity's state.

    Args:
        current: The entity's state so far (None when unseen).
        action: Payload action ("opened", "closed", ...).
        merged: Merged flag of a closed pull request.
        is_pull_request: Whether "closed" splits into merged/rejected.

    Returns:
        The new state. Actions other than opened/closed leave it unchanged.
    """
    if action == "opened":
        if current in TERMINAL_STATES:
            return current
        return OPENED
    if action == "closed":
        if not is_pull_request:
            return CLOSED
        return MERGED if merged else REJECTED
    return current


class _Entity:
    __slots__ = ("section", "url", "title", "author", "number", "repo", "state", "comments")

    def __init__(self, section: str, url: str):
        self.section = section
        self.url = url
        self.title = ""
        self.author = ""
        self.number = 0
        self.repo = ""
        self.state: Optional[str] = None
        self.comments = 0


def _describe(entity: _Entity, info, repo: str) -> None:
    entity.title = info.title
    entity.author = info.author
    entity.number = info.number
    entity.repo = repo


def reduce_latest_state(events: list[Event], day: date, tz: Optional[tzinfo] = None) -> Grouped:
    """Group the events that happened on ``day`` by section, final action and URL.

    Args:
        events: The fetched window, in any order.
        day: Calendar day to report.
        tz: Timezone used to decide which day an event belongs to
            (system local time when None).

    Returns:
        Nested mapping ``{section: {action: {url: entry}}}``. Sections and
        actions with no entries are absent.
    """
    todays = sorted((e for e in events if e.occurred_on(day, tz)), key=lambda e: e.created_at)
    entities: dict[str, _Entity] = {}

    def entity_for(section: str, url: str) -> _Entity:
        if url not in entities:
            entities[url] = _Entity(section, url)
        return entities[url]

    for event in todays:
        if event.type == PULL_REQUEST_EVENT:
            pr = event.pull_request
            entity = entity_for(PULL_REQUEST, pr.html_url)
            _describe(entity, pr, event.repo)
            entity.state = next_state(entity.state, event.action, merged=pr.merged, is_pull_request=True)
        elif event.type == ISSUES_EVENT:
            issue = event.issue
            entity = entity_for(ISSUE, issue.html_url)
            _describe(entity, issue, event.repo)
            entity.state = next_state(entity.state, event.action)
        elif event.type == ISSUE_COMMENT_EVENT:
            issue = event.issue
            section = PULL_REQUEST if issue.is_pull_request else ISSUE
            entity = entity_for(section, issue.html_url)
            _describe(entity, issue, event.repo)
            entity.comments += 1
        elif event.type == PULL_REQUEST_REVIEW_COMMENT_EVENT:
            pr = event.pull_request
            entity = entity_for(PULL_REQUEST, pr.html_url)
            _describe(entity, pr, event.repo)
            entity.comments += 1

    grouped: Grouped = {}
    for entity in entities.values():
        action = entity.state
        if action is None:
            if not entity.comments:
                continue
            action = COMMENTED
        grouped.setdefault(entity.section, {}).setdefault(action, {})[entity.url] = {
            "title": entity.title,
            "author": entity.author,
            "number": entity.number,
            "repo": entity.repo,
            "comments": entity.comments,
        }

    logger.debug(
        "Reduced %d events on %s into %d entities",
        len(todays), day.isoformat(), len(entities),
    )
    return grouped
