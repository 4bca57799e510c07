"""Event fetcher: merges a user's own and public event feeds."""

from __future__ import annotations

import logging
from typing import Optional

from nippo.events import Event
from nippo.github_client import DEFAULT_PAGE_SIZE, GitHubClient

logger = logging.getLogger("nippo.fetcher")


def dedup_events(events: list[Event]) -> list[Event]:
    """Drop events whose id was already seen, keeping the first occurrence."""
    seen: set[str] = set()
    unique = []
    for event in events:
        if event.id in seen:
            continue
        seen.add(event.id)
        unique.append(event)
    return unique


class EventFetcher:
    """Fetches and memoizes the event window for one user.

    Each feed is requested at most once per fetcher; later calls return
    the cached list. Only the first page of ``per_page`` events is read
    from each feed.
    """

    def __init__(self, client: GitHubClient, user: str, per_page: int = DEFAULT_PAGE_SIZE):
        self.client = client
        self.user = user
        self.per_page = per_page
        self._user_events: Optional[list[Event]] = None
        self._user_public_events: Optional[list[Event]] = None
        self._all_user_events: Optional[list[Event]] = None

    def user_events(self) -> list[Event]:
        if self._user_events is None:
            raw = self.client.list_user_events(self.user, per_page=self.per_page)
            self._user_events = [Event.from_dict(r) for r in raw]
        return self._user_events

    def user_public_events(self) -> list[Event]:
        if self._user_public_events is None:
            raw = self.client.list_user_public_events(self.user, per_page=self.per_page)
            self._user_public_events = [Event.from_dict(r) for r in raw]
        return self._user_public_events

    def all_user_events(self) -> list[Event]:
        """Own events followed by public events, deduplicated by id."""
        if self._all_user_events is None:
            own = self.user_events()
            public = self.user_public_events()
            self._all_user_events = dedup_events(own + public)
            logger.debug(
                "Fetched %d own + %d public events, %d unique",
                len(own), len(public), len(self._all_user_events),
            )
        return self._all_user_events
