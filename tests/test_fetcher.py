"""Unit tests for fetcher.py: feed merging, deduplication and memoization.

Run with: python3 -m pytest tests/test_fetcher.py -v
"""

from unittest.mock import MagicMock

import pytest

from nippo.errors import MalformedPayloadError, RemoteFetchError
from nippo.events import Event
from nippo.fetcher import EventFetcher, dedup_events


def _client(own, public):
    client = MagicMock()
    client.list_user_events.return_value = own
    client.list_user_public_events.return_value = public
    return client


class TestDedupEvents:

    def test_keeps_first_occurrence(self, pr_record):
        first = Event.from_dict(pr_record(1, "opened", title="first"))
        second = Event.from_dict(pr_record(1, "opened", title="second"))
        other = Event.from_dict(pr_record(2, "closed"))
        result = dedup_events([first, other, second])
        assert result == [first, other]
        assert result[0].pull_request.title == "first"

    def test_empty(self):
        assert dedup_events([]) == []


class TestEventFetcher:

    def test_merges_own_then_public(self, pr_record):
        client = _client([pr_record(1, "opened")], [pr_record(2, "closed")])
        events = EventFetcher(client, "alice").all_user_events()
        assert [e.id for e in events] == ["1", "2"]

    def test_shared_event_appears_once(self, pr_record, issue_record):
        own = [pr_record(1, "opened", title="own copy"), issue_record(3, "opened")]
        public = [pr_record(1, "opened", title="public copy"), pr_record(4, "closed")]
        events = EventFetcher(_client(own, public), "alice").all_user_events()
        assert [e.id for e in events] == ["1", "3", "4"]
        assert events[0].pull_request.title == "own copy"

    def test_page_size(self):
        client = _client([], [])
        EventFetcher(client, "alice").all_user_events()
        client.list_user_events.assert_called_once_with("alice", per_page=100)
        client.list_user_public_events.assert_called_once_with("alice", per_page=100)

    def test_memoized(self, pr_record):
        client = _client([pr_record(1, "opened")], [])
        fetcher = EventFetcher(client, "alice")
        first = fetcher.all_user_events()
        second = fetcher.all_user_events()
        fetcher.user_events()
        fetcher.user_public_events()
        assert first is second
        assert client.list_user_events.call_count == 1
        assert client.list_user_public_events.call_count == 1

    def test_fetch_error_propagates(self):
        client = MagicMock()
        client.list_user_events.side_effect = RemoteFetchError("gh command failed")
        with pytest.raises(RemoteFetchError):
            EventFetcher(client, "alice").all_user_events()

    def test_malformed_record(self, pr_record):
        record = pr_record(1, "opened")
        del record["type"]
        with pytest.raises(MalformedPayloadError):
            EventFetcher(_client([record], []), "alice").all_user_events()
