"""Event data model.

Events keep the raw payload from the API and parse the pieces the
report uses on access. A missing required field raises
MalformedPayloadError instead of being skipped.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, tzinfo
from typing import Optional

from nippo.errors import MalformedPayloadError


ISSUES_EVENT = "IssuesEvent"
ISSUE_COMMENT_EVENT = "IssueCommentEvent"
PULL_REQUEST_EVENT = "PullRequestEvent"
PULL_REQUEST_REVIEW_COMMENT_EVENT = "PullRequestReviewCommentEvent"


def _require(data, key: str, event_id: str, path: str = ""):
    """Return data[key] or raise MalformedPayloadError naming the dotted path."""
    name = f"{path}.{key}" if path else key
    if not isinstance(data, dict) or data.get(key) is None:
        raise MalformedPayloadError(name, event_id)
    return data[key]


def parse_timestamp(value: str) -> datetime:
    """Parse a GitHub ISO-8601 timestamp (``2026-10-19T09:00:00Z``) into an aware datetime."""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


def local_date(moment: datetime, tz: Optional[tzinfo] = None) -> date:
    """Truncate ``moment`` to a calendar date in ``tz`` (system local time when None)."""
    return moment.astimezone(tz).date()


def _timestamp(data: dict, key: str, event_id: str, path: str) -> datetime:
    raw = _require(data, key, event_id, path)
    try:
        return parse_timestamp(raw)
    except (TypeError, ValueError, AttributeError):
        raise MalformedPayloadError(f"{path}.{key}" if path else key, event_id) from None


def _optional_timestamp(data: dict, key: str, event_id: str, path: str) -> Optional[datetime]:
    if data.get(key) is None:
        return None
    return _timestamp(data, key, event_id, path)


def _login(data: dict) -> str:
    return (data.get("user") or {}).get("login", "") or ""


def _merged_flag(data: dict, event_id: str, path: str) -> bool:
    # Event payloads omit "merged" on some actions; merged_at decides then.
    if data.get("merged") is not None:
        return bool(data["merged"])
    if "merged_at" not in data:
        raise MalformedPayloadError(f"{path}.merged", event_id)
    return data["merged_at"] is not None


@dataclass
class PullRequestInfo:
    """The ``pull_request`` object of a pull-request payload."""

    id: int
    number: int
    title: str
    html_url: str
    author: str
    created_at: datetime
    closed_at: Optional[datetime]
    merged_at: Optional[datetime]
    merged: bool

    @classmethod
    def from_dict(cls, data: dict, event_id: str) -> "PullRequestInfo":
        path = "payload.pull_request"
        return cls(
            id=_require(data, "id", event_id, path),
            number=_require(data, "number", event_id, path),
            title=_require(data, "title", event_id, path),
            html_url=_require(data, "html_url", event_id, path),
            author=_login(data),
            created_at=_timestamp(data, "created_at", event_id, path),
            closed_at=_optional_timestamp(data, "closed_at", event_id, path),
            merged_at=_optional_timestamp(data, "merged_at", event_id, path),
            merged=_merged_flag(data, event_id, path),
        )


@dataclass
class IssueInfo:
    """The ``issue`` object of an issue or issue-comment payload."""

    id: int
    number: int
    title: str
    html_url: str
    author: str
    created_at: datetime
    closed_at: Optional[datetime]
    is_pull_request: bool

    @classmethod
    def from_dict(cls, data: dict, event_id: str) -> "IssueInfo":
        path = "payload.issue"
        return cls(
            id=_require(data, "id", event_id, path),
            number=_require(data, "number", event_id, path),
            title=_require(data, "title", event_id, path),
            html_url=_require(data, "html_url", event_id, path),
            author=_login(data),
            created_at=_timestamp(data, "created_at", event_id, path),
            closed_at=_optional_timestamp(data, "closed_at", event_id, path),
            is_pull_request="pull_request" in data,
        )


@dataclass
class Event:
    """A single activity record from the events API."""

    id: str
    type: str
    created_at: datetime
    repo: str = ""
    payload: dict = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> "Event":
        """Build an Event from a raw API record.

        Raises:
            MalformedPayloadError: If id, type or created_at is absent.
        """
        event_id = str(data.get("id") or "") if isinstance(data, dict) else ""
        _require(data, "id", event_id)
        return cls(
            id=event_id,
            type=_require(data, "type", event_id),
            created_at=_timestamp(data, "created_at", event_id, ""),
            repo=(data.get("repo") or {}).get("name", "") or "",
            payload=data.get("payload") or {},
        )

    @property
    def action(self) -> str:
        return _require(self.payload, "action", self.id, "payload")

    @property
    def pull_request(self) -> PullRequestInfo:
        raw = _require(self.payload, "pull_request", self.id, "payload")
        return PullRequestInfo.from_dict(raw, self.id)

    @property
    def issue(self) -> IssueInfo:
        raw = _require(self.payload, "issue", self.id, "payload")
        return IssueInfo.from_dict(raw, self.id)

    def occurred_on(self, day: date, tz: Optional[tzinfo] = None) -> bool:
        """True when the event itself happened on ``day`` in ``tz``."""
        return local_date(self.created_at, tz) == day
