"""Error types raised by nippo.

Every error is fatal for a report run; ``main()`` prints the message and
exits non-zero.
"""


class NippoError(RuntimeError):
    """Base class for all nippo errors."""


class ConfigurationError(NippoError):
    """Credentials or settings are missing or invalid."""


class RemoteFetchError(NippoError):
    """The gh CLI failed, timed out, or returned unreadable output."""


class MalformedPayloadError(NippoError):
    """An event lacks a field the report needs."""

    def __init__(self, field: str, event_id: str = ""):
        self.field = field
        self.event_id = event_id
        where = f" in event {event_id}" if event_id else ""
        super().__init__(f"missing field '{field}'{where}")
