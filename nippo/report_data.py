"""Structured report data model, consumed by the formatter."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


@dataclass
class ReportItem:
    """A single issue or pull request line."""
    title: str
    url: str
    author: str = ""
    number: int = 0
    repo: str = ""           # "owner/name"
    comments: int = 0


@dataclass
class ActionGroup:
    """Items that share a final action (e.g. 'merged')."""
    action: str
    items: List[ReportItem] = field(default_factory=list)


@dataclass
class ReportSection:
    """Top-level section ('pull_request' or 'issue')."""
    name: str
    groups: List[ActionGroup] = field(default_factory=list)


@dataclass
class ReportData:
    """Complete report for one day, produced by content and consumed by formatters."""
    sections: List[ReportSection] = field(default_factory=list)
