"""Content preparation layer for nippo.

Turns classifier or reducer output into renderer-agnostic
ReportSection structures. Two layouts:

- prepare_classified_content(): pull requests merged/rejected/opened and
  issues opened/closed on the report day, straight from the classifiers
- prepare_latest_content(): one line per entity under its latest action,
  from the last-state reducer
"""

from __future__ import annotations

import logging
from datetime import date

from nippo.classify import Issues, PullRequests
from nippo.events import Event
from nippo.grouping import (
    CLOSED,
    COMMENTED,
    ISSUE,
    MERGED,
    OPENED,
    PULL_REQUEST,
    REJECTED,
    Grouped,
)
from nippo.report_data import ActionGroup, ReportItem, ReportSection

logger = logging.getLogger("nippo.content")

# Render order for the latest-state layout
SECTION_ORDER = [ISSUE, PULL_REQUEST]
ACTION_ORDER = [OPENED, MERGED, REJECTED, CLOSED, COMMENTED]


def _pr_item(event: Event) -> ReportItem:
    pr = event.pull_request
    return ReportItem(
        title=pr.title, url=pr.html_url, author=pr.author,
        number=pr.number, repo=event.repo,
    )


def _issue_item(event: Event) -> ReportItem:
    issue = event.issue
    return ReportItem(
        title=issue.title, url=issue.html_url, author=issue.author,
        number=issue.number, repo=event.repo,
    )


def _non_empty(section: ReportSection) -> ReportSection:
    section.groups = [g for g in section.groups if g.items]
    return section


def prepare_classified_content(
    pull_requests: PullRequests,
    issues: Issues,
    day: date,
) -> list[ReportSection]:
    """Build the classifier layout for ``day``.

    Args:
        pull_requests: Pull-request classifier over the fetched window.
        issues: Issue classifier over the fetched window.
        day: Report day.

    Returns:
        Sections in order pull_request, issue. Empty groups and sections
        are dropped.
    """
    sections = [
        ReportSection(name=PULL_REQUEST, groups=[
            ActionGroup(MERGED, [_pr_item(e) for e in pull_requests.merged_at(day)]),
            ActionGroup(REJECTED, [_pr_item(e) for e in pull_requests.unmerged_at(day)]),
            ActionGroup(OPENED, [_pr_item(e) for e in pull_requests.opened_at(day)]),
        ]),
        ReportSection(name=ISSUE, groups=[
            ActionGroup(OPENED, [_issue_item(e) for e in issues.opened_at(day)]),
            ActionGroup(CLOSED, [_issue_item(e) for e in issues.closed_at(day)]),
        ]),
    ]
    result = [s for s in map(_non_empty, sections) if s.groups]
    logger.debug(
        "Classified content for %s: %d sections, %d items",
        day.isoformat(), len(result),
        sum(len(g.items) for s in result for g in s.groups),
    )
    return result


def prepare_latest_content(grouped: Grouped) -> list[ReportSection]:
    """Convert reducer output into ordered sections.

    Sections follow SECTION_ORDER and groups ACTION_ORDER; items keep the
    order in which the reducer first saw each entity.
    """
    sections: list[ReportSection] = []
    for name in SECTION_ORDER:
        by_action = grouped.get(name) or {}
        groups = []
        for action in ACTION_ORDER:
            entries = by_action.get(action) or {}
            items = [
                ReportItem(
                    title=entry["title"],
                    url=url,
                    author=entry.get("author", ""),
                    number=entry.get("number", 0),
                    repo=entry.get("repo", ""),
                    comments=entry.get("comments", 0),
                )
                for url, entry in entries.items()
            ]
            if items:
                groups.append(ActionGroup(action, items))
        if groups:
            sections.append(ReportSection(name=name, groups=groups))
    return sections
