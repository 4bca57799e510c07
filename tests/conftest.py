"""Shared pytest configuration and fixtures.

Factories build raw events-API records; tests turn them into Event
objects with Event.from_dict or feed them to a mocked client.
"""

from __future__ import annotations

import pytest

from nippo.config import TOKEN_ENV_VAR, USER_ENV_VAR

REPO = "octo/app"


def make_pr_record(
    event_id, action, pr_id=42, number=42, title="Add login", merged=False,
    created_at="2026-10-19T09:00:00Z", closed_at=None, merged_at=None,
    event_at=None, author="alice", repo=REPO,
):
    return {
        "id": str(event_id),
        "type": "PullRequestEvent",
        "created_at": event_at or closed_at or created_at,
        "repo": {"name": repo},
        "payload": {
            "action": action,
            "number": number,
            "pull_request": {
                "id": pr_id,
                "number": number,
                "title": title,
                "html_url": f"https://github.com/{repo}/pull/{number}",
                "user": {"login": author},
                "created_at": created_at,
                "closed_at": closed_at,
                "merged_at": merged_at,
                "merged": merged,
            },
        },
    }


def make_issue_record(
    event_id, action, issue_id=7, number=7, title="Crash on start",
    created_at="2026-10-19T09:00:00Z", closed_at=None, event_at=None,
    author="alice", repo=REPO, type_="IssuesEvent", is_pull_request=False,
):
    kind = "pull" if is_pull_request else "issues"
    issue = {
        "id": issue_id,
        "number": number,
        "title": title,
        "html_url": f"https://github.com/{repo}/{kind}/{number}",
        "user": {"login": author},
        "created_at": created_at,
        "closed_at": closed_at,
    }
    if is_pull_request:
        issue["pull_request"] = {"url": f"https://api.github.com/repos/{repo}/pulls/{number}"}
    return {
        "id": str(event_id),
        "type": type_,
        "created_at": event_at or closed_at or created_at,
        "repo": {"name": repo},
        "payload": {"action": action, "issue": issue},
    }


@pytest.fixture
def pr_record():
    return make_pr_record


@pytest.fixture
def issue_record():
    return make_issue_record


@pytest.fixture
def credentials_env(monkeypatch):
    """Provide valid credentials in the environment."""
    monkeypatch.setenv(USER_ENV_VAR, "alice")
    monkeypatch.setenv(TOKEN_ENV_VAR, "ghp_test")


@pytest.fixture(autouse=True)
def _no_user_config(monkeypatch, tmp_path):
    """Point the default config path at an empty location."""
    monkeypatch.setattr("nippo.config.DEFAULT_CONFIG_PATH", str(tmp_path / "missing.yaml"))
