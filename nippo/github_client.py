"""GitHub REST client for nippo via the gh CLI.

Exposes the two event-list operations the report needs. All calls run
`gh api` with the access token passed through GH_TOKEN, so nothing is
read from or written to gh's own credential store.
"""

from __future__ import annotations

import json
import logging
import os
import subprocess
from typing import Optional
from urllib.parse import quote

from nippo.errors import RemoteFetchError

logger = logging.getLogger("nippo.github_client")

DEFAULT_PAGE_SIZE = 100


class GitHubClient:
    """Thin wrapper around `gh api` for the events endpoints.

    Args:
        token: GitHub access token.
        timeout: Seconds to wait for each gh call; None waits forever.
    """

    def __init__(self, token: str, timeout: Optional[float] = 60.0):
        self.token = token
        self.timeout = timeout

    def list_user_events(self, user: str, per_page: int = DEFAULT_PAGE_SIZE) -> list[dict]:
        """List events performed by ``user`` (includes private ones the token can see)."""
        return self._get_list(f"/users/{quote(user, safe='')}/events?per_page={int(per_page)}")

    def list_user_public_events(self, user: str, per_page: int = DEFAULT_PAGE_SIZE) -> list[dict]:
        """List public events performed by ``user``."""
        return self._get_list(f"/users/{quote(user, safe='')}/events/public?per_page={int(per_page)}")

    def _get_list(self, endpoint: str) -> list[dict]:
        data = self._gh_json(["api", endpoint])
        if not isinstance(data, list):
            raise RemoteFetchError(f"unexpected response from {endpoint}: expected a JSON array")
        logger.debug("GET %s returned %d records", endpoint, len(data))
        return data

    def _gh_json(self, args: list[str]):
        """Run a gh CLI command and parse JSON output."""
        output = self._gh_command(args)
        if not output:
            return []
        try:
            return json.loads(output)
        except json.JSONDecodeError as e:
            raise RemoteFetchError(f"invalid JSON from gh {' '.join(args)}: {e}") from e

    def _gh_command(self, args: list[str]) -> str:
        """Run a gh CLI command and return stdout."""
        env = dict(os.environ)
        env["GH_TOKEN"] = self.token
        logger.debug("Running gh %s (timeout=%s)", " ".join(args), self.timeout)
        try:
            result = subprocess.run(
                ["gh"] + args,
                capture_output=True,
                text=True,
                check=True,
                timeout=self.timeout,
                env=env,
            )
        except FileNotFoundError:
            raise RemoteFetchError("gh CLI is not installed") from None
        except subprocess.TimeoutExpired:
            raise RemoteFetchError(
                f"gh command timed out after {self.timeout}s: {' '.join(args)}"
            ) from None
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or "").strip()[:500]
            raise RemoteFetchError(f"gh command failed: {' '.join(args)}\n{stderr}") from e
        return result.stdout.strip()
