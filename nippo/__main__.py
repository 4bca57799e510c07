#!/usr/bin/env python3
"""Daily GitHub activity report ("nippo") generator.

Pipeline:
  1. Fetch the user's own and public event feeds via `gh api`
  2. Classify events (pull requests, issues, comments) by action and day
  3. Group them into report sections
  4. Print a nested Markdown list on stdout

Credentials are read from NIPPO_GITHUB_USER_NAME and
NIPPO_GITHUB_API_TOKEN.
"""

import argparse
import logging
import sys
from datetime import date, datetime

from nippo.classify import Issues, PullRequests
from nippo.config import ISSUE_CLOSED_BY, VIEWS, Config, load_config, load_credentials
from nippo.content import prepare_classified_content, prepare_latest_content
from nippo.errors import NippoError
from nippo.fetcher import EventFetcher
from nippo.format_markdown import format_markdown
from nippo.github_client import GitHubClient
from nippo.grouping import reduce_latest_state
from nippo.report_data import ReportData

logger = logging.getLogger("nippo")


def build_report(fetcher: EventFetcher, day: date, cfg: Config) -> ReportData:
    """Fetch the event window and prepare report sections for ``day``."""
    tz = cfg.tzinfo()
    events = fetcher.all_user_events()

    if cfg.view == "latest":
        sections = prepare_latest_content(reduce_latest_state(events, day, tz))
    else:
        sections = prepare_classified_content(
            PullRequests(events, tz=tz),
            Issues(events, tz=tz, closed_by=cfg.issue_closed_by),
            day,
        )
    return ReportData(sections=sections)


def _parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="nippo",
        description="Print today's GitHub pull request and issue activity as Markdown",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Credentials are read from NIPPO_GITHUB_USER_NAME and NIPPO_GITHUB_API_TOKEN. "
            "Only the latest 100 events of each feed are considered."
        ),
    )
    parser.add_argument("--date", default=None, help="report day, YYYY-MM-DD (default: today)")
    parser.add_argument("--config", dest="config_path", default=None, help="path to YAML config file (default: ~/.config/nippo/config.yaml)")
    parser.add_argument(
        "--view", default=None, choices=list(VIEWS),
        help="classified: merged/rejected/opened per classifier; latest: one line per item under its latest action (default: classified)",
    )
    parser.add_argument(
        "--issue-closed-by", dest="issue_closed_by", default=None, choices=list(ISSUE_CLOSED_BY),
        help="date compared for closed issues in the classified view (default: created)",
    )
    parser.add_argument("--detailed", action="store_true", default=None, help="include repo, number, author and comment count")
    parser.add_argument("--timeout", type=float, default=None, help="seconds to wait for each GitHub call (default: 60)")
    parser.add_argument("-v", "--verbose", action="store_true", default=False, help="log debug output to stderr")
    return parser.parse_args(argv)


def main(argv=None):
    args = _parse_args(argv)

    logging.basicConfig(
        format="%(levelname)s: %(name)s: %(message)s",
        level=logging.DEBUG if args.verbose else logging.WARNING,
        stream=sys.stderr,
    )

    if args.timeout is not None and args.timeout <= 0:
        print("Error: --timeout must be a positive number.", file=sys.stderr)
        sys.exit(1)

    day = None
    if args.date:
        try:
            day = datetime.strptime(args.date, "%Y-%m-%d").date()
        except ValueError:
            print(f"Error: Invalid date format '{args.date}' for --date. Use YYYY-MM-DD.", file=sys.stderr)
            sys.exit(1)

    try:
        cfg = load_config(args.config_path)
        if args.view:
            cfg.view = args.view
        if args.issue_closed_by:
            cfg.issue_closed_by = args.issue_closed_by
        if args.detailed:
            cfg.detailed = True
        if args.timeout is not None:
            cfg.timeout = args.timeout

        credentials = load_credentials()
        if day is None:
            day = datetime.now(cfg.tzinfo()).date()
        logger.debug("Report for %s on %s (view=%s)", credentials.user, day.isoformat(), cfg.view)

        client = GitHubClient(credentials.token, timeout=cfg.timeout)
        fetcher = EventFetcher(client, credentials.user)
        report = build_report(fetcher, day, cfg)
    except NippoError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    output = format_markdown(report, detailed=cfg.detailed)
    if output:
        print(output)


if __name__ == "__main__":
    main()
