"""CLI entrypoint for team sync and pull-request labeling."""

from __future__ import annotations

import argparse
import logging
import sys

from pydantic import ValidationError

from github_team_automation import __version__
from github_team_automation.automation.config import AutomationSettings
from github_team_automation.automation.context import RepoContext
from github_team_automation.automation.documents import decode_document
from github_team_automation.automation.errors import ConfigurationError, ExternalCallError
from github_team_automation.automation.event import load_pull_request_event
from github_team_automation.automation.github.client import GitHubClient
from github_team_automation.automation.labeler_config import parse_labeler_config
from github_team_automation.automation.labeling.orchestrator import LabelingOrchestrator
from github_team_automation.automation.logging import configure_logging
from github_team_automation.automation.team_data import parse_team_data
from github_team_automation.automation.teams.sync import TeamSyncOrchestrator

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="team-automation",
        description="Sync GitHub team membership from a data file and label pull requests",
    )
    parser.add_argument(
        "--version", action="version", version=f"github-team-automation {__version__}"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Log the planned GitHub changes without making them",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser(
        "sync-teams",
        help="Create missing teams and reconcile members against the team data file",
    )
    subparsers.add_parser(
        "label-pr",
        help="Apply glob and team labels to the pull request of the triggering event",
    )
    return parser


def _fetch_document(github: GitHubClient, *, context: RepoContext, path: str) -> object:
    try:
        text = github.get_text_file(context=context, path=path)
    except FileNotFoundError as e:
        raise ConfigurationError(str(e)) from e
    return decode_document(text, path=path)


def _sync_teams(settings: AutomationSettings, github: GitHubClient, *, dry_run: bool) -> int:
    context = settings.repo_context
    teams = parse_team_data(
        _fetch_document(github, context=context, path=settings.team_data_path)
    )

    orchestrator = TeamSyncOrchestrator(github=github, org=context.owner, dry_run=dry_run)
    results = orchestrator.sync_all(teams)

    for r in results:
        action = "created" if r.created else "updated"
        print(
            f"{context.owner}/{r.slug}: {action}; "
            f"added={list(r.added) or 'none'} removed={list(r.removed) or 'none'}"
        )
    return 0


def _label_pr(settings: AutomationSettings, github: GitHubClient, *, dry_run: bool) -> int:
    event = load_pull_request_event(settings.github_event_path)
    if event is None:
        print("No pull request on the triggering event; nothing to label")
        return 0

    context = settings.repo_context
    config = parse_labeler_config(
        _fetch_document(github, context=context, path=settings.labeler_config_path)
    )

    teams_github: GitHubClient | None = None
    if settings.external_repo_token.strip():
        teams_github = GitHubClient(
            token=settings.external_repo_token, base_url=settings.github_base_url
        )
    try:
        orchestrator = LabelingOrchestrator(
            github=github, context=context, teams_github=teams_github, dry_run=dry_run
        )
        decision = orchestrator.label_pull_request(
            pull_number=event.number, author=event.author, config=config
        )
    finally:
        if teams_github is not None:
            teams_github.close()

    print(
        f"PR #{event.number}: labels={sorted(decision.labels) or 'none'} "
        f"reopen_cycle={decision.requires_reopen_cycle}"
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = AutomationSettings()
    except ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check your environment or .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return 2

    configure_logging(settings.log_level, settings.log_format)
    dry_run = args.dry_run or settings.dry_run

    try:
        github = GitHubClient(token=settings.github_token, base_url=settings.github_base_url)
        try:
            if args.command == "sync-teams":
                return _sync_teams(settings, github, dry_run=dry_run)
            if args.command == "label-pr":
                return _label_pr(settings, github, dry_run=dry_run)
        finally:
            github.close()

        logger.error("Unknown command", extra={"command": args.command})
        return 2

    except ConfigurationError as e:
        logger.error("Configuration error: %s", e)
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    except ExternalCallError as e:
        logger.exception("GitHub call failed", extra={"operation": e.operation})
        return 1

    except Exception:
        logger.exception("Command failed")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
