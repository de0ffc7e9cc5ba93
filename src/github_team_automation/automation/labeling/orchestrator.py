"""Pull-request labeling: glob labels plus team labels, with the reopen cycle."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence, Set

from github_team_automation.automation.context import RepoContext
from github_team_automation.automation.documents import decode_document
from github_team_automation.automation.errors import ConfigurationError
from github_team_automation.automation.github.client import GitHubClient
from github_team_automation.automation.labeler_config import LabelerConfig
from github_team_automation.automation.labeling.classifier import classify
from github_team_automation.automation.labeling.team_labels import resolve_labels
from github_team_automation.automation.models import LabelDecision, LabelRule
from github_team_automation.automation.team_data import parse_team_data, team_labels_from_teams
from github_team_automation.automation.workflow.actions import (
    Action,
    ApplyLabels,
    SetPullRequestState,
    run_actions,
)

logger = logging.getLogger(__name__)


def decide(
    changed_files: Sequence[str],
    rules: Sequence[LabelRule] | Mapping[str, object],
    team_label_map: Mapping[str, Set[str]],
    author: str | None,
) -> LabelDecision:
    """Merge glob-derived and team-derived labels.

    Only team labels require the close/reopen cycle.
    """

    glob_labels = classify(changed_files, rules)
    team_labels = resolve_labels(author, team_label_map)
    return LabelDecision(
        labels=frozenset(glob_labels | team_labels),
        requires_reopen_cycle=bool(team_labels),
    )


def plan_labeling(
    decision: LabelDecision, *, context: RepoContext, pull_number: int
) -> list[Action]:
    if not decision.labels:
        return []

    apply = ApplyLabels(
        context=context, pull_number=pull_number, labels=tuple(sorted(decision.labels))
    )
    if not decision.requires_reopen_cycle:
        return [apply]
    return [
        SetPullRequestState(context=context, pull_number=pull_number, state="closed"),
        apply,
        SetPullRequestState(context=context, pull_number=pull_number, state="open"),
    ]


class LabelingOrchestrator:
    """Label one pull request from an already-validated :class:`LabelerConfig`."""

    def __init__(
        self,
        *,
        github: GitHubClient,
        context: RepoContext,
        teams_github: GitHubClient | None = None,
        dry_run: bool = False,
    ) -> None:
        self._github = github
        self._context = context
        self._teams_github = teams_github or github
        self._dry_run = dry_run

    def team_label_map(self, config: LabelerConfig) -> Mapping[str, Set[str]]:
        """Inline team labels, or labels derived from the referenced team data file."""

        ref = config.teams_file
        if ref is None:
            return config.team_labels

        context = RepoContext.parse(ref.repository, ref=ref.ref)
        try:
            text = self._teams_github.get_text_file(context=context, path=ref.path)
        except FileNotFoundError as e:
            raise ConfigurationError(f"team_labels references a missing file: {e}") from e
        teams = parse_team_data(decode_document(text, path=ref.path))
        return team_labels_from_teams(teams)

    def label_pull_request(
        self, *, pull_number: int, author: str | None, config: LabelerConfig
    ) -> LabelDecision:
        team_labels = self.team_label_map(config)
        changed_files = self._github.list_pull_request_files(
            context=self._context, pull_number=pull_number
        )
        logger.debug(
            "Changed files", extra={"pull_number": pull_number, "files": list(changed_files)}
        )

        decision = decide(changed_files, config.rules, team_labels, author)
        logger.info(
            "Label decision",
            extra={
                "pull_number": pull_number,
                "author": author,
                "labels": sorted(decision.labels),
                "reopen_cycle": decision.requires_reopen_cycle,
            },
        )

        actions = plan_labeling(decision, context=self._context, pull_number=pull_number)
        if self._dry_run or not decision.requires_reopen_cycle:
            run_actions(actions, self._github, dry_run=self._dry_run)
            return decision

        close, apply, reopen = actions
        run_actions([close], self._github)
        try:
            run_actions([apply], self._github)
        except Exception:
            logger.error(
                "Applying labels failed, reopening the pull request",
                extra={"pull_number": pull_number},
            )
            raise
        finally:
            # A pull request closed above is always reopened.
            run_actions([reopen], self._github)
        return decision
