from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from github_team_automation.automation.context import RepoContext
from github_team_automation.automation.github.client import GitHubClient, PullRequestState

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ActionResult:
    ok: bool
    message: str
    details: dict[str, object] | None = None


class Action(Protocol):
    """A single side-effecting step against GitHub.

    Each action touches at most one team member or one pull request, so a run
    that fails partway leaves every earlier action applied and every later one
    untouched.
    """

    def describe(self) -> str: ...

    def execute(self, github: GitHubClient) -> ActionResult: ...


@dataclass(frozen=True, slots=True)
class CreateTeam(Action):
    org: str
    name: str
    slug: str

    def describe(self) -> str:
        return f"create team {self.org}/{self.slug} ({self.name!r})"

    def execute(self, github: GitHubClient) -> ActionResult:
        created_slug = github.create_team(org=self.org, name=self.name)
        return ActionResult(ok=True, message="Created team", details={"slug": created_slug})


@dataclass(frozen=True, slots=True)
class AddTeamMember(Action):
    org: str
    slug: str
    username: str

    def describe(self) -> str:
        return f"add {self.username} to {self.org}/{self.slug}"

    def execute(self, github: GitHubClient) -> ActionResult:
        github.add_team_member(org=self.org, slug=self.slug, username=self.username)
        return ActionResult(ok=True, message="Added member", details={"username": self.username})


@dataclass(frozen=True, slots=True)
class RemoveTeamMember(Action):
    org: str
    slug: str
    username: str

    def describe(self) -> str:
        return f"remove {self.username} from {self.org}/{self.slug}"

    def execute(self, github: GitHubClient) -> ActionResult:
        removed = github.remove_team_member(org=self.org, slug=self.slug, username=self.username)
        message = "Removed member" if removed else "Already not a member"
        return ActionResult(ok=True, message=message, details={"username": self.username})


@dataclass(frozen=True, slots=True)
class ApplyLabels(Action):
    context: RepoContext
    pull_number: int
    labels: tuple[str, ...]

    def describe(self) -> str:
        return f"apply labels {list(self.labels)} to {self.context.full_name}#{self.pull_number}"

    def execute(self, github: GitHubClient) -> ActionResult:
        github.add_labels(
            context=self.context, issue_number=self.pull_number, labels=list(self.labels)
        )
        return ActionResult(ok=True, message="Applied labels", details={"labels": self.labels})


@dataclass(frozen=True, slots=True)
class SetPullRequestState(Action):
    context: RepoContext
    pull_number: int
    state: PullRequestState

    def describe(self) -> str:
        verb = "reopen" if self.state == "open" else "close"
        return f"{verb} {self.context.full_name}#{self.pull_number}"

    def execute(self, github: GitHubClient) -> ActionResult:
        github.set_pull_request_state(
            context=self.context, pull_number=self.pull_number, state=self.state
        )
        return ActionResult(ok=True, message=f"Pull request {self.state}")


def run_actions(
    actions: Sequence[Action], github: GitHubClient, *, dry_run: bool = False
) -> list[ActionResult]:
    """Execute ``actions`` in order, stopping at the first ExternalCallError."""

    results: list[ActionResult] = []
    for action in actions:
        if dry_run:
            logger.info("DRY-RUN: would %s", action.describe())
            results.append(ActionResult(ok=True, message="Skipped (dry run)"))
            continue
        logger.info("Executing: %s", action.describe())
        results.append(action.execute(github))
    return results
