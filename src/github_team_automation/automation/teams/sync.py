"""Team membership sync: fetch, diff and apply, one team at a time."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from github_team_automation.automation.github.client import GitHubClient
from github_team_automation.automation.models import MembershipDiff, TeamSnapshot, TeamSpec
from github_team_automation.automation.teams.reconciler import diff
from github_team_automation.automation.workflow.actions import (
    Action,
    AddTeamMember,
    CreateTeam,
    RemoveTeamMember,
    run_actions,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TeamSyncResult:
    slug: str
    created: bool
    added: tuple[str, ...]
    removed: tuple[str, ...]


def _member_actions(
    *, org: str, slug: str, membership: MembershipDiff, drop_creator: str = ""
) -> list[Action]:
    actions: list[Action] = []
    if drop_creator:
        actions.append(RemoveTeamMember(org=org, slug=slug, username=drop_creator))
    actions.extend(
        RemoveTeamMember(org=org, slug=slug, username=u) for u in sorted(membership.to_remove)
    )
    actions.extend(AddTeamMember(org=org, slug=slug, username=u) for u in sorted(membership.to_add))
    return actions


def _creator_to_drop(team: TeamSpec, snapshot: TeamSnapshot, creator: str) -> str:
    if snapshot.exists or not creator or creator in team.desired_members:
        return ""
    return creator


def plan_team_sync(
    *, org: str, team: TeamSpec, snapshot: TeamSnapshot, creator: str
) -> tuple[list[Action], MembershipDiff]:
    """Plan the actions converging ``team`` from ``snapshot``.

    Creation path: create, drop the creator (GitHub adds it implicitly) unless it
    is a desired member, then add every desired member. Update path: remove stale
    members, then add missing ones. Usernames are sorted within each step.
    """

    current = snapshot.current_members if snapshot.exists else frozenset()
    membership = diff(team.desired_members, current)

    actions: list[Action] = []
    if not snapshot.exists:
        actions.append(CreateTeam(org=org, name=team.name, slug=team.slug))
    actions.extend(
        _member_actions(
            org=org,
            slug=team.slug,
            membership=membership,
            drop_creator=_creator_to_drop(team, snapshot, creator),
        )
    )
    return actions, membership


def fetch_team_snapshot(github: GitHubClient, *, org: str, slug: str) -> TeamSnapshot:
    if not github.team_exists(org=org, slug=slug):
        return TeamSnapshot.absent()
    return TeamSnapshot(exists=True, current_members=github.list_team_members(org=org, slug=slug))


class TeamSyncOrchestrator:
    """Reconcile every declared team against the organization, sequentially."""

    def __init__(self, *, github: GitHubClient, org: str, dry_run: bool = False) -> None:
        self._github = github
        self._org = org
        self._dry_run = dry_run
        self._creator: str | None = None

    @property
    def creator(self) -> str:
        """Login GitHub implicitly adds to teams this run creates."""

        if self._creator is None:
            self._creator = self._github.get_authenticated_login()
        return self._creator

    def sync_team(self, team: TeamSpec) -> TeamSyncResult:
        snapshot = fetch_team_snapshot(self._github, org=self._org, slug=team.slug)
        creator = "" if snapshot.exists else self.creator
        actions, membership = plan_team_sync(
            org=self._org, team=team, snapshot=snapshot, creator=creator
        )

        logger.info(
            "Reconciling team",
            extra={
                "org": self._org,
                "team": team.slug,
                "exists": snapshot.exists,
                "to_add": sorted(membership.to_add),
                "to_remove": sorted(membership.to_remove),
            },
        )
        slug = team.slug
        if snapshot.exists or self._dry_run:
            run_actions(actions, self._github, dry_run=self._dry_run)
        else:
            slug = self._create(actions[0], team)
            run_actions(
                _member_actions(
                    org=self._org,
                    slug=slug,
                    membership=membership,
                    drop_creator=_creator_to_drop(team, snapshot, creator),
                ),
                self._github,
            )

        return TeamSyncResult(
            slug=slug,
            created=not snapshot.exists,
            added=tuple(sorted(membership.to_add)),
            removed=tuple(sorted(membership.to_remove)),
        )

    def _create(self, create: Action, team: TeamSpec) -> str:
        """Create the team and return the slug GitHub assigned to it."""

        (result,) = run_actions([create], self._github)
        slug = str((result.details or {}).get("slug") or team.slug)
        if slug != team.slug:
            logger.warning(
                "GitHub assigned slug %r to team %r but the team data derives %r; later runs "
                "will not find it until 'short' is set to match",
                slug,
                team.name,
                team.slug,
                extra={"org": self._org, "expected": team.slug, "actual": slug},
            )
        return slug

    def sync_all(self, teams: Sequence[TeamSpec]) -> list[TeamSyncResult]:
        # Each team is finished before the next one starts.
        return [self.sync_team(team) for team in teams]
