"""Membership reconciliation: desired vs. current team members."""

from __future__ import annotations

from collections.abc import Set

from github_team_automation.automation.models import MembershipDiff


def diff(desired: Set[str], current: Set[str]) -> MembershipDiff:
    """Return the minimal membership changes that turn ``current`` into ``desired``.

    A team that does not exist yet has ``current`` empty, so every desired
    member lands in ``to_add`` and nothing is removed.
    """

    return MembershipDiff(
        to_add=frozenset(desired) - frozenset(current),
        to_remove=frozenset(current) - frozenset(desired),
    )
