"""Unit tests for team-derived labels."""

from __future__ import annotations

from github_team_automation.automation.labeling.team_labels import resolve_labels

TEAM_LABELS = {
    "infra": frozenset({"dave"}),
    "frontend": frozenset({"erin", "dave"}),
    "docs": frozenset({"frank"}),
}


def test_author_gets_every_matching_label() -> None:
    assert resolve_labels("dave", TEAM_LABELS) == {"infra", "frontend"}


def test_author_in_no_team_gets_nothing() -> None:
    assert resolve_labels("zoe", TEAM_LABELS) == set()


def test_unknown_author_gets_nothing() -> None:
    assert resolve_labels(None, TEAM_LABELS) == set()
    assert resolve_labels("", TEAM_LABELS) == set()
