"""Team-derived labels for a pull request author."""

from __future__ import annotations

from collections.abc import Mapping, Set


def resolve_labels(author: str | None, team_label_map: Mapping[str, Set[str]]) -> set[str]:
    """Return every label whose member set contains ``author``.

    An unknown author (no pull request on the event) yields no labels.
    """

    if not author:
        return set()
    return {label for label, members in team_label_map.items() if author in members}
