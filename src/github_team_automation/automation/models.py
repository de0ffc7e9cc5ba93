"""Typed values flowing between the parsing boundary, the pure core and the actions.

Everything here is immutable and built fresh per run.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from github_team_automation.automation.errors import ConfigurationError

# Repository-relative paths of one pull request, in the order GitHub listed them.
ChangedFileSet = tuple[str, ...]


@dataclass(frozen=True, slots=True)
class TeamSpec:
    """Desired state of one team as declared in the team data file."""

    name: str
    slug: str
    desired_members: frozenset[str] = field(default_factory=frozenset)


@dataclass(frozen=True, slots=True)
class TeamSnapshot:
    """Observed state of one team in the organization."""

    exists: bool
    current_members: frozenset[str] = field(default_factory=frozenset)

    @staticmethod
    def absent() -> TeamSnapshot:
        return TeamSnapshot(exists=False, current_members=frozenset())


@dataclass(frozen=True, slots=True)
class MembershipDiff:
    to_add: frozenset[str]
    to_remove: frozenset[str]

    @property
    def is_empty(self) -> bool:
        return not self.to_add and not self.to_remove


@dataclass(frozen=True, slots=True)
class LabelRule:
    """A label and the glob patterns that select it."""

    label: str
    patterns: tuple[str, ...]

    @staticmethod
    def from_raw(label: str, value: object) -> LabelRule:
        """Normalize a decoded rule value into a :class:`LabelRule`.

        A single string becomes a one-element pattern tuple.

        Raises:
            ConfigurationError: If ``value`` is neither a string nor a non-empty
                sequence of strings.
        """

        if isinstance(value, str):
            patterns: tuple[str, ...] = (value,)
        elif isinstance(value, Sequence) and not isinstance(value, bytes | bytearray):
            if not all(isinstance(p, str) for p in value):
                raise ConfigurationError(
                    f"file_pattern_labels entry for label {label!r} must contain only strings"
                )
            patterns = tuple(value)
        else:
            raise ConfigurationError(
                f"file_pattern_labels entry for label {label!r} must be a glob string "
                f"or a list of glob strings, got {type(value).__name__}"
            )

        if not patterns or not all(p.strip() for p in patterns):
            raise ConfigurationError(
                f"file_pattern_labels entry for label {label!r} must have at least one "
                "non-empty pattern"
            )
        return LabelRule(label=label, patterns=patterns)


@dataclass(frozen=True, slots=True)
class LabelDecision:
    labels: frozenset[str]
    requires_reopen_cycle: bool
