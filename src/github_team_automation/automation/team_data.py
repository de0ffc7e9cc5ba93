"""Team data file: validation and conversion into :class:`TeamSpec` values.

The file maps a team name to its members::

    {
      "Platform Team": {
        "short": "platform",
        "members": [{"github": "alice"}, {"github": "bob"}]
      }
    }

``short``, when present, replaces the team name for the slug and for labels.
"""

from __future__ import annotations

import logging
import re

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from github_team_automation.automation.errors import ConfigurationError
from github_team_automation.automation.models import TeamSpec

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")
_NOT_SLUG_CHAR = re.compile(r"[^a-z0-9-]")
_REPEATED_HYPHENS = re.compile(r"-{2,}")


class TeamMemberEntry(BaseModel):
    github: str = Field(min_length=1, description="GitHub login of the member")


class TeamEntry(BaseModel):
    members: list[TeamMemberEntry] = Field(default_factory=list)
    short: str | None = Field(default=None, description="Overrides the team name")


_TEAM_DATA = TypeAdapter(dict[str, TeamEntry])


def slugify(name: str) -> str:
    """Derive the team slug: lowercase, whitespace to hyphens, other punctuation dropped."""

    slug = _WHITESPACE.sub("-", name.strip().lower())
    slug = _NOT_SLUG_CHAR.sub("", slug)
    slug = _REPEATED_HYPHENS.sub("-", slug)
    return slug.strip("-")


def normalize_login(login: str) -> str:
    # GitHub logins are case-insensitive; the API may return a different casing.
    return login.strip().lower()


def parse_team_data(raw: object) -> tuple[TeamSpec, ...]:
    """Validate decoded team data and build one :class:`TeamSpec` per team.

    Teams keep the order they are declared in.

    Raises:
        ConfigurationError: On a malformed document, an empty slug, or two teams
            resolving to the same slug.
    """

    if raw is None:
        raw = {}
    try:
        entries = _TEAM_DATA.validate_python(raw)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid team data: {e}") from e

    teams: list[TeamSpec] = []
    seen: dict[str, str] = {}
    for team_name, entry in entries.items():
        name = (entry.short or team_name).strip()
        slug = slugify(name)
        if not slug:
            raise ConfigurationError(f"Team {team_name!r} does not produce a usable slug")
        if slug in seen:
            raise ConfigurationError(
                f"Teams {seen[slug]!r} and {team_name!r} both resolve to slug {slug!r}"
            )
        seen[slug] = team_name

        members = frozenset(normalize_login(m.github) for m in entry.members)
        if "" in members:
            raise ConfigurationError(f"Team {team_name!r} has a member with an empty login")
        teams.append(TeamSpec(name=name, slug=slug, desired_members=members))

    logger.debug("Parsed team data", extra={"teams": [t.slug for t in teams]})
    return tuple(teams)


def team_labels_from_teams(teams: tuple[TeamSpec, ...]) -> dict[str, frozenset[str]]:
    """Labels derived from team data: one label per team, named after the team."""

    return {team.name: team.desired_members for team in teams}
