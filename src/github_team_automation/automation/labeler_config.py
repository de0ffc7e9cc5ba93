"""Labeler configuration: the single validation boundary for ``label-pr``.

Example::

    team_labels:
      infra: [dave, erin]
    file_pattern_labels:
      docs: "docs/**"
      build: ["*.yml", "*.yaml"]

``team_labels`` may instead name a team data file hosted elsewhere, as
``owner/repo/path/to/teams.json`` with an optional ``@ref`` suffix.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from github_team_automation.automation.errors import ConfigurationError
from github_team_automation.automation.labeling.classifier import build_label_rules
from github_team_automation.automation.models import LabelRule
from github_team_automation.automation.team_data import normalize_login


@dataclass(frozen=True, slots=True)
class TeamsFileRef:
    """Location of an externally hosted team data file."""

    repository: str
    path: str
    ref: str = ""

    @staticmethod
    def parse(value: str) -> TeamsFileRef:
        location, _, ref = value.strip().partition("@")
        parts = location.strip("/").split("/", 2)
        if len(parts) != 3 or not all(p.strip() for p in parts):
            raise ConfigurationError(
                "team_labels must be a mapping of label to usernames or a reference of the "
                f"form 'owner/repo/path[@ref]', got {value!r}"
            )
        owner, repo, path = parts
        return TeamsFileRef(repository=f"{owner}/{repo}", path=path, ref=ref.strip())


@dataclass(frozen=True, slots=True)
class LabelerConfig:
    rules: tuple[LabelRule, ...] = ()
    team_labels: Mapping[str, frozenset[str]] = field(default_factory=dict)
    teams_file: TeamsFileRef | None = None


class _LabelerDocument(BaseModel):
    model_config = ConfigDict(extra="ignore")

    team_labels: dict[str, list[str]] | str = Field(default_factory=dict)
    file_pattern_labels: dict[str, Any] = Field(default_factory=dict)

    @field_validator("team_labels", "file_pattern_labels", mode="before")
    @classmethod
    def _empty_section(cls, value: Any) -> Any:
        # A YAML key with no value decodes to None.
        return {} if value is None else value


def parse_labeler_config(raw: object) -> LabelerConfig:
    """Validate a decoded labeler document.

    Raises:
        ConfigurationError: If any part of the document is malformed. The message
            names the offending label where there is one.
    """

    if raw is None:
        raw = {}
    try:
        doc = _LabelerDocument.model_validate(raw)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid labeler configuration: {e}") from e

    rules = build_label_rules(doc.file_pattern_labels)

    if isinstance(doc.team_labels, str):
        return LabelerConfig(rules=rules, teams_file=TeamsFileRef.parse(doc.team_labels))

    team_labels = {
        label: frozenset(normalize_login(u) for u in usernames if u.strip())
        for label, usernames in doc.team_labels.items()
    }
    return LabelerConfig(rules=rules, team_labels=team_labels)
