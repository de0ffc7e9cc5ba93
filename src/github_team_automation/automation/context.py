"""Explicit repository context passed into every repository-scoped GitHub call."""

from __future__ import annotations

from dataclasses import dataclass

from github_team_automation.automation.errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class RepoContext:
    """The repository (and optionally the commit) a run operates against."""

    owner: str
    repo: str
    ref: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    @staticmethod
    def parse(repository: str, *, ref: str = "") -> RepoContext:
        """Build a context from an ``owner/repo`` string.

        Raises:
            ConfigurationError: If ``repository`` is not in the form ``owner/repo``.
        """

        value = repository.strip().strip("/")
        owner, sep, name = value.partition("/")
        if not sep or not owner.strip() or not name.strip() or "/" in name:
            raise ConfigurationError(
                f"repository must be in the form 'owner/repo', got {repository!r}"
            )
        return RepoContext(owner=owner.strip(), repo=name.strip(), ref=ref.strip())
