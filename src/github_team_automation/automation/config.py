"""Settings for the team sync and labeling commands.

Configuration is loaded from:
- environment variables (GitHub Actions sets the ``GITHUB_*`` ones)
- and a local `.env` file (if present)

To avoid collisions with the workflow's own ``GITHUB_TOKEN``, the token used for
API calls has a dedicated variable: ``TEAM_AUTOMATION_GITHUB_TOKEN``. Team
management needs a token with ``admin:org`` scope, which the default workflow
token does not have.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from github_team_automation.automation.context import RepoContext


class AutomationSettings(BaseSettings):
    """Settings for one command run.

    Notes:
        Pydantic-settings supports overriding the env file in tests via:
        `AutomationSettings(_env_file=path_to_env)`.
    """

    github_token: str = Field(
        default="",
        validation_alias="TEAM_AUTOMATION_GITHUB_TOKEN",
        description="GitHub token used for API authentication",
    )
    external_repo_token: str = Field(
        default="",
        validation_alias="TEAM_AUTOMATION_EXTERNAL_REPO_TOKEN",
        description="Token for reading a team data file hosted in another repository",
    )

    team_data_path: str = Field(
        default=".github/teams.json",
        validation_alias="TEAM_DATA_PATH",
        description="Repository path of the team data file (JSON or YAML)",
    )
    labeler_config_path: str = Field(
        default=".github/labeler.yml",
        validation_alias="LABELER_CONFIG_PATH",
        description="Repository path of the labeler configuration",
    )

    github_repository: str = Field(default="", validation_alias="GITHUB_REPOSITORY")
    github_sha: str = Field(default="", validation_alias="GITHUB_SHA")
    github_event_path: Path | None = Field(default=None, validation_alias="GITHUB_EVENT_PATH")
    github_base_url: str = Field(
        default="https://api.github.com",
        validation_alias="GITHUB_BASE_URL",
        description="GitHub API base URL (useful for GitHub Enterprise)",
    )

    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_format: Literal["json", "actions"] = Field(
        default="json",
        validation_alias="LOG_FORMAT",
        description="'actions' emits workflow commands so warnings and errors become annotations",
    )

    dry_run: bool = Field(
        default=False,
        validation_alias="TEAM_AUTOMATION_DRY_RUN",
        description="Plan and log every action without calling GitHub write APIs",
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
    )

    @model_validator(mode="after")
    def _require_github_auth(self) -> AutomationSettings:
        if not self.github_token.strip():
            raise ValueError("TEAM_AUTOMATION_GITHUB_TOKEN is required")
        return self

    @property
    def repo_context(self) -> RepoContext:
        """Repository and commit the run was triggered for.

        Raises:
            ConfigurationError: If ``GITHUB_REPOSITORY`` is not ``owner/repo``.
        """

        return RepoContext.parse(self.github_repository, ref=self.github_sha)
