"""Test configuration and fixtures."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import Mock

import pytest

from github_team_automation.automation.context import RepoContext
from github_team_automation.automation.github.client import GitHubClient

_SETTINGS_ENV_VARS = (
    "TEAM_AUTOMATION_GITHUB_TOKEN",
    "TEAM_AUTOMATION_EXTERNAL_REPO_TOKEN",
    "TEAM_AUTOMATION_DRY_RUN",
    "TEAM_DATA_PATH",
    "LABELER_CONFIG_PATH",
    "GITHUB_REPOSITORY",
    "GITHUB_SHA",
    "GITHUB_EVENT_PATH",
    "GITHUB_BASE_URL",
    "LOG_LEVEL",
    "LOG_FORMAT",
)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> pytest.MonkeyPatch:
    """Isolate settings from the surrounding environment (CI sets GITHUB_* vars)."""
    for name in _SETTINGS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return monkeypatch


@pytest.fixture
def repo_context() -> RepoContext:
    """Provide a test repository context."""
    return RepoContext(owner="octo-org", repo="octo-repo", ref="abc123")


@pytest.fixture
def mock_github() -> Mock:
    """Provide a GitHub client double that records calls in order."""
    github = Mock(spec=GitHubClient)
    github.create_team.side_effect = lambda *, org, name: name.lower()
    github.remove_team_member.return_value = True
    return github


@pytest.fixture(autouse=True)
def restore_root_logging() -> Iterator[None]:
    """Undo handlers installed by configure_logging during CLI tests."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
