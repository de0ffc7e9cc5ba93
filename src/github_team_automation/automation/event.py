"""The pull request a workflow run was triggered for."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from github_team_automation.automation.errors import ConfigurationError
from github_team_automation.automation.team_data import normalize_login

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PullRequestEvent:
    number: int
    author: str | None


def load_pull_request_event(path: Path | None) -> PullRequestEvent | None:
    """Read the pull request number and author from a GitHub Actions event payload.

    Returns None when there is no payload or the event carries no pull request.

    Raises:
        ConfigurationError: If the payload file is not valid JSON.
    """

    if path is None or not path.exists():
        return None

    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Event payload {path} is not valid JSON: {e}") from e
    if not isinstance(payload, dict):
        return None

    pull_request = payload.get("pull_request")
    if not isinstance(pull_request, dict):
        logger.debug("Event has no pull request", extra={"path": str(path)})
        return None

    number = pull_request.get("number")
    if not isinstance(number, int) or number <= 0:
        return None

    author: str | None = None
    user = pull_request.get("user")
    if isinstance(user, dict):
        login = user.get("login")
        if isinstance(login, str) and login.strip():
            author = normalize_login(login)

    return PullRequestEvent(number=number, author=author)
