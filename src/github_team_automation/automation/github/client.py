"""GitHub API client wrapper.

Wraps the REST endpoints used by team sync and pull-request labeling so that the
commands never touch raw response payloads. Every repository-scoped call takes
an explicit :class:`RepoContext`; team calls take the organization login.
"""

from __future__ import annotations

import base64
import logging
from typing import Any, Literal
from urllib.parse import quote

import requests
from github import Auth, Github, GithubException

from github_team_automation.automation.context import RepoContext
from github_team_automation.automation.errors import ExternalCallError
from github_team_automation.automation.models import ChangedFileSet

logger = logging.getLogger(__name__)

PullRequestState = Literal["open", "closed"]


class GitHubClient:
    """Small wrapper around the GitHub REST API for team and label operations."""

    def __init__(
        self,
        *,
        token: str,
        base_url: str = "https://api.github.com",
        session: requests.Session | None = None,
        github_api: Github | None = None,
    ) -> None:
        if not token:
            raise ValueError("GitHub token is required")

        self._rest_base_url = base_url.rstrip("/")
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
                "User-Agent": "github-team-automation",
            }
        )
        self._github = github_api or Github(auth=Auth.Token(token), base_url=self._rest_base_url)

    def _url(self, path: str) -> str:
        path = path.strip("/")
        return f"{self._rest_base_url}/{path}"

    def _repo_url(self, *, context: RepoContext, path: str) -> str:
        return self._url(f"repos/{context.full_name}/{path.lstrip('/')}")

    def _team_url(self, *, org: str, slug: str, path: str = "") -> str:
        if not slug.strip():
            raise ValueError("team slug is required")
        return self._url(f"orgs/{org}/teams/{slug}/{path.lstrip('/')}")

    def _request(
        self,
        method: str,
        url: str,
        *,
        operation: str,
        allowed_statuses: frozenset[int] = frozenset(),
        **kwargs: Any,
    ) -> requests.Response:
        """Issue one request, mapping transport and HTTP failures to ExternalCallError.

        Statuses in ``allowed_statuses`` are returned to the caller instead of raising.
        """

        try:
            resp = self._session.request(method, url, timeout=30, **kwargs)
        except requests.RequestException as e:
            raise ExternalCallError(operation, str(e)) from e

        if resp.status_code in allowed_statuses:
            return resp
        try:
            resp.raise_for_status()
        except requests.HTTPError as e:
            raise ExternalCallError(
                operation,
                f"HTTP {resp.status_code}: {resp.text[:200]}",
                status_code=resp.status_code,
            ) from e
        return resp

    def _get_paginated_json_list(
        self, url: str, *, operation: str, max_pages: int = 30
    ) -> list[dict[str, Any]]:
        items: list[dict[str, Any]] = []
        per_page = 100
        for page in range(1, max_pages + 1):
            resp = self._request(
                "GET",
                url,
                operation=operation,
                params={"per_page": per_page, "page": page},
            )
            payload = resp.json()
            if not isinstance(payload, list):
                break

            items.extend(p for p in payload if isinstance(p, dict))

            if len(payload) < per_page:
                break
        return items

    def get_authenticated_login(self) -> str:
        """Return the login of the identity the token authenticates as."""

        try:
            login = self._github.get_user().login
        except GithubException as e:
            raise ExternalCallError("get authenticated user", str(e), status_code=e.status) from e
        return login.lower()

    def get_text_file(self, *, context: RepoContext, path: str) -> str:
        """Return the decoded text of ``path`` at ``context.ref``.

        Raises:
            FileNotFoundError: If the file does not exist at that ref.
        """

        url = self._repo_url(context=context, path=f"contents/{path.lstrip('/')}")
        params = {"ref": context.ref} if context.ref else None
        logger.debug(
            "Fetching file contents",
            extra={"repo": context.full_name, "path": path, "ref": context.ref},
        )
        resp = self._request(
            "GET",
            url,
            operation=f"fetch {path}",
            allowed_statuses=frozenset({404}),
            params=params,
        )
        if resp.status_code == 404:
            raise FileNotFoundError(f"File not found: {context.full_name}/{path}")

        data: dict[str, Any] = resp.json()
        content = data.get("content")
        if not isinstance(content, str):
            raise ExternalCallError(f"fetch {path}", "response has no file content")
        if data.get("encoding") == "base64":
            return base64.b64decode(content.encode("utf-8")).decode("utf-8")
        return content

    def list_pull_request_files(self, *, context: RepoContext, pull_number: int) -> ChangedFileSet:
        if pull_number <= 0:
            raise ValueError("pull_number must be a positive integer")
        url = self._repo_url(context=context, path=f"pulls/{pull_number}/files")
        items = self._get_paginated_json_list(url, operation=f"list files of #{pull_number}")
        return tuple(
            item["filename"] for item in items if isinstance(item.get("filename"), str)
        )

    def team_exists(self, *, org: str, slug: str) -> bool:
        resp = self._request(
            "GET",
            self._team_url(org=org, slug=slug),
            operation=f"get team {org}/{slug}",
            allowed_statuses=frozenset({404}),
        )
        return resp.status_code != 404

    def list_team_members(self, *, org: str, slug: str) -> frozenset[str]:
        url = self._team_url(org=org, slug=slug, path="members")
        items = self._get_paginated_json_list(url, operation=f"list members of {org}/{slug}")
        logins = (item.get("login") for item in items)
        return frozenset(login.lower() for login in logins if isinstance(login, str) and login)

    def create_team(self, *, org: str, name: str) -> str:
        """Create a closed team and return the slug GitHub assigned to it."""

        logger.info("Creating team", extra={"org": org, "team": name})
        resp = self._request(
            "POST",
            self._url(f"orgs/{org}/teams"),
            operation=f"create team {name!r}",
            json={"name": name, "privacy": "closed"},
        )
        data: dict[str, Any] = resp.json()
        slug = data.get("slug")
        if not isinstance(slug, str) or not slug.strip():
            raise ExternalCallError(f"create team {name!r}", "response has no slug")
        return slug

    def add_team_member(self, *, org: str, slug: str, username: str) -> None:
        url = self._team_url(org=org, slug=slug, path=f"memberships/{quote(username)}")
        self._request(
            "PUT",
            url,
            operation=f"add {username} to {org}/{slug}",
            json={"role": "member"},
        )

    def remove_team_member(self, *, org: str, slug: str, username: str) -> bool:
        """Remove ``username`` from the team.

        Returns:
            False when the user was not a member (nothing to remove).
        """

        url = self._team_url(org=org, slug=slug, path=f"memberships/{quote(username)}")
        resp = self._request(
            "DELETE",
            url,
            operation=f"remove {username} from {org}/{slug}",
            allowed_statuses=frozenset({404}),
        )
        if resp.status_code == 404:
            logger.warning(
                "User was not a team member; nothing to remove",
                extra={"org": org, "team": slug, "username": username},
            )
            return False
        return True

    def add_labels(self, *, context: RepoContext, issue_number: int, labels: list[str]) -> None:
        url = self._repo_url(context=context, path=f"issues/{issue_number}/labels")
        self._request(
            "POST",
            url,
            operation=f"apply labels to #{issue_number}",
            json={"labels": labels},
        )

    def set_pull_request_state(
        self, *, context: RepoContext, pull_number: int, state: PullRequestState
    ) -> None:
        url = self._repo_url(context=context, path=f"pulls/{pull_number}")
        self._request(
            "PATCH",
            url,
            operation=f"set #{pull_number} {state}",
            json={"state": state},
        )

    def close(self) -> None:
        """Close the underlying HTTP connections."""

        self._session.close()
        self._github.close()
