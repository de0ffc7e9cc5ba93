"""Console script entrypoint.

The CLI is implemented in `github_team_automation.automation.main`.
"""

from __future__ import annotations

from github_team_automation.automation.main import main

__all__ = ["main"]


if __name__ == "__main__":
    raise SystemExit(main())
