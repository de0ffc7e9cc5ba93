"""GitHub team automation.

Provides two commands meant to run inside GitHub Actions:
- `sync-teams`: reconcile organization teams against a team data file
- `label-pr`: label a pull request from file glob rules and author team membership
"""

__version__ = "0.1.0"

from github_team_automation.automation.config import AutomationSettings

__all__ = ["__version__", "AutomationSettings"]
