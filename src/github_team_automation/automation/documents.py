"""Decoding of configuration documents fetched from a repository."""

from __future__ import annotations

import json

import yaml

from github_team_automation.automation.errors import ConfigurationError


def decode_document(text: str, *, path: str) -> object:
    """Decode ``text`` as JSON or YAML depending on the suffix of ``path``.

    Raises:
        ConfigurationError: If the document cannot be parsed.
    """

    if path.lower().endswith(".json"):
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"{path} is not valid JSON: {e}") from e

    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"{path} is not valid YAML: {e}") from e
