"""Glob-based classification of a pull request's changed files into labels."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence

from wcmatch import glob

from github_team_automation.automation.models import LabelRule

logger = logging.getLogger(__name__)

# `*` stops at `/`, `**` spans directories, braces expand and dotfiles match.
GLOB_FLAGS = glob.GLOBSTAR | glob.BRACE | glob.DOTGLOB


def build_label_rules(raw: Mapping[str, object]) -> tuple[LabelRule, ...]:
    """Normalize a decoded ``file_pattern_labels`` mapping, preserving its order."""

    return tuple(LabelRule.from_raw(str(label), value) for label, value in raw.items())


def _first_match(rule: LabelRule, changed_files: Iterable[str]) -> tuple[str, str] | None:
    for path in changed_files:
        for pattern in rule.patterns:
            if glob.globmatch(path, pattern, flags=GLOB_FLAGS):
                return path, pattern
    return None


def classify(
    changed_files: Sequence[str],
    rules: Sequence[LabelRule] | Mapping[str, object],
) -> set[str]:
    """Return every label with at least one pattern matching at least one changed file.

    ``rules`` may be already-built :class:`LabelRule` values or the raw decoded
    mapping; the latter is validated in full before anything is matched.

    Raises:
        ConfigurationError: If a raw rule value is malformed.
    """

    if isinstance(rules, Mapping):
        rules = build_label_rules(rules)

    labels: set[str] = set()
    for rule in rules:
        match = _first_match(rule, changed_files)
        if match is None:
            continue
        path, pattern = match
        logger.debug(
            "Label matched changed file",
            extra={"label": rule.label, "path": path, "pattern": pattern},
        )
        labels.add(rule.label)
    return labels
