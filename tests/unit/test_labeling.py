"""Unit tests for the label decision and the close/apply/reopen sequence."""

from __future__ import annotations

import json
from unittest.mock import Mock

import pytest

from github_team_automation.automation.context import RepoContext
from github_team_automation.automation.errors import ConfigurationError, ExternalCallError
from github_team_automation.automation.github.client import GitHubClient
from github_team_automation.automation.labeler_config import LabelerConfig, TeamsFileRef
from github_team_automation.automation.labeling.classifier import build_label_rules
from github_team_automation.automation.labeling.orchestrator import (
    LabelingOrchestrator,
    decide,
    plan_labeling,
)
from github_team_automation.automation.models import LabelDecision
from github_team_automation.automation.workflow.actions import ApplyLabels, SetPullRequestState

RULES = {"docs": "docs/**", "build": ["*.yml", "*.yaml"]}


def _call_names(github: Mock) -> list[str]:
    return [c[0] for c in github.method_calls]


def test_team_label_requires_reopen_cycle() -> None:
    decision = decide(["src/app.py"], RULES, {"infra": {"dave"}}, "dave")

    assert decision.labels == {"infra"}
    assert decision.requires_reopen_cycle is True


def test_glob_labels_alone_never_reopen() -> None:
    decision = decide(["docs/readme.md"], RULES, {"infra": {"dave"}}, "erin")

    assert decision.labels == {"docs"}
    assert decision.requires_reopen_cycle is False


def test_labels_are_the_union_without_duplicates() -> None:
    decision = decide(["docs/readme.md"], RULES, {"docs": {"dave"}}, "dave")

    assert decision.labels == {"docs"}
    assert decision.requires_reopen_cycle is True


def test_missing_author_only_gets_glob_labels() -> None:
    decision = decide(["action.yml"], RULES, {"infra": {"dave"}}, None)

    assert decision == LabelDecision(labels=frozenset({"build"}), requires_reopen_cycle=False)


def test_plan_is_empty_without_labels(repo_context: RepoContext) -> None:
    decision = LabelDecision(labels=frozenset(), requires_reopen_cycle=True)

    assert plan_labeling(decision, context=repo_context, pull_number=7) == []


def test_plan_applies_sorted_labels_without_cycle(repo_context: RepoContext) -> None:
    decision = LabelDecision(labels=frozenset({"docs", "build"}), requires_reopen_cycle=False)

    assert plan_labeling(decision, context=repo_context, pull_number=7) == [
        ApplyLabels(context=repo_context, pull_number=7, labels=("build", "docs"))
    ]


def test_plan_wraps_apply_in_close_and_reopen(repo_context: RepoContext) -> None:
    decision = LabelDecision(labels=frozenset({"infra"}), requires_reopen_cycle=True)

    assert plan_labeling(decision, context=repo_context, pull_number=7) == [
        SetPullRequestState(context=repo_context, pull_number=7, state="closed"),
        ApplyLabels(context=repo_context, pull_number=7, labels=("infra",)),
        SetPullRequestState(context=repo_context, pull_number=7, state="open"),
    ]


def test_orchestrator_closes_applies_then_reopens(
    mock_github: Mock, repo_context: RepoContext
) -> None:
    mock_github.list_pull_request_files.return_value = ("docs/readme.md",)
    config = LabelerConfig(rules=build_label_rules(RULES), team_labels={"infra": frozenset({"dave"})})

    orchestrator = LabelingOrchestrator(github=mock_github, context=repo_context)
    decision = orchestrator.label_pull_request(pull_number=12, author="dave", config=config)

    assert decision.labels == {"docs", "infra"}
    assert _call_names(mock_github) == [
        "list_pull_request_files",
        "set_pull_request_state",
        "add_labels",
        "set_pull_request_state",
    ]
    mock_github.add_labels.assert_called_once_with(
        context=repo_context, issue_number=12, labels=["docs", "infra"]
    )
    states = [c.kwargs["state"] for c in mock_github.set_pull_request_state.call_args_list]
    assert states == ["closed", "open"]


def test_failed_label_apply_still_reopens_the_pull_request(
    mock_github: Mock, repo_context: RepoContext
) -> None:
    mock_github.list_pull_request_files.return_value = ("src/app.py",)
    mock_github.add_labels.side_effect = ExternalCallError(
        "apply labels to octo-org/octo-repo#12", "HTTP 422", status_code=422
    )
    config = LabelerConfig(rules=build_label_rules(RULES), team_labels={"infra": frozenset({"dave"})})

    orchestrator = LabelingOrchestrator(github=mock_github, context=repo_context)
    with pytest.raises(ExternalCallError):
        orchestrator.label_pull_request(pull_number=12, author="dave", config=config)

    states = [c.kwargs["state"] for c in mock_github.set_pull_request_state.call_args_list]
    assert states == ["closed", "open"]
    assert _call_names(mock_github)[-1] == "set_pull_request_state"


def test_failed_close_does_not_attempt_labels_or_reopen(
    mock_github: Mock, repo_context: RepoContext
) -> None:
    mock_github.list_pull_request_files.return_value = ("src/app.py",)
    mock_github.set_pull_request_state.side_effect = ExternalCallError(
        "close octo-org/octo-repo#12", "HTTP 403", status_code=403
    )
    config = LabelerConfig(rules=build_label_rules(RULES), team_labels={"infra": frozenset({"dave"})})

    orchestrator = LabelingOrchestrator(github=mock_github, context=repo_context)
    with pytest.raises(ExternalCallError):
        orchestrator.label_pull_request(pull_number=12, author="dave", config=config)

    mock_github.add_labels.assert_not_called()
    assert mock_github.set_pull_request_state.call_count == 1


def test_orchestrator_makes_no_write_calls_without_labels(
    mock_github: Mock, repo_context: RepoContext
) -> None:
    mock_github.list_pull_request_files.return_value = ("src/app.py",)
    config = LabelerConfig(rules=build_label_rules(RULES))

    orchestrator = LabelingOrchestrator(github=mock_github, context=repo_context)
    decision = orchestrator.label_pull_request(pull_number=12, author="dave", config=config)

    assert decision.labels == frozenset()
    mock_github.add_labels.assert_not_called()
    mock_github.set_pull_request_state.assert_not_called()


def test_orchestrator_dry_run_only_reads(mock_github: Mock, repo_context: RepoContext) -> None:
    mock_github.list_pull_request_files.return_value = ("action.yml",)
    config = LabelerConfig(rules=build_label_rules(RULES), team_labels={"infra": frozenset({"dave"})})

    orchestrator = LabelingOrchestrator(github=mock_github, context=repo_context, dry_run=True)
    decision = orchestrator.label_pull_request(pull_number=3, author="dave", config=config)

    assert decision.labels == {"build", "infra"}
    assert _call_names(mock_github) == ["list_pull_request_files"]


def test_team_labels_from_external_teams_file(
    mock_github: Mock, repo_context: RepoContext
) -> None:
    teams_github = Mock(spec=GitHubClient)
    teams_github.get_text_file.return_value = json.dumps(
        {
            "Infrastructure Team": {"short": "infra", "members": [{"github": "Dave"}]},
            "Docs": {"members": [{"github": "erin"}]},
        }
    )
    mock_github.list_pull_request_files.return_value = ("src/app.py",)
    config = LabelerConfig(
        rules=build_label_rules(RULES),
        teams_file=TeamsFileRef(repository="octo-org/people", path="teams.json", ref="main"),
    )

    orchestrator = LabelingOrchestrator(
        github=mock_github, context=repo_context, teams_github=teams_github
    )
    decision = orchestrator.label_pull_request(pull_number=5, author="dave", config=config)

    assert decision.labels == {"infra"}
    assert decision.requires_reopen_cycle is True
    teams_github.get_text_file.assert_called_once_with(
        context=RepoContext(owner="octo-org", repo="people", ref="main"), path="teams.json"
    )
    mock_github.get_text_file.assert_not_called()


def test_missing_external_teams_file_is_a_configuration_error(
    mock_github: Mock, repo_context: RepoContext
) -> None:
    mock_github.get_text_file.side_effect = FileNotFoundError("File not found: o/r/teams.json")
    config = LabelerConfig(teams_file=TeamsFileRef(repository="o/r", path="teams.json"))

    orchestrator = LabelingOrchestrator(github=mock_github, context=repo_context)
    with pytest.raises(ConfigurationError):
        orchestrator.label_pull_request(pull_number=5, author="dave", config=config)

    mock_github.add_labels.assert_not_called()
