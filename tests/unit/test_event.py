from __future__ import annotations

import json
import logging
from pathlib import Path

from ci_planner.sources.event import GitHubEvent, RunContext, load_event


def test_pull_request_event_exposes_text_number_and_labels() -> None:
    event = GitHubEvent(
        payload={
            "pull_request": {
                "number": 12,
                "title": "Add mor job",
                "body": None,
                "labels": [{"name": "CI-Mode-Full"}, "Docs", {"name": ""}, {"color": "fff"}],
            }
        }
    )

    assert event.is_pull_request
    assert event.pull_request_number == 12
    assert event.pull_request_text == "Add mor job"
    assert event.labels == ["ci-mode-full", "docs"]
    assert event.head_commit_message == ""


def test_push_event_prefers_head_commit_then_last_commit() -> None:
    with_head = GitHubEvent(
        payload={"head_commit": {"message": "head"}, "commits": [{"message": "older"}]}
    )
    without_head = GitHubEvent(payload={"commits": [{"message": "older"}, {"message": "newest"}]})

    assert not with_head.is_pull_request
    assert with_head.head_commit_message == "head"
    assert without_head.head_commit_message == "newest"
    assert without_head.labels == []
    assert without_head.pull_request_text == ""


def test_load_event_tolerates_missing_and_malformed_files(tmp_path: Path, caplog) -> None:
    broken = tmp_path / "event.json"
    broken.write_text("{oops", encoding="utf-8")
    listing = tmp_path / "list.json"
    listing.write_text("[]", encoding="utf-8")

    with caplog.at_level(logging.WARNING, logger="ci_planner.sources.event"):
        assert load_event(None).payload == {}
        assert load_event(tmp_path / "missing.json").payload == {}
        assert load_event(broken).payload == {}
        assert load_event(listing).payload == {}

    assert "Could not read event payload" in caplog.text


def test_run_context_from_env(tmp_path: Path) -> None:
    event_path = tmp_path / "event.json"
    event_path.write_text(json.dumps({"pull_request": {"number": 3}}), encoding="utf-8")
    env = {
        "GITHUB_EVENT_PATH": str(event_path),
        "GITHUB_REPOSITORY": "feelpp/feelpp",
        "GITHUB_SHA": "cafe",
        "GITHUB_WORKSPACE": str(tmp_path),
        "GH_TOKEN": "fallback-token",
    }

    context = RunContext.from_env(env)

    assert context.event.pull_request_number == 3
    assert context.owner_and_name == ("feelpp", "feelpp")
    assert context.sha == "cafe"
    assert context.workspace == tmp_path
    assert context.token == "fallback-token"
    assert RunContext.from_env(env, token="explicit").token == "explicit"


def test_run_context_without_repository() -> None:
    context = RunContext.from_env({})

    assert context.owner_and_name is None
    assert context.workspace is None
    assert not context.event.is_pull_request
