"""Run context and the GitHub event payload that triggered the workflow."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Mapping, Optional

__all__ = ["GitHubEvent", "RunContext", "load_event"]

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class GitHubEvent:
    """Read-only view over a ``GITHUB_EVENT_PATH`` payload."""

    payload: Mapping[str, Any] = field(default_factory=dict)

    @property
    def pull_request(self) -> Mapping[str, Any] | None:
        value = self.payload.get("pull_request")
        if isinstance(value, Mapping) and value:
            return value
        return None

    @property
    def is_pull_request(self) -> bool:
        return self.pull_request is not None

    @property
    def pull_request_number(self) -> int | None:
        pull_request = self.pull_request or {}
        number = pull_request.get("number") or self.payload.get("number")
        if isinstance(number, int) and number > 0:
            return number
        return None

    @property
    def pull_request_text(self) -> str:
        """Return the PR title and body separated by a blank line."""
        pull_request = self.pull_request
        if pull_request is None:
            return ""
        title = pull_request.get("title") or ""
        body = pull_request.get("body") or ""
        return f"{title}\n\n{body}".strip()

    @property
    def labels(self) -> List[str]:
        pull_request = self.pull_request
        if pull_request is None:
            return []
        names: List[str] = []
        for entry in pull_request.get("labels") or []:
            if isinstance(entry, Mapping):
                entry = entry.get("name")
            if isinstance(entry, str) and entry.strip():
                names.append(entry.strip().lower())
        return names

    @property
    def head_commit_message(self) -> str:
        """Return the pushed head commit message, or the last listed commit's."""
        head_commit = self.payload.get("head_commit")
        if isinstance(head_commit, Mapping) and head_commit.get("message"):
            return str(head_commit["message"])
        commits = self.payload.get("commits")
        if isinstance(commits, list) and commits:
            last = commits[-1]
            if isinstance(last, Mapping):
                return str(last.get("message") or "")
        return ""


def load_event(path: Path | str | None) -> GitHubEvent:
    """Load the event payload at ``path``; unreadable payloads yield an empty event."""
    if not path:
        return GitHubEvent()
    event_path = Path(path)
    try:
        with event_path.open("r", encoding="utf-8") as handle:
            payload = json.load(handle)
    except (OSError, ValueError) as error:
        LOGGER.warning("Could not read event payload %s: %s", event_path, error)
        return GitHubEvent()
    if not isinstance(payload, Mapping):
        LOGGER.warning("Event payload %s is not a JSON object; ignoring it.", event_path)
        return GitHubEvent()
    return GitHubEvent(payload=payload)


@dataclass(slots=True)
class RunContext:
    """Everything the harvester needs to know about the current workflow run."""

    event: GitHubEvent = field(default_factory=GitHubEvent)
    repository: str = ""
    sha: str = ""
    workspace: Optional[Path] = None
    token: str = ""

    @classmethod
    def from_env(cls, env: Mapping[str, str], *, token: str = "") -> "RunContext":
        """Build the context from ``GITHUB_*`` variables in ``env``."""
        workspace = env.get("GITHUB_WORKSPACE") or ""
        return cls(
            event=load_event(env.get("GITHUB_EVENT_PATH")),
            repository=env.get("GITHUB_REPOSITORY", "").strip(),
            sha=env.get("GITHUB_SHA", "").strip(),
            workspace=Path(workspace) if workspace else None,
            token=token or env.get("GITHUB_TOKEN", "") or env.get("GH_TOKEN", ""),
        )

    @property
    def owner_and_name(self) -> tuple[str, str] | None:
        owner, _, name = self.repository.partition("/")
        if owner and name:
            return owner, name
        return None
