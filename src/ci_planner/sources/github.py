"""Minimal GitHub REST client used to fetch head commit messages."""

from __future__ import annotations

import json
from typing import Any, Callable, Dict, Optional
from urllib.parse import quote

__all__ = ["GitHubClient", "GitHubError", "Transport"]


class GitHubError(RuntimeError):
    """Raised when the GitHub API cannot be reached or returns an error."""


# (url, headers, timeout) -> (status, body)
Transport = Callable[[str, Dict[str, str], float], tuple[int, str]]


class GitHubClient:
    """Thin adapter around the handful of REST endpoints the planner needs."""

    def __init__(
        self,
        *,
        token: Optional[str] = None,
        base_url: str = "https://api.github.com",
        transport: Optional[Transport] = None,
        timeout: float = 15.0,
        user_agent: str = "ci-matrix-planner",
    ) -> None:
        self._token = token or ""
        self._base_url = base_url.rstrip("/")
        if timeout <= 0:
            raise ValueError(f"timeout must be positive, got {timeout}")
        self._timeout = timeout
        self._user_agent = user_agent
        self._transport = transport or self._http_transport

    @property
    def has_token(self) -> bool:
        return bool(self._token)

    def _headers(self) -> Dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": self._user_agent,
        }
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    def get_json(self, path: str) -> Any:
        """GET ``path`` relative to the API root and decode the JSON body."""
        url = f"{self._base_url}/{path.lstrip('/')}"
        try:
            status, body = self._transport(url, self._headers(), self._timeout)
        except GitHubError:
            raise
        except Exception as error:  # pragma: no cover - defensive path
            raise GitHubError(f"Transport rejected the request to {url}: {error}") from error

        if status < 200 or status >= 300:
            raise GitHubError(f"HTTP {status} from {url}: {body[:200]}")
        try:
            return json.loads(body or "{}")
        except json.JSONDecodeError as error:
            raise GitHubError(f"Invalid JSON from {url}: {error}") from error

    def pull_request_head_message(self, owner: str, repo: str, number: int) -> str:
        """Return the message of the last commit listed on pull request ``number``."""
        commits = self.get_json(f"repos/{quote(owner)}/{quote(repo)}/pulls/{int(number)}/commits")
        if not isinstance(commits, list) or not commits:
            return ""
        return _commit_message(commits[-1])

    def commit_message(self, owner: str, repo: str, sha: str) -> str:
        """Return the message of commit ``sha``."""
        commit = self.get_json(f"repos/{quote(owner)}/{quote(repo)}/commits/{quote(sha)}")
        return _commit_message(commit)

    def _http_transport(self, url: str, headers: Dict[str, str], timeout: float) -> tuple[int, str]:
        """Default HTTP transport built on ``urllib``."""
        import urllib.error
        import urllib.request

        request = urllib.request.Request(url, headers=headers, method="GET")
        try:
            with urllib.request.urlopen(request, timeout=timeout) as response:
                raw = response.read()
                status = getattr(response, "status", 200)
        except TimeoutError as error:  # pragma: no cover - network-dependent
            raise GitHubError(f"Request to {url} timed out.") from error
        except urllib.error.HTTPError as error:  # pragma: no cover - network-dependent
            message = error.read().decode("utf-8", errors="ignore")
            return error.code, message
        except urllib.error.URLError as error:  # pragma: no cover - network-dependent
            raise GitHubError(f"Failed to reach {url}: {error.reason}") from error

        return status, raw.decode("utf-8", errors="replace")


def _commit_message(entry: Any) -> str:
    if not isinstance(entry, dict):
        return ""
    commit = entry.get("commit")
    if not isinstance(commit, dict):
        return ""
    message = commit.get("message")
    return message if isinstance(message, str) else ""
