from __future__ import annotations

import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

# Variables a workflow runner sets that would otherwise leak into CLI tests.
GITHUB_ENV_VARS = (
    "GITHUB_EVENT_PATH",
    "GITHUB_OUTPUT",
    "GITHUB_REPOSITORY",
    "GITHUB_SHA",
    "GITHUB_TOKEN",
    "GITHUB_WORKSPACE",
    "GH_TOKEN",
    "INPUT_CONFIG-PATH",
    "INPUT_GITHUB-TOKEN",
    "INPUT_HTTP-TIMEOUT",
    "INPUT_LABELS-OVERRIDE",
    "INPUT_MESSAGE-OVERRIDE",
    "INPUT_MODE-INPUT",
    "INPUT_POLICY",
)


@pytest.fixture(autouse=True)
def _isolated_github_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in GITHUB_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@dataclass(slots=True)
class TinyRepo:
    """Fixture payload representing a throwaway git checkout."""

    root: Path

    def git(self, *cmd: str) -> str:
        result = subprocess.run(
            ["git", *cmd],
            cwd=self.root,
            check=True,
            capture_output=True,
            text=True,
        )
        return result.stdout

    def commit(self, message: str) -> None:
        self.git("commit", "--allow-empty", "-m", message)


@pytest.fixture()
def tiny_repo(tmp_path: Path) -> TinyRepo:
    """Create an empty git repository with committer identity configured."""

    repo_root = tmp_path / "tiny-repo"
    repo_root.mkdir()
    repo = TinyRepo(root=repo_root)
    repo.git("init")
    repo.git("config", "user.email", "planner@example.com")
    repo.git("config", "user.name", "CI Planner")
    repo.git("config", "commit.gpgsign", "false")
    return repo
