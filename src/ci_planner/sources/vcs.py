"""Minimal git helpers
Just enough to locate a checkout and read the most recent commit message,
which the harvester uses as its last-resort directive source.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Sequence

import subprocess


class GitError(RuntimeError):
    """Raised when a git command fails or the repository cannot be used."""


class GitRepository:
    """Lightweight wrapper around ``git`` commands."""

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root).resolve()
        if not (self.root / ".git").exists():
            raise GitError(f"Not a git repository: {self.root}")

    @classmethod
    def discover(cls, start: Path | str | None = None) -> "GitRepository":
        """Locate the nearest git repository starting from ``start``."""

        path = Path(start or Path.cwd()).resolve()
        for candidate in (path, *path.parents):
            if (candidate / ".git").exists():
                return cls(candidate)
        raise GitError(f"Unable to locate a git repository from {path}")

    # ------------------------------------------------------------------ git IO
    def _run_git(self, args: Sequence[str], *, check: bool = True) -> subprocess.CompletedProcess[str]:
        command = ["git", *args]
        try:
            process = subprocess.run(
                command,
                cwd=self.root,
                capture_output=True,
                text=False,
                check=False,
            )
        except OSError as error:
            raise GitError(f"Unable to run git: {error}") from error
        stdout = process.stdout.decode("utf-8", errors="replace") if process.stdout else ""
        stderr = process.stderr.decode("utf-8", errors="replace") if process.stderr else ""
        result = subprocess.CompletedProcess(process.args, process.returncode, stdout, stderr)
        if check and result.returncode != 0:
            message = result.stderr.strip() or result.stdout.strip() or "unknown git error"
            raise GitError(f"git {' '.join(args)} failed: {message}")
        return result

    # ----------------------------------------------------------------- history
    def head_message(self) -> str:
        """Return the full message of the most recent commit."""

        args: List[str] = ["log", "-1", "--pretty=%B"]
        result = self._run_git(args, check=True)
        return result.stdout.strip()


__all__ = ["GitError", "GitRepository"]
