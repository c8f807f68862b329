from __future__ import annotations

from pathlib import Path

import pytest

from ci_planner.sources.vcs import GitError, GitRepository


def test_head_message_returns_full_latest_message(tiny_repo) -> None:
    tiny_repo.commit("Initial import")
    tiny_repo.commit("Rework assembly\n\nonly=feelpp toolboxes\ntargets=debian:13")

    repo = GitRepository(tiny_repo.root)

    assert repo.head_message() == "Rework assembly\n\nonly=feelpp toolboxes\ntargets=debian:13"


def test_discover_walks_up_from_subdirectory(tiny_repo) -> None:
    nested = tiny_repo.root / "src" / "pkg"
    nested.mkdir(parents=True)

    repo = GitRepository.discover(nested)

    assert repo.root == tiny_repo.root.resolve()


def test_head_message_on_unborn_branch_raises(tiny_repo) -> None:
    repo = GitRepository(tiny_repo.root)

    with pytest.raises(GitError):
        repo.head_message()


def test_non_repository_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(GitError, match="Not a git repository"):
        GitRepository(tmp_path)
