"""Report a resolved plan back to the workflow: step outputs, log groups, summary."""

from __future__ import annotations

import uuid
from contextlib import contextmanager
from typing import Callable, Iterator, Mapping, TextIO

from .schema import Plan

__all__ = ["log_group", "render_summary", "write_outputs"]


def _delimiter() -> str:
    return f"EOF_{uuid.uuid4().hex}"


def write_outputs(outputs: Mapping[str, str], stream: TextIO) -> None:
    """Write ``outputs`` in the ``name<<DELIM`` form accepted by ``GITHUB_OUTPUT``.

    A fresh delimiter per value keeps multi-line values (raw commit messages)
    from terminating the block early.
    """
    for name, value in outputs.items():
        delimiter = _delimiter()
        while delimiter in value:  # pragma: no cover - vanishingly unlikely
            delimiter = _delimiter()
        stream.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")


@contextmanager
def log_group(title: str, echo: Callable[[str], None]) -> Iterator[None]:
    """Fold everything echoed inside the block into a collapsible log group."""
    echo(f"::group::{title}")
    try:
        yield
    finally:
        echo("::endgroup::")


def render_summary(plan: Plan) -> str:
    lines = [
        "---- planner summary ----",
        f"MODE: {plan.mode}",
        f"ENABLED_JOBS: {plan.enabled_jobs_text}",
        f"ONLY_JOBS: {plan.only_jobs_text or '<empty>'}",
        f"SKIP_JOBS: {plan.skip_jobs_text or '<empty>'}",
        f"TARGETS_LIST: {plan.targets_list}",
        f"TARGETS_JSON: {plan.targets_json}",
        f"SOURCE: {plan.source}",
        "-------------------------",
    ]
    return "\n".join(lines)
