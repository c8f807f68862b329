"""Turn harvested directive text plus configuration into a :class:`Plan`.

Resolution is a pure function of its arguments.  Each step may be overridden
by a later one:

1. mode: explicit override, ``mode=`` directive, configured default, built-in;
2. ``ci-mode-full`` / ``ci-mode-components`` labels force the mode;
3. enabled jobs: the full-build job in ``full`` mode, else the default jobs;
4. ``only=`` keeps the named jobs, then ``skip=`` drops the named jobs;
5. targets: defaults, replaced by a colon-bearing ``only=``, replaced by
   ``targets=``, extended by ``include=``, reduced by ``exclude=``, and reset
   to the defaults if nothing is left.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any, Dict, List, Optional

from .config import PlannerConfig
from .directives import lower_unique, normalize_list, parse_directives
from .schema import MODE_COMPONENTS, MODE_FULL, Plan

__all__ = ["LABEL_MODE_COMPONENTS", "LABEL_MODE_FULL", "resolve_plan", "resolve_targets"]

LOGGER = logging.getLogger(__name__)

LABEL_MODE_FULL = "ci-mode-full"
LABEL_MODE_COMPONENTS = "ci-mode-components"


def _coerce_config(config: PlannerConfig | Mapping[str, Any] | None) -> PlannerConfig:
    if config is None:
        return PlannerConfig()
    if isinstance(config, PlannerConfig):
        return config
    if isinstance(config, Mapping):
        return PlannerConfig.from_mapping(config)
    raise TypeError(f"config must be a PlannerConfig or mapping, got {type(config).__name__}")


def _coerce_labels(labels: Iterable[str] | None) -> List[str]:
    if labels is None:
        return []
    if isinstance(labels, str):
        raise TypeError("labels must be a sequence of label names, not a single string")
    items = list(labels)
    for item in items:
        if not isinstance(item, str):
            raise TypeError(f"label names must be strings, got {type(item).__name__}")
    return lower_unique(items)


def _only_targets_value(directives: Mapping[str, str]) -> Optional[str]:
    """Return the ``only=`` value when it names targets (``distro:version``)."""
    value = directives.get("only")
    if value and ":" in value:
        return value
    return None


def resolve_targets(directives: Mapping[str, str], default_targets: List[str]) -> List[str]:
    """Apply the target directives to ``default_targets`` in their fixed order."""

    default_targets = normalize_list(default_targets)
    working = list(default_targets)

    only_targets = _only_targets_value(directives)
    if only_targets:
        working = normalize_list(only_targets)

    if directives.get("targets"):
        working = normalize_list(directives["targets"])

    if directives.get("include"):
        for target in normalize_list(directives["include"]):
            if target not in working:
                working.append(target)

    if directives.get("exclude"):
        excluded = set(normalize_list(directives["exclude"]))
        working = [target for target in working if target not in excluded]

    if not working:
        LOGGER.debug("Target directives left no targets; falling back to defaults.")
        working = list(default_targets)
    return working


def resolve_plan(
    config: PlannerConfig | Mapping[str, Any] | None,
    text: str | None = "",
    labels: Iterable[str] | None = (),
    mode_override: str | None = None,
    *,
    source: str = "defaults",
) -> Plan:
    """Resolve the CI plan for ``text`` layered over ``config``.

    Never fails on content: anything missing or unusable falls back to a
    default.  Arguments of the wrong type raise :class:`TypeError`.
    """

    if text is not None and not isinstance(text, str):
        raise TypeError(f"text must be a string, got {type(text).__name__}")
    if mode_override is not None and not isinstance(mode_override, str):
        raise TypeError(f"mode_override must be a string, got {type(mode_override).__name__}")

    cfg = _coerce_config(config)
    label_set = _coerce_labels(labels)
    message = (text or "").strip()
    directives: Dict[str, str] = parse_directives(message)

    mode = (
        (mode_override or "").strip()
        or directives.get("mode")
        or cfg.default_mode
    ).lower()

    if LABEL_MODE_FULL in label_set:
        mode = MODE_FULL
    if LABEL_MODE_COMPONENTS in label_set:
        mode = MODE_COMPONENTS

    if mode == MODE_FULL:
        enabled_jobs = [cfg.full_build_job]
    else:
        enabled_jobs = cfg.default_jobs

    # A colon-bearing only= names targets and leaves job selection alone.
    only_value = None if _only_targets_value(directives) else directives.get("only")
    only_jobs = normalize_list(only_value or cfg.default_only_jobs)
    skip_jobs = normalize_list(directives.get("skip") or cfg.default_skip_jobs)

    if only_jobs:
        enabled_jobs = [job for job in enabled_jobs if job.lower() in only_jobs]
    if skip_jobs:
        enabled_jobs = [job for job in enabled_jobs if job.lower() not in skip_jobs]

    targets = resolve_targets(directives, cfg.default_targets)

    return Plan(
        mode=mode,
        enabled_jobs=enabled_jobs,
        only_jobs=only_jobs,
        skip_jobs=skip_jobs,
        targets=targets,
        directives=directives,
        labels=label_set,
        raw_message=message,
        source=source,
    )
