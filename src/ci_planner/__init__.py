"""Resolve a CI build plan from commit/PR directives layered over project config."""

from .config import PlannerConfig, load_config
from .directives import has_directive, normalize_list, parse_directives
from .resolver import resolve_plan
from .schema import Plan

__all__ = [
    "Plan",
    "PlannerConfig",
    "has_directive",
    "load_config",
    "normalize_list",
    "parse_directives",
    "resolve_plan",
]

__version__ = "0.3.0"
