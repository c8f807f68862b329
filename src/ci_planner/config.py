"""Typed planner configuration and the loader that reads it from disk."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

__all__ = [
    "BUILTIN_FULL_JOB",
    "BUILTIN_JOBS",
    "BUILTIN_MODE",
    "BUILTIN_TARGETS",
    "DEFAULT_CONFIG_PATH",
    "ConfigError",
    "FullBuild",
    "PlanDefaults",
    "PlannerConfig",
    "load_config",
]

LOGGER = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = ".github/plan-ci.json"

BUILTIN_JOBS: tuple[str, ...] = ("feelpp", "testsuite", "toolboxes", "mor", "python")
BUILTIN_TARGETS: tuple[str, ...] = (
    "ubuntu:24.04",
    "ubuntu:22.04",
    "debian:13",
    "debian:12",
    "fedora:42",
)
BUILTIN_MODE = "components"
BUILTIN_FULL_JOB = "feelpp-spack"


class ConfigError(RuntimeError):
    """Raised when a configuration file cannot be read in strict mode."""


class _ConfigModel(BaseModel):
    """Accept both the camelCase names used on disk and snake_case names."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)


class PlanDefaults(_ConfigModel):
    mode: Optional[str] = None
    jobs: Optional[List[str]] = None
    targets: Optional[List[str]] = None
    only_jobs: Optional[List[str]] = Field(default=None, alias="onlyJobs")
    skip_jobs: Optional[List[str]] = Field(default=None, alias="skipJobs")


class FullBuild(_ConfigModel):
    job: Optional[str] = None


class PlannerConfig(_ConfigModel):
    """Project configuration layered under commit/PR directives.

    Every field is optional.  The ``job_universe``/``default_*`` properties
    resolve omissions to the built-in defaults so callers never have to.
    """

    jobs: Optional[List[str]] = None
    targets: Optional[List[str]] = None
    defaults: PlanDefaults = Field(default_factory=PlanDefaults)
    full_build: FullBuild = Field(default_factory=FullBuild, alias="fullBuild")

    @field_validator("defaults", "full_build", mode="before")
    @classmethod
    def _null_section(cls, value: Any) -> Any:
        return {} if value is None else value

    @property
    def job_universe(self) -> List[str]:
        if self.jobs is None:
            return list(BUILTIN_JOBS)
        return list(self.jobs)

    @property
    def default_jobs(self) -> List[str]:
        if self.defaults.jobs is None:
            return self.job_universe
        return list(self.defaults.jobs)

    @property
    def target_universe(self) -> List[str]:
        # A plan always needs at least one target.
        if not self.targets:
            return list(BUILTIN_TARGETS)
        return list(self.targets)

    @property
    def default_targets(self) -> List[str]:
        if not self.defaults.targets:
            return self.target_universe
        return list(self.defaults.targets)

    @property
    def default_mode(self) -> str:
        mode = (self.defaults.mode or "").strip()
        return mode or BUILTIN_MODE

    @property
    def full_build_job(self) -> str:
        job = (self.full_build.job or "").strip()
        return job or BUILTIN_FULL_JOB

    @property
    def default_only_jobs(self) -> List[str]:
        return list(self.defaults.only_jobs or [])

    @property
    def default_skip_jobs(self) -> List[str]:
        return list(self.defaults.skip_jobs or [])

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "PlannerConfig":
        """Validate a parsed configuration mapping."""
        return cls.model_validate(dict(data or {}))

    def describe(self) -> Dict[str, Any]:
        """Return the fully-resolved defaults as a plain mapping."""
        return {
            "jobs": self.job_universe,
            "targets": self.target_universe,
            "defaults": {
                "mode": self.default_mode,
                "jobs": self.default_jobs,
                "targets": self.default_targets,
                "onlyJobs": self.default_only_jobs,
                "skipJobs": self.default_skip_jobs,
            },
            "fullBuild": {"job": self.full_build_job},
        }


def load_config(path: Path | str, *, strict: bool = False) -> PlannerConfig:
    """Load the planner configuration from ``path``.

    ``.json`` files are parsed as JSON, anything else with
    :func:`yaml.safe_load`.  Unless ``strict`` is set, a missing or
    malformed file is reported as a warning and the built-in defaults apply.
    """
    config_path = Path(path)
    try:
        text = config_path.read_text(encoding="utf-8")
        if config_path.suffix.lower() == ".json":
            data = json.loads(text) if text.strip() else {}
        else:
            data = yaml.safe_load(text) or {}
        if not isinstance(data, Mapping):
            raise TypeError(f"expected a mapping at the top level, got {type(data).__name__}")
        return PlannerConfig.from_mapping(data)
    except (OSError, ValueError, yaml.YAMLError, TypeError, ValidationError) as error:
        if strict:
            raise ConfigError(f"Unable to load config {config_path}: {error}") from error
        LOGGER.warning("No usable config at %s, using defaults. (%s)", config_path, error)
        return PlannerConfig()
