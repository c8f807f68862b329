"""Typed plan record produced by the resolver."""

from __future__ import annotations

import json
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field

__all__ = ["MODE_COMPONENTS", "MODE_FULL", "Plan"]

MODE_COMPONENTS = "components"
MODE_FULL = "full"


class Plan(BaseModel):
    """Resolved CI plan: mode, enabled jobs and the target matrix.

    ``directives``, ``labels``, ``raw_message`` and ``source`` are carried for
    diagnostics only; nothing downstream of the resolver consults them.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    mode: str
    enabled_jobs: List[str] = Field(default_factory=list)
    only_jobs: List[str] = Field(default_factory=list)
    skip_jobs: List[str] = Field(default_factory=list)
    targets: List[str] = Field(default_factory=list)
    directives: Dict[str, str] = Field(default_factory=dict)
    labels: List[str] = Field(default_factory=list)
    raw_message: str = ""
    source: str = "defaults"

    @property
    def enabled_jobs_text(self) -> str:
        return " ".join(self.enabled_jobs)

    @property
    def only_jobs_text(self) -> str:
        return " ".join(self.only_jobs)

    @property
    def skip_jobs_text(self) -> str:
        return " ".join(self.skip_jobs)

    @property
    def targets_list(self) -> str:
        return " ".join(self.targets)

    @property
    def targets_csv(self) -> str:
        return ",".join(self.targets)

    @property
    def targets_json(self) -> str:
        return json.dumps(self.targets, separators=(",", ":"))

    def to_outputs(self) -> Dict[str, str]:
        """Return the step outputs consumed by the workflow, in emission order."""

        return {
            "mode": self.mode,
            "only_jobs": self.only_jobs_text,
            "skip_jobs": self.skip_jobs_text,
            "targets_json": self.targets_json,
            "targets_list": self.targets_list,
            "targets_csv": self.targets_csv,
            "enabled_jobs": self.enabled_jobs_text,
            "raw_message": self.raw_message,
            "raw_directives": json.dumps(self.directives, separators=(",", ":")),
            "targets_debug": json.dumps(self.targets, separators=(",", ":")),
            "targets_len": str(len(self.targets)),
            "source": self.source,
        }
