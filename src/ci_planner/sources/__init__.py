"""Directive text sources and the harvester that ranks them."""

from .event import GitHubEvent, RunContext, load_event
from .github import GitHubClient, GitHubError
from .harvester import (
    HarvestPolicy,
    HarvestResult,
    Harvester,
    SourceLayer,
    SourceUnavailable,
    TextSource,
    build_sources,
)
from .vcs import GitError, GitRepository

__all__ = [
    "GitError",
    "GitHubClient",
    "GitHubError",
    "GitHubEvent",
    "GitRepository",
    "HarvestPolicy",
    "HarvestResult",
    "Harvester",
    "RunContext",
    "SourceLayer",
    "SourceUnavailable",
    "TextSource",
    "build_sources",
    "load_event",
]
