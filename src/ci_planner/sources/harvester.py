"""Select the text whose directives govern the plan.

Sources are tried strictly in priority order, one at a time, and the first
one carrying a recognised directive wins.  A source that cannot be read is
logged and skipped; it never aborts the run.

Two policies are supported:

``switch``
    The winning source's text is used verbatim.  The pull-request description
    is an ordinary source ranked below the PR head commit.

``merge``
    The pull-request description supplies defaults.  Its text is placed ahead
    of the winning source's text so that, since the last occurrence of a key
    wins, the head commit overrides it key for key.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence

from ..directives import has_directive, parse_directives
from .event import RunContext
from .github import GitHubClient, GitHubError
from .vcs import GitError, GitRepository

__all__ = [
    "HarvestPolicy",
    "HarvestResult",
    "Harvester",
    "SourceLayer",
    "SourceUnavailable",
    "TextSource",
    "build_sources",
]

LOGGER = logging.getLogger(__name__)

MERGE_SEPARATOR = "\n\n---\n"


class SourceUnavailable(RuntimeError):
    """Raised by a source that has nothing to offer for this run."""


class HarvestPolicy(str, Enum):
    SWITCH = "switch"
    MERGE = "merge"


class SourceLayer(str, Enum):
    DIRECTIVES = "directives"
    DEFAULTS = "defaults"


HARVEST_ERRORS: tuple[type[BaseException], ...] = (SourceUnavailable, GitHubError, GitError, OSError)


@dataclass(slots=True)
class TextSource:
    """Named provider of candidate directive text.

    ``fetch`` returns the text (possibly empty) or raises one of the harvest
    errors when the source is unavailable.  ``fallback`` sources are only
    consulted when nothing, not even PR defaults, has been found.  An
    ``exclusive`` source that wins is used alone, even under ``merge``.
    """

    name: str
    fetch: Callable[[], Optional[str]]
    layer: SourceLayer = SourceLayer.DIRECTIVES
    fallback: bool = False
    exclusive: bool = False


@dataclass(slots=True)
class HarvestResult:
    """Outcome of a harvest: the effective text and where it came from."""

    text: str = ""
    source: str = "defaults"
    attempts: List[tuple[str, str]] = field(default_factory=list)

    @property
    def directives(self) -> Dict[str, str]:
        return parse_directives(self.text)


class Harvester:
    """Walk ``sources`` in order and stop at the first directive-bearing text."""

    def __init__(
        self,
        sources: Sequence[TextSource],
        *,
        policy: HarvestPolicy | str = HarvestPolicy.SWITCH,
    ) -> None:
        self._sources = list(sources)
        self._policy = HarvestPolicy(policy)

    @property
    def policy(self) -> HarvestPolicy:
        return self._policy

    def _attempt(self, source: TextSource, attempts: List[tuple[str, str]]) -> Optional[str]:
        """Fetch ``source`` and return its text only when it carries a directive."""
        try:
            text = (source.fetch() or "").strip()
        except HARVEST_ERRORS as error:
            LOGGER.warning("Planner: source %s unavailable: %s", source.name, error)
            attempts.append((source.name, "unavailable"))
            return None
        if not text:
            attempts.append((source.name, "empty"))
            return None
        if not has_directive(text):
            attempts.append((source.name, "no-directive"))
            return None
        attempts.append((source.name, "directive"))
        return text

    def harvest(self) -> HarvestResult:
        attempts: List[tuple[str, str]] = []
        merging = self._policy is HarvestPolicy.MERGE
        defaults: Optional[tuple[str, str]] = None

        for index, source in enumerate(self._sources):
            if defaults is not None and source.fallback:
                LOGGER.debug("Planner: skipping %s; PR defaults already found.", source.name)
                attempts.append((source.name, "skipped"))
                continue

            text = self._attempt(source, attempts)
            if text is None:
                continue

            if merging and source.layer is SourceLayer.DEFAULTS:
                LOGGER.info("Planner: directive defaults found in %s.", source.name)
                defaults = (source.name, text)
                continue

            LOGGER.info("Planner: directives found in %s.", source.name)
            if source.exclusive:
                self._skip(self._sources[index + 1 :], attempts)
                return HarvestResult(text=text, source=source.name, attempts=attempts)
            if merging and defaults is None:
                defaults = self._remaining_defaults(self._sources[index + 1 :], attempts)
            else:
                self._skip(self._sources[index + 1 :], attempts)
            if merging and defaults is not None:
                defaults_name, defaults_text = defaults
                return HarvestResult(
                    text=f"{defaults_text}{MERGE_SEPARATOR}{text}",
                    source=f"{defaults_name}+{source.name}",
                    attempts=attempts,
                )
            return HarvestResult(text=text, source=source.name, attempts=attempts)

        if defaults is not None:
            defaults_name, defaults_text = defaults
            return HarvestResult(text=defaults_text, source=defaults_name, attempts=attempts)

        LOGGER.info("Planner: no directives found; using configuration defaults.")
        return HarvestResult(attempts=attempts)

    def _remaining_defaults(
        self, remaining: Sequence[TextSource], attempts: List[tuple[str, str]]
    ) -> Optional[tuple[str, str]]:
        """Look for PR defaults ranked below the winning source."""
        found: Optional[tuple[str, str]] = None
        for source in remaining:
            if found is not None or source.layer is not SourceLayer.DEFAULTS:
                attempts.append((source.name, "skipped"))
                continue
            text = self._attempt(source, attempts)
            if text is not None:
                LOGGER.info("Planner: directive defaults found in %s.", source.name)
                found = (source.name, text)
        return found

    @staticmethod
    def _skip(remaining: Sequence[TextSource], attempts: List[tuple[str, str]]) -> None:
        for source in remaining:
            attempts.append((source.name, "skipped"))


def build_sources(
    context: RunContext,
    *,
    override: str = "",
    client: Optional[GitHubClient] = None,
    repo_factory: Callable[[Optional[str]], GitRepository] = GitRepository.discover,
) -> List[TextSource]:
    """Assemble the priority-ordered sources for ``context``.

    Remote sources whose prerequisites (token, repository, PR number or SHA)
    are missing are left out rather than failing later.
    """

    sources: List[TextSource] = [TextSource("override", lambda: override, exclusive=True)]
    event = context.event
    repository = context.owner_and_name
    remote = client if client is not None and client.has_token and repository else None

    if event.is_pull_request:
        number = event.pull_request_number
        if remote is not None and number is not None:
            owner, name = repository
            sources.append(
                TextSource(
                    "pull-request-head-commit",
                    lambda: remote.pull_request_head_message(owner, name, number),
                )
            )
        else:
            LOGGER.debug("Planner: PR head commit lookup disabled (token, repository or PR number missing).")
        sources.append(
            TextSource(
                "pull-request-description",
                lambda: event.pull_request_text,
                layer=SourceLayer.DEFAULTS,
            )
        )
    else:

        def _push_head_commit() -> str:
            message = event.head_commit_message
            if has_directive(message) or remote is None or not context.sha:
                return message
            owner, name = repository
            return remote.commit_message(owner, name, context.sha)

        sources.append(TextSource("push-head-commit", _push_head_commit))

    workspace = str(context.workspace) if context.workspace else None
    sources.append(
        TextSource(
            "git-log",
            lambda: repo_factory(workspace).head_message(),
            fallback=True,
        )
    )
    return sources
