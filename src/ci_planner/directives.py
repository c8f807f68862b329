"""Recognise ``key=value`` directive lines inside commit and pull-request text.

Only whole-line assignments count: the key must be the first thing on the
line (leading whitespace aside), so ``see only=foo`` in a sentence or a
markdown link is ignored.  Values are normalised into token lists with
:func:`normalize_list`.
"""

from __future__ import annotations

import re
from typing import Dict, Iterable, List, Pattern

__all__ = [
    "DIRECTIVE_KEYS",
    "has_directive",
    "lower_unique",
    "normalize_list",
    "parse_directives",
]

DIRECTIVE_KEYS: tuple[str, ...] = ("mode", "only", "skip", "targets", "include", "exclude")

_LINE_PATTERN: Pattern[str] = re.compile(r"^\s*([A-Za-z_]+)\s*=\s*(.+?)\s*$")
_LINE_BREAK: Pattern[str] = re.compile(r"\r?\n")
_SEPARATORS: Pattern[str] = re.compile(r"[,\s]+")


def parse_directives(text: str | None) -> Dict[str, str]:
    """Return the directive map for ``text``; later lines overwrite earlier ones."""
    directives: Dict[str, str] = {}
    if not text:
        return directives
    for line in _LINE_BREAK.split(str(text)):
        match = _LINE_PATTERN.match(line)
        if match is None:
            continue
        directives[match.group(1).lower()] = match.group(2).strip()
    return directives


def has_directive(text: str | None) -> bool:
    """Return ``True`` when ``text`` carries at least one recognised directive line."""
    directives = parse_directives(text)
    return any(directives.get(key) for key in DIRECTIVE_KEYS)


def lower_unique(items: Iterable[str]) -> List[str]:
    """Lower-case ``items`` and drop repeats, keeping first-seen order."""
    seen: set[str] = set()
    unique: List[str] = []
    for item in items:
        lowered = str(item).strip().lower()
        if not lowered or lowered in seen:
            continue
        seen.add(lowered)
        unique.append(lowered)
    return unique


def normalize_list(raw: str | Iterable[str] | None) -> List[str]:
    """Split ``raw`` on commas/whitespace into an ordered, case-folded token list.

    Sequences are joined with a space first so configured lists and directive
    values share one code path.
    """
    if not raw:
        return []
    if not isinstance(raw, str):
        raw = " ".join(str(item) for item in raw)
    return lower_unique(piece for piece in _SEPARATORS.split(raw) if piece)
