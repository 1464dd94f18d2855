"""Best-effort detection of overlapping exclude patterns.

Matching is a heuristic built on :func:`fnmatch.fnmatchcase`, where ``*``
also crosses ``/``. It is not gitignore semantics; results are warnings only.
"""

from __future__ import annotations

from fnmatch import fnmatchcase
from typing import Iterable

_WILDCARDS = ("*", "?", "[")


def is_pattern(entry: str) -> bool:
    return any(char in entry for char in _WILDCARDS)


def matches(path: str, pattern: str) -> bool:
    """Return True when ``pattern`` would plausibly match ``path``."""
    if path == pattern:
        return True
    candidates = [pattern, pattern.rstrip("/")]
    if pattern.startswith("**/"):
        candidates.append(pattern[3:])
    target = path.rstrip("/")
    return any(fnmatchcase(target, candidate) for candidate in candidates if candidate)


def check_add_conflicts(candidate: str, existing: Iterable[str]) -> list[str]:
    """Describe how ``candidate`` overlaps entries already in the file."""
    warnings: list[str] = []
    candidate_is_pattern = is_pattern(candidate)
    for entry in existing:
        if entry == candidate:
            continue
        entry_is_pattern = is_pattern(entry)
        if not candidate_is_pattern and entry_is_pattern and matches(candidate, entry):
            warnings.append(
                f"Adding '{candidate}' may conflict with existing pattern '{entry}'"
            )
        elif candidate_is_pattern and not entry_is_pattern and matches(entry, candidate):
            warnings.append(
                f"New pattern '{candidate}' would make existing entry '{entry}' redundant"
            )
    return warnings
