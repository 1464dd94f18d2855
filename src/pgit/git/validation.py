"""Safety rules for paths written to `.git/info/exclude`."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

MAX_PATH_LENGTH = 4096
MAX_PATH_DEPTH = 50

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")
_WINDOWS_ABSOLUTE = re.compile(r"^[A-Za-z]:[\\/]")
_RESERVED_NAMES = frozenset(
    {"con", "prn", "aux", "nul"}
    | {f"com{n}" for n in range(1, 10)}
    | {f"lpt{n}" for n in range(1, 10)}
)


class RejectionReason(str, Enum):
    EMPTY = "empty"
    TRAILING_SPACE_OR_DOT = "trailing_space_or_dot"
    NULL_CHARACTER = "null_character"
    CONTROL_CHARACTER = "control_character"
    TOO_LONG = "too_long"
    TRAVERSAL = "traversal"
    ABSOLUTE = "absolute"
    GIT_DIRECTORY = "git_directory"
    RESERVED_NAME = "reserved_name"
    TOO_DEEP = "too_deep"
    COMMENT = "comment"


_MESSAGES = {
    RejectionReason.EMPTY: "Path must be a non-empty string",
    RejectionReason.TRAILING_SPACE_OR_DOT: "Path ends with space or dot (problematic on Windows)",
    RejectionReason.NULL_CHARACTER: "Path contains null character",
    RejectionReason.CONTROL_CHARACTER: "Path contains control characters",
    RejectionReason.TOO_LONG: f"Path too long (>{MAX_PATH_LENGTH} characters)",
    RejectionReason.TRAVERSAL: "Path contains directory traversal sequence (..)",
    RejectionReason.ABSOLUTE: "Absolute paths are not allowed in exclude files",
    RejectionReason.GIT_DIRECTORY: "Paths starting with .git/ are not allowed",
    RejectionReason.RESERVED_NAME: "Path uses reserved Windows device name",
    RejectionReason.TOO_DEEP: f"Path nesting too deep (>{MAX_PATH_DEPTH} levels)",
    RejectionReason.COMMENT: "Path starts with '#' and would be read as a comment",
}


@dataclass(slots=True, frozen=True)
class ValidationOutcome:
    """Accepted outcomes carry ``normalized``; rejected ones carry ``reason``."""

    path: str
    normalized: str | None = None
    reason: RejectionReason | None = None

    @property
    def accepted(self) -> bool:
        return self.reason is None

    @property
    def message(self) -> str | None:
        return _MESSAGES[self.reason] if self.reason is not None else None


def _reject(path: str, reason: RejectionReason) -> ValidationOutcome:
    return ValidationOutcome(path=path, reason=reason)


def validate_path(path: object) -> ValidationOutcome:
    """Validate a candidate exclude entry.

    Normalization only trims surrounding whitespace; ``.``/``..`` segments are
    not resolved and case is kept. Glob characters, embedded spaces and a
    trailing ``/`` are allowed.
    """
    if not isinstance(path, str) or not path.strip():
        return _reject(path if isinstance(path, str) else "", RejectionReason.EMPTY)

    # Checked before trimming, otherwise "file.txt " would slip through.
    if path.endswith((" ", ".")):
        return _reject(path, RejectionReason.TRAILING_SPACE_OR_DOT)

    candidate = path.strip()

    if "\0" in candidate:
        return _reject(path, RejectionReason.NULL_CHARACTER)
    if _CONTROL_CHARS.search(candidate):
        return _reject(path, RejectionReason.CONTROL_CHARACTER)
    if len(candidate) > MAX_PATH_LENGTH:
        return _reject(path, RejectionReason.TOO_LONG)

    segments = re.split(r"[\\/]", candidate)
    if ".." in segments:
        return _reject(path, RejectionReason.TRAVERSAL)
    if candidate.startswith(("/", "\\")) or _WINDOWS_ABSOLUTE.match(candidate):
        return _reject(path, RejectionReason.ABSOLUTE)
    if candidate.startswith(".git/"):
        return _reject(path, RejectionReason.GIT_DIRECTORY)
    if candidate.startswith("#"):
        return _reject(path, RejectionReason.COMMENT)

    basename = next((part for part in reversed(segments) if part), "").lower()
    if basename in _RESERVED_NAMES or basename.split(".", 1)[0] in _RESERVED_NAMES:
        return _reject(path, RejectionReason.RESERVED_NAME)

    if len(candidate.split("/")) > MAX_PATH_DEPTH:
        return _reject(path, RejectionReason.TOO_DEEP)

    return ValidationOutcome(path=path, normalized=candidate)


def partition_paths(
    paths: Iterable[object],
) -> tuple[list[str], list[ValidationOutcome]]:
    """Split paths into unique accepted entries and rejected outcomes.

    Accepted entries keep first-seen order; rejections keep input order.
    """
    valid: list[str] = []
    seen: set[str] = set()
    invalid: list[ValidationOutcome] = []
    for path in paths:
        outcome = validate_path(path)
        if not outcome.accepted or outcome.normalized is None:
            invalid.append(outcome)
            continue
        if outcome.normalized not in seen:
            seen.add(outcome.normalized)
            valid.append(outcome.normalized)
    return valid, invalid
