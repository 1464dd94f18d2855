"""Typed structures representing Git and exclude-file state."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass(slots=True)
class StatusEntry:
    """One record of `git status --porcelain=v1 -z` output."""

    path: str
    index: str = " "
    working_dir: str = " "
    original_path: str | None = None

    @property
    def is_untracked(self) -> bool:
        return self.index == "?" and self.working_dir == "?"

    @property
    def is_ignored(self) -> bool:
        return self.index == "!" and self.working_dir == "!"

    @property
    def is_staged(self) -> bool:
        """Return True when the index differs from HEAD."""
        return self.index not in (" ", "?", "!")

    @property
    def is_modified(self) -> bool:
        """Return True when the working tree differs from the index."""
        return self.working_dir not in (" ", "?", "!")


@dataclass(slots=True)
class GitStatus:
    """Snapshot of repository status supplied by a status provider."""

    current: str | None = None
    tracking: str | None = None
    ahead: int = 0
    behind: int = 0
    staged: list[str] = field(default_factory=list)
    modified: list[str] = field(default_factory=list)
    untracked: list[str] = field(default_factory=list)
    deleted: list[str] = field(default_factory=list)
    conflicted: list[str] = field(default_factory=list)
    files: list[StatusEntry] = field(default_factory=list)

    @property
    def is_clean(self) -> bool:
        return not self.files or all(entry.is_ignored for entry in self.files)


@dataclass(slots=True, frozen=True)
class LegacyGitFileState:
    """Two-flag state record kept for older callers."""

    is_tracked: bool
    is_staged: bool


@dataclass(slots=True, frozen=True)
class GitFileState:
    """Relationship of a single path to the index, working tree and exclude list."""

    is_tracked: bool
    is_staged: bool
    is_modified: bool
    is_untracked: bool
    is_excluded: bool
    original_path: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_legacy(self) -> LegacyGitFileState:
        return LegacyGitFileState(is_tracked=self.is_tracked, is_staged=self.is_staged)

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-serialisable representation."""
        return {
            "is_tracked": self.is_tracked,
            "is_staged": self.is_staged,
            "is_modified": self.is_modified,
            "is_untracked": self.is_untracked,
            "is_excluded": self.is_excluded,
            "original_path": self.original_path,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(slots=True, frozen=True)
class BatchFailure:
    path: str
    error: str


@dataclass(slots=True)
class BatchResult:
    """Outcome of a batch exclude operation.

    A path lands in exactly one of ``successful`` or ``failed``.
    """

    successful: list[str] = field(default_factory=list)
    failed: list[BatchFailure] = field(default_factory=list)

    def fail(self, path: str, error: str) -> None:
        self.failed.append(BatchFailure(path=path, error=error))

    def to_dict(self) -> dict[str, object]:
        return {
            "successful": list(self.successful),
            "failed": [{"path": item.path, "error": item.error} for item in self.failed],
        }
