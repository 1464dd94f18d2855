"""Custom exceptions for Git and exclude-file operations."""

from __future__ import annotations

from dataclasses import dataclass
from subprocess import CompletedProcess
from typing import Literal, Sequence

ExcludeOperation = Literal["add", "remove", "read", "write"]


class PgitError(RuntimeError):
    """Base exception for pgit failures."""

    code = "PGIT_ERROR"
    recoverable = True
    cause: str | None = None

    def __init__(self, message: str, cause: str | None = None) -> None:
        super().__init__(message)
        self.cause = cause

    @property
    def detail(self) -> str:
        """Return the message with the underlying cause appended, if any."""
        return f"{self}: {self.cause}" if self.cause else str(self)


class GitError(PgitError):
    """Raised for generic repository problems."""

    code = "GIT_ERROR"


class RepositoryNotFoundError(PgitError):
    """Raised when the working directory is not a Git repository."""

    code = "REPOSITORY_NOT_FOUND"
    recoverable = False


class GitOperationError(PgitError):
    """Raised when a Git query or precondition fails."""

    code = "GIT_OPERATION_FAILED"


@dataclass(slots=True)
class GitCommandError(GitOperationError):
    """Raised when an underlying Git command fails."""

    argv: Sequence[str]
    result: CompletedProcess[bytes]

    def __str__(self) -> str:
        stderr = (self.result.stderr or b"").decode("utf-8", errors="replace").strip()
        stdout = (self.result.stdout or b"").decode("utf-8", errors="replace").strip()
        details = stderr or stdout
        suffix = f": {details}" if details else ""
        return f"git command failed ({' '.join(self.argv)}){suffix}"


class GitExcludeError(PgitError):
    """Raised when an operation on ``.git/info/exclude`` fails."""

    code = "GIT_EXCLUDE_ERROR"

    def __init__(
        self,
        message: str,
        operation: ExcludeOperation,
        affected_paths: Sequence[str] = (),
        cause: str | None = None,
    ) -> None:
        super().__init__(message, cause)
        self.operation = operation
        self.affected_paths = list(affected_paths)


class GitExcludeAccessError(GitExcludeError):
    """Permission or filesystem availability problems; retrying will not help."""

    code = "GIT_EXCLUDE_ACCESS_ERROR"
    recoverable = False


class GitExcludeCorruptionError(GitExcludeError):
    """Malformed, binary or oversized exclude file content."""

    code = "GIT_EXCLUDE_CORRUPTION_ERROR"


class GitExcludeValidationError(GitExcludeError):
    """Invalid path supplied to an exclude operation."""

    code = "GIT_EXCLUDE_VALIDATION_ERROR"
