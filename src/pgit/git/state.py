"""Per-file Git state classification."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Protocol, Sequence

from .commands import StatusProvider
from .exceptions import GitOperationError, PgitError
from .exclude import GitExcludeManager
from .types import GitFileState, LegacyGitFileState

logger = logging.getLogger(__name__)


class IndexWriter(StatusProvider, Protocol):
    """Status provider that can also stage and unstage paths."""

    def add(self, paths: Sequence[str]) -> None: ...

    def unstage(self, paths: Sequence[str]) -> None: ...


def _normalized(path: str) -> str:
    if not isinstance(path, str) or not path.strip():
        raise GitOperationError("File path cannot be empty")
    return path.strip()


class GitStateClassifier:
    """Derives a :class:`GitFileState` from a status snapshot and the exclude list.

    Nothing is cached: each call queries the status provider and re-reads the
    exclude file.
    """

    def __init__(
        self,
        excludes: GitExcludeManager,
        *,
        repository: StatusProvider | None = None,
    ):
        self.excludes = excludes
        self.repository = repository or excludes.repository

    def get_file_git_state(self, path: str) -> GitFileState:
        normalized = _normalized(path)
        timestamp = datetime.now(timezone.utc)

        if not self.repository.is_repository():
            return GitFileState(
                is_tracked=False,
                is_staged=False,
                is_modified=False,
                is_untracked=False,
                is_excluded=False,
                original_path=normalized,
                timestamp=timestamp,
            )

        try:
            status = self.repository.status()
            is_excluded = self.excludes.is_in_git_exclude(normalized)

            is_untracked = normalized in status.untracked
            is_staged = normalized in status.staged
            is_modified = normalized in status.modified
            if is_untracked:
                is_tracked = False
            elif is_staged or is_modified:
                is_tracked = True
            elif any(
                entry.path == normalized and not entry.is_ignored for entry in status.files
            ):
                # Deleted or conflicted paths are still known to the index.
                is_tracked = True
            else:
                is_tracked = self.repository.is_tracked(normalized)
        except (PgitError, OSError) as exc:
            raise GitOperationError(
                f"Failed to get git state for {normalized}", cause=str(exc)
            ) from exc

        return GitFileState(
            is_tracked=is_tracked,
            is_staged=is_staged,
            is_modified=is_modified,
            is_untracked=is_untracked,
            is_excluded=is_excluded,
            original_path=normalized,
            timestamp=timestamp,
        )

    def get_legacy_file_git_state(self, path: str) -> LegacyGitFileState:
        """Return only tracked/staged flags for older callers."""
        return self.get_file_git_state(path).to_legacy()

    def record_original_state(self, path: str) -> GitFileState:
        """Capture the state of ``path`` before pgit starts managing it."""
        normalized = _normalized(path)
        try:
            return self.get_file_git_state(normalized)
        except GitOperationError as exc:
            raise GitOperationError(
                f"Failed to record original state for {normalized}", cause=exc.detail
            ) from exc

    def restore_original_state(self, path: str, state: GitFileState | None) -> None:
        """Put ``path`` back into the index and exclude state captured earlier.

        Requires a repository that implements :class:`IndexWriter`.
        """
        normalized = _normalized(path)
        if state is None:
            raise GitOperationError("Git state cannot be None")

        try:
            if not self.repository.is_repository():
                return

            index: IndexWriter = self.repository  # type: ignore[assignment]
            if state.is_staged:
                index.add([normalized])
            elif state.is_tracked:
                index.unstage([normalized])

            if state.is_excluded:
                self.excludes.add_to_git_exclude(normalized)
            else:
                self.excludes.remove_from_git_exclude(normalized)
        except (PgitError, OSError) as exc:
            detail = exc.detail if isinstance(exc, PgitError) else str(exc)
            raise GitOperationError(
                f"Failed to restore original state for {normalized}", cause=detail
            ) from exc
        logger.debug("Restored original git state for %s", normalized)
