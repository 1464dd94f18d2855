"""Coordinator for the pgit-managed section of `.git/info/exclude`."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Callable, Iterable, Mapping, TypeVar

from pgit.utils import find_repository_root

from .commands import GitRepository, StatusProvider
from .config import GitExcludeSettings, snapshot_settings
from .conflicts import check_add_conflicts
from .document import ExcludeDocument, parse, render
from .exceptions import (
    ExcludeOperation,
    GitExcludeCorruptionError,
    GitExcludeError,
    GitExcludeValidationError,
    GitOperationError,
    RepositoryNotFoundError,
)
from .integrity import inspect
from .policy import FallbackPolicy, classify_os_error
from .types import BatchResult
from .validation import partition_paths, validate_path

logger = logging.getLogger(__name__)

T = TypeVar("T")

EXCLUDE_FILE_MODE = 0o600


class GitExcludeManager:
    """Adds, removes and queries entries in the managed exclude section.

    Every public call performs its own read-modify-write cycle; nothing read
    from disk is cached between calls. Batch operations coalesce all changes
    into a single write.
    """

    def __init__(
        self,
        settings: GitExcludeSettings | Mapping[str, Any] | None = None,
        *,
        repo_root: Path | None = None,
        repository: StatusProvider | None = None,
    ):
        self.settings = snapshot_settings(settings)
        if repo_root is None:
            try:
                repo_root = find_repository_root()
            except RuntimeError as exc:
                raise RepositoryNotFoundError(
                    "Not a git repository (or any parent directory)", cause=str(exc)
                ) from exc
        self.repo_root = Path(repo_root).resolve()
        self.repository = repository or GitRepository(self.repo_root)
        self.policy = FallbackPolicy(self.settings.fallback_behavior)

    @classmethod
    def for_repository(
        cls,
        root: Path,
        settings: GitExcludeSettings | Mapping[str, Any] | None = None,
    ) -> "GitExcludeManager":
        """Create a manager backed by the `git` executable for ``root``."""
        return cls(settings, repo_root=root)

    @property
    def exclude_path(self) -> Path:
        return self.repo_root / ".git" / "info" / "exclude"

    # ------------------------------------------------------------------
    # Single-path operations

    def add_to_git_exclude(self, path: str) -> None:
        """Add ``path`` to the managed section.

        Raises:
            RepositoryNotFoundError: If the root is not a Git repository.
            GitExcludeValidationError: If ``path`` fails validation.
            GitExcludeError: On disabled or failed operations when the
                fallback behavior is ``error``.
        """
        self._ensure_repository()
        normalized = self._validated(path, "add")
        if not self.settings.enabled:
            self.policy.disabled("add", [normalized])
            return
        self._run("add", [normalized], lambda: self._add_entries([normalized]))

    def remove_from_git_exclude(self, path: str) -> None:
        """Remove ``path`` from the managed section; absent paths are a no-op."""
        self._ensure_repository()
        normalized = self._validated(path, "remove")
        if not self.settings.enabled:
            self.policy.disabled("remove", [normalized])
            return
        self._run("remove", [normalized], lambda: self._remove_entries([normalized]))

    def is_in_git_exclude(self, path: str) -> bool:
        """Return True when ``path`` is one of the managed entries."""
        self._ensure_repository()
        if not isinstance(path, str) or not path.strip():
            return False
        normalized = path.strip()
        outcome = self._run("read", [normalized], self._managed_entries)
        if isinstance(outcome, GitExcludeError):
            return False
        return normalized in outcome

    # ------------------------------------------------------------------
    # Batch operations

    def add_multiple_to_git_exclude(self, paths: Iterable[str]) -> BatchResult:
        """Add several paths with one write; invalid paths land in ``failed``."""
        return self._batch("add", paths, self._add_entries)

    def remove_multiple_from_git_exclude(self, paths: Iterable[str]) -> BatchResult:
        """Remove several paths with one write; invalid paths land in ``failed``."""
        return self._batch("remove", paths, self._remove_entries)

    def _batch(
        self,
        operation: ExcludeOperation,
        paths: Iterable[str],
        action: Callable[[list[str]], list[str]],
    ) -> BatchResult:
        self._ensure_repository()
        result = BatchResult()
        valid, invalid = partition_paths(paths or [])
        for outcome in invalid:
            result.fail(outcome.path, outcome.message or "Invalid path")
        if not valid:
            return result

        if not self.settings.enabled:
            self.policy.disabled(operation, valid)
            result.successful.extend(valid)
            return result

        outcome = self._run(operation, valid, lambda: action(valid))
        if isinstance(outcome, GitExcludeError):
            for path in valid:
                result.fail(path, outcome.detail)
        else:
            result.successful.extend(valid)
        return result

    # ------------------------------------------------------------------
    # Low-level access

    def read_git_exclude_file(self) -> str:
        """Return the raw exclude file text, or an empty string if missing."""
        self._ensure_repository()
        try:
            if not self.exclude_path.exists():
                return ""
            return self.exclude_path.read_bytes().decode("utf-8", errors="replace")
        except OSError as exc:
            raise classify_os_error(exc, "read") from exc

    def write_git_exclude_file(self, content: str) -> None:
        """Replace the exclude file with ``content``.

        Integrity problems in ``content`` are logged, never rejected.
        """
        self._ensure_repository()
        if self.settings.validate_operations:
            for warning in inspect(content):
                logger.warning("Exclude file content issue: %s", warning)
        self._run("write", [], lambda: self._write_text(content))

    def get_pgit_managed_excludes(self) -> list[str]:
        """Return managed entries in file order."""
        self._ensure_repository()
        try:
            return self._managed_entries()
        except OSError as exc:
            raise GitOperationError(
                "Failed to get pgit-managed excludes", cause=str(exc)
            ) from exc

    # ------------------------------------------------------------------
    # Internal helpers

    def _ensure_repository(self) -> None:
        if not self.repository.is_repository():
            raise RepositoryNotFoundError(f"Not a git repository: {self.repo_root}")

    def _validated(self, path: str, operation: ExcludeOperation) -> str:
        outcome = validate_path(path)
        if not outcome.accepted or outcome.normalized is None:
            raise GitExcludeValidationError(
                f"Invalid path for exclude operation: {outcome.message}",
                operation,
                [outcome.path],
            )
        return outcome.normalized

    def _run(
        self,
        operation: ExcludeOperation,
        paths: list[str],
        action: Callable[[], T],
    ) -> T | GitExcludeError:
        """Execute ``action``, routing I/O and corruption failures through the policy."""
        try:
            return action()
        except OSError as exc:
            error = classify_os_error(exc, operation, paths)
        except GitExcludeCorruptionError as exc:
            error = exc
        self.policy.handle(error)
        return error

    def _load(self, *, check_integrity: bool = True) -> ExcludeDocument:
        text = ""
        if self.exclude_path.exists():
            data = self.exclude_path.read_bytes()
            if check_integrity and self.settings.validate_operations:
                for warning in inspect(data):
                    logger.warning("Exclude file integrity issue: %s", warning)
            text = data.decode("utf-8", errors="replace")
        return parse(text, self.settings.marker_comment)

    def _managed_entries(self) -> list[str]:
        return list(self._load(check_integrity=False).entries)

    def _add_entries(self, entries: list[str]) -> list[str]:
        document = self._load()
        added: list[str] = []
        for entry in entries:
            if entry in document:
                logger.info("Path '%s' is already in exclude file", entry)
                continue
            if self.settings.validate_operations:
                for warning in check_add_conflicts(entry, document.patterns()):
                    logger.warning(warning)
            document.add(entry)
            added.append(entry)

        if not added:
            return added

        self._write_text(render(document))
        self._verify("add", added, lambda doc: all(entry in doc for entry in added))
        return added

    def _remove_entries(self, entries: list[str]) -> list[str]:
        if not self.exclude_path.exists():
            return []
        document = self._load()
        removed: list[str] = []
        for entry in entries:
            if document.remove(entry):
                removed.append(entry)
            else:
                logger.info("Path '%s' was not found in exclude file", entry)

        if not removed:
            return removed

        if document.is_empty:
            self.exclude_path.unlink()
            logger.debug("Removed empty exclude file %s", self.exclude_path)
            return removed

        self._write_text(render(document))
        self._verify("remove", removed, lambda doc: not any(entry in doc for entry in removed))
        return removed

    def _write_text(self, text: str) -> None:
        self.exclude_path.parent.mkdir(parents=True, exist_ok=True)
        self.exclude_path.write_bytes(text.encode("utf-8"))
        try:
            os.chmod(self.exclude_path, EXCLUDE_FILE_MODE)
        except OSError as exc:
            logger.warning("Could not set permissions on %s: %s", self.exclude_path, exc)

    def _verify(
        self,
        operation: ExcludeOperation,
        paths: list[str],
        check: Callable[[ExcludeDocument], bool],
    ) -> None:
        if not self.settings.validate_operations:
            return
        if not check(self._load(check_integrity=False)):
            raise GitExcludeCorruptionError(
                "Exclude file verification failed after write",
                operation,
                paths,
            )
