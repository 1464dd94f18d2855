"""Failure-degradation policy for exclude operations."""

from __future__ import annotations

import errno
import logging
from typing import Sequence

from .config import FallbackBehavior
from .exceptions import ExcludeOperation, GitExcludeAccessError, GitExcludeError

logger = logging.getLogger(__name__)

_ACCESS_ERRNOS = {errno.EACCES, errno.EPERM, errno.EROFS}


def classify_os_error(
    exc: OSError,
    operation: ExcludeOperation,
    affected_paths: Sequence[str] = (),
) -> GitExcludeError:
    """Map a filesystem failure onto the exclude error taxonomy."""
    detail = exc.strerror or str(exc)
    if isinstance(exc, PermissionError) or exc.errno in _ACCESS_ERRNOS:
        return GitExcludeAccessError(
            f"Permission denied during {operation} operation on .git/info/exclude",
            operation,
            affected_paths,
            cause=detail,
        )
    return GitExcludeError(
        f"Exclude {operation} operation failed",
        operation,
        affected_paths,
        cause=detail,
    )


class FallbackPolicy:
    """Report or raise degraded exclude operations according to configuration."""

    def __init__(self, behavior: FallbackBehavior = FallbackBehavior.WARN):
        self.behavior = FallbackBehavior(behavior)

    def handle(self, error: GitExcludeError) -> None:
        """Swallow ``error`` (logging it unless silent) or raise it."""
        if self.behavior is FallbackBehavior.ERROR:
            raise error
        if self.behavior is FallbackBehavior.SILENT:
            return
        message = error.detail
        if error.affected_paths:
            message += f" (paths: {', '.join(error.affected_paths)})"
        logger.warning(message)

    def disabled(self, operation: ExcludeOperation, paths: Sequence[str]) -> None:
        """Apply the policy to an operation skipped because management is off."""
        self.handle(
            GitExcludeError(
                f"Exclude operations are disabled: '{operation}' skipped",
                operation,
                paths,
            )
        )
