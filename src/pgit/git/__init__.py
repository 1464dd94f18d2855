"""
Git integration for pgit.

This package manages the pgit-owned section of ``.git/info/exclude`` so that
privately tracked paths stay out of the shared repository's status, and
classifies the Git state of individual files.
"""

from .commands import GitRepository, StatusProvider, parse_status_z
from .config import (
    PGIT_MARKER_COMMENT,
    FallbackBehavior,
    GitExcludeSettings,
    get_exclude_settings,
)
from .document import ExcludeDocument
from .exceptions import (
    GitCommandError,
    GitError,
    GitExcludeAccessError,
    GitExcludeCorruptionError,
    GitExcludeError,
    GitExcludeValidationError,
    GitOperationError,
    PgitError,
    RepositoryNotFoundError,
)
from .exclude import GitExcludeManager
from .policy import FallbackPolicy
from .state import GitStateClassifier
from .types import (
    BatchFailure,
    BatchResult,
    GitFileState,
    GitStatus,
    LegacyGitFileState,
    StatusEntry,
)
from .validation import RejectionReason, ValidationOutcome, validate_path

__all__ = [
    "PGIT_MARKER_COMMENT",
    "BatchFailure",
    "BatchResult",
    "ExcludeDocument",
    "FallbackBehavior",
    "FallbackPolicy",
    "GitCommandError",
    "GitError",
    "GitExcludeAccessError",
    "GitExcludeCorruptionError",
    "GitExcludeError",
    "GitExcludeManager",
    "GitExcludeSettings",
    "GitExcludeValidationError",
    "GitFileState",
    "GitOperationError",
    "GitRepository",
    "GitStateClassifier",
    "GitStatus",
    "LegacyGitFileState",
    "PgitError",
    "RejectionReason",
    "RepositoryNotFoundError",
    "StatusEntry",
    "StatusProvider",
    "ValidationOutcome",
    "get_exclude_settings",
    "parse_status_z",
    "validate_path",
]
