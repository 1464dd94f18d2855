"""Utility functions for pgit."""

from __future__ import annotations

from pathlib import Path


def find_repository_root(start_path: Path | None = None) -> Path:
    """
    Find the repository root by looking for a ``.git`` entry.

    Searches upward from the start path. ``.git`` may be a directory or, for
    linked worktrees and submodules, a file.

    Args:
        start_path: Starting path to search from. Defaults to the current
            working directory.

    Returns:
        Path to the repository root directory.

    Raises:
        RuntimeError: If no repository root can be found.
    """
    if start_path is None:
        start_path = Path.cwd()

    current = start_path.resolve()
    if current.is_file():
        current = current.parent

    while True:
        if (current / ".git").exists():
            return current
        if current == current.parent:
            break
        current = current.parent

    raise RuntimeError(f"Could not find repository root from {start_path}")
