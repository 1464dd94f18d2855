"""Low-level Git helpers: command execution and status parsing."""

from __future__ import annotations

import os
import re
import subprocess
from pathlib import Path
from typing import Mapping, Protocol, Sequence

from .exceptions import GitCommandError
from .types import GitStatus, StatusEntry

_UNMERGED = {"DD", "AU", "UD", "UA", "DU", "AA", "UU"}
_BRANCH_COUNTS = re.compile(r"\[(?P<body>[^\]]*)\]\s*$")


class StatusProvider(Protocol):
    """Collaborator that answers repository status queries."""

    def is_repository(self) -> bool: ...

    def status(self) -> GitStatus: ...

    def is_tracked(self, path: str) -> bool: ...


def run(
    args: Sequence[str],
    *,
    cwd: Path,
    env: Mapping[str, str] | None = None,
    check: bool = True,
    timeout: float | None = None,
) -> subprocess.CompletedProcess[bytes]:
    """
    Execute a Git command returning the completed process.

    Args:
        args: Sequence of arguments that follow the `git` executable.
        cwd: Directory to execute the command from.
        env: Optional environment overrides.
        check: When True, raise :class:`GitCommandError` on non-zero exit.
        timeout: Optional timeout in seconds.

    Returns:
        CompletedProcess with stdout/stderr captured as bytes.
    """
    command = ["git", *args]
    merged_env = os.environ.copy()
    if env:
        merged_env.update(env)

    result = subprocess.run(
        command,
        cwd=str(cwd),
        env=merged_env,
        capture_output=True,
        check=False,
        timeout=timeout,
    )

    if check and result.returncode != 0:
        raise GitCommandError(command, result)

    return result


def parse_status_z(payload: bytes) -> GitStatus:
    """
    Parse `git status --porcelain=v1 -z --branch` output.

    Records are NUL-terminated. Rename and copy records are followed by an
    extra record holding the source path.
    """
    status = GitStatus()
    if not payload:
        return status

    records = payload.split(b"\0")
    index = 0
    while index < len(records):
        raw = records[index]
        index += 1
        if not raw:
            continue
        entry = raw.decode("utf-8", errors="replace")

        if entry.startswith("## "):
            _parse_branch_header(entry[3:], status)
            continue

        if len(entry) < 4:
            continue

        code = entry[:2]
        item = StatusEntry(path=entry[3:], index=code[0], working_dir=code[1])
        if "R" in code or "C" in code:
            if index < len(records):
                item.original_path = records[index].decode("utf-8", errors="replace")
                index += 1
        status.files.append(item)
        _classify(item, code, status)

    return status


def _classify(item: StatusEntry, code: str, status: GitStatus) -> None:
    if code in _UNMERGED:
        status.conflicted.append(item.path)
        return
    if item.is_untracked:
        status.untracked.append(item.path)
        return
    if item.is_ignored:
        return
    if item.is_staged:
        status.staged.append(item.path)
    if item.is_modified:
        status.modified.append(item.path)
    if "D" in code:
        status.deleted.append(item.path)


def _parse_branch_header(header: str, status: GitStatus) -> None:
    counts = _BRANCH_COUNTS.search(header)
    if counts:
        for part in counts.group("body").split(","):
            key, _, value = part.strip().partition(" ")
            if key == "ahead" and value.isdigit():
                status.ahead = int(value)
            elif key == "behind" and value.isdigit():
                status.behind = int(value)
        header = header[: counts.start()].rstrip()

    if header.startswith("No commits yet on "):
        status.current = header[len("No commits yet on ") :]
        return
    if header.startswith("HEAD (no branch)"):
        status.current = None
        return

    current, sep, tracking = header.partition("...")
    status.current = current or None
    status.tracking = tracking if sep and tracking else None


class GitRepository:
    """Status provider backed by the `git` executable."""

    def __init__(self, root: Path):
        self.root = Path(root).resolve()

    def is_repository(self) -> bool:
        try:
            result = run(["rev-parse", "--is-inside-work-tree"], cwd=self.root, check=False)
        except OSError:
            return False
        return result.returncode == 0 and result.stdout.strip() == b"true"

    def status(self) -> GitStatus:
        result = run(
            ["status", "--porcelain=v1", "-z", "--branch", "--untracked-files=all"],
            cwd=self.root,
        )
        return parse_status_z(result.stdout or b"")

    def is_tracked(self, path: str) -> bool:
        result = run(["ls-files", "--error-unmatch", "--", path], cwd=self.root, check=False)
        return result.returncode == 0 and bool(result.stdout.strip())

    def add(self, paths: Sequence[str]) -> None:
        if paths:
            run(["add", "--", *paths], cwd=self.root)

    def unstage(self, paths: Sequence[str]) -> None:
        """Reset index entries for paths back to HEAD."""
        if paths:
            run(["reset", "-q", "--", *paths], cwd=self.root)
