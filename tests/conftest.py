"""Pytest configuration helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Callable, Iterable, Iterator, Sequence

import pytest

from pgit.git import GitExcludeManager, GitStatus, get_exclude_settings


class FakeRepository:
    """In-memory status provider used in place of the git executable."""

    def __init__(
        self,
        status: GitStatus | None = None,
        *,
        tracked: Iterable[str] = (),
        is_repo: bool = True,
    ) -> None:
        self.snapshot = status or GitStatus()
        self.tracked = set(tracked)
        self.is_repo = is_repo
        self.status_error: Exception | None = None
        self.added: list[str] = []
        self.unstaged: list[str] = []

    def is_repository(self) -> bool:
        return self.is_repo

    def status(self) -> GitStatus:
        if self.status_error is not None:
            raise self.status_error
        return self.snapshot

    def is_tracked(self, path: str) -> bool:
        return path in self.tracked

    def add(self, paths: Sequence[str]) -> None:
        self.added.extend(paths)

    def unstage(self, paths: Sequence[str]) -> None:
        self.unstaged.extend(paths)


@pytest.fixture(autouse=True)
def isolated_exclude_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep PGIT_EXCLUDE_* variables from the host out of the tests."""
    for key in list(os.environ):
        if key.startswith("PGIT_EXCLUDE_"):
            monkeypatch.delenv(key, raising=False)
    get_exclude_settings.cache_clear()
    yield
    get_exclude_settings.cache_clear()


@pytest.fixture
def repo_root(tmp_path: Path) -> Path:
    (tmp_path / ".git" / "info").mkdir(parents=True)
    return tmp_path


@pytest.fixture
def exclude_file(repo_root: Path) -> Path:
    return repo_root / ".git" / "info" / "exclude"


@pytest.fixture
def fake_repo() -> FakeRepository:
    return FakeRepository()


@pytest.fixture
def make_manager(
    repo_root: Path, fake_repo: FakeRepository
) -> Callable[..., GitExcludeManager]:
    def factory(**settings: object) -> GitExcludeManager:
        return GitExcludeManager(
            settings or None, repo_root=repo_root, repository=fake_repo
        )

    return factory
