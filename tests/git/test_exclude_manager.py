from __future__ import annotations

import logging
import os
import stat
import sys
from pathlib import Path
from typing import Callable

import pytest

from pgit.git import (
    PGIT_MARKER_COMMENT,
    GitExcludeManager,
    GitExcludeValidationError,
    RepositoryNotFoundError,
)

ManagerFactory = Callable[..., GitExcludeManager]

ORIGINAL = "# IDE files\n.vscode/\n.idea/\n\n# Build artifacts\ndist/\nnode_modules/\n"


def test_add_creates_managed_section(make_manager: ManagerFactory, exclude_file: Path) -> None:
    manager = make_manager()

    for path in ("config.json", "secrets.env", "private/data.txt"):
        manager.add_to_git_exclude(path)

    assert exclude_file.read_text(encoding="utf-8") == (
        f"{PGIT_MARKER_COMMENT}\nconfig.json\nsecrets.env\nprivate/data.txt\n"
    )
    for path in ("config.json", "secrets.env", "private/data.txt"):
        assert manager.is_in_git_exclude(path)


def test_add_creates_info_directory(make_manager: ManagerFactory, repo_root: Path) -> None:
    (repo_root / ".git" / "info").rmdir()
    manager = make_manager()

    manager.add_to_git_exclude("secret.key")

    assert manager.get_pgit_managed_excludes() == ["secret.key"]


def test_add_then_remove_restores_original(
    make_manager: ManagerFactory, exclude_file: Path
) -> None:
    exclude_file.write_text(ORIGINAL, encoding="utf-8")
    manager = make_manager()

    manager.add_to_git_exclude("secret.key")
    manager.add_to_git_exclude("config.local.json")
    assert manager.get_pgit_managed_excludes() == ["secret.key", "config.local.json"]
    assert exclude_file.read_text(encoding="utf-8").startswith(ORIGINAL)

    manager.remove_from_git_exclude("secret.key")
    manager.remove_from_git_exclude("config.local.json")

    assert exclude_file.read_bytes() == ORIGINAL.encode("utf-8")


def test_round_trip_preserves_unicode_and_blank_lines(
    make_manager: ManagerFactory, exclude_file: Path
) -> None:
    original = "# Éditeur ✓\n*.swp\n\n\n; not a comment\n  indented/\n\n"
    exclude_file.write_bytes(original.encode("utf-8"))
    manager = make_manager()

    manager.add_to_git_exclude("private.txt")
    manager.remove_from_git_exclude("private.txt")

    assert exclude_file.read_bytes() == original.encode("utf-8")


def test_removing_last_entry_from_new_file_deletes_it(
    make_manager: ManagerFactory, exclude_file: Path
) -> None:
    manager = make_manager()

    manager.add_to_git_exclude("only.txt")
    assert exclude_file.exists()
    manager.remove_from_git_exclude("only.txt")

    assert not exclude_file.exists()


def test_repeated_adds_keep_single_entry_and_marker(
    make_manager: ManagerFactory, exclude_file: Path, caplog: pytest.LogCaptureFixture
) -> None:
    caplog.set_level(logging.INFO, logger="pgit")
    manager = make_manager()

    for _ in range(3):
        manager.add_to_git_exclude("dup.txt")

    lines = exclude_file.read_text(encoding="utf-8").splitlines()
    assert lines.count("dup.txt") == 1
    assert lines.count(PGIT_MARKER_COMMENT) == 1
    assert "already in exclude file" in caplog.text


def test_remove_last_entry_keeps_trailing_content(
    make_manager: ManagerFactory, exclude_file: Path
) -> None:
    exclude_file.write_text(
        f"pre\n\n{PGIT_MARKER_COMMENT}\nx\n\n# later\nfoo\n", encoding="utf-8"
    )
    manager = make_manager()

    manager.remove_from_git_exclude("x")

    assert exclude_file.read_text(encoding="utf-8") == "pre\n\n# later\nfoo\n"


def test_remove_missing_file_is_noop(make_manager: ManagerFactory, exclude_file: Path) -> None:
    manager = make_manager()

    manager.remove_from_git_exclude("ghost.txt")

    assert not exclude_file.exists()


def test_remove_absent_entry_does_not_rewrite(
    make_manager: ManagerFactory, exclude_file: Path, caplog: pytest.LogCaptureFixture
) -> None:
    caplog.set_level(logging.INFO, logger="pgit")
    exclude_file.write_text("# mine\n*.log", encoding="utf-8")
    manager = make_manager()

    manager.remove_from_git_exclude("ghost.txt")

    assert exclude_file.read_text(encoding="utf-8") == "# mine\n*.log"
    assert "was not found in exclude file" in caplog.text


def test_unmanaged_lines_are_not_reported_as_managed(
    make_manager: ManagerFactory, exclude_file: Path
) -> None:
    exclude_file.write_text(ORIGINAL, encoding="utf-8")
    manager = make_manager()

    assert not manager.is_in_git_exclude(".vscode/")
    assert manager.get_pgit_managed_excludes() == []


def test_is_in_git_exclude_edge_cases(make_manager: ManagerFactory) -> None:
    manager = make_manager()

    assert not manager.is_in_git_exclude("")
    assert not manager.is_in_git_exclude("   ")
    assert not manager.is_in_git_exclude("config.json")

    manager.add_to_git_exclude("config.json")

    assert manager.is_in_git_exclude("  config.json  ")


def test_add_rejects_invalid_paths(make_manager: ManagerFactory, exclude_file: Path) -> None:
    manager = make_manager()

    with pytest.raises(GitExcludeValidationError, match="directory traversal") as excinfo:
        manager.add_to_git_exclude("../outside.txt")

    assert excinfo.value.operation == "add"
    assert excinfo.value.affected_paths == ["../outside.txt"]
    assert not exclude_file.exists()

    with pytest.raises(GitExcludeValidationError, match="non-empty string"):
        manager.remove_from_git_exclude("")


def test_operations_require_repository(make_manager: ManagerFactory, fake_repo) -> None:
    fake_repo.is_repo = False
    manager = make_manager()

    with pytest.raises(RepositoryNotFoundError) as excinfo:
        manager.add_to_git_exclude("file.txt")
    assert excinfo.value.recoverable is False

    with pytest.raises(RepositoryNotFoundError):
        manager.is_in_git_exclude("file.txt")
    with pytest.raises(RepositoryNotFoundError):
        manager.add_multiple_to_git_exclude(["file.txt"])


def test_conflict_warnings_are_logged(
    make_manager: ManagerFactory, caplog: pytest.LogCaptureFixture
) -> None:
    manager = make_manager()

    manager.add_to_git_exclude("specific.txt")
    manager.add_to_git_exclude("*.txt")
    assert "would make existing entry 'specific.txt' redundant" in caplog.text

    caplog.clear()
    manager.remove_from_git_exclude("specific.txt")
    manager.add_to_git_exclude("specific.txt")
    assert "may conflict with existing pattern '*.txt'" in caplog.text
    assert manager.get_pgit_managed_excludes() == ["*.txt", "specific.txt"]


def test_conflict_checks_skipped_without_validation(
    make_manager: ManagerFactory, caplog: pytest.LogCaptureFixture
) -> None:
    manager = make_manager(validate_operations=False)

    manager.add_to_git_exclude("specific.txt")
    manager.add_to_git_exclude("*.txt")

    assert "redundant" not in caplog.text


def test_corrupted_file_logs_and_proceeds(
    make_manager: ManagerFactory, exclude_file: Path, caplog: pytest.LogCaptureFixture
) -> None:
    exclude_file.write_bytes(b"junk\0data\n")
    manager = make_manager()

    manager.add_to_git_exclude("after-corruption.txt")

    assert "binary content" in caplog.text
    assert manager.is_in_git_exclude("after-corruption.txt")


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX permissions only")
def test_written_file_is_owner_read_write_only(
    make_manager: ManagerFactory, exclude_file: Path
) -> None:
    exclude_file.write_text("*.log\n", encoding="utf-8")
    os.chmod(exclude_file, 0o644)
    manager = make_manager()

    manager.add_to_git_exclude("secret.key")

    assert stat.S_IMODE(exclude_file.stat().st_mode) == 0o600


def test_read_and_write_escape_hatches(
    make_manager: ManagerFactory, exclude_file: Path, caplog: pytest.LogCaptureFixture
) -> None:
    manager = make_manager()
    assert manager.read_git_exclude_file() == ""

    manager.write_git_exclude_file("line\0with-nul\n")

    assert exclude_file.read_bytes() == b"line\0with-nul\n"
    assert manager.read_git_exclude_file() == "line\0with-nul\n"
    assert "Exclude file content issue" in caplog.text


def test_custom_marker_comment(make_manager: ManagerFactory, exclude_file: Path) -> None:
    manager = make_manager(marker_comment="# my private files")

    manager.add_to_git_exclude("notes.md")

    assert exclude_file.read_text(encoding="utf-8") == "# my private files\nnotes.md\n"
    assert PGIT_MARKER_COMMENT not in exclude_file.read_text(encoding="utf-8")


def test_for_repository_uses_git_backend(tmp_path: Path) -> None:
    manager = GitExcludeManager.for_repository(tmp_path, {"enabled": False})

    assert manager.repo_root == tmp_path.resolve()
    assert manager.exclude_path == tmp_path.resolve() / ".git" / "info" / "exclude"
    assert manager.settings.enabled is False


def test_comment_like_paths_are_rejected(
    make_manager: ManagerFactory, exclude_file: Path
) -> None:
    manager = make_manager()
    manager.add_to_git_exclude("kept.txt")

    with pytest.raises(GitExcludeValidationError, match="comment"):
        manager.add_to_git_exclude("#notes")
    result = manager.add_multiple_to_git_exclude(["#notes", "other.txt"])

    assert [item.path for item in result.failed] == ["#notes"]
    assert exclude_file.read_text(encoding="utf-8") == (
        f"{PGIT_MARKER_COMMENT}\nkept.txt\nother.txt\n"
    )


def test_lone_leading_blank_line_survives_round_trip(
    make_manager: ManagerFactory, exclude_file: Path
) -> None:
    exclude_file.write_text("\n", encoding="utf-8")
    manager = make_manager()

    manager.add_to_git_exclude("x")
    manager.remove_from_git_exclude("x")

    assert exclude_file.read_text(encoding="utf-8") == "\n"

    exclude_file.write_text(f"\n{PGIT_MARKER_COMMENT}\nx\n", encoding="utf-8")
    manager.remove_from_git_exclude("x")

    assert exclude_file.read_text(encoding="utf-8") == "\n"


def test_default_root_outside_repository(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)

    with pytest.raises(RepositoryNotFoundError) as excinfo:
        GitExcludeManager()

    assert excinfo.value.recoverable is False
    assert excinfo.value.cause is not None
    assert isinstance(excinfo.value.__cause__, RuntimeError)


def test_default_root_is_discovered(repo_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    nested = repo_root / "src" / "pkg"
    nested.mkdir(parents=True)
    monkeypatch.chdir(nested)

    assert GitExcludeManager().repo_root == repo_root.resolve()
