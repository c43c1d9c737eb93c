"""Tests for the working copy readiness checks."""

from pathlib import Path
from unittest.mock import patch

import pytest

from gitkit.exceptions import DirectoryError
from gitkit.git.readiness import (
    WorkingCopy,
    WorkingCopyState,
    check_ready,
    reset_working_copy,
)
from tests.repos import snapshot

REMOTE = "git@github.com:sartrey/github-test.git"


def make_metadata(path, config_text=None, head=True):
    git_dir = path / ".git"
    git_dir.mkdir(parents=True)
    if config_text is not None:
        (git_dir / "config").write_text(config_text)
    if head:
        (git_dir / "HEAD").write_text("ref: refs/heads/main\n")


VALID_CONFIG = f"""[core]
\tbare = false
[remote "origin"]
\turl = {REMOTE}
\tfetch = +refs/heads/*:refs/remotes/origin/*
"""


@pytest.mark.short
class TestCheckReady:
    def test_absent_is_created_empty(self, tmp_path):
        path = tmp_path / "work"

        report = check_ready(path, REMOTE)

        assert not report
        assert report.state == WorkingCopyState.ABSENT
        assert report.was_reset
        assert report.needs_clone
        assert path.is_dir()
        assert list(path.iterdir()) == []

    def test_files_without_metadata_are_destroyed(self, tmp_path):
        path = tmp_path / "work"
        (path / "nested").mkdir(parents=True)
        (path / "nested" / "data.bin").write_bytes(b"\x00\x01")
        (path / "notes.txt").write_text("leftover")

        report = check_ready(path, REMOTE)

        assert not report.ready
        assert report.state == WorkingCopyState.PRESENT_NO_METADATA
        assert report.was_reset
        assert path.is_dir()
        assert list(path.iterdir()) == []

    def test_empty_directory_is_left_for_clone(self, tmp_path):
        path = tmp_path / "work"
        path.mkdir()
        marker = path.stat().st_mtime_ns

        report = check_ready(path, REMOTE)

        assert not report.ready
        assert not report.was_reset
        assert report.needs_clone
        assert report.state == WorkingCopyState.PRESENT_EMPTY
        assert path.stat().st_mtime_ns == marker

    def test_valid_copy_is_untouched(self, tmp_path):
        path = tmp_path / "work"
        make_metadata(path, VALID_CONFIG)
        (path / "README.md").write_text("# github-test\n")
        before = snapshot(path)
        config_before = (path / ".git" / "config").read_text()

        report = check_ready(path, REMOTE)

        assert report
        assert report.state == WorkingCopyState.PRESENT_VALID
        assert not report.was_reset
        assert snapshot(path) == before
        assert (path / ".git" / "config").read_text() == config_before

    def test_foreign_remote_is_reset(self, tmp_path):
        path = tmp_path / "work"
        make_metadata(path, VALID_CONFIG.replace(REMOTE, "git@example.com:other.git"))

        report = check_ready(path, REMOTE)

        assert not report.ready
        assert report.state == WorkingCopyState.PRESENT_CORRUPT
        assert list(path.iterdir()) == []

    def test_missing_head_is_reset(self, tmp_path):
        path = tmp_path / "work"
        make_metadata(path, VALID_CONFIG, head=False)

        report = check_ready(path, REMOTE)

        assert report.state == WorkingCopyState.PRESENT_CORRUPT
        assert report.was_reset
        assert list(path.iterdir()) == []

    def test_missing_config_is_reset(self, tmp_path):
        path = tmp_path / "work"
        make_metadata(path, config_text=None)

        report = check_ready(path, REMOTE)

        assert report.state == WorkingCopyState.PRESENT_CORRUPT
        assert list(path.iterdir()) == []

    def test_config_directory_is_reset(self, tmp_path):
        path = tmp_path / "work"
        make_metadata(path, config_text=None)
        (path / ".git" / "config").mkdir()

        report = check_ready(path, REMOTE)

        assert report.state == WorkingCopyState.PRESENT_CORRUPT
        assert report.was_reset
        assert list(path.iterdir()) == []

    def test_unreadable_config_is_reset(self, tmp_path):
        path = tmp_path / "work"
        make_metadata(path, VALID_CONFIG)

        with patch.object(Path, "read_text", side_effect=PermissionError("denied")):
            report = check_ready(path, REMOTE)

        assert report.state == WorkingCopyState.PRESENT_CORRUPT
        assert list(path.iterdir()) == []

    def test_file_in_place_of_directory(self, tmp_path):
        path = tmp_path / "work"
        path.write_text("not a directory")

        report = check_ready(path, REMOTE)

        assert not report.ready
        assert path.is_dir()


@pytest.mark.short
class TestWorkingCopy:
    def test_inspect_does_not_mutate(self, tmp_path):
        path = tmp_path / "work"
        path.mkdir()
        (path / "file").write_text("x")

        working_copy = WorkingCopy.inspect(path, REMOTE)

        assert working_copy.present
        assert not working_copy.metadata_present
        assert working_copy.state == WorkingCopyState.PRESENT_NO_METADATA
        assert (path / "file").exists()

    def test_inspect_absent(self, tmp_path):
        working_copy = WorkingCopy.inspect(tmp_path / "missing", REMOTE)
        assert working_copy.state == WorkingCopyState.ABSENT


@pytest.mark.short
class TestResetWorkingCopy:
    def test_creates_missing_parents(self, tmp_path):
        path = tmp_path / "a" / "b" / "work"
        reset_working_copy(path)
        assert path.is_dir()

    def test_failure_is_fatal(self, tmp_path):
        path = tmp_path / "work"
        (path / "sub").mkdir(parents=True)
        with patch("gitkit.git.readiness.shutil.rmtree", side_effect=OSError("busy")):
            with pytest.raises(DirectoryError):
                reset_working_copy(path)


@pytest.mark.integration
def test_real_clone_is_ready(working_copy, remote_repo):
    report = check_ready(working_copy, remote_repo.url)
    assert report.ready
    assert (working_copy / "README.md").exists()
