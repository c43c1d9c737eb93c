"""
Readiness checks for a local working copy.

A working copy is only trusted when its ``.git`` directory holds both a config
naming the expected remote and a HEAD file. Anything else found at the path is
discarded: the directory is deleted and recreated empty so that a fresh clone
can take its place.

States:
    ABSENT               nothing at the path            -> reset, not ready
    PRESENT_EMPTY        empty directory, no .git       -> not ready, caller clones
    PRESENT_NO_METADATA  files but no .git              -> reset, not ready
    PRESENT_VALID        .git matches the remote        -> ready, untouched
    PRESENT_CORRUPT      .git incomplete or foreign     -> reset, not ready
"""

import logging
import shutil
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from gitkit.exceptions import DirectoryError

logger = logging.getLogger(__name__)

METADATA_DIR = ".git"
CONFIG_FILE = "config"
HEAD_FILE = "HEAD"


class WorkingCopyState(Enum):
    ABSENT = "absent"
    PRESENT_EMPTY = "present-empty"
    PRESENT_NO_METADATA = "present-no-metadata"
    PRESENT_VALID = "present-valid"
    PRESENT_CORRUPT = "present-corrupt"


def _metadata_matches(metadata_dir: Path, remote: str) -> bool:
    """True if ``metadata_dir`` holds a HEAD and a config naming ``remote``."""
    try:
        if not metadata_dir.is_dir():
            return False
        git_files = [p.name for p in metadata_dir.iterdir()]
        if CONFIG_FILE not in git_files or HEAD_FILE not in git_files:
            return False
        config_text = (metadata_dir / CONFIG_FILE).read_text(errors="replace")
    except OSError as e:
        logger.debug(f"Unreadable metadata in {metadata_dir}: {e}")
        return False
    return remote in config_text


@dataclass(frozen=True)
class WorkingCopy:
    """What is currently found at a working copy path."""

    path: Path
    present: bool
    empty: bool = False
    metadata_present: bool = False
    matches_expected_remote: bool = False

    @classmethod
    def inspect(cls, path: Path, remote: str) -> "WorkingCopy":
        """
        Inspect ``path`` without modifying it.

        Args:
            path: Working copy directory
            remote: Remote identifier expected in the git config
        """
        path = Path(path)
        if not path.exists():
            return cls(path=path, present=False)
        if not path.is_dir():
            # a stray file can only be replaced
            return cls(path=path, present=True)

        try:
            root_files = [p.name for p in path.iterdir()]
        except OSError as e:
            logger.debug(f"Cannot list {path}: {e}")
            return cls(path=path, present=True)
        if METADATA_DIR not in root_files:
            return cls(path=path, present=True, empty=not root_files)

        return cls(
            path=path,
            present=True,
            metadata_present=True,
            matches_expected_remote=_metadata_matches(path / METADATA_DIR, remote),
        )

    @property
    def state(self) -> WorkingCopyState:
        if not self.present:
            return WorkingCopyState.ABSENT
        if self.metadata_present:
            if self.matches_expected_remote:
                return WorkingCopyState.PRESENT_VALID
            return WorkingCopyState.PRESENT_CORRUPT
        if self.empty:
            return WorkingCopyState.PRESENT_EMPTY
        return WorkingCopyState.PRESENT_NO_METADATA


@dataclass(frozen=True)
class ReadinessReport:
    """
    Outcome of ``check_ready``.

    ``ready`` is only True for a valid copy. A copy that is not ready was either
    reset (``was_reset``) or found empty; in both cases the caller must clone.
    """

    path: Path
    state: WorkingCopyState
    ready: bool
    was_reset: bool = False

    @property
    def needs_clone(self) -> bool:
        return not self.ready

    def __bool__(self) -> bool:
        return self.ready


def reset_working_copy(path: Path) -> None:
    """
    Delete ``path`` recursively and recreate it as an empty directory.

    Raises:
        DirectoryError: If the path cannot be deleted or recreated
    """
    path = Path(path)
    logger.info(f"Resetting working copy at {path}")
    try:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        elif path.exists() or path.is_symlink():
            path.unlink()
        path.mkdir(parents=True)
    except OSError as e:
        raise DirectoryError(path, f"failed to reset working copy: {e}") from e


def check_ready(path: Path, remote: str) -> ReadinessReport:
    """
    Decide whether the working copy at ``path`` can be used as-is.

    Corrupt or foreign content is destroyed and the directory recreated empty;
    a valid copy and an empty directory are left untouched.

    Args:
        path: Working copy directory
        remote: Remote identifier the git config must mention

    Returns:
        A ReadinessReport; falsy unless the copy is ready
    """
    working_copy = WorkingCopy.inspect(path, remote)
    state = working_copy.state
    logger.debug(f"Working copy {working_copy.path} is {state.value}")

    if state == WorkingCopyState.PRESENT_VALID:
        return ReadinessReport(working_copy.path, state, ready=True)

    if state == WorkingCopyState.PRESENT_EMPTY:
        return ReadinessReport(working_copy.path, state, ready=False)

    if state != WorkingCopyState.ABSENT:
        logger.warning(
            f"Working copy {working_copy.path} is not a clone of {remote} ({state.value}), discarding it"
        )
    reset_working_copy(working_copy.path)
    return ReadinessReport(working_copy.path, state, ready=False, was_reset=True)
