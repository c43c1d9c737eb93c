"""
Update a working copy to a target revision.

The update runs as ordered task lists:

    clean   -> prune stale remote-tracking refs, compact storage
    fast    -> force checkout, pull, hard reset to origin/<rev>, fetch tags

If either fails with a CommandError (transport, auth, diverged history) the
local branch is rebuilt from the remote by the fix path, then the fast path is
retried exactly once. Failures inside the fix path, and of the retry, propagate.
"""

import logging
from enum import Enum
from pathlib import Path
from typing import List, Optional

from gitkit.config import Credential
from gitkit.exceptions import CommandError
from gitkit.git.commands import require_credential
from gitkit.git.runner import Command, ExecOptions, Step, run_steps

logger = logging.getLogger(__name__)

# Checked out while the target branch is deleted and recreated
DISPOSABLE_BRANCH = "branch_used_to_delete_branch"


class UpdateOutcome(Enum):
    FAST_PATH = "fast-path"
    RECOVERED = "recovered"


def clean_steps() -> List[Step]:
    return [
        Step(Command.git("remote", "prune", "origin")),
        Step(Command.git("gc")),
    ]


def fast_path_steps(revision: str) -> List[Step]:
    return [
        Step(Command.git("checkout", "-qf", revision)),
        Step(Command.git("pull")),
        Step(Command.git("reset", "--hard", f"origin/{revision}")),
        Step(Command.git("fetch", "--tags")),
    ]


def fix_path_steps(revision: str) -> List[Step]:
    return [
        # leftover from an interrupted fix
        Step(Command.git("branch", "-D", DISPOSABLE_BRANCH), tolerate_failure=True),
        Step(Command.git("checkout", "-b", DISPOSABLE_BRANCH)),
        # the branch may not exist locally
        Step(Command.git("branch", "-D", revision), tolerate_failure=True),
        Step(Command.git("remote", "update")),
        Step(Command.git("fetch", "origin", revision)),
        Step(Command.git("checkout", "-q", "-b", revision, f"origin/{revision}")),
        Step(Command.git("branch", "-D", DISPOSABLE_BRANCH)),
    ]


def update_repo(
    cwd: Path, revision: str, credential: Optional[Credential]
) -> UpdateOutcome:
    """
    Synchronize the working copy at ``cwd`` with ``origin/<revision>``.

    Args:
        cwd: Working copy directory
        revision: Branch name to update to
        credential: Transport credential

    Returns:
        FAST_PATH if the update went through directly, RECOVERED if the
        local branch had to be rebuilt first

    Raises:
        MissingCredentialError: If no credential is configured; nothing is run
        DirectoryError: If ``cwd`` does not exist
        CommandError: If the fix path or the retried fast path fails
    """
    credential = require_credential(credential, "update repository")
    options = ExecOptions(cwd=cwd, credential=credential, ignore_stderr=True)

    try:
        run_steps(clean_steps(), options)
        run_steps(fast_path_steps(revision), options)
        logger.info(f"Updated {cwd} to {revision}")
        return UpdateOutcome.FAST_PATH
    except CommandError as e:
        logger.warning(f"Update of {cwd} to {revision} failed, rebuilding branch: {e}")

    run_steps(fix_path_steps(revision), options)
    run_steps(fast_path_steps(revision), options)
    logger.info(f"Updated {cwd} to {revision} after rebuilding the local branch")
    return UpdateOutcome.RECOVERED
