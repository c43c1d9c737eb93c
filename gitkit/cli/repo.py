"""cli commands for managing a mirrored working copy"""

import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

import click
from filelock import FileLock

from gitkit.cli.error_formatting import format_error
from gitkit.cli.utils.logging import debug_option, logger
from gitkit.config import Credential, CredentialStore, load_credential
from gitkit.exceptions import GitkitError
from gitkit.mirror import Mirror

ssh_key_option = click.option(
    "--ssh-key",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Private key for ssh remotes (defaults to the configured key).",
)


def get_lock_path(path: Path) -> Path:
    """Lock file beside the working copy, so that a reset never deletes it."""
    return path.parent / f"{path.name}.lock"


@contextmanager
def locked(path: Path):
    """Serialize gitkit processes operating on the same working copy."""
    lock_path = get_lock_path(path.resolve())
    lock_path.parent.mkdir(parents=True, exist_ok=True)
    with FileLock(lock_path):
        yield


def make_mirror(path: Path, remote: str, ssh_key: Optional[Path]) -> Mirror:
    credential = Credential(ssh_key) if ssh_key else load_credential()
    return Mirror(path, remote, CredentialStore(credential))


def fail(error: GitkitError):
    logger.error(format_error(error))
    sys.exit(1)


@click.command("ready")
@debug_option
@click.argument("path", type=click.Path(path_type=Path))
@click.argument("remote")
def ready(path: Path, remote: str):
    """Check the working copy at PATH, resetting it unless it is a clone of REMOTE.

    Exits with status 0 if the copy is ready, 2 if it must be cloned.
    """
    with locked(path):
        try:
            report = Mirror(path, remote, CredentialStore()).ready()
        except GitkitError as e:
            fail(e)

    if report.ready:
        logger.info(f"{path} is ready")
        return
    if report.was_reset:
        logger.info(f"{path} was reset ({report.state.value}); clone required")
    else:
        logger.info(f"{path} is empty; clone required")
    sys.exit(2)


@click.command("clone")
@debug_option
@click.argument("path", type=click.Path(path_type=Path))
@click.argument("remote")
@ssh_key_option
def clone(path: Path, remote: str, ssh_key: Optional[Path]):
    """Clone REMOTE into the empty directory PATH."""
    with locked(path):
        try:
            make_mirror(path, remote, ssh_key).clone()
        except GitkitError as e:
            fail(e)
    logger.info(f"Cloned {remote} into {path}")


@click.command("update")
@debug_option
@click.argument("path", type=click.Path(path_type=Path))
@click.argument("revision")
@ssh_key_option
def update(path: Path, revision: str, ssh_key: Optional[Path]):
    """Update the working copy at PATH to origin/REVISION."""
    with locked(path):
        try:
            # the remote is only needed for readiness checks
            outcome = make_mirror(path, "", ssh_key).update(revision)
        except GitkitError as e:
            fail(e)
    logger.info(f"{path} is at {revision} ({outcome.value})")


@click.command("sync")
@debug_option
@click.argument("path", type=click.Path(path_type=Path))
@click.argument("remote")
@click.argument("revision")
@ssh_key_option
def sync(path: Path, remote: str, revision: str, ssh_key: Optional[Path]):
    """Make PATH a clone of REMOTE at REVISION, recreating it if needed.

    Example:

      gitkit sync work/repo git@github.com:org/repo.git main
    """
    with locked(path):
        try:
            outcome = make_mirror(path, remote, ssh_key).sync(revision)
        except GitkitError as e:
            fail(e)
    logger.info(f"{path} is at {revision} ({outcome.value})")
