"""
Typed git operations built on the process runner.

Each function maps one git invocation (or a short fixed sequence of them) to a
Python return value. Transport operations (clone, push) require a credential
and refuse to run without one.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from gitkit.config import Credential, get_max_output
from gitkit.exceptions import (
    CommandError,
    ContentTooLargeError,
    MissingCredentialError,
)
from gitkit.git.parsing import (
    BlobRecord,
    DiffEntry,
    parse_blob_records,
    parse_commit_ids,
    parse_diff_tree,
)
from gitkit.git.runner import Command, ExecOptions, Step, execute, run_steps

logger = logging.getLogger(__name__)

UNKNOWN_TYPE = "unknown"


@dataclass(frozen=True)
class Author:
    name: str
    email: str


def require_credential(credential: Optional[Credential], operation: str) -> Credential:
    """Raise MissingCredentialError unless a credential is configured."""
    if not credential:
        raise MissingCredentialError(operation)
    return credential


def get_git_version() -> str:
    return execute(Command.git("version"), ExecOptions(ignore_stderr=True)).strip()


def clone_repo(cwd: Path, remote: str, credential: Optional[Credential]) -> None:
    """
    Clone ``remote`` into the existing, empty directory ``cwd``.

    Args:
        cwd: Target directory (see ``gitkit.git.readiness.check_ready``)
        remote: Repository URL or path
        credential: Transport credential

    Raises:
        MissingCredentialError: If no credential is configured
    """
    credential = require_credential(credential, "clone repository")
    logger.info(f"Cloning {remote} into {cwd}")
    execute(
        Command.git("clone", "-q", remote, "./"),
        ExecOptions(cwd=cwd, credential=credential, ignore_stderr=True),
    )


def make_commit(cwd: Path, message: str, author: Optional[Author] = None) -> None:
    """Stage every change in the working copy and commit it."""
    identity = []
    if author is not None:
        identity = ["-c", f"user.name={author.name}", "-c", f"user.email={author.email}"]
    run_steps(
        [
            Step(Command.git("add", ".")),
            Step(Command.git(*identity, "commit", "-q", "-m", message)),
        ],
        ExecOptions(cwd=cwd, ignore_stderr=True),
    )


def push_change(cwd: Path, credential: Optional[Credential]) -> None:
    credential = require_credential(credential, "push changes")
    execute(
        Command.git("push"),
        ExecOptions(cwd=cwd, credential=credential, ignore_stderr=True),
    )


def hash_object(cwd: Path, file: Union[str, Path]) -> Optional[str]:
    """
    Write ``file`` into the object database.

    Returns:
        The blob hash, or None if git could not hash the file
    """
    try:
        output = execute(
            Command.git("hash-object", "-w", str(file)),
            ExecOptions(cwd=cwd, ignore_stderr=True),
        )
    except CommandError as e:
        logger.warning(f"Failed to hash {file}: {e}")
        return None
    return output.strip() or None


def get_hash_type(cwd: Path, object_hash: str) -> str:
    """
    Get the object type (commit, tree, blob, tag) of a hash.

    Unknown or ambiguous hashes resolve to ``UNKNOWN_TYPE`` instead of raising.
    """
    try:
        output = execute(
            Command.git("cat-file", "-t", object_hash),
            ExecOptions(cwd=cwd, ignore_stderr=True),
        )
    except CommandError:
        return UNKNOWN_TYPE
    return output.strip()


def get_local_hash(cwd: Path, rev: str) -> str:
    """
    Resolve a local revision to a commit hash.

    Tags and local branches are tried first, then the remote-tracking branch
    ``origin/<rev>``.
    """
    options = ExecOptions(cwd=cwd, ignore_stderr=True)
    try:
        output = execute(Command.git("rev-parse", "--verify", rev), options)
    except CommandError:
        output = execute(Command.git("rev-parse", "--verify", f"origin/{rev}"), options)
    return output.strip()


def get_remote_hash(
    cwd: Path, rev: str, credential: Optional[Credential] = None
) -> Optional[str]:
    """
    Look up ``rev`` on the ``origin`` remote.

    Returns:
        The hash advertised by the remote, or None if it is unknown
    """
    try:
        output = execute(
            Command.git("ls-remote", "origin", rev),
            ExecOptions(cwd=cwd, credential=credential, ignore_stderr=True),
        )
    except CommandError as e:
        logger.warning(f"Failed to query remote for {rev}: {e}")
        return None
    fields = output.split()
    return fields[0] if fields else None


def reset_repo(cwd: Path, rev: str) -> None:
    execute(
        Command.git("reset", "-q", "--hard", rev),
        ExecOptions(cwd=cwd, ignore_stderr=True),
    )


def get_blob_table(cwd: Path, rev: str) -> List[BlobRecord]:
    """
    List the recursive tree of ``rev`` as (path, content hash) records.

    Output is capped at the configured ``max_output``.
    """
    if not rev:
        return []
    output = execute(
        Command.git("ls-tree", "-r", "-z", rev),
        ExecOptions(
            cwd=cwd,
            ignore_stderr=True,
            max_output=get_max_output(),
            errors="surrogateescape",
        ),
    )
    return parse_blob_records(output)


def get_diff_table(cwd: Path, rev: str) -> List[DiffEntry]:
    """List the paths changed by commit ``rev`` relative to its first parent."""
    output = execute(
        Command.git("diff-tree", "-r", rev),
        ExecOptions(cwd=cwd, ignore_stderr=True, errors="surrogateescape"),
    )
    return parse_diff_tree(output)


def get_file_track(cwd: Path, file: Optional[str] = None) -> List[str]:
    """
    List commits reachable from any ref, newest first.

    Args:
        cwd: Working copy
        file: Restrict the listing to commits touching this path

    Returns:
        Commit hashes in the order given by `git rev-list`
    """
    args = ["rev-list", "--all"]
    if file:
        args += ["--", file]
    output = execute(
        Command.git(*args),
        ExecOptions(cwd=cwd, ignore_stderr=True, max_output=get_max_output()),
    )
    return parse_commit_ids(output)


def get_merge_base(cwd: Path, rev1: str, rev2: str) -> Optional[str]:
    try:
        output = execute(
            Command.git("merge-base", rev1, rev2),
            ExecOptions(cwd=cwd, ignore_stderr=True),
        )
    except CommandError:
        return None
    return output.strip() or None


def get_blob_content(
    cwd: Path,
    object_hash: str,
    encoding: Optional[str] = None,
    max_output: Optional[int] = None,
) -> Union[str, bytes]:
    """
    Fetch the content of a blob.

    Args:
        cwd: Working copy
        object_hash: Blob hash
        encoding: Decode the content with this encoding; bytes are returned if None
        max_output: Capture cap in bytes (defaults to the configured ``max_output``)

    Raises:
        ContentTooLargeError: If the blob exceeds the capture cap
    """
    if max_output is None:
        max_output = get_max_output()
    try:
        return execute(
            Command.git("cat-file", "-p", object_hash),
            ExecOptions(
                cwd=cwd,
                max_output=max_output,
                binary=encoding is None,
                encoding=encoding or "utf-8",
            ),
        )
    except ContentTooLargeError as e:
        logger.error(f"Blob {object_hash} is too large: {e}")
        raise
