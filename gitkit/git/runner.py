"""
Process runner for gitkit.

Commands are structured descriptors (program + argument list) executed through
GitPython's ``Git.execute``; nothing is ever interpolated into a shell string.
The runner is the only place where processes are spawned, which keeps every
protocol step independently testable by patching ``execute``.
"""

import logging
import os
import shlex
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Union

from git.cmd import Git
from git.exc import GitCommandNotFound

from gitkit.config import Credential
from gitkit.exceptions import CommandError, ContentTooLargeError, DirectoryError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Command:
    """A program and its arguments."""

    program: str
    args: List[str] = field(default_factory=list)

    @classmethod
    def git(cls, *args: str) -> "Command":
        return cls("git", list(args))

    def argv(self) -> List[str]:
        return [self.program, *self.args]

    def __str__(self) -> str:
        return " ".join(self.argv())


@dataclass(frozen=True)
class ExecOptions:
    """
    Options recognized by ``execute``.

    Attributes:
        cwd: Working directory; must exist
        credential: Credential for an ssh transport session scoped to this call
        ignore_stderr: Judge success on the exit status alone
        max_output: Capture cap for stdout, in bytes
        binary: Return stdout as bytes instead of text
        encoding: Text encoding used when ``binary`` is False
        errors: Decoding error handler; ``surrogateescape`` keeps undecodable
            bytes, such as non-UTF-8 paths, distinct and reversible
    """

    cwd: Optional[Path] = None
    credential: Optional[Credential] = None
    ignore_stderr: bool = False
    max_output: Optional[int] = None
    binary: bool = False
    encoding: str = "utf-8"
    errors: str = "replace"


@dataclass(frozen=True)
class Step:
    """One entry of an ordered task list, see ``run_steps``."""

    command: Command
    tolerate_failure: bool = False


def _ssh_environment(credential: Credential) -> dict:
    key = shlex.quote(str(credential.ssh_key))
    return {"GIT_SSH_COMMAND": f"ssh -i {key} -o IdentitiesOnly=yes"}


def execute(
    command: Command, options: Optional[ExecOptions] = None
) -> Union[str, bytes]:
    """
    Execute a command and return its captured stdout.

    Args:
        command: The command to run
        options: Execution options (defaults to ``ExecOptions()``)

    Returns:
        stdout as text, or as bytes when ``options.binary`` is set

    Raises:
        DirectoryError: If ``options.cwd`` does not exist or cannot be entered
        CommandError: On non-zero exit, on non-empty stderr unless ignored,
            or if the program cannot be started
        ContentTooLargeError: If stdout exceeds ``options.max_output``
    """
    if options is None:
        options = ExecOptions()

    if options.cwd is not None:
        if not Path(options.cwd).is_dir():
            raise DirectoryError(options.cwd, "cwd not found")
        # Git.execute silently runs in the process cwd otherwise
        if not os.access(options.cwd, os.X_OK):
            raise DirectoryError(options.cwd, "cwd not accessible")

    env = _ssh_environment(options.credential) if options.credential else None
    runner = Git(str(options.cwd) if options.cwd is not None else None)

    logger.debug(f"Running `{command}` in {options.cwd or Path.cwd()}")
    try:
        status, stdout, stderr = runner.execute(
            command.argv(),
            with_extended_output=True,
            with_exceptions=False,
            stdout_as_string=False,
            strip_newline_in_stdout=False,
            env=env,
        )
    except GitCommandNotFound as e:
        raise CommandError(command.argv(), stderr=str(e)) from e

    if status != 0:
        raise CommandError(command.argv(), status, stderr)

    if stderr:
        if not options.ignore_stderr:
            raise CommandError(command.argv(), status, stderr)
        # still surfaced, git writes progress and hints here
        logger.info(stderr)

    if options.max_output is not None and len(stdout) > options.max_output:
        raise ContentTooLargeError(options.max_output, len(stdout))

    if options.binary:
        return stdout
    return stdout.decode(options.encoding, errors=options.errors)


def run_steps(steps: Iterable[Step], options: Optional[ExecOptions] = None) -> None:
    """
    Run an ordered task list, stopping at the first failure.

    Steps run strictly one after another. A failing step marked
    ``tolerate_failure`` is logged and skipped instead of aborting the list.
    """
    for step in steps:
        try:
            execute(step.command, options)
        except CommandError as e:
            if not step.tolerate_failure:
                raise
            logger.debug(f"Ignoring failure of `{step.command}`: {e}")
