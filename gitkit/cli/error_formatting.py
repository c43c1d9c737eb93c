"""Error formatting for CLI output."""

from gitkit.exceptions import (
    CommandError,
    ContentTooLargeError,
    DirectoryError,
    GitkitError,
    MissingCredentialError,
)


def format_error(error: GitkitError) -> str:
    """Format a gitkit error with the details an operator needs to act on it.

    Example output:
        Command `git fetch origin main` failed with exit status 128
          stderr:
            fatal: could not read from remote repository.
    """
    if isinstance(error, CommandError):
        lines = [f"Command `{' '.join(error.command)}` failed"]
        if error.status is not None:
            lines[0] += f" with exit status {error.status}"
        if error.stderr:
            lines.append("  stderr:")
            lines.extend(f"    {line}" for line in error.stderr.strip().splitlines())
        return "\n".join(lines)

    message = str(error)
    if isinstance(error, MissingCredentialError):
        message += "\n  hint: pass --ssh-key or set GITKIT_SSH_KEY"
    elif isinstance(error, ContentTooLargeError):
        message += "\n  hint: raise [limits] max_output or set GITKIT_MAX_OUTPUT"
    elif isinstance(error, DirectoryError):
        message += "\n  hint: run `gitkit ready` to recreate the working copy"
    return message
