"""
Exception classes for gitkit.
"""

from typing import Optional, Sequence


class GitkitError(Exception):
    """Base exception for all gitkit errors."""

    pass


class MissingCredentialError(GitkitError):
    """Raised when a transport operation is attempted without a credential."""

    def __init__(self, operation: str = ""):
        self.operation = operation
        if operation:
            super().__init__(f"Cannot {operation}: ssh key not set")
        else:
            super().__init__("ssh key not set")


class DirectoryError(GitkitError):
    """Raised when a working directory is missing or cannot be prepared."""

    def __init__(self, path, message: str = ""):
        self.path = path
        if message:
            super().__init__(f"{path}: {message}")
        else:
            super().__init__(f"Directory not found: {path}")


class CommandError(GitkitError):
    """Raised when a command exits non-zero or writes unexpected diagnostics."""

    def __init__(
        self,
        command: Sequence[str],
        status: Optional[int] = None,
        stderr: str = "",
    ):
        self.command = list(command)
        self.status = status
        self.stderr = stderr
        message = f"Command `{' '.join(self.command)}` failed"
        if status is not None:
            message += f" with exit status {status}"
        if stderr:
            message += f": {stderr.strip()}"
        super().__init__(message)


class ContentTooLargeError(GitkitError):
    """Raised when captured output exceeds the configured size cap."""

    def __init__(self, limit: int, size: int):
        self.limit = limit
        self.size = size
        super().__init__(
            f"Content is too large: {size} bytes exceeds the {limit} byte limit"
        )


class ProvenanceFrozenError(GitkitError):
    """Raised when a completed provenance map is written to."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Provenance map is frozen, cannot update '{path}'")
