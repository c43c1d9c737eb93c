"""
Session entry points for a mirrored repository.

A Mirror pairs a working copy path with its remote and a credential store.
Every entry call reads the credential from the store, so a key set once is used
by all later calls without any module-level state.

Mirror does not lock: callers serialize concurrent operations on one working
copy themselves (the CLI holds a file lock next to the working copy).

Usage:
    mirror = Mirror(Path("work/repo"), "git@github.com:org/repo.git")
    mirror.credentials.set(Credential(Path("~/.ssh/deploy").expanduser()))
    mirror.sync("main")
    provenance = mirror.find_origin("HEAD")
"""

import logging
from pathlib import Path
from typing import Optional

from gitkit.config import CredentialStore, load_credential
from gitkit.git import (
    Author,
    ProvenanceMap,
    ReadinessReport,
    UpdateOutcome,
    check_ready,
    clone_repo,
    find_origin,
    make_commit,
    push_change,
    update_repo,
)
from gitkit.git.commands import require_credential

logger = logging.getLogger(__name__)


class Mirror:
    def __init__(
        self,
        path: Path,
        remote: str,
        credentials: Optional[CredentialStore] = None,
    ):
        """
        Args:
            path: Working copy directory
            remote: Remote URL; also the identifier looked up in ``.git/config``
            credentials: Credential store (defaults to one loaded from config)
        """
        self.path = Path(path)
        self.remote = remote
        if credentials is None:
            credentials = CredentialStore(load_credential())
        self.credentials = credentials

    def __repr__(self) -> str:
        return f"Mirror({str(self.path)!r}, {self.remote!r})"

    def ready(self) -> ReadinessReport:
        return check_ready(self.path, self.remote)

    def clone(self) -> None:
        clone_repo(self.path, self.remote, self.credentials.get())

    def update(self, revision: str) -> UpdateOutcome:
        return update_repo(self.path, revision, self.credentials.get())

    def sync(self, revision: str) -> UpdateOutcome:
        """
        Bring the working copy to ``origin/<revision>``, cloning if needed.

        Returns:
            The outcome of the update that followed the readiness check
        """
        # rejected before check_ready can discard anything
        require_credential(self.credentials.get(), "sync repository")
        report = self.ready()
        if not report.ready:
            logger.info(f"{self.path} is not ready ({report.state.value}), cloning")
            self.clone()
        return self.update(revision)

    def find_origin(self, reference: str = "HEAD") -> ProvenanceMap:
        return find_origin(self.path, reference)

    def commit(self, message: str, author: Optional[Author] = None) -> None:
        make_commit(self.path, message, author)

    def push(self) -> None:
        push_change(self.path, self.credentials.get())
