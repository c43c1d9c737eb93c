import io

import pytest
import logging

from pathlib import Path

from gitkit.config import Credential
from tests.repos import RemoteRepo


@pytest.fixture
def capture_logs():
    """Fixture to capture log output during tests."""
    log_stream = io.StringIO()
    handler = logging.StreamHandler(log_stream)
    logger = logging.getLogger("gitkit")
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)

    yield log_stream

    logger.removeHandler(handler)
    log_stream.close()


@pytest.fixture(autouse=True)
def isolated_git(tmp_path_factory, monkeypatch):
    """Keep user and system git configuration out of the tests."""
    home = tmp_path_factory.mktemp("home")
    global_config = home / ".gitconfig"
    global_config.write_text("")
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(global_config))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_AUTHOR_NAME", "gitkit")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "gitkit@example.com")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "gitkit")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "gitkit@example.com")
    monkeypatch.delenv("GITKIT_SSH_KEY", raising=False)
    monkeypatch.delenv("GITKIT_MAX_OUTPUT", raising=False)


# git fixtures


@pytest.fixture
def credential(tmp_path) -> Credential:
    """A credential for local remotes, where the key is never read."""
    key = tmp_path / "id_test"
    key.write_text("not a real key\n")
    return Credential(ssh_key=key)


@pytest.fixture
def remote_repo(tmp_path) -> RemoteRepo:
    return RemoteRepo(tmp_path / "origin")


@pytest.fixture
def working_copy(tmp_path, remote_repo) -> Path:
    """A clone of ``remote_repo``."""
    return remote_repo.clone_to(tmp_path / "work")
