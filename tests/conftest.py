from __future__ import annotations

import os
import subprocess
from pathlib import Path
from typing import Dict, Optional, Union

import pytest

AUTHOR = ("Alice Author", "alice@example.com")
COMMITTER = ("Carol Committer", "carol@example.com")
DEFAULT_DATE = "2024-01-02T03:04:05+02:00"


class GitRepo:
    """A throwaway work tree driven through the git command line."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self.path.mkdir(parents=True, exist_ok=True)
        self.git("-c", "init.defaultBranch=main", "init", "-q")

    @property
    def git_dir(self) -> Path:
        return self.path / ".git"

    def git(self, *args: str, env: Optional[Dict[str, str]] = None) -> str:
        full_env = dict(os.environ)
        full_env.update(env or {})
        cp = subprocess.run(["git", *args], cwd=self.path, env=full_env, check=True, capture_output=True, text=True)
        return cp.stdout

    def write(self, rel: str, data: Union[str, bytes]) -> None:
        target = self.path / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(data, str):
            data = data.encode("utf-8")
        target.write_bytes(data)

    def commit(self, message: str, date: str = DEFAULT_DATE) -> str:
        self.git("add", "-A")
        self.git(
            "commit", "-q", "--allow-empty", "-m", message,
            env={"GIT_AUTHOR_DATE": date, "GIT_COMMITTER_DATE": date},
        )
        return self.git("rev-parse", "HEAD").strip()


@pytest.fixture(autouse=True)
def isolated_git(tmp_path, monkeypatch):
    home = tmp_path / "home"
    home.mkdir()
    empty_config = home / ".gitconfig"
    empty_config.write_text("")
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(empty_config))
    monkeypatch.setenv("GIT_AUTHOR_NAME", AUTHOR[0])
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", AUTHOR[1])
    monkeypatch.setenv("GIT_COMMITTER_NAME", COMMITTER[0])
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", COMMITTER[1])
    for var in ("GIT_DIR", "GIT_WORK_TREE", "GIT_INDEX_FILE"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def git_repo(tmp_path) -> GitRepo:
    return GitRepo(tmp_path / "project")


@pytest.fixture
def hello_repo(git_repo) -> GitRepo:
    """Two commits: add a.txt = "hello", then change it to "hello world"."""
    git_repo.write("a.txt", "hello\n")
    git_repo.commit("Add a.txt", date="2024-01-01T10:00:00+00:00")
    git_repo.write("a.txt", "hello world\n")
    git_repo.commit("Say hello to the world", date="2024-01-02T10:00:00+00:00")
    return git_repo
