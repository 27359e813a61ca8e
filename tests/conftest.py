"""Shared test fixtures."""

from pathlib import Path
from types import SimpleNamespace

import pytest

from repo_outdated.auditor.process import ProcessResult
from repo_outdated.config import RunConfiguration
from repo_outdated.crawler.models import RepoInfo


class FakeRunner:
    """Process runner returning canned results instead of spawning processes.

    ``responses`` maps a command keyword (``clone``, ``pull``, ``install``,
    ``outdated`` ...) to a ProcessResult or a callable building one. A clone
    that succeeds creates the target's ``.git`` directory.
    """

    def __init__(self, responses=None):
        self.responses = responses or {}
        self.calls: list[tuple[list[str], Path | None]] = []

    def _keyword(self, args):
        for arg in args[1:]:
            if not arg.startswith("-"):
                return arg
        return args[0]

    def run(self, args, cwd=None):
        self.calls.append((list(args), cwd))
        keyword = self._keyword(args)
        response = self.responses.get(keyword, ProcessResult(args=list(args), returncode=0))
        if callable(response):
            response = response(args, cwd)
        if keyword == "clone" and response.returncode == 0:
            (Path(args[-1]) / ".git").mkdir(parents=True, exist_ok=True)
        return response

    def commands(self, keyword):
        return [args for args, _ in self.calls if self._keyword(args) == keyword]


def make_github_repo(name, language="PHP", default_branch="main"):
    """A stand-in for a PyGithub Repository."""
    return SimpleNamespace(
        name=name,
        full_name=f"acme/{name}",
        ssh_url=f"git@github.com:acme/{name}.git",
        clone_url=f"https://github.com/acme/{name}.git",
        language=language,
        default_branch=default_branch,
    )


class FakeGithub:
    """Minimal PyGithub ``Github`` replacement."""

    def __init__(self, org_repos=(), user_repos=(), error=None):
        self.org_repos = list(org_repos)
        self.user_repos = list(user_repos)
        self.error = error
        self.requested = []

    def get_organization(self, name):
        self.requested.append(("org", name))
        if self.error:
            raise self.error
        return SimpleNamespace(get_repos=lambda type="all": iter(self.org_repos))

    def get_user(self, name):
        self.requested.append(("user", name))
        if self.error:
            raise self.error
        return SimpleNamespace(get_repos=lambda: iter(self.user_repos))


@pytest.fixture
def fake_runner():
    return FakeRunner()


@pytest.fixture
def repo_info():
    return RepoInfo(
        name="billing",
        clone_url="git@github.com:acme/billing.git",
        language="PHP",
        default_branch="main",
        full_name="acme/billing",
    )


@pytest.fixture
def run_config(tmp_path):
    return RunConfiguration(
        composer_path="composer",
        organization="acme",
        output_dir=tmp_path / "_output",
    )


@pytest.fixture
def outdated_json():
    return (
        '{"installed": [{"name": "monolog/monolog", "version": "1.25.0", '
        '"latest": "1.27.1", "latest-status": "semver-safe-update"}]}'
    )
