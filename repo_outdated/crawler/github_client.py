"""GitHub API client for repository discovery."""

import logging
from typing import Iterable, Iterator

import requests
from github import Auth, Github, GithubException

from ..config import DEFAULT_LANGUAGE, RunConfiguration
from ..errors import ConfigurationError, TransportError
from .models import RepoInfo

logger = logging.getLogger(__name__)

FALLBACK_BRANCH = "master"


class GitHubClient:
    """Client for listing the auditable repositories of an organisation or user."""

    def __init__(
        self,
        token: str | None = None,
        language: str = DEFAULT_LANGUAGE,
        protocol: str = "ssh",
        gh: Github | None = None,
    ):
        if gh is None:
            gh = Github(auth=Auth.Token(token)) if token else Github()
        self.gh = gh
        self.language = language
        self.protocol = protocol

    @classmethod
    def from_config(cls, config: RunConfiguration) -> "GitHubClient":
        return cls(token=config.token, language=config.language, protocol=config.protocol)

    def _fetch(self, organization: str | None, username: str | None) -> Iterator:
        """Yield raw PyGithub repositories, organisation first, then user."""
        try:
            if organization:
                logger.debug("Listing repositories of organisation %s", organization)
                yield from self.gh.get_organization(organization).get_repos(type="all")
            if username:
                logger.debug("Listing repositories of user %s", username)
                yield from self.gh.get_user(username).get_repos()
        except GithubException as e:
            raise TransportError(f"GitHub API request failed: {e}") from e
        except requests.RequestException as e:
            raise TransportError(f"Could not reach GitHub: {e}") from e

    def _repo_to_info(self, repo) -> RepoInfo:
        """Convert a PyGithub repository object to RepoInfo."""
        clone_url = repo.clone_url if self.protocol == "https" else repo.ssh_url
        return RepoInfo(
            name=repo.name,
            clone_url=clone_url,
            language=repo.language,
            default_branch=repo.default_branch or FALLBACK_BRANCH,
            full_name=repo.full_name or repo.name,
        )

    def select(self, repos: Iterable[RepoInfo], skip: Iterable[str] = ()) -> list[RepoInfo]:
        """Drop skipped, duplicate and off-language repositories, sorted by name."""
        skip = set(skip)
        selected: dict[str, RepoInfo] = {}

        for repo in repos:
            if repo.name in skip or repo.name in selected:
                continue
            if repo.language != self.language:
                continue
            selected[repo.name] = repo

        return sorted(selected.values(), key=lambda r: r.name.lower())

    def list_repositories(
        self,
        config: RunConfiguration,
        skip: Iterable[str] | None = None,
    ) -> list[RepoInfo]:
        """List the repositories to audit in deterministic order."""
        if not config.organization and not config.username:
            raise ConfigurationError(
                "Missing either github.organisation or github.username key"
            )

        repos = [
            self._repo_to_info(repo)
            for repo in self._fetch(config.organization, config.username)
        ]
        selected = self.select(repos, config.skip if skip is None else skip)
        logger.info(
            "Selected %d of %d repositories (language %s)",
            len(selected), len(repos), self.language,
        )
        return selected
