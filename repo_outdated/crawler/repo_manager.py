"""Local working copies of audited repositories."""

import logging
from pathlib import Path

from ..auditor.process import ProcessResult, ProcessRunner, SubprocessRunner
from ..errors import VersionControlError
from .models import RepoInfo

logger = logging.getLogger(__name__)

# Fail instead of waiting on a credential prompt.
GIT_ENV = {"GIT_TERMINAL_PROMPT": "0"}


class RepoManager:
    """Keeps one clone per repository under *base_path*, on its default branch."""

    def __init__(
        self,
        base_path: Path | str,
        runner: ProcessRunner | None = None,
        git: str = "git",
    ):
        self.base_path = Path(base_path).resolve()
        self.runner = runner or SubprocessRunner(env=GIT_ENV)
        self.git = git

    def get_repo_path(self, repo: RepoInfo) -> Path:
        """Get local path for a repository."""
        return self.base_path / repo.name

    def _git(self, repo: RepoInfo, args: list[str], cwd: Path) -> ProcessResult:
        try:
            result = self.runner.run([self.git, *args], cwd=cwd)
        except OSError as e:
            raise VersionControlError(
                f"Could not run {self.git} for {repo.name}: {e}", repo.name
            ) from e

        if not result.is_successful:
            detail = (result.stderr or result.stdout).strip()
            raise VersionControlError(
                f"git {args[0]} failed for {repo.name}: {detail}", repo.name
            )
        return result

    def sync(self, repo: RepoInfo) -> Path:
        """Clone the repository if absent, otherwise fast-forward it.

        Either way the working copy ends up on the default branch. Returns the
        local path.
        """
        local_path = self.get_repo_path(repo)

        if not (local_path / ".git").exists():
            logger.info("Cloning repository %s...", repo.name)
            self.base_path.mkdir(parents=True, exist_ok=True)
            self._git(repo, ["clone", repo.clone_url, str(local_path)], self.base_path)
            self._git(repo, ["checkout", repo.default_branch], local_path)
        else:
            logger.info("Updating repository %s...", repo.name)
            self._git(repo, ["checkout", repo.default_branch], local_path)
            self._git(repo, ["pull", "--ff-only"], local_path)

        return local_path
