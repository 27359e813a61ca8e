"""Repository discovery and local working copies."""

from .models import RepoInfo
from .github_client import GitHubClient
from .repo_manager import RepoManager

__all__ = ["RepoInfo", "GitHubClient", "RepoManager"]
