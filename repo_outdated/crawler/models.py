"""Shared data models for repository discovery."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RepoInfo:
    """Repository metadata, read-only for the duration of a run."""
    name: str
    clone_url: str
    language: str | None
    default_branch: str = "master"
    full_name: str = ""
