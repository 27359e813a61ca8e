"""Audit pipeline.

Each selected repository goes through the stages::

    selected -> synced -> installed -> audited -> parsed -> reported

strictly one repository at a time, in name order. Without fail-fast a failing
stage is recorded on the repository's AuditResult and the pipeline keeps going;
with fail-fast the first failure ends the whole run.
"""

import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable

from rich.console import Console

from .auditor.composer import Composer
from .auditor.output_repair import Parsed, recover
from .config import RunConfiguration
from .crawler.github_client import GitHubClient
from .crawler.models import RepoInfo
from .crawler.repo_manager import RepoManager
from .errors import VersionControlError
from .store.output import ReportWriter

logger = logging.getLogger(__name__)
console = Console(stderr=True)


class RunStage(str, Enum):
    """Last stage a repository reached."""

    SELECTED = "selected"
    SYNCED = "synced"
    INSTALLED = "installed"
    AUDITED = "audited"
    PARSED = "parsed"
    REPORTED = "reported"


@dataclass
class AuditResult:
    """Outcome of auditing one repository."""

    repository: RepoInfo
    stage: RunStage = RunStage.SELECTED
    synced: bool = False
    install_succeeded: bool = False
    audit_succeeded: bool = False
    parsed: bool = False
    payload: Any = None
    recovery_applied: bool = False
    report_path: Path | None = None
    errors: list[str] = field(default_factory=list)

    @property
    def failed(self) -> bool:
        return bool(self.errors)

    @property
    def outdated_count(self) -> int | None:
        """Number of outdated packages in a parsed report."""
        if self.parsed and isinstance(self.payload, dict):
            installed = self.payload.get("installed")
            if isinstance(installed, list):
                return len(installed)
        return None

    def to_dict(self) -> dict:
        """Convert the result to a plain dictionary."""
        return {
            "repository": self.repository.name,
            "stage": self.stage.value,
            "synced": self.synced,
            "install_succeeded": self.install_succeeded,
            "audit_succeeded": self.audit_succeeded,
            "parsed": self.parsed,
            "recovery_applied": self.recovery_applied,
            "outdated": self.outdated_count,
            "report_path": str(self.report_path) if self.report_path else None,
            "errors": list(self.errors),
        }


class AuditPipeline:
    """Runs the audit over every selected repository.

    Usage::

        pipeline = AuditPipeline(config)
        results = pipeline.run()
        if pipeline.status == "aborted":
            ...
    """

    def __init__(
        self,
        config: RunConfiguration,
        source: GitHubClient | None = None,
        repo_manager: RepoManager | None = None,
        composer: Composer | None = None,
        writer: ReportWriter | None = None,
        on_result: Callable[[AuditResult], None] | None = None,
    ):
        self.config = config
        self.source = source or GitHubClient.from_config(config)
        self.repo_manager = repo_manager or RepoManager(config.output_dir)
        self.composer = composer or Composer(config.composer_path)
        self.writer = writer
        self.on_result = on_result
        self.status = "idle"
        self.repositories: list[RepoInfo] | None = None

    def select(self) -> list[RepoInfo]:
        """Fetch the ordered repository list once per pipeline."""
        if self.repositories is None:
            self.repositories = self.source.list_repositories(self.config)
        return self.repositories

    def run(self) -> list[AuditResult]:
        """Audit every selected repository and return one result per repository."""
        original_cwd = os.getcwd()
        self.status = "running"
        results: list[AuditResult] = []

        try:
            repositories = self.select()
            console.print(f"[bold]Selected {len(repositories)} repositories[/bold]")

            if self.config.dry_run:
                for repo in repositories:
                    console.print(f"  {repo.name} ({repo.clone_url})")
                    results.append(AuditResult(repository=repo))
                self.status = "completed"
                return results

            for repo in repositories:
                result = self.audit(repo)
                results.append(result)
                if self.on_result:
                    self.on_result(result)

                if result.failed and self.config.fail_fast:
                    console.print(
                        f"[red]Aborting:[/red] {repo.name} failed and fail-fast is set"
                    )
                    self.status = "aborted"
                    return results

            self.status = "completed"
            return results
        except Exception:
            self.status = "failed"
            raise
        finally:
            os.chdir(original_cwd)

    def _fail(self, result: AuditResult, message: str) -> bool:
        """Record a failure; True when the repository should stop here."""
        result.errors.append(message)
        console.print(f"  [red]✗[/red] {result.repository.name}: {message}")
        return self.config.fail_fast

    def audit(self, repo: RepoInfo) -> AuditResult:
        """Run sync, install, outdated and report for a single repository."""
        result = AuditResult(repository=repo)
        local_path = self.repo_manager.get_repo_path(repo)

        # ---- SYNC ----
        try:
            self.repo_manager.sync(repo)
            result.synced = True
        except VersionControlError as e:
            if self._fail(result, str(e)):
                return result
            if not (local_path / ".git").exists():
                return result
            logger.info("Auditing existing working copy of %s", repo.name)
        result.stage = RunStage.SYNCED

        # ---- INSTALL ----
        installed = self.composer.install(local_path)
        result.install_succeeded = installed.is_successful
        result.stage = RunStage.INSTALLED
        if not installed.is_successful:
            if self._fail(result, f"composer install exited with {installed.returncode}"):
                return result

        # ---- OUTDATED ----
        report = self.composer.outdated(local_path, minor_only=self.config.minor_only)
        result.audit_succeeded = report.is_successful
        result.stage = RunStage.AUDITED
        if not report.is_successful:
            if self._fail(result, f"composer outdated exited with {report.returncode}"):
                return result

        # ---- PARSE ----
        recovered = recover(report.stdout)
        result.recovery_applied = recovered.recovery_applied
        result.stage = RunStage.PARSED
        if isinstance(recovered, Parsed):
            result.parsed = True
            result.payload = recovered.value
            if recovered.recovery_applied:
                logger.info("Stripped preamble from composer output for %s", repo.name)
        else:
            result.payload = recovered.raw_text
            if self._fail(result, "composer outdated output is not valid JSON"):
                return result

        # ---- REPORT ----
        if self.writer:
            result.report_path = self.writer.write(result)
        result.stage = RunStage.REPORTED

        if not result.failed:
            count = result.outdated_count
            detail = f"{count} outdated" if count is not None else "reported"
            console.print(f"  [green]✓[/green] {repo.name}: {detail}")

        return result
