"""Composer invocations used by the audit."""

import logging
from pathlib import Path

from .process import ProcessResult, ProcessRunner, SubprocessRunner

logger = logging.getLogger(__name__)


class Composer:
    """Runs ``composer install`` and ``composer outdated`` in a repository."""

    def __init__(self, composer_path: str, runner: ProcessRunner | None = None):
        self.composer_path = composer_path
        self.runner = runner or SubprocessRunner()

    def _run(self, args: list[str], manifest_dir: Path) -> ProcessResult:
        try:
            return self.runner.run(args, cwd=manifest_dir)
        except OSError as e:
            logger.debug("Could not start %s: %s", self.composer_path, e)
            return ProcessResult(args=args, returncode=127, stderr=str(e))

    def install(self, manifest_dir: Path) -> ProcessResult:
        """Install dependencies quietly."""
        return self._run([self.composer_path, "-q", "install"], manifest_dir)

    def outdated(self, manifest_dir: Path, minor_only: bool = False) -> ProcessResult:
        """Report outdated direct dependencies as JSON."""
        command = [self.composer_path, "outdated", "-f", "json", "--direct"]
        if minor_only:
            command.append("-m")
        return self._run(command, manifest_dir)
