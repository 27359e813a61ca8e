"""Child process execution.

Commands run to completion with no timeout: a large dependency tree can take
arbitrarily long to install. Runners are injected so tests can replace them.
"""

import logging
import os
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


@dataclass
class ProcessResult:
    """Outcome of a finished child process."""
    args: list[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def is_successful(self) -> bool:
        return self.returncode == 0


class ProcessRunner(Protocol):
    def run(self, args: list[str], cwd: Path | None = None) -> ProcessResult:
        ...


class SubprocessRunner:
    """Run commands with :func:`subprocess.run`, capturing output.

    Output is decoded as UTF-8 with undecodable bytes replaced. *env* entries
    are added on top of the current environment.
    """

    def __init__(self, env: dict[str, str] | None = None):
        self.env = dict(env or {})

    def run(self, args: list[str], cwd: Path | None = None) -> ProcessResult:
        """Run *args* in *cwd* and wait for it to exit.

        Raises OSError when the executable cannot be started.
        """
        logger.debug("Running %s in %s", " ".join(args), cwd or ".")
        result = subprocess.run(
            args,
            cwd=cwd,
            capture_output=True,
            encoding="utf-8",
            errors="replace",
            stdin=subprocess.DEVNULL,
            env={**os.environ, **self.env} if self.env else None,
        )
        if result.returncode != 0:
            logger.debug("%s exited with %d", args[0], result.returncode)
        return ProcessResult(
            args=list(args),
            returncode=result.returncode,
            stdout=result.stdout,
            stderr=result.stderr,
        )
