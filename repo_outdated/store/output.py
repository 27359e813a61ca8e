"""Per-repository report artifacts."""

import json
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import IO, Any, Iterable

from rich.console import Console

console = Console(stderr=True)

SUMMARY_FILE = "summary.json"


class ReportWriter:
    """Write recovered ``composer outdated`` reports.

    Parsed reports go to ``<output_dir>/<repo>.json``; output that could not be
    parsed is kept verbatim in ``<output_dir>/<repo>.raw.txt``. With
    ``to_stdout`` each parsed report is printed as a single JSON line instead.
    """

    def __init__(
        self,
        output_dir: Path | str,
        to_stdout: bool = False,
        stream: IO[str] | None = None,
    ):
        self.output_dir = Path(output_dir)
        self.to_stdout = to_stdout
        self.stream = stream or sys.stdout
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def write(self, result) -> Path | None:
        """Persist one AuditResult. Returns the written file, if any."""
        name = result.repository.name

        if not result.parsed:
            path = self.output_dir / f"{name}.raw.txt"
            path.write_text(result.payload or "")
            return path

        if self.to_stdout:
            line = json.dumps({"repository": name, "report": result.payload})
            self.stream.write(line + "\n")
            self.stream.flush()
            return None

        path = self.output_dir / f"{name}.json"
        self._write_json(path, result.payload)
        return path

    def write_summary(self, results: Iterable, status: str) -> Path:
        """Write an overview of every result in the run."""
        results = list(results)
        summary = {
            "generated_at": datetime.now(timezone.utc).isoformat(),
            "status": status,
            "repositories": len(results),
            "failed": sum(1 for r in results if r.failed),
            "results": [r.to_dict() for r in results],
        }
        path = self.output_dir / SUMMARY_FILE
        self._write_json(path, summary)
        console.print(f"[green]✓[/green] Wrote summary to {path}")
        return path

    def _write_json(self, path: Path, data: Any) -> None:
        """Write data as JSON."""
        path.write_text(json.dumps(data, indent=2, default=str))
