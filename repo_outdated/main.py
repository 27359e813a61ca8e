"""Main entry point for repo-outdated."""

import argparse
import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn

from .config import (
    DEFAULT_CONFIG_PATH,
    build_run_configuration,
    load_config,
    parse_skip_list,
    validate_config,
)
from .errors import ConfigurationError, TransportError
from .pipeline import AuditPipeline
from .store.output import ReportWriter

console = Console(stderr=True)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="repo-outdated",
        description="Checks configured GitHub repositories for outdated Composer dependencies.",
    )
    parser.add_argument(
        "--config", "-c",
        default=str(DEFAULT_CONFIG_PATH),
        help="Path to configuration file",
    )
    parser.add_argument(
        "--dry",
        action="store_true",
        help="List the repositories that would be audited without doing anything",
    )
    parser.add_argument(
        "--lint", "-l",
        action="store_true",
        help="Check the configuration for problems and exit",
    )
    parser.add_argument(
        "--minor-only", "-m",
        action="store_true",
        help="Only report minor version updates",
    )
    parser.add_argument(
        "--fail-fast",
        action="store_true",
        help="Stop the run at the first repository that fails",
    )
    parser.add_argument(
        "--skip",
        default="",
        help="Comma-separated repository names to skip",
    )
    parser.add_argument(
        "--stdout",
        action="store_true",
        help="Print each report as a JSON line instead of writing files",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with status 1 when any repository failed",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def run_lint(config_path: Path) -> int:
    """Report configuration problems without touching the network."""
    try:
        raw = load_config(config_path)
    except ConfigurationError as e:
        console.print(f"[red]✗[/red] {e}")
        return 1

    problems = validate_config(raw)
    if not problems:
        console.print(f"[green]✓[/green] {config_path} is valid")
        return 0

    for problem in problems:
        console.print(f"[red]✗[/red] {problem}")
    return 1


def run_audit(args: argparse.Namespace) -> int:
    config = build_run_configuration(
        load_config(Path(args.config)),
        skip=parse_skip_list(args.skip),
        minor_only=args.minor_only,
        fail_fast=args.fail_fast,
        dry_run=args.dry,
    )

    if config.dry_run:
        AuditPipeline(config).run()
        return 0

    writer = ReportWriter(config.output_dir, to_stdout=args.stdout)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("{task.completed}/{task.total}"),
        console=console,
    ) as progress:
        task = progress.add_task("Auditing repositories...", total=None)

        def advance(result) -> None:
            progress.update(task, description=f"Audited {result.repository.name}")
            progress.advance(task)

        pipeline = AuditPipeline(config, writer=writer, on_result=advance)
        progress.update(task, total=len(pipeline.select()))
        results = pipeline.run()

    writer.write_summary(results, pipeline.status)

    failed = [r for r in results if r.failed]
    console.print(
        f"\n[bold]Audited {len(results)} repositories, {len(failed)} failed[/bold]"
    )

    if pipeline.status == "aborted":
        return 1
    if args.strict and failed:
        return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    if args.lint:
        return run_lint(Path(args.config))

    try:
        return run_audit(args)
    except ConfigurationError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        return 1
    except TransportError as e:
        console.print(f"[red]GitHub error:[/red] {e}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
