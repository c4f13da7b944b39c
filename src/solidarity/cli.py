"""in-solidarity CLI: Typer application with check, rules and init commands."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import NoReturn, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from solidarity import __version__

app = typer.Typer(
    name="solidarity",
    help="Flag non-inclusive language introduced by a code change.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console(stderr=True)
logger = logging.getLogger("solidarity")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False, show_time=False)],
        force=True,
    )


def _resolve_repo_root(required: bool = True) -> Path:
    """Find the git repo root. Without *required*, fall back to the cwd."""
    from solidarity.git.adapter import GitError, get_repo_root

    try:
        return get_repo_root()
    except GitError as exc:
        if not required:
            logger.debug("not in a git repository (%s); using %s", exc, Path.cwd())
            return Path.cwd()
        console.print(f"[bold red]Error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc


def _fail(label: str, exc: Exception, fmt: str, *, config_error: bool = False) -> NoReturn:
    """Report a run that produced no annotations and exit 2."""
    from solidarity.output.checks import error_output

    console.print(f"[bold red]{label}:[/bold red] {exc}")
    if fmt == "checks":
        print(json.dumps(error_output(str(exc), config_error=config_error), indent=2))
    raise typer.Exit(code=2) from exc


def _read_diff(diff_file: Optional[str], repo_root: Path, from_ref: Optional[str], to_ref: str) -> str:
    from solidarity.git.adapter import get_range_diff, get_staged_diff

    if diff_file == "-":
        return sys.stdin.read()
    if diff_file:
        return Path(diff_file).read_text(encoding="utf-8", errors="replace")
    if from_ref:
        return get_range_diff(repo_root, from_ref, to_ref)
    return get_staged_diff(repo_root)


# ── check ─────────────────────────────────────────────────────────────────────


@app.command()
def check(
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .solidarity.toml"),
    format: Optional[str] = typer.Option(None, "--format", "-f", help="Output format: terminal | json | sarif | checks"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Write report to file"),
    diff_file: Optional[str] = typer.Option(None, "--diff-file", "-d", help="Read the diff from a file ('-' for stdin) instead of git"),
    from_ref: Optional[str] = typer.Option(None, "--from", help="Base ref: check BASE...TO instead of staged changes"),
    to_ref: str = typer.Option("HEAD", "--to", help="Head ref used with --from"),
    fail_on: Optional[str] = typer.Option(None, "--fail-on", help="Exit 1 at or above: notice | warning | failure"),
    github: bool = typer.Option(False, "--github", help="Emit GitHub Actions workflow annotations"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Check added lines of a diff for non-inclusive language."""
    from solidarity.config.loader import ConfigError, load_config
    from solidarity.config.schema import OUTPUT_FORMATS, Level
    from solidarity.git.adapter import GitError
    from solidarity.git.diff_parser import ParseError
    from solidarity.output import checks, json_report, sarif, terminal
    from solidarity.rules.ruleset import MatchError
    from solidarity.scanner.engine import check as run_check

    _configure_logging(verbose)

    if format and format not in OUTPUT_FORMATS:
        console.print(f"[bold red]Invalid format:[/bold red] {format}")
        raise typer.Exit(code=2)
    threshold: Optional[Level] = None
    if fail_on:
        try:
            threshold = Level.parse(fail_on)
        except ValueError as exc:
            console.print(f"[bold red]Invalid fail-on level:[/bold red] {exc}")
            raise typer.Exit(code=2) from exc

    repo_root = _resolve_repo_root(required=diff_file is None)

    # --- Load config ---
    try:
        cfg = load_config(repo_root, config)
    except ConfigError as exc:
        _fail("Config error", exc, format or "terminal", config_error=True)
    if format:
        cfg.output.format = format  # type: ignore[assignment]
    fmt = cfg.output.format
    threshold = threshold or Level.parse(cfg.check.fail_on)

    # --- Get diff ---
    try:
        diff_text = _read_diff(diff_file, repo_root, from_ref, to_ref)
    except (GitError, OSError) as exc:
        _fail("Diff error", exc, fmt)

    # --- Run check ---
    try:
        result = run_check(diff_text, cfg)
    except MatchError as exc:
        _fail("Rule error", exc, fmt, config_error=True)
    except ParseError as exc:
        _fail("Diff error", exc, fmt)

    # --- Output ---
    report_text: Optional[str] = None
    if fmt == "terminal":
        terminal.render(result, show_summary=cfg.output.show_summary, console=console)
    elif fmt == "json":
        report_text = json_report.render(result)
    elif fmt == "sarif":
        report_text = sarif.render(result)
    elif fmt == "checks":
        report_text = json.dumps(
            checks.build_check_output(result, cfg.check.max_annotations), indent=2
        )

    if report_text is not None:
        if output:
            Path(output).write_text(report_text, encoding="utf-8")
            logger.debug("report written to %s", output)
        else:
            print(report_text)
    elif output:
        # terminal output was requested on screen; write JSON to the file
        Path(output).write_text(json_report.render(result), encoding="utf-8")

    if github or cfg.check.annotation_format == "github":
        for line in checks.workflow_commands(result.annotations, cfg.check.max_annotations):
            print(line)

    # --- Exit code ---
    if result.level >= threshold:
        raise typer.Exit(code=1)
    raise typer.Exit(code=0)


# ── rules ─────────────────────────────────────────────────────────────────────


@app.command()
def rules(
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .solidarity.toml"),
) -> None:
    """List the rules that are active for this repository."""
    from solidarity.config.loader import ConfigError, load_config
    from solidarity.rules.ruleset import MatchError, build_ruleset

    repo_root = _resolve_repo_root(required=False)
    try:
        ruleset = build_ruleset(load_config(repo_root, config))
    except (ConfigError, MatchError) as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    table = Table(title="Active rules", title_style="bold", border_style="dim")
    table.add_column("Rule", style="cyan", no_wrap=True)
    table.add_column("Level")
    table.add_column("Mode")
    table.add_column("Pattern", style="magenta")
    table.add_column("Alternatives")
    for rule in ruleset:
        table.add_row(
            rule.name,
            rule.level.label,
            rule.mode.value,
            " | ".join(rule.patterns),
            ", ".join(rule.suggestions),
        )
    Console().print(table)


# ── init ──────────────────────────────────────────────────────────────────────


@app.command()
def init() -> None:
    """Generate a starter .solidarity.toml in the repo root."""
    from solidarity.config.defaults import DEFAULT_TOML
    from solidarity.config.loader import CONFIG_FILENAME

    repo_root = _resolve_repo_root()
    config_path = repo_root / CONFIG_FILENAME

    if config_path.exists():
        console.print(f"[yellow]⚠[/yellow]  {CONFIG_FILENAME} already exists at {config_path}")
        raise typer.Exit(code=1)

    config_path.write_text(DEFAULT_TOML, encoding="utf-8")
    console.print(f"[green]✓[/green] Created {config_path}")


# ── version ───────────────────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        print(f"in-solidarity {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback,
        is_eager=True, help="Show version and exit",
    ),
) -> None:
    """in-solidarity: flag non-inclusive language before it lands."""
