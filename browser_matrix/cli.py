"""CLI entry point for browser-matrix."""

from __future__ import annotations

import asyncio
import json
import logging
import os
import shlex
import sqlite3
from typing import Iterable, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

import browser_matrix
from browser_matrix.core.errors import BrowserMatrixError, ConfigurationError
from browser_matrix.core.models import AvailableBrowser, TargetSelection

app = typer.Typer(
    name="browser-matrix",
    help="Pick cloud test browsers from a spec file and run the suite on them.",
    no_args_is_help=True,
)
console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger(__name__)

_SETTING_ENV_VARS = {
    "specs-file": "BROWSER_MATRIX_SPECS",
    "runner-command": "BROWSER_MATRIX_RUNNER",
    "browsers-var": "BROWSER_MATRIX_BROWSERS_VAR",
}


@app.callback()
def main(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug logging"
    ),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _resolve_setting(key: str, flag: Optional[str]) -> str:
    """Resolve a setting from CLI flag → env var → config DB → default."""
    if flag:
        return flag
    env_value = os.environ.get(_SETTING_ENV_VARS[key])
    if env_value:
        return env_value
    try:
        from browser_matrix.data.store import DataStore

        store = DataStore()
        stored = store.get_config(key)
        store.close()
        if stored:
            return stored
    except (OSError, sqlite3.Error):
        logger.debug("Config store unavailable", exc_info=True)

    from browser_matrix.core.runner import (
        DEFAULT_BROWSERS_FILE_VAR,
        DEFAULT_RUNNER_COMMAND,
    )
    from browser_matrix.data.loader import DEFAULT_SPECS_FILE

    return {
        "specs-file": DEFAULT_SPECS_FILE,
        "runner-command": " ".join(DEFAULT_RUNNER_COMMAND),
        "browsers-var": DEFAULT_BROWSERS_FILE_VAR,
    }[key]


def _report_error(error: BrowserMatrixError) -> None:
    if isinstance(error, ConfigurationError):
        err_console.print(f"[red]{error.headline}:[/]")
        # Plain write so the JSON is not re-wrapped or highlighted.
        err_console.file.write(error.spec_json() + "\n")
        err_console.print("[red]Exiting...[/]")
    else:
        err_console.print(f"[red]Error: {error}[/]")


def _fetch_available(provider_name: str) -> list[AvailableBrowser]:
    from browser_matrix.core.catalog import fetch_catalog
    from browser_matrix.providers import get_provider_class

    try:
        provider_class = get_provider_class(provider_name)
    except ValueError as e:
        err_console.print(f"[red]{e}[/]")
        raise typer.Exit(1)

    has_creds, missing = provider_class.check_credentials()
    if not has_creds:
        err_console.print(
            f"[red]Error: {', '.join(missing)} environment variable(s) not set.[/]"
        )
        raise typer.Exit(1)

    err_console.print("[dim]Fetching available browsers...[/]")
    return asyncio.run(fetch_catalog(provider_class.from_env()))


def _select_targets(specs_file: str, provider_name: str) -> TargetSelection:
    from browser_matrix.core.matcher import resolve_targets
    from browser_matrix.data.loader import load_grouped_specs

    grouped = load_grouped_specs(specs_file)
    catalog = _fetch_available(provider_name)
    err_console.print(
        f"[dim]Matching {len(grouped)} spec group(s) against "
        f"{len(catalog)} browsers...[/]"
    )
    selection = resolve_targets(catalog, grouped)
    for warning in selection.warnings:
        err_console.print(f"[yellow]Warning: {warning}[/]")
    return selection


def _browser_table(browsers: Iterable[AvailableBrowser], title: str) -> Table:
    table = Table(title=title)
    table.add_column("OS", style="cyan")
    table.add_column("OS Version")
    table.add_column("Browser", style="green")
    table.add_column("Version")
    table.add_column("Device")
    for b in browsers:
        table.add_row(
            b.os,
            b.os_version,
            b.browser,
            b.browser_version or "-",
            b.device or "-",
        )
    return table


@app.command()
def run(
    specs: Optional[str] = typer.Option(
        None, "--specs", "-s", help="Path to the grouped browser spec file"
    ),
    runner_command: Optional[str] = typer.Option(
        None, "--runner-command", help="Test runner command line"
    ),
    browsers_var: Optional[str] = typer.Option(
        None, "--browsers-var", help="Env var carrying the targets file path"
    ),
    provider: str = typer.Option(
        "browserstack", "--provider", "-p", help="Device cloud provider"
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Resolve targets but do not start the runner"
    ),
) -> None:
    """Resolve target browsers and run the test suite against them."""
    from browser_matrix.core.runner import RunnerConfig, run_tests

    specs_file = _resolve_setting("specs-file", specs)
    try:
        command = shlex.split(_resolve_setting("runner-command", runner_command))
    except ValueError as e:
        err_console.print(f"[red]Error: invalid runner command: {e}[/]")
        raise typer.Exit(1)
    config = RunnerConfig(
        command=command,
        browsers_file_var=_resolve_setting("browsers-var", browsers_var),
    )
    if not config.command:
        err_console.print("[red]Error: runner command is empty[/]")
        raise typer.Exit(1)

    try:
        selection = _select_targets(specs_file, provider)
        console.print(
            f"[green]{len(selection.browsers)} target browser(s) selected[/]"
        )
        if dry_run:
            console.print(_browser_table(selection.browsers, "Target Browsers"))
            console.print(f"[dim]Would run: {shlex.join(config.command)}[/]")
            raise typer.Exit(0)
        result = run_tests(selection.browsers, config)
    except BrowserMatrixError as e:
        _report_error(e)
        raise typer.Exit(1)

    try:
        from browser_matrix.data.store import DataStore

        store = DataStore()
        store.record_run(specs_file, len(selection.browsers), result)
        store.close()
    except (OSError, sqlite3.Error):
        logger.warning("Could not record run history", exc_info=True)

    if result.success:
        console.print(
            f"[green]Test run passed in {result.duration_seconds:.1f}s[/]"
        )
        raise typer.Exit(0)

    err_console.print(f"[red]Test runner exited with code {result.exit_code}[/]")
    raise typer.Exit(result.exit_code if result.exit_code > 0 else 1)


@app.command()
def resolve(
    specs: Optional[str] = typer.Option(
        None, "--specs", "-s", help="Path to the grouped browser spec file"
    ),
    provider: str = typer.Option(
        "browserstack", "--provider", "-p", help="Device cloud provider"
    ),
    output_format: str = typer.Option(
        "table", "--format", "-f", help="Output format: table, json or karma"
    ),
) -> None:
    """Print the browsers a spec file resolves to, without running tests."""
    from browser_matrix.core.runner import launcher_profiles

    if output_format not in ("table", "json", "karma"):
        err_console.print("[red]Unknown format. Use table, json or karma.[/]")
        raise typer.Exit(1)

    specs_file = _resolve_setting("specs-file", specs)
    try:
        selection = _select_targets(specs_file, provider)
    except BrowserMatrixError as e:
        _report_error(e)
        raise typer.Exit(1)

    if output_format == "json":
        typer.echo(json.dumps([b.to_dict() for b in selection.browsers], indent=2))
    elif output_format == "karma":
        profiles = launcher_profiles(selection.browsers)
        typer.echo(
            json.dumps(
                {"customLaunchers": profiles, "browsers": list(profiles)},
                indent=2,
            )
        )
    else:
        console.print(_browser_table(selection.browsers, "Target Browsers"))


@app.command()
def catalog(
    provider: str = typer.Option(
        "browserstack", "--provider", "-p", help="Device cloud provider"
    ),
    os_name: Optional[str] = typer.Option(
        None, "--os", help="Only show entries for this OS"
    ),
    browser: Optional[str] = typer.Option(
        None, "--browser", "-b", help="Only show entries for this browser"
    ),
) -> None:
    """List the stable browsers the provider currently offers."""
    try:
        available = _fetch_available(provider)
    except BrowserMatrixError as e:
        _report_error(e)
        raise typer.Exit(1)

    if os_name:
        available = [b for b in available if b.os == os_name]
    if browser:
        available = [b for b in available if b.browser == browser]

    if not available:
        console.print("[yellow]No browsers match the given filters.[/]")
        raise typer.Exit(0)

    console.print(_browser_table(available, "Available Browsers"))


@app.command()
def config(
    action: str = typer.Argument(
        "get", help="Action: get or set"
    ),
    key: Optional[str] = typer.Argument(
        None, help="Config key (specs-file, runner-command, browsers-var)"
    ),
    value: Optional[str] = typer.Argument(
        None, help="Value to set"
    ),
) -> None:
    """View or modify configuration."""
    from browser_matrix.data.store import CONFIG_KEYS, DataStore

    store = DataStore()

    if action == "get":
        if key:
            val = store.get_config(key)
            if val is not None:
                console.print(f"{key} = {val}")
            else:
                console.print(f"[yellow]{key} is not set[/]")
        else:
            for k in CONFIG_KEYS:
                val = store.get_config(k)
                console.print(f"{k} = {val or '(not set)'}")
    elif action == "set":
        if not key or value is None:
            console.print("[red]Usage: browser-matrix config set <key> <value>[/]")
            store.close()
            raise typer.Exit(1)
        if key not in CONFIG_KEYS:
            console.print(
                f"[red]Unknown config key: {key}. "
                f"Valid keys: {', '.join(CONFIG_KEYS)}[/]"
            )
            store.close()
            raise typer.Exit(1)
        if key == "runner-command":
            try:
                parts = shlex.split(value)
            except ValueError as e:
                console.print(f"[red]Invalid runner command: {e}[/]")
                store.close()
                raise typer.Exit(1)
            if not parts:
                console.print("[red]Runner command cannot be empty[/]")
                store.close()
                raise typer.Exit(1)
        store.set_config(key, value)
        console.print(f"[green]Set {key} = {value}[/]")
    else:
        console.print("[red]Unknown action. Use 'get' or 'set'.[/]")
        store.close()
        raise typer.Exit(1)

    store.close()


@app.command()
def history(
    limit: int = typer.Option(10, "--limit", "-n", help="Number of runs to show"),
) -> None:
    """Show recent test runs."""
    from browser_matrix.data.store import DataStore

    store = DataStore()
    runs = store.recent_runs(limit)
    store.close()

    if not runs:
        console.print("[yellow]No runs recorded yet.[/]")
        raise typer.Exit(0)

    table = Table(title="Recent Runs")
    table.add_column("When", style="cyan")
    table.add_column("Spec File")
    table.add_column("Targets", justify="right")
    table.add_column("Outcome")
    table.add_column("Exit Code", justify="right")
    table.add_column("Duration", justify="right")
    for r in runs:
        outcome_style = "green" if r["outcome"] == "success" else "red"
        table.add_row(
            r["created_at"],
            r["specs_file"],
            str(r["target_count"]),
            f"[{outcome_style}]{r['outcome']}[/]",
            str(r["exit_code"]),
            f"{r['duration_seconds'] or 0:.1f}s",
        )
    console.print(table)


@app.command()
def version() -> None:
    """Print version."""
    console.print(f"browser-matrix {browser_matrix.__version__}")


if __name__ == "__main__":
    app()
