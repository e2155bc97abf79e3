"""Command line interface for LogFinder."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from logfinder.config import AppConfig
from logfinder.errors import ConnectError, FetchError
from logfinder.models import CandidateSet
from logfinder.search.coordinator import search as run_search
from logfinder.store.base import RemoteStore
from logfinder.store.local import LocalStore
from logfinder.store.smb import SMBStore
from logfinder.transfer.fetcher import fetch as fetch_file
from logfinder.transfer.fetcher import local_destination

LOGGER = logging.getLogger(__name__)

console = Console()
app = typer.Typer(help="LogFinder - search log trees on an SMB share")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _prompt_missing(value: Optional[str], text: str, *, hide_input: bool = False) -> str:
    if value is None:
        value = typer.prompt(text, hide_input=hide_input)
    return value.strip()


def _prompt_credentials(
    config: AppConfig, share: Optional[str], username: Optional[str], password: Optional[str]
) -> tuple[str, str]:
    config.share = _prompt_missing(share, "Enter SMB Share Name")
    username = _prompt_missing(username, "Enter SMB Username")
    password = _prompt_missing(password, "Enter SMB Password", hide_input=True)
    return username, password


def _open_store(
    config: AppConfig,
    *,
    local: Optional[Path],
    username: str = "",
    password: str = "",
) -> RemoteStore:
    """Build and connect the store, exiting with status 1 when that fails."""
    if local is not None:
        store: RemoteStore = LocalStore(local)
        target = str(local)
    else:
        store = SMBStore(
            config.server,
            config.share,
            username,
            password,
            port=config.port,
            connection_timeout=config.connection_timeout,
        )
        target = f"{config.share} on {config.server}"
        console.print(f"Attempting to connect to SMB share {escape(target)}")

    try:
        store.connect()
    except ConnectError as exc:
        LOGGER.critical("Failed to connect to SMB share: %s", exc)
        console.print(f"[red]Failed to connect to {escape(target)}.[/red]")
        raise typer.Exit(code=1) from exc

    console.print("Connection established.")
    return store


def _fetch(store: RemoteStore, remote: str, output: Optional[Path] = None) -> None:
    target = local_destination(remote, output)
    console.print(f"Fetching '{escape(remote)}' to '{escape(str(target))}'...")
    try:
        copied = fetch_file(store, remote, target)
    except FetchError as exc:
        LOGGER.error("Failed to fetch %s: %s", remote, exc)
        console.print(f"[red]Failed to fetch: {escape(str(exc))}[/red]")
        return
    console.print(f"Copied {copied} bytes. Fetched to '{escape(str(target))}'.")


@app.command()
def search(
    term: Optional[str] = typer.Option(None, "--term", "-t", help="Literal text to search for"),
    server: str = typer.Option(AppConfig().server, help="SMB server address"),
    share: Optional[str] = typer.Option(None, help="SMB share name"),
    username: Optional[str] = typer.Option(None, "--username", "-u", help="SMB username"),
    password: Optional[str] = typer.Option(None, help="SMB password"),
    port: int = typer.Option(AppConfig().port, help="SMB server port"),
    roots: Optional[List[str]] = typer.Option(None, "--root", help="Logical server to scan (repeatable)"),
    template: str = typer.Option(AppConfig().path_template, help="Base path template containing {root}"),
    suffix: str = typer.Option(AppConfig().suffix, help="File name suffix to search"),
    workers: int = typer.Option(AppConfig().max_workers, help="Maximum concurrent file scans"),
    discovery_workers: Optional[int] = typer.Option(
        AppConfig().discovery_workers, help="Maximum concurrent root walks (default: one per root)"
    ),
    timeout: Optional[float] = typer.Option(None, help="Give up on unfinished scans after N seconds"),
    retries: int = typer.Option(AppConfig().open_retries, help="Retries for a file that fails to open"),
    first_match: bool = typer.Option(False, "--first-match", help="Stop after the first match"),
    local: Optional[Path] = typer.Option(
        None, "--local", help="Search a local or mounted directory instead of SMB", resolve_path=True
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Search every log file under the configured roots for a string."""
    _setup_logging(verbose)
    config = AppConfig(
        server=server,
        port=port,
        roots=tuple(roots) if roots else AppConfig().roots,
        path_template=template,
        suffix=suffix,
        max_workers=workers,
        discovery_workers=discovery_workers,
        timeout=timeout,
        open_retries=retries,
    )
    try:
        search_roots = config.search_roots()
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--template") from exc

    credentials = ("", "")
    if local is None:
        credentials = _prompt_credentials(config, share, username, password)
    needle = _prompt_missing(term, "Enter search string")

    store = _open_store(config, local=local, username=credentials[0], password=credentials[1])
    try:
        def report_discovery(candidates: CandidateSet) -> None:
            for root, error in candidates.errors.items():
                console.print(f"[yellow]Failed to find log files on {escape(root)}: {escape(error)}[/yellow]")
            if candidates:
                console.print(
                    f"\nTotal {len(candidates)} log files discovered. Searching for '{escape(needle)}'..."
                )

        console.print("\nInitiating parallel file discovery...")
        outcome = run_search(
            store,
            search_roots,
            needle,
            suffix=config.suffix,
            discovery_workers=config.discovery_workers,
            on_discovered=report_discovery,
            max_workers=config.max_workers,
            buffer_size=config.buffer_size,
            open_retries=config.open_retries,
            timeout=config.timeout,
            stop_after=1 if first_match else None,
            on_match=lambda path: console.print(f"Found: {escape(path)}"),
        )
        if not outcome.discovered:
            console.print("\n[yellow]No log files found.[/yellow]")
            return
        if outcome.failed:
            console.print(f"[yellow]{len(outcome.failed)} file(s) could not be read.[/yellow]")
        if outcome.timed_out:
            console.print(f"[yellow]{len(outcome.timed_out)} file(s) timed out.[/yellow]")
        if not outcome.matches:
            console.print(f"\n[yellow]No matches for '{escape(needle)}'.[/yellow]")
            return

        console.print("\n--- Search Complete ---")
        console.print(f"Total scanned: {outcome.discovered}")
        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("#")
        table.add_column("Matched file")
        for index, path in enumerate(outcome.matches, start=1):
            table.add_row(str(index), escape(path))
        console.print(table)

        remote = typer.prompt(
            "\nEnter file path to fetch (or press Enter to skip)", default="", show_default=False
        ).strip()
        if remote:
            _fetch(store, remote)
        else:
            console.print("Fetch skipped.")
        console.print("Program complete.")
    finally:
        store.close()


@app.command()
def fetch(
    remote: str = typer.Argument(..., help="Share-relative path of the file to fetch"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Local file or directory"),
    server: str = typer.Option(AppConfig().server, help="SMB server address"),
    share: Optional[str] = typer.Option(None, help="SMB share name"),
    username: Optional[str] = typer.Option(None, "--username", "-u", help="SMB username"),
    password: Optional[str] = typer.Option(None, help="SMB password"),
    port: int = typer.Option(AppConfig().port, help="SMB server port"),
    local: Optional[Path] = typer.Option(
        None, "--local", help="Fetch from a local or mounted directory instead of SMB", resolve_path=True
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Copy one remote file to local storage."""
    _setup_logging(verbose)
    config = AppConfig(server=server, port=port)
    credentials = ("", "")
    if local is None:
        credentials = _prompt_credentials(config, share, username, password)
    store = _open_store(config, local=local, username=credentials[0], password=credentials[1])
    try:
        _fetch(store, remote.strip(), output)
    finally:
        store.close()
