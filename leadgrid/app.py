"""Typer CLI entrypoint for leadgrid."""

from __future__ import annotations

import asyncio
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

import typer
import yaml
from pydantic import ValidationError
from rich import box
from rich.console import Console
from rich.table import Table
from typer import BadParameter

from .config import AppConfig, Category, ConfigRepository, ExportConfig
from .engine import (
    GeminiRetriever,
    GeoLocation,
    Geolocator,
    IpGeolocator,
    Lead,
    Retriever,
    StaticGeolocator,
)
from .engine.exporter import CsvEncoder, export_leads
from .errors import ConfigurationError, RetrievalFailure, SessionBusyError, SessionNotStartedError
from .logging_conf import configure_logging, tail_log
from .session import FetchOutcome, FetchStatus, SearchSession

app = typer.Typer(
    help="leadgrid: collect business leads from grounded maps search",
    no_args_is_help=True,
    rich_markup_mode=None,
)
config_app = typer.Typer(
    name="config",
    help="Inspect configuration",
    no_args_is_help=True,
    rich_markup_mode=None,
)
log_app = typer.Typer(
    name="log",
    help="Inspect log files",
    no_args_is_help=True,
    rich_markup_mode=None,
)

console = Console()

RAW_PREVIEW_CHARS = 500

EXAMPLE_SEARCHES: tuple[tuple[str, Category], ...] = (
    ("Coworking spaces", Category.REAL_ESTATE),
    ("Sushi bars in Seattle", Category.RESTAURANTS),
    ("Car repair shops", Category.AUTOMOTIVE),
)


@dataclass
class AppState:
    repository: ConfigRepository
    config: AppConfig
    retriever: Retriever
    outputs_dir: Path
    logs_dir: Path


def build_state(verbose: bool, api_key: str | None = None) -> AppState:
    repository = ConfigRepository()
    config = repository.load()
    locator = repository.locator
    configure_logging(verbose=verbose, log_dir=locator.logs_dir)
    # The credential is resolved here, at the edge, and injected into the retriever.
    key = api_key or os.environ.get(config.retrieval.api_key_env)
    retriever = GeminiRetriever(config.retrieval, api_key=key)
    return AppState(
        repository=repository,
        config=config,
        retriever=retriever,
        outputs_dir=config.resolved_outputs_dir(locator.home),
        logs_dir=locator.logs_dir,
    )


def _get_state(ctx: typer.Context) -> AppState:
    state = ctx.obj
    if state is None:
        state = build_state(verbose=False)
        ctx.obj = state
    return state


def _new_session(state: AppState, location: GeoLocation | None = None) -> SearchSession:
    """Build a session; fixed coordinates take precedence over the IP lookup."""

    geo = state.config.geolocation
    geolocator: Geolocator
    if location is not None:
        geolocator = StaticGeolocator(location)
    else:
        geolocator = IpGeolocator(geo.lookup_url, timeout=geo.timeout)
    return SearchSession(
        retriever=state.retriever,
        geolocator=geolocator,
        geolocation_timeout=geo.timeout,
    )


def _parse_category(value: str | None) -> Category:
    try:
        return Category.parse(value)
    except ValueError as exc:
        choices = ", ".join(member.value for member in Category)
        raise BadParameter(f"{exc}. Choose one of: {choices}") from exc


def _parse_location(lat: float | None, lng: float | None) -> GeoLocation | None:
    if lat is None and lng is None:
        return None
    if lat is None or lng is None:
        raise BadParameter("--lat and --lng must be given together.")
    try:
        return GeoLocation(latitude=lat, longitude=lng)
    except ValueError as exc:
        raise BadParameter(str(exc)) from exc


def _export_settings(
    base: ExportConfig, fmt: str | None, columns: str | None
) -> ExportConfig:
    payload = base.model_dump()
    if fmt:
        payload["format"] = fmt
    if columns:
        payload["columns"] = columns
    try:
        return ExportConfig.model_validate(payload)
    except ValidationError as exc:
        raise BadParameter(str(exc)) from exc


def _display_phone(lead: Lead) -> str:
    phone = lead.phone
    if not phone or phone == "N/A":
        return "N/A"
    return phone


def _render_leads_table(leads: Sequence[Lead]) -> Table:
    table = Table(
        title=f"Found {len(leads)} results",
        caption=f"Showing {len(leads)} results",
        box=box.SIMPLE_HEAD,
    )
    table.add_column("#", style="dim", justify="right")
    table.add_column("Name", style="cyan", overflow="fold")
    table.add_column("Phone", style="green", no_wrap=True)
    for index, lead in enumerate(leads, start=1):
        table.add_row(str(index), lead.name or "-", _display_phone(lead))
    return table


def _render_raw(text: str, full: bool) -> None:
    console.print(f"Response data ({len(text)} chars)", style="dim")
    if not full and len(text) > RAW_PREVIEW_CHARS:
        text = text[:RAW_PREVIEW_CHARS] + "\n\n... [Content Truncated]"
    console.print(text, markup=False, highlight=False)


def _report_outcome(outcome: FetchOutcome) -> None:
    if outcome.status is FetchStatus.EMPTY_RESULT:
        console.print(
            "No structured data could be parsed from the results. "
            "Try a different query or location.",
            style="yellow",
        )
    elif outcome.status is FetchStatus.NO_NEW_RESULTS:
        console.print(
            "No additional unique results were found by the model.", style="yellow"
        )
    elif outcome.status is FetchStatus.ADDED:
        console.print(f"Added {outcome.added_count} new leads.", style="green")


def _write_export(session: SearchSession, settings: ExportConfig, outputs_dir: Path) -> Path | None:
    path = export_leads(
        session.leads,
        outputs_dir,
        fmt=settings.format,
        columns=settings.columns,
        prefix=settings.filename_prefix,
    )
    if path is None:
        console.print("Nothing to export yet.", style="yellow")
    else:
        console.print(f"Exported {len(session.leads)} leads to {path}", style="green")
    return path


async def _collect(
    session: SearchSession,
    query: str,
    category: Category,
    use_location: bool,
    more: int,
) -> list[FetchOutcome]:
    outcomes = [await session.start(query, category, use_location=use_location)]
    if outcomes[0].status is not FetchStatus.ADDED:
        return outcomes
    for _ in range(more):
        try:
            outcome = await session.load_more()
        except RetrievalFailure as exc:
            console.print(f"Failed to load more results: {exc}", style="red")
            break
        outcomes.append(outcome)
        if outcome.status is not FetchStatus.ADDED:
            break
    return outcomes


app.add_typer(config_app, name="config", help="Show configuration and its location")
app.add_typer(log_app, name="log", help="View log files")


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging."),
    api_key: Optional[str] = typer.Option(
        None, "--api-key", help="Grounding API key (defaults to the configured env variable)."
    ),
) -> None:
    ctx.obj = build_state(verbose, api_key)


@app.command("search", help="Run a search and print the collected leads.")
def search(
    ctx: typer.Context,
    query: str = typer.Argument(..., help="What to look for, e.g. 'Italian food in Chicago, IL'."),
    category: str = typer.Option(Category.ALL.value, "--category", "-c", help="Category filter."),
    near_me: bool = typer.Option(False, "--near-me", help="Ground the search on your location."),
    lat: Optional[float] = typer.Option(None, "--lat", help="Latitude to search around."),
    lng: Optional[float] = typer.Option(None, "--lng", help="Longitude to search around."),
    more: int = typer.Option(0, "--more", min=0, help="Extra 'load more' rounds after the first batch."),
    export: bool = typer.Option(False, "--export", help="Write the leads to a dated file."),
    stdout: bool = typer.Option(False, "--stdout", help="Print the CSV instead of the table."),
    fmt: Optional[str] = typer.Option(None, "--format", help="Export format: csv or json."),
    columns: Optional[str] = typer.Option(None, "--columns", help="Comma separated fields to export."),
    show_raw: bool = typer.Option(False, "--show-raw", help="Print the raw model output."),
    full_raw: bool = typer.Option(False, "--full-raw", help="Do not truncate raw output."),
    quiet: bool = typer.Option(False, "--quiet", help="Only print a one line summary."),
) -> None:
    state = _get_state(ctx)
    selected = _parse_category(category)
    location = _parse_location(lat, lng)
    settings = _export_settings(state.config.export, fmt, columns)
    if not query.strip():
        raise BadParameter("query cannot be empty")

    session = _new_session(state, location)
    use_location = near_me or location is not None
    try:
        with console.status("Searching…", spinner="dots"):
            outcomes = asyncio.run(_collect(session, query, selected, use_location, more))
    except (ConfigurationError, RetrievalFailure) as exc:
        console.print(f"Error encountered: {exc}", style="red")
        raise typer.Exit(code=1)

    first = outcomes[0]
    if first.status is FetchStatus.EMPTY_RESULT:
        _report_outcome(first)
        if show_raw:
            _render_raw(session.raw_transcript, full_raw)
        raise typer.Exit(code=0)
    for outcome in outcomes[1:]:
        if outcome.status is FetchStatus.NO_NEW_RESULTS:
            _report_outcome(outcome)

    leads = session.leads
    if stdout:
        typer.echo(CsvEncoder(settings.columns).encode(leads))
    elif quiet:
        console.print(f"Collected {len(leads)} leads in {len(outcomes)} batches")
    else:
        console.print(_render_leads_table(leads))
    if show_raw:
        _render_raw(session.raw_transcript, full_raw)
    if export:
        _write_export(session, settings, state.outputs_dir)


@app.command("interactive", help="Search, load more and export from a prompt loop.")
def interactive(
    ctx: typer.Context,
    near_me: bool = typer.Option(False, "--near-me", help="Ground searches on your location."),
) -> None:
    state = _get_state(ctx)
    settings = state.config.export
    session = _new_session(state)
    encoder = CsvEncoder(settings.columns)

    def _new_search() -> bool:
        query = typer.prompt("Query").strip()
        if not query:
            console.print("Query cannot be empty.", style="red")
            return False
        category = typer.prompt("Category", default=Category.ALL.value)
        try:
            selected = Category.parse(category)
        except ValueError as exc:
            console.print(str(exc), style="red")
            return False
        try:
            with console.status("Searching…", spinner="dots"):
                outcome = asyncio.run(session.start(query, selected, use_location=near_me))
        except (ConfigurationError, RetrievalFailure) as exc:
            console.print(f"Error encountered: {exc}", style="red")
            return False
        _report_outcome(outcome)
        if session.leads:
            console.print(_render_leads_table(session.leads))
        return True

    if not _new_search():
        raise typer.Exit(code=1)

    while True:
        action = typer.prompt(
            "Action [more/export/copy/raw/clear/new/quit]", default="more"
        ).strip().lower()
        if action in ("q", "quit", "exit"):
            break
        if action in ("n", "new"):
            _new_search()
        elif action in ("m", "more"):
            try:
                with console.status("Loading more…", spinner="dots"):
                    outcome = asyncio.run(session.load_more())
            except (SessionNotStartedError, SessionBusyError) as exc:
                console.print(str(exc), style="yellow")
                continue
            except (ConfigurationError, RetrievalFailure) as exc:
                console.print(f"Failed to load more results: {exc}", style="red")
                continue
            _report_outcome(outcome)
            if outcome.status is FetchStatus.ADDED:
                console.print(_render_leads_table(session.leads))
        elif action in ("e", "export"):
            _write_export(session, settings, state.outputs_dir)
        elif action in ("c", "copy"):
            typer.echo(encoder.encode(session.leads))
        elif action in ("r", "raw"):
            _render_raw(session.raw_transcript, full=True)
        elif action in ("x", "clear"):
            session.clear()
            console.print("Results cleared.", style="dim")
        else:
            console.print(f"Unknown action: {action}", style="yellow")


@app.command("categories", help="List the supported categories.")
def categories() -> None:
    table = Table(title="Categories", box=box.SIMPLE_HEAD)
    table.add_column("Category", style="cyan")
    table.add_column("Filter", style="magenta")
    for member in Category:
        table.add_row(member.value, "yes" if member.is_filter else "no filter")
    console.print(table)


@app.command("examples", help="Show example searches to get started.")
def examples() -> None:
    table = Table(title="Example searches", box=box.SIMPLE_HEAD)
    table.add_column("Category", style="magenta")
    table.add_column("Query", style="cyan")
    for query, category in EXAMPLE_SEARCHES:
        table.add_row(category.value, query)
    console.print(table)
    console.print('Try: leadgrid search "Car repair shops" -c Automotive', style="dim")


@config_app.command("show", help="Print the effective configuration as YAML.")
def config_show(ctx: typer.Context) -> None:
    state = _get_state(ctx)
    typer.echo(
        yaml.safe_dump(
            state.config.model_dump(mode="json"), allow_unicode=True, sort_keys=False
        )
    )


@config_app.command("path", help="Print the configuration file path.")
def config_path(ctx: typer.Context) -> None:
    state = _get_state(ctx)
    typer.echo(str(state.repository.locator.config_path()))


@log_app.command("tail", help="Show the most recent log lines.")
def log_tail(
    ctx: typer.Context,
    lines: int = typer.Option(100, "--lines", "-n", min=1, help="Number of lines to show."),
    errors: bool = typer.Option(False, "--errors", help="Show error.log instead."),
) -> None:
    state = _get_state(ctx)
    path = state.logs_dir / ("error.log" if errors else "leadgrid.log")
    content = tail_log(path, lines)
    if not content:
        console.print("No log entries yet.", style="dim")
        return
    console.print(f"{path.name} · last {len(content)} lines", style="cyan")
    console.print("".join(content), markup=False, highlight=False)


if __name__ == "__main__":  # pragma: no cover
    app()
