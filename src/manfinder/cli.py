"""Command line interface for manfinder."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import List, Optional, Tuple

import typer
from rich.console import Console

from manfinder.config import AppConfig, find_config_file, load_config
from manfinder.display.pipeline import ProcessPipeline, Renderer
from manfinder.errors import ConfigurationError, DocumentOpenError, IndexPersistenceError
from manfinder.index.indexer import IndexStats, Indexer
from manfinder.index.search import SearchResult, Searcher
from manfinder.index.storage import SQLiteIndexStore
from manfinder.ingestion.extractor import FailurePolicy, extract_document
from manfinder.models import Index

LOGGER = logging.getLogger(__name__)

console = Console()
err_console = Console(stderr=True)
app = typer.Typer(help="manfinder - find, search and display manual pages")

PageRequest = Tuple[Optional[str], Optional[str]]

REBUILD_DONE = "Successfully updated manual entries in database."

ConfigOption = typer.Option(None, "--config", help="Path to config.toml")
RootOption = typer.Option(None, "--root", help="Manual page root directory (overrides config)")
IndexOption = typer.Option(None, "--index", help="Index file path")
VerboseOption = typer.Option(False, "--verbose", "-v", help="Verbose logging")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _echo(line: str) -> None:
    console.print(line, markup=False, emoji=False, highlight=False, soft_wrap=True)


def _fail(message: str) -> typer.Exit:
    err_console.print(message, markup=False, emoji=False, highlight=False, soft_wrap=True)
    return typer.Exit(code=1)


def _load_app_config(config: Path | None, root: Path | None, index: Path | None) -> AppConfig:
    config_path = find_config_file(config)
    if root is not None and config is None and not config_path.exists():
        app_config = AppConfig()
    else:
        app_config = load_config(config_path)
    if root is not None:
        app_config.man_root = root
    if index is not None:
        app_config.index_path = index
    return app_config


def _store_for(app_config: AppConfig) -> SQLiteIndexStore:
    return SQLiteIndexStore(app_config.resolve_index_path(Path.cwd()))


def _rebuild(app_config: AppConfig, store: SQLiteIndexStore) -> IndexStats:
    return Indexer(store).rebuild(app_config.require_root())


def _open_index(app_config: AppConfig) -> Index:
    store = _store_for(app_config)
    if not store.exists():
        LOGGER.info("No index at %s, building one", store.index_path)
        _rebuild(app_config, store)
    return store.load()


def _load_index(config: Path | None, root: Path | None, index: Path | None) -> Tuple[AppConfig, Index]:
    try:
        app_config = _load_app_config(config, root, index)
        return app_config, _open_index(app_config)
    except (ConfigurationError, IndexPersistenceError) as exc:
        raise _fail(str(exc)) from exc


# section argument: a digit 1-9 with an optional alphabetic suffix ("7", "3ssl")
_SECTION_ARG = re.compile(r"[1-9][a-zA-Z]*")
_NUMBER_ARG = re.compile(r"[0-9]+")


def _dangling(arg: str) -> PageRequest:
    # a number outside 1-9 with no page after it is looked up as a page name
    if _SECTION_ARG.fullmatch(arg):
        return arg, None
    return None, arg.lower()


def parse_page_requests(args: List[str]) -> List[PageRequest]:
    """Pair each page name with the section number typed before it, if any.

    Numbers outside 1-9 are not sections; the page after one is shown from
    its lowest section. Names such as ``2to3`` are page names.
    """
    requests: List[PageRequest] = []
    pending: Optional[str] = None
    for arg in args:
        if _SECTION_ARG.fullmatch(arg) or _NUMBER_ARG.fullmatch(arg):
            if pending is not None:
                requests.append(_dangling(pending))
            pending = arg
            continue
        section = pending if pending is not None and _SECTION_ARG.fullmatch(pending) else None
        requests.append((section, arg.lower()))
        pending = None
    if pending is not None:
        requests.append(_dangling(pending))
    return requests


def _print_result(result: SearchResult) -> None:
    for line in result.render():
        _echo(line)


@app.command()
def show(
    pages: List[str] = typer.Argument(None, help="[SECTION] PAGE pairs to display"),
    config: Path = ConfigOption,
    root: Path = RootOption,
    index: Path = IndexOption,
    verbose: bool = VerboseOption,
) -> None:
    """Display manual pages, lowest section first unless a section is given."""
    _setup_logging(verbose)
    if not pages:
        _echo("What manual page do you want?\nFor example, try 'manfinder show man'.")
        return

    app_config, loaded = _load_index(config, root, index)
    searcher = Searcher(loaded)
    renderer: Renderer = ProcessPipeline(app_config.formatter, app_config.pager)

    for section, page in parse_page_requests(pages):
        if page is None:
            _echo(
                f"No manual entry for {section}\n"
                f"(Alternatively, what manual page do you want from section {section}?)"
            )
            continue

        path = searcher.resolve(page, section)
        if path is None:
            suffix = f" in section {section}" if section is not None else ""
            _echo(f"No manual entry for {page}{suffix}")
            continue

        try:
            extracted = extract_document(path, FailurePolicy.ABORT)
        except DocumentOpenError as exc:
            _echo(exc.describe())
            raise typer.Exit(code=1) from exc

        renderer.render(extracted.text)


@app.command()
def whatis(
    term: str = typer.Argument(..., help="Exact page name"),
    config: Path = ConfigOption,
    root: Path = RootOption,
    index: Path = IndexOption,
    verbose: bool = VerboseOption,
) -> None:
    """Show the one-line descriptions of a page in every section."""
    _setup_logging(verbose)
    _, loaded = _load_index(config, root, index)
    _print_result(Searcher(loaded).whatis(term.lower()))


@app.command()
def apropos(
    term: str = typer.Argument(..., help="Text to look for in page names and descriptions"),
    config: Path = ConfigOption,
    root: Path = RootOption,
    index: Path = IndexOption,
    verbose: bool = VerboseOption,
) -> None:
    """Search page names and descriptions for a substring."""
    _setup_logging(verbose)
    _, loaded = _load_index(config, root, index)
    _print_result(Searcher(loaded).apropos(term.lower()))


@app.command()
def mandb(
    config: Path = ConfigOption,
    root: Path = RootOption,
    index: Path = IndexOption,
    verbose: bool = VerboseOption,
) -> None:
    """Rebuild the whole index from the manual page root."""
    _setup_logging(verbose)
    try:
        app_config = _load_app_config(config, root, index)
        stats = _rebuild(app_config, _store_for(app_config))
    except (ConfigurationError, IndexPersistenceError) as exc:
        raise _fail(str(exc)) from exc

    _echo(REBUILD_DONE)
    _echo(f"Indexed: {stats.indexed}, failed: {stats.failed}, skipped: {stats.skipped}")


app.command("makewhatis", help="Alias of mandb.")(mandb)
