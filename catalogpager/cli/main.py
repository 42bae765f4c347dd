import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional

import click

from catalogpager import __version__ as about
from catalogpager.catalog.source import CatalogSource
from catalogpager.cli.config import get_logger, setup_logging
from catalogpager.cli.exit_codes import EXTERNAL_FAILURE, INTERNAL_BUG, USER_ERROR, VALIDATION_ERROR
from catalogpager.cli.presenter import CliPresenter
from catalogpager.config import load_host_settings
from catalogpager.constants import CatalogKind
from catalogpager.errors import CatalogPagerError, SourceDefinitionError
from catalogpager.preferences import BaseUrlPreferences
from catalogpager.sources import load_source_definition
from catalogpager.transport import RequestsPageFetcher

# Get a logger for this module.
log = get_logger(__name__)

# Define an epilog message with examples.
EPILOG = f"""
Examples:

{click.style('• list the first page of popular titles', fg="green")}

    $ catalogpager -s prochan.toml popular

{click.style('• walk every page of the latest updates as JSON lines', fg="green")}

    $ catalogpager -s prochan.toml --json latest --all

{click.style('• search and show chapters of the first hit', fg="green")}

    $ catalogpager -s prochan.toml search "one piece"
    $ catalogpager -s prochan.toml chapters /manga/one-piece

{click.style('• point the source at a mirror domain', fg="green")}

    $ catalogpager -s prochan.toml base-url https://mirror.example
"""


@dataclass
class CliState:
    """Objects shared by all subcommands of one invocation."""

    presenter: CliPresenter
    source: CatalogSource
    preferences: BaseUrlPreferences


@contextmanager
def _reported_errors(presenter: CliPresenter) -> Iterator[None]:
    """Translate runtime failures into presenter output and process exit codes."""
    try:
        yield
    except ValueError as exc:
        presenter.emit_error(str(exc), exit_code=USER_ERROR)
        raise click.exceptions.Exit(USER_ERROR) from exc
    except (CatalogPagerError, OSError) as exc:
        presenter.emit_error(str(exc), exit_code=EXTERNAL_FAILURE)
        raise click.exceptions.Exit(EXTERNAL_FAILURE) from exc
    except Exception as exc:
        log.exception("Unexpected failure")
        presenter.emit_error(f"Unexpected failure: {exc}", exit_code=INTERNAL_BUG)
        raise click.exceptions.Exit(INTERNAL_BUG) from exc


def _page_options(command):
    """Attach the shared paging options to a listing command."""
    command = click.option(
        "--all", "-a",
        "walk_all",
        is_flag=True,
        default=False,
        help="Keep fetching until the last page",
    )(command)
    command = click.option(
        "--pages", "-n",
        type=click.IntRange(min=1),
        default=1,
        show_default=True,
        help="Number of pages to fetch",
    )(command)
    command = click.option(
        "--page", "-p",
        type=click.IntRange(min=1),
        default=1,
        show_default=True,
        help="First page to fetch",
    )(command)
    return command


def _emit_listing(
    state: CliState,
    kind: CatalogKind,
    page: int,
    pages: int,
    walk_all: bool,
    query: Optional[str] = None,
) -> None:
    """Lazily walk a listing and emit each page as it arrives."""
    paginator = state.source.paginator
    with _reported_errors(state.presenter):
        walk = paginator.iter_pages(
            kind,
            query,
            start_page=page,
            max_pages=None if walk_all else pages,
        )
        state.presenter.emit_pages(kind, page, walk)


@click.group(
    help=about.__description__,
    epilog=EPILOG,
)
@click.version_option(
    about.__version__,
    prog_name=about.__title__,
    message="%(prog)s, version %(version)s\nCheck {url} for more info".format(url=about.__url__),
)
@click.option(
    "--source", "-s",
    "source_file",
    type=click.Path(dir_okay=False),
    metavar="<file>",
    required=True,
    help="TOML source definition (endpoints and selectors)",
    envvar="CATALOGPAGER_SOURCE",
)
@click.option(
    "--base-url", "-u",
    "base_url",
    metavar="<url>",
    help="Base URL for this run, overriding the stored preference",
)
@click.option(
    "--json", "-j",
    "json_output",
    is_flag=True,
    default=False,
    help="Emit one JSON object per result",
)
@click.option(
    "--quiet", "-q",
    is_flag=True,
    default=False,
    help="Only print entry paths",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    default=False,
    help="Enable debug logging",
)
@click.pass_context
def main(
        ctx: click.Context,
        source_file: str,
        base_url: Optional[str],
        json_output: bool,
        quiet: bool,
        verbose: bool,
):
    """
    Load the source definition and host settings shared by all subcommands.

    Parameters:
        ctx (click.Context): Click context.
        source_file (str): Path of the TOML source definition.
        base_url (Optional[str]): Base URL override for this invocation only.
        json_output (bool): Emit machine-readable JSON instead of text.
        quiet (bool): Reduce human output to entry paths.
        verbose (bool): Enable debug logging.
    """
    if verbose:
        setup_logging(logging.DEBUG)
    elif json_output or quiet:
        setup_logging(logging.WARNING)

    presenter = CliPresenter(json_output=json_output, quiet=quiet)
    presenter.emit_intro(about.__intro__)

    try:
        settings = load_host_settings()
        definition = load_source_definition(source_file)
    except (SourceDefinitionError, ValueError) as exc:
        presenter.emit_error(str(exc), exit_code=VALIDATION_ERROR)
        ctx.exit(VALIDATION_ERROR)

    try:
        preferences = BaseUrlPreferences(
            settings.preferences_file,
            definition.name,
            definition.default_base_url,
        )
    except OSError as exc:
        presenter.emit_error(
            f"Cannot use preference file {settings.preferences_file}: {exc}",
            exit_code=EXTERNAL_FAILURE,
        )
        ctx.exit(EXTERNAL_FAILURE)

    def current_base_url() -> str:
        return base_url or settings.override_base_url or preferences.base_url

    source = CatalogSource(
        RequestsPageFetcher.from_settings(settings),
        definition,
        base_url=current_base_url,
    )
    log.debug("Using source %s at %s", definition.name, source.base_url)
    ctx.obj = CliState(presenter=presenter, source=source, preferences=preferences)


@main.command()
@_page_options
@click.pass_obj
def popular(state: CliState, page: int, pages: int, walk_all: bool):
    """List popular titles."""
    _emit_listing(state, CatalogKind.POPULAR, page, pages, walk_all)


@main.command()
@_page_options
@click.pass_obj
def latest(state: CliState, page: int, pages: int, walk_all: bool):
    """List latest updates; titles already shown in this walk are skipped."""
    _emit_listing(state, CatalogKind.LATEST, page, pages, walk_all)


@main.command()
@click.argument("query")
@_page_options
@click.pass_obj
def search(state: CliState, query: str, page: int, pages: int, walk_all: bool):
    """Search titles by QUERY."""
    _emit_listing(state, CatalogKind.SEARCH, page, pages, walk_all, query)


@main.command()
@click.argument("path")
@click.pass_obj
def details(state: CliState, path: str):
    """Show details of the title at PATH."""
    with _reported_errors(state.presenter):
        state.presenter.emit_details(state.source.details(path))


@main.command()
@click.argument("path")
@click.pass_obj
def chapters(state: CliState, path: str):
    """List chapters of the title at PATH."""
    with _reported_errors(state.presenter):
        state.presenter.emit_chapters(state.source.chapters(path))


@main.command()
@click.argument("path")
@click.pass_obj
def pages(state: CliState, path: str):
    """List page image URLs of the chapter at PATH."""
    with _reported_errors(state.presenter):
        state.presenter.emit_page_images(state.source.pages(path))


@main.command("base-url")
@click.argument("url", required=False)
@click.option(
    "--reset",
    is_flag=True,
    default=False,
    help="Restore the source's default base URL",
)
@click.pass_obj
def base_url_command(state: CliState, url: Optional[str], reset: bool):
    """Show or change the stored base URL of the source."""
    preferences = state.preferences
    if url and reset:
        raise click.UsageError("Pass either a URL or --reset, not both")
    if url and not url.startswith(("http://", "https://")):
        raise click.BadParameter(f"Invalid url: {url}", param_hint="URL")
    if reset:
        with _reported_errors(state.presenter):
            preferences.reset()
    elif url:
        with _reported_errors(state.presenter):
            preferences.set_override(url)
        state.presenter.emit_notice("Restart the application to apply the new setting.")
    state.presenter.emit_base_url(
        state.source.name,
        preferences.base_url,
        preferences.default_base_url,
    )


if __name__ == "__main__":
    main(prog_name=about.__title__)
