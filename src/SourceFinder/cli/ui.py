"""Click CLI interface definitions.

Defines the command-line interface structure and routes commands
to their respective runners.
"""

from __future__ import annotations

from pathlib import Path

import click
from dotenv import load_dotenv

from SourceFinder.cli.runner import CommandRunner
from SourceFinder.config import load_config_with_defaults
from SourceFinder.core.query import ANY, FIELD_QUALIFIERS, SearchRequest


@click.group(help="SourceFinder: search bibliographic sources and print ranked suggestions.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False, exists=True),
    default=None,
    help="YAML config file merged over the bundled defaults.",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None) -> None:
    """CLI entry group.

    Loads environment variables from .env file before processing config.
    """
    # API keys may live in .env
    load_dotenv()

    ctx.obj = load_config_with_defaults(config_path)


@cli.command("search")
@click.argument("query")
@click.option(
    "--field",
    type=click.Choice(FIELD_QUALIFIERS),
    default=ANY,
    show_default=True,
    help="Restrict the query to one field.",
)
@click.option("--max-results", type=click.IntRange(min=1), default=None, help="Page size (default from config).")
@click.option("--offset", type=click.IntRange(min=0), default=0, show_default=True, help="Pagination offset.")
@click.pass_context
def search_cmd(ctx: click.Context, query: str, field: str, max_results: int | None, offset: int) -> None:
    """Search all sources that support FIELD and print one ranked page.

    Raises:
        click.Abort: When the search fails.
    """
    cfg = ctx.obj
    request = SearchRequest(
        query=query,
        field=field,
        max_results=max_results or cfg.search.max_results,
        offset=offset,
    )
    CommandRunner(cfg).run_search(action=ctx.command.name, request=request)


@cli.command("lookup")
@click.argument("identifier")
@click.pass_context
def lookup_cmd(ctx: click.Context, identifier: str) -> None:
    """Resolve a DOI, ISBN or PubMed ID to a single record."""
    CommandRunner(ctx.obj).run_lookup(action=ctx.command.name, identifier=identifier)
