"""Command runner for coordinating CLI execution.

Manages component lifecycle, logging configuration, and error handling for
command execution.
"""

from __future__ import annotations

import click

from SourceFinder.config import AppConfig
from SourceFinder.core.query import SearchRequest
from SourceFinder.renderers import create_output_writer
from SourceFinder.services import IdentifierLookup, create_search_service
from SourceFinder.utils.log import configure_logging, log


class CommandRunner:
    """Orchestrates command execution with proper resource management.

    Handles logging configuration, component creation, source cleanup and
    error handling for CLI commands.
    """

    def __init__(self, config: AppConfig) -> None:
        self.config = config

    def run_search(self, action: str, request: SearchRequest) -> None:
        """Execute one search and write the ranked page.

        Args:
            action: The CLI command name (e.g., 'search').
            request: Search request built from the command options.

        Raises:
            click.Abort: When the search fails.
        """
        self._configure_logging(action)
        try:
            router = create_search_service(self.config)
            writer = create_output_writer(self.config)
            try:
                log.debug(
                    "Running search: query=%r field=%s max_results=%d offset=%d",
                    request.query,
                    request.field,
                    request.max_results,
                    request.offset,
                )
                result = router.search(request)
                writer.write_search_result(result, query=request.query, field=request.field)
            finally:
                router.close()
        except Exception as e:  # noqa: BLE001 - cli boundary
            log.error("Search failed: %s", e)
            raise click.Abort from e

    def run_lookup(self, action: str, identifier: str) -> None:
        """Resolve one DOI, ISBN or PMID and write the record.

        Raises:
            click.Abort: When the lookup fails.
        """
        self._configure_logging(action)
        try:
            router = create_search_service(self.config)
            writer = create_output_writer(self.config)
            try:
                suggestion = IdentifierLookup(sources=router.sources).resolve(identifier)
                writer.write_lookup_result(suggestion, identifier=identifier)
            finally:
                router.close()
        except Exception as e:  # noqa: BLE001 - cli boundary
            log.error("Lookup failed: %s", e)
            raise click.Abort from e

    def _configure_logging(self, action: str) -> None:
        configure_logging(
            level=self.config.runtime.level,
            action=action,
            log_to_file=self.config.runtime.to_file,
            log_dir=self.config.runtime.dir,
            http_debug=self.config.runtime.http_debug,
        )
