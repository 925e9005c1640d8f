"""CLI package for SourceFinder command orchestration."""

from __future__ import annotations

__all__ = ["CommandRunner", "main"]

from SourceFinder.cli.runner import CommandRunner
from SourceFinder.cli.ui import cli


def main() -> None:
    """Run SourceFinder CLI.

    Entry point referenced by console script in pyproject.toml.
    """
    cli()
