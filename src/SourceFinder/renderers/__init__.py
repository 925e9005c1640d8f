"""Output renderers for command results.

Provides the OutputWriter base and its console and JSON implementations, plus
a factory function to instantiate the configured writer.
"""

from __future__ import annotations

from SourceFinder.config import AppConfig
from SourceFinder.renderers.base import OutputWriter
from SourceFinder.renderers.console import ConsoleOutputWriter, render_text
from SourceFinder.renderers.json import JsonStdoutWriter, render_json, render_suggestion


def create_output_writer(config: AppConfig) -> OutputWriter:
    """Create output writer based on config.

    Raises:
        ValueError: If the configured format has no writer.
    """
    if config.output.format == "console":
        return ConsoleOutputWriter()
    if config.output.format == "json":
        return JsonStdoutWriter()
    raise ValueError(f"No output writer for format: {config.output.format}")


__all__ = [
    "OutputWriter",
    "ConsoleOutputWriter",
    "JsonStdoutWriter",
    "render_json",
    "render_suggestion",
    "render_text",
    "create_output_writer",
]
