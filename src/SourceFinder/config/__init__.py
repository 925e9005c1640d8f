from __future__ import annotations

"""Public configuration API for SourceFinder."""

from SourceFinder.config.app import (
    DEFAULT_CONFIG_PATH,
    AppConfig,
    load_config,
    load_config_with_defaults,
    merge_config_dicts,
    parse_config_dict,
)
from SourceFinder.config.output import OutputConfig
from SourceFinder.config.providers import ProviderConfig
from SourceFinder.config.ranking import RankingConfig
from SourceFinder.config.runtime import RuntimeConfig
from SourceFinder.config.search import SearchConfig

__all__ = [
    "RuntimeConfig",
    "SearchConfig",
    "ProviderConfig",
    "RankingConfig",
    "OutputConfig",
    "AppConfig",
    "DEFAULT_CONFIG_PATH",
    "load_config",
    "load_config_with_defaults",
    "merge_config_dicts",
    "parse_config_dict",
]
