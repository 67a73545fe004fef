"""Core module for specshard configuration, types and exceptions.

This module provides:
- Configuration models and YAML loading via load_config()
- Custom exception hierarchy with SpecShardError as base
- Shared Literal type aliases
"""

from specshard.core.config import (
    DEFAULT_MAX_TOKENS,
    MAX_CONFIG_SIZE,
    PROJECT_CONFIG_NAME,
    AnalyzerThresholds,
    Config,
    ShardOptions,
    load_config,
)
from specshard.core.exceptions import (
    ConfigError,
    EmptyDocumentError,
    InvalidShardIdError,
    ShardingError,
    SpecShardError,
)
from specshard.core.types import (
    VALID_STRATEGIES,
    ConflictKind,
    ReferenceType,
    ShardStrategy,
    ShardType,
    parse_strategy,
)

__all__ = [
    # Config
    "DEFAULT_MAX_TOKENS",
    "MAX_CONFIG_SIZE",
    "PROJECT_CONFIG_NAME",
    "AnalyzerThresholds",
    "Config",
    "ShardOptions",
    "load_config",
    # Exceptions
    "ConfigError",
    "EmptyDocumentError",
    "InvalidShardIdError",
    "ShardingError",
    "SpecShardError",
    # Types
    "VALID_STRATEGIES",
    "ConflictKind",
    "ReferenceType",
    "ShardStrategy",
    "ShardType",
    "parse_strategy",
]
