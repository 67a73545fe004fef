"""Exception hierarchy for specshard.

All errors raised by the package derive from SpecShardError so callers
can catch everything with a single except clause.
"""

from __future__ import annotations


class SpecShardError(Exception):
    """Base exception for all specshard errors."""

    pass


class ConfigError(SpecShardError):
    """Configuration loading or validation failed.

    Raised when:
    - Config file is not valid YAML
    - Config file exceeds MAX_CONFIG_SIZE
    - Values fail pydantic validation
    """

    pass


class ShardingError(SpecShardError):
    """A sharding strategy could not decompose the document."""

    pass


class EmptyDocumentError(ShardingError):
    """Document has no content to shard."""

    pass


class InvalidShardIdError(ShardingError):
    """Shard identifier is unusable.

    Attributes:
        shard_id: The rejected identifier (may be a non-string value).

    """

    def __init__(self, message: str, shard_id: object = None) -> None:
        """Initialize InvalidShardIdError with the offending identifier.

        Args:
            message: Human-readable error message.
            shard_id: The rejected identifier.

        """
        super().__init__(message)
        self.shard_id = shard_id
