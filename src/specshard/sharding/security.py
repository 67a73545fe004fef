"""Safety checks for shard identifiers and shard file paths.

Shard ids are embedded into regex scans and generated filenames, so they
are validated before use. Shard files read back from disk are confined to
the plan directory to prevent directory traversal.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Final

from specshard.core.exceptions import InvalidShardIdError, SpecShardError

logger = logging.getLogger(__name__)

MAX_SHARD_ID_LENGTH: Final[int] = 200


class SecurityError(SpecShardError):
    """Security violation while reading shard files.

    Raised when:
    - Path traversal is detected (e.g., ../../../etc/passwd)
    - Symlink leads outside the plan directory
    """

    pass


def validate_shard_id(shard_id: object) -> str:
    """Validate that a shard id is safe to embed in scans and filenames.

    Args:
        shard_id: Candidate identifier.

    Returns:
        The identifier, narrowed to str.

    Raises:
        InvalidShardIdError: If the id is not a string, is empty, or exceeds
            MAX_SHARD_ID_LENGTH.

    Examples:
        >>> validate_shard_id("section-overview")
        'section-overview'
        >>> validate_shard_id("")
        Traceback (most recent call last):
            ...
        specshard.core.exceptions.InvalidShardIdError: Invalid shard ID: empty string

    """
    if not isinstance(shard_id, str):
        raise InvalidShardIdError(
            f"Invalid shard ID: expected string, got {type(shard_id).__name__}",
            shard_id=shard_id,
        )
    if not shard_id:
        raise InvalidShardIdError("Invalid shard ID: empty string", shard_id=shard_id)
    if len(shard_id) > MAX_SHARD_ID_LENGTH:
        raise InvalidShardIdError(
            f"Invalid shard ID: exceeds maximum length of {MAX_SHARD_ID_LENGTH} characters",
            shard_id=shard_id,
        )
    return shard_id


def shard_id_pattern(shard_id: str) -> re.Pattern[str]:
    """Build a whole-word, case-insensitive pattern for a shard id.

    The id is escaped, so regex metacharacters in it match literally.
    Dashes count as word characters: "section-a" does not match inside
    "section-a-2".

    Args:
        shard_id: Validated shard id.

    Returns:
        Compiled pattern.

    """
    validate_shard_id(shard_id)
    return re.compile(rf"(?<![\w-]){re.escape(shard_id)}(?![\w-])", re.IGNORECASE)


def validate_shard_path(base_path: Path, file_path: Path) -> bool:
    """Validate that file_path is within base_path boundary.

    Resolves both paths to absolute paths and verifies that file_path
    is contained within base_path.

    Args:
        base_path: Plan directory (boundary).
        file_path: Path to validate.

    Returns:
        True if path is safe.

    Raises:
        SecurityError: If path traversal detected.

    """
    try:
        resolved_base = base_path.resolve()
        resolved_file = file_path.resolve()

        if not resolved_file.is_relative_to(resolved_base):
            logger.error(
                "SECURITY: Path traversal detected - %s escapes %s",
                file_path,
                base_path,
            )
            raise SecurityError(f"Path traversal detected: {file_path}")

        return True
    except OSError as e:
        logger.error("SECURITY: Path resolution failed for %s: %s", file_path, e)
        raise SecurityError(f"Path resolution failed: {file_path}") from e
