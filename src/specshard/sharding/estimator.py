"""Token cost estimation for shard content.

The estimate is a character-ratio approximation. It does not reproduce any
particular tokenizer and should only be used for sizing decisions.
"""

from __future__ import annotations

import math
import re
from typing import Final

# Prose averages ~4 characters per token for English text
PROSE_CHARS_PER_TOKEN: Final[float] = 4
# Code is denser because of punctuation and identifiers
CODE_CHARS_PER_TOKEN: Final[float] = 3.5

CODE_BLOCK_PATTERN = re.compile(r"```.*?```", re.DOTALL)


def estimate_tokens(text: str) -> int:
    """Estimate the token cost of text.

    Fenced code blocks and prose are estimated separately, each rounded
    up, then summed.

    Args:
        text: Text to estimate.

    Returns:
        Non-negative estimated token count.

    Examples:
        >>> estimate_tokens("")
        0
        >>> estimate_tokens("abcdefgh")
        2

    """
    if not text:
        return 0

    code_chars = sum(len(m.group(0)) for m in CODE_BLOCK_PATTERN.finditer(text))
    prose_chars = len(text) - code_chars

    return math.ceil(prose_chars / PROSE_CHARS_PER_TOKEN) + math.ceil(
        code_chars / CODE_CHARS_PER_TOKEN
    )
