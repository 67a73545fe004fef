"""Tests for token cost estimation."""

from specshard.sharding.estimator import estimate_tokens


class TestEstimateTokens:
    """Tests for estimate_tokens function."""

    def test_empty_text_costs_nothing(self) -> None:
        """Empty text is estimated at zero tokens."""
        assert estimate_tokens("") == 0

    def test_prose_rounds_up(self) -> None:
        """Prose uses four characters per token, rounded up."""
        assert estimate_tokens("abcd") == 1
        assert estimate_tokens("abcde") == 2

    def test_code_block_is_denser(self) -> None:
        """Fenced code counts at 3.5 characters per token."""
        code = "```\n" + "x" * 17 + "\n```"  # 25 characters
        assert estimate_tokens(code) == 8  # ceil(25 / 3.5)
        assert estimate_tokens("y" * 25) == 7  # ceil(25 / 4)

    def test_ranges_rounded_independently(self) -> None:
        """Prose and code are ceiling-rounded separately, then summed."""
        # 1 prose char -> 1, 7 code chars -> 2
        assert estimate_tokens("a```b```") == 3

    def test_unclosed_fence_counts_as_prose(self) -> None:
        """A fence without a closing marker is treated as prose."""
        assert estimate_tokens("```" + "x" * 13) == 4

    def test_multiple_code_blocks(self) -> None:
        """All code blocks contribute to the code range."""
        text = "intro\n```\na\n```\nmiddle\n```\nb\n```\n"
        code_chars = len("```\na\n```") * 2
        prose_chars = len(text) - code_chars
        expected = -(-prose_chars // 4) + -(-code_chars * 2 // 7)
        assert estimate_tokens(text) == expected
