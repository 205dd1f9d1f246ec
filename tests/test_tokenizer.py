"""
Tests for the logic expression tokenizer.
"""

import pytest

from backend.requiem.errors import InvalidNumber, UnexpectedCharacter
from backend.requiem.logic import Gate, MAX_TERMINAL_ID, Token, TokenKind, tokenize


def kinds(source):
    return [token.kind for token in tokenize(source)]


class TestTokenize:
    """Tests for tokenize()."""

    def test_empty_string_yields_only_end(self):
        """Test that empty input produces just the end marker."""
        assert list(tokenize("")) == [Token(TokenKind.END, 0)]

    def test_whitespace_only_yields_only_end(self):
        """Test that whitespace is skipped entirely."""
        tokens = list(tokenize(" \t\n "))
        assert len(tokens) == 1
        assert tokens[0].kind is TokenKind.END
        assert tokens[0].position == 4

    def test_terminal_ids(self):
        """Test digit runs become terminal tokens."""
        assert list(tokenize("0")) == [
            Token(TokenKind.TERMINAL, 0, 0),
            Token(TokenKind.END, 1),
        ]
        token = next(tokenize("69"))
        assert token.kind is TokenKind.TERMINAL
        assert token.value == 69

    def test_leading_zeros(self):
        """Test that leading zeros parse as decimal."""
        assert next(tokenize("007")).value == 7

    @pytest.mark.parametrize(
        "word,gate",
        [
            ("and", Gate.AND),
            ("OR", Gate.OR),
            ("Not", Gate.NOT),
            ("nAnD", Gate.NAND),
            ("nor", Gate.NOR),
            ("XOR", Gate.XOR),
        ],
    )
    def test_gate_keywords_case_insensitive(self, word, gate):
        """Test gate keywords in any case."""
        token = next(tokenize(word))
        assert token.kind is TokenKind.GATE
        assert token.value is gate

    def test_logic_string(self):
        """Test a nested expression."""
        assert kinds("((0 and 1) or 2)") == [
            TokenKind.LPAREN,
            TokenKind.LPAREN,
            TokenKind.TERMINAL,
            TokenKind.GATE,
            TokenKind.TERMINAL,
            TokenKind.RPAREN,
            TokenKind.GATE,
            TokenKind.TERMINAL,
            TokenKind.RPAREN,
            TokenKind.END,
        ]

    def test_positions(self):
        """Test token positions point into the source."""
        positions = [token.position for token in tokenize("(12  AND 3)")]
        assert positions == [0, 1, 5, 9, 10, 11]

    def test_no_whitespace_needed_between_digits_and_keywords(self):
        """Test that digit and letter runs split on their own."""
        values = [token.value for token in tokenize("999OR1000")][:3]
        assert values == [999, Gate.OR, 1000]

    def test_lazy(self):
        """Test that tokens are produced before a later error is reached."""
        stream = tokenize("(0 $")
        assert next(stream).kind is TokenKind.LPAREN
        assert next(stream).kind is TokenKind.TERMINAL
        with pytest.raises(UnexpectedCharacter):
            next(stream)


class TestTokenizeErrors:
    """Tests for tokenizer failures."""

    def test_unexpected_character(self):
        """Test a stray symbol is reported with its position."""
        with pytest.raises(UnexpectedCharacter) as exc_info:
            list(tokenize("(0 & 1)"))
        assert exc_info.value.char == "&"
        assert exc_info.value.position == 3

    def test_keyword_prefix_is_not_a_gate(self):
        """Test that ANDROID is rejected instead of matching AND."""
        with pytest.raises(UnexpectedCharacter) as exc_info:
            list(tokenize("(0 ANDROID 1)"))
        assert exc_info.value.word == "ANDROID"
        assert exc_info.value.position == 3

    def test_unknown_word(self):
        """Test an identifier that is not a keyword."""
        with pytest.raises(UnexpectedCharacter):
            list(tokenize("maybe"))

    def test_non_ascii_digit(self):
        """Test that non-ASCII digits are not terminal ids."""
        with pytest.raises(UnexpectedCharacter):
            list(tokenize("٣"))

    def test_number_too_large(self):
        """Test overflow of the terminal index width."""
        with pytest.raises(InvalidNumber) as exc_info:
            list(tokenize(str(MAX_TERMINAL_ID + 1)))
        assert exc_info.value.position == 0
        assert exc_info.value.details["limit"] == MAX_TERMINAL_ID

    def test_very_long_digit_run(self):
        """Test digit runs past int() conversion limits are still InvalidNumber."""
        with pytest.raises(InvalidNumber) as exc_info:
            list(tokenize("(0 AND " + "1" * 5000 + ")"))
        assert exc_info.value.position == 7

    def test_long_run_of_leading_zeros(self):
        """Test leading zeros do not count towards the width."""
        assert next(tokenize("0" * 5000 + "42")).value == 42

    def test_largest_number_accepted(self):
        """Test the largest terminal index is accepted."""
        assert next(tokenize(str(MAX_TERMINAL_ID))).value == MAX_TERMINAL_ID

    def test_lex_errors_are_value_errors(self):
        """Test lex errors can be handled as ValueError."""
        with pytest.raises(ValueError):
            list(tokenize("#"))
