# =============================================================================
# test_lexer.py - Mini-C Lexer Unit Tests
# =============================================================================
# Tests for the Mini-C tokenizer.
#
# Test coverage includes:
#   - Keywords, identifiers and token positions
#   - Integer and float literals, including range checks
#   - String and character literals with escape sequences
#   - Operators and delimiters (longest match)
#   - Comments and whitespace handling
#   - Error reporting with location, source line and caret
# =============================================================================

import pytest

from c4py.minic.lexer import CLexer, CTokenType, CToken, tokenize, INT_MAX
from c4py.minic.errors import LexError, UnterminatedStringError, InvalidCharacterError


def lex(source: str) -> list[CToken]:
    """Tokenize source and return all tokens (including EOF)."""
    return list(CLexer(source, "test.c").tokenize())


def types(source: str) -> list[CTokenType]:
    """Token types without the trailing EOF."""
    return [t.type for t in lex(source)[:-1]]


# =============================================================================
# Basic Tokens
# =============================================================================

class TestBasicTokens:
    """Test keywords, identifiers and structure."""

    def test_empty_source(self):
        """Empty source should produce only EOF token."""
        tokens = lex("")
        assert len(tokens) == 1
        assert tokens[0].type == CTokenType.EOF

    def test_whitespace_only(self):
        """Whitespace-only source should produce only EOF token."""
        tokens = lex("   \n\t  \r\n  ")
        assert [t.type for t in tokens] == [CTokenType.EOF]

    def test_keywords(self):
        """All keywords map to their own token types."""
        assert types("int char float void if else while return sizeof") == [
            CTokenType.INT,
            CTokenType.CHAR,
            CTokenType.FLOAT,
            CTokenType.VOID,
            CTokenType.IF,
            CTokenType.ELSE,
            CTokenType.WHILE,
            CTokenType.RETURN,
            CTokenType.SIZEOF,
        ]

    def test_identifier(self):
        """Identifiers keep their text as value."""
        tokens = lex("_count2 main")
        assert tokens[0].type == CTokenType.IDENTIFIER
        assert tokens[0].value == "_count2"
        assert tokens[1].value == "main"

    def test_keyword_prefix_is_identifier(self):
        """'integer' is an identifier, not 'int' followed by 'eger'."""
        tokens = lex("integer")
        assert tokens[0].type == CTokenType.IDENTIFIER
        assert tokens[0].value == "integer"

    def test_type_keyword_check(self):
        tokens = lex("float x")
        assert tokens[0].is_type_keyword()
        assert not tokens[1].is_type_keyword()

    def test_positions(self):
        """Line and column are 1-indexed and point at the token start."""
        tokens = lex("int\n  x;")
        assert (tokens[0].line, tokens[0].column) == (1, 1)
        assert (tokens[1].line, tokens[1].column) == (2, 3)
        assert (tokens[2].line, tokens[2].column) == (2, 4)

    def test_location(self):
        token = lex("\n   abc")[0]
        assert str(token.location) == "test.c:2:4"

    def test_ends_with_single_eof(self):
        tokens = lex("return 0;")
        assert tokens[-1].type == CTokenType.EOF
        assert sum(1 for t in tokens if t.type == CTokenType.EOF) == 1

    def test_module_tokenize(self):
        """The module-level tokenize() is a lazy wrapper."""
        tokens = list(tokenize("x"))
        assert [t.type for t in tokens] == [CTokenType.IDENTIFIER, CTokenType.EOF]
        assert tokens[0].filename == "<input>"


# =============================================================================
# Numbers
# =============================================================================

class TestNumbers:
    """Test integer and float literals."""

    def test_integer(self):
        token = lex("123")[0]
        assert token.type == CTokenType.NUMBER
        assert token.value == 123

    def test_zero(self):
        assert lex("0")[0].value == 0

    def test_largest_integer(self):
        """The largest int literal is accepted."""
        assert lex(str(INT_MAX))[0].value == INT_MAX

    def test_integer_too_large(self):
        """A literal beyond the int range is a lexical error."""
        with pytest.raises(LexError, match="too large"):
            lex(str(INT_MAX + 1))

    def test_float(self):
        token = lex("3.14")[0]
        assert token.type == CTokenType.FLOAT_NUMBER
        assert token.value == 3.14

    def test_float_zero(self):
        token = lex("0.0")[0]
        assert token.type == CTokenType.FLOAT_NUMBER
        assert token.value == 0.0

    def test_float_needs_fraction_digits(self):
        """'1.' is malformed: digits are required after the point."""
        with pytest.raises(LexError, match="malformed float literal"):
            lex("1.;")

    def test_float_out_of_range(self):
        """A float literal that overflows to infinity is rejected."""
        with pytest.raises(LexError, match="out of range"):
            lex("1" + "0" * 400 + ".0")

    def test_negative_is_two_tokens(self):
        """Unary minus is an operator, not part of the literal."""
        assert types("-5") == [CTokenType.MINUS, CTokenType.NUMBER]


# =============================================================================
# String and Character Literals
# =============================================================================

class TestLiterals:
    """Test string and character literals."""

    def test_simple_string(self):
        token = lex('"Hello, world!"')[0]
        assert token.type == CTokenType.STRING
        assert token.value == "Hello, world!"

    def test_empty_string(self):
        assert lex('""')[0].value == ""

    def test_string_escapes(self):
        """Escapes are decoded into the token value."""
        token = lex(r'"a\tb\n\\ \"q\""')[0]
        assert token.value == 'a\tb\n\\ "q"'

    def test_hex_and_octal_escapes(self):
        assert lex(r'"\x41\101\0"')[0].value == "AA\0"

    def test_unknown_escape_is_literal(self):
        """An unknown escape stands for the escaped character."""
        assert lex(r'"\q"')[0].value == "q"

    def test_unterminated_string(self):
        with pytest.raises(UnterminatedStringError):
            lex('"abc')

    def test_newline_in_string(self):
        """A string cannot span lines."""
        with pytest.raises(UnterminatedStringError):
            lex('"abc\ndef"')

    def test_char_literal(self):
        """Character literals carry the character code."""
        token = lex("'Z'")[0]
        assert token.type == CTokenType.CHAR_LITERAL
        assert token.value == 90

    def test_char_escapes(self):
        assert lex(r"'\n'")[0].value == 10
        assert lex(r"'\0'")[0].value == 0
        assert lex(r"'\''")[0].value == 39
        assert lex(r"'\xff'")[0].value == 255

    def test_char_latin1(self):
        """Codes up to 255 fit in a char."""
        assert lex("'é'")[0].value == 0xE9

    def test_char_too_wide(self):
        with pytest.raises(LexError, match="does not fit in a char"):
            lex("'€'")

    def test_empty_char(self):
        with pytest.raises(LexError, match="empty character literal"):
            lex("''")

    def test_multi_char(self):
        with pytest.raises(LexError, match="too long"):
            lex("'ab'")


# =============================================================================
# Operators
# =============================================================================

class TestOperators:
    """Test operators and delimiters."""

    def test_two_character_operators(self):
        assert types("&& || == != <= >= << >>") == [
            CTokenType.AND,
            CTokenType.OR,
            CTokenType.EQ,
            CTokenType.NE,
            CTokenType.LE,
            CTokenType.GE,
            CTokenType.LSHIFT,
            CTokenType.RSHIFT,
        ]

    def test_single_character_operators(self):
        assert types("+ - * / % & | ^ ! = < > ? :") == [
            CTokenType.PLUS,
            CTokenType.MINUS,
            CTokenType.STAR,
            CTokenType.SLASH,
            CTokenType.PERCENT,
            CTokenType.AMPERSAND,
            CTokenType.PIPE,
            CTokenType.CARET,
            CTokenType.NOT,
            CTokenType.ASSIGN,
            CTokenType.LT,
            CTokenType.GT,
            CTokenType.QUESTION,
            CTokenType.COLON,
        ]

    def test_delimiters(self):
        assert types("(){};,") == [
            CTokenType.LPAREN,
            CTokenType.RPAREN,
            CTokenType.LBRACE,
            CTokenType.RBRACE,
            CTokenType.SEMICOLON,
            CTokenType.COMMA,
        ]

    def test_longest_match(self):
        """'a<<=b' lexes as '<<' then '='."""
        assert types("a<<=b") == [
            CTokenType.IDENTIFIER,
            CTokenType.LSHIFT,
            CTokenType.ASSIGN,
            CTokenType.IDENTIFIER,
        ]

    def test_invalid_character(self):
        with pytest.raises(InvalidCharacterError) as exc_info:
            lex("int @;")
        assert exc_info.value.char == "@"


# =============================================================================
# Comments
# =============================================================================

class TestComments:
    """Test comment skipping."""

    def test_single_line_comment(self):
        assert types("x // comment\ny") == [CTokenType.IDENTIFIER, CTokenType.IDENTIFIER]

    def test_multi_line_comment(self):
        tokens = lex("x /* one\ntwo */ y")
        assert [t.value for t in tokens[:-1]] == ["x", "y"]
        assert tokens[1].line == 2

    def test_unterminated_comment(self):
        with pytest.raises(LexError, match="unterminated multi-line comment"):
            lex("x /* never closed")


# =============================================================================
# Error Reporting
# =============================================================================

class TestErrorReporting:
    """Test the format of lexical errors."""

    def test_error_format(self):
        """Errors show location, the source line and a caret."""
        with pytest.raises(InvalidCharacterError) as exc_info:
            lex("int x;\nint @;")
        message = str(exc_info.value)
        lines = message.splitlines()
        assert lines[0] == "test.c:2:5: error: invalid character '@' (0x40)"
        assert lines[1] == "    int @;"
        assert lines[2] == "        ^"

    def test_errors_are_lazy(self):
        """Tokens before an error are produced before the error is raised."""
        stream = CLexer("int @", "test.c").tokenize()
        assert next(stream).type == CTokenType.INT
        with pytest.raises(InvalidCharacterError):
            next(stream)
