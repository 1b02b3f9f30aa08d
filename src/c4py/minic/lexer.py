"""
Mini-C Lexer (Tokenizer)
========================

This module implements the lexer for Mini-C, the small C-like language
run by c4py. It converts source text into a lazy stream of tokens for
the parser.

Token Categories
----------------
- Keywords: int, char, float, void, if, else, while, return, sizeof
- Identifiers: variable and function names
- Numbers: decimal integers (123) and floats (3.14)
- Strings: "double quoted"
- Characters: 'single quoted'
- Operators: +, -, *, /, ==, !=, &&, ||, <<, >>, ?, :, etc.
- Delimiters: (, ), {, }, ;, ,

Number Formats
--------------
| Format  | Example | Token        | Value |
|---------|---------|--------------|-------|
| Integer | 123     | NUMBER       | 123   |
| Float   | 3.14    | FLOAT_NUMBER | 3.14  |

A float literal needs digits on both sides of the '.'; there is no
exponent form. Integer literals must fit in a signed 64-bit word.

Comments
--------
- Single-line: // comment
- Multi-line: /* comment */

Escape Sequences
----------------
\\n (newline), \\r (return), \\t (tab), \\\\ (backslash),
\\' (quote), \\" (double quote), \\0 (null), \\xNN (hex), \\NNN (octal)

Unknown escapes stand for the escaped character itself ("\\q" is "q").

Example Usage
-------------
>>> from c4py.minic.lexer import CLexer
>>> lexer = CLexer('int main() { return 4.5; }', "test.c")
>>> for token in lexer.tokenize():
...     print(token)
Token(INT, 'int', 1:1)
Token(IDENTIFIER, 'main', 1:5)
Token(LPAREN, '(', 1:9)
Token(RPAREN, ')', 1:10)
Token(LBRACE, '{', 1:12)
Token(RETURN, 'return', 1:14)
Token(FLOAT_NUMBER, 4.5, 1:21)
Token(SEMICOLON, ';', 1:24)
Token(RBRACE, '}', 1:26)
Token(EOF, 1:27)
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, Optional
import math
import string

from c4py.errors import SourceLocation
from c4py.minic.errors import (
    LexError,
    UnterminatedStringError,
    InvalidCharacterError,
)


# Range of an Int value (two's-complement 64-bit)
INT_MIN = -(1 << 63)
INT_MAX = (1 << 63) - 1


# =============================================================================
# Token Type Enumeration
# =============================================================================

class CTokenType(Enum):
    """
    Token types for the Mini-C language.

    Keywords are distinguished from identifiers to simplify parsing.
    """

    # === Structural Tokens ===
    EOF = auto()            # End of file

    # === Identifiers and Literals ===
    IDENTIFIER = auto()     # Variable/function names
    NUMBER = auto()         # Integer literals
    FLOAT_NUMBER = auto()   # Float literals 1.5
    STRING = auto()         # String literals "..."
    CHAR_LITERAL = auto()   # Character literals '...'

    # === Keywords - Type Specifiers ===
    VOID = auto()           # void
    CHAR = auto()           # char
    INT = auto()            # int
    FLOAT = auto()          # float

    # === Keywords - Control Flow ===
    IF = auto()             # if
    ELSE = auto()           # else
    WHILE = auto()          # while
    RETURN = auto()         # return

    # === Keywords - Other ===
    SIZEOF = auto()         # sizeof

    # === Arithmetic Operators ===
    PLUS = auto()           # +
    MINUS = auto()          # - (subtract or negate)
    STAR = auto()           # * (multiply or dereference)
    SLASH = auto()          # /
    PERCENT = auto()        # %

    # === Comparison Operators ===
    EQ = auto()             # ==
    NE = auto()             # !=
    LT = auto()             # <
    GT = auto()             # >
    LE = auto()             # <=
    GE = auto()             # >=

    # === Logical Operators ===
    AND = auto()            # &&
    OR = auto()             # ||
    NOT = auto()            # !

    # === Bitwise Operators ===
    AMPERSAND = auto()      # & (bitwise AND or address-of)
    PIPE = auto()           # |
    CARET = auto()          # ^
    LSHIFT = auto()         # <<
    RSHIFT = auto()         # >>

    # === Assignment ===
    ASSIGN = auto()         # =

    # === Delimiters ===
    LPAREN = auto()         # (
    RPAREN = auto()         # )
    LBRACE = auto()         # {
    RBRACE = auto()         # }
    SEMICOLON = auto()      # ;
    COMMA = auto()          # ,
    COLON = auto()          # :
    QUESTION = auto()       # ? (ternary operator)


# =============================================================================
# Keyword Mapping
# =============================================================================

KEYWORDS: dict[str, CTokenType] = {
    # Type specifiers
    "void": CTokenType.VOID,
    "char": CTokenType.CHAR,
    "int": CTokenType.INT,
    "float": CTokenType.FLOAT,

    # Control flow
    "if": CTokenType.IF,
    "else": CTokenType.ELSE,
    "while": CTokenType.WHILE,
    "return": CTokenType.RETURN,

    # Other
    "sizeof": CTokenType.SIZEOF,
}

# Token types that begin a type name
TYPE_KEYWORDS = frozenset({
    CTokenType.VOID,
    CTokenType.CHAR,
    CTokenType.INT,
    CTokenType.FLOAT,
})


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class CToken:
    """
    Represents a single token from Mini-C source code.

    Attributes:
        type: The CTokenType classification
        value: Decoded payload - int for integer and character literals,
            float for float literals, str for strings, identifiers and
            operators, None for EOF
        line: Line number in source (1-indexed)
        column: Column number in source (1-indexed)
        filename: Name of the source file
    """
    type: CTokenType
    value: str | int | float | None
    line: int
    column: int
    filename: str

    def __repr__(self) -> str:
        """Format token for debugging output."""
        if self.value is not None:
            if isinstance(self.value, (int, float)):
                return f"Token({self.type.name}, {self.value}, {self.line}:{self.column})"
            return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.column})"
        return f"Token({self.type.name}, {self.line}:{self.column})"

    @property
    def location(self) -> SourceLocation:
        """Return a SourceLocation for error reporting."""
        return SourceLocation(self.filename, self.line, self.column)

    def is_type_keyword(self) -> bool:
        """Return True if this token is a type keyword."""
        return self.type in TYPE_KEYWORDS


# =============================================================================
# Lexer Implementation
# =============================================================================

class CLexer:
    """
    Tokenizes Mini-C source code.

    Tokens are produced lazily: a lexical error surfaces when the parser
    pulls the offending token, not before. Every error carries the exact
    source location and the text of the offending line.

    Usage:
        lexer = CLexer(source_text, filename)
        tokens = list(lexer.tokenize())

    Attributes:
        source: The source code being tokenized
        filename: Name of the source file (for error reporting)
    """

    # Characters that can start an identifier
    IDENT_START = string.ascii_letters + "_"

    # Characters that can continue an identifier
    IDENT_CHARS = string.ascii_letters + string.digits + "_"

    # Escape sequences in strings and characters
    ESCAPE_SEQUENCES = {
        "n": "\n",      # Newline
        "r": "\r",      # Carriage return
        "t": "\t",      # Tab
        "b": "\b",      # Backspace
        "f": "\f",      # Form feed
        "v": "\v",      # Vertical tab
        "\\": "\\",     # Backslash
        "'": "'",       # Single quote
        '"': '"',       # Double quote
        "a": "\a",      # Bell/alert
    }

    def __init__(self, source: str, filename: str = "<input>"):
        """
        Initialize the lexer with source code.

        Args:
            source: The Mini-C source code to tokenize
            filename: Name of the source file (for error messages)
        """
        self.source = source
        self.filename = filename

        # Current position in source
        self._pos = 0
        self._line = 1
        self._column = 1

        # Track line start position for error reporting
        self._line_start_pos = 0

    def tokenize(self) -> Iterator[CToken]:
        """
        Generate tokens from the source code.

        Yields:
            CToken objects, always ending with a single EOF token

        Raises:
            LexError: If invalid input is encountered
        """
        while not self._at_end():
            self._skip_whitespace_and_comments()

            if self._at_end():
                break

            yield self._scan_token()

        yield self._make_token(CTokenType.EOF, None)

    # =========================================================================
    # Character Access Methods
    # =========================================================================

    def _at_end(self) -> bool:
        """Check if we've reached the end of source."""
        return self._pos >= len(self.source)

    def _peek(self, offset: int = 0) -> str:
        """
        Look at character at current position + offset without advancing.

        Returns empty string if past end of source.
        """
        pos = self._pos + offset
        if pos >= len(self.source):
            return ""
        return self.source[pos]

    def _advance(self) -> str:
        """Consume and return the current character, tracking line/column."""
        if self._at_end():
            return ""

        char = self.source[self._pos]
        self._pos += 1

        if char == "\n":
            self._line += 1
            self._column = 1
            self._line_start_pos = self._pos
        else:
            self._column += 1

        return char

    def _match(self, expected: str) -> bool:
        """Consume next character if it matches expected."""
        if self._peek() == expected:
            self._advance()
            return True
        return False

    # =========================================================================
    # Token Creation
    # =========================================================================

    def _make_token(
        self,
        token_type: CTokenType,
        value: str | int | float | None,
        start_line: Optional[int] = None,
        start_column: Optional[int] = None,
    ) -> CToken:
        """
        Create a token with current or specified position.

        Args:
            token_type: The type of token
            value: The token value
            start_line: Override line number (for multi-char tokens)
            start_column: Override column number
        """
        return CToken(
            type=token_type,
            value=value,
            line=start_line or self._line,
            column=start_column or self._column,
            filename=self.filename,
        )

    def _error(
        self,
        message: str,
        hint: Optional[str] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ) -> LexError:
        """
        Create a lexical error at the current (or given) location.

        The source line attached is always the line being scanned.
        """
        location = SourceLocation(
            self.filename,
            line or self._line,
            column or self._column,
        )
        return LexError(message, location, hint=hint, source_line=self._get_current_line())

    # =========================================================================
    # Whitespace and Comment Handling
    # =========================================================================

    def _skip_whitespace_and_comments(self) -> None:
        """Skip all whitespace and comments."""
        while not self._at_end():
            char = self._peek()

            if char in " \t\n\r\f\v":
                self._advance()
                continue

            # Single-line comment: //
            if char == "/" and self._peek(1) == "/":
                self._skip_single_line_comment()
                continue

            # Multi-line comment: /* */
            if char == "/" and self._peek(1) == "*":
                self._skip_multi_line_comment()
                continue

            break

    def _skip_single_line_comment(self) -> None:
        """Skip a single-line comment (// ...)."""
        self._advance()
        self._advance()

        while not self._at_end() and self._peek() != "\n":
            self._advance()

    def _skip_multi_line_comment(self) -> None:
        """
        Skip a multi-line comment (/* ... */).

        Raises:
            LexError: If comment is not terminated
        """
        start_line = self._line
        start_col = self._column
        start_line_text = self._get_current_line()

        self._advance()
        self._advance()

        while not self._at_end():
            if self._peek() == "*" and self._peek(1) == "/":
                self._advance()
                self._advance()
                return
            self._advance()

        raise LexError(
            "unterminated multi-line comment",
            SourceLocation(self.filename, start_line, start_col),
            hint="add closing */ to terminate the comment",
            source_line=start_line_text,
        )

    # =========================================================================
    # Token Scanning
    # =========================================================================

    def _scan_token(self) -> CToken:
        """Scan the next token from source."""
        start_line = self._line
        start_column = self._column

        char = self._peek()

        # Identifiers and keywords
        if char in self.IDENT_START:
            return self._scan_identifier(start_line, start_column)

        if char.isdigit():
            return self._scan_number(start_line, start_column)

        if char == '"':
            return self._scan_string(start_line, start_column)

        if char == "'":
            return self._scan_char(start_line, start_column)

        return self._scan_operator(start_line, start_column)

    def _scan_identifier(self, start_line: int, start_column: int) -> CToken:
        """
        Scan an identifier or keyword.

        Identifiers start with a letter or underscore and can contain
        letters, digits, and underscores.
        """
        chars = []
        while self._peek() and self._peek() in self.IDENT_CHARS:
            chars.append(self._advance())

        name = "".join(chars)

        if name in KEYWORDS:
            return self._make_token(KEYWORDS[name], name, start_line, start_column)

        return self._make_token(CTokenType.IDENTIFIER, name, start_line, start_column)

    def _scan_number(self, start_line: int, start_column: int) -> CToken:
        """
        Scan a numeric literal.

        Handles:
        - Integer: 123 (must fit in a signed 64-bit word)
        - Float: 3.14 (digits required after the '.')
        """
        chars = []
        while self._peek().isdigit():
            chars.append(self._advance())

        if self._peek() != ".":
            text = "".join(chars)
            value = int(text)
            if value > INT_MAX:
                raise self._error(
                    f"integer literal '{text}' is too large",
                    hint=f"the largest int is {INT_MAX}",
                    line=start_line,
                    column=start_column,
                )
            return self._make_token(CTokenType.NUMBER, value, start_line, start_column)

        chars.append(self._advance())  # consume .

        if not self._peek().isdigit():
            raise self._error(
                f"malformed float literal '{''.join(chars)}'",
                hint="a float literal needs digits after the '.' (write 1.0)",
                line=start_line,
                column=start_column,
            )

        while self._peek().isdigit():
            chars.append(self._advance())

        text = "".join(chars)
        value = float(text)
        if math.isinf(value):
            raise self._error(
                f"float literal '{text}' is out of range",
                line=start_line,
                column=start_column,
            )
        return self._make_token(CTokenType.FLOAT_NUMBER, value, start_line, start_column)

    def _scan_string(self, start_line: int, start_column: int) -> CToken:
        """
        Scan a double-quoted string literal.

        Escape sequences are resolved here; the token value is the
        decoded text.
        """
        self._advance()  # consume opening "

        chars = []
        while not self._at_end():
            char = self._peek()

            if char == '"':
                self._advance()
                return self._make_token(
                    CTokenType.STRING,
                    "".join(chars),
                    start_line,
                    start_column,
                )

            if char == "\n":
                raise UnterminatedStringError(
                    SourceLocation(self.filename, start_line, start_column),
                    self._get_current_line(),
                )

            if char == "\\":
                self._advance()
                chars.append(self._scan_escape_sequence())
            else:
                chars.append(self._advance())

        raise UnterminatedStringError(
            SourceLocation(self.filename, start_line, start_column),
            self._get_current_line(),
        )

    def _scan_char(self, start_line: int, start_column: int) -> CToken:
        """
        Scan a single-quoted character literal.

        The token value is the character code, which must fit in a byte.
        """
        self._advance()  # consume opening '

        if self._at_end() or self._peek() == "\n":
            raise self._error(
                "unterminated character literal",
                hint="add closing ' to complete the character literal",
                line=start_line,
                column=start_column,
            )

        if self._peek() == "'":
            raise self._error(
                "empty character literal",
                line=start_line,
                column=start_column,
            )

        if self._peek() == "\\":
            self._advance()
            char = self._scan_escape_sequence()
        else:
            char = self._advance()

        if self._peek() != "'":
            raise self._error(
                "character literal too long or missing closing quote",
                hint="character literals can only contain a single character",
            )
        self._advance()  # consume closing '

        value = ord(char)
        if value > 0xFF:
            raise self._error(
                f"character '{char}' does not fit in a char",
                hint="char values are limited to codes 0..255",
                line=start_line,
                column=start_column,
            )
        return self._make_token(CTokenType.CHAR_LITERAL, value, start_line, start_column)

    def _scan_escape_sequence(self) -> str:
        """
        Scan an escape sequence after backslash.

        Returns:
            The character represented by the escape sequence
        """
        if self._at_end() or self._peek() == "\n":
            raise self._error("unexpected end of line in escape sequence")

        char = self._advance()

        if char in self.ESCAPE_SEQUENCES:
            return self.ESCAPE_SEQUENCES[char]

        # Hex escape: \xNN
        if char == "x":
            hex_chars = []
            for _ in range(2):
                if self._peek() and self._peek() in string.hexdigits:
                    hex_chars.append(self._advance())
                else:
                    break

            if not hex_chars:
                raise self._error("expected hexadecimal digits after '\\x'")

            return chr(int("".join(hex_chars), 16))

        # Octal escape: \NNN (covers \0)
        if char in "01234567":
            octal_chars = [char]
            for _ in range(2):
                if self._peek() and self._peek() in "01234567":
                    octal_chars.append(self._advance())
                else:
                    break

            return chr(int("".join(octal_chars), 8) & 0xFF)

        return char

    def _scan_operator(self, start_line: int, start_column: int) -> CToken:
        """Scan an operator or delimiter."""
        char = self._advance()

        def token(token_type: CTokenType, text: str) -> CToken:
            return self._make_token(token_type, text, start_line, start_column)

        if char == "&":
            if self._match("&"):
                return token(CTokenType.AND, "&&")
            return token(CTokenType.AMPERSAND, "&")

        if char == "|":
            if self._match("|"):
                return token(CTokenType.OR, "||")
            return token(CTokenType.PIPE, "|")

        if char == "=":
            if self._match("="):
                return token(CTokenType.EQ, "==")
            return token(CTokenType.ASSIGN, "=")

        if char == "!":
            if self._match("="):
                return token(CTokenType.NE, "!=")
            return token(CTokenType.NOT, "!")

        if char == "<":
            if self._match("<"):
                return token(CTokenType.LSHIFT, "<<")
            if self._match("="):
                return token(CTokenType.LE, "<=")
            return token(CTokenType.LT, "<")

        if char == ">":
            if self._match(">"):
                return token(CTokenType.RSHIFT, ">>")
            if self._match("="):
                return token(CTokenType.GE, ">=")
            return token(CTokenType.GT, ">")

        single_tokens = {
            "+": CTokenType.PLUS,
            "-": CTokenType.MINUS,
            "*": CTokenType.STAR,
            "/": CTokenType.SLASH,
            "%": CTokenType.PERCENT,
            "^": CTokenType.CARET,
            "(": CTokenType.LPAREN,
            ")": CTokenType.RPAREN,
            "{": CTokenType.LBRACE,
            "}": CTokenType.RBRACE,
            ";": CTokenType.SEMICOLON,
            ",": CTokenType.COMMA,
            ":": CTokenType.COLON,
            "?": CTokenType.QUESTION,
        }

        if char in single_tokens:
            return token(single_tokens[char], char)

        raise InvalidCharacterError(
            char,
            SourceLocation(self.filename, start_line, start_column),
            self._get_current_line(),
        )

    # =========================================================================
    # Utility Methods
    # =========================================================================

    def _get_current_line(self) -> str:
        """Get the current line of source text for error reporting."""
        line_end = self.source.find("\n", self._line_start_pos)
        if line_end == -1:
            line_end = len(self.source)
        return self.source[self._line_start_pos:line_end]


def tokenize(source: str, filename: str = "<input>") -> Iterator[CToken]:
    """Convenience wrapper: lazily tokenize a source string."""
    return CLexer(source, filename).tokenize()
