"""
Token types for the cat language lexer.

Token type values double as the display text used in parser diagnostics,
so ``TokenType.ASSIGN.value`` is ``"="`` and ``TokenType.INT.value`` is
``"INT"``.
"""

from enum import Enum
from dataclasses import dataclass
from typing import Optional


class TokenType(Enum):
    """All token types recognized by the lexer."""

    # --- Special ---
    ILLEGAL = "ILLEGAL"         # unrecognized character, unterminated string
    EOF = "EOF"                 # end of input

    # --- Identifiers and literals ---
    IDENT = "IDENT"             # add, foobar, x, y
    INT = "INT"                 # 1343456
    STRING = "STRING"           # "hello"

    # --- Operators ---
    ASSIGN = "="
    PLUS = "+"
    MINUS = "-"
    BANG = "!"
    ASTERISK = "*"
    SLASH = "/"
    LT = "<"
    GT = ">"
    EQ = "=="
    NOT_EQ = "!="

    # --- Delimiters ---
    COMMA = ","
    SEMICOLON = ";"
    COLON = ":"
    LPAREN = "("
    RPAREN = ")"
    LBRACE = "{"
    RBRACE = "}"
    LBRACKET = "["
    RBRACKET = "]"

    # --- Keywords ---
    FUNCTION = "FUNCTION"       # fn
    LET = "LET"                 # let
    TRUE = "TRUE"               # true
    FALSE = "FALSE"             # false
    IF = "IF"                   # if
    ELSE = "ELSE"               # else
    RETURN = "RETURN"           # return


@dataclass(frozen=True)
class SourceLocation:
    """Represents a position in source code."""
    line: int           # 1-indexed line number
    column: int         # 1-indexed column number
    offset: int         # 0-indexed character offset from start
    filename: Optional[str] = None

    def __str__(self) -> str:
        if self.filename:
            return f"{self.filename}:{self.line}:{self.column}"
        return f"{self.line}:{self.column}"


@dataclass(frozen=True)
class SourceSpan:
    """Represents a range in source code."""
    start: SourceLocation
    end: SourceLocation

    def __str__(self) -> str:
        if self.start.filename:
            return f"{self.start.filename}:{self.start.line}:{self.start.column}-{self.end.line}:{self.end.column}"
        return f"{self.start.line}:{self.start.column}-{self.end.line}:{self.end.column}"


NO_SPAN = SourceSpan(SourceLocation(0, 0, 0), SourceLocation(0, 0, 0))


@dataclass(frozen=True)
class Token:
    """A single token from the lexer.

    Two tokens are equal when kind and literal match; the span only feeds
    diagnostics.
    """
    type: TokenType
    literal: str
    span: SourceSpan = NO_SPAN

    def __eq__(self, other) -> bool:
        if not isinstance(other, Token):
            return NotImplemented
        return self.type == other.type and self.literal == other.literal

    def __hash__(self) -> int:
        return hash((self.type, self.literal))

    def __str__(self) -> str:
        if self.type in (TokenType.IDENT, TokenType.INT, TokenType.STRING,
                         TokenType.ILLEGAL):
            return f"{self.type.name}({self.literal!r})"
        return self.type.name


# Keyword mapping - maps identifier text to token type
KEYWORDS: dict[str, TokenType] = {
    "fn": TokenType.FUNCTION,
    "let": TokenType.LET,
    "true": TokenType.TRUE,
    "false": TokenType.FALSE,
    "if": TokenType.IF,
    "else": TokenType.ELSE,
    "return": TokenType.RETURN,
}


def lookup_ident(ident: str) -> TokenType:
    """Classify an identifier as a keyword or a plain IDENT."""
    return KEYWORDS.get(ident, TokenType.IDENT)
