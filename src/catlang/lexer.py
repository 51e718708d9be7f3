"""
Lexer for the cat language.

Converts source text into a stream of tokens for the parser. The lexer is
pull-based: the parser asks for one token at a time with ``next_token()``.
It never raises; anything it cannot classify becomes an ILLEGAL token and
is reported by the parser.

Supports:
- Identifiers and the keywords fn, let, true, false, if, else, return
- Decimal integer literals
- Double-quoted string literals with escape sequences
- Single-line comments (#)
- One- and two-character operators (== and !=)
"""

from typing import List, Optional, Iterator
from .tokens import (
    Token, TokenType, SourceLocation, SourceSpan, lookup_ident,
)


DIGITS = "0123456789"


class Lexer:
    """
    Tokenizer for the cat language.

    Usage:
        lexer = Lexer(source_code)
        tokens = lexer.tokenize()

    Or for streaming:
        lexer = Lexer(source_code)
        token = lexer.next_token()
    """

    SINGLE_CHAR_TOKENS = {
        '=': TokenType.ASSIGN,
        '+': TokenType.PLUS,
        '-': TokenType.MINUS,
        '!': TokenType.BANG,
        '*': TokenType.ASTERISK,
        '/': TokenType.SLASH,
        '<': TokenType.LT,
        '>': TokenType.GT,
        ',': TokenType.COMMA,
        ';': TokenType.SEMICOLON,
        ':': TokenType.COLON,
        '(': TokenType.LPAREN,
        ')': TokenType.RPAREN,
        '{': TokenType.LBRACE,
        '}': TokenType.RBRACE,
        '[': TokenType.LBRACKET,
        ']': TokenType.RBRACKET,
    }

    ESCAPE_CHARS = {
        'n': '\n',
        't': '\t',
        'r': '\r',
        '\\': '\\',
        '"': '"',
    }

    def __init__(self, source: str, filename: Optional[str] = None):
        self.source = source
        self.filename = filename
        self.pos = 0            # Current position in source
        self.line = 1           # Current line (1-indexed)
        self.column = 1         # Current column (1-indexed)
        self._lines: Optional[List[str]] = None  # Cached line list

    @property
    def lines(self) -> List[str]:
        """Lazy-load line list for error reporting."""
        if self._lines is None:
            self._lines = self.source.splitlines()
        return self._lines

    def get_source_line(self, line_num: int) -> Optional[str]:
        """Get a specific line of source (1-indexed)."""
        if 1 <= line_num <= len(self.lines):
            return self.lines[line_num - 1]
        return None

    def _location(self) -> SourceLocation:
        """Get current source location."""
        return SourceLocation(self.line, self.column, self.pos, self.filename)

    def _span(self, start: SourceLocation) -> SourceSpan:
        """Create a span from start to current position."""
        return SourceSpan(start, self._location())

    def _peek(self, offset: int = 0) -> str:
        """Look at character at current position + offset without consuming."""
        idx = self.pos + offset
        if idx >= len(self.source):
            return '\0'
        return self.source[idx]

    def _advance(self) -> str:
        """Consume and return current character."""
        if self.pos >= len(self.source):
            return '\0'
        ch = self.source[self.pos]
        self.pos += 1
        if ch == '\n':
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return ch

    def _match(self, expected: str) -> bool:
        """Consume character if it matches expected."""
        if self._peek() == expected:
            self._advance()
            return True
        return False

    def _is_at_end(self) -> bool:
        """Check if we've reached end of source."""
        return self.pos >= len(self.source)

    def _skip_whitespace_and_comments(self) -> None:
        while not self._is_at_end():
            ch = self._peek()
            if ch in ' \t\r\n':
                self._advance()
            elif ch == '#':
                while self._peek() != '\n' and not self._is_at_end():
                    self._advance()
            else:
                break

    def _make_token(self, token_type: TokenType, start: SourceLocation,
                    literal: Optional[str] = None) -> Token:
        """Create a token; the literal defaults to the consumed source text."""
        if literal is None:
            literal = self.source[start.offset:self.pos]
        return Token(token_type, literal, self._span(start))

    def _scan_string(self) -> Token:
        """Scan a string literal; the token literal is the unescaped text."""
        start = self._location()
        self._advance()  # consume opening quote

        chars = []
        while not self._is_at_end() and self._peek() != '"':
            ch = self._advance()
            if ch == '\\' and not self._is_at_end():
                esc = self._advance()
                chars.append(self.ESCAPE_CHARS.get(esc, esc))
            else:
                chars.append(ch)

        if self._is_at_end():
            # Unterminated: hand the raw text to the parser as ILLEGAL
            return self._make_token(TokenType.ILLEGAL, start)

        self._advance()  # consume closing quote
        return self._make_token(TokenType.STRING, start, ''.join(chars))

    def _scan_number(self) -> Token:
        start = self._location()
        while self._peek() in DIGITS:
            self._advance()
        return self._make_token(TokenType.INT, start)

    def _scan_identifier_or_keyword(self) -> Token:
        start = self._location()
        while self._peek().isalnum() or self._peek() == '_':
            self._advance()
        lexeme = self.source[start.offset:self.pos]
        return self._make_token(lookup_ident(lexeme), start, lexeme)

    def next_token(self) -> Token:
        """Scan and return the next token. Returns EOF forever once exhausted."""
        self._skip_whitespace_and_comments()

        start = self._location()
        if self._is_at_end():
            return self._make_token(TokenType.EOF, start, "")

        ch = self._peek()

        if ch == '"':
            return self._scan_string()

        if ch in DIGITS:
            return self._scan_number()

        if ch.isalpha() or ch == '_':
            return self._scan_identifier_or_keyword()

        self._advance()

        # Two-character operators
        if ch == '=' and self._match('='):
            return self._make_token(TokenType.EQ, start)
        if ch == '!' and self._match('='):
            return self._make_token(TokenType.NOT_EQ, start)

        if ch in self.SINGLE_CHAR_TOKENS:
            return self._make_token(self.SINGLE_CHAR_TOKENS[ch], start)

        return self._make_token(TokenType.ILLEGAL, start)

    def tokenize(self) -> List[Token]:
        """Tokenize the entire source, returning a list of tokens ending in EOF."""
        tokens = []
        while True:
            token = self.next_token()
            tokens.append(token)
            if token.type == TokenType.EOF:
                break
        return tokens

    def __iter__(self) -> Iterator[Token]:
        """Iterate over tokens, EOF included."""
        while True:
            token = self.next_token()
            yield token
            if token.type == TokenType.EOF:
                break


def tokenize(source: str, filename: Optional[str] = None) -> List[Token]:
    """
    Convenience function to tokenize source code.

    Args:
        source: The source code to tokenize
        filename: Optional filename for diagnostics

    Returns:
        List of tokens, always terminated by an EOF token
    """
    lexer = Lexer(source, filename)
    return lexer.tokenize()
