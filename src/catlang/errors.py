"""
Syntax diagnostics and the parser's exception type.

Error codes:
- E101: a specific token was expected
- E102: input ended in the middle of a construct
- E103: token cannot start an expression
- E104: integer literal outside the 64-bit range
- E105: illegal character or unterminated string

Evaluation errors are not exceptions; they are ``Error`` objects produced
by the interpreter (see ``catlang.runtime.values``).
"""

from dataclasses import dataclass, field
from typing import Optional, List
from .tokens import SourceSpan, Token, TokenType


@dataclass
class Diagnostic:
    """One syntax error, anchored at the offending token."""
    code: str
    message: str
    span: SourceSpan
    source_line: Optional[str] = None
    hints: List[str] = field(default_factory=list)

    def format(self, show_source: bool = True) -> str:
        """Render as ``line:col: error[CODE]: message``, optionally with the source line."""
        lines = [f"{self.span.start}: error[{self.code}]: {self.message}"]

        if show_source and self.source_line is not None:
            start, end = self.span.start, self.span.end
            width = end.column - start.column if end.line == start.line else 1
            lines.append(f"{start.line:>4} | {self.source_line}")
            lines.append(f"     | {' ' * (start.column - 1)}{'^' * max(1, width)}")

        lines.extend(f"     = hint: {hint}" for hint in self.hints)
        return "\n".join(lines)

    def to_json(self) -> dict:
        """Plain-dict form for editor tooling."""
        def position(loc):
            return {"line": loc.line, "column": loc.column, "offset": loc.offset}

        return {
            "code": self.code,
            "message": self.message,
            "range": {"start": position(self.span.start), "end": position(self.span.end)},
            "hints": list(self.hints),
        }


class CatError(Exception):
    """Base exception for language front-end errors."""

    def __init__(self, diagnostic: Diagnostic):
        self.diagnostic = diagnostic
        super().__init__(diagnostic.message)

    def __str__(self) -> str:
        return self.diagnostic.format()


class ParserError(CatError):
    """Raised by a parse rule; the parser records it and resynchronizes."""
    pass


def _parser_error(code: str, message: str, found: Token, source_line: Optional[str],
                  hints: Optional[List[str]] = None) -> ParserError:
    return ParserError(Diagnostic(code, message, found.span, source_line, hints or []))


def error_unexpected_token(expected: TokenType, found: Token,
                           source_line: str = None) -> ParserError:
    return _parser_error(
        "E101", f"expected next token to be {expected.value}, got {found.type.value} instead",
        found, source_line)


def error_unexpected_eof(expected: str, found: Token,
                         source_line: str = None) -> ParserError:
    return _parser_error("E102", f"unexpected end of input, expected {expected}",
                         found, source_line)


def error_no_prefix_parse_fn(found: Token, source_line: str = None) -> ParserError:
    return _parser_error("E103", f"no prefix parse function for {found.type.value} found",
                         found, source_line)


def error_invalid_integer(found: Token, source_line: str = None) -> ParserError:
    return _parser_error("E104", f"could not parse '{found.literal}' as integer",
                         found, source_line, ["integers are signed 64-bit values"])


def error_illegal_token(found: Token, source_line: str = None) -> ParserError:
    if found.literal.startswith('"'):
        return _parser_error("E105", "unterminated string literal", found, source_line,
                             ["string literals must be closed with a matching quote"])
    return _parser_error("E105", f"illegal token '{found.literal}'", found, source_line)


class DiagnosticCollector:
    """Syntax errors gathered over one parse, capped at ``max_errors``."""

    def __init__(self, max_errors: int = 20):
        self.diagnostics: List[Diagnostic] = []
        self.max_errors = max_errors

    def add_error(self, error: CatError) -> None:
        self.diagnostics.append(error.diagnostic)

    @property
    def error_count(self) -> int:
        return len(self.diagnostics)

    @property
    def has_errors(self) -> bool:
        return bool(self.diagnostics)

    @property
    def should_stop(self) -> bool:
        return self.error_count >= self.max_errors

    def messages(self) -> List[str]:
        """One-line rendering of every error, in report order."""
        return [d.format(show_source=False) for d in self.diagnostics]

    def format_all(self, show_source: bool = True) -> str:
        """Every error followed by a count line; empty when there are none."""
        if not self.diagnostics:
            return ""
        parts = [d.format(show_source) for d in self.diagnostics]
        parts.append(f"{self.error_count} syntax error(s)")
        return "\n\n".join(parts)

    def to_json(self) -> dict:
        return {
            "diagnostics": [d.to_json() for d in self.diagnostics],
            "error_count": self.error_count,
        }
