"""
Pratt parser for the cat language.

Converts the lexer's token stream into an Abstract Syntax Tree (AST).
Expressions are parsed by precedence climbing: every token kind that can
start an expression has a prefix rule, every operator that can follow one
has an infix rule and a precedence level.
"""

import logging
from enum import IntEnum
from typing import List, Optional, Callable, Dict, Tuple
from .tokens import Token, TokenType
from .lexer import Lexer
from .ast import (
    # Expressions
    Expression, Identifier, IntegerLiteral, StringLiteral, BooleanLiteral,
    PrefixExpression, InfixExpression, IfExpression, FunctionLiteral,
    CallExpression, ArrayLiteral, IndexExpression, HashLiteral,
    # Statements
    Statement, LetStatement, ReturnStatement, ExpressionStatement,
    BlockStatement, Program,
)
from .errors import (
    ParserError,
    DiagnosticCollector,
    error_unexpected_token,
    error_unexpected_eof,
    error_no_prefix_parse_fn,
    error_invalid_integer,
    error_illegal_token,
)

logger = logging.getLogger(__name__)

INT64_MAX = 2**63 - 1


class Precedence(IntEnum):
    """Binding power of operators (higher = tighter binding)."""
    LOWEST = 1
    EQUALS = 2        # ==
    LESSGREATER = 3   # > or <
    SUM = 4           # +
    PRODUCT = 5       # *
    PREFIX = 6        # -X or !X
    CALL = 7          # myFunction(X), array[X]


PRECEDENCES: Dict[TokenType, Precedence] = {
    TokenType.EQ: Precedence.EQUALS,
    TokenType.NOT_EQ: Precedence.EQUALS,
    TokenType.LT: Precedence.LESSGREATER,
    TokenType.GT: Precedence.LESSGREATER,
    TokenType.PLUS: Precedence.SUM,
    TokenType.MINUS: Precedence.SUM,
    TokenType.SLASH: Precedence.PRODUCT,
    TokenType.ASTERISK: Precedence.PRODUCT,
    TokenType.LPAREN: Precedence.CALL,
    TokenType.LBRACKET: Precedence.CALL,
}

OPENING = {TokenType.LPAREN, TokenType.LBRACE, TokenType.LBRACKET}
CLOSING = {TokenType.RPAREN, TokenType.RBRACE, TokenType.RBRACKET}

PrefixParseFn = Callable[[], Expression]
InfixParseFn = Callable[[Expression], Expression]


class Parser:
    """
    Pratt parser for the cat language.

    Usage:
        parser = Parser(Lexer(source))
        program = parser.parse_program()
        if parser.errors:
            ...  # program must not be evaluated

    The parser keeps a two-token window (``cur_token`` and ``peek_token``)
    and never backtracks. A syntax error abandons the current top-level
    statement; parsing resumes after the next ``;`` so a single pass can
    report several problems.
    """

    def __init__(self, lexer: Lexer, max_errors: int = 20):
        self.lexer = lexer
        self.diagnostics = DiagnosticCollector(max_errors=max_errors)

        self.prefix_parse_fns: Dict[TokenType, PrefixParseFn] = {
            TokenType.IDENT: self._parse_identifier,
            TokenType.INT: self._parse_integer_literal,
            TokenType.STRING: self._parse_string_literal,
            TokenType.TRUE: self._parse_boolean,
            TokenType.FALSE: self._parse_boolean,
            TokenType.BANG: self._parse_prefix_expression,
            TokenType.MINUS: self._parse_prefix_expression,
            TokenType.LPAREN: self._parse_grouped_expression,
            TokenType.IF: self._parse_if_expression,
            TokenType.FUNCTION: self._parse_function_literal,
            TokenType.LBRACKET: self._parse_array_literal,
            TokenType.LBRACE: self._parse_hash_literal,
        }
        self.infix_parse_fns: Dict[TokenType, InfixParseFn] = {
            TokenType.PLUS: self._parse_infix_expression,
            TokenType.MINUS: self._parse_infix_expression,
            TokenType.SLASH: self._parse_infix_expression,
            TokenType.ASTERISK: self._parse_infix_expression,
            TokenType.EQ: self._parse_infix_expression,
            TokenType.NOT_EQ: self._parse_infix_expression,
            TokenType.LT: self._parse_infix_expression,
            TokenType.GT: self._parse_infix_expression,
            TokenType.LPAREN: self._parse_call_expression,
            TokenType.LBRACKET: self._parse_index_expression,
        }

        # Open brackets around cur_token, used to resynchronize after errors
        self._nesting = 0

        # Fill cur_token and peek_token
        self.cur_token: Token = lexer.next_token()
        self.peek_token: Token = lexer.next_token()
        self._track_nesting()

    @property
    def errors(self) -> List[str]:
        """Syntax errors found so far, one message per error."""
        return self.diagnostics.messages()

    # =========================================================================
    # Token Navigation
    # =========================================================================

    def _next_token(self) -> None:
        self.cur_token = self.peek_token
        self.peek_token = self.lexer.next_token()
        self._track_nesting()

    def _track_nesting(self) -> None:
        if self.cur_token.type in OPENING:
            self._nesting += 1
        elif self.cur_token.type in CLOSING:
            self._nesting = max(0, self._nesting - 1)

    def _cur_token_is(self, token_type: TokenType) -> bool:
        return self.cur_token.type == token_type

    def _peek_token_is(self, token_type: TokenType) -> bool:
        return self.peek_token.type == token_type

    def _expect_peek(self, token_type: TokenType) -> None:
        """Advance if the next token has the expected type, or raise error."""
        if self._peek_token_is(token_type):
            self._next_token()
            return
        raise self._peek_error(token_type)

    def _peek_precedence(self) -> Precedence:
        return PRECEDENCES.get(self.peek_token.type, Precedence.LOWEST)

    def _cur_precedence(self) -> Precedence:
        return PRECEDENCES.get(self.cur_token.type, Precedence.LOWEST)

    def _source_line(self, token: Token) -> Optional[str]:
        return self.lexer.get_source_line(token.span.start.line)

    def _peek_error(self, expected: TokenType) -> ParserError:
        token = self.peek_token
        if token.type == TokenType.EOF:
            return error_unexpected_eof(expected.value, token, self._source_line(token))
        return error_unexpected_token(expected, token, self._source_line(token))

    def _no_prefix_error(self) -> ParserError:
        token = self.cur_token
        if token.type == TokenType.EOF:
            return error_unexpected_eof("expression", token, self._source_line(token))
        if token.type == TokenType.ILLEGAL:
            return error_illegal_token(token, self._source_line(token))
        return error_no_prefix_parse_fn(token, self._source_line(token))

    def _synchronize(self) -> None:
        """Skip to the top-level ';' that ends the broken statement, or to EOF."""
        while not self._cur_token_is(TokenType.EOF):
            if self._cur_token_is(TokenType.SEMICOLON) and self._nesting == 0:
                return
            self._next_token()

    # =========================================================================
    # Statements
    # =========================================================================

    def parse_program(self) -> Program:
        """Parse the whole token stream.

        Always returns a Program; when ``errors`` is non-empty the program
        is incomplete and must not be evaluated.
        """
        statements: List[Statement] = []

        while not self._cur_token_is(TokenType.EOF):
            try:
                statements.append(self._parse_statement())
            except ParserError as e:
                self.diagnostics.add_error(e)
                logger.debug("syntax error: %s", e.diagnostic.message)
                if self.diagnostics.should_stop:
                    break
                self._synchronize()
            self._next_token()

        logger.debug("parsed %d statements, %d errors",
                     len(statements), self.diagnostics.error_count)
        return Program(tuple(statements))

    def _parse_statement(self) -> Statement:
        if self._cur_token_is(TokenType.LET):
            return self._parse_let_statement()
        if self._cur_token_is(TokenType.RETURN):
            return self._parse_return_statement()
        return self._parse_expression_statement()

    def _parse_let_statement(self) -> LetStatement:
        """Parse let <identifier> = <expression>;"""
        token = self.cur_token

        self._expect_peek(TokenType.IDENT)
        name = Identifier(self.cur_token, self.cur_token.literal)

        self._expect_peek(TokenType.ASSIGN)
        self._next_token()
        value = self._parse_expression(Precedence.LOWEST)

        if self._peek_token_is(TokenType.SEMICOLON):
            self._next_token()
        return LetStatement(token, name, value)

    def _parse_return_statement(self) -> ReturnStatement:
        token = self.cur_token
        self._next_token()
        value = self._parse_expression(Precedence.LOWEST)

        if self._peek_token_is(TokenType.SEMICOLON):
            self._next_token()
        return ReturnStatement(token, value)

    def _parse_expression_statement(self) -> ExpressionStatement:
        token = self.cur_token
        expression = self._parse_expression(Precedence.LOWEST)

        # Semicolons are optional, so `5 + 5` parses at the REPL
        if self._peek_token_is(TokenType.SEMICOLON):
            self._next_token()
        return ExpressionStatement(token, expression)

    def _parse_block_statement(self) -> BlockStatement:
        """Parse { <statements> }; cur_token is the opening brace."""
        token = self.cur_token
        statements: List[Statement] = []
        self._next_token()

        while not self._cur_token_is(TokenType.RBRACE):
            if self._cur_token_is(TokenType.EOF):
                raise error_unexpected_eof(
                    TokenType.RBRACE.value, self.cur_token,
                    self._source_line(self.cur_token))
            statements.append(self._parse_statement())
            self._next_token()

        return BlockStatement(token, tuple(statements))

    # =========================================================================
    # Expressions
    # =========================================================================

    def _parse_expression(self, precedence: Precedence) -> Expression:
        """Precedence climbing: fold infix rules while the next operator binds tighter."""
        prefix = self.prefix_parse_fns.get(self.cur_token.type)
        if prefix is None:
            raise self._no_prefix_error()
        left = prefix()

        while (not self._peek_token_is(TokenType.SEMICOLON)
               and precedence < self._peek_precedence()):
            infix = self.infix_parse_fns.get(self.peek_token.type)
            if infix is None:
                return left
            self._next_token()
            left = infix(left)

        return left

    def _parse_identifier(self) -> Expression:
        return Identifier(self.cur_token, self.cur_token.literal)

    def _parse_integer_literal(self) -> Expression:
        token = self.cur_token
        value = int(token.literal)
        if value > INT64_MAX:
            raise error_invalid_integer(token, self._source_line(token))
        return IntegerLiteral(token, value)

    def _parse_string_literal(self) -> Expression:
        return StringLiteral(self.cur_token, self.cur_token.literal)

    def _parse_boolean(self) -> Expression:
        return BooleanLiteral(self.cur_token, self._cur_token_is(TokenType.TRUE))

    def _parse_prefix_expression(self) -> Expression:
        token = self.cur_token
        self._next_token()
        right = self._parse_expression(Precedence.PREFIX)
        return PrefixExpression(token, token.literal, right)

    def _parse_infix_expression(self, left: Expression) -> Expression:
        token = self.cur_token
        precedence = self._cur_precedence()
        self._next_token()
        # Same precedence on the right makes operators left-associative
        right = self._parse_expression(precedence)
        return InfixExpression(token, left, token.literal, right)

    def _parse_grouped_expression(self) -> Expression:
        self._next_token()
        expression = self._parse_expression(Precedence.LOWEST)
        self._expect_peek(TokenType.RPAREN)
        return expression

    def _parse_if_expression(self) -> Expression:
        """Parse if (<condition>) { ... } [else { ... }]"""
        token = self.cur_token

        self._expect_peek(TokenType.LPAREN)
        self._next_token()
        condition = self._parse_expression(Precedence.LOWEST)
        self._expect_peek(TokenType.RPAREN)

        self._expect_peek(TokenType.LBRACE)
        consequence = self._parse_block_statement()

        alternative = None
        if self._peek_token_is(TokenType.ELSE):
            self._next_token()
            self._expect_peek(TokenType.LBRACE)
            alternative = self._parse_block_statement()

        return IfExpression(token, condition, consequence, alternative)

    def _parse_function_literal(self) -> Expression:
        """Parse fn(<parameters>) { ... }"""
        token = self.cur_token

        self._expect_peek(TokenType.LPAREN)
        parameters = self._parse_function_parameters()

        self._expect_peek(TokenType.LBRACE)
        body = self._parse_block_statement()

        return FunctionLiteral(token, parameters, body)

    def _parse_function_parameters(self) -> Tuple[Identifier, ...]:
        identifiers: List[Identifier] = []

        if self._peek_token_is(TokenType.RPAREN):
            self._next_token()
            return ()

        self._expect_peek(TokenType.IDENT)
        identifiers.append(Identifier(self.cur_token, self.cur_token.literal))

        while self._peek_token_is(TokenType.COMMA):
            self._next_token()
            self._expect_peek(TokenType.IDENT)
            identifiers.append(Identifier(self.cur_token, self.cur_token.literal))

        self._expect_peek(TokenType.RPAREN)
        return tuple(identifiers)

    def _parse_call_expression(self, function: Expression) -> Expression:
        token = self.cur_token
        arguments = self._parse_expression_list(TokenType.RPAREN)
        return CallExpression(token, function, arguments)

    def _parse_expression_list(self, end: TokenType) -> Tuple[Expression, ...]:
        """Parse a comma-separated list closed by ``end``."""
        items: List[Expression] = []

        if self._peek_token_is(end):
            self._next_token()
            return ()

        self._next_token()
        items.append(self._parse_expression(Precedence.LOWEST))

        while self._peek_token_is(TokenType.COMMA):
            self._next_token()
            self._next_token()
            items.append(self._parse_expression(Precedence.LOWEST))

        self._expect_peek(end)
        return tuple(items)

    def _parse_array_literal(self) -> Expression:
        token = self.cur_token
        return ArrayLiteral(token, self._parse_expression_list(TokenType.RBRACKET))

    def _parse_index_expression(self, left: Expression) -> Expression:
        token = self.cur_token
        self._next_token()
        index = self._parse_expression(Precedence.LOWEST)
        self._expect_peek(TokenType.RBRACKET)
        return IndexExpression(token, left, index)

    def _parse_hash_literal(self) -> Expression:
        """Parse {<key>: <value>, ...}"""
        token = self.cur_token
        pairs: List[Tuple[Expression, Expression]] = []

        while not self._peek_token_is(TokenType.RBRACE):
            self._next_token()
            key = self._parse_expression(Precedence.LOWEST)

            self._expect_peek(TokenType.COLON)
            self._next_token()
            value = self._parse_expression(Precedence.LOWEST)
            pairs.append((key, value))

            if not self._peek_token_is(TokenType.RBRACE):
                self._expect_peek(TokenType.COMMA)

        self._expect_peek(TokenType.RBRACE)
        return HashLiteral(token, tuple(pairs))


def parse(source: str, filename: Optional[str] = None) -> Tuple[Program, List[str]]:
    """
    Convenience function to parse source code.

    Args:
        source: The source code to parse
        filename: Optional filename for error messages

    Returns:
        The parsed Program and the list of syntax error messages. The
        program must not be evaluated when the list is non-empty.
    """
    parser = Parser(Lexer(source, filename))
    program = parser.parse_program()
    return program, parser.errors
