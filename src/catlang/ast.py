"""
Abstract Syntax Tree (AST) node definitions for the cat language.

The AST is the data model shared by the parser and the interpreter. Nodes
are frozen dataclasses: child sequences are tuples, equality is structural
(tokens are ignored) and every node keeps the token it was built from.

``str(node)`` produces the canonical source rendering. Operator
applications are fully parenthesized, so ``1 + 2 * 3`` renders as
``(1 + (2 * 3))``, and every rendering parses back to an equal tree.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple, Any
from abc import ABC
from .tokens import Token


# =============================================================================
# Base Classes
# =============================================================================

@dataclass(frozen=True)
class Node(ABC):
    """Base class for all AST nodes."""
    # Originating token, for diagnostics and literal rendering; not part of equality
    token: Token = field(compare=False)

    def token_literal(self) -> str:
        return self.token.literal

    def __str__(self) -> str:
        raise NotImplementedError(f"No rendering for {self.__class__.__name__}")


@dataclass(frozen=True)
class Statement(Node):
    """Base class for all statements."""
    pass


@dataclass(frozen=True)
class Expression(Node):
    """Base class for all expressions."""
    pass


def _join_statements(statements: Tuple[Statement, ...]) -> str:
    """Render a statement sequence so it parses back the same way.

    Let and return statements carry their own ';'; expression statements
    need one inserted before the next statement.
    """
    out = ""
    for i, stmt in enumerate(statements):
        text = str(stmt)
        if i > 0:
            out += " " if out.endswith(";") else "; "
        out += text
    return out


def _quote(value: str) -> str:
    escaped = (value.replace("\\", "\\\\").replace('"', '\\"')
               .replace("\n", "\\n").replace("\t", "\\t").replace("\r", "\\r"))
    return f'"{escaped}"'


# =============================================================================
# Program
# =============================================================================

@dataclass(frozen=True)
class Program:
    """Root of the tree: the ordered top-level statements."""
    statements: Tuple[Statement, ...] = ()

    def token_literal(self) -> str:
        if self.statements:
            return self.statements[0].token_literal()
        return ""

    def __str__(self) -> str:
        return _join_statements(self.statements)


# =============================================================================
# Expression Nodes
# =============================================================================

@dataclass(frozen=True)
class Identifier(Expression):
    """A variable or function name reference."""
    value: str

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class IntegerLiteral(Expression):
    value: int

    def __str__(self) -> str:
        return self.token.literal


@dataclass(frozen=True)
class StringLiteral(Expression):
    value: str

    def __str__(self) -> str:
        return _quote(self.value)


@dataclass(frozen=True)
class BooleanLiteral(Expression):
    value: bool

    def __str__(self) -> str:
        return self.token.literal


@dataclass(frozen=True)
class PrefixExpression(Expression):
    """A prefix operator application (e.g., -a, !ok)."""
    operator: str
    right: Expression

    def __str__(self) -> str:
        return f"({self.operator}{self.right})"


@dataclass(frozen=True)
class InfixExpression(Expression):
    """A binary operator application (e.g., a + b). Token is the operator."""
    left: Expression
    operator: str
    right: Expression

    def __str__(self) -> str:
        return f"({self.left} {self.operator} {self.right})"


@dataclass(frozen=True)
class IfExpression(Expression):
    """An if-else expression; yields the value of the branch taken."""
    condition: Expression
    consequence: "BlockStatement"
    alternative: Optional["BlockStatement"] = None

    def __str__(self) -> str:
        out = f"if ({self.condition}) {self.consequence}"
        if self.alternative is not None:
            out += f" else {self.alternative}"
        return out


@dataclass(frozen=True)
class FunctionLiteral(Expression):
    """A function literal, fn(x, y) { ... }."""
    parameters: Tuple[Identifier, ...]
    body: "BlockStatement"

    def __str__(self) -> str:
        params = ", ".join(str(p) for p in self.parameters)
        return f"{self.token.literal}({params}) {self.body}"


@dataclass(frozen=True)
class CallExpression(Expression):
    """A call; token is the '(' that follows the callee."""
    function: Expression  # Identifier or FunctionLiteral, or any expression
    arguments: Tuple[Expression, ...]

    def __str__(self) -> str:
        args = ", ".join(str(a) for a in self.arguments)
        return f"{self.function}({args})"


@dataclass(frozen=True)
class ArrayLiteral(Expression):
    """An array literal (e.g., [1, 2 * 2, fn(x) { x }])."""
    elements: Tuple[Expression, ...]

    def __str__(self) -> str:
        return "[" + ", ".join(str(e) for e in self.elements) + "]"


@dataclass(frozen=True)
class IndexExpression(Expression):
    """Index access (e.g., xs[0], table["key"])."""
    left: Expression
    index: Expression

    def __str__(self) -> str:
        return f"({self.left}[{self.index}])"


@dataclass(frozen=True)
class HashLiteral(Expression):
    """A hash literal; pairs are kept in source order."""
    pairs: Tuple[Tuple[Expression, Expression], ...]

    def __str__(self) -> str:
        return "{" + ", ".join(f"{k}: {v}" for k, v in self.pairs) + "}"


# =============================================================================
# Statement Nodes
# =============================================================================

@dataclass(frozen=True)
class LetStatement(Statement):
    """A binding, let <name> = <value>;"""
    name: Identifier
    value: Expression

    def __str__(self) -> str:
        return f"{self.token_literal()} {self.name} = {self.value};"


@dataclass(frozen=True)
class ReturnStatement(Statement):
    return_value: Expression

    def __str__(self) -> str:
        return f"{self.token_literal()} {self.return_value};"


@dataclass(frozen=True)
class ExpressionStatement(Statement):
    """An expression used as a statement; token is its first token."""
    expression: Expression

    def __str__(self) -> str:
        return str(self.expression)


@dataclass(frozen=True)
class BlockStatement(Statement):
    """A brace-delimited statement sequence; token is the '{'."""
    statements: Tuple[Statement, ...] = ()

    def __str__(self) -> str:
        if not self.statements:
            return "{ }"
        return "{ " + _join_statements(self.statements) + " }"


# =============================================================================
# Debug Helpers
# =============================================================================

def format_ast(node: Any, indent: int = 0) -> str:
    """Render the tree structure of a node, one field per line."""
    pad = "  " * indent
    if isinstance(node, (Node, Program)):
        lines = [f"{pad}{node.__class__.__name__}"]
        for name, value in node.__dict__.items():
            if name == "token":
                continue
            if isinstance(value, (Node, Program)):
                lines.append(f"{pad}  {name}:")
                lines.append(format_ast(value, indent + 2))
            elif isinstance(value, tuple):
                lines.append(f"{pad}  {name}: [")
                for item in value:
                    lines.append(format_ast(item, indent + 2))
                lines.append(f"{pad}  ]")
            else:
                lines.append(f"{pad}  {name}: {value!r}")
        return "\n".join(lines)
    if isinstance(node, tuple):
        # hash literal pair
        return "\n".join(format_ast(item, indent) for item in node)
    return f"{pad}{node!r}"


def print_ast(node: Any) -> None:
    """Print an AST node for debugging."""
    print(format_ast(node))
