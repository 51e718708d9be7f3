"""
Tree-walking interpreter for the cat language.

Evaluates AST nodes directly to runtime objects. Evaluation errors are
``Error`` values, not exceptions: any operation that receives an Error
or a pending ReturnValue hands it back unchanged, so it reaches the
enclosing call or the top level without further statements running.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Union

from .values import (
    Object, Integer, String, Boolean, Null, Array, Hash, HashPair, Hashable,
    Function, Builtin, Error, ReturnValue,
    NULL, int_val, string_val, bool_val, array_val, error_val,
    is_error, is_truthy,
)
from .environment import Environment
from .builtins import get_builtin_registry

from ..ast import (
    Node, Program,
    Statement, LetStatement, ReturnStatement, ExpressionStatement, BlockStatement,
    Expression, Identifier, IntegerLiteral, StringLiteral, BooleanLiteral,
    PrefixExpression, InfixExpression, IfExpression, FunctionLiteral,
    CallExpression, ArrayLiteral, IndexExpression, HashLiteral,
)
from ..errors import Diagnostic

logger = logging.getLogger(__name__)


def _is_signal(obj: Object) -> bool:
    """Errors and return values stop the enclosing statement sequence."""
    return is_error(obj) or isinstance(obj, ReturnValue)


@dataclass
class ExecutionResult:
    """Result of parsing and evaluating a piece of source."""
    success: bool
    value: Optional[Object] = None
    diagnostics: List[Diagnostic] = field(default_factory=list)
    error_message: Optional[str] = None

    @property
    def messages(self) -> List[str]:
        """Syntax error messages, one line each."""
        return [d.format(show_source=False) for d in self.diagnostics]


class Interpreter:
    """
    Tree-walking interpreter for the cat language.

    Evaluates AST nodes by dispatching to type-specific methods.
    """

    def __init__(self):
        self.builtins = get_builtin_registry()

    def evaluate(self, node: Union[Node, Program], env: Environment) -> Object:
        """Evaluate any AST node in the given environment."""
        if isinstance(node, Program):
            return self._eval_program(node, env)
        elif isinstance(node, Statement):
            return self._eval_statement(node, env)
        elif isinstance(node, Expression):
            return self._eval_expression(node, env)
        else:
            raise RuntimeError(f"Unknown node type: {type(node).__name__}")

    # =========================================================================
    # Statements
    # =========================================================================

    def _eval_program(self, program: Program, env: Environment) -> Object:
        result: Object = NULL
        for stmt in program.statements:
            result = self._eval_statement(stmt, env)
            if isinstance(result, ReturnValue):
                return result.value
            if isinstance(result, Error):
                return result
        return result

    def _eval_statement(self, stmt: Statement, env: Environment) -> Object:
        if isinstance(stmt, ExpressionStatement):
            return self._eval_expression(stmt.expression, env)
        elif isinstance(stmt, LetStatement):
            return self._eval_let(stmt, env)
        elif isinstance(stmt, ReturnStatement):
            return self._eval_return(stmt, env)
        elif isinstance(stmt, BlockStatement):
            return self._eval_block(stmt, env)
        else:
            raise RuntimeError(f"Unknown statement type: {type(stmt).__name__}")

    def _eval_let(self, stmt: LetStatement, env: Environment) -> Object:
        value = self._eval_expression(stmt.value, env)
        if _is_signal(value):
            return value
        env.set(stmt.name.value, value)
        return NULL

    def _eval_return(self, stmt: ReturnStatement, env: Environment) -> Object:
        value = self._eval_expression(stmt.return_value, env)
        if _is_signal(value):
            return value
        return ReturnValue(value)

    def _eval_block(self, block: BlockStatement, env: Environment) -> Object:
        """Evaluate a block; return values stay wrapped for the enclosing call."""
        result: Object = NULL
        for stmt in block.statements:
            result = self._eval_statement(stmt, env)
            if _is_signal(result):
                return result
        return result

    # =========================================================================
    # Expressions
    # =========================================================================

    def _eval_expression(self, expr: Expression, env: Environment) -> Object:
        """Evaluate an expression to produce an Object."""
        if isinstance(expr, IntegerLiteral):
            return int_val(expr.value)
        elif isinstance(expr, BooleanLiteral):
            return bool_val(expr.value)
        elif isinstance(expr, StringLiteral):
            return string_val(expr.value)
        elif isinstance(expr, Identifier):
            return self._eval_identifier(expr, env)
        elif isinstance(expr, PrefixExpression):
            return self._eval_prefix(expr, env)
        elif isinstance(expr, InfixExpression):
            return self._eval_infix(expr, env)
        elif isinstance(expr, IfExpression):
            return self._eval_if(expr, env)
        elif isinstance(expr, FunctionLiteral):
            return Function(expr.parameters, expr.body, env)
        elif isinstance(expr, CallExpression):
            return self._eval_call(expr, env)
        elif isinstance(expr, ArrayLiteral):
            return self._eval_array_literal(expr, env)
        elif isinstance(expr, IndexExpression):
            return self._eval_index(expr, env)
        elif isinstance(expr, HashLiteral):
            return self._eval_hash_literal(expr, env)
        else:
            raise RuntimeError(f"Unknown expression type: {type(expr).__name__}")

    def _eval_identifier(self, ident: Identifier, env: Environment) -> Object:
        """Look up a name: environment chain first, then built-ins."""
        value = env.get(ident.value)
        if value is not None:
            return value
        builtin = self.builtins.get_function(ident.value)
        if builtin is not None:
            return builtin
        return error_val(f"identifier not found: {ident.value}")

    def _eval_prefix(self, expr: PrefixExpression, env: Environment) -> Object:
        right = self._eval_expression(expr.right, env)
        if _is_signal(right):
            return right

        if expr.operator == "!":
            return bool_val(not is_truthy(right))
        elif expr.operator == "-":
            if not isinstance(right, Integer):
                return error_val(f"unknown operator: -{right.type.value}")
            return int_val(-right.value)
        else:
            return error_val(f"unknown operator: {expr.operator}{right.type.value}")

    def _eval_infix(self, expr: InfixExpression, env: Environment) -> Object:
        left = self._eval_expression(expr.left, env)
        if _is_signal(left):
            return left
        right = self._eval_expression(expr.right, env)
        if _is_signal(right):
            return right
        return self._apply_infix(expr.operator, left, right)

    def _apply_infix(self, operator: str, left: Object, right: Object) -> Object:
        if left.type != right.type:
            return error_val(
                f"type mismatch: {left.type.value} {operator} {right.type.value}")
        if isinstance(left, Integer):
            return self._integer_infix(operator, left, right)
        if isinstance(left, String):
            return self._string_infix(operator, left, right)
        if operator == "==":
            return bool_val(self._same_value(left, right))
        if operator == "!=":
            return bool_val(not self._same_value(left, right))
        return error_val(
            f"unknown operator: {left.type.value} {operator} {right.type.value}")

    @staticmethod
    def _same_value(left: Object, right: Object) -> bool:
        # Booleans and null compare by value; containers and functions by identity
        if isinstance(left, (Boolean, Null)):
            return left == right
        return left is right

    def _integer_infix(self, operator: str, left: Integer, right: Integer) -> Object:
        a, b = left.value, right.value
        if operator == "+":
            return int_val(a + b)
        elif operator == "-":
            return int_val(a - b)
        elif operator == "*":
            return int_val(a * b)
        elif operator == "/":
            if b == 0:
                return error_val("division by zero")
            # Truncate toward zero
            quotient = abs(a) // abs(b)
            return int_val(-quotient if (a < 0) != (b < 0) else quotient)
        elif operator == "<":
            return bool_val(a < b)
        elif operator == ">":
            return bool_val(a > b)
        elif operator == "==":
            return bool_val(a == b)
        elif operator == "!=":
            return bool_val(a != b)
        return error_val(f"unknown operator: INTEGER {operator} INTEGER")

    def _string_infix(self, operator: str, left: String, right: String) -> Object:
        if operator == "+":
            return string_val(left.value + right.value)
        elif operator == "==":
            return bool_val(left.value == right.value)
        elif operator == "!=":
            return bool_val(left.value != right.value)
        return error_val(f"unknown operator: STRING {operator} STRING")

    def _eval_if(self, expr: IfExpression, env: Environment) -> Object:
        """Evaluate an if-expression. Branches run in the enclosing scope."""
        condition = self._eval_expression(expr.condition, env)
        if _is_signal(condition):
            return condition

        if is_truthy(condition):
            return self._eval_block(expr.consequence, env)
        elif expr.alternative is not None:
            return self._eval_block(expr.alternative, env)
        return NULL

    def _eval_call(self, call: CallExpression, env: Environment) -> Object:
        function = self._eval_expression(call.function, env)
        if _is_signal(function):
            return function

        args = self._eval_expressions(call.arguments, env)
        if len(args) == 1 and _is_signal(args[0]):
            return args[0]

        return self.apply_function(function, args)

    def _eval_expressions(self, exprs, env: Environment) -> List[Object]:
        """Evaluate left to right; on error or return, a one-element list holding it."""
        result = []
        for expr in exprs:
            value = self._eval_expression(expr, env)
            if _is_signal(value):
                return [value]
            result.append(value)
        return result

    def apply_function(self, function: Object, args: List[Object]) -> Object:
        """Call a function or builtin with already-evaluated arguments."""
        if isinstance(function, Function):
            if len(args) != len(function.parameters):
                return error_val(
                    f"wrong number of arguments. got={len(args)}, "
                    f"want={len(function.parameters)}")

            # New scope per call, enclosing the defining scope, not the caller's
            call_env = function.env.enclosed(name="call")
            for param, arg in zip(function.parameters, args):
                call_env.set(param.value, arg)

            result = self._eval_block(function.body, call_env)
            if isinstance(result, ReturnValue):
                return result.value
            return result

        if isinstance(function, Builtin):
            logger.debug("calling builtin %s with %d args", function.name, len(args))
            return function.fn(args)

        return error_val(f"not a function: {function.type.value}")

    def _eval_array_literal(self, lit: ArrayLiteral, env: Environment) -> Object:
        elements = self._eval_expressions(lit.elements, env)
        if len(elements) == 1 and _is_signal(elements[0]):
            return elements[0]
        return array_val(elements)

    def _eval_index(self, expr: IndexExpression, env: Environment) -> Object:
        left = self._eval_expression(expr.left, env)
        if _is_signal(left):
            return left
        index = self._eval_expression(expr.index, env)
        if _is_signal(index):
            return index

        if isinstance(left, Array) and isinstance(index, Integer):
            # Out of range (negative included) is null, not an error
            if 0 <= index.value < len(left.elements):
                return left.elements[index.value]
            return NULL
        if isinstance(left, Hash):
            if not isinstance(index, Hashable):
                return error_val(f"unusable as hash key: {index.type.value}")
            pair = left.pairs.get(index.hash_key())
            return pair.value if pair is not None else NULL
        return error_val(f"index operator not supported: {left.type.value}")

    def _eval_hash_literal(self, lit: HashLiteral, env: Environment) -> Object:
        pairs = {}
        for key_node, value_node in lit.pairs:
            key = self._eval_expression(key_node, env)
            if _is_signal(key):
                return key
            if not isinstance(key, Hashable):
                return error_val(f"unusable as hash key: {key.type.value}")

            value = self._eval_expression(value_node, env)
            if _is_signal(value):
                return value

            pairs[key.hash_key()] = HashPair(key, value)
        return Hash(pairs)


def evaluate(node: Union[Node, Program], env: Optional[Environment] = None) -> Object:
    """
    Evaluate a node.

    This is a convenience wrapper around Interpreter.evaluate(); a fresh
    global environment is used when none is given.
    """
    if env is None:
        env = Environment()
    return Interpreter().evaluate(node, env)


def run_source(
    source: str,
    env: Optional[Environment] = None,
    filename: Optional[str] = None,
) -> ExecutionResult:
    """
    High-level API to parse and evaluate source code in one call.

        from catlang import run_source

        result = run_source('''
            let add = fn(a, b) { a + b };
            add(2, 3)
        ''')

        if result.success:
            print(result.value.inspect())
        else:
            print(result.error_message)

    Args:
        source: Program text
        env: Environment to evaluate in; bindings made by the program
             remain in it afterwards
        filename: Optional filename for diagnostics

    Returns:
        ExecutionResult with the final value, or the syntax diagnostics
        when the source does not parse (it is then not evaluated)
    """
    from ..lexer import Lexer
    from ..parser import Parser

    parser = Parser(Lexer(source, filename))
    program = parser.parse_program()
    if parser.diagnostics.has_errors:
        return ExecutionResult(
            success=False,
            diagnostics=list(parser.diagnostics.diagnostics),
            error_message=f"Parser errors: {'; '.join(parser.errors)}",
        )

    if env is None:
        env = Environment()

    try:
        value = Interpreter().evaluate(program, env)
    except RecursionError:
        logger.debug("recursion limit hit while evaluating %s", filename or "<input>")
        value = error_val("maximum recursion depth exceeded")

    if is_error(value):
        return ExecutionResult(success=False, value=value, error_message=value.message)
    return ExecutionResult(success=True, value=value)
