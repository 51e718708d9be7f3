"""
cat - a small dynamically-typed scripting language.

This module provides:
- Lexer: Tokenizes cat source code
- Parser: Builds an AST with a Pratt (precedence-climbing) parser
- Interpreter: Evaluates the AST with closures and built-in functions
- Shell: Interactive read-eval-print loop

Usage:
    from catlang import parse, run_source

    program, errors = parse('let x = 1 + 2 * 3;')
    print(program)          # let x = (1 + (2 * 3));

    result = run_source('''
    let newAdder = fn(x) { fn(y) { x + y } };
    let addTwo = newAdder(2);
    addTwo(3);
    ''')
    print(result.value.inspect())   # 5
"""

__version__ = "0.1.0"

from .tokens import (
    Token,
    TokenType,
    SourceLocation,
    SourceSpan,
    KEYWORDS,
    lookup_ident,
)

from .lexer import (
    Lexer,
    tokenize,
)

from .parser import (
    Parser,
    Precedence,
    parse,
)

from .ast import (
    # Base
    Node,
    Statement,
    Expression,
    Program,
    # Statements
    LetStatement,
    ReturnStatement,
    ExpressionStatement,
    BlockStatement,
    # Expressions
    Identifier,
    IntegerLiteral,
    StringLiteral,
    BooleanLiteral,
    PrefixExpression,
    InfixExpression,
    IfExpression,
    FunctionLiteral,
    CallExpression,
    ArrayLiteral,
    IndexExpression,
    HashLiteral,
    # Debug
    format_ast,
    print_ast,
)

from .errors import (
    Diagnostic,
    DiagnosticCollector,
    CatError,
    ParserError,
)

from .runtime import (
    ObjectType,
    Object,
    HashKey,
    Integer,
    String,
    Boolean,
    Null,
    Array,
    Hash,
    Function,
    Builtin,
    Error,
    ReturnValue,
    TRUE,
    FALSE,
    NULL,
    Environment,
    BuiltinRegistry,
    get_builtin_registry,
    Interpreter,
    ExecutionResult,
    evaluate,
    run_source,
)

__all__ = [
    '__version__',

    # Tokens
    'Token',
    'TokenType',
    'SourceLocation',
    'SourceSpan',
    'KEYWORDS',
    'lookup_ident',

    # Lexer
    'Lexer',
    'tokenize',

    # Parser
    'Parser',
    'Precedence',
    'parse',

    # AST
    'Node',
    'Statement',
    'Expression',
    'Program',
    'LetStatement',
    'ReturnStatement',
    'ExpressionStatement',
    'BlockStatement',
    'Identifier',
    'IntegerLiteral',
    'StringLiteral',
    'BooleanLiteral',
    'PrefixExpression',
    'InfixExpression',
    'IfExpression',
    'FunctionLiteral',
    'CallExpression',
    'ArrayLiteral',
    'IndexExpression',
    'HashLiteral',
    'format_ast',
    'print_ast',

    # Errors
    'Diagnostic',
    'DiagnosticCollector',
    'CatError',
    'ParserError',

    # Runtime
    'ObjectType',
    'Object',
    'HashKey',
    'Integer',
    'String',
    'Boolean',
    'Null',
    'Array',
    'Hash',
    'Function',
    'Builtin',
    'Error',
    'ReturnValue',
    'TRUE',
    'FALSE',
    'NULL',
    'Environment',
    'BuiltinRegistry',
    'get_builtin_registry',
    'Interpreter',
    'ExecutionResult',
    'evaluate',
    'run_source',
]
