"""
cat runtime - Tree-walking interpreter for cat programs.

This module provides:
- Interpreter: Evaluates AST nodes to runtime objects
- Object model: Integer, String, Boolean, Null, Array, Hash, Function, ...
- Environment: Lexical scope chain used for closures
- BuiltinRegistry: Built-in function implementations
"""

from .values import (
    ObjectType,
    Object,
    HashKey,
    Hashable,
    Integer,
    String,
    Boolean,
    Null,
    Array,
    HashPair,
    Hash,
    Function,
    Builtin,
    Error,
    ReturnValue,
    TRUE,
    FALSE,
    NULL,
    int_val,
    string_val,
    bool_val,
    array_val,
    error_val,
    is_error,
    is_truthy,
)

from .environment import (
    Environment,
)

from .builtins import (
    BuiltinRegistry,
    get_builtin_registry,
    call_builtin,
)

from .interpreter import (
    Interpreter,
    ExecutionResult,
    evaluate,
    run_source,
)

__all__ = [
    # Values
    'ObjectType',
    'Object',
    'HashKey',
    'Hashable',
    'Integer',
    'String',
    'Boolean',
    'Null',
    'Array',
    'HashPair',
    'Hash',
    'Function',
    'Builtin',
    'Error',
    'ReturnValue',
    'TRUE',
    'FALSE',
    'NULL',
    'int_val',
    'string_val',
    'bool_val',
    'array_val',
    'error_val',
    'is_error',
    'is_truthy',

    # Environment
    'Environment',

    # Builtins
    'BuiltinRegistry',
    'get_builtin_registry',
    'call_builtin',

    # Interpreter
    'Interpreter',
    'ExecutionResult',
    'evaluate',
    'run_source',
]
