"""
Built-in function registry for the cat interpreter.

The registry is built once, on first use, and only read afterwards. The
evaluator consults it after a name is not found in the environment chain,
so a user binding such as ``let len = ...`` takes precedence.
"""

import logging
from typing import Callable, Dict, List, Optional

from .values import (
    Object, Builtin, Array, String, NULL,
    int_val, error_val,
)

logger = logging.getLogger(__name__)


def _arity_error(got: int, want: int) -> Object:
    return error_val(f"wrong number of arguments. got={got}, want={want}")


def _array_argument_error(name: str, arg: Object) -> Object:
    return error_val(f"argument to '{name}' must be ARRAY, got {arg.type.value}")


class BuiltinRegistry:
    """
    Registry of all built-in functions.

    Functions are registered by name and can be looked up for execution.
    """

    def __init__(self):
        self._functions: Dict[str, Builtin] = {}
        self._register_all()

    def get_function(self, name: str) -> Optional[Builtin]:
        """Look up a function by name."""
        return self._functions.get(name)

    def register(self, name: str, fn: Callable[[List[Object]], Object], doc: str = "") -> None:
        """Register a function."""
        self._functions[name] = Builtin(name, fn, doc)

    def names(self) -> List[str]:
        """Names of all registered functions, sorted."""
        return sorted(self._functions)

    def __contains__(self, name: str) -> bool:
        return name in self._functions

    def _register_all(self) -> None:
        """Register all built-in functions."""
        self._register_sequence_functions()
        self._register_io_functions()
        logger.debug("registered builtins: %s", ", ".join(self.names()))

    # --- Sequence Functions ---

    def _register_sequence_functions(self) -> None:
        """Register functions over strings and arrays."""

        def _len(args: List[Object]) -> Object:
            if len(args) != 1:
                return _arity_error(len(args), 1)
            arg = args[0]
            if isinstance(arg, String):
                return int_val(len(arg.value))
            if isinstance(arg, Array):
                return int_val(len(arg.elements))
            return error_val(f"argument to 'len' not supported, got {arg.type.value}")

        def _first(args: List[Object]) -> Object:
            if len(args) != 1:
                return _arity_error(len(args), 1)
            arg = args[0]
            if not isinstance(arg, Array):
                return _array_argument_error("first", arg)
            return arg.elements[0] if arg.elements else NULL

        def _last(args: List[Object]) -> Object:
            if len(args) != 1:
                return _arity_error(len(args), 1)
            arg = args[0]
            if not isinstance(arg, Array):
                return _array_argument_error("last", arg)
            return arg.elements[-1] if arg.elements else NULL

        def _push(args: List[Object]) -> Object:
            if len(args) != 2:
                return _arity_error(len(args), 2)
            arr, value = args
            if not isinstance(arr, Array):
                return _array_argument_error("push", arr)
            # In place: every name bound to this array sees the new element
            arr.elements.append(value)
            return int_val(len(arr.elements))

        self.register("len", _len, "Number of characters in a string or elements in an array.")
        self.register("first", _first, "First element of an array, or null if empty.")
        self.register("last", _last, "Last element of an array, or null if empty.")
        self.register("push", _push, "Append a value to an array in place; returns the new length.")

    # --- I/O Functions ---

    def _register_io_functions(self) -> None:
        """Register output functions."""

        def _puts(args: List[Object]) -> Object:
            for arg in args:
                print(arg.inspect())
            return NULL

        self.register("puts", _puts, "Print each argument on its own line; returns null.")


# Global registry instance
_registry: Optional[BuiltinRegistry] = None


def get_builtin_registry() -> BuiltinRegistry:
    """Get the global built-in function registry."""
    global _registry
    if _registry is None:
        _registry = BuiltinRegistry()
    return _registry


def call_builtin(name: str, args: List[Object]) -> Object:
    """
    Call a built-in function by name.

    Raises RuntimeError if function not found.
    """
    registry = get_builtin_registry()
    func = registry.get_function(name)
    if func is None:
        raise RuntimeError(f"Unknown built-in function: {name}")
    return func.fn(args)
