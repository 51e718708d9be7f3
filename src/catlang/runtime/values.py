"""
Runtime object model for the cat interpreter.

Every value the evaluator produces is an ``Object``: a tagged variant with
a type tag (``obj.type``) and a display form (``obj.inspect()``). Integers,
strings and booleans are hashable and may be used as hash keys.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, ClassVar, Dict, List, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from ..ast import Identifier, BlockStatement
    from .environment import Environment


class ObjectType(Enum):
    """Type tags for runtime objects, as shown in error messages."""
    INTEGER = "INTEGER"
    BOOLEAN = "BOOLEAN"
    NULL = "NULL"
    STRING = "STRING"
    ARRAY = "ARRAY"
    HASH = "HASH"
    FUNCTION = "FUNCTION"
    BUILTIN = "BUILTIN"
    ERROR = "ERROR"
    RETURN_VALUE = "RETURN_VALUE"


class Object(ABC):
    """Base class for all runtime values."""
    type: ClassVar[ObjectType]

    @abstractmethod
    def inspect(self) -> str:
        """Display form of the value."""

    def __str__(self) -> str:
        return self.inspect()


@dataclass(frozen=True)
class HashKey:
    """
    Key used to store a value in a Hash.

    The type tag is part of the key, so an Integer and a String never
    collide even when their raw values print the same.
    """
    type: ObjectType
    value: Any


class Hashable(ABC):
    """Capability of values that can be used as hash keys."""

    @abstractmethod
    def hash_key(self) -> HashKey:
        ...


# =============================================================================
# Scalar Values
# =============================================================================

INT64_MIN = -2**63
INT64_MAX = 2**63 - 1


def _wrap_int64(n: int) -> int:
    """Wrap a Python int into the signed 64-bit range."""
    return ((n - INT64_MIN) % 2**64) + INT64_MIN


@dataclass(frozen=True)
class Integer(Object, Hashable):
    type: ClassVar[ObjectType] = ObjectType.INTEGER
    value: int

    def inspect(self) -> str:
        return str(self.value)

    def hash_key(self) -> HashKey:
        return HashKey(self.type, self.value)


@dataclass(frozen=True)
class String(Object, Hashable):
    type: ClassVar[ObjectType] = ObjectType.STRING
    value: str

    def inspect(self) -> str:
        return self.value

    def hash_key(self) -> HashKey:
        return HashKey(self.type, self.value)


@dataclass(frozen=True)
class Boolean(Object, Hashable):
    """Boolean value. Use the shared ``TRUE`` and ``FALSE`` instances."""
    type: ClassVar[ObjectType] = ObjectType.BOOLEAN
    value: bool

    def inspect(self) -> str:
        return "true" if self.value else "false"

    def hash_key(self) -> HashKey:
        return HashKey(self.type, 1 if self.value else 0)


@dataclass(frozen=True)
class Null(Object):
    type: ClassVar[ObjectType] = ObjectType.NULL

    def inspect(self) -> str:
        return "null"


TRUE = Boolean(True)
FALSE = Boolean(False)
NULL = Null()


# =============================================================================
# Compound Values
# =============================================================================

@dataclass
class Array(Object):
    """
    An ordered sequence of objects.

    The element list is shared, not copied, when the array is bound to
    several names; ``push`` mutates it in place and every alias sees it.
    """
    type: ClassVar[ObjectType] = ObjectType.ARRAY
    elements: List[Object] = field(default_factory=list)

    def inspect(self) -> str:
        return "[" + ", ".join(e.inspect() for e in self.elements) + "]"


@dataclass(frozen=True)
class HashPair:
    """Original key object together with its value."""
    key: Object
    value: Object


@dataclass
class Hash(Object):
    type: ClassVar[ObjectType] = ObjectType.HASH
    pairs: Dict[HashKey, HashPair] = field(default_factory=dict)

    def inspect(self) -> str:
        items = (f"{p.key.inspect()}: {p.value.inspect()}" for p in self.pairs.values())
        return "{" + ", ".join(items) + "}"


@dataclass(eq=False)
class Function(Object):
    """A closure: parameters and body plus the environment it was defined in."""
    type: ClassVar[ObjectType] = ObjectType.FUNCTION
    parameters: Tuple["Identifier", ...]
    body: "BlockStatement"
    env: "Environment" = field(repr=False)

    def inspect(self) -> str:
        params = ", ".join(str(p) for p in self.parameters)
        return f"fn({params}) {self.body}"


@dataclass(eq=False)
class Builtin(Object):
    """A native function provided by the interpreter."""
    type: ClassVar[ObjectType] = ObjectType.BUILTIN
    name: str
    fn: Callable[[List[Object]], Object]
    doc: str = ""

    def inspect(self) -> str:
        return f"builtin function {self.name}"


# =============================================================================
# Control Values
# =============================================================================

@dataclass(frozen=True)
class Error(Object):
    """An evaluation error. Errors are values and short-circuit evaluation."""
    type: ClassVar[ObjectType] = ObjectType.ERROR
    message: str

    def inspect(self) -> str:
        return f"ERROR: {self.message}"


@dataclass(frozen=True)
class ReturnValue(Object):
    """Wraps the value of a return statement until a call boundary unwraps it."""
    type: ClassVar[ObjectType] = ObjectType.RETURN_VALUE
    value: Object

    def inspect(self) -> str:
        return self.value.inspect()


# Convenience constructors

def int_val(n: int) -> Integer:
    """Create an integer value, wrapping to 64 bits."""
    return Integer(_wrap_int64(int(n)))


def string_val(s: str) -> String:
    """Create a string value."""
    return String(str(s))


def bool_val(b: bool) -> Boolean:
    """Return the shared boolean instance for b."""
    return TRUE if b else FALSE


def array_val(elements: List[Object]) -> Array:
    """Create an array value; the list is used as is, not copied."""
    return Array(elements)


def error_val(message: str) -> Error:
    """Create an error value."""
    return Error(message)


def is_error(obj: Object) -> bool:
    """Check if an object is an evaluation error."""
    return isinstance(obj, Error)


def is_truthy(obj: Object) -> bool:
    """Null and false are falsy; every other value is truthy."""
    if isinstance(obj, Null):
        return False
    if isinstance(obj, Boolean):
        return obj.value
    return True
