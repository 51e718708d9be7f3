"""
Lexical environments for the cat interpreter.

An Environment maps names to runtime objects and reads through to its
enclosing environment on a miss. Function values keep a reference to the
environment they were defined in, so a scope lives as long as any closure
created inside it.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional

from .values import Object


@dataclass(eq=False)
class Environment:
    """
    A single scope of name bindings.

    Environments form a chain via the `outer` field for lexical scoping.
    """
    store: Dict[str, Object] = field(default_factory=dict)
    outer: Optional["Environment"] = field(default=None, repr=False)
    name: str = "global"  # For debugging

    def get(self, name: str) -> Optional[Object]:
        """Look up a name in this scope or enclosing scopes."""
        env: Optional[Environment] = self
        while env is not None:
            if name in env.store:
                return env.store[name]
            env = env.outer
        return None

    def set(self, name: str, value: Object) -> Object:
        """Bind a name in this scope (shadowing enclosing scopes)."""
        self.store[name] = value
        return value

    def enclosed(self, name: str = "anonymous") -> "Environment":
        """Create a child scope whose lookups fall back to this one."""
        return Environment(outer=self, name=name)
