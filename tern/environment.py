from typing import Any, Dict, Optional

from .errors import UndefinedNameError


def is_constant_name(name: str) -> bool:
    """Names made only of upper-case letters are constants."""
    return all(c.isupper() for c in name)


class Environment:
    """A lexical scope: variables and constants plus a link to the parent.

    Scopes are shared, mutable objects. A child holds a reference to its
    parent, so `assign` always updates the scope that owns the binding.
    """
    def __init__(self, parent: Optional['Environment'] = None):
        self.parent = parent
        self.variables: Dict[str, Any] = {}
        self.constants: Dict[str, Any] = {}

    def declare(self, name: str, value: Any):
        # Re-declaration silently replaces the previous binding
        if is_constant_name(name):
            self.constants[name] = value
        else:
            self.variables[name] = value

    def lookup(self, name: str) -> Any:
        env: Optional[Environment] = self
        while env is not None:
            if name in env.variables:
                return env.variables[name]
            if name in env.constants:
                return env.constants[name]
            env = env.parent
        raise UndefinedNameError(f"undefined variable {name}")

    def assign(self, name: str, value: Any):
        # Constants are never reachable here
        env: Optional[Environment] = self
        while env is not None:
            if name in env.variables:
                env.variables[name] = value
                return
            env = env.parent
        raise UndefinedNameError(f"undefined variable {name}")
