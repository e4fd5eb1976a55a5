"""Middleware registry (source of truth).

If this module disappeared, rebuild it from the contract below. The registry
maps unique middleware names to rules so routes and actions can reference
shared authorization logic by name.

Accepted rules
--------------
- a plain callable ``rule(context)``;
- an *injectable*: a ``tuple``/``list`` whose last item is callable and whose
  preceding items are dependency names (strings). ``resolve`` binds the named
  dependencies positionally, producing ``rule(context)``.

Operations
----------
``register(name, rule)``
    Raises ``ConfigurationError`` when ``name`` is not a string, when ``rule``
    is neither callable nor a well-formed injectable, or when ``name`` is
    already registered. Returns the registry for chaining.

``lookup(name)``
    Raises ``ConfigurationError`` when ``name`` is not a string or unknown;
    returns the stored rule unchanged.

``middleware(name, *rule)``
    Arity overload kept for hosts that expose a single entry point: one
    argument looks up, two arguments register.

``resolve(name, providers)``
    Looks up ``name``; injectables get their dependencies from ``providers``
    (missing names raise ``ConfigurationError``), plain callables are returned
    unchanged.

Invariants
----------
- Names are unique; there is no replace/unregister operation.
- Stored rules are never wrapped or copied.
"""

from __future__ import annotations

from functools import partial
from typing import Any, Callable, Dict, Iterator, Mapping, Optional, Tuple

from .errors import ConfigurationError

__all__ = ["MiddlewareRegistry", "is_injectable"]

_MISSING = object()


def is_injectable(value: Any) -> bool:
    """Return True for ``(dep_name, ..., callable)`` sequences."""
    if not isinstance(value, (list, tuple)) or not value:
        return False
    *dependencies, func = value
    return callable(func) and all(isinstance(dep, str) for dep in dependencies)


class MiddlewareRegistry:
    """Name → rule store."""

    __slots__ = ("_middlewares",)

    def __init__(self) -> None:
        self._middlewares: Dict[str, Any] = {}

    def register(self, name: str, rule: Any) -> "MiddlewareRegistry":
        if not isinstance(name, str):
            raise ConfigurationError("Invalid middleware name.")
        if name in self._middlewares:
            raise ConfigurationError(f'Middleware "{name}" is already registered.')
        if not (callable(rule) or is_injectable(rule)):
            raise ConfigurationError(f'Invalid middleware "{name}".')
        self._middlewares[name] = rule
        return self

    def lookup(self, name: str) -> Any:
        if not isinstance(name, str):
            raise ConfigurationError("Invalid middleware name.")
        try:
            return self._middlewares[name]
        except KeyError:
            raise ConfigurationError(f'Unknown middleware "{name}".') from None

    def middleware(self, name: str, *rule: Any) -> Any:
        if len(rule) > 1:
            raise TypeError("middleware() takes a name and at most one rule")
        if rule:
            return self.register(name, rule[0])
        return self.lookup(name)

    def resolve(self, name: str, providers: Optional[Mapping[str, Any]] = None) -> Callable:
        """Return a ready-to-run rule for ``name``."""
        rule = self.lookup(name)
        if not is_injectable(rule):
            return rule
        *dependencies, func = rule
        values = providers or {}
        args = []
        for dependency in dependencies:
            value = values.get(dependency, _MISSING)
            if value is _MISSING:
                raise ConfigurationError(
                    f'Middleware "{name}" depends on unknown provider "{dependency}".'
                )
            args.append(value)
        return partial(func, *args)

    def names(self) -> Tuple[str, ...]:
        return tuple(self._middlewares)

    def __contains__(self, name: object) -> bool:
        return name in self._middlewares

    def __iter__(self) -> Iterator[str]:
        return iter(self._middlewares)

    def __len__(self) -> int:
        return len(self._middlewares)
