"""Router integration types.

SmartGate does not own navigation. The host router keeps the route table and
the current/previous state; this module only fixes the shapes SmartGate reads:

- a *route descriptor* exposes ``original_path`` (a ``:param`` template) and an
  optional ``authorization`` mapping ``{"rules": [...], "on_reject": ...}``;
- a *route state* (``RouteMatch``) pairs a descriptor with the parameters used
  to reach it.

Hosts may use the dataclasses below or any object (or mapping) with the same
attributes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional, Protocol

__all__ = [
    "Route",
    "RouteMatch",
    "HostRouter",
    "authorization",
    "authorization_config",
    "read_field",
]

_MISSING = object()


@dataclass(eq=False)
class Route:
    """Route descriptor as declared in the host route table."""

    original_path: str
    authorization: Optional[Mapping[str, Any]] = None
    name: Optional[str] = None


@dataclass
class RouteMatch:
    """Route descriptor plus the parameters it was reached with."""

    route: Optional[Any] = None
    params: Dict[str, Any] = field(default_factory=dict)


class HostRouter(Protocol):
    current: Optional[RouteMatch]

    def set_location(self, path: str) -> None: ...

    def on_navigation_failed(self, callback: Callable[[Any, Any, Any], None]) -> None: ...


def authorization(rules: Any = None, on_reject: Any = _MISSING) -> Dict[str, Any]:
    """Build an authorization mapping; ``on_reject`` is only set when given."""
    config: Dict[str, Any] = {"rules": list(rules or [])}
    if on_reject is not _MISSING:
        config["on_reject"] = on_reject
    return config


def read_field(obj: Any, key: str, default: Any = None) -> Any:
    """Read ``key`` from a mapping or an attribute-bearing object."""
    if obj is None:
        return default
    if isinstance(obj, Mapping):
        return obj.get(key, default)
    return getattr(obj, key, default)


def authorization_config(route: Any) -> Optional[Mapping[str, Any]]:
    """Return the route's authorization mapping, or None when not declared."""
    config = read_field(route, "authorization")
    if not isinstance(config, Mapping):
        return None
    return config
