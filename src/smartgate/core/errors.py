"""Error taxonomy for SmartGate.

Two families of failures exist and they are never mixed:

``ConfigurationError``
    Programmer error in rule/route setup (bad middleware name, duplicate
    registration, unknown middleware or action, non-callable rule, malformed
    ``on_reject``, malformed rejection payload). Always raised immediately and
    never caught inside the package.

``AuthorizationError``
    A rule legitimately denied access. Carries an optional ``redirect_path``
    and, once the Route Authorizer has handled it, a back-reference to the
    rejected route. The Redirect Resolver turns it into a location change.

``RuleRejection`` is the raw aggregate failure produced by the rule engine:
its ``payload`` is whatever the denying rule produced, unchanged. Callers
normalize it (see ``RouteAuthorizer``) or just treat it as "not authorized"
(see ``AllowedActions``).
"""

from __future__ import annotations

from typing import Any, Optional

__all__ = [
    "SmartGateError",
    "ConfigurationError",
    "AuthorizationError",
    "RuleRejection",
]


class SmartGateError(Exception):
    """Base class for every error raised by SmartGate."""


class ConfigurationError(SmartGateError):
    """Invalid rule, route or middleware setup."""


class AuthorizationError(SmartGateError):
    """Access denied by an authorization rule."""

    def __init__(self, redirect_path: Optional[str] = None, route: Any = None):
        super().__init__(redirect_path)
        self.redirect_path = redirect_path
        self.route = route

    def bind_route(self, route: Any) -> "AuthorizationError":
        """Attach the rejected route (Route Authorizer only)."""
        self.route = route
        return self

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AuthorizationError):
            return NotImplemented
        return (self.redirect_path, self.route) == (other.redirect_path, other.route)

    __hash__ = Exception.__hash__

    def __repr__(self) -> str:
        return f"AuthorizationError(redirect_path={self.redirect_path!r}, route={self.route!r})"


class RuleRejection(SmartGateError):
    """Aggregate failure of a rule set; ``payload`` is the denying value."""

    def __init__(self, payload: Any = None):
        super().__init__(payload)
        self.payload = payload
