"""SmartGate public API surface (source of truth).

Recreate the module with these rules:
- Public exports: ``AuthorizationService``, the error taxonomy
  (``ConfigurationError``, ``AuthorizationError``, ``RuleRejection``), the
  outcome variants (``Approved``, ``Denied``, ``Pending``), the building
  blocks (``RuleEngine``, ``MiddlewareRegistry``, ``RouteAuthorizer``,
  ``RedirectResolver``, ``ActionAuthorizer``, ``AllowedActions``), route
  helpers (``Route``, ``RouteMatch``, ``authorization``) and ``interpolate``.
- Plugin registration: import built-in plugins (``logging``) for their side
  effect of calling ``AuthorizationService.register_plugin(<class>)``.
  Imports are done lazily via ``import_module`` to avoid cycles.

Constraints
-----------
- Import must stay lightweight: no service instantiation and no event loop
  access beyond plugin registration.
- Version string lives here as ``__version__`` and must remain available for
  packaging tools.
"""

from importlib import import_module

__version__ = "0.1.0"

from .actions import ActionAuthorizer, AllowedActions
from .config import AuthorizationSettings
from .core import (
    Approved,
    AuthorizationError,
    ConfigurationError,
    Denied,
    MiddlewareRegistry,
    Pending,
    RuleEngine,
    RuleRejection,
    SmartGateError,
    interpolate,
)
from .navigation import RedirectResolver, Route, RouteAuthorizer, RouteMatch, authorization
from .service import AuthorizationService

# Import plugins to trigger auto-registration (lazy to avoid cycles)
for _plugin in ("logging",):
    import_module(f"{__name__}.plugins.{_plugin}")
del _plugin

__all__ = [
    "ActionAuthorizer",
    "AllowedActions",
    "Approved",
    "AuthorizationError",
    "AuthorizationService",
    "AuthorizationSettings",
    "ConfigurationError",
    "Denied",
    "MiddlewareRegistry",
    "Pending",
    "RedirectResolver",
    "Route",
    "RouteAuthorizer",
    "RouteMatch",
    "RuleEngine",
    "RuleRejection",
    "SmartGateError",
    "authorization",
    "interpolate",
]
