"""Core runtime aggregator (source of truth).

Purpose: expose the navigation-independent building blocks from a single
module. No extra logic beyond imports/exports.

Guarantees
----------
- Importing this module performs only imports; it does not create registries,
  engines or event loops.
- Public API mirrors underlying modules 1:1:
  * ``errors`` → ``ConfigurationError``, ``AuthorizationError``, ``RuleRejection``
  * ``outcome`` → ``Approved``, ``Denied``, ``Pending``
  * ``engine`` → ``RuleEngine``
  * ``registry`` → ``MiddlewareRegistry``
  * ``interpolate`` → ``interpolate``
"""

from .engine import RuleEngine
from .errors import AuthorizationError, ConfigurationError, RuleRejection, SmartGateError
from .interpolate import interpolate
from .outcome import Approved, Denied, Pending
from .registry import MiddlewareRegistry

__all__ = [
    "Approved",
    "AuthorizationError",
    "ConfigurationError",
    "Denied",
    "MiddlewareRegistry",
    "Pending",
    "RuleEngine",
    "RuleRejection",
    "SmartGateError",
    "interpolate",
]
