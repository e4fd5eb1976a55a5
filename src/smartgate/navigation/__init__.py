"""Navigation integration: route guard and redirect resolution."""

from .authorizer import RouteAuthorizer, normalize_rejection
from .redirect import RedirectResolver
from .routes import HostRouter, Route, RouteMatch, authorization, authorization_config

__all__ = [
    "HostRouter",
    "RedirectResolver",
    "Route",
    "RouteAuthorizer",
    "RouteMatch",
    "authorization",
    "authorization_config",
    "normalize_rejection",
]
