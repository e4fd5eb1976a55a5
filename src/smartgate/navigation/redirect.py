"""Redirect resolver (source of truth).

The resolver listens to the host router's "navigation failed" notification
``(attempted, previous, error)`` and sends the user somewhere sensible when
``error`` is an ``AuthorizationError``. Other errors are ignored.

Resolution order (first applicable wins)
----------------------------------------
1. ``error.redirect_path`` when it is a non-empty string.
2. ``on_reject`` on the attempted route's authorization mapping, only when the
   key is present: a string is used verbatim, a callable is invoked with the
   attempted route descriptor; any other value raises ``ConfigurationError``.
   An empty result falls through.
3. The previous route, when there is one: its ``original_path`` interpolated
   with the parameters it was reached with.
4. ``settings.default_redirect_path``.

``attempted`` and ``previous`` are route states (``RouteMatch``-like objects
exposing ``route`` and ``params``). Applying the destination through
``router.set_location`` is the resolver's only side effect. Redirect
listeners run afterwards; one that raises is logged and skipped.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional

from ..core.errors import AuthorizationError, ConfigurationError
from ..core.interpolate import interpolate
from .routes import authorization_config, read_field

__all__ = ["RedirectResolver"]

RedirectListener = Callable[[str, Any], Any]


class RedirectResolver:
    """Compute and apply the redirect after a rejected navigation."""

    __slots__ = ("_router", "_settings", "_listeners", "_logger")

    def __init__(self, router: Any, settings: Any, *, logger: Optional[logging.Logger] = None):
        self._router = router
        self._settings = settings
        self._listeners: List[RedirectListener] = []
        self._logger = logger or logging.getLogger("smartgate")

    def attach(self) -> "RedirectResolver":
        """Subscribe to the host router's navigation failures."""
        self._router.on_navigation_failed(self.handle_navigation_failed)
        return self

    def add_listener(self, listener: RedirectListener) -> RedirectListener:
        self._listeners.append(listener)
        return listener

    def handle_navigation_failed(self, attempted: Any, previous: Any, error: Any) -> Optional[str]:
        path = self.resolve(attempted, previous, error)
        if path is None:
            return None
        self._logger.debug("redirecting to %s", path)
        self._router.set_location(path)
        for listener in list(self._listeners):
            try:
                listener(path, error)
            except Exception:
                self._logger.exception("redirect listener %r failed", listener)
        return path

    def resolve(self, attempted: Any, previous: Any, error: Any) -> Optional[str]:
        if not isinstance(error, AuthorizationError):
            return None
        redirect_path = error.redirect_path
        if isinstance(redirect_path, str) and redirect_path:
            return redirect_path
        path = self._from_on_reject(read_field(attempted, "route"))
        if path:
            return path
        previous_route = read_field(previous, "route")
        if previous_route is not None:
            template = read_field(previous_route, "original_path")
            if isinstance(template, str):
                return interpolate(template, read_field(previous, "params") or {})
        return self._settings.default_redirect_path

    def _from_on_reject(self, route: Any) -> Optional[str]:
        config = authorization_config(route)
        if config is None or "on_reject" not in config:
            return None
        on_reject = config["on_reject"]
        if isinstance(on_reject, str):
            return on_reject
        if callable(on_reject):
            return on_reject(route)
        raise ConfigurationError("Invalid on_reject handler. Must be a string or a callable.")
