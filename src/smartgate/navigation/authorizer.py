"""Route authorizer (source of truth).

``RouteAuthorizer`` is the navigation guard: the host router awaits
``authorize_current_route()`` (or calls ``guard``) once per navigation attempt.

Behaviour
---------
- The route is read from ``router.current.route``. No current route, no
  ``authorization`` mapping, or ``rules`` that is not a ``list``/``tuple``
  means "no authorization required": the coroutine returns ``None`` without
  invoking anything.
- Otherwise ``engine.execute(rules, route)`` runs with the route descriptor
  as rule context.
- Success returns ``None``.
- ``RuleRejection`` is normalized by ``normalize_rejection``:
    * ``None`` or a string → new ``AuthorizationError(payload)``;
    * ``AuthorizationError`` → used as is;
    * anything else → ``ConfigurationError`` (raised instead of a rejection).
  The error is bound to the rejected route, every rejection listener is called
  with it in registration order, then it is raised.

Listeners
---------
Rejection listeners are registered explicitly (``add_listener``) instead of an
ambient event bus. A listener that raises is logged and skipped; the
``AuthorizationError`` still reaches the guard's caller.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, List, Optional

from ..core.engine import RuleEngine
from ..core.errors import AuthorizationError, ConfigurationError, RuleRejection
from .routes import authorization_config, read_field

__all__ = ["RouteAuthorizer", "normalize_rejection"]

RejectionListener = Callable[[AuthorizationError], Any]


def normalize_rejection(payload: Any) -> AuthorizationError:
    """Turn a rule denial payload into an ``AuthorizationError``."""
    if isinstance(payload, AuthorizationError):
        return payload
    if payload is None or isinstance(payload, str):
        return AuthorizationError(payload or None)
    raise ConfigurationError(
        "Invalid route rejection payload. Must be a redirect path string or an "
        f"AuthorizationError, got {type(payload).__name__}."
    )


class RouteAuthorizer:
    """Run the current route's rules and report rejections."""

    __slots__ = ("_engine", "_router", "_listeners", "_logger")

    def __init__(
        self,
        engine: RuleEngine,
        router: Any,
        *,
        listeners: Iterable[RejectionListener] = (),
        logger: Optional[logging.Logger] = None,
    ):
        self._engine = engine
        self._router = router
        self._listeners: List[RejectionListener] = list(listeners)
        self._logger = logger or logging.getLogger("smartgate")

    @property
    def router(self) -> Any:
        return self._router

    def add_listener(self, listener: RejectionListener) -> RejectionListener:
        if not callable(listener):
            raise ConfigurationError(f"Invalid rejection listener {listener!r}.")
        self._listeners.append(listener)
        return listener

    def remove_listener(self, listener: RejectionListener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass  # not registered

    def guard(self):
        """Zero-argument navigation guard for the host router."""
        return self.authorize_current_route()

    async def authorize_current_route(self) -> None:
        current = read_field(self._router, "current")
        route = read_field(current, "route")
        config = authorization_config(route)
        rules = config.get("rules") if config is not None else None
        if not isinstance(rules, (list, tuple)):
            return None
        try:
            await self._engine.execute(rules, route)
        except RuleRejection as rejection:
            error = normalize_rejection(rejection.payload).bind_route(route)
            self._logger.debug(
                "route %r rejected (redirect_path=%r)",
                read_field(route, "original_path"),
                error.redirect_path,
            )
            self._notify(error)
            raise error from None
        return None

    def _notify(self, error: AuthorizationError) -> None:
        for listener in list(self._listeners):
            try:
                listener(error)
            except Exception:
                self._logger.exception("rejection listener %r failed", listener)
