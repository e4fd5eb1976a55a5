"""Authorization service with plugin pipeline (source of truth).

``AuthorizationService`` wires the building blocks together for one host
router. Nothing here adds authorization semantics; every decision is taken by
the engine, the route authorizer, the redirect resolver or the action
authorizer.

Construction
------------
``AuthorizationService(router=None, *, settings=None, registry=None,
providers=None, logger=None, **options)``

- ``options`` are merged with ``SmartOptions`` defaults
  (``default_redirect_path="/"``, ``attach=True``); ``None`` values are
  ignored. They seed ``AuthorizationSettings`` when ``settings`` is not given.
- ``registry`` defaults to a fresh ``MiddlewareRegistry``; ``providers`` maps
  dependency names for injectable middlewares.
- With a ``router``, ``bind_router`` runs immediately: a ``RouteAuthorizer``
  and a ``RedirectResolver`` are created and, when ``attach`` is true, the
  resolver subscribes to the router's navigation failures.

Middlewares
-----------
``register(name, rule)`` / ``lookup(name)`` delegate to the registry;
``middleware(name, *rule)`` is the arity overload and returns the service
(not the registry) when registering. ``rule(name)`` resolves injectables.

Routes and actions
------------------
``authorize_route()`` is the navigation guard (raises ``ConfigurationError``
when no router is bound). ``add_action``, ``authorize_action`` and
``allowed_actions`` delegate to ``ActionAuthorizer``.

Plugins
-------
Global registry: ``register_plugin(plugin_class, name=None)`` validates the
class (``BasePlugin`` subclass with ``plugin_code``); re-registering a code
with a different class raises ``ValueError`` unless ``name`` is given.
``plug(code, **config)`` instantiates the plugin on this service; attached
plugins are reachable as attributes. Plugins receive ``on_rejected`` and
``on_redirect`` notifications when enabled.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Type

from pydantic import validate_call
from smartseeds import SmartOptions

from .actions import ActionAuthorizer, AllowedActions
from .config import DEFAULT_REDIRECT_PATH, AuthorizationSettings
from .core.engine import RuleEngine
from .core.errors import AuthorizationError, ConfigurationError
from .core.registry import MiddlewareRegistry
from .navigation.authorizer import RouteAuthorizer
from .navigation.redirect import RedirectResolver
from .plugins._base_plugin import BasePlugin

__all__ = ["AuthorizationService"]

_PLUGIN_REGISTRY: Dict[str, Type[BasePlugin]] = {}


class AuthorizationService:
    """Route guard, redirect policy and action checks for one host router."""

    def __init__(
        self,
        router: Any = None,
        *,
        settings: Optional[AuthorizationSettings] = None,
        registry: Optional[MiddlewareRegistry] = None,
        providers: Optional[Mapping[str, Any]] = None,
        logger: Optional[logging.Logger] = None,
        **options: Any,
    ):
        self._plugins: List[BasePlugin] = []
        self._plugins_by_name: Dict[str, BasePlugin] = {}
        self._plugin_info: Dict[str, Dict[str, Any]] = {}
        opts = SmartOptions(
            options,
            defaults={"default_redirect_path": DEFAULT_REDIRECT_PATH, "attach": True},
            ignore_none=True,
        )
        self._attach = bool(opts.attach)
        self.settings = settings or AuthorizationSettings(
            default_redirect_path=opts.default_redirect_path
        )
        self.logger = logger or logging.getLogger("smartgate")
        self.registry = registry if registry is not None else MiddlewareRegistry()
        self.providers: Dict[str, Any] = dict(providers or {})
        self.engine = RuleEngine(self.logger)
        self.actions = ActionAuthorizer(self.engine)
        self.router: Any = None
        self.route_authorizer: Optional[RouteAuthorizer] = None
        self.redirects: Optional[RedirectResolver] = None
        if router is not None:
            self.bind_router(router)

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------
    def bind_router(self, router: Any) -> "AuthorizationService":
        """Create the route authorizer and redirect resolver for ``router``."""
        if self.router is not None:
            raise ConfigurationError("A host router is already bound to this service.")
        self.router = router
        self.route_authorizer = RouteAuthorizer(
            self.engine, router, listeners=[self._dispatch_rejected], logger=self.logger
        )
        self.redirects = RedirectResolver(router, self.settings, logger=self.logger)
        self.redirects.add_listener(self._dispatch_redirect)
        if self._attach:
            self.redirects.attach()
        return self

    @validate_call
    def configure(self, default_redirect_path: Optional[str] = None):
        """Update service settings; only given values are changed."""
        if default_redirect_path is not None:
            self.settings.default_redirect_path = default_redirect_path
        return self

    @property
    def default_redirect_path(self) -> str:
        return self.settings.default_redirect_path

    # ------------------------------------------------------------------
    # Middlewares
    # ------------------------------------------------------------------
    def register(self, name: str, rule: Any) -> "AuthorizationService":
        self.registry.register(name, rule)
        return self

    def lookup(self, name: str) -> Any:
        return self.registry.lookup(name)

    def middleware(self, name: str, *rule: Any) -> Any:
        result = self.registry.middleware(name, *rule)
        return self if result is self.registry else result

    def rule(self, name: str) -> Callable[[Any], Any]:
        """Return the named middleware ready to be placed in a rule list."""
        return self.registry.resolve(name, self.providers)

    # ------------------------------------------------------------------
    # Routes
    # ------------------------------------------------------------------
    def authorize_route(self):
        """Navigation guard: coroutine authorizing the router's current route."""
        if self.route_authorizer is None:
            raise ConfigurationError("No host router bound to the authorization service.")
        return self.route_authorizer.authorize_current_route()

    def add_listener(self, listener: Callable[[AuthorizationError], Any]) -> Callable:
        """Register a route rejection listener."""
        if self.route_authorizer is None:
            raise ConfigurationError("No host router bound to the authorization service.")
        return self.route_authorizer.add_listener(listener)

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------
    def add_action(self, name: str, rules: Optional[Iterable[Callable]] = None) -> "AuthorizationService":
        self.actions.add_action(name, rules)
        return self

    def authorize_action(self, name: str):
        return self.actions.authorize_action(name)

    def allowed_actions(self, names: Iterable[str]) -> AllowedActions:
        return self.actions.allowed_actions(names)

    # ------------------------------------------------------------------
    # Plugin registration
    # ------------------------------------------------------------------
    @classmethod
    def register_plugin(cls, plugin_class: Type[BasePlugin], name: Optional[str] = None) -> None:
        """Register a plugin class globally.

        Args:
            plugin_class: A BasePlugin subclass with plugin_code defined
            name: Optional override name. If provided, overwrites any existing
                  registration. If not provided, uses plugin_code and raises
                  if already registered with another class.
        """
        if not isinstance(plugin_class, type) or not issubclass(plugin_class, BasePlugin):
            raise TypeError("plugin_class must be a BasePlugin subclass")
        if not getattr(plugin_class, "plugin_code", None):
            raise ValueError(
                f"Plugin {plugin_class.__name__} not following standards: missing plugin_code"
            )
        code = name or plugin_class.plugin_code
        if name is None:
            existing = _PLUGIN_REGISTRY.get(code)
            if existing is not None and existing is not plugin_class:
                raise ValueError(f"Plugin '{code}' already registered")
        _PLUGIN_REGISTRY[code] = plugin_class

    @classmethod
    def available_plugins(cls) -> Dict[str, Type[BasePlugin]]:
        return dict(_PLUGIN_REGISTRY)

    def plug(self, plugin: str, **config: Any) -> "AuthorizationService":
        """Attach a plugin by name (previously registered globally)."""
        if not isinstance(plugin, str):
            raise TypeError(
                f"Plugin must be referenced by name string, got {type(plugin).__name__}"
            )
        plugin_class = _PLUGIN_REGISTRY.get(plugin)
        if plugin_class is None:
            available = ", ".join(sorted(_PLUGIN_REGISTRY)) or "none"
            raise ValueError(
                f"Unknown plugin '{plugin}'. Register it first. Available plugins: {available}"
            )
        instance = plugin_class(self, **config)
        if instance.name not in self._plugins_by_name:
            self._plugins.append(instance)
            self._plugins_by_name[instance.name] = instance
        return self

    def iter_plugins(self) -> List[BasePlugin]:
        """Return attached plugin instances in attachment order."""
        return list(self._plugins)

    def __getattr__(self, name: str) -> Any:
        plugins = self.__dict__.get("_plugins_by_name", {})
        plugin = plugins.get(name)
        if plugin is None:
            raise AttributeError(f"No plugin named '{name}' attached to the authorization service")
        return plugin

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------
    def _dispatch_rejected(self, error: AuthorizationError) -> None:
        for plugin in self._plugins:
            if plugin.is_enabled():
                plugin.on_rejected(self, error)

    def _dispatch_redirect(self, path: str, error: AuthorizationError) -> None:
        for plugin in self._plugins:
            if plugin.is_enabled():
                plugin.on_redirect(self, path, error)
