"""Logging plugin (source of truth).

Rebuild behaviour exactly as described; no hidden defaults beyond this text.

Responsibilities
----------------
- Report authorization outcomes:
  * ``rejected`` (default True): ``"rejected <path> (redirect_path=<value>)"``
    where ``<path>`` is the rejected route's ``original_path`` (or its repr);
  * ``redirect`` (default True): ``"redirect to <path>"``.
- Sinks:
  * when ``print`` is true → always ``print(message)``;
  * else when ``log`` is true → ``logger.info(message)`` if the logger reports
    handlers via ``hasHandlers()``, otherwise ``print(message)`` to avoid drops;
  * else → no output.
- ``enabled`` gates the plugin entirely (default True).
- Use a provided ``logging.Logger`` (default ``logging.getLogger("smartgate")``).

Configuration
-------------
Accepted keys: ``enabled``, ``rejected``, ``redirect``, ``log``, ``print``,
either as kwargs or through ``flags`` (e.g. ``"rejected:off,print:on"``).

Registration
------------
At module import, the plugin registers itself globally as ``"logging"`` via
``AuthorizationService.register_plugin(LoggingPlugin)``.
"""

from __future__ import annotations

import logging
from typing import Optional

from smartgate.navigation.routes import read_field
from smartgate.plugins._base_plugin import BasePlugin
from smartgate.service import AuthorizationService


class LoggingPlugin(BasePlugin):
    """Logs route rejections and redirects."""

    plugin_code = "logging"
    plugin_description = "Logs route rejections and applied redirects"

    __slots__ = ("_logger",)

    def __init__(self, service, *, logger: Optional[logging.Logger] = None, **cfg):
        self._logger = logger or logging.getLogger("smartgate")
        super().__init__(service, **cfg)

    def configure(
        self,
        enabled: bool = True,
        rejected: bool = True,
        redirect: bool = True,
        log: bool = True,
        print: bool = False,  # noqa: A002 - shadowing builtin intentionally
    ):
        """Configure logging plugin options.

        The wrapper added by __init_subclass__ handles writing to store.
        """
        pass  # Storage is handled by the wrapper

    def _emit(self, message: str, *, cfg: Optional[dict] = None):
        if cfg is None:
            return
        if cfg.get("print"):
            print(message)
            return
        if cfg.get("log"):
            logger = self._logger
            has_handlers = getattr(logger, "hasHandlers", None) or getattr(
                logger, "has_handlers", None
            )
            can_log = callable(has_handlers) and has_handlers()
            if can_log:
                logger.info(message)
            else:
                print(message)

    def on_rejected(self, service, error) -> None:
        cfg = self._effective_config()
        if not cfg["enabled"] or not cfg["rejected"]:
            return
        path = read_field(error.route, "original_path") or repr(error.route)
        self._emit(f"rejected {path} (redirect_path={error.redirect_path})", cfg=cfg)

    def on_redirect(self, service, path: str, error) -> None:
        cfg = self._effective_config()
        if not cfg["enabled"] or not cfg["redirect"]:
            return
        self._emit(f"redirect to {path}", cfg=cfg)

    def _effective_config(self) -> dict:
        defaults = {"enabled": True, "rejected": True, "redirect": True, "log": True, "print": False}
        cfg = defaults | self.configuration()

        def to_bool(key: str) -> bool:
            val = cfg.get(key)
            return defaults[key] if val is None else bool(val)

        return {key: to_bool(key) for key in defaults}


AuthorizationService.register_plugin(LoggingPlugin)
