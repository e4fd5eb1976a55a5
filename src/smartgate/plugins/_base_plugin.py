"""Plugin contract used by ``AuthorizationService``.

Source of truth
---------------
If this module were wiped except for this docstring, the implementation must be
reconstructed exactly as described below.

``BasePlugin``
    Base class every plugin *must* subclass. Responsibilities:

    - offer config helpers that delegate to the owning service's
      ``_plugin_info`` store (no hidden per-plugin globals)
    - provide optional hooks called by the service:

      * ``on_rejected(service, error)`` after a route rejection, before the
        ``AuthorizationError`` reaches the host router;
      * ``on_redirect(service, path, error)`` after the redirect resolver has
        applied a destination.

    Required class attributes:

    - ``plugin_code`` – unique identifier used for registration (e.g. "logging")
    - ``plugin_description`` – human-readable description of the plugin

    Constructor signature: ``BasePlugin(service, **config)``; ``**config`` is
    passed to ``configure()``.

    ``configure(**config)``
        Subclasses declare accepted parameters via the method signature. The
        method is wrapped by ``__init_subclass__`` to:
        - parse ``flags`` (e.g. ``"enabled,rejected:off"``) into booleans
        - apply Pydantic's ``validate_call`` to the remaining parameters
        - write the validated values to the store

    ``configuration()``
        Returns a copy of the stored configuration (read counterpart of
        ``configure``).

    ``is_enabled()``
        ``configuration()["enabled"]``, default True.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Optional

from pydantic import validate_call

__all__ = ["BasePlugin"]


def _wrap_configure(original_configure: Callable) -> Callable:
    """Wrap a plugin's configure() method to handle flags, validation, and storage."""
    validated = validate_call(original_configure)

    def wrapper(self: "BasePlugin", *, flags: Optional[str] = None, **kwargs: Any) -> None:
        if flags:
            kwargs.update(self._parse_flags(flags))
        validated(self, **kwargs)
        self._write_config(kwargs)

    return wrapper


class BasePlugin:
    """Hook interface + configuration helpers for service plugins."""

    __slots__ = ("name", "_service")

    plugin_code: str = ""
    plugin_description: str = ""

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if "configure" in cls.__dict__:
            cls.configure = _wrap_configure(cls.__dict__["configure"])

    def __init__(self, service: Any, **config: Any):
        self.name = self.plugin_code
        self._service = service
        self._get_store().setdefault(self.name, {"enabled": True})
        self.configure(**config)

    def configure(self, *, flags: Optional[str] = None) -> None:
        """Override in subclasses to define accepted configuration parameters."""
        if flags:
            self._write_config(self._parse_flags(flags))

    def _write_config(self, config: Dict[str, Any]) -> None:
        if not config:
            return
        self._get_store().setdefault(self.name, {}).update(config)

    def configuration(self) -> Dict[str, Any]:
        return dict(self._get_store().get(self.name, {}))

    def is_enabled(self) -> bool:
        return bool(self.configuration().get("enabled", True))

    def _parse_flags(self, flags: str) -> Dict[str, bool]:
        mapping: Dict[str, bool] = {}
        for chunk in flags.split(","):
            chunk = chunk.strip()
            if not chunk:
                continue
            if ":" in chunk:
                name, value = chunk.split(":", 1)
                mapping[name.strip()] = value.strip().lower() != "off"
            else:
                mapping[chunk] = True
        return mapping

    def on_rejected(self, service: Any, error: Any) -> None:  # pragma: no cover - default no-op
        """Hook run when a route is rejected."""

    def on_redirect(
        self, service: Any, path: str, error: Any
    ) -> None:  # pragma: no cover - default no-op
        """Hook run after a redirect was applied."""

    def _get_store(self) -> Dict[str, Any]:
        return getattr(self._service, "_plugin_info")
