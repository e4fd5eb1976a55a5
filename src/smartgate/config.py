"""Service configuration.

One process-wide setting exists: ``default_redirect_path``, the last fallback
of the redirect resolver. It is set once at bootstrap (constructor options or
``AuthorizationService.configure``) and read at resolution time, so later
updates are picked up by an already attached resolver.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

__all__ = ["AuthorizationSettings", "DEFAULT_REDIRECT_PATH"]

DEFAULT_REDIRECT_PATH = "/"


class AuthorizationSettings(BaseModel):
    """Validated settings shared by the service components."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    default_redirect_path: str = Field(default=DEFAULT_REDIRECT_PATH, min_length=1)
