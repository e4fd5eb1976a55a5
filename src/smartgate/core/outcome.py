"""Tagged rule outcomes.

Rules return loosely typed values; the engine converts them once, through
``classify``, into one of three variants:

- ``Approved``: the rule allows the transition.
- ``Denied(payload)``: the rule refuses; ``payload`` is ``None`` (no redirect
  hint), a redirect path string, or an ``AuthorizationError``.
- ``Pending(awaitable)``: the decision arrives later.

Classification of a synchronous return value
--------------------------------------------
- outcome instances pass through unchanged
- awaitables become ``Pending``
- ``AuthorizationError`` instances and non-empty strings become ``Denied``
- anything else follows truthiness (truthy approves, falsy denies with no
  payload)

Classification of a pending result
----------------------------------
``settle`` is applied to the value an awaitable completes with. A completed
task approves unless it explicitly denies (``Denied``, ``False``, a non-empty
string or an ``AuthorizationError``); in particular ``None`` approves, so an
``async def`` rule without a ``return`` statement grants access.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import Any, Awaitable, Union

from .errors import AuthorizationError

__all__ = ["Approved", "Denied", "Pending", "Outcome", "classify", "settle"]


@dataclass(frozen=True)
class Approved:
    """Rule grants access."""


@dataclass(frozen=True)
class Denied:
    """Rule refuses access."""

    payload: Any = None


@dataclass(frozen=True)
class Pending:
    """Decision delegated to an awaitable."""

    awaitable: Awaitable[Any]


Outcome = Union[Approved, Denied, Pending]

APPROVED = Approved()


def _explicit_denial(value: Any) -> bool:
    if isinstance(value, AuthorizationError):
        return True
    return isinstance(value, str) and bool(value)


def classify(value: Any) -> Outcome:
    """Convert a rule return value into an outcome variant."""
    if isinstance(value, (Approved, Denied, Pending)):
        return value
    if inspect.isawaitable(value):
        return Pending(value)
    if _explicit_denial(value):
        return Denied(value)
    return APPROVED if value else Denied()


def settle(result: Any) -> Union[Approved, Denied]:
    """Convert the result of a completed pending rule."""
    if isinstance(result, (Approved, Denied)):
        return result
    if result is False:
        return Denied()
    if _explicit_denial(result):
        return Denied(result)
    return APPROVED
