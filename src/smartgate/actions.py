"""Named action authorization (source of truth).

Actions reuse the rule engine outside navigation, e.g. to decide whether a
button is shown. The action table is a namespace independent from routes.

``ActionAuthorizer``
--------------------
- ``add_action(name, rules=None)`` stores the ordered rules (empty when
  omitted), silently overwriting a previous entry. Returns ``self``.
- ``authorize_action(name)`` raises ``ConfigurationError`` synchronously for
  unknown names; otherwise returns ``engine.execute(rules)`` (no context).
- ``allowed_actions(names)`` returns an ``AllowedActions`` view already
  refreshed once.

``AllowedActions``
------------------
A live, read-only ``Mapping[str, bool]``: a key is present (value ``True``)
only while the action is authorized. ``refresh()`` starts a new round of
concurrent checks for every tracked name and returns an awaitable that
completes when the round is applied. Each check settles independently:
success sets the flag, ``RuleRejection`` removes it. Rounds are tagged with a
monotonically increasing generation and results from an older round are
discarded, so overlapping refreshes never apply stale results. Any other
exception fails the round; it is also logged so an unawaited round is not
silently lost.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Dict, Iterable, Iterator, Mapping, Optional, Tuple

from .core.engine import RuleEngine
from .core.errors import ConfigurationError, RuleRejection

__all__ = ["ActionAuthorizer", "AllowedActions"]

logger = logging.getLogger("smartgate")


class ActionAuthorizer:
    """Named rule sets evaluated on demand."""

    __slots__ = ("_engine", "_actions")

    def __init__(self, engine: RuleEngine):
        self._engine = engine
        self._actions: Dict[str, Tuple[Callable[[Any], Any], ...]] = {}

    def add_action(self, name: str, rules: Optional[Iterable[Callable]] = None) -> "ActionAuthorizer":
        self._actions[name] = tuple(rules or ())
        return self

    def authorize_action(self, name: str) -> "asyncio.Future[None]":
        try:
            rules = self._actions[name]
        except KeyError:
            raise ConfigurationError(f'Unknown action "{name}".') from None
        return self._engine.execute(rules)

    def allowed_actions(self, names: Iterable[str]) -> "AllowedActions":
        view = AllowedActions(self, names)
        view.refresh()
        return view

    def actions(self) -> Tuple[str, ...]:
        return tuple(self._actions)

    def __contains__(self, name: object) -> bool:
        return name in self._actions


class AllowedActions(Mapping[str, bool]):
    """Live map of currently authorized actions."""

    def __init__(self, authorizer: ActionAuthorizer, names: Iterable[str]):
        self._authorizer = authorizer
        self._names: Tuple[str, ...] = tuple(names)
        self._flags: Dict[str, bool] = {}
        self._generation = 0
        self._round: Optional["asyncio.Future[Any]"] = None

    @property
    def names(self) -> Tuple[str, ...]:
        return self._names

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def ready(self) -> Optional["asyncio.Future[Any]"]:
        """Awaitable of the most recent refresh round."""
        return self._round

    def refresh(self) -> "asyncio.Future[Any]":
        """Re-run authorization for every tracked action."""
        self._generation += 1
        generation = self._generation
        decisions = [(name, self._authorizer.authorize_action(name)) for name in self._names]
        self._round = asyncio.gather(
            *(self._apply(name, generation, decision) for name, decision in decisions)
        )
        self._round.add_done_callback(self._report_failure)
        return self._round

    def _report_failure(self, round_: "asyncio.Future[Any]") -> None:
        # Retrieved here so an unawaited round never goes unreported.
        if round_.cancelled():
            return
        exc = round_.exception()
        if exc is not None:
            logger.error("allowed actions refresh failed: %r", exc)

    async def _apply(self, name: str, generation: int, decision: "asyncio.Future[None]") -> None:
        try:
            await decision
        except RuleRejection:
            allowed = False
        else:
            allowed = True
        if generation != self._generation:
            logger.debug("discarding stale result for action %r (round %s)", name, generation)
            return
        if allowed:
            self._flags[name] = True
        else:
            self._flags.pop(name, None)

    def __getitem__(self, name: str) -> bool:
        return self._flags[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._flags)

    def __len__(self) -> int:
        return len(self._flags)

    def __repr__(self) -> str:
        return f"AllowedActions({dict(self._flags)!r}, generation={self._generation})"
