"""Rule execution engine (source of truth).

``RuleEngine.execute(rules, context=None)`` runs an ordered rule set against an
opaque context and returns one ``asyncio.Future`` carrying the aggregate
decision. It must be called while an event loop is running.

Algorithm
---------
1. Every rule is checked for callability before any rule runs; a non-callable
   raises ``ConfigurationError`` synchronously (no future is created).
2. Each rule is invoked exactly once, in order, synchronously, with
   ``context``. Invocation never short-circuits: later rules run even when an
   earlier one already denied or is still pending. A rule raising
   synchronously propagates its exception; coroutines returned by the rules
   before it are closed without being scheduled.
3. Return values go through ``outcome.classify``:
   - ``Approved`` settles that rule immediately;
   - ``Denied(payload)`` fails the aggregate immediately with
     ``RuleRejection(payload)`` (the first synchronous denial in rule order
     wins over every pending rule);
   - ``Pending(awaitable)`` is adopted with ``asyncio.ensure_future``.
4. Pending tasks settle through ``outcome.settle``. The first one to deny
   fails the aggregate. An awaitable raising ``AuthorizationError`` is a
   denial carrying that error; one raising ``RuleRejection`` (a nested rule
   set) is a denial carrying its payload; any other exception fails the
   aggregate unchanged.
5. The aggregate resolves to ``None`` once every rule approved. An empty rule
   set resolves immediately.

Stragglers
----------
Pending tasks are never cancelled. Once the aggregate has settled, later
results (including exceptions) are retrieved and logged at debug level only.
Their side effects may therefore happen after the decision was reported.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Iterable, List, Optional

from .errors import AuthorizationError, ConfigurationError, RuleRejection
from .outcome import Denied, Pending, classify, settle

__all__ = ["RuleEngine"]

Rule = Callable[[Any], Any]


class RuleEngine:
    """Aggregate heterogeneous rule outcomes into one decision."""

    __slots__ = ("_logger",)

    def __init__(self, logger: Optional[logging.Logger] = None):
        self._logger = logger or logging.getLogger("smartgate")

    def execute(self, rules: Iterable[Rule], context: Any = None) -> "asyncio.Future[None]":
        rules = list(rules)
        for rule in rules:
            if not callable(rule):
                raise ConfigurationError(f"Invalid authorization rule {rule!r}.")
        loop = asyncio.get_running_loop()
        aggregate: "asyncio.Future[None]" = loop.create_future()

        outcomes: List[Any] = []
        for rule in rules:
            try:
                outcomes.append(classify(rule(context)))
            except Exception:
                self._close_pending(outcomes)
                raise
        tasks: List["asyncio.Future[Any]"] = []
        for outcome in outcomes:
            if isinstance(outcome, Denied):
                if not aggregate.done():
                    self._logger.debug("rule denied synchronously: %r", outcome.payload)
                    aggregate.set_exception(RuleRejection(outcome.payload))
            elif isinstance(outcome, Pending):
                tasks.append(asyncio.ensure_future(outcome.awaitable))

        if not tasks:
            if not aggregate.done():
                aggregate.set_result(None)
            return aggregate

        remaining = len(tasks)

        def on_settled(task: "asyncio.Future[Any]") -> None:
            nonlocal remaining
            if aggregate.done():
                self._discard(task)
                return
            if task.cancelled():
                aggregate.cancel()
                return
            exc = task.exception()
            if isinstance(exc, AuthorizationError):
                aggregate.set_exception(RuleRejection(exc))
            elif isinstance(exc, RuleRejection):
                aggregate.set_exception(RuleRejection(exc.payload))
            elif exc is not None:
                aggregate.set_exception(exc)
            else:
                outcome = settle(task.result())
                if isinstance(outcome, Denied):
                    self._logger.debug("pending rule denied: %r", outcome.payload)
                    aggregate.set_exception(RuleRejection(outcome.payload))
                    return
                remaining -= 1
                if remaining == 0:
                    aggregate.set_result(None)

        for task in tasks:
            task.add_done_callback(on_settled)
        return aggregate

    def _close_pending(self, outcomes: List[Any]) -> None:
        # Coroutines from rules that ran before a synchronous failure.
        for outcome in outcomes:
            if not isinstance(outcome, Pending):
                continue
            if asyncio.iscoroutine(outcome.awaitable):
                outcome.awaitable.close()

    def _discard(self, task: "asyncio.Future[Any]") -> None:
        if task.cancelled():
            self._logger.debug("straggler rule cancelled after decision")
            return
        exc = task.exception()
        if exc is not None:
            self._logger.debug("straggler rule failed after decision: %r", exc)
        else:
            self._logger.debug("straggler rule settled after decision: %r", task.result())
