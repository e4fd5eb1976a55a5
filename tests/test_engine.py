"""Tests for the rule execution engine."""

import asyncio
import inspect

import pytest

from smartgate import AuthorizationError, ConfigurationError, Denied, RuleEngine, RuleRejection


async def approve_later(context=None):
    await asyncio.sleep(0)
    return None


def deny_after(delay, payload):
    async def rule(context=None):
        await asyncio.sleep(delay)
        raise AuthorizationError(payload)

    return rule


@pytest.mark.asyncio
async def test_all_approving_rules_resolve():
    engine = RuleEngine()
    result = await engine.execute([lambda ctx: True, approve_later, lambda ctx: 1])
    assert result is None


@pytest.mark.asyncio
async def test_empty_rule_set_succeeds():
    assert await RuleEngine().execute([]) is None


@pytest.mark.asyncio
async def test_falsy_rule_denies_without_payload():
    with pytest.raises(RuleRejection) as excinfo:
        await RuleEngine().execute([lambda ctx: True, lambda ctx: None])
    assert excinfo.value.payload is None


@pytest.mark.asyncio
async def test_string_rule_denies_with_redirect_hint():
    with pytest.raises(RuleRejection) as excinfo:
        await RuleEngine().execute([lambda ctx: "/login"])
    assert excinfo.value.payload == "/login"


@pytest.mark.asyncio
async def test_denied_outcome_is_used_unchanged():
    marker = object()
    with pytest.raises(RuleRejection) as excinfo:
        await RuleEngine().execute([lambda ctx: Denied(marker)])
    assert excinfo.value.payload is marker


@pytest.mark.asyncio
async def test_pending_rule_raising_authorization_error():
    error = AuthorizationError("/qux")
    with pytest.raises(RuleRejection) as excinfo:
        await RuleEngine().execute([deny_after(0, "/qux")])
    assert isinstance(excinfo.value.payload, AuthorizationError)
    assert excinfo.value.payload.redirect_path == error.redirect_path


@pytest.mark.asyncio
async def test_pending_rule_returning_false_denies():
    async def rule(ctx):
        return False

    with pytest.raises(RuleRejection) as excinfo:
        await RuleEngine().execute([rule])
    assert excinfo.value.payload is None


@pytest.mark.asyncio
async def test_first_settled_denial_wins():
    engine = RuleEngine()
    with pytest.raises(RuleRejection) as excinfo:
        await engine.execute([deny_after(0.02, "/slow"), deny_after(0, "/fast")])
    assert excinfo.value.payload.redirect_path == "/fast"
    await asyncio.sleep(0.03)


@pytest.mark.asyncio
async def test_sync_denial_wins_over_pending_denial():
    with pytest.raises(RuleRejection) as excinfo:
        await RuleEngine().execute([deny_after(0, "/pending"), lambda ctx: "/sync"])
    assert excinfo.value.payload == "/sync"
    await asyncio.sleep(0.01)


@pytest.mark.asyncio
async def test_every_rule_is_invoked_in_order_with_context():
    calls = []
    context = {"path": "/admin"}

    def make(label, value):
        def rule(ctx):
            calls.append((label, ctx))
            return value

        return rule

    with pytest.raises(RuleRejection):
        await RuleEngine().execute([make("a", False), make("b", True), make("c", "/x")], context)
    assert calls == [("a", context), ("b", context), ("c", context)]


@pytest.mark.asyncio
async def test_non_callable_rule_raises_before_any_invocation():
    calls = []
    with pytest.raises(ConfigurationError):
        RuleEngine().execute([lambda ctx: calls.append(ctx), False])
    assert calls == []


@pytest.mark.asyncio
async def test_stragglers_run_to_completion():
    finished = asyncio.Event()

    async def slow(ctx):
        await asyncio.sleep(0.01)
        finished.set()
        return True

    with pytest.raises(RuleRejection):
        await RuleEngine().execute([slow, lambda ctx: False])
    await asyncio.wait_for(finished.wait(), timeout=1)


@pytest.mark.asyncio
async def test_unexpected_exception_propagates_unchanged():
    async def broken(ctx):
        raise ValueError("boom")

    with pytest.raises(ValueError, match="boom"):
        await RuleEngine().execute([broken])


@pytest.mark.asyncio
async def test_nested_rule_rejection_is_a_denial():
    engine = RuleEngine()

    def nested(ctx):
        return engine.execute([lambda inner: "/nested"])

    with pytest.raises(RuleRejection) as excinfo:
        await engine.execute([nested])
    assert excinfo.value.payload == "/nested"


def test_execute_requires_running_loop():
    with pytest.raises(RuntimeError):
        RuleEngine().execute([lambda ctx: True])


@pytest.mark.asyncio
async def test_sync_failure_closes_earlier_coroutines():
    started = []

    async def pending(ctx):
        started.append(ctx)
        return True

    coroutine = pending(None)

    def broken(ctx):
        raise ValueError("sync boom")

    with pytest.raises(ValueError, match="sync boom"):
        RuleEngine().execute([lambda ctx: coroutine, broken])
    assert inspect.getcoroutinestate(coroutine) == inspect.CORO_CLOSED
    assert started == []
