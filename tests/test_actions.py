"""Tests for named action authorization."""

import asyncio

import pytest

from smartgate import ActionAuthorizer, ConfigurationError, RuleEngine, RuleRejection


def make_actions():
    return ActionAuthorizer(RuleEngine())


@pytest.mark.asyncio
async def test_authorize_action_runs_rules_without_context():
    seen = []
    actions = make_actions().add_action("edit", [lambda ctx: seen.append(ctx) or True])
    assert await actions.authorize_action("edit") is None
    assert seen == [None]


@pytest.mark.asyncio
async def test_action_without_rules_is_authorized():
    actions = make_actions().add_action("view")
    assert await actions.authorize_action("view") is None
    assert actions.actions() == ("view",)


@pytest.mark.asyncio
async def test_denied_action_fails_with_rule_rejection():
    actions = make_actions().add_action("delete", [lambda ctx: False])
    with pytest.raises(RuleRejection):
        await actions.authorize_action("delete")


@pytest.mark.asyncio
async def test_add_action_overwrites_silently():
    actions = make_actions().add_action("edit", [lambda ctx: False])
    actions.add_action("edit", [lambda ctx: True])
    assert await actions.authorize_action("edit") is None


def test_unknown_action_raises_synchronously():
    with pytest.raises(ConfigurationError, match='Unknown action "nope"'):
        make_actions().authorize_action("nope")


@pytest.mark.asyncio
async def test_allowed_actions_maps_authorized_names_only():
    actions = make_actions()
    actions.add_action("a", [lambda ctx: True])
    actions.add_action("b", [lambda ctx: False])
    allowed = actions.allowed_actions(["a", "b"])
    await allowed.ready
    assert dict(allowed) == {"a": True}
    assert "b" not in allowed
    assert allowed.names == ("a", "b")
    assert allowed.generation == 1


@pytest.mark.asyncio
async def test_allowed_actions_with_unknown_name_raises():
    actions = make_actions().add_action("a")
    with pytest.raises(ConfigurationError):
        actions.allowed_actions(["a", "missing"])


@pytest.mark.asyncio
async def test_refresh_updates_flags_in_place():
    state = {"admin": False}
    actions = make_actions().add_action("admin", [lambda ctx: state["admin"]])
    allowed = actions.allowed_actions(["admin"])
    await allowed.ready
    assert "admin" not in allowed

    state["admin"] = True
    await allowed.refresh()
    assert allowed["admin"] is True

    state["admin"] = False
    await allowed.refresh()
    assert len(allowed) == 0
    assert allowed.generation == 3


@pytest.mark.asyncio
async def test_stale_refresh_results_are_discarded():
    calls = []

    def rule(ctx):
        calls.append(ctx)
        if len(calls) == 1:

            async def slow_approval():
                await asyncio.sleep(0.02)
                return True

            return slow_approval()
        return False

    actions = make_actions().add_action("publish", [rule])
    allowed = actions.allowed_actions(["publish"])
    first = allowed.ready
    second = allowed.refresh()
    await asyncio.gather(first, second)
    assert "publish" not in allowed
    assert len(calls) == 2


@pytest.mark.asyncio
async def test_pending_rules_settle_independently():
    async def slow(ctx):
        await asyncio.sleep(0.01)
        return True

    actions = make_actions()
    actions.add_action("slow", [slow])
    actions.add_action("fast", [lambda ctx: True])
    allowed = actions.allowed_actions(["slow", "fast"])
    await asyncio.sleep(0)
    await asyncio.sleep(0)
    assert allowed.get("fast") is True
    await allowed.ready
    assert dict(allowed) == {"slow": True, "fast": True}


@pytest.mark.asyncio
async def test_failed_refresh_is_logged_without_awaiting(caplog):
    async def broken(ctx):
        raise ValueError("backend down")

    actions = make_actions().add_action("export", [broken])
    with caplog.at_level("ERROR", logger="smartgate"):
        allowed = actions.allowed_actions(["export"])
        await asyncio.wait([allowed.ready])
        await asyncio.sleep(0)
    assert "allowed actions refresh failed" in caplog.text
    assert "backend down" in caplog.text
    assert isinstance(allowed.ready.exception(), ValueError)
    assert "export" not in allowed
