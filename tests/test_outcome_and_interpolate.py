"""Tests for outcome classification and path interpolation."""

import asyncio

from smartgate import Approved, AuthorizationError, Denied, Pending, interpolate
from smartgate.core.outcome import classify, settle


def test_interpolate_replaces_known_placeholders():
    assert interpolate("/foo/:id/edit", {"id": "7"}) == "/foo/7/edit"
    assert interpolate("/users/:user/posts/:post", {"user": "ada", "post": 3}) == "/users/ada/posts/3"


def test_interpolate_leaves_unknown_placeholders():
    assert interpolate("/:a/:b", {"a": "x"}) == "/x/:b"
    assert interpolate("/static/path") == "/static/path"


def test_classify_boolean_like_values():
    assert classify(True) == Approved()
    assert classify(1) == Approved()
    assert classify(False) == Denied()
    assert classify(None) == Denied()
    assert classify("") == Denied()
    assert classify(0) == Denied()


def test_classify_denials_with_payload():
    error = AuthorizationError("/login")
    assert classify("/login") == Denied("/login")
    assert classify(error).payload is error


def test_classify_awaitables_and_variants():
    async def rule():
        return True

    coro = rule()
    try:
        outcome = classify(coro)
        assert isinstance(outcome, Pending)
        assert outcome.awaitable is coro
    finally:
        coro.close()
    denied = Denied("/x")
    assert classify(denied) is denied


def test_settle_treats_completion_as_approval():
    assert settle(None) == Approved()
    assert settle({"user": 1}) == Approved()
    assert settle(False) == Denied()
    assert settle("/login") == Denied("/login")
    assert settle(Denied("/x")) == Denied("/x")


def test_future_is_pending():
    loop = asyncio.new_event_loop()
    try:
        future = loop.create_future()
        assert isinstance(classify(future), Pending)
    finally:
        loop.close()
