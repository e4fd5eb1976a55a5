"""Tests for the middleware registry."""

import pytest

from smartgate import ConfigurationError, MiddlewareRegistry


def is_authenticated(route):
    return True


def test_register_returns_registry_for_chaining():
    registry = MiddlewareRegistry()
    result = registry.register("foo", is_authenticated).register("bar", lambda route: True)
    assert result is registry
    assert registry.names() == ("foo", "bar")
    assert "foo" in registry
    assert len(registry) == 2


def test_lookup_returns_registered_rule():
    registry = MiddlewareRegistry().register("foo", is_authenticated)
    assert registry.lookup("foo") is is_authenticated


def test_name_must_be_a_string():
    registry = MiddlewareRegistry()
    with pytest.raises(ConfigurationError, match="Invalid middleware name"):
        registry.register(False, is_authenticated)
    with pytest.raises(ConfigurationError, match="Invalid middleware name"):
        registry.lookup(None)


def test_rule_must_be_callable_or_injectable():
    registry = MiddlewareRegistry()
    with pytest.raises(ConfigurationError, match='Invalid middleware "foo"'):
        registry.register("foo", False)
    with pytest.raises(ConfigurationError, match='Invalid middleware "foo"'):
        registry.register("foo", ["bar", "baz"])
    assert "foo" not in registry


def test_duplicate_registration_fails():
    registry = MiddlewareRegistry().register("foo", is_authenticated)
    with pytest.raises(ConfigurationError, match='"foo" is already registered'):
        registry.register("foo", lambda route: False)
    assert registry.lookup("foo") is is_authenticated


def test_unknown_lookup_fails():
    with pytest.raises(ConfigurationError, match='Unknown middleware "foo"'):
        MiddlewareRegistry().lookup("foo")


def test_middleware_overload_by_arity():
    registry = MiddlewareRegistry()
    assert registry.middleware("foo", is_authenticated) is registry
    assert registry.middleware("foo") is is_authenticated
    with pytest.raises(TypeError):
        registry.middleware("foo", is_authenticated, is_authenticated)


def test_injectable_is_resolved_with_providers():
    def has_role(session, role_name, route):
        return role_name in session["roles"]

    registry = MiddlewareRegistry().register("admin", ("session", "role", has_role))
    rule = registry.resolve("admin", {"session": {"roles": ["admin"]}, "role": "admin"})
    assert rule({"path": "/admin"}) is True
    assert registry.resolve("admin", {"session": {"roles": []}, "role": "admin"})(None) is False


def test_injectable_with_missing_provider_fails():
    registry = MiddlewareRegistry().register("admin", ["session", lambda session, route: True])
    with pytest.raises(ConfigurationError, match='unknown provider "session"'):
        registry.resolve("admin", {})


def test_plain_rule_resolves_to_itself():
    registry = MiddlewareRegistry().register("foo", is_authenticated)
    assert registry.resolve("foo") is is_authenticated
