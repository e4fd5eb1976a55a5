"""
Example showing SmartGate guarding a tiny in-memory router.
"""

from __future__ import annotations

import asyncio

from smartgate import AuthorizationError, AuthorizationService, Route, RouteMatch, authorization


class MiniRouter:
    def __init__(self):
        self.current = None
        self.location = "/"
        self.guard = None
        self._failed = []

    def on_navigation_failed(self, callback):
        self._failed.append(callback)

    def set_location(self, path):
        self.location = path

    async def navigate(self, route, **params):
        previous = self.current
        self.current = RouteMatch(route=route, params=params)
        try:
            await self.guard()
        except AuthorizationError as error:
            attempted, self.current = self.current, previous
            for callback in self._failed:
                callback(attempted, previous, error)
            return
        self.location = route.original_path


async def main():
    session = {"user": None}
    router = MiniRouter()
    gate = AuthorizationService(router, default_redirect_path="/login").plug("logging", print=True)
    router.guard = gate.authorize_route

    gate.register("is_authenticated", lambda route: session["user"] is not None)

    async def is_admin(route):
        await asyncio.sleep(0.01)
        if session["user"] != "root":
            raise AuthorizationError("/forbidden")

    profile = Route("/profile/:id")
    admin = Route(
        "/admin",
        authorization=authorization([gate.rule("is_authenticated"), is_admin]),
    )

    await router.navigate(admin)
    print("anonymous ->", router.location)

    session["user"] = "ada"
    await router.navigate(profile, id="ada")
    await router.navigate(admin)
    print("ada ->", router.location)

    gate.add_action("reset", [gate.rule("is_authenticated"), is_admin])
    allowed = gate.allowed_actions(["reset"])
    await allowed.ready
    print("ada may reset:", "reset" in allowed)

    session["user"] = "root"
    await allowed.refresh()
    print("root may reset:", "reset" in allowed)


if __name__ == "__main__":
    asyncio.run(main())
