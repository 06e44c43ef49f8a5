"""Sentry context middleware to tag error reports with request and actor."""

import sentry_sdk
from starlette.types import ASGIApp, Receive, Scope, Send

from formaflow.core.logging import get_request_id


class SentryContextMiddleware:
    """
    Tag the Sentry scope with request_id and the session's user_id/user_role.

    Must run inside SessionMiddleware so ``scope["session"]`` is populated.
    """

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        session = scope.get("session") or {}
        user_id = session.get("user_id")

        with sentry_sdk.new_scope() as sentry_scope:
            sentry_scope.set_tag("request_id", get_request_id())
            if user_id:
                sentry_scope.set_user({"id": user_id})
                sentry_scope.set_tag("user_role", session.get("user_role"))
            sentry_scope.set_context(
                "request",
                {"method": scope.get("method"), "path": scope.get("path")},
            )
            await self.app(scope, receive, send)
