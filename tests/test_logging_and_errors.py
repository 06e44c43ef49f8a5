"""Tests for logging and error handling."""

import pytest

from formaflow.core.errors import (
    AppError,
    ConflictError,
    DatabaseError,
    ErrorDetail,
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from formaflow.core.logging import get_request_id, set_request_id


class TestErrorClasses:
    """Test custom exception classes."""

    def test_validation_error_creates_correct_response(self):
        exc = ValidationError("Invalid email", details={"field": "email"})

        assert exc.code == "VALIDATION_ERROR"
        assert exc.status_code == 422
        assert exc.details == {"field": "email"}

        response = exc.to_response()
        assert isinstance(response, ErrorDetail)
        assert response.code == "VALIDATION_ERROR"

    def test_not_found_error_includes_resource_context(self):
        exc = NotFoundError(resource="TrainingSession", resource_id="123")

        assert exc.code == "NOT_FOUND"
        assert exc.status_code == 404
        assert exc.details == {"resource": "TrainingSession", "resource_id": "123"}

    def test_workflow_error_kinds_map_to_distinct_statuses(self):
        assert ForbiddenError().status_code == 403
        assert InvalidStateError("cancelled").status_code == 400
        assert ConflictError("stale").status_code == 409
        assert DatabaseError("write failed").status_code == 500
        assert UnauthorizedError().status_code == 401

    def test_empty_details_are_omitted(self):
        response = InvalidStateError("Session is cancelled").to_response()

        assert response.details is None
        assert isinstance(InvalidStateError("x"), AppError)


class TestRequestIDContext:
    """Test request ID injection."""

    def test_set_and_get_request_id(self):
        set_request_id("test-request-123")

        assert get_request_id() == "test-request-123"

    def test_request_id_default(self):
        set_request_id("no-request-id")
        assert get_request_id() == "no-request-id"


class TestErrorHandling:
    """Test global error handlers."""

    @pytest.mark.asyncio
    async def test_app_error_body_shape(self, client):
        response = await client.get("/training-sessions/7d3c8c53-1d6c-4d4a-9a57-5b0f7c1c2e90")

        assert response.status_code == 404
        body = response.json()
        assert set(body) == {"code", "message", "details"}
        assert body["details"]["resource"] == "TrainingSession"

    @pytest.mark.asyncio
    async def test_http_exception_returns_detail(self, apprenant_client):
        response = await apprenant_client.get("/api/export/sessions")

        assert response.status_code == 403
        assert "permission" in response.json()["detail"]

    @pytest.mark.asyncio
    async def test_request_id_header_in_response(self, client_for_health_checks):
        response = await client_for_health_checks.get(
            "/health", headers={"X-Request-ID": "external-123"}
        )

        assert response.headers.get("X-Request-ID") == "external-123"

    @pytest.mark.asyncio
    async def test_request_id_generated_when_missing(self, client_for_health_checks):
        response = await client_for_health_checks.get("/health")

        assert len(response.headers["X-Request-ID"]) > 0


class TestSentry:
    """Sentry stays off without a usable DSN."""

    def test_disabled_without_dsn(self, monkeypatch):
        from formaflow.core.sentry import init_sentry

        monkeypatch.delenv("SENTRY_DSN", raising=False)

        assert init_sentry() is False

    def test_disabled_with_placeholder_dsn(self, monkeypatch):
        from formaflow.core.sentry import init_sentry

        monkeypatch.setenv("SENTRY_DSN", "changeme")

        assert init_sentry() is False

    @pytest.mark.asyncio
    async def test_context_middleware_passes_requests_through(self):
        from formaflow.middleware.sentry import SentryContextMiddleware

        seen = []

        async def app(scope, receive, send):
            seen.append(scope["path"])

        middleware = SentryContextMiddleware(app)
        scope = {
            "type": "http",
            "method": "GET",
            "path": "/training-sessions/pending",
            "session": {"user_id": "42", "user_role": "hr"},
        }
        await middleware(scope, None, None)

        assert seen == ["/training-sessions/pending"]
