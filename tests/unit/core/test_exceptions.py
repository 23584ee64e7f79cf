"""Unit tests for the global exception handlers."""

from __future__ import annotations

from collections.abc import AsyncIterator

import httpx
import pytest
from fastapi import FastAPI, HTTPException, Request
from pydantic import BaseModel

from scanscore.core.exceptions import (
    AppException,
    ErrorDetail,
    ErrorResponse,
    RateLimitException,
    ServiceUnavailableException,
    setup_exception_handlers,
)


pytestmark = pytest.mark.unit


class Body(BaseModel):
    barcode: str


@pytest.fixture
def error_app() -> FastAPI:
    app = FastAPI()
    setup_exception_handlers(app)

    @app.middleware("http")
    async def bind_request_id(request: Request, call_next):  # type: ignore[no-untyped-def]
        request.state.request_id = "req-123"
        return await call_next(request)

    @app.get("/app-error")
    async def app_error() -> None:
        raise ServiceUnavailableException("Comparison service is not available")

    @app.get("/dict-detail")
    async def dict_detail() -> None:
        raise HTTPException(
            status_code=404,
            detail={"error": "not_found", "message": "Scan scan-9 not found in history"},
        )

    @app.get("/string-detail")
    async def string_detail() -> None:
        raise HTTPException(status_code=400, detail="Bad thing")

    @app.post("/validate")
    async def validate(body: Body) -> Body:
        return body

    @app.get("/boom")
    async def boom() -> None:
        msg = "kaboom"
        raise RuntimeError(msg)

    return app


@pytest.fixture
async def error_client(error_app: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    transport = httpx.ASGITransport(app=error_app, raise_app_exceptions=False)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


class TestErrorResponse:
    """Tests for the error body model."""

    def test_omits_empty_fields(self) -> None:
        """Should drop details and request ID when unset."""
        body = ErrorResponse(error="not_food", message="Not a food label").to_content()

        assert body == {"error": "not_food", "message": "Not a food label"}

    def test_camel_case_request_id(self) -> None:
        """Should expose the request ID as requestId."""
        body = ErrorResponse(
            error="x",
            message="y",
            request_id="abc",
            details=[ErrorDetail(field="barcode", message="required")],
        ).to_content()

        assert body["requestId"] == "abc"
        assert body["details"] == [{"field": "barcode", "message": "required"}]


class TestAppExceptions:
    """Tests for AppException subclasses."""

    def test_service_unavailable(self) -> None:
        exc = ServiceUnavailableException()

        assert exc.status_code == 503
        assert exc.error == "service_unavailable"

    def test_rate_limit(self) -> None:
        exc = RateLimitException()

        assert exc.status_code == 429
        assert exc.error == "rate_limit_exceeded"

    def test_message_is_exception_text(self) -> None:
        assert str(AppException(418, "teapot", "short and stout")) == "short and stout"


class TestHandlers:
    """Tests for the registered handlers."""

    async def test_app_exception(self, error_client: httpx.AsyncClient) -> None:
        """Should render AppException with its status and code."""
        response = await error_client.get("/app-error")

        assert response.status_code == 503
        assert response.json() == {
            "error": "service_unavailable",
            "message": "Comparison service is not available",
            "requestId": "req-123",
        }

    async def test_http_exception_with_dict_detail(self, error_client: httpx.AsyncClient) -> None:
        """Should unpack error and message from a dict detail."""
        response = await error_client.get("/dict-detail")

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"
        assert response.json()["message"] == "Scan scan-9 not found in history"

    async def test_http_exception_with_string_detail(
        self, error_client: httpx.AsyncClient
    ) -> None:
        """Should wrap a plain string detail."""
        response = await error_client.get("/string-detail")

        assert response.status_code == 400
        assert response.json()["error"] == "http_error"
        assert response.json()["message"] == "Bad thing"

    async def test_unknown_route(self, error_client: httpx.AsyncClient) -> None:
        """Should render router 404s in the same shape."""
        response = await error_client.get("/missing")

        assert response.status_code == 404
        assert response.json()["error"] == "http_error"

    async def test_validation_error(self, error_client: httpx.AsyncClient) -> None:
        """Should list invalid fields."""
        response = await error_client.post("/validate", json={})

        assert response.status_code == 422
        body = response.json()
        assert body["error"] == "validation_error"
        assert body["details"][0]["field"] == "body.barcode"

    async def test_unhandled_exception(self, error_client: httpx.AsyncClient) -> None:
        """Should hide internals behind a generic 500."""
        response = await error_client.get("/boom")

        assert response.status_code == 500
        assert response.json()["error"] == "internal_error"
        assert response.json()["message"] == "An unexpected error occurred"
