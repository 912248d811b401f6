"""Tests for the exception handlers and request id middleware."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from pydantic import BaseModel
from sqlalchemy.exc import OperationalError

from src.exceptions import ExportFormatError, ReportGenerationError
from src.middleware import logging_middleware, register_exception_handlers
from src.schemas.report_data import ReportFilters


class _Body(BaseModel):
    filters: ReportFilters


@pytest.fixture
def client():
    app = FastAPI()
    register_exception_handlers(app)
    app.middleware("http")(logging_middleware)

    @app.get("/export")
    async def export():
        raise ExportFormatError("xml", supported=["csv", "json"])

    @app.get("/generate")
    async def generate():
        raise ReportGenerationError("eco_impact", ZeroDivisionError("division by zero"))

    @app.get("/db")
    async def db():
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))

    @app.get("/boom")
    async def boom():
        raise RuntimeError("secret internals")

    @app.post("/validate")
    async def validate(body: _Body):
        return {"ok": True}

    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


class TestExceptionHandlers:
    def test_api_exception_envelope(self, client):
        response = client.get("/export", headers={"X-Request-ID": "req-1"})

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == {
            "code": "UNSUPPORTED_EXPORT_FORMAT",
            "message": "Unsupported export format: xml",
            "details": {"format": "xml", "supported": ["csv", "json"]},
        }
        assert body["request_id"] == "req-1"
        assert body["timestamp"]

    def test_generation_failure_names_cause(self, client):
        response = client.get("/generate")

        assert response.status_code == 500
        error = response.json()["error"]
        assert error["code"] == "REPORT_GENERATION_FAILED"
        assert error["details"] == {"report_type": "eco_impact", "cause": "ZeroDivisionError"}

    def test_validation_errors_are_flattened(self, client):
        response = client.post(
            "/validate",
            json={"filters": {"numeric_range": {"min": 10, "max": 5}}},
        )

        assert response.status_code == 422
        errors = response.json()["error"]["details"]["errors"]
        assert errors[0]["field"] == "filters.numeric_range"
        assert "numeric_range.min" in errors[0]["message"]

    def test_database_errors_hide_driver_message(self, client):
        response = client.get("/db")

        assert response.status_code == 500
        error = response.json()["error"]
        assert error["code"] == "DATABASE_ERROR"
        assert "connection refused" not in error["message"]

    def test_unhandled_exception(self, client):
        response = client.get("/boom")

        assert response.status_code == 500
        assert response.json()["error"] == {
            "code": "INTERNAL_SERVER_ERROR",
            "message": "An unexpected error occurred",
            "details": None,
        }


class TestRequestIdMiddleware:
    def test_generates_request_id(self, client):
        response = client.post("/validate", json={"filters": {}})

        assert response.status_code == 200
        assert response.headers["X-Request-ID"]

    def test_echoes_incoming_request_id(self, client):
        response = client.post("/validate", json={"filters": {}}, headers={"X-Request-ID": "abc"})

        assert response.headers["X-Request-ID"] == "abc"
