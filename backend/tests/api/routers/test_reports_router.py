"""Tests for reports router."""

import json
import uuid
from datetime import date, datetime, timezone
from unittest.mock import AsyncMock, Mock, patch

from src.exceptions import (
    ForbiddenError,
    ReportGenerationError,
    ResourceNotFoundError,
    UnknownReportTypeError,
    ValidationError,
)
from src.services.report_service import ReportOverview


class TestCatalogue:
    """Tests for the public type, format and field catalogue endpoints."""

    def test_list_types(self, client):
        response = client.get("/api/v1/reports/types")

        assert response.status_code == 200
        types = response.json()["types"]
        assert len(types) == 8
        trip = next(t for t in types if t["value"] == "trip_analytics")
        assert trip["label"] == "Trip Analytics"
        assert trip["mandatory_fields"] > 0
        assert trip["optional_fields"] > 0

    def test_list_formats(self, client):
        response = client.get("/api/v1/reports/formats")

        assert response.status_code == 200
        formats = {f["value"]: f for f in response.json()["formats"]}
        assert set(formats) == {"json", "csv", "document", "spreadsheet"}
        assert "pdf" in formats["document"]["aliases"]
        assert formats["spreadsheet"]["extension"] == "xlsx"

    def test_field_config(self, client):
        response = client.get("/api/v1/reports/fields/news_section")

        assert response.status_code == 200
        data = response.json()
        assert data["report_type"] == "news_section"
        assert "charts" in data["mandatory"]
        assert not set(data["mandatory"]) & set(data["optional"])

    def test_field_config_unknown_type(self, client):
        response = client.get("/api/v1/reports/fields/weather")

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "UNKNOWN_REPORT_TYPE"

    def test_catalogue_needs_no_auth(self, unauthenticated_client):
        response = unauthenticated_client.get("/api/v1/reports/types")

        assert response.status_code == 200


class TestListReports:
    """Tests for GET /api/v1/reports/ endpoint."""

    def test_list_reports_empty(self, client, mock_report_service):
        response = client.get("/api/v1/reports/")

        assert response.status_code == 200
        data = response.json()
        assert data["reports"] == []
        assert data["total"] == 0
        assert data["limit"] == 50

    def test_list_reports_passes_filters(self, client, mock_report_service, mock_user, make_report):
        report = make_report()
        mock_report_service.list.return_value = [report]

        response = client.get(
            "/api/v1/reports/",
            params={
                "type": "trip_analytics",
                "from_date": "2025-01-01",
                "to_date": "2025-01-31",
                "limit": 500,
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        assert data["limit"] == 100
        assert data["reports"][0]["id"] == str(report.id)
        assert "data" not in data["reports"][0]
        mock_report_service.list.assert_awaited_once_with(
            mock_user.uid,
            report_type="trip_analytics",
            from_date=date(2025, 1, 1),
            to_date=date(2025, 1, 31),
            limit=500,
        )

    def test_list_reports_unknown_type(self, client, mock_report_service):
        mock_report_service.list.side_effect = UnknownReportTypeError("weather")

        response = client.get("/api/v1/reports/", params={"type": "weather"})

        assert response.status_code == 400

    def test_list_reports_requires_auth(self, unauthenticated_client):
        response = unauthenticated_client.get("/api/v1/reports/")

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "MISSING_TOKEN"


class TestOverview:
    def test_overview(self, client, mock_report_service, mock_user, make_report):
        recent = make_report()
        mock_report_service.overview.return_value = ReportOverview(
            total_reports=3,
            reports_by_type={"trip_analytics": 2, "news_section": 1},
            recent_reports=[recent],
            last_generated=recent.generated_at,
        )

        response = client.get("/api/v1/reports/overview")

        assert response.status_code == 200
        data = response.json()
        assert data["total_reports"] == 3
        assert data["reports_by_type"] == {"trip_analytics": 2, "news_section": 1}
        assert data["recent_reports"][0]["id"] == str(recent.id)
        assert data["last_generated"].startswith("2025-02-01")
        mock_report_service.overview.assert_awaited_once_with(mock_user.uid)


class TestGenerate:
    """Tests for POST /generate and /generate-sync."""

    def test_generate_enqueues_task_after_commit(
        self, client, mock_report_service, mock_db_session, mock_user, make_report
    ):
        pending = make_report(status="pending", data={}, generated_at=None)
        mock_report_service.create_pending.return_value = pending
        events = []
        mock_db_session.commit.side_effect = lambda: events.append("commit")

        def _delay(report_id):
            events.append("enqueue")
            return Mock(id="celery-task-1")

        with patch("src.routers.reports.generate_report_task") as mock_task:
            mock_task.delay.side_effect = _delay
            response = client.post(
                "/api/v1/reports/generate",
                json={"type": "trip_analytics", "filters": {"destination": "Lisbon"}},
            )

        assert response.status_code == 202
        assert response.json()["status"] == "pending"
        mock_task.delay.assert_called_once_with(str(pending.id))
        assert events == ["commit", "enqueue"]

        owner_uid, request = mock_report_service.create_pending.call_args.args
        assert owner_uid == mock_user.uid
        assert request.type == "trip_analytics"
        assert request.filters.destination == "Lisbon"

    def test_generate_broker_failure_marks_report_failed(
        self, client, mock_report_service, make_report
    ):
        pending = make_report(status="pending", data={}, generated_at=None)
        mock_report_service.create_pending.return_value = pending
        broker_error = ConnectionError("broker unreachable")

        with patch("src.routers.reports.generate_report_task") as mock_task:
            mock_task.delay.side_effect = broker_error
            response = client.post("/api/v1/reports/generate", json={"type": "trip_analytics"})

        assert response.status_code == 503
        error = response.json()["error"]
        assert error["code"] == "TASK_QUEUE_UNAVAILABLE"
        assert error["details"] == {"report_id": str(pending.id), "cause": "ConnectionError"}
        mock_report_service.fail_enqueue.assert_awaited_once_with(pending, broker_error)

    def test_generate_invalid_fields_not_enqueued(self, client, mock_report_service):
        mock_report_service.create_pending.side_effect = ValidationError(
            "Invalid field selection",
            details={"invalid_fields": ["summary.nope"], "available_fields": ["summary.total_trips"]},
        )

        with patch("src.routers.reports.generate_report_task") as mock_task:
            response = client.post(
                "/api/v1/reports/generate",
                json={"type": "trip_analytics", "specific_fields": ["summary.nope"]},
            )

        assert response.status_code == 400
        assert response.json()["error"]["details"]["invalid_fields"] == ["summary.nope"]
        mock_task.delay.assert_not_called()

    def test_generate_rejects_malformed_filters(self, client, mock_report_service):
        response = client.post(
            "/api/v1/reports/generate",
            json={
                "type": "trip_analytics",
                "filters": {"date_range": {"start": "2025-02-01", "end": "2025-01-01"}},
            },
        )

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"
        mock_report_service.create_pending.assert_not_called()

    def test_generate_sync(self, client, mock_report_service, make_report):
        report = make_report()
        mock_report_service.generate.return_value = report

        response = client.post(
            "/api/v1/reports/generate-sync",
            json={"type": "trip_analytics", "lightweight": True},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "completed"
        assert data["data"]["summary"]["total_trips"] == 3
        request = mock_report_service.generate.call_args.args[1]
        assert request.lightweight is True

    def test_generate_sync_failure(self, client, mock_report_service):
        mock_report_service.generate.side_effect = ReportGenerationError(
            "trip_analytics", RuntimeError("source unavailable")
        )

        response = client.post("/api/v1/reports/generate-sync", json={"type": "trip_analytics"})

        assert response.status_code == 500

    def test_generate_requires_auth(self, unauthenticated_client):
        response = unauthenticated_client.post(
            "/api/v1/reports/generate", json={"type": "trip_analytics"}
        )

        assert response.status_code == 401


class TestExport:
    """Tests for both export endpoints."""

    def test_export_csv_by_path(self, client, mock_report_service, mock_user, make_report):
        report = make_report()
        mock_report_service.get.return_value = report

        response = client.get(f"/api/v1/reports/export/{report.id}/csv")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert (
            response.headers["content-disposition"]
            == 'attachment; filename="Trip_Analytics_-_January_2025_2025-02-01.csv"'
        )
        assert "Trip Types" in response.text
        mock_report_service.get.assert_awaited_once_with(report.id, owner_uid=mock_user.uid)

    def test_export_json_by_query(self, client, mock_report_service, make_report):
        report = make_report()
        mock_report_service.get.return_value = report

        response = client.get(f"/api/v1/reports/{report.id}/export", params={"format": "json"})

        assert response.status_code == 200
        body = json.loads(response.content)
        assert body["summary"] == {"total_trips": 3, "favorite_destination": "Lisbon"}
        assert [c["title"] for c in body["charts"]] == ["Trip Types"]

    def test_export_format_alias(self, client, mock_report_service, make_report):
        report = make_report()
        mock_report_service.get.return_value = report

        response = client.get(f"/api/v1/reports/{report.id}/export", params={"format": "excel"})

        assert response.status_code == 200
        assert response.headers["content-disposition"].endswith('.xlsx"')

    def test_export_unsupported_format(self, client, mock_report_service):
        response = client.get(f"/api/v1/reports/export/{uuid.uuid4()}/xml")

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "UNSUPPORTED_EXPORT_FORMAT"
        mock_report_service.get.assert_not_called()

    def test_export_incomplete_report(self, client, mock_report_service, make_report):
        report = make_report(status="generating", data={})
        mock_report_service.get.return_value = report

        response = client.get(f"/api/v1/reports/export/{report.id}/json")

        assert response.status_code == 400
        assert response.json()["error"]["details"] == {"status": "generating"}

    def test_export_missing_report(self, client, mock_report_service):
        report_id = uuid.uuid4()
        mock_report_service.get.side_effect = ResourceNotFoundError("Report", str(report_id))

        response = client.get(f"/api/v1/reports/export/{report_id}/pdf")

        assert response.status_code == 404


class TestSingleReport:
    """Tests for GET, regenerate and DELETE on /{report_id}."""

    def test_get_report(self, client, mock_report_service, make_report):
        report = make_report(filters={"destination": "Lisbon"})
        mock_report_service.get.return_value = report

        response = client.get(f"/api/v1/reports/{report.id}")

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == str(report.id)
        assert data["filters"] == {"destination": "Lisbon"}
        assert data["tags"] == ["trip_analytics", "analytics"]

    def test_get_report_not_found(self, client, mock_report_service):
        report_id = uuid.uuid4()
        mock_report_service.get.side_effect = ResourceNotFoundError("Report", str(report_id))

        response = client.get(f"/api/v1/reports/{report_id}")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "RESOURCE_NOT_FOUND"

    def test_get_report_invalid_id(self, client):
        response = client.get("/api/v1/reports/not-a-uuid")

        assert response.status_code == 422

    def test_regenerate(self, client, mock_report_service, mock_user, make_report):
        original_id = uuid.uuid4()
        replacement = make_report(generated_at=datetime(2025, 6, 15, tzinfo=timezone.utc))
        mock_report_service.regenerate.return_value = replacement

        response = client.post(f"/api/v1/reports/{original_id}/regenerate")

        assert response.status_code == 200
        assert response.json()["id"] == str(replacement.id)
        mock_report_service.regenerate.assert_awaited_once_with(
            original_id, owner_uid=mock_user.uid
        )

    def test_delete(self, client, mock_report_service, mock_user):
        report_id = uuid.uuid4()

        response = client.delete(f"/api/v1/reports/{report_id}")

        assert response.status_code == 204
        mock_report_service.delete.assert_awaited_once_with(report_id, mock_user)

    def test_delete_forbidden(self, client, mock_report_service):
        mock_report_service.delete = AsyncMock(side_effect=ForbiddenError("Not your report"))

        response = client.delete(f"/api/v1/reports/{uuid.uuid4()}")

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "FORBIDDEN"

    def test_delete_requires_auth(self, unauthenticated_client):
        response = unauthenticated_client.delete(f"/api/v1/reports/{uuid.uuid4()}")

        assert response.status_code == 401
