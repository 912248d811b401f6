"""Integration tests for SourceRepository filters and the trip report end to end."""

import pytest
from datetime import date, datetime, timezone

from src.repositories.report_repository import ReportRepository
from src.repositories.source_repository import SourceQuery, SourceRepository
from src.schemas.report_data import DateRange, NumericRange, ReportFilters
from src.schemas.reports import GenerateReportRequest
from src.services.field_config import DEFAULT_FIELD_CONFIGS, FieldConfigRegistry
from src.services.generators import GeneratorRegistry
from src.services.report_service import ReportService

pytestmark = [pytest.mark.integration, pytest.mark.asyncio(loop_scope="session")]


def utc(year, month, day, hour=0):
    return datetime(year, month, day, hour, tzinfo=timezone.utc)


@pytest.fixture
def sources(session_factory):
    return SourceRepository(session_factory)


async def test_trip_filters_apply_in_sql(sources, add_trip, owner_uid):
    await add_trip("Lisbon", 100, utc(2025, 1, 1))
    await add_trip("Porto", 300, utc(2025, 1, 31, 23))
    await add_trip("Lisbon", 900, utc(2025, 1, 15))
    await add_trip("Madrid", 200, utc(2025, 2, 1))
    await add_trip("Lisbon", 150, utc(2025, 1, 10), owner_uid="someone_else")

    filters = ReportFilters(
        date_range=DateRange(start=date(2025, 1, 1), end=date(2025, 1, 31)),
        numeric_range=NumericRange(min=50, max=500),
    )
    query = SourceQuery.from_filters(
        filters,
        owner_uid=owner_uid,
        date_field="start_date",
        numeric_field="budget",
    )

    trips = await sources.list_trips(query)

    assert [(t.destination, t.budget) for t in trips] == [("Lisbon", 100), ("Porto", 300)]


async def test_destination_match_is_case_insensitive_substring(sources, add_trip, owner_uid):
    await add_trip("Lisbon, Portugal", 100, utc(2025, 1, 1))
    await add_trip("Madrid", 100, utc(2025, 1, 2))

    trips = await sources.list_trips(
        SourceQuery(owner_uid=owner_uid, text_field="destination", text="lisbon")
    )

    assert [t.destination for t in trips] == ["Lisbon, Portugal"]


async def test_destination_wildcards_match_literally(sources, add_trip, owner_uid):
    await add_trip("Lisbon", 100, utc(2025, 1, 1))
    await add_trip("Camp_Site", 100, utc(2025, 1, 2))

    underscore = await sources.list_trips(
        SourceQuery(owner_uid=owner_uid, text_field="destination", text="_")
    )
    percent = await sources.list_trips(
        SourceQuery(owner_uid=owner_uid, text_field="destination", text="%")
    )

    assert [t.destination for t in underscore] == ["Camp_Site"]
    assert percent == []


async def test_generate_trip_report_end_to_end(db_session, session_factory, add_trip, owner_uid):
    await add_trip("A", 100, utc(2025, 1, 5), duration_days=4)
    await add_trip("A", 300, utc(2025, 2, 5), duration_days=3)
    await add_trip("B", 200, utc(2025, 3, 5), duration_days=2)
    service = ReportService(
        report_repo=ReportRepository(db_session),
        generators=GeneratorRegistry(SourceRepository(session_factory)),
        field_registry=FieldConfigRegistry(DEFAULT_FIELD_CONFIGS),
        clock=lambda: utc(2025, 6, 15, 12),
    )

    report = await service.generate(
        owner_uid,
        GenerateReportRequest(type="trip_analytics", specific_fields=["summary.return_visits"]),
    )

    assert report.status == "completed"
    assert report.generated_at == utc(2025, 6, 15, 12)
    summary = report.data["summary"]
    assert summary["total_trips"] == 3
    assert summary["total_budget"] == 600
    assert summary["favorite_destination"] == "A"
    assert summary["return_visits"] == 1
    assert "eco_friendly_percentage" not in summary
    assert "details" not in report.data

    reloaded = await ReportRepository(db_session).get_by_id(report.id, owner_uid=owner_uid)
    assert reloaded.data == report.data
