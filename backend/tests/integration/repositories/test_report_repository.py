"""Integration tests for ReportRepository against PostgreSQL."""

import pytest
from datetime import datetime, timezone
from sqlalchemy.exc import IntegrityError

from src.repositories.report_repository import ReportRepository

pytestmark = [pytest.mark.integration, pytest.mark.asyncio(loop_scope="session")]


def utc(year, month, day, hour=0):
    return datetime(year, month, day, hour, tzinfo=timezone.utc)


@pytest.fixture
def report_repo(db_session):
    return ReportRepository(db_session)


async def _create(repo, owner_uid, report_type="trip_analytics", **kwargs):
    return await repo.create(
        owner_uid=owner_uid,
        title=f"{report_type} report",
        report_type=report_type,
        filters=kwargs.pop("filters", {}),
        **kwargs,
    )


class TestLifecyclePersistence:
    async def test_full_lifecycle_round_trips_jsonb(self, report_repo, owner_uid):
        report = await _create(report_repo, owner_uid, filters={"destination": "Lisbon"})
        assert report.status == "pending"
        assert report.created_at is not None

        await report_repo.mark_generating(report)
        tree = {"summary": {"total_trips": 2}, "charts": [], "details": {"recent_trips": []}}
        await report_repo.mark_completed(report, tree, generated_at=utc(2025, 2, 1))

        loaded = await report_repo.get_by_id(report.id, owner_uid=owner_uid)
        assert loaded.status == "completed"
        assert loaded.data == tree
        assert loaded.filters == {"destination": "Lisbon"}
        assert loaded.generated_at == utc(2025, 2, 1)

    async def test_completed_without_generated_at_is_rejected(self, report_repo, db_session, owner_uid):
        report = await _create(report_repo, owner_uid)
        report.status = "completed"

        with pytest.raises(IntegrityError):
            await db_session.flush()

    async def test_owner_scoping(self, report_repo, owner_uid):
        report = await _create(report_repo, owner_uid)

        assert await report_repo.get_by_id(report.id, owner_uid="someone_else") is None
        assert await report_repo.get_by_id(report.id) is not None


class TestQueries:
    async def test_list_newest_first_with_date_window(self, report_repo, owner_uid):
        for day in (5, 20, 28):
            report = await _create(report_repo, owner_uid)
            await report_repo.mark_generating(report)
            await report_repo.mark_completed(report, {}, generated_at=utc(2025, 1, day, 12))

        reports = await report_repo.list_reports(
            owner_uid,
            from_date=utc(2025, 1, 10).date(),
            to_date=utc(2025, 1, 28).date(),
        )

        assert [r.generated_at.day for r in reports] == [28, 20]

    async def test_count_by_type_and_last_generated(self, report_repo, owner_uid):
        await _create(report_repo, owner_uid, "trip_analytics")
        await _create(report_repo, owner_uid, "trip_analytics")
        news = await _create(report_repo, owner_uid, "news_section")
        await report_repo.mark_generating(news)
        await report_repo.mark_completed(news, {}, generated_at=utc(2025, 3, 1))

        assert await report_repo.count_by_type(owner_uid) == {
            "trip_analytics": 2,
            "news_section": 1,
        }
        assert await report_repo.get_last_generated_at(owner_uid) == utc(2025, 3, 1)

    async def test_list_scheduled_skips_in_flight(self, report_repo, owner_uid):
        pending = await _create(
            report_repo, owner_uid, is_scheduled=True, schedule_frequency="daily"
        )
        done = await _create(report_repo, owner_uid, is_scheduled=True, schedule_frequency="daily")
        await report_repo.mark_generating(done)
        await report_repo.mark_completed(done, {}, generated_at=utc(2025, 1, 1))
        await _create(report_repo, owner_uid)

        scheduled = [r for r in await report_repo.list_scheduled() if r.owner_uid == owner_uid]

        assert [r.id for r in scheduled] == [done.id]
        assert scheduled[0].last_generated == utc(2025, 1, 1)
        assert pending.id not in {r.id for r in scheduled}
