"""Tests for SourceQuery and SourceRepository."""

import pytest
from datetime import date, datetime, timezone
from types import SimpleNamespace
from unittest.mock import Mock

from src.repositories.source_repository import SourceQuery, SourceRepository
from src.schemas.report_data import DateRange, NumericRange, ReportFilters


class TestSourceQueryFromFilters:
    def test_empty_filters_only_scope_owner(self):
        query = SourceQuery.from_filters(
            ReportFilters(),
            owner_uid="user_1",
            date_field="start_date",
            numeric_field="budget",
        )

        assert query == SourceQuery(owner_uid="user_1")

    def test_date_range_is_end_exclusive(self):
        filters = ReportFilters(date_range=DateRange(start=date(2025, 1, 1), end=date(2025, 1, 31)))

        query = SourceQuery.from_filters(filters, date_field="created_at")

        assert query.date_field == "created_at"
        assert query.start == datetime(2025, 1, 1, tzinfo=timezone.utc)
        assert query.end == datetime(2025, 2, 1, tzinfo=timezone.utc)

    def test_filters_without_target_column_are_ignored(self):
        filters = ReportFilters(
            date_range=DateRange(start=date(2025, 1, 1), end=date(2025, 1, 31)),
            category="Solo",
            numeric_range=NumericRange(min=10, max=20),
            destination="Lisbon",
        )

        query = SourceQuery.from_filters(filters, owner_uid="user_1")

        assert query == SourceQuery(owner_uid="user_1")

    def test_numeric_range_without_max(self):
        filters = ReportFilters(numeric_range=NumericRange(min=100))

        query = SourceQuery.from_filters(filters, numeric_field="price")

        assert query.numeric_field == "price"
        assert query.numeric_min == 100
        assert query.numeric_max is None

    def test_category_and_text(self):
        filters = ReportFilters(category="Family", destination="Port")

        query = SourceQuery.from_filters(
            filters, category_field="trip_type", text_field="destination"
        )

        assert (query.category_field, query.category) == ("trip_type", "Family")
        assert (query.text_field, query.text) == ("destination", "Port")


class TestSourceRepository:
    @pytest.fixture
    def source_repository(self, mock_session_factory):
        return SourceRepository(mock_session_factory)

    @pytest.mark.asyncio
    async def test_list_trips_builds_filtered_statement(self, source_repository, mock_async_session):
        trip = SimpleNamespace(destination="Lisbon")
        mock_result = Mock()
        mock_result.scalars.return_value = Mock(all=Mock(return_value=[trip]))
        mock_async_session.execute.return_value = mock_result
        query = SourceQuery(
            owner_uid="user_1",
            date_field="start_date",
            start=datetime(2025, 1, 1, tzinfo=timezone.utc),
            end=datetime(2025, 2, 1, tzinfo=timezone.utc),
            numeric_field="budget",
            numeric_min=0,
            numeric_max=500,
            text_field="destination",
            text="Lis",
        )

        trips = await source_repository.list_trips(query)

        assert trips == [trip]
        sql = str(mock_async_session.execute.call_args.args[0])
        assert "trips.owner_uid" in sql
        assert "trips.start_date >=" in sql
        assert "trips.start_date <" in sql
        assert "trips.budget >=" in sql
        assert "trips.budget <=" in sql
        assert "trips.destination" in sql
        assert "ORDER BY trips.start_date ASC" in sql

    @pytest.mark.asyncio
    async def test_text_filter_escapes_like_wildcards(self, source_repository, mock_async_session):
        await source_repository.list_trips(
            SourceQuery(owner_uid="user_1", text_field="destination", text="100%_off")
        )

        compiled = mock_async_session.execute.call_args.args[0].compile()
        assert "ESCAPE '/'" in str(compiled)
        assert "100/%/_off" in compiled.params.values()

    @pytest.mark.asyncio
    async def test_catalogue_read_has_no_owner_predicate(self, source_repository, mock_async_session):
        await source_repository.list_products(SourceQuery(numeric_field="eco_rating", numeric_min=4))

        sql = str(mock_async_session.execute.call_args.args[0])
        assert "owner_uid" not in sql
        assert "products.eco_rating >=" in sql

    @pytest.mark.asyncio
    async def test_get_user(self, source_repository, mock_async_session):
        user = SimpleNamespace(uid="user_1")
        mock_result = Mock()
        mock_result.scalar_one_or_none.return_value = user
        mock_async_session.execute.return_value = mock_result

        assert await source_repository.get_user("user_1") is user
