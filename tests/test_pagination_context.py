"""Tests for PaginationContext."""

from datetime import UTC, datetime

import pytest

from transit_trips.domain.models import Location, LocationType, PaginationContext


@pytest.fixture
def context() -> PaginationContext:
    """A context for a query between two stations without any cursor yet."""
    return PaginationContext(
        from_location=Location(LocationType.STATION, id="A"),
        via_location=None,
        to_location=Location(LocationType.STATION, id="B"),
        date=datetime(2024, 3, 4, 7, 0, tzinfo=UTC),
    )


class TestCapabilityFlags:
    """Tests for can_query_earlier and can_query_later."""

    def test_when_no_tokens_then_nothing_to_query(self, context: PaginationContext) -> None:
        """Given a fresh context, when checking, then both directions are exhausted."""
        assert context.can_query_earlier() is False
        assert context.can_query_later() is False

    def test_when_only_backward_token_then_only_earlier(self, context: PaginationContext) -> None:
        """Given a first page with only a previous cursor, when checking, then only earlier."""
        context.reset_tokens("prev-1", None)

        assert context.can_query_earlier() is True
        assert context.can_query_later() is False

    def test_when_token_is_empty_string_then_treated_as_absent(
        self, context: PaginationContext
    ) -> None:
        """Given empty cursors, when resetting, then they count as missing."""
        context.reset_tokens("", "")

        assert context.earlier_token is None
        assert context.later_token is None


class TestAdvance:
    """Tests for moving cursors after a follow-up page."""

    def test_when_later_page_has_cursor_then_only_later_moves(
        self, context: PaginationContext
    ) -> None:
        """Given both cursors, when advancing later, then the earlier cursor is untouched."""
        context.reset_tokens("prev-1", "next-1")

        context.advance(later=True, token="next-2")

        assert context.later_token == "next-2"
        assert context.earlier_token == "prev-1"

    def test_when_later_page_has_no_cursor_then_later_is_exhausted(
        self, context: PaginationContext
    ) -> None:
        """Given a later page without a forward cursor, when advancing, then can_query_later is False."""
        context.reset_tokens("prev-1", "next-1")

        context.advance(later=True, token=None)

        assert context.can_query_later() is False
        assert context.can_query_earlier() is True

    def test_when_earlier_page_has_no_cursor_then_earlier_is_exhausted(
        self, context: PaginationContext
    ) -> None:
        """Given an earlier page without a backward cursor, when advancing, then earlier is exhausted."""
        context.reset_tokens("prev-1", "next-1")

        context.advance(later=False, token=None)

        assert context.can_query_earlier() is False
        assert context.later_token == "next-1"
