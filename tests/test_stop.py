"""Tests for Stop time and position resolution."""

from datetime import datetime
from zoneinfo import ZoneInfo

from transit_trips.domain.models import Location, LocationType, Position, Stop, TemporalValue

BERLIN = ZoneInfo("Europe/Berlin")


def at(hour: int, minute: int) -> TemporalValue:
    return TemporalValue.from_datetime(datetime(2024, 3, 4, hour, minute, tzinfo=BERLIN))


STATION = Location(LocationType.STATION, id="de:11000:900100001", name="S+U Friedrichstr.")


class TestResolveTimes:
    """Tests for planned/predicted time resolution."""

    def test_when_both_present_and_not_preferring_planned_then_returns_predicted(self) -> None:
        """Given planned 08:00 and predicted 08:03, when resolving, then predicted wins."""
        stop = Stop(STATION, planned_arrival_time=at(8, 0), predicted_arrival_time=at(8, 3))

        assert stop.resolve_arrival() == at(8, 3)
        assert stop.is_arrival_predicted()

    def test_when_both_present_and_preferring_planned_then_returns_planned(self) -> None:
        """Given planned and predicted, when preferring planned, then planned is returned."""
        stop = Stop(STATION, planned_arrival_time=at(8, 0), predicted_arrival_time=at(8, 3))

        assert stop.resolve_arrival(prefer_planned=True) == at(8, 0)
        assert not stop.is_arrival_predicted(prefer_planned=True)

    def test_when_only_one_present_then_that_one_is_returned(self) -> None:
        """Given only a predicted departure, when preferring planned, then predicted is used."""
        stop = Stop.departure_only(STATION, None, predicted_time=at(9, 1))

        assert stop.resolve_departure(prefer_planned=True) == at(9, 1)
        assert stop.resolve_arrival() is None

    def test_when_nothing_present_then_none(self) -> None:
        """Given an empty stop, when resolving, then None."""
        stop = Stop(STATION)

        assert stop.resolve_departure() is None
        assert stop.resolve_arrival(prefer_planned=True) is None


class TestDelay:
    """Tests for delay computation."""

    def test_when_three_minutes_late_then_delay_is_positive(self) -> None:
        """Given planned 08:00 and predicted 08:03, when computing delay, then 3 minutes."""
        stop = Stop.departure_only(STATION, at(8, 0), predicted_time=at(8, 3))

        assert stop.departure_delay() == 3 * 60 * 1000

    def test_when_early_then_delay_is_negative(self) -> None:
        """Given a predicted time before planned, when computing delay, then negative."""
        stop = Stop.arrival_only(STATION, at(8, 5), predicted_time=at(8, 4))

        assert stop.arrival_delay() == -60 * 1000

    def test_when_either_side_missing_then_delay_is_none(self) -> None:
        """Given only a planned time, when computing delay, then it is unknown, not zero."""
        assert Stop.departure_only(STATION, at(8, 0)).departure_delay() is None
        assert Stop.arrival_only(STATION, None, at(8, 0)).arrival_delay() is None


class TestPositions:
    """Tests for platform resolution."""

    def test_when_predicted_position_present_then_it_wins(self) -> None:
        """Given a platform change, when reading the position, then the predicted one is used."""
        stop = Stop.departure_only(
            STATION, at(8, 0), planned_position=Position("3"), predicted_position=Position("4")
        )

        assert stop.departure_position() == Position("4")
        assert stop.is_departure_position_predicted()

    def test_when_only_planned_position_then_it_is_used(self) -> None:
        """Given only a planned platform, when reading, then it is returned unpredicted."""
        stop = Stop.arrival_only(STATION, at(8, 0), planned_position=Position("1", "A-C"))

        assert stop.arrival_position() == Position("1", "A-C")
        assert not stop.is_arrival_position_predicted()


class TestMinMax:
    """Tests for min/max time bounds."""

    def test_min_time_is_earliest_departure(self) -> None:
        """Given planned 08:05 and predicted 08:03, when taking min, then 08:03."""
        stop = Stop.departure_only(STATION, at(8, 5), predicted_time=at(8, 3))

        assert stop.min_time() == at(8, 3)

    def test_max_time_is_latest_arrival(self) -> None:
        """Given planned 08:05 and predicted 08:09, when taking max, then 08:09."""
        stop = Stop.arrival_only(STATION, at(8, 5), predicted_time=at(8, 9))

        assert stop.max_time() == at(8, 9)
