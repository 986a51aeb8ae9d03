"""Stop domain model: planned and predicted state at one location."""

from dataclasses import dataclass

from transit_trips.domain.models.location import Location
from transit_trips.domain.models.position import Position
from transit_trips.domain.models.temporal_value import TemporalValue


def _resolve(
    planned: TemporalValue | None, predicted: TemporalValue | None, prefer_planned: bool
) -> TemporalValue | None:
    if prefer_planned and planned is not None:
        return planned
    if predicted is not None:
        return predicted
    return planned


def _delay(planned: TemporalValue | None, predicted: TemporalValue | None) -> int | None:
    # Unknown when either side is missing; that is not the same as on time.
    if planned is None or predicted is None:
        return None
    return predicted - planned


@dataclass(frozen=True)
class Stop:
    """Arrival and departure state of a scheduled leg at one location."""

    location: Location
    planned_arrival_time: TemporalValue | None = None
    predicted_arrival_time: TemporalValue | None = None
    planned_arrival_position: Position | None = None
    predicted_arrival_position: Position | None = None
    arrival_cancelled: bool = False
    planned_departure_time: TemporalValue | None = None
    predicted_departure_time: TemporalValue | None = None
    planned_departure_position: Position | None = None
    predicted_departure_position: Position | None = None
    departure_cancelled: bool = False

    @classmethod
    def departure_only(
        cls,
        location: Location,
        planned_time: TemporalValue | None,
        predicted_time: TemporalValue | None = None,
        planned_position: Position | None = None,
        predicted_position: Position | None = None,
        cancelled: bool = False,
    ) -> "Stop":
        return cls(
            location,
            planned_departure_time=planned_time,
            predicted_departure_time=predicted_time,
            planned_departure_position=planned_position,
            predicted_departure_position=predicted_position,
            departure_cancelled=cancelled,
        )

    @classmethod
    def arrival_only(
        cls,
        location: Location,
        planned_time: TemporalValue | None,
        predicted_time: TemporalValue | None = None,
        planned_position: Position | None = None,
        predicted_position: Position | None = None,
        cancelled: bool = False,
    ) -> "Stop":
        return cls(
            location,
            planned_arrival_time=planned_time,
            predicted_arrival_time=predicted_time,
            planned_arrival_position=planned_position,
            predicted_arrival_position=predicted_position,
            arrival_cancelled=cancelled,
        )

    def resolve_arrival(self, prefer_planned: bool = False) -> TemporalValue | None:
        return _resolve(self.planned_arrival_time, self.predicted_arrival_time, prefer_planned)

    def resolve_departure(self, prefer_planned: bool = False) -> TemporalValue | None:
        return _resolve(self.planned_departure_time, self.predicted_departure_time, prefer_planned)

    def is_arrival_predicted(self, prefer_planned: bool = False) -> bool:
        if prefer_planned and self.planned_arrival_time is not None:
            return False
        return self.predicted_arrival_time is not None

    def is_departure_predicted(self, prefer_planned: bool = False) -> bool:
        if prefer_planned and self.planned_departure_time is not None:
            return False
        return self.predicted_departure_time is not None

    def arrival_delay(self) -> int | None:
        """Predicted minus planned arrival in milliseconds, None if unknown."""
        return _delay(self.planned_arrival_time, self.predicted_arrival_time)

    def departure_delay(self) -> int | None:
        """Predicted minus planned departure in milliseconds, None if unknown."""
        return _delay(self.planned_departure_time, self.predicted_departure_time)

    def arrival_position(self) -> Position | None:
        return self.predicted_arrival_position or self.planned_arrival_position

    def is_arrival_position_predicted(self) -> bool:
        return self.predicted_arrival_position is not None

    def departure_position(self) -> Position | None:
        return self.predicted_departure_position or self.planned_departure_position

    def is_departure_position_predicted(self) -> bool:
        return self.predicted_departure_position is not None

    def min_time(self) -> TemporalValue | None:
        """Earliest plausible departure, planned or predicted."""
        if self.planned_departure_time is None:
            return self.predicted_departure_time
        if self.predicted_departure_time is None:
            return self.planned_departure_time
        return min(self.planned_departure_time, self.predicted_departure_time)

    def max_time(self) -> TemporalValue | None:
        """Latest plausible arrival, planned or predicted."""
        if self.planned_arrival_time is None:
            return self.predicted_arrival_time
        if self.predicted_arrival_time is None:
            return self.planned_arrival_time
        return max(self.planned_arrival_time, self.predicted_arrival_time)
