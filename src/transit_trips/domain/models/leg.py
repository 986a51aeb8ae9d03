"""Leg domain models.

A leg is a tagged union over its kind: either an IndividualLeg (walk, bike,
car, ...) or a PublicLeg on a scheduled line. The module-level accessors
dispatch on ``leg.kind`` so callers never need to know which variant they hold.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Literal

from transit_trips.domain.models.line import JourneyRef, Line
from transit_trips.domain.models.location import Location, Point
from transit_trips.domain.models.position import Position
from transit_trips.domain.models.stop import Stop
from transit_trips.domain.models.temporal_value import TemporalValue


class LegKind(Enum):
    INDIVIDUAL = "individual"
    PUBLIC = "public"


class IndividualType(Enum):
    WALK = "walk"
    BIKE = "bike"
    CAR = "car"
    TRANSFER = "transfer"
    CHECK_IN = "check_in"
    CHECK_OUT = "check_out"


class _PathMixin:
    """Single-assignment path attachment for otherwise frozen legs."""

    path: tuple[Point, ...] | None

    def attach_path(self, path: list[Point] | tuple[Point, ...]) -> None:
        """Attach a lazily computed path. A leg's path can be set only once."""
        if self.path is not None:
            raise ValueError("path already attached")
        object.__setattr__(self, "path", tuple(path))


@dataclass(frozen=True)
class IndividualLeg(_PathMixin):
    """A non-scheduled movement with explicit times."""

    type: IndividualType
    departure: Location
    departure_time: TemporalValue
    arrival: Location
    arrival_time: TemporalValue
    path: tuple[Point, ...] | None = field(default=None, compare=False)
    distance: int = 0
    kind: Literal[LegKind.INDIVIDUAL] = field(default=LegKind.INDIVIDUAL, init=False)

    @property
    def min(self) -> int:
        """Duration in whole minutes."""
        return int((self.arrival_time - self.departure_time) / 1000 / 60)

    def moved_clone(self, departure_time: TemporalValue) -> "IndividualLeg":
        """Copy of this leg starting at departure_time, keeping duration, path and distance."""
        arrival_time = TemporalValue(
            departure_time.time_ms + (self.arrival_time - self.departure_time),
            departure_time.offset_minutes,
        )
        return IndividualLeg(
            type=self.type,
            departure=self.departure,
            departure_time=departure_time,
            arrival=self.arrival,
            arrival_time=arrival_time,
            path=self.path,
            distance=self.distance,
        )


@dataclass(frozen=True)
class PublicLeg(_PathMixin):
    """A scheduled movement on a line between two stops.

    Some backends report entry/exit locations with identifiers that differ
    from the leg's own stop records. Candidates passed as ``entry_location``
    and ``exit_location`` are reconciled against the leg's stops on
    construction.
    """

    line: Line
    destination: Location | None
    departure_stop: Stop
    arrival_stop: Stop
    intermediate_stops: tuple[Stop, ...] | None = None
    path: tuple[Point, ...] | None = field(default=None, compare=False)
    message: str | None = None
    journey_ref: JourneyRef | None = None
    entry_location: Location | None = None
    exit_location: Location | None = None
    kind: Literal[LegKind.PUBLIC] = field(default=LegKind.PUBLIC, init=False)

    def __post_init__(self) -> None:
        if self.departure_stop.resolve_departure() is None:
            raise ValueError(f"departure stop {self.departure_stop.location} has no departure time")
        if self.arrival_stop.resolve_arrival() is None:
            raise ValueError(f"arrival stop {self.arrival_stop.location} has no arrival time")
        if self.intermediate_stops is not None and not isinstance(self.intermediate_stops, tuple):
            object.__setattr__(self, "intermediate_stops", tuple(self.intermediate_stops))

        entry, exit_ = self.entry_location, self.exit_location
        if entry is not None:
            real_entry = self._find_real_stop_location(entry, self.departure_stop.location)
            if exit_ is None and real_entry is None:
                real_entry = self._find_real_stop_location(entry, self.arrival_stop.location)
            object.__setattr__(self, "entry_location", real_entry or entry)
        if exit_ is not None:
            real_exit = self._find_real_stop_location(exit_, self.arrival_stop.location)
            object.__setattr__(self, "exit_location", real_exit or exit_)

    @property
    def departure(self) -> Location:
        return self.departure_stop.location

    @property
    def arrival(self) -> Location:
        return self.arrival_stop.location

    def _intermediates(self) -> tuple[Stop, ...]:
        return self.intermediate_stops or ()

    def with_entry_and_exit(
        self, entry_location: Location | None, exit_location: Location | None
    ) -> "PublicLeg":
        """Copy of this leg with reconciled entry/exit locations."""
        return replace(self, entry_location=entry_location, exit_location=exit_location)

    def find_stop_by_location(self, location: Location) -> Stop | None:
        """Return the stop whose location id equals location.id, if any."""
        loc_id = location.id
        if loc_id is None:
            return None
        if loc_id == self.departure.id:
            return self.departure_stop
        if loc_id == self.arrival.id:
            return self.arrival_stop
        for stop in self._intermediates():
            if loc_id == stop.location.id:
                return stop
        return None

    def is_stop_after_other(self, stop: Stop, other: Location) -> bool:
        """Whether stop lies strictly after other along this leg.

        A single pass over the intermediate stops: whichever of the two is met
        first decides. Unknown locations yield False.
        """
        stop_id = stop.location.id
        other_id = other.id
        if stop_id == other_id:
            return False
        if stop_id == self.departure.id:
            return False
        if other_id == self.departure.id:
            return True
        if stop_id == self.arrival.id:
            return True
        if other_id == self.arrival.id:
            return False

        other_found = False
        stop_found = False
        for intermediate in self._intermediates():
            loc_id = intermediate.location.id
            if loc_id == other_id:
                if stop_found:
                    return False
                other_found = True
            if loc_id == stop_id:
                if other_found:
                    return True
                stop_found = True
        return False

    def reconcile_boarding_location(self, candidate: Location, stop_location: Location) -> Location:
        """Map a backend-reported boarding location onto this leg's own stop records.

        Tries an exact id match against stop_location and each intermediate stop,
        then name+place equality against the same; returns candidate unchanged
        if nothing matches.
        """
        return self._find_real_stop_location(candidate, stop_location) or candidate

    def _find_real_stop_location(
        self, candidate: Location, stop_location: Location
    ) -> Location | None:
        intermediates = self._intermediates()
        if candidate.id is not None:
            if candidate.id == stop_location.id:
                return stop_location
            for intermediate in intermediates:
                if candidate.id == intermediate.location.id:
                    return intermediate.location

        if not candidate.has_name():
            return None
        if candidate.name == stop_location.name and candidate.place == stop_location.place:
            return stop_location
        for intermediate in intermediates:
            location = intermediate.location
            if candidate.name == location.name and candidate.place == location.place:
                return location
        return None

    def departure_time(self, prefer_planned: bool = False) -> TemporalValue:
        value = self.departure_stop.resolve_departure(prefer_planned)
        assert value is not None  # checked in __post_init__
        return value

    def arrival_time(self, prefer_planned: bool = False) -> TemporalValue:
        value = self.arrival_stop.resolve_arrival(prefer_planned)
        assert value is not None  # checked in __post_init__
        return value

    def is_departure_time_predicted(self) -> bool:
        return self.departure_stop.is_departure_predicted()

    def is_arrival_time_predicted(self) -> bool:
        return self.arrival_stop.is_arrival_predicted()

    def departure_delay(self) -> int | None:
        return self.departure_stop.departure_delay()

    def arrival_delay(self) -> int | None:
        return self.arrival_stop.arrival_delay()

    def departure_position(self) -> Position | None:
        return self.departure_stop.departure_position()

    def arrival_position(self) -> Position | None:
        return self.arrival_stop.arrival_position()


Leg = IndividualLeg | PublicLeg


def leg_departure_time(leg: Leg, prefer_planned: bool = False) -> TemporalValue:
    """Coarse departure time of any leg."""
    if leg.kind is LegKind.INDIVIDUAL:
        return leg.departure_time
    return leg.departure_time(prefer_planned)


def leg_arrival_time(leg: Leg, prefer_planned: bool = False) -> TemporalValue:
    """Coarse arrival time of any leg."""
    if leg.kind is LegKind.INDIVIDUAL:
        return leg.arrival_time
    return leg.arrival_time(prefer_planned)


def leg_min_time(leg: Leg) -> TemporalValue:
    """Earliest time occurring in the leg."""
    if leg.kind is LegKind.INDIVIDUAL:
        return leg.departure_time
    return leg.departure_stop.min_time() or leg.departure_time()


def leg_max_time(leg: Leg) -> TemporalValue:
    """Latest time occurring in the leg."""
    if leg.kind is LegKind.INDIVIDUAL:
        return leg.arrival_time
    return leg.arrival_stop.max_time() or leg.arrival_time()
