"""Trip domain model: an ordered sequence of legs plus derived identity and metrics."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from functools import cached_property
from typing import TYPE_CHECKING

from transit_trips.domain.models.fare import Fare
from transit_trips.domain.models.leg import (
    Leg,
    LegKind,
    PublicLeg,
    leg_arrival_time,
    leg_departure_time,
    leg_max_time,
    leg_min_time,
)
from transit_trips.domain.models.location import Location
from transit_trips.domain.models.product import Product
from transit_trips.domain.models.temporal_value import TemporalValue
from transit_trips.domain.models.transfer_details import TransferDetails

if TYPE_CHECKING:
    from transit_trips.domain.models.trip_reference import TripReference


def _now() -> datetime:
    return datetime.now(UTC)


@dataclass(eq=False)
class Trip:
    """An itinerary from one location to another.

    Two trips are equal when their ids are equal. The id is either supplied by
    the backend or derived from the legs; refreshed delay data does not change it.
    """

    legs: list[Leg]
    from_location: Location
    to_location: Location
    explicit_id: str | None = None
    trip_ref: "TripReference | None" = None
    fares: list[Fare] | None = None
    capacity: tuple[int, ...] | None = None  # e.g. (first class, second class) load levels
    explicit_num_changes: int | None = None
    loaded_at: datetime = field(default_factory=_now)
    updated_at: datetime | None = None
    is_details_loaded: bool = False
    transfer_details: list[TransferDetails] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.legs:
            raise ValueError("a trip needs at least one leg")
        self.legs = list(self.legs)
        if self.updated_at is None:
            self.updated_at = self.loaded_at

    @cached_property
    def id(self) -> str:
        if self.explicit_id is not None:
            return self.explicit_id
        return self._build_substitute_id()

    def _build_substitute_id(self) -> str:
        parts = []
        for leg in self.legs:
            part = f"{leg.departure.identity()}-{leg.arrival.identity()}-"
            if leg.kind is LegKind.INDIVIDUAL:
                part += "individual"
            else:
                planned_departure = leg.departure_stop.planned_departure_time
                if planned_departure is not None:
                    part += f"{planned_departure.time_ms}-"
                planned_arrival = leg.arrival_stop.planned_arrival_time
                if planned_arrival is not None:
                    part += f"{planned_arrival.time_ms}-"
                part += f"{leg.line.product_code()}{leg.line.label or ''}"
            parts.append(part)
        return "|".join(parts)

    @cached_property
    def unique_id(self) -> str:
        """Key for deduplicating the same physical journey across result pages."""
        keys = []
        for leg in self.public_legs():
            departure_minute = leg.departure_time(prefer_planned=True).epoch_minute
            arrival_minute = leg.arrival_time(prefer_planned=True).epoch_minute
            if leg.journey_ref is not None:
                journey_id = leg.journey_ref.stable_hash()
            else:
                journey_id = f"{leg.line.id or ''}~{departure_minute}"
            keys.append(
                f"{journey_id}@{leg.departure.id},{departure_minute},"
                f"{leg.arrival.id},{arrival_minute}"
            )
        return "/".join(keys)

    def public_legs(self) -> list[PublicLeg]:
        return [leg for leg in self.legs if leg.kind is LegKind.PUBLIC]

    def first_public_leg(self) -> PublicLeg | None:
        for leg in self.legs:
            if leg.kind is LegKind.PUBLIC:
                return leg
        return None

    def last_public_leg(self) -> PublicLeg | None:
        for leg in reversed(self.legs):
            if leg.kind is LegKind.PUBLIC:
                return leg
        return None

    def first_departure_time(self) -> TemporalValue:
        return leg_departure_time(self.legs[0])

    def last_arrival_time(self) -> TemporalValue:
        return leg_arrival_time(self.legs[-1])

    def first_public_leg_departure_time(self) -> TemporalValue | None:
        leg = self.first_public_leg()
        return leg.departure_time() if leg else None

    def last_public_leg_arrival_time(self) -> TemporalValue | None:
        leg = self.last_public_leg()
        return leg.arrival_time() if leg else None

    def duration(self) -> int:
        """Whole trip in milliseconds, leading and trailing individual legs included."""
        return self.last_arrival_time() - self.first_departure_time()

    def public_duration(self) -> int | None:
        """First public departure to last public arrival in milliseconds, None without public legs."""
        first = self.first_public_leg_departure_time()
        last = self.last_public_leg_arrival_time()
        if first is None or last is None:
            return None
        return last - first

    def min_time(self) -> TemporalValue:
        return min(leg_min_time(leg) for leg in self.legs)

    def max_time(self) -> TemporalValue:
        return max(leg_max_time(leg) for leg in self.legs)

    def num_changes(self) -> int | None:
        """Explicit count if given, else public legs minus one; None without public legs."""
        if self.explicit_num_changes is not None:
            return self.explicit_num_changes

        count: int | None = None
        for leg in self.legs:
            if leg.kind is LegKind.PUBLIC:
                count = 0 if count is None else count + 1
        return count

    def is_travelable(self) -> bool:
        """False if legs overlap in time or a boarding or alighting is cancelled."""
        latest: TemporalValue | None = None

        for leg in self.legs:
            if leg.kind is LegKind.PUBLIC and (
                leg.departure_stop.departure_cancelled or leg.arrival_stop.arrival_cancelled
            ):
                return False

            for time in (leg_departure_time(leg), leg_arrival_time(leg)):
                if latest is not None and time < latest:
                    return False
                latest = time

        return True

    def repair_individual_overlaps(self) -> int:
        """Shift individual legs that start before their predecessor arrives.

        Single forward pass over adjacent pairs; public legs are never moved.
        Returns the number of legs shifted.
        """
        shifted = 0
        for i in range(1, len(self.legs)):
            leg = self.legs[i]
            if leg.kind is not LegKind.INDIVIDUAL:
                continue
            previous_arrival = leg_arrival_time(self.legs[i - 1])
            if leg.departure_time < previous_arrival:
                self.legs[i] = leg.moved_clone(previous_arrival)
                shifted += 1
        return shifted

    def products(self) -> set[Product]:
        return {leg.line.product for leg in self.public_legs() if leg.line.product is not None}

    def __eq__(self, other: object) -> bool:
        if other is self:
            return True
        if not isinstance(other, Trip):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __str__(self) -> str:
        first = self.first_public_leg_departure_time()
        last = self.last_public_leg_arrival_time()
        parts = [self.id]
        if first is not None:
            parts.append(f"first={first.to_datetime():%a %H:%M}")
        if last is not None:
            parts.append(f"last={last.to_datetime():%a %H:%M}")
        parts.append(f"num_changes={self.num_changes()}")
        return f"Trip{{{','.join(parts)}}}"
