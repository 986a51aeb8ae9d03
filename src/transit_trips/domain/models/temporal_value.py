"""Offset-tagged instant domain model."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta, timezone, tzinfo
from functools import total_ordering
from zoneinfo import ZoneInfo

_INT_MIN = -(2**31)

# Reserved offset tags. They lie far outside any real UTC offset.
UNKNOWN_LOCATION_SPECIFIC_OFFSET = _INT_MIN + 1
SYSTEM_OFFSET = _INT_MIN + 2
NETWORK_OFFSET = _INT_MIN + 3

_SENTINELS = frozenset({UNKNOWN_LOCATION_SPECIFIC_OFFSET, SYSTEM_OFFSET, NETWORK_OFFSET})


@total_ordering
@dataclass(frozen=True, eq=False)
class TemporalValue:
    """An absolute instant (epoch milliseconds) plus an offset tag in minutes.

    The offset is presentation metadata only: equality, ordering and hashing
    look at the instant alone.
    """

    time_ms: int
    offset_minutes: int

    @classmethod
    def from_timezone(cls, time_ms: int, tz: tzinfo | str) -> "TemporalValue":
        """Create with the offset the given timezone has at that very instant."""
        zone = ZoneInfo(tz) if isinstance(tz, str) else tz
        local = datetime.fromtimestamp(time_ms / 1000, tz=zone)
        offset = local.utcoffset() or timedelta(0)
        return cls(time_ms, int(offset.total_seconds() // 60))

    @classmethod
    def from_datetime(cls, value: datetime) -> "TemporalValue":
        """Create from an aware datetime, keeping its current UTC offset."""
        if value.tzinfo is None:
            raise ValueError("datetime must be timezone-aware")
        offset = value.utcoffset() or timedelta(0)
        return cls(round(value.timestamp() * 1000), int(offset.total_seconds() // 60))

    @classmethod
    def with_unknown_location_specific_offset(cls, time_ms: int) -> "TemporalValue":
        return cls(time_ms, UNKNOWN_LOCATION_SPECIFIC_OFFSET)

    @classmethod
    def with_system_offset(cls, time_ms: int) -> "TemporalValue":
        return cls(time_ms, SYSTEM_OFFSET)

    @classmethod
    def with_network_offset(cls, time_ms: int) -> "TemporalValue":
        return cls(time_ms, NETWORK_OFFSET)

    @staticmethod
    def offset_is_unknown_location_specific(offset: int) -> bool:
        return offset == UNKNOWN_LOCATION_SPECIFIC_OFFSET

    @staticmethod
    def offset_is_system(offset: int) -> bool:
        return offset == SYSTEM_OFFSET

    @staticmethod
    def offset_is_network(offset: int) -> bool:
        return offset == NETWORK_OFFSET

    def is_unknown_location_specific(self) -> bool:
        return self.offset_is_unknown_location_specific(self.offset_minutes)

    def is_system_offset(self) -> bool:
        return self.offset_is_system(self.offset_minutes)

    def is_network_offset(self) -> bool:
        return self.offset_is_network(self.offset_minutes)

    def has_concrete_offset(self) -> bool:
        """True unless the offset is one of the reserved tags."""
        return self.offset_minutes not in _SENTINELS

    @property
    def epoch_minute(self) -> int:
        """Instant truncated to whole minutes since the epoch."""
        return self.time_ms // 60000

    def to_datetime(self) -> datetime:
        """Return an aware datetime.

        Sentinel offsets cannot be resolved here; the caller has to apply the
        venue, system or network zone, so the value is returned in UTC.
        """
        instant = datetime.fromtimestamp(self.time_ms / 1000, tz=UTC)
        if not self.has_concrete_offset():
            return instant
        return instant.astimezone(timezone(timedelta(minutes=self.offset_minutes)))

    def shifted(self, delta_ms: int) -> "TemporalValue":
        """Same offset tag, instant moved by delta_ms."""
        return TemporalValue(self.time_ms + delta_ms, self.offset_minutes)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TemporalValue):
            return NotImplemented
        return self.time_ms == other.time_ms

    def __lt__(self, other: "TemporalValue") -> bool:
        if not isinstance(other, TemporalValue):
            return NotImplemented
        return self.time_ms < other.time_ms

    def __hash__(self) -> int:
        return hash(self.time_ms)

    def __sub__(self, other: "TemporalValue") -> int:
        """Difference in milliseconds."""
        if not isinstance(other, TemporalValue):
            return NotImplemented
        return self.time_ms - other.time_ms
