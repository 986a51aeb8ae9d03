"""Location and coordinate domain models."""

from dataclasses import dataclass, field
from enum import Enum

from transit_trips.domain.models.product import Product


@dataclass(frozen=True)
class Point:
    """A WGS84 coordinate stored as fixed-point integers (degrees * 1e6)."""

    lat_1e6: int
    lon_1e6: int

    @classmethod
    def from_double(cls, lat: float, lon: float) -> "Point":
        return cls(round(lat * 1e6), round(lon * 1e6))

    @classmethod
    def from_1e6(cls, lat: int, lon: int) -> "Point":
        return cls(lat, lon)

    @property
    def lat(self) -> float:
        return self.lat_1e6 / 1e6

    @property
    def lon(self) -> float:
        return self.lon_1e6 / 1e6

    def __str__(self) -> str:
        return f"{self.lat:.6f},{self.lon:.6f}"


class LocationType(Enum):
    """Kind of place a Location refers to."""

    ANY = "any"
    STATION = "station"
    POI = "poi"
    ADDRESS = "address"
    COORD = "coord"


@dataclass(frozen=True)
class Location:
    """A place a trip can start, pass or end at."""

    type: LocationType
    id: str | None = None
    coord: Point | None = None
    place: str | None = None
    name: str | None = None
    products: frozenset[Product] | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if self.type == LocationType.COORD and self.coord is None:
            raise ValueError("coordinate location needs a coord")

    @classmethod
    def from_coord(cls, coord: Point) -> "Location":
        return cls(LocationType.COORD, coord=coord)

    def has_id(self) -> bool:
        return bool(self.id)

    def has_coord(self) -> bool:
        return self.coord is not None

    def has_name(self) -> bool:
        return bool(self.name)

    def identity(self) -> str:
        """Id when present, else the coordinate text."""
        if self.has_id():
            return str(self.id)
        return str(self.coord)

    def unique_short_name(self) -> str:
        if self.place and self.name:
            return f"{self.name}, {self.place}"
        return self.name or self.id or str(self.coord)
