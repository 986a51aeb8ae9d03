"""Network identifiers and provider capabilities."""

from enum import Enum


class NetworkId(Enum):
    """Backend network a provider talks to."""

    TRANSITOUS = "transitous"
    DB = "db"
    BVG = "bvg"
    VBB = "vbb"
    MVV = "mvv"
    RMV = "rmv"
    OEBB = "oebb"
    VAO = "vao"
    SVV = "svv"
    OOEVV = "ooevv"


class Capability(Enum):
    SUGGEST_LOCATIONS = "suggest_locations"
    NEARBY_LOCATIONS = "nearby_locations"
    DEPARTURES = "departures"
    TRIPS = "trips"
    TRIPS_VIA = "trips_via"
