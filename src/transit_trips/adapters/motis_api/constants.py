"""Constants for the MOTIS API adapter.

MOTIS is the routing engine behind Transitous.
API Documentation: https://redocly.github.io/redoc/?url=https://raw.githubusercontent.com/motis-project/motis/refs/heads/master/openapi.yaml

No authentication required.
"""

SERVER_PRODUCT = "MOTIS"

# Public Transitous instance, already including the /api path segment
TRANSITOUS_API_URL = "https://api.transitous.org/api"

# Endpoint paths relative to the API base URL
GEOCODE_PATH = "v1/geocode"  # GET ?text=...
PLAN_PATH = "v4/plan"  # GET ?time&fromPlace&toPlace&transitModes[&pageCursor]
STOPTIMES_PATH = "v5/stoptimes"  # GET ?stopId&time&n&radius
REVERSE_GEOCODE_PATH = "v1/reverse-geocode"  # GET ?place=lat,lon[&type]

DEFAULT_HEADERS = {
    "Accept": "application/json",
}

# Stops within this many meters of the requested one are merged into its board
STOPTIMES_RADIUS_METERS = 100

# transitModes value selecting every public mode
ALL_TRANSIT_MODES = "TRANSIT"

# Area admin levels used to derive city and country of a geocode match
CITY_ADMIN_LEVEL = 8
COUNTRY_ADMIN_LEVEL = 2

# Leg names MOTIS uses for the query's own origin and destination
START_PLACE_NAME = "START"
END_PLACE_NAME = "END"
