"""Internal constants shared across the library."""

USER_AGENT = "ISS-UPA-Telemetry-Dashboard/1.0"

# ------------------------------------------------------------------
# ISS Live push feed
# ------------------------------------------------------------------

FEED_SERVER = "https://push.lightstreamer.com"
FEED_ADAPTER = "ISSLIVE"
FEED_DATA_FIELDS: tuple[str, ...] = ("Value", "Status", "TimeStamp")
FEED_SIGNAL_ITEM = "TIME_000001"
FEED_SIGNAL_FIELDS: tuple[str, ...] = ("Status.Class", "Status", "TimeStamp")

VALUE_FIELD = "Value"
TIMESTAMP_FIELD = "TimeStamp"
STATUS_CLASS_FIELD = "Status.Class"

#: ``Status.Class`` value on the signal item that means "signal acquired".
SIGNAL_LOCKED_CLASS = "24"

# ------------------------------------------------------------------
# Tank level thresholds (percent, inclusive lower bounds)
# ------------------------------------------------------------------

CRITICAL_THRESHOLD = 90.0
CAUTION_THRESHOLD = 75.0

LOG_CAPACITY = 80
GROUND_TRACK_POINTS = 120

# ------------------------------------------------------------------
# REST / RSS collaborators
# ------------------------------------------------------------------

POSITION_PRIMARY_URL = "http://api.open-notify.org/iss-now.json"
POSITION_FALLBACK_URL = "https://api.wheretheiss.at/v1/satellites/25544"
CREW_URL = "http://api.open-notify.org/astros.json"
NEWS_URL = "https://blogs.nasa.gov/spacestation/feed/"

#: Open Notify only reports lat/lon; these are mean orbital figures.
ISS_MEAN_ALTITUDE_KM = 408.0
ISS_MEAN_VELOCITY_KMH = 27600.0

NEWS_MAX_ITEMS = 5
NEWS_EXCERPT_CHARS = 180

REQUEST_TIMEOUT = 10.0

DEFAULT_STATS: dict[str, str] = {
    "total": "2,847 L",
    "cycles": "1,206",
    "recovery": "~93.5%",
    "crew": "7",
    "purge": "2026-02-18 14:00 UTC",
}

#: Ground elapsed time counts days from ISS Expedition 1.
MISSION_EPOCH_ISO = "2000-11-02T00:00:00+00:00"
