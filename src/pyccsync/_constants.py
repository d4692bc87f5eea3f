"""Internal constants shared across the library."""

BASE_URL = "https://min-api.cryptocompare.com"
HISTOHOUR_ENDPOINT = "/data/histohour"
USER_AGENT = "pyccsync"

#: Response marker the remote source sets on successful payloads.
SUCCESS_RESPONSE = "Success"

#: Length of one unit of the series, in seconds.
HOUR_SECONDS = 3600

#: Upper bound of units the remote source serves in a single window.
MAX_UNITS_IN_BATCH = 2000

DATE_DISPLAY_FORMAT = "%Y-%m-%d %H:%M:%S"
