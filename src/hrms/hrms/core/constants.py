"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

STANDARD_WORKDAY_HOURS = Decimal("8")

EARTH_RADIUS_KM = 6371.0
MAX_SPEED_KMH = 120.0
DEFAULT_HISTORY_DAYS = 7

DEFAULT_TOKEN_TTL_DAYS = 7

PF_RATE = Decimal("0.12")
OVERTIME_MULTIPLIER = Decimal("1.5")
WORK_WEEKDAYS = (0, 1, 2, 3, 4)
