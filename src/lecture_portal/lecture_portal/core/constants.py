"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

TIME_SLOTS = (
    "09:00 AM",
    "10:00 AM",
    "11:00 AM",
    "12:00 PM",
    "02:00 PM",
    "03:00 PM",
    "04:00 PM",
)

BLOCKS = ("A", "B", "C", "D")
ROOMS_PER_BLOCK = 15
YEARS = (1, 2, 3, 4)

# Minutes a faculty member may report for a lecture
REPORT_DURATIONS = (30, 45, 60, 75, 90, 120)

DEFAULT_HISTORY_LIMIT = 30

# Session key holding the logged-in profile snapshot
USER_STORAGE_KEY = "lecture_app_user"
