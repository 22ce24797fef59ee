"""Constants and defaults.

Note: Keep constants here to avoid magic strings spread across code.
"""

DEFAULT_STAFF_PASSWORD = "12345678"
DEFAULT_EMAIL_DOMAIN = "@uptm.edu.my"
MIN_PASSWORD_LENGTH = 8

NO_ROOM_ASSIGNED = "No Room Assigned"
NOT_AVAILABLE = "N/A"
