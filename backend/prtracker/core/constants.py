"""Shared application constants.

Centralizes values used by both the hosted backend and the client-side
form logic so we can document and adjust them in one place.
"""

# Distances offered by the add-record form
COMMON_DISTANCES = [
    "5K", "10K", "Half Marathon", "Marathon",
    "1 Mile", "5 Mile", "10 Mile",
    "400m", "800m", "1500m", "3000m",
]

# Select value that switches the distance field to free-text entry
CUSTOM_DISTANCE = "custom"

# Upper bound for the minutes and seconds components of a time
MAX_MINUTES_SECONDS = 59

# Profile bio length cap (characters)
BIO_MAX_LENGTH = 150

# Minimum password length accepted at sign-up
PASSWORD_MIN_LENGTH = 6

# Avatar bucket: public, images only, 5 MB
AVATARS_BUCKET = "avatars"
AVATAR_MAX_BYTES = 5 * 1024 * 1024
AVATAR_CACHE_SECONDS = 3600
