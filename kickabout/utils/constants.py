"""
Constants for the Kickabout Teams application.

This module contains configuration constants used throughout the application.
"""

# Application metadata
APP_TITLE = "Kickabout Teams"

# Player rating scale
RATING_MIN = 1.0
RATING_MAX = 10.0
RATING_STEP = 0.5
DEFAULT_RATING = 7.0

# Fixed position choices (optional on a player)
POSITIONS = ["Goalkeeper", "Defender", "Midfielder", "Forward", "Winger"]

# Avatar glyphs offered by the roster form
DEFAULT_AVATAR = "⚽"
AVATARS = ["⚽", "🏃‍♂️", "🏃‍♀️", "👨‍⚽", "👩‍⚽", "🦸‍♂️", "🦸‍♀️", "🏆", "⭐", "🔥"]

# Team generation
MIN_ATTENDEES_FOR_TEAMS = 2
BALANCE_TOLERANCE = 0.5  # average-rating gap still shown as "well balanced"
TEAM_LABELS = {
    "team1": "Blue Team",
    "team2": "Red Team",
}
TEAM_ICONS = {
    "team1": "🔵",
    "team2": "🔴",
}

# Coin toss animation hint for the client (never affects the outcome)
COIN_TOSS_REVEAL_MS = 2000

# Web server defaults
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 7122

# Signed-in owners whose matchday state the web app keeps in memory
MAX_ACTIVE_SESSIONS = 200
