"""
Utilities package for Kickabout Teams.

This package contains configuration, constants and date helpers used
throughout the application.
"""
from .constants import (
    APP_TITLE, RATING_MIN, RATING_MAX, RATING_STEP, DEFAULT_RATING,
    POSITIONS, AVATARS, DEFAULT_AVATAR, MIN_ATTENDEES_FOR_TEAMS,
    BALANCE_TOLERANCE, TEAM_LABELS, TEAM_ICONS, COIN_TOSS_REVEAL_MS
)
from .date_utils import today_utc, utc_now_iso
from .config import AppConfig, configure_logging

__all__ = [
    "APP_TITLE", "RATING_MIN", "RATING_MAX", "RATING_STEP", "DEFAULT_RATING",
    "POSITIONS", "AVATARS", "DEFAULT_AVATAR", "MIN_ATTENDEES_FOR_TEAMS",
    "BALANCE_TOLERANCE", "TEAM_LABELS", "TEAM_ICONS", "COIN_TOSS_REVEAL_MS",
    "today_utc", "utc_now_iso", "AppConfig", "configure_logging"
]
