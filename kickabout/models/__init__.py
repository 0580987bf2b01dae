"""
Models package for Kickabout Teams.

This package contains the core data models used throughout the application.
"""
from .player import Player, Position
from .attendance import AttendanceRecord
from .team_split import TeamSplit, TeamSummary
from .matchday_session import MatchdaySession

__all__ = [
    "Player", "Position", "AttendanceRecord",
    "TeamSplit", "TeamSummary", "MatchdaySession"
]
