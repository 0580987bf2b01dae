"""
Kickabout Teams

A small roster manager for a recreational football group: it records players
and their ratings, tracks who is coming today, splits the attendees into two
balanced teams and tosses a coin for first choice.

The business logic lives in ``kickabout.services``; ``kickabout.ui`` exposes
it through a Flask JSON API.
"""
from .models import Player, Position, AttendanceRecord, TeamSplit, MatchdaySession
from .services import balance_teams, CoinToss, MatchdayService, ServiceFactory
from .ui import create_app, run_web_app
from .utils import APP_TITLE, AppConfig

__version__ = "1.0.0"

__all__ = [
    "Player", "Position", "AttendanceRecord", "TeamSplit", "MatchdaySession",
    "balance_teams", "CoinToss", "MatchdayService", "ServiceFactory",
    "create_app", "run_web_app", "APP_TITLE", "AppConfig"
]
