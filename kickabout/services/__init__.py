"""
Services package for Kickabout Teams.

This package contains service classes that handle business logic, the store
backends they depend on and a factory that wires them together.
"""
from .errors import (
    KickaboutError, RosterValidationError, InvalidKeyError, MissingIdentityError,
    PlayerNotFoundError, StoreError, GuidanceError, NotEnoughPlayersError,
    TeamsNotReadyError
)
from .stores import RosterStore, AttendanceStore, InMemoryStore, JsonFileStore, create_store
from .team_balancer import balance_teams
from .coin_toss import CoinToss
from .identity import IdentityProvider, StaticIdentityProvider, require_owner
from .roster_service import RosterService
from .attendance_service import AttendanceService
from .matchday_service import MatchdayService
from .service_factory import ServiceFactory

__all__ = [
    "KickaboutError", "RosterValidationError", "InvalidKeyError", "MissingIdentityError",
    "PlayerNotFoundError", "StoreError", "GuidanceError", "NotEnoughPlayersError",
    "TeamsNotReadyError", "RosterStore", "AttendanceStore", "InMemoryStore",
    "JsonFileStore", "create_store", "balance_teams", "CoinToss", "IdentityProvider",
    "StaticIdentityProvider", "require_owner", "RosterService", "AttendanceService",
    "MatchdayService", "ServiceFactory"
]
