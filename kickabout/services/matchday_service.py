"""
Matchday service for the Kickabout Teams application.

Composes the roster, attendance, balancing and coin toss pieces around one
owner's MatchdaySession. This is what the web layer talks to.
"""
import logging
from typing import Any, Dict, Mapping, Optional

from ..models import MatchdaySession, Player, TeamSplit
from ..utils.constants import MIN_ATTENDEES_FOR_TEAMS
from .attendance_service import AttendanceService
from .coin_toss import CoinToss
from .errors import NotEnoughPlayersError, TeamsNotReadyError
from .identity import normalize_owner_id
from .roster_service import RosterService
from .team_balancer import balance_teams

logger = logging.getLogger(__name__)


class MatchdayService:
    """
    Per-owner application shell.

    Holds the in-memory session (roster, today's attendees, current split)
    and routes user actions to the stores and the balancer.
    """

    def __init__(
        self,
        roster_service: RosterService,
        attendance_service: AttendanceService,
        coin_toss: Optional[CoinToss] = None,
        owner_id: Optional[str] = None,
    ):
        self.roster_service = roster_service
        self.attendance_service = attendance_service
        self.coin_toss = coin_toss or CoinToss()
        self.session = MatchdaySession(owner_id=normalize_owner_id(owner_id))
        self.loaded = False

    @property
    def owner_id(self) -> Optional[str]:
        return self.session.owner_id

    # ==================== Loading ==================== #

    def load(self) -> MatchdaySession:
        """
        Fetch the roster and today's attendance from the stores.

        Raises:
            MissingIdentityError: If no owner is signed in
            StoreError: If a store cannot be read
        """
        self.roster_service.load(self.session)
        self.attendance_service.load(self.session)
        self.loaded = True
        return self.session

    def ensure_loaded(self) -> MatchdaySession:
        """Load on first use and reload attendance when the day rolls over."""
        if not self.loaded:
            return self.load()
        self.attendance_service.ensure_current_day(self.session)
        return self.session

    # ==================== Roster ==================== #

    def add_player(self, data: Mapping[str, Any], provided_key: Optional[str] = None) -> Player:
        self.ensure_loaded()
        return self.roster_service.add_player(self.session, data, provided_key)

    def update_player(self, player_id: str, data: Mapping[str, Any], provided_key: Optional[str] = None) -> Player:
        self.ensure_loaded()
        return self.roster_service.update_player(self.session, player_id, data, provided_key)

    def delete_player(self, player_id: str, provided_key: Optional[str] = None) -> None:
        self.ensure_loaded()
        self.roster_service.delete_player(self.session, player_id, provided_key)

    def requires_key_to_add(self) -> bool:
        self.ensure_loaded()
        return self.roster_service.requires_key_to_add(self.session)

    # ==================== Attendance ==================== #

    def set_attendance(self, player_id: str, attending: bool) -> None:
        self.ensure_loaded()
        self.attendance_service.set_attendance(self.session, player_id, attending)

    def toggle_attendance(self, player_id: str) -> bool:
        self.ensure_loaded()
        return self.attendance_service.toggle(self.session, player_id)

    def select_all(self) -> None:
        self.ensure_loaded()
        self.attendance_service.select_all(self.session)

    def clear_all(self) -> None:
        self.ensure_loaded()
        self.attendance_service.clear_all(self.session)

    def toggle_all(self) -> bool:
        self.ensure_loaded()
        return self.attendance_service.toggle_all(self.session)

    # ==================== Teams ==================== #

    def generate_teams(self) -> TeamSplit:
        """
        Balance today's attendees into two teams.

        Raises:
            NotEnoughPlayersError: With fewer than two attendees
        """
        self.ensure_loaded()
        attending = self.session.attending_players()
        if len(attending) < MIN_ATTENDEES_FOR_TEAMS:
            raise NotEnoughPlayersError(
                f"Add at least {MIN_ATTENDEES_FOR_TEAMS} players to today's attendance to form teams"
            )

        split = balance_teams(attending)
        self.session.teams = split
        self.session.toss_winner = None
        logger.info(
            "Generated teams for owner %s: %d vs %d (rating gap %.1f)",
            self.owner_id, len(split.team1), len(split.team2), split.rating_difference()
        )
        return split

    def flip_coin(self) -> str:
        """
        Toss for first choice of ball or side.

        Raises:
            TeamsNotReadyError: If teams have not been generated yet
        """
        self.ensure_loaded()
        if self.session.teams is None:
            raise TeamsNotReadyError("Generate teams before the coin toss")
        winner = self.coin_toss.flip()
        self.session.toss_winner = winner
        logger.info("Coin toss for owner %s won by %s", self.owner_id, winner)
        return winner

    # ==================== Views ==================== #

    def roster_view(self) -> Dict[str, Any]:
        self.ensure_loaded()
        return {
            "players": [p.to_dict() for p in self.session.roster],
            "count": len(self.session.roster),
            "requires_key_to_add": self.roster_service.requires_key_to_add(self.session),
            "stats": self.session.attendance_summary(),
        }

    def attendance_view(self) -> Dict[str, Any]:
        self.ensure_loaded()
        return {
            "date": self.session.day.isoformat() if self.session.day else None,
            "attendee_ids": sorted(self.session.attendee_ids),
            "attending": [p.to_dict() for p in self.session.attending_players()],
            "summary": self.session.attendance_summary(),
        }

    def teams_view(self) -> Dict[str, Any]:
        self.ensure_loaded()
        teams = self.session.teams
        return {
            "teams": teams.to_dict() if teams else None,
            "toss_winner": self.session.toss_winner,
            "can_generate": len(self.session.attending_players()) >= MIN_ATTENDEES_FOR_TEAMS,
        }
