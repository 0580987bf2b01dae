"""
Attendance service for the Kickabout Teams application.

Attendance is one flag per (owner, player, day). Toggles update the session
first so the roster view reacts immediately, then write to the store; if the
write fails the session is put back the way it was.
"""
import logging
from contextlib import contextmanager
from datetime import date
from typing import Callable, Iterable, List, Optional, Set

from ..models import AttendanceRecord, MatchdaySession, Player
from ..utils import today_utc
from .errors import PlayerNotFoundError, StoreError
from .identity import require_owner
from .stores import AttendanceStore

logger = logging.getLogger(__name__)


class AttendanceService:
    """Reads and writes today's attendance for a session."""

    def __init__(self, store: AttendanceStore, today: Optional[Callable[[], date]] = None):
        """
        Initialize AttendanceService.

        Args:
            store: Attendance store
            today: Clock returning the current attendance day (UTC date by default)
        """
        self.store = store
        self.today = today or today_utc

    def attending_ids(self, owner_id: str, day: date) -> Set[str]:
        """
        Ids of players attending on ``day``.

        A player without a record for the day counts as not attending.
        """
        return {
            record.player_id
            for record in self.store.query(owner_id, day)
            if record.is_attending
        }

    def load(self, session: MatchdaySession) -> Set[str]:
        """
        Load today's attendance into the session.

        Raises:
            MissingIdentityError: If no owner is signed in
            StoreError: If the store cannot be read (session unchanged)
        """
        owner_id = require_owner(session.owner_id)
        day = self.today()
        attending = self.attending_ids(owner_id, day)
        known_ids = {p.id for p in session.roster}
        session.day = day
        session.set_attendees(attending & known_ids)
        return session.attendee_ids

    def ensure_current_day(self, session: MatchdaySession) -> bool:
        """
        Reload attendance when the calendar day has rolled over.

        Returns:
            True if attendance was reloaded
        """
        if session.owner_id is None or session.day == self.today():
            return False
        logger.info("Attendance day changed for owner %s; reloading", session.owner_id)
        self.load(session)
        return True

    def set_attendance(self, session: MatchdaySession, player_id: str, attending: bool,
                       day: Optional[date] = None) -> None:
        """
        Upsert one attendance record.

        Args:
            session: Owner session
            player_id: Player being marked
            attending: New attendance flag
            day: Attendance day (defaults to the session's day)

        Raises:
            MissingIdentityError: If no owner is signed in
            PlayerNotFoundError: If the player is not in the roster
            StoreError: If the write fails (session restored)
        """
        owner_id = require_owner(session.owner_id)
        if session.find_player(player_id) is None:
            raise PlayerNotFoundError(f"Player not found: {player_id}")

        day = day or session.day or self.today()
        record = AttendanceRecord(owner_id=owner_id, player_id=player_id, date=day, is_attending=bool(attending))

        if day != session.day:
            self.store.upsert([record])
            return

        new_ids = set(session.attendee_ids)
        if attending:
            new_ids.add(player_id)
        else:
            new_ids.discard(player_id)
        with self._optimistic(session, new_ids):
            self.store.upsert([record])

    def toggle(self, session: MatchdaySession, player_id: str) -> bool:
        """
        Flip one player's attendance for today.

        Returns:
            The new attendance flag
        """
        attending = player_id not in session.attendee_ids
        self.set_attendance(session, player_id, attending)
        return attending

    def set_all(self, session: MatchdaySession, attending: bool,
                players: Optional[Iterable[Player]] = None) -> None:
        """
        Mark every player with the same flag in a single batch upsert.

        Args:
            session: Owner session
            attending: Flag written for every player
            players: Players to mark (defaults to the whole roster)

        Raises:
            MissingIdentityError: If no owner is signed in
            StoreError: If the write fails (session restored)
        """
        owner_id = require_owner(session.owner_id)
        players = list(session.roster if players is None else players)
        day = session.day or self.today()
        session.day = day

        records: List[AttendanceRecord] = [
            AttendanceRecord(owner_id=owner_id, player_id=p.id, date=day, is_attending=attending)
            for p in players
        ]
        affected = {p.id for p in players}
        new_ids = (session.attendee_ids | affected) if attending else (session.attendee_ids - affected)
        with self._optimistic(session, new_ids):
            if records:
                self.store.upsert(records)

    def select_all(self, session: MatchdaySession, players: Optional[Iterable[Player]] = None) -> None:
        self.set_all(session, True, players)

    def clear_all(self, session: MatchdaySession, players: Optional[Iterable[Player]] = None) -> None:
        self.set_all(session, False, players)

    def toggle_all(self, session: MatchdaySession) -> bool:
        """
        Clear everyone when the whole roster is attending, otherwise select everyone.

        Returns:
            The flag that was written
        """
        everyone = {p.id for p in session.roster}
        attending = not (everyone and everyone <= session.attendee_ids)
        self.set_all(session, attending)
        return attending

    @contextmanager
    def _optimistic(self, session: MatchdaySession, new_ids: Set[str]):
        """Apply ``new_ids`` to the session, restoring it if the store write fails."""
        previous = (set(session.attendee_ids), session.teams, session.toss_winner)
        session.set_attendees(new_ids)
        try:
            yield
        except StoreError:
            logger.warning("Attendance write failed for owner %s; restoring local state", session.owner_id)
            session.attendee_ids, session.teams, session.toss_winner = previous
            raise
