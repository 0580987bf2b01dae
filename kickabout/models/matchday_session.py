"""
MatchdaySession model for the Kickabout Teams application.

This module contains the MatchdaySession dataclass which holds the in-memory
state of one owner's session: the roster, today's attendees, the current team
split and the last coin toss result.
"""
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional, Set

from .player import Player
from .team_split import TeamSplit


@dataclass
class MatchdaySession:
    """
    In-memory state for one owner.

    Attributes:
        owner_id: Identity the session belongs to (None when signed out)
        day: Calendar day attendance refers to
        roster: Players ordered as the roster store lists them
        attendee_ids: Ids of players marked as attending on ``day``
        teams: Current team split, if one has been generated
        toss_winner: "team1"/"team2" after a coin toss on the current split
    """
    owner_id: Optional[str] = None
    day: Optional[date] = None
    roster: List[Player] = field(default_factory=list)
    attendee_ids: Set[str] = field(default_factory=set)
    teams: Optional[TeamSplit] = None
    toss_winner: Optional[str] = None

    def find_player(self, player_id: str) -> Optional[Player]:
        for player in self.roster:
            if player.id == player_id:
                return player
        return None

    def attending_players(self) -> List[Player]:
        """Roster members marked as attending, in roster order."""
        return [p for p in self.roster if p.id in self.attendee_ids]

    def set_attendees(self, attendee_ids: Set[str]) -> None:
        """
        Replace the attendee set, discarding any split built from the old set.

        Args:
            attendee_ids: New set of attending player ids
        """
        attendee_ids = set(attendee_ids)
        if attendee_ids != self.attendee_ids:
            self.clear_teams()
        self.attendee_ids = attendee_ids

    def clear_teams(self) -> None:
        self.teams = None
        self.toss_winner = None

    def attendance_summary(self) -> Dict[str, float]:
        """
        Summarise today's attendance.

        Returns:
            Dictionary with roster size, attending count, total and average rating
        """
        attending = self.attending_players()
        total = sum(p.rating for p in attending)
        return {
            "roster_size": len(self.roster),
            "attending_count": len(attending),
            "total_rating": total,
            "average_rating": round(total / len(attending), 2) if attending else 0.0,
        }
