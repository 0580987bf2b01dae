"""Dataclasses describing a generated two-team split."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence

from .player import Player
from ..utils.constants import BALANCE_TOLERANCE, TEAM_ICONS, TEAM_LABELS


@dataclass
class TeamSummary:
    """Aggregated rating information for one side."""

    label: str
    icon: str
    player_count: int
    total_rating: float
    average_rating: float

    @classmethod
    def for_players(cls, team_key: str, players: Sequence[Player]) -> "TeamSummary":
        total = sum(p.rating for p in players)
        average = total / len(players) if players else 0.0
        return cls(
            label=TEAM_LABELS[team_key],
            icon=TEAM_ICONS[team_key],
            player_count=len(players),
            total_rating=total,
            average_rating=average,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "label": self.label,
            "icon": self.icon,
            "player_count": self.player_count,
            "total_rating": self.total_rating,
            "average_rating": round(self.average_rating, 2),
        }


@dataclass
class TeamSplit:
    """
    Two disjoint teams drawn from today's attendees.

    The split is derived state: it is recomputed on demand and never stored.
    """

    team1: List[Player] = field(default_factory=list)
    team2: List[Player] = field(default_factory=list)

    def summary(self, team_key: str) -> TeamSummary:
        players = self.team1 if team_key == "team1" else self.team2
        return TeamSummary.for_players(team_key, players)

    def rating_difference(self) -> float:
        """Absolute difference between the two rating sums."""
        return abs(sum(p.rating for p in self.team1) - sum(p.rating for p in self.team2))

    def average_difference(self) -> float:
        """Absolute difference between the two average ratings."""
        return abs(self.summary("team1").average_rating - self.summary("team2").average_rating)

    def is_well_balanced(self) -> bool:
        return self.average_difference() < BALANCE_TOLERANCE

    def is_ready(self) -> bool:
        """Both sides have at least one player."""
        return bool(self.team1) and bool(self.team2)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "team1": [p.to_dict() for p in self.team1],
            "team2": [p.to_dict() for p in self.team2],
            "summary": {
                "team1": self.summary("team1").to_dict(),
                "team2": self.summary("team2").to_dict(),
            },
            "rating_difference": self.rating_difference(),
            "average_difference": round(self.average_difference(), 2),
            "well_balanced": self.is_well_balanced(),
            "ready": self.is_ready(),
        }
