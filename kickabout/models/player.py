"""
Player model for the Kickabout Teams application.

This module contains the Player dataclass which represents a squad member
with the rating used for team balancing, plus the Position enumeration.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from ..utils.constants import DEFAULT_AVATAR


class Position(Enum):
    """Optional playing position labels."""
    GOALKEEPER = "Goalkeeper"
    DEFENDER = "Defender"
    MIDFIELDER = "Midfielder"
    FORWARD = "Forward"
    WINGER = "Winger"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["Position"]:
        """
        Parse a position label, accepting either the label or the member name.

        Args:
            value: Position label such as "Defender" (case-insensitive)

        Returns:
            Matching Position, or None for an empty value

        Raises:
            ValueError: If the value is not a known position
        """
        if value is None or not str(value).strip():
            return None
        text = str(value).strip()
        for position in cls:
            if text.lower() in (position.value.lower(), position.name.lower()):
                return position
        raise ValueError(f"Unknown position: {value}")


@dataclass
class Player:
    """
    Represents a squad member.

    Attributes:
        name: Display name
        rating: Skill rating on the 1-10 scale in half steps
        position: Optional playing position
        avatar: Display glyph, a ball by default
        id: Store-assigned identifier (None until created)
        owner_id: Identity that owns this roster entry
        games_played: Running games counter
        total_rating: Running sum of ratings for average calculation
        created_at: ISO timestamp set by the store
    """
    name: str
    rating: float
    position: Optional[Position] = None
    avatar: str = DEFAULT_AVATAR
    id: Optional[str] = None
    owner_id: Optional[str] = None
    games_played: int = 0
    total_rating: float = 0.0
    created_at: Optional[str] = None

    @property
    def position_label(self) -> Optional[str]:
        return self.position.value if self.position else None

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert player to dictionary for JSON serialization.

        Returns:
            Dictionary representation of the player
        """
        return {
            "id": self.id,
            "owner_id": self.owner_id,
            "name": self.name,
            "rating": self.rating,
            "position": self.position_label,
            "avatar": self.avatar,
            "games_played": self.games_played,
            "total_rating": self.total_rating,
            "created_at": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Player":
        """
        Create player from dictionary for JSON deserialization.

        Args:
            data: Dictionary representation of player

        Returns:
            Player instance
        """
        rating = float(data["rating"])
        return cls(
            name=data["name"],
            rating=rating,
            position=Position.parse(data.get("position")),
            avatar=data.get("avatar") or DEFAULT_AVATAR,
            id=data.get("id"),
            owner_id=data.get("owner_id"),
            games_played=int(data.get("games_played", 0) or 0),
            total_rating=float(data.get("total_rating", rating) or 0.0),
            created_at=data.get("created_at"),
        )
