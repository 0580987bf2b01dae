"""
Attendance model for the Kickabout Teams application.

An AttendanceRecord is the per-day "is this player coming" flag. Records are
identified by (owner, player, date); writing the same key again replaces the
previous record.
"""
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Tuple

AttendanceKey = Tuple[str, str, date]


@dataclass(frozen=True)
class AttendanceRecord:
    """Attendance flag for one player on one day."""
    owner_id: str
    player_id: str
    date: date
    is_attending: bool

    @property
    def key(self) -> AttendanceKey:
        """Conflict key used for upserts."""
        return (self.owner_id, self.player_id, self.date)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "owner_id": self.owner_id,
            "player_id": self.player_id,
            "date": self.date.isoformat(),
            "is_attending": self.is_attending,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AttendanceRecord":
        """Create from dictionary for JSON deserialization."""
        return cls(
            owner_id=data["owner_id"],
            player_id=data["player_id"],
            date=date.fromisoformat(data["date"]),
            is_attending=bool(data["is_attending"]),
        )
