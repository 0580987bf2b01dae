"""
Roster service for the Kickabout Teams application.

This module provides business logic for managing the squad: validating player
data, gating roster changes behind the shared roster key and keeping the
session's roster in step with the roster store.
"""
import logging
from typing import Any, Dict, List, Mapping, Optional

from ..models import MatchdaySession, Player, Position
from ..utils.constants import DEFAULT_AVATAR, DEFAULT_RATING, RATING_MAX, RATING_MIN, RATING_STEP
from .errors import InvalidKeyError, PlayerNotFoundError, RosterValidationError, StoreError
from .identity import require_owner
from .stores import RosterStore

logger = logging.getLogger(__name__)

MAX_NAME_LENGTH = 60


class RosterService:
    """
    Service class for roster changes.

    The first player of an empty roster can be added by anyone. Every later
    addition, and every edit or deletion, needs the configured roster key.
    The key is a deterrent against accidental edits on a shared device, not
    access control; ownership is enforced by the identity and store layers.
    """

    def __init__(self, store: RosterStore, roster_key: Optional[str] = None):
        """
        Initialize RosterService.

        Args:
            store: Roster store used for all reads and writes
            roster_key: Configured roster key (None locks gated operations)
        """
        self.store = store
        self.roster_key = roster_key

    # ==================== Validation ==================== #

    def validate_player_data(self, data: Mapping[str, Any]) -> List[str]:
        """
        Validate player form data and return list of validation errors.

        Args:
            data: Mapping with "name", "rating" and optional "position"

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []

        name = data.get("name")
        if not isinstance(name, str) or not name.strip():
            errors.append("Player name is required")
        elif len(name.strip()) > MAX_NAME_LENGTH:
            errors.append(f"Player name must be at most {MAX_NAME_LENGTH} characters")

        rating = self._coerce_rating(data.get("rating"))
        if rating is None:
            errors.append("Rating must be a number")
        elif not RATING_MIN <= rating <= RATING_MAX:
            errors.append(f"Rating must be between {RATING_MIN:g} and {RATING_MAX:g}")
        elif not (rating / RATING_STEP).is_integer():
            errors.append(f"Rating must be in steps of {RATING_STEP:g}")

        try:
            Position.parse(data.get("position"))
        except ValueError as e:
            errors.append(str(e))

        avatar = data.get("avatar")
        if avatar is not None and not isinstance(avatar, str):
            errors.append("Avatar must be a text glyph")

        return errors

    def build_player(self, data: Mapping[str, Any], owner_id: Optional[str] = None) -> Player:
        """
        Create a validated Player from form data.

        Args:
            data: Player form data
            owner_id: Owner the player belongs to

        Returns:
            Unsaved Player instance (no id yet)

        Raises:
            RosterValidationError: If player data is invalid
        """
        errors = self.validate_player_data(data)
        if errors:
            raise RosterValidationError(f"Player validation failed: {'; '.join(errors)}")

        rating = self._coerce_rating(data.get("rating"))
        return Player(
            name=data["name"].strip(),
            rating=rating,
            position=Position.parse(data.get("position")),
            avatar=(data.get("avatar") or "").strip() or DEFAULT_AVATAR,
            owner_id=owner_id,
            games_played=0,
            total_rating=rating,
        )

    def check_key(self, provided_key: Optional[str]) -> None:
        """
        Compare the provided roster key against the configured one.

        Raises:
            InvalidKeyError: If the keys differ or no key is configured
        """
        if self.roster_key is None or provided_key != self.roster_key:
            raise InvalidKeyError("Invalid key: enter the correct roster key to change the squad")

    def requires_key_to_add(self, session: MatchdaySession) -> bool:
        """Whether adding a player to this roster needs the roster key."""
        return len(session.roster) >= 1

    # ==================== Roster operations ==================== #

    def load(self, session: MatchdaySession) -> List[Player]:
        """
        Replace the session roster with the store's listing.

        Raises:
            MissingIdentityError: If no owner is signed in
            StoreError: If the store cannot be read (roster left unchanged)
        """
        owner_id = require_owner(session.owner_id)
        session.roster = self.store.list_players(owner_id)
        known_ids = {p.id for p in session.roster}
        session.set_attendees({pid for pid in session.attendee_ids if pid in known_ids})
        return session.roster

    def add_player(self, session: MatchdaySession, data: Mapping[str, Any],
                   provided_key: Optional[str] = None) -> Player:
        """
        Add a player to the owner's roster.

        The first player of an empty roster is free to add; afterwards the
        roster key is required. A missing rating defaults to DEFAULT_RATING.

        Args:
            session: Owner session whose roster grows
            data: Player form data
            provided_key: Roster key entered by the user

        Returns:
            The stored Player, with its assigned id

        Raises:
            MissingIdentityError: If no owner is signed in
            RosterValidationError: If player data is invalid
            InvalidKeyError: If a key is required and does not match
            StoreError: If the store rejects the insert
        """
        owner_id = require_owner(session.owner_id)
        if data.get("rating") is None:
            data = {**data, "rating": DEFAULT_RATING}
        player = self.build_player(data, owner_id=owner_id)
        if self.requires_key_to_add(session):
            self.check_key(provided_key)

        player.id = self.store.insert(player)
        logger.info("Added player %s (%s) for owner %s", player.name, player.id, owner_id)
        self._refresh(session, fallback=lambda: session.roster.insert(0, player))
        return session.find_player(player.id) or player

    def update_player(self, session: MatchdaySession, player_id: str, data: Mapping[str, Any],
                      provided_key: Optional[str] = None) -> Player:
        """
        Update an existing player.

        Fields missing from ``data`` keep their current values; an explicit
        null rating is rejected.

        Raises:
            MissingIdentityError: If no owner is signed in
            PlayerNotFoundError: If the player is not in the roster
            RosterValidationError: If the merged data is invalid
            InvalidKeyError: If the key does not match
            StoreError: If the store rejects the update
        """
        owner_id = require_owner(session.owner_id)
        current = self._get_player(session, player_id)

        merged: Dict[str, Any] = {
            "name": current.name,
            "rating": current.rating,
            "position": current.position_label,
            "avatar": current.avatar,
        }
        merged.update({k: v for k, v in data.items() if k in merged})
        updated = self.build_player(merged, owner_id=owner_id)
        self.check_key(provided_key)

        changes = {
            "name": updated.name,
            "rating": updated.rating,
            "position": updated.position,
            "avatar": updated.avatar,
        }
        self.store.update(owner_id, player_id, changes)
        logger.info("Updated player %s for owner %s", player_id, owner_id)

        if player_id in session.attendee_ids:
            # The split holds the old ratings
            session.clear_teams()

        def _apply_locally() -> None:
            for name, value in changes.items():
                setattr(current, name, value)

        self._refresh(session, fallback=_apply_locally)
        return session.find_player(player_id) or current

    def delete_player(self, session: MatchdaySession, player_id: str,
                      provided_key: Optional[str] = None) -> None:
        """
        Remove a player from the roster.

        Raises:
            MissingIdentityError: If no owner is signed in
            PlayerNotFoundError: If the player is not in the roster
            InvalidKeyError: If the key does not match
            StoreError: If the store rejects the delete
        """
        owner_id = require_owner(session.owner_id)
        player = self._get_player(session, player_id)
        self.check_key(provided_key)

        self.store.delete(owner_id, player_id)
        logger.info("Deleted player %s (%s) for owner %s", player.name, player_id, owner_id)

        session.roster = [p for p in session.roster if p.id != player_id]
        session.set_attendees(session.attendee_ids - {player_id})

    # ==================== Helpers ==================== #

    def _get_player(self, session: MatchdaySession, player_id: str) -> Player:
        player = session.find_player(player_id)
        if player is None:
            raise PlayerNotFoundError(f"Player not found: {player_id}")
        return player

    def _refresh(self, session: MatchdaySession, fallback) -> None:
        """Reload the roster after a write; apply the change locally if the reload fails."""
        try:
            self.load(session)
        except StoreError as e:
            logger.warning("Roster reload failed after write: %s", e)
            fallback()

    @staticmethod
    def _coerce_rating(value: Any) -> Optional[float]:
        if value is None or isinstance(value, bool):
            return None
        try:
            rating = float(value)
        except (TypeError, ValueError):
            return None
        if rating != rating:  # NaN
            return None
        return rating
