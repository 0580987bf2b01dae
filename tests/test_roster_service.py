"""
Unit tests for RosterService functionality.

Tests validation, the roster key gate and keeping the session roster in step
with the store.
"""
import unittest
from unittest.mock import patch

from kickabout.models import MatchdaySession, Position, TeamSplit
from kickabout.services import (
    InMemoryStore, InvalidKeyError, MissingIdentityError, PlayerNotFoundError,
    RosterService, RosterValidationError, StoreError
)

KEY = "open-sesame"


class TestRosterValidation(unittest.TestCase):
    """Test cases for player data validation."""

    def setUp(self) -> None:
        self.service = RosterService(InMemoryStore(), roster_key=KEY)

    def test_valid_data(self) -> None:
        self.assertEqual(self.service.validate_player_data({"name": "Ali", "rating": 7.5}), [])
        self.assertEqual(
            self.service.validate_player_data({"name": "Ali", "rating": "10", "position": "Winger"}), []
        )

    def test_name_required(self) -> None:
        for name in ("", "   ", None, 42):
            errors = self.service.validate_player_data({"name": name, "rating": 5})
            self.assertIn("Player name is required", errors)

    def test_rating_bounds_and_step(self) -> None:
        self.assertTrue(self.service.validate_player_data({"name": "A", "rating": 0.5}))
        self.assertTrue(self.service.validate_player_data({"name": "A", "rating": 10.5}))
        self.assertTrue(self.service.validate_player_data({"name": "A", "rating": 7.3}))
        self.assertTrue(self.service.validate_player_data({"name": "A", "rating": "abc"}))
        self.assertTrue(self.service.validate_player_data({"name": "A", "rating": True}))
        self.assertFalse(self.service.validate_player_data({"name": "A", "rating": 1}))
        self.assertFalse(self.service.validate_player_data({"name": "A", "rating": 9.5}))

    def test_unknown_position(self) -> None:
        errors = self.service.validate_player_data({"name": "A", "rating": 5, "position": "Libero"})
        self.assertEqual(len(errors), 1)

    def test_build_player_defaults(self) -> None:
        player = self.service.build_player({"name": "  Jo  ", "rating": 6.5}, owner_id="o")
        self.assertEqual(player.name, "Jo")
        self.assertEqual(player.avatar, "⚽")
        self.assertEqual(player.total_rating, 6.5)
        self.assertEqual(player.games_played, 0)

    def test_build_player_raises_on_invalid(self) -> None:
        with self.assertRaises(RosterValidationError):
            self.service.build_player({"name": "", "rating": 5})

    def test_missing_rating_is_invalid_outside_add(self) -> None:
        self.assertEqual(self.service.validate_player_data({"name": "A"}), ["Rating must be a number"])
        self.assertTrue(self.service.validate_player_data({"name": "A", "rating": None}))


class TestRosterGate(unittest.TestCase):
    """Test cases for add/update/delete and the roster key."""

    def setUp(self) -> None:
        self.store = InMemoryStore()
        self.service = RosterService(self.store, roster_key=KEY)
        self.session = MatchdaySession(owner_id="owner-1")

    def _add(self, name="Ali", rating=7, key=KEY):
        return self.service.add_player(self.session, {"name": name, "rating": rating}, key)

    def test_first_player_needs_no_key(self) -> None:
        for key in (None, "", "wrong"):
            store = InMemoryStore()
            service = RosterService(store, roster_key=KEY)
            session = MatchdaySession(owner_id="o")
            player = service.add_player(session, {"name": "First", "rating": 6}, key)
            self.assertIsNotNone(player.id)
            self.assertEqual(len(session.roster), 1)

    def test_second_player_requires_key(self) -> None:
        self._add(key=None)
        with self.assertRaises(InvalidKeyError):
            self._add(name="Ben", key="wrong")
        self.assertEqual(len(self.session.roster), 1)
        self.assertEqual(len(self.store.list_players("owner-1")), 1)

        self._add(name="Ben", key=KEY)
        self.assertEqual([p.name for p in self.session.roster], ["Ben", "Ali"])

    def test_validation_runs_before_store(self) -> None:
        with patch.object(self.store, "insert") as insert:
            with self.assertRaises(RosterValidationError):
                self._add(name="")
            insert.assert_not_called()

    def test_no_configured_key_locks_gated_operations(self) -> None:
        service = RosterService(self.store, roster_key=None)
        player = service.add_player(self.session, {"name": "Only", "rating": 5}, None)
        for key in (None, "", "anything"):
            with self.assertRaises(InvalidKeyError):
                service.add_player(self.session, {"name": "More", "rating": 5}, key)
            with self.assertRaises(InvalidKeyError):
                service.delete_player(self.session, player.id, key)

    def test_missing_identity_blocks_mutations(self) -> None:
        session = MatchdaySession(owner_id=None)
        with self.assertRaises(MissingIdentityError):
            self.service.add_player(session, {"name": "A", "rating": 5}, KEY)
        with self.assertRaises(MissingIdentityError):
            self.service.load(session)

    def test_update_requires_key(self) -> None:
        player = self._add(key=None)
        with self.assertRaises(InvalidKeyError):
            self.service.update_player(self.session, player.id, {"rating": 9}, "nope")
        self.assertEqual(self.session.find_player(player.id).rating, 7)

        updated = self.service.update_player(
            self.session, player.id, {"rating": 9, "position": "Forward"}, KEY
        )
        self.assertEqual(updated.rating, 9)
        self.assertEqual(updated.position, Position.FORWARD)
        self.assertEqual(updated.name, "Ali")
        self.assertEqual(self.store.list_players("owner-1")[0].rating, 9)

    def test_add_without_rating_uses_default(self) -> None:
        for data in ({"name": "Jo"}, {"name": "Kim", "rating": None}):
            player = self.service.add_player(self.session, data, KEY)
            self.assertEqual(player.rating, 7.0)
            self.assertEqual(player.total_rating, 7.0)

    def test_update_with_null_rating_is_rejected(self) -> None:
        player = self._add(rating=8.5, key=None)
        with self.assertRaises(RosterValidationError):
            self.service.update_player(self.session, player.id, {"rating": None}, KEY)
        self.assertEqual(self.session.find_player(player.id).rating, 8.5)
        self.assertEqual(self.store.list_players("owner-1")[0].rating, 8.5)

    def test_update_unknown_player(self) -> None:
        with self.assertRaises(PlayerNotFoundError):
            self.service.update_player(self.session, "missing", {"rating": 5}, KEY)

    def test_update_of_attendee_discards_teams(self) -> None:
        player = self._add(key=None)
        self.session.attendee_ids = {player.id}
        self.session.teams = TeamSplit(team1=[player])
        self.service.update_player(self.session, player.id, {"rating": 3}, KEY)
        self.assertIsNone(self.session.teams)

    def test_delete_requires_key_and_drops_attendance(self) -> None:
        player = self._add(key=None)
        self.session.attendee_ids = {player.id}
        with self.assertRaises(InvalidKeyError):
            self.service.delete_player(self.session, player.id, "")
        self.assertEqual(len(self.session.roster), 1)

        self.service.delete_player(self.session, player.id, KEY)
        self.assertEqual(self.session.roster, [])
        self.assertEqual(self.session.attendee_ids, set())

    def test_store_failure_leaves_roster_unchanged(self) -> None:
        self._add(key=None)
        with patch.object(self.store, "insert", side_effect=StoreError("offline")):
            with self.assertRaises(StoreError):
                self._add(name="Ben")
        self.assertEqual([p.name for p in self.session.roster], ["Ali"])

    def test_reload_failure_falls_back_to_local_update(self) -> None:
        with patch.object(self.store, "list_players", side_effect=StoreError("offline")):
            player = self._add(key=None)
        self.assertEqual(self.session.roster, [player])
        self.assertEqual(len(self.store.list_players("owner-1")), 1)


if __name__ == "__main__":
    unittest.main()
