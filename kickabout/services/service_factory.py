"""
Service Factory for dependency injection.

This module provides a factory for creating properly configured service
instances with their dependencies injected.
"""
import random
from datetime import date
from typing import Callable, Optional

from ..utils import AppConfig
from .attendance_service import AttendanceService
from .coin_toss import CoinToss
from .matchday_service import MatchdayService
from .roster_service import RosterService
from .stores import InMemoryStore, create_store


class ServiceFactory:
    """
    Factory for creating service instances.

    One store backend is shared by every service the factory creates.
    """

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        store: Optional[InMemoryStore] = None,
        rng: Optional[random.Random] = None,
        today: Optional[Callable[[], date]] = None,
    ):
        """
        Initialize factory.

        Args:
            config: Application configuration (defaults to AppConfig())
            store: Store backend; built from ``config.data_file`` when omitted
            rng: Random source for coin tosses
            today: Clock for the attendance day
        """
        self.config = config or AppConfig()
        self._store = store
        self._rng = rng
        self._today = today

    def create_roster_service(self) -> RosterService:
        return RosterService(self._get_store(), roster_key=self.config.roster_key)

    def create_attendance_service(self) -> AttendanceService:
        return AttendanceService(self._get_store(), today=self._today)

    def create_coin_toss(self) -> CoinToss:
        return CoinToss(self._rng)

    def create_matchday_service(self, owner_id: Optional[str]) -> MatchdayService:
        """
        Create a MatchdayService bound to one owner.

        Args:
            owner_id: Signed-in owner id

        Returns:
            Configured MatchdayService instance
        """
        return MatchdayService(
            roster_service=self.create_roster_service(),
            attendance_service=self.create_attendance_service(),
            coin_toss=self.create_coin_toss(),
            owner_id=owner_id,
        )

    def _get_store(self) -> InMemoryStore:
        """Get singleton store backend."""
        if self._store is None:
            self._store = create_store(self.config.data_file)
        return self._store
