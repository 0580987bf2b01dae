"""Coin toss deciding which team gets first choice of ball or side."""

from __future__ import annotations

import random
from typing import Optional

TEAM_CHOICES = ("team1", "team2")


class CoinToss:
    """Fair coin between the two team labels."""

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng or random.Random()

    def flip(self) -> str:
        """Return "team1" or "team2" with equal probability."""
        first, second = TEAM_CHOICES
        return first if self._rng.random() < 0.5 else second
