"""Greedy team balancing for today's attendees."""

from __future__ import annotations

from typing import Sequence

from ..models import Player, TeamSplit


def balance_teams(players: Sequence[Player]) -> TeamSplit:
    """
    Split players into two teams with close rating totals.

    Players are taken strongest first (ties keep their input order) and each
    one joins whichever team currently has the lower rating sum, team1 on a
    tie. The result is deterministic for a given input order.

    Args:
        players: Attending players in roster order

    Returns:
        TeamSplit whose two teams together contain every input player once
    """
    ordered = sorted(players, key=lambda p: p.rating, reverse=True)

    split = TeamSplit()
    team1_rating = 0.0
    team2_rating = 0.0
    for player in ordered:
        if team1_rating <= team2_rating:
            split.team1.append(player)
            team1_rating += player.rating
        else:
            split.team2.append(player)
            team2_rating += player.rating
    return split
