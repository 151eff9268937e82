"""Court eligibility rules: active courts and minimum ratings."""

# Court Pairing
# Copyright (C) 2025  Court Pairing developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

from typing import Iterable, List, Optional

from courtpairing.models.player import Player
from courtpairing.models.session import AssignmentConfig, Court


def player_meets_court(
    player: Player, court: Court, config: Optional[AssignmentConfig] = None
) -> bool:
    """Check whether a player may be placed on a court.

    Args:
        player: Candidate player
        court: Target court
        config: Assigner config; decides whether unrated players pass a minimum

    Returns:
        True if the court is active and the player meets its minimum rating
    """
    if not court.is_active:
        return False
    if court.minimum_rating is None:
        return True
    if player.rating is None:
        return bool(config and config.unrated_meets_minimum)
    return player.rating >= court.minimum_rating


def group_fits_court(
    players: Iterable[Player], court: Court, config: Optional[AssignmentConfig] = None
) -> bool:
    """Check that every player in a group may be placed on the court."""
    return all(player_meets_court(p, court, config) for p in players)


def eligible_players_for_court(
    court: Court, players: Iterable[Player], config: Optional[AssignmentConfig] = None
) -> List[Player]:
    """Filter players down to those allowed on ``court``, keeping their order."""
    return [p for p in players if player_meets_court(p, court, config)]


def rank_courts(courts: Iterable[Court]) -> List[Court]:
    """Order active courts for filling: highest minimum rating first.

    Courts without a minimum come last. Equal courts keep their declared
    order, so the layout only depends on the random source.
    """
    active = [c for c in courts if c.is_active]
    rated = [c for c in active if c.minimum_rating is not None]
    unrated = [c for c in active if c.minimum_rating is None]
    rated.sort(key=lambda c: c.minimum_rating, reverse=True)
    return rated + unrated
