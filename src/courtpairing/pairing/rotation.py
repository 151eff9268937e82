"""Fair rotation: decide who sits out a round.

Players who have played the longest stretch without a break are benched
first, then those with the most games overall, then those who have sat out
the least. Remaining ties are broken randomly. Fixed partners are benched
together as a single unit.
"""

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

import random
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from courtpairing.constants import PLAYERS_PER_GAME
from courtpairing.models.player import Player
from courtpairing.models.session import PlayerStats
from courtpairing.pairing.partnerships import PartnershipContext
from courtpairing.utils import setup_logger

logger = setup_logger(__name__)

# A rotation unit is one unpaired player or both members of a fixed pair
Unit = Tuple[Player, ...]


@dataclass
class RotationResult:
    """Who sits out and who is left to fill the courts.

    Attributes
    ----------
    sitting_out : list of Player
        Benched players, forced sit-outs first.
    playing_pool : list of Player
        Players handed to the assigner, in pool order.
    usable_courts : int
        Courts the playing pool can fill if every court accepts them.
    """

    sitting_out: List[Player] = field(default_factory=list)
    playing_pool: List[Player] = field(default_factory=list)
    usable_courts: int = 0


def build_units(pool: List[Player], context: PartnershipContext) -> List[Unit]:
    """Group the pool into rotation units, keeping pool order.

    A pair becomes a unit only when both members are in the pool; a paired
    player whose partner is missing from the pool stays a single.
    """
    pool_ids = {p.id for p in pool}
    by_id = {p.id: p for p in pool}
    seen = set()
    units: List[Unit] = []
    for player in pool:
        if player.id in seen:
            continue
        partner_id = context.partner_of(player.id)
        if partner_id is not None and partner_id in pool_ids and partner_id not in seen:
            units.append((player, by_id[partner_id]))
            seen.update((player.id, partner_id))
        else:
            units.append((player,))
            seen.add(player.id)
    return units


def sit_out_priority(
    unit: Unit, stats: Dict[str, PlayerStats], tie_break: float
) -> Tuple[float, float, float, float]:
    """Sort key where lower sorts first and means "bench sooner".

    Pairs use the mean of their members' counters.
    """
    consecutive = games_played = sat_out = 0.0
    for player in unit:
        player_stats = stats.get(player.id)
        if player_stats is None:
            continue
        consecutive += player_stats.consecutive_games
        games_played += player_stats.games_played
        sat_out += player_stats.games_sat_out
    size = len(unit)
    return (
        -consecutive / size,
        -games_played / size,
        sat_out / size,
        tie_break,
    )


def select_sitting_out(
    context: PartnershipContext,
    pool: List[Player],
    active_court_count: int,
    stats: Optional[Dict[str, PlayerStats]] = None,
    rng: Optional[random.Random] = None,
) -> RotationResult:
    """Choose who sits out so the rest fill whole courts.

    Args:
        context: Resolved partnerships for this round
        pool: Eligible players, excluding forced sit-outs
        active_court_count: Number of active courts
        stats: Player stats keyed by player id
        rng: Random source for tie-breaks

    Returns:
        RotationResult
    """
    stats = stats or {}
    rng = rng or random.Random()

    usable_courts = min(active_court_count, len(pool) // PLAYERS_PER_GAME)
    sitting_out_count = len(pool) - PLAYERS_PER_GAME * usable_courts

    units = build_units(pool, context)
    keyed = [(sit_out_priority(u, stats, rng.random()), u) for u in units]
    keyed.sort(key=lambda item: item[0])
    ranked = [unit for _, unit in keyed]

    # Singles and sit-out seats share parity, so a pair that does not fit
    # is always passed over for a single further down
    benched: List[Unit] = []
    remaining = sitting_out_count
    for unit in ranked:
        if remaining == 0:
            break
        if len(unit) <= remaining:
            benched.append(unit)
            remaining -= len(unit)

    benched_ids = {p.id for unit in benched for p in unit}
    result = RotationResult(usable_courts=usable_courts)
    result.sitting_out = list(context.forced_sit_out) + [
        p for unit in benched for p in unit
    ]
    result.playing_pool = [p for p in pool if p.id not in benched_ids]
    logger.debug(
        "Rotation: %d playing, %d sitting out over %d usable court(s)",
        len(result.playing_pool),
        len(result.sitting_out),
        usable_courts,
    )
    return result
