"""Resolve fixed partnerships against the players available this round."""

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

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from courtpairing.models.player import Player
from courtpairing.models.session import PartnershipConstraint
from courtpairing.utils import setup_logger

logger = setup_logger(__name__)


@dataclass
class PartnershipContext:
    """Fixed partnerships split by who can actually play.

    Attributes
    ----------
    pairs : list of tuple of Player
        Active partnerships with both members eligible.
    partner_map : dict of str to str
        Both directions of every pair in ``pairs``.
    unpaired_players : list of Player
        Eligible players without an active partnership.
    forced_sit_out : list of Player
        Eligible players whose partner is paused or otherwise absent.
    """

    pairs: List[Tuple[Player, Player]] = field(default_factory=list)
    partner_map: Dict[str, str] = field(default_factory=dict)
    unpaired_players: List[Player] = field(default_factory=list)
    forced_sit_out: List[Player] = field(default_factory=list)

    def partner_of(self, player_id: str) -> Optional[str]:
        return self.partner_map.get(player_id)

    def is_paired(self, player_id: str) -> bool:
        return player_id in self.partner_map


def resolve_partnerships(
    eligible: List[Player], constraint: Optional[PartnershipConstraint]
) -> PartnershipContext:
    """Classify eligible players by partnership status.

    Inactive partnerships are ignored. A player listed in more than one
    active partnership keeps the first one.

    Args:
        eligible: Players available this round
        constraint: Session partnerships, or None

    Returns:
        PartnershipContext
    """
    context = PartnershipContext()
    if constraint is None or not constraint.active:
        context.unpaired_players = list(eligible)
        return context

    by_id = {p.id: p for p in eligible}
    claimed = set()
    forced_ids = set()
    for partnership in constraint.active:
        id1, id2 = partnership.player1_id, partnership.player2_id
        if id1 in claimed or id2 in claimed:
            logger.warning(
                "Player in more than one partnership (%s, %s), ignoring the later one",
                id1,
                id2,
            )
            continue
        claimed.update((id1, id2))
        p1, p2 = by_id.get(id1), by_id.get(id2)
        if p1 is not None and p2 is not None:
            context.pairs.append((p1, p2))
            context.partner_map[id1] = id2
            context.partner_map[id2] = id1
        elif p1 is not None or p2 is not None:
            forced_ids.add(id1 if p1 is not None else id2)

    for player in eligible:
        if player.id in forced_ids:
            context.forced_sit_out.append(player)
        elif player.id not in context.partner_map:
            context.unpaired_players.append(player)

    if context.forced_sit_out:
        logger.info(
            "Partner unavailable, sitting out: %s",
            ", ".join(p.id for p in context.forced_sit_out),
        )
    return context
