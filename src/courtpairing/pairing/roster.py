"""Resolve which roster members are eligible to play a round."""

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

from typing import Dict, Iterable, List, Optional, Union

from courtpairing.constants import PLAYERS_PER_GAME
from courtpairing.exceptions import InsufficientPlayersException
from courtpairing.models.player import Player
from courtpairing.models.session import Session
from courtpairing.utils import setup_logger

logger = setup_logger(__name__)

PlayerDirectory = Union[Dict[str, Player], Iterable[Player]]


def as_directory(players: PlayerDirectory) -> Dict[str, Player]:
    """Normalize a player list or id mapping into an id mapping."""
    if isinstance(players, dict):
        return players
    return {p.id: p for p in players}


def resolve_roster(
    session: Session,
    players: PlayerDirectory,
    paused_player_ids: Optional[Iterable[str]] = None,
) -> List[Player]:
    """Return the session's eligible players in roster order.

    A player is eligible when they are on the session roster, known to the
    player directory, and not paused.

    Args:
        session: Session whose roster is resolved
        players: Player directory (list or id mapping)
        paused_player_ids: Pause set; defaults to ``session.paused_player_ids``

    Returns:
        Eligible players, deduplicated, in ``session.player_ids`` order
    """
    directory = as_directory(players)
    paused = set(
        session.paused_player_ids if paused_player_ids is None else paused_player_ids
    )

    eligible: List[Player] = []
    seen = set()
    for player_id in session.player_ids:
        if player_id in seen or player_id in paused:
            continue
        player = directory.get(player_id)
        if player is None:
            logger.debug("Roster id %s not found in player directory", player_id)
            continue
        seen.add(player_id)
        eligible.append(player)
    return eligible


def require_minimum_roster(
    session: Session,
    players: PlayerDirectory,
    paused_player_ids: Optional[Iterable[str]] = None,
) -> List[Player]:
    """Resolve the roster and insist on enough players for one game.

    Raises:
        InsufficientPlayersException: If fewer than four players are eligible
    """
    eligible = resolve_roster(session, players, paused_player_ids)
    if len(eligible) < PLAYERS_PER_GAME:
        raise InsufficientPlayersException(
            f"Need at least {PLAYERS_PER_GAME} available players, "
            f"found {len(eligible)}"
        )
    return eligible
