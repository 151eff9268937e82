"""Data models for a session round."""

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
from typing import Any, Dict, List, Optional

from courtpairing.models.enums import RoundState
from courtpairing.models.session.game import Game, GameAssignment


@dataclass
class RoundAssignment:
    """Output of the round assigner: who plays where and who sits out.

    Attributes
    ----------
    round_number : int
        Round the assignment is meant for.
    game_assignments : list of GameAssignment
        One entry per filled court, in court ranking order.
    sitting_out_ids : list of str
        Eligible players without a game this round.
    """

    round_number: int
    game_assignments: List[GameAssignment] = field(default_factory=list)
    sitting_out_ids: List[str] = field(default_factory=list)

    @property
    def playing_ids(self) -> List[str]:
        ids: List[str] = []
        for assignment in self.game_assignments:
            ids.extend(assignment.player_ids)
        return ids

    def to_dict(self) -> Dict[str, Any]:
        return {
            "round_number": self.round_number,
            "game_assignments": [g.to_dict() for g in self.game_assignments],
            "sitting_out_ids": list(self.sitting_out_ids),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RoundAssignment":
        return cls(
            round_number=data["round_number"],
            game_assignments=[
                GameAssignment.from_dict(g) for g in data.get("game_assignments", [])
            ],
            sitting_out_ids=list(data.get("sitting_out_ids", [])),
        )


@dataclass
class Round:
    """Container for all data related to a single round.

    Attributes
    ----------
    round_number : int
        Round number (1-indexed).
    games : list of Game
        Games in court ranking order.
    sitting_out_ids : list of str
        Players sitting this round out.
    state : RoundState
        Pending until started, Started until results are in, then Completed.
    """

    round_number: int
    games: List[Game] = field(default_factory=list)
    sitting_out_ids: List[str] = field(default_factory=list)
    state: RoundState = RoundState.PENDING

    @property
    def is_pending(self) -> bool:
        return self.state is RoundState.PENDING

    @property
    def is_started(self) -> bool:
        return self.state is RoundState.STARTED

    @property
    def is_completed(self) -> bool:
        return self.state is RoundState.COMPLETED

    @property
    def playing_ids(self) -> List[str]:
        ids: List[str] = []
        for game in self.games:
            ids.extend(game.player_ids)
        return ids

    @property
    def player_ids(self) -> List[str]:
        """Every player in the round, playing first then sitting out."""
        return self.playing_ids + list(self.sitting_out_ids)

    def game_by_id(self, game_id: str) -> Optional[Game]:
        for game in self.games:
            if game.id == game_id:
                return game
        return None

    def game_for_player(self, player_id: str) -> Optional[Game]:
        for game in self.games:
            if player_id in game.player_ids:
                return game
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize round to dictionary."""
        return {
            "round_number": self.round_number,
            "games": [g.to_dict() for g in self.games],
            "sitting_out_ids": list(self.sitting_out_ids),
            "state": self.state.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Round":
        """Deserialize round from dictionary."""
        return cls(
            round_number=data["round_number"],
            games=[Game.from_dict(g) for g in data.get("games", [])],
            sitting_out_ids=list(data.get("sitting_out_ids", [])),
            state=RoundState(data.get("state", RoundState.PENDING.value)),
        )
