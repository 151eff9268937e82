"""Teams, scores and games played on a court."""

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

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

from courtpairing.exceptions import ValidationException
from courtpairing.models.enums import TeamSide
from courtpairing.type_hints import GamePlayers, PointsFor
from courtpairing.utils import format_timestamp, parse_timestamp
from courtpairing.utils.validation import validate_score_strict


@dataclass(frozen=True)
class Team:
    """Two distinct players on the same side of the net.

    Attributes
    ----------
    player1_id : str
    player2_id : str
    """

    player1_id: str
    player2_id: str

    def __post_init__(self) -> None:
        if self.player1_id == self.player2_id:
            raise ValidationException(
                f"A team needs two distinct players, got {self.player1_id} twice"
            )

    @property
    def player_ids(self) -> Tuple[str, str]:
        return (self.player1_id, self.player2_id)

    def __contains__(self, player_id: object) -> bool:
        return player_id in self.player_ids

    def partner_of(self, player_id: str) -> str:
        """Return the teammate of ``player_id``.

        Raises:
            ValueError: If the player is not on this team
        """
        if player_id == self.player1_id:
            return self.player2_id
        if player_id == self.player2_id:
            return self.player1_id
        raise ValueError(f"Player {player_id} is not on this team")

    def replace(self, old_id: str, new_id: str) -> "Team":
        """Return a copy of the team with ``old_id`` swapped for ``new_id``."""
        return Team(
            new_id if self.player1_id == old_id else self.player1_id,
            new_id if self.player2_id == old_id else self.player2_id,
        )

    def same_players(self, other: "Team") -> bool:
        return set(self.player_ids) == set(other.player_ids)

    def to_dict(self) -> Dict[str, Any]:
        return {"player1_id": self.player1_id, "player2_id": self.player2_id}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Team":
        return cls(player1_id=data["player1_id"], player2_id=data["player2_id"])


@dataclass(frozen=True)
class Score:
    """Final points for both sides of a game."""

    serve_score: int
    receive_score: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "serve_score", validate_score_strict(self.serve_score))
        object.__setattr__(
            self, "receive_score", validate_score_strict(self.receive_score)
        )

    def points_for(self, side: TeamSide) -> PointsFor:
        """Return (own points, opposing points) for a side of the net."""
        if side is TeamSide.SERVE:
            return self.serve_score, self.receive_score
        return self.receive_score, self.serve_score

    @property
    def serve_won(self) -> bool:
        return self.serve_score > self.receive_score

    @property
    def receive_won(self) -> bool:
        return self.receive_score > self.serve_score

    def to_dict(self) -> Dict[str, Any]:
        return {"serve_score": self.serve_score, "receive_score": self.receive_score}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Score":
        return cls(
            serve_score=data["serve_score"], receive_score=data["receive_score"]
        )


@dataclass
class GameAssignment:
    """One court's worth of players chosen by the assigner, before it becomes a Game."""

    court_id: str
    serve_team: Team
    receive_team: Team

    def __post_init__(self) -> None:
        _require_distinct(self.serve_team, self.receive_team)

    @property
    def player_ids(self) -> GamePlayers:
        return list(self.serve_team.player_ids) + list(self.receive_team.player_ids)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "court_id": self.court_id,
            "serve_team": self.serve_team.to_dict(),
            "receive_team": self.receive_team.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GameAssignment":
        return cls(
            court_id=data["court_id"],
            serve_team=Team.from_dict(data["serve_team"]),
            receive_team=Team.from_dict(data["receive_team"]),
        )


@dataclass
class Game:
    """A doubles game within a round.

    Attributes
    ----------
    id : str
        Unique game identifier (``game_<round>_<court>_<index>_<suffix>``).
    session_id : str
        Session the game belongs to.
    round_number : int
        Round number (1-indexed).
    court_id : str
        Court the game is played on.
    serve_team : Team
        Team starting on serve.
    receive_team : Team
        Team starting on receive.
    score : Score or None
        Final score, only recorded when the session keeps score.
    is_completed : bool
        Whether the game has been finished.
    started_at : datetime or None
        Stamped when the round starts.
    completed_at : datetime or None
        Stamped when the round completes.
    """

    id: str
    session_id: str
    round_number: int
    court_id: str
    serve_team: Team
    receive_team: Team
    score: Optional[Score] = None
    is_completed: bool = False
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        _require_distinct(self.serve_team, self.receive_team)

    @property
    def player_ids(self) -> GamePlayers:
        return list(self.serve_team.player_ids) + list(self.receive_team.player_ids)

    @property
    def teams(self) -> Tuple[Team, Team]:
        return self.serve_team, self.receive_team

    def side_of(self, player_id: str) -> TeamSide:
        """Return which side of the net a player is on.

        Raises:
            ValueError: If the player is not in this game
        """
        if player_id in self.serve_team:
            return TeamSide.SERVE
        if player_id in self.receive_team:
            return TeamSide.RECEIVE
        raise ValueError(f"Player {player_id} is not in game {self.id}")

    def team_of(self, player_id: str) -> Team:
        if self.side_of(player_id) is TeamSide.SERVE:
            return self.serve_team
        return self.receive_team

    def opponents_of(self, player_id: str) -> Team:
        if self.side_of(player_id) is TeamSide.SERVE:
            return self.receive_team
        return self.serve_team

    def to_dict(self) -> Dict[str, Any]:
        """Serialize game to dictionary."""
        return {
            "id": self.id,
            "session_id": self.session_id,
            "round_number": self.round_number,
            "court_id": self.court_id,
            "serve_team": self.serve_team.to_dict(),
            "receive_team": self.receive_team.to_dict(),
            "score": self.score.to_dict() if self.score else None,
            "is_completed": self.is_completed,
            "started_at": format_timestamp(self.started_at),
            "completed_at": format_timestamp(self.completed_at),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Game":
        """Deserialize game from dictionary."""
        score = data.get("score")
        return cls(
            id=data["id"],
            session_id=data["session_id"],
            round_number=data["round_number"],
            court_id=data["court_id"],
            serve_team=Team.from_dict(data["serve_team"]),
            receive_team=Team.from_dict(data["receive_team"]),
            score=Score.from_dict(score) if score else None,
            is_completed=data.get("is_completed", False),
            started_at=parse_timestamp(data.get("started_at")),
            completed_at=parse_timestamp(data.get("completed_at")),
        )


def _require_distinct(serve_team: Team, receive_team: Team) -> None:
    ids = list(serve_team.player_ids) + list(receive_team.player_ids)
    if len(set(ids)) != len(ids):
        raise ValidationException(f"A game needs four distinct players, got {ids}")
