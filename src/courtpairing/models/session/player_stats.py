"""Per-player participation history within a session."""

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

from courtpairing.type_hints import CountMap


@dataclass
class PlayerStats:
    """
    Running totals that drive rotation fairness and partner variety.

    Attributes
    ----------
    player_id : str
        Player the stats belong to.
    games_played : int
        Completed rounds in which the player had a game.
    games_sat_out : int
        Completed rounds in which the player sat out.
    consecutive_games : int
        Games played since the player last sat out.
    total_score : int
        Points scored by the player's teams.
    total_score_against : int
        Points scored against the player's teams.
    partners : dict of str to int
        Times partnered with each other player.
    opponents : dict of str to int
        Times faced each other player across the net.
    games_on_court : dict of str to int
        Games played on each court.
    fixed_partnership_games : int
        Games played alongside a configured fixed partner.
    last_partner_id : str or None
        Teammate in the player's most recent game.
    last_opponent_ids : list of str
        Opponents in the player's most recent game.
    average_rating : float or None
        Average rating of the player's opponents, when known.
    """

    player_id: str
    games_played: int = 0
    games_sat_out: int = 0
    consecutive_games: int = 0
    total_score: int = 0
    total_score_against: int = 0
    partners: CountMap = field(default_factory=dict)
    opponents: CountMap = field(default_factory=dict)
    games_on_court: CountMap = field(default_factory=dict)
    fixed_partnership_games: int = 0
    last_partner_id: Optional[str] = None
    last_opponent_ids: List[str] = field(default_factory=list)
    average_rating: Optional[float] = None

    def partner_count(self, other_id: str) -> int:
        return self.partners.get(other_id, 0)

    def opponent_count(self, other_id: str) -> int:
        return self.opponents.get(other_id, 0)

    def court_count(self, court_id: str) -> int:
        return self.games_on_court.get(court_id, 0)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize stats to dictionary."""
        return {
            "player_id": self.player_id,
            "games_played": self.games_played,
            "games_sat_out": self.games_sat_out,
            "consecutive_games": self.consecutive_games,
            "total_score": self.total_score,
            "total_score_against": self.total_score_against,
            "partners": dict(self.partners),
            "opponents": dict(self.opponents),
            "games_on_court": dict(self.games_on_court),
            "fixed_partnership_games": self.fixed_partnership_games,
            "last_partner_id": self.last_partner_id,
            "last_opponent_ids": list(self.last_opponent_ids),
            "average_rating": self.average_rating,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlayerStats":
        """Deserialize stats from dictionary."""
        return cls(
            player_id=data["player_id"],
            games_played=data.get("games_played", 0),
            games_sat_out=data.get("games_sat_out", 0),
            consecutive_games=data.get("consecutive_games", 0),
            total_score=data.get("total_score", 0),
            total_score_against=data.get("total_score_against", 0),
            partners=dict(data.get("partners", {})),
            opponents=dict(data.get("opponents", {})),
            games_on_court=dict(data.get("games_on_court", {})),
            fixed_partnership_games=data.get("fixed_partnership_games", 0),
            last_partner_id=data.get("last_partner_id"),
            last_opponent_ids=list(data.get("last_opponent_ids", [])),
            average_rating=data.get("average_rating"),
        )
