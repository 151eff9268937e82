"""Tuning knobs for the round assigner."""

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
from typing import Any, Dict

from courtpairing.constants import (
    DEFAULT_CANDIDATE_WINDOW,
    DEFAULT_OPPONENT_WEIGHT,
    DEFAULT_PARTNER_WEIGHT,
    DEFAULT_RECENCY_PENALTY,
)


@dataclass
class AssignmentConfig:
    """Round assigner configuration settings.

    Attributes
    ----------
    partner_weight : float
        Cost per prior game two teammates already played together.
    opponent_weight : float
        Cost per prior game two players already faced each other.
    recency_penalty : float
        Extra cost for repeating last game's partner or an opponent from it.
    candidate_window : int
        How many units beyond the anchor are considered when filling a court.
        Bounds the search on large rosters.
    unrated_meets_minimum : bool
        Whether unrated players may play on courts with a minimum rating.
    """

    partner_weight: float = DEFAULT_PARTNER_WEIGHT
    opponent_weight: float = DEFAULT_OPPONENT_WEIGHT
    recency_penalty: float = DEFAULT_RECENCY_PENALTY
    candidate_window: int = DEFAULT_CANDIDATE_WINDOW
    unrated_meets_minimum: bool = False

    def __post_init__(self) -> None:
        if self.candidate_window < 3:
            raise ValueError("candidate_window must be at least 3")

    def to_dict(self) -> Dict[str, Any]:
        """Serialize configuration to dictionary."""
        return {
            "partner_weight": self.partner_weight,
            "opponent_weight": self.opponent_weight,
            "recency_penalty": self.recency_penalty,
            "candidate_window": self.candidate_window,
            "unrated_meets_minimum": self.unrated_meets_minimum,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AssignmentConfig":
        """Deserialize configuration from dictionary."""
        return cls(
            partner_weight=data.get("partner_weight", DEFAULT_PARTNER_WEIGHT),
            opponent_weight=data.get("opponent_weight", DEFAULT_OPPONENT_WEIGHT),
            recency_penalty=data.get("recency_penalty", DEFAULT_RECENCY_PENALTY),
            candidate_window=data.get("candidate_window", DEFAULT_CANDIDATE_WINDOW),
            unrated_meets_minimum=data.get("unrated_meets_minimum", False),
        )
