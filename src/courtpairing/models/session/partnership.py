"""Fixed partnership data classes."""

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

from courtpairing.exceptions import InvalidPartnershipException


@dataclass
class FixedPartnership:
    """Two players who always play on the same team.

    Attributes
    ----------
    player1_id : str
    player2_id : str
    is_active : bool
        Inactive partnerships are kept for reference but ignored by the assigner.
    """

    player1_id: str
    player2_id: str
    is_active: bool = True

    def __post_init__(self) -> None:
        if self.player1_id == self.player2_id:
            raise InvalidPartnershipException(
                f"A player cannot partner themselves: {self.player1_id}"
            )

    def involves(self, player_id: str) -> bool:
        return player_id in (self.player1_id, self.player2_id)

    def partner_of(self, player_id: str) -> Optional[str]:
        if player_id == self.player1_id:
            return self.player2_id
        if player_id == self.player2_id:
            return self.player1_id
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "player1_id": self.player1_id,
            "player2_id": self.player2_id,
            "is_active": self.is_active,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FixedPartnership":
        return cls(
            player1_id=data["player1_id"],
            player2_id=data["player2_id"],
            is_active=data.get("is_active", True),
        )


@dataclass
class PartnershipConstraint:
    """The fixed partnerships configured for a session."""

    partnerships: List[FixedPartnership] = field(default_factory=list)

    @property
    def active(self) -> List[FixedPartnership]:
        return [p for p in self.partnerships if p.is_active]

    def partnership_for(self, player_id: str) -> Optional[FixedPartnership]:
        """Return the active partnership a player belongs to, if any."""
        for partnership in self.active:
            if partnership.involves(player_id):
                return partnership
        return None

    def are_partners(self, player1_id: str, player2_id: str) -> bool:
        partnership = self.partnership_for(player1_id)
        return partnership is not None and partnership.partner_of(player1_id) == player2_id

    def to_dict(self) -> Dict[str, Any]:
        return {"partnerships": [p.to_dict() for p in self.partnerships]}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PartnershipConstraint":
        return cls(
            partnerships=[
                FixedPartnership.from_dict(p) for p in data.get("partnerships", [])
            ]
        )
