"""Court data class."""

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
from typing import Any, Dict, Optional

from courtpairing.utils import generate_id
from courtpairing.utils.validation import validate_rating_strict


@dataclass
class Court:
    """A physical court available to a session.

    Attributes
    ----------
    id : str
        Unique identifier within the session.
    name : str
        Display name, e.g. "Court 3".
    is_active : bool
        Inactive courts are never assigned games.
    minimum_rating : float or None
        When set, every player placed on this court must be rated at least
        this high.
    """

    id: str
    name: str
    is_active: bool = True
    minimum_rating: Optional[float] = None

    def __post_init__(self) -> None:
        self.minimum_rating = validate_rating_strict(self.minimum_rating)

    @classmethod
    def create(cls, name: str, minimum_rating: Optional[float] = None) -> "Court":
        return cls(id=generate_id("court"), name=name, minimum_rating=minimum_rating)

    @property
    def is_rated(self) -> bool:
        return self.minimum_rating is not None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize court to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "is_active": self.is_active,
            "minimum_rating": self.minimum_rating,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Court":
        """Deserialize court from dictionary."""
        return cls(
            id=data["id"],
            name=data.get("name", data["id"]),
            is_active=data.get("is_active", True),
            minimum_rating=data.get("minimum_rating"),
        )
