"""A player in the club directory."""

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
from datetime import datetime
from typing import Any, Dict, Optional

from courtpairing.utils import (
    format_timestamp,
    generate_id,
    parse_timestamp,
    utc_now,
)
from courtpairing.utils.validation import validate_rating_strict


@dataclass
class Player:
    """
    A player known to the organizer.

    Players live in a directory shared by all sessions; a session refers to
    them by id only. Whether a player is paused is session state, not player
    state (see ``Session.paused_player_ids``).

    Attributes
    ----------
    id : str
        Unique identifier for the player.
    name : str
        Display name.
    rating : float or None
        Skill rating between 0.0 and 7.0, rounded to two decimals. ``None``
        means unrated; an unrated player never meets a court minimum unless
        ``AssignmentConfig.unrated_meets_minimum`` is set.
    gender : str or None
        Free-form gender, informational only.
    notes : str or None
        Free-form organizer notes.
    created_at : datetime
        When the player was added to the directory.

    Examples
    --------
    Creating a player::

        player = Player(id="p1", name="Dana Ruiz", rating=3.75)
    """

    id: str
    name: str
    rating: Optional[float] = None
    gender: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        self.rating = validate_rating_strict(self.rating)

    @classmethod
    def create(cls, name: str, rating: Optional[float] = None, **kwargs) -> "Player":
        """Create a player with a freshly generated id."""
        return cls(id=generate_id("player"), name=name, rating=rating, **kwargs)

    @property
    def is_rated(self) -> bool:
        return self.rating is not None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize player to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "rating": self.rating,
            "gender": self.gender,
            "notes": self.notes,
            "created_at": format_timestamp(self.created_at),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Player":
        """Deserialize player from dictionary."""
        return cls(
            id=data["id"],
            name=data["name"],
            rating=data.get("rating"),
            gender=data.get("gender"),
            notes=data.get("notes"),
            created_at=parse_timestamp(data.get("created_at")) or utc_now(),
        )

    def __str__(self) -> str:
        if self.rating is None:
            return self.name
        return f"{self.name} ({self.rating:.2f})"
