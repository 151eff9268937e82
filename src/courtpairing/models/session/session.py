"""Session data model: roster, courts, constraints and live round history."""

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
from typing import Any, Dict, List, Optional

from courtpairing.models.enums import SessionState
from courtpairing.models.session.court import Court
from courtpairing.models.session.partnership import PartnershipConstraint
from courtpairing.models.session.player_stats import PlayerStats
from courtpairing.models.session.round_data import Round
from courtpairing.utils import format_timestamp, generate_id, parse_timestamp, utc_now


@dataclass
class LiveData:
    """Round history and running stats of a session that has gone live.

    Attributes
    ----------
    rounds : list of Round
        Every round generated so far, oldest first. Only the last one can be
        Pending or Started.
    player_stats : list of PlayerStats
        Stats aggregated from completed rounds, sorted by player id.
    stats_through_round : int
        Highest round number already folded into ``player_stats``.
    """

    rounds: List[Round] = field(default_factory=list)
    player_stats: List[PlayerStats] = field(default_factory=list)
    stats_through_round: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rounds": [r.to_dict() for r in self.rounds],
            "player_stats": [s.to_dict() for s in self.player_stats],
            "stats_through_round": self.stats_through_round,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LiveData":
        return cls(
            rounds=[Round.from_dict(r) for r in data.get("rounds", [])],
            player_stats=[PlayerStats.from_dict(s) for s in data.get("player_stats", [])],
            stats_through_round=data.get("stats_through_round", 0),
        )


@dataclass
class Session:
    """
    A play session on a set of courts.

    Attributes
    ----------
    id : str
        Unique session identifier.
    name : str
        Display name.
    player_ids : list of str
        Roster in the order players were added.
    courts : list of Court
        Courts in declared order.
    paused_player_ids : list of str
        Roster members temporarily out of the rotation.
    partnership_constraint : PartnershipConstraint or None
        Fixed partnerships, when configured.
    scoring : bool
        Whether game scores are recorded.
    show_ratings : bool
        Display preference passed through to front ends.
    state : SessionState
        Session lifecycle state.
    live_data : LiveData
        Rounds and stats, populated once the session is Live.
    created_at : datetime
    updated_at : datetime
    """

    id: str
    name: str
    player_ids: List[str] = field(default_factory=list)
    courts: List[Court] = field(default_factory=list)
    paused_player_ids: List[str] = field(default_factory=list)
    partnership_constraint: Optional[PartnershipConstraint] = None
    scoring: bool = False
    show_ratings: bool = False
    state: SessionState = SessionState.NEW
    live_data: LiveData = field(default_factory=LiveData)
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    @classmethod
    def create(cls, name: str, **kwargs) -> "Session":
        """Create a new session with a freshly generated id."""
        return cls(id=generate_id("session"), name=name, **kwargs)

    # ========== Convenience Properties ==========

    @property
    def active_courts(self) -> List[Court]:
        return [c for c in self.courts if c.is_active]

    @property
    def current_round(self) -> Optional[Round]:
        """The most recent round, or None before the first generation."""
        if not self.live_data.rounds:
            return None
        return self.live_data.rounds[-1]

    @property
    def current_round_number(self) -> int:
        current = self.current_round
        return current.round_number if current else 0

    @property
    def is_live(self) -> bool:
        return self.state is SessionState.LIVE

    def court_by_id(self, court_id: str) -> Optional[Court]:
        for court in self.courts:
            if court.id == court_id:
                return court
        return None

    def stats_by_player(self) -> Dict[str, PlayerStats]:
        return {s.player_id: s for s in self.live_data.player_stats}

    def is_paused(self, player_id: str) -> bool:
        return player_id in self.paused_player_ids

    def touch(self) -> None:
        self.updated_at = utc_now()

    # ========== Serialization ==========

    def to_dict(self) -> Dict[str, Any]:
        """Serialize session to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "player_ids": list(self.player_ids),
            "courts": [c.to_dict() for c in self.courts],
            "paused_player_ids": list(self.paused_player_ids),
            "partnership_constraint": (
                self.partnership_constraint.to_dict()
                if self.partnership_constraint
                else None
            ),
            "scoring": self.scoring,
            "show_ratings": self.show_ratings,
            "state": self.state.value,
            "live_data": self.live_data.to_dict(),
            "created_at": format_timestamp(self.created_at),
            "updated_at": format_timestamp(self.updated_at),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Session":
        """Deserialize session from dictionary."""
        constraint = data.get("partnership_constraint")
        return cls(
            id=data["id"],
            name=data.get("name", "Untitled Session"),
            player_ids=list(data.get("player_ids", [])),
            courts=[Court.from_dict(c) for c in data.get("courts", [])],
            paused_player_ids=list(data.get("paused_player_ids", [])),
            partnership_constraint=(
                PartnershipConstraint.from_dict(constraint) if constraint else None
            ),
            scoring=data.get("scoring", False),
            show_ratings=data.get("show_ratings", False),
            state=SessionState(data.get("state", SessionState.NEW.value)),
            live_data=LiveData.from_dict(data.get("live_data", {})),
            created_at=parse_timestamp(data.get("created_at")) or utc_now(),
            updated_at=parse_timestamp(data.get("updated_at")) or utc_now(),
        )
