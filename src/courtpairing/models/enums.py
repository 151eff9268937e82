"""Enumerations shared by the session models."""

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

from enum import Enum

from courtpairing.constants import (
    ROUND_COMPLETED,
    ROUND_PENDING,
    ROUND_STARTED,
    SESSION_ARCHIVED,
    SESSION_COMPLETE,
    SESSION_LIVE,
    SESSION_NEW,
)


class SessionState(Enum):
    """Lifecycle of a session: New -> Live -> Complete -> Archived."""

    NEW = SESSION_NEW
    LIVE = SESSION_LIVE
    COMPLETE = SESSION_COMPLETE
    ARCHIVED = SESSION_ARCHIVED


class RoundState(Enum):
    """Lifecycle of a round: Pending -> Started -> Completed."""

    PENDING = ROUND_PENDING
    STARTED = ROUND_STARTED
    COMPLETED = ROUND_COMPLETED


class TeamSide(Enum):
    SERVE = "serve"
    RECEIVE = "receive"
