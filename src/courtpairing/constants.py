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

# --- Constants ---
APP_NAME = "courtpairing"
LOG_LEVEL_ENV_VAR = "COURTPAIRING_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"

# Game shape
PLAYERS_PER_GAME = 4

# Session size limits
MIN_PLAYERS_PER_SESSION = 4
MAX_PLAYERS_PER_SESSION = 128
MIN_COURTS = 1
MAX_COURTS = 32

# Player rating bounds (DUPR-style)
MIN_RATING = 0.0
MAX_RATING = 7.0
RATING_DECIMAL_PLACES = 2

# Player name bounds
MIN_NAME_LENGTH = 2
MAX_NAME_LENGTH = 50

DEFAULT_GAME_SCORE = 11

# Assignment cost weights
DEFAULT_PARTNER_WEIGHT = 1.0
DEFAULT_OPPONENT_WEIGHT = 1.0
# Penalty for repeating last round's partner or opponents
DEFAULT_RECENCY_PENALTY = 5.0
# Candidates considered alongside the anchor when filling a court
DEFAULT_CANDIDATE_WINDOW = 11

# Session states
SESSION_NEW = "New"
SESSION_LIVE = "Live"
SESSION_COMPLETE = "Complete"
SESSION_ARCHIVED = "Archived"

# Round states
ROUND_PENDING = "Pending"
ROUND_STARTED = "Started"
ROUND_COMPLETED = "Completed"
