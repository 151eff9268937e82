"""Session manager - the command surface for running sessions.

The manager keeps the player directory and any number of sessions keyed by
id. Each command runs the pure operations from
:mod:`courtpairing.controllers.session.session_service` and stores the
resulting snapshot only once the whole command has succeeded.
"""

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

import copy
import dataclasses
import random
from typing import Any, Dict, List, Mapping, Optional

from courtpairing.controllers.session import session_service as service
from courtpairing.exceptions import (
    DuplicatePlayerException,
    GenerationEmptyException,
    InsufficientPlayersException,
    InvalidResultException,
    PlayerNotFoundException,
    SessionNotFoundException,
)
from courtpairing.models.enums import RoundState
from courtpairing.models.player import Player
from courtpairing.models.session import (
    AssignmentConfig,
    Court,
    PlayerStats,
    Round,
    Score,
    Session,
)
from courtpairing.utils import setup_logger
from courtpairing.utils.validation import validate_player_name_strict

logger = setup_logger(__name__)


class SessionManager:
    """Runs sessions for a club.

    This class is responsible for:
    - Holding the player directory and session snapshots
    - Sequencing generate, start and complete round commands
    - Regenerating a Pending round after roster or court edits
    - Rejecting illegal transitions without touching stored state
    """

    def __init__(
        self,
        players: Optional[List[Player]] = None,
        config: Optional[AssignmentConfig] = None,
        rng: Optional[random.Random] = None,
    ):
        """Initialize the manager.

        Args:
            players: Initial player directory
            config: Assigner configuration used for every generation
            rng: Random source; when omitted each generation uses fresh randomness
        """
        self.players: Dict[str, Player] = {}
        self.sessions: Dict[str, Session] = {}
        self.config = config or AssignmentConfig()
        self.rng = rng
        for player in players or []:
            self.register_player(player)

    # ========== Player Directory ==========

    def register_player(self, player: Player) -> Player:
        """Add a player to the directory.

        Raises:
            DuplicatePlayerException: If the id is already registered
            InvalidPlayerDataException: If the name is invalid
        """
        if player.id in self.players:
            raise DuplicatePlayerException(f"Player {player.id} already registered")
        player = dataclasses.replace(
            player, name=validate_player_name_strict(player.name)
        )
        self.players[player.id] = player
        logger.debug(f"Registered player {player}")
        return player

    def get_player(self, player_id: str) -> Player:
        player = self.players.get(player_id)
        if player is None:
            raise PlayerNotFoundException(f"Player {player_id} not found")
        return player

    # ========== Session Registry ==========

    def create_session(
        self,
        name: str,
        player_ids: Optional[List[str]] = None,
        courts: Optional[List[Court]] = None,
        scoring: bool = False,
        show_ratings: bool = False,
    ) -> Session:
        """Create a New session from registered players and courts."""
        session = Session.create(name, scoring=scoring, show_ratings=show_ratings)
        for player_id in player_ids or []:
            self.get_player(player_id)
            session = service.add_player(session, player_id)
        for court in courts or []:
            session = service.add_court(session, court)
        self.sessions[session.id] = session
        logger.info(f"Created session {session.name} ({session.id})")
        return copy.deepcopy(session)

    def get_session(self, session_id: str) -> Session:
        """Return a copy of a stored session.

        Raises:
            SessionNotFoundException: If the id is unknown
        """
        return copy.deepcopy(self._session(session_id))

    def delete_session(self, session_id: str) -> None:
        self._session(session_id)
        del self.sessions[session_id]

    def _session(self, session_id: str) -> Session:
        session = self.sessions.get(session_id)
        if session is None:
            raise SessionNotFoundException(f"Session {session_id} not found")
        return session

    def _store(self, session: Session) -> Session:
        self.sessions[session.id] = session
        return copy.deepcopy(session)

    # ========== Round Commands ==========

    def _generate(self, session: Session):
        return service.generate_round_assignment(
            session, self.players, config=self.config, rng=self.rng
        )

    def start_live_session(self, session_id: str) -> Session:
        """Take a New session Live and open its first Pending round.

        Raises:
            IllegalStateTransitionException: If the session is not New
            InsufficientPlayersException: If the roster cannot fill the courts
            GenerationEmptyException: If no court could be filled
        """
        session = self._session(session_id)
        live = service.start_live_session(session, self.players)
        live = service.apply_next_round(live, self._generate(live))
        return self._store(live)

    def generate_round(self, session_id: str) -> Session:
        """Open the next Pending round, or regenerate the current Pending one."""
        session = self._session(session_id)
        service.require_live(session, "generate round")
        assignment = self._generate(session)
        current = session.current_round
        if current is not None and current.is_pending:
            updated = service.update_current_round(session, assignment)
        else:
            updated = service.apply_next_round(session, assignment)
        return self._store(updated)

    def reshuffle(self, session_id: str) -> Session:
        """Regenerate the Pending round keeping its number and state."""
        session = self._session(session_id)
        service.require_live(session, "reshuffle")
        service.require_round(session, RoundState.PENDING, "reshuffle")
        updated = service.update_current_round(session, self._generate(session))
        return self._store(updated)

    def start_round(self, session_id: str) -> Session:
        return self._store(service.start_round(self._session(session_id)))

    def complete_round(
        self, session_id: str, results: Optional[Mapping[str, Any]] = None
    ) -> Session:
        """Complete the Started round, fold in stats and open the next round.

        Args:
            session_id: Session to act on
            results: Scores keyed by game id, as ``Score`` objects,
                ``(serve, receive)`` pairs or None

        Raises:
            IllegalStateTransitionException: If no round is Started
            InvalidResultException: If a result is malformed
        """
        session = self._session(session_id)
        parsed = self._parse_results(results)
        stats = service.update_stats_for_round(session, parsed, self.players)
        completed = service.complete_round(session, parsed, stats)

        try:
            updated = service.apply_next_round(completed, self._generate(completed))
        except (InsufficientPlayersException, GenerationEmptyException) as e:
            logger.warning(
                f"Round {completed.current_round_number} completed, "
                f"but no next round could be generated: {e}"
            )
            updated = completed
        return self._store(updated)

    @staticmethod
    def _parse_results(results: Optional[Mapping[str, Any]]) -> Dict[str, Optional[Score]]:
        parsed: Dict[str, Optional[Score]] = {}
        for game_id, value in (results or {}).items():
            if value is None or isinstance(value, Score):
                parsed[game_id] = value
            elif isinstance(value, (tuple, list)) and len(value) == 2:
                parsed[game_id] = Score(serve_score=value[0], receive_score=value[1])
            else:
                raise InvalidResultException(
                    f"Result for game {game_id} must be a Score or (serve, receive) pair"
                )
        return parsed

    def swap_players(self, session_id: str, player1_id: str, player2_id: str) -> Session:
        session = self._session(session_id)
        return self._store(service.swap_players(session, player1_id, player2_id))

    # ========== Session Lifecycle ==========

    def end_session(self, session_id: str) -> Session:
        return self._store(service.end_session(self._session(session_id)))

    def archive_session(self, session_id: str) -> Session:
        return self._store(service.archive_session(self._session(session_id)))

    def restore_session(self, session_id: str) -> Session:
        return self._store(service.restore_session(self._session(session_id)))

    # ========== Roster, Court and Partnership Edits ==========

    def _refresh_pending(self, session: Session) -> Session:
        """Regenerate the Pending round of a Live session after an edit.

        When the edit leaves too few players for any game, the stale Pending
        round is dropped and the edit still stands.
        """
        current = session.current_round
        if not session.is_live or current is None or not current.is_pending:
            return session
        try:
            return service.update_current_round(session, self._generate(session))
        except (InsufficientPlayersException, GenerationEmptyException) as e:
            logger.warning(f"Pending round could not be regenerated: {e}")
            return service.discard_pending_round(session)

    def add_player(self, session_id: str, player_id: str) -> Session:
        self.get_player(player_id)
        updated = service.add_player(self._session(session_id), player_id)
        return self._store(self._refresh_pending(updated))

    def remove_player(self, session_id: str, player_id: str) -> Session:
        updated = service.remove_player(self._session(session_id), player_id)
        return self._store(self._refresh_pending(updated))

    def toggle_pause_player(self, session_id: str, player_id: str) -> Session:
        updated = service.toggle_pause_player(self._session(session_id), player_id)
        return self._store(self._refresh_pending(updated))

    def add_court(self, session_id: str, court: Court) -> Session:
        updated = service.add_court(self._session(session_id), court)
        return self._store(self._refresh_pending(updated))

    def update_court(self, session_id: str, court_id: str, **changes) -> Session:
        updated = service.update_court(self._session(session_id), court_id, **changes)
        return self._store(self._refresh_pending(updated))

    def remove_court(self, session_id: str, court_id: str) -> Session:
        updated = service.remove_court(self._session(session_id), court_id)
        return self._store(self._refresh_pending(updated))

    def add_partnership(self, session_id: str, player1_id: str, player2_id: str) -> Session:
        session = self._session(session_id)
        updated = service.add_partnership(session, player1_id, player2_id)
        return self._store(self._refresh_pending(updated))

    def remove_partnership(self, session_id: str, player_id: str) -> Session:
        updated = service.remove_partnership(self._session(session_id), player_id)
        return self._store(self._refresh_pending(updated))

    # ========== Queries ==========

    def get_current_round(self, session_id: str) -> Optional[Round]:
        return copy.deepcopy(self._session(session_id).current_round)

    def get_player_stats(self, session_id: str) -> List[PlayerStats]:
        return copy.deepcopy(self._session(session_id).live_data.player_stats)
