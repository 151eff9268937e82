"""Pure session operations.

Every operation takes a session snapshot, works on a deep copy and returns
the updated copy. A failing operation raises before anything is returned, so
the caller's snapshot is never left half-updated.
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
import uuid
from typing import Dict, Iterable, List, Optional, Set, Union

from courtpairing.constants import MAX_COURTS, MAX_PLAYERS_PER_SESSION
from courtpairing.controllers.session.stats_aggregator import (
    Results,
    update_stats_for_round,
)
from courtpairing.exceptions import (
    CourtNotFoundException,
    DuplicateCourtException,
    DuplicatePlayerException,
    IllegalStateTransitionException,
    InvalidPartnershipException,
    InvalidResultException,
    InvalidSwapException,
    PlayerNotFoundException,
    RoundNotFoundException,
    ValidationException,
)
from courtpairing.models.enums import RoundState, SessionState
from courtpairing.models.player import Player
from courtpairing.models.session import (
    AssignmentConfig,
    Court,
    FixedPartnership,
    Game,
    LiveData,
    PartnershipConstraint,
    PlayerStats,
    Round,
    RoundAssignment,
    Session,
)
from courtpairing.pairing.roster import PlayerDirectory, resolve_roster
from courtpairing.pairing.round_assigner import RoundAssigner
from courtpairing.utils import setup_logger, utc_now
from courtpairing.utils.validation import validate_session_size_strict

logger = setup_logger(__name__)

__all__ = [
    "add_court",
    "add_partnership",
    "add_player",
    "apply_next_round",
    "archive_session",
    "complete_round",
    "discard_pending_round",
    "end_session",
    "generate_round_assignment",
    "remove_court",
    "remove_partnership",
    "remove_player",
    "require_live",
    "require_round",
    "restore_session",
    "start_live_session",
    "start_round",
    "swap_players",
    "toggle_pause_player",
    "update_court",
    "update_current_round",
    "update_stats_for_round",
]

# ---------- Valid transitions ----------

_VALID_TRANSITIONS: Dict[SessionState, Set[SessionState]] = {
    SessionState.NEW: {SessionState.LIVE},
    SessionState.LIVE: {SessionState.COMPLETE},
    SessionState.COMPLETE: {SessionState.ARCHIVED},
    # Only reachable through an explicit restore
    SessionState.ARCHIVED: {SessionState.COMPLETE},
}

_EDITABLE_STATES = {SessionState.NEW, SessionState.LIVE}
_COURT_FIELDS = {"name", "is_active", "minimum_rating"}


def _transition(session: Session, new_state: SessionState) -> Session:
    current = session.state
    allowed = _VALID_TRANSITIONS.get(current, set())
    if new_state not in allowed:
        raise IllegalStateTransitionException(
            f"Invalid transition: {current.value} -> {new_state.value}"
        )
    updated = copy.deepcopy(session)
    updated.state = new_state
    updated.touch()
    logger.info(f"Session {session.id}: {current.value} -> {new_state.value}")
    return updated


def _require_editable(session: Session, action: str) -> None:
    if session.state not in _EDITABLE_STATES:
        raise IllegalStateTransitionException(
            f"Cannot {action} while session is {session.state.value}"
        )


def require_live(session: Session, action: str) -> None:
    if session.state is not SessionState.LIVE:
        raise IllegalStateTransitionException(
            f"Cannot {action} while session is {session.state.value}"
        )


def require_round(session: Session, state: RoundState, action: str) -> Round:
    current = session.current_round
    if current is None:
        raise RoundNotFoundException(f"Cannot {action}: session has no rounds")
    if current.state is not state:
        raise IllegalStateTransitionException(
            f"Cannot {action}: round {current.round_number} is {current.state.value}"
        )
    return current


def _build_games(
    session: Session, assignment: RoundAssignment, court_ids: Iterable[str]
) -> List[Game]:
    known_courts = set(court_ids)
    games = []
    for index, game_assignment in enumerate(assignment.game_assignments):
        if game_assignment.court_id not in known_courts:
            raise CourtNotFoundException(
                f"Assignment uses unknown court {game_assignment.court_id}"
            )
        games.append(
            Game(
                id=(
                    f"game_{assignment.round_number}_{game_assignment.court_id}"
                    f"_{index}_{uuid.uuid4().hex[:8]}"
                ),
                session_id=session.id,
                round_number=assignment.round_number,
                court_id=game_assignment.court_id,
                serve_team=game_assignment.serve_team,
                receive_team=game_assignment.receive_team,
            )
        )
    return games


# ========== Round Generation ==========


def generate_round_assignment(
    session: Session,
    players: PlayerDirectory,
    paused_players: Optional[Iterable[Union[str, Player]]] = None,
    config: Optional[AssignmentConfig] = None,
    rng: Optional[random.Random] = None,
) -> RoundAssignment:
    """Generate an assignment for the next round, or to replace a Pending one.

    Raises:
        IllegalStateTransitionException: If the session is not Live or a round
            is in progress
        InsufficientPlayersException: If fewer than four players are available
        GenerationEmptyException: If no court could be filled
    """
    require_live(session, "generate round")
    current = session.current_round
    if current is not None and current.is_started:
        raise IllegalStateTransitionException(
            f"Round {current.round_number} is in progress; complete it first"
        )
    assigner = RoundAssigner(session, players, paused_players, config, rng)
    return assigner.generate_round_assignment()


def apply_next_round(session: Session, assignment: RoundAssignment) -> Session:
    """Append a new Pending round built from an assignment.

    Raises:
        IllegalStateTransitionException: If the session is not Live or the
            current round is not completed
        ValidationException: If the round number does not follow the last round
    """
    require_live(session, "open round")
    current = session.current_round
    if current is not None and not current.is_completed:
        raise IllegalStateTransitionException(
            f"Round {current.round_number} is still {current.state.value}"
        )
    expected = session.current_round_number + 1
    if assignment.round_number != expected:
        raise ValidationException(
            f"Expected round {expected}, got round {assignment.round_number}"
        )

    updated = copy.deepcopy(session)
    new_round = Round(
        round_number=assignment.round_number,
        games=_build_games(updated, assignment, (c.id for c in updated.courts)),
        sitting_out_ids=list(assignment.sitting_out_ids),
        state=RoundState.PENDING,
    )
    updated.live_data.rounds.append(new_round)
    updated.touch()
    logger.info(f"Session {session.id}: round {new_round.round_number} is pending")
    return updated


def update_current_round(session: Session, assignment: RoundAssignment) -> Session:
    """Replace the Pending round's layout, keeping its number and state.

    Raises:
        IllegalStateTransitionException: If the session is not Live or the
            current round is not Pending
    """
    require_live(session, "update round")
    current = require_round(session, RoundState.PENDING, "update round")
    if assignment.round_number != current.round_number:
        raise ValidationException(
            f"Assignment is for round {assignment.round_number}, "
            f"pending round is {current.round_number}"
        )

    updated = copy.deepcopy(session)
    pending = updated.current_round
    pending.games = _build_games(updated, assignment, (c.id for c in updated.courts))
    pending.sitting_out_ids = list(assignment.sitting_out_ids)
    updated.touch()
    logger.info(f"Session {session.id}: round {pending.round_number} reshuffled")
    return updated


def discard_pending_round(session: Session) -> Session:
    """Drop the Pending round so it can be generated again later."""
    require_live(session, "discard round")
    require_round(session, RoundState.PENDING, "discard round")
    updated = copy.deepcopy(session)
    dropped = updated.live_data.rounds.pop()
    updated.touch()
    logger.warning(f"Session {session.id}: pending round {dropped.round_number} discarded")
    return updated


# ========== Round Lifecycle ==========


def start_round(session: Session) -> Session:
    """Move the Pending round to Started and stamp every game's start time.

    Raises:
        IllegalStateTransitionException: If the session is not Live or no round is Pending
    """
    require_live(session, "start round")
    require_round(session, RoundState.PENDING, "start round")

    updated = copy.deepcopy(session)
    current = updated.current_round
    now = utc_now()
    for game in current.games:
        game.started_at = now
    current.state = RoundState.STARTED
    updated.touch()
    logger.info(f"Session {session.id}: round {current.round_number} started")
    return updated


def complete_round(
    session: Session, results: Optional[Results], updated_stats: List[PlayerStats]
) -> Session:
    """Move the Started round to Completed and store its stats.

    Args:
        session: Live session with a Started round
        results: Scores keyed by game id; games without an entry keep no score
        updated_stats: Output of :func:`update_stats_for_round` for this round

    Raises:
        IllegalStateTransitionException: If no round is Started
        InvalidResultException: If a result refers to a game outside the round
    """
    require_live(session, "complete round")
    require_round(session, RoundState.STARTED, "complete round")
    results = results or {}

    updated = copy.deepcopy(session)
    current = updated.current_round
    unknown = [game_id for game_id in results if current.game_by_id(game_id) is None]
    if unknown:
        raise InvalidResultException(
            f"Results for games not in round {current.round_number}: {unknown}"
        )

    now = utc_now()
    for game in current.games:
        if game.id in results:
            game.score = results[game.id]
        game.is_completed = True
        game.completed_at = now
    current.state = RoundState.COMPLETED

    updated.live_data.player_stats = sorted(
        copy.deepcopy(updated_stats), key=lambda s: s.player_id
    )
    updated.live_data.stats_through_round = max(
        updated.live_data.stats_through_round, current.round_number
    )
    updated.touch()
    logger.info(f"Session {session.id}: round {current.round_number} completed")
    return updated


def swap_players(session: Session, player1_id: str, player2_id: str) -> Session:
    """Exchange two players' places in the open round.

    Works on game slots and sit-out slots alike, without re-running the
    assigner. Swapping a fixed partner away from their partner is allowed
    but logged.

    Raises:
        InvalidSwapException: If both ids are the same
        PlayerNotFoundException: If either player is not in the round
        IllegalStateTransitionException: If the session is not Live or the
            round is already completed
    """
    require_live(session, "swap players")
    if player1_id == player2_id:
        raise InvalidSwapException(f"Cannot swap {player1_id} with themselves")
    current = session.current_round
    if current is None:
        raise RoundNotFoundException("Cannot swap players: session has no rounds")
    if current.is_completed:
        raise IllegalStateTransitionException(
            f"Cannot swap players: round {current.round_number} is completed"
        )
    in_round = set(current.player_ids)
    missing = [pid for pid in (player1_id, player2_id) if pid not in in_round]
    if missing:
        raise PlayerNotFoundException(
            f"Players not in round {current.round_number}: {missing}"
        )

    updated = copy.deepcopy(session)
    current = updated.current_round
    game1 = current.game_for_player(player1_id)
    game2 = current.game_for_player(player2_id)

    if game1 is not None and game1 is game2:
        game1.serve_team, game1.receive_team = _swap_in_game(
            game1, player1_id, player2_id
        )
    else:
        for game, old_id, new_id in (
            (game1, player1_id, player2_id),
            (game2, player2_id, player1_id),
        ):
            if game is None:
                continue
            game.serve_team = game.serve_team.replace(old_id, new_id)
            game.receive_team = game.receive_team.replace(old_id, new_id)
        current.sitting_out_ids = [
            player2_id if pid == player1_id else player1_id if pid == player2_id else pid
            for pid in current.sitting_out_ids
        ]

    constraint = updated.partnership_constraint
    if constraint is not None:
        for pid in (player1_id, player2_id):
            partnership = constraint.partnership_for(pid)
            if partnership is None:
                continue
            partner_id = partnership.partner_of(pid)
            game = current.game_for_player(pid)
            if game is not None and partner_id not in game.team_of(pid):
                logger.warning(
                    f"Swap separates fixed partners {pid} and {partner_id} "
                    f"in round {current.round_number}"
                )

    updated.touch()
    logger.info(
        f"Session {session.id}: swapped {player1_id} and {player2_id} "
        f"in round {current.round_number}"
    )
    return updated


def _swap_in_game(game: Game, player1_id: str, player2_id: str):
    serve, receive = game.serve_team, game.receive_team
    if player1_id in serve and player2_id in serve:
        return serve, receive
    if player1_id in receive and player2_id in receive:
        return serve, receive
    if player1_id in serve:
        return serve.replace(player1_id, player2_id), receive.replace(
            player2_id, player1_id
        )
    return serve.replace(player2_id, player1_id), receive.replace(
        player1_id, player2_id
    )


# ========== Session Lifecycle ==========


def start_live_session(session: Session, players: PlayerDirectory) -> Session:
    """Take a New session Live.

    Raises:
        IllegalStateTransitionException: If the session is not New
        InsufficientPlayersException: If the roster cannot fill the active courts
    """
    if session.state is not SessionState.NEW:
        raise IllegalStateTransitionException(
            f"Cannot start a session that is {session.state.value}"
        )
    available = resolve_roster(session, players)
    validate_session_size_strict(len(available), len(session.active_courts))

    updated = _transition(session, SessionState.LIVE)
    updated.live_data = LiveData()
    return updated


def end_session(session: Session) -> Session:
    """Live -> Complete. Allowed with a round still open."""
    return _transition(session, SessionState.COMPLETE)


def archive_session(session: Session) -> Session:
    """Complete -> Archived."""
    return _transition(session, SessionState.ARCHIVED)


def restore_session(session: Session) -> Session:
    """Archived -> Complete."""
    if session.state is not SessionState.ARCHIVED:
        raise IllegalStateTransitionException(
            f"Only archived sessions can be restored, session is {session.state.value}"
        )
    return _transition(session, SessionState.COMPLETE)


# ========== Roster Edits ==========


def add_player(session: Session, player_id: str) -> Session:
    """Add a player to the roster.

    Raises:
        DuplicatePlayerException: If the player is already on the roster
        ValidationException: If the roster is full
    """
    _require_editable(session, "add player")
    if player_id in session.player_ids:
        raise DuplicatePlayerException(f"Player {player_id} is already in the session")
    if len(session.player_ids) >= MAX_PLAYERS_PER_SESSION:
        raise ValidationException(
            f"Maximum {MAX_PLAYERS_PER_SESSION} players allowed"
        )
    updated = copy.deepcopy(session)
    updated.player_ids.append(player_id)
    updated.touch()
    return updated


def remove_player(session: Session, player_id: str) -> Session:
    """Remove a player, their pause entry and any partnership they are in.

    Rounds already generated keep the player.

    Raises:
        PlayerNotFoundException: If the player is not on the roster
    """
    _require_editable(session, "remove player")
    if player_id not in session.player_ids:
        raise PlayerNotFoundException(f"Player {player_id} is not in the session")
    updated = copy.deepcopy(session)
    updated.player_ids.remove(player_id)
    updated.paused_player_ids = [
        pid for pid in updated.paused_player_ids if pid != player_id
    ]
    constraint = updated.partnership_constraint
    if constraint is not None:
        constraint.partnerships = [
            p for p in constraint.partnerships if not p.involves(player_id)
        ]
    updated.touch()
    return updated


def toggle_pause_player(session: Session, player_id: str) -> Session:
    """Pause an active player or resume a paused one.

    Raises:
        PlayerNotFoundException: If the player is not on the roster
    """
    _require_editable(session, "pause player")
    if player_id not in session.player_ids:
        raise PlayerNotFoundException(f"Player {player_id} is not in the session")
    updated = copy.deepcopy(session)
    if player_id in updated.paused_player_ids:
        updated.paused_player_ids.remove(player_id)
        logger.info(f"Session {session.id}: {player_id} resumed")
    else:
        updated.paused_player_ids.append(player_id)
        logger.info(f"Session {session.id}: {player_id} paused")
    updated.touch()
    return updated


# ========== Court Edits ==========


def add_court(session: Session, court: Court) -> Session:
    """Add a court.

    Raises:
        DuplicateCourtException: If a court with the same id exists
        ValidationException: If the session already has the maximum courts
    """
    _require_editable(session, "add court")
    if session.court_by_id(court.id) is not None:
        raise DuplicateCourtException(f"Court {court.id} already exists")
    if len(session.courts) >= MAX_COURTS:
        raise ValidationException(f"Maximum {MAX_COURTS} courts allowed")
    updated = copy.deepcopy(session)
    updated.courts.append(copy.deepcopy(court))
    updated.touch()
    return updated


def update_court(session: Session, court_id: str, **changes) -> Session:
    """Change a court's name, active flag or minimum rating.

    Raises:
        CourtNotFoundException: If the court does not exist
        ValueError: If an unknown field is given
    """
    _require_editable(session, "update court")
    unknown = set(changes) - _COURT_FIELDS
    if unknown:
        raise ValueError(f"Unknown court fields: {sorted(unknown)}")
    if session.court_by_id(court_id) is None:
        raise CourtNotFoundException(f"Court {court_id} not found")

    updated = copy.deepcopy(session)
    updated.courts = [
        dataclasses.replace(c, **changes) if c.id == court_id else c
        for c in updated.courts
    ]
    updated.touch()
    return updated


def remove_court(session: Session, court_id: str) -> Session:
    """Remove a court. Games already generated on it are kept.

    Raises:
        CourtNotFoundException: If the court does not exist
    """
    _require_editable(session, "remove court")
    if session.court_by_id(court_id) is None:
        raise CourtNotFoundException(f"Court {court_id} not found")
    updated = copy.deepcopy(session)
    updated.courts = [c for c in updated.courts if c.id != court_id]
    updated.touch()
    return updated


# ========== Partnerships ==========


def add_partnership(session: Session, player1_id: str, player2_id: str) -> Session:
    """Fix two roster players as partners.

    Raises:
        PlayerNotFoundException: If either player is not on the roster
        InvalidPartnershipException: If either player already has a partner
    """
    _require_editable(session, "add partnership")
    missing = [pid for pid in (player1_id, player2_id) if pid not in session.player_ids]
    if missing:
        raise PlayerNotFoundException(f"Players not in the session: {missing}")

    partnership = FixedPartnership(player1_id=player1_id, player2_id=player2_id)
    constraint = session.partnership_constraint
    if constraint is not None:
        for pid in (player1_id, player2_id):
            if constraint.partnership_for(pid) is not None:
                raise InvalidPartnershipException(
                    f"Player {pid} already has a fixed partner"
                )

    updated = copy.deepcopy(session)
    if updated.partnership_constraint is None:
        updated.partnership_constraint = PartnershipConstraint()
    updated.partnership_constraint.partnerships.append(partnership)
    updated.touch()
    logger.info(f"Session {session.id}: fixed partners {player1_id} & {player2_id}")
    return updated


def remove_partnership(session: Session, player_id: str) -> Session:
    """Remove the partnership a player belongs to.

    Raises:
        InvalidPartnershipException: If the player has no partnership
    """
    _require_editable(session, "remove partnership")
    constraint = session.partnership_constraint
    if constraint is None or not any(
        p.involves(player_id) for p in constraint.partnerships
    ):
        raise InvalidPartnershipException(f"Player {player_id} has no fixed partner")
    updated = copy.deepcopy(session)
    updated.partnership_constraint.partnerships = [
        p for p in updated.partnership_constraint.partnerships
        if not p.involves(player_id)
    ]
    updated.touch()
    return updated
