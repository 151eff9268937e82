"""Session state machine: pure operations, stats aggregation and the session manager."""

from courtpairing.controllers.session.session_service import (
    add_court,
    add_partnership,
    add_player,
    apply_next_round,
    archive_session,
    complete_round,
    discard_pending_round,
    end_session,
    generate_round_assignment,
    remove_court,
    remove_partnership,
    remove_player,
    restore_session,
    start_live_session,
    start_round,
    swap_players,
    toggle_pause_player,
    update_court,
    update_current_round,
)
from courtpairing.controllers.session.stats_aggregator import (
    Results,
    aggregate_round_stats,
    update_stats_for_round,
)
from courtpairing.controllers.session.session_manager import SessionManager

__all__ = [
    "Results",
    "SessionManager",
    "add_court",
    "add_partnership",
    "add_player",
    "aggregate_round_stats",
    "apply_next_round",
    "archive_session",
    "complete_round",
    "discard_pending_round",
    "end_session",
    "generate_round_assignment",
    "remove_court",
    "remove_partnership",
    "remove_player",
    "restore_session",
    "start_live_session",
    "start_round",
    "swap_players",
    "toggle_pause_player",
    "update_court",
    "update_current_round",
    "update_stats_for_round",
]
