"""Round assignment engine: roster, courts, partnerships, rotation and assignment."""

from courtpairing.pairing.court_filter import (
    eligible_players_for_court,
    group_fits_court,
    player_meets_court,
    rank_courts,
)
from courtpairing.pairing.partnerships import PartnershipContext, resolve_partnerships
from courtpairing.pairing.roster import require_minimum_roster, resolve_roster
from courtpairing.pairing.rotation import RotationResult, select_sitting_out
from courtpairing.pairing.round_assigner import (
    RoundAssigner,
    generate_round_assignment,
)

__all__ = [
    "PartnershipContext",
    "RotationResult",
    "RoundAssigner",
    "eligible_players_for_court",
    "generate_round_assignment",
    "group_fits_court",
    "player_meets_court",
    "rank_courts",
    "require_minimum_roster",
    "resolve_partnerships",
    "resolve_roster",
    "select_sitting_out",
]
