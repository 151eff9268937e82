from courtpairing.models.session.assignment_config import AssignmentConfig
from courtpairing.models.session.court import Court
from courtpairing.models.session.game import Game, GameAssignment, Score, Team
from courtpairing.models.session.partnership import (
    FixedPartnership,
    PartnershipConstraint,
)
from courtpairing.models.session.player_stats import PlayerStats
from courtpairing.models.session.round_data import Round, RoundAssignment
from courtpairing.models.session.session import LiveData, Session

__all__ = [
    "AssignmentConfig",
    "Court",
    "FixedPartnership",
    "Game",
    "GameAssignment",
    "LiveData",
    "PartnershipConstraint",
    "PlayerStats",
    "Round",
    "RoundAssignment",
    "Score",
    "Session",
    "Team",
]
