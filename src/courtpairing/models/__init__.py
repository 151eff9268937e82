from courtpairing.models.enums import RoundState, SessionState, TeamSide
from courtpairing.models.player import Player
from courtpairing.models.session import (
    AssignmentConfig,
    Court,
    FixedPartnership,
    Game,
    GameAssignment,
    LiveData,
    PartnershipConstraint,
    PlayerStats,
    Round,
    RoundAssignment,
    Score,
    Session,
    Team,
)

__all__ = [
    "AssignmentConfig",
    "Court",
    "FixedPartnership",
    "Game",
    "GameAssignment",
    "LiveData",
    "PartnershipConstraint",
    "Player",
    "PlayerStats",
    "Round",
    "RoundAssignment",
    "RoundState",
    "Score",
    "Session",
    "SessionState",
    "Team",
    "TeamSide",
]
