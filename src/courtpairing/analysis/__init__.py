from courtpairing.analysis.matchups import (
    PlayerMatchupStats,
    SessionMatchupData,
    format_player_stats,
    generate_session_matchup_data,
    get_player_matchups,
    get_player_pair_summary,
)

__all__ = [
    "PlayerMatchupStats",
    "SessionMatchupData",
    "format_player_stats",
    "generate_session_matchup_data",
    "get_player_matchups",
    "get_player_pair_summary",
]
