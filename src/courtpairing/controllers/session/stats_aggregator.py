"""Stats aggregation: fold a finished round into per-player history.

The stats produced here drive the next round's fairness: who sits out, who
partners whom and who faces whom.
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
from typing import Dict, Iterable, List, Optional

from courtpairing.models.player import Player
from courtpairing.models.session import (
    Game,
    PartnershipConstraint,
    PlayerStats,
    Round,
    Score,
    Session,
)
from courtpairing.pairing.roster import PlayerDirectory, as_directory
from courtpairing.utils import setup_logger

logger = setup_logger(__name__)

Results = Dict[str, Optional[Score]]


def aggregate_round_stats(
    round_data: Round,
    prior_stats: Iterable[PlayerStats],
    results: Optional[Results] = None,
    partnership_constraint: Optional[PartnershipConstraint] = None,
    players: Optional[PlayerDirectory] = None,
) -> List[PlayerStats]:
    """Fold one round into the running stats.

    Never mutates its inputs.

    Args:
        round_data: The finished round
        prior_stats: Stats before this round
        results: Scores keyed by game id; falls back to each game's own score
        partnership_constraint: Fixed partnerships, to count partnership games
        players: Player directory, to refresh average opponent rating

    Returns:
        Updated stats for every player seen so far, sorted by player id
    """
    stats: Dict[str, PlayerStats] = {
        s.player_id: copy.deepcopy(s) for s in prior_stats
    }

    for game in round_data.games:
        score = _score_for(game, results)
        for player_id in game.player_ids:
            player_stats = stats.setdefault(player_id, PlayerStats(player_id=player_id))
            _record_game(player_stats, game, score, partnership_constraint)

    for player_id in round_data.sitting_out_ids:
        player_stats = stats.setdefault(player_id, PlayerStats(player_id=player_id))
        player_stats.games_sat_out += 1
        player_stats.consecutive_games = 0

    if players is not None:
        directory = as_directory(players)
        for player_id in round_data.player_ids:
            stats[player_id].average_rating = _average_opponent_rating(
                stats[player_id], directory
            )

    logger.info(
        f"Aggregated round {round_data.round_number}: "
        f"{len(round_data.playing_ids)} playing, "
        f"{len(round_data.sitting_out_ids)} sitting out"
    )
    return [stats[player_id] for player_id in sorted(stats)]


def update_stats_for_round(
    session: Session,
    results: Optional[Results] = None,
    players: Optional[PlayerDirectory] = None,
) -> List[PlayerStats]:
    """Aggregate the session's current round into its stats.

    Idempotent: a round already folded in (``stats_through_round`` at or past
    its number) returns the existing stats unchanged.

    Args:
        session: Session whose current round is aggregated
        results: Scores keyed by game id
        players: Player directory, to refresh average opponent rating

    Returns:
        Updated stats, sorted by player id
    """
    current = session.current_round
    live_data = session.live_data
    if current is None:
        return list(live_data.player_stats)

    if live_data.stats_through_round >= current.round_number:
        logger.warning(
            f"Stats already include round {current.round_number}, not re-aggregating"
        )
        return list(live_data.player_stats)

    return aggregate_round_stats(
        current,
        live_data.player_stats,
        results,
        session.partnership_constraint,
        players,
    )


def _score_for(game: Game, results: Optional[Results]) -> Optional[Score]:
    if results is not None and game.id in results:
        return results[game.id]
    return game.score


def _record_game(
    player_stats: PlayerStats,
    game: Game,
    score: Optional[Score],
    partnership_constraint: Optional[PartnershipConstraint],
) -> None:
    player_id = player_stats.player_id
    partner_id = game.team_of(player_id).partner_of(player_id)
    opponent_ids = list(game.opponents_of(player_id).player_ids)

    player_stats.games_played += 1
    player_stats.consecutive_games += 1
    player_stats.partners[partner_id] = player_stats.partners.get(partner_id, 0) + 1
    for opponent_id in opponent_ids:
        player_stats.opponents[opponent_id] = (
            player_stats.opponents.get(opponent_id, 0) + 1
        )
    player_stats.games_on_court[game.court_id] = (
        player_stats.games_on_court.get(game.court_id, 0) + 1
    )
    player_stats.last_partner_id = partner_id
    player_stats.last_opponent_ids = opponent_ids

    if partnership_constraint and partnership_constraint.are_partners(
        player_id, partner_id
    ):
        player_stats.fixed_partnership_games += 1

    if score is not None:
        points_for, points_against = score.points_for(game.side_of(player_id))
        player_stats.total_score += points_for
        player_stats.total_score_against += points_against


def _average_opponent_rating(
    player_stats: PlayerStats, directory: Dict[str, Player]
) -> Optional[float]:
    weighted = 0.0
    games = 0
    for opponent_id, count in player_stats.opponents.items():
        opponent = directory.get(opponent_id)
        if opponent is None or opponent.rating is None:
            continue
        weighted += opponent.rating * count
        games += count
    if not games:
        return player_stats.average_rating
    return round(weighted / games, 2)
