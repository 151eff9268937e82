"""Head-to-head matchup analysis across a session's rounds."""

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

from dataclasses import asdict, dataclass
from itertools import combinations
from typing import Any, Dict, Iterable, List, Optional

from courtpairing.models.player import Player
from courtpairing.models.session import PlayerStats, Session
from courtpairing.pairing.roster import PlayerDirectory, as_directory


@dataclass
class PlayerMatchupStats:
    """How one player has fared with or against another.

    Attributes
    ----------
    partnered_count : int
        Games played on the same team.
    partnered_wins : int
    partnered_losses : int
    against_count : int
        Games played on opposite teams.
    against_wins : int
    against_losses : int
    same_court_count : int
        Games shared on a court, either side of the net.
    """

    partnered_count: int = 0
    partnered_wins: int = 0
    partnered_losses: int = 0
    against_count: int = 0
    against_wins: int = 0
    against_losses: int = 0
    same_court_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# player id -> other player id -> stats
SessionMatchupData = Dict[str, Dict[str, PlayerMatchupStats]]


def generate_session_matchup_data(session: Session) -> SessionMatchupData:
    """Tally every roster pair's history over all rounds of a session.

    Wins and losses are only counted when the session keeps score and the
    game is completed with a score. A tied score counts as a receive win.
    Players no longer on the roster are skipped.
    """
    result: SessionMatchupData = {
        player_id: {
            other_id: PlayerMatchupStats()
            for other_id in session.player_ids
            if other_id != player_id
        }
        for player_id in session.player_ids
    }

    def pair(a: str, b: str) -> Optional[PlayerMatchupStats]:
        return result.get(a, {}).get(b)

    for round_data in session.live_data.rounds:
        for game in round_data.games:
            for a, b in combinations(game.player_ids, 2):
                for x, y in ((a, b), (b, a)):
                    stats = pair(x, y)
                    if stats:
                        stats.same_court_count += 1

            for team in game.teams:
                for x, y in (team.player_ids, tuple(reversed(team.player_ids))):
                    stats = pair(x, y)
                    if stats:
                        stats.partnered_count += 1

            for s in game.serve_team.player_ids:
                for r in game.receive_team.player_ids:
                    for x, y in ((s, r), (r, s)):
                        stats = pair(x, y)
                        if stats:
                            stats.against_count += 1

            if not (session.scoring and game.score and game.is_completed):
                continue

            if game.score.serve_won:
                winners, losers = game.serve_team, game.receive_team
            else:
                winners, losers = game.receive_team, game.serve_team

            w1, w2 = winners.player_ids
            l1, l2 = losers.player_ids
            for x, y in ((w1, w2), (w2, w1)):
                stats = pair(x, y)
                if stats:
                    stats.partnered_wins += 1
            for x, y in ((l1, l2), (l2, l1)):
                stats = pair(x, y)
                if stats:
                    stats.partnered_losses += 1
            for w in winners.player_ids:
                for loser in losers.player_ids:
                    stats = pair(w, loser)
                    if stats:
                        stats.against_wins += 1
                    stats = pair(loser, w)
                    if stats:
                        stats.against_losses += 1

    return result


def get_player_pair_summary(
    matchup_data: SessionMatchupData, player1_id: str, player2_id: str
) -> Optional[PlayerMatchupStats]:
    """Return ``player1_id``'s record with or against ``player2_id``, if known."""
    return matchup_data.get(player1_id, {}).get(player2_id)


def get_player_matchups(
    matchup_data: SessionMatchupData, player_id: str
) -> Optional[Dict[str, PlayerMatchupStats]]:
    """Return every matchup record for one player, if known."""
    return matchup_data.get(player_id)


def format_player_stats(
    stats: Iterable[PlayerStats], players: PlayerDirectory
) -> str:
    """Render player stats as a plain-text table.

    Args:
        stats: Stats to render
        players: Player directory for names

    Returns:
        Table with one row per player, most games played first
    """
    directory = as_directory(players)
    rows: List[PlayerStats] = sorted(
        stats, key=lambda s: (-s.games_played, _name(directory, s.player_id))
    )
    header = (
        f"{'Player':<24} {'Played':>6} {'Sat':>4} {'Streak':>6} "
        f"{'For':>5} {'Agst':>5} {'Partners':>8} {'Fixed':>5}"
    )
    lines = [header, "-" * len(header)]
    for s in rows:
        lines.append(
            f"{_name(directory, s.player_id)[:24]:<24} {s.games_played:>6} "
            f"{s.games_sat_out:>4} {s.consecutive_games:>6} "
            f"{s.total_score:>5} {s.total_score_against:>5} "
            f"{len(s.partners):>8} {s.fixed_partnership_games:>5}"
        )
    return "\n".join(lines)


def _name(directory: Dict[str, Player], player_id: str) -> str:
    player = directory.get(player_id)
    return player.name if player else player_id
