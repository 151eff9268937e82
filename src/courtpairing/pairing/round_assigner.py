"""Round assignment: place players into doubles games across courts.

The assigner works court by court in ranking order (highest minimum rating
first). For each court it anchors on one rotation unit and scores every
group of four players that can be formed from a bounded window of further
candidates, preferring fresh partners and fresh opponents.
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

import random
from itertools import combinations
from typing import Dict, Iterable, List, Optional, Tuple, Union

from courtpairing.constants import PLAYERS_PER_GAME
from courtpairing.exceptions import GenerationEmptyException
from courtpairing.models.player import Player
from courtpairing.models.session import (
    AssignmentConfig,
    Court,
    GameAssignment,
    PlayerStats,
    RoundAssignment,
    Session,
    Team,
)
from courtpairing.pairing.court_filter import group_fits_court, rank_courts
from courtpairing.pairing.partnerships import resolve_partnerships
from courtpairing.pairing.roster import (
    PlayerDirectory,
    as_directory,
    require_minimum_roster,
)
from courtpairing.pairing.rotation import Unit, build_units, select_sitting_out
from courtpairing.utils import setup_logger

logger = setup_logger(__name__)

# (team_a, team_b, team_a_fixed, team_b_fixed)
Split = Tuple[Tuple[Player, Player], Tuple[Player, Player], bool, bool]


class RoundAssigner:
    """Builds one round's game assignments for a session.

    This class is responsible for:
    - Resolving the eligible roster and fixed partnerships
    - Delegating sit-out selection to the fair rotation selector
    - Filling courts with low-repeat groups of four
    - Choosing serve and receive sides
    """

    def __init__(
        self,
        session: Session,
        players: PlayerDirectory,
        paused_players: Optional[Iterable[Union[str, Player]]] = None,
        config: Optional[AssignmentConfig] = None,
        rng: Optional[random.Random] = None,
    ):
        """Initialize the assigner.

        Args:
            session: Session snapshot; never modified
            players: Player directory (list or id mapping)
            paused_players: Paused ids or players; defaults to the session's pause set
            config: Cost weights and court rules
            rng: Random source; a fresh unseeded one when omitted
        """
        self.session = session
        self.directory = as_directory(players)
        if paused_players is None:
            self.paused_ids = set(session.paused_player_ids)
        else:
            self.paused_ids = {
                p.id if isinstance(p, Player) else p for p in paused_players
            }
        self.config = config or AssignmentConfig()
        self.rng = rng or random.Random()
        self.stats: Dict[str, PlayerStats] = session.stats_by_player()

    @property
    def target_round_number(self) -> int:
        """Number of the round being generated.

        An open (Pending or Started) round is replaced in place; otherwise the
        next round number is used.
        """
        current = self.session.current_round
        if current is None:
            return 1
        if current.is_completed:
            return current.round_number + 1
        return current.round_number

    def generate_round_assignment(self) -> RoundAssignment:
        """Generate a full round assignment.

        Returns:
            RoundAssignment covering every eligible player exactly once

        Raises:
            InsufficientPlayersException: If fewer than four players are eligible
            GenerationEmptyException: If no court could be filled
        """
        eligible = require_minimum_roster(self.session, self.directory, self.paused_ids)
        context = resolve_partnerships(eligible, self.session.partnership_constraint)
        forced_ids = {p.id for p in context.forced_sit_out}
        pool = [p for p in eligible if p.id not in forced_ids]

        courts = rank_courts(self.session.courts)
        rotation = select_sitting_out(context, pool, len(courts), self.stats, self.rng)

        units = build_units(rotation.playing_pool, context)
        self.rng.shuffle(units)

        game_assignments: List[GameAssignment] = []
        for court in courts:
            if sum(len(u) for u in units) < PLAYERS_PER_GAME:
                break
            assignment, used = self._fill_court(court, units)
            if assignment is None:
                logger.warning(
                    "Court %s skipped: fewer than %d qualifying players",
                    court.name,
                    PLAYERS_PER_GAME,
                )
                continue
            units = [u for u in units if u not in used]
            game_assignments.append(assignment)

        leftover = [p.id for unit in units for p in unit]
        sitting_out_ids = [p.id for p in rotation.sitting_out] + leftover

        if not game_assignments:
            raise GenerationEmptyException(
                f"No court could be filled from {len(eligible)} eligible players"
            )

        round_number = self.target_round_number
        logger.info(
            "Generated round %d for session %s: %d game(s), %d sitting out",
            round_number,
            self.session.id,
            len(game_assignments),
            len(sitting_out_ids),
        )
        return RoundAssignment(
            round_number=round_number,
            game_assignments=game_assignments,
            sitting_out_ids=sitting_out_ids,
        )

    # ========== Court Filling ==========

    def _fill_court(
        self, court: Court, units: List[Unit]
    ) -> Tuple[Optional[GameAssignment], List[Unit]]:
        """Pick the cheapest group of four for a court.

        Returns:
            (assignment, units used), or (None, []) when the court cannot be filled
        """
        qualifying = [u for u in units if group_fits_court(u, court, self.config)]
        if sum(len(u) for u in qualifying) < PLAYERS_PER_GAME:
            return None, []

        if court.is_rated:
            # Stable sort keeps the shuffled order among equals
            qualifying.sort(
                key=lambda u: sum(self._court_count(p.id, court.id) for p in u)
            )

        anchor = qualifying[0]
        window = qualifying[1 : 1 + self.config.candidate_window]
        needed = PLAYERS_PER_GAME - len(anchor)

        candidates: List[Tuple[float, List[Unit], Split]] = []
        for size in range(1, needed + 1):
            for combo in combinations(window, size):
                if sum(len(u) for u in combo) != needed:
                    continue
                group = [anchor] + list(combo)
                for split in self._splits(group):
                    candidates.append((self._split_cost(split), group, split))

        if not candidates:
            # Anchor cannot complete a group of four within the window
            return self._fill_court(court, [u for u in units if u is not anchor])

        best_cost = min(c[0] for c in candidates)
        best = [c for c in candidates if c[0] == best_cost]
        _, group, split = self.rng.choice(best)
        team_a, team_b, a_fixed, b_fixed = split

        if a_fixed and not b_fixed:
            serve, receive = team_a, team_b
        elif b_fixed and not a_fixed:
            serve, receive = team_b, team_a
        elif self.rng.random() < 0.5:
            serve, receive = team_a, team_b
        else:
            serve, receive = team_b, team_a

        logger.debug(
            "Court %s: %s vs %s (cost %.2f)",
            court.name,
            "/".join(p.id for p in serve),
            "/".join(p.id for p in receive),
            best_cost,
        )
        assignment = GameAssignment(
            court_id=court.id,
            serve_team=Team(serve[0].id, serve[1].id),
            receive_team=Team(receive[0].id, receive[1].id),
        )
        return assignment, group

    def _splits(self, group: List[Unit]) -> List[Split]:
        """All ways to divide a group of four into two teams.

        A fixed pair is always kept together as one team.
        """
        pairs = [u for u in group if len(u) == 2]
        singles = [u[0] for u in group if len(u) == 1]
        if len(pairs) == 2:
            return [(pairs[0], pairs[1], True, True)]
        if len(pairs) == 1:
            return [(pairs[0], (singles[0], singles[1]), True, False)]
        a, b, c, d = singles
        return [
            ((a, b), (c, d), False, False),
            ((a, c), (b, d), False, False),
            ((a, d), (b, c), False, False),
        ]

    # ========== Cost Model ==========

    def _split_cost(self, split: Split) -> float:
        """Weighted count of repeated partners and opponents for a split."""
        team_a, team_b, a_fixed, b_fixed = split
        partner_repeats = 0
        recent_repeats = 0
        for team, fixed in ((team_a, a_fixed), (team_b, b_fixed)):
            if fixed:
                continue
            partner_repeats += self._partner_count(team[0].id, team[1].id)
            if self._last_partner(team[0].id) == team[1].id:
                recent_repeats += 1

        opponent_repeats = 0
        for a in team_a:
            for b in team_b:
                opponent_repeats += self._opponent_count(a.id, b.id)
                if b.id in self._last_opponents(a.id):
                    recent_repeats += 1

        return (
            self.config.partner_weight * partner_repeats
            + self.config.opponent_weight * opponent_repeats
            + self.config.recency_penalty * recent_repeats
        )

    def _partner_count(self, player_id: str, other_id: str) -> int:
        stats = self.stats.get(player_id)
        return stats.partner_count(other_id) if stats else 0

    def _opponent_count(self, player_id: str, other_id: str) -> int:
        stats = self.stats.get(player_id)
        return stats.opponent_count(other_id) if stats else 0

    def _court_count(self, player_id: str, court_id: str) -> int:
        stats = self.stats.get(player_id)
        return stats.court_count(court_id) if stats else 0

    def _last_partner(self, player_id: str) -> Optional[str]:
        stats = self.stats.get(player_id)
        return stats.last_partner_id if stats else None

    def _last_opponents(self, player_id: str) -> List[str]:
        stats = self.stats.get(player_id)
        return stats.last_opponent_ids if stats else []


def generate_round_assignment(
    session: Session,
    players: PlayerDirectory,
    paused_players: Optional[Iterable[Union[str, Player]]] = None,
    config: Optional[AssignmentConfig] = None,
    rng: Optional[random.Random] = None,
) -> RoundAssignment:
    """Generate a round assignment for a session.

    Convenience wrapper around :class:`RoundAssigner`.
    """
    assigner = RoundAssigner(session, players, paused_players, config, rng)
    return assigner.generate_round_assignment()
