"""Round invariant checker.

Verifies a generated round against the rules every round must satisfy:
coverage of the eligible roster, four distinct players per game, active and
rating-appropriate courts, and intact fixed partnerships. Repeat partners are
reported as quality warnings.
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

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional

from courtpairing.constants import PLAYERS_PER_GAME
from courtpairing.models.session import AssignmentConfig, Round, Session
from courtpairing.pairing.court_filter import player_meets_court
from courtpairing.pairing.roster import PlayerDirectory, as_directory, resolve_roster
from courtpairing.utils import setup_logger

logger = setup_logger(__name__)


class CheckStatus(Enum):
    """Outcome of a single round check."""

    PASSED = "PASSED"
    FAILED = "FAILED"
    NOT_APPLICABLE = "NOT_APPLICABLE"


class Severity(Enum):
    """How serious a failed check is."""

    ABSOLUTE = "ABSOLUTE"  # The round is invalid
    QUALITY = "QUALITY"  # The round is valid but could be better


@dataclass
class CheckResult:
    """Result of one round check."""

    check: str
    status: CheckStatus
    severity: Severity = Severity.ABSOLUTE
    description: str = ""
    details: Dict[str, object] = field(default_factory=dict)

    @property
    def passed(self) -> bool:
        return self.status is not CheckStatus.FAILED


@dataclass
class ValidationReport:
    """All check results for one round."""

    round_number: int
    results: List[CheckResult] = field(default_factory=list)

    @property
    def violations(self) -> List[CheckResult]:
        return [
            r
            for r in self.results
            if r.status is CheckStatus.FAILED and r.severity is Severity.ABSOLUTE
        ]

    @property
    def quality_warnings(self) -> List[CheckResult]:
        return [
            r
            for r in self.results
            if r.status is CheckStatus.FAILED and r.severity is Severity.QUALITY
        ]

    @property
    def is_valid(self) -> bool:
        return not self.violations

    @property
    def summary(self) -> str:
        if self.is_valid:
            return (
                f"Round {self.round_number}: all checks passed; "
                f"{len(self.quality_warnings)} quality warning(s)"
            )
        failed = ", ".join(r.check for r in self.violations)
        return f"Round {self.round_number}: failed {failed}"


class RoundChecker:
    """Checks rounds against the assignment rules."""

    def __init__(self, config: Optional[AssignmentConfig] = None):
        self.config = config or AssignmentConfig()

    def check_round(
        self,
        round_data: Round,
        session: Session,
        players: PlayerDirectory,
        paused_player_ids: Optional[Iterable[str]] = None,
    ) -> ValidationReport:
        """Run every check on a round.

        Args:
            round_data: Round to check
            session: Session the round belongs to, with stats from earlier rounds
            players: Player directory
            paused_player_ids: Pause set in force when the round was generated;
                defaults to the session's current pause set

        Returns:
            ValidationReport
        """
        directory = as_directory(players)
        eligible_ids = [
            p.id for p in resolve_roster(session, directory, paused_player_ids)
        ]
        report = ValidationReport(round_number=round_data.round_number)
        report.results.extend(
            [
                self.check_coverage(round_data, eligible_ids),
                self.check_distinct_players(round_data),
                self.check_courts_active(round_data, session),
                self.check_court_ratings(round_data, session, directory),
                self.check_partnerships(round_data, session, eligible_ids),
                self.check_recent_partners(round_data, session),
            ]
        )
        logger.debug(report.summary)
        return report

    def check_coverage(self, round_data: Round, eligible_ids: List[str]) -> CheckResult:
        """Every eligible player appears exactly once, and nobody else appears."""
        counts = Counter(round_data.player_ids)
        duplicates = sorted(pid for pid, n in counts.items() if n > 1)
        missing = sorted(set(eligible_ids) - set(counts))
        unexpected = sorted(set(counts) - set(eligible_ids))
        if duplicates or missing or unexpected:
            return CheckResult(
                check="coverage",
                status=CheckStatus.FAILED,
                description="Eligible players not covered exactly once",
                details={
                    "duplicates": duplicates,
                    "missing": missing,
                    "unexpected": unexpected,
                },
            )
        return CheckResult(
            check="coverage",
            status=CheckStatus.PASSED,
            description=f"{len(eligible_ids)} players each placed once",
        )

    def check_distinct_players(self, round_data: Round) -> CheckResult:
        """Each game has four different players."""
        for game in round_data.games:
            if len(set(game.player_ids)) != PLAYERS_PER_GAME:
                return CheckResult(
                    check="distinct_players",
                    status=CheckStatus.FAILED,
                    description=f"Game {game.id} repeats a player",
                    details={"game_id": game.id, "players": game.player_ids},
                )
        return CheckResult(check="distinct_players", status=CheckStatus.PASSED)

    def check_courts_active(self, round_data: Round, session: Session) -> CheckResult:
        """Games sit on known, active courts, one game per court."""
        if not round_data.games:
            return CheckResult(check="courts_active", status=CheckStatus.NOT_APPLICABLE)
        court_counts = Counter(g.court_id for g in round_data.games)
        reused = sorted(cid for cid, n in court_counts.items() if n > 1)
        inactive = []
        for court_id in court_counts:
            court = session.court_by_id(court_id)
            if court is None or not court.is_active:
                inactive.append(court_id)
        if reused or inactive:
            return CheckResult(
                check="courts_active",
                status=CheckStatus.FAILED,
                description="Games on inactive, unknown or shared courts",
                details={"inactive": sorted(inactive), "reused": reused},
            )
        return CheckResult(check="courts_active", status=CheckStatus.PASSED)

    def check_court_ratings(
        self, round_data: Round, session: Session, directory: Dict
    ) -> CheckResult:
        """Every player on a rated court meets its minimum."""
        rated_games = [
            g
            for g in round_data.games
            if session.court_by_id(g.court_id) is not None
            and session.court_by_id(g.court_id).is_rated
        ]
        if not rated_games:
            return CheckResult(check="court_ratings", status=CheckStatus.NOT_APPLICABLE)

        below: List[str] = []
        for game in rated_games:
            court = session.court_by_id(game.court_id)
            for player_id in game.player_ids:
                player = directory.get(player_id)
                if player is None or not player_meets_court(player, court, self.config):
                    below.append(player_id)
        if below:
            return CheckResult(
                check="court_ratings",
                status=CheckStatus.FAILED,
                description="Players below a court's minimum rating",
                details={"players": sorted(below)},
            )
        return CheckResult(check="court_ratings", status=CheckStatus.PASSED)

    def check_partnerships(
        self, round_data: Round, session: Session, eligible_ids: List[str]
    ) -> CheckResult:
        """Fixed partners play together or sit out together."""
        constraint = session.partnership_constraint
        if constraint is None or not constraint.active:
            return CheckResult(check="partnerships", status=CheckStatus.NOT_APPLICABLE)

        eligible = set(eligible_ids)
        sitting_out = set(round_data.sitting_out_ids)
        broken: List[List[str]] = []
        for partnership in constraint.active:
            id1, id2 = partnership.player1_id, partnership.player2_id
            present = [pid for pid in (id1, id2) if pid in eligible]
            if not present:
                continue
            if len(present) == 1:
                if present[0] not in sitting_out:
                    broken.append([id1, id2])
                continue
            game = round_data.game_for_player(id1)
            if game is None:
                if id2 not in sitting_out:
                    broken.append([id1, id2])
            elif id2 not in game.team_of(id1):
                broken.append([id1, id2])

        if broken:
            return CheckResult(
                check="partnerships",
                status=CheckStatus.FAILED,
                description="Fixed partners separated",
                details={"partnerships": broken},
            )
        return CheckResult(check="partnerships", status=CheckStatus.PASSED)

    def check_recent_partners(self, round_data: Round, session: Session) -> CheckResult:
        """Flag teammates who also partnered in their previous game."""
        stats = session.stats_by_player()
        if not stats:
            return CheckResult(
                check="recent_partners",
                status=CheckStatus.NOT_APPLICABLE,
                severity=Severity.QUALITY,
            )
        constraint = session.partnership_constraint
        repeats: List[List[str]] = []
        for game in round_data.games:
            for team in game.teams:
                a, b = team.player_ids
                if constraint is not None and constraint.are_partners(a, b):
                    continue
                if stats.get(a) is not None and stats[a].last_partner_id == b:
                    repeats.append([a, b])
        if repeats:
            return CheckResult(
                check="recent_partners",
                status=CheckStatus.FAILED,
                severity=Severity.QUALITY,
                description=f"{len(repeats)} team(s) repeat last game's partnership",
                details={"teams": repeats},
            )
        return CheckResult(
            check="recent_partners", status=CheckStatus.PASSED, severity=Severity.QUALITY
        )
