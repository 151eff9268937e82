import random

import pytest

from courtpairing.controllers.session import session_service as service
from courtpairing.exceptions import (
    CourtNotFoundException,
    DuplicateCourtException,
    DuplicatePlayerException,
    IllegalStateTransitionException,
    InsufficientPlayersException,
    InvalidPartnershipException,
    InvalidResultException,
    InvalidSwapException,
    PlayerNotFoundException,
    RoundNotFoundException,
    ValidationException,
)
from courtpairing.models import Court, RoundState, Score, SessionState


@pytest.fixture
def players(make_players):
    return make_players(9)


@pytest.fixture
def live_session(players, make_courts, make_session):
    session = make_session(players, make_courts(2))
    session = service.start_live_session(session, players)
    assignment = service.generate_round_assignment(
        session, players, rng=random.Random(11)
    )
    return service.apply_next_round(session, assignment)


# ========== Session Lifecycle ==========


def test_session_lifecycle(players, make_courts, make_session):
    session = make_session(players, make_courts(2))
    live = service.start_live_session(session, players)
    assert live.state is SessionState.LIVE
    assert session.state is SessionState.NEW

    complete = service.end_session(live)
    archived = service.archive_session(complete)
    restored = service.restore_session(archived)
    assert complete.state is SessionState.COMPLETE
    assert archived.state is SessionState.ARCHIVED
    assert restored.state is SessionState.COMPLETE


def test_illegal_transitions_are_rejected(players, make_courts, make_session):
    session = make_session(players, make_courts(2))
    with pytest.raises(IllegalStateTransitionException):
        service.end_session(session)
    with pytest.raises(IllegalStateTransitionException):
        service.archive_session(session)
    with pytest.raises(IllegalStateTransitionException):
        service.restore_session(session)
    live = service.start_live_session(session, players)
    with pytest.raises(IllegalStateTransitionException):
        service.start_live_session(live, players)
    assert session.state is SessionState.NEW


def test_start_live_needs_enough_players(make_players, make_courts, make_session):
    players = make_players(7)
    session = make_session(players, make_courts(2))
    with pytest.raises(InsufficientPlayersException):
        service.start_live_session(session, players)


# ========== Rounds ==========


def test_first_round_is_pending(live_session):
    current = live_session.current_round
    assert current.round_number == 1
    assert current.state is RoundState.PENDING
    assert len(current.games) == 2
    assert len(current.sitting_out_ids) == 1
    assert all(g.id.startswith("game_1_") for g in current.games)


def test_round_lifecycle(live_session, players):
    started = service.start_round(live_session)
    assert started.current_round.is_started
    assert all(g.started_at is not None for g in started.current_round.games)
    assert live_session.current_round.is_pending

    game_id = started.current_round.games[0].id
    results = {game_id: Score(11, 7)}
    stats = service.update_stats_for_round(started, results, players)
    completed = service.complete_round(started, results, stats)

    current = completed.current_round
    assert current.is_completed
    assert current.game_by_id(game_id).score == Score(11, 7)
    assert all(g.is_completed and g.completed_at for g in current.games)
    assert completed.live_data.stats_through_round == 1
    assert len(completed.live_data.player_stats) == 9


def test_cannot_start_twice_or_complete_pending(live_session):
    with pytest.raises(IllegalStateTransitionException):
        service.complete_round(live_session, {}, [])
    started = service.start_round(live_session)
    with pytest.raises(IllegalStateTransitionException):
        service.start_round(started)


def test_complete_rejects_unknown_games(live_session):
    started = service.start_round(live_session)
    with pytest.raises(InvalidResultException):
        service.complete_round(started, {"game_99": Score(11, 0)}, [])
    assert started.current_round.is_started


def test_cannot_generate_while_round_in_progress(live_session, players):
    started = service.start_round(live_session)
    with pytest.raises(IllegalStateTransitionException):
        service.generate_round_assignment(started, players)


def test_apply_next_round_requires_completed_round(live_session, players):
    assignment = service.generate_round_assignment(live_session, players)
    with pytest.raises(IllegalStateTransitionException):
        service.apply_next_round(live_session, assignment)


def test_apply_next_round_checks_round_number(live_session, players):
    started = service.start_round(live_session)
    completed = service.complete_round(started, {}, [])
    assignment = service.generate_round_assignment(completed, players)
    assert assignment.round_number == 2
    assignment.round_number = 5
    with pytest.raises(ValidationException):
        service.apply_next_round(completed, assignment)


def test_update_current_round_keeps_number_and_state(live_session, players):
    assignment = service.generate_round_assignment(
        live_session, players, rng=random.Random(3)
    )
    updated = service.update_current_round(live_session, assignment)
    assert updated.current_round_number == 1
    assert updated.current_round.is_pending
    assert len(updated.live_data.rounds) == 1


def test_discard_pending_round(live_session):
    discarded = service.discard_pending_round(live_session)
    assert discarded.current_round is None
    with pytest.raises(RoundNotFoundException):
        service.discard_pending_round(discarded)


# ========== Swaps ==========


def test_swap_between_games(live_session):
    game1, game2 = live_session.current_round.games
    a = game1.serve_team.player1_id
    b = game2.receive_team.player2_id

    swapped = service.swap_players(live_session, a, b)

    new1, new2 = swapped.current_round.games
    assert b in new1.serve_team
    assert a in new2.receive_team
    assert sorted(swapped.current_round.player_ids) == sorted(
        live_session.current_round.player_ids
    )


def test_swap_with_sitting_out_player(live_session):
    resting = live_session.current_round.sitting_out_ids[0]
    playing = live_session.current_round.games[0].receive_team.player1_id

    swapped = service.swap_players(live_session, resting, playing)

    assert swapped.current_round.sitting_out_ids == [playing]
    assert resting in swapped.current_round.games[0].receive_team


def test_swap_across_the_net(live_session):
    game = live_session.current_round.games[0]
    a = game.serve_team.player1_id
    c = game.receive_team.player1_id

    swapped = service.swap_players(live_session, a, c)

    new = swapped.current_round.games[0]
    assert c in new.serve_team
    assert a in new.receive_team


def test_swap_errors(live_session, players):
    with pytest.raises(InvalidSwapException):
        service.swap_players(live_session, "p1", "p1")
    with pytest.raises(PlayerNotFoundException):
        service.swap_players(live_session, "p1", "nobody")
    started = service.start_round(live_session)
    completed = service.complete_round(started, {}, [])
    with pytest.raises(IllegalStateTransitionException):
        service.swap_players(completed, "p1", "p2")


def test_swap_allowed_while_started(live_session):
    started = service.start_round(live_session)
    game = started.current_round.games[0]
    swapped = service.swap_players(
        started, game.serve_team.player1_id, started.current_round.games[1].serve_team.player1_id
    )
    assert swapped.current_round.is_started


def test_swap_rejected_after_session_ends(live_session):
    resting = live_session.current_round.sitting_out_ids[0]
    playing = live_session.current_round.games[0].serve_team.player1_id
    complete = service.end_session(live_session)
    archived = service.archive_session(complete)

    for session in (complete, archived):
        with pytest.raises(IllegalStateTransitionException):
            service.swap_players(session, resting, playing)

    assert archived.current_round.sitting_out_ids == [resting]


# ========== Rounds Outside a Live Session ==========


def test_pending_round_frozen_once_session_ends(live_session, players):
    assignment = service.generate_round_assignment(
        live_session, players, rng=random.Random(4)
    )
    complete = service.end_session(live_session)

    with pytest.raises(IllegalStateTransitionException):
        service.generate_round_assignment(complete, players)
    with pytest.raises(IllegalStateTransitionException):
        service.update_current_round(complete, assignment)
    with pytest.raises(IllegalStateTransitionException):
        service.discard_pending_round(complete)
    assert complete.current_round.is_pending


def test_archived_session_gets_no_new_rounds(live_session, players):
    started = service.start_round(live_session)
    completed = service.complete_round(started, {}, [])
    assignment = service.generate_round_assignment(completed, players)
    archived = service.archive_session(service.end_session(completed))

    with pytest.raises(IllegalStateTransitionException):
        service.apply_next_round(archived, assignment)
    with pytest.raises(IllegalStateTransitionException):
        service.generate_round_assignment(archived, players)
    assert len(archived.live_data.rounds) == 1


def test_new_session_cannot_open_rounds(players, make_courts, make_session):
    session = make_session(players, make_courts(2))
    with pytest.raises(IllegalStateTransitionException):
        service.generate_round_assignment(session, players)


# ========== Roster, Courts and Partnerships ==========


def test_roster_edits(players, make_courts, make_session):
    session = make_session(players[:5], make_courts(1))

    session = service.add_player(session, "p6")
    assert session.player_ids[-1] == "p6"
    with pytest.raises(DuplicatePlayerException):
        service.add_player(session, "p6")

    session = service.toggle_pause_player(session, "p2")
    assert session.is_paused("p2")
    session = service.toggle_pause_player(session, "p2")
    assert not session.is_paused("p2")

    session = service.add_partnership(session, "p1", "p3")
    session = service.toggle_pause_player(session, "p1")
    session = service.remove_player(session, "p1")
    assert "p1" not in session.player_ids
    assert "p1" not in session.paused_player_ids
    assert session.partnership_constraint.partnerships == []
    with pytest.raises(PlayerNotFoundException):
        service.remove_player(session, "p1")


def test_court_edits(players, make_courts, make_session):
    session = make_session(players, make_courts(1))

    session = service.add_court(session, Court(id="c9", name="Court 9"))
    with pytest.raises(DuplicateCourtException):
        service.add_court(session, Court(id="c9", name="Again"))

    session = service.update_court(session, "c9", minimum_rating=4.0, is_active=False)
    court = session.court_by_id("c9")
    assert court.minimum_rating == 4.0
    assert not court.is_active
    with pytest.raises(ValueError):
        service.update_court(session, "c9", surface="clay")

    session = service.remove_court(session, "c9")
    assert session.court_by_id("c9") is None
    with pytest.raises(CourtNotFoundException):
        service.remove_court(session, "c9")


def test_partnership_edits(players, make_courts, make_session):
    session = make_session(players, make_courts(2))

    session = service.add_partnership(session, "p1", "p2")
    assert session.partnership_constraint.are_partners("p2", "p1")
    with pytest.raises(InvalidPartnershipException):
        service.add_partnership(session, "p2", "p3")
    with pytest.raises(PlayerNotFoundException):
        service.add_partnership(session, "p3", "stranger")

    session = service.remove_partnership(session, "p2")
    assert not session.partnership_constraint.are_partners("p1", "p2")
    with pytest.raises(InvalidPartnershipException):
        service.remove_partnership(session, "p2")


def test_completed_sessions_are_read_only(live_session):
    complete = service.end_session(live_session)
    with pytest.raises(IllegalStateTransitionException):
        service.add_player(complete, "p42")
    with pytest.raises(IllegalStateTransitionException):
        service.add_court(complete, Court(id="c7", name="Court 7"))
