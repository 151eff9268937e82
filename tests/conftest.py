import random

import pytest

from courtpairing.controllers.session import SessionManager
from courtpairing.models.player import Player
from courtpairing.models.session import Court, FixedPartnership, PartnershipConstraint, Session


@pytest.fixture
def rng():
    return random.Random(20250501)


@pytest.fixture
def make_players():
    def _make(count, ratings=None, prefix="p"):
        players = []
        for i in range(count):
            rating = ratings[i] if ratings is not None else 3.5
            players.append(
                Player(id=f"{prefix}{i + 1}", name=f"Player {i + 1}", rating=rating)
            )
        return players

    return _make


@pytest.fixture
def make_courts():
    def _make(count, minimums=None):
        return [
            Court(
                id=f"c{i + 1}",
                name=f"Court {i + 1}",
                minimum_rating=minimums[i] if minimums is not None else None,
            )
            for i in range(count)
        ]

    return _make


@pytest.fixture
def make_session():
    def _make(players, courts, partnerships=None, paused=None, scoring=True):
        constraint = None
        if partnerships:
            constraint = PartnershipConstraint(
                partnerships=[FixedPartnership(a, b) for a, b in partnerships]
            )
        return Session(
            id="session_test",
            name="Tuesday Social",
            player_ids=[p.id for p in players],
            courts=courts,
            paused_player_ids=list(paused or []),
            partnership_constraint=constraint,
            scoring=scoring,
        )

    return _make


@pytest.fixture
def live_manager(make_players, make_courts):
    """Manager holding a Live session of nine players on two courts."""
    players = make_players(9)
    manager = SessionManager(players=players, rng=random.Random(7))
    session = manager.create_session(
        "Thursday Ladder",
        player_ids=[p.id for p in players],
        courts=make_courts(2),
        scoring=True,
    )
    manager.start_live_session(session.id)
    return manager, session.id
