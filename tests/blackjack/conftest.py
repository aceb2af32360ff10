"""
Pytest configuration and fixtures for blackjack tests.
"""

import pytest

from casinojack.blackjack.game import BlackjackGame
from casinojack.blackjack.ledger import BankrollLedger
from casinojack.blackjack.rules import Rules
from casinojack.blackjack.session import TableSession
from casinojack.blackjack.stats import GameStats


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "split: mark test as testing split scenarios")
    config.addinivalue_line(
        "markers", "insurance: mark test as testing insurance scenarios"
    )


@pytest.fixture
def make_game(stacked_shoe, emitter):
    """
    Factory for a game whose shoe deals `top` first, in deal order:
    player, dealer, player, dealer, then draws.
    """

    def make(*top, **rule_options):
        return BlackjackGame(
            rules=Rules(**rule_options),
            shoe=stacked_shoe(*top),
            emitter=emitter,
            stats=GameStats(),
        )

    return make


@pytest.fixture
def make_session(make_game):
    """Factory for a TableSession over a stacked game and a 1000.0 ledger."""

    def make(*top, balance=1000.0, **rule_options):
        game = make_game(*top, **rule_options)
        return TableSession(game, BankrollLedger(starting_balance=balance))

    return make
