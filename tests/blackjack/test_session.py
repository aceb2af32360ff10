"""
Money flow through TableSession: stakes debited when placed, payouts and
insurance credited once per round.
"""

import pytest

from casinojack.common.card import Rank
from casinojack.state.models import RoundState

R = Rank


def test_blackjack_round(make_session):
    session = make_session(R.ACE, R.NINE, R.KING, R.EIGHT)
    assert session.deal(50)
    assert session.game.state == RoundState.GAME_OVER
    assert session.balance == 1000 - 50 + 125


def test_losing_round(make_session):
    session = make_session(R.NINE, R.SIX, R.EIGHT, R.FIVE, R.TEN)
    session.deal(50)
    assert session.balance == 950
    session.stand()
    assert session.game.state == RoundState.GAME_OVER
    assert session.balance == 950


def test_split_round_credits_each_hand(make_session):
    session = make_session(R.EIGHT, R.TEN, R.EIGHT, R.NINE, R.THREE, R.KING, R.NINE)
    session.deal(50)
    assert session.split()
    assert session.balance == 900

    session.hit()
    session.stand()
    session.stand()

    assert session.game.state == RoundState.GAME_OVER
    assert session.balance == 1000


@pytest.mark.insurance
def test_insurance_pays_separately(make_session):
    session = make_session(R.TEN, R.ACE, R.NINE, R.KING)
    session.deal(50)
    assert session.respond_to_insurance(True)
    # 1000 - 50 bet - 25 insurance + 75 insurance credit; main bet lost
    assert session.balance == 1000


@pytest.mark.insurance
def test_insurance_and_push(make_session):
    session = make_session(R.ACE, R.ACE, R.KING, R.QUEEN)
    session.deal(50)
    session.respond_to_insurance(True)
    assert session.balance == 1000 - 50 - 25 + 50 + 75


@pytest.mark.insurance
def test_unaffordable_insurance_is_declined(make_session):
    session = make_session(R.TEN, R.ACE, R.NINE, R.KING, balance=60)
    session.deal(50)
    session.respond_to_insurance(True)
    assert session.game.insurance_bet == 0
    assert session.balance == 10


def test_double_down_debits_extra_stake(make_session):
    session = make_session(R.FIVE, R.TEN, R.SIX, R.SEVEN, R.NINE)
    session.deal(50)
    assert session.double_down()
    assert session.balance == 900 + 200


def test_double_down_without_funds(make_session):
    session = make_session(R.FIVE, R.TEN, R.SIX, R.SEVEN, R.NINE, balance=80)
    session.deal(50)
    assert not session.double_down()
    assert session.balance == 30
    assert session.game.current_bet == 50


def test_split_without_funds(make_session):
    session = make_session(R.EIGHT, R.TEN, R.EIGHT, R.NINE, balance=60)
    session.deal(50)
    assert not session.split()
    assert session.balance == 10
    assert not session.game.has_split


def test_bet_above_balance_rejected(make_session):
    session = make_session(R.TEN, R.TEN, R.NINE, R.NINE, balance=20)
    assert not session.place_bet(50)
    assert session.balance == 20
    assert session.game.current_bet == 0


def test_invalid_bet_not_debited(make_session):
    session = make_session(R.TEN, R.TEN, R.NINE, R.NINE, min_bet=10)
    assert not session.place_bet(5)
    assert session.balance == 1000


def test_settle_is_idempotent(make_session):
    session = make_session(R.ACE, R.NINE, R.KING, R.EIGHT)
    session.deal(50)
    balance = session.balance
    assert session.settle() == 0
    session.new_round()
    assert session.balance == balance
    assert session.game.state == RoundState.BETTING


def test_manual_dealer_steps(make_session):
    session = make_session(R.TEN, R.TWO, R.NINE, R.THREE, R.FOUR, R.TEN)
    session.auto_play_dealer = False
    session.deal(10)
    session.stand()
    assert session.game.state == RoundState.DEALER_TURN
    assert session.balance == 990

    assert not session.dealer_step()
    assert session.dealer_step()
    assert session.game.state == RoundState.GAME_OVER
    assert session.balance == 1000


def test_money_events(make_session, recorder):
    session = make_session(R.FIVE, R.TEN, R.SIX, R.SEVEN, R.NINE)
    session.deal(50)
    session.double_down()

    bets = recorder.of_type("MONEY_BET")
    assert [(b["reason"], b["amount"]) for b in bets] == [("bet", 50), ("double", 50)]
    payouts = recorder.of_type("MONEY_PAYOUT")
    assert [(p["reason"], p["amount"]) for p in payouts] == [("win", 200)]
    assert recorder.of_type("BANKROLL_UPDATED")[-1]["balance"] == 1100


def test_several_rounds(make_session):
    session = make_session(R.TEN, R.TEN, R.NINE, R.SEVEN)
    for _ in range(3):
        session.deal(10)
        session.stand()
        session.new_round()
    assert session.balance == 1030
    assert session.game.stats.player_wins == 3


def test_rebet_replaces_stake(make_session, recorder):
    session = make_session(R.TEN, R.TEN, R.NINE, R.SEVEN)
    assert session.place_bet(50)
    assert session.place_bet(20)
    assert session.balance + session.game.current_bet == 1000
    assert session.balance == 980

    refunds = recorder.of_type("MONEY_PAYOUT")
    assert [(p["reason"], p["amount"]) for p in refunds] == [("refund", 50)]

    session.deal()
    session.stand()
    assert session.balance == 1020
    assert session.session_stats.history[-1].wagered == 20


def test_refused_rebet_keeps_first_stake(make_session):
    session = make_session(R.TEN, R.TEN, R.NINE, R.SEVEN, balance=100)
    assert session.place_bet(50)
    assert not session.place_bet(150)
    assert session.balance == 50
    assert session.game.current_bet == 50


def test_new_round_refunds_undealt_bet(make_session):
    session = make_session(R.TEN, R.TEN, R.NINE, R.SEVEN)
    session.place_bet(50)
    assert session.new_round() == 0
    assert session.balance == 1000
    assert session.game.current_bet == 0


def test_new_round_mid_round_forfeits_stake(make_session, caplog):
    session = make_session(R.TEN, R.TEN, R.NINE, R.SEVEN)
    session.deal(50)
    assert session.game.state == RoundState.PLAYER_TURN

    with caplog.at_level("WARNING", logger="casinojack.session"):
        assert session.new_round() == 50
    assert "abandoned" in caplog.text
    assert session.balance == 950
    assert session.game.state == RoundState.BETTING
    record = session.session_stats.history[-1]
    assert record.results == ("forfeit",)
    assert record.net == -50


def test_dealer_step_before_dealer_turn(make_session, recorder):
    session = make_session(R.TEN, R.TEN, R.NINE, R.SEVEN)
    session.auto_play_dealer = False
    session.deal(10)

    assert not session.dealer_step()
    assert session.game.state == RoundState.PLAYER_TURN
    assert session.balance == 990
    assert recorder.of_type("ACTION_REJECTED")[-1]["action"] == "dealer_draw"
