import pytest

from casinojack.blackjack.bankroll import RoundRecord, SessionStats
from casinojack.common.card import Rank

R = Rank


def test_empty_session():
    stats = SessionStats(1000)
    summary = stats.get_session_stats()
    assert summary["rounds_played"] == 0
    assert summary["net_result"] == 0
    assert summary["mean_net_per_round"] == 0.0
    assert stats.confidence_interval() is None
    assert stats.to_frame().empty


def test_session_summary():
    stats = SessionStats(100)
    stats.record(RoundRecord(1, wagered=10, returned=20, balance=110, results=("win",)))
    stats.record(RoundRecord(2, wagered=10, returned=0, balance=100, results=("lose",)))
    stats.record(RoundRecord(3, wagered=20, returned=0, balance=80, results=("bust",)))

    summary = stats.get_session_stats()
    assert summary["rounds_played"] == 3
    assert summary["total_wagered"] == 40
    assert summary["net_result"] == -20
    assert summary["roi_percentage"] == pytest.approx(-50.0)
    assert summary["mean_net_per_round"] == pytest.approx(-20 / 3)
    assert summary["session_high"] == 110
    assert summary["session_low"] == 80
    assert summary["drawdown_percentage"] == pytest.approx(30 / 110 * 100)


def test_confidence_interval_brackets_mean():
    stats = SessionStats(100)
    for i, net in enumerate([10, -10, 20, -5]):
        stats.record(RoundRecord(i + 1, wagered=10, returned=10 + net, balance=100))
    interval = stats.confidence_interval(0.95)
    assert interval.lower < 3.75 < interval.upper
    assert interval.confidence == 0.95


def test_confidence_interval_without_spread():
    stats = SessionStats(100)
    stats.record(RoundRecord(1, wagered=10, returned=20, balance=110))
    stats.record(RoundRecord(2, wagered=10, returned=20, balance=120))
    interval = stats.confidence_interval()
    assert interval.lower == interval.upper == 10


def test_to_frame():
    stats = SessionStats(100)
    stats.record(RoundRecord(1, wagered=20, returned=40, balance=120, results=("win", "lose")))
    frame = stats.to_frame()
    assert list(frame.columns) == ["round_number", "wagered", "returned", "net", "balance", "results"]
    assert frame.loc[0, "net"] == 20
    assert frame.loc[0, "results"] == "win,lose"


def test_session_records_each_round(make_session):
    session = make_session(R.EIGHT, R.TEN, R.EIGHT, R.NINE, R.THREE, R.KING, R.NINE)
    session.deal(50)
    session.split()
    session.hit()
    session.stand()
    session.stand()

    (record,) = session.session_stats.history
    assert record.wagered == 100
    assert record.returned == 100
    assert record.net == 0
    assert record.results == ("win", "lose")
    assert record.balance == 1000


def test_session_records_insurance(make_session):
    session = make_session(R.TEN, R.ACE, R.NINE, R.KING)
    session.deal(50)
    session.respond_to_insurance(True)

    (record,) = session.session_stats.history
    assert record.wagered == 75
    assert record.returned == 75
