import pytest

from casinojack.blackjack.errors import InvariantViolation
from casinojack.blackjack.hand import BlackjackHand, HandStatus, SplitHand, hand_value
from casinojack.common.card import Card, Rank, Suit

SUITS = list(Suit)


def make_hand(*ranks, cls=BlackjackHand):
    hand = cls()
    for i, rank in enumerate(ranks):
        hand.add_card(Card(SUITS[i % 4], rank))
    return hand


def card(rank, suit=Suit.SPADES):
    return Card(suit, rank)


@pytest.mark.parametrize(
    "ranks,value,soft",
    [
        ((Rank.ACE, Rank.ACE), 12, True),
        ((Rank.ACE, Rank.EIGHT), 19, True),
        ((Rank.ACE, Rank.SIX, Rank.NINE), 16, False),
        ((Rank.TEN, Rank.TEN, Rank.FIVE), 25, False),
        ((Rank.ACE, Rank.ACE, Rank.ACE, Rank.EIGHT), 21, True),
        ((Rank.KING, Rank.QUEEN), 20, False),
        ((Rank.ACE, Rank.SIX), 17, True),
    ],
)
def test_value_and_softness(ranks, value, soft):
    hand = make_hand(*ranks)
    assert hand.value == value
    assert hand.is_soft == soft


def test_hand_value_matches_aces_high_then_demote():
    # Promoting aces one at a time must agree with counting them all at 11
    # and demoting while over 21.
    for extra in range(2, 11):
        cards = [card(Rank.ACE), Card(Suit.HEARTS, Rank.ACE), card(Rank(extra))]
        total = 22 + min(extra, 10)
        aces = 2
        while total > 21 and aces:
            total -= 10
            aces -= 1
        assert hand_value(cards) == total


def test_bust():
    assert make_hand(Rank.TEN, Rank.TEN, Rank.FIVE).is_bust
    assert not make_hand(Rank.TEN, Rank.ACE).is_bust


def test_blackjack_requires_two_cards():
    assert make_hand(Rank.ACE, Rank.KING).is_blackjack
    three_card_21 = make_hand(Rank.ACE, Rank.FIVE, Rank.FIVE)
    assert three_card_21.value == 21
    assert not three_card_21.is_blackjack


@pytest.mark.parametrize(
    "ranks,expected",
    [
        ((Rank.EIGHT, Rank.EIGHT), True),
        ((Rank.TEN, Rank.KING), True),
        ((Rank.JACK, Rank.QUEEN), True),
        ((Rank.NINE, Rank.TEN), False),
        ((Rank.EIGHT, Rank.EIGHT, Rank.TWO), False),
    ],
)
def test_can_split(ranks, expected):
    assert make_hand(*ranks).can_split == expected


def test_up_card_value():
    assert make_hand(Rank.ACE, Rank.NINE).up_card_value() == 11
    assert BlackjackHand().up_card_value() == 0


class TestSplitHand:
    def test_split_hand_two_card_21_is_not_blackjack(self):
        hand = SplitHand(card(Rank.ACE), bet=10)
        hand.add_card(card(Rank.KING))
        assert hand.value == 21
        assert not hand.is_blackjack

    def test_split_ace_hand_completes_on_second_card(self):
        hand = SplitHand(card(Rank.ACE), bet=10, is_split_ace_hand=True)
        assert hand.status == HandStatus.PLAYING
        hand.add_card(card(Rank.FIVE))
        assert hand.status == HandStatus.COMPLETE
        assert hand.is_complete
        with pytest.raises(InvariantViolation):
            hand.add_card(card(Rank.TWO))

    def test_drawn_ace_does_not_make_a_split_ace_hand(self):
        hand = SplitHand(card(Rank.EIGHT), bet=10)
        hand.add_card(card(Rank.ACE))
        assert not hand.is_split_ace_hand
        assert hand.status == HandStatus.PLAYING

    def test_bust_sets_busted(self):
        hand = make_hand(Rank.TEN, Rank.SIX, cls=SplitHand)
        hand.add_card(Card(Suit.CLUBS, Rank.KING))
        assert hand.status == HandStatus.BUSTED

    def test_double_down(self):
        hand = SplitHand(card(Rank.FIVE), bet=25)
        hand.add_card(card(Rank.SIX))
        hand.double_down(card(Rank.TEN))
        assert hand.bet == 50
        assert hand.is_doubled_down
        assert hand.status == HandStatus.STANDING
        assert len(hand) == 3

    def test_split_ace_hand_cannot_double(self):
        hand = SplitHand(card(Rank.ACE), bet=25, is_split_ace_hand=True)
        assert not hand.can_double_down
        with pytest.raises(InvariantViolation):
            hand.double_down(card(Rank.TEN))

    def test_stand_only_from_playing(self):
        hand = make_hand(Rank.TEN, Rank.SIX, Rank.KING, cls=SplitHand)
        hand.stand()
        assert hand.status == HandStatus.BUSTED
