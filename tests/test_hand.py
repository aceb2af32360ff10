from casinojack.common.card import Card, Rank, Suit
from casinojack.common.hand import Hand


def test_hand_add_card():
    hand = Hand()
    hand.add_card(Card(Suit.HEARTS, Rank.ACE))
    assert len(hand) == 1


def test_hand_cards_are_a_copy():
    hand = Hand([Card(Suit.HEARTS, Rank.ACE)])
    cards = hand.cards
    cards.append(Card(Suit.SPADES, Rank.TWO))
    assert len(hand) == 1


def test_hand_clear():
    hand = Hand([Card(Suit.HEARTS, Rank.ACE), Card(Suit.SPADES, Rank.TWO)])
    hand.clear()
    assert len(hand) == 0


def test_hand_repr_and_str():
    hand = Hand([Card(Suit.HEARTS, Rank.ACE), Card(Suit.SPADES, Rank.TEN)])
    assert repr(hand) == "Hand([Card(Suit.HEARTS, Rank.ACE), Card(Suit.SPADES, Rank.TEN)])"
    assert str(hand) == "A♥, 10♠"
