import pytest
from casinojack.common.card import Card, Suit, Rank


def test_card_initialization():
    card = Card(Suit.HEARTS, Rank.EIGHT)
    assert card.suit == Suit.HEARTS
    assert card.rank == Rank.EIGHT


def test_card_repr():
    card = Card(Suit.HEARTS, Rank.EIGHT)
    assert repr(card) == "Card(Suit.HEARTS, Rank.EIGHT)"


def test_card_str():
    assert str(Card(Suit.HEARTS, Rank.EIGHT)) == "8♥"
    assert str(Card(Suit.SPADES, Rank.ACE)) == "A♠"
    assert str(Card(Suit.CLUBS, Rank.TEN)) == "10♣"


def test_card_values():
    assert Card(Suit.HEARTS, Rank.ACE).value == 11
    assert Card(Suit.HEARTS, Rank.SEVEN).value == 7
    for rank in (Rank.TEN, Rank.JACK, Rank.QUEEN, Rank.KING):
        assert Card(Suit.DIAMONDS, rank).value == 10
        assert rank.is_ten_valued
    assert not Rank.NINE.is_ten_valued


def test_face_cards_are_distinct_ranks():
    assert Rank.JACK != Rank.TEN
    assert Card(Suit.HEARTS, Rank.KING) != Card(Suit.HEARTS, Rank.QUEEN)


def test_invalid_suit():
    with pytest.raises(TypeError):
        Card("Z", Rank.EIGHT)


def test_invalid_rank():
    with pytest.raises(TypeError):
        Card(Suit.HEARTS, "invalid")


def test_non_enum_rank():
    with pytest.raises(TypeError):
        Card(Suit.HEARTS, 8)


def test_card_is_immutable():
    card = Card(Suit.HEARTS, Rank.EIGHT)
    with pytest.raises(AttributeError):
        card.rank = Rank.NINE


def test_card_equality_and_hash():
    assert Card(Suit.HEARTS, Rank.EIGHT) == Card(Suit.HEARTS, Rank.EIGHT)
    assert Card(Suit.HEARTS, Rank.EIGHT) != Card(Suit.SPADES, Rank.EIGHT)
    assert len({Card(Suit.HEARTS, Rank.EIGHT), Card(Suit.HEARTS, Rank.EIGHT)}) == 1
