import random

import pytest

from casinojack.common.card import Card, Rank, Suit
from casinojack.common.deck import Deck, stacked_deck
from casinojack.common.shoe import Shoe


def test_deck_initialization():
    deck = Deck()
    assert deck.size == 52
    assert len(set(deck.cards)) == 52


def test_deck_deal_from_top():
    deck = Deck()
    first = deck.cards[0]
    assert deck.deal() == first
    assert deck.size == 51
    assert len(deck.deal(3)) == 3
    assert deck.size == 48


def test_deck_shuffle_is_reproducible():
    a = Deck().shuffle(random.Random(7))
    b = Deck().shuffle(random.Random(7))
    assert a.cards == b.cards
    assert sorted(a.cards, key=repr) == sorted(Deck().cards, key=repr)


def test_deck_reset():
    deck = Deck()
    deck.deal(10)
    deck.reset()
    assert deck.size == 52


def test_stacked_deck_puts_cards_on_top():
    deck = stacked_deck([Rank.ACE, Card(Suit.SPADES, Rank.KING), Rank.ACE])
    assert deck[0] == Card(Suit.HEARTS, Rank.ACE)
    assert deck[1] == Card(Suit.SPADES, Rank.KING)
    assert deck[2] == Card(Suit.DIAMONDS, Rank.ACE)
    assert len(deck) == 52
    assert len(set(deck)) == 52


def test_stacked_deck_rejects_fifth_of_a_rank():
    with pytest.raises(ValueError):
        stacked_deck([Rank.EIGHT] * 5)


def test_stacked_deck_rejects_duplicate_card():
    card = Card(Suit.CLUBS, Rank.TWO)
    with pytest.raises(ValueError):
        stacked_deck([card, card])


def test_shoe_draws_in_stacked_order(stacked_shoe):
    shoe = stacked_shoe(Rank.TWO, Rank.THREE)
    assert shoe.draw().rank == Rank.TWO
    assert shoe.draw().rank == Rank.THREE
    assert shoe.cards_remaining == 50


def test_shoe_reset_restores_all_cards():
    shoe = Shoe(rng=random.Random(1))
    for _ in range(5):
        shoe.draw()
    shoe.reset()
    assert len(shoe) == 52


def test_empty_shoe_reshuffles_and_keeps_dealing(caplog):
    cards = [Card(Suit.HEARTS, Rank.TWO), Card(Suit.HEARTS, Rank.THREE)]
    shoe = Shoe.stacked(cards)
    shoe.draw()
    shoe.draw()
    assert shoe.is_empty()

    with caplog.at_level("WARNING", logger="casinojack.shoe"):
        card = shoe.draw()

    assert card == cards[0]
    assert shoe.reshuffle_count == 1
    assert "exhausted" in caplog.text
