"""
This module contains the Deck class, which represents a single deck of cards,
and `stacked_deck`, which builds a deck with a chosen set of cards on top.

>>> deck = Deck()
>>> deck.size
52
>>> deck.deal()
Card(Suit.HEARTS, Rank.ACE)
>>> deck.size
51
"""

import random
from typing import Iterable, List, Optional, Union

from casinojack.common.card import Card, Rank, Suit

SUITS = [Suit.HEARTS, Suit.DIAMONDS, Suit.CLUBS, Suit.SPADES]
RANKS = list(Rank)


class Deck:
    """
    A class representing a deck of cards. Cards are dealt from the top, which is
    the front of `cards`.
    """

    # Precompute the default deck
    _default_deck = [Card(suit, rank) for suit in SUITS for rank in RANKS]

    def __init__(self, cards: Optional[List[Card]] = None):
        """
        Initialize a Deck instance.

        :param cards: A list of Card instances to populate the deck (optional).
                      If not provided, a default deck will be constructed.
        """
        if cards is None:
            self.cards: List[Card] = self.initialize_default_deck()
        else:
            self.cards = list(cards)

    def initialize_default_deck(self) -> List[Card]:
        """
        Construct a default deck with all possible combinations of suits and ranks.

        :return: A list of Card instances representing the default deck.
        """
        return self._default_deck.copy()

    def shuffle(self, rng: Optional[random.Random] = None):
        """
        Shuffle the cards in the deck.

        :param rng: Optional random generator, for reproducible shuffles.
        """
        (rng or random).shuffle(self.cards)
        return self

    def deal(self, num_cards=1) -> Union[Card, List[Card]]:
        """
        Pop n cards from the top of the deck.

        :return: A card instance or a list of card instances.
        """
        if num_cards == 1:
            return self.cards.pop(0)
        return [self.cards.pop(0) for _ in range(num_cards)]

    @property
    def size(self) -> int:
        """
        Return the number of remaining cards in the deck.
        """
        return len(self.cards)

    def is_empty(self) -> bool:
        return len(self.cards) == 0

    def reset(self):
        """
        Reset the deck by recreating
        """
        self.cards = self.initialize_default_deck()

    def __repr__(self) -> str:
        return f"Deck({[repr(card) for card in self.cards]})"

    def __str__(self) -> str:
        return f"Deck of {len(self.cards)} cards"


def stacked_deck(top: Iterable[Union[Card, Rank]]) -> List[Card]:
    """
    Build a full 52-card deck whose first cards are `top`, in order.

    Entries of `top` may be Cards or bare Ranks; a bare Rank takes the first
    suit of that rank not used yet. The remaining cards follow in default
    order, so the result always holds every (suit, rank) pair exactly once.

    >>> deck = stacked_deck([Rank.ACE, Rank.KING])
    >>> deck[:2]
    [Card(Suit.HEARTS, Rank.ACE), Card(Suit.HEARTS, Rank.KING)]
    >>> len(set(deck))
    52
    """
    remaining = Deck().cards
    ordered = []
    for entry in top:
        if isinstance(entry, Card):
            card = entry
        else:
            card = next((c for c in remaining if c.rank == entry), None)
            if card is None:
                raise ValueError(f"No {entry.name} left to stack")
        try:
            remaining.remove(card)
        except ValueError as exc:
            raise ValueError(f"Card {card} already stacked") from exc
        ordered.append(card)
    return ordered + remaining
