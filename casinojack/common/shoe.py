import logging
import random
from typing import Callable, List, Optional

from casinojack.common.card import Card
from casinojack.common.deck import Deck

logger = logging.getLogger("casinojack.shoe")


class Shoe:
    def __init__(
        self,
        deck_factory: Optional[Callable[[], List[Card]]] = None,
        shuffle: bool = True,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize a Shoe instance holding one 52-card deck.

        The shoe is reset and reshuffled at the start of every round, so it is a
        single continuously reshuffled deck rather than a multi-deck shoe.

        :param deck_factory: Optional callable that returns the cards for one deck,
                             top card first. Used to stack the shoe in tests.
        :param shuffle: Whether to shuffle on every reset (default is True)
        :param rng: Optional random generator, for reproducible shuffles
        """
        self.deck_factory = deck_factory
        self.shuffle_on_reset = shuffle
        self.rng = rng or random.Random()
        self.cards: List[Card] = []
        self.next_card_index = 0
        self.reshuffle_count = 0
        self.reset()

    @classmethod
    def stacked(cls, cards: List[Card]) -> "Shoe":
        """Build an unshuffled shoe that deals `cards` in order after every reset."""
        return cls(deck_factory=lambda: list(cards), shuffle=False)

    def reset(self) -> None:
        """Gather all cards back into the shoe and shuffle."""
        if self.deck_factory:
            self.cards = list(self.deck_factory())
        else:
            self.cards = Deck().cards
        if not self.cards:
            raise ValueError("A shoe needs at least one card")
        if self.shuffle_on_reset:
            self.rng.shuffle(self.cards)
        self.next_card_index = 0

    def draw(self) -> Card:
        """
        Remove and return the top card.

        An exhausted shoe is reset and reshuffled before drawing, so a card is
        always returned.
        """
        if self.next_card_index >= len(self.cards):
            logger.warning(
                "Shoe exhausted after %d cards; reshuffling", self.next_card_index
            )
            self.reshuffle_count += 1
            self.reset()
        card = self.cards[self.next_card_index]
        self.next_card_index += 1
        return card

    @property
    def cards_remaining(self) -> int:
        return len(self.cards) - self.next_card_index

    def is_empty(self) -> bool:
        return self.cards_remaining == 0

    def __len__(self) -> int:
        return self.cards_remaining

    def __repr__(self) -> str:
        return f"Shoe(cards_remaining={self.cards_remaining})"
