"""
Blackjack hands: value calculation with soft/hard ace handling, and the split
hand variant that carries its own bet and lifecycle status.
"""

from enum import Enum
from typing import Iterable, Optional

from casinojack.blackjack.constants import (
    ACE_HIGH_BONUS,
    BLACKJACK_TOTAL,
    NATURAL_CARD_COUNT,
)
from casinojack.blackjack.errors import InvariantViolation
from casinojack.common.card import Card, Rank
from casinojack.common.hand import Hand


def hard_total(cards: Iterable[Card]) -> int:
    """Total with every ace counted as 1."""
    total = 0
    for card in cards:
        total += 1 if card.rank == Rank.ACE else card.value
    return total


def hand_value(cards: Iterable[Card]) -> int:
    """
    Best blackjack total for `cards`.

    Aces start at 1 and are promoted to 11 one at a time while the total stays
    at or under 21.
    """
    cards = list(cards)
    value = hard_total(cards)
    for _ in range(sum(1 for card in cards if card.rank == Rank.ACE)):
        if value + ACE_HIGH_BONUS <= BLACKJACK_TOTAL:
            value += ACE_HIGH_BONUS
        else:
            break
    return value


def is_pair(first: Card, second: Card) -> bool:
    """Two cards form a splittable pair: same rank, or both worth 10."""
    return first.rank == second.rank or (
        first.rank.is_ten_valued and second.rank.is_ten_valued
    )


class BlackjackHand(Hand):
    """A hand in the game of Blackjack."""

    @property
    def value(self) -> int:
        """Calculate the optimal value of the hand with ace handling."""
        return hand_value(self._cards)

    @property
    def is_soft(self) -> bool:
        """Determine if the hand is soft (contains an ace counted as 11)."""
        if not any(card.rank == Rank.ACE for card in self._cards):
            return False
        return hard_total(self._cards) + ACE_HIGH_BONUS <= BLACKJACK_TOTAL

    @property
    def is_blackjack(self) -> bool:
        """A natural: exactly two cards totalling 21."""
        return (
            len(self._cards) == NATURAL_CARD_COUNT and self.value == BLACKJACK_TOTAL
        )

    @property
    def is_bust(self) -> bool:
        return self.value > BLACKJACK_TOTAL

    @property
    def can_split(self) -> bool:
        """Check if the hand holds exactly one splittable pair."""
        return len(self._cards) == 2 and is_pair(self._cards[0], self._cards[1])

    def up_card_value(self) -> int:
        """Value of the first card alone, as shown while the hole card is hidden."""
        if not self._cards:
            return 0
        return self._cards[0].value


class HandStatus(Enum):
    """Lifecycle of a split hand."""

    PLAYING = "playing"
    STANDING = "standing"
    BUSTED = "busted"
    COMPLETE = "complete"


class SplitHand(BlackjackHand):
    """
    One of the hands created by splitting a pair.

    `is_split_ace_hand` is fixed when the hand is created from a split pair of
    aces and is never re-derived from the cards. A split-ace hand takes
    exactly one further card and is then complete, whatever its total.
    """

    def __init__(
        self,
        initial_card: Optional[Card] = None,
        bet: float = 0.0,
        is_split_ace_hand: bool = False,
    ):
        super().__init__([initial_card] if initial_card else None)
        self.bet = bet
        self.status = HandStatus.PLAYING
        self.is_active = False
        self.is_doubled_down = False
        self._is_split_ace_hand = is_split_ace_hand

    @property
    def is_split_ace_hand(self) -> bool:
        return self._is_split_ace_hand

    @property
    def is_blackjack(self) -> bool:
        """A split hand never holds a natural, even with two cards totalling 21."""
        return False

    @property
    def is_complete(self) -> bool:
        return self.status != HandStatus.PLAYING

    @property
    def can_double_down(self) -> bool:
        return (
            len(self._cards) == 2
            and self.status == HandStatus.PLAYING
            and not self._is_split_ace_hand
        )

    def add_card(self, card: Card) -> None:
        if self.status != HandStatus.PLAYING:
            raise InvariantViolation(
                f"Cannot deal {card} to a {self.status.value} split hand"
            )
        super().add_card(card)
        if self.is_bust:
            self.status = HandStatus.BUSTED
        elif self._is_split_ace_hand and len(self._cards) >= 2:
            self.status = HandStatus.COMPLETE

    def stand(self) -> None:
        if self.status == HandStatus.PLAYING:
            self.status = HandStatus.STANDING

    def double_down(self, card: Card) -> None:
        """Double the bet, take exactly one card and stand."""
        if not self.can_double_down:
            raise InvariantViolation("Double down on a hand that cannot double")
        self.bet *= 2
        self.is_doubled_down = True
        self.add_card(card)
        self.stand()

    def __repr__(self) -> str:
        return (
            f"SplitHand({self._cards!r}, bet={self.bet}, status={self.status.value})"
        )
