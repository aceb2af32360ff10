"""
Split-hand management for one round.

The SplitManager owns the hands created by splitting the player's original
pair. It tracks which hand is being played, applies hit/stand/double to the
active hand and reports when play should move on. Card drawing stays with the
caller, so every card a hand receives is passed in explicitly.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence

from casinojack.blackjack.action import Action
from casinojack.blackjack.errors import InvariantViolation
from casinojack.blackjack.hand import HandStatus, SplitHand, is_pair
from casinojack.blackjack.rules import Rules
from casinojack.common.card import Card, Rank

logger = logging.getLogger("casinojack.split")


class SplitPhase(Enum):
    NONE = "none"
    PLAYING = "playing"
    DEALER_TURN = "dealer_turn"
    COMPLETED = "completed"


@dataclass(frozen=True)
class ActionResult:
    """Outcome of an action on a split hand."""

    success: bool = True
    should_advance_hand: bool = False


REJECTED = ActionResult(success=False, should_advance_hand=False)


class SplitManager:
    """
    Owns the split hands of a round.

    While the phase is PLAYING, `active_hand_index` points at a hand whose
    status is PLAYING. Once every hand is complete the phase moves to
    DEALER_TURN.
    """

    def __init__(self, rules: Optional[Rules] = None):
        self.rules = rules or Rules()
        self.hands: List[SplitHand] = []
        self.active_hand_index = 0
        self.split_phase = SplitPhase.NONE
        self.total_bet = 0.0

    @property
    def max_hands(self) -> int:
        return self.rules.max_split_hands

    def reset(self) -> None:
        self.hands = []
        self.active_hand_index = 0
        self.split_phase = SplitPhase.NONE
        self.total_bet = 0.0

    def create_initial_hand(self, cards: Sequence[Card], bet: float) -> SplitHand:
        """Seed the manager with the player's unsplit hand."""
        hand = SplitHand(bet=bet)
        for card in cards:
            hand.add_card(card)
        hand.is_active = True
        self.hands = [hand]
        self.active_hand_index = 0
        self.total_bet = bet
        self.split_phase = SplitPhase.PLAYING
        return hand

    @property
    def active_hand(self) -> Optional[SplitHand]:
        if self.split_phase != SplitPhase.PLAYING:
            return None
        if not 0 <= self.active_hand_index < len(self.hands):
            raise InvariantViolation(
                f"Active hand index {self.active_hand_index} outside "
                f"{len(self.hands)} hands"
            )
        return self.hands[self.active_hand_index]

    @property
    def has_split(self) -> bool:
        return len(self.hands) > 1

    @property
    def total_hands_count(self) -> int:
        return len(self.hands)

    @property
    def current_hand_number(self) -> int:
        return self.active_hand_index + 1

    @property
    def playing_hands_remaining(self) -> int:
        return sum(1 for hand in self.hands if not hand.is_complete)

    @property
    def remaining_splits(self) -> int:
        return max(0, self.max_hands - len(self.hands))

    def can_split_hand(self, index: int) -> bool:
        if self.split_phase != SplitPhase.PLAYING:
            return False
        if not 0 <= index < len(self.hands):
            return False
        if not self.rules.can_split_more(len(self.hands)):
            return False
        hand = self.hands[index]
        if hand.is_split_ace_hand or hand.status != HandStatus.PLAYING:
            return False
        cards = hand.cards
        return len(cards) == 2 and is_pair(cards[0], cards[1])

    @property
    def can_split_current_hand(self) -> bool:
        return self.can_split_hand(self.active_hand_index)

    @property
    def can_double_down_current_hand(self) -> bool:
        hand = self.active_hand
        return hand is not None and self.rules.can_double_split_hand(hand)

    def split_hand(self, index: int, new_card1: Card, new_card2: Card) -> bool:
        """
        Replace the pair at `index` with two hands, each holding one card of the
        pair plus one new card. Returns False without changing anything if the
        hand cannot be split.
        """
        if not self.can_split_hand(index):
            logger.debug("Split rejected for hand %d", index)
            return False

        original = self.hands[index]
        first, second = original.cards
        splitting_aces = first.rank == Rank.ACE

        hand1 = SplitHand(first, bet=original.bet, is_split_ace_hand=splitting_aces)
        hand1.add_card(new_card1)
        hand2 = SplitHand(second, bet=original.bet, is_split_ace_hand=splitting_aces)
        hand2.add_card(new_card2)

        self.hands[index : index + 1] = [hand1, hand2]
        self.total_bet = sum(hand.bet for hand in self.hands)
        for hand in self.hands:
            hand.is_active = False

        logger.info(
            "Split %s, %s into hands %s | %s",
            first,
            second,
            ", ".join(str(c) for c in hand1.cards),
            ", ".join(str(c) for c in hand2.cards),
        )
        self._activate_from(index)
        return True

    def process_action(
        self, action: Action, hand_index: int, card: Optional[Card] = None
    ) -> ActionResult:
        """Apply hit, stand or double down to the hand at `hand_index`."""
        if self.split_phase != SplitPhase.PLAYING:
            return REJECTED
        if not 0 <= hand_index < len(self.hands):
            return REJECTED
        hand = self.hands[hand_index]
        if hand.status != HandStatus.PLAYING:
            # Includes split-ace hands, which complete on their one extra card
            logger.debug("%s rejected: hand %d is %s", action, hand_index, hand.status)
            return REJECTED

        if action == Action.HIT:
            if card is None:
                return REJECTED
            hand.add_card(card)
            return ActionResult(success=True, should_advance_hand=hand.is_complete)

        if action == Action.STAND:
            hand.stand()
            return ActionResult(success=True, should_advance_hand=True)

        if action == Action.DOUBLE:
            if card is None or not self.rules.can_double_split_hand(hand):
                return REJECTED
            self.total_bet += hand.bet
            hand.double_down(card)
            return ActionResult(success=True, should_advance_hand=True)

        return REJECTED

    def move_to_next_hand(self) -> bool:
        """
        Deactivate the current hand and activate the next one still playing.

        Returns False once no hand is left to play; the phase is then
        DEALER_TURN and the caller runs the dealer.
        """
        if 0 <= self.active_hand_index < len(self.hands):
            self.hands[self.active_hand_index].is_active = False
        return self._activate_from(self.active_hand_index + 1)

    def _activate_from(self, start: int) -> bool:
        for index in range(start, len(self.hands)):
            if self.hands[index].status == HandStatus.PLAYING:
                self.active_hand_index = index
                self.hands[index].is_active = True
                self.split_phase = SplitPhase.PLAYING
                return True
        self.active_hand_index = max(0, min(self.active_hand_index, len(self.hands) - 1))
        self.split_phase = SplitPhase.DEALER_TURN
        return False

    def all_hands_complete(self) -> bool:
        return all(hand.is_complete for hand in self.hands)

    def complete_all_hands(self) -> None:
        """Close out any hand still playing and end the split phase."""
        for hand in self.hands:
            if hand.status == HandStatus.PLAYING:
                hand.status = HandStatus.COMPLETE
            hand.is_active = False
        self.split_phase = SplitPhase.COMPLETED
