"""
Immutable snapshot models for the casinojack engine.

The engine mutates its own hands while a round is played and hands out frozen
snapshots of them for rendering, so a view can never change engine state.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from casinojack.blackjack.hand import BlackjackHand, SplitHand, hand_value
from casinojack.blackjack.settlement import HandOutcome
from casinojack.common.card import Card


class RoundState(Enum):
    """
    Stages of a round of blackjack.
    """

    BETTING = "betting"
    OFFERING_INSURANCE = "offering_insurance"
    PLAYER_TURN = "player_turn"
    DEALER_TURN = "dealer_turn"
    GAME_OVER = "game_over"


class InsuranceResult(Enum):
    """Insurance outcome for the round, independent of the main bet."""

    NOT_OFFERED = "not_offered"
    WON = "won"
    LOST = "lost"


@dataclass(frozen=True)
class HandSnapshot:
    """
    Immutable view of one player hand.

    Attributes:
        cards: Cards in the hand, in dealt order
        value: Best total
        bet: Stake riding on this hand
        status: Split-hand status, or None for the unsplit hand
        is_active: Whether this is the hand being played
    """

    cards: Tuple[Card, ...] = ()
    value: int = 0
    is_soft: bool = False
    is_blackjack: bool = False
    is_bust: bool = False
    can_split: bool = False
    bet: float = 0.0
    status: Optional[str] = None
    is_active: bool = False
    is_doubled_down: bool = False
    is_split_ace_hand: bool = False

    @classmethod
    def of(cls, hand: BlackjackHand, bet: float, is_active: bool = False) -> "HandSnapshot":
        extra: Dict[str, Any] = {}
        if isinstance(hand, SplitHand):
            extra = {
                "bet": hand.bet,
                "status": hand.status.value,
                "is_active": hand.is_active,
                "is_doubled_down": hand.is_doubled_down,
                "is_split_ace_hand": hand.is_split_ace_hand,
            }
        else:
            extra = {"bet": bet, "is_active": is_active}
        return cls(
            cards=tuple(hand.cards),
            value=hand.value,
            is_soft=hand.is_soft,
            is_blackjack=hand.is_blackjack,
            is_bust=hand.is_bust,
            can_split=hand.can_split,
            **extra,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "cards": [str(card) for card in self.cards],
            "value": self.value,
            "is_soft": self.is_soft,
            "is_blackjack": self.is_blackjack,
            "is_bust": self.is_bust,
            "bet": self.bet,
            "status": self.status,
            "is_active": self.is_active,
            "is_doubled_down": self.is_doubled_down,
            "is_split_ace_hand": self.is_split_ace_hand,
        }


@dataclass(frozen=True)
class DealerSnapshot:
    """
    Immutable view of the dealer's hand.

    Attributes:
        cards: Every card the dealer holds, hole card included
        hole_card_visible: False until the dealer's turn or the end of the round
    """

    cards: Tuple[Card, ...] = ()
    hole_card_visible: bool = False

    @property
    def visible_cards(self) -> Tuple[Card, ...]:
        if self.hole_card_visible:
            return self.cards
        return self.cards[:1]

    @property
    def visible_value(self) -> int:
        return hand_value(self.visible_cards)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "visible_cards": [str(card) for card in self.visible_cards],
            "visible_value": self.visible_value,
            "hole_card_visible": self.hole_card_visible,
            "card_count": len(self.cards),
        }


@dataclass(frozen=True)
class TableSnapshot:
    """
    Immutable representation of a round, as exposed for rendering.
    """

    state: RoundState = RoundState.BETTING
    dealer: DealerSnapshot = field(default_factory=DealerSnapshot)
    player_hands: Tuple[HandSnapshot, ...] = ()
    active_hand_index: int = 0
    has_split: bool = False
    current_bet: float = 0.0
    original_bet: float = 0.0
    insurance_bet: float = 0.0
    insurance_result: InsuranceResult = InsuranceResult.NOT_OFFERED
    result_message: str = ""
    payout: float = 0.0
    outcomes: Tuple[HandOutcome, ...] = ()
    cards_remaining: int = 0
    round_number: int = 0

    @property
    def active_hand(self) -> Optional[HandSnapshot]:
        if not 0 <= self.active_hand_index < len(self.player_hands):
            return None
        return self.player_hands[self.active_hand_index]

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the snapshot to a dictionary suitable for serialization.
        """
        return {
            "state": self.state.value,
            "round_number": self.round_number,
            "dealer": self.dealer.to_dict(),
            "player_hands": [hand.to_dict() for hand in self.player_hands],
            "active_hand_index": self.active_hand_index,
            "has_split": self.has_split,
            "current_bet": self.current_bet,
            "original_bet": self.original_bet,
            "insurance_bet": self.insurance_bet,
            "insurance_result": self.insurance_result.value,
            "result_message": self.result_message,
            "payout": self.payout,
            "outcomes": [outcome.to_dict() for outcome in self.outcomes],
            "cards_remaining": self.cards_remaining,
        }
