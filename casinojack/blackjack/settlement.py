"""
Settlement of finished hands.

Payouts are the total amount returned to the player for a hand. The stake was
taken when the bet was placed, so a loss settles at 0 rather than -bet.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict

from casinojack.blackjack import constants
from casinojack.blackjack.hand import BlackjackHand
from casinojack.blackjack.rules import Rules


class HandResult(Enum):
    BLACKJACK = "blackjack"
    WIN = "win"
    PUSH = "push"
    LOSE = "lose"
    BUST = "bust"

    @property
    def is_win(self) -> bool:
        return self in (HandResult.BLACKJACK, HandResult.WIN)

    @property
    def is_loss(self) -> bool:
        return self in (HandResult.LOSE, HandResult.BUST)


@dataclass(frozen=True)
class HandOutcome:
    """Outcome for a single hand."""

    hand_index: int
    result: HandResult
    bet: float
    payout: float
    message: str
    player_value: int
    dealer_value: int
    dealer_blackjack: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hand_index": self.hand_index,
            "result": self.result.value,
            "bet": self.bet,
            "payout": self.payout,
            "message": self.message,
            "player_value": self.player_value,
            "dealer_value": self.dealer_value,
            "dealer_blackjack": self.dealer_blackjack,
        }


def settle_hand(
    hand: BlackjackHand,
    bet: float,
    dealer_hand: BlackjackHand,
    rules: Rules,
    hand_index: int = 0,
) -> HandOutcome:
    """
    Compare one player hand against the dealer's final hand.

    Split hands report `is_blackjack` as False, so a two-card 21 after a split
    is paid as an ordinary win.
    """
    player_value = hand.value
    dealer_value = dealer_hand.value
    dealer_blackjack = dealer_hand.is_blackjack

    def outcome(result: HandResult, payout: float, message: str) -> HandOutcome:
        return HandOutcome(
            hand_index=hand_index,
            result=result,
            bet=bet,
            payout=payout,
            message=message,
            player_value=player_value,
            dealer_value=dealer_value,
            dealer_blackjack=dealer_blackjack,
        )

    if hand.is_blackjack:
        if dealer_blackjack:
            return outcome(HandResult.PUSH, bet, constants.MSG_PUSH)
        return outcome(
            HandResult.BLACKJACK,
            rules.blackjack_payout_for(bet),
            constants.MSG_BLACKJACK,
        )
    if hand.is_bust:
        return outcome(HandResult.BUST, 0.0, constants.MSG_BUST)
    if dealer_blackjack:
        return outcome(HandResult.LOSE, 0.0, constants.MSG_LOSE)
    if dealer_hand.is_bust or player_value > dealer_value:
        return outcome(HandResult.WIN, bet * 2, constants.MSG_WIN)
    if player_value < dealer_value:
        return outcome(HandResult.LOSE, 0.0, constants.MSG_LOSE)
    return outcome(HandResult.PUSH, bet, constants.MSG_PUSH)


def insurance_credit(dealer_has_blackjack: bool, stake: float, rules: Rules) -> float:
    """Amount credited for an insurance stake; 0 when the insurance loses."""
    if not dealer_has_blackjack or stake <= 0:
        return 0.0
    return rules.insurance_credit_for(stake)
