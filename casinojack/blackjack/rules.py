from typing import Any, Dict

from casinojack.blackjack.constants import DEALER_STAND_TOTAL
from casinojack.blackjack.hand import BlackjackHand, SplitHand
from casinojack.common.card import Card, Rank


class Rules:
    def __init__(
        self,
        blackjack_payout: float = 1.5,
        insurance_payout: float = 2.0,
        dealer_hit_soft_17: bool = True,
        allow_insurance: bool = True,
        allow_double_down: bool = True,
        allow_double_after_split: bool = True,
        allow_split: bool = True,
        allow_resplitting: bool = False,
        max_split_hands: int = 2,
        split_draw_max_attempts: int = 10,
        avoid_split_pairs_on_split_draw: bool = True,
        avoid_twenty_on_split_draw: bool = True,
        min_bet: float = 1.0,
        max_bet: float = 0.0,
    ):
        if blackjack_payout <= 0 or insurance_payout <= 0:
            raise ValueError("Payout ratios must be positive")
        if max_split_hands < 2:
            raise ValueError("max_split_hands must be at least 2")
        if split_draw_max_attempts < 1:
            raise ValueError("split_draw_max_attempts must be at least 1")
        if min_bet <= 0:
            raise ValueError("min_bet must be positive")
        if max_bet and max_bet < min_bet:
            raise ValueError("max_bet must be 0 (no limit) or at least min_bet")

        self.allow_double_after_split = allow_double_after_split
        self.allow_double_down = allow_double_down
        self.allow_insurance = allow_insurance
        self.allow_resplitting = allow_resplitting
        self.allow_split = allow_split
        self.avoid_split_pairs_on_split_draw = avoid_split_pairs_on_split_draw
        self.avoid_twenty_on_split_draw = avoid_twenty_on_split_draw
        self.blackjack_payout = blackjack_payout
        self.dealer_hit_soft_17 = dealer_hit_soft_17
        self.insurance_payout = insurance_payout
        self.max_bet = max_bet
        self.max_split_hands = max_split_hands
        self.min_bet = min_bet
        self.split_draw_max_attempts = split_draw_max_attempts

    def to_dict(self) -> Dict[str, Any]:
        """Convert rules to a dictionary for serialization."""
        return {
            "blackjack_payout": self.blackjack_payout,
            "insurance_payout": self.insurance_payout,
            "dealer_hit_soft_17": self.dealer_hit_soft_17,
            "allow_insurance": self.allow_insurance,
            "allow_double_down": self.allow_double_down,
            "allow_double_after_split": self.allow_double_after_split,
            "allow_split": self.allow_split,
            "allow_resplitting": self.allow_resplitting,
            "max_split_hands": self.max_split_hands,
            "split_draw_max_attempts": self.split_draw_max_attempts,
            "avoid_split_pairs_on_split_draw": self.avoid_split_pairs_on_split_draw,
            "avoid_twenty_on_split_draw": self.avoid_twenty_on_split_draw,
            "min_bet": self.min_bet,
            "max_bet": self.max_bet,
        }

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> "Rules":
        """Build rules from a config dict; unknown keys are rejected."""
        unknown = set(config) - set(cls().to_dict())
        if unknown:
            raise ValueError(f"Unknown rule options: {sorted(unknown)}")
        return cls(**config)

    def should_dealer_hit(self, hand: BlackjackHand) -> bool:
        """Determine if the dealer should hit based on the game rules."""
        score = hand.value
        is_soft_17 = score == DEALER_STAND_TOTAL and hand.is_soft
        return score < DEALER_STAND_TOTAL or (is_soft_17 and self.dealer_hit_soft_17)

    def is_valid_bet(self, amount: float) -> bool:
        if amount < self.min_bet:
            return False
        return not self.max_bet or amount <= self.max_bet

    def offers_insurance(self, up_card: Card) -> bool:
        return self.allow_insurance and up_card.rank == Rank.ACE

    def blackjack_payout_for(self, bet: float) -> float:
        """Total returned on a natural: the bet plus 3:2 profit by default."""
        return bet + bet * self.blackjack_payout

    def insurance_credit_for(self, stake: float) -> float:
        """Total returned on a winning insurance bet: the stake plus 2:1 profit."""
        return stake + stake * self.insurance_payout

    def can_split_more(self, current_num_hands: int) -> bool:
        """
        Check if another split is allowed given the number of hands in play.

        Without resplitting only the original hand may be split.
        """
        if not self.allow_split or current_num_hands >= self.max_split_hands:
            return False
        return current_num_hands == 1 or self.allow_resplitting

    def can_double_split_hand(self, hand: SplitHand) -> bool:
        return self.allow_double_down and self.allow_double_after_split and (
            hand.can_double_down
        )

    def rejects_split_draw(self, existing: Card, drawn: Card) -> bool:
        """
        Whether `drawn` should be redrawn as the second card of a hand seeded
        with `existing`: it would form another pair, or a 20 of two ten-valued
        cards.
        """
        if self.avoid_split_pairs_on_split_draw and existing.rank == drawn.rank:
            return True
        both_ten = existing.rank.is_ten_valued and drawn.rank.is_ten_valued
        if both_ten and (
            self.avoid_split_pairs_on_split_draw or self.avoid_twenty_on_split_draw
        ):
            return True
        return False

    def __repr__(self) -> str:
        return f"Rules({self.to_dict()!r})"

