"""
The blackjack round engine.

BlackjackGame owns the shoe, the dealer's hand and the player's side of the
table (a single hand, or a SplitManager once the pair is split) and moves a
round through its stages:

    BETTING -> [OFFERING_INSURANCE] -> PLAYER_TURN -> DEALER_TURN -> GAME_OVER

Every action is an immediate, synchronous state change. Invalid actions are
rejected with a False return and leave the round untouched. The engine keeps no
balance: funds checks take the caller's balance as an argument, and payouts are
reported for a ledger to apply.
"""

import logging
from typing import List, Optional, Tuple

from casinojack.blackjack import constants
from casinojack.blackjack.action import Action
from casinojack.blackjack.errors import InvariantViolation
from casinojack.blackjack.hand import BlackjackHand, SplitHand
from casinojack.blackjack.rules import Rules
from casinojack.blackjack.settlement import (
    HandOutcome,
    HandResult,
    insurance_credit,
    settle_hand,
)
from casinojack.blackjack.split import SplitManager, SplitPhase
from casinojack.blackjack.stats import GameStats
from casinojack.common.card import Card, Rank
from casinojack.common.shoe import Shoe
from casinojack.events import EngineEventType, EventEmitter
from casinojack.state.models import (
    DealerSnapshot,
    HandSnapshot,
    InsuranceResult,
    RoundState,
    TableSnapshot,
)

logger = logging.getLogger("casinojack.game")


class BlackjackGame:
    """
    Engine for one seat of blackjack against the dealer.

    Args:
        rules: Table rules. Defaults to Rules().
        shoe: Card source; reset and reshuffled at the start of every round.
        emitter: Receives the engine's change events.
        stats: Outcome counters, called once per settled hand.
    """

    def __init__(
        self,
        rules: Optional[Rules] = None,
        shoe: Optional[Shoe] = None,
        emitter: Optional[EventEmitter] = None,
        stats: Optional[GameStats] = None,
    ):
        self.rules = rules or Rules()
        self.shoe = shoe or Shoe()
        self.emitter = emitter or EventEmitter()
        self.stats = stats if stats is not None else GameStats()
        self.round_number = 0
        self._state = RoundState.BETTING
        self._clear_round()
        self.current_bet = 0.0
        self.original_bet = 0.0

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def state(self) -> RoundState:
        return self._state

    @property
    def has_split(self) -> bool:
        return self.split_manager is not None

    @property
    def hole_card_visible(self) -> bool:
        return self._state in (RoundState.DEALER_TURN, RoundState.GAME_OVER)

    @property
    def player_hands(self) -> List[BlackjackHand]:
        if self.split_manager is not None:
            return list(self.split_manager.hands)
        return [self.player_hand]

    @property
    def active_hand_index(self) -> int:
        if self.split_manager is not None:
            return self.split_manager.active_hand_index
        return 0

    @property
    def active_hand(self) -> Optional[BlackjackHand]:
        if self._state != RoundState.PLAYER_TURN:
            return None
        if self.split_manager is not None:
            return self.split_manager.active_hand
        return self.player_hand

    def active_bet(self) -> float:
        """Stake on the hand being played."""
        hand = self.active_hand
        if isinstance(hand, SplitHand):
            return hand.bet
        return self.current_bet

    def dealer_value(self) -> int:
        """Dealer total as shown: the up-card alone while the hole card is hidden."""
        if self.hole_card_visible:
            return self.dealer_hand.value
        return self.dealer_hand.up_card_value()

    def insurance_amount(self) -> float:
        """Insurance stake: half the main bet."""
        return self.current_bet / 2

    def insurance_credit(self) -> float:
        """Amount owed on the insurance side bet; 0 unless it was taken and won."""
        return insurance_credit(
            self.insurance_result == InsuranceResult.WON, self.insurance_bet, self.rules
        )

    def can_player_act(self) -> bool:
        return self.active_hand is not None

    # ------------------------------------------------------------------
    # Betting and dealing
    # ------------------------------------------------------------------

    def place_bet(self, amount: float) -> bool:
        if self._state != RoundState.BETTING:
            return self._reject("bet", "bets are only taken while betting")
        if not self.rules.is_valid_bet(amount):
            return self._reject("bet", f"bet {amount} outside table limits")
        self.current_bet = float(amount)
        self.original_bet = float(amount)
        return True

    def start_new_round(self, bet: Optional[float] = None) -> bool:
        """
        Reshuffle, deal two cards each (player, dealer, player, dealer) and move
        to insurance, player turn or straight to settlement.
        """
        if bet is not None and not self.place_bet(bet):
            return False
        if self._state != RoundState.BETTING:
            return self._reject("deal", "a round is already in progress")
        if self.current_bet <= 0:
            return self._reject("deal", "no bet placed")

        self._clear_round()
        self.round_number += 1
        self.shoe.reset()
        self.emitter.emit(
            EngineEventType.SHUFFLE,
            {"round_number": self.round_number, "reason": "new_round"},
        )
        self.emitter.emit(
            EngineEventType.ROUND_STARTED,
            {"round_number": self.round_number, "bet": self.current_bet},
        )
        logger.info("Round %d started, bet %.2f", self.round_number, self.current_bet)

        for to_dealer in (False, True, False, True):
            card = self._draw()
            if to_dealer:
                self.dealer_hand.add_card(card)
                hole = len(self.dealer_hand) == 2
                self._emit_card(card, to_dealer=True, is_hole_card=hole)
            else:
                self.player_hand.add_card(card)
                self._emit_card(card, to_dealer=False)

        up_card = self.dealer_hand.cards[0]
        if self.rules.offers_insurance(up_card):
            self._set_state(RoundState.OFFERING_INSURANCE)
            self.emitter.emit(
                EngineEventType.INSURANCE_OFFERED,
                {"up_card": str(up_card), "amount": self.insurance_amount()},
            )
            return True

        if up_card.rank.is_ten_valued or up_card.rank == Rank.ACE:
            self.emitter.emit(EngineEventType.DEALER_PEEK, {"up_card": str(up_card)})
        self._check_for_blackjacks()
        return True

    def can_take_insurance(self, balance: float) -> bool:
        return (
            self._state == RoundState.OFFERING_INSURANCE
            and balance >= self.insurance_amount()
        )

    def respond_to_insurance(self, taken: bool) -> bool:
        """
        Resolve the insurance offer. The hole card is checked for blackjack; the
        insurance result is set from it whether or not the bet was taken.
        """
        if self._state != RoundState.OFFERING_INSURANCE:
            return self._reject(Action.INSURANCE, "insurance is not on offer")

        self.insurance_bet = self.insurance_amount() if taken else 0.0
        dealer_blackjack = self.dealer_hand.is_blackjack
        self.insurance_result = (
            InsuranceResult.WON if dealer_blackjack else InsuranceResult.LOST
        )
        self.emitter.emit(
            EngineEventType.INSURANCE_DECISION,
            {
                "taken": taken,
                "amount": self.insurance_bet,
                "result": self.insurance_result.value,
                "credit": self.insurance_credit(),
            },
        )
        self._check_for_blackjacks()
        return True

    def _check_for_blackjacks(self) -> None:
        dealer_blackjack = self.dealer_hand.is_blackjack
        if dealer_blackjack or self.player_hand.is_blackjack:
            self._finish_round(
                [settle_hand(self.player_hand, self.current_bet, self.dealer_hand, self.rules)]
            )
        else:
            self._set_state(RoundState.PLAYER_TURN)

    # ------------------------------------------------------------------
    # Player actions
    # ------------------------------------------------------------------

    def hit(self) -> bool:
        if self._state != RoundState.PLAYER_TURN:
            return self._reject(Action.HIT, "not the player's turn")
        if self.split_manager is not None:
            return self._split_hand_action(Action.HIT)

        card = self._draw()
        self.player_hand.add_card(card)
        self._emit_card(card, to_dealer=False)
        self._emit_action(Action.HIT, 0)
        if self.player_hand.is_bust:
            self.emitter.emit(
                EngineEventType.HAND_BUSTED,
                {"hand_index": 0, "value": self.player_hand.value},
            )
            self._finish_round(
                [settle_hand(self.player_hand, self.current_bet, self.dealer_hand, self.rules)]
            )
        return True

    def stand(self) -> bool:
        if self._state != RoundState.PLAYER_TURN:
            return self._reject(Action.STAND, "not the player's turn")
        if self.split_manager is not None:
            return self._split_hand_action(Action.STAND)

        self._emit_action(Action.STAND, 0)
        self._enter_dealer_turn()
        return True

    def can_double_down(self, balance: float) -> bool:
        if self._state != RoundState.PLAYER_TURN or not self.rules.allow_double_down:
            return False
        if self.split_manager is not None:
            hand = self.split_manager.active_hand
            return (
                hand is not None
                and self.split_manager.can_double_down_current_hand
                and balance >= hand.bet
            )
        return len(self.player_hand) == 2 and balance >= self.current_bet

    def double_down_amount(self) -> float:
        """Additional stake a double down on the active hand requires."""
        return self.active_bet()

    def double_down(self, balance: float) -> bool:
        """
        Double the active hand's bet, deal it exactly one card and stand it.
        The caller debits `double_down_amount()` from the ledger.
        """
        if not self.can_double_down(balance):
            return self._reject(Action.DOUBLE, "double down not allowed")
        if self.split_manager is not None:
            return self._split_hand_action(Action.DOUBLE)

        self.current_bet *= 2
        card = self._draw()
        self.player_hand.add_card(card)
        self._emit_card(card, to_dealer=False)
        self._emit_action(Action.DOUBLE, 0)
        if self.player_hand.is_bust:
            self.emitter.emit(
                EngineEventType.HAND_BUSTED,
                {"hand_index": 0, "value": self.player_hand.value},
            )
            self._finish_round(
                [settle_hand(self.player_hand, self.current_bet, self.dealer_hand, self.rules)]
            )
        else:
            self._enter_dealer_turn()
        return True

    def validate_split(self, balance: float) -> Tuple[bool, Optional[str]]:
        """Check whether the active hand may be split, with a reason when not."""
        if self._state != RoundState.PLAYER_TURN:
            return False, "Not the player's turn"
        if self.split_manager is None:
            if not self.rules.can_split_more(1) or not self.player_hand.can_split:
                return False, "Cannot split this hand"
        else:
            if self.split_manager.total_hands_count >= self.split_manager.max_hands:
                return False, f"Maximum {self.split_manager.max_hands} hands reached"
            if not self.split_manager.can_split_current_hand:
                return False, "Cannot split this hand"
        required = self.active_bet()
        if balance < required:
            return False, f"Insufficient funds for split (need ${required:.0f})"
        return True, None

    def can_split(self, balance: float) -> bool:
        return self.validate_split(balance)[0]

    def can_resplit(self) -> bool:
        return self.split_manager is not None and self.split_manager.can_split_current_hand

    def remaining_resplits(self) -> int:
        if self.split_manager is None:
            return self.rules.max_split_hands - 1
        return self.split_manager.remaining_splits

    def split_amount(self) -> float:
        """Additional stake a split requires."""
        return self.active_bet()

    def split(self, balance: float) -> bool:
        """
        Split the active pair into two hands, each dealt one new card. The
        caller debits `split_amount()` from the ledger.
        """
        ok, reason = self.validate_split(balance)
        if not ok:
            return self._reject(Action.SPLIT, reason)

        if self.split_manager is None:
            self.split_manager = SplitManager(self.rules)
            self.split_manager.create_initial_hand(self.player_hand.cards, self.current_bet)

        index = self.split_manager.active_hand_index
        first, second = self.split_manager.hands[index].cards
        new_card1 = self._draw_for_split_hand(first)
        new_card2 = self._draw_for_split_hand(second)
        if not self.split_manager.split_hand(index, new_card1, new_card2):
            raise InvariantViolation("Validated split was refused by the split manager")

        self.current_bet = self.split_manager.total_bet
        self._emit_card(new_card1, to_dealer=False, hand_index=index)
        self._emit_card(new_card2, to_dealer=False, hand_index=index + 1)
        self.emitter.emit(
            EngineEventType.HAND_SPLIT,
            {
                "hand_index": index,
                "hands": [
                    [str(card) for card in hand.cards] for hand in self.split_manager.hands
                ],
                "total_bet": self.split_manager.total_bet,
                "split_aces": self.split_manager.hands[index].is_split_ace_hand,
            },
        )
        self._emit_action(Action.SPLIT, index)
        if self.split_manager.split_phase == SplitPhase.DEALER_TURN:
            self._enter_dealer_turn()
        return True

    def _draw_for_split_hand(self, seed: Card) -> Card:
        """
        Draw the second card of a freshly split hand, redrawing a bounded number
        of times while the card would pair `seed` again or make a ten-ten 20.
        Rejected cards are burned.
        """
        attempts = self.rules.split_draw_max_attempts
        for attempt in range(1, attempts + 1):
            card = self._draw()
            if attempt == attempts or not self.rules.rejects_split_draw(seed, card):
                return card
            logger.debug("Burned %s drawn onto split %s", card, seed)
        raise InvariantViolation("split draw loop ended without a card")

    def _split_hand_action(self, action: Action) -> bool:
        manager = self.split_manager
        hand = manager.active_hand
        if hand is None or hand.is_complete:
            raise InvariantViolation("Player turn without a playable split hand")

        index = manager.active_hand_index
        card = None
        if action in (Action.HIT, Action.DOUBLE):
            card = self._draw()
        result = manager.process_action(action, index, card)
        if not result.success:
            raise InvariantViolation(f"Split manager refused a validated {action}")

        if action == Action.DOUBLE:
            self.current_bet = manager.total_bet
        if card is not None:
            self._emit_card(card, to_dealer=False, hand_index=index)
        self._emit_action(action, index)
        if hand.is_bust:
            self.emitter.emit(
                EngineEventType.HAND_BUSTED, {"hand_index": index, "value": hand.value}
            )
        if hand.is_complete:
            self.emitter.emit(
                EngineEventType.HAND_COMPLETED,
                {"hand_index": index, "status": hand.status.value, "value": hand.value},
            )
        if result.should_advance_hand and not manager.move_to_next_hand():
            self._enter_dealer_turn()
        return True

    # ------------------------------------------------------------------
    # Dealer
    # ------------------------------------------------------------------

    def _enter_dealer_turn(self) -> None:
        self._set_state(RoundState.DEALER_TURN)
        self.emitter.emit(
            EngineEventType.CARD_REVEALED,
            {
                "card": str(self.dealer_hand.cards[1]),
                "dealer_value": self.dealer_hand.value,
            },
        )

    def draw_one_dealer_card(self) -> bool:
        """
        Take one dealer step: draw a card if the dealer must hit.

        Returns True once the dealer is done; the round is then settled and in
        GAME_OVER. Callers animate the dealer by calling this repeatedly.
        Before the dealer's turn this is rejected and returns False.
        """
        if self._state == RoundState.GAME_OVER:
            return True
        if self._state != RoundState.DEALER_TURN:
            return self._reject("dealer_draw", "not the dealer's turn")
        if self.rules.should_dealer_hit(self.dealer_hand):
            card = self._draw()
            self.dealer_hand.add_card(card)
            self._emit_card(card, to_dealer=True)
            self.emitter.emit(
                EngineEventType.DEALER_ACTION,
                {"action": "hit", "card": str(card), "value": self.dealer_hand.value},
            )
        if self.rules.should_dealer_hit(self.dealer_hand):
            return False

        self.emitter.emit(
            EngineEventType.DEALER_ACTION,
            {"action": "stand", "value": self.dealer_hand.value},
        )
        self._settle_against_dealer()
        return True

    def play_dealer_turn(self) -> int:
        """Run the dealer to completion; returns the number of cards drawn."""
        if self._state != RoundState.DEALER_TURN:
            return 0
        before = len(self.dealer_hand)
        while not self.draw_one_dealer_card():
            pass
        return len(self.dealer_hand) - before

    def _settle_against_dealer(self) -> None:
        if self.split_manager is None:
            outcomes = [
                settle_hand(self.player_hand, self.current_bet, self.dealer_hand, self.rules)
            ]
        else:
            outcomes = [
                settle_hand(hand, hand.bet, self.dealer_hand, self.rules, hand_index=i)
                for i, hand in enumerate(self.split_manager.hands)
            ]
            self.split_manager.complete_all_hands()
        self._finish_round(outcomes)

    # ------------------------------------------------------------------
    # Settlement and reset
    # ------------------------------------------------------------------

    def _finish_round(self, outcomes: List[HandOutcome]) -> None:
        self.outcomes = outcomes
        self.payout = sum(outcome.payout for outcome in outcomes)
        if self.split_manager is None:
            self.result_message = outcomes[0].message
        else:
            self.result_message = "\n".join(
                f"Hand {o.hand_index + 1}: {self._split_message(o)}" for o in outcomes
            )

        if self.dealer_hand.is_blackjack:
            self.stats.record_dealer_blackjack()
        for outcome in outcomes:
            self._record_stats(outcome)
            self.emitter.emit(EngineEventType.HAND_RESULT, outcome.to_dict())

        self._set_state(RoundState.GAME_OVER)
        self.emitter.emit(
            EngineEventType.ROUND_ENDED,
            {
                "round_number": self.round_number,
                "payout": self.payout,
                "insurance_credit": self.insurance_credit(),
                "result_message": self.result_message,
            },
        )
        logger.info(
            "Round %d settled: %s (payout %.2f)",
            self.round_number,
            self.result_message.replace("\n", "; "),
            self.payout,
        )

    @staticmethod
    def _split_message(outcome: HandOutcome) -> str:
        if outcome.result == HandResult.BUST:
            return "Bust! Dealer wins"
        if outcome.result.is_loss:
            return constants.MSG_DEALER_WINS
        return outcome.message

    def _record_stats(self, outcome: HandOutcome) -> None:
        recorders = {
            HandResult.BLACKJACK: self.stats.record_player_blackjack,
            HandResult.WIN: self.stats.record_player_win,
            HandResult.PUSH: self.stats.record_push,
            HandResult.LOSE: self.stats.record_player_loss,
            HandResult.BUST: self.stats.record_player_bust,
        }
        recorders[outcome.result]()

    def reset(self) -> None:
        """Clear all round state and return to betting. Balances are untouched."""
        self._clear_round()
        self.current_bet = 0.0
        self.original_bet = 0.0
        self._set_state(RoundState.BETTING)

    def _clear_round(self) -> None:
        self.player_hand = BlackjackHand()
        self.dealer_hand = BlackjackHand()
        self.split_manager: Optional[SplitManager] = None
        self.insurance_bet = 0.0
        self.insurance_result = InsuranceResult.NOT_OFFERED
        self.result_message = ""
        self.payout = 0.0
        self.outcomes: List[HandOutcome] = []

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    def snapshot(self) -> TableSnapshot:
        """Frozen view of the round for rendering."""
        playing = self._state == RoundState.PLAYER_TURN
        if self.split_manager is not None:
            hands = tuple(HandSnapshot.of(hand, hand.bet) for hand in self.split_manager.hands)
        else:
            hands = (HandSnapshot.of(self.player_hand, self.current_bet, is_active=playing),)
        return TableSnapshot(
            state=self._state,
            dealer=DealerSnapshot(
                cards=tuple(self.dealer_hand.cards),
                hole_card_visible=self.hole_card_visible,
            ),
            player_hands=hands,
            active_hand_index=self.active_hand_index,
            has_split=self.has_split,
            current_bet=self.current_bet,
            original_bet=self.original_bet,
            insurance_bet=self.insurance_bet,
            insurance_result=self.insurance_result,
            result_message=self.result_message,
            payout=self.payout,
            outcomes=tuple(self.outcomes),
            cards_remaining=self.shoe.cards_remaining,
            round_number=self.round_number,
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _draw(self) -> Card:
        if self.shoe.is_empty():
            self.emitter.emit(
                EngineEventType.SHUFFLE,
                {"round_number": self.round_number, "reason": "exhausted"},
            )
        return self.shoe.draw()

    def _set_state(self, state: RoundState) -> None:
        previous = self._state
        self._state = state
        if previous != state:
            self.emitter.emit(
                EngineEventType.STATE_CHANGED,
                {"from": previous.value, "to": state.value},
            )

    def _emit_card(
        self,
        card: Card,
        to_dealer: bool,
        hand_index: int = 0,
        is_hole_card: bool = False,
    ) -> None:
        self.emitter.emit(
            EngineEventType.CARD_DEALT,
            {
                "card": None if is_hole_card else str(card),
                "is_dealer": to_dealer,
                "is_hole_card": is_hole_card,
                "hand_index": hand_index,
            },
        )

    def _emit_action(self, action: Action, hand_index: int) -> None:
        self.emitter.emit(
            EngineEventType.PLAYER_ACTION,
            {"action": action.value, "hand_index": hand_index},
        )

    def _reject(self, action, reason: Optional[str]) -> bool:
        name = action.value if isinstance(action, Action) else action
        logger.debug("Rejected %s: %s", name, reason)
        self.emitter.emit(
            EngineEventType.ACTION_REJECTED, {"action": name, "reason": reason}
        )
        return False
