"""
Table session: one seat's engine wired to a ledger.

The engine reports stakes and payouts; the session moves the money. Stakes are
debited before the engine accepts them, and each finished round is credited
exactly once, insurance included.
"""

import logging
from typing import Optional

from casinojack.blackjack.bankroll import RoundRecord, SessionStats
from casinojack.blackjack.game import BlackjackGame
from casinojack.blackjack.ledger import Ledger
from casinojack.events import EngineEventType
from casinojack.state.models import RoundState, TableSnapshot

logger = logging.getLogger("casinojack.session")


class TableSession:
    """
    Drives a BlackjackGame against a Ledger.

    Args:
        game: The round engine.
        ledger: Balance the stakes are drawn from and payouts credited to.
        auto_play_dealer: Run the dealer to completion as soon as the player's
            turn ends. Turn this off to step the dealer with `dealer_step`.
    """

    def __init__(self, game: BlackjackGame, ledger: Ledger, auto_play_dealer: bool = True):
        self.game = game
        self.ledger = ledger
        self.auto_play_dealer = auto_play_dealer
        self._settled_round: Optional[int] = None
        self.session_stats = SessionStats(ledger.current_balance)

    @property
    def balance(self) -> float:
        return self.ledger.current_balance

    @property
    def is_settled(self) -> bool:
        return self._settled_round == self.game.round_number

    def snapshot(self) -> TableSnapshot:
        return self.game.snapshot()

    def place_bet(self, amount: float) -> bool:
        """
        Debit the stake and hand it to the engine. A stake already placed this
        round is refunded and replaced by the new one.
        """
        if self.game.state != RoundState.BETTING:
            return False
        if not self.game.rules.is_valid_bet(amount):
            return False

        previous = self.game.current_bet
        if previous:
            self.ledger.credit(previous)
        if not self.ledger.debit(amount):
            if previous:
                self.ledger.debit(previous)
            return False
        if not self.game.place_bet(amount):
            self.ledger.credit(amount)
            if previous:
                self.ledger.debit(previous)
            return False

        if previous:
            self._emit_money(EngineEventType.MONEY_PAYOUT, previous, "refund")
        self._emit_money(EngineEventType.MONEY_BET, amount, "bet")
        return True

    def deal(self, bet: Optional[float] = None) -> bool:
        """Optionally place `bet`, then start the round."""
        if bet is not None and not self.place_bet(bet):
            return False
        if not self.game.start_new_round():
            return False
        self._after_action()
        return True

    def respond_to_insurance(self, taken: bool) -> bool:
        """
        Answer the insurance offer. Insurance the balance cannot cover is
        treated as declined.
        """
        if self.game.state != RoundState.OFFERING_INSURANCE:
            return False
        if taken:
            amount = self.game.insurance_amount()
            if self.ledger.debit(amount):
                self._emit_money(EngineEventType.MONEY_BET, amount, "insurance")
            else:
                logger.debug("Insurance of %.2f not affordable; declined", amount)
                taken = False
        self.game.respond_to_insurance(taken)
        self._after_action()
        return True

    def hit(self) -> bool:
        if not self.game.hit():
            return False
        self._after_action()
        return True

    def stand(self) -> bool:
        if not self.game.stand():
            return False
        self._after_action()
        return True

    def double_down(self) -> bool:
        balance = self.ledger.current_balance
        amount = self.game.double_down_amount()
        if not self.game.can_double_down(balance):
            return False
        if not self.ledger.debit(amount):
            return False
        self.game.double_down(balance)
        self._emit_money(EngineEventType.MONEY_BET, amount, "double")
        self._after_action()
        return True

    def split(self) -> bool:
        balance = self.ledger.current_balance
        amount = self.game.split_amount()
        if not self.game.can_split(balance):
            return False
        if not self.ledger.debit(amount):
            return False
        self.game.split(balance)
        self._emit_money(EngineEventType.MONEY_BET, amount, "split")
        self._after_action()
        return True

    def dealer_step(self) -> bool:
        """
        Take one dealer step; returns True once the round is settled. False
        while the dealer still has to draw, and before the dealer's turn.
        """
        done = self.game.draw_one_dealer_card()
        if done:
            self.settle()
        return done

    def settle(self) -> float:
        """
        Credit the finished round's payouts and insurance to the ledger.

        Returns the amount credited; 0 if the round is not over or was already
        settled.
        """
        if self.game.state != RoundState.GAME_OVER or self.is_settled:
            return 0.0
        self._settled_round = self.game.round_number

        total = 0.0
        for outcome in self.game.outcomes:
            self.ledger.credit(outcome.payout)
            total += outcome.payout
            if outcome.payout:
                self._emit_money(
                    EngineEventType.MONEY_PAYOUT,
                    outcome.payout,
                    outcome.result.value,
                    hand_index=outcome.hand_index,
                )
        insurance = self.game.insurance_credit()
        if insurance:
            self.ledger.credit(insurance)
            total += insurance
            self._emit_money(EngineEventType.MONEY_PAYOUT, insurance, "insurance")

        self.session_stats.record(
            RoundRecord(
                round_number=self.game.round_number,
                wagered=self.game.current_bet + self.game.insurance_bet,
                returned=total,
                balance=self.ledger.current_balance,
                results=tuple(o.result.value for o in self.game.outcomes),
            )
        )
        self.game.emitter.emit(
            EngineEventType.BANKROLL_UPDATED,
            {"balance": self.ledger.current_balance, "credited": total},
        )
        logger.info(
            "Round %d credited %.2f; balance %.2f",
            self.game.round_number,
            total,
            self.ledger.current_balance,
        )
        return total

    def new_round(self) -> float:
        """
        Settle anything outstanding and return the table to betting.

        A bet placed but not yet dealt is refunded. A round left unfinished
        forfeits its stakes; the forfeited amount is returned.
        """
        self.settle()
        forfeited = self._abandon_round()
        self.game.reset()
        return forfeited

    def _abandon_round(self) -> float:
        state = self.game.state
        if state == RoundState.GAME_OVER:
            return 0.0
        if state == RoundState.BETTING:
            if self.game.current_bet:
                self.ledger.credit(self.game.current_bet)
                self._emit_money(
                    EngineEventType.MONEY_PAYOUT, self.game.current_bet, "refund"
                )
            return 0.0

        forfeited = self.game.current_bet + self.game.insurance_bet
        self.session_stats.record(
            RoundRecord(
                round_number=self.game.round_number,
                wagered=forfeited,
                returned=0.0,
                balance=self.ledger.current_balance,
                results=("forfeit",),
            )
        )
        self.game.emitter.emit(
            EngineEventType.BANKROLL_UPDATED,
            {"balance": self.ledger.current_balance, "credited": 0.0},
        )
        logger.warning(
            "Round %d abandoned in %s; %.2f forfeited",
            self.game.round_number,
            state.value,
            forfeited,
        )
        return forfeited

    def _after_action(self) -> None:
        if self.game.state == RoundState.DEALER_TURN and self.auto_play_dealer:
            self.game.play_dealer_turn()
        if self.game.state == RoundState.GAME_OVER:
            self.settle()

    def _emit_money(self, event_type, amount: float, reason: str, hand_index: int = 0) -> None:
        self.game.emitter.emit(
            event_type,
            {
                "amount": amount,
                "reason": reason,
                "hand_index": hand_index,
                "balance": self.ledger.current_balance,
            },
        )
