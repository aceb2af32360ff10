"""
Command-line interface adapter for the casinojack engine.

This module provides a console front end: a CLIAdapter that renders snapshots
and prompts for decisions, and the `casinojack` entry point that plays rounds
against a persisted bankroll.
"""

import argparse
import logging
import random
from enum import Enum
from typing import Dict, List, Optional, Union

from casinojack.adapters.base import PresentationAdapter
from casinojack.blackjack.action import Action
from casinojack.blackjack.game import BlackjackGame
from casinojack.blackjack.ledger import DEFAULT_STARTING_BALANCE, BankrollLedger
from casinojack.blackjack.rules import Rules
from casinojack.blackjack.session import TableSession
from casinojack.blackjack.stats import GameStats
from casinojack.common.io_interface import ConsoleIOInterface, IOInterface
from casinojack.common.shoe import Shoe
from casinojack.state.models import RoundState, TableSnapshot
from casinojack.storage import KeyValueStore, MemoryStore, SQLiteStore

ACTION_KEYS = {
    "h": Action.HIT,
    "s": Action.STAND,
    "d": Action.DOUBLE,
    "p": Action.SPLIT,
}


class CLIAdapter(PresentationAdapter):
    """
    Command-line interface adapter for the casinojack engine.

    This adapter uses an IOInterface for input/output, providing a simple
    text-based interface to the game.
    """

    def __init__(self, io_interface: Optional[IOInterface] = None):
        """
        Initialize the CLI adapter.

        Args:
            io_interface: Optional IOInterface to use for I/O. Defaults to the console.
        """
        super().__init__()
        self.io_interface = io_interface or ConsoleIOInterface()

    def render_table(self, snapshot: TableSnapshot, balance: float) -> None:
        self.io_interface.output("\n=== Table ===")

        dealer = snapshot.dealer
        dealer_cards = ", ".join(str(card) for card in dealer.visible_cards)
        if dealer.cards and not dealer.hole_card_visible:
            dealer_cards += ", ??"
        self.io_interface.output(f"Dealer: {dealer_cards} ({dealer.visible_value})")

        for i, hand in enumerate(snapshot.player_hands):
            cards = ", ".join(str(card) for card in hand.cards)
            label = f"Hand {i + 1}" if snapshot.has_split else "Player"
            marker = " <" if hand.is_active and len(snapshot.player_hands) > 1 else ""
            self.io_interface.output(
                f"{label}: {cards} ({hand.value}) - Bet: ${hand.bet:.0f}{marker}"
            )

        if snapshot.result_message:
            self.io_interface.output(snapshot.result_message)
        self.io_interface.output(f"Balance: ${balance:.2f}")

    def request_action(self, valid_actions: List[Action]) -> Action:
        options = {key: action for key, action in ACTION_KEYS.items() if action in valid_actions}
        menu = ", ".join(f"{action.value} ({key})" for key, action in options.items())
        while True:
            choice = self.io_interface.input(f"{menu}? ").strip().lower()
            if choice in options:
                return options[choice]
            for action in options.values():
                if choice == action.value:
                    return action
            self.io_interface.output("Invalid choice. Please try again.")

    def request_bet(self, balance: float, default: float) -> Optional[float]:
        while True:
            raw = self.io_interface.input(
                f"Bet (balance ${balance:.2f}, enter for ${default:.0f}, q to quit): "
            ).strip().lower()
            if raw in ("q", "quit"):
                return None
            if not raw:
                return default
            try:
                return float(raw)
            except ValueError:
                self.io_interface.output("Please enter a number.")

    def request_insurance(self, amount: float) -> bool:
        answer = self.io_interface.input(f"Insurance for ${amount:.2f}? (y/n) ")
        return answer.strip().lower().startswith("y")

    def notify_event(self, event_type: Union[str, Enum], data: Dict) -> None:
        if isinstance(event_type, Enum):
            event_type = event_type.name
        message = self._format_event_message(event_type, data)
        if message:
            self.io_interface.output(message)

    def _format_event_message(self, event_type: str, data: Dict) -> Optional[str]:
        if event_type == "SHUFFLE" and data.get("reason") == "exhausted":
            return "Shoe exhausted, reshuffling."
        if event_type == "HAND_SPLIT":
            return f"Split into {len(data.get('hands', []))} hands."
        if event_type == "DEALER_ACTION" and data.get("action") == "hit":
            return f"Dealer draws {data.get('card')} ({data.get('value')})"
        if event_type == "CARD_REVEALED":
            return f"Dealer reveals {data.get('card')} ({data.get('dealer_value')})"
        if event_type == "INSURANCE_DECISION" and data.get("taken"):
            if data.get("result") == "won":
                return f"Insurance pays ${data.get('credit', 0):.2f}"
            return "Insurance lost."
        return None


def valid_actions(session: TableSession) -> List[Action]:
    game = session.game
    actions = [Action.HIT, Action.STAND]
    if game.can_double_down(session.balance):
        actions.append(Action.DOUBLE)
    if game.can_split(session.balance):
        actions.append(Action.SPLIT)
    return actions


def play_round(
    session: TableSession, adapter: PresentationAdapter, bet: Optional[float] = None
) -> None:
    """Play one round from the deal to settlement."""
    if not session.deal(bet):
        return
    game = session.game

    if game.state == RoundState.OFFERING_INSURANCE:
        adapter.render_table(session.snapshot(), session.balance)
        session.respond_to_insurance(adapter.request_insurance(game.insurance_amount()))

    while game.state == RoundState.PLAYER_TURN:
        adapter.render_table(session.snapshot(), session.balance)
        action = adapter.request_action(valid_actions(session))
        handlers = {
            Action.HIT: session.hit,
            Action.STAND: session.stand,
            Action.DOUBLE: session.double_down,
            Action.SPLIT: session.split,
        }
        handlers[action]()

    adapter.render_table(session.snapshot(), session.balance)


def build_store(db_path: Optional[str]) -> KeyValueStore:
    if db_path:
        return SQLiteStore(db_path)
    return MemoryStore()


def main(argv: Optional[List[str]] = None) -> int:
    """
    Play blackjack at the console until the player quits or runs out of money.
    """
    parser = argparse.ArgumentParser(description="Play casino blackjack at the console.")
    parser.add_argument(
        "--balance",
        type=float,
        default=DEFAULT_STARTING_BALANCE,
        help="Starting balance when no saved balance exists",
    )
    parser.add_argument(
        "--db",
        type=str,
        default=None,
        help="SQLite file for the balance and statistics. In-memory if omitted.",
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for the shuffle")
    parser.add_argument("--bet", type=float, default=10.0, help="Default bet")
    parser.add_argument("--min_bet", type=float, default=1.0, help="Minimum bet amount")
    parser.add_argument(
        "--max_bet", type=float, default=0.0, help="Maximum bet amount, 0 for no limit"
    )
    parser.add_argument(
        "--log_level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    store = build_store(args.db)
    rules = Rules(min_bet=args.min_bet, max_bet=args.max_bet)
    game = BlackjackGame(
        rules=rules,
        shoe=Shoe(rng=random.Random(args.seed)),
        stats=GameStats(store),
    )
    ledger = BankrollLedger(store, starting_balance=args.balance)
    session = TableSession(game, ledger)
    adapter = CLIAdapter()
    adapter.attach(game.emitter)

    try:
        while session.balance >= rules.min_bet:
            bet = adapter.request_bet(session.balance, args.bet)
            if bet is None:
                break
            if not session.place_bet(bet):
                adapter.io_interface.output("That bet is not allowed.")
                continue
            play_round(session, adapter)
            session.new_round()
    except (EOFError, KeyboardInterrupt):
        adapter.io_interface.output("")
    finally:
        forfeited = session.new_round()
        if forfeited:
            adapter.io_interface.output(f"Round abandoned, ${forfeited:.2f} forfeited.")
        report = game.stats.report()
        adapter.io_interface.output(
            f"Wins {report['player_wins']}, losses {report['player_losses']}, "
            f"pushes {report['pushes']} ({report['win_percentage']:.1f}% won)"
        )
        summary = session.session_stats.get_session_stats()
        if summary["rounds_played"]:
            adapter.io_interface.output(
                f"Rounds {summary['rounds_played']}, net ${summary['net_result']:.2f}, "
                f"ROI {summary['roi_percentage']:.1f}%"
            )
        adapter.io_interface.output(f"Final balance: ${session.balance:.2f}")
        adapter.detach()
        store.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
