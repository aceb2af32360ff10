"""
Base adapter interface for the casinojack engine.

Adapters are the presentation side of the table: they render snapshots, ask
the player for decisions and react to the engine's events. The engine never
calls an adapter directly; an adapter subscribes to the engine's emitter.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Callable, List, Optional, Tuple, Union

from casinojack.blackjack.action import Action
from casinojack.events import EventEmitter
from casinojack.state.models import TableSnapshot


class PresentationAdapter(ABC):
    """
    Base interface for presentation adapters.

    Implementations bridge the platform-agnostic engine and a concrete front
    end such as a console, a web page or a test harness.
    """

    def __init__(self):
        self._unsubscribe: Optional[Callable] = None

    @abstractmethod
    def render_table(self, snapshot: TableSnapshot, balance: float) -> None:
        """
        Render the current round.

        Args:
            snapshot: Frozen view of the round
            balance: The player's current balance
        """
        pass

    @abstractmethod
    def request_action(self, valid_actions: List[Action]) -> Action:
        """
        Ask the player for an action.

        Args:
            valid_actions: Actions the engine will accept right now

        Returns:
            The chosen action
        """
        pass

    @abstractmethod
    def request_bet(self, balance: float, default: float) -> Optional[float]:
        """
        Ask the player for the next bet.

        Returns:
            The bet, or None to leave the table
        """
        pass

    @abstractmethod
    def request_insurance(self, amount: float) -> bool:
        """Ask whether the player takes insurance for `amount`."""
        pass

    @abstractmethod
    def notify_event(self, event_type: Union[str, Enum], data: dict) -> None:
        """
        React to an engine event.

        Args:
            event_type: The type of event that occurred
            data: Data associated with the event
        """
        pass

    def attach(self, emitter: EventEmitter) -> None:
        """Subscribe to every event on `emitter`."""
        self.detach()

        def forward(event: Tuple[str, dict]) -> None:
            event_type, data = event
            self.notify_event(event_type, data)

        self._unsubscribe = emitter.on_any(forward)

    def detach(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
