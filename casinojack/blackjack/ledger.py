"""
Balance bookkeeping outside the engine.

The engine never holds money. It reports payouts, and a Ledger applies them to
a persistent balance. Stakes are debited when they are placed, so settling a
lost hand credits nothing.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

from casinojack.storage.kvstore import KeyValueStore, MemoryStore

logger = logging.getLogger("casinojack.ledger")

DEFAULT_STARTING_BALANCE = 2000.0


class Ledger(ABC):
    """Narrow balance interface consumed by the table session."""

    @property
    @abstractmethod
    def current_balance(self) -> float:
        """Balance available for new stakes."""

    @abstractmethod
    def debit(self, amount: float) -> bool:
        """Withdraw `amount`; returns False and changes nothing if funds are short."""

    @abstractmethod
    def credit(self, amount: float) -> None:
        """Add `amount` to the balance."""

    def can_afford(self, amount: float) -> bool:
        return 0 <= amount <= self.current_balance


class BankrollLedger(Ledger):
    """
    Ledger whose balance is persisted in a key-value store after every change.

    Args:
        store: Where the balance lives. Defaults to an in-memory store.
        starting_balance: Balance used when the store holds none yet.
        key: Store key for the balance.
    """

    def __init__(
        self,
        store: Optional[KeyValueStore] = None,
        starting_balance: float = DEFAULT_STARTING_BALANCE,
        key: str = "balance",
    ):
        if starting_balance < 0:
            raise ValueError("Starting balance must be non-negative")
        self.store = store if store is not None else MemoryStore()
        self.starting_balance = starting_balance
        self.key = key
        self._balance = float(self.store.get(key, starting_balance))
        if key not in self.store:
            self._save()

    @property
    def current_balance(self) -> float:
        return self._balance

    def debit(self, amount: float) -> bool:
        if amount < 0:
            raise ValueError("Cannot debit a negative amount")
        if amount > self._balance:
            logger.debug("Debit of %.2f refused; balance %.2f", amount, self._balance)
            return False
        self._balance -= amount
        self._save()
        return True

    def credit(self, amount: float) -> None:
        if amount < 0:
            raise ValueError("Cannot credit a negative amount")
        if amount == 0:
            return
        self._balance += amount
        self._save()

    def add_funds(self, amount: float) -> None:
        self.credit(amount)

    def reset(self) -> None:
        """Restore the starting balance."""
        self._balance = self.starting_balance
        self._save()

    def _save(self) -> None:
        self.store.set(self.key, self._balance)

    def __repr__(self) -> str:
        return f"BankrollLedger(balance={self._balance:.2f})"
