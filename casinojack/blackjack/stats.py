"""
This module contains the GameStats class which is responsible for tracking
the outcome counters of played rounds. The engine calls one record method per
settled hand; persistence is delegated to an optional key-value store.
"""

from typing import Dict, Optional

from casinojack.storage.kvstore import KeyValueStore

STAT_KEYS = (
    "player_wins",
    "player_losses",
    "player_busts",
    "pushes",
    "player_blackjacks",
    "dealer_blackjacks",
)


class GameStats:
    """
    A class that holds the win/loss statistics of a player.

    A bust also counts as a loss and a player blackjack also counts as a win.
    A dealer blackjack is tracked on its own; the hand it beat (or pushed) is
    recorded separately.
    """

    def __init__(self, store: Optional[KeyValueStore] = None, prefix: str = "stats."):
        """
        Initializes the GameStats, loading saved values when a store is given.
        """
        self.store = store
        self.prefix = prefix
        self.player_wins = 0
        self.player_losses = 0
        self.player_busts = 0
        self.pushes = 0
        self.player_blackjacks = 0
        self.dealer_blackjacks = 0
        self.load()

    @property
    def total_games(self) -> int:
        return self.player_wins + self.player_losses + self.pushes

    @property
    def win_percentage(self) -> float:
        if self.total_games == 0:
            return 0.0
        return self.player_wins / self.total_games * 100.0

    def record_player_win(self) -> None:
        self.player_wins += 1
        self.save()

    def record_player_loss(self) -> None:
        self.player_losses += 1
        self.save()

    def record_player_bust(self) -> None:
        self.player_busts += 1
        self.player_losses += 1
        self.save()

    def record_push(self) -> None:
        self.pushes += 1
        self.save()

    def record_player_blackjack(self) -> None:
        self.player_blackjacks += 1
        self.player_wins += 1
        self.save()

    def record_dealer_blackjack(self) -> None:
        self.dealer_blackjacks += 1
        self.save()

    def reset(self) -> None:
        """Zero every counter."""
        for key in STAT_KEYS:
            setattr(self, key, 0)
        self.save()

    def save(self) -> None:
        if self.store is None:
            return
        for key in STAT_KEYS:
            self.store.set(self.prefix + key, getattr(self, key))

    def load(self) -> None:
        if self.store is None:
            return
        for key in STAT_KEYS:
            setattr(self, key, int(self.store.get(self.prefix + key, 0)))

    def report(self) -> Dict[str, float]:
        """
        Returns a dictionary containing the current statistics.
        """
        report = {key: getattr(self, key) for key in STAT_KEYS}
        report["total_games"] = self.total_games
        report["win_percentage"] = self.win_percentage
        return report
