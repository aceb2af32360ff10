"""
Session bankroll statistics.

A TableSession records one RoundRecord per settled round. SessionStats keeps
that history and summarises it: net result, ROI, swings in balance and the
spread of per-round results.
"""

from dataclasses import asdict, dataclass
from typing import Dict, List, Optional, Tuple

import numpy as np
import pandas as pd
import scipy.stats as stats


@dataclass(frozen=True)
class RoundRecord:
    """
    Money movement of one settled round.

    Attributes:
        round_number: Engine round number
        wagered: Everything staked: main bet, doubles, splits and insurance
        returned: Everything credited back, insurance included
        balance: Ledger balance after the round was credited
        results: Per-hand result names, in hand order
    """

    round_number: int
    wagered: float
    returned: float
    balance: float
    results: Tuple[str, ...] = ()

    @property
    def net(self) -> float:
        return self.returned - self.wagered


@dataclass(frozen=True)
class ConfidenceInterval:
    lower: float
    upper: float
    confidence: float


class SessionStats:
    """
    Running statistics for one sitting at the table.

    Args:
        starting_balance: Ledger balance when the session began
    """

    def __init__(self, starting_balance: float):
        self.starting_balance = starting_balance
        self.history: List[RoundRecord] = []
        self.session_high = starting_balance
        self.session_low = starting_balance

    def record(self, record: RoundRecord) -> None:
        self.history.append(record)
        self.session_high = max(self.session_high, record.balance)
        self.session_low = min(self.session_low, record.balance)

    @property
    def rounds_played(self) -> int:
        return len(self.history)

    @property
    def total_wagered(self) -> float:
        return sum(r.wagered for r in self.history)

    @property
    def net_result(self) -> float:
        return sum(r.net for r in self.history)

    def get_session_stats(self) -> Dict[str, float]:
        """
        Get current session statistics.

        Returns:
            Dictionary of session statistics
        """
        nets = np.array([r.net for r in self.history], dtype=float)
        roi = self.net_result / self.total_wagered if self.total_wagered > 0 else 0.0
        return {
            "rounds_played": self.rounds_played,
            "starting_balance": self.starting_balance,
            "net_result": self.net_result,
            "total_wagered": self.total_wagered,
            "roi_percentage": roi * 100,
            "mean_net_per_round": float(np.mean(nets)) if nets.size else 0.0,
            "variance": float(np.var(nets)) if nets.size else 0.0,
            "std_dev": float(np.std(nets)) if nets.size else 0.0,
            "session_high": self.session_high,
            "session_low": self.session_low,
            "drawdown_percentage": (self.session_high - self.session_low)
            / self.session_high
            * 100
            if self.session_high > 0
            else 0.0,
        }

    def confidence_interval(self, confidence: float = 0.95) -> Optional[ConfidenceInterval]:
        """
        Confidence interval for the mean net result per round.

        Returns None until at least two rounds have been played.
        """
        if self.rounds_played < 2:
            return None
        values = [r.net for r in self.history]
        mean = np.mean(values)
        std_err = stats.sem(values)
        if std_err == 0:
            return ConfidenceInterval(float(mean), float(mean), confidence)

        margin = std_err * stats.t.ppf((1 + confidence) / 2, len(values) - 1)
        return ConfidenceInterval(float(mean - margin), float(mean + margin), confidence)

    def to_frame(self) -> pd.DataFrame:
        """Round history as a DataFrame, one row per round."""
        rows = []
        for record in self.history:
            row = asdict(record)
            row["net"] = record.net
            row["results"] = ",".join(record.results)
            rows.append(row)
        columns = ["round_number", "wagered", "returned", "net", "balance", "results"]
        return pd.DataFrame(rows, columns=columns)
