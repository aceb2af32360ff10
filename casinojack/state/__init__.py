"""
Immutable snapshots of the casinojack engine state.
"""

from casinojack.state.models import (
    DealerSnapshot,
    HandSnapshot,
    InsuranceResult,
    RoundState,
    TableSnapshot,
)

__all__ = [
    "DealerSnapshot",
    "HandSnapshot",
    "InsuranceResult",
    "RoundState",
    "TableSnapshot",
]
