"""Exceptions raised by the blackjack engine."""


class BlackjackError(Exception):
    """Base class for engine errors."""


class InvariantViolation(BlackjackError):
    """
    Raised when the engine reaches a state its transitions should make
    unreachable, such as dealing to a hand that is already complete.

    Invalid caller input never raises this; it is rejected with a failure
    indicator instead.
    """
