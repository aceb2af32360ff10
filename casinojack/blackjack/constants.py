"""Blackjack-specific constants: target totals and result messages."""

BLACKJACK_TOTAL = 21
DEALER_STAND_TOTAL = 17
# Difference between an ace counted high (11) and low (1)
ACE_HIGH_BONUS = 10
NATURAL_CARD_COUNT = 2

MSG_BLACKJACK = "Blackjack!"
MSG_PUSH = "Push!"
MSG_WIN = "You win!"
MSG_LOSE = "You lose."
MSG_BUST = "Bust! You lose!"
MSG_DEALER_WINS = "Dealer wins"
