"""War-specific constants."""

from cardwar.common.card import Suit, Value

DECK_SIZE = len(Suit) * len(Value)

# Each player starts with half of the shuffled deck
HAND_SIZE = DECK_SIZE // 2

# Cards each player puts down per comparison; the last one is face up
BATTLE_CARDS = 1
WAR_CARDS = 2

# Cards the battle winner receives back
BATTLE_SPOILS = 2 * BATTLE_CARDS
