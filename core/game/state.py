"""Round phases and outcomes."""

from enum import Enum, auto


class Phase(Enum):
    """
    Round state machine phases.

    Flow: NOT_STARTED → PLAYER_TURN → DEALER_TURN → RESOLVED → NOT_STARTED
    """

    # No cards dealt yet
    NOT_STARTED = auto()

    # Player may hit or stand
    PLAYER_TURN = auto()

    # Dealer draws to 17
    DEALER_TURN = auto()

    # Outcome decided
    RESOLVED = auto()

    def __str__(self) -> str:
        return self.name.replace("_", " ").title()


class Outcome(Enum):
    """How a round ended, with the banner shown to the player."""

    PLAYER_BUST = ("lose", "Bust! You lose.")
    PLAYER_BLACKJACK = ("win", "It's a BlackJack! You win!")
    DEALER_BUST = ("win", "Dealer busts! You win!")
    PLAYER_WIN = ("win", "You win!")
    DEALER_WIN = ("lose", "Dealer wins!")
    PUSH = ("push", "Push! It's a tie!")

    @property
    def result(self) -> str:
        """Return "win", "lose" or "push" from the player's side."""
        return self.value[0]

    @property
    def message(self) -> str:
        """Return the player-facing result message."""
        return self.value[1]
