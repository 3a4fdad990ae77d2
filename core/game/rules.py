"""House rules: the dealer's drawing policy and outcome resolution."""

from typing import Callable

from core.cards import Card, Deck
from core.hand import BLACKJACK, Hand
from core.game.state import Outcome

DEALER_STANDS_ON = 17

DrawCallback = Callable[[Card, Hand], None]


def dealer_should_hit(hand: Hand) -> bool:
    """Dealer draws on anything below 17, soft or hard."""
    return hand.value < DEALER_STANDS_ON


def play_dealer(
    dealer_hand: Hand,
    deck: Deck,
    on_draw: DrawCallback | None = None,
) -> list[Card]:
    """
    Draw cards into the dealer hand until it stands.

    Every draw raises the hand's minimum value by at least one, so the loop
    ends after at most 21 draws. EmptyDeckError propagates to the caller.

    Args:
        dealer_hand: Dealer's hand, mutated in place
        deck: Deck to draw from, mutated in place
        on_draw: Called with each drawn card and the updated hand

    Returns:
        The cards drawn, in order
    """
    drawn: list[Card] = []
    while dealer_should_hit(dealer_hand):
        card = deck.draw()
        dealer_hand.add_card(card)
        drawn.append(card)
        if on_draw is not None:
            on_draw(card, dealer_hand)
    return drawn


def check_player_hand(hand: Hand) -> Outcome | None:
    """
    Evaluate the terminal conditions after a player action.

    Reaching exactly 21 ends the round as a blackjack win whatever the
    number of cards.
    """
    value = hand.value
    if value > BLACKJACK:
        return Outcome.PLAYER_BUST
    if value == BLACKJACK:
        return Outcome.PLAYER_BLACKJACK
    return None


def resolve_outcome(player_hand: Hand, dealer_hand: Hand) -> Outcome:
    """Compare the hands once the dealer has finished drawing."""
    player_value = player_hand.value
    dealer_value = dealer_hand.value

    if dealer_value > BLACKJACK:
        return Outcome.DEALER_BUST
    if player_value > dealer_value:
        return Outcome.PLAYER_WIN
    if dealer_value > player_value:
        return Outcome.DEALER_WIN
    return Outcome.PUSH
