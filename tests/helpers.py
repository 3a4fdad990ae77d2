"""Card builders and hypothesis strategies shared by the test modules."""

from hypothesis import strategies as st

from core.cards import Card, Deck, Rank, Suit
from core.hand import Hand


def make_hand(*codes: str) -> Hand:
    """Build a hand from card codes like "AS", "10H"."""
    return Hand(cards=[Card.from_string(code) for code in codes])


def stacked(*codes: str):
    """
    Deck factory dealing the given cards in order.

    Deal order is player, player, dealer, dealer, then hits and dealer draws.
    """
    return lambda: Deck.stacked(Card.from_string(code) for code in codes)


# Hypothesis strategies for property-based testing
@st.composite
def card_strategy(draw):
    """Generate a random card."""
    rank = draw(st.sampled_from(list(Rank)))
    suit = draw(st.sampled_from(list(Suit)))
    return Card(rank, suit)


@st.composite
def hand_strategy(draw, min_cards=0, max_cards=12):
    """Generate a random list of cards."""
    return draw(st.lists(card_strategy(), min_size=min_cards, max_size=max_cards))
