"""Turn round snapshots into response models for the browser client."""

from api.schemas import CardResponse, HandResponse, OutcomeResponse, RoundResponse
from api.session import TableSession
from core.cards import Card, Rank, Suit
from core.game import Outcome, RoundSnapshot, SnapshotCard

CARD_BACK_IMAGE = "cards/back.png"

_FACE_NAMES = {
    Rank.ACE: "ace",
    Rank.KING: "king",
    Rank.QUEEN: "queen",
    Rank.JACK: "jack",
}


def card_image_path(card: Card) -> str:
    """Asset path for a face-up card, e.g. cards/ace_of_spades.png."""
    rank_name = _FACE_NAMES.get(card.rank, str(card.rank))
    suit_name = card.suit.name.lower()
    return f"cards/{rank_name}_of_{suit_name}.png"


def card_to_response(card: Card) -> CardResponse:
    """Convert a face-up Card to CardResponse."""
    return CardResponse(
        rank=str(card.rank),
        suit=str(card.suit),
        value=card.value,
        color=card.color,
        image=card_image_path(card),
    )


def _dealer_card_to_response(dealt: SnapshotCard) -> CardResponse:
    if dealt.hidden:
        return CardResponse(
            rank="?",
            suit="?",
            value=0,
            color=None,
            hidden=True,
            image=CARD_BACK_IMAGE,
        )
    return card_to_response(dealt.card)


def outcome_to_response(outcome: Outcome | None) -> OutcomeResponse | None:
    if outcome is None:
        return None
    return OutcomeResponse(
        outcome=outcome.name,
        result=outcome.result,
        message=outcome.message,
    )


def snapshot_to_response(snapshot: RoundSnapshot, table: TableSession) -> RoundResponse:
    """Convert a round snapshot plus the table's buttons and timer to RoundResponse."""
    game = table.game
    return RoundResponse(
        phase=snapshot.phase.name,
        player_hand=HandResponse(
            cards=[card_to_response(c) for c in snapshot.player_cards],
            value=snapshot.player_score if snapshot.player_cards else None,
        ),
        dealer_hand=HandResponse(
            cards=[_dealer_card_to_response(c) for c in snapshot.dealer_cards],
            value=snapshot.dealer_score,
        ),
        outcome=outcome_to_response(snapshot.outcome),
        can_deal=game.can_deal,
        can_hit=game.can_hit,
        can_stand=game.can_stand,
        can_restart=game.can_restart,
        auto_restart_in=table.restart_timer.remaining,
    )
