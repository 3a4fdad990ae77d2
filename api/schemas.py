"""Pydantic schemas for API requests and responses."""

from pydantic import BaseModel, ConfigDict
from typing import Literal


class ActionRequest(BaseModel):
    """Request for a table action."""

    action: Literal["deal", "hit", "stand", "restart"]


class SessionResponse(BaseModel):
    """A newly opened table."""

    session_id: str


class CardResponse(BaseModel):
    """Card representation. Hidden cards carry no rank, suit or value."""

    model_config = ConfigDict(from_attributes=True)

    rank: str
    suit: str
    value: int
    color: Literal["black", "red"] | None
    hidden: bool = False
    image: str


class HandResponse(BaseModel):
    """Hand representation."""

    cards: list[CardResponse]
    value: int | None


class OutcomeResponse(BaseModel):
    """Round result."""

    outcome: Literal[
        "PLAYER_BUST",
        "PLAYER_BLACKJACK",
        "DEALER_BUST",
        "PLAYER_WIN",
        "DEALER_WIN",
        "PUSH",
    ]
    result: Literal["win", "lose", "push"]
    message: str


class RoundResponse(BaseModel):
    """Current table state."""

    phase: str
    player_hand: HandResponse
    dealer_hand: HandResponse
    outcome: OutcomeResponse | None
    can_deal: bool
    can_hit: bool
    can_stand: bool
    can_restart: bool
    auto_restart_in: float | None = None
