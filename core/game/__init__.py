"""Round controller, rules and state management."""

from core.game.events import GameEvent, EventType
from core.game.state import Outcome, Phase
from core.game.rules import check_player_hand, play_dealer, resolve_outcome
from core.game.engine import BlackjackRound, RoundSnapshot, RoundState, SnapshotCard

__all__ = [
    "GameEvent",
    "EventType",
    "Outcome",
    "Phase",
    "check_player_hand",
    "play_dealer",
    "resolve_outcome",
    "BlackjackRound",
    "RoundSnapshot",
    "RoundState",
    "SnapshotCard",
]
