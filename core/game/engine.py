"""Blackjack round controller with state machine."""

import logging
from dataclasses import dataclass, field
from random import Random
from typing import Callable

from transitions import Machine

from core.cards import Card, Deck, EmptyDeckError
from core.hand import Hand
from core.game.events import EventEmitter, EventType, GameEvent
from core.game.rules import check_player_hand, play_dealer, resolve_outcome
from core.game.state import Outcome, Phase

logger = logging.getLogger(__name__)

# Index of the dealer's face-down card
HOLE_CARD_INDEX = 1

_OUTCOME_EVENTS = {
    Outcome.PLAYER_BUST: EventType.PLAYER_BUSTS,
    Outcome.PLAYER_BLACKJACK: EventType.PLAYER_BLACKJACK,
    Outcome.DEALER_BUST: EventType.PLAYER_WINS,
    Outcome.PLAYER_WIN: EventType.PLAYER_WINS,
    Outcome.DEALER_WIN: EventType.DEALER_WINS,
    Outcome.PUSH: EventType.PUSH,
}


@dataclass
class RoundState:
    """Everything one round owns. Replaced wholesale on deal and restart."""

    player_hand: Hand = field(default_factory=Hand)
    dealer_hand: Hand = field(default_factory=Hand)
    deck: Deck | None = None
    hole_card_revealed: bool = False
    outcome: Outcome | None = None


@dataclass(frozen=True)
class SnapshotCard:
    """A dealt card as the table shows it."""

    card: Card
    hidden: bool = False


@dataclass(frozen=True)
class RoundSnapshot:
    """Read-only view of a round handed to the presentation layer."""

    player_cards: tuple[Card, ...]
    dealer_cards: tuple[SnapshotCard, ...]
    player_score: int
    dealer_score: int | None
    phase: Phase
    outcome: Outcome | None = None

    @property
    def is_resolved(self) -> bool:
        """Check if the round has an outcome."""
        return self.phase == Phase.RESOLVED


class BlackjackRound:
    """
    Single-player blackjack round controller using a state machine.

    This is the core game logic, completely UI-agnostic.
    Communication happens through events and returned snapshots only.
    """

    # State machine states
    STATES = [p.name.lower() for p in Phase]

    # State machine transitions
    TRANSITIONS = [
        {"trigger": "start_round", "source": "not_started", "dest": "player_turn"},
        {"trigger": "player_action", "source": "player_turn", "dest": "player_turn"},
        {"trigger": "player_done", "source": "player_turn", "dest": "dealer_turn"},
        {"trigger": "resolve", "source": ["player_turn", "dealer_turn"], "dest": "resolved"},
        {"trigger": "clear_round", "source": "*", "dest": "not_started"},
    ]

    def __init__(
        self,
        rng: Random | None = None,
        deck_factory: Callable[[], Deck] | None = None,
    ) -> None:
        """
        Initialize a round controller.

        Args:
            rng: Random number generator for reproducible shuffles
            deck_factory: Builds the deck for each deal (defaults to a
                freshly shuffled 52-card deck)
        """
        self._rng = rng or Random()
        self._deck_factory = deck_factory or (lambda: Deck.new_shuffled(self._rng))
        self.round = RoundState()
        self.events = EventEmitter()

        self.machine = Machine(
            model=self,
            states=self.STATES,
            transitions=self.TRANSITIONS,
            initial="not_started",
            auto_transitions=False,
            model_attribute="_machine_state",
        )

    @property
    def phase(self) -> Phase:
        """Get current phase as enum."""
        return Phase[self._machine_state.upper()]  # type: ignore

    def subscribe(
        self,
        handler: Callable[[GameEvent], None],
        event_type: EventType | None = None,
    ) -> None:
        """Subscribe to game events."""
        self.events.subscribe(handler, event_type)

    def unsubscribe(
        self,
        handler: Callable[[GameEvent], None],
        event_type: EventType | None = None,
    ) -> bool:
        """Unsubscribe from game events."""
        return self.events.unsubscribe(handler, event_type)

    def deal(self) -> RoundSnapshot:
        """Shuffle a fresh deck and deal two cards each."""
        if self.phase != Phase.NOT_STARTED:
            logger.debug("Ignoring deal in phase %s", self.phase.name)
            return self.snapshot()

        self.events.clear_history()
        self.round = RoundState(deck=self._deck_factory())
        player_hand = self.round.player_hand
        dealer_hand = self.round.dealer_hand

        self._deal_card_to_hand(player_hand)
        self._deal_card_to_hand(player_hand)
        self._deal_card_to_hand(dealer_hand)
        self._deal_card_to_hand(dealer_hand, face_up=False)

        self.start_round()
        self.events.emit_new(EventType.ROUND_STARTED, player_value=player_hand.value)
        logger.info("Round dealt: player %s", player_hand)

        self._check_player()
        return self.snapshot()

    def hit(self) -> RoundSnapshot:
        """Player hits (takes another card)."""
        if self.phase != Phase.PLAYER_TURN:
            logger.debug("Ignoring hit in phase %s", self.phase.name)
            return self.snapshot()

        hand = self.round.player_hand
        self._deal_card_to_hand(hand)
        self.events.emit_new(EventType.PLAYER_HIT, hand_value=hand.value)

        if not self._check_player():
            self.player_action()  # Stay in player turn
        return self.snapshot()

    def stand(self) -> RoundSnapshot:
        """Player stands; the dealer reveals and plays out their hand."""
        if self.phase != Phase.PLAYER_TURN:
            logger.debug("Ignoring stand in phase %s", self.phase.name)
            return self.snapshot()

        state = self.round
        self.events.emit_new(EventType.PLAYER_STAND, hand_value=state.player_hand.value)
        self.player_done()

        state.hole_card_revealed = True
        self.events.emit_new(
            EventType.DEALER_REVEALS,
            card=str(state.dealer_hand.cards[HOLE_CARD_INDEX]),
            hand_value=state.dealer_hand.value,
        )

        try:
            play_dealer(state.dealer_hand, state.deck, on_draw=self._on_dealer_draw)
        except EmptyDeckError:
            self._abort()
            raise

        if state.dealer_hand.is_busted:
            self.events.emit_new(EventType.DEALER_BUSTS, hand_value=state.dealer_hand.value)
        else:
            self.events.emit_new(EventType.DEALER_STANDS, hand_value=state.dealer_hand.value)

        self._finish(resolve_outcome(state.player_hand, state.dealer_hand))
        return self.snapshot()

    def restart(self) -> RoundSnapshot:
        """Discard the round and return to the initial phase."""
        previous = self.phase
        self.round = RoundState()
        self.clear_round()
        self.events.emit_new(EventType.ROUND_RESET, previous_phase=previous.name)
        logger.debug("Round reset from %s", previous.name)
        return self.snapshot()

    def get_outcome(self) -> Outcome | None:
        """Return the outcome once the round is resolved."""
        if self.phase != Phase.RESOLVED:
            return None
        return self.round.outcome

    def snapshot(self) -> RoundSnapshot:
        """Build a read-only view of the current round."""
        state = self.round
        dealer_cards = tuple(
            SnapshotCard(
                card=card,
                hidden=i == HOLE_CARD_INDEX and not state.hole_card_revealed,
            )
            for i, card in enumerate(state.dealer_hand.cards)
        )
        return RoundSnapshot(
            player_cards=tuple(state.player_hand.cards),
            dealer_cards=dealer_cards,
            player_score=state.player_hand.value,
            dealer_score=state.dealer_hand.value if state.hole_card_revealed else None,
            phase=self.phase,
            outcome=self.get_outcome(),
        )

    def _deal_card_to_hand(self, hand: Hand, face_up: bool = True) -> Card:
        """Deal a card to a hand."""
        try:
            card = self.round.deck.draw()
        except EmptyDeckError:
            self._abort()
            raise

        hand.add_card(card)
        is_dealer = hand is self.round.dealer_hand
        self.events.emit_new(
            EventType.CARD_DEALT,
            card=str(card) if face_up else "??",
            hand="dealer" if is_dealer else "player",
            hand_value=hand.value if not is_dealer else None,
        )
        return card

    def _on_dealer_draw(self, card: Card, hand: Hand) -> None:
        self.events.emit_new(EventType.DEALER_HITS, card=str(card), hand_value=hand.value)

    def _check_player(self) -> bool:
        """Resolve the round if the player busted or reached 21."""
        outcome = check_player_hand(self.round.player_hand)
        if outcome is None:
            return False
        self._finish(outcome)
        return True

    def _finish(self, outcome: Outcome) -> None:
        """Record the outcome and move to RESOLVED."""
        state = self.round
        state.outcome = outcome
        self.resolve()

        self.events.emit_new(
            _OUTCOME_EVENTS[outcome],
            player_value=state.player_hand.value,
            dealer_value=state.dealer_hand.value if state.hole_card_revealed else None,
        )
        self.events.emit_new(
            EventType.ROUND_ENDED,
            outcome=outcome.name,
            result=outcome.result,
            message=outcome.message,
        )
        logger.info("Round resolved: %s (player %d)", outcome.name, state.player_hand.value)

    def _abort(self) -> None:
        """Drop a round whose deck ran dry."""
        logger.error(
            "Deck exhausted in phase %s; aborting round",
            self.phase.name,
        )
        self.round = RoundState()
        self.clear_round()
        self.events.emit_new(EventType.ROUND_ABORTED, reason="deck exhausted")

    @property
    def can_deal(self) -> bool:
        """Check if a new round can be dealt."""
        return self.phase == Phase.NOT_STARTED

    @property
    def can_hit(self) -> bool:
        """Check if hitting is allowed."""
        return self.phase == Phase.PLAYER_TURN

    @property
    def can_stand(self) -> bool:
        """Check if standing is allowed."""
        return self.phase == Phase.PLAYER_TURN

    @property
    def can_restart(self) -> bool:
        """Check if the round is over and waiting for a restart."""
        return self.phase == Phase.RESOLVED
