"""Tests for phases, outcomes and the event emitter."""

import pytest

from core.game import BlackjackRound
from core.game.events import EventEmitter, EventType, GameEvent
from core.game.state import Outcome, Phase


class TestPhase:
    """Tests for the controller's phase machine."""

    def test_str(self):
        assert str(Phase.PLAYER_TURN) == "Player Turn"

    def test_every_phase_is_a_machine_state(self):
        game = BlackjackRound()
        assert set(game.machine.states) == {p.name.lower() for p in Phase}

    @pytest.mark.parametrize(
        "source, dest",
        [
            ("not_started", "player_turn"),
            ("player_turn", "player_turn"),
            ("player_turn", "dealer_turn"),
            ("player_turn", "resolved"),
            ("dealer_turn", "resolved"),
            ("resolved", "not_started"),
            ("dealer_turn", "not_started"),
        ],
    )
    def test_allowed_transitions(self, source, dest):
        game = BlackjackRound()
        assert game.machine.get_transitions(source=source, dest=dest)

    @pytest.mark.parametrize(
        "source, dest",
        [
            ("not_started", "resolved"),
            ("not_started", "dealer_turn"),
            ("resolved", "player_turn"),
            ("dealer_turn", "player_turn"),
        ],
    )
    def test_forbidden_transitions(self, source, dest):
        game = BlackjackRound()
        assert game.machine.get_transitions(source=source, dest=dest) == []


class TestOutcome:
    """Tests for outcome banners."""

    @pytest.mark.parametrize(
        "outcome, result",
        [
            (Outcome.PLAYER_BUST, "lose"),
            (Outcome.PLAYER_BLACKJACK, "win"),
            (Outcome.DEALER_BUST, "win"),
            (Outcome.PLAYER_WIN, "win"),
            (Outcome.DEALER_WIN, "lose"),
            (Outcome.PUSH, "push"),
        ],
    )
    def test_result(self, outcome, result):
        assert outcome.result == result

    def test_messages(self):
        assert Outcome.PLAYER_BUST.message == "Bust! You lose."
        assert Outcome.PUSH.message == "Push! It's a tie!"


class TestEventEmitter:
    """Tests for EventEmitter."""

    def test_typed_and_catch_all_handlers(self):
        emitter = EventEmitter()
        typed, every = [], []
        emitter.subscribe(typed.append, EventType.PUSH)
        emitter.subscribe(every.append)

        emitter.emit_new(EventType.PUSH, player_value=19)
        emitter.emit_new(EventType.ROUND_ENDED)

        assert [e.event_type for e in typed] == [EventType.PUSH]
        assert [e.event_type for e in every] == [EventType.PUSH, EventType.ROUND_ENDED]
        assert typed[0].data == {"player_value": 19}

    def test_unsubscribe(self):
        emitter = EventEmitter()
        seen = []
        emitter.subscribe(seen.append)
        assert emitter.unsubscribe(seen.append)
        assert not emitter.unsubscribe(seen.append)

        emitter.emit_new(EventType.PUSH)
        assert seen == []

    def test_history(self):
        emitter = EventEmitter()
        event = emitter.emit_new(EventType.ROUND_RESET)
        assert isinstance(event, GameEvent)
        assert emitter.history == [event]

        emitter.clear_history()
        assert emitter.history == []
