"""Tests for web.py — action dispatch and the Flask routes."""
import random

import pytest

from frontend_adapter import FrontendAdapter, NullSound
from game_coordinator import GameCoordinator
from game_engine import Phase
from storage import MemoryStore
from web import _handle_action, app

# ── Helpers ──────────────────────────────────────────────────────────────────

def _make_adapter(seed=42):
    """Create an adapter with a fresh coordinator."""
    coord = GameCoordinator(store=MemoryStore(), rng=random.Random(seed))
    return FrontendAdapter(coord, sound=NullSound())


def _started():
    adapter = _make_adapter()
    _handle_action(adapter, {"action": "roll"})
    return adapter


def _roll_once(adapter):
    """Roll dice once and finish the animation."""
    _handle_action(adapter, {"action": "roll"})
    adapter.coordinator.finish_roll()


# ── Malformed input ──────────────────────────────────────────────────────────

class TestHandleActionMalformed:

    @pytest.mark.parametrize("payload", [None, "roll", 3, ["roll"]])
    def test_non_dict_rejected(self, payload):
        assert _handle_action(_make_adapter(), payload) is False

    def test_unknown_action(self):
        assert _handle_action(_make_adapter(), {"action": "cheat"}) is False

    def test_missing_action(self):
        assert _handle_action(_make_adapter(), {}) is False

    def test_rejected_action_leaves_state(self):
        adapter = _make_adapter()
        before = adapter.coordinator.state
        _handle_action(adapter, {"action": "bogus"})
        assert adapter.coordinator.state is before


# ── roll / new ───────────────────────────────────────────────────────────────

class TestHandleActionRoll:

    def test_roll_from_idle_starts_game(self):
        adapter = _make_adapter()
        assert _handle_action(adapter, {"action": "roll"}) is True
        assert adapter.phase == Phase.PLAYING

    def test_roll_starts_rolling(self):
        adapter = _started()
        _handle_action(adapter, {"action": "roll"})
        assert adapter.coordinator.is_rolling is True

    def test_new_mid_game_needs_two_presses(self):
        adapter = _started()
        _roll_once(adapter)
        _handle_action(adapter, {"action": "new"})
        assert adapter.coordinator.rolls_left == 2
        _handle_action(adapter, {"action": "new"})
        assert adapter.coordinator.rolls_left == 3


# ── hold ─────────────────────────────────────────────────────────────────────

class TestHandleActionHold:

    def test_hold_toggles_die(self):
        adapter = _started()
        _roll_once(adapter)
        assert _handle_action(adapter, {"action": "hold", "die_index": 2}) is True
        assert adapter.coordinator.held[2] is True

    def test_hold_toggles_back(self):
        adapter = _started()
        _roll_once(adapter)
        _handle_action(adapter, {"action": "hold", "die_index": 2})
        _handle_action(adapter, {"action": "hold", "die_index": 2})
        assert adapter.coordinator.held[2] is False

    @pytest.mark.parametrize("index", [-1, 5, "2", 1.5, True, None])
    def test_hold_invalid_index(self, index):
        adapter = _started()
        _roll_once(adapter)
        assert _handle_action(adapter, {"action": "hold", "die_index": index}) is False
        assert adapter.coordinator.held == (False,) * 5

    def test_hold_missing_index(self):
        adapter = _started()
        _roll_once(adapter)
        assert _handle_action(adapter, {"action": "hold"}) is False


# ── prev / next / enter ──────────────────────────────────────────────────────

class TestHandleActionScoring:

    def test_next_enters_scoring(self):
        adapter = _started()
        _roll_once(adapter)
        _handle_action(adapter, {"action": "next"})
        assert adapter.phase == Phase.SCORING

    def test_prev_moves_cursor(self):
        adapter = _started()
        _roll_once(adapter)
        _handle_action(adapter, {"action": "next"})
        first = adapter.coordinator.state.selected_category
        _handle_action(adapter, {"action": "prev"})
        assert adapter.coordinator.state.selected_category != first

    def test_enter_scores(self):
        adapter = _started()
        _roll_once(adapter)
        _handle_action(adapter, {"action": "next"})
        category = adapter.coordinator.state.selected_category
        _handle_action(adapter, {"action": "enter"})
        assert adapter.coordinator.scorecard.is_filled(category)
        assert adapter.coordinator.turn == 2


# ── sound ────────────────────────────────────────────────────────────────────

class TestHandleActionSound:

    def test_sound_toggles(self):
        adapter = _make_adapter()
        _handle_action(adapter, {"action": "sound"})
        assert adapter.coordinator.state.sound_enabled is False
        assert adapter.get_game_snapshot()["message"] == "SOUND OFF"


# ── Routes ───────────────────────────────────────────────────────────────────

class TestIndexRoute:

    def test_index_serves_page(self):
        client = app.test_client()
        response = client.get("/")
        assert response.status_code == 200
        assert b"POCKET DICE" in response.data
