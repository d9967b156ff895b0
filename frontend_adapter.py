"""FrontendAdapter — Shared UI state management for all Pocket Dice frontends.

Maps the hand-held's buttons (ROLL, HOLD x5, PREV/NEXT, ENTER, NEW, SOUND)
onto coordinator actions, owns the reset confirmation and the sound-status
notification, and tells the audio collaborator what happened.
Pure Python — no pygame or other frontend dependency.

Each frontend (pygame, TUI, web) creates a FrontendAdapter wrapping a
GameCoordinator, keeping only rendering and input translation
frontend-specific.
"""

from abc import ABC, abstractmethod

from game_engine import Phase
from scoring import CATEGORY_LABELS, CATEGORY_ORDER, upper_bonus

# Delay between the final ENTER and the win jingle
WIN_JINGLE_DELAY_MS = 500
# How long "SOUND ON/OFF" stays on the LCD
SOUND_NOTICE_MS = 1200


# ── Sound interface ───────────────────────────────────────────────────────────

class SoundInterface(ABC):
    """Abstract sound interface — each frontend provides its own implementation."""

    @abstractmethod
    def play_beep(self): ...

    @abstractmethod
    def play_select(self): ...

    @abstractmethod
    def play_enter(self): ...

    @abstractmethod
    def play_roll(self): ...

    @abstractmethod
    def play_win(self): ...

    @abstractmethod
    def set_enabled(self, enabled): ...

    @property
    @abstractmethod
    def enabled(self) -> bool: ...


class NullSound(SoundInterface):
    """No-op sound for frontends without audio (TUI, server-side web)."""

    def __init__(self):
        self._enabled = False

    def play_beep(self): pass
    def play_select(self): pass
    def play_enter(self): pass
    def play_roll(self): pass
    def play_win(self): pass

    def set_enabled(self, enabled):
        self._enabled = bool(enabled)

    @property
    def enabled(self):
        return self._enabled


# ── Frontend Adapter ──────────────────────────────────────────────────────────

class FrontendAdapter:
    """Shared UI state management for all Pocket Dice frontends.

    Wraps a GameCoordinator; every press_* method corresponds to one
    physical button on the hand-held.
    """

    def __init__(self, coordinator, sound=None):
        self.coordinator = coordinator
        self.sound = sound or NullSound()
        self.sound.set_enabled(coordinator.state.sound_enabled)

        # "NEW GAME? PRESS NEW" prompt armed by the first NEW press mid-game
        self.reset_confirm = False

        # "SOUND ON" / "SOUND OFF" notification
        self.sound_notice = None
        self._sound_notice_ms = 0.0

        # Win jingle scheduled after the game-ending ENTER
        self._win_pending_ms = None

    @property
    def phase(self):
        return self.coordinator.phase

    # ── Buttons ───────────────────────────────────────────────────────────

    def press_roll(self):
        """ROLL button. Starts a new game when none is running.

        Returns True if a roll animation or new game started.
        """
        coord = self.coordinator
        if coord.is_rolling:
            return False
        if self.phase in (Phase.IDLE, Phase.GAME_OVER):
            self.sound.play_win()
            coord.new_game()
            self.reset_confirm = False
            return True
        self.reset_confirm = False
        if not coord.can_roll_now:
            return False
        self.sound.play_roll()
        return coord.roll_dice()

    def press_hold(self, index):
        """HOLD button under die index (0-4)."""
        coord = self.coordinator
        if coord.is_rolling or self.phase != Phase.PLAYING or coord.rolls_left == 3:
            return False
        self.sound.play_beep()
        return coord.toggle_hold(index)

    def press_select(self, direction):
        """PREV/NEXT buttons: enter scoring, or move the category cursor.

        Args:
            direction: "next" or "prev"
        """
        coord = self.coordinator
        if coord.is_rolling:
            return False
        self.reset_confirm = False
        if self.phase == Phase.PLAYING:
            if coord.rolls_left == 3:
                return False
            self.sound.play_select()
            return coord.start_scoring()
        if self.phase == Phase.SCORING:
            self.sound.play_select()
            return coord.select_category(direction)
        return False

    def press_enter(self):
        """ENTER button: confirm the selected category."""
        coord = self.coordinator
        if coord.is_rolling:
            return False
        self.reset_confirm = False
        if self.phase != Phase.SCORING:
            return False
        self.sound.play_enter()
        scored = coord.confirm_score()
        if scored and coord.game_over:
            self._win_pending_ms = WIN_JINGLE_DELAY_MS
        return scored

    def press_new(self):
        """NEW button. Mid-game it takes two presses."""
        coord = self.coordinator
        if coord.is_rolling:
            return False
        if self.phase in (Phase.IDLE, Phase.GAME_OVER) or self.reset_confirm:
            self.sound.play_win()
            self.reset_confirm = False
            self._win_pending_ms = None
            return coord.new_game()
        self.sound.play_beep()
        self.reset_confirm = True
        return False

    def press_sound(self):
        """SOUND button: toggle and show the notice."""
        self.coordinator.toggle_sound()
        enabled = self.coordinator.state.sound_enabled
        self.sound.set_enabled(enabled)
        self.sound_notice = "ON" if enabled else "OFF"
        self._sound_notice_ms = SOUND_NOTICE_MS
        return enabled

    # ── Per-frame update ──────────────────────────────────────────────────

    def update(self, elapsed_ms):
        """Advance the coordinator and UI timers.

        Returns dict of events that occurred this frame:
            roll_ended, win_played, notice_cleared
        """
        coord = self.coordinator
        events = {"roll_ended": False, "win_played": False, "notice_cleared": False}

        was_rolling = coord.is_rolling
        coord.tick(elapsed_ms)
        if was_rolling and not coord.is_rolling:
            events["roll_ended"] = True

        if self._win_pending_ms is not None:
            self._win_pending_ms -= elapsed_ms
            if self._win_pending_ms <= 0:
                self._win_pending_ms = None
                self.sound.play_win()
                events["win_played"] = True

        if self.sound_notice is not None:
            self._sound_notice_ms -= elapsed_ms
            if self._sound_notice_ms <= 0:
                self.sound_notice = None
                events["notice_cleared"] = True

        return events

    # ── Display helpers ───────────────────────────────────────────────────

    @property
    def preview_score(self):
        return self.coordinator.preview_score

    def category_display(self, category):
        """Text for a category cell: recorded score, live preview, or blank."""
        state = self.coordinator.state
        value = state.scorecard.scores[category]
        if value is not None:
            return str(value)
        if state.phase == Phase.SCORING and state.selected_category == category:
            return str(self.preview_score)
        return ""

    @property
    def lcd_message(self):
        """Overlay text on the LCD, highest priority first, or None."""
        if self.sound_notice is not None:
            return f"SOUND {self.sound_notice}"
        if self.reset_confirm:
            return "NEW GAME? PRESS NEW"
        if self.coordinator.game_over:
            return "GAME OVER"
        return None

    # ── Full state snapshot (for web frontend) ────────────────────────────

    def get_game_snapshot(self):
        """Return a complete JSON-serializable dict of game + UI state."""
        coord = self.coordinator
        state = coord.state
        selected = state.selected_category

        categories = []
        for cat in CATEGORY_ORDER:
            categories.append({
                "name": cat.name,
                "label": CATEGORY_LABELS[cat],
                "title": cat.value,
                "score": state.scorecard.scores[cat],
                "display": self.category_display(cat),
                "selected": cat == selected,
            })

        return {
            "phase": state.phase.value,
            "dice": list(coord.display_hand),
            "held": list(state.held),
            "rolls_left": state.rolls_left,
            "turn": state.turn,
            "is_rolling": coord.is_rolling,
            "can_roll": coord.can_roll_now,
            "is_joker": state.is_joker,
            "categories": categories,
            "selected_category": selected.name if selected else None,
            "preview_score": self.preview_score,
            "upper_total": state.upper_total,
            "upper_bonus": upper_bonus(state.scorecard),
            "yahtzee_bonus": state.yahtzee_bonus,
            "total_score": state.total_score,
            "high_score": state.high_score,
            "sound_enabled": state.sound_enabled,
            "reset_confirm": self.reset_confirm,
            "sound_notice": self.sound_notice,
            "message": self.lcd_message,
        }

