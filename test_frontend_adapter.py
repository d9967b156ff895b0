"""Tests for FrontendAdapter — the hand-held's buttons, notices and snapshot."""
import json
import random

from frontend_adapter import (
    SOUND_NOTICE_MS,
    WIN_JINGLE_DELAY_MS,
    FrontendAdapter,
    NullSound,
    SoundInterface,
)
from game_coordinator import GameCoordinator
from game_engine import NUM_TURNS, Phase
from scoring import CATEGORY_ORDER, Category
from storage import MemoryStore


class RecordingSound(NullSound):
    """NullSound that remembers which effects were asked for."""

    def __init__(self):
        super().__init__()
        self.played = []

    def play_beep(self): self.played.append("beep")
    def play_select(self): self.played.append("select")
    def play_enter(self): self.played.append("enter")
    def play_roll(self): self.played.append("roll")
    def play_win(self): self.played.append("win")


def make_adapter(seed=42, **stored):
    coord = GameCoordinator(store=MemoryStore(stored), rng=random.Random(seed))
    return FrontendAdapter(coord, sound=RecordingSound())


def roll(adapter):
    """Press ROLL and let the animation finish."""
    assert adapter.press_roll()
    adapter.coordinator.finish_roll()


def started(seed=42):
    adapter = make_adapter(seed)
    adapter.press_roll()
    adapter.sound.played.clear()
    return adapter


# ═══════════════════════════════════════════════════════════════════════════════
# SOUND INTERFACE
# ═══════════════════════════════════════════════════════════════════════════════

class TestNullSound:
    def test_implements_interface(self):
        assert isinstance(NullSound(), SoundInterface)

    def test_toggle(self):
        sound = NullSound()
        assert sound.enabled is False
        sound.set_enabled(True)
        assert sound.enabled is True

    def test_play_methods_are_noop(self):
        sound = NullSound()
        sound.play_beep()
        sound.play_select()
        sound.play_enter()
        sound.play_roll()
        sound.play_win()

    def test_adapter_mirrors_sound_preference(self):
        adapter = make_adapter(sound_enabled=False)
        assert adapter.sound.enabled is False
        assert make_adapter().sound.enabled is True


# ═══════════════════════════════════════════════════════════════════════════════
# ROLL BUTTON
# ═══════════════════════════════════════════════════════════════════════════════

class TestRollButton:
    def test_starts_game_from_idle(self):
        adapter = make_adapter()
        assert adapter.press_roll() is True
        assert adapter.phase == Phase.PLAYING
        assert adapter.coordinator.is_rolling is False
        assert adapter.sound.played == ["win"]

    def test_rolls_during_game(self):
        adapter = started()
        assert adapter.press_roll() is True
        assert adapter.coordinator.is_rolling is True
        assert adapter.sound.played == ["roll"]

    def test_ignored_while_rolling(self):
        adapter = started()
        adapter.press_roll()
        assert adapter.press_roll() is False

    def test_no_roll_when_out_of_rolls(self):
        adapter = started()
        for _ in range(3):
            roll(adapter)
        adapter.sound.played.clear()
        assert adapter.press_roll() is False
        assert adapter.sound.played == []

    def test_starts_new_game_after_game_over(self):
        adapter = started()
        play_to_end(adapter)
        assert adapter.press_roll() is True
        assert adapter.phase == Phase.PLAYING
        assert adapter.coordinator.turn == 1


# ═══════════════════════════════════════════════════════════════════════════════
# HOLD BUTTONS
# ═══════════════════════════════════════════════════════════════════════════════

class TestHoldButtons:
    def test_no_hold_before_first_roll(self):
        adapter = started()
        assert adapter.press_hold(0) is False
        assert adapter.sound.played == []

    def test_hold_after_roll(self):
        adapter = started()
        roll(adapter)
        adapter.sound.played.clear()
        assert adapter.press_hold(1) is True
        assert adapter.coordinator.held[1] is True
        assert adapter.sound.played == ["beep"]

    def test_no_hold_while_rolling(self):
        adapter = started()
        roll(adapter)
        adapter.press_roll()
        assert adapter.press_hold(1) is False

    def test_no_hold_while_scoring(self):
        adapter = started()
        roll(adapter)
        adapter.press_select("next")
        assert adapter.press_hold(1) is False


# ═══════════════════════════════════════════════════════════════════════════════
# PREV / NEXT / ENTER
# ═══════════════════════════════════════════════════════════════════════════════

class TestSelectAndEnter:
    def test_select_before_first_roll_does_nothing(self):
        adapter = started()
        assert adapter.press_select("next") is False
        assert adapter.phase == Phase.PLAYING

    def test_first_press_enters_scoring(self):
        adapter = started()
        roll(adapter)
        adapter.sound.played.clear()
        assert adapter.press_select("next") is True
        assert adapter.phase == Phase.SCORING
        assert adapter.sound.played == ["select"]

    def test_later_presses_move_cursor(self):
        adapter = started()
        roll(adapter)
        adapter.press_select("next")
        first = adapter.coordinator.state.selected_category
        adapter.press_select("prev")
        assert adapter.coordinator.state.selected_category != first

    def test_enter_only_while_scoring(self):
        adapter = started()
        roll(adapter)
        adapter.sound.played.clear()
        assert adapter.press_enter() is False
        assert adapter.sound.played == []

    def test_enter_scores_and_advances(self):
        adapter = started()
        roll(adapter)
        adapter.press_select("next")
        category = adapter.coordinator.state.selected_category
        expected = adapter.preview_score
        adapter.sound.played.clear()
        assert adapter.press_enter() is True
        assert adapter.coordinator.scorecard.scores[category] == expected
        assert adapter.coordinator.turn == 2
        assert adapter.sound.played == ["enter"]


def play_to_end(adapter):
    for _ in range(NUM_TURNS):
        roll(adapter)
        adapter.press_select("next")
        adapter.press_enter()
    assert adapter.coordinator.game_over


class TestWinJingle:
    def test_win_after_delay(self):
        adapter = started()
        play_to_end(adapter)
        adapter.sound.played.clear()
        events = adapter.update(WIN_JINGLE_DELAY_MS - 1)
        assert events["win_played"] is False
        events = adapter.update(1)
        assert events["win_played"] is True
        assert adapter.sound.played == ["win"]

    def test_plays_once(self):
        adapter = started()
        play_to_end(adapter)
        adapter.update(WIN_JINGLE_DELAY_MS)
        adapter.sound.played.clear()
        adapter.update(WIN_JINGLE_DELAY_MS)
        assert adapter.sound.played == []

    def test_game_over_message(self):
        adapter = started()
        play_to_end(adapter)
        assert adapter.lcd_message == "GAME OVER"


# ═══════════════════════════════════════════════════════════════════════════════
# NEW BUTTON
# ═══════════════════════════════════════════════════════════════════════════════

class TestNewButton:
    def test_first_press_mid_game_asks(self):
        adapter = started()
        roll(adapter)
        adapter.sound.played.clear()
        assert adapter.press_new() is False
        assert adapter.reset_confirm is True
        assert adapter.lcd_message == "NEW GAME? PRESS NEW"
        assert adapter.sound.played == ["beep"]
        assert adapter.coordinator.rolls_left == 2

    def test_second_press_restarts(self):
        adapter = started()
        roll(adapter)
        adapter.press_new()
        adapter.sound.played.clear()
        assert adapter.press_new() is True
        assert adapter.reset_confirm is False
        assert adapter.coordinator.rolls_left == 3
        assert adapter.sound.played == ["win"]

    def test_other_button_cancels_prompt(self):
        adapter = started()
        roll(adapter)
        adapter.press_new()
        adapter.press_roll()
        assert adapter.reset_confirm is False
        assert adapter.lcd_message is None

    def test_single_press_when_idle(self):
        adapter = make_adapter()
        assert adapter.press_new() is True
        assert adapter.phase == Phase.PLAYING

    def test_single_press_after_game_over(self):
        adapter = started()
        play_to_end(adapter)
        assert adapter.press_new() is True
        assert adapter.phase == Phase.PLAYING


# ═══════════════════════════════════════════════════════════════════════════════
# SOUND BUTTON
# ═══════════════════════════════════════════════════════════════════════════════

class TestSoundButton:
    def test_toggle_off_and_on(self):
        adapter = make_adapter()
        assert adapter.press_sound() is False
        assert adapter.sound.enabled is False
        assert adapter.lcd_message == "SOUND OFF"
        assert adapter.press_sound() is True
        assert adapter.lcd_message == "SOUND ON"

    def test_notice_clears(self):
        adapter = make_adapter()
        adapter.press_sound()
        assert adapter.update(SOUND_NOTICE_MS - 1)["notice_cleared"] is False
        assert adapter.update(1)["notice_cleared"] is True
        assert adapter.sound_notice is None
        assert adapter.lcd_message is None

    def test_notice_outranks_other_messages(self):
        adapter = started()
        roll(adapter)
        adapter.press_new()
        adapter.press_sound()
        assert adapter.lcd_message == "SOUND OFF"
        adapter.update(SOUND_NOTICE_MS)
        assert adapter.lcd_message == "NEW GAME? PRESS NEW"

    def test_persisted(self):
        adapter = make_adapter()
        adapter.press_sound()
        assert adapter.coordinator.store.data["sound_enabled"] is False


# ═══════════════════════════════════════════════════════════════════════════════
# UPDATE / DISPLAY
# ═══════════════════════════════════════════════════════════════════════════════

class TestUpdate:
    def test_roll_ended_event(self):
        adapter = started()
        adapter.press_roll()
        ended = False
        for _ in range(200):
            if adapter.update(1000 / 60)["roll_ended"]:
                ended = True
                break
        assert ended
        assert adapter.coordinator.rolls_left == 2

    def test_quiet_frame(self):
        adapter = make_adapter()
        assert adapter.update(16) == {
            "roll_ended": False, "win_played": False, "notice_cleared": False,
        }


class TestCategoryDisplay:
    def test_blank_when_unset(self):
        adapter = started()
        assert adapter.category_display(Category.CHANCE) == ""

    def test_preview_on_selected(self):
        adapter = started()
        roll(adapter)
        adapter.press_select("next")
        selected = adapter.coordinator.state.selected_category
        assert adapter.category_display(selected) == str(adapter.preview_score)

    def test_recorded_score(self):
        adapter = started()
        roll(adapter)
        adapter.press_select("next")
        selected = adapter.coordinator.state.selected_category
        adapter.press_enter()
        value = adapter.coordinator.scorecard.scores[selected]
        assert adapter.category_display(selected) == str(value)


class TestSnapshot:
    def test_json_serializable(self):
        adapter = started()
        roll(adapter)
        adapter.press_select("next")
        snapshot = adapter.get_game_snapshot()
        assert json.loads(json.dumps(snapshot)) == snapshot

    def test_contents(self):
        adapter = make_adapter(yahtzee_highscore=77)
        snapshot = adapter.get_game_snapshot()
        assert snapshot["phase"] == "idle"
        assert snapshot["dice"] == [1, 1, 1, 1, 1]
        assert snapshot["rolls_left"] == 3
        assert snapshot["high_score"] == 77
        assert snapshot["selected_category"] is None
        assert [c["name"] for c in snapshot["categories"]] == [c.name for c in CATEGORY_ORDER]

    def test_selected_flag(self):
        adapter = started()
        roll(adapter)
        adapter.press_select("next")
        snapshot = adapter.get_game_snapshot()
        selected = [c["name"] for c in snapshot["categories"] if c["selected"]]
        assert selected == [snapshot["selected_category"]]
        assert snapshot["phase"] == "scoring"

