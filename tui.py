#!/usr/bin/env python3
"""
Pocket Dice TUI — Terminal-based frontend using Textual.

Keyboard-driven LCD: box-art dice, the category rows of the hand-held,
rolls / upper progress / score line, and the NEW GAME? and SOUND notices.
"""
import logging

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.css.query import NoMatches
from textual.widgets import Footer, Header, Static

from frontend_adapter import FrontendAdapter, NullSound
from game_coordinator import coordinator_from_args, parse_args
from game_engine import Phase
from scoring import CATEGORY_LABELS, LOWER_CATEGORIES, UPPER_CATEGORIES, UPPER_BONUS_THRESHOLD

logger = logging.getLogger(__name__)

TICK_SECONDS = 1 / 30


# ── Box-art die faces ─────────────────────────────────────────────────────────

BOX_ART = {
    1: ["┌───────┐", "│       │", "│   ●   │", "│       │", "└───────┘"],
    2: ["┌───────┐", "│ ●     │", "│       │", "│     ● │", "└───────┘"],
    3: ["┌───────┐", "│ ●     │", "│   ●   │", "│     ● │", "└───────┘"],
    4: ["┌───────┐", "│ ●   ● │", "│       │", "│ ●   ● │", "└───────┘"],
    5: ["┌───────┐", "│ ●   ● │", "│   ●   │", "│ ●   ● │", "└───────┘"],
    6: ["┌───────┐", "│ ●   ● │", "│ ●   ● │", "│ ●   ● │", "└───────┘"],
}

BOX_ART_HELD = {
    v: [
        line.replace("┌", "╔").replace("┐", "╗")
        .replace("└", "╚").replace("┘", "╝")
        .replace("─", "═").replace("│", "║")
        for line in lines
    ]
    for v, lines in BOX_ART.items()
}


def render_dice_box(hand, held):
    """Render 5 dice as box art, side by side, with HOLD labels."""
    lines = []
    for row in range(5):
        parts = []
        for value, keep in zip(hand, held):
            art = BOX_ART_HELD if keep else BOX_ART
            parts.append(art[value][row])
        lines.append("  ".join(parts))
    lines.append("  ".join(("  HOLD   " if keep else f"   [{i + 1}]   ") for i, keep in enumerate(held)))
    return "\n".join(lines)


def render_category_row(adapter, categories, width=7):
    """Labels, cursor and values for one LCD category row."""
    selected = adapter.coordinator.state.selected_category
    labels = "".join(CATEGORY_LABELS[cat].center(width) for cat in categories)
    cursor = "".join(("▼" if cat == selected else "").center(width) for cat in categories)
    values = "".join(adapter.category_display(cat).center(width) for cat in categories)
    return f"{labels}\n{cursor}\n[bold]{values}[/bold]"


def render_status(adapter):
    """Rolls indicator, upper progress, bonus and total."""
    state = adapter.coordinator.state
    rolls = "".join("■" if i < state.rolls_left else "□" for i in range(3))
    bonus = "BONUS 35" if state.upper_total >= UPPER_BONUS_THRESHOLD else "        "
    return (f"ROLLS {rolls}    UPPER {state.upper_total}/{UPPER_BONUS_THRESHOLD}"
            f"    {bonus}    SCORE [bold]{state.total_score}[/bold]")


# ── Widgets ──────────────────────────────────────────────────────────────────

class LCDDisplay(Static):
    """The whole LCD screen."""

    def render(self):
        adapter = self.app.adapter
        coord = adapter.coordinator
        parts = [render_category_row(adapter, UPPER_CATEGORIES, width=9), ""]
        message = adapter.lcd_message
        if message:
            parts.append(f"\n\n[bold]{message.center(53)}[/bold]\n\n\n")
        else:
            parts.append(render_dice_box(coord.display_hand, coord.state.held))
        parts += ["", render_status(adapter), "", render_category_row(adapter, LOWER_CATEGORIES)]
        return "\n".join(parts)


class InfoDisplay(Static):
    """Turn counter, high score and a hint for the next step."""

    def render(self):
        coord = self.app.coordinator
        state = coord.state
        if state.phase == Phase.IDLE:
            hint = "Press SPACE to start"
        elif state.phase == Phase.GAME_OVER:
            hint = "Press SPACE or N for a new game"
        elif state.phase == Phase.SCORING:
            hint = "←/→ choose, ENTER to score"
            if state.is_joker:
                hint = "JOKER! " + hint
        elif state.rolls_left == 3:
            hint = "Press SPACE to roll"
        else:
            hint = "1-5 hold, SPACE roll, ←/→ score now"
        sound = "on" if state.sound_enabled else "off"
        return (f"Turn {state.turn}/13    High score {state.high_score}    Sound {sound}\n"
                f"[dim]{hint}[/dim]")


# ── Main App ─────────────────────────────────────────────────────────────────

class PocketDiceApp(App):
    """Pocket Dice terminal UI application."""

    CSS = """
    Screen {
        layout: vertical;
        align: center middle;
    }

    #lcd {
        width: 66;
        height: auto;
        padding: 1 2;
        border: heavy $accent;
    }

    #info {
        width: 66;
        height: auto;
        padding: 0 2;
    }
    """

    BINDINGS = [
        Binding("space", "roll", "Roll", show=True),
        Binding("1", "hold(0)", "Hold 1"),
        Binding("2", "hold(1)", "Hold 2"),
        Binding("3", "hold(2)", "Hold 3"),
        Binding("4", "hold(3)", "Hold 4"),
        Binding("5", "hold(4)", "Hold 5"),
        Binding("left", "select('prev')", "Prev", show=True),
        Binding("right", "select('next')", "Next", show=True),
        Binding("enter", "enter", "Score", show=True),
        Binding("n", "new_game", "New game", show=True),
        Binding("s", "sound", "Sound", show=True),
        Binding("escape", "quit", "Quit"),
    ]

    def __init__(self, coordinator):
        super().__init__()
        self.coordinator = coordinator
        self.adapter = FrontendAdapter(coordinator, sound=NullSound())
        self._tick_timer = None

    def compose(self) -> ComposeResult:
        yield Header()
        with Vertical():
            yield LCDDisplay(id="lcd")
            yield InfoDisplay(id="info")
        yield Footer()

    def on_mount(self):
        self.title = "Pocket Dice"
        self._tick_timer = self.set_interval(TICK_SECONDS, self._game_tick)

    def _game_tick(self):
        """Per-frame update; skipped while nothing is animating."""
        adapter = self.adapter
        if not self.coordinator.is_rolling and adapter.sound_notice is None:
            return
        adapter.update(TICK_SECONDS * 1000)
        self._refresh_display()

    def _refresh_display(self):
        """Refresh all display widgets."""
        try:
            self.query_one("#lcd", LCDDisplay).refresh()
            self.query_one("#info", InfoDisplay).refresh()
        except NoMatches:
            logger.debug("Refresh before mount", exc_info=True)

    # ── Actions ──────────────────────────────────────────────────────────

    def action_roll(self):
        self.adapter.press_roll()
        self._refresh_display()

    def action_hold(self, index: int):
        self.adapter.press_hold(index)
        self._refresh_display()

    def action_select(self, direction: str):
        self.adapter.press_select(direction)
        self._refresh_display()

    def action_enter(self):
        self.adapter.press_enter()
        self._refresh_display()

    def action_new_game(self):
        self.adapter.press_new()
        self._refresh_display()

    def action_sound(self):
        self.adapter.press_sound()
        self._refresh_display()


def main(argv=None):
    """Entry point for the TUI."""
    coordinator = coordinator_from_args(parse_args(argv))
    app = PocketDiceApp(coordinator)
    app.run()


if __name__ == "__main__":
    main()
