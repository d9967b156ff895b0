"""
GameCoordinator — All non-pygame game coordination logic.

Owns the authoritative GameState, dice generation, the timed roll animation,
and persistence of the high score and sound preference. Frontends read
coordinator properties to decide what to render and call its action methods
in response to input; every state change goes through game_engine.apply_action.
"""
from __future__ import annotations

import argparse
import logging
import random

from game_engine import (
    ConfirmScore,
    Direction,
    GameState,
    NewGame,
    Phase,
    RollDice,
    SelectCategory,
    StartScoring,
    ToggleHold,
    ToggleSound,
    apply_action,
    can_roll,
    preview_score,
)
from scoring import Scorecard, total_score
from storage import (
    JsonFileStore,
    KeyValueStore,
    MemoryStore,
    load_high_score,
    load_sound_enabled,
    save_high_score,
    save_sound_enabled,
)

logger = logging.getLogger(__name__)

FRAME_MS = 1000 / 60

# Roll animation: the first display hand appears at once, each later step
# waits a little longer (40 ms growing x1.15). The last step commits the roll.
ROLL_ANIMATION_STEPS = 10
ROLL_FIRST_DELAY_MS = 40
ROLL_DELAY_GROWTH = 1.15


def roll_step_delays(steps: int = ROLL_ANIMATION_STEPS) -> list[int]:
    """Delays in ms before each animation step after the first."""
    delays = []
    delay = ROLL_FIRST_DELAY_MS
    for _ in range(steps - 1):
        delay = int(delay * ROLL_DELAY_GROWTH)
        delays.append(delay)
    return delays


def roll_unheld(hand, held, rng) -> tuple[int, ...]:
    """New hand with every unheld die re-rolled (uniform 1-6)."""
    return tuple(value if keep else rng.randint(1, 6) for value, keep in zip(hand, held))


class GameCoordinator:
    """Coordinates game state, dice and persistence without any pygame dependency.

    Dispatches are serialized: while a roll animation runs, every action but
    ToggleSound is ignored, and nothing in the engine changes until the final
    RollDice is dispatched.
    """

    def __init__(self, store: KeyValueStore | None = None, rng: random.Random | None = None) -> None:
        """Initialize the coordinator.

        Args:
            store: Key/value store for high score and sound preference.
                   Defaults to an in-memory store.
            rng: Random source for dice. Defaults to a fresh random.Random().
        """
        self.store = store if store is not None else MemoryStore()
        self.rng = rng if rng is not None else random.Random()
        self.state = GameState.create_initial(
            high_score=load_high_score(self.store),
            sound_enabled=load_sound_enabled(self.store),
        )

        # Roll animation lifecycle (coordinator owns timing and the final hand)
        self.is_rolling = False
        self.roll_step = 0
        self.roll_timer = 0.0
        self.final_hand = None
        self.animation_hand = None
        self._delays = roll_step_delays()

        # Rejected-action counter, handy for debugging frontends
        self.rejected_actions = 0

    # ── Properties ────────────────────────────────────────────────────────

    @property
    def phase(self) -> Phase:
        return self.state.phase

    @property
    def hand(self) -> tuple[int, ...]:
        return self.state.hand

    @property
    def held(self) -> tuple[bool, ...]:
        return self.state.held

    @property
    def display_hand(self) -> tuple[int, ...]:
        """Hand to draw: the animated one while rolling, else the real one."""
        if self.is_rolling and self.animation_hand is not None:
            return self.animation_hand
        return self.state.hand

    @property
    def scorecard(self) -> Scorecard:
        return self.state.scorecard

    @property
    def rolls_left(self) -> int:
        return self.state.rolls_left

    @property
    def turn(self) -> int:
        return self.state.turn

    @property
    def game_over(self) -> bool:
        return self.state.phase == Phase.GAME_OVER

    @property
    def total_score(self) -> int:
        return total_score(self.state.scorecard, self.state.yahtzee_bonus)

    @property
    def upper_total(self) -> int:
        return self.state.upper_total

    @property
    def preview_score(self) -> int | None:
        return preview_score(self.state)

    @property
    def can_roll_now(self) -> bool:
        """Whether a roll can be started right now."""
        return (not self.is_rolling and self.state.phase != Phase.IDLE
                and can_roll(self.state))

    # ── Dispatch ──────────────────────────────────────────────────────────

    def _on_reject(self, state, action) -> None:
        self.rejected_actions += 1

    def dispatch(self, action) -> bool:
        """Apply one action to the game. Returns True if the state changed."""
        if self.is_rolling and not isinstance(action, ToggleSound):
            logger.debug("Ignoring %r during roll animation", action)
            return False

        old = self.state
        self.state = apply_action(old, action, on_reject=self._on_reject)
        if self.state is old:
            return False

        if isinstance(action, NewGame):
            logger.info("New game started")
        elif isinstance(action, ToggleSound):
            save_sound_enabled(self.store, self.state.sound_enabled)
        if self.state.phase == Phase.GAME_OVER and old.phase != Phase.GAME_OVER:
            self._on_game_over()
        return True

    def _on_game_over(self) -> None:
        """Persist the final total if it beats the stored high score."""
        final = self.total_score
        logger.info("Game over, final score %d", final)
        save_high_score(self.store, final)

    # ── Action methods (called by frontends on input) ─────────────────────

    def new_game(self) -> bool:
        return self.dispatch(NewGame())

    def toggle_hold(self, index: int) -> bool:
        return self.dispatch(ToggleHold(index))

    def start_scoring(self) -> bool:
        return self.dispatch(StartScoring())

    def select_category(self, direction) -> bool:
        return self.dispatch(SelectCategory(Direction(direction)))

    def confirm_score(self) -> bool:
        return self.dispatch(ConfirmScore())

    def toggle_sound(self) -> bool:
        return self.dispatch(ToggleSound())

    def roll_dice(self) -> bool:
        """Start a dice roll. Returns True if the animation started.

        The final hand is decided now; the roll is committed after the
        animation finishes (see tick() and finish_roll()).
        """
        if not self.can_roll_now:
            return False
        self.final_hand = roll_unheld(self.state.hand, self.state.held, self.rng)
        self.is_rolling = True
        self.roll_step = 0
        self.roll_timer = 0.0
        self._animate_step()
        return True

    def _animate_step(self) -> None:
        """Show one randomized hand; the last step commits the roll."""
        self.animation_hand = roll_unheld(self.state.hand, self.state.held, self.rng)
        self.roll_step += 1
        if self.roll_step >= ROLL_ANIMATION_STEPS:
            self._commit_roll()

    def _commit_roll(self) -> None:
        final = self.final_hand
        self.is_rolling = False
        self.animation_hand = None
        self.final_hand = None
        self.roll_timer = 0.0
        self.dispatch(RollDice(final))
        logger.debug("Rolled %s, %d rolls left", final, self.state.rolls_left)

    def tick(self, elapsed_ms: float = FRAME_MS) -> None:
        """Advance the roll animation by elapsed_ms."""
        if not self.is_rolling:
            return
        self.roll_timer += elapsed_ms
        while self.is_rolling and self.roll_timer >= self._delays[self.roll_step - 1]:
            self.roll_timer -= self._delays[self.roll_step - 1]
            self._animate_step()

    def finish_roll(self) -> None:
        """Skip the rest of the animation and commit the roll now."""
        if self.is_rolling:
            self._commit_roll()

    def cancel_roll(self) -> None:
        """Drop a roll in progress. The game state is untouched."""
        self.is_rolling = False
        self.animation_hand = None
        self.final_hand = None
        self.roll_step = 0
        self.roll_timer = 0.0


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments shared by all frontends.

    Args:
        argv: Optional list of args (for testing). None uses sys.argv.

    Returns:
        Parsed argparse.Namespace.
    """
    parser = argparse.ArgumentParser(description="Pocket Dice")
    parser.add_argument("--store", metavar="PATH", default=None,
                        help="JSON file for high score and settings (default: ~/.pocket_dice.json)")
    parser.add_argument("--seed", type=int, default=None,
                        help="Seed the dice for a reproducible game")
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"], default="WARNING",
                        help="Logging level (default: WARNING)")
    return parser.parse_args(argv)


def coordinator_from_args(args: argparse.Namespace) -> GameCoordinator:
    """Configure logging and build a coordinator from parsed arguments."""
    logging.basicConfig(level=getattr(logging, args.log_level),
                        format="%(asctime)s %(name)s %(levelname)s %(message)s")
    rng = random.Random(args.seed) if args.seed is not None else None
    return GameCoordinator(store=JsonFileStore(args.store), rng=rng)
