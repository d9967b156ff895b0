"""
Pocket Dice Game Engine - turn state machine without GUI dependencies

The authoritative game state is an immutable GameState. Every change goes
through apply_action(), which accepts one of a closed set of actions and
returns the next state. Actions that are not legal in the current phase are
no-ops: the very same state object comes back, and the rejection is reported
to the optional on_reject hook and the module logger.

Dice are never generated here. RollDice carries the new hand, so the engine
stays deterministic.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Optional, Tuple

from scoring import (
    CATEGORY_ORDER,
    HAND_SIZE,
    YAHTZEE_SCORE,
    YAHTZEE_BONUS,
    Category,
    Scorecard,
    calculate_score,
    forced_category,
    is_joker,
    total_score,
    upper_total,
    validate_hand,
)

logger = logging.getLogger(__name__)

MAX_ROLLS = 3
NUM_TURNS = len(CATEGORY_ORDER)


class Phase(Enum):
    """Turn phases"""
    IDLE = "idle"            # no game started yet
    PLAYING = "playing"      # rolling, category not chosen
    SCORING = "scoring"      # choosing a category
    GAME_OVER = "gameOver"   # all 13 categories set


class Direction(Enum):
    """Cursor movement for SelectCategory"""
    NEXT = "next"
    PREV = "prev"


# ── Actions ───────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class NewGame:
    """Start over, keeping the high score and sound preference"""


@dataclass(frozen=True)
class ToggleHold:
    """Flip the held flag of one die"""
    index: int

    def __post_init__(self):
        if isinstance(self.index, bool) or not isinstance(self.index, int) \
                or not 0 <= self.index < HAND_SIZE:
            raise ValueError(f"hold index must be 0-{HAND_SIZE - 1}, got {self.index!r}")


@dataclass(frozen=True)
class RollDice:
    """Record the result of a roll; the caller generates the dice"""
    new_hand: Tuple[int, ...]

    def __post_init__(self):
        object.__setattr__(self, "new_hand", validate_hand(self.new_hand))


@dataclass(frozen=True)
class StartScoring:
    """Stop rolling early and choose a category"""


@dataclass(frozen=True)
class SelectCategory:
    """Move the category cursor"""
    direction: Direction

    def __post_init__(self):
        # Accepts "next"/"prev" as well as Direction members
        object.__setattr__(self, "direction", Direction(self.direction))


@dataclass(frozen=True)
class ConfirmScore:
    """Write the selected category's score into the sheet"""


@dataclass(frozen=True)
class ToggleSound:
    """Flip the sound preference"""


# ── State ─────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class GameState:
    """Immutable game state - the complete game at a point in time"""
    hand: Tuple[int, ...] = (1, 1, 1, 1, 1)
    held: Tuple[bool, ...] = (False,) * HAND_SIZE
    rolls_left: int = MAX_ROLLS
    scorecard: Scorecard = None
    selected_category: Optional[Category] = None
    phase: Phase = Phase.IDLE
    turn: int = 1
    high_score: int = 0
    yahtzee_bonus: int = 0
    sound_enabled: bool = True

    def __post_init__(self):
        if self.scorecard is None:
            object.__setattr__(self, "scorecard", Scorecard())

    @staticmethod
    def create_initial(high_score: int = 0, sound_enabled: bool = True) -> GameState:
        """Create the power-on state: idle, empty sheet, all dice showing 1"""
        return GameState(high_score=high_score, sound_enabled=sound_enabled)

    @property
    def is_joker(self) -> bool:
        """Whether the current hand is a Joker roll"""
        return is_joker(self.hand, self.scorecard)

    @property
    def upper_total(self) -> int:
        return upper_total(self.scorecard)

    @property
    def total_score(self) -> int:
        return total_score(self.scorecard, self.yahtzee_bonus)

    @property
    def is_complete(self) -> bool:
        return self.scorecard.is_complete()


# ── Helpers ───────────────────────────────────────────────────────────────────

def initial_selection(hand, scorecard) -> Optional[Category]:
    """
    Category the cursor starts on when scoring begins.

    A Joker whose matching upper category is open forces that category.
    Otherwise the first unset category in canonical order, or None when
    the sheet is full.
    """
    forced = forced_category(hand, scorecard)
    if forced is not None:
        return forced
    unfilled = scorecard.unfilled()
    return unfilled[0] if unfilled else None


def preview_score(state: GameState) -> Optional[int]:
    """Score the selected category would get, or None outside of scoring"""
    if state.phase != Phase.SCORING or state.selected_category is None:
        return None
    return calculate_score(state.selected_category, state.hand, state.is_joker)


def can_roll(state: GameState) -> bool:
    """Rolling is legal while rolls remain, except once the sheet is full"""
    return state.phase != Phase.GAME_OVER and state.rolls_left > 0


def can_toggle_hold(state: GameState) -> bool:
    """Holding is only possible after the first roll of a turn"""
    return state.phase == Phase.PLAYING and state.rolls_left < MAX_ROLLS


def can_start_scoring(state: GameState) -> bool:
    return state.phase == Phase.PLAYING and state.rolls_left < MAX_ROLLS


# ── Transitions ───────────────────────────────────────────────────────────────

def new_game(state: GameState) -> GameState:
    """Fresh game in the playing phase; high score and sound carry over"""
    return replace(
        GameState.create_initial(high_score=state.high_score, sound_enabled=state.sound_enabled),
        phase=Phase.PLAYING,
    )


def toggle_hold(state: GameState, index: int) -> GameState:
    """Flip the held flag at index. No-op before the first roll of a turn."""
    if not can_toggle_hold(state):
        return state
    held = list(state.held)
    held[index] = not held[index]
    return replace(state, held=tuple(held))


def roll_dice(state: GameState, new_hand) -> GameState:
    """
    Record a roll and use up one roll.

    The last roll of a turn moves straight into scoring with the initial
    cursor. Any earlier roll leaves the game in the playing phase with no
    selection, which also covers rolling again after an early START_SCORING.
    """
    if not can_roll(state):
        return state

    new_hand = tuple(new_hand)
    rolls_left = state.rolls_left - 1
    if rolls_left == 0:
        return replace(state,
                       hand=new_hand,
                       rolls_left=0,
                       phase=Phase.SCORING,
                       selected_category=initial_selection(new_hand, state.scorecard))
    return replace(state,
                   hand=new_hand,
                   rolls_left=rolls_left,
                   phase=Phase.PLAYING,
                   selected_category=None)


def start_scoring(state: GameState) -> GameState:
    """Stop rolling and move to category selection"""
    if not can_start_scoring(state):
        return state
    selection = initial_selection(state.hand, state.scorecard)
    if selection is None:
        return state
    return replace(state, phase=Phase.SCORING, selected_category=selection)


def select_category(state: GameState, direction) -> GameState:
    """
    Move the cursor to the next/previous unset category, wrapping around.

    While a Joker forces an open upper category, the cursor stays put.
    """
    if state.phase != Phase.SCORING or state.selected_category is None:
        return state
    if forced_category(state.hand, state.scorecard) is not None:
        return state

    step = 1 if Direction(direction) == Direction.NEXT else -1
    count = len(CATEGORY_ORDER)
    index = CATEGORY_ORDER.index(state.selected_category)
    for _ in range(count):
        index = (index + step) % count
        if not state.scorecard.is_filled(CATEGORY_ORDER[index]):
            break
    return replace(state, selected_category=CATEGORY_ORDER[index])


def confirm_score(state: GameState) -> GameState:
    """
    Lock in the selected category and advance to the next turn.

    A Joker on a sheet whose Yahtzee box holds 50 earns +100. Filling the
    last category ends the game and raises the high score if beaten.
    """
    category = state.selected_category
    if state.phase != Phase.SCORING or category is None:
        return state
    if state.scorecard.is_filled(category):
        return state

    joker = state.is_joker
    score = calculate_score(category, state.hand, joker)
    scorecard = state.scorecard.with_score(category, score)

    yahtzee_bonus = state.yahtzee_bonus
    if joker and state.scorecard.scores[Category.YAHTZEE] == YAHTZEE_SCORE:
        yahtzee_bonus += YAHTZEE_BONUS

    common = dict(
        scorecard=scorecard,
        yahtzee_bonus=yahtzee_bonus,
        rolls_left=MAX_ROLLS,
        held=(False,) * HAND_SIZE,
        selected_category=None,
    )

    if scorecard.is_complete():
        final = total_score(scorecard, yahtzee_bonus)
        return replace(state,
                       phase=Phase.GAME_OVER,
                       turn=NUM_TURNS,
                       high_score=max(final, state.high_score),
                       **common)

    return replace(state, phase=Phase.PLAYING, turn=state.turn + 1, **common)


def toggle_sound(state: GameState) -> GameState:
    """Flip the sound preference; no effect on scoring"""
    return replace(state, sound_enabled=not state.sound_enabled)


def apply_action(
    state: GameState,
    action,
    on_reject: Optional[Callable[[GameState, object], None]] = None,
) -> GameState:
    """
    Apply one action and return the next state.

    Args:
        state: Current game state
        action: One of NewGame, ToggleHold, RollDice, StartScoring,
                SelectCategory, ConfirmScore, ToggleSound
        on_reject: Optional callback(state, action) for actions that were
                   not legal in the current phase

    Returns:
        The next GameState, or the same object if the action was rejected

    Raises:
        TypeError: if action is not one of the known action types
    """
    if isinstance(action, NewGame):
        new_state = new_game(state)
    elif isinstance(action, ToggleHold):
        new_state = toggle_hold(state, action.index)
    elif isinstance(action, RollDice):
        new_state = roll_dice(state, action.new_hand)
    elif isinstance(action, StartScoring):
        new_state = start_scoring(state)
    elif isinstance(action, SelectCategory):
        new_state = select_category(state, action.direction)
    elif isinstance(action, ConfirmScore):
        new_state = confirm_score(state)
    elif isinstance(action, ToggleSound):
        new_state = toggle_sound(state)
    else:
        raise TypeError(f"not a game action: {action!r}")

    if new_state is state:
        logger.debug("Rejected %r in phase %s (rolls_left=%d)",
                     action, state.phase.value, state.rolls_left)
        if on_reject is not None:
            on_reject(state, action)
    return new_state
