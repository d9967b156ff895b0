"""
Pocket Dice Scoring Rules - pure scoring functions with no state

Category legality and worth for a hand of five dice, the Joker (bonus Yahtzee)
re-interpretation, and scorecard totals. Nothing here mutates its inputs.

House rules kept on purpose:
- Five of a kind also counts as a Full House (25).
- A Small Straight needs only three consecutive distinct faces (30).
"""
from collections import Counter
from enum import Enum


class Category(Enum):
    """Scoring categories, value is the display name"""
    ONES = "Ones"
    TWOS = "Twos"
    THREES = "Threes"
    FOURS = "Fours"
    FIVES = "Fives"
    SIXES = "Sixes"
    THREE_OF_A_KIND = "3 of a Kind"
    FOUR_OF_A_KIND = "4 of a Kind"
    FULL_HOUSE = "Full House"
    SMALL_STRAIGHT = "Sm. Straight"
    LARGE_STRAIGHT = "Lg. Straight"
    CHANCE = "Chance"
    YAHTZEE = "Yahtzee"


# Canonical order, used for cursor navigation and "first unset category".
CATEGORY_ORDER = (
    Category.ONES, Category.TWOS, Category.THREES,
    Category.FOURS, Category.FIVES, Category.SIXES,
    Category.THREE_OF_A_KIND, Category.FOUR_OF_A_KIND,
    Category.FULL_HOUSE, Category.SMALL_STRAIGHT,
    Category.LARGE_STRAIGHT, Category.CHANCE, Category.YAHTZEE,
)

UPPER_CATEGORIES = CATEGORY_ORDER[:6]
LOWER_CATEGORIES = CATEGORY_ORDER[6:]

# Short labels printed on the LCD.
CATEGORY_LABELS = {
    Category.ONES: "1",
    Category.TWOS: "2",
    Category.THREES: "3",
    Category.FOURS: "4",
    Category.FIVES: "5",
    Category.SIXES: "6",
    Category.THREE_OF_A_KIND: "3ofK",
    Category.FOUR_OF_A_KIND: "4ofK",
    Category.FULL_HOUSE: "FULL",
    Category.SMALL_STRAIGHT: "S-STR",
    Category.LARGE_STRAIGHT: "L-STR",
    Category.CHANCE: "CHNC",
    Category.YAHTZEE: "YHTZ",
}

HAND_SIZE = 5
UPPER_BONUS_THRESHOLD = 63
UPPER_BONUS = 35
FULL_HOUSE_SCORE = 25
SMALL_STRAIGHT_SCORE = 30
LARGE_STRAIGHT_SCORE = 40
YAHTZEE_SCORE = 50
YAHTZEE_BONUS = 100


class Scorecard:
    """Score sheet: every category maps to None (unset) or a recorded score.

    A recorded score never changes. with_score() returns a new Scorecard
    and leaves the original untouched.
    """

    def __init__(self, scores=None):
        """Initialize a scorecard, empty unless scores are given"""
        self.scores = {category: None for category in Category}
        if scores:
            self.scores.update(scores)

    def is_filled(self, category):
        """Check if a category has been filled"""
        return self.scores[category] is not None

    def is_complete(self):
        """Check if all categories are filled"""
        return all(score is not None for score in self.scores.values())

    def unfilled(self):
        """Unset categories in canonical order"""
        return [cat for cat in CATEGORY_ORDER if self.scores[cat] is None]

    def copy(self):
        """Create a copy of the scorecard"""
        return Scorecard(self.scores)

    def with_score(self, category, score):
        """Return new Scorecard with score set for category.

        A category that is already filled keeps its value.
        """
        new_card = self.copy()
        if not new_card.is_filled(category):
            new_card.scores[category] = score
        return new_card

    def __eq__(self, other):
        if not isinstance(other, Scorecard):
            return NotImplemented
        return self.scores == other.scores

    def __hash__(self):
        return hash(tuple(self.scores[cat] for cat in CATEGORY_ORDER))

    def __repr__(self):
        filled = {cat.name: score for cat, score in self.scores.items() if score is not None}
        return f"Scorecard({filled})"


def validate_hand(hand):
    """
    Check that hand is five integer die values in 1-6.

    Args:
        hand: Sequence of die values

    Returns:
        The hand as a tuple

    Raises:
        ValueError: if the hand has the wrong length or an invalid die
    """
    values = tuple(hand)
    if len(values) != HAND_SIZE:
        raise ValueError(f"hand must have {HAND_SIZE} dice, got {len(values)}")
    for value in values:
        if isinstance(value, bool) or not isinstance(value, int) or not 1 <= value <= 6:
            raise ValueError(f"die value must be an integer 1-6, got {value!r}")
    return values


def count_values(hand):
    """Count occurrences of each face in the hand"""
    return Counter(hand)


def is_five_of_a_kind(hand):
    """True if all dice show the same face"""
    return len(set(hand)) == 1


def has_n_of_kind(hand, n):
    """True if at least n dice show the same face"""
    return max(count_values(hand).values()) >= n


def has_full_house(hand):
    """
    Check for a full house: three of one face and two of another.

    Five of a kind also qualifies under this game's rules.
    """
    counts = sorted(count_values(hand).values(), reverse=True)
    return counts == [3, 2] or counts == [5]


def longest_run(hand):
    """Length of the longest run of consecutive distinct faces"""
    faces = sorted(set(hand))
    best = run = 1
    for prev, cur in zip(faces, faces[1:]):
        run = run + 1 if cur == prev + 1 else 1
        best = max(best, run)
    return best


def has_small_straight(hand):
    """Three or more consecutive distinct faces (house rule).

    Deliberately looser than the hand-held firmware, which needs four faces
    in a row; [1, 2, 3, 6, 6] scores here.
    """
    return longest_run(hand) >= 3


def has_large_straight(hand):
    """Five distinct faces forming a single run"""
    faces = sorted(set(hand))
    return len(faces) == 5 and faces[4] == faces[0] + 4


def is_joker(hand, scorecard):
    """
    Check whether the hand is a Joker roll.

    A Joker is five of a kind rolled after the Yahtzee box is already
    filled, with either 50 or 0. The flag applies to the current roll only.

    Args:
        hand: Five die values
        scorecard: Current Scorecard

    Returns:
        True if the Joker rules apply to this roll
    """
    return is_five_of_a_kind(hand) and scorecard.is_filled(Category.YAHTZEE)


def upper_category_for(face):
    """Upper-section category scoring the given face"""
    return UPPER_CATEGORIES[face - 1]


def forced_category(hand, scorecard):
    """
    Upper category the player must take on a Joker roll, if any.

    Returns the upper category matching the repeated face when the hand is a
    Joker and that category is still open, otherwise None.
    """
    if not is_joker(hand, scorecard):
        return None
    category = upper_category_for(hand[0])
    if scorecard.is_filled(category):
        return None
    return category


def calculate_score(category, hand, joker=False):
    """
    Calculate the score for a given category and hand

    Args:
        category: Category enum value
        hand: Five die values
        joker: Whether the Joker rules apply to this roll

    Returns:
        Integer score for the category (0 if it doesn't qualify)
    """
    counts = count_values(hand)
    total = sum(hand)

    # Upper section ignores the Joker flag
    if category in UPPER_CATEGORIES:
        face = UPPER_CATEGORIES.index(category) + 1
        return counts[face] * face

    if joker:
        if category == Category.FULL_HOUSE:
            return FULL_HOUSE_SCORE
        elif category == Category.SMALL_STRAIGHT:
            return SMALL_STRAIGHT_SCORE
        elif category == Category.LARGE_STRAIGHT:
            return LARGE_STRAIGHT_SCORE
        elif category in (Category.THREE_OF_A_KIND, Category.FOUR_OF_A_KIND, Category.CHANCE):
            return total
        elif category == Category.YAHTZEE:
            # Unreachable in play: a Joker means the box is already filled
            return 0

    if category == Category.THREE_OF_A_KIND:
        return total if has_n_of_kind(hand, 3) else 0

    elif category == Category.FOUR_OF_A_KIND:
        return total if has_n_of_kind(hand, 4) else 0

    elif category == Category.FULL_HOUSE:
        return FULL_HOUSE_SCORE if has_full_house(hand) else 0

    elif category == Category.SMALL_STRAIGHT:
        return SMALL_STRAIGHT_SCORE if has_small_straight(hand) else 0

    elif category == Category.LARGE_STRAIGHT:
        return LARGE_STRAIGHT_SCORE if has_large_straight(hand) else 0

    elif category == Category.YAHTZEE:
        return YAHTZEE_SCORE if is_five_of_a_kind(hand) else 0

    elif category == Category.CHANCE:
        return total

    raise ValueError(f"unknown category: {category!r}")


def upper_total(scorecard):
    """Sum of filled upper-section categories"""
    return sum(scorecard.scores[cat] or 0 for cat in UPPER_CATEGORIES)


def upper_bonus(scorecard):
    """35 points once the upper section reaches 63"""
    return UPPER_BONUS if upper_total(scorecard) >= UPPER_BONUS_THRESHOLD else 0


def lower_total(scorecard):
    """Sum of filled lower-section categories"""
    return sum(scorecard.scores[cat] or 0 for cat in LOWER_CATEGORIES)


def total_score(scorecard, yahtzee_bonus=0):
    """Grand total: filled categories, upper bonus, accumulated Yahtzee bonus"""
    return upper_total(scorecard) + upper_bonus(scorecard) + lower_total(scorecard) + yahtzee_bonus
