#!/usr/bin/env python3
"""
Pocket Dice - a graphical LCD hand-held using pygame

Keyboard:
    Space       ROLL (starts a game when none is running)
    1-5         HOLD die
    Left/Right  PREV/NEXT category (first press enters scoring)
    Enter       ENTER (score the selected category)
    N           NEW (press twice mid-game)
    S           SOUND
    Escape      quit

The dice and the on-screen buttons can also be clicked.
"""
import sys

import pygame

from frontend_adapter import FrontendAdapter
from game_coordinator import coordinator_from_args, parse_args
from game_engine import Phase
from scoring import CATEGORY_LABELS, LOWER_CATEGORIES, UPPER_CATEGORIES, UPPER_BONUS_THRESHOLD
from sounds import SAMPLE_RATE, create_sound

# Constants
WINDOW_WIDTH = 480
WINDOW_HEIGHT = 760
FPS = 60

# Colors
CASE_COLOR = (214, 170, 0)
CASE_DARK = (138, 110, 0)
BEZEL_COLOR = (141, 110, 3)
LCD_COLOR = (157, 173, 157)
LCD_INK = (20, 20, 20)
LCD_GHOST = (140, 155, 140)
BUTTON_RED = (183, 28, 28)
BUTTON_YELLOW = (240, 200, 40)
BUTTON_TEXT_COLOR = (255, 255, 255)
LABEL_COLOR = (93, 64, 55)

# Dice constants
DICE_SIZE = 64
DICE_MARGIN = 16
DOT_RADIUS = 5

LCD_RECT = pygame.Rect(30, 90, WINDOW_WIDTH - 60, 360)

# Pip offsets per face, in units of a quarter die
PIPS = {
    1: [(0, 0)],
    2: [(-1, -1), (1, 1)],
    3: [(-1, -1), (0, 0), (1, 1)],
    4: [(-1, -1), (1, -1), (-1, 1), (1, 1)],
    5: [(-1, -1), (1, -1), (0, 0), (-1, 1), (1, 1)],
    6: [(-1, -1), (-1, 0), (-1, 1), (1, -1), (1, 0), (1, 1)],
}


class Button:
    """A clickable hand-held button"""

    def __init__(self, rect, text, color, on_press, shape="rect"):
        self.rect = pygame.Rect(rect)
        self.text = text
        self.color = color
        self.on_press = on_press
        self.shape = shape
        self.enabled = True

    def handle_click(self, pos):
        """Press the button if pos is inside it. Returns True if pressed."""
        if self.enabled and self.rect.collidepoint(pos):
            self.on_press()
            return True
        return False

    def draw(self, surface, font):
        color = self.color if self.enabled else CASE_DARK
        if self.shape == "circle":
            pygame.draw.circle(surface, color, self.rect.center, self.rect.width // 2)
            pygame.draw.circle(surface, (0, 0, 0), self.rect.center, self.rect.width // 2, width=2)
        else:
            pygame.draw.rect(surface, color, self.rect, border_radius=self.rect.height // 2)
            pygame.draw.rect(surface, (0, 0, 0), self.rect, width=2, border_radius=self.rect.height // 2)
        label = font.render(self.text, True, BUTTON_TEXT_COLOR)
        surface.blit(label, label.get_rect(center=self.rect.center))


class PocketDiceGame:
    """Main window: renders coordinator state and translates input"""

    def __init__(self, coordinator):
        self.screen = pygame.display.set_mode((WINDOW_WIDTH, WINDOW_HEIGHT))
        pygame.display.set_caption("Pocket Dice")
        self.clock = pygame.time.Clock()
        self.running = True

        self.coordinator = coordinator
        self.adapter = FrontendAdapter(coordinator, sound=create_sound(coordinator.state.sound_enabled))

        self.font_small = pygame.font.Font(None, 22)
        self.font = pygame.font.Font(None, 30)
        self.font_big = pygame.font.Font(None, 44)

        total_width = 5 * DICE_SIZE + 4 * DICE_MARGIN
        self.dice_x = (WINDOW_WIDTH - total_width) // 2
        self.dice_y = LCD_RECT.y + 110

        adapter = self.adapter
        hold_y = LCD_RECT.bottom + 40
        self.hold_buttons = [
            Button((self.dice_x + i * (DICE_SIZE + DICE_MARGIN) + 12, hold_y, DICE_SIZE - 24, 24),
                   "", BUTTON_YELLOW, lambda i=i: adapter.press_hold(i))
            for i in range(5)
        ]
        row_y = hold_y + 60
        self.sound_button = Button((40, row_y, 90, 36), "SOUND", BUTTON_YELLOW, adapter.press_sound)
        self.new_button = Button((WINDOW_WIDTH - 130, row_y, 90, 36), "NEW", BUTTON_YELLOW, adapter.press_new)
        ctrl_y = row_y + 80
        self.prev_button = Button((40, ctrl_y, 50, 50), "<", BUTTON_RED,
                                  lambda: adapter.press_select("prev"), shape="circle")
        self.next_button = Button((100, ctrl_y, 50, 50), ">", BUTTON_RED,
                                  lambda: adapter.press_select("next"), shape="circle")
        self.enter_button = Button((WINDOW_WIDTH // 2 - 35, ctrl_y - 10, 70, 70), "ENTER", BUTTON_RED,
                                   adapter.press_enter, shape="circle")
        self.roll_button = Button((WINDOW_WIDTH - 160, ctrl_y, 120, 50), "ROLL", BUTTON_RED, adapter.press_roll)
        self.buttons = self.hold_buttons + [
            self.sound_button, self.new_button, self.prev_button,
            self.next_button, self.enter_button, self.roll_button,
        ]

    # ── Input ─────────────────────────────────────────────────────────────

    def handle_events(self):
        """Handle pygame events"""
        adapter = self.adapter
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self.running = False
                elif event.key == pygame.K_SPACE:
                    adapter.press_roll()
                elif pygame.K_1 <= event.key <= pygame.K_5:
                    adapter.press_hold(event.key - pygame.K_1)
                elif event.key == pygame.K_LEFT:
                    adapter.press_select("prev")
                elif event.key == pygame.K_RIGHT:
                    adapter.press_select("next")
                elif event.key in (pygame.K_RETURN, pygame.K_KP_ENTER):
                    adapter.press_enter()
                elif event.key == pygame.K_n:
                    adapter.press_new()
                elif event.key == pygame.K_s:
                    adapter.press_sound()
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                for i in range(5):
                    if self._die_rect(i).collidepoint(event.pos):
                        adapter.press_hold(i)
                        break
                else:
                    for button in self.buttons:
                        if button.handle_click(event.pos):
                            break

    # ── Drawing ───────────────────────────────────────────────────────────

    def _die_rect(self, index):
        return pygame.Rect(self.dice_x + index * (DICE_SIZE + DICE_MARGIN), self.dice_y, DICE_SIZE, DICE_SIZE)

    def _draw_die(self, index, value, held):
        rect = self._die_rect(index)
        pygame.draw.rect(self.screen, LCD_INK, rect, width=4 if held else 2, border_radius=8)
        offset = DICE_SIZE // 4
        for dx, dy in PIPS[value]:
            center = (rect.centerx + dx * offset, rect.centery + dy * offset)
            pygame.draw.circle(self.screen, LCD_INK, center, DOT_RADIUS)
        if held:
            label = self.font_small.render("HOLD", True, LCD_INK)
            self.screen.blit(label, label.get_rect(midtop=(rect.centerx, rect.bottom + 4)))

    def _draw_category_row(self, categories, y):
        state = self.coordinator.state
        width = LCD_RECT.width // len(categories)
        for i, cat in enumerate(categories):
            cx = LCD_RECT.x + width * i + width // 2
            label = self.font_small.render(CATEGORY_LABELS[cat], True, LCD_INK)
            self.screen.blit(label, label.get_rect(midtop=(cx, y)))
            if state.selected_category == cat:
                pygame.draw.polygon(self.screen, LCD_INK, [(cx - 5, y + 18), (cx + 5, y + 18), (cx, y + 25)])
            text = self.adapter.category_display(cat)
            if text:
                value = self.font.render(text, True, LCD_INK)
                self.screen.blit(value, value.get_rect(midtop=(cx, y + 28)))

    def _draw_lcd(self):
        coord = self.coordinator
        state = coord.state
        pygame.draw.rect(self.screen, BEZEL_COLOR, LCD_RECT.inflate(16, 16), border_radius=14)
        pygame.draw.rect(self.screen, LCD_COLOR, LCD_RECT, border_radius=8)

        self._draw_category_row(UPPER_CATEGORIES, LCD_RECT.y + 10)

        for i, value in enumerate(coord.display_hand):
            self._draw_die(i, value, state.held[i])

        status_y = LCD_RECT.y + 220
        rolls = self.font_small.render("ROLLS", True, LCD_INK)
        self.screen.blit(rolls, (LCD_RECT.x + 12, status_y))
        for i in range(3):
            box = pygame.Rect(LCD_RECT.x + 12 + i * 22, status_y + 18, 16, 16)
            pygame.draw.rect(self.screen, LCD_INK, box, width=0 if i < state.rolls_left else 2, border_radius=3)

        upper = self.font.render(f"{state.upper_total}/{UPPER_BONUS_THRESHOLD}", True, LCD_INK)
        self.screen.blit(upper, upper.get_rect(midtop=(LCD_RECT.centerx, status_y + 10)))

        bonus_color = LCD_INK if state.upper_total >= UPPER_BONUS_THRESHOLD else LCD_GHOST
        bonus = self.font_small.render("BONUS 35", True, bonus_color)
        self.screen.blit(bonus, bonus.get_rect(topright=(LCD_RECT.right - 90, status_y + 16)))
        score = self.font_big.render(str(state.total_score), True, LCD_INK)
        self.screen.blit(score, score.get_rect(topright=(LCD_RECT.right - 12, status_y + 6)))

        self._draw_category_row(LOWER_CATEGORIES, LCD_RECT.y + 280)

        message = self.adapter.lcd_message
        if message:
            overlay = pygame.Rect(LCD_RECT.x, self.dice_y - 10, LCD_RECT.width, DICE_SIZE + 20)
            pygame.draw.rect(self.screen, LCD_COLOR, overlay)
            text = self.font_big.render(message, True, LCD_INK)
            self.screen.blit(text, text.get_rect(center=overlay.center))

    def draw(self):
        """Draw everything to the screen"""
        coord = self.coordinator
        state = coord.state
        self.screen.fill(CASE_COLOR)

        title = self.font_big.render("POCKET DICE", True, BUTTON_RED)
        self.screen.blit(title, title.get_rect(center=(WINDOW_WIDTH // 2, 45)))

        self._draw_lcd()

        playing = state.phase == Phase.PLAYING and state.rolls_left < 3
        for button in self.hold_buttons:
            button.enabled = playing and not coord.is_rolling
        self.prev_button.enabled = self.next_button.enabled = (
            state.phase == Phase.SCORING or playing)
        self.enter_button.enabled = state.phase == Phase.SCORING
        self.roll_button.enabled = (coord.can_roll_now
                                    or state.phase in (Phase.IDLE, Phase.GAME_OVER))
        for button in self.buttons:
            button.draw(self.screen, self.font_small)

        high = self.font_small.render(f"HIGH SCORE {state.high_score}", True, LABEL_COLOR)
        self.screen.blit(high, high.get_rect(center=(WINDOW_WIDTH // 2, self.sound_button.rect.centery)))

        pygame.display.flip()

    def run(self):
        """Main game loop"""
        while self.running:
            elapsed = self.clock.tick(FPS)
            self.handle_events()
            self.adapter.update(elapsed)
            self.draw()

        pygame.quit()
        sys.exit()


def main(argv=None):
    """Entry point for the game"""
    coordinator = coordinator_from_args(parse_args(argv))
    pygame.mixer.pre_init(frequency=SAMPLE_RATE, size=-16, channels=1)
    pygame.init()
    game = PocketDiceGame(coordinator)
    game.run()


if __name__ == "__main__":
    main()
