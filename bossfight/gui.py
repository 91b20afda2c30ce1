"""Title menu with start, sound toggle and exit buttons."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Callable, Tuple

import pygame

log = logging.getLogger(__name__)

Color = Tuple[int, int, int, int]

BACKGROUND: Color = (50, 50, 50, 255)
TEXT_COLOR: Color = (255, 255, 255, 255)
SOUND_LABEL_POS = (600, 500)
LEFT_BUTTON = 1


class GameState(Enum):
    """Which screen the game is showing."""

    MENU = auto()
    PLAYING = auto()


@dataclass
class Button:
    """A clickable rectangle with a label."""

    rect: pygame.Rect
    text: str
    normal_color: Color
    hover_color: Color
    action: Callable[[GameState], GameState] = field(repr=False)
    hovered: bool = False
    pressed: bool = False

    def contains(self, pos: Tuple[int, int]) -> bool:
        """Whether ``pos`` lies inside the button, edges included."""
        x, y = pos
        return (
            self.rect.x <= x <= self.rect.x + self.rect.w
            and self.rect.y <= y <= self.rect.y + self.rect.h
        )

    @property
    def color(self) -> Color:
        return self.hover_color if self.hovered else self.normal_color


def _mixer_ready() -> bool:
    return pygame.mixer.get_init() is not None


class Menu:
    """The main menu screen."""

    def __init__(self, font) -> None:
        self.font = font
        self.sound_enabled = True
        self.buttons = [
            Button(pygame.Rect(500, 200, 200, 50), "Start", (0, 255, 0, 255), (100, 255, 100, 255), self._start),
            Button(pygame.Rect(500, 300, 200, 50), "Option", (255, 255, 0, 255), (255, 255, 100, 255), self._toggle_sound),
            Button(pygame.Rect(500, 400, 200, 50), "Exit", (255, 0, 0, 255), (255, 100, 100, 255), self._exit),
        ]

    def _start(self, state: GameState) -> GameState:
        if self.sound_enabled and _mixer_ready():
            pygame.mixer.music.unpause()
            log.debug("Background music resumed")
        log.debug("Starting game")
        return GameState.PLAYING

    def _toggle_sound(self, state: GameState) -> GameState:
        self.sound_enabled = not self.sound_enabled
        if _mixer_ready():
            if self.sound_enabled:
                pygame.mixer.music.unpause()
            else:
                pygame.mixer.music.pause()
                pygame.mixer.stop()
        log.debug("Sound toggled: %s", "ON" if self.sound_enabled else "OFF")
        return state

    def _exit(self, state: GameState) -> GameState:
        log.debug("Exiting game")
        pygame.quit()
        raise SystemExit(0)

    def handle_event(self, event, mouse_pos: Tuple[int, int], state: GameState) -> GameState:
        """Update hover and press state from ``event``; return the resulting game state."""
        left = getattr(event, "button", None) == LEFT_BUTTON
        for button in self.buttons:
            button.hovered = button.contains(mouse_pos)
            if event.type == pygame.MOUSEBUTTONDOWN and left and button.hovered:
                button.pressed = True
            if event.type == pygame.MOUSEBUTTONUP and left and button.pressed and button.hovered:
                button.pressed = False
                state = button.action(state)
        return state

    def _render_text(self, surface: pygame.Surface, text: str, x: int, y: int, color: Color) -> None:
        try:
            image = self.font.render(text, False, color)
        except pygame.error as exc:
            log.error("Text rendering failed: %s", exc)
            return
        width, height = image.get_size()
        surface.blit(image, (x - width // 2, y - height // 2))

    def render(self, surface: pygame.Surface) -> None:
        """Draw the menu onto ``surface``; presenting it is left to the caller."""
        surface.fill(BACKGROUND)
        for button in self.buttons:
            pygame.draw.rect(surface, button.color, button.rect)
            self._render_text(surface, button.text, button.rect.centerx, button.rect.centery, TEXT_COLOR)
        label = "Sound: " + ("ON" if self.sound_enabled else "OFF")
        self._render_text(surface, label, *SOUND_LABEL_POS, TEXT_COLOR)