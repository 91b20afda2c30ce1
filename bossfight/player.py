"""The player character: input, movement, physics, damage and animation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

import pygame

SCREEN_WIDTH = 1200
SCREEN_HEIGHT = 600
GROUND_Y = 500
PLAYER_SPEED = 5
GRAVITY = 1
JUMP_STRENGTH = -20
PLATFORM_TOLERANCE = 20

RUN_FRAME_COUNT = 8
ATTACK_FRAME_COUNT = 6
JUMP_FRAME_COUNT = 12
DAMAGE_FRAME_COUNT = 2
DEATH_FRAME_COUNT = 3
FRAME_WIDTH = 128
FRAME_HEIGHT = 128

FRAME_DELAY = 70
INVULNERABILITY_DURATION = 1500
DASH_SPEED = 15
DASH_DURATION = 200

START_X = 120
START_Y = 400
PLAYER_SIZE = 120
MAX_HEALTH = 7


def _half(value: int) -> int:
    """Halve an integer, truncating toward zero."""
    return int(value / 2)


def draw_frame(
    surface: pygame.Surface,
    sheet: pygame.Surface,
    frame: int,
    width: int,
    height: int,
    anchor: pygame.Rect,
    flip: bool,
) -> None:
    """Draw one frame of a horizontal sprite sheet, bottom-centred on ``anchor``."""
    image = pygame.Surface((width, height), pygame.SRCALPHA)
    image.blit(sheet, (0, 0), pygame.Rect(frame * width, 0, width, height))
    if flip:
        image = pygame.transform.flip(image, True, False)
    dest = (anchor.x + _half(anchor.w - width), anchor.y + (anchor.h - height))
    surface.blit(image, dest)


@dataclass(frozen=True)
class PlayerSprites:
    """The images used to draw the player."""

    idle: pygame.Surface
    run: pygame.Surface
    attack: pygame.Surface
    jump: pygame.Surface
    damage: pygame.Surface
    death: pygame.Surface


class Player:
    """The character controlled by the keyboard."""

    def __init__(self, x: int, y: int, sprites: PlayerSprites) -> None:
        self.sprites = sprites
        self.rect = pygame.Rect(x, y, PLAYER_SIZE, PLAYER_SIZE)
        self.max_health = MAX_HEALTH
        self.health = MAX_HEALTH
        self.vertical_velocity = 0
        self.is_jumping = False
        self.is_double_jumping = False
        self.is_on_ground = False
        self.facing_right = True
        self.is_attacking = False
        self.is_dashing = False
        self.can_dash = True
        self.is_taking_damage = False
        self.is_dead = False
        self.is_invulnerable = False
        self.run_frame = 0
        self.attack_frame = 0
        self.jump_frame = 0
        self.damage_frame = 0
        self.death_frame = 0
        self.last_frame_time = 0
        self.invulnerability_start = 0
        self.dash_speed = DASH_SPEED
        self.dash_duration = DASH_DURATION
        self.dash_start = 0

    def handle_key(self, key: int, now: int) -> None:
        """React to a key being pressed at time ``now`` (milliseconds)."""
        if self.is_dead:
            return
        if key == pygame.K_a:
            self.facing_right = False
        elif key == pygame.K_d:
            self.facing_right = True
        elif key == pygame.K_SPACE:
            if self.is_on_ground:
                self.is_jumping = True
                self.vertical_velocity = JUMP_STRENGTH
                self.is_on_ground = False
            elif not self.is_double_jumping:
                self.is_double_jumping = True
                self.vertical_velocity = JUMP_STRENGTH
        elif key == pygame.K_j:
            if not self.is_attacking and not self.is_taking_damage:
                self.is_attacking = True
                self.attack_frame = 0
                self.last_frame_time = now
        elif key in (pygame.K_LSHIFT, pygame.K_RSHIFT):
            if not self.is_dashing and self.can_dash:
                self.is_dashing = True
                self.dash_start = now
                self.can_dash = False

    def update(
        self,
        platforms: Iterable[pygame.Rect],
        move_left: bool,
        move_right: bool,
        now: int,
    ) -> None:
        """Advance movement and physics by one tick."""
        if self.is_dead:
            return

        if not self.is_taking_damage:
            if self.is_dashing:
                speed = self.dash_speed
                if self.facing_right and self.rect.right + speed < SCREEN_WIDTH:
                    self.rect.x += speed
                elif not self.facing_right and self.rect.x - speed > 0:
                    self.rect.x -= speed
                if now - self.dash_start > self.dash_duration:
                    self.is_dashing = False
            else:
                if move_left and self.rect.x > 0:
                    self.rect.x -= PLAYER_SPEED
                if move_right and self.rect.right < SCREEN_WIDTH:
                    self.rect.x += PLAYER_SPEED

        if self.is_invulnerable and now - self.invulnerability_start >= INVULNERABILITY_DURATION:
            self.is_invulnerable = False

        self.vertical_velocity += GRAVITY
        self.rect.y += self.vertical_velocity

        on_platform = False
        for platform in platforms:
            bottom = self.rect.y + self.rect.h
            if (
                bottom <= platform.y + PLATFORM_TOLERANCE
                and bottom + self.vertical_velocity >= platform.y
                and self.rect.x + self.rect.w > platform.x
                and self.rect.x < platform.x + platform.w
                and self.vertical_velocity > 0
            ):
                self.rect.y = platform.y - self.rect.h
                self._land()
                on_platform = True
                break

        if self.rect.y + self.rect.h >= GROUND_Y and not on_platform:
            self.rect.y = GROUND_Y - self.rect.h
            self._land()

    def _land(self) -> None:
        self.vertical_velocity = 0
        self.is_on_ground = True
        self.is_jumping = False
        self.is_double_jumping = False
        self.can_dash = True

    def _frame_due(self, now: int) -> bool:
        if now > self.last_frame_time + FRAME_DELAY:
            self.last_frame_time = now
            return True
        return False

    def render(self, surface: pygame.Surface, now: int, moving: bool) -> None:
        """Draw the player, advancing the current animation when a frame is due."""
        flip = not self.facing_right
        sprites = self.sprites

        if self.is_dead:
            if self._frame_due(now):
                self.death_frame += 1
            draw_frame(surface, sprites.death, self.death_frame, FRAME_WIDTH, FRAME_HEIGHT, self.rect, flip)
        elif self.is_taking_damage:
            if self._frame_due(now):
                self.damage_frame += 1
                if self.damage_frame >= DAMAGE_FRAME_COUNT:
                    self.is_taking_damage = False
                    self.damage_frame = 0
            draw_frame(surface, sprites.damage, self.damage_frame, FRAME_WIDTH, FRAME_HEIGHT, self.rect, flip)
        elif self.is_attacking:
            if self._frame_due(now):
                self.attack_frame += 1
                if self.attack_frame >= ATTACK_FRAME_COUNT:
                    self.is_attacking = False
                    self.attack_frame = 0
            draw_frame(surface, sprites.attack, self.attack_frame, FRAME_WIDTH, FRAME_HEIGHT, self.rect, flip)
        elif self.is_jumping or self.is_double_jumping:
            if self._frame_due(now):
                self.jump_frame = (self.jump_frame + 1) % JUMP_FRAME_COUNT
            draw_frame(surface, sprites.jump, self.jump_frame, FRAME_WIDTH, FRAME_HEIGHT, self.rect, flip)
        elif moving:
            if self._frame_due(now):
                self.run_frame = (self.run_frame + 1) % RUN_FRAME_COUNT
            draw_frame(surface, sprites.run, self.run_frame, FRAME_WIDTH, FRAME_HEIGHT, self.rect, flip)
        else:
            image = pygame.transform.scale(sprites.idle, self.rect.size)
            if flip:
                image = pygame.transform.flip(image, True, False)
            surface.blit(image, self.rect.topleft)

    def take_damage(self, amount: int, now: int) -> None:
        """Lose ``amount`` health unless dead or invulnerable."""
        if self.is_dead or self.is_invulnerable:
            return
        self.health -= amount
        if self.health <= 0:
            self.health = 0
            self.is_dead = True
            self.death_frame = 0
            self.last_frame_time = now
        else:
            self.is_taking_damage = True
            self.is_invulnerable = True
            self.invulnerability_start = now
            self.damage_frame = 0
            self.last_frame_time = now

    def reset(self) -> None:
        """Put the player back at the start position with full health."""
        self.rect = pygame.Rect(START_X, START_Y, PLAYER_SIZE, PLAYER_SIZE)
        self.health = self.max_health
        self.vertical_velocity = 0
        self.is_jumping = False
        self.is_double_jumping = False
        self.is_on_ground = False
        self.is_attacking = False
        self.is_dashing = False
        self.can_dash = True
        self.facing_right = True
        self.is_taking_damage = False
        self.is_dead = False
        self.is_invulnerable = False
        self.run_frame = 0
        self.attack_frame = 0
        self.jump_frame = 0
        self.damage_frame = 0
        self.death_frame = 0
        self.last_frame_time = 0

    def attack_hitbox(self) -> pygame.Rect:
        """The area hit by the player's attack."""
        return self.rect.copy()