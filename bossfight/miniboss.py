"""The mini boss summoned in the second level: a boss that also shoots arrows."""

from __future__ import annotations

import logging
import random
from typing import Iterable, List, Optional

import pygame

from bossfight.boss import (
    ATTACK_COOLDOWN,
    BOSS_SPEED,
    CONTACT_DAMAGE,
    IDLE_DISTANCE,
    MAX_DISTANCE,
    MAX_HEALTH,
    MIN_DISTANCE,
    PLAYER_HIT_DAMAGE,
    SHOOT_COOLDOWN,
    Boss,
    SpriteSheet,
)
from bossfight.player import GROUND_Y, SCREEN_WIDTH, Player

log = logging.getLogger(__name__)

ARROW_SPEED = 12
SHOOT_DURATION = 1000
MINI_BOSS_LEVEL = 2
SHOOT_CHANCE = 70
DASH_CHANCE = 80
JUMP_CHANCE = 90
FAR_DASH_CHANCE = 40
FAR_JUMP_CHANCE = 70


class Arrow:
    """A projectile flying horizontally at constant speed."""

    def __init__(self, x: int, y: int, facing_right: bool, width: int, height: int) -> None:
        self.rect = pygame.Rect(x, y, width, height)
        self.velocity = ARROW_SPEED if facing_right else -ARROW_SPEED
        self.facing_right = facing_right
        self.frame_width = width
        self.frame_height = height

    def __repr__(self) -> str:
        return f"Arrow(rect={tuple(self.rect)!r}, velocity={self.velocity})"


class MiniBoss(Boss):
    """A smaller boss that chases on the player's line and fires arrows."""

    def __init__(
        self,
        x: int,
        y: int,
        run: SpriteSheet,
        attack: SpriteSheet,
        jump: SpriteSheet,
        damage: SpriteSheet,
        death: SpriteSheet,
        dive: SpriteSheet,
        shoot: SpriteSheet,
        arrow_texture: Optional[pygame.Surface],
        arrow_width: int,
        arrow_height: int,
        idle_texture: Optional[pygame.Surface] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        super().__init__(x, y, run, attack, jump, damage, death, dive, summon=None, rng=rng)
        self.health = MAX_HEALTH
        self.max_health = MAX_HEALTH
        self.shoot = shoot
        self.arrow_texture = arrow_texture
        self.arrow_width = arrow_width
        self.arrow_height = arrow_height
        self.idle_texture = idle_texture
        self.is_shooting = False
        self.shoot_start = 0
        self.arrows: List[Arrow] = []

    # ----- behaviour -----------------------------------------------------

    def _start_shooting(self, now: int) -> None:
        self.is_shooting = True
        self.shoot_start = now
        self.attack_frame = 0
        self.last_frame_time = now
        self.has_dealt_damage = False
        arrow_x = self.rect.x + (self.rect.w if self.facing_right else -self.arrow_width)
        arrow_y = self.rect.y + int((self.rect.h - self.arrow_height) / 2)
        self.arrows.append(Arrow(arrow_x, arrow_y, self.facing_right, self.arrow_width, self.arrow_height))
        log.debug("Mini boss shoots arrow at x=%d, y=%d", arrow_x, arrow_y)

    def _retreat_from_here(self, now: int) -> None:
        self.attack_frame = 0
        self.last_attack_time = now
        self.is_retreating = True
        self.retreat_start_x = self.rect.x

    def _chase_on_line(self, player_rect: pygame.Rect) -> None:
        self._chase_step(player_rect, BOSS_SPEED)
        self.rect.y = player_rect.y
        if self.rect.y + self.rect.h > GROUND_Y:
            self.rect.y = GROUND_Y - self.rect.h

    def _move_arrows(self, player_rect: pygame.Rect, player: Player, now: int) -> None:
        remaining = []
        for arrow in self.arrows:
            arrow.rect.x += arrow.velocity
            if arrow.rect.x < 0 or arrow.rect.x > SCREEN_WIDTH:
                continue
            if arrow.rect.colliderect(player_rect):
                if not player.is_dead and not player.is_invulnerable:
                    player.take_damage(CONTACT_DAMAGE, now)
                continue
            remaining.append(arrow)
        self.arrows = remaining

    def update(
        self,
        player_rect: pygame.Rect,
        platforms: Iterable[pygame.Rect],
        level: int,
        player: Player,
        now: int,
    ) -> None:
        """Advance the mini boss's AI, its arrows and its physics by one tick."""
        if self.is_dead:
            return
        platforms = list(platforms)
        fighting = level == MINI_BOSS_LEVEL
        distance = abs(self.rect.centerx - player_rect.centerx)

        if player.is_attacking and not self.is_taking_damage:
            if self.rect.colliderect(player.attack_hitbox()):
                self.reduce_health(PLAYER_HIT_DAMAGE, now)

        if fighting:
            if self.is_idle and self._can_attack(now):
                self.is_idle = False
            if self.is_retreating and not self.is_idle:
                self._retreat_step(player_rect)
            elif not (
                self.is_idle
                or self.is_dashing
                or self.is_attacking
                or self.is_jumping
                or self.is_diving
                or self.is_retreating
                or self.is_shooting
            ):
                self._chase_on_line(player_rect)

        can_attack = now - self.last_attack_time >= ATTACK_COOLDOWN
        can_shoot = now - self.shoot_start >= SHOOT_COOLDOWN

        if not self._is_busy() and not self.is_shooting and can_attack:
            action = self.rng.randrange(100)
            if fighting and MIN_DISTANCE <= distance <= MAX_DISTANCE:
                if action < SHOOT_CHANCE and self.is_on_ground and can_shoot:
                    self._start_shooting(now)
                elif action < DASH_CHANCE and self.is_on_ground:
                    self._start_dash(now)
                elif action < JUMP_CHANCE and self.is_on_ground:
                    self._start_jump(now)
            elif action < FAR_DASH_CHANCE and self.is_on_ground:
                self._start_dash(now)
            elif action < FAR_JUMP_CHANCE and self.is_on_ground:
                self._start_jump(now)

        if fighting and self.is_jumping and not self.is_diving and self.vertical_velocity >= 0:
            self._start_dive(now)

        if self.is_diving and fighting:
            self._dive_step(player_rect, player, now)

        if self.is_dashing and fighting:
            self._dash_step(player_rect, player, now)

        if self.is_shooting and fighting and now - self.shoot_start >= SHOOT_DURATION:
            self.is_shooting = False
            self._retreat_from_here(now)
            log.debug("Mini boss stops shooting and retreats from x=%d", self.retreat_start_x)

        self._move_arrows(player_rect, player, now)

        self._apply_physics(platforms, fighting, now)

        if self.is_attacking and self.attack_frame >= self.attack.frame_count - 1:
            self.is_attacking = False
            self._retreat_from_here(now)
            if fighting and distance > IDLE_DISTANCE:
                self.is_idle = True

    # ----- drawing -------------------------------------------------------

    def _render_body(self, surface: pygame.Surface, idle_texture: Optional[pygame.Surface], now: int) -> None:
        if self.is_shooting and not (self.is_dead or self.is_taking_damage or self.is_diving):
            if self._frame_due(now) and self.shoot.frame_count:
                self.attack_frame = (self.attack_frame + 1) % self.shoot.frame_count
            self._draw_sheet(surface, self.shoot, self.attack_frame)
        else:
            super()._render_body(surface, self.idle_texture, now)

    def _render_arrows(self, surface: pygame.Surface) -> None:
        if self.arrow_texture is None:
            return
        for arrow in self.arrows:
            image = pygame.Surface((arrow.frame_width, arrow.frame_height), pygame.SRCALPHA)
            image.blit(self.arrow_texture, (0, 0), pygame.Rect(0, 0, arrow.frame_width, arrow.frame_height))
            if not arrow.facing_right:
                image = pygame.transform.flip(image, True, False)
            surface.blit(image, arrow.rect.topleft)

    def render(self, surface: pygame.Surface, idle_texture: Optional[pygame.Surface], now: int) -> None:
        """Draw the mini boss with its own idle image, its health bar and its arrows."""
        self.render_health_bar(surface)
        self._render_body(surface, idle_texture, now)
        self._render_arrows(surface)