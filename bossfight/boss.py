"""The level boss: ground combat AI with dash and dive attacks, plus its summons."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional

import pygame

from bossfight.player import GROUND_Y, PLATFORM_TOLERANCE, SCREEN_WIDTH, Player, draw_frame

log = logging.getLogger(__name__)

BOSS_SPEED = 3
DASH_SPEED = 8
DIVE_SPEED_VERTICAL = 8
DIVE_SPEED_HORIZONTAL = 14
GRAVITY = 1
JUMP_STRENGTH = -20
FRAME_DELAY = 500
DASH_DURATION = 1000
DIVE_DURATION = 2500
MIN_DISTANCE = 400
MAX_DISTANCE = 1000
ATTACK_COOLDOWN = 2000
SHOOT_COOLDOWN = 2000
RETREAT_DISTANCE = 400
IDLE_DISTANCE = 600

BOSS_SIZE = 120
MAX_HEALTH = 1000
PLAYER_HIT_DAMAGE = 10
CONTACT_DAMAGE = 1
SUMMON_THRESHOLD = 0.4
SUMMON_LEVEL = 2

HEALTH_BAR_WIDTH = 100
HEALTH_BAR_HEIGHT = 10
HEALTH_BAR_OFFSET = 20
HEALTH_BAR_FRAME = (150, 150, 150, 255)
HEALTH_BAR_FILL = (255, 0, 0, 255)


@dataclass(frozen=True)
class SpriteSheet:
    """A horizontal strip of equally sized animation frames."""

    texture: Optional[pygame.Surface]
    frame_count: int
    frame_width: int
    frame_height: int


class Boss:
    """A boss that chases, dashes, dives and retreats from the player."""

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
        summon: Optional[Callable[[int, int], "Boss"]] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.rect = pygame.Rect(x, y, BOSS_SIZE, BOSS_SIZE)
        self.run = run
        self.attack = attack
        self.jump = jump
        self.damage = damage
        self.death = death
        self.dive = dive
        self.summon = summon
        self.rng = rng if rng is not None else random.Random()

        self.health = MAX_HEALTH
        self.max_health = MAX_HEALTH
        self.vertical_velocity = 0
        self.horizontal_dive_velocity = 0
        self.is_jumping = False
        self.is_on_ground = False
        self.facing_right = False
        self.is_attacking = False
        self.is_dashing = False
        self.is_diving = False
        self.is_taking_damage = False
        self.is_dead = False
        self.is_idle = False
        self.is_retreating = False
        self.has_dealt_damage = False
        self.run_frame = 0
        self.attack_frame = 0
        self.jump_frame = 0
        self.damage_frame = 0
        self.death_frame = 0
        self.retreat_start_x = 0
        self.last_frame_time = 0
        self.dash_start = 0
        self.dive_start = 0
        self.last_attack_time = 0

        self.mini_bosses: List[Boss] = []
        self.has_summoned = False

    # ----- state helpers -------------------------------------------------

    def _can_attack(self, now: int) -> bool:
        return now - self.last_attack_time >= ATTACK_COOLDOWN

    def _is_busy(self) -> bool:
        return (
            self.is_idle
            or self.is_retreating
            or self.is_attacking
            or self.is_taking_damage
            or self.is_jumping
            or self.is_dashing
            or self.is_diving
        )

    def _start_dash(self, now: int) -> None:
        self.is_dashing = True
        self.dash_start = now
        self.attack_frame = 0
        self.last_frame_time = now
        self.has_dealt_damage = False

    def _start_jump(self, now: int) -> None:
        self.is_jumping = True
        self.vertical_velocity = JUMP_STRENGTH
        self.is_on_ground = False
        self.jump_frame = 0
        self.last_frame_time = now

    def _start_dive(self, now: int) -> None:
        self.is_jumping = False
        self.is_diving = True
        self.dive_start = now
        self.attack_frame = 0
        self.last_frame_time = now

    def _begin_retreat(self, now: int) -> None:
        """End the current move, start the cooldown and back away."""
        self.is_dashing = False
        self.is_diving = False
        self.attack_frame = 0
        self.last_attack_time = now
        self.is_retreating = True
        self.retreat_start_x = self.rect.x
        log.debug("Boss retreating from x=%d", self.retreat_start_x)

    def _strike(self, player: Player, now: int) -> None:
        if not player.is_dead and not player.is_invulnerable and not self.has_dealt_damage:
            player.take_damage(CONTACT_DAMAGE, now)
            self.has_dealt_damage = True

    def _retreat_step(self, player_rect: pygame.Rect) -> None:
        if player_rect.x < self.rect.x and self.rect.x < SCREEN_WIDTH - self.rect.w:
            self.rect.x += BOSS_SPEED
            self.facing_right = True
        elif player_rect.x > self.rect.x and self.rect.x > 0:
            self.rect.x -= BOSS_SPEED
            self.facing_right = False
        moved = abs(self.rect.x - self.retreat_start_x)
        if self.rect.x <= 0 or self.rect.x + self.rect.w >= SCREEN_WIDTH or moved >= RETREAT_DISTANCE:
            self.is_retreating = False
            self.is_idle = True

    def _chase_step(self, player_rect: pygame.Rect, speed: int) -> None:
        if player_rect.x < self.rect.x and self.rect.x > 0:
            self.rect.x -= speed
            self.facing_right = False
        elif player_rect.x > self.rect.x and self.rect.x + self.rect.w < SCREEN_WIDTH:
            self.rect.x += speed
            self.facing_right = True

    def _dive_step(self, player_rect: pygame.Rect, player: Player, now: int) -> None:
        if player_rect.x < self.rect.x:
            self.horizontal_dive_velocity = -DIVE_SPEED_HORIZONTAL
            self.facing_right = False
        else:
            self.horizontal_dive_velocity = DIVE_SPEED_HORIZONTAL
            self.facing_right = True
        self.rect.x += self.horizontal_dive_velocity
        self.vertical_velocity = DIVE_SPEED_VERTICAL
        self.rect.x = max(0, min(self.rect.x, SCREEN_WIDTH - self.rect.w))

        hitbox = pygame.Rect(self.rect.x + (30 if self.facing_right else -30), self.rect.y + 20, 60, 60)
        if hitbox.colliderect(player_rect):
            self._strike(player, now)
            self._begin_retreat(now)
        elif now - self.dive_start >= DIVE_DURATION:
            self._begin_retreat(now)

    def _dash_step(self, player_rect: pygame.Rect, player: Player, now: int) -> None:
        self._chase_step(player_rect, DASH_SPEED)
        hitbox = pygame.Rect(self.rect.x + (20 if self.facing_right else -20), self.rect.y, 80, 100)
        if hitbox.colliderect(player_rect):
            self._strike(player, now)
            self._begin_retreat(now)
        elif now - self.dash_start >= DASH_DURATION:
            self._begin_retreat(now)

    def _apply_physics(self, platforms: Iterable[pygame.Rect], fighting: bool, now: int) -> None:
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
                self.vertical_velocity = 0
                self.is_on_ground = True
                self.is_jumping = False
                if self.is_diving and fighting:
                    self._begin_retreat(now)
                on_platform = True
                break

        if self.rect.y + self.rect.h >= GROUND_Y and not on_platform:
            self.rect.y = GROUND_Y - self.rect.h
            self.vertical_velocity = 0
            self.is_jumping = False
            if self.is_diving and fighting:
                self._begin_retreat(now)
            self.is_on_ground = True

    # ----- public behaviour ----------------------------------------------

    def update(
        self,
        player_rect: pygame.Rect,
        platforms: Iterable[pygame.Rect],
        level: int,
        player: Player,
        now: int,
    ) -> None:
        """Advance the boss's AI and physics by one tick at time ``now``."""
        if self.is_dead:
            return
        platforms = list(platforms)
        fighting = level in (1, 2)
        distance = abs(self.rect.centerx - player_rect.centerx)

        if player.is_attacking and not self.is_taking_damage:
            if self.rect.colliderect(player.attack_hitbox()):
                self.reduce_health(PLAYER_HIT_DAMAGE, now)

        if (
            level == SUMMON_LEVEL
            and self.health <= SUMMON_THRESHOLD * self.max_health
            and not self.has_summoned
        ):
            if self.summon is not None:
                self.mini_bosses.append(self.summon(self.rect.x, self.rect.y))
            self.has_summoned = True
            log.debug("Boss summons a mini boss at x=%d", self.rect.x)

        for mini in self.mini_bosses:
            mini.update(player_rect, platforms, level, player, now)

        if fighting:
            if self.is_idle and self._can_attack(now):
                self.is_idle = False
            if self.is_retreating and not self.is_idle:
                self._retreat_step(player_rect)

        if level == 2 and not (
            self.is_attacking or self.is_jumping or self.is_dashing or self.is_retreating or self.is_idle
        ):
            self._chase_step(player_rect, BOSS_SPEED)

        if not self._is_busy() and self._can_attack(now):
            action = self.rng.randrange(100)
            if fighting and MIN_DISTANCE <= distance <= MAX_DISTANCE:
                if action < 30 and self.is_on_ground:
                    self._start_dash(now)
                elif action < 60 and self.is_on_ground:
                    self._start_jump(now)
            elif action < 40 and self.is_on_ground:
                if fighting:
                    self._start_dash(now)
            elif action < 70 and self.is_on_ground:
                self._start_jump(now)

        if fighting and self.is_jumping and not self.is_diving and self.vertical_velocity >= 0:
            self._start_dive(now)

        if self.is_diving and fighting:
            self._dive_step(player_rect, player, now)

        if self.is_dashing and fighting:
            self._dash_step(player_rect, player, now)

        self._apply_physics(platforms, fighting, now)

        if self.is_attacking and self.attack_frame >= self.attack.frame_count - 1:
            self.is_attacking = False
            self.attack_frame = 0
            self.last_attack_time = now
            if fighting and distance > IDLE_DISTANCE:
                self.is_idle = True

    def reduce_health(self, amount: int, now: int) -> None:
        """Lose ``amount`` health; die when it reaches zero."""
        if self.is_dead:
            return
        self.health -= amount
        log.debug("Boss health: %d", self.health)
        if self.health <= 0:
            self.health = 0
            self.is_dead = True
            self.death_frame = 0
        else:
            self.is_taking_damage = True
            self.damage_frame = 0
        self.last_frame_time = now

    # ----- drawing -------------------------------------------------------

    def render_health_bar(self, surface: pygame.Surface) -> None:
        """Draw the health bar above the boss unless it is dead."""
        if self.is_dead:
            return
        x = self.rect.x + int((self.rect.w - HEALTH_BAR_WIDTH) / 2)
        y = self.rect.y - HEALTH_BAR_OFFSET
        pygame.draw.rect(surface, HEALTH_BAR_FRAME, pygame.Rect(x, y, HEALTH_BAR_WIDTH, HEALTH_BAR_HEIGHT))
        filled = int(HEALTH_BAR_WIDTH * (self.health / self.max_health))
        if filled > 0:
            pygame.draw.rect(surface, HEALTH_BAR_FILL, pygame.Rect(x, y, filled, HEALTH_BAR_HEIGHT))

    def _frame_due(self, now: int) -> bool:
        if now > self.last_frame_time + FRAME_DELAY:
            self.last_frame_time = now
            return True
        return False

    def _draw(
        self,
        surface: pygame.Surface,
        texture: Optional[pygame.Surface],
        frame: int,
        width: int,
        height: int,
    ) -> None:
        if texture is None or width <= 0 or height <= 0:
            return
        draw_frame(surface, texture, frame, width, height, self.rect, not self.facing_right)

    def _draw_sheet(self, surface: pygame.Surface, sheet: SpriteSheet, frame: int) -> None:
        self._draw(surface, sheet.texture, frame, sheet.frame_width, sheet.frame_height)

    def _render_body(self, surface: pygame.Surface, idle_texture: Optional[pygame.Surface], now: int) -> None:
        if self.is_dead:
            if self._frame_due(now):
                self.death_frame += 1
            self._draw_sheet(surface, self.death, self.death_frame)
        elif self.is_taking_damage:
            if self._frame_due(now):
                self.damage_frame += 1
                if self.damage_frame >= self.damage.frame_count:
                    self.is_taking_damage = False
                    self.damage_frame = 0
            self._draw(surface, self.damage.texture, self.damage_frame, self.damage.frame_width, self.death.frame_height)
        elif self.is_diving:
            if self._frame_due(now):
                self.attack_frame += 1
            self._draw_sheet(surface, self.dive, self.attack_frame)
        elif self.is_attacking or self.is_dashing:
            if self._frame_due(now):
                self.attack_frame += 1
            self._draw_sheet(surface, self.attack, self.attack_frame)
        elif self.is_jumping:
            if self._frame_due(now) and self.jump.frame_count:
                self.jump_frame = (self.jump_frame + 1) % self.jump.frame_count
            self._draw_sheet(surface, self.jump, self.jump_frame)
        elif self.is_idle:
            self._draw(surface, idle_texture, 0, self.run.frame_width, self.run.frame_height)
        else:
            if self._frame_due(now) and self.run.frame_count:
                self.run_frame = (self.run_frame + 1) % self.run.frame_count
            self._draw_sheet(surface, self.run, self.run_frame)

    def render(self, surface: pygame.Surface, idle_texture: Optional[pygame.Surface], now: int) -> None:
        """Draw the boss, its health bar and any summoned mini bosses."""
        self.render_health_bar(surface)
        self._render_body(surface, idle_texture, now)
        for mini in self.mini_bosses:
            mini.render(surface, idle_texture, now)