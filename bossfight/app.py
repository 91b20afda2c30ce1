"""The game: asset loading, level flow, the frame loop and the command entry point."""

from __future__ import annotations

import argparse
import logging
import random
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional, Sequence, Tuple

import pygame

from bossfight.boss import Boss, SpriteSheet
from bossfight.gui import GameState, Menu
from bossfight.miniboss import MiniBoss
from bossfight.player import SCREEN_HEIGHT, SCREEN_WIDTH, START_X, START_Y, Player, PlayerSprites

log = logging.getLogger(__name__)

ANIMATION_FRAME_DELAY = 70
DEATH_FRAME_COUNT = 4
DEATH_ANIMATION_TIME = DEATH_FRAME_COUNT * ANIMATION_FRAME_DELAY
LEVEL_COMPLETE_DURATION = 3000
GAME_COMPLETE_DURATION = 3000
FRAME_PAUSE = 16

BOSS_START = (800, 0)
FRAME_SIZE = 128
ARROW_SIZE = 64
HEART_SIZE = 32
HEART_SPACING = 40
HEART_MARGIN = 10
CONTACT_DAMAGE = 1
FONT_SIZE = 24
BLACK = (0, 0, 0, 255)

_ASSET_PATHS = {
    "level1_background": "map_and_objects/level1_background.png",
    "level2_background": "map_and_objects/level2_background.png",
    "platform": "map_and_objects/platform.png",
    "heart": "map_and_objects/heart.png",
    "game_over": "map_and_objects/game_over.png",
    "level_complete": "map_and_objects/level_complete.png",
    "game_complete": "map_and_objects/game_complete.png",
    "player_idle": "player_assets/idle.png",
    "player_run": "player_assets/run.png",
    "player_attack": "player_assets/attack.png",
    "player_jump": "player_assets/jump.png",
    "player_damage": "player_assets/damage.png",
    "player_death": "player_assets/death.png",
    "boss1_idle": "boss_assets/boss1/idle.png",
    "boss1_run": "boss_assets/boss1/run.png",
    "boss1_attack": "boss_assets/boss1/attack.png",
    "boss1_jump": "boss_assets/boss1/jump.png",
    "boss1_damage": "boss_assets/boss1/damage.png",
    "boss1_death": "boss_assets/boss1/death.png",
    "boss1_dive": "boss_assets/boss1/dive.png",
    "boss2_idle": "boss_assets/boss2/idle.png",
    "boss2_run": "boss_assets/boss2/run.png",
    "boss2_attack": "boss_assets/boss2/attack.png",
    "boss2_jump": "boss_assets/boss2/jump.png",
    "boss2_damage": "boss_assets/boss2/damage.png",
    "boss2_death": "boss_assets/boss2/death.png",
    "miniboss_idle": "miniboss/idle.png",
    "miniboss_run": "miniboss/run.png",
    "miniboss_attack": "miniboss/attack.png",
    "miniboss_jump": "miniboss/jump.png",
    "miniboss_damage": "miniboss/damage.png",
    "miniboss_death": "miniboss/death.png",
    "miniboss_dive": "miniboss/dive.png",
    "miniboss_shoot": "miniboss/shoot.png",
    "miniboss_arrow": "miniboss/arrow.png",
}
_FONT_PATH = "font.ttf"
_MUSIC_PATH = "audio/background_music.mp3"
_GAME_OVER_SOUND_PATH = "audio/game_over.mp3"
_ATTACK_SOUND_PATH = "audio/attack.mp3"


@dataclass(frozen=True)
class Assets:
    """Every image, font and sound the game draws or plays."""

    level1_background: pygame.Surface
    level2_background: pygame.Surface
    platform: pygame.Surface
    heart: pygame.Surface
    game_over: pygame.Surface
    level_complete: pygame.Surface
    game_complete: pygame.Surface
    player_idle: pygame.Surface
    player_run: pygame.Surface
    player_attack: pygame.Surface
    player_jump: pygame.Surface
    player_damage: pygame.Surface
    player_death: pygame.Surface
    boss1_idle: pygame.Surface
    boss1_run: pygame.Surface
    boss1_attack: pygame.Surface
    boss1_jump: pygame.Surface
    boss1_damage: pygame.Surface
    boss1_death: pygame.Surface
    boss1_dive: pygame.Surface
    boss2_idle: pygame.Surface
    boss2_run: pygame.Surface
    boss2_attack: pygame.Surface
    boss2_jump: pygame.Surface
    boss2_damage: pygame.Surface
    boss2_death: pygame.Surface
    miniboss_idle: pygame.Surface
    miniboss_run: pygame.Surface
    miniboss_attack: pygame.Surface
    miniboss_jump: pygame.Surface
    miniboss_damage: pygame.Surface
    miniboss_death: pygame.Surface
    miniboss_dive: pygame.Surface
    miniboss_shoot: pygame.Surface
    miniboss_arrow: pygame.Surface
    font: Any = None
    music: Optional[str] = None
    game_over_sound: Any = None
    attack_sound: Any = None


def _load_image(path: Path) -> pygame.Surface:
    image = pygame.image.load(str(path))
    if pygame.display.get_surface() is not None:
        image = image.convert_alpha()
    log.debug("Loaded texture: %s", path)
    return image


def load_assets(root) -> Assets:
    """Load every asset from the directory ``root``.

    Raises FileNotFoundError naming the first missing file.
    """
    base = Path(root)
    required = [*_ASSET_PATHS.values(), _FONT_PATH, _MUSIC_PATH, _GAME_OVER_SOUND_PATH, _ATTACK_SOUND_PATH]
    for relative in required:
        if not (base / relative).is_file():
            raise FileNotFoundError(f"missing asset: {base / relative}")

    images = {name: _load_image(base / relative) for name, relative in _ASSET_PATHS.items()}

    if not pygame.font.get_init():
        pygame.font.init()
    font = pygame.font.Font(str(base / _FONT_PATH), FONT_SIZE)

    game_over_sound = attack_sound = None
    if pygame.mixer.get_init() is not None:
        game_over_sound = pygame.mixer.Sound(str(base / _GAME_OVER_SOUND_PATH))
        attack_sound = pygame.mixer.Sound(str(base / _ATTACK_SOUND_PATH))

    return Assets(
        font=font,
        music=str(base / _MUSIC_PATH),
        game_over_sound=game_over_sound,
        attack_sound=attack_sound,
        **images,
    )


def _empty_platforms() -> List[pygame.Rect]:
    return [pygame.Rect(0, 0, 0, 0) for _ in range(3)]


class Game:
    """The level flow: menu, two boss fights, level-complete, game-over and game-complete screens."""

    def __init__(self, assets: Assets, rng: Optional[random.Random] = None) -> None:
        self.assets = assets
        self.rng = rng if rng is not None else random.Random()
        self.menu = Menu(assets.font)
        self.state = GameState.MENU
        self.running = True
        self.level = 1
        self.platforms = {1: _empty_platforms(), 2: _empty_platforms()}
        self.player = Player(
            START_X,
            START_Y,
            PlayerSprites(
                idle=assets.player_idle,
                run=assets.player_run,
                attack=assets.player_attack,
                jump=assets.player_jump,
                damage=assets.player_damage,
                death=assets.player_death,
            ),
        )
        self.boss = self._make_boss(1)

        self.level_transition = False
        self.game_over = False
        self.level_complete = False
        self.game_complete = False
        self.music_started = False
        self.game_over_sound_played = False
        self.game_complete_sound_played = False
        self.was_attacking = False
        self.boss_death_started = False
        self.boss_death_start = 0
        self.level_complete_start = 0
        self.game_complete_start = 0

        self.now = 0
        self.moving = False
        self.mouse_pos: Tuple[int, int] = (0, 0)

    # ----- construction --------------------------------------------------

    def _sheet(self, texture: Optional[pygame.Surface], count: int) -> SpriteSheet:
        size = FRAME_SIZE if count else 0
        return SpriteSheet(texture, count, size, size)

    def _summon_mini_boss(self, x: int, y: int) -> MiniBoss:
        a = self.assets
        return MiniBoss(
            x,
            y,
            self._sheet(a.miniboss_run, 8),
            self._sheet(a.miniboss_attack, 6),
            self._sheet(a.miniboss_jump, 9),
            self._sheet(a.miniboss_damage, 3),
            self._sheet(a.miniboss_death, 5),
            self._sheet(a.miniboss_dive, 5),
            self._sheet(a.miniboss_shoot, 4),
            a.miniboss_arrow,
            ARROW_SIZE,
            ARROW_SIZE,
            idle_texture=a.miniboss_idle,
            rng=self.rng,
        )

    def _make_boss(self, level: int) -> Boss:
        a = self.assets
        x, y = BOSS_START
        if level == 1:
            sheets = (
                self._sheet(a.boss1_run, 8),
                self._sheet(a.boss1_attack, 5),
                self._sheet(a.boss1_jump, 9),
                self._sheet(a.boss1_damage, 3),
                self._sheet(a.boss1_death, 5),
                self._sheet(a.boss1_dive, 5),
            )
        else:
            sheets = (
                self._sheet(a.boss2_run, 8),
                self._sheet(a.boss2_attack, 4),
                self._sheet(a.boss2_jump, 7),
                self._sheet(a.boss2_damage, 2),
                self._sheet(a.boss2_death, 6),
                self._sheet(None, 0),
            )
        return Boss(x, y, *sheets, summon=self._summon_mini_boss, rng=self.rng)

    # ----- helpers -------------------------------------------------------

    @property
    def current_platforms(self) -> List[pygame.Rect]:
        return self.platforms[1 if self.level == 1 else 2]

    @property
    def _overlay_shown(self) -> bool:
        return self.level_transition or self.level_complete or self.game_complete

    def _play(self, sound: Any) -> None:
        if sound is not None and self.menu.sound_enabled and pygame.mixer.get_init() is not None:
            sound.play()

    # ----- events --------------------------------------------------------

    def handle_event(self, event) -> None:
        """Route one input event to the menu or the player."""
        pos = getattr(event, "pos", None)
        if pos is not None:
            self.mouse_pos = tuple(pos)
        if event.type == pygame.QUIT:
            self.running = False
        elif self.state is GameState.MENU:
            self.state = self.menu.handle_event(event, self.mouse_pos, self.state)
        elif self.state is GameState.PLAYING and event.type == pygame.KEYDOWN:
            if (self.game_over or self.game_complete) and event.key == pygame.K_ESCAPE:
                self.running = False
            else:
                self.player.handle_key(event.key, self.now)

    # ----- simulation ----------------------------------------------------

    def _start_music(self) -> None:
        if self.music_started or not self.menu.sound_enabled:
            return
        if self.assets.music is None or pygame.mixer.get_init() is None:
            return
        pygame.mixer.music.load(self.assets.music)
        pygame.mixer.music.play(-1)
        log.debug("Background music started")
        self.music_started = True

    def _fight(self, now: int, move_left: bool, move_right: bool) -> None:
        platforms = self.current_platforms
        player, boss = self.player, self.boss
        player.update(platforms, move_left, move_right, now)
        boss.update(player.rect, platforms, self.level, player, now)

        attacking = player.is_attacking
        if attacking and not self.was_attacking:
            self._play(self.assets.attack_sound)
        self.was_attacking = attacking

        overlap = player.rect.colliderect(boss.rect)
        if not player.is_dead and self.level == 2 and boss.is_attacking and overlap:
            if not boss.has_dealt_damage and not player.is_invulnerable:
                player.take_damage(CONTACT_DAMAGE, now)
                boss.has_dealt_damage = True
        elif not overlap:
            boss.has_dealt_damage = False

        if player.is_attacking and overlap:
            boss.reduce_health(CONTACT_DAMAGE, now)

    def _advance_level(self, now: int) -> None:
        self.level_transition = True
        if self.level == 1:
            self.level = 2
            self.player.reset()
            self.boss = self._make_boss(2)
        elif self.level == 2:
            self.game_complete = True
            self.game_complete_start = now
            if not self.game_complete_sound_played and self.menu.sound_enabled:
                self._play(self.assets.game_over_sound)
                self.game_complete_sound_played = True
        self.level_transition = False
        self.level_complete = False
        self.boss_death_started = False

    def step(self, now: int, move_left: bool, move_right: bool) -> None:
        """Advance the game by one frame at time ``now`` (milliseconds)."""
        self.now = now
        self.moving = bool(move_left or move_right)
        if self.state is not GameState.PLAYING:
            return

        self._start_music()

        if not self.game_over and not self._overlay_shown:
            self._fight(now, move_left, move_right)

        if self.boss.health <= 0 and not self.boss_death_started and not self._overlay_shown:
            self.boss_death_started = True
            self.boss_death_start = now

        if self.boss_death_started and not self._overlay_shown:
            if now - self.boss_death_start >= DEATH_ANIMATION_TIME:
                self.level_complete = True
                self.level_complete_start = now

        if self.level_complete and now - self.level_complete_start >= LEVEL_COMPLETE_DURATION:
            self._advance_level(now)

        if self.game_complete and now - self.game_complete_start >= GAME_COMPLETE_DURATION:
            self.running = False

        if (
            not (self.game_over or self.game_complete or self.level_complete)
            and self.player.is_dead
            and now - self.boss_death_start >= DEATH_ANIMATION_TIME
        ):
            self.game_over = True
            if not self.game_over_sound_played and self.menu.sound_enabled:
                self._play(self.assets.game_over_sound)
                self.game_over_sound_played = True

    # ----- drawing -------------------------------------------------------

    @staticmethod
    def _fill_with(surface: pygame.Surface, image: pygame.Surface) -> None:
        surface.blit(pygame.transform.scale(image, surface.get_size()), (0, 0))

    def _boss_idle(self) -> pygame.Surface:
        return self.assets.boss1_idle if self.level == 1 else self.assets.boss2_idle

    def render(self, surface: pygame.Surface, now: int) -> None:
        """Draw the current screen onto ``surface``; presenting it is left to the caller."""
        if self.state is GameState.MENU:
            self.menu.render(surface)
            return

        a = self.assets
        surface.fill(BLACK)
        if self.game_over:
            self._fill_with(surface, a.game_over)
            self.boss.render(surface, self._boss_idle(), now)
        elif self.game_complete:
            self._fill_with(surface, a.game_complete)
        elif self.level_complete:
            self._fill_with(surface, a.level_complete)
        else:
            self._fill_with(surface, a.level1_background if self.level == 1 else a.level2_background)
            for platform in self.current_platforms:
                if platform.w > 0 and platform.h > 0:
                    surface.blit(pygame.transform.scale(a.platform, platform.size), platform.topleft)
            heart = pygame.transform.scale(a.heart, (HEART_SIZE, HEART_SIZE))
            for i in range(self.player.health):
                surface.blit(heart, (HEART_MARGIN + i * HEART_SPACING, HEART_MARGIN))
            self.player.render(surface, now, self.moving)
            self.boss.render(surface, self._boss_idle(), now)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Open the game window and run until the player quits."""
    parser = argparse.ArgumentParser(prog="bossfight", description="A two-level side-scrolling boss fight.")
    parser.add_argument("--assets", default="assets", help="directory holding the game's assets")
    parser.add_argument("--verbose", action="store_true", help="log game events")
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    pygame.init()
    try:
        screen = pygame.display.set_mode((SCREEN_WIDTH, SCREEN_HEIGHT))
        pygame.display.set_caption("Boss Fight")
        try:
            pygame.mixer.init(44100, -16, 2, 2048)
            assets = load_assets(args.assets)
        except (FileNotFoundError, pygame.error) as exc:
            print(f"Initialization failed: {exc}", file=sys.stderr)
            return 1

        game = Game(assets)
        while game.running:
            for event in pygame.event.get():
                game.handle_event(event)
            now = pygame.time.get_ticks()
            keys = pygame.key.get_pressed()
            game.step(now, keys[pygame.K_a], keys[pygame.K_d])
            game.render(screen, now)
            pygame.display.flip()
            if game.state is GameState.PLAYING:
                pygame.time.delay(FRAME_PAUSE)
        return 0
    finally:
        pygame.quit()


if __name__ == "__main__":
    sys.exit(main())