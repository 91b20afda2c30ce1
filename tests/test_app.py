import random
from dataclasses import fields, replace

import pygame
import pytest

from bossfight.app import (
    DEATH_ANIMATION_TIME,
    GAME_COMPLETE_DURATION,
    LEVEL_COMPLETE_DURATION,
    Assets,
    Game,
    load_assets,
)
from bossfight.gui import GameState
from bossfight.player import GROUND_Y, MAX_HEALTH, START_X, START_Y

BACKGROUND_COLOR = (10, 20, 30, 255)
GAME_OVER_COLOR = (40, 50, 60, 255)
HEART_COLOR = (200, 0, 0, 255)
OPTIONAL = {"font", "music", "game_over_sound", "attack_sound"}


def make_assets():
    sprite = pygame.Surface((1536, 128), pygame.SRCALPHA)
    images = {f.name: sprite for f in fields(Assets) if f.name not in OPTIONAL}
    background = pygame.Surface((16, 16), pygame.SRCALPHA)
    background.fill(BACKGROUND_COLOR)
    game_over = pygame.Surface((16, 16), pygame.SRCALPHA)
    game_over.fill(GAME_OVER_COLOR)
    heart = pygame.Surface((8, 8), pygame.SRCALPHA)
    heart.fill(HEART_COLOR)
    assets = Assets(**images)
    return replace(
        assets,
        level1_background=background,
        level2_background=background,
        game_over=game_over,
        heart=heart,
    )


def make_game():
    return Game(make_assets(), random.Random(1))


def playing_game():
    game = make_game()
    game.state = GameState.PLAYING
    return game


def click(game, pos):
    game.handle_event(pygame.event.Event(pygame.MOUSEBUTTONDOWN, button=1, pos=pos))
    game.handle_event(pygame.event.Event(pygame.MOUSEBUTTONUP, button=1, pos=pos))


def test_new_game_starts_in_menu_on_level_one():
    game = make_game()
    assert game.state is GameState.MENU
    assert game.level == 1
    assert game.player.health == MAX_HEALTH
    assert (game.boss.rect.x, game.boss.rect.y) == (800, 0)
    assert game.running


def test_step_in_menu_does_not_move_player():
    game = make_game()
    game.step(100, False, False)
    assert (game.player.rect.x, game.player.rect.y) == (START_X, START_Y)


def test_clicking_start_begins_play():
    game = make_game()
    click(game, (600, 225))
    assert game.state is GameState.PLAYING


def test_clicking_option_toggles_sound_and_stays_in_menu():
    game = make_game()
    click(game, (600, 325))
    assert game.state is GameState.MENU
    assert game.menu.sound_enabled is False


def test_quit_event_stops_game():
    game = make_game()
    game.handle_event(pygame.event.Event(pygame.QUIT))
    assert game.running is False


def test_escape_only_quits_after_game_over():
    game = playing_game()
    game.handle_event(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_ESCAPE))
    assert game.running is True
    game.game_over = True
    game.handle_event(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_ESCAPE))
    assert game.running is False


def test_keys_reach_player_while_playing():
    game = playing_game()
    game.handle_event(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_a))
    assert game.player.facing_right is False


def test_player_lands_on_ground_after_step():
    game = playing_game()
    game.step(16, False, False)
    assert game.player.rect.bottom == GROUND_Y
    assert game.player.is_on_ground


def test_boss_death_leads_to_level_two():
    game = playing_game()
    game.boss.reduce_health(game.boss.max_health, 1000)
    game.step(1000, False, False)
    assert game.boss_death_started
    assert not game.level_complete
    game.step(1000 + DEATH_ANIMATION_TIME, False, False)
    assert game.level_complete
    start = 1000 + DEATH_ANIMATION_TIME
    game.step(start + LEVEL_COMPLETE_DURATION, False, False)
    assert game.level == 2
    assert not game.level_complete
    assert game.boss.health == game.boss.max_health
    assert game.boss.attack.frame_count == 4
    assert (game.player.rect.x, game.player.rect.y) == (START_X, START_Y)


def test_level_two_boss_death_completes_game_and_exits():
    game = playing_game()
    game.level = 2
    game.boss.reduce_health(game.boss.max_health, 0)
    game.step(500, False, False)
    game.step(500 + DEATH_ANIMATION_TIME, False, False)
    done_at = 500 + DEATH_ANIMATION_TIME + LEVEL_COMPLETE_DURATION
    game.step(done_at, False, False)
    assert game.game_complete
    assert game.running
    game.step(done_at + GAME_COMPLETE_DURATION, False, False)
    assert game.running is False


def test_player_death_shows_game_over_and_freezes_play():
    game = playing_game()
    game.step(16, False, False)
    game.player.take_damage(MAX_HEALTH, 500)
    game.step(1000, False, False)
    assert game.game_over
    position = tuple(game.player.rect)
    game.step(1016, True, False)
    assert tuple(game.player.rect) == position


def test_level_two_boss_attack_hurts_player_once():
    game = playing_game()
    game.level = 2
    game.player.rect = pygame.Rect(100, 380, 120, 120)
    game.boss.rect = pygame.Rect(100, 380, 120, 120)
    game.boss.is_on_ground = True
    game.boss.is_attacking = True
    game.step(5000, False, False)
    assert game.player.health == MAX_HEALTH - 1
    assert game.boss.has_dealt_damage


def test_render_playing_draws_background_and_hearts():
    game = playing_game()
    surface = pygame.Surface((1200, 600), pygame.SRCALPHA)
    game.render(surface, 0)
    assert tuple(surface.get_at((600, 580))) == BACKGROUND_COLOR
    assert tuple(surface.get_at((10, 10))) == HEART_COLOR
    last_heart = (10 + (MAX_HEALTH - 1) * 40, 10)
    assert tuple(surface.get_at(last_heart)) == HEART_COLOR


def test_render_hearts_follow_health():
    game = playing_game()
    game.player.take_damage(1, 0)
    surface = pygame.Surface((1200, 600), pygame.SRCALPHA)
    game.render(surface, 0)
    last_heart = (10 + (MAX_HEALTH - 1) * 40, 10)
    assert tuple(surface.get_at(last_heart)) == BACKGROUND_COLOR
    assert tuple(surface.get_at((10, 10))) == HEART_COLOR


def test_render_game_over_screen():
    game = playing_game()
    game.game_over = True
    surface = pygame.Surface((1200, 600), pygame.SRCALPHA)
    game.render(surface, 0)
    assert tuple(surface.get_at((600, 580))) == GAME_OVER_COLOR


def test_load_assets_reports_missing_files(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_assets(tmp_path)