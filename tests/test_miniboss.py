import pygame
import pytest

from bossfight.boss import BOSS_SPEED, MAX_HEALTH, PLAYER_HIT_DAMAGE, SpriteSheet
from bossfight.miniboss import ARROW_SPEED, Arrow, MiniBoss
from bossfight.player import GROUND_Y, SCREEN_WIDTH, Player, PlayerSprites

RED = (255, 0, 0, 255)
BLUE = (0, 0, 255, 255)
GREEN = (0, 255, 0, 255)


class FixedRng:
    def __init__(self, value):
        self.value = value

    def randrange(self, n):
        return self.value


def _sheet(count, color=(200, 200, 200)):
    texture = pygame.Surface((128 * count, 128))
    texture.fill(color)
    return SpriteSheet(texture, count, 128, 128)


def _make_player(x=120, y=380):
    def surf():
        return pygame.Surface((128 * 12, 128))

    sprites = PlayerSprites(surf(), surf(), surf(), surf(), surf(), surf())
    return Player(x, y, sprites)


def _make_mini(x=800, y=380, action=99, idle_color=GREEN):
    arrow_texture = pygame.Surface((64, 64))
    arrow_texture.fill(RED[:3])
    idle = pygame.Surface((128, 128))
    idle.fill(idle_color[:3])
    return MiniBoss(
        x, y,
        _sheet(8), _sheet(6), _sheet(9), _sheet(3), _sheet(5), _sheet(5),
        _sheet(4, BLUE[:3]),
        arrow_texture, 64, 64,
        idle,
        FixedRng(action),
    )


@pytest.mark.parametrize("facing_right, sign", [(True, 1), (False, -1)])
def test_arrow_velocity_follows_facing(facing_right, sign):
    arrow = Arrow(10, 20, facing_right, 64, 64)
    assert arrow.velocity == sign * ARROW_SPEED
    assert arrow.rect == pygame.Rect(10, 20, 64, 64)
    assert arrow.facing_right is facing_right


def test_mini_boss_starts_with_full_health():
    mini = _make_mini()
    assert mini.health == MAX_HEALTH
    assert mini.max_health == MAX_HEALTH
    assert mini.arrows == []
    assert not mini.is_shooting


def test_shoots_arrow_toward_player_in_range():
    player = _make_player()
    mini = _make_mini(action=0)
    mini.is_on_ground = True
    mini.update(player.rect, [], 2, player, 2000)
    assert mini.is_shooting
    assert len(mini.arrows) == 1
    arrow = mini.arrows[0]
    assert arrow.velocity == -ARROW_SPEED
    assert arrow.rect.x == mini.rect.x - 64 - ARROW_SPEED
    assert arrow.rect.y == mini.rect.y + (mini.rect.h - 64) // 2
    assert player.health == player.max_health


def test_shooting_ends_with_retreat():
    player = _make_player()
    mini = _make_mini(action=0)
    mini.is_on_ground = True
    mini.update(player.rect, [], 2, player, 2000)
    mini.update(player.rect, [], 2, player, 3000)
    assert not mini.is_shooting
    assert mini.is_retreating
    assert mini.last_attack_time == 3000
    assert mini.retreat_start_x == mini.rect.x


def test_dash_chosen_when_shot_not_rolled():
    player = _make_player()
    mini = _make_mini(action=75)
    mini.is_on_ground = True
    mini.update(player.rect, [], 2, player, 2000)
    assert mini.is_dashing
    assert not mini.is_shooting
    assert mini.arrows == []


def test_dash_outside_ideal_range():
    player = _make_player()
    mini = _make_mini(x=300, action=0)
    mini.is_on_ground = True
    mini.update(player.rect, [], 2, player, 2000)
    assert mini.is_dashing
    assert mini.arrows == []


def test_arrow_hits_player_and_disappears():
    player = _make_player()
    mini = _make_mini()
    mini.arrows.append(Arrow(player.rect.x + 10, player.rect.y + 10, True, 64, 64))
    mini.update(player.rect, [], 1, player, 100)
    assert player.health == player.max_health - 1
    assert player.is_invulnerable
    assert mini.arrows == []


def test_arrow_spares_invulnerable_player_but_is_removed():
    player = _make_player()
    player.is_invulnerable = True
    player.invulnerability_start = 100
    mini = _make_mini()
    mini.arrows.append(Arrow(player.rect.x + 10, player.rect.y + 10, True, 64, 64))
    mini.update(player.rect, [], 1, player, 100)
    assert player.health == player.max_health
    assert mini.arrows == []


def test_arrow_leaving_screen_is_removed():
    player = _make_player()
    mini = _make_mini()
    mini.arrows.append(Arrow(SCREEN_WIDTH - 5, 10, True, 64, 64))
    mini.update(player.rect, [], 1, player, 100)
    assert mini.arrows == []
    assert player.health == player.max_health


def test_arrow_in_flight_keeps_moving():
    player = _make_player()
    mini = _make_mini()
    mini.arrows.append(Arrow(600, 10, False, 64, 64))
    mini.update(player.rect, [], 1, player, 100)
    assert len(mini.arrows) == 1
    assert mini.arrows[0].rect.x == 600 - ARROW_SPEED


def test_player_attack_hurts_mini_boss():
    player = _make_player(x=800)
    player.is_attacking = True
    mini = _make_mini()
    mini.update(player.rect, [], 1, player, 100)
    assert mini.health == MAX_HEALTH - PLAYER_HIT_DAMAGE
    assert mini.is_taking_damage


def test_dead_mini_boss_does_not_move():
    player = _make_player()
    mini = _make_mini()
    mini.reduce_health(MAX_HEALTH, 0)
    before = mini.rect.copy()
    mini.update(player.rect, [], 2, player, 5000)
    assert mini.is_dead
    assert mini.health == 0
    assert mini.rect == before


def test_chases_on_player_line():
    player = _make_player()
    mini = _make_mini(y=100)
    mini.update(player.rect, [], 2, player, 100)
    assert mini.rect.x == 800 - BOSS_SPEED
    assert mini.rect.y == player.rect.y
    assert mini.rect.bottom <= GROUND_Y
    assert not mini.facing_right


def test_render_draws_arrows():
    surface = pygame.Surface((SCREEN_WIDTH, 600), pygame.SRCALPHA)
    mini = _make_mini()
    mini.arrows.append(Arrow(100, 100, True, 64, 64))
    mini.render(surface, None, 0)
    assert surface.get_at((110, 110)) == RED


def test_render_shooting_uses_shoot_sheet():
    surface = pygame.Surface((SCREEN_WIDTH, 600), pygame.SRCALPHA)
    mini = _make_mini()
    mini.is_shooting = True
    mini.render(surface, None, 1000)
    assert mini.attack_frame == 1
    assert surface.get_at(mini.rect.center) == BLUE


def test_render_idle_uses_own_idle_image():
    surface = pygame.Surface((SCREEN_WIDTH, 600), pygame.SRCALPHA)
    mini = _make_mini()
    mini.is_idle = True
    mini.render(surface, None, 0)
    assert surface.get_at(mini.rect.center) == GREEN