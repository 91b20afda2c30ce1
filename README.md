# bossfight

A small side-scrolling action game built on `pygame`. You control a fighter
who can run, jump, double jump, dash and attack. Each level ends when its boss
is defeated.

- **Level 1**: the boss charges at you with dashes and makes jump-dive attacks.
- **Level 2**: a second boss also chases you across the floor. When it drops
  to 40% of its health it summons a mini boss that follows you on your line
  and fires arrows.

After each boss falls a level-complete screen is shown. Winning level 2 shows
the game-complete screen and the game closes a few seconds later. Losing all
your hearts shows the game-over screen.

## Installation

```
pip install .
```

## Running

```
bossfight
```

Options:

- `--assets DIR`: directory holding the game's images, font and sounds
  (default: `assets` in the current directory).
- `--verbose`: log game events to the console.

The game loads every image, the font `font.ttf` and the sounds under `audio/`
from the asset directory. If a file is missing it prints
`Initialization failed: ...` naming it and exits with status 1.

## Controls

| Key             | Action                          |
|-----------------|---------------------------------|
| `A` / `D`       | Move left / right               |
| `Space`         | Jump; press again in the air to double jump |
| `J`             | Attack                          |
| `Shift`         | Dash in the direction you face  |
| `Esc`           | Quit from the game-over or game-complete screen |

The menu has three buttons. **Start** begins the game. **Option** turns music
and sound effects on or off; the current setting is shown below the buttons.
**Exit** closes the game.

## Using the pieces in code

The game logic can be driven without opening a window:

- `bossfight.player.Player` handles movement, jumping, dashing, damage and the
  period of invulnerability after a hit.
- `bossfight.boss.Boss` holds the boss AI: chasing, dashing, jump-dives,
  retreating after an attack, idling and the health bar. `SpriteSheet`
  describes one animation strip.
- `bossfight.miniboss.MiniBoss` is the archer summoned in level 2; its
  projectiles are `bossfight.miniboss.Arrow` objects.
- `bossfight.gui.Menu` is the start menu; `bossfight.gui.GameState` tells
  whether the game is in the menu or being played.
- `bossfight.app.Game` ties it all together. Feed it events with
  `Game.handle_event`, call `Game.step` once per frame and `Game.render` to
  draw onto a surface. `bossfight.app.load_assets` loads everything the game
  needs from an asset directory and raises `FileNotFoundError` for a missing
  file.

Every update method takes the current time in milliseconds, and the bosses
take an injectable `random.Random`, so runs can be reproduced in tests.

## Limitations

- The levels have no raised platforms to stand on; every fight takes place on
  the ground.
- There is no saving, scoring or level selection: each run starts at level 1.

## Tests

```
pip install .[test]
pytest
```