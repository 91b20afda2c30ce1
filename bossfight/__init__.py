"""A side-scrolling boss-fight game with a player, two bosses, an archer mini boss and a start menu."""

__version__ = "0.1.0"
__all__ = ["app", "boss", "gui", "miniboss", "player"]