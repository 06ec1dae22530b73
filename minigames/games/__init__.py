"""Game environments."""

from .game_2048 import Game2048Env
from .snake import SnakeEnv
from .flappy_bird import FlappyBirdEnv

# Keyed by leaderboard name, in menu order
GAMES = {
    SnakeEnv.game_name: SnakeEnv,
    Game2048Env.game_name: Game2048Env,
    FlappyBirdEnv.game_name: FlappyBirdEnv,
}


def _key(name):
    return "".join(name.split()).lower()


def get_game_class(name):
    """Look a game up by name, ignoring case and spaces ("flappybird" finds "Flappy Bird")."""
    wanted = _key(name)
    for game_name, game_class in GAMES.items():
        if _key(game_name) == wanted:
            return game_class
    raise KeyError(f"Unknown game '{name}'. Available: {', '.join(GAMES)}")


__all__ = [
    "GAMES",
    "get_game_class",
    "Game2048Env",
    "SnakeEnv",
    "FlappyBirdEnv",
]
