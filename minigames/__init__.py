"""2048, Snake and Flappy Bird as Gymnasium environments."""

from gymnasium.envs.registration import register

__version__ = "1.0.0"

register(
    id="minigames/Game2048-v0",
    entry_point="minigames.games.game_2048:Game2048Env",
)
register(
    id="minigames/Snake-v0",
    entry_point="minigames.games.snake:SnakeEnv",
)
register(
    id="minigames/FlappyBird-v0",
    entry_point="minigames.games.flappy_bird:FlappyBirdEnv",
)
