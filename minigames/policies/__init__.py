"""Scripted baseline policies, one per game."""

from . import policy_2048, policy_flappy_bird, policy_snake

# Keyed by leaderboard game name
POLICIES = {
    "2048": policy_2048.policy,
    "Snake": policy_snake.policy,
    "Flappy Bird": policy_flappy_bird.policy,
}

__all__ = ["POLICIES"]
