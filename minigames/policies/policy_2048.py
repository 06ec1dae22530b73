import numpy as np

from minigames.games.game_2048 import shift_grid

# Tried in this order so ties keep big tiles in the bottom-left corner
PREFERENCE = [(3, "left"), (2, "down"), (4, "right"), (1, "up")]


def policy(env):
    # Strategy: Simulate each slide on a copy of the grid and keep the ones that change it.
    # Pick the move that gains the most score, then the one that leaves the most empty cells.
    # Up is only chosen when nothing else moves, which keeps the largest tiles anchored low.
    grid = env.board.grid
    best_action, best_key = None, None
    for movement, direction in PREFERENCE:
        new_grid, gained, _ = shift_grid(grid, direction)
        if np.array_equal(new_grid, grid):
            continue
        key = (gained, int(np.count_nonzero(new_grid == 0)))
        if best_key is None or key > best_key:
            best_action, best_key = movement, key
    if best_action is None:
        return [0, 0, 0]  # No move changes the board
    return [best_action, 0, 0]
