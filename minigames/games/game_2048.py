import gymnasium as gym
from gymnasium.spaces import MultiDiscrete
import numpy as np
import pygame
import math

from minigames import config

config.use_dummy_video_driver()


GRID_SIZE = 4
WIN_VALUE = 2048

# Clockwise quarter turns that bring each direction onto a left move
ROTATIONS = {"left": 0, "right": 2, "up": 3, "down": 1}
DIRECTIONS = ("up", "down", "left", "right")


def rotate(grid, times=1):
    """Rotate ``grid`` 90 degrees clockwise ``times`` times.

    Always returns a fresh array, never a view of ``grid``.
    """
    # np.rot90 turns counter-clockwise for positive k
    return np.rot90(np.asarray(grid), -(times % 4)).copy()


def merge_row(row, win_value=WIN_VALUE):
    """Slide a row towards index 0, merging each equal pair once.

    Returns ``(new_row, gained, won)`` where ``gained`` is the sum of the
    merged values and ``won`` tells whether a merge produced ``win_value``.
    """
    row = np.asarray(row)
    squeezed = [int(v) for v in row if v != 0]

    merged = []
    gained = 0
    won = False
    skip = False
    for j in range(len(squeezed)):
        if skip:
            skip = False
            continue
        if j + 1 < len(squeezed) and squeezed[j] == squeezed[j + 1]:
            new_val = squeezed[j] * 2
            merged.append(new_val)
            gained += new_val
            if new_val == win_value:
                won = True
            skip = True
        else:
            merged.append(squeezed[j])

    new_row = np.zeros_like(row)
    new_row[:len(merged)] = merged
    return new_row, gained, won


def shift_grid(grid, direction, win_value=WIN_VALUE):
    """Apply a move to ``grid`` without spawning a tile.

    Returns ``(new_grid, gained, won)``.
    """
    if direction not in ROTATIONS:
        raise ValueError(f"Unknown direction {direction!r}, expected one of {DIRECTIONS}")

    turns = ROTATIONS[direction]
    rotated = rotate(grid, turns)
    new_grid = np.zeros_like(rotated)
    gained = 0
    won = False
    for i in range(rotated.shape[0]):
        new_grid[i], row_gain, row_won = merge_row(rotated[i], win_value)
        gained += row_gain
        won = won or row_won
    return rotate(new_grid, (4 - turns) % 4), gained, won


def can_move(grid):
    """True if two horizontally or vertically adjacent cells are equal."""
    grid = np.asarray(grid)
    if np.any(grid[:, :-1] == grid[:, 1:]):
        return True
    return bool(np.any(grid[:-1, :] == grid[1:, :]))


class Board:
    """Square 2048 board with score and win/loss flags."""

    def __init__(self, size=GRID_SIZE, np_random=None, grid=None, win_value=WIN_VALUE):
        self.size = size
        self.win_value = win_value
        self.np_random = np_random if np_random is not None else np.random.default_rng()
        if grid is None:
            self.grid = np.zeros((size, size), dtype=np.int64)
        else:
            self.grid = np.array(grid, dtype=np.int64)
            if self.grid.shape != (size, size):
                raise ValueError(f"Expected a {size}x{size} grid, got shape {self.grid.shape}")
        self.score = 0
        self.won = False
        self.over = False
        self.last_spawn = None

    def move(self, direction):
        """Slide and merge in ``direction``; returns whether the grid changed."""
        new_grid, gained, won = shift_grid(self.grid, direction, self.win_value)
        if np.array_equal(new_grid, self.grid):
            return False
        self.grid = new_grid
        self.score += gained
        if won:
            self.won = True
        return True

    def apply_move(self, direction):
        """Full turn: move, then spawn a tile and update ``over`` if anything moved."""
        changed = self.move(direction)
        if changed:
            self.spawn_random_tile()
            self.check_game_over()
        return changed

    def spawn_random_tile(self):
        empty = self.empty_cells()
        if not empty:
            self.last_spawn = None
            return None
        r, c = empty[int(self.np_random.integers(len(empty)))]
        # 90% chance of 2, 10% chance of 4
        self.grid[r, c] = 4 if self.np_random.random() < 0.1 else 2
        self.last_spawn = (r, c)
        return self.last_spawn

    def empty_cells(self):
        return [(int(r), int(c)) for r, c in zip(*np.where(self.grid == 0))]

    def is_full(self):
        return not np.any(self.grid == 0)

    def can_move(self):
        return can_move(self.grid)

    def check_game_over(self):
        self.over = self.is_full() and not self.can_move()
        return self.over

    def max_tile(self):
        return int(self.grid.max())

    def copy(self):
        board = Board(self.size, self.np_random, self.grid, self.win_value)
        board.score = self.score
        board.won = self.won
        board.over = self.over
        return board


class Game2048Env(gym.Env):
    metadata = {"render_modes": ["rgb_array"], "render_fps": 30}

    game_name = "2048"
    user_guide = "Controls: Use arrow keys to slide tiles. Tiles with the same number merge into one!"
    game_description = "Slide tiles and combine them to reach 2048!"
    auto_advance = False

    # --- Constants ---
    SCREEN_WIDTH = 640
    SCREEN_HEIGHT = 400
    GRID_SIZE = GRID_SIZE
    MAX_STEPS = 10000
    INVALID_MOVE_PENALTY = 0.1

    # Action 0 is a no-op
    MOVEMENT_TO_DIRECTION = {1: "up", 2: "down", 3: "left", 4: "right"}

    # --- Colors ---
    COLOR_BG = (45, 45, 45)
    COLOR_GRID_BG = (77, 77, 77)
    COLOR_UI_TEXT = (240, 240, 240)
    COLOR_OVERLAY_BG = (0, 0, 0, 180)

    TILE_COLORS = {
        0: (120, 120, 120),
        2: ((238, 228, 218), (119, 110, 101)),
        4: ((237, 224, 200), (119, 110, 101)),
        8: ((242, 177, 121), (249, 246, 242)),
        16: ((245, 149, 99), (249, 246, 242)),
        32: ((246, 124, 95), (249, 246, 242)),
        64: ((246, 94, 59), (249, 246, 242)),
        128: ((237, 207, 114), (249, 246, 242)),
        256: ((237, 204, 97), (249, 246, 242)),
        512: ((237, 200, 80), (249, 246, 242)),
        1024: ((237, 197, 63), (249, 246, 242)),
        2048: ((237, 194, 46), (249, 246, 242)),
        "super": ((60, 58, 50), (249, 246, 242)),
    }

    def __init__(self, render_mode="rgb_array"):
        super().__init__()
        self.render_mode = render_mode

        self.observation_space = gym.spaces.Box(
            low=0, high=255, shape=(self.SCREEN_HEIGHT, self.SCREEN_WIDTH, 3), dtype=np.uint8
        )
        self.action_space = MultiDiscrete([5, 2, 2])

        pygame.init()
        pygame.font.init()
        self.screen = pygame.Surface((self.SCREEN_WIDTH, self.SCREEN_HEIGHT))

        self.font_huge = pygame.font.Font(None, 96)
        self.font_large = pygame.font.Font(None, 52)
        self.font_medium = pygame.font.Font(None, 38)
        self.font_small = pygame.font.Font(None, 28)

        self.board = Board(self.GRID_SIZE, self.np_random)
        self.steps = 0
        self.game_over = False

        # Single-frame effects
        self.new_tile_pos = None

        self.reset()

    @property
    def score(self):
        return self.board.score

    def reset(self, seed=None, options=None):
        super().reset(seed=seed)

        self.board = Board(self.GRID_SIZE, self.np_random)
        self.steps = 0
        self.game_over = False

        # Initial state: two random tiles
        self.board.spawn_random_tile()
        self.new_tile_pos = self.board.spawn_random_tile()

        return self._get_observation(), self._get_info()

    def step(self, action):
        if self.game_over:
            return self._get_observation(), 0.0, True, False, self._get_info()

        movement = int(action[0])
        reward = 0.0
        self.new_tile_pos = None

        direction = self.MOVEMENT_TO_DIRECTION.get(movement)
        if direction is not None:
            self.steps += 1
            score_before = self.board.score

            if self.board.apply_move(direction):
                reward += float(self.board.score - score_before)
                self.new_tile_pos = self.board.last_spawn
            else:
                reward -= self.INVALID_MOVE_PENALTY

        terminated = bool(self.board.won or self.board.over)
        self.game_over = terminated
        truncated = not terminated and self.steps >= self.MAX_STEPS

        return self._get_observation(), reward, terminated, truncated, self._get_info()

    def render(self):
        return self._get_observation()

    def _get_observation(self):
        self.screen.fill(self.COLOR_BG)
        self._render_game()
        self._render_ui()

        arr = pygame.surfarray.array3d(self.screen)
        return np.transpose(arr, (1, 0, 2)).astype(np.uint8)

    def _get_info(self):
        return {
            "score": self.board.score,
            "steps": self.steps,
            "max_tile": self.board.max_tile(),
            "won": self.board.won,
            "over": self.board.over,
        }

    def _render_game(self):
        grid_pixel_size = self.SCREEN_HEIGHT - 40
        padding = 10
        tile_size = (grid_pixel_size - padding * (self.GRID_SIZE + 1)) / self.GRID_SIZE
        grid_start_x = (self.SCREEN_WIDTH - grid_pixel_size) / 2
        grid_start_y = (self.SCREEN_HEIGHT - grid_pixel_size) / 2

        grid_rect = pygame.Rect(grid_start_x, grid_start_y, grid_pixel_size, grid_pixel_size)
        pygame.draw.rect(self.screen, self.COLOR_GRID_BG, grid_rect, border_radius=8)

        for r in range(self.GRID_SIZE):
            for c in range(self.GRID_SIZE):
                val = int(self.board.grid[r, c])

                x = grid_start_x + padding * (c + 1) + tile_size * c
                y = grid_start_y + padding * (r + 1) + tile_size * r

                if val == 0:
                    pygame.draw.rect(self.screen, self.TILE_COLORS[0], (x, y, tile_size, tile_size), border_radius=5)
                    continue

                current_tile_size = tile_size
                # "Pop" effect for the freshly spawned tile
                if (r, c) == self.new_tile_pos:
                    current_tile_size *= 1.1
                    x -= (current_tile_size - tile_size) / 2
                    y -= (current_tile_size - tile_size) / 2
                # Slow pulse on the biggest tile
                elif val >= 128 and val == self.board.max_tile():
                    pulse_scale = 1.0 + 0.05 * abs(math.sin(self.steps * 0.5))
                    current_tile_size *= pulse_scale
                    x -= (current_tile_size - tile_size) / 2
                    y -= (current_tile_size - tile_size) / 2

                bg_color, text_color = self.TILE_COLORS.get(val, self.TILE_COLORS["super"])
                tile_rect = pygame.Rect(x, y, current_tile_size, current_tile_size)
                pygame.draw.rect(self.screen, bg_color, tile_rect, border_radius=5)

                s_val = str(val)
                if len(s_val) < 3:
                    font = self.font_large
                elif len(s_val) < 4:
                    font = self.font_medium
                else:
                    font = self.font_small

                text_surf = font.render(s_val, True, text_color)
                text_rect = text_surf.get_rect(center=tile_rect.center)
                self.screen.blit(text_surf, text_rect)

    def _render_ui(self):
        score_text = self.font_medium.render(f"Score: {self.board.score}", True, self.COLOR_UI_TEXT)
        self.screen.blit(score_text, (10, 10))

        steps_text = self.font_small.render(f"Moves: {self.steps}", True, self.COLOR_UI_TEXT)
        steps_rect = steps_text.get_rect(topright=(self.SCREEN_WIDTH - 10, 15))
        self.screen.blit(steps_text, steps_rect)

        if self.game_over:
            overlay = pygame.Surface((self.SCREEN_WIDTH, self.SCREEN_HEIGHT), pygame.SRCALPHA)
            overlay.fill(self.COLOR_OVERLAY_BG)

            message = "You Win!" if self.board.won else "Game Over"
            msg_surf = self.font_huge.render(message, True, self.COLOR_UI_TEXT)
            msg_rect = msg_surf.get_rect(center=(self.SCREEN_WIDTH / 2, self.SCREEN_HEIGHT / 2 - 20))
            overlay.blit(msg_surf, msg_rect)

            score_surf = self.font_medium.render(f"Your score: {self.board.score}", True, self.COLOR_UI_TEXT)
            score_rect = score_surf.get_rect(center=(self.SCREEN_WIDTH / 2, self.SCREEN_HEIGHT / 2 + 40))
            overlay.blit(score_surf, score_rect)

            self.screen.blit(overlay, (0, 0))

    def close(self):
        pygame.quit()

    def validate_implementation(self):
        assert self.action_space.shape == (3,)
        assert self.action_space.nvec.tolist() == [5, 2, 2]

        test_obs = self._get_observation()
        assert test_obs.shape == (self.SCREEN_HEIGHT, self.SCREEN_WIDTH, 3)
        assert test_obs.dtype == np.uint8

        obs, info = self.reset()
        assert obs.shape == (self.SCREEN_HEIGHT, self.SCREEN_WIDTH, 3)
        assert isinstance(info, dict)
        assert np.count_nonzero(self.board.grid) == 2

        test_action = self.action_space.sample()
        obs, reward, term, trunc, info = self.step(test_action)
        assert obs.shape == (self.SCREEN_HEIGHT, self.SCREEN_WIDTH, 3)
        assert isinstance(reward, (int, float))
        assert isinstance(term, bool)
        assert trunc == False
        assert isinstance(info, dict)

        print("✓ Implementation validated successfully")
