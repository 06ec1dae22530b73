import gymnasium as gym
from gymnasium.spaces import MultiDiscrete
import numpy as np
import pygame
import pygame.gfxdraw

from minigames import config

config.use_dummy_video_driver()


class SnakeEnv(gym.Env):
    # One tick every 75 ms
    metadata = {"render_modes": ["rgb_array"], "render_fps": 13}

    game_name = "Snake"
    user_guide = (
        "Controls: Use arrow keys or WASD to steer the snake. Eat the red apples to grow."
    )
    game_description = (
        "A classic snake game. Eat apples and grow longer, but don't crash into the walls or your own tail!"
    )
    auto_advance = True

    # --- Constants ---
    SCREEN_WIDTH = 600
    SCREEN_HEIGHT = 600
    CELL_SIZE = 60
    GRID_WIDTH = SCREEN_WIDTH // CELL_SIZE
    GRID_HEIGHT = SCREEN_HEIGHT // CELL_SIZE
    INITIAL_LENGTH = 6
    MAX_STEPS = 5000

    # movement -> (dx, dy)
    DIRECTIONS = {1: (0, -1), 2: (0, 1), 3: (-1, 0), 4: (1, 0)}

    # Colors
    COLOR_BG = (0, 0, 0)
    COLOR_GRID = (40, 40, 40)
    COLOR_FOOD = (255, 0, 0)
    COLOR_SNAKE_HEAD = (0, 255, 0)
    COLOR_SNAKE_BODY = (45, 180, 0)
    COLOR_TEXT = (255, 0, 0)

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
        self.font_score = pygame.font.Font(None, 56)
        self.font_gameover = pygame.font.Font(None, 100)

        self.snake_body = []
        self.direction = (1, 0)
        self.food_pos = None
        self.score = 0
        self.steps = 0
        self.game_over = False
        self.win = False
        self.game_over_reason = ""

        self.reset()

    def reset(self, seed=None, options=None):
        super().reset(seed=seed)

        self.steps = 0
        self.score = 0
        self.game_over = False
        self.win = False
        self.game_over_reason = ""

        # Head in the middle row, body trailing to the left
        start_x, start_y = self.GRID_WIDTH // 2, self.GRID_HEIGHT // 2
        self.snake_body = [(start_x - i, start_y) for i in range(self.INITIAL_LENGTH)]
        self.direction = (1, 0)

        self._spawn_food()

        return self._get_observation(), self._get_info()

    def step(self, action):
        if self.game_over:
            return self._get_observation(), 0.0, True, False, self._get_info()

        self.steps += 1
        reward = 0.0

        self._turn(int(action[0]))

        head = self.snake_body[0]
        new_head = (head[0] + self.direction[0], head[1] + self.direction[1])
        ate_food = new_head == self.food_pos

        # The tail moves out of its cell on this tick unless the snake grows
        if ate_food:
            new_body = [new_head] + self.snake_body
        else:
            new_body = [new_head] + self.snake_body[:-1]

        if self._check_collision(new_head, new_body):
            self.game_over = True
            reward -= 100
        else:
            self.snake_body = new_body
            if ate_food:
                self.score += 1
                reward += 10
                self._spawn_food()
                if self.food_pos is None:
                    # Every cell is snake
                    self.win = True
                    self.game_over = True
                    self.game_over_reason = "YOU WIN!"
                    reward += 100

        terminated = self.game_over
        truncated = not terminated and self.steps >= self.MAX_STEPS

        return self._get_observation(), reward, terminated, truncated, self._get_info()

    def _turn(self, movement):
        new_direction = self.DIRECTIONS.get(movement)
        if new_direction is None:
            return
        # Reversing into the neck is ignored
        if (new_direction[0] + self.direction[0], new_direction[1] + self.direction[1]) == (0, 0):
            return
        self.direction = new_direction

    def _check_collision(self, new_head, new_body):
        x, y = new_head
        if not (0 <= x < self.GRID_WIDTH and 0 <= y < self.GRID_HEIGHT):
            self.game_over_reason = "HIT A WALL"
            return True
        if new_head in new_body[1:]:
            self.game_over_reason = "HIT YOUR TAIL"
            return True
        return False

    def _spawn_food(self):
        occupied = set(self.snake_body)
        free_cells = [
            (x, y)
            for y in range(self.GRID_HEIGHT)
            for x in range(self.GRID_WIDTH)
            if (x, y) not in occupied
        ]
        if not free_cells:
            self.food_pos = None
        else:
            self.food_pos = free_cells[int(self.np_random.integers(len(free_cells)))]

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
            "score": self.score,
            "steps": self.steps,
            "length": len(self.snake_body),
            "food_pos": self.food_pos,
        }

    def _render_game(self):
        for x in range(self.GRID_WIDTH):
            px = x * self.CELL_SIZE
            pygame.draw.line(self.screen, self.COLOR_GRID, (px, 0), (px, self.SCREEN_HEIGHT))
        for y in range(self.GRID_HEIGHT):
            py = y * self.CELL_SIZE
            pygame.draw.line(self.screen, self.COLOR_GRID, (0, py), (self.SCREEN_WIDTH, py))

        if self.food_pos is not None:
            cx = self.food_pos[0] * self.CELL_SIZE + self.CELL_SIZE // 2
            cy = self.food_pos[1] * self.CELL_SIZE + self.CELL_SIZE // 2
            radius = self.CELL_SIZE // 2 - 1
            pygame.gfxdraw.filled_circle(self.screen, cx, cy, radius, self.COLOR_FOOD)
            pygame.gfxdraw.aacircle(self.screen, cx, cy, radius, self.COLOR_FOOD)

        for i, segment in enumerate(self.snake_body):
            seg_rect = pygame.Rect(
                segment[0] * self.CELL_SIZE, segment[1] * self.CELL_SIZE,
                self.CELL_SIZE, self.CELL_SIZE
            )
            color = self.COLOR_SNAKE_HEAD if i == 0 else self.COLOR_SNAKE_BODY
            pygame.draw.rect(self.screen, color, seg_rect)

    def _render_ui(self):
        score_text = self.font_score.render(f"Score: {self.score}", True, self.COLOR_TEXT)
        score_rect = score_text.get_rect(midtop=(self.SCREEN_WIDTH / 2, 5))
        self.screen.blit(score_text, score_rect)

        if self.game_over:
            overlay = pygame.Surface((self.SCREEN_WIDTH, self.SCREEN_HEIGHT), pygame.SRCALPHA)
            overlay.fill((0, 0, 0, 180))
            self.screen.blit(overlay, (0, 0))

            message = "You Win!" if self.win else "Game Over"
            end_text = self.font_gameover.render(message, True, self.COLOR_TEXT)
            end_rect = end_text.get_rect(center=(self.SCREEN_WIDTH / 2, self.SCREEN_HEIGHT / 2))
            self.screen.blit(end_text, end_rect)

            reason_text = self.font_score.render(self.game_over_reason, True, self.COLOR_TEXT)
            reason_rect = reason_text.get_rect(center=(self.SCREEN_WIDTH / 2, self.SCREEN_HEIGHT / 2 + 70))
            self.screen.blit(reason_text, reason_rect)

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
        assert len(self.snake_body) == self.INITIAL_LENGTH
        assert self.food_pos not in self.snake_body

        test_action = self.action_space.sample()
        obs, reward, term, trunc, info = self.step(test_action)
        assert obs.shape == (self.SCREEN_HEIGHT, self.SCREEN_WIDTH, 3)
        assert isinstance(reward, (int, float))
        assert isinstance(term, bool)
        assert trunc == False
        assert isinstance(info, dict)

        print("✓ Implementation validated successfully")
