import gymnasium as gym
from gymnasium.spaces import MultiDiscrete
import numpy as np
import pygame

from minigames import config

config.use_dummy_video_driver()


class FlappyBirdEnv(gym.Env):
    metadata = {"render_modes": ["rgb_array"], "render_fps": 60}

    game_name = "Flappy Bird"
    user_guide = "Controls: Press space (or click) to flap. The first flap starts the game."
    game_description = "Flap to navigate the bird through the gaps between the pipes!"
    auto_advance = True

    # --- Constants ---
    SCREEN_WIDTH = 800
    SCREEN_HEIGHT = 600
    MAX_STEPS = 10000

    BIRD_WIDTH = 34
    BIRD_HEIGHT = 24
    BIRD_START_X = SCREEN_WIDTH // 3
    BIRD_START_Y = SCREEN_HEIGHT // 2

    PIPE_WIDTH = 100
    PIPE_GAP = 200
    PIPE_SPEED = 4
    PIPE_SPAWN_INTERVAL = 90
    PIPE_MIN_HEIGHT = 50

    # Physics, per tick; negative y is up
    GRAVITY = 1
    JUMP_STRENGTH = -15

    # Colors
    COLOR_SKY = (0, 255, 255)
    COLOR_PIPE = (0, 178, 0)
    COLOR_PIPE_OUTLINE = (0, 120, 0)
    COLOR_BIRD = (255, 255, 0)
    COLOR_BIRD_OUTLINE = (200, 160, 0)
    COLOR_TEXT = (255, 255, 255)

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
        self.font_main = pygame.font.Font(None, 64)

        self.bird = pygame.Rect(self.BIRD_START_X, self.BIRD_START_Y, self.BIRD_WIDTH, self.BIRD_HEIGHT)
        self.bird_velocity = 0
        self.pipes = []
        self.started = False
        self.game_over = False
        self.score = 0
        self.steps = 0
        self.ticks = 0
        self.prev_space_held = False

        self.reset()

    def reset(self, seed=None, options=None):
        super().reset(seed=seed)

        self.bird = pygame.Rect(self.BIRD_START_X, self.BIRD_START_Y, self.BIRD_WIDTH, self.BIRD_HEIGHT)
        self.bird_velocity = 0
        self.pipes = []
        self.started = False
        self.game_over = False
        self.score = 0
        self.steps = 0
        self.ticks = 0
        self.prev_space_held = False

        return self._get_observation(), self._get_info()

    def step(self, action):
        if self.game_over:
            return self._get_observation(), 0.0, True, False, self._get_info()

        self.steps += 1
        space_held = int(action[1]) == 1
        flap = space_held and not self.prev_space_held
        self.prev_space_held = space_held

        reward = 0.0
        if not self.started:
            # The first flap only starts the world
            if flap:
                self.started = True
        else:
            if flap:
                self.bird_velocity = self.JUMP_STRENGTH
            reward += self._update_game()

        terminated = self.game_over
        truncated = not terminated and self.steps >= self.MAX_STEPS

        return self._get_observation(), reward, terminated, truncated, self._get_info()

    def _update_game(self):
        reward = 0.1  # Survival reward

        # --- Bird ---
        self.bird_velocity += self.GRAVITY
        self.bird.y += self.bird_velocity
        if self.bird.top < 0:
            self.bird.top = 0
            self.bird_velocity = max(self.bird_velocity, 0)

        # --- Pipes ---
        self.ticks += 1
        if self.ticks % self.PIPE_SPAWN_INTERVAL == 0:
            self._spawn_pipes()

        for pipe in self.pipes:
            pipe['top'].x -= self.PIPE_SPEED
            pipe['bottom'].x -= self.PIPE_SPEED
            if not pipe['scored'] and pipe['top'].right < self.bird.left:
                pipe['scored'] = True
                self.score += 1
                reward += 10

        self.pipes = [p for p in self.pipes if p['top'].right >= 0]

        # --- Collisions ---
        if self.bird.bottom > self.SCREEN_HEIGHT or self._hits_pipe():
            self.game_over = True
            reward = -100.0

        return reward

    def _hits_pipe(self):
        for pipe in self.pipes:
            if self.bird.colliderect(pipe['top']) or self.bird.colliderect(pipe['bottom']):
                return True
        return False

    def _spawn_pipes(self):
        span = self.SCREEN_HEIGHT - self.PIPE_GAP - 2 * self.PIPE_MIN_HEIGHT
        top_height = self.PIPE_MIN_HEIGHT + int(self.np_random.integers(span))
        bottom_y = top_height + self.PIPE_GAP

        self.pipes.append({
            'top': pygame.Rect(self.SCREEN_WIDTH, 0, self.PIPE_WIDTH, top_height),
            'bottom': pygame.Rect(self.SCREEN_WIDTH, bottom_y, self.PIPE_WIDTH, self.SCREEN_HEIGHT - bottom_y),
            'scored': False,
        })

    def next_pipe(self):
        """The first pipe pair whose right edge is not yet behind the bird."""
        for pipe in self.pipes:
            if pipe['top'].right >= self.bird.left:
                return pipe
        return None

    def render(self):
        return self._get_observation()

    def _get_observation(self):
        self.screen.fill(self.COLOR_SKY)
        self._render_pipes()
        self._render_bird()
        self._render_ui()

        arr = pygame.surfarray.array3d(self.screen)
        return np.transpose(arr, (1, 0, 2)).astype(np.uint8)

    def _get_info(self):
        return {
            "score": self.score,
            "steps": self.steps,
            "started": self.started,
            "bird_y": self.bird.y,
            "bird_velocity": self.bird_velocity,
        }

    def _render_pipes(self):
        for pipe in self.pipes:
            for rect in (pipe['top'], pipe['bottom']):
                pygame.draw.rect(self.screen, self.COLOR_PIPE, rect)
                pygame.draw.rect(self.screen, self.COLOR_PIPE_OUTLINE, rect, 3)

    def _render_bird(self):
        pygame.draw.ellipse(self.screen, self.COLOR_BIRD, self.bird)
        pygame.draw.ellipse(self.screen, self.COLOR_BIRD_OUTLINE, self.bird, 2)
        eye = (self.bird.right - 9, self.bird.top + 8)
        pygame.draw.circle(self.screen, (0, 0, 0), eye, 3)

    def _render_ui(self):
        cx, cy = self.SCREEN_WIDTH / 2, self.SCREEN_HEIGHT / 2

        if self.game_over:
            lines = ["Game Over!", f"Score: {self.score}", "Flap to Restart"]
            for i, line in enumerate(lines):
                text = self.font_main.render(line, True, self.COLOR_TEXT)
                self.screen.blit(text, text.get_rect(center=(cx, cy - 50 + i * 70)))
        elif not self.started:
            text = self.font_main.render("Flap to Start", True, self.COLOR_TEXT)
            self.screen.blit(text, text.get_rect(center=(cx, cy - 50)))
        else:
            text = self.font_main.render(str(self.score), True, self.COLOR_TEXT)
            self.screen.blit(text, text.get_rect(center=(cx, 100)))

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
        assert not self.started

        test_action = self.action_space.sample()
        obs, reward, term, trunc, info = self.step(test_action)
        assert obs.shape == (self.SCREEN_HEIGHT, self.SCREEN_WIDTH, 3)
        assert isinstance(reward, (int, float))
        assert isinstance(term, bool)
        assert trunc == False
        assert isinstance(info, dict)

        print("✓ Implementation validated successfully")
