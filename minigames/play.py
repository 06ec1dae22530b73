import numpy as np
import pygame

from minigames.games import get_game_class
from minigames.leaderboard import get_leaderboard

MOVEMENT_KEYS = {
    pygame.K_UP: 1, pygame.K_w: 1,
    pygame.K_DOWN: 2, pygame.K_s: 2,
    pygame.K_LEFT: 3, pygame.K_a: 3,
    pygame.K_RIGHT: 4, pygame.K_d: 4,
}

# Turn-based games only need to redraw this often
IDLE_FPS = 30


def draw_observation(screen, obs):
    frame = np.transpose(obs, (1, 0, 2))
    surf = pygame.surfarray.make_surface(frame)
    screen.blit(surf, (0, 0))
    pygame.display.flip()


def finish_game(leaderboard, game_class, info, player_name=None):
    """Report a finished game and submit it if it scored. Returns the score."""
    score = info["score"]
    print(f"Game Over! Your score: {score}")
    if score > 0:
        leaderboard.submit_score(game_class.game_name, score, player_name)
    return score


def play(game_name, player_name=None, leaderboard=None):
    """Play one game in a window until the player leaves.

    Every finished game is submitted to the leaderboard. Returns the
    score of the last finished game (0 if none finished).
    """
    game_class = get_game_class(game_name)
    if leaderboard is None:
        leaderboard = get_leaderboard()

    env = game_class(render_mode="rgb_array")
    obs, info = env.reset()

    screen = pygame.display.set_mode((env.SCREEN_WIDTH, env.SCREEN_HEIGHT))
    pygame.display.set_caption(game_class.game_name)
    clock = pygame.time.Clock()
    fps = env.metadata.get("render_fps", IDLE_FPS) if env.auto_advance else IDLE_FPS

    print(game_class.user_guide)

    last_score = 0
    game_over = False
    movement = 0
    running = True

    while running:
        turn_movement = 0
        restart = False

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                elif event.key == pygame.K_r:
                    restart = True
                elif event.key == pygame.K_SPACE and game_over:
                    restart = True
                elif event.key in MOVEMENT_KEYS:
                    movement = MOVEMENT_KEYS[event.key]
                    turn_movement = movement
            elif event.type == pygame.MOUSEBUTTONDOWN and game_over:
                restart = True

        if not running:
            break

        if restart:
            obs, info = env.reset()
            game_over = False
            movement = 0
            print("Game Reset.")
        elif not game_over:
            keys = pygame.key.get_pressed()
            space_held = int(keys[pygame.K_SPACE] or pygame.mouse.get_pressed()[0])

            if env.auto_advance:
                action = np.array([movement, space_held, 0])
                movement = 0
            elif turn_movement:
                action = np.array([turn_movement, 0, 0])
            else:
                action = None

            if action is not None:
                obs, reward, terminated, truncated, info = env.step(action)
                if terminated or truncated:
                    game_over = True
                    last_score = finish_game(leaderboard, game_class, info, player_name)

        draw_observation(screen, obs)
        clock.tick(fps)

    return last_score


def demo(game_name, seed=None):
    """Let the scripted policy play one game in a window. Returns its score."""
    from minigames.policies import POLICIES

    game_class = get_game_class(game_name)
    policy = POLICIES[game_class.game_name]

    env = game_class(render_mode="rgb_array")
    obs, info = env.reset(seed=seed)

    screen = pygame.display.set_mode((env.SCREEN_WIDTH, env.SCREEN_HEIGHT))
    pygame.display.set_caption(f"{game_class.game_name} (demo)")
    clock = pygame.time.Clock()
    fps = env.metadata.get("render_fps", IDLE_FPS) if env.auto_advance else 10

    done = False
    running = True
    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT or (event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE):
                running = False

        if not done:
            obs, reward, terminated, truncated, info = env.step(policy(env))
            done = terminated or truncated
            if done:
                print(f"Demo finished. Score: {info['score']}, steps: {info['steps']}")

        draw_observation(screen, obs)
        clock.tick(fps)

    return info["score"]
