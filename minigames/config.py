import os

# Leaderboard
LEADERBOARD_FILE = os.environ.get("MINIGAMES_LEADERBOARD", "leaderboard.json")
DEFAULT_PLAYER_NAME = os.environ.get("MINIGAMES_PLAYER", "Player")
TOP_SCORES_LIMIT = 10
DATE_FORMAT = "%b %d, %Y %H:%M"

# Window shown by the launcher and the menu
MENU_WIDTH = 800
MENU_HEIGHT = 600
MENU_FPS = 30
VERSION = "v1.0.0"

# Colors shared by the menu screens
PRIMARY_COLOR = (41, 128, 185)
SECONDARY_COLOR = (52, 152, 219)
ACCENT_COLOR = (231, 76, 60)
TEXT_COLOR = (236, 240, 241)
GOLD_COLOR = (255, 215, 0)
BG_TOP = (44, 62, 80)
BG_BOTTOM = (52, 73, 94)


def headless():
    """Whether pygame should render off-screen (SDL dummy video driver)."""
    return os.environ.get("MINIGAMES_HEADLESS", "1") != "0"


def use_dummy_video_driver():
    if headless():
        os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
