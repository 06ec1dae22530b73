import os

# Render off-screen; must happen before pygame opens a display
os.environ.setdefault("MINIGAMES_HEADLESS", "1")
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pytest  # noqa: E402

from minigames.leaderboard import Leaderboard  # noqa: E402


@pytest.fixture
def leaderboard(tmp_path):
    return Leaderboard(tmp_path / "leaderboard.json")
