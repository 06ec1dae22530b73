"""Local leaderboard shared by all games.

Scores live in a single JSON file (``config.LEADERBOARD_FILE`` by default):

    {"version": 1, "scores": [{"player_name": ..., "game_name": ...,
                               "score": ..., "date": "2026-01-05T14:03:00"}]}

The list is kept sorted by score, highest first. Entries with the same
score stay in the order they were added.
"""

import json
import os
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from minigames import config

FILE_VERSION = 1


@dataclass
class ScoreEntry:
    player_name: str
    game_name: str
    score: int
    date: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        return f"{self.player_name}: {self.score} points ({self.date.strftime(config.DATE_FORMAT)})"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "player_name": self.player_name,
            "game_name": self.game_name,
            "score": self.score,
            "date": self.date.isoformat(timespec="seconds"),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ScoreEntry":
        return cls(
            player_name=str(data["player_name"]),
            game_name=str(data["game_name"]),
            score=int(data["score"]),
            date=datetime.fromisoformat(data["date"]),
        )


class Leaderboard:
    """High scores for every game, persisted after each change."""

    def __init__(self, path: Optional[Path] = None):
        """Load the leaderboard.

        Args:
            path: JSON file to use. Defaults to ``config.LEADERBOARD_FILE``.
        """
        self.path = Path(path) if path is not None else Path(config.LEADERBOARD_FILE)
        self.scores: List[ScoreEntry] = self._load_scores()

    def add_score(self, player_name: Optional[str], game_name: str, score: int) -> Optional[ScoreEntry]:
        """Record a score. Blank names and scores <= 0 are rejected."""
        if player_name is None or not player_name.strip() or score <= 0:
            print(f"Invalid score entry - name: '{player_name}', score: {score}")
            return None

        entry = ScoreEntry(player_name.strip(), game_name, int(score))
        self.scores.append(entry)
        # sort() is stable, so ties keep insertion order
        self.scores.sort(key=lambda e: e.score, reverse=True)
        self._save_scores()
        print(f"Score added to leaderboard: {entry}")
        return entry

    def submit_score(self, game_name: str, score: int,
                     player_name: Optional[str] = None) -> Optional[ScoreEntry]:
        """Record a score at the end of a game, without asking for a name."""
        if player_name is None:
            player_name = config.DEFAULT_PLAYER_NAME
        return self.add_score(player_name, game_name, score)

    def get_top_scores(self, game_name: str, limit: int = config.TOP_SCORES_LIMIT) -> List[ScoreEntry]:
        return [e for e in self.scores if e.game_name == game_name][:limit]

    def get_all_scores(self) -> List[ScoreEntry]:
        return list(self.scores)

    def get_highscore(self, game_name: str) -> int:
        top = self.get_top_scores(game_name, 1)
        return top[0].score if top else 0

    def get_highscore_display(self, game_name: str) -> str:
        top = self.get_top_scores(game_name, 1)
        if not top:
            return "No score yet"
        return f"{top[0].score} by {top[0].player_name}"

    def clear(self) -> None:
        self.scores.clear()
        self._save_scores()
        print("Leaderboard cleared")

    def clear_game(self, game_name: str) -> None:
        self.scores = [e for e in self.scores if e.game_name != game_name]
        self._save_scores()
        print(f"Leaderboard cleared for game: {game_name}")

    # Names used by the highscores screen
    reset_all_highscores = clear
    reset_highscore = clear_game

    def print_scores(self, game_name: Optional[str] = None) -> None:
        if game_name is None:
            title = "ALL SCORES IN LEADERBOARD"
            entries = self.scores
        else:
            title = f"SCORES FOR {game_name.upper()}"
            entries = self.get_top_scores(game_name)

        print(f"=== {title} ===")
        if not entries:
            print("No scores yet!")
        for entry in entries:
            if game_name is None:
                print(f"[{entry.game_name}] {entry}")
            else:
                print(entry)
        print("=" * (len(title) + 8))

    def _load_scores(self) -> List[ScoreEntry]:
        if not self.path.exists():
            print("Leaderboard file not found, starting a new one.")
            return []

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
            scores = [ScoreEntry.from_dict(item) for item in data["scores"]]
        except (OSError, ValueError, KeyError, TypeError) as e:
            print(f"Could not load leaderboard, starting fresh: {e}")
            return []

        scores.sort(key=lambda e: e.score, reverse=True)
        print(f"Leaderboard loaded successfully with {len(scores)} entries")
        return scores

    def _save_scores(self) -> None:
        data = {
            "version": FILE_VERSION,
            "scores": [e.to_dict() for e in self.scores],
        }
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            if self.path.parent and not self.path.parent.exists():
                self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp_path, self.path)
        except OSError as e:
            if tmp_path.exists():
                tmp_path.unlink()
            print(f"Error saving leaderboard: {e}")


_instances: Dict[Path, Leaderboard] = {}


def get_leaderboard(path: Optional[Path] = None) -> Leaderboard:
    """Shared leaderboard for ``path`` (default file when omitted)."""
    resolved = Path(path if path is not None else config.LEADERBOARD_FILE).resolve()
    if resolved not in _instances:
        _instances[resolved] = Leaderboard(resolved)
    return _instances[resolved]
