import json
from datetime import datetime

from minigames import config
from minigames.leaderboard import Leaderboard, ScoreEntry, get_leaderboard


def test_missing_file_starts_empty(tmp_path, capsys):
    board = Leaderboard(tmp_path / "scores.json")
    assert board.get_all_scores() == []
    assert "not found" in capsys.readouterr().out
    assert not (tmp_path / "scores.json").exists()


def test_invalid_entries_are_rejected(leaderboard):
    assert leaderboard.add_score("", "Snake", 10) is None
    assert leaderboard.add_score("   ", "Snake", 10) is None
    assert leaderboard.add_score(None, "Snake", 10) is None
    assert leaderboard.add_score("Ann", "Snake", 0) is None
    assert leaderboard.add_score("Ann", "Snake", -5) is None
    assert leaderboard.get_all_scores() == []
    assert not leaderboard.path.exists()


def test_scores_sorted_descending_with_stable_ties(leaderboard):
    leaderboard.add_score("  Ann ", "Snake", 5)
    leaderboard.add_score("Bob", "Snake", 9)
    leaderboard.add_score("Cid", "Snake", 5)
    names = [(e.player_name, e.score) for e in leaderboard.get_all_scores()]
    assert names == [("Bob", 9), ("Ann", 5), ("Cid", 5)]


def test_scores_persist_between_instances(leaderboard):
    leaderboard.add_score("Ann", "2048", 2048)
    leaderboard.add_score("Bob", "Flappy Bird", 3)

    reloaded = Leaderboard(leaderboard.path)
    assert [(e.player_name, e.game_name, e.score) for e in reloaded.get_all_scores()] == [
        ("Ann", "2048", 2048),
        ("Bob", "Flappy Bird", 3),
    ]

    data = json.loads(leaderboard.path.read_text())
    assert data["version"] == 1
    assert len(data["scores"]) == 2


def test_top_scores_per_game(leaderboard):
    for score in range(1, 15):
        leaderboard.add_score("Ann", "Snake", score)
    leaderboard.add_score("Bob", "2048", 100)

    top = leaderboard.get_top_scores("Snake")
    assert len(top) == config.TOP_SCORES_LIMIT
    assert [e.score for e in top[:3]] == [14, 13, 12]
    assert all(e.game_name == "Snake" for e in top)
    assert [e.score for e in leaderboard.get_top_scores("Snake", 2)] == [14, 13]
    assert leaderboard.get_top_scores("Flappy Bird") == []


def test_highscore_display(leaderboard):
    assert leaderboard.get_highscore("2048") == 0
    assert leaderboard.get_highscore_display("2048") == "No score yet"
    leaderboard.add_score("Ann", "2048", 512)
    leaderboard.add_score("Bob", "2048", 1024)
    assert leaderboard.get_highscore("2048") == 1024
    assert leaderboard.get_highscore_display("2048") == "1024 by Bob"


def test_submit_score_uses_default_player(leaderboard):
    entry = leaderboard.submit_score("Snake", 7)
    assert entry.player_name == config.DEFAULT_PLAYER_NAME
    assert leaderboard.submit_score("Snake", 0) is None
    assert leaderboard.submit_score("Snake", 3, "Zed").player_name == "Zed"


def test_clear_game_and_clear_all(leaderboard):
    leaderboard.add_score("Ann", "Snake", 4)
    leaderboard.add_score("Ann", "2048", 40)
    leaderboard.reset_highscore("Snake")
    assert leaderboard.get_highscore("Snake") == 0
    assert leaderboard.get_highscore("2048") == 40
    assert Leaderboard(leaderboard.path).get_highscore("Snake") == 0

    leaderboard.reset_all_highscores()
    assert leaderboard.get_all_scores() == []
    assert Leaderboard(leaderboard.path).get_all_scores() == []


def test_corrupt_file_starts_fresh(tmp_path, capsys):
    path = tmp_path / "scores.json"
    path.write_text("{not json")
    board = Leaderboard(path)
    assert board.get_all_scores() == []
    assert "Could not load leaderboard" in capsys.readouterr().out

    path.write_text(json.dumps({"version": 1, "scores": [{"player_name": "Ann"}]}))
    assert Leaderboard(path).get_all_scores() == []


def test_get_all_scores_returns_a_copy(leaderboard):
    leaderboard.add_score("Ann", "Snake", 4)
    leaderboard.get_all_scores().clear()
    assert len(leaderboard.get_all_scores()) == 1


def test_score_entry_format_and_round_trip():
    entry = ScoreEntry("Ann", "Snake", 120, datetime(2026, 1, 5, 14, 3))
    assert str(entry) == "Ann: 120 points (Jan 05, 2026 14:03)"
    assert ScoreEntry.from_dict(entry.to_dict()) == entry


def test_print_scores(leaderboard, capsys):
    leaderboard.print_scores()
    assert "No scores yet!" in capsys.readouterr().out
    leaderboard.add_score("Ann", "Snake", 4)
    leaderboard.print_scores("Snake")
    out = capsys.readouterr().out
    assert "SCORES FOR SNAKE" in out
    assert "Ann: 4 points" in out


def test_get_leaderboard_is_shared_per_path(tmp_path):
    a = get_leaderboard(tmp_path / "a.json")
    assert get_leaderboard(tmp_path / "a.json") is a
    assert get_leaderboard(tmp_path / "b.json") is not a


def test_failed_save_is_reported_not_raised(tmp_path, capsys):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    board = Leaderboard(blocker / "scores.json")

    entry = board.add_score("Ann", "Snake", 7)
    assert entry is not None
    assert board.get_highscore("Snake") == 7
    assert "Error saving leaderboard" in capsys.readouterr().out


def test_failed_write_leaves_no_temp_file(leaderboard, monkeypatch, capsys):
    def broken_dump(data, f, **kwargs):
        f.write("{")
        raise OSError("disk full")

    monkeypatch.setattr("minigames.leaderboard.json.dump", broken_dump)
    leaderboard.add_score("Ann", "Snake", 7)

    assert "Error saving leaderboard: disk full" in capsys.readouterr().out
    assert list(leaderboard.path.parent.iterdir()) == []
