"""Record keeping per layout."""

from __future__ import annotations

from backend.models.highscore import HighScoreEntry, HighScoreManager


def test_scores_are_ranked_and_persisted(tmp_path) -> None:
    path = tmp_path / "data" / "highscores.json"
    manager = HighScoreManager(path)
    manager.add_score("classic", HighScoreEntry(5, 3.0, "2026-01-01", assisted=True))
    manager.add_score("classic", HighScoreEntry(120, 90.5, "2026-01-02"))
    manager.add_score("classic", HighScoreEntry(100, 99.0, "2026-01-03"))
    manager.add_score("warmup", HighScoreEntry(2, 1.0, "2026-01-04"))

    reloaded = HighScoreManager(path)
    assert reloaded.get_layouts() == ["classic", "warmup"]
    assert [e.moves for e in reloaded.get_scores("classic")] == [100, 120, 5]
    assert reloaded.get_scores("classic")[-1].assisted


def test_ties_break_on_time(tmp_path) -> None:
    manager = HighScoreManager(tmp_path / "scores.json")
    manager.add_score("warmup", HighScoreEntry(2, 4.0, "a"))
    manager.add_score("warmup", HighScoreEntry(2, 1.5, "b"))
    assert [e.date for e in manager.get_scores("warmup")] == ["b", "a"]


def test_empty_manager(tmp_path) -> None:
    manager = HighScoreManager(tmp_path / "missing.json")
    assert manager.get_layouts() == []
    assert manager.get_scores("classic") == []
