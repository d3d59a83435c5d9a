"""Best results per layout, persisted as JSON."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from pathlib import Path


@dataclass
class HighScoreEntry:
    moves: int
    time: float
    date: str
    assisted: bool = False


class HighScoreManager:
    """Loads, saves, and queries high scores from a JSON file.

    Unassisted games rank ahead of games where solver moves were played.
    """

    def __init__(self, filepath: Path) -> None:
        self.filepath = filepath
        self._scores: dict[str, list[HighScoreEntry]] = {}
        self._load()

    # -- persistence ----------------------------------------------------------

    def _load(self) -> None:
        if self.filepath.exists():
            data = json.loads(self.filepath.read_text())
            for layout, entries in data.items():
                self._scores[layout] = [HighScoreEntry(**e) for e in entries]

    def save(self) -> None:
        self.filepath.parent.mkdir(parents=True, exist_ok=True)
        data = {
            layout: [asdict(e) for e in entries]
            for layout, entries in self._scores.items()
        }
        self.filepath.write_text(json.dumps(data, indent=2) + "\n")

    # -- queries --------------------------------------------------------------

    def add_score(self, layout: str, entry: HighScoreEntry) -> None:
        entries = self._scores.setdefault(layout, [])
        entries.append(entry)
        entries.sort(key=lambda e: (e.assisted, e.moves, e.time))
        self.save()

    def get_scores(self, layout: str) -> list[HighScoreEntry]:
        return self._scores.get(layout, [])

    def get_layouts(self) -> list[str]:
        return sorted(self._scores)
