"""Persistence: the high score scalar and a SQLite history of finished rounds."""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path

from kanafall.config import DATA_DIR
from kanafall.models import RoundSummary

logger = logging.getLogger(__name__)

DEFAULT_HIGH_SCORE_PATH = DATA_DIR / "highscore"
DEFAULT_DB_PATH = DATA_DIR / "history.db"


class HighScoreStore:
    """A single non-negative integer kept in a plain text file."""

    def __init__(self, path: Path = DEFAULT_HIGH_SCORE_PATH) -> None:
        self.path = path

    def read(self) -> int:
        if not self.path.exists():
            return 0
        try:
            value = int(self.path.read_text().strip())
        except (OSError, ValueError):
            logger.warning("Ignoring unreadable high score file %s", self.path)
            return 0
        return max(0, value)

    def write(self, value: int) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(str(int(value)))


class RoundHistory:
    def __init__(self, db_path: Path = DEFAULT_DB_PATH) -> None:
        db_path.parent.mkdir(parents=True, exist_ok=True)
        self.conn = sqlite3.connect(str(db_path))
        self._init_db()

    def _init_db(self) -> None:
        self.conn.execute("""
            CREATE TABLE IF NOT EXISTS rounds (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                score INTEGER NOT NULL,
                stages_completed INTEGER,
                questions_answered INTEGER,
                outcome TEXT NOT NULL,
                stage_ids TEXT,
                played_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)
        self.conn.commit()

    def save_round(self, summary: RoundSummary) -> None:
        self.conn.execute(
            """INSERT INTO rounds
               (score, stages_completed, questions_answered, outcome, stage_ids)
               VALUES (?, ?, ?, ?, ?)""",
            (
                summary.score,
                summary.stages_completed,
                summary.questions_answered,
                summary.outcome,
                ",".join(str(s) for s in summary.stage_ids),
            ),
        )
        self.conn.commit()

    def get_history(self, outcome: str | None = None, limit: int = 50) -> list[dict]:
        if outcome:
            cur = self.conn.execute(
                "SELECT * FROM rounds WHERE outcome = ? ORDER BY id DESC LIMIT ?",
                (outcome, limit),
            )
        else:
            cur = self.conn.execute(
                "SELECT * FROM rounds ORDER BY id DESC LIMIT ?", (limit,)
            )
        cols = [d[0] for d in cur.description]
        return [dict(zip(cols, row)) for row in cur.fetchall()]

    def close(self) -> None:
        self.conn.close()
