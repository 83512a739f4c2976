"""SQLite-backed AI usage log storage."""

from __future__ import annotations

import sqlite3
from datetime import datetime
from pathlib import Path

from resumint.logging.models import UsageLog

DEFAULT_DB_PATH = Path.home() / ".resumint" / "usage.db"

_COLUMNS = (
    "id, user_id, draft_id, timestamp, operation, model, input_tokens, "
    "output_tokens, estimated_cost_usd, elapsed_seconds, success, error_message"
)


class UsageStore:
    """SQLite-backed store for AI usage logs with WAL mode."""

    def __init__(self, db_path: str | Path = DEFAULT_DB_PATH):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self.db_path))
        conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _init_db(self) -> None:
        with self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS ai_usage_logs (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    draft_id TEXT,
                    timestamp TEXT NOT NULL,
                    operation TEXT NOT NULL,
                    model TEXT NOT NULL,
                    input_tokens INTEGER NOT NULL DEFAULT 0,
                    output_tokens INTEGER NOT NULL DEFAULT 0,
                    estimated_cost_usd REAL NOT NULL DEFAULT 0.0,
                    elapsed_seconds REAL NOT NULL DEFAULT 0.0,
                    success INTEGER NOT NULL DEFAULT 1,
                    error_message TEXT
                )
            """)
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_usage_user_time "
                "ON ai_usage_logs (user_id, timestamp)"
            )

    def save_log(self, log: UsageLog) -> None:
        """Persist a usage log entry."""
        with self._connect() as conn:
            conn.execute(
                f"INSERT OR REPLACE INTO ai_usage_logs ({_COLUMNS}) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    log.id,
                    log.user_id,
                    log.draft_id,
                    log.timestamp.isoformat(),
                    log.operation,
                    log.model,
                    log.input_tokens,
                    log.output_tokens,
                    log.estimated_cost_usd,
                    log.elapsed_seconds,
                    1 if log.success else 0,
                    log.error_message,
                ),
            )

    def get_logs(
        self,
        user_id: str | None = None,
        limit: int = 50,
    ) -> list[UsageLog]:
        """Retrieve usage logs, newest first, optionally filtered by user."""
        with self._connect() as conn:
            if user_id is not None:
                rows = conn.execute(
                    f"SELECT {_COLUMNS} FROM ai_usage_logs WHERE user_id = ? "
                    "ORDER BY timestamp DESC LIMIT ?",
                    (user_id, limit),
                ).fetchall()
            else:
                rows = conn.execute(
                    f"SELECT {_COLUMNS} FROM ai_usage_logs ORDER BY timestamp DESC LIMIT ?",
                    (limit,),
                ).fetchall()
        return [self._row_to_log(row) for row in rows]

    def get_monthly_stats(self, user_id: str | None = None) -> dict:
        """Get aggregated stats for the current month."""
        now = datetime.now()
        month_start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
        query = """SELECT
                       COUNT(*),
                       SUM(input_tokens),
                       SUM(output_tokens),
                       SUM(estimated_cost_usd),
                       SUM(CASE WHEN success = 1 THEN 1 ELSE 0 END)
                   FROM ai_usage_logs
                   WHERE timestamp >= ?"""
        params: tuple = (month_start.isoformat(),)
        if user_id is not None:
            query += " AND user_id = ?"
            params += (user_id,)
        with self._connect() as conn:
            row = conn.execute(query, params).fetchone()
        total_input = row[1] or 0
        total_output = row[2] or 0
        return {
            "operations": row[0] or 0,
            "input_tokens": total_input,
            "output_tokens": total_output,
            "total_tokens": total_input + total_output,
            "cost_usd": row[3] or 0.0,
            "success_rate": (row[4] / row[0] * 100) if row[0] else 0.0,
            "month": now.strftime("%Y-%m"),
        }

    def get_total_cost(self, user_id: str | None = None) -> float:
        """Get total estimated cost across all logs."""
        with self._connect() as conn:
            if user_id is not None:
                row = conn.execute(
                    "SELECT SUM(estimated_cost_usd) FROM ai_usage_logs WHERE user_id = ?",
                    (user_id,),
                ).fetchone()
            else:
                row = conn.execute(
                    "SELECT SUM(estimated_cost_usd) FROM ai_usage_logs"
                ).fetchone()
        return row[0] or 0.0

    @staticmethod
    def _row_to_log(row: tuple) -> UsageLog:
        return UsageLog(
            id=row[0],
            user_id=row[1],
            draft_id=row[2],
            timestamp=datetime.fromisoformat(row[3]),
            operation=row[4],
            model=row[5],
            input_tokens=row[6],
            output_tokens=row[7],
            estimated_cost_usd=row[8],
            elapsed_seconds=row[9],
            success=bool(row[10]),
            error_message=row[11],
        )
