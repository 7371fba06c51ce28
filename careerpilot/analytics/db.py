from __future__ import annotations

import sqlite3
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

from careerpilot.core.config import settings


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _get_db_path() -> Path:
    return Path(settings.analytics_db_path)


def _connect() -> sqlite3.Connection:
    db_path = _get_db_path()
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(db_path)
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS completion_runs (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            created_at TEXT NOT NULL,
            run_id TEXT NOT NULL,
            feature TEXT NOT NULL,
            user_id TEXT,
            model TEXT NOT NULL,
            status TEXT NOT NULL,
            error_code TEXT,
            prompt_tokens INTEGER,
            completion_tokens INTEGER,
            estimated_cost REAL,
            latency_ms INTEGER
        )
        """
    )
    conn.execute(
        """
        CREATE INDEX IF NOT EXISTS idx_completion_runs_created_at
        ON completion_runs (created_at)
        """
    )
    return conn


def init_db() -> None:
    if not settings.analytics_enabled:
        return
    with _connect() as conn:
        conn.commit()
    purge_old_records()


def log_completion_run(
    *,
    run_id: str,
    feature: str,
    user_id: str | None,
    model: str,
    status: str,
    error_code: str | None = None,
    prompt_tokens: int | None = None,
    completion_tokens: int | None = None,
    estimated_cost: float | None = None,
    latency_ms: int | None = None,
) -> None:
    if not settings.analytics_enabled:
        return
    with _connect() as conn:
        conn.execute(
            """
            INSERT INTO completion_runs (
                created_at, run_id, feature, user_id, model, status, error_code,
                prompt_tokens, completion_tokens, estimated_cost, latency_ms
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                _utc_now(),
                run_id,
                feature,
                user_id,
                model,
                status,
                error_code,
                prompt_tokens,
                completion_tokens,
                estimated_cost,
                latency_ms,
            ),
        )
        conn.commit()


def purge_old_records() -> dict[str, int]:
    if not settings.analytics_enabled:
        return {"completion_runs": 0}

    retention = max(1, int(settings.analytics_retention_days))
    cutoff = (datetime.now(timezone.utc) - timedelta(days=retention)).isoformat()
    with _connect() as conn:
        cur = conn.execute("DELETE FROM completion_runs WHERE created_at < ?", (cutoff,))
        conn.commit()
    return {"completion_runs": int(cur.rowcount or 0)}


def _row_to_dict(cursor: sqlite3.Cursor, row: tuple) -> dict[str, Any]:
    return {col[0]: row[idx] for idx, col in enumerate(cursor.description)}


def get_summary() -> dict[str, Any]:
    if not settings.analytics_enabled:
        return {"enabled": False}
    with _connect() as conn:
        cur = conn.execute(
            """
            SELECT
                COUNT(*) AS total,
                SUM(CASE WHEN status = 'success' THEN 1 ELSE 0 END) AS succeeded,
                COALESCE(SUM(prompt_tokens), 0) AS prompt_tokens,
                COALESCE(SUM(completion_tokens), 0) AS completion_tokens,
                COALESCE(SUM(estimated_cost), 0) AS estimated_cost,
                AVG(latency_ms) AS avg_latency_ms
            FROM completion_runs
            """
        )
        totals = _row_to_dict(cur, cur.fetchone())
        cur = conn.execute(
            """
            SELECT feature, COUNT(*) AS runs, COALESCE(SUM(estimated_cost), 0) AS estimated_cost
            FROM completion_runs
            GROUP BY feature
            ORDER BY runs DESC
            """
        )
        by_feature = [_row_to_dict(cur, row) for row in cur.fetchall()]
    avg_latency = totals["avg_latency_ms"]
    return {
        "enabled": True,
        "total": int(totals["total"] or 0),
        "succeeded": int(totals["succeeded"] or 0),
        "prompt_tokens": int(totals["prompt_tokens"]),
        "completion_tokens": int(totals["completion_tokens"]),
        "estimated_cost": round(float(totals["estimated_cost"]), 4),
        "avg_latency_ms": round(float(avg_latency), 1) if avg_latency is not None else None,
        "by_feature": by_feature,
    }


def get_latest(limit: int = 20) -> list[dict[str, Any]]:
    if not settings.analytics_enabled:
        return []
    with _connect() as conn:
        cur = conn.execute(
            """
            SELECT created_at, run_id, feature, model, status, error_code, estimated_cost, latency_ms
            FROM completion_runs
            ORDER BY id DESC
            LIMIT ?
            """,
            (limit,),
        )
        return [_row_to_dict(cur, row) for row in cur.fetchall()]
