from __future__ import annotations

import json
import os
import sqlite3
import threading
import uuid
from datetime import datetime, timezone
from typing import Any, Iterable, Literal

ResumeKind = Literal["BASE", "TAILORED"]
AccountPlan = Literal["FREE", "PREMIUM"]

_SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS resumes (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        file_name TEXT NOT NULL,
        kind TEXT NOT NULL,
        original_text TEXT NOT NULL,
        base_resume_id TEXT,
        job_id TEXT,
        metadata_json TEXT NOT NULL,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    );
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_resumes_owner
    ON resumes (user_id, kind, created_at);
    """,
    """
    CREATE TABLE IF NOT EXISTS jobs (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        title TEXT NOT NULL,
        company TEXT NOT NULL,
        description TEXT NOT NULL,
        requirements_json TEXT NOT NULL,
        location TEXT,
        url TEXT,
        created_at TEXT NOT NULL
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS cover_letters (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        job_id TEXT NOT NULL,
        resume_id TEXT,
        content TEXT NOT NULL,
        job_title TEXT NOT NULL,
        company TEXT NOT NULL,
        tone TEXT NOT NULL,
        generated_by_ai INTEGER NOT NULL,
        metadata_json TEXT NOT NULL,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    );
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_cover_letters_owner
    ON cover_letters (user_id, created_at);
    """,
    """
    CREATE TABLE IF NOT EXISTS accounts (
        user_id TEXT PRIMARY KEY,
        plan TEXT NOT NULL
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS usage_counters (
        user_id TEXT NOT NULL,
        feature TEXT NOT NULL,
        count INTEGER NOT NULL,
        last_reset TEXT NOT NULL,
        last_used TEXT,
        PRIMARY KEY (user_id, feature)
    );
    """,
)


class DocumentNotFoundError(LookupError):
    """Raised when a document is missing or owned by another user."""

    def __init__(self, kind: str, document_id: str):
        super().__init__(f"{kind} not found")
        self.kind = kind
        self.document_id = document_id


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _new_id() -> str:
    return uuid.uuid4().hex


def _loads(raw: str | None, default: Any) -> Any:
    return json.loads(raw) if raw else default


class DocumentStore:
    """sqlite-backed store for resumes, jobs, cover letters and quota state.

    Every read and write is scoped to ``user_id``; a document owned by another
    user is indistinguishable from a missing one.
    """

    def __init__(self, db_path: str):
        self.db_path = db_path
        self._conn: sqlite3.Connection | None = None
        self._lock = threading.Lock()

    def _connection(self) -> sqlite3.Connection:
        with self._lock:
            if self._conn is not None:
                return self._conn

            if self.db_path != ":memory:":
                directory = os.path.dirname(self.db_path)
                if directory:
                    os.makedirs(directory, exist_ok=True)

            conn = sqlite3.connect(
                self.db_path,
                check_same_thread=False,
                timeout=5,
                isolation_level=None,
            )
            conn.row_factory = sqlite3.Row
            conn.execute("PRAGMA journal_mode=WAL;")
            conn.execute("PRAGMA synchronous=NORMAL;")
            conn.execute("PRAGMA busy_timeout=5000;")
            for statement in _SCHEMA:
                conn.execute(statement)
            self._conn = conn
            return conn

    def _execute(self, sql: str, params: Iterable[Any] = ()) -> sqlite3.Cursor:
        conn = self._connection()
        with self._lock:
            return conn.execute(sql, tuple(params))

    def _fetchone(self, sql: str, params: Iterable[Any] = ()) -> sqlite3.Row | None:
        conn = self._connection()
        with self._lock:
            return conn.execute(sql, tuple(params)).fetchone()

    def _fetchall(self, sql: str, params: Iterable[Any] = ()) -> list[sqlite3.Row]:
        conn = self._connection()
        with self._lock:
            return conn.execute(sql, tuple(params)).fetchall()

    def close(self) -> None:
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None

    # resumes

    @staticmethod
    def _resume_row(row: sqlite3.Row) -> dict[str, Any]:
        return {
            "id": row["id"],
            "user_id": row["user_id"],
            "file_name": row["file_name"],
            "kind": row["kind"],
            "original_text": row["original_text"],
            "base_resume_id": row["base_resume_id"],
            "job_id": row["job_id"],
            "metadata": _loads(row["metadata_json"], {}),
            "created_at": datetime.fromisoformat(row["created_at"]),
            "updated_at": datetime.fromisoformat(row["updated_at"]),
        }

    def create_resume(
        self,
        user_id: str,
        *,
        file_name: str,
        original_text: str,
        kind: ResumeKind = "BASE",
        base_resume_id: str | None = None,
        job_id: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        resume_id = _new_id()
        now = _utc_now()
        self._execute(
            """
            INSERT INTO resumes (
                id, user_id, file_name, kind, original_text, base_resume_id, job_id,
                metadata_json, created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                resume_id,
                user_id,
                file_name,
                kind,
                original_text,
                base_resume_id,
                job_id,
                json.dumps(metadata or {}, ensure_ascii=False),
                now,
                now,
            ),
        )
        return self.get_resume(user_id, resume_id)

    def get_resume(self, user_id: str, resume_id: str) -> dict[str, Any]:
        row = self._fetchone(
            "SELECT * FROM resumes WHERE id = ? AND user_id = ?",
            (resume_id, user_id),
        )
        if row is None:
            raise DocumentNotFoundError("Resume", resume_id)
        return self._resume_row(row)

    def list_resumes(self, user_id: str, *, kind: ResumeKind | None = None, limit: int = 50) -> list[dict[str, Any]]:
        if kind is None:
            rows = self._fetchall(
                "SELECT * FROM resumes WHERE user_id = ? ORDER BY created_at DESC, rowid DESC LIMIT ?",
                (user_id, limit),
            )
        else:
            rows = self._fetchall(
                "SELECT * FROM resumes WHERE user_id = ? AND kind = ? ORDER BY created_at DESC, rowid DESC LIMIT ?",
                (user_id, kind, limit),
            )
        return [self._resume_row(row) for row in rows]

    def update_resume(
        self,
        user_id: str,
        resume_id: str,
        *,
        original_text: str | None = None,
        file_name: str | None = None,
    ) -> dict[str, Any]:
        current = self.get_resume(user_id, resume_id)
        self._execute(
            """
            UPDATE resumes SET original_text = ?, file_name = ?, updated_at = ?
            WHERE id = ? AND user_id = ?
            """,
            (
                current["original_text"] if original_text is None else original_text,
                current["file_name"] if file_name is None else file_name,
                _utc_now(),
                resume_id,
                user_id,
            ),
        )
        return self.get_resume(user_id, resume_id)

    def delete_resume(self, user_id: str, resume_id: str) -> None:
        cur = self._execute("DELETE FROM resumes WHERE id = ? AND user_id = ?", (resume_id, user_id))
        if not cur.rowcount:
            raise DocumentNotFoundError("Resume", resume_id)

    # jobs

    @staticmethod
    def _job_row(row: sqlite3.Row) -> dict[str, Any]:
        return {
            "id": row["id"],
            "user_id": row["user_id"],
            "title": row["title"],
            "company": row["company"],
            "description": row["description"],
            "requirements": _loads(row["requirements_json"], []),
            "location": row["location"],
            "url": row["url"],
            "created_at": datetime.fromisoformat(row["created_at"]),
        }

    def create_job(
        self,
        user_id: str,
        *,
        title: str,
        company: str,
        description: str,
        requirements: list[str] | None = None,
        location: str | None = None,
        url: str | None = None,
    ) -> dict[str, Any]:
        job_id = _new_id()
        self._execute(
            """
            INSERT INTO jobs (
                id, user_id, title, company, description, requirements_json, location, url, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                job_id,
                user_id,
                title,
                company,
                description,
                json.dumps(list(requirements or []), ensure_ascii=False),
                location,
                url,
                _utc_now(),
            ),
        )
        return self.get_job(user_id, job_id)

    def get_job(self, user_id: str, job_id: str) -> dict[str, Any]:
        row = self._fetchone("SELECT * FROM jobs WHERE id = ? AND user_id = ?", (job_id, user_id))
        if row is None:
            raise DocumentNotFoundError("Job", job_id)
        return self._job_row(row)

    # cover letters

    @staticmethod
    def _cover_letter_row(row: sqlite3.Row) -> dict[str, Any]:
        return {
            "id": row["id"],
            "user_id": row["user_id"],
            "job_id": row["job_id"],
            "resume_id": row["resume_id"],
            "content": row["content"],
            "job_title": row["job_title"],
            "company": row["company"],
            "tone": row["tone"],
            "generated_by_ai": bool(row["generated_by_ai"]),
            "metadata": _loads(row["metadata_json"], {}),
            "created_at": datetime.fromisoformat(row["created_at"]),
            "updated_at": datetime.fromisoformat(row["updated_at"]),
        }

    def create_cover_letter(
        self,
        user_id: str,
        *,
        job_id: str,
        resume_id: str | None,
        content: str,
        job_title: str,
        company: str,
        tone: str,
        metadata: dict[str, Any] | None = None,
        generated_by_ai: bool = True,
    ) -> dict[str, Any]:
        letter_id = _new_id()
        now = _utc_now()
        self._execute(
            """
            INSERT INTO cover_letters (
                id, user_id, job_id, resume_id, content, job_title, company, tone,
                generated_by_ai, metadata_json, created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                letter_id,
                user_id,
                job_id,
                resume_id,
                content,
                job_title,
                company,
                tone,
                1 if generated_by_ai else 0,
                json.dumps(metadata or {}, ensure_ascii=False),
                now,
                now,
            ),
        )
        return self.get_cover_letter(user_id, letter_id)

    def get_cover_letter(self, user_id: str, letter_id: str) -> dict[str, Any]:
        row = self._fetchone(
            "SELECT * FROM cover_letters WHERE id = ? AND user_id = ?",
            (letter_id, user_id),
        )
        if row is None:
            raise DocumentNotFoundError("Cover letter", letter_id)
        return self._cover_letter_row(row)

    def list_cover_letters(self, user_id: str, *, limit: int = 20) -> list[dict[str, Any]]:
        rows = self._fetchall(
            "SELECT * FROM cover_letters WHERE user_id = ? ORDER BY created_at DESC, rowid DESC LIMIT ?",
            (user_id, limit),
        )
        return [self._cover_letter_row(row) for row in rows]

    def update_cover_letter(
        self,
        user_id: str,
        letter_id: str,
        *,
        content: str,
        metadata: dict[str, Any],
        generated_by_ai: bool,
    ) -> dict[str, Any]:
        self.get_cover_letter(user_id, letter_id)
        self._execute(
            """
            UPDATE cover_letters
            SET content = ?, metadata_json = ?, generated_by_ai = ?, updated_at = ?
            WHERE id = ? AND user_id = ?
            """,
            (
                content,
                json.dumps(metadata, ensure_ascii=False),
                1 if generated_by_ai else 0,
                _utc_now(),
                letter_id,
                user_id,
            ),
        )
        return self.get_cover_letter(user_id, letter_id)

    def delete_cover_letter(self, user_id: str, letter_id: str) -> None:
        cur = self._execute("DELETE FROM cover_letters WHERE id = ? AND user_id = ?", (letter_id, user_id))
        if not cur.rowcount:
            raise DocumentNotFoundError("Cover letter", letter_id)

    # accounts and quota counters

    def get_plan(self, user_id: str) -> AccountPlan:
        row = self._fetchone("SELECT plan FROM accounts WHERE user_id = ?", (user_id,))
        return "PREMIUM" if row is not None and row["plan"] == "PREMIUM" else "FREE"

    def set_plan(self, user_id: str, plan: AccountPlan) -> None:
        self._execute(
            """
            INSERT INTO accounts (user_id, plan) VALUES (?, ?)
            ON CONFLICT(user_id) DO UPDATE SET plan = excluded.plan
            """,
            (user_id, plan),
        )

    def is_premium(self, user_id: str) -> bool:
        return self.get_plan(user_id) == "PREMIUM"

    def get_usage_counter(self, user_id: str, feature: str) -> dict[str, Any] | None:
        row = self._fetchone(
            "SELECT count, last_reset, last_used FROM usage_counters WHERE user_id = ? AND feature = ?",
            (user_id, feature),
        )
        if row is None:
            return None
        return {
            "count": int(row["count"]),
            "last_reset": datetime.fromisoformat(row["last_reset"]),
            "last_used": datetime.fromisoformat(row["last_used"]) if row["last_used"] else None,
        }

    def save_usage_counter(
        self,
        user_id: str,
        feature: str,
        *,
        count: int,
        last_reset: datetime,
        last_used: datetime | None,
    ) -> None:
        self._execute(
            """
            INSERT INTO usage_counters (user_id, feature, count, last_reset, last_used)
            VALUES (?, ?, ?, ?, ?)
            ON CONFLICT(user_id, feature) DO UPDATE SET
                count = excluded.count,
                last_reset = excluded.last_reset,
                last_used = excluded.last_used
            """,
            (
                user_id,
                feature,
                count,
                last_reset.isoformat(),
                last_used.isoformat() if last_used else None,
            ),
        )
