"""
Timeline management service.
"""

import sqlite3
from datetime import datetime, timezone
from uuid import uuid4

import aiosqlite

from chronify.database.db import connect, violated_constraint
from chronify.logging import get_logger
from chronify.models import Timeline, TimelineCreate, TimelineUpdate
from chronify.services.errors import ConflictError, StorageError

logger = get_logger('services.timelines')

DUPLICATE_TITLE_MESSAGE = "Timeline with this title already exists"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _require_title(title: str) -> str:
    title = (title or "").strip()
    if not title:
        raise ValueError("Title is required")
    return title


def _row_to_timeline(row: dict) -> Timeline:
    return Timeline(
        id=row["id"],
        user_id=row["user_id"],
        title=row["title"],
        description=row.get("description"),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def _raise_for_integrity(error: sqlite3.IntegrityError, action: str) -> None:
    if violated_constraint(error) == "timelines_title_key":
        raise ConflictError(DUPLICATE_TITLE_MESSAGE, "timelines_title_key") from error
    raise StorageError(f"Failed to {action} timeline") from error


class TimelineService:
    """Service for timeline CRUD and search, always scoped to the owning user."""

    def __init__(self, db_path: str):
        self.db_path = db_path

    async def _get_db(self) -> aiosqlite.Connection:
        return await connect(self.db_path)

    async def list_timelines(self, user_id: str) -> list[Timeline]:
        db = await self._get_db()
        try:
            cursor = await db.execute(
                "SELECT * FROM timelines WHERE user_id = ? ORDER BY created_at DESC, rowid DESC",
                (user_id,),
            )
            rows = await cursor.fetchall()
            return [_row_to_timeline(dict(r)) for r in rows]
        finally:
            await db.close()

    async def get_timeline(self, user_id: str, timeline_id: str) -> Timeline | None:
        db = await self._get_db()
        try:
            cursor = await db.execute(
                "SELECT * FROM timelines WHERE id = ? AND user_id = ?",
                (timeline_id, user_id),
            )
            row = await cursor.fetchone()
            return _row_to_timeline(dict(row)) if row else None
        finally:
            await db.close()

    async def search_timelines(self, user_id: str, title: str) -> list[Timeline]:
        """
        Case-insensitive substring search over the caller's timeline titles.

        :param user_id: Owner of the timelines
        :type user_id: str
        :param title: Fragment to look for; empty matches everything
        :type title: str
        :return: Matching timelines, newest first
        :rtype: list[Timeline]
        """
        pattern = f"%{_escape_like(title or '')}%"
        db = await self._get_db()
        try:
            cursor = await db.execute(
                """SELECT * FROM timelines
                   WHERE user_id = ? AND title LIKE ? ESCAPE '\\'
                   ORDER BY created_at DESC, rowid DESC""",
                (user_id, pattern),
            )
            rows = await cursor.fetchall()
            return [_row_to_timeline(dict(r)) for r in rows]
        finally:
            await db.close()

    async def create_timeline(self, user_id: str, data: TimelineCreate) -> Timeline:
        now = _now()
        timeline = Timeline(
            id=str(uuid4()),
            user_id=user_id,
            title=_require_title(data.title),
            description=data.description,
            created_at=now,
            updated_at=now,
        )

        db = await self._get_db()
        try:
            await db.execute(
                """INSERT INTO timelines (id, user_id, title, description, created_at, updated_at)
                   VALUES (?, ?, ?, ?, ?, ?)""",
                (timeline.id, user_id, timeline.title, timeline.description, now, now),
            )
            await db.commit()
        except sqlite3.IntegrityError as e:
            logger.error(f"Failed to create timeline '{timeline.title}' for user {user_id[:8]}: {e}")
            _raise_for_integrity(e, "create")
        except sqlite3.Error as e:
            logger.error(f"Failed to create timeline '{timeline.title}' for user {user_id[:8]}: {e}")
            raise StorageError("Failed to create timeline") from e
        finally:
            await db.close()

        logger.info(f"Created timeline: {timeline.title} ({timeline.id[:8]})")
        return timeline

    async def update_timeline(
        self, user_id: str, timeline_id: str, data: TimelineUpdate
    ) -> Timeline | None:
        title = _require_title(data.title)

        db = await self._get_db()
        try:
            cursor = await db.execute(
                """UPDATE timelines SET title = ?, description = ?, updated_at = ?
                   WHERE id = ? AND user_id = ?""",
                (title, data.description, _now(), timeline_id, user_id),
            )
            await db.commit()
            if cursor.rowcount <= 0:
                return None
        except sqlite3.IntegrityError as e:
            logger.error(f"Failed to update timeline {timeline_id[:8]}: {e}")
            _raise_for_integrity(e, "update")
        except sqlite3.Error as e:
            logger.error(f"Failed to update timeline {timeline_id[:8]}: {e}")
            raise StorageError("Failed to update timeline") from e
        finally:
            await db.close()

        return await self.get_timeline(user_id, timeline_id)

    async def delete_timeline(self, user_id: str, timeline_id: str) -> bool:
        db = await self._get_db()
        try:
            cursor = await db.execute(
                "DELETE FROM timelines WHERE id = ? AND user_id = ?",
                (timeline_id, user_id),
            )
            await db.commit()
            deleted = cursor.rowcount > 0
        except sqlite3.Error as e:
            logger.error(f"Failed to delete timeline {timeline_id[:8]}: {e}")
            raise StorageError("Failed to delete timeline") from e
        finally:
            await db.close()

        if deleted:
            logger.info(f"Deleted timeline {timeline_id[:8]} and its events")
        return deleted
