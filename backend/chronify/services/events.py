"""Event service: listing, deletion and batch reconciliation of timeline events."""

import sqlite3
from datetime import datetime, timezone
from uuid import uuid4

import aiosqlite

from chronify.database.db import connect
from chronify.logging import get_logger
from chronify.models import (
    Event,
    EventChange,
    EventCreate,
    EventUpsert,
    ReconcileResult,
    UpdateOutcome,
)
from chronify.services.errors import BatchUpdateError, StorageError
from chronify.services.reconciler import partition_batch
from chronify.services.timelines import TimelineService

logger = get_logger('services.events')

EVENT_NOT_IN_TIMELINE = "Event not found in timeline"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _row_to_event(row: dict) -> Event:
    return Event(
        id=row["id"],
        timeline_id=row["timeline_id"],
        title=row["title"],
        card_title=row["card_title"],
        card_subtitle=row.get("card_subtitle"),
        card_detailed_text=row.get("card_detailed_text"),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class EventService:
    """Timeline event storage with create/update batch reconciliation."""

    def __init__(self, db_path: str, timeline_service: TimelineService):
        self.db_path = db_path
        self.timeline_service = timeline_service

    async def _get_db(self) -> aiosqlite.Connection:
        return await connect(self.db_path)

    async def require_timeline(self, user_id: str, timeline_id: str) -> None:
        timeline = await self.timeline_service.get_timeline(user_id, timeline_id)
        if not timeline:
            raise LookupError("Timeline not found")

    async def _fetch_events(self, timeline_id: str) -> list[Event]:
        db = await self._get_db()
        try:
            cursor = await db.execute(
                """SELECT * FROM events
                   WHERE timeline_id = ?
                   ORDER BY created_at ASC, rowid ASC""",
                (timeline_id,),
            )
            rows = await cursor.fetchall()
            return [_row_to_event(dict(r)) for r in rows]
        except sqlite3.Error as e:
            logger.error(f"Failed to retrieve events for timeline {timeline_id[:8]}: {e}")
            raise StorageError("Failed to retrieve events") from e
        finally:
            await db.close()

    async def list_events(self, user_id: str, timeline_id: str) -> list[Event]:
        await self.require_timeline(user_id, timeline_id)
        return await self._fetch_events(timeline_id)

    async def delete_event(self, user_id: str, timeline_id: str, event_id: str) -> bool:
        await self.require_timeline(user_id, timeline_id)
        db = await self._get_db()
        try:
            cursor = await db.execute(
                "DELETE FROM events WHERE id = ? AND timeline_id = ?",
                (event_id, timeline_id),
            )
            await db.commit()
            deleted = cursor.rowcount > 0
        except sqlite3.Error as e:
            logger.error(f"Failed to delete event {event_id[:8]}: {e}")
            raise StorageError("Failed to delete event") from e
        finally:
            await db.close()

        if deleted:
            logger.info(f"Deleted event {event_id[:8]} from timeline {timeline_id[:8]}")
        return deleted

    # ── Reconciliation ──

    async def _bulk_create(self, db: aiosqlite.Connection, creates: list[EventCreate]) -> None:
        now = _now()
        await db.executemany(
            """INSERT INTO events
               (id, timeline_id, title, card_title, card_subtitle, card_detailed_text, created_at, updated_at)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?)""",
            [
                (
                    str(uuid4()),
                    item.timeline_id,
                    item.title,
                    item.card_title,
                    item.card_subtitle,
                    item.card_detailed_text,
                    now,
                    now,
                )
                for item in creates
            ],
        )

    async def _bulk_update(
        self,
        db: aiosqlite.Connection,
        timeline_id: str,
        updates: list[EventChange],
    ) -> list[UpdateOutcome]:
        now = _now()
        outcomes: list[UpdateOutcome] = []
        for item in updates:
            cursor = await db.execute(
                """UPDATE events
                   SET title = ?, card_title = ?, card_subtitle = ?, card_detailed_text = ?, updated_at = ?
                   WHERE id = ? AND timeline_id = ?""",
                (
                    item.title,
                    item.card_title,
                    item.card_subtitle,
                    item.card_detailed_text,
                    now,
                    item.id,
                    timeline_id,
                ),
            )
            if cursor.rowcount <= 0:
                outcomes.append(UpdateOutcome(
                    index=item.index, id=item.id, success=False, error=EVENT_NOT_IN_TIMELINE,
                ))
            else:
                outcomes.append(UpdateOutcome(index=item.index, id=item.id, success=True))
        return outcomes

    async def _apply(
        self,
        timeline_id: str,
        creates: list[EventCreate],
        updates: list[EventChange],
    ) -> None:
        """
        Run the create and update halves of a batch in one transaction.

        The bulk insert goes first; if it fails no update is issued. If any
        update fails, the inserts are rolled back along with it.

        :raises StorageError: If a statement or the commit fails
        :raises BatchUpdateError: If an update matched no event in the timeline
        """
        db = await self._get_db()
        try:
            if creates:
                try:
                    await self._bulk_create(db, creates)
                except sqlite3.Error as e:
                    await db.rollback()
                    logger.error(
                        f"Failed to create {len(creates)} events in timeline {timeline_id[:8]}: {e}"
                    )
                    raise StorageError("Failed to create events") from e

            if updates:
                try:
                    outcomes = await self._bulk_update(db, timeline_id, updates)
                except sqlite3.Error as e:
                    await db.rollback()
                    logger.error(
                        f"Failed to update {len(updates)} events in timeline {timeline_id[:8]}: {e}"
                    )
                    raise StorageError("Failed to update events") from e
                if not all(outcome.success for outcome in outcomes):
                    await db.rollback()
                    error = BatchUpdateError(outcomes)
                    logger.warning(f"Rejected batch for timeline {timeline_id[:8]}: {error}")
                    raise error

            try:
                await db.commit()
            except sqlite3.Error as e:
                logger.error(f"Failed to commit event batch for timeline {timeline_id[:8]}: {e}")
                raise StorageError("Failed to save events") from e
        finally:
            await db.close()

    async def reconcile_events(
        self,
        user_id: str,
        timeline_id: str,
        batch: list[EventUpsert],
    ) -> ReconcileResult:
        """
        Upsert a mixed batch of new and existing events.

        :param user_id: Caller; must own the timeline
        :type user_id: str
        :param timeline_id: Target timeline from the request path
        :type timeline_id: str
        :param batch: Items in submission order
        :type batch: list[EventUpsert]
        :return: The timeline's complete event set after the mutation
        :rtype: ReconcileResult
        :raises ValueError: If the batch is empty
        :raises LookupError: If the timeline does not exist for this user
        :raises StorageError: If the store fails
        :raises BatchUpdateError: If an update matched no event; its ``events`` hold the unchanged set
        """
        partitioned = partition_batch(timeline_id, batch)
        await self.require_timeline(user_id, timeline_id)

        try:
            await self._apply(timeline_id, partitioned.creates, partitioned.updates)
        except BatchUpdateError as error:
            error.events = await self._fetch_events(timeline_id)
            raise

        logger.info(
            f"Reconciled timeline {timeline_id[:8]}: "
            f"{len(partitioned.creates)} created, {len(partitioned.updates)} updated"
        )
        return ReconcileResult(
            events=await self._fetch_events(timeline_id),
            created=len(partitioned.creates),
            updated=len(partitioned.updates),
        )

    async def create_events(
        self,
        user_id: str,
        timeline_id: str,
        creates: list[EventCreate],
    ) -> ReconcileResult:
        """Insert new events only, then return the timeline's complete event set."""
        await self.require_timeline(user_id, timeline_id)
        stamped = [item.model_copy(update={"timeline_id": timeline_id}) for item in creates]
        if stamped:
            await self._apply(timeline_id, stamped, [])
        return ReconcileResult(
            events=await self._fetch_events(timeline_id),
            created=len(stamped),
        )
