"""
Classification of event upsert batches into creates and updates.
"""

from dataclasses import dataclass, field
from typing import Optional
from uuid import UUID

from chronify.models import EventChange, EventCreate, EventUpsert


@dataclass
class PartitionedBatch:
    """The two disjoint halves of an upsert batch, each in submission order."""

    creates: list[EventCreate] = field(default_factory=list)
    updates: list[EventChange] = field(default_factory=list)


def parse_event_id(raw: Optional[str]) -> str | None:
    """
    Return the canonical form of a UUID identifier, or None if absent or malformed.

    :param raw: Identifier as submitted by the client
    :type raw: Optional[str]
    :return: Lowercase hyphenated UUID text, or None
    :rtype: str | None
    """
    if raw is None:
        return None
    try:
        return str(UUID(raw.strip()))
    except (ValueError, AttributeError):
        return None


def partition_batch(timeline_id: str, batch: list[EventUpsert]) -> PartitionedBatch:
    """
    Split an upsert batch into events to create and events to update.

    An item is an update exactly when its id parses as a UUID; anything else
    (missing, null, malformed) becomes a create. Creates are stamped with
    ``timeline_id`` whatever the payload says.

    :param timeline_id: Target timeline, taken from the request path
    :type timeline_id: str
    :param batch: Items in submission order
    :type batch: list[EventUpsert]
    :return: Creates and updates, relative order preserved
    :rtype: PartitionedBatch
    :raises ValueError: If the batch is empty
    """
    if not batch:
        raise ValueError("No events provided")

    partitioned = PartitionedBatch()
    for index, item in enumerate(batch):
        event_id = parse_event_id(item.id)
        if event_id is None:
            partitioned.creates.append(EventCreate(
                timeline_id=timeline_id,
                title=item.title,
                card_title=item.card_title,
                card_subtitle=item.card_subtitle,
                card_detailed_text=item.card_detailed_text,
            ))
        else:
            partitioned.updates.append(EventChange(
                index=index,
                id=event_id,
                title=item.title,
                card_title=item.card_title,
                card_subtitle=item.card_subtitle,
                card_detailed_text=item.card_detailed_text,
            ))
    return partitioned
