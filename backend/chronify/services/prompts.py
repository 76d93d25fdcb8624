"""Prompt builders for the event drafter."""

import json
from typing import Any


EVENT_DRAFTER_ASSISTANT_NAME = "Chronify Event Drafter"


def build_event_drafter_assistant_prompt() -> str:
    return (
        "You draft timeline events for the user's timelines. "
        "Always answer with a bare JSON array and nothing else: no prose, no markdown fences. "
        "Each element is an object with the keys title, cardTitle, cardSubtitle and cardDetailedText. "
        "title is the date or time marker of the event ('January 2022', 'Week 1', 'Month 2-3'). "
        "Order the events chronologically."
    )


def build_event_draft_prompt(user_prompt: str, schema: dict[str, Any]) -> str:
    return f"""Draft timeline events for the request below.

Respond with JSON that validates against this schema:
{json.dumps(schema, indent=2)}

Request:
{user_prompt.strip()}
"""
