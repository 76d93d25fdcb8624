"""AI-assisted event drafting: prompt in, new timeline events out."""

import asyncio
import json

from pydantic import TypeAdapter, ValidationError

from chronify.config import settings
from chronify.logging import get_logger
from chronify.models import EventCreate, EventDraft, ReconcileResult
from chronify.services.backboard import BackboardService
from chronify.services.errors import GenerationError
from chronify.services.events import EventService
from chronify.services.prompts import (
    EVENT_DRAFTER_ASSISTANT_NAME,
    build_event_draft_prompt,
    build_event_drafter_assistant_prompt,
)

logger = get_logger('services.event_drafter')

_DRAFTS = TypeAdapter(list[EventDraft])


def _strip_fences(raw_response: str) -> str:
    text = raw_response.strip()
    if text.startswith("```json"):
        text = text[7:]
    elif text.startswith("```"):
        text = text[3:]
    if text.endswith("```"):
        text = text[:-3]
    return text.strip()


def parse_drafts(raw_response: str) -> list[EventDraft]:
    """
    Parse the collaborator's reply into event drafts.

    :param raw_response: Reply text, optionally wrapped in a markdown fence
    :type raw_response: str
    :return: Drafts in reply order
    :rtype: list[EventDraft]
    :raises GenerationError: If the reply is not a JSON array of valid drafts
    """
    try:
        data = json.loads(_strip_fences(raw_response))
    except json.JSONDecodeError as e:
        raise GenerationError(f"LLM returned invalid JSON: {e}") from e
    if not isinstance(data, list):
        raise GenerationError("LLM returned JSON that is not an array")
    try:
        return _DRAFTS.validate_python(data)
    except ValidationError as e:
        raise GenerationError(f"LLM returned malformed events: {e.error_count()} errors") from e


class EventDrafterService:
    """Turns a free-text prompt into new events on a timeline."""

    def __init__(self, backboard: BackboardService, event_service: EventService):
        self.backboard = backboard
        self.event_service = event_service
        self._assistant_id: str | None = settings.BACKBOARD_ASSISTANT_ID or None
        self._assistant_lock = asyncio.Lock()

    async def _get_assistant_id(self) -> str:
        if self._assistant_id:
            return self._assistant_id
        async with self._assistant_lock:
            if not self._assistant_id:
                result = await self.backboard.create_assistant(
                    EVENT_DRAFTER_ASSISTANT_NAME,
                    build_event_drafter_assistant_prompt(),
                )
                if not result.success or not result.id:
                    raise GenerationError("Failed to provision drafting assistant")
                self._assistant_id = result.id
        return self._assistant_id

    async def _generate(self, prompt: str) -> list[EventDraft]:
        if not self.backboard.is_available:
            raise GenerationError("Backboard service is not available")

        assistant_id = await self._get_assistant_id()
        thread_result = await self.backboard.create_thread(assistant_id)
        if not thread_result.success or not thread_result.id:
            raise GenerationError("Failed to create drafting thread")

        try:
            chat_result = await self.backboard.chat(
                thread_id=thread_result.id,
                prompt=build_event_draft_prompt(prompt, _DRAFTS.json_schema()),
            )
        finally:
            await self.backboard.delete_thread(thread_result.id)

        if not chat_result.success or not chat_result.response:
            raise GenerationError(chat_result.error or "AI drafting returned no response")
        return parse_drafts(chat_result.response)

    async def draft_events(self, user_id: str, timeline_id: str, prompt: str) -> ReconcileResult:
        """
        Generate events from ``prompt`` and append them to the timeline.

        Drafts always go through the create path. Nothing is stored unless
        generation and parsing both succeed.

        :raises ValueError: If the prompt is blank
        :raises LookupError: If the timeline does not exist for this user
        :raises GenerationError: If the collaborator fails or its reply is unusable
        """
        if not (prompt or "").strip():
            raise ValueError("Prompt is required")
        await self.event_service.require_timeline(user_id, timeline_id)

        try:
            drafts = await self._generate(prompt)
        except GenerationError as e:
            logger.error(f"Drafting failed for timeline {timeline_id[:8]}: {e}")
            raise
        logger.info(f"Drafted {len(drafts)} events for timeline {timeline_id[:8]}")

        creates = [
            EventCreate(
                timeline_id=timeline_id,
                title=draft.title,
                card_title=draft.card_title,
                card_subtitle=draft.card_subtitle,
                card_detailed_text=draft.card_detailed_text,
            )
            for draft in drafts
        ]
        return await self.event_service.create_events(user_id, timeline_id, creates)
