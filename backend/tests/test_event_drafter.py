"""
Tests for AI-assisted event drafting.

Tests cover:
- Reply parsing (fences, bad JSON, wrong shape)
- Drafts stored through the create path only
- Nothing stored when generation fails
- Assistant provisioning and thread cleanup
"""

import json
from uuid import uuid4

import pytest

from chronify.models import EventUpsert
from chronify.services.errors import GenerationError
from chronify.services.event_drafter import EventDrafterService, parse_drafts
from tests.fakes import FakeBackboard

DRAFTS = [
    {
        "title": "July 1969",
        "cardTitle": "Apollo 11",
        "cardSubtitle": "First crewed Moon landing",
        "cardDetailedText": "Armstrong and Aldrin walk on the Moon.",
    },
    {"title": "December 1972", "cardTitle": "Apollo 17"},
]


@pytest.fixture
def drafter(event_service):
    return EventDrafterService(backboard=FakeBackboard(reply=json.dumps(DRAFTS)), event_service=event_service)


class TestParseDrafts:
    """Tests for parse_drafts."""

    def test_plain_array(self):
        drafts = parse_drafts(json.dumps(DRAFTS))

        assert [d.card_title for d in drafts] == ["Apollo 11", "Apollo 17"]
        assert drafts[0].card_detailed_text == "Armstrong and Aldrin walk on the Moon."
        assert drafts[1].card_subtitle is None

    def test_fenced_array(self):
        drafts = parse_drafts(f"```json\n{json.dumps(DRAFTS)}\n```")
        assert len(drafts) == 2

    def test_empty_array(self):
        assert parse_drafts("[]") == []

    def test_invalid_json(self):
        with pytest.raises(GenerationError, match="invalid JSON"):
            parse_drafts("Sure! Here are some events:")

    def test_not_an_array(self):
        with pytest.raises(GenerationError, match="not an array"):
            parse_drafts(json.dumps(DRAFTS[0]))

    def test_missing_required_field(self):
        with pytest.raises(GenerationError, match="malformed"):
            parse_drafts(json.dumps([{"title": "1969"}]))

    def test_blank_card_title(self):
        with pytest.raises(GenerationError, match="malformed"):
            parse_drafts(json.dumps([{"title": "1969", "cardTitle": "  "}]))


class TestDraftEvents:
    """Tests for EventDrafterService.draft_events."""

    @pytest.mark.asyncio
    async def test_drafts_become_new_events(self, drafter, owner, timeline):
        result = await drafter.draft_events(owner.id, timeline.id, "Key Apollo missions")

        assert result.created == 2
        assert [e.card_title for e in result.events] == ["Apollo 11", "Apollo 17"]
        assert all(e.timeline_id == timeline.id for e in result.events)
        assert "Key Apollo missions" in drafter.backboard.prompts[0]
        assert drafter.backboard.deleted_threads == ["thread_1"]

    @pytest.mark.asyncio
    async def test_drafts_never_update_existing_events(self, drafter, event_service, owner, timeline, monkeypatch):
        await event_service.reconcile_events(owner.id, timeline.id, [
            EventUpsert(title="1961", card_title="Kennedy speech"),
        ])

        async def forbidden_update(db, timeline_id, updates):
            raise AssertionError("update path used")

        monkeypatch.setattr(event_service, "_bulk_update", forbidden_update)

        result = await drafter.draft_events(owner.id, timeline.id, "More missions")

        assert [e.card_title for e in result.events] == ["Kennedy speech", "Apollo 11", "Apollo 17"]

    @pytest.mark.asyncio
    async def test_blank_prompt(self, drafter, owner, timeline):
        with pytest.raises(ValueError, match="Prompt is required"):
            await drafter.draft_events(owner.id, timeline.id, "   ")
        assert drafter.backboard.prompts == []

    @pytest.mark.asyncio
    async def test_unknown_timeline(self, drafter, owner):
        with pytest.raises(LookupError):
            await drafter.draft_events(owner.id, str(uuid4()), "Anything")
        assert drafter.backboard.prompts == []

    @pytest.mark.asyncio
    async def test_unusable_reply_stores_nothing(self, drafter, event_service, owner, timeline):
        drafter.backboard.reply = "I could not find any events."

        with pytest.raises(GenerationError):
            await drafter.draft_events(owner.id, timeline.id, "Apollo")

        assert await event_service.list_events(owner.id, timeline.id) == []
        assert drafter.backboard.deleted_threads == ["thread_1"]

    @pytest.mark.asyncio
    async def test_chat_failure(self, drafter, event_service, owner, timeline):
        drafter.backboard.chat_error = "upstream timeout"

        with pytest.raises(GenerationError, match="upstream timeout"):
            await drafter.draft_events(owner.id, timeline.id, "Apollo")

        assert await event_service.list_events(owner.id, timeline.id) == []

    @pytest.mark.asyncio
    async def test_unavailable_collaborator(self, drafter, owner, timeline):
        drafter.backboard.available = False

        with pytest.raises(GenerationError, match="not available"):
            await drafter.draft_events(owner.id, timeline.id, "Apollo")
        assert drafter.backboard.assistants_created == 0

    @pytest.mark.asyncio
    async def test_empty_reply_leaves_timeline_unchanged(self, drafter, event_service, owner, timeline):
        await event_service.reconcile_events(owner.id, timeline.id, [
            EventUpsert(title="1961", card_title="Kennedy speech"),
        ])
        drafter.backboard.reply = "[]"

        result = await drafter.draft_events(owner.id, timeline.id, "Nothing new")

        assert result.created == 0
        assert [e.card_title for e in result.events] == ["Kennedy speech"]

    @pytest.mark.asyncio
    async def test_assistant_created_once(self, drafter, owner, timeline):
        await drafter.draft_events(owner.id, timeline.id, "First")
        await drafter.draft_events(owner.id, timeline.id, "Second")

        assert drafter.backboard.assistants_created == 1
        assert drafter.backboard.deleted_threads == ["thread_1", "thread_2"]
