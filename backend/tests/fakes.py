"""In-memory stand-ins for the generative collaborator."""

from chronify.models import AssistantCreated, ChatResponse, ThreadCreated, ThreadDeleted


class FakeBackboard:
    """Replays a canned chat reply and records what it was asked."""

    def __init__(self, reply: str | None = None, available: bool = True, chat_error: str | None = None):
        self.reply = reply
        self.available = available
        self.chat_error = chat_error
        self.assistants_created = 0
        self.prompts: list[str] = []
        self.deleted_threads: list[str] = []

    @property
    def is_available(self) -> bool:
        return self.available

    async def create_assistant(self, name: str, system_prompt: str) -> AssistantCreated:
        self.assistants_created += 1
        return AssistantCreated(success=True, id="asst_drafter")

    async def create_thread(self, assistant_id: str) -> ThreadCreated:
        return ThreadCreated(success=True, id=f"thread_{len(self.prompts) + 1}")

    async def chat(self, thread_id: str, prompt: str) -> ChatResponse:
        self.prompts.append(prompt)
        if self.chat_error:
            return ChatResponse(success=False, error=self.chat_error)
        return ChatResponse(success=True, response=self.reply)

    async def delete_thread(self, thread_id: str) -> ThreadDeleted:
        self.deleted_threads.append(thread_id)
        return ThreadDeleted(success=True)
