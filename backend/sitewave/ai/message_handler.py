import math

from pydantic import BaseModel

ROLES = ("system", "user", "assistant")


class ChatMessage(BaseModel):
    role: str
    content: str


class MessageHandler:
    """Helpers for lists of chat messages."""

    @staticmethod
    def extract_text(message: ChatMessage) -> str:
        return message.content.strip()

    @staticmethod
    def validate_message(message: ChatMessage) -> bool:
        return message.role in ROLES and bool(message.content.strip())

    @staticmethod
    def filter_by_role(messages: list[ChatMessage], role: str) -> list[ChatMessage]:
        return [m for m in messages if m.role == role]

    @staticmethod
    def get_context(messages: list[ChatMessage], max_messages: int = 10) -> list[ChatMessage]:
        if max_messages <= 0:
            return []
        return messages[-max_messages:]

    def estimate_tokens(self, messages: list[ChatMessage]) -> int:
        # roughly four characters per token
        text = " ".join(self.extract_text(m) for m in messages)
        return math.ceil(len(text) / 4)

    def trim_to_token_limit(
        self, messages: list[ChatMessage], max_tokens: int = 3000
    ) -> list[ChatMessage]:
        """
        Keep every system message, then as many of the newest other messages
        as fit in ``max_tokens``. Original order is preserved.
        """
        system = [m for m in messages if m.role == "system"]
        used = self.estimate_tokens(system)
        kept: list[ChatMessage] = []
        for message in reversed([m for m in messages if m.role != "system"]):
            cost = self.estimate_tokens([message])
            if used + cost > max_tokens:
                break
            kept.append(message)
            used += cost
        kept_ids = {id(m) for m in kept} | {id(m) for m in system}
        return [m for m in messages if id(m) in kept_ids]

    @staticmethod
    def count_by_role(messages: list[ChatMessage]) -> dict[str, int]:
        counts: dict[str, int] = {}
        for message in messages:
            counts[message.role] = counts.get(message.role, 0) + 1
        return counts

    def to_openai(self, messages: list[ChatMessage]) -> list[dict[str, str]]:
        return [
            {"role": m.role, "content": m.content} for m in messages if self.validate_message(m)
        ]
