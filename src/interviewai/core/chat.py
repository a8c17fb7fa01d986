from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.orm import Session

from interviewai.config import Settings, get_settings
from interviewai.core.errors import NotFoundError
from interviewai.core.formatting import generate_ai_title, truncate_text
from interviewai.db.models import Chat, ChatMessage
from interviewai.db.repositories import Repository
from interviewai.llm.providers import CompletionClient

logger = logging.getLogger(__name__)


class ChatService:
    def __init__(
        self,
        session: Session,
        *,
        settings: Settings | None = None,
        client: CompletionClient | None = None,
    ):
        self.session = session
        self.settings = settings or get_settings()
        self.repo = Repository(session)
        self.client = client or CompletionClient(self.settings)

    def create_chat(self, owner_id: str, title: str | None = None) -> Chat:
        return self.repo.create_chat(owner_id=owner_id, title=self._clean_title(title))

    def list_chats(self, owner_id: str) -> list[Chat]:
        return self.repo.list_chats(owner_id)

    def get_chat(self, chat_id: int, owner_id: str) -> Chat:
        chat = self.repo.get_chat(chat_id, owner_id)
        if chat is None:
            raise NotFoundError("Chat not found")
        return chat

    def rename_chat(self, chat_id: int, owner_id: str, title: str) -> Chat:
        cleaned = title.strip()
        if not cleaned:
            raise ValueError("Title is required")
        if len(cleaned) > self.settings.max_chat_title_length:
            raise ValueError(f"Title must be at most {self.settings.max_chat_title_length} characters")
        return self.repo.rename_chat(self.get_chat(chat_id, owner_id), cleaned)

    def delete_chat(self, chat_id: int, owner_id: str) -> None:
        self.repo.delete_chat(self.get_chat(chat_id, owner_id))

    def list_messages(self, chat_id: int, owner_id: str) -> list[ChatMessage]:
        chat = self.get_chat(chat_id, owner_id)
        return self.repo.list_chat_messages(chat.id)

    def send_message(self, chat_id: int, owner_id: str, message: str) -> ChatMessage:
        chat = self.get_chat(chat_id, owner_id)
        first_message = chat.message_count == 0

        self.repo.add_chat_message(chat, role="user", content=message)
        if first_message:
            title = generate_ai_title(message, default=self.settings.default_chat_title)
            self.repo.rename_chat(chat, self._clean_title(title))

        prompt = truncate_text(message, self.settings.ai_max_message_length)
        reply = self.client.complete(prompt)
        logger.info("Chat reply chat=%s chars=%s", chat.id, len(reply))
        return self.repo.add_chat_message(
            chat,
            role="assistant",
            content=reply,
            metadata={"model": self.client.model, "tokens": len(reply)},
        )

    def _clean_title(self, title: str | None) -> str:
        cleaned = (title or "").strip() or self.settings.default_chat_title
        return cleaned[: self.settings.max_chat_title_length]


def serialize_chat(chat: Chat) -> dict[str, Any]:
    return {
        "id": chat.id,
        "owner_id": chat.owner_id,
        "title": chat.title,
        "message_count": chat.message_count,
        "created_at": chat.created_at,
        "updated_at": chat.updated_at,
    }


def serialize_message(message: ChatMessage) -> dict[str, Any]:
    return {
        "id": message.id,
        "chat_id": message.chat_id,
        "role": message.role,
        "content": message.content,
        "timestamp": message.created_at,
        "metadata": dict(message.metadata_json or {}),
    }
