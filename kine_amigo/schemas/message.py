from typing import Optional

from pydantic import BaseModel, Field


class ChatMessage(BaseModel):
    """Message document under `chats/{chatId}/messages`."""

    sender_id: Optional[str] = Field(default=None, alias="senderId")
    sender_name: Optional[str] = Field(default=None, alias="senderName")
    receiver_id: Optional[str] = Field(default=None, alias="receiverId")
    content: Optional[str] = None
    texto: Optional[str] = None  # Legacy alias of content

    class Config:
        populate_by_name = True
        extra = "ignore"

    @property
    def text(self) -> str:
        return str(self.content or self.texto or "")
