from typing import Any, Dict, Optional

from kine_amigo.schemas.message import ChatMessage
from kine_amigo.schemas.notification import PushNotification
from kine_amigo.services.notification_dispatcher import NotificationDispatcher
from kine_amigo.services.user_service import UserService
import logging

logger = logging.getLogger(__name__)


NEW_MESSAGE_TITLE = "💬 Nuevo mensaje"
DEFAULT_SENDER_NAME = "Alguien"
ELLIPSIS = "..."


def build_preview(text: str, limit: int = 60) -> str:
    """First `limit` characters of a message, with an ellipsis when cut."""
    if len(text) > limit:
        return f"{text[:limit]}{ELLIPSIS}"
    return text


class MessageNotificationService:
    """Notifies the receiver of a new chat message."""

    def __init__(
        self,
        users: UserService,
        dispatcher: NotificationDispatcher,
        preview_length: int = 60
    ):
        self.users = users
        self.dispatcher = dispatcher
        self.preview_length = preview_length

    def on_message_created(
        self,
        chat_id: str,
        message_id: str,
        data: Optional[Dict[str, Any]]
    ) -> None:
        """Never raises: a failed notification must not disturb the chat."""
        try:
            message = ChatMessage.model_validate(data or {})
            if not message.receiver_id:
                logger.warning(f"⚠️ Message {message_id} in chat {chat_id} has no receiver")
                return

            tokens = self.users.get_device_tokens(message.receiver_id)
            if not tokens:
                logger.info(f"Receiver {message.receiver_id} has no device tokens, skipping")
                return

            preview = build_preview(message.text, self.preview_length)
            sender = message.sender_name or DEFAULT_SENDER_NAME

            self.dispatcher.notify(
                tokens,
                PushNotification(title=NEW_MESSAGE_TITLE, body=f"{sender}: {preview}"),
                {
                    "type": "message",
                    "chatWith": message.sender_id or "",
                    "chatId": chat_id,
                }
            )
        except Exception as e:
            logger.error(f"❌ Error sending message notification for {message_id}: {e}")
