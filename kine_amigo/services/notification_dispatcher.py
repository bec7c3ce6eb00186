from typing import Any, Dict, Iterable, List, Optional

import firebase_admin
from firebase_admin import messaging

from kine_amigo.schemas.notification import PushNotification
import logging

logger = logging.getLogger(__name__)

# FCM rejects multicast messages addressed to more devices than this
MAX_MULTICAST_TOKENS = 500


class NotificationDispatcher:
    """Best-effort multicast delivery through Firebase Cloud Messaging."""

    def __init__(self, app: Optional[firebase_admin.App] = None):
        self.app = app

    @staticmethod
    def _valid_tokens(tokens: Optional[Iterable[Optional[str]]]) -> List[str]:
        """Drop empty or non-string tokens and duplicates, keeping first-seen order."""
        valid = []
        seen = set()
        for token in tokens or []:
            if isinstance(token, str) and token and token not in seen:
                seen.add(token)
                valid.append(token)
        return valid

    @staticmethod
    def _stringify(data: Optional[Dict[str, Any]]) -> Dict[str, str]:
        """FCM only accepts string values in the data payload."""
        return {
            str(key): "" if value is None else str(value)
            for key, value in (data or {}).items()
        }

    def notify(
        self,
        tokens: Optional[Iterable[Optional[str]]],
        notification: PushNotification,
        data: Optional[Dict[str, Any]] = None
    ) -> None:
        """
        Send one notification to every device token.

        Delivery failures are logged and swallowed: a failed push must never
        fail the write that triggered it.

        Args:
            tokens: Device tokens; empty entries are ignored
            notification: Title and body shown to the user
            data: Extra payload for the app, values are sent as strings
        """
        valid = self._valid_tokens(tokens)
        if not valid:
            logger.warning("⚠️ No valid device tokens, notification not sent.")
            return

        payload = self._stringify(data)

        for i in range(0, len(valid), MAX_MULTICAST_TOKENS):
            chunk = valid[i:i + MAX_MULTICAST_TOKENS]
            try:
                message = messaging.MulticastMessage(
                    tokens=chunk,
                    notification=messaging.Notification(
                        title=notification.title,
                        body=notification.body
                    ),
                    data=payload
                )
                response = messaging.send_each_for_multicast(message, app=self.app)
                logger.info(f"📤 Notification sent to {response.success_count} devices")
                if response.failure_count:
                    logger.warning(f"⚠️ Notification failed for {response.failure_count} of {len(chunk)} devices")
            except Exception as e:
                logger.error(f"❌ Error sending FCM notification: {e}")
