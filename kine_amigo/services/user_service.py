from typing import List, Optional

from google.cloud.firestore import Client

from kine_amigo.core.config import Settings, get_settings
from kine_amigo.schemas.user import PlanFields, UserProfile
import logging

logger = logging.getLogger(__name__)


class UserService:
    """Reads and partial updates on user documents."""

    def __init__(self, db: Client, settings: Optional[Settings] = None):
        self.db = db
        self.settings = settings or get_settings()

    def get_collection(self):
        return self.db.collection(self.settings.USERS_COLLECTION)

    def get_user(self, user_id: str) -> Optional[UserProfile]:
        snapshot = self.get_collection().document(user_id).get()
        data = snapshot.to_dict() if snapshot.exists else None
        if data is None:
            logger.warning(f"User {user_id} not found")
            return None
        return UserProfile.model_validate(data)

    def get_device_tokens(self, user_id: str) -> List[Optional[str]]:
        """Device tokens registered for a user, empty when the user is unknown."""
        user = self.get_user(user_id)
        return list(user.device_tokens) if user else []

    def update_plan(self, user_id: str, fields: PlanFields) -> None:
        """Write only the plan fields, leaving the rest of the document untouched."""
        self.get_collection().document(user_id).update(fields.to_firestore())
        logger.info(f"Updated user {user_id} to plan '{fields.plan.value}'")

    def backfill_device_tokens(self, dry_run: bool = False) -> int:
        """
        Initialize `deviceTokens` on users that lack the field.

        Users that already have tokens are skipped, so running it twice is
        harmless.

        Returns:
            Number of users repaired (or that would be, with dry_run)
        """
        repaired = 0
        total = 0
        for snapshot in self.get_collection().stream():
            total += 1
            data = snapshot.to_dict() or {}
            if isinstance(data.get("deviceTokens"), list):
                continue
            if not dry_run:
                snapshot.reference.set({"deviceTokens": []}, merge=True)
            repaired += 1
            logger.info(f"✔️ User repaired: {snapshot.id}")

        logger.info(f"Users found: {total}, repaired: {repaired}")
        return repaired
