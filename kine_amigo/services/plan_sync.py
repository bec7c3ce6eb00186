from typing import Any, Dict, Optional

from kine_amigo.core.exceptions import PlanSyncError
from kine_amigo.schemas.subscription import PRO_STATUSES, STANDARD_STATUSES, Subscription
from kine_amigo.schemas.user import PRO_PLAN, STANDARD_PLAN, PlanFields
from kine_amigo.services.user_service import UserService
import logging

logger = logging.getLogger(__name__)


def plan_fields_for_status(status: Optional[str]) -> Optional[PlanFields]:
    """
    Map a subscription status to the plan fields a user should have.

    Statuses outside both sets (past_due, incomplete, paused, ...) return
    None and leave the user's plan as it is.
    """
    if status in PRO_STATUSES:
        return PRO_PLAN
    if status in STANDARD_STATUSES:
        return STANDARD_PLAN
    return None


class PlanSyncService:
    """Keeps the user's plan in line with their subscription status."""

    def __init__(self, users: UserService):
        self.users = users

    def on_subscription_written(
        self,
        user_id: str,
        before_data: Optional[Dict[str, Any]],
        after_data: Optional[Dict[str, Any]]
    ) -> bool:
        """
        Apply the plan for a subscription write.

        Returns:
            True if the user document was updated

        Raises:
            PlanSyncError: If the user document could not be updated
        """
        # Deleted subscription: the plan is left unchanged
        if after_data is None:
            return False

        after = Subscription.model_validate(after_data)
        if before_data is not None:
            before = Subscription.model_validate(before_data)
            if before.status == after.status:
                return False

        fields = plan_fields_for_status(after.status)
        if fields is None:
            logger.info(f"Subscription status '{after.status}' for user {user_id} does not change the plan")
            return False

        try:
            self.users.update_plan(user_id, fields)
        except Exception as e:
            logger.error(f"❌ Error updating plan for user {user_id}: {e}")
            raise PlanSyncError(user_id, str(e)) from e
        return True
