from typing import Optional

from pydantic import BaseModel


# Stripe subscription statuses, as synced by the payments extension
PRO_STATUSES = frozenset({"active", "trialing"})
STANDARD_STATUSES = frozenset({"canceled", "unpaid", "incomplete_expired"})


class Subscription(BaseModel):
    """Subscription document under `customers/{uid}/subscriptions`."""

    status: Optional[str] = None

    class Config:
        extra = "ignore"
