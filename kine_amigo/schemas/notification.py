from pydantic import BaseModel, Field


class PushNotification(BaseModel):
    """Visible part of a push notification."""
    title: str = Field(..., min_length=1)
    body: str
