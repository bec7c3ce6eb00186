from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Optional


class Settings(BaseSettings):
    """Function settings loaded from environment variables."""

    PROJECT_NAME: str = "Un Kine Amigo"

    # Deployment regions
    FUNCTIONS_REGION: str = "northamerica-northeast1"
    SUBSCRIPTIONS_REGION: str = "us-central1"  # Same region as the Stripe extension
    TIMEZONE: str = "America/Santiago"

    # Firebase credentials (Application Default Credentials when both unset)
    FIREBASE_CREDENTIALS_JSON: Optional[str] = None
    FIREBASE_CREDENTIALS_PATH: Optional[str] = None

    # Firestore collections
    USERS_COLLECTION: str = "usuarios"
    APPOINTMENTS_COLLECTION: str = "citas"
    CHATS_COLLECTION: str = "chats"
    MESSAGES_SUBCOLLECTION: str = "messages"
    CUSTOMERS_COLLECTION: str = "customers"
    SUBSCRIPTIONS_SUBCOLLECTION: str = "subscriptions"

    # Expired appointment sweep
    SWEEP_SCHEDULE: str = "0 * * * *"
    SWEEP_BATCH_SIZE: int = 400  # Firestore caps a batch at 500 writes

    # Notifications
    MESSAGE_PREVIEW_LENGTH: int = 60

    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
