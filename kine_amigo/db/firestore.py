from dataclasses import dataclass
from typing import Optional

import firebase_admin
from firebase_admin import firestore
from google.cloud.firestore import Client

from kine_amigo.core.config import Settings, get_settings
from kine_amigo.core.firebase import init_firebase
import logging

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FunctionContext:
    """Clients shared by every handler running in this process."""

    app: firebase_admin.App
    db: Client
    settings: Settings


def build_context(settings: Optional[Settings] = None) -> FunctionContext:
    """Initialize Firebase and open the Firestore client."""
    settings = settings or get_settings()
    app = init_firebase(settings)
    logger.info("Opening Firestore client...")
    db = firestore.client(app)
    return FunctionContext(app=app, db=db, settings=settings)
