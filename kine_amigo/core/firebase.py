import json
import logging
import os
from typing import Optional

import firebase_admin
from firebase_admin import credentials

from kine_amigo.core.config import Settings, get_settings
from kine_amigo.core.exceptions import FirebaseInitError

logger = logging.getLogger(__name__)


def init_firebase(settings: Optional[Settings] = None) -> firebase_admin.App:
    """
    Initialize the Firebase Admin SDK if not already initialized.

    Credentials are resolved in order: FIREBASE_CREDENTIALS_JSON,
    FIREBASE_CREDENTIALS_PATH, then Application Default Credentials, which is
    what the Cloud Functions runtime provides.
    """
    if firebase_admin._apps:
        return firebase_admin.get_app()

    settings = settings or get_settings()

    # 1. JSON string in environment variable
    if settings.FIREBASE_CREDENTIALS_JSON:
        try:
            creds_dict = json.loads(settings.FIREBASE_CREDENTIALS_JSON)
            app = firebase_admin.initialize_app(credentials.Certificate(creds_dict))
            logger.info("Firebase Admin SDK initialized from FIREBASE_CREDENTIALS_JSON")
            return app
        except ValueError as e:
            raise FirebaseInitError(f"invalid FIREBASE_CREDENTIALS_JSON: {e}") from e

    # 2. Service account file
    if settings.FIREBASE_CREDENTIALS_PATH:
        path = settings.FIREBASE_CREDENTIALS_PATH
        if not os.path.exists(path):
            raise FirebaseInitError(f"credentials file not found: {path}")
        app = firebase_admin.initialize_app(credentials.Certificate(path))
        logger.info(f"Firebase Admin SDK initialized with: {path}")
        return app

    # 3. Application Default Credentials
    app = firebase_admin.initialize_app()
    logger.info("Firebase Admin SDK initialized with application default credentials")
    return app
