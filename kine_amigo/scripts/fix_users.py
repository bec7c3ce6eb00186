"""
Initialize `deviceTokens` on every user document that lacks it.

Usage:
    python -m kine_amigo.scripts.fix_users [--dry-run]

Credentials come from FIREBASE_CREDENTIALS_JSON / FIREBASE_CREDENTIALS_PATH,
falling back to application default credentials.
"""

import argparse
import logging
import sys
from typing import List, Optional

from dotenv import load_dotenv

# Load .env before the project settings are built at import time
load_dotenv()

from kine_amigo.core.logging_config import configure_logging
from kine_amigo.db.firestore import build_context
from kine_amigo.services.user_service import UserService

logger = logging.getLogger(__name__)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Initialize missing deviceTokens on users")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="report the users that would be repaired without writing"
    )
    args = parser.parse_args(argv)

    configure_logging()

    context = build_context()
    repaired = UserService(context.db, context.settings).backfill_device_tokens(dry_run=args.dry_run)

    verb = "would be repaired" if args.dry_run else "repaired"
    logger.info(f"🎉 Done: {repaired} users {verb}.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
