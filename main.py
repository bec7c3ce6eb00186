"""
Cloud Functions entry point for Un Kine Amigo.

Each trigger is a thin wrapper: it unpacks the platform event and hands the
document data to a service built from the process-wide FunctionContext.
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict, Optional

from firebase_functions import firestore_fn, scheduler_fn

from kine_amigo.core.config import settings
from kine_amigo.core.logging_config import configure_logging
from kine_amigo.db.firestore import FunctionContext, build_context
from kine_amigo.services.appointment_notifications import AppointmentNotificationService
from kine_amigo.services.appointment_sweeper import AppointmentSweeper
from kine_amigo.services.message_notifications import MessageNotificationService
from kine_amigo.services.notification_dispatcher import NotificationDispatcher
from kine_amigo.services.plan_sync import PlanSyncService
from kine_amigo.services.user_service import UserService
import logging

configure_logging(settings)
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Services:
    appointments: AppointmentNotificationService
    messages: MessageNotificationService
    plans: PlanSyncService
    sweeper: AppointmentSweeper


def build_services(context: FunctionContext) -> Services:
    users = UserService(context.db, context.settings)
    dispatcher = NotificationDispatcher(context.app)
    return Services(
        appointments=AppointmentNotificationService(users, dispatcher),
        messages=MessageNotificationService(
            users, dispatcher, preview_length=context.settings.MESSAGE_PREVIEW_LENGTH
        ),
        plans=PlanSyncService(users),
        sweeper=AppointmentSweeper(context.db, context.settings),
    )


@lru_cache()
def get_services() -> Services:
    """Clients are created on first invocation, not at deploy-time import."""
    return build_services(build_context(settings))


def _snapshot_data(snapshot) -> Optional[Dict[str, Any]]:
    return snapshot.to_dict() if snapshot is not None else None


APPOINTMENT_DOCUMENT = f"{settings.APPOINTMENTS_COLLECTION}/{{appointmentId}}"
MESSAGE_DOCUMENT = f"{settings.CHATS_COLLECTION}/{{chatId}}/{settings.MESSAGES_SUBCOLLECTION}/{{messageId}}"
SUBSCRIPTION_DOCUMENT = (
    f"{settings.CUSTOMERS_COLLECTION}/{{userId}}/{settings.SUBSCRIPTIONS_SUBCOLLECTION}/{{subscriptionId}}"
)


@firestore_fn.on_document_created(document=APPOINTMENT_DOCUMENT, region=settings.FUNCTIONS_REGION)
def notify_new_appointment(event: firestore_fn.Event[Optional[firestore_fn.DocumentSnapshot]]) -> None:
    """New appointment -> notify the practitioner."""
    get_services().appointments.on_appointment_created(
        event.params["appointmentId"], _snapshot_data(event.data)
    )


@firestore_fn.on_document_created(document=MESSAGE_DOCUMENT, region=settings.FUNCTIONS_REGION)
def notify_new_message(event: firestore_fn.Event[Optional[firestore_fn.DocumentSnapshot]]) -> None:
    """New chat message -> notify the receiver."""
    get_services().messages.on_message_created(
        event.params["chatId"], event.params["messageId"], _snapshot_data(event.data)
    )


@firestore_fn.on_document_updated(document=APPOINTMENT_DOCUMENT, region=settings.FUNCTIONS_REGION)
def notify_appointment_status_change(
    event: firestore_fn.Event[firestore_fn.Change[firestore_fn.DocumentSnapshot]]
) -> None:
    """Appointment status change -> notify the patient."""
    get_services().appointments.on_appointment_updated(
        event.params["appointmentId"],
        _snapshot_data(event.data.before),
        _snapshot_data(event.data.after),
    )


@firestore_fn.on_document_written(document=SUBSCRIPTION_DOCUMENT, region=settings.SUBSCRIPTIONS_REGION)
def update_user_plan_on_subscription(
    event: firestore_fn.Event[firestore_fn.Change[Optional[firestore_fn.DocumentSnapshot]]]
) -> None:
    """Stripe subscription write -> update the user's plan."""
    get_services().plans.on_subscription_written(
        event.params["userId"],
        _snapshot_data(event.data.before),
        _snapshot_data(event.data.after),
    )


@scheduler_fn.on_schedule(
    schedule=settings.SWEEP_SCHEDULE,
    timezone=scheduler_fn.Timezone(settings.TIMEZONE),
    region=settings.FUNCTIONS_REGION,
)
def auto_cancel_old_appointments(event: scheduler_fn.ScheduledEvent) -> None:
    """Cancel pending appointments whose date has passed."""
    get_services().sweeper.cancel_expired()
