from typing import Any, Dict, Optional

from pydantic import ValidationError

from kine_amigo.schemas.appointment import Appointment, AppointmentStatus
from kine_amigo.schemas.notification import PushNotification
from kine_amigo.services.notification_dispatcher import NotificationDispatcher
from kine_amigo.services.user_service import UserService
import logging

logger = logging.getLogger(__name__)


DEFAULT_PATIENT_NAME = "Un paciente"
DEFAULT_KINE_NAME = "tu kinesiólogo"

NEW_APPOINTMENT_TITLE = "📅 Nueva solicitud de cita"
STATUS_CHANGE_TITLE = "📅 Estado de tu cita"

# Destination status -> body template; any status not listed is silent
STATUS_MESSAGES = {
    AppointmentStatus.ACEPTADA: "Tu cita con {kine} fue aceptada ✅",
    AppointmentStatus.CONFIRMADA: "Tu cita con {kine} fue aceptada ✅",
    AppointmentStatus.DENEGADA: "Tu cita con {kine} fue rechazada ❌",
    AppointmentStatus.RECHAZADA: "Tu cita con {kine} fue rechazada ❌",
    AppointmentStatus.CANCELADA: "Tu cita con {kine} ha sido cancelada",
}


def status_change_message(
    before: Optional[AppointmentStatus],
    after: Optional[AppointmentStatus],
    kine_name: Optional[str] = None
) -> Optional[str]:
    """Body to send the patient for a status transition, or None when nothing is sent."""
    if after is None or before == after:
        return None
    template = STATUS_MESSAGES.get(after)
    if template is None:
        return None
    return template.format(kine=kine_name or DEFAULT_KINE_NAME)


class AppointmentNotificationService:
    """Notifies practitioners of new requests and patients of status changes."""

    def __init__(self, users: UserService, dispatcher: NotificationDispatcher):
        self.users = users
        self.dispatcher = dispatcher

    def on_appointment_created(
        self,
        appointment_id: str,
        data: Optional[Dict[str, Any]]
    ) -> None:
        """
        Tell the practitioner a patient requested an appointment.

        Errors reading the practitioner propagate so the platform can retry;
        an unreadable appointment is logged and skipped, and delivery errors
        are handled by the dispatcher.
        """
        if not data:
            return
        try:
            appointment = Appointment.model_validate(data)
        except ValidationError as e:
            logger.error(f"❌ Appointment {appointment_id} could not be read, practitioner not notified: {e}")
            return
        if not appointment.kine_id:
            logger.info(f"Appointment {appointment_id} has no practitioner, skipping")
            return

        tokens = self.users.get_device_tokens(appointment.kine_id)
        patient_name = appointment.paciente_nombre or DEFAULT_PATIENT_NAME

        self.dispatcher.notify(
            tokens,
            PushNotification(
                title=NEW_APPOINTMENT_TITLE,
                body=f"{patient_name} ha solicitado una cita."
            ),
            {
                "type": "appointment",
                "appointmentId": appointment_id,
                "patientId": appointment.paciente_id or "",
            }
        )

    def on_appointment_updated(
        self,
        appointment_id: str,
        before_data: Optional[Dict[str, Any]],
        after_data: Optional[Dict[str, Any]]
    ) -> None:
        """Tell the patient their appointment was accepted, rejected or cancelled."""
        if not before_data or not after_data:
            return

        try:
            before = Appointment.model_validate(before_data)
            after = Appointment.model_validate(after_data)

            body = status_change_message(before.estado, after.estado, after.kine_nombre)
            if body is None:
                return

            if not after.paciente_id:
                logger.warning(f"Appointment {appointment_id} has no patient, status change not notified")
                return

            tokens = self.users.get_device_tokens(after.paciente_id)
            self.dispatcher.notify(
                tokens,
                PushNotification(title=STATUS_CHANGE_TITLE, body=body),
                {
                    "type": "appointment_status",
                    "appointmentId": appointment_id,
                    "status": after.estado.value,
                }
            )
        except Exception as e:
            logger.error(f"❌ Error sending appointment status notification for {appointment_id}: {e}")
