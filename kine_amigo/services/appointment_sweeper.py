from datetime import datetime, timezone
from typing import List, Optional

from google.cloud.firestore import Client
from google.cloud.firestore_v1.base_query import FieldFilter

from kine_amigo.core.config import Settings, get_settings
from kine_amigo.core.exceptions import AppointmentSweepError
from kine_amigo.schemas.appointment import AppointmentStatus
import logging

logger = logging.getLogger(__name__)


EXPIRED_CANCELLATION_REASON = "Cancelada automáticamente: la cita no fue confirmada antes de su fecha."


class AppointmentSweeper:
    """Cancels pending appointments whose scheduled time has already passed."""

    def __init__(self, db: Client, settings: Optional[Settings] = None):
        self.db = db
        self.settings = settings or get_settings()

    def find_expired(self, now: datetime) -> List:
        """Pending appointments scheduled strictly before `now`."""
        query = (
            self.db.collection(self.settings.APPOINTMENTS_COLLECTION)
            .where(filter=FieldFilter("estado", "in", AppointmentStatus.PENDIENTE.stored_values()))
            .where(filter=FieldFilter("fechaCita", "<", now))
        )
        expired = []
        for snapshot in query.stream():
            fecha_cita = (snapshot.to_dict() or {}).get("fechaCita")
            if isinstance(fecha_cita, datetime) and fecha_cita < now:
                expired.append(snapshot)
        return expired

    def cancel_expired(self, now: Optional[datetime] = None) -> int:
        """
        Cancel every expired pending appointment.

        Updates are committed in batches of at most SWEEP_BATCH_SIZE writes;
        each batch applies atomically. Re-running is harmless because only
        pending appointments are matched.

        Args:
            now: Reference time, defaults to the current UTC time

        Returns:
            Number of appointments cancelled

        Raises:
            AppointmentSweepError: If a batch commit fails
        """
        now = now or datetime.now(timezone.utc)
        expired = self.find_expired(now)

        if not expired:
            logger.info("No expired appointments, nothing to cancel.")
            return 0

        batch_size = self.settings.SWEEP_BATCH_SIZE
        total_cancelled = 0

        for i in range(0, len(expired), batch_size):
            chunk = expired[i:i + batch_size]
            batch = self.db.batch()
            for snapshot in chunk:
                logger.info(f"Cancelling expired appointment: {snapshot.id}")
                batch.update(snapshot.reference, {
                    "estado": AppointmentStatus.CANCELADA.value,
                    "motivoCancelacion": EXPIRED_CANCELLATION_REASON,
                })
            try:
                batch.commit()
            except Exception as e:
                logger.error(f"❌ Error committing batch {i // batch_size + 1}: {e}")
                raise AppointmentSweepError(
                    f"{total_cancelled} of {len(expired)} appointments cancelled before failure: {e}"
                ) from e
            total_cancelled += len(chunk)
            logger.info(f"Committed batch {i // batch_size + 1}, total: {total_cancelled}")

        logger.info(f"✔ {total_cancelled} expired appointments cancelled")
        return total_cancelled
