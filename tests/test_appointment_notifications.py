"""
Tests for appointment created / status changed notifications.
"""

import pytest

from kine_amigo.schemas.appointment import AppointmentStatus
from kine_amigo.services.appointment_notifications import (
    AppointmentNotificationService,
    status_change_message,
)


@pytest.fixture
def service(mock_users, mock_dispatcher):
    return AppointmentNotificationService(mock_users, mock_dispatcher)


class TestAppointmentCreated:
    """Tests for on_appointment_created()."""

    def test_notifies_practitioner(self, service, mock_users, mock_dispatcher):
        service.on_appointment_created("cita-1", {
            "kineId": "kine-1",
            "pacienteId": "pac-1",
            "pacienteNombre": "Ana",
            "estado": "PENDIENTE",
        })

        mock_users.get_device_tokens.assert_called_once_with("kine-1")
        tokens, notification, data = mock_dispatcher.notify.call_args.args
        assert tokens == ["token-a", "token-b"]
        assert notification.body == "Ana ha solicitado una cita."
        assert data == {"type": "appointment", "appointmentId": "cita-1", "patientId": "pac-1"}

    def test_default_patient_name(self, service, mock_dispatcher):
        service.on_appointment_created("cita-1", {"kineId": "kine-1"})

        _, notification, data = mock_dispatcher.notify.call_args.args
        assert notification.body == "Un paciente ha solicitado una cita."
        assert data["patientId"] == ""

    @pytest.mark.parametrize("data", [None, {}, {"pacienteId": "pac-1"}])
    def test_no_practitioner_is_noop(self, service, mock_users, mock_dispatcher, data):
        service.on_appointment_created("cita-1", data)

        mock_users.get_device_tokens.assert_not_called()
        mock_dispatcher.notify.assert_not_called()

    def test_lookup_error_propagates(self, service, mock_users):
        mock_users.get_device_tokens.side_effect = RuntimeError("firestore down")

        with pytest.raises(RuntimeError):
            service.on_appointment_created("cita-1", {"kineId": "kine-1"})

    def test_unparseable_document_is_skipped(self, service, mock_users, mock_dispatcher):
        service.on_appointment_created("cita-1", {"kineId": "kine-1", "pacienteId": 42})

        mock_users.get_device_tokens.assert_not_called()
        mock_dispatcher.notify.assert_not_called()


class TestStatusChangeMessage:
    """Tests for the status transition table."""

    @pytest.mark.parametrize("after, expected", [
        (AppointmentStatus.ACEPTADA, "Tu cita con Pedro fue aceptada ✅"),
        (AppointmentStatus.CONFIRMADA, "Tu cita con Pedro fue aceptada ✅"),
        (AppointmentStatus.RECHAZADA, "Tu cita con Pedro fue rechazada ❌"),
        (AppointmentStatus.DENEGADA, "Tu cita con Pedro fue rechazada ❌"),
        (AppointmentStatus.CANCELADA, "Tu cita con Pedro ha sido cancelada"),
    ])
    def test_notifiable_transitions(self, after, expected):
        assert status_change_message(AppointmentStatus.PENDIENTE, after, "Pedro") == expected

    @pytest.mark.parametrize("before", list(AppointmentStatus) + [None])
    @pytest.mark.parametrize("after", list(AppointmentStatus) + [None])
    def test_notifies_iff_notifiable_and_changed(self, before, after):
        notifiable = {
            AppointmentStatus.ACEPTADA,
            AppointmentStatus.CONFIRMADA,
            AppointmentStatus.DENEGADA,
            AppointmentStatus.RECHAZADA,
            AppointmentStatus.CANCELADA,
        }
        message = status_change_message(before, after, "Pedro")

        assert (message is not None) == (after in notifiable and after != before)

    def test_default_kine_name(self):
        message = status_change_message(AppointmentStatus.PENDIENTE, AppointmentStatus.ACEPTADA)

        assert message == "Tu cita con tu kinesiólogo fue aceptada ✅"


class TestAppointmentUpdated:
    """Tests for on_appointment_updated()."""

    def test_notifies_patient_on_acceptance(self, service, mock_users, mock_dispatcher):
        service.on_appointment_updated(
            "cita-1",
            {"estado": "PENDIENTE", "pacienteId": "pac-1"},
            {"estado": "ACEPTADA", "pacienteId": "pac-1", "kineNombre": "Pedro"},
        )

        mock_users.get_device_tokens.assert_called_once_with("pac-1")
        _, notification, data = mock_dispatcher.notify.call_args.args
        assert notification.body == "Tu cita con Pedro fue aceptada ✅"
        assert data == {"type": "appointment_status", "appointmentId": "cita-1", "status": "ACEPTADA"}

    def test_legacy_lowercase_status_is_normalized(self, service, mock_dispatcher):
        service.on_appointment_updated(
            "cita-1",
            {"estado": "pendiente", "pacienteId": "pac-1"},
            {"estado": "rechazada", "pacienteId": "pac-1"},
        )

        _, _, data = mock_dispatcher.notify.call_args.args
        assert data["status"] == "RECHAZADA"

    def test_same_status_in_different_case_is_noop(self, service, mock_dispatcher):
        service.on_appointment_updated(
            "cita-1",
            {"estado": "aceptada", "pacienteId": "pac-1"},
            {"estado": "ACEPTADA", "pacienteId": "pac-1"},
        )

        mock_dispatcher.notify.assert_not_called()

    def test_completed_is_not_notified(self, service, mock_users, mock_dispatcher):
        service.on_appointment_updated(
            "cita-1",
            {"estado": "ACEPTADA", "pacienteId": "pac-1"},
            {"estado": "COMPLETADA", "pacienteId": "pac-1"},
        )

        mock_users.get_device_tokens.assert_not_called()
        mock_dispatcher.notify.assert_not_called()

    def test_missing_snapshot_is_noop(self, service, mock_dispatcher):
        service.on_appointment_updated("cita-1", None, {"estado": "ACEPTADA", "pacienteId": "pac-1"})

        mock_dispatcher.notify.assert_not_called()

    def test_missing_patient_is_noop(self, service, mock_users, mock_dispatcher):
        service.on_appointment_updated("cita-1", {"estado": "PENDIENTE"}, {"estado": "CANCELADA"})

        mock_users.get_device_tokens.assert_not_called()
        mock_dispatcher.notify.assert_not_called()

    def test_lookup_error_is_swallowed(self, service, mock_users, mock_dispatcher):
        mock_users.get_device_tokens.side_effect = RuntimeError("firestore down")

        service.on_appointment_updated(
            "cita-1",
            {"estado": "PENDIENTE", "pacienteId": "pac-1"},
            {"estado": "CANCELADA", "pacienteId": "pac-1"},
        )

        mock_dispatcher.notify.assert_not_called()

    def test_unparseable_document_is_swallowed(self, service, mock_users, mock_dispatcher):
        service.on_appointment_updated(
            "cita-1",
            {"estado": "PENDIENTE", "pacienteId": "pac-1", "fechaCita": "15/03/2024 10:00"},
            {"estado": "ACEPTADA", "pacienteId": "pac-1", "fechaCita": "15/03/2024 10:00"},
        )

        mock_users.get_device_tokens.assert_not_called()
        mock_dispatcher.notify.assert_not_called()
