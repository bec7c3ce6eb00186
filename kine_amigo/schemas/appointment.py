from datetime import datetime
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator


class AppointmentStatus(str, Enum):
    """Appointment lifecycle states, always stored upper-case."""

    PENDIENTE = "PENDIENTE"
    ACEPTADA = "ACEPTADA"
    CONFIRMADA = "CONFIRMADA"
    DENEGADA = "DENEGADA"
    RECHAZADA = "RECHAZADA"
    CANCELADA = "CANCELADA"
    COMPLETADA = "COMPLETADA"

    @classmethod
    def parse(cls, value: Any) -> Optional["AppointmentStatus"]:
        """Normalize a stored value, accepting the legacy lower-case spelling."""
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().upper())
        except ValueError:
            return None

    def stored_values(self) -> List[str]:
        """Canonical value plus the legacy lower-case one still found in old documents."""
        return [self.value, self.value.lower()]


class Appointment(BaseModel):
    """Appointment document in the `citas` collection."""

    kine_id: Optional[str] = Field(default=None, alias="kineId")
    paciente_id: Optional[str] = Field(default=None, alias="pacienteId")
    paciente_nombre: Optional[str] = Field(default=None, alias="pacienteNombre")
    kine_nombre: Optional[str] = Field(default=None, alias="kineNombre")
    estado: Optional[AppointmentStatus] = None
    fecha_cita: Optional[datetime] = Field(default=None, alias="fechaCita")
    motivo_cancelacion: Optional[str] = Field(default=None, alias="motivoCancelacion")

    class Config:
        populate_by_name = True
        extra = "ignore"

    @field_validator("estado", mode="before")
    @classmethod
    def normalize_estado(cls, value):
        return AppointmentStatus.parse(value)
