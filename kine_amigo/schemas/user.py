from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class Plan(str, Enum):
    """Account plan tiers."""
    PRO = "pro"
    ESTANDAR = "estandar"


UNLIMITED_PATIENTS = 9999
STANDARD_PATIENT_LIMIT = 50


class PlanFields(BaseModel):
    """Plan fields written onto a user document."""

    plan: Plan
    is_pro: bool = Field(alias="isPro")
    perfil_destacado: bool = Field(alias="perfilDestacado")
    limite_pacientes: int = Field(alias="limitePacientes")

    class Config:
        populate_by_name = True
        frozen = True

    def to_firestore(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


PRO_PLAN = PlanFields(
    plan=Plan.PRO,
    is_pro=True,
    perfil_destacado=True,
    limite_pacientes=UNLIMITED_PATIENTS,
)

STANDARD_PLAN = PlanFields(
    plan=Plan.ESTANDAR,
    is_pro=False,
    perfil_destacado=False,
    limite_pacientes=STANDARD_PATIENT_LIMIT,
)


class UserProfile(BaseModel):
    """User document in the `usuarios` collection."""

    device_tokens: List[Optional[str]] = Field(default_factory=list, alias="deviceTokens")
    plan: Optional[str] = None
    is_pro: Optional[bool] = Field(default=None, alias="isPro")
    perfil_destacado: Optional[bool] = Field(default=None, alias="perfilDestacado")
    limite_pacientes: Optional[int] = Field(default=None, alias="limitePacientes")

    class Config:
        populate_by_name = True
        extra = "ignore"

    @field_validator("device_tokens", mode="before")
    @classmethod
    def default_device_tokens(cls, value):
        return value or []
