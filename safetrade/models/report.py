"""
Pydantic models for citizen attack reports.
These models handle validation for report submission.
"""

from pydantic import BaseModel, Field, model_validator
from datetime import date, datetime, time
from typing import Optional, Union
from enum import Enum


class AttackType(str, Enum):
    """Channel through which the attack reached the victim."""
    EMAIL = "email"
    SMS = "SMS"
    WHATSAPP = "whatsapp"
    LLAMADA = "llamada"
    REDES_SOCIALES = "redes_sociales"
    OTRO = "otro"


class ImpactLevel(str, Enum):
    """What the victim lost, if anything."""
    NINGUNO = "ninguno"
    ROBO_DATOS = "robo_datos"
    ROBO_DINERO = "robo_dinero"
    CUENTA_COMPROMETIDA = "cuenta_comprometida"


class ReportStatus(str, Enum):
    """Triage workflow states managed by administrators."""
    NUEVO = "nuevo"
    REVISADO = "revisado"
    EN_INVESTIGACION = "en_investigacion"
    CERRADO = "cerrado"


class CrearReporte(BaseModel):
    """
    Model for creating a new report.
    `is_anonymous` left unset means "anonymous unless authenticated".
    """
    is_anonymous: Optional[bool] = Field(None, description="Hide reporter identity")
    attack_type: AttackType = Field(..., description="Attack channel")
    incident_date: Union[datetime, date] = Field(..., description="When the incident happened (ISO date or datetime)")
    incident_time: Optional[time] = Field(None, description="Time of day, merged into incident_date")
    attack_origin: str = Field(..., min_length=1, max_length=255, description="Phone number, e-mail, profile or site the attack came from")
    evidence_url: Optional[str] = Field(None, max_length=500, description="Link to external evidence")
    suspicious_url: Optional[str] = Field(None, max_length=500, description="Malicious URL received")
    message_content: Optional[str] = Field(None, max_length=5000, description="Text of the suspicious message")
    impact_level: ImpactLevel = Field(..., description="Damage suffered")
    description: Optional[str] = Field(None, max_length=5000, description="Free-form account of the incident")

    class Config:
        extra = "forbid"
        json_schema_extra = {
            "example": {
                "attack_type": "whatsapp",
                "incident_date": "2026-10-01",
                "incident_time": "14:30",
                "attack_origin": "+52 55 1234 5678",
                "suspicious_url": "http://banco-seguro-verificacion.example",
                "message_content": "Tu cuenta será bloqueada, verifica urgente",
                "impact_level": "robo_datos",
                "description": "Me pidieron el código de verificación",
            }
        }

    @model_validator(mode="after")
    def merge_incident_time(self):
        incident = self.incident_date
        if not isinstance(incident, datetime):
            incident = datetime.combine(incident, time.min)
        if self.incident_time is not None:
            incident = datetime.combine(incident.date(), self.incident_time)
        if incident.tzinfo is not None:
            incident = incident.replace(tzinfo=None) - incident.utcoffset()
        self.incident_date = incident
        return self

    def to_service_data(self) -> dict:
        data = self.model_dump(exclude={"incident_time"})
        data["attack_type"] = self.attack_type.value
        data["impact_level"] = self.impact_level.value
        return data


class StatusUpdateRequest(BaseModel):
    """Admin request to move a report to another status."""
    status: ReportStatus = Field(..., description="New status value")
    adminNotes: Optional[str] = Field(None, max_length=2000, description="Optional note stored on the report")


class NoteRequest(BaseModel):
    content: str = Field(..., min_length=1, max_length=5000, description="Note text")
    isTemplate: bool = Field(False, description="Save as a reusable template")
    templateName: Optional[str] = Field(None, max_length=100, description="Template label")


class NoteUpdateRequest(BaseModel):
    """Edit of an existing note; omitted template fields keep their stored values."""
    content: str = Field(..., min_length=1, max_length=5000, description="Note text")
    isTemplate: Optional[bool] = Field(None, description="Change the template flag")
    templateName: Optional[str] = Field(None, max_length=100, description="Template label")
