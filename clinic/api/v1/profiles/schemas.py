from pydantic import BaseModel, ConfigDict
import uuid


class DoctorSummary(BaseModel):
    """Doctor as shown in selection lists"""
    id: uuid.UUID
    full_name: str
    specialization: str

    model_config = ConfigDict(from_attributes=True)


class PatientSummary(BaseModel):
    """Patient as shown in selection lists"""
    id: uuid.UUID
    full_name: str

    model_config = ConfigDict(from_attributes=True)
