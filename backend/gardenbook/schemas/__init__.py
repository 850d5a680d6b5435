"""Pydantic schemas for API request/response validation."""
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, field_validator

from gardenbook.core.domain_types import Specimen


# === Specimen Schemas ===
class SpecimenResponse(BaseModel):
    """Persisted specimen shape, shared by plants and fish."""
    id: int
    name: str
    scientific_name: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    image_public_id: Optional[str] = None
    qr_code_url: Optional[str] = None
    qr_public_id: Optional[str] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_specimen(cls, specimen: Specimen) -> "SpecimenResponse":
        return cls(**specimen.to_row())


class SpecimenCreatedResponse(BaseModel):
    success: bool = True
    specimen: SpecimenResponse
    warning: Optional[str] = None


class SpecimenUpdatedResponse(BaseModel):
    success: bool = True
    specimen: SpecimenResponse


class SuccessResponse(BaseModel):
    success: bool = True


# === Category Schemas ===
class CategoryCreate(BaseModel):
    name: str
    type: Optional[str] = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return v.strip()


class CategoryResponse(BaseModel):
    id: int
    name: str
    type: Optional[str] = None

    class Config:
        from_attributes = True


# === Auth Schemas ===
class LoginRequest(BaseModel):
    email: str
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class AdminResponse(BaseModel):
    id: int
    email: str

    class Config:
        from_attributes = True


# === Audit Schemas ===
class AuditEntryResponse(BaseModel):
    id: int
    timestamp: Optional[datetime] = None
    user_id: Optional[int] = None
    entity_type: str
    action: str
    diff_json: Any
