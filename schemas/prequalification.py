from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, EmailStr, Field, StrictBool, field_validator

from services.journey_models import EVENT_TYPES


class CustomerProfileSchema(BaseModel):
    first_name: str = Field(..., min_length=1, alias="firstName")
    last_name: str = Field(..., min_length=1, alias="lastName")
    email: EmailStr
    phone: str = Field(..., min_length=7)
    city: Optional[str] = None
    state: Optional[str] = None

    model_config = {"populate_by_name": True}


class DealerSchema(BaseModel):
    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)


class PrequalificationCreate(BaseModel):
    scenario: Any = None
    customer_profile: CustomerProfileSchema = Field(..., alias="customerProfile")
    soft_pull_consent: bool = Field(..., alias="softPullConsent")
    dealer: DealerSchema

    model_config = {"populate_by_name": True}


class PreferencesUpdate(BaseModel):
    """Milestone opt-ins; unknown keys are dropped rather than rejected."""

    preferences: dict[str, StrictBool]

    @field_validator("preferences")
    @classmethod
    def keep_known_milestones(cls, value: dict[str, bool]) -> dict[str, bool]:
        return {k: v for k, v in value.items() if k in EVENT_TYPES}
