from typing import Optional

from pydantic import BaseModel, Field


class LinkTokenCreate(BaseModel):
    prequal_request_id: Optional[str] = Field(None, alias="prequalRequestId")

    model_config = {"populate_by_name": True}


class InstitutionSchema(BaseModel):
    name: Optional[str] = None
    institution_id: Optional[str] = None


class PublicTokenExchange(BaseModel):
    prequal_request_id: str = Field(..., alias="prequalRequestId")
    public_token: str = Field(..., alias="publicToken")
    institution: Optional[InstitutionSchema] = None

    model_config = {"populate_by_name": True}
