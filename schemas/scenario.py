from typing import Literal, Optional

from pydantic import BaseModel, Field


class ScenarioSchema(BaseModel):
    credit_score_tier: str = Field("Excellent (720-850)", alias="creditScoreTier")
    down_payment: float = Field(5000, ge=0, alias="downPayment")
    trade_in_value: float = Field(0, ge=0, alias="tradeInValue")
    finance_term: int = Field(60, gt=0, alias="financeTerm")
    lease_term: int = Field(36, gt=0, alias="leaseTerm")
    zip_code: Optional[str] = Field(None, alias="zipCode")
    monthly_budget: Optional[float] = Field(None, alias="monthlyBudget")
    annual_mileage: Optional[int] = Field(None, alias="annualMileage")

    model_config = {"populate_by_name": True}


class QuoteRequest(BaseModel):
    vehicle_id: str = Field(..., alias="vehicleId")
    scenario: ScenarioSchema = Field(default_factory=ScenarioSchema)
    plans: list[Literal["finance", "lease"]] = Field(default_factory=lambda: ["finance", "lease"], min_length=1)

    model_config = {"populate_by_name": True}
