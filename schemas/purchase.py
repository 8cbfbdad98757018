from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class AddonSchema(BaseModel):
    name: str
    price: float


class AppointmentSchema(BaseModel):
    method: Optional[str] = None
    date: Optional[str] = None
    time_slot: Optional[str] = Field(None, alias="timeSlot")

    model_config = {"populate_by_name": True}


class PurchaseCustomerSchema(BaseModel):
    email: EmailStr
    first_name: Optional[str] = Field(None, alias="firstName")
    last_name: Optional[str] = Field(None, alias="lastName")

    model_config = {"populate_by_name": True}


class PurchaseConfirm(BaseModel):
    dealer_id: str = Field(..., alias="dealerId")
    offer_id: str = Field(..., alias="offerId")
    vehicle_model_name: str = Field(..., alias="vehicleModelName")
    offer_type: str = Field(..., alias="offerType")
    purchase_total: float = Field(..., alias="purchaseTotal")
    amount_due_at_signing: float = Field(..., alias="amountDueAtSigning")
    trade_in_value: Optional[float] = Field(..., alias="tradeInValue")
    selected_addons: list[AddonSchema] = Field(..., alias="selectedAddons")
    customer: PurchaseCustomerSchema
    payment_contact_name: Optional[str] = Field(None, alias="paymentContactName")
    appointment: Optional[AppointmentSchema] = None

    model_config = {"populate_by_name": True}


class SubscriptionCreate(BaseModel):
    email: EmailStr
    name: Optional[str] = Field(None, min_length=1, max_length=120)
