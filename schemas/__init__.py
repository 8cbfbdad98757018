from schemas.plaid import (
    InstitutionSchema,
    LinkTokenCreate,
    PublicTokenExchange,
)
from schemas.prequalification import (
    CustomerProfileSchema,
    DealerSchema,
    PreferencesUpdate,
    PrequalificationCreate,
)
from schemas.purchase import (
    AddonSchema,
    AppointmentSchema,
    PurchaseConfirm,
    PurchaseCustomerSchema,
    SubscriptionCreate,
)
from schemas.scenario import QuoteRequest, ScenarioSchema

__all__ = [
    "AddonSchema",
    "AppointmentSchema",
    "CustomerProfileSchema",
    "DealerSchema",
    "InstitutionSchema",
    "LinkTokenCreate",
    "PreferencesUpdate",
    "PrequalificationCreate",
    "PublicTokenExchange",
    "PurchaseConfirm",
    "PurchaseCustomerSchema",
    "QuoteRequest",
    "ScenarioSchema",
    "SubscriptionCreate",
]
