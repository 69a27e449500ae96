from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import Field, field_validator

from schemas.inventory import CamelModel

PaymentMethod = Literal["cash", "finance"]
DeliveryMethod = Literal["pickup", "ship"]


class ConfigurationData(CamelModel):
    selected_stock: Optional[str] = None
    power_package: Optional[str] = None
    hitch_package: Optional[str] = None
    brake_control: Optional[str] = None
    protection_plan: Optional[str] = None
    payment_method: PaymentMethod = "cash"
    delivery_method: DeliveryMethod = "ship"
    shipping_zip: str = ""

    @field_validator("shipping_zip")
    @classmethod
    def _digits_only(cls, v: Optional[str]) -> str:
        # the zip input only keeps the first five digits typed
        return "".join(ch for ch in (v or "") if ch.isdigit())[:5]

    def options(self) -> Dict[str, Optional[str]]:
        return {
            "power_package": self.power_package,
            "hitch_package": self.hitch_package,
            "brake_control": self.brake_control,
            "protection_plan": self.protection_plan,
        }


class ContactData(CamelModel):
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""


class QuoteRequest(CamelModel):
    list_price: float = Field(ge=0)
    power_package: Optional[str] = None
    hitch_package: Optional[str] = None
    brake_control: Optional[str] = None
    protection_plan: Optional[str] = None
    payment_method: PaymentMethod = "cash"


class PurchaseRequest(CamelModel):
    """Everything the wizard collects; `model_slug` or `stock` picks the candidate units."""
    model_slug: Optional[str] = None
    stock: Optional[str] = None
    configuration: ConfigurationData
    contact: ContactData
    signature: str


class OptionLine(CamelModel):
    category: str
    id: str
    name: str
    price: int


class FinancingTerms(CamelModel):
    apr: float
    months: int
    down_payment_rate: float
    down_payment: float
    loan_amount: float
    monthly_payment: float


class Quote(CamelModel):
    list_price: float
    discounted_price: int
    savings: float
    options: List[OptionLine]
    total_price: int
    financing: Optional[FinancingTerms] = None


class OrderSummary(CamelModel):
    confirmation_number: str
    rv_name: str
    stock: str
    year: int
    list_price: float
    discounted_price: int
    options: List[OptionLine]
    total_price: int
    payment_method: PaymentMethod
    delivery_method: DeliveryMethod
    shipping_zip: Optional[str] = None
    financing: Optional[FinancingTerms] = None
    customer_name: str
    customer_email: str
    customer_phone: str
    signed_at: datetime
