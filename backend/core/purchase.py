"""
Purchase wizard.

Steps run configuration -> contact -> review, and signing the review step
produces the order summary:

- configuration: pick one of the available units, accessories, protection
  plan, cash/finance, pickup/ship (ship needs a 5-digit zip)
- contact: customer name, email, phone and address
- review: totals are shown; a signature completes the purchase request
"""

import base64
import re
import secrets
from datetime import datetime, timezone
from typing import Callable, List, Optional

from core import manufacturers, pricing
from schemas.inventory import RV
from schemas.purchase import (
    ConfigurationData,
    ContactData,
    FinancingTerms,
    OptionLine,
    OrderSummary,
    Quote,
)

STEPS = ["configuration", "contact", "review"]
SIGNED = "signed"

_ZIP_RE = re.compile(r"^\d{5}$")


class WizardValidationError(ValueError):
    def __init__(self, step: str, message: str):
        super().__init__(message)
        self.step = step
        self.message = message


def build_quote(list_price: float, options: dict, payment_method: str = "cash", rate: Optional[float] = None) -> Quote:
    discounted = pricing.discounted_price(list_price, rate)
    lines = pricing.selected_options(options)
    total = pricing.calculate_total_price(list_price, options, rate)
    financing = FinancingTerms(**pricing.financing_terms(total)) if payment_method == "finance" else None
    return Quote(
        list_price=list_price,
        discounted_price=discounted,
        savings=list_price - discounted,
        options=[OptionLine(**line) for line in lines],
        total_price=total,
        financing=financing,
    )


def signature_image(signature: Optional[str]) -> bytes:
    """Decoded signature pad image, or b"" when the value is not a base64 image."""
    payload = (signature or "").strip()
    if payload.startswith("data:"):
        header, _, payload = payload.partition(",")
        if not (header.startswith("data:image/") and header.endswith(";base64")):
            return b""
    try:
        return base64.b64decode(payload, validate=True)
    except ValueError:
        return b""


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PurchaseWizard:
    def __init__(self, units: List[RV], discount_rate: Optional[float] = None, clock: Callable[[], datetime] = _utcnow):
        if not units:
            raise ValueError("No units available for purchase")
        self.units = list(units)
        self.discount_rate = discount_rate
        self.clock = clock
        self.step = STEPS[0]
        self.configuration = ConfigurationData(selected_stock=self.units[0].stock)
        self.contact = ContactData()
        self.summary: Optional[OrderSummary] = None

    @property
    def selected_unit(self) -> Optional[RV]:
        for unit in self.units:
            if unit.stock == self.configuration.selected_stock:
                return unit
        return None

    def select_unit(self, stock: str) -> RV:
        for unit in self.units:
            if unit.stock == stock:
                self.configuration.selected_stock = stock
                return unit
        raise WizardValidationError("configuration", f"Stock {stock} is not available for this model.")

    def configure(self, configuration: ConfigurationData) -> None:
        self.configuration = configuration

    def set_contact(self, contact: ContactData) -> None:
        self.contact = contact

    def quote(self) -> Quote:
        unit = self.selected_unit
        price = unit.price if unit else 0
        return build_quote(price, self.configuration.options(), self.configuration.payment_method, self.discount_rate)

    def _validate_configuration(self) -> None:
        cfg = self.configuration
        if not cfg.selected_stock or self.selected_unit is None:
            raise WizardValidationError("configuration", "Please select a specific unit.")
        try:
            pricing.selected_options(cfg.options())
        except pricing.UnknownOptionError as e:
            raise WizardValidationError("configuration", str(e))
        if cfg.delivery_method == "ship":
            if not manufacturers.is_delivery_available(self.selected_unit.manufacturer):
                raise WizardValidationError(
                    "configuration",
                    f"Delivery is not available for {self.selected_unit.manufacturer or 'this manufacturer'}. Please choose pick up.",
                )
            if not _ZIP_RE.match(cfg.shipping_zip):
                raise WizardValidationError("configuration", "Please enter a valid 5-digit ZIP code for shipping.")

    def _validate_contact(self) -> None:
        c = self.contact
        if not c.first_name.strip():
            raise WizardValidationError("contact", "Please enter your first name.")
        if not c.last_name.strip():
            raise WizardValidationError("contact", "Please enter your last name.")
        if not c.email.strip() or "@" not in c.email:
            raise WizardValidationError("contact", "Please enter a valid email address.")
        if len(re.sub(r"\D", "", c.phone)) != 10:
            raise WizardValidationError("contact", "Please enter a valid 10-digit phone number.")
        if not c.address.strip():
            raise WizardValidationError("contact", "Please enter your street address.")
        if not c.city.strip():
            raise WizardValidationError("contact", "Please enter your city.")
        if not c.state.strip():
            raise WizardValidationError("contact", "Please select your state.")
        if not _ZIP_RE.match(c.zip_code.strip()):
            raise WizardValidationError("contact", "Please enter a valid 5-digit ZIP code.")

    def next(self) -> str:
        if self.step == "configuration":
            self._validate_configuration()
            self.step = "contact"
        elif self.step == "contact":
            self._validate_contact()
            self.step = "review"
        return self.step

    def back(self) -> str:
        if self.step == "review":
            self.step = "contact"
        elif self.step == "contact":
            self.step = "configuration"
        return self.step

    def progress(self) -> float:
        if self.step == SIGNED:
            return 100.0
        return (STEPS.index(self.step) + 1) / len(STEPS) * 100

    def sign(self, signature: str) -> OrderSummary:
        if self.step != "review":
            raise WizardValidationError(self.step, "Please review your order before signing.")
        if not signature_image(signature):
            raise WizardValidationError("review", "Please sign before submitting.")

        unit = self.selected_unit
        quote = self.quote()
        cfg = self.configuration
        self.summary = OrderSummary(
            confirmation_number=f"RV-{secrets.token_hex(4).upper()}",
            rv_name=unit.name,
            stock=unit.stock,
            year=unit.year,
            list_price=unit.price,
            discounted_price=quote.discounted_price,
            options=quote.options,
            total_price=quote.total_price,
            payment_method=cfg.payment_method,
            delivery_method=cfg.delivery_method,
            shipping_zip=cfg.shipping_zip if cfg.delivery_method == "ship" else None,
            financing=quote.financing,
            customer_name=f"{self.contact.first_name.strip()} {self.contact.last_name.strip()}",
            customer_email=self.contact.email.strip(),
            customer_phone=self.contact.phone.strip(),
            signed_at=self.clock(),
        )
        self.step = SIGNED
        return self.summary

    def run(self, configuration: ConfigurationData, contact: ContactData, signature: str) -> OrderSummary:
        """Drive every step from a complete submission."""
        if configuration.selected_stock:
            self.select_unit(configuration.selected_stock)
        else:
            configuration = configuration.model_copy(update={"selected_stock": self.configuration.selected_stock})
        self.configure(configuration)
        self.next()
        self.set_contact(contact)
        self.next()
        return self.sign(signature)
