"""
Employee pricing: discount, financing and accessory totals.

All prices are whole US dollars except monthly payments, which callers round
for display.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, List, Optional

from core.config import settings
from core.converters import round_half_up

DOWN_PAYMENT_RATE = 0.20
FINANCING_MONTHS = 120
EMPLOYEE_APR = 0.0
TYPICAL_APR = 0.0899
ESTIMATE_APR = 0.0525


class UnknownOptionError(ValueError):
    pass


@dataclass(frozen=True)
class AccessoryOption:
    id: str
    name: str
    price: int


# category -> options; the first option in each category is what "nothing selected" means
ACCESSORY_CATALOG: Dict[str, List[AccessoryOption]] = {
    "power_package": [
        AccessoryOption("standard", "Two Standard RV Batteries", 419),
        AccessoryOption("6volt", "Two 6-Volt RV Batteries", 555),
        AccessoryOption("lithium", "Two Upgraded Lithium RV Batteries", 1299),
    ],
    "hitch_package": [
        AccessoryOption("have-hitch", "I Already Have a Hitch", 0),
        AccessoryOption("anti-sway", "Integrated Anti Sway", 600),
    ],
    "brake_control": [
        AccessoryOption("installed", "Already Installed", 0),
        AccessoryOption("wireless", "Wireless Brake Control", 299),
    ],
    "protection_plan": [
        AccessoryOption("none", "No Protection Plan", 0),
        AccessoryOption("tire-wheel", "Tire & Wheel Protection", 899),
        AccessoryOption("extended-service", "Extended Service Contract (5 years)", 2499),
        AccessoryOption("complete-care", "Complete Care (Service + Tire & Wheel + Roadside)", 3499),
    ],
}


def discounted_price(list_price: float, rate: Optional[float] = None) -> int:
    if rate is None:
        rate = settings.employee_discount_rate
    # decimal product keeps exact halves (41970 * 0.85 = 35674.5)
    return round_half_up(Decimal(str(list_price)) * (1 - Decimal(str(rate))))


def monthly_payment(principal: float, annual_rate: float, months: int = FINANCING_MONTHS) -> float:
    """Amortized monthly payment: P * r(1+r)^n / ((1+r)^n - 1), or P / n at 0% APR."""
    if months <= 0:
        raise ValueError("months must be positive")
    if annual_rate == 0:
        return principal / months
    r = annual_rate / 12
    growth = (1 + r) ** months
    return principal * (r * growth) / (growth - 1)


def estimated_monthly_payment(price: float, annual_rate: float = ESTIMATE_APR) -> int:
    loan_amount = price - price * DOWN_PAYMENT_RATE
    return round_half_up(monthly_payment(loan_amount, annual_rate, FINANCING_MONTHS))


def financing_terms(total_price: float) -> Dict:
    down_payment = total_price * DOWN_PAYMENT_RATE
    loan_amount = total_price - down_payment
    return {
        "apr": EMPLOYEE_APR,
        "months": FINANCING_MONTHS,
        "down_payment_rate": DOWN_PAYMENT_RATE,
        "down_payment": round(down_payment, 2),
        "loan_amount": round(loan_amount, 2),
        "monthly_payment": round(monthly_payment(loan_amount, EMPLOYEE_APR, FINANCING_MONTHS), 2),
    }


def savings_breakdown(list_price: float, rate: Optional[float] = None) -> Dict:
    """Price discount plus the interest avoided by employee financing."""
    price = discounted_price(list_price, rate)
    price_savings = list_price - price
    typical_total = monthly_payment(price, TYPICAL_APR, FINANCING_MONTHS) * FINANCING_MONTHS
    employee_total = monthly_payment(price, EMPLOYEE_APR, FINANCING_MONTHS) * FINANCING_MONTHS
    interest_savings = round_half_up(typical_total - employee_total)
    return {
        "list_price": list_price,
        "discounted_price": price,
        "price_savings": price_savings,
        "interest_savings": interest_savings,
        "total_savings": price_savings + interest_savings,
    }


def get_option(category: str, option_id: str) -> AccessoryOption:
    options = ACCESSORY_CATALOG.get(category)
    if options is None:
        raise UnknownOptionError(f"Unknown option category: {category}")
    for option in options:
        if option.id == option_id:
            return option
    raise UnknownOptionError(f"Unknown {category.replace('_', ' ')} option: {option_id}")


def selected_options(options: Dict[str, Optional[str]]) -> List[Dict]:
    """Resolve {category: option_id} into priced lines; None/empty means not selected."""
    lines = []
    for category, option_id in (options or {}).items():
        if not option_id:
            continue
        option = get_option(category, option_id)
        lines.append({"category": category, "id": option.id, "name": option.name, "price": option.price})
    return lines


def calculate_total_price(list_price: float, options: Dict[str, Optional[str]], rate: Optional[float] = None) -> int:
    total = discounted_price(list_price, rate)
    for line in selected_options(options):
        total += line["price"]
    return total
