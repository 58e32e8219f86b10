"""
Pricing calculator for quotes and invoices.

Totals are computed with ``Decimal`` held to cents:

    line_total = quantity * unit_price      (rounded to cents)
    subtotal   = sum(line_total)
    tax        = subtotal * tax_rate / 100  (rounded to cents)
    total      = subtotal + tax

Items with a missing or zero quantity/price contribute 0 but are still
counted. A tax rate that does not parse as a number is treated as 0.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Dict, Iterable

CENT = Decimal("0.01")
ZERO = Decimal("0.00")
HUNDRED = Decimal("100")

# Largest accepted input amounts; a maximal line total still fits the decimal context
MAX_AMOUNT = Decimal("1000000000000")
MAX_QUANTITY = Decimal("1000000")


def to_decimal(value: Any) -> Decimal:
    """Best-effort conversion; anything unusable becomes 0"""
    if value is None or isinstance(value, bool):
        return Decimal(0)
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, float):
        result = Decimal(str(value))
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, str):
        try:
            result = Decimal(value.strip())
        except InvalidOperation:
            return Decimal(0)
    else:
        return Decimal(0)
    if not result.is_finite():
        return Decimal(0)
    return result


def to_cents(value: Decimal) -> Decimal:
    """Round to cents; raises ValueError when the value has too many digits to hold"""
    try:
        return value.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation as e:
        raise ValueError(f"{value} is too large to round to cents") from e


def parse_tax_rate(value: Any) -> Decimal:
    """Tax rate as a percentage, e.g. "7.75" -> Decimal("7.75")"""
    return to_decimal(value)


def _field(item: Any, name: str) -> Any:
    if isinstance(item, dict):
        return item.get(name)
    return getattr(item, name, None)


def line_total(item: Any) -> Decimal:
    quantity = to_decimal(_field(item, "quantity"))
    unit_price = to_decimal(_field(item, "unit_price"))
    return to_cents(quantity * unit_price)


@dataclass(frozen=True)
class Totals:
    subtotal: Decimal
    tax: Decimal
    total: Decimal

    def as_dict(self) -> Dict[str, Decimal]:
        return {"subtotal": self.subtotal, "tax": self.tax, "total": self.total}


def calculate_totals(items: Iterable[Any], tax_rate: Any) -> Totals:
    """Derive subtotal/tax/total from line items and a percentage tax rate.

    Args:
        items: LineItem models or plain mappings with quantity/unit_price
        tax_rate: percentage as a number or decimal string

    Returns:
        Totals with every amount held to cents
    """
    subtotal = sum((line_total(item) for item in items), ZERO)
    rate = parse_tax_rate(tax_rate)
    tax = to_cents(subtotal * rate / HUNDRED)
    return Totals(subtotal=subtotal, tax=tax, total=subtotal + tax)
