"""Charges policy shared by carts and orders: shipping, tax and totals.

Thresholds come from the environment so that deployments can tune them without
a code change. Amounts are in the store currency (VND), kept as floats the way
every monetary field of the domain is stored.
"""

import os
from dataclasses import dataclass
from enum import Enum


class PaymentMethod(Enum):
    COD = "COD"
    VNPAY = "VNPAY"
    MOMO = "MOMO"
    ZALOPAY = "ZALOPAY"


def free_shipping_threshold() -> float:
    return float(os.environ.get("FREE_SHIPPING_THRESHOLD", "500000"))


def flat_shipping_fee() -> float:
    return float(os.environ.get("FLAT_SHIPPING_FEE", "30000"))


def tax_rate() -> float:
    """Fraction of the subtotal charged as tax (0 until tax rules exist)."""
    return float(os.environ.get("TAX_RATE", "0"))


@dataclass(frozen=True)
class Charges:
    subtotal: float
    shipping: float
    tax: float
    total: float


def compute_charges(subtotal: float, has_items: bool = True) -> Charges:
    """Shipping, tax and total for a subtotal.

    Shipping is free at or above the threshold; an empty basket costs nothing.
    """
    if not has_items:
        return Charges(subtotal=0.0, shipping=0.0, tax=0.0, total=0.0)

    shipping = 0.0 if subtotal >= free_shipping_threshold() else flat_shipping_fee()
    tax = round(subtotal * tax_rate(), 2)
    return Charges(
        subtotal=subtotal,
        shipping=shipping,
        tax=tax,
        total=subtotal + shipping + tax,
    )


def parse_payment_method(value) -> PaymentMethod | None:
    """Match a payment method name case-insensitively; None when unsupported."""
    if isinstance(value, PaymentMethod):
        return value
    if not value or not isinstance(value, str):
        return None
    try:
        return PaymentMethod(value.strip().upper())
    except ValueError:
        return None
