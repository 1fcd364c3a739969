"""
Currency conversion and GST helpers.

All results are rounded half-up to 2 decimals, the way amounts are shown on the invoice.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Union

Number = Union[int, float, Decimal]


def round_half_up(value: Number, places: int = 2) -> float:
    """Round to `places` decimals with halves going away from zero"""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def convert_inr_to_usd(amount_inr: Number, rate: Number) -> float:
    if not rate:
        raise ValueError("Conversion rate must be greater than zero")
    return round_half_up(Decimal(str(amount_inr)) / Decimal(str(rate)))


def convert_usd_to_inr(amount_usd: Number, rate: Number) -> float:
    return round_half_up(Decimal(str(amount_usd)) * Decimal(str(rate)))


def calculate_total(hours: Number, hourly_rate: Number) -> float:
    return round_half_up(Decimal(str(hours)) * Decimal(str(hourly_rate)))


def calculate_gst(amount: Number, gst_rate: Number = 18) -> Dict[str, float]:
    """
    Compute GST on an amount

    Args:
        amount: Taxable amount
        gst_rate: GST percentage

    Returns:
        Dict with `gst_amount` and `total_with_gst`
    """
    gst_amount = round_half_up(Decimal(str(amount)) * Decimal(str(gst_rate)) / Decimal(100))
    total_with_gst = round_half_up(Decimal(str(amount)) + Decimal(str(gst_amount)))
    return {"gst_amount": gst_amount, "total_with_gst": total_with_gst}
