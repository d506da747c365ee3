# app/utils/formatting.py

from datetime import date
from decimal import ROUND_HALF_UP, Decimal

RUPEE = "₹"


def format_amount(amount: Decimal) -> str:
    """
    Format a rupee amount the en-IN way, no decimals.
    Example: Decimal("125999") -> "₹1,25,999"
    """
    whole = int(Decimal(amount).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    sign = "-" if whole < 0 else ""
    digits = str(abs(whole))

    # Last three digits, then groups of two (lakh / crore)
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    grouped = ",".join(groups + [tail])

    return f"{sign}{RUPEE}{grouped}"


def format_delivery_date(value: date) -> str:
    """en-IN short date without zero padding, e.g. 26/10/2026."""
    return f"{value.day}/{value.month}/{value.year}"
