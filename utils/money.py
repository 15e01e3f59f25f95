import math
import re
from typing import Iterable, Union

Number = Union[int, float]


def round_money(value: Number) -> float:
    return round(float(value), 2)


def sum_money(values: Iterable[Number]) -> float:
    return round_money(math.fsum(float(v) for v in values))


def format_number(value: Number) -> str:
    # 1234.5 -> "1.234,50"
    text = f"{abs(round_money(value)):,.2f}"
    text = text.replace(",", "_").replace(".", ",").replace("_", ".")
    return f"-{text}" if round_money(value) < 0 else text


def format_currency(value: Number) -> str:
    text = format_number(value)
    if text.startswith("-"):
        return f"-R$ {text[1:]}"
    return f"R$ {text}"


def parse_cents_input(raw) -> float:
    """
    Read an amount the way the entry forms do: keep only the digits and treat
    them as cents, so "12,50" and "1250" are both 12.5.
    """
    digits = re.sub(r"\D", "", str(raw or ""))
    return int(digits or "0") / 100


def parse_money(value, name: str = "amount") -> float:
    """Rounded amount from a stored or submitted value; NaN and infinities are rejected."""
    try:
        amount = float(value)
    except (TypeError, ValueError, OverflowError):
        raise ValueError(f"{name} must be a number")
    if isinstance(value, bool) or not math.isfinite(amount):
        raise ValueError(f"{name} must be a number")
    return round_money(amount)


def is_positive_amount(value: Number) -> bool:
    try:
        return math.isfinite(value) and value > 0
    except (TypeError, OverflowError):
        return False
