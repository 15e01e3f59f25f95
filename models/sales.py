from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, List, Optional, Tuple

from utils.business_time import parse_millis
from utils.money import parse_money


class PaymentMethod(str, Enum):
    PIX = "Pix"
    CASH = "Dinheiro"


# field name -> (stored JSON key, display label)
DRINK_KINDS = {
    "juice": ("suco", "Suco"),
    "can_soda": ("latinha", "Latinha"),
    "soda_1l": ("refri1l", "Refri 1L"),
    "soda_2l": ("refri2l", "Refri 2L"),
}


def _count(value, name: str) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{name} must be an integer")
    try:
        n = int(value)
    except (TypeError, ValueError, OverflowError):
        raise ValueError(f"{name} must be an integer")
    if n != value and not isinstance(value, str):
        raise ValueError(f"{name} must be an integer")
    if n < 0:
        raise ValueError(f"{name} cannot be negative")
    return n


@dataclass(frozen=True)
class Drinks:
    juice: int = 0
    can_soda: int = 0
    soda_1l: int = 0
    soda_2l: int = 0

    def adjust(self, kind: str, delta: int) -> "Drinks":
        if kind not in DRINK_KINDS:
            raise ValueError(f"Unknown drink: {kind}")
        return replace(self, **{kind: max(0, getattr(self, kind) + int(delta))})

    def units(self) -> int:
        return sum(getattr(self, kind) for kind in DRINK_KINDS)

    def items(self) -> List[Tuple[str, int]]:
        """(label, qty) for every drink that was actually sold."""
        return [
            (label, getattr(self, kind))
            for kind, (_, label) in DRINK_KINDS.items()
            if getattr(self, kind) > 0
        ]

    def to_dict(self) -> Dict[str, int]:
        return {key: getattr(self, kind) for kind, (key, _) in DRINK_KINDS.items()}

    @classmethod
    def from_dict(cls, data: Optional[Dict]) -> "Drinks":
        data = data or {}
        if not isinstance(data, dict):
            raise ValueError("drinks must be an object")
        values = {}
        for kind, (key, _) in DRINK_KINDS.items():
            # accept both the stored key and the field name
            raw = data.get(key, data.get(kind, 0))
            values[kind] = _count(raw, f"drinks.{key}")
        return cls(**values)


@dataclass(frozen=True)
class Sale:
    total: float
    payment_method: PaymentMethod = PaymentMethod.PIX
    skewers: int = 0
    is_complete: bool = False
    drinks: Drinks = field(default_factory=Drinks)
    id: Optional[str] = None
    timestamp: Optional[int] = None
    date: Optional[str] = None

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "date": self.date,
            "skewers": self.skewers,
            "isComplete": self.is_complete,
            "drinks": self.drinks.to_dict(),
            "total": self.total,
            "paymentMethod": self.payment_method.value,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "Sale":
        if not isinstance(data, dict):
            raise ValueError("sale must be an object")
        total = parse_money(data.get("total", 0), "total")
        is_complete = data.get("isComplete", False)
        if not isinstance(is_complete, bool):
            raise ValueError("isComplete must be true or false")
        try:
            method = PaymentMethod(data.get("paymentMethod", PaymentMethod.PIX.value))
        except ValueError:
            raise ValueError(f"Unknown payment method: {data.get('paymentMethod')}")
        timestamp = data.get("timestamp")
        record_id = data.get("id")
        if record_id is not None and not isinstance(record_id, str):
            raise ValueError("id must be a string")
        return cls(
            total=total,
            payment_method=method,
            skewers=_count(data.get("skewers", 0), "skewers"),
            is_complete=is_complete,
            drinks=Drinks.from_dict(data.get("drinks")),
            id=record_id,
            timestamp=parse_millis(timestamp) if timestamp is not None else None,
            date=data.get("date"),
        )


def describe_sale(sale: Sale) -> str:
    noun = "espeto" if sale.skewers == 1 else "espetos"
    text = f"{sale.skewers} {noun}"
    if sale.is_complete:
        text += " completos" if sale.skewers != 1 else " completo"
    return text
