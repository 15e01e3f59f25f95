from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from utils.business_time import parse_millis
from utils.money import parse_money


class ExpenseType(str, Enum):
    INITIAL_CAPITAL = "Capital Inicial"
    EXTRA_EXPENSE = "Gasto Extra"


@dataclass(frozen=True)
class Expense:
    description: str
    amount: float
    type: ExpenseType = ExpenseType.EXTRA_EXPENSE
    id: Optional[str] = None
    timestamp: Optional[int] = None
    date: Optional[str] = None

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "date": self.date,
            "description": self.description,
            "amount": self.amount,
            "type": self.type.value,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "Expense":
        if not isinstance(data, dict):
            raise ValueError("expense must be an object")
        amount = parse_money(data.get("amount", 0), "amount")
        try:
            kind = ExpenseType(data.get("type", ExpenseType.EXTRA_EXPENSE.value))
        except ValueError:
            raise ValueError(f"Unknown expense type: {data.get('type')}")
        timestamp = data.get("timestamp")
        record_id = data.get("id")
        if record_id is not None and not isinstance(record_id, str):
            raise ValueError("id must be a string")
        return cls(
            description=str(data.get("description") or ""),
            amount=amount,
            type=kind,
            id=record_id,
            timestamp=parse_millis(timestamp) if timestamp is not None else None,
            date=data.get("date"),
        )
