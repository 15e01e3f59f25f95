import logging
import uuid
from dataclasses import replace
from typing import Callable, Dict, List, Optional, Tuple, Union

from models.expenses import Expense
from models.sales import Sale
from utils.business_time import iso_utc, now_millis
from utils.file_manager import EXPENSES_SLOT, SALES_SLOT, load_records, save_records
from utils.money import is_positive_amount

LOG = logging.getLogger(__name__)

Record = Union[Sale, Expense]


class Ledger:
    """
    In-memory sales and expenses lists, newest first, backed by two storage slots.

    This is the only place the lists change. Every add/delete writes the full
    list back through `save`. The slots are read on first use when `load()` was
    not called explicitly, so a write never clobbers records it has not seen.
    """

    def __init__(
        self,
        load: Callable[[str], List[Dict]] = load_records,
        save: Callable[[str, List[Dict]], None] = save_records,
        clock: Callable[[], int] = now_millis,
        new_id: Callable[[], str] = lambda: str(uuid.uuid4()),
    ):
        self._load = load
        self._save = save
        self._clock = clock
        self._new_id = new_id
        self._sales: List[Sale] = []
        self._expenses: List[Expense] = []
        self._loaded = False

    @property
    def sales(self) -> Tuple[Sale, ...]:
        self._ensure_loaded()
        return tuple(self._sales)

    @property
    def expenses(self) -> Tuple[Expense, ...]:
        self._ensure_loaded()
        return tuple(self._expenses)

    def load(self) -> "Ledger":
        self._sales = _parse(self._load(SALES_SLOT), Sale.from_dict, SALES_SLOT)
        self._expenses = _parse(self._load(EXPENSES_SLOT), Expense.from_dict, EXPENSES_SLOT)
        self._loaded = True
        LOG.info("Loaded %d sales and %d expenses", len(self._sales), len(self._expenses))
        return self

    def add_sale(self, sale: Sale) -> Sale:
        if not is_positive_amount(sale.total):
            raise ValueError("Informe o valor da venda.")
        self._ensure_loaded()
        sale = self._stamp(sale, self._sales)
        self._sales.insert(0, sale)
        self._persist_sales()
        LOG.info("Sale %s recorded: %.2f via %s", sale.id, sale.total, sale.payment_method.value)
        return sale

    def add_expense(self, expense: Expense) -> Expense:
        if not is_positive_amount(expense.amount) or not expense.description.strip():
            raise ValueError("Preencha o valor e a descrição.")
        self._ensure_loaded()
        expense = self._stamp(expense, self._expenses)
        self._expenses.insert(0, expense)
        self._persist_expenses()
        LOG.info("Expense %s recorded: %.2f (%s)", expense.id, expense.amount, expense.type.value)
        return expense

    def delete_sale(self, record_id: str) -> bool:
        self._ensure_loaded()
        kept = [s for s in self._sales if s.id != record_id]
        if len(kept) == len(self._sales):
            return False
        self._sales = kept
        self._persist_sales()
        LOG.info("Sale %s deleted", record_id)
        return True

    def delete_expense(self, record_id: str) -> bool:
        self._ensure_loaded()
        kept = [e for e in self._expenses if e.id != record_id]
        if len(kept) == len(self._expenses):
            return False
        self._expenses = kept
        self._persist_expenses()
        LOG.info("Expense %s deleted", record_id)
        return True

    def history(self) -> List[Record]:
        """Sales and expenses merged, newest first. Equal timestamps keep sales ahead of expenses."""
        self._ensure_loaded()
        merged: List[Record] = [*self._sales, *self._expenses]
        return sorted(merged, key=lambda r: r.timestamp, reverse=True)

    def find(self, record_id: str) -> Optional[Record]:
        for record in self.history():
            if record.id == record_id:
                return record
        return None

    def reset(self):
        self._sales = []
        self._expenses = []
        self._loaded = True
        self._persist_sales()
        self._persist_expenses()

    def _ensure_loaded(self):
        if not self._loaded:
            self.load()

    def _stamp(self, record, existing: list):
        updates = {}
        if not record.id:
            updates["id"] = self._new_id()
        elif any(r.id == record.id for r in existing):
            raise ValueError(f"Registro {record.id} já existe.")
        if record.timestamp is None:
            updates["timestamp"] = self._clock()
        stamped = replace(record, **updates) if updates else record
        if not stamped.date:
            stamped = replace(stamped, date=iso_utc(stamped.timestamp))
        return stamped

    def _persist_sales(self):
        self._save(SALES_SLOT, [s.to_dict() for s in self._sales])

    def _persist_expenses(self):
        self._save(EXPENSES_SLOT, [e.to_dict() for e in self._expenses])


def _parse(rows: List[Dict], from_dict, slot: str) -> list:
    records = []
    seen = set()
    for row in rows:
        try:
            record = from_dict(row)
        except (TypeError, ValueError, OverflowError) as e:
            LOG.warning("Skipping malformed record in %s: %s", slot, e)
            continue
        if not record.id or record.timestamp is None:
            LOG.warning("Skipping record without id or timestamp in %s", slot)
            continue
        if record.id in seen:
            LOG.warning("Skipping duplicate id %s in %s", record.id, slot)
            continue
        seen.add(record.id)
        records.append(record)
    return records
