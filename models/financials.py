from typing import Dict, Iterable, List

from models.expenses import Expense
from models.sales import PaymentMethod, Sale
from utils.business_time import (
    DAY_MS,
    Moment,
    business_day_start,
    current_week_range,
    format_date,
    trailing_business_days,
    weekday_initial,
)
from utils.money import round_money, sum_money


def _totals(sales: List[Sale], expenses: List[Expense]) -> Dict[str, float]:
    gross = sum_money(s.total for s in sales)
    spent = sum_money(e.amount for e in expenses)
    return {
        "sales": gross,
        "pix": sum_money(s.total for s in sales if s.payment_method == PaymentMethod.PIX),
        "cash": sum_money(s.total for s in sales if s.payment_method == PaymentMethod.CASH),
        "expenses": spent,
        "profit": round_money(gross - spent),
    }


def bucket_totals(sales: Iterable[Sale], expenses: Iterable[Expense], day_start: int) -> Dict[str, float]:
    """Totals for records whose timestamp falls in [day_start, day_start + 24h)."""
    end = day_start + DAY_MS
    return _totals(
        [s for s in sales if day_start <= s.timestamp < end],
        [e for e in expenses if day_start <= e.timestamp < end],
    )


def daily_report(sales: Iterable[Sale], expenses: Iterable[Expense]) -> List[Dict]:
    """One row per business day that has any record, newest day first."""
    days: Dict[int, Dict[str, list]] = {}
    for s in sales:
        days.setdefault(business_day_start(s.timestamp), {"sales": [], "expenses": []})["sales"].append(s)
    for e in expenses:
        days.setdefault(business_day_start(e.timestamp), {"sales": [], "expenses": []})["expenses"].append(e)
    rows = []
    for day in sorted(days, reverse=True):
        row = {"day_start": day, "date": format_date(day)}
        row.update(_totals(days[day]["sales"], days[day]["expenses"]))
        rows.append(row)
    return rows


def trailing_week_chart(sales: Iterable[Sale], now: Moment) -> List[Dict]:
    sales = list(sales)
    points = []
    for day in trailing_business_days(now, 7):
        end = day + DAY_MS
        points.append({
            "day_start": day,
            "date": format_date(day),
            "label": weekday_initial(day),
            "total": sum_money(s.total for s in sales if day <= s.timestamp < end),
        })
    return points


def range_totals(sales: Iterable[Sale], expenses: Iterable[Expense], start: int, end: int) -> Dict[str, float]:
    """Totals for records with start <= timestamp <= end."""
    return _totals(
        [s for s in sales if start <= s.timestamp <= end],
        [e for e in expenses if start <= e.timestamp <= end],
    )


def weekly_report(sales: Iterable[Sale], expenses: Iterable[Expense], now: Moment) -> Dict:
    week = current_week_range(now)
    report = {
        "start": week["start"],
        "end": week["end"],
        "start_date": format_date(week["start"]),
        "end_date": format_date(week["end"]),
    }
    report.update(range_totals(sales, expenses, week["start"], week["end"]))
    return report


def dashboard_summary(sales: Iterable[Sale], expenses: Iterable[Expense], now: Moment) -> Dict:
    sales = list(sales)
    expenses = list(expenses)
    today = business_day_start(now)
    summary = _totals(sales, expenses)
    summary["today_sales"] = sum_money(s.total for s in sales if s.timestamp >= today)
    summary["business_day_start"] = today
    summary["chart"] = trailing_week_chart(sales, now)
    return summary
