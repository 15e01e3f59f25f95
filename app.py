import logging
from datetime import datetime
from typing import Dict, Optional

from flask import Flask, jsonify, request

from models.expenses import Expense
from models.financials import daily_report, dashboard_summary, weekly_report
from models.ledger import Ledger
from models.sales import Sale, describe_sale
from utils.business_time import format_date, format_time
from utils.file_manager import ensure_defaults, read_config, write_json
from utils.money import format_currency, parse_cents_input

LOG = logging.getLogger(__name__)

CONFIG_KEYS = {"server", "mcp"}


def sale_from_payload(data: Dict) -> Sale:
    if not isinstance(data, dict):
        raise ValueError("sale must be an object")
    data = dict(data)
    if "total_input" in data:
        data["total"] = parse_cents_input(data.pop("total_input"))
    return Sale.from_dict(data)


def expense_from_payload(data: Dict) -> Expense:
    if not isinstance(data, dict):
        raise ValueError("expense must be an object")
    data = dict(data)
    if "amount_input" in data:
        data["amount"] = parse_cents_input(data.pop("amount_input"))
    return Expense.from_dict(data)


def history_item(record) -> Dict:
    item = record.to_dict()
    item["display_date"] = format_date(record.timestamp)
    item["display_time"] = format_time(record.timestamp)
    if isinstance(record, Sale):
        item["kind"] = "sale"
        item["summary"] = describe_sale(record)
        item["drink_items"] = [{"label": label, "qty": qty} for label, qty in record.drinks.items()]
        item["display_amount"] = format_currency(record.total)
    else:
        item["kind"] = "expense"
        item["summary"] = record.description
        item["display_amount"] = format_currency(-record.amount)
    return item


def create_app(ledger: Optional[Ledger] = None, clock=datetime.now) -> Flask:
    if ledger is None:
        ensure_defaults()
        ledger = Ledger().load()
    app = Flask(__name__)

    def _error(msg: str, status: int = 400):
        return jsonify({"ok": False, "error": msg}), status

    # -------- Dashboard & reports --------
    @app.get("/dashboard")
    def dashboard():
        return jsonify({"ok": True, "dashboard": dashboard_summary(ledger.sales, ledger.expenses, clock())})

    @app.get("/reports/daily")
    def reports_daily():
        return jsonify({"ok": True, "days": daily_report(ledger.sales, ledger.expenses)})

    @app.get("/reports/week")
    def reports_week():
        return jsonify({"ok": True, "week": weekly_report(ledger.sales, ledger.expenses, clock())})

    @app.get("/history")
    def history():
        items = [history_item(r) for r in ledger.history()]
        return jsonify({"ok": True, "count": len(items), "items": items})

    # -------- Sales --------
    @app.post("/sales")
    def sales_add():
        data = request.get_json(force=True, silent=True) or {}
        try:
            sale = ledger.add_sale(sale_from_payload(data))
        except ValueError as e:
            return _error(str(e))
        return jsonify({"ok": True, "sale": sale.to_dict()}), 201

    @app.delete("/sales/<record_id>")
    def sales_delete(record_id):
        return jsonify({"ok": True, "deleted": ledger.delete_sale(record_id)})

    # -------- Expenses --------
    @app.post("/expenses")
    def expenses_add():
        data = request.get_json(force=True, silent=True) or {}
        try:
            expense = ledger.add_expense(expense_from_payload(data))
        except ValueError as e:
            return _error(str(e))
        return jsonify({"ok": True, "expense": expense.to_dict()}), 201

    @app.delete("/expenses/<record_id>")
    def expenses_delete(record_id):
        return jsonify({"ok": True, "deleted": ledger.delete_expense(record_id)})

    # -------- Admin --------
    @app.get("/config")
    def config_get():
        return jsonify({"ok": True, "config": read_config()})

    @app.post("/config")
    def config_update():
        data = request.get_json(force=True, silent=True) or {}
        if not isinstance(data, dict):
            return _error("Provide a JSON object.")
        cfg = read_config()
        # Allow partial updates to top-level keys
        changed = {}
        for k, v in data.items():
            if k in CONFIG_KEYS:
                cfg[k] = v
                changed[k] = v
        write_json("config.json", cfg)
        return jsonify({"ok": True, "changed": changed, "config": cfg})

    @app.post("/reset")
    def reset_all():
        ledger.reset()
        LOG.info("Ledger reset")
        return jsonify({"ok": True})

    return app


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    ensure_defaults()
    server_cfg = read_config().get("server", {})
    create_app().run(
        host=server_cfg.get("host", "0.0.0.0"),
        port=int(server_cfg.get("port", 5000)),
        debug=bool(server_cfg.get("debug", False)),
    )
