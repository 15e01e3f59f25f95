"""
Local MCP server for the food-cart ledger.

Exposes the dashboard, history and reports plus the four record operations
(add/delete sale, add/delete expense) as FastMCP tools. Everything reads and
writes the same local JSON slots the Flask app uses.

Deleting is permanent: callers are expected to confirm with the user before
invoking `delete_sale` / `delete_expense`.
"""
import json
import logging
from datetime import datetime
from typing import Any, Dict, Optional

from fastmcp import FastMCP

from app import expense_from_payload, history_item, sale_from_payload
from models.financials import daily_report, dashboard_summary, weekly_report
from models.ledger import Ledger
from utils.file_manager import ensure_defaults, read_config

LOG = logging.getLogger(__name__)

server_instructions = """
This MCP server gives access to a single food cart's sales and expenses ledger.
Business days run from 06:00 to 05:59 of the next morning; the weekly report
covers Friday 06:00 through Monday 05:59.
"""


def _content(payload: Dict[str, Any]) -> Dict[str, Any]:
    return {"content": [{"type": "text", "text": json.dumps(payload, ensure_ascii=False)}]}


def _parse_arg(arg: Optional[str]) -> Dict[str, Any]:
    data = json.loads(arg) if arg and arg.strip() else {}
    if not isinstance(data, dict):
        raise ValueError("Argument must be a JSON object")
    return data


def create_server(ledger: Optional[Ledger] = None, clock=datetime.now) -> FastMCP:
    if ledger is None:
        ensure_defaults()
        ledger = Ledger().load()
    mcp = FastMCP(name="Food Cart Ledger MCP", instructions=server_instructions)

    @mcp.tool()
    async def dashboard() -> Dict[str, Any]:
        """
        Return the dashboard snapshot.

        Includes all-time sales, expenses and profit, the Pix/cash split,
        today's business-day sales and a 7-point chart of daily sales (oldest
        first, ending today).

        Returns:
            MCP content array with JSON: {"dashboard": {...}}
        """
        return _content({"dashboard": dashboard_summary(ledger.sales, ledger.expenses, clock())})

    @mcp.tool()
    async def history() -> Dict[str, Any]:
        """
        Return every sale and expense merged, newest first.

        Each item carries `kind` ("sale" or "expense"), the stored record
        fields, a display date/time and a one-line `summary`.
        """
        items = [history_item(r) for r in ledger.history()]
        return _content({"count": len(items), "items": items})

    @mcp.tool()
    async def daily_report_tool() -> Dict[str, Any]:
        """Per-business-day totals (sales, pix, cash, expenses, profit), newest day first."""
        return _content({"days": daily_report(ledger.sales, ledger.expenses)})

    @mcp.tool()
    async def weekly_report_tool() -> Dict[str, Any]:
        """Totals for the current Friday-to-Monday business week."""
        return _content({"week": weekly_report(ledger.sales, ledger.expenses, clock())})

    @mcp.tool()
    async def add_sale(arg: str) -> Dict[str, Any]:
        """
        Record a sale.

        The `arg` parameter is a JSON object, for example
        {"total": 25.0, "paymentMethod": "Pix", "skewers": 3, "isComplete": true,
         "drinks": {"suco": 1, "latinha": 0, "refri1l": 0, "refri2l": 0}}.
        `total_input` may be given instead of `total` with the raw typed
        digits ("25,00").

        Edge cases:
            - A total of zero or less is rejected with an `error` payload.
        """
        try:
            sale = ledger.add_sale(sale_from_payload(_parse_arg(arg)))
        except ValueError as e:
            return _content({"error": str(e)})
        return _content({"sale": sale.to_dict()})

    @mcp.tool()
    async def add_expense(arg: str) -> Dict[str, Any]:
        """
        Record an expense.

        The `arg` parameter is a JSON object such as
        {"description": "Carvão", "amount": 40.0, "type": "Gasto Extra"}.
        `type` is "Gasto Extra" (default) or "Capital Inicial".

        Edge cases:
            - Missing description or a non-positive amount returns an `error` payload.
        """
        try:
            expense = ledger.add_expense(expense_from_payload(_parse_arg(arg)))
        except ValueError as e:
            return _content({"error": str(e)})
        return _content({"expense": expense.to_dict()})

    @mcp.tool()
    async def delete_sale(record_id: str) -> Dict[str, Any]:
        """Permanently remove a sale by id. Unknown ids are a no-op (`deleted: false`)."""
        return _content({"deleted": ledger.delete_sale(record_id)})

    @mcp.tool()
    async def delete_expense(record_id: str) -> Dict[str, Any]:
        """Permanently remove an expense by id. Unknown ids are a no-op (`deleted: false`)."""
        return _content({"deleted": ledger.delete_expense(record_id)})

    @mcp.tool()
    async def reset_ledger() -> Dict[str, Any]:
        """Erase all sales and expenses."""
        ledger.reset()
        return _content({"ok": True})

    return mcp


def main():
    logging.basicConfig(level=logging.INFO)
    ensure_defaults()
    cfg = read_config().get("mcp", {})
    host = cfg.get("host", "0.0.0.0")
    port = int(cfg.get("port", 8000))
    server = create_server()
    LOG.info("Starting local MCP server on %s:%s (HTTP)", host, port)
    server.run(transport="http", host=host, port=port, path=cfg.get("path", "/mcp"))


if __name__ == "__main__":
    main()
