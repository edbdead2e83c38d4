"""SuitePulse — Financial Summary Engine."""

from datetime import date
from typing import Any, Dict, List, Optional

from suitepulse.analyzer.periods import parse_day
from suitepulse.models.service_models import ExpenseRecord, InvoiceRecord


def _is_overdue(invoice: InvoiceRecord, today: date) -> bool:
    if invoice.status == "overdue":
        return True
    due = parse_day(invoice.due_date)
    return invoice.status == "pending" and due is not None and due < today


def compute_financial_summary(
    invoices: List[InvoiceRecord],
    expenses: List[ExpenseRecord],
    today: Optional[date] = None,
) -> Dict[str, Any]:
    """Invoice counts and totals, expenses by category, net income."""
    today = today or date.today()

    paid_total = sum(i.total_amount for i in invoices if i.status == "paid")
    outstanding = sum(i.total_amount for i in invoices if i.status != "paid")

    categories: Dict[str, float] = {}
    for e in expenses:
        categories[e.category] = round(categories.get(e.category, 0.0) + e.amount, 2)
    expense_total = sum(e.amount for e in expenses)

    paid_count = sum(1 for i in invoices if i.status == "paid")

    return {
        "invoices": {
            "count": len(invoices),
            "total": round(sum(i.total_amount for i in invoices), 2),
            "paid": paid_count,
            "pending": sum(1 for i in invoices if i.status == "pending"),
            "overdue": sum(1 for i in invoices if _is_overdue(i, today)),
            "outstanding_amount": round(outstanding, 2),
            "payment_completion_rate": (
                round(paid_count / len(invoices) * 100) if invoices else 0
            ),
        },
        "expenses": {
            "count": len(expenses),
            "total": round(expense_total, 2),
            "categories": categories,
        },
        "total_revenue": round(paid_total, 2),
        "net_income": round(paid_total - expense_total, 2),
    }
