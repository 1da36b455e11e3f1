"""Aggregations behind the history, dashboard and cash-flow views"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Sequence, Tuple

from clinic_billing.domain.models import InstallmentStatus
from clinic_billing.utils.date_utils import last_n_months, month_key

UNCATEGORIZED = "Sem categoria"


@dataclass
class CashFlowSummary:
    """Totals for one month of expenses and revenues"""

    total_expenses: Decimal
    total_revenues: Decimal
    balance: Decimal
    expenses_by_category: Dict[str, Decimal] = field(default_factory=dict)


def effective_status(status: str, due_date: date, today: date) -> str:
    """Pending installments past their due date read as overdue"""
    if status == InstallmentStatus.PENDING.value and due_date < today:
        return InstallmentStatus.OVERDUE.value
    return status


def group_plans(rows: Sequence[Any]) -> List[List[Any]]:
    """
    Group installment rows into plans.

    Rows belong to the same plan when patient name, procedure date and
    procedure all match. Plans keep the order in which their first row
    appears, rows keep their order inside a plan.
    """
    grouped: Dict[Tuple[str, date, str], List[Any]] = {}
    for row in rows:
        key = (row.patient_name, row.procedure_date, row.procedure)
        grouped.setdefault(key, []).append(row)
    return list(grouped.values())


def sum_amounts(amounts: Iterable[Decimal]) -> Decimal:
    return sum((Decimal(a) for a in amounts), Decimal("0.00"))


def monthly_paid_series(
    payments: Iterable[Tuple[date, Decimal]],
    reference: date,
    months: int = 6,
) -> List[Tuple[str, Decimal]]:
    """
    Paid amount per month for the `months` months ending at `reference`.

    Months with no payment are reported as zero; payments outside the window
    are ignored. Oldest month first.
    """
    totals: Dict[str, Decimal] = {key: Decimal("0.00") for key in last_n_months(reference, months)}
    for due_date, amount in payments:
        key = month_key(due_date)
        if key in totals:
            totals[key] += Decimal(amount)
    return list(totals.items())


def totals_by_category(items: Iterable[Tuple[str | None, Decimal]]) -> Dict[str, Decimal]:
    totals: Dict[str, Decimal] = {}
    for category, amount in items:
        name = category or UNCATEGORIZED
        totals[name] = totals.get(name, Decimal("0.00")) + Decimal(amount)
    return totals


def summarize_cash_flow(
    expenses: Sequence[Tuple[str | None, Decimal]],
    revenues: Sequence[Decimal],
) -> CashFlowSummary:
    """Month totals, balance and per-category expense split"""
    total_expenses = sum_amounts(amount for _, amount in expenses)
    total_revenues = sum_amounts(revenues)
    return CashFlowSummary(
        total_expenses=total_expenses,
        total_revenues=total_revenues,
        balance=total_revenues - total_expenses,
        expenses_by_category=totals_by_category(expenses),
    )
