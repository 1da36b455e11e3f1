"""Mappers from ORM rows and domain objects to API schemas"""

from datetime import date
from typing import List

from clinic_billing.api.v1.schemas import (
    AppointmentSchema,
    ExpenseSchema,
    HistoryPlan,
    InstallmentSchema,
    RevenueSchema,
)
from clinic_billing.config import settings
from clinic_billing.domain.models import Installment
from clinic_billing.domain.reporting import UNCATEGORIZED, effective_status, group_plans
from clinic_billing.infrastructure.database.models import Appointment, Expense, Revenue
from clinic_billing.utils.currency import format_currency
from clinic_billing.utils.date_utils import to_iso_instant


def to_installment_schema(installment: Installment) -> InstallmentSchema:
    return InstallmentSchema(
        installment_number=installment.index,
        due_date=installment.due_date,
        due_at=to_iso_instant(installment.due_date, settings.clinic_timezone, settings.reference_hour),
        amount=installment.amount,
        amount_display=format_currency(installment.amount, symbol=True),
        status=installment.status.value,
    )


def to_appointment_schema(row: Appointment, today: date | None = None) -> AppointmentSchema:
    status = effective_status(row.status, row.next_payment_date, today) if today else row.status
    return AppointmentSchema(
        id=str(row.id),
        patient_name=row.patient_name,
        cpf=row.cpf,
        procedure=row.procedure,
        total_value=row.total_value,
        installments=row.installments,
        installment_value=row.installment_value,
        procedure_date=row.procedure_date,
        next_payment_date=row.next_payment_date,
        status=status,
        payment_method=row.payment_method,
        installment_number=row.installment_number,
    )


def to_history_plans(rows: List[Appointment], today: date) -> List[HistoryPlan]:
    plans = []
    for group in group_plans(rows):
        first = group[0]
        plans.append(
            HistoryPlan(
                patient_name=first.patient_name,
                cpf=first.cpf,
                procedure=first.procedure,
                procedure_date=first.procedure_date,
                payment_method=first.payment_method,
                total_value=first.total_value,
                appointments=[to_appointment_schema(row, today) for row in group],
            )
        )
    return plans


def to_expense_schema(expense: Expense) -> ExpenseSchema:
    return ExpenseSchema(
        id=str(expense.id),
        name=expense.name,
        amount=expense.amount,
        date=expense.date,
        observations=expense.observations,
        category_id=str(expense.category_id) if expense.category_id else None,
        category_name=expense.category.name if expense.category else UNCATEGORIZED,
    )


def to_revenue_schema(revenue: Revenue) -> RevenueSchema:
    return RevenueSchema(
        id=str(revenue.id),
        description=revenue.description,
        amount=revenue.amount,
        date=revenue.date,
        source=revenue.source,
    )
