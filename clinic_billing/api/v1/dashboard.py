"""GET /v1/dashboard - receivables overview"""

from datetime import date
from dateutil.relativedelta import relativedelta
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from clinic_billing.api.dependencies import get_today, get_user_id
from clinic_billing.api.v1.helpers import to_appointment_schema
from clinic_billing.api.v1.schemas import DashboardResponse, MonthlyTotal
from clinic_billing.config import settings
from clinic_billing.domain.models import InstallmentStatus
from clinic_billing.domain.reporting import monthly_paid_series, sum_amounts
from clinic_billing.infrastructure.database.session import get_db
from clinic_billing.infrastructure.database.repositories import AppointmentRepository
from clinic_billing.utils.date_utils import month_bounds

router = APIRouter()


@router.get("/dashboard", response_model=DashboardResponse)
def get_dashboard(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_user_id),
    today: date = Depends(get_today),
):
    """
    Summarize receivables for the current month.

    - upcoming: next pending installments
    - overdue: pending installments already past due
    - month_total: everything due this month, paid or not
    - monthly_paid: paid amount per month over the last few months
    """
    repo = AppointmentRepository(db)
    first_day, last_day = month_bounds(today.year, today.month)

    upcoming = repo.upcoming(user_id, today, limit=settings.upcoming_payments_limit)
    overdue = repo.overdue(user_id, today)
    due_this_month = repo.due_between(user_id, first_day, last_day)
    paid_this_month = [row for row in due_this_month if row.status == InstallmentStatus.PAID.value]

    series_start = (today + relativedelta(months=-(settings.dashboard_months - 1))).replace(day=1)
    paid_recent = repo.due_between(user_id, series_start, last_day, status=InstallmentStatus.PAID)
    series = monthly_paid_series(
        ((row.next_payment_date, row.installment_value) for row in paid_recent),
        reference=today,
        months=settings.dashboard_months,
    )

    return DashboardResponse(
        today=today,
        upcoming=[to_appointment_schema(row, today) for row in upcoming],
        overdue=[to_appointment_schema(row, today) for row in overdue],
        paid_this_month=[to_appointment_schema(row, today) for row in paid_this_month],
        month_total=sum_amounts(row.installment_value for row in due_this_month),
        total_paid=sum_amounts(repo.paid_amounts(user_id)),
        monthly_paid=[MonthlyTotal(month=month, total=total) for month, total in series],
    )
