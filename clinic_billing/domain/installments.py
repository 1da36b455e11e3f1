"""Installment plan generation for procedure billing"""

from datetime import date
from decimal import Decimal
from typing import List

from clinic_billing.domain.exceptions import InvalidInputError
from clinic_billing.domain.models import (
    Installment,
    InstallmentStatus,
    PaymentMethod,
    ScheduleRequest,
)
from clinic_billing.utils.currency import quantize_cents
from clinic_billing.utils.date_utils import add_days, next_business_day

DEFAULT_INTERVAL_DAYS = 30


def build_schedule(request: ScheduleRequest, interval_days: int = DEFAULT_INTERVAL_DAYS) -> List[Installment]:
    """
    Turn a schedule request into an ordered installment plan.

    Credit card:
    - One installment per requested count, all pending
    - Each due date is the previous (already shifted) due date + 30 days,
      rolled forward past weekends, so shifts accumulate along the plan
    - Amount is total / count rounded to cents; no remainder redistribution,
      see schedule_drift()

    Pix / cash:
    - Exactly one paid installment for the full amount, due on the procedure
      date itself (no weekend shift); the requested count is ignored

    Example:
        2024-03-01, 300.00, 3x credit card →
        [2024-04-01 100.00, 2024-05-01 100.00, 2024-05-31 100.00]
        (2024-03-31 is a Sunday and rolls to Monday)

    Raises:
        InvalidInputError: If a due date would fall past year 9999
    """
    method = request.payment_method

    if method.settles_immediately:
        return [
            Installment(
                index=1,
                due_date=request.procedure_date,
                amount=quantize_cents(request.total_amount),
                status=InstallmentStatus.PAID,
            )
        ]

    if method is PaymentMethod.CREDIT_CARD:
        count = request.installment_count
        amount = installment_amount(request.total_amount, count)

        installments = []
        cursor = request.procedure_date
        for index in range(1, count + 1):
            try:
                cursor = next_business_day(add_days(cursor, interval_days))
            except OverflowError:
                raise InvalidInputError(
                    f"Installment {index} of {count} falls past the last representable date"
                ) from None
            installments.append(
                Installment(
                    index=index,
                    due_date=cursor,
                    amount=amount,
                    status=InstallmentStatus.PENDING,
                )
            )
        return installments

    raise AssertionError(f"Unhandled payment method: {method}")


def generate_installment_plan(
    procedure_date: date | str,
    total_amount: Decimal | int | float | str,
    installment_count: int,
    payment_method: PaymentMethod | str,
    interval_days: int = DEFAULT_INTERVAL_DAYS,
) -> List[Installment]:
    """Validate loose arguments into a ScheduleRequest and build its plan"""
    request = ScheduleRequest(
        procedure_date=procedure_date,
        total_amount=total_amount,
        installment_count=installment_count,
        payment_method=payment_method,
    )
    return build_schedule(request, interval_days=interval_days)


def installment_amount(total_amount: Decimal, installment_count: int) -> Decimal:
    return quantize_cents(total_amount / Decimal(installment_count))


def plan_total(installments: List[Installment]) -> Decimal:
    return sum((inst.amount for inst in installments), Decimal("0.00"))


def schedule_drift(installments: List[Installment], total_amount: Decimal) -> Decimal:
    """
    Difference between the requested total and what the plan actually bills.

    Positive when the plan under-bills (100.00 in 3x → 3 × 33.33, drift 0.01),
    negative when half-up rounding over-bills (0.05 in 3x → 3 × 0.02).
    Never more than (installment_count - 1) cents either way.
    """
    return quantize_cents(total_amount) - plan_total(installments)
