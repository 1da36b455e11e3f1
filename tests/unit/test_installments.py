"""Unit tests for installment plan generation"""

import pytest
from datetime import date, timedelta
from decimal import Decimal
from clinic_billing.domain.installments import (
    build_schedule,
    generate_installment_plan,
    plan_total,
    schedule_drift,
)
from clinic_billing.domain.models import InstallmentStatus, PaymentMethod, ScheduleRequest
from clinic_billing.domain.exceptions import InvalidInputError


def card_request(procedure_date: date, total: str, count: int) -> ScheduleRequest:
    return ScheduleRequest(
        procedure_date=procedure_date,
        total_amount=Decimal(total),
        installment_count=count,
        payment_method=PaymentMethod.CREDIT_CARD,
    )


def test_credit_card_even_split_with_weekend_shift():
    """Friday procedure: first due date lands on a Sunday and rolls to Monday"""
    plan = build_schedule(card_request(date(2024, 3, 1), "300.00", 3))

    assert [inst.index for inst in plan] == [1, 2, 3]
    assert [inst.amount for inst in plan] == [Decimal("100.00")] * 3
    assert plan[0].due_date == date(2024, 4, 1)  # 2024-03-31 is a Sunday
    assert plan[1].due_date == date(2024, 5, 1)
    assert plan[2].due_date == date(2024, 5, 31)
    assert all(inst.status == InstallmentStatus.PENDING for inst in plan)


def test_credit_card_weekend_shift_compounds():
    """Next due date counts from the shifted date, not from the procedure date"""
    plan = build_schedule(card_request(date(2024, 3, 1), "200.00", 2))

    # Re-anchoring would give 2024-03-01 + 60 days = 2024-04-30
    assert plan[1].due_date == date(2024, 5, 1)
    assert plan[1].due_date == plan[0].due_date + timedelta(days=30)


def test_credit_card_rounding_gap_is_reproduced():
    """100.00 in 3x bills 3 × 33.33 and leaves a cent unbilled"""
    request = card_request(date(2024, 3, 1), "100.00", 3)
    plan = build_schedule(request)

    assert all(inst.amount == Decimal("33.33") for inst in plan)
    assert plan_total(plan) == Decimal("99.99")
    assert schedule_drift(plan, request.total_amount) == Decimal("0.01")


def test_credit_card_rounding_can_over_bill():
    """Half-up rounding of 0.05 / 3 gives 0.02 per installment"""
    request = card_request(date(2024, 3, 1), "0.05", 3)
    plan = build_schedule(request)

    assert plan_total(plan) == Decimal("0.06")
    assert schedule_drift(plan, request.total_amount) == Decimal("-0.01")


def test_credit_card_zero_total():
    plan = build_schedule(card_request(date(2024, 3, 4), "0", 2))

    assert len(plan) == 2
    assert all(inst.amount == Decimal("0.00") for inst in plan)


@pytest.mark.parametrize("method", [PaymentMethod.PIX, PaymentMethod.CASH])
def test_immediate_methods_single_paid_installment(method):
    """Requested count is ignored: one paid installment for the full amount"""
    plan = generate_installment_plan(date(2024, 3, 1), "250.00", 5, method)

    assert len(plan) == 1
    assert plan[0].index == 1
    assert plan[0].amount == Decimal("250.00")
    assert plan[0].status == InstallmentStatus.PAID
    assert plan[0].due_date == date(2024, 3, 1)


def test_pix_on_weekend_keeps_procedure_date():
    """Immediate settlement is same-day even on a Saturday"""
    plan = generate_installment_plan(date(2024, 3, 2), "80.00", 1, "pix")

    assert plan[0].due_date == date(2024, 3, 2)


@pytest.mark.parametrize("count", [0, -1, -12])
def test_non_positive_installment_count_rejected(count):
    with pytest.raises(InvalidInputError):
        card_request(date(2024, 3, 1), "100.00", count)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"procedure_date": "2024-02-30"},
        {"procedure_date": "not a date"},
        {"total_amount": "-0.01"},
        {"total_amount": "abc"},
        {"total_amount": "NaN"},
        {"installment_count": 2.5},
        {"installment_count": True},
        {"payment_method": "boleto"},
    ],
)
def test_invalid_requests_rejected(kwargs):
    """Malformed input raises instead of being coerced"""
    args = {
        "procedure_date": "2024-03-01",
        "total_amount": "100.00",
        "installment_count": 2,
        "payment_method": "credit_card",
    }
    args.update(kwargs)

    with pytest.raises(InvalidInputError):
        generate_installment_plan(**args)


def test_request_normalizes_loose_values():
    request = ScheduleRequest(
        procedure_date="2024-03-01T12:00:00-03:00",
        total_amount=99.9,
        installment_count=1,
        payment_method="cash",
    )

    assert request.procedure_date == date(2024, 3, 1)
    assert request.total_amount == Decimal("99.9")
    assert request.payment_method is PaymentMethod.CASH


@pytest.mark.parametrize("procedure_date", [date(2024, 1, 5), date(2024, 2, 29), date(2024, 6, 8), date(2024, 12, 27)])
@pytest.mark.parametrize("count", [1, 2, 6, 12])
def test_credit_card_plan_properties(procedure_date, count):
    """Length, contiguous indexes, weekday due dates and lower bounds"""
    plan = build_schedule(card_request(procedure_date, "1234.56", count))

    assert len(plan) == count
    assert [inst.index for inst in plan] == list(range(1, count + 1))
    assert all(inst.due_date.weekday() < 5 for inst in plan)
    assert plan[0].due_date >= procedure_date + timedelta(days=30)
    assert plan[-1].due_date >= procedure_date + timedelta(days=30 * count)
    for previous, current in zip(plan, plan[1:]):
        assert current.due_date > previous.due_date


def test_build_schedule_is_deterministic():
    request = card_request(date(2024, 3, 1), "100.00", 4)

    assert build_schedule(request) == build_schedule(request)


def test_custom_interval():
    plan = build_schedule(card_request(date(2024, 3, 4), "100.00", 2), interval_days=14)

    assert plan[0].due_date == date(2024, 3, 18)
    assert plan[1].due_date == date(2024, 4, 1)


@pytest.mark.parametrize(
    "procedure_date, count",
    [
        (date(2024, 3, 1), 200000),
        (date(9999, 12, 15), 1),
    ],
)
def test_due_date_past_calendar_end_rejected(procedure_date, count):
    with pytest.raises(InvalidInputError):
        build_schedule(card_request(procedure_date, "100.00", count))


def test_pix_on_last_calendar_day():
    request = ScheduleRequest(
        procedure_date=date(9999, 12, 31),
        total_amount=Decimal("80.00"),
        installment_count=1,
        payment_method=PaymentMethod.PIX,
    )

    plan = build_schedule(request)

    assert plan[0].due_date == date(9999, 12, 31)
