"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum

from clinic_billing.domain.exceptions import InvalidInputError
from clinic_billing.utils.currency import to_decimal
from clinic_billing.utils.date_utils import parse_calendar_date


class PaymentMethod(str, Enum):
    """How a procedure is settled"""

    CREDIT_CARD = "credit_card"  # deferred, one row per installment
    PIX = "pix"  # immediate, single settlement
    CASH = "cash"  # immediate, single settlement

    @property
    def settles_immediately(self) -> bool:
        return self in (PaymentMethod.PIX, PaymentMethod.CASH)


class InstallmentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    OVERDUE = "overdue"  # derived for display, never stored


@dataclass(frozen=True)
class ScheduleRequest:
    """
    Input of the installment scheduler.

    Values are validated and normalized on construction: the date becomes a
    plain calendar date, the amount a Decimal and the method a PaymentMethod.
    Anything out of range raises InvalidInputError instead of being coerced.
    """

    procedure_date: date
    total_amount: Decimal
    installment_count: int
    payment_method: PaymentMethod

    def __post_init__(self) -> None:
        try:
            procedure_date = parse_calendar_date(self.procedure_date)
        except (TypeError, ValueError) as e:
            raise InvalidInputError(f"Invalid procedure date: {self.procedure_date!r}") from e

        try:
            total_amount = to_decimal(self.total_amount)
        except ValueError as e:
            raise InvalidInputError(f"Invalid total amount: {self.total_amount!r}") from e
        if total_amount < 0:
            raise InvalidInputError(f"Total amount must be non-negative, got {total_amount}")

        count = self.installment_count
        if isinstance(count, bool) or not isinstance(count, int):
            raise InvalidInputError(f"Installment count must be an integer, got {count!r}")
        if count < 1:
            raise InvalidInputError(f"Installment count must be at least 1, got {count}")

        try:
            method = PaymentMethod(self.payment_method)
        except ValueError as e:
            raise InvalidInputError(f"Unknown payment method: {self.payment_method!r}") from e

        # frozen dataclass: normalized values are written through object.__setattr__
        object.__setattr__(self, "procedure_date", procedure_date)
        object.__setattr__(self, "total_amount", total_amount)
        object.__setattr__(self, "payment_method", method)


@dataclass(frozen=True)
class Installment:
    """Single payment in an installment plan"""

    index: int  # 1-based
    due_date: date
    amount: Decimal
    status: InstallmentStatus


@dataclass(frozen=True)
class PatientProcedure:
    """Who was treated and for what; copied onto every installment row"""

    patient_name: str
    cpf: str
    procedure: str
