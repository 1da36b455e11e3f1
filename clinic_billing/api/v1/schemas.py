"""Pydantic schemas for API request/response validation"""

import re
from pydantic import BaseModel, Field, field_validator
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional

from clinic_billing.domain.models import PaymentMethod


class ScheduleRequestSchema(BaseModel):
    """Request body for POST /v1/schedule/preview"""

    procedure_date: date
    total_value: Decimal = Field(..., ge=0, description="Procedure total, dot-decimal")
    installments: int = Field(1, ge=1, description="Requested installment count (ignored for pix/cash)")
    payment_method: PaymentMethod = PaymentMethod.CREDIT_CARD


class AppointmentCreateRequest(ScheduleRequestSchema):
    """Request body for POST /v1/appointments"""

    patient_name: str = Field(..., min_length=1)
    cpf: str = Field(..., description="CPF, masked or digits only")
    procedure: str = Field(..., min_length=1)

    @field_validator("cpf")
    @classmethod
    def cpf_digits(cls, value: str) -> str:
        digits = re.sub(r"\D", "", value)
        if len(digits) != 11:
            raise ValueError("CPF must have 11 digits")
        return digits


class AppointmentUpdateRequest(AppointmentCreateRequest):
    """Request body for PUT /v1/appointments/plan

    `original_patient_name` + `procedure_date` identify the plan being reissued;
    the procedure date itself cannot change.
    """

    original_patient_name: str = Field(..., min_length=1)


class InstallmentSchema(BaseModel):
    """Single installment in a plan"""

    installment_number: int
    due_date: date
    due_at: str  # ISO-8601 instant pinned to the clinic's reference hour
    amount: Decimal
    amount_display: str
    status: str


class PlanPreviewResponse(BaseModel):
    """Response for POST /v1/schedule/preview"""

    payment_method: PaymentMethod
    total_value: Decimal
    installments: List[InstallmentSchema]
    drift: Decimal  # total_value minus the sum of installment amounts


class AppointmentSchema(BaseModel):
    """One stored installment row"""

    id: str
    patient_name: str
    cpf: str
    procedure: str
    total_value: Decimal
    installments: int
    installment_value: Decimal
    procedure_date: date
    next_payment_date: date
    status: str
    payment_method: str
    installment_number: int


class AppointmentPlanResponse(BaseModel):
    """Response for POST /v1/appointments and PUT /v1/appointments/plan"""

    patient_name: str
    procedure: str
    procedure_date: date
    payment_method: str
    total_value: Decimal
    drift: Decimal
    appointments: List[AppointmentSchema]


class HistoryPlan(BaseModel):
    """Installments of one procedure"""

    patient_name: str
    cpf: str
    procedure: str
    procedure_date: date
    payment_method: str
    total_value: Decimal
    appointments: List[AppointmentSchema]


class HistoryResponse(BaseModel):
    """Response for GET /v1/history"""

    search: str
    plans: List[HistoryPlan]


class MonthlyTotal(BaseModel):
    month: str  # YYYY-MM
    total: Decimal


class DashboardResponse(BaseModel):
    """Response for GET /v1/dashboard"""

    today: date
    upcoming: List[AppointmentSchema]
    overdue: List[AppointmentSchema]
    paid_this_month: List[AppointmentSchema]
    month_total: Decimal
    total_paid: Decimal
    monthly_paid: List[MonthlyTotal]


class CategorySchema(BaseModel):
    id: str
    name: str
    is_custom: bool


class CategoryCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Category name must not be blank")
        return value


class ExpenseRequest(BaseModel):
    """Request body for POST/PUT /v1/expenses"""

    name: str = Field(..., min_length=1)
    amount: Decimal = Field(..., ge=0)
    date: date
    observations: Optional[str] = None
    category_id: Optional[str] = None


class ExpenseSchema(BaseModel):
    id: str
    name: str
    amount: Decimal
    date: date
    observations: Optional[str] = None
    category_id: Optional[str] = None
    category_name: str


class RevenueRequest(BaseModel):
    """Request body for POST/PUT /v1/revenues"""

    description: str = Field(..., min_length=1)
    amount: Decimal = Field(..., ge=0)
    date: date
    source: str = Field(..., min_length=1)


class RevenueSchema(BaseModel):
    id: str
    description: str
    amount: Decimal
    date: date
    source: str


class CashFlowResponse(BaseModel):
    """Response for GET /v1/cashflow"""

    month: str
    expenses: List[ExpenseSchema]
    revenues: List[RevenueSchema]
    total_expenses: Decimal
    total_revenues: Decimal
    balance: Decimal
    expenses_by_category: Dict[str, Decimal]
