"""Data access layer for appointments and cash flow entities"""

import uuid
from datetime import date
from decimal import Decimal
from typing import List, Optional
from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload
from clinic_billing.infrastructure.database.models import (
    Appointment,
    Expense,
    ExpenseCategory,
    Revenue,
    PREDEFINED_EXPENSE_CATEGORIES,
)
from clinic_billing.domain.models import Installment, InstallmentStatus, PatientProcedure, ScheduleRequest
from clinic_billing.domain.exceptions import RecordNotFoundError
from clinic_billing.utils.currency import quantize_cents


class AppointmentRepository:
    """Repository for installment rows of procedure plans"""

    def __init__(self, db: Session):
        self.db = db

    def create_plan(
        self,
        user_id: str,
        patient: PatientProcedure,
        request: ScheduleRequest,
        installments: List[Installment],
    ) -> List[Appointment]:
        """
        Expand a plan into one appointment row per installment.

        Rows are flushed, not committed: the caller owns the transaction so the
        whole plan is stored or none of it is.
        """
        rows = [
            Appointment(
                user_id=user_id,
                patient_name=patient.patient_name,
                cpf=patient.cpf,
                procedure=patient.procedure,
                total_value=quantize_cents(request.total_amount),
                installments=len(installments),
                installment_value=inst.amount,
                procedure_date=request.procedure_date,
                next_payment_date=inst.due_date,
                status=inst.status.value,
                payment_method=request.payment_method.value,
                installment_number=inst.index,
            )
            for inst in installments
        ]
        self.db.add_all(rows)
        self.db.flush()
        return rows

    def delete_plan(self, user_id: str, patient_name: str, procedure_date: date) -> int:
        """Remove every installment of one procedure; returns rows deleted"""
        return (
            self.db.query(Appointment)
            .filter(
                Appointment.user_id == user_id,
                Appointment.patient_name == patient_name,
                Appointment.procedure_date == procedure_date,
            )
            .delete(synchronize_session=False)
        )

    def get(self, user_id: str, appointment_id: uuid.UUID) -> Optional[Appointment]:
        return (
            self.db.query(Appointment)
            .filter(Appointment.id == appointment_id, Appointment.user_id == user_id)
            .first()
        )

    def mark_paid(self, user_id: str, appointment_id: uuid.UUID) -> Appointment:
        """
        Raises:
            RecordNotFoundError: If the installment does not exist for this user
        """
        appointment = self.get(user_id, appointment_id)
        if appointment is None:
            raise RecordNotFoundError(f"Appointment {appointment_id} not found")
        appointment.status = InstallmentStatus.PAID.value
        self.db.flush()
        return appointment

    def search(self, user_id: str, term: str, limit: int = 500) -> List[Appointment]:
        """Match patient name (case-insensitive substring) or exact CPF digits"""
        digits = "".join(ch for ch in term if ch.isdigit())
        conditions = [Appointment.patient_name.ilike(f"%{term}%")]
        if digits:
            conditions.append(Appointment.cpf == digits)

        return (
            self.db.query(Appointment)
            .filter(Appointment.user_id == user_id, or_(*conditions))
            .order_by(Appointment.procedure_date.desc(), Appointment.installment_number.asc())
            .limit(limit)
            .all()
        )

    def upcoming(self, user_id: str, today: date, limit: int = 5) -> List[Appointment]:
        """Pending installments due today or later, soonest first"""
        return (
            self.db.query(Appointment)
            .filter(
                Appointment.user_id == user_id,
                Appointment.status == InstallmentStatus.PENDING.value,
                Appointment.next_payment_date >= today,
            )
            .order_by(Appointment.next_payment_date)
            .limit(limit)
            .all()
        )

    def overdue(self, user_id: str, today: date) -> List[Appointment]:
        return (
            self.db.query(Appointment)
            .filter(
                Appointment.user_id == user_id,
                Appointment.status == InstallmentStatus.PENDING.value,
                Appointment.next_payment_date < today,
            )
            .order_by(Appointment.next_payment_date)
            .all()
        )

    def due_between(
        self,
        user_id: str,
        start: date,
        end: date,
        status: InstallmentStatus | None = None,
    ) -> List[Appointment]:
        """Installments due within [start, end], optionally filtered by status"""
        query = self.db.query(Appointment).filter(
            Appointment.user_id == user_id,
            Appointment.next_payment_date >= start,
            Appointment.next_payment_date <= end,
        )
        if status is not None:
            query = query.filter(Appointment.status == status.value)
        return query.order_by(Appointment.next_payment_date).all()

    def paid_amounts(self, user_id: str) -> List[Decimal]:
        rows = (
            self.db.query(Appointment.installment_value)
            .filter(
                Appointment.user_id == user_id,
                Appointment.status == InstallmentStatus.PAID.value,
            )
            .all()
        )
        return [row.installment_value for row in rows]


class CategoryRepository:
    """Repository for expense categories (shared by all users)"""

    def __init__(self, db: Session):
        self.db = db

    def list_all(self) -> List[ExpenseCategory]:
        return self.db.query(ExpenseCategory).order_by(ExpenseCategory.name).all()

    def get_by_name(self, name: str) -> Optional[ExpenseCategory]:
        return self.db.query(ExpenseCategory).filter(ExpenseCategory.name == name).first()

    def get(self, category_id: uuid.UUID) -> Optional[ExpenseCategory]:
        return self.db.query(ExpenseCategory).filter(ExpenseCategory.id == category_id).first()

    def create_custom(self, name: str) -> ExpenseCategory:
        category = ExpenseCategory(name=name, is_custom=True)
        self.db.add(category)
        self.db.flush()
        return category

    def seed_predefined(self) -> int:
        """Insert missing predefined categories; returns how many were added"""
        existing = {name for (name,) in self.db.query(ExpenseCategory.name).all()}
        missing = [name for name in PREDEFINED_EXPENSE_CATEGORIES if name not in existing]
        self.db.add_all(ExpenseCategory(name=name, is_custom=False) for name in missing)
        self.db.flush()
        return len(missing)


class ExpenseRepository:
    """Repository for expenses"""

    def __init__(self, db: Session):
        self.db = db

    def create(self, user_id: str, **fields) -> Expense:
        expense = Expense(user_id=user_id, **fields)
        self.db.add(expense)
        self.db.flush()
        return expense

    def get(self, user_id: str, expense_id: uuid.UUID) -> Optional[Expense]:
        return (
            self.db.query(Expense)
            .options(joinedload(Expense.category))
            .filter(Expense.id == expense_id, Expense.user_id == user_id)
            .first()
        )

    def update(self, user_id: str, expense_id: uuid.UUID, **fields) -> Expense:
        expense = self.get(user_id, expense_id)
        if expense is None:
            raise RecordNotFoundError(f"Expense {expense_id} not found")
        for name, value in fields.items():
            setattr(expense, name, value)
        self.db.flush()
        return expense

    def delete(self, user_id: str, expense_id: uuid.UUID) -> None:
        expense = self.get(user_id, expense_id)
        if expense is None:
            raise RecordNotFoundError(f"Expense {expense_id} not found")
        self.db.delete(expense)
        self.db.flush()

    def in_period(self, user_id: str, start: date, end: date) -> List[Expense]:
        """Expenses dated within [start, end], newest first, category loaded"""
        return (
            self.db.query(Expense)
            .options(joinedload(Expense.category))
            .filter(Expense.user_id == user_id, Expense.date >= start, Expense.date <= end)
            .order_by(Expense.date.desc())
            .all()
        )


class RevenueRepository:
    """Repository for revenues"""

    def __init__(self, db: Session):
        self.db = db

    def create(self, user_id: str, **fields) -> Revenue:
        revenue = Revenue(user_id=user_id, **fields)
        self.db.add(revenue)
        self.db.flush()
        return revenue

    def get(self, user_id: str, revenue_id: uuid.UUID) -> Optional[Revenue]:
        return (
            self.db.query(Revenue)
            .filter(Revenue.id == revenue_id, Revenue.user_id == user_id)
            .first()
        )

    def update(self, user_id: str, revenue_id: uuid.UUID, **fields) -> Revenue:
        revenue = self.get(user_id, revenue_id)
        if revenue is None:
            raise RecordNotFoundError(f"Revenue {revenue_id} not found")
        for name, value in fields.items():
            setattr(revenue, name, value)
        self.db.flush()
        return revenue

    def delete(self, user_id: str, revenue_id: uuid.UUID) -> None:
        revenue = self.get(user_id, revenue_id)
        if revenue is None:
            raise RecordNotFoundError(f"Revenue {revenue_id} not found")
        self.db.delete(revenue)
        self.db.flush()

    def in_period(self, user_id: str, start: date, end: date) -> List[Revenue]:
        return (
            self.db.query(Revenue)
            .filter(Revenue.user_id == user_id, Revenue.date >= start, Revenue.date <= end)
            .order_by(Revenue.date.desc())
            .all()
        )
