"""SQLAlchemy ORM models for appointments and cash flow"""

import uuid
from sqlalchemy import Column, String, Boolean, DateTime, Date, Integer, ForeignKey, Text, Numeric, Uuid
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()

MONEY = Numeric(12, 2)


class Appointment(Base):
    """One installment of a procedure's payment plan"""

    __tablename__ = "appointments"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    patient_name = Column(Text, nullable=False, index=True)
    cpf = Column(String(11), nullable=False, index=True)
    procedure = Column(Text, nullable=False)
    total_value = Column(MONEY, nullable=False)
    installments = Column(Integer, nullable=False, default=1)
    installment_value = Column(MONEY, nullable=False)
    procedure_date = Column(Date, nullable=False)
    next_payment_date = Column(Date, nullable=False, index=True)
    status = Column(Text, nullable=False, default="pending", index=True)
    payment_method = Column(Text, nullable=False, default="credit_card")
    installment_number = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class ExpenseCategory(Base):
    """Expense category, either predefined or created by a user"""

    __tablename__ = "expense_categories"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False, unique=True)
    is_custom = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    expenses = relationship("Expense", back_populates="category")


class Expense(Base):
    __tablename__ = "expenses"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    amount = Column(MONEY, nullable=False)
    date = Column(Date, nullable=False, index=True)
    observations = Column(Text, nullable=True)
    category_id = Column(Uuid, ForeignKey("expense_categories.id"), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    category = relationship("ExpenseCategory", back_populates="expenses")


class Revenue(Base):
    __tablename__ = "revenues"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    description = Column(Text, nullable=False)
    amount = Column(MONEY, nullable=False)
    date = Column(Date, nullable=False, index=True)
    source = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


PREDEFINED_EXPENSE_CATEGORIES = [
    "Contadora",
    "GPS",
    "FGTS",
    "Vale Transporte",
    "Salário Secretária",
    "Fisioterapeuta",
    "Esteticista",
    "Escelsa",
    "Condomínio",
    "Vivo",
    "Claro",
    "Dermamelan",
    "Toxina Botulínica",
    "Preenchedor",
    "Sculptra",
    "Cirúrgica Confiança",
    "Ar Condicionado",
    "CRM",
    "SBCD",
    "SBCD Soc. Bras. Dermatologia",
    "Prefeitura",
    "Hi Doctor",
]
