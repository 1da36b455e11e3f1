"""Cash flow endpoints - monthly summary, expenses, revenues and categories"""

import uuid
import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response
from sqlalchemy.orm import Session

from clinic_billing.api.dependencies import get_request_id, get_user_id
from clinic_billing.api.v1.helpers import to_expense_schema, to_revenue_schema
from clinic_billing.api.v1.schemas import (
    CashFlowResponse,
    CategoryCreateRequest,
    CategorySchema,
    ExpenseRequest,
    ExpenseSchema,
    RevenueRequest,
    RevenueSchema,
)
from clinic_billing.domain.exceptions import DuplicateRecordError, RecordNotFoundError
from clinic_billing.domain.reporting import summarize_cash_flow
from clinic_billing.infrastructure.database.session import get_db, atomic
from clinic_billing.infrastructure.database.repositories import (
    CategoryRepository,
    ExpenseRepository,
    RevenueRepository,
)
from clinic_billing.utils.date_utils import month_bounds, parse_month

router = APIRouter()


def _parse_uuid(value: str, label: str) -> uuid.UUID:
    try:
        return uuid.UUID(value)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid {label} ID format")


def _expense_fields(body: ExpenseRequest, db: Session) -> dict:
    category_id = None
    if body.category_id:
        category_id = _parse_uuid(body.category_id, "category")
        if CategoryRepository(db).get(category_id) is None:
            raise HTTPException(status_code=404, detail="Category not found")
    return {
        "name": body.name,
        "amount": body.amount,
        "date": body.date,
        "observations": body.observations,
        "category_id": category_id,
    }


@router.get("/cashflow", response_model=CashFlowResponse)
def get_cash_flow(
    month: str = Query(..., description="Month as YYYY-MM"),
    db: Session = Depends(get_db),
    user_id: str = Depends(get_user_id),
):
    """
    Expenses and revenues of one month with totals.

    Returns:
        Both lists newest first, totals, balance (revenues - expenses) and
        expenses grouped by category
    """
    try:
        year, month_number = parse_month(month)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    first_day, last_day = month_bounds(year, month_number)

    expenses = [to_expense_schema(e) for e in ExpenseRepository(db).in_period(user_id, first_day, last_day)]
    revenues = [to_revenue_schema(r) for r in RevenueRepository(db).in_period(user_id, first_day, last_day)]

    summary = summarize_cash_flow(
        [(e.category_name, e.amount) for e in expenses],
        [r.amount for r in revenues],
    )

    return CashFlowResponse(
        month=f"{year:04d}-{month_number:02d}",
        expenses=expenses,
        revenues=revenues,
        total_expenses=summary.total_expenses,
        total_revenues=summary.total_revenues,
        balance=summary.balance,
        expenses_by_category=summary.expenses_by_category,
    )


@router.get("/expense-categories", response_model=List[CategorySchema])
def list_categories(db: Session = Depends(get_db)):
    return [
        CategorySchema(id=str(c.id), name=c.name, is_custom=c.is_custom)
        for c in CategoryRepository(db).list_all()
    ]


@router.post("/expense-categories", response_model=CategorySchema, status_code=201)
def create_category(
    request_body: CategoryCreateRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_user_id),
):
    """Add a custom category; names are unique across predefined and custom ones"""
    repo = CategoryRepository(db)
    try:
        with atomic(db):
            if repo.get_by_name(request_body.name) is not None:
                raise DuplicateRecordError(f"Category {request_body.name!r} already exists")
            category = repo.create_custom(request_body.name)
    except DuplicateRecordError as e:
        raise HTTPException(status_code=409, detail=str(e))

    return CategorySchema(id=str(category.id), name=category.name, is_custom=category.is_custom)


@router.post("/expenses", response_model=ExpenseSchema, status_code=201)
def create_expense(
    request_body: ExpenseRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_user_id),
):
    fields = _expense_fields(request_body, db)
    with atomic(db):
        expense = ExpenseRepository(db).create(user_id, **fields)
    return to_expense_schema(expense)


@router.put("/expenses/{expense_id}", response_model=ExpenseSchema)
def update_expense(
    expense_id: str,
    request_body: ExpenseRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_user_id),
):
    expense_uuid = _parse_uuid(expense_id, "expense")
    fields = _expense_fields(request_body, db)
    try:
        with atomic(db):
            expense = ExpenseRepository(db).update(user_id, expense_uuid, **fields)
    except RecordNotFoundError:
        raise HTTPException(status_code=404, detail="Expense not found")
    return to_expense_schema(expense)


@router.delete("/expenses/{expense_id}", status_code=204)
def delete_expense(
    expense_id: str,
    request: Request,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_user_id),
):
    expense_uuid = _parse_uuid(expense_id, "expense")
    try:
        with atomic(db):
            ExpenseRepository(db).delete(user_id, expense_uuid)
    except RecordNotFoundError:
        raise HTTPException(status_code=404, detail="Expense not found")
    logging.info("Expense deleted", extra={"request_id": get_request_id(request), "expense_id": expense_id})
    return Response(status_code=204)


@router.post("/revenues", response_model=RevenueSchema, status_code=201)
def create_revenue(
    request_body: RevenueRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_user_id),
):
    with atomic(db):
        revenue = RevenueRepository(db).create(user_id, **request_body.model_dump())
    return to_revenue_schema(revenue)


@router.put("/revenues/{revenue_id}", response_model=RevenueSchema)
def update_revenue(
    revenue_id: str,
    request_body: RevenueRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_user_id),
):
    revenue_uuid = _parse_uuid(revenue_id, "revenue")
    try:
        with atomic(db):
            revenue = RevenueRepository(db).update(user_id, revenue_uuid, **request_body.model_dump())
    except RecordNotFoundError:
        raise HTTPException(status_code=404, detail="Revenue not found")
    return to_revenue_schema(revenue)


@router.delete("/revenues/{revenue_id}", status_code=204)
def delete_revenue(
    revenue_id: str,
    request: Request,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_user_id),
):
    revenue_uuid = _parse_uuid(revenue_id, "revenue")
    try:
        with atomic(db):
            RevenueRepository(db).delete(user_id, revenue_uuid)
    except RecordNotFoundError:
        raise HTTPException(status_code=404, detail="Revenue not found")
    logging.info("Revenue deleted", extra={"request_id": get_request_id(request), "revenue_id": revenue_id})
    return Response(status_code=204)
