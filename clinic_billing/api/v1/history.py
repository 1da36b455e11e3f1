"""GET /v1/history - Search a client's procedures and installments"""

from datetime import date
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from clinic_billing.api.dependencies import get_today, get_user_id
from clinic_billing.api.v1.helpers import to_history_plans
from clinic_billing.api.v1.schemas import HistoryResponse
from clinic_billing.config import settings
from clinic_billing.infrastructure.database.session import get_db
from clinic_billing.infrastructure.database.repositories import AppointmentRepository

router = APIRouter()


@router.get("/history", response_model=HistoryResponse)
def get_history(
    search: str = Query(..., description="Patient name fragment or CPF"),
    db: Session = Depends(get_db),
    user_id: str = Depends(get_user_id),
    today: date = Depends(get_today),
):
    """
    Find plans by patient name or CPF.

    Returns:
        Plans newest procedure first, installments in order, with overdue
        installments flagged
    """
    term = search.strip()
    if len(term) < settings.history_min_search_length:
        raise HTTPException(
            status_code=422,
            detail=f"Search must have at least {settings.history_min_search_length} characters",
        )

    rows = AppointmentRepository(db).search(user_id, term, limit=settings.history_max_results)

    return HistoryResponse(search=term, plans=to_history_plans(rows, today))
