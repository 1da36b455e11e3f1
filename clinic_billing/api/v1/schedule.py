"""POST /v1/schedule/preview - installment plan preview, nothing is stored"""

from fastapi import APIRouter, HTTPException

from clinic_billing.api.v1.helpers import to_installment_schema
from clinic_billing.api.v1.schemas import ScheduleRequestSchema, PlanPreviewResponse
from clinic_billing.config import settings
from clinic_billing.domain.exceptions import InvalidInputError
from clinic_billing.domain.installments import build_schedule, schedule_drift
from clinic_billing.domain.models import ScheduleRequest

router = APIRouter()


@router.post("/schedule/preview", response_model=PlanPreviewResponse)
def preview_schedule(request_body: ScheduleRequestSchema):
    """
    Compute the installment plan a new appointment would get.

    Returns:
        Due dates, per-installment amounts and the rounding drift
    """
    try:
        request = ScheduleRequest(
            procedure_date=request_body.procedure_date,
            total_amount=request_body.total_value,
            installment_count=request_body.installments,
            payment_method=request_body.payment_method,
        )
        installments = build_schedule(request, interval_days=settings.installment_interval_days)
    except InvalidInputError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return PlanPreviewResponse(
        payment_method=request.payment_method,
        total_value=request.total_amount,
        installments=[to_installment_schema(inst) for inst in installments],
        drift=schedule_drift(installments, request.total_amount),
    )
