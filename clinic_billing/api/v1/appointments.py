"""Appointment plan endpoints - create, reissue and settle installments"""

import time
import uuid
import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from clinic_billing.api.v1.helpers import to_appointment_schema
from clinic_billing.api.v1.schemas import (
    AppointmentCreateRequest,
    AppointmentPlanResponse,
    AppointmentSchema,
    AppointmentUpdateRequest,
)
from clinic_billing.api.dependencies import get_request_id, get_user_id
from clinic_billing.config import settings
from clinic_billing.infrastructure.database.models import Appointment
from clinic_billing.infrastructure.database.session import get_db, atomic
from clinic_billing.infrastructure.database.repositories import AppointmentRepository
from clinic_billing.domain.installments import build_schedule, schedule_drift
from clinic_billing.domain.models import Installment, PatientProcedure, ScheduleRequest
from clinic_billing.domain.exceptions import InvalidInputError, RecordNotFoundError
from clinic_billing.infrastructure.observability.metrics import (
    record_plan,
    plan_persistence_failures_counter,
    payments_marked_paid_counter,
)
from clinic_billing.infrastructure.observability.logging import log_plan_created, log_schedule_drift

router = APIRouter()


def _plan_for(request_body: AppointmentCreateRequest, request_id: str) -> tuple[ScheduleRequest, List[Installment]]:
    """Validate the request into a ScheduleRequest and build its installments"""
    try:
        schedule_request = ScheduleRequest(
            procedure_date=request_body.procedure_date,
            total_amount=request_body.total_value,
            installment_count=request_body.installments,
            payment_method=request_body.payment_method,
        )
        installments = build_schedule(schedule_request, interval_days=settings.installment_interval_days)
    except InvalidInputError as e:
        raise HTTPException(status_code=422, detail=str(e))

    drift = schedule_drift(installments, schedule_request.total_amount)
    if drift:
        log_schedule_drift(request_id, schedule_request.total_amount, drift, len(installments))

    return schedule_request, installments


def _plan_response(
    schedule_request: ScheduleRequest,
    installments: List[Installment],
    patient: PatientProcedure,
    rows: List[Appointment],
) -> AppointmentPlanResponse:
    return AppointmentPlanResponse(
        patient_name=patient.patient_name,
        procedure=patient.procedure,
        procedure_date=schedule_request.procedure_date,
        payment_method=schedule_request.payment_method.value,
        total_value=schedule_request.total_amount,
        drift=schedule_drift(installments, schedule_request.total_amount),
        appointments=[to_appointment_schema(row) for row in rows],
    )


@router.post("/appointments", response_model=AppointmentPlanResponse, status_code=201)
def create_appointment(
    request_body: AppointmentCreateRequest,
    request: Request,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_user_id),
):
    """
    Schedule a procedure and store its installment plan.

    Flow:
    1. Build the plan (due dates, amounts, initial status)
    2. Expand it into one appointment row per installment
    3. Insert all rows in a single transaction
    """
    start_time = time.time()
    request_id = get_request_id(request)

    schedule_request, installments = _plan_for(request_body, request_id)
    patient = PatientProcedure(
        patient_name=request_body.patient_name,
        cpf=request_body.cpf,
        procedure=request_body.procedure,
    )

    try:
        with atomic(db):
            rows = AppointmentRepository(db).create_plan(user_id, patient, schedule_request, installments)
    except SQLAlchemyError as e:
        plan_persistence_failures_counter.inc()
        logging.error(f"Failed to store installment plan: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Failed to save appointment")

    method = schedule_request.payment_method.value
    drift = schedule_drift(installments, schedule_request.total_amount)
    record_plan(method, len(rows), drifted=bool(drift))
    log_plan_created(
        request_id,
        user_id,
        method,
        len(rows),
        schedule_request.total_amount,
        (time.time() - start_time) * 1000,
    )

    return _plan_response(schedule_request, installments, patient, rows)


@router.put("/appointments/plan", response_model=AppointmentPlanResponse)
def reissue_plan(
    request_body: AppointmentUpdateRequest,
    request: Request,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_user_id),
):
    """
    Replace the whole plan of an existing procedure.

    The old rows (matched by original patient name and procedure date) are
    deleted and the new plan inserted in the same transaction; if either step
    fails the old plan stays as it was.
    """
    request_id = get_request_id(request)

    schedule_request, installments = _plan_for(request_body, request_id)
    patient = PatientProcedure(
        patient_name=request_body.patient_name,
        cpf=request_body.cpf,
        procedure=request_body.procedure,
    )
    repo = AppointmentRepository(db)

    try:
        with atomic(db):
            deleted = repo.delete_plan(user_id, request_body.original_patient_name, request_body.procedure_date)
            if deleted == 0:
                raise RecordNotFoundError(
                    f"No plan for {request_body.original_patient_name!r} on {request_body.procedure_date}"
                )
            rows = repo.create_plan(user_id, patient, schedule_request, installments)
    except RecordNotFoundError as e:
        logging.warning(f"Plan not found: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=404, detail="Plan not found")
    except SQLAlchemyError as e:
        plan_persistence_failures_counter.inc()
        logging.error(f"Failed to reissue installment plan: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Failed to update appointment")

    logging.info(
        "Installment plan reissued",
        extra={"request_id": request_id, "user_id": user_id, "replaced_rows": deleted, "installments": len(rows)},
    )
    return _plan_response(schedule_request, installments, patient, rows)


@router.post("/appointments/{appointment_id}/pay", response_model=AppointmentSchema)
def mark_appointment_paid(
    appointment_id: str,
    request: Request,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_user_id),
):
    """Settle a single installment"""
    try:
        appointment_uuid = uuid.UUID(appointment_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid appointment ID format")

    try:
        with atomic(db):
            appointment = AppointmentRepository(db).mark_paid(user_id, appointment_uuid)
    except RecordNotFoundError:
        raise HTTPException(status_code=404, detail="Appointment not found")

    payments_marked_paid_counter.inc()
    logging.info(
        "Installment marked paid",
        extra={"request_id": get_request_id(request), "appointment_id": appointment_id},
    )
    return to_appointment_schema(appointment)
