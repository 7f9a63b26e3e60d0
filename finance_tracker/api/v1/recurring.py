"""/v1/recurring-templates - recurring transaction templates and their execution"""

import logging
from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response
from sqlalchemy.orm import Session

from finance_tracker.api.v1.schemas import (
    ExecutionResponse,
    ProcessDueResponse,
    RecurringTemplateCreate,
    RecurringTemplateListResponse,
    RecurringTemplateResponse,
    RecurringTemplateUpdate,
)
from finance_tracker.api.v1.transactions import ensure_category_matches_type, record_transaction, to_transaction_response
from finance_tracker.api.dependencies import get_request_id, get_today, parse_uuid
from finance_tracker.config import settings
from finance_tracker.infrastructure.database.session import get_db
from finance_tracker.infrastructure.database.models import RecurringTemplateRecord
from finance_tracker.infrastructure.database.repositories import RecurringTemplateRepository, to_domain_template
from finance_tracker.domain.recurrence import (
    advance_template,
    calculate_next_due_date,
    format_recurrence_details,
    get_overdue_templates,
    get_recurrence_type_label,
    get_upcoming_templates,
    is_due_for_execution,
    is_valid_recurrence_day,
)
from finance_tracker.domain.exceptions import DomainException, InvalidRecurrenceDayError
from finance_tracker.infrastructure.observability.logging import log_template_execution
from finance_tracker.infrastructure.observability.metrics import record_template_execution
from finance_tracker.utils.date_utils import to_date

router = APIRouter()

# Changing any of these invalidates the cached next_due_date
_SCHEDULE_FIELDS = {"recurrence_type", "recurrence_day"}


def to_template_response(record: RecurringTemplateRecord, today: date) -> RecurringTemplateResponse:
    return RecurringTemplateResponse(
        template_id=str(record.id),
        user_id=record.user_id,
        name=record.name,
        description=record.description,
        amount=record.amount,
        category=record.category,
        type=record.type,
        recurrence_type=record.recurrence_type,
        recurrence_day=record.recurrence_day,
        recurrence_label=get_recurrence_type_label(record.recurrence_type),
        recurrence_details=format_recurrence_details(record.recurrence_type, record.recurrence_day),
        last_executed=record.last_executed,
        next_due_date=record.next_due_date,
        is_active=record.is_active,
        auto_execute=record.auto_execute,
        is_due=is_due_for_execution(to_domain_template(record), today),
    )


def _get_owned_template(db: Session, template_id: str, user_id: Optional[str]) -> RecurringTemplateRecord:
    template_uuid = parse_uuid(template_id, "template")

    template = RecurringTemplateRepository(db).get_template(template_uuid, user_id)
    if not template:
        raise HTTPException(status_code=404, detail="Template not found")
    return template


def execute_template(
    db: Session,
    request_id: str,
    record: RecurringTemplateRecord,
    today: date,
    trigger: str,
) -> ExecutionResponse:
    """
    Turn a template into a transaction dated today and advance its schedule.

    The next due date is recomputed from the new last_executed date, so
    several missed periods collapse into a single execution.
    """
    transaction, evaluation = record_transaction(
        db,
        request_id,
        user_id=record.user_id,
        amount=record.amount,
        category=record.category,
        type=record.type,
        transaction_date=today,
        description=record.description or record.name,
        recurring_template_id=record.id,
    )

    last_executed, next_due_date = advance_template(to_domain_template(record), today)
    RecurringTemplateRepository(db).mark_executed(record, to_date(last_executed), to_date(next_due_date))

    record_template_execution(trigger)
    log_template_execution(request_id, record.user_id, str(record.id), last_executed, next_due_date)

    return ExecutionResponse(
        template=to_template_response(record, today),
        transaction=to_transaction_response(transaction),
        budget=evaluation,
    )


@router.post("/recurring-templates", response_model=RecurringTemplateResponse, status_code=201)
def create_template(
    request_body: RecurringTemplateCreate,
    request: Request,
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    """
    Register a recurring income or expense.

    The first due date is derived from the rule and last_executed
    (or today when the template never ran).
    """
    request_id = get_request_id(request)

    try:
        ensure_category_matches_type(request_body.category, request_body.type)

        next_due_date = calculate_next_due_date(
            request_body.recurrence_type,
            request_body.recurrence_day,
            request_body.last_executed,
            today=today,
        )
        repo = RecurringTemplateRepository(db)
        record = repo.create_template(
            user_id=request_body.user_id,
            name=request_body.name,
            description=request_body.description,
            amount=request_body.amount,
            category=request_body.category,
            type=request_body.type,
            recurrence_type=request_body.recurrence_type,
            recurrence_day=request_body.recurrence_day,
            next_due_date=to_date(next_due_date),
            last_executed=request_body.last_executed,
            is_active=request_body.is_active,
            auto_execute=request_body.auto_execute,
        )
        db.commit()

    except DomainException as e:
        db.rollback()
        logging.warning(f"Rejected template: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    return to_template_response(record, today)


@router.get("/recurring-templates", response_model=RecurringTemplateListResponse)
def list_templates(
    user_id: str = Query(..., description="User identifier"),
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    """All templates of a user, active or not, soonest due first"""
    records = RecurringTemplateRepository(db).get_templates_by_user(user_id)
    templates = [to_template_response(r, today) for r in records]
    return RecurringTemplateListResponse(user_id=user_id, templates=templates, count=len(templates))


@router.get("/recurring-templates/due", response_model=RecurringTemplateListResponse)
def list_due_templates(
    user_id: str = Query(..., description="User identifier"),
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    """Active templates whose due date is today or already passed"""
    records = RecurringTemplateRepository(db).get_templates_by_user(user_id, active_only=True)
    domain_templates = [to_domain_template(r) for r in records]
    overdue = {id(t) for t in get_overdue_templates(domain_templates, today)}

    templates = [
        to_template_response(record, today)
        for record, template in zip(records, domain_templates)
        if id(template) in overdue
    ]
    return RecurringTemplateListResponse(user_id=user_id, templates=templates, count=len(templates))


@router.get("/recurring-templates/upcoming", response_model=RecurringTemplateListResponse)
def list_upcoming_templates(
    user_id: str = Query(..., description="User identifier"),
    days: Optional[int] = Query(None, ge=1, le=366, description="Look-ahead window in days"),
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    """Active templates due after today within the look-ahead window"""
    window = days or settings.upcoming_window_days
    records = RecurringTemplateRepository(db).get_templates_by_user(user_id, active_only=True)
    domain_templates = [to_domain_template(r) for r in records]
    upcoming = {id(t) for t in get_upcoming_templates(domain_templates, window, today)}

    templates = [
        to_template_response(record, today)
        for record, template in zip(records, domain_templates)
        if id(template) in upcoming
    ]
    return RecurringTemplateListResponse(user_id=user_id, templates=templates, count=len(templates))


@router.post("/recurring-templates/process-due", response_model=ProcessDueResponse)
def process_due_templates(
    request: Request,
    user_id: str = Query(..., description="User identifier"),
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    """
    Execute every due template of a user that has auto_execute enabled.

    All executions share one database transaction.
    """
    request_id = get_request_id(request)
    records = RecurringTemplateRepository(db).get_templates_by_user(user_id, active_only=True)

    try:
        executed = [
            execute_template(db, request_id, record, today, trigger="scheduled")
            for record in records
            if record.auto_execute and is_due_for_execution(to_domain_template(record), today)
        ]
        db.commit()

    except Exception as e:
        db.rollback()
        logging.error(f"Processing due templates failed: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    return ProcessDueResponse(user_id=user_id, executed=executed, count=len(executed))


@router.get("/recurring-templates/{template_id}", response_model=RecurringTemplateResponse)
def get_template(
    template_id: str,
    user_id: Optional[str] = Query(None, description="Restrict to this owner"),
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    return to_template_response(_get_owned_template(db, template_id, user_id), today)


@router.put("/recurring-templates/{template_id}", response_model=RecurringTemplateResponse)
def update_template(
    template_id: str,
    request_body: RecurringTemplateUpdate,
    request: Request,
    user_id: Optional[str] = Query(None, description="Restrict to this owner"),
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    """
    Partially update a template.

    A changed recurrence rule recomputes next_due_date from last_executed.
    """
    request_id = get_request_id(request)
    record = _get_owned_template(db, template_id, user_id)
    # Explicit nulls only clear recurrence_day; other columns are required
    changes = {
        key: value
        for key, value in request_body.model_dump(exclude_unset=True).items()
        if value is not None or key == "recurrence_day"
    }

    try:
        if "category" in changes or "type" in changes:
            ensure_category_matches_type(
                changes.get("category", record.category),
                changes.get("type", record.type),
            )

        if _SCHEDULE_FIELDS & changes.keys():
            recurrence_type = changes.get("recurrence_type", record.recurrence_type)
            recurrence_day = changes.get("recurrence_day", record.recurrence_day)
            if not is_valid_recurrence_day(recurrence_type, recurrence_day):
                raise InvalidRecurrenceDayError(
                    f"recurrence_day {recurrence_day} is not valid for {recurrence_type} recurrence"
                )

            next_due_date = calculate_next_due_date(
                recurrence_type,
                recurrence_day,
                record.last_executed,
                today=today,
            )
            changes["next_due_date"] = to_date(next_due_date)

        RecurringTemplateRepository(db).update_template(record, **changes)
        db.commit()

    except DomainException as e:
        db.rollback()
        logging.warning(f"Rejected template update: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    return to_template_response(record, today)


@router.delete("/recurring-templates/{template_id}", status_code=204)
def delete_template(
    template_id: str,
    user_id: Optional[str] = Query(None, description="Restrict to this owner"),
    db: Session = Depends(get_db),
):
    record = _get_owned_template(db, template_id, user_id)
    RecurringTemplateRepository(db).delete_template(record)
    db.commit()
    return Response(status_code=204)


@router.post("/recurring-templates/{template_id}/execute", response_model=ExecutionResponse)
def execute_template_now(
    template_id: str,
    request: Request,
    user_id: Optional[str] = Query(None, description="Restrict to this owner"),
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    """
    Execute one template immediately, whether or not it is due.

    Returns:
        The created transaction, the advanced template and, for expenses,
        the budget evaluation it triggered
    """
    request_id = get_request_id(request)
    record = _get_owned_template(db, template_id, user_id)
    if not record.is_active:
        raise HTTPException(status_code=409, detail="Template is inactive")

    try:
        result = execute_template(db, request_id, record, today, trigger="manual")
        db.commit()

    except DomainException as e:
        db.rollback()
        logging.warning(f"Template execution rejected: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    return result
