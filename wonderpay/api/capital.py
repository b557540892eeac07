"""
Capital API endpoints.

Loan pricing for the Capital dashboard plus the capital application
records businesses fill in to request financing.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from wonderpay.calculations.amortization import (
    InvalidArgument,
    calculate,
    coerce_loan_amount,
    coerce_term_months,
)
from wonderpay.config import get_settings
from wonderpay.db.database import get_db
from wonderpay.db.models import ApplicationStatus, CapitalApplication

logger = logging.getLogger(__name__)

router = APIRouter()


# ============================================================================
# LOAN CALCULATION
# ============================================================================


class LoanCalculationRequest(BaseModel):
    """Loan pricing input. Values may be numbers or numeric strings."""

    loan_amount: Any = None
    term_months: Any = None
    interest_rate: Any = None


class AmortizationScheduleEntry(BaseModel):
    """One row of the amortization schedule."""

    payment_number: int
    payment_amount: float
    principal_amount: float
    interest_amount: float
    remaining_balance: float


class LoanCalculationResponse(BaseModel):
    """Priced loan terms."""

    monthly_payment: float
    total_interest: float
    total_repayment: float
    interest_rate: float
    amortization_schedule: List[AmortizationScheduleEntry]


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def price_loan(loan_amount: Any, term_months: Any, interest_rate: Any = None) -> dict:
    """Run the amortization engine, mapping failures to HTTP errors."""
    if _is_blank(interest_rate):
        interest_rate = None

    settings = get_settings()
    try:
        # Cap request size before building the schedule
        coerce_loan_amount(loan_amount)
        if coerce_term_months(term_months) > settings.capital_max_term_months:
            raise InvalidArgument(
                "term_months",
                f"Term months must not exceed {settings.capital_max_term_months}",
            )

        result = calculate(
            loan_amount,
            term_months,
            interest_rate,
            base_rate=settings.capital_base_interest_rate,
        )
    except InvalidArgument as e:
        raise HTTPException(status_code=400, detail=e.message)
    except ArithmeticError:
        logger.exception("Error calculating loan terms")
        raise HTTPException(status_code=500, detail="Failed to calculate loan terms")

    return result.to_dict()


@router.post("/calculate", response_model=LoanCalculationResponse)
async def calculate_loan(inputs: LoanCalculationRequest):
    """Calculate loan terms based on requested amount and duration."""
    if _is_blank(inputs.loan_amount) or _is_blank(inputs.term_months):
        raise HTTPException(
            status_code=400, detail="Loan amount and term months are required"
        )

    return price_loan(inputs.loan_amount, inputs.term_months, inputs.interest_rate)


# ============================================================================
# CAPITAL APPLICATIONS
# ============================================================================


class ApplicationCreate(BaseModel):
    """Schema for creating a capital application."""

    entity_id: Optional[str] = None
    business_info: Optional[Dict[str, Any]] = None
    financial_info: Optional[Dict[str, Any]] = None
    loan_request: Optional[Dict[str, Any]] = None
    documents: Optional[List[Dict[str, Any]]] = None
    notes: Optional[str] = None


class ApplicationUpdate(BaseModel):
    """Schema for updating a capital application."""

    entity_id: Optional[str] = None
    status: Optional[ApplicationStatus] = None
    business_info: Optional[Dict[str, Any]] = None
    financial_info: Optional[Dict[str, Any]] = None
    loan_request: Optional[Dict[str, Any]] = None
    documents: Optional[List[Dict[str, Any]]] = None
    notes: Optional[str] = None


class ApplicationResponse(BaseModel):
    """Schema for capital application response."""

    id: str
    entity_id: str
    status: ApplicationStatus
    business_info: Dict[str, Any]
    financial_info: Dict[str, Any]
    loan_request: Dict[str, Any]
    documents: List[Dict[str, Any]]
    notes: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    submitted_at: Optional[str] = None
    reviewed_at: Optional[str] = None
    approved_at: Optional[str] = None


class Pagination(BaseModel):
    total: int
    limit: int
    offset: int


class ApplicationListResponse(BaseModel):
    """Response for listing capital applications."""

    data: List[ApplicationResponse]
    pagination: Pagination


class ApplicationDetailResponse(BaseModel):
    application: ApplicationResponse


def _isoformat(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def application_to_response(application: CapitalApplication) -> ApplicationResponse:
    """Convert CapitalApplication model to response schema."""
    return ApplicationResponse(
        id=application.id,
        entity_id=application.entity_id,
        status=application.status,
        business_info=application.business_info or {},
        financial_info=application.financial_info or {},
        loan_request=application.loan_request or {},
        documents=application.documents or [],
        notes=application.notes,
        created_at=_isoformat(application.created_at),
        updated_at=_isoformat(application.updated_at),
        submitted_at=_isoformat(application.submitted_at),
        reviewed_at=_isoformat(application.reviewed_at),
        approved_at=_isoformat(application.approved_at),
    )


def _require_entity_id(entity_id: Optional[str]) -> str:
    if _is_blank(entity_id):
        raise HTTPException(status_code=400, detail="Entity ID is required")
    return entity_id.strip()


def _get_application_or_404(db: Session, application_id: str) -> CapitalApplication:
    application = (
        db.query(CapitalApplication)
        .filter(
            CapitalApplication.id == application_id,
            CapitalApplication.is_deleted == False,
        )
        .first()
    )

    if not application:
        raise HTTPException(status_code=404, detail="Application not found")

    return application


def apply_status_change(
    application: CapitalApplication, new_status: ApplicationStatus
) -> None:
    """Move an application to a new status, stamping lifecycle timestamps."""
    if application.status == new_status:
        return

    now = datetime.utcnow()
    if new_status == ApplicationStatus.submitted:
        application.submitted_at = now
    elif new_status in (ApplicationStatus.under_review, ApplicationStatus.rejected):
        application.reviewed_at = now
    elif new_status == ApplicationStatus.approved:
        application.approved_at = now
        if application.reviewed_at is None:
            application.reviewed_at = now

    logger.info(
        f"Application {application.id} status {application.status.value} -> "
        f"{new_status.value}"
    )
    application.status = new_status


@router.get("/applications", response_model=ApplicationListResponse)
async def list_applications(
    limit: Optional[int] = Query(None, ge=1),
    offset: int = Query(0, ge=0),
    status: Optional[ApplicationStatus] = None,
    db: Session = Depends(get_db),
):
    """List capital applications, most recently updated first."""
    settings = get_settings()
    limit = min(
        limit or settings.applications_page_limit,
        settings.applications_max_page_limit,
    )

    try:
        query = db.query(CapitalApplication).filter(
            CapitalApplication.is_deleted == False
        )
        if status:
            query = query.filter(CapitalApplication.status == status)

        total = query.count()
        applications = (
            query.order_by(CapitalApplication.updated_at.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )
    except SQLAlchemyError:
        logger.exception("Error fetching capital applications")
        raise HTTPException(
            status_code=500, detail="Failed to fetch capital applications"
        )

    return ApplicationListResponse(
        data=[application_to_response(a) for a in applications],
        pagination=Pagination(total=total, limit=limit, offset=offset),
    )


@router.post("/applications", response_model=ApplicationResponse, status_code=201)
async def create_application(
    application_data: ApplicationCreate,
    db: Session = Depends(get_db),
):
    """Create a new capital application in draft status."""
    entity_id = _require_entity_id(application_data.entity_id)

    # Omitted sections take the column defaults
    sections = application_data.model_dump(exclude_none=True, exclude={"entity_id"})
    db_application = CapitalApplication(
        entity_id=entity_id,
        status=ApplicationStatus.draft,
        **sections,
    )

    try:
        db.add(db_application)
        db.commit()
        db.refresh(db_application)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error creating capital application")
        raise HTTPException(
            status_code=500, detail="Failed to create capital application"
        )

    logger.info(f"Created capital application {db_application.id} for {entity_id}")
    return application_to_response(db_application)


@router.get("/applications/{application_id}", response_model=ApplicationDetailResponse)
async def get_application(
    application_id: str,
    db: Session = Depends(get_db),
):
    """Get a capital application by ID."""
    application = _get_application_or_404(db, application_id)
    return ApplicationDetailResponse(application=application_to_response(application))


@router.put("/applications/{application_id}", response_model=ApplicationResponse)
async def update_application(
    application_id: str,
    application_data: ApplicationUpdate,
    db: Session = Depends(get_db),
):
    """Update a capital application, merging provided fields over the record."""
    application = _get_application_or_404(db, application_id)
    _require_entity_id(application_data.entity_id)

    # Update only provided fields
    update_data = application_data.model_dump(exclude_unset=True)
    new_status = update_data.pop("status", None)
    update_data["entity_id"] = update_data["entity_id"].strip()

    for field, value in update_data.items():
        setattr(application, field, value)

    if new_status is not None:
        apply_status_change(application, new_status)

    # Bump even when only JSON sections changed
    application.updated_at = datetime.utcnow()

    try:
        db.commit()
        db.refresh(application)
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Error updating capital application {application_id}")
        raise HTTPException(
            status_code=500, detail="Failed to update capital application"
        )

    return application_to_response(application)


@router.delete("/applications/{application_id}")
async def delete_application(
    application_id: str,
    db: Session = Depends(get_db),
):
    """Soft delete a capital application. Only drafts can be deleted."""
    application = _get_application_or_404(db, application_id)

    if application.status != ApplicationStatus.draft:
        raise HTTPException(
            status_code=400, detail="Only draft applications can be deleted"
        )

    application.is_deleted = True
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Error deleting capital application {application_id}")
        raise HTTPException(
            status_code=500, detail="Failed to delete capital application"
        )

    logger.info(f"Deleted capital application {application_id}")
    return {"success": True}


@router.post(
    "/applications/{application_id}/submit", response_model=ApplicationResponse
)
async def submit_application(
    application_id: str,
    db: Session = Depends(get_db),
):
    """Submit a draft application for review."""
    application = _get_application_or_404(db, application_id)

    if application.status != ApplicationStatus.draft:
        raise HTTPException(
            status_code=400, detail="Only draft applications can be submitted"
        )

    apply_status_change(application, ApplicationStatus.submitted)
    application.updated_at = datetime.utcnow()

    try:
        db.commit()
        db.refresh(application)
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Error submitting capital application {application_id}")
        raise HTTPException(
            status_code=500, detail="Failed to submit capital application"
        )

    return application_to_response(application)


@router.get(
    "/applications/{application_id}/quote", response_model=LoanCalculationResponse
)
async def quote_application(
    application_id: str,
    db: Session = Depends(get_db),
):
    """Price the loan requested on an application."""
    application = _get_application_or_404(db, application_id)
    loan_request = application.loan_request or {}

    return price_loan(
        loan_request.get("amount"),
        loan_request.get("term_months"),
        loan_request.get("interest_rate"),
    )
