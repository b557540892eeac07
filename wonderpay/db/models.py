"""
SQLAlchemy ORM models for the Capital service.
"""

from datetime import datetime
from sqlalchemy import (
    Column,
    String,
    Boolean,
    DateTime,
    JSON,
    Text,
    Enum as SQLEnum,
)
from sqlalchemy.orm import declarative_base
import uuid
import enum


class ApplicationStatus(str, enum.Enum):
    """Capital application lifecycle states."""
    draft = "draft"
    submitted = "submitted"
    under_review = "under_review"
    approved = "approved"
    rejected = "rejected"

Base = declarative_base()


def generate_application_id():
    return f"app-{uuid.uuid4().hex[:12]}"


def default_business_info():
    return {
        "annual_revenue": 0,
        "years_in_business": 0,
        "industry": "",
        "business_description": "",
        "employee_count": 0,
    }


def default_financial_info():
    return {
        "monthly_revenue": 0,
        "monthly_expenses": 0,
        "outstanding_receivables": 0,
        "current_cash_balance": 0,
    }


def default_loan_request():
    return {"amount": 0, "purpose": "", "term_months": 12}


class AuditMixin:
    """Mixin for audit fields on all models."""

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )
    is_deleted = Column(Boolean, default=False, nullable=False)


class CapitalApplication(AuditMixin, Base):
    """A business's application for capital (a term loan)."""

    __tablename__ = "capital_applications"

    id = Column(String, primary_key=True, default=generate_application_id)
    entity_id = Column(String(255), nullable=False, index=True)
    status = Column(
        SQLEnum(ApplicationStatus), default=ApplicationStatus.draft, nullable=False
    )

    # Application sections (stored as JSON, shape owned by the dashboard)
    business_info = Column(JSON, default=default_business_info)
    financial_info = Column(JSON, default=default_financial_info)
    loan_request = Column(JSON, default=default_loan_request)

    # Document metadata only; files live elsewhere
    documents = Column(JSON, default=list)

    notes = Column(Text, nullable=True)

    # Lifecycle timestamps
    submitted_at = Column(DateTime, nullable=True)
    reviewed_at = Column(DateTime, nullable=True)
    approved_at = Column(DateTime, nullable=True)
