"""
Seed demo capital applications for the Capital dashboard.
Mirrors the three sample businesses shown in the dashboard walkthrough.
"""
import sys
import os
from datetime import datetime

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from wonderpay.db.database import get_db_context, init_db
from wonderpay.db.models import ApplicationStatus, CapitalApplication


def _ts(value):
    return datetime.fromisoformat(value)


DEMO_APPLICATIONS = [
    {
        "id": "app-001",
        "entity_id": "entity-001",
        "status": ApplicationStatus.approved,
        "business_info": {
            "annual_revenue": 500000,
            "years_in_business": 5,
            "industry": "Technology",
            "business_description": "Software development and consulting services",
            "employee_count": 12,
            "current_debt": 75000,
        },
        "financial_info": {
            "monthly_revenue": 42000,
            "monthly_expenses": 35000,
            "outstanding_receivables": 65000,
            "current_cash_balance": 120000,
            "credit_score": 720,
        },
        "loan_request": {
            "amount": 150000,
            "purpose": "Expand office space and hire additional developers",
            "term_months": 36,
            "preferred_monthly_payment": 5000,
        },
        "documents": [
            {
                "id": "doc-001",
                "name": "Financial Statement",
                "type": "financial_statement",
                "date_uploaded": "2025-01-15T10:30:00Z",
                "url": "/mock/financial-statement.pdf",
            },
            {
                "id": "doc-002",
                "name": "Business Plan",
                "type": "business_plan",
                "date_uploaded": "2025-01-15T10:32:00Z",
                "url": "/mock/business-plan.pdf",
            },
        ],
        "notes": "Strong application with solid financials and good business plan.",
        "created_at": _ts("2025-01-15T10:00:00"),
        "updated_at": _ts("2025-02-10T14:30:00"),
        "submitted_at": _ts("2025-01-16T09:15:00"),
        "reviewed_at": _ts("2025-02-01T11:20:00"),
        "approved_at": _ts("2025-02-10T14:30:00"),
    },
    {
        "id": "app-002",
        "entity_id": "entity-002",
        "status": ApplicationStatus.under_review,
        "business_info": {
            "annual_revenue": 250000,
            "years_in_business": 2,
            "industry": "Retail",
            "business_description": "Online boutique store selling handmade crafts",
            "employee_count": 3,
            "current_debt": 15000,
        },
        "financial_info": {
            "monthly_revenue": 21000,
            "monthly_expenses": 18000,
            "outstanding_receivables": 8000,
            "current_cash_balance": 35000,
            "credit_score": 680,
        },
        "loan_request": {
            "amount": 50000,
            "purpose": "Inventory expansion and marketing campaign",
            "term_months": 24,
        },
        "documents": [
            {
                "id": "doc-003",
                "name": "Financial Statement",
                "type": "financial_statement",
                "date_uploaded": "2025-02-20T15:10:00Z",
                "url": "/mock/financials-globex.pdf",
            }
        ],
        "notes": "Promising growth but limited history. Consider offering smaller initial amount.",
        "created_at": _ts("2025-02-20T15:00:00"),
        "updated_at": _ts("2025-02-25T09:30:00"),
        "submitted_at": _ts("2025-02-20T16:45:00"),
        "reviewed_at": _ts("2025-02-25T09:30:00"),
    },
    {
        "id": "app-003",
        "entity_id": "entity-003",
        "status": ApplicationStatus.draft,
        "business_info": {
            "annual_revenue": 180000,
            "years_in_business": 1,
            "industry": "Consulting",
            "business_description": "Independent consulting services",
            "employee_count": 1,
        },
        "financial_info": {
            "monthly_revenue": 15000,
            "monthly_expenses": 8000,
            "outstanding_receivables": 18000,
            "current_cash_balance": 22000,
        },
        "loan_request": {
            "amount": 30000,
            "purpose": "Working capital for project expansion",
            "term_months": 12,
        },
        "created_at": _ts("2025-03-10T11:20:00"),
        "updated_at": _ts("2025-03-10T11:20:00"),
    },
]


def main():
    init_db()

    with get_db_context() as db:
        for data in DEMO_APPLICATIONS:
            existing = db.query(CapitalApplication).filter(
                CapitalApplication.id == data["id"]
            ).first()
            if existing:
                print(f"Application {data['id']} already exists. Skipping.")
                continue

            db.add(CapitalApplication(**data))
            print(f"Seeded application {data['id']} ({data['status'].value})")


if __name__ == "__main__":
    main()
