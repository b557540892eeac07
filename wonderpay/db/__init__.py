"""
Database configuration and models.
"""

from wonderpay.db.database import engine, SessionLocal, get_db
from wonderpay.db.models import Base

__all__ = ["engine", "SessionLocal", "get_db", "Base"]
