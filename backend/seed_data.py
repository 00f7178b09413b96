"""Seed demo data for a local Folklore Garden admin setup.

Creates the reference rows (pricing defaults, staffing formulas), a demo
admin account and three demo staff members. Running it twice is safe:
existing rows are left alone.

Usage:
    cd backend
    python seed_data.py
"""

import os
import sys
from decimal import Decimal

# Ensure the backend package is importable
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from folklore_admin.core.config import settings
from folklore_admin.core.rbac import UserRole
from folklore_admin.core.security import get_password_hash
from folklore_admin.db.base import Base
from folklore_admin.db.session import SessionLocal, engine
from folklore_admin.models import StaffMember, User
from folklore_admin.services.pricing_service import PricingService
from folklore_admin.services.staff_service import ensure_default_formulas

DEMO_ADMIN = {
    "username": "admin",
    "email": "admin@folkloregarden.cz",
    "password": os.environ.get("SEED_ADMIN_PASSWORD", "admin123"),
}

DEMO_STAFF = [
    {
        "first_name": "Jana",
        "last_name": "Nováková",
        "email": "jana.novakova@folkloregarden.cz",
        "phone": "+420 777 111 222",
        "role": "manager",
        "hourly_rate": Decimal("300"),
    },
    {
        "first_name": "Petr",
        "last_name": "Svoboda",
        "email": "petr.svoboda@folkloregarden.cz",
        "phone": "+420 777 333 444",
        "role": "waiter",
        "hourly_rate": Decimal("150"),
    },
    {
        "first_name": "Marie",
        "last_name": "Dvořáková",
        "email": "marie.dvorakova@folkloregarden.cz",
        "phone": "+420 777 555 666",
        "role": "chef",
        "hourly_rate": Decimal("250"),
    },
]


def seed():
    """Insert the demo data."""
    if settings.database_url.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        _seed_all(db)
        db.commit()
        print("Seed data committed successfully.")
    except Exception as e:
        db.rollback()
        print(f"Error seeding data: {e}")
        raise
    finally:
        db.close()


def _seed_all(db):
    # ---------------------------------------------------------------
    # 1. Reference data
    # ---------------------------------------------------------------
    PricingService(db).get_defaults()
    created = ensure_default_formulas(db)
    print(f"  staffing formulas: {created} created")

    # ---------------------------------------------------------------
    # 2. Admin account
    # ---------------------------------------------------------------
    if db.query(User).filter(User.username == DEMO_ADMIN["username"]).first() is None:
        db.add(User(
            username=DEMO_ADMIN["username"],
            email=DEMO_ADMIN["email"],
            password_hash=get_password_hash(DEMO_ADMIN["password"]),
            role=UserRole.ADMIN,
            is_active=True,
        ))
        print(f"  user: {DEMO_ADMIN['username']} (admin)")

    # ---------------------------------------------------------------
    # 3. Staff members
    # ---------------------------------------------------------------
    for member in DEMO_STAFF:
        if db.query(StaffMember).filter(StaffMember.email == member["email"]).first():
            continue
        db.add(StaffMember(**member))
        print(f"  staff: {member['first_name']} {member['last_name']} ({member['role']})")

    db.flush()


if __name__ == "__main__":
    seed()
