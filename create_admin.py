#!/usr/bin/env python3
"""
Bootstrap the first super admin.
Run with: python create_admin.py <email> [full name]
The password is read from ADMIN_PASSWORD or prompted for.
"""
import getpass
import os
import sys

from pydantic import ValidationError

from app.database import SessionLocal
from app.exceptions import PortalError
from app.models.admin import AdminRole
from app.schemas.admin import AdminCreate
from app.services.admin_service import create_admin


def main(argv):
    if len(argv) < 2:
        print("Usage: python create_admin.py <email> [full name]")
        return 1

    email = argv[1]
    full_name = " ".join(argv[2:]) or None
    password = os.environ.get("ADMIN_PASSWORD") or getpass.getpass("Password: ")

    try:
        data = AdminCreate(full_name=full_name, email=email, password=password, role=AdminRole.SUPER)
    except ValidationError as e:
        for error in e.errors():
            print(f"✗ {error['loc'][-1]}: {error['msg']}")
        return 1

    db = SessionLocal()
    try:
        admin = create_admin(db, data)
    except PortalError as e:
        print(f"✗ {e.message}")
        return 1
    finally:
        db.close()

    print(f"✅ Super admin created: {admin.email}")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
