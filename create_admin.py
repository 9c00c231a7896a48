import os
import sys

from dotenv import load_dotenv
from sqlalchemy.orm import Session

from services.user_service import create_user, get_user_by_email

load_dotenv()


def create_admin(db: Session, email: str, password: str, first_name: str = "System", last_name: str = "Administrator"):
    """
    Create the admin account if it does not exist yet.

    Returns:
        (user, created)
    """
    existing = get_user_by_email(db, email)
    if existing:
        return existing, False
    user = create_user(
        db,
        email=email,
        password=password,
        first_name=first_name,
        last_name=last_name,
        role="admin",
    )
    return user, True


if __name__ == "__main__":
    from db import SessionLocal, engine
    from models import Base

    email = sys.argv[1] if len(sys.argv) > 1 else os.getenv("ADMIN_EMAIL", "admin@company.com")
    password = sys.argv[2] if len(sys.argv) > 2 else os.getenv("ADMIN_PASSWORD")
    if not password:
        print("Usage: python create_admin.py <email> <password>  (or set ADMIN_EMAIL / ADMIN_PASSWORD)")
        sys.exit(1)

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        user, created = create_admin(db, email, password)
        if created:
            print("Admin user created successfully!")
            print(f"Email: {user.email}")
            print("Change password after first login!")
        else:
            print("Admin user already exists")
            print(f"Email: {user.email}")
    except Exception as e:
        db.rollback()
        print(f"Error: {e}")
        sys.exit(1)
    finally:
        db.close()
