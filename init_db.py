import argparse
import getpass

from database.database import engine, SessionLocal
from models import models
from models.enums import Role
from utils.auth import hash_password


def init_database(reset=False, bind=None):
    """Create all tables, dropping the existing ones first when ``reset`` is set."""
    bind = bind or engine
    if reset:
        print("Dropping existing tables...")
        models.Base.metadata.drop_all(bind=bind)
    print("Creating database tables...")
    models.Base.metadata.create_all(bind=bind)
    print("Database tables created successfully!")


def create_manager(db, email, display_name, password):
    """Create a manager account, or promote the existing account with that email."""
    email = email.strip().lower()
    user = db.query(models.User).filter(models.User.email == email).first()
    if user:
        user.role = Role.MANAGER
    else:
        user = models.User(
            email=email,
            display_name=display_name,
            role=Role.MANAGER,
            password=hash_password(password)
        )
        db.add(user)
    db.commit()
    db.refresh(user)
    return user


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Initialize the workforce database")
    parser.add_argument("--reset", action="store_true", help="drop all tables before creating them")
    parser.add_argument("--manager-email", help="create (or promote) a manager account with this email")
    parser.add_argument("--manager-name", default="Manager")
    args = parser.parse_args()

    init_database(reset=args.reset)

    if args.manager_email:
        db = SessionLocal()
        try:
            manager = create_manager(db, args.manager_email, args.manager_name, getpass.getpass("Manager password: "))
            print(f"Manager account ready: {manager.email} (id {manager.id})")
        finally:
            db.close()
