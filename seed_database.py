"""Script to manually seed the database with reference data and a first SuperAdmin"""
from sqlalchemy import create_engine, select
from sqlalchemy.orm import sessionmaker

from config import settings
from config.database import get_sync_database_url
from db_base import Base
from db_models.department import Department
from db_models.location import Location
from db_models.status_value import StatusValue
from db_models.user import User, UserRole

STATUSES = [
    ("available", "Available", "#40c057"),
    ("in_use", "In Use", "#228be6"),
    ("damaged", "Damaged", "#fa5252"),
    ("repair", "In Repair", "#fd7e14"),
    ("written_off", "Written Off", "#868e96"),
]

DEPARTMENTS = [
    ("Finance", "Finanzen"),
    ("Laboratory", "Labor"),
    ("Facilities", None),
]

LOCATIONS = ["Main Building", "Warehouse"]

SUPERADMIN_EMAIL = "admin@example.com"


def create_tables():
    """Create all database tables"""
    print("Creating database tables...")
    engine = create_engine(get_sync_database_url(settings.DATABASE_URL))
    Base.metadata.create_all(bind=engine)
    print("[OK] Tables created successfully")
    return engine


def seed_reference_data(engine):
    """Seed the status catalog, departments, locations and the first SuperAdmin"""
    Session = sessionmaker(bind=engine)

    with Session() as session:
        existing = set(session.scalars(select(StatusValue.value)))
        for value, label, color in STATUSES:
            if value in existing:
                continue
            session.add(StatusValue(value=value, label=label, color=color))
            print(f"  Added status: {value} ({label})")

        known_departments = set(session.scalars(select(Department.name_native)))
        for name_native, name_alt in DEPARTMENTS:
            if name_native in known_departments:
                continue
            session.add(Department(name_native=name_native, name_alt=name_alt))
            print(f"  Added department: {name_native}")

        known_locations = set(session.scalars(select(Location.name)))
        for name in LOCATIONS:
            if name in known_locations:
                continue
            session.add(Location(name=name))
            print(f"  Added location: {name}")

        admin = session.scalar(select(User).where(User.email == SUPERADMIN_EMAIL))
        if admin is None:
            session.add(User(
                email=SUPERADMIN_EMAIL,
                full_name="System Administrator",
                role=UserRole.SUPER_ADMIN.value,
                is_active=True,
            ))
            print(f"  Added SuperAdmin: {SUPERADMIN_EMAIL}")

        session.commit()

        print("\n[OK] Reference data in place")
        print(f"  Statuses:    {len(session.scalars(select(StatusValue.id)).all())}")
        print(f"  Departments: {len(session.scalars(select(Department.id)).all())}")
        print(f"  Locations:   {len(session.scalars(select(Location.id)).all())}")


if __name__ == "__main__":
    print("=" * 60)
    print("DATABASE SEEDING SCRIPT")
    print("=" * 60)
    engine = create_tables()
    seed_reference_data(engine)
