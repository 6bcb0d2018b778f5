import os

from loguru import logger
from sqlmodel import Session, SQLModel, select
from app.db.core import engine
from app.db.schema import TrackFitting, User, UserRole, AccountStatus
from app.services.password import get_password_hash


# 1. Catalog entries every installation starts with
DEFAULT_FITTINGS = [
    {
        "part_number": "ERC-MK3-001",
        "name": "Elastic Rail Clip Mk-III",
        "category": "Rail Clip",
        "manufacturer": "Pandrol India",
        "material": "Silico-manganese spring steel",
        "weight_kg": 0.9,
        "dimensions": {"length_mm": 115, "diameter_mm": 20},
        "specifications": {"toe_load_kn": 11, "rdso_drawing": "T-3701"},
        "safety_standards": ["IRS T-31", "RDSO/M&C"],
    },
    {
        "part_number": "LNR-PAD-002",
        "name": "Metal Liner",
        "category": "Liner",
        "manufacturer": "Jindal Rail Infra",
        "material": "Mild steel",
        "weight_kg": 0.25,
        "dimensions": {"thickness_mm": 6},
        "specifications": {"rdso_drawing": "T-3711"},
        "safety_standards": ["IRS T-44"],
    },
    {
        "part_number": "GFN-LNR-003",
        "name": "GFN Liner",
        "category": "Liner",
        "manufacturer": "Avadh Rail Infra",
        "material": "Glass-filled nylon 66",
        "weight_kg": 0.08,
        "dimensions": {"thickness_mm": 6},
        "specifications": {"glass_fibre_pct": 30},
        "safety_standards": ["RDSO/SPN/211"],
    },
    {
        "part_number": "RP-GRSP-004",
        "name": "Grooved Rubber Sole Plate",
        "category": "Rail Pad",
        "manufacturer": "Raychem RPG",
        "material": "EVA / rubber compound",
        "weight_kg": 0.3,
        "dimensions": {"thickness_mm": 6, "width_mm": 140},
        "specifications": {"static_stiffness_kn_mm": 100},
        "safety_standards": ["RDSO/SPN/189"],
    },
]

# 2. Bootstrap administrator (override through the environment)
ADMIN_EMAIL = os.getenv("SEED_ADMIN_EMAIL", "admin@railtrack.local")
ADMIN_PASSWORD = os.getenv("SEED_ADMIN_PASSWORD", "ChangeMe123!")
ADMIN_EMPLOYEE_ID = os.getenv("SEED_ADMIN_EMPLOYEE_ID", "IR-ADMIN-001")


def seed_fittings(session: Session):
    """Creates catalog entries that don't exist yet, keyed by part number."""
    logger.info("--- Seeding Track Fittings ---")

    for data in DEFAULT_FITTINGS:
        fitting = session.exec(select(TrackFitting).where(
            TrackFitting.part_number == data["part_number"])).first()
        if not fitting:
            session.add(TrackFitting(**data))
            logger.info(f"Created Fitting: {data['part_number']}")
        else:
            logger.info(f"Existing Fitting: {data['part_number']}")


def seed_admin(session: Session):
    logger.info("--- Seeding Administrator ---")

    admin = session.exec(select(User).where(User.email == ADMIN_EMAIL)).first()
    if admin:
        logger.info(f"Existing Admin: {ADMIN_EMAIL}")
        return

    session.add(User(
        email=ADMIN_EMAIL,
        hashed_password=get_password_hash(ADMIN_PASSWORD),
        name="System Administrator",
        employee_id=ADMIN_EMPLOYEE_ID,
        role=UserRole.ADMIN,
        status=AccountStatus.ACTIVE,
    ))
    logger.info(f"Created Admin: {ADMIN_EMAIL}")


def main():
    # Ensure tables exist when running without Alembic (local SQLite)
    SQLModel.metadata.create_all(engine)

    with Session(engine) as session:
        try:
            seed_admin(session)
            seed_fittings(session)

            session.commit()
            logger.info("Database seeding completed successfully.")

        except Exception as e:
            session.rollback()
            logger.error(f"Seeding failed: {e}")
            raise e


if __name__ == "__main__":
    main()
