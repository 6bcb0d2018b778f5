import os
import tempfile
from datetime import datetime, timedelta

import pytest

# Settings are read at import time, so the test environment goes first.
_static_dir = tempfile.mkdtemp(prefix="railtrack-static-")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("IRCEPT_API_KEY", "ircept-test-key")
os.environ.setdefault("IREPS_API_KEY", "ireps-test-key")
os.environ.setdefault("STATIC_DIR", _static_dir)
os.environ.setdefault("LOG_FILE", os.path.join(_static_dir, "test.log"))

from fastapi.testclient import TestClient  # noqa: E402
from sqlmodel import Session, SQLModel  # noqa: E402

from app.db.core import engine  # noqa: E402
from app.db.schema import (  # noqa: E402
    User, UserRole, AccountStatus, TrackFitting, QRCode, QRStatus,
    Inspection, InspectionType, MaintenanceRecord, MaintenanceType
)
from app.main import app  # noqa: E402
from app.services.password import get_password_hash  # noqa: E402
from app.services.user import UserService  # noqa: E402


DEFAULT_PASSWORD = "Track@12345"


@pytest.fixture(autouse=True)
def database():
    SQLModel.metadata.create_all(engine)
    yield
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def session():
    with Session(engine) as session:
        yield session


@pytest.fixture
def client():
    with TestClient(app) as client:
        yield client


@pytest.fixture
def make_user(session):
    counter = {"n": 0}

    def factory(role=UserRole.TECHNICIAN, status=AccountStatus.ACTIVE, **kwargs):
        counter["n"] += 1
        n = counter["n"]
        user = User(
            email=kwargs.pop("email", f"user{n}@ir.gov.in"),
            hashed_password=get_password_hash(DEFAULT_PASSWORD),
            name=kwargs.pop("name", f"Staff Member {n}"),
            employee_id=kwargs.pop("employee_id", f"NR-DLI-{1000 + n}"),
            role=role,
            status=status,
            **kwargs,
        )
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    return factory


def auth_headers(session, user):
    token = UserService(session).generate_access_token(user)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def headers_for(session):
    return lambda user: auth_headers(session, user)


@pytest.fixture
def admin(make_user):
    return make_user(role=UserRole.ADMIN, name="Anita Admin")


@pytest.fixture
def admin_headers(session, admin):
    return auth_headers(session, admin)


@pytest.fixture
def supervisor_headers(session, make_user):
    return auth_headers(session, make_user(role=UserRole.SUPERVISOR))


@pytest.fixture
def technician(make_user):
    return make_user(role=UserRole.TECHNICIAN, name="Tarun Technician")


@pytest.fixture
def technician_headers(session, technician):
    return auth_headers(session, technician)


@pytest.fixture
def viewer_headers(session, make_user):
    return auth_headers(session, make_user(role=UserRole.VIEWER))


@pytest.fixture
def fitting(session):
    fitting = TrackFitting(
        part_number="ERC-MK3-001",
        name="Elastic Rail Clip Mk-III",
        category="Rail Clip",
        manufacturer="Pandrol India",
        material="Spring steel",
        weight_kg=0.9,
        specifications={"toe_load_kn": 11},
    )
    session.add(fitting)
    session.commit()
    session.refresh(fitting)
    return fitting


@pytest.fixture
def make_qr(session, fitting):
    counter = {"n": 0}

    def factory(**kwargs):
        counter["n"] += 1
        values = dict(
            qr_code=f"IR1710166200000{counter['n']:03d}",
            fitting_id=fitting.id,
            zone="Northern",
            division="Delhi",
            section="Delhi-Ambala",
            km_post="125.500",
            status=QRStatus.ACTIVE,
        )
        values.update(kwargs)
        qr = QRCode(**values)
        session.add(qr)
        session.commit()
        session.refresh(qr)
        return qr

    return factory


@pytest.fixture
def add_inspection(session):
    def factory(qr, rating=4, days_ago=0, **kwargs):
        inspection = Inspection(
            qr_code_id=qr.id,
            inspection_type=kwargs.pop("inspection_type", InspectionType.ROUTINE),
            condition_rating=rating,
            inspection_date=datetime.utcnow() - timedelta(days=days_ago),
            **kwargs,
        )
        session.add(inspection)
        session.commit()
        session.refresh(inspection)
        return inspection

    return factory


@pytest.fixture
def add_maintenance(session):
    def factory(qr, days_ago=0, **kwargs):
        record = MaintenanceRecord(
            qr_code_id=qr.id,
            maintenance_type=kwargs.pop(
                "maintenance_type", MaintenanceType.PREVENTIVE),
            work_description=kwargs.pop("work_description", "Re-tightened clips"),
            maintenance_date=datetime.utcnow() - timedelta(days=days_ago),
            **kwargs,
        )
        session.add(record)
        session.commit()
        session.refresh(record)
        return record

    return factory
