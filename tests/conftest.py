"""Shared test fixtures for all test modules."""

import contextlib

import pytest
from sqlalchemy import create_engine, text
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

import couponflow.models  # noqa: F401
from couponflow.core import database as db_module
from couponflow.core.branches import BranchCode
from couponflow.core.database import Base, get_db
from couponflow.models.profile import Profile, ProfileRole
from couponflow.routers.coupons import verify_lockout
from couponflow.schemas.profile import ProfileCreate
from couponflow.services.auth_service import AuthService

# Create an in-memory SQLite engine with StaticPool so all connections
# share the same database state and there are no file-locking issues.
_test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
_TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=_test_engine)

# Shared branch passwords from the default settings
BRANCH_PASSWORDS = {
    "GDXC": "48291",
    "GDXR": "73058",
    "NWXC": "15947",
    "GNXC": "86420",
    "SWXC": "31769",
}

STAFF_PASSWORD = "staff-password"
ADMIN_PASSWORD = "admin-password"


@pytest.fixture(autouse=True)
def setup_database():
    """Create tables before each test and truncate all data after.

    Patches the module-level engine and SessionLocal so all application code
    uses the in-memory test database. Clears data after each test.
    """
    original_engine = db_module.engine
    original_session = db_module.SessionLocal
    db_module.engine = _test_engine
    db_module.SessionLocal = _TestSessionLocal

    Base.metadata.create_all(bind=_test_engine)

    yield
    with _test_engine.connect() as conn:
        conn.execute(text("PRAGMA foreign_keys = OFF"))
        for table in reversed(Base.metadata.sorted_tables):
            with contextlib.suppress(OperationalError):
                conn.execute(table.delete())
        conn.execute(text("PRAGMA foreign_keys = ON"))
        conn.commit()

    db_module.engine = original_engine
    db_module.SessionLocal = original_session


@pytest.fixture(autouse=True)
def _reset_verify_lockout():
    """Ensure the verification lockout is clean before and after every test."""
    verify_lockout.reset()
    yield
    verify_lockout.reset()


@pytest.fixture
def db_session():
    """Create a database session for direct repository testing."""
    gen = get_db()
    db = next(gen)
    try:
        yield db
    finally:
        for _ in gen:
            pass


def _create_profile(
    session: Session,
    email: str,
    password: str,
    role: ProfileRole,
    branch_code: BranchCode | None,
) -> Profile:
    return AuthService(session).register(
        ProfileCreate(
            email=email,
            password=password,
            display_name=email.split("@")[0],
            branch_code=branch_code,
            role=role,
        )
    )


@pytest.fixture
def staff_profile(db_session):
    """A staff account pinned to GDXC."""
    return _create_profile(
        db_session, "staff@gdxc.test", STAFF_PASSWORD, ProfileRole.STAFF, BranchCode.GDXC
    )


@pytest.fixture
def admin_profile(db_session):
    """An admin account without a home branch."""
    return _create_profile(db_session, "admin@hq.test", ADMIN_PASSWORD, ProfileRole.ADMIN, None)


@pytest.fixture
def staff_headers(staff_profile):
    token = AuthService.create_access_token(staff_profile)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(admin_profile):
    token = AuthService.create_access_token(admin_profile)
    return {"Authorization": f"Bearer {token}"}
