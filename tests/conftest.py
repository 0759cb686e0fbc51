# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Set test environment before importing app
os.environ["AMANAH_DATABASE_URL"] = "sqlite://"

from amanah.database import get_db
from amanah.main import app
from amanah.models import User
from amanah.models.base import Base
from amanah.security import get_password_hash
from amanah.services import rbac_service
from amanah.services.rbac_seed_service import seed_rbac_data

# Test database setup
engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database for each test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def session_factory(db_session):
    """Session factory bound to the test database, for collaborators that open their own sessions."""
    return TestingSessionLocal


@pytest.fixture(scope="function")
def client(db_session):
    """Create a test client with database override."""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def seeded(db_session):
    """Seed catalog permissions and the default roles."""
    seed_rbac_data(db_session)
    return db_session


def create_user(
    db_session,
    email: str,
    password: str = "Secret123!",
    roles: tuple[str, ...] = (),
    **kwargs,
) -> User:
    """Helper to create a persisted user holding the named roles."""
    user = User(
        email=email,
        hashed_password=get_password_hash(password),
        is_active=kwargs.pop("is_active", True),
        **kwargs,
    )
    db_session.add(user)
    db_session.flush()

    for role_name in roles:
        role = rbac_service.get_role_by_name(db_session, role_name)
        assert role is not None, f"role {role_name} not seeded"
        rbac_service.assign_role_to_user(db_session, user_id=user.id, role_id=role.id)

    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def admin_user(seeded) -> User:
    """Create a user holding the admin role."""
    return create_user(seeded, "admin@example.com", "adminpassword123", roles=("admin",))


@pytest.fixture
def teller_user(seeded) -> User:
    """Create a user holding the teller role."""
    return create_user(seeded, "teller@example.com", "tellerpassword123", roles=("teller",))


@pytest.fixture
def auditor_user(seeded) -> User:
    """Create a user holding the auditor role."""
    return create_user(
        seeded, "auditor@example.com", "auditorpassword123", roles=("auditor",)
    )


def login(client, email: str, password: str) -> dict[str, str]:
    """Sign in through the API and return bearer auth headers."""
    response = client.post(
        "/api/v1/auth/login", json={"email": email, "password": password}
    )
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def admin_headers(client, admin_user) -> dict[str, str]:
    return login(client, "admin@example.com", "adminpassword123")


@pytest.fixture
def teller_headers(client, teller_user) -> dict[str, str]:
    return login(client, "teller@example.com", "tellerpassword123")


@pytest.fixture
def auditor_headers(client, auditor_user) -> dict[str, str]:
    return login(client, "auditor@example.com", "auditorpassword123")
