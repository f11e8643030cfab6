"""
Pytest fixtures for the quotation backend.

Provides:
- A throwaway SQLite database and media directory (set before the app is imported)
- A TestClient running the app lifespan (default catalog seeded)
- Signed-in users and admins as bearer-token headers
- A fixed clock and in-memory catalog/project documents for aggregate tests
"""

import os
import tempfile
import uuid
from datetime import datetime, timedelta, timezone

_TMP = tempfile.mkdtemp(prefix="furniture_quote_tests_")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP, 'test.db')}"
os.environ["MEDIA_DIR"] = os.path.join(_TMP, "media")
os.environ["SEED_DEFAULT_CATALOG"] = "true"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
from fastapi.testclient import TestClient

from core.catalog import MaterialCatalog, MaterialInfo
from core.database import SessionLocal
from crud.user_crud import create_session, create_user
from main import app
from models.catalog import ProjectType
from schemas.project_schema import ProjectDocument
from schemas.user_schema import SessionCreate, UserCreate

FIXED_NOW = datetime(2026, 3, 14, 9, 30, tzinfo=timezone.utc)


@pytest.fixture(scope="session")
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def _sign_in(is_admin: bool = False) -> dict:
    session = SessionLocal()
    try:
        user = create_user(session, UserCreate(email=f"{uuid.uuid4().hex}@example.com",
                                               name="Test User", is_admin=is_admin))
        token = uuid.uuid4().hex
        create_session(session, SessionCreate(
            user_id=user.id,
            token=token,
            expires_at=datetime.now(timezone.utc) + timedelta(days=1),
        ))
        return {"Authorization": f"Bearer {token}"}
    finally:
        session.close()


@pytest.fixture
def auth_headers(client):
    return _sign_in()


@pytest.fixture
def other_headers(client):
    return _sign_in()


@pytest.fixture
def admin_headers(client):
    return _sign_in(is_admin=True)


@pytest.fixture
def kitchen(client, db):
    """The seeded Kitchen type with its materials, keyed by material name."""
    pt = db.query(ProjectType).filter(ProjectType.name == "Kitchen").first()
    return {"id": pt.id, "materials": {m.name: m.id for m in pt.materials}}


@pytest.fixture
def project(client, auth_headers, kitchen):
    r = client.post("/projects/", headers=auth_headers, json={
        "name": "Sharma Kitchen",
        "type_id": kitchen["id"],
        "customer_name": "Anita Sharma",
        "customer_mobile": "9876543210",
        "customer_address": "12 MG Road, Jaipur",
    })
    assert r.status_code == 201, r.text
    return r.json()


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def catalog():
    return MaterialCatalog({
        "oak": MaterialInfo(id="oak", name="Oak Wood", rate_per_sqft=950.0, project_type_id="kitchen"),
        "mdf": MaterialInfo(id="mdf", name="MDF", rate_per_sqft=494.0, project_type_id="bedroom"),
    })


@pytest.fixture
def doc():
    return ProjectDocument(id="proj-000001")
