"""
Shared test setup: in-memory database, app client and login helpers
"""

import os

os.environ.setdefault("TOKEN_SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
# Secure cookies are never replayed over http://testserver, so only explicit Cookie headers authenticate
os.environ["COOKIE_SECURE"] = "true"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from clinic_api.auth.auth_handler import COOKIE_NAME
from clinic_api.database import Base, get_db
from main import app

# Test database setup
SQLALCHEMY_DATABASE_URL = "sqlite://"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

def override_get_db():
    try:
        db = TestingSessionLocal()
        yield db
    finally:
        db.close()

app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def reset_database():
    """Fresh schema for every test"""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client():
    return TestClient(app)


def session_headers(token: str) -> dict:
    return {"Cookie": f"{COOKIE_NAME}={token}"}


@pytest.fixture
def register_user(client):
    def _register(email="clinician@example.com", password="Secret123!", first_name="Grace", last_name="Otieno"):
        response = client.post("/api/user/register", json={
            "firstName": first_name,
            "lastName": last_name,
            "email": email,
            "password": password,
            "repeatPassword": password,
        })
        assert response.status_code == 201
        return response.json()["user"]
    return _register


@pytest.fixture
def login_as(client, register_user):
    """Register (if needed) and log in; returns headers carrying the session cookie"""
    def _login(email="clinician@example.com", password="Secret123!"):
        register_user(email=email, password=password)
        response = client.post("/api/user/login", json={"email": email, "password": password})
        assert response.status_code == 200
        token = response.cookies.get(COOKIE_NAME)
        assert token
        return session_headers(token)
    return _login


@pytest.fixture
def create_patient(client):
    def _create(headers, **overrides):
        patient = {
            "name": "Alice Johnson",
            "idNumber": "12345678",
            "date_of_birth": "1990-05-21",
            "gender": "Female",
            "contact": "+254712345678",
        }
        patient.update(overrides)
        response = client.post("/api/patients/new-patient", json=patient, headers=headers)
        assert response.status_code == 201
        return response.json()["patient"]
    return _create


@pytest.fixture
def create_visit(client):
    def _create(headers, patient_uuid, **overrides):
        visit = {
            "date": "2025-01-20",
            "diagnosis": "Malaria",
            "prescribed_medications": "Artemether, Lumefantrine",
            "notes": "Return if symptoms persist",
        }
        visit.update(overrides)
        response = client.post(f"/api/patients/{patient_uuid}/visits", json=visit, headers=headers)
        assert response.status_code == 201
        return response.json()["visit"]
    return _create
