"""
Shared fixtures. Each test gets a fresh in-memory database: the app creates
tables on startup and disposes the engine on shutdown, which discards the
in-memory SQLite database along with its single pooled connection.
"""
import os
import tempfile

os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["AUTH_DISABLED"] = "false"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="loan-uploads-")
os.environ["PUBLIC_BASE_URL"] = "http://testserver/uploads"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from main import app  # noqa: E402
from middleware.auth import get_current_user  # noqa: E402
from schemas.auth import SessionUser  # noqa: E402

USERS = {
    "RELATIONSHIP_MANAGER": SessionUser(id="rm-1", role="RELATIONSHIP_MANAGER", name="Rahel M", email="rm@bank.test"),
    "CREDIT_ANALYST": SessionUser(id="ca-1", role="CREDIT_ANALYST", name="Abel C", email="ca@bank.test"),
    "SUPERVISOR": SessionUser(id="sv-1", role="SUPERVISOR", name="Sara V", email="sv@bank.test"),
    "COMMITTE_MEMBER": SessionUser(id="cm-1", role="COMMITTE_MEMBER", name="Kebede M", email="cm@bank.test"),
    "APPROVAL_COMMITTE": SessionUser(
        id="ac-1", role="APPROVAL_COMMITTE", name="Credit Committee", email="ac@bank.test", image="avatar-0911000000"
    ),
    "ADMIN": SessionUser(id="admin-1", role="ADMIN", name="Admin", email="admin@bank.test"),
}


def application_payload(**overrides):
    payload = {
        "customerNumber": "CUST-0001",
        "firstName": "Almaz",
        "lastName": "Tesfaye",
        "phone": "0911223344",
        "majorLineBusiness": "Coffee export",
        "dateOfEstablishmentMLB": "2015-06-01",
        "purposeOfLoan": "Working capital",
        "loanType": "Term loan",
        "loanAmount": 500_000,
        "loanPeriod": 24,
        "modeOfRepayment": "Monthly",
    }
    payload.update(overrides)
    return payload


@pytest.fixture()
def client():
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def login():
    """Act as a given role (or user) for the following requests."""

    def _login(role, user_id=None):
        user = USERS[role]
        if user_id is not None:
            user = user.model_copy(update={"id": user_id})
        app.dependency_overrides[get_current_user] = lambda: user
        return user

    return _login


@pytest.fixture()
def create_application(client, login):
    """Create a PENDING application as a relationship manager; returns its JSON."""

    def _create(**overrides):
        login("RELATIONSHIP_MANAGER")
        resp = client.post("/api/customer", json=application_payload(**overrides))
        assert resp.status_code == 201, resp.text
        return resp.json()["data"]

    return _create


@pytest.fixture()
def advance(client, login):
    """Run a sequence of (role, action, body) transitions on an application."""

    def _advance(customer_id, steps):
        data = None
        for role, action, body in steps:
            login(role)
            resp = client.patch(f"/api/customer/{customer_id}/{action}", json=body)
            assert resp.status_code == 200, resp.text
            data = resp.json()["data"]
        return data

    return _advance


TO_MEMBER_REVIEW = [
    ("CREDIT_ANALYST", "take", None),
    ("CREDIT_ANALYST", "save", None),
    ("SUPERVISOR", "oka", None),
    ("SUPERVISOR", "review", None),
    ("CREDIT_ANALYST", "final", None),
    ("CREDIT_ANALYST", "edit", None),
]
