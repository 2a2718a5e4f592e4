import json
import os
import tempfile

# configure before the app (and its settings) are imported
_DB_DIR = tempfile.mkdtemp(prefix="intake-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_DB_DIR, 'intake.db')}"
os.environ["EHR_SYNC_ENABLED"] = "0"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "1"
os.environ["OTEL_EXPORTER_OTLP_ENDPOINT"] = ""

import httpx
import pytest
from fastapi.testclient import TestClient

from patient_intake.actions import PatientActions, get_patient_actions
from patient_intake.actions import patient as patient_actions
from patient_intake.actions.patient import records_client
from patient_intake.main import app


class FakeRecordsBackend:
    """In-memory stand-in for the patient-records REST API."""

    def __init__(self):
        self.users = {}
        self.patients = []
        self.calls = []
        self.fail = False
        # (method, path) pairs that answer 500
        self.fail_on = set()
        # answer patient creation with only the assigned ids
        self.minimal_patients = False

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path.removeprefix("/v1")
        self.calls.append((request.method, path))
        if self.fail or (request.method, path) in self.fail_on:
            return httpx.Response(500, json={"message": "boom"})

        if path == "/users" and request.method == "POST":
            data = json.loads(request.content)
            if any(u["email"] == data["email"] for u in self.users.values()):
                return httpx.Response(409, json={"message": "user already exists"})
            uid = f"user-{len(self.users) + 1}"
            user = {"id": uid, "name": data["name"], "email": data["email"], "phone": data["phone"]}
            self.users[uid] = user
            return httpx.Response(201, json=user)

        if path == "/users" and request.method == "GET":
            email = request.url.params.get("email")
            return httpx.Response(200, json={"users": [u for u in self.users.values() if u["email"] == email]})

        if path.startswith("/users/") and request.method == "GET":
            user = self.users.get(path.split("/")[-1])
            if user is None:
                return httpx.Response(404, json={"message": "not found"})
            return httpx.Response(200, json=user)

        if path == "/patients" and request.method == "POST":
            data = json.loads(request.content)
            data.pop("documentId", None)
            record = {"id": f"patient-{len(self.patients) + 1}", **data}
            self.patients.append(record)
            if self.minimal_patients:
                return httpx.Response(201, json={"id": record["id"], "userId": record["userId"]})
            return httpx.Response(201, json=record)

        if path == "/patients" and request.method == "GET":
            uid = request.url.params.get("userId")
            return httpx.Response(200, json={"patients": [p for p in self.patients if p["userId"] == uid]})

        return httpx.Response(404, json={"message": "no route"})


@pytest.fixture
def backend():
    return FakeRecordsBackend()


@pytest.fixture
def actions(backend):
    return PatientActions(records_client(transport=httpx.MockTransport(backend.handler)))


@pytest.fixture
def uploads(monkeypatch):
    """Capture object-storage uploads instead of talking to S3."""
    stored = []

    def fake_put(key, data, content_type="application/octet-stream"):
        stored.append({"key": key, "data": data, "content_type": content_type})
        return f"s3://identification/{key}", "0" * 64

    monkeypatch.setattr(patient_actions, "put_document", fake_put)
    return stored


@pytest.fixture
def client(backend, uploads):
    async def _actions():
        async with records_client(transport=httpx.MockTransport(backend.handler)) as c:
            yield PatientActions(c)

    app.dependency_overrides[get_patient_actions] = _actions
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def user_form():
    return {"name": "Jane Doe", "email": "jane.doe@gmail.com", "phone": "+15551234567"}


@pytest.fixture
def register_form(user_form):
    return {
        **user_form,
        "birthDate": "1990-04-12",
        "gender": "Female",
        "address": "14 Street, New York, NY",
        "occupation": "Software Engineer",
        "emergencyContactName": "John Doe",
        "emergencyContactNumber": "+15557654321",
        "primaryPhysician": "John Green",
        "insuranceProvider": "BlueCross BlueShield",
        "insurancePolicyNumber": "ABC123456789",
        "allergies": "Peanuts",
        "currentMedication": "",
        "familyMedicalHistory": "",
        "pastMedicalHistory": "Asthma",
        "identificationType": "Passport",
        "identificationNumber": "X1234567",
        "treatmentConsent": True,
        "disclosureConsent": True,
        "privacyConsent": True,
    }
