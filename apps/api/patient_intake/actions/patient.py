# apps/api/patient_intake/actions/patient.py
"""
Server-side actions behind the intake forms.

The patient-records backend owns users and patient records; this module is a
thin async client over its REST API. Identification documents go to object
storage first and only their id/url travel with the patient record.
"""
from __future__ import annotations

import logging
import re
from typing import Any, AsyncIterator, Dict, Optional
from uuid import uuid4

import httpx
from pydantic import BaseModel, ConfigDict
from starlette.concurrency import run_in_threadpool

from ..errors import RecordsBackendError
from ..settings import settings
from ..storage import put_document
from ..validation import IdentificationDocument

logger = logging.getLogger("api.actions")


class NewUser(BaseModel):
    name: str
    email: str
    phone: str


class User(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    email: str
    phone: Optional[str] = None


class PatientRecord(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    userId: str


def _safe_name(file_name: str) -> str:
    return re.sub(r"[^A-Za-z0-9._-]+", "_", file_name).strip("._") or "document"


class PatientActions:
    def __init__(self, client: httpx.AsyncClient):
        self.client = client

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            return await self.client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise RecordsBackendError(f"records backend unreachable: {e}") from e

    @staticmethod
    def _raise_for_status(r: httpx.Response, what: str) -> None:
        if r.is_error:
            raise RecordsBackendError(f"{what} failed ({r.status_code}): {r.text[:200]}", r.status_code)

    # ---------------------------
    # Users
    # ---------------------------
    async def create_user(self, user: NewUser) -> User:
        """
        Create the account behind the short form. An email that already exists
        is not an error: the existing user is returned so the visitor can carry
        on to registration.
        """
        r = await self._request("POST", "/users", json={"userId": "unique()", **user.model_dump()})
        if r.status_code == 409:
            existing = await self.find_user_by_email(user.email)
            if existing is None:
                raise RecordsBackendError("user conflict but no user with that email", 409)
            logger.info("user %s already exists, reusing", existing.id)
            return existing
        self._raise_for_status(r, "create user")
        return User.model_validate(r.json())

    async def find_user_by_email(self, email: str) -> Optional[User]:
        r = await self._request("GET", "/users", params={"email": email})
        self._raise_for_status(r, "list users")
        users = r.json().get("users") or []
        return User.model_validate(users[0]) if users else None

    async def get_user(self, user_id: str) -> Optional[User]:
        r = await self._request("GET", f"/users/{user_id}")
        if r.status_code == 404:
            return None
        self._raise_for_status(r, "get user")
        return User.model_validate(r.json())

    # ---------------------------
    # Patients
    # ---------------------------
    async def upload_identification(self, user_id: str, document: IdentificationDocument) -> Dict[str, str]:
        key = f"identification/{user_id}/{uuid4().hex}-{_safe_name(document.file_name)}"
        # boto3 is blocking
        url, sha256 = await run_in_threadpool(put_document, key, document.data, document.content_type)
        return {"identificationDocumentId": key, "identificationDocumentUrl": url, "identificationDocumentSha256": sha256}

    async def register_patient(
        self, patient: Dict[str, Any], document: Optional[IdentificationDocument] = None
    ) -> PatientRecord:
        stored: Dict[str, str] = {}
        if document is not None:
            stored = await self.upload_identification(patient["userId"], document)

        r = await self._request("POST", "/patients", json={"documentId": "unique()", **patient, **stored})
        self._raise_for_status(r, "register patient")
        # the backend may answer with only the ids it assigned
        return PatientRecord.model_validate({**patient, **stored, **r.json()})

    async def get_patient(self, user_id: str) -> Optional[PatientRecord]:
        r = await self._request("GET", "/patients", params={"userId": user_id})
        self._raise_for_status(r, "list patients")
        docs = r.json().get("patients") or []
        return PatientRecord.model_validate(docs[0]) if docs else None


def records_client(**kwargs) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        base_url=settings.records_api_url,
        headers={
            "X-Project-Id": settings.records_project_id,
            "X-Api-Key": settings.records_api_key,
        },
        timeout=settings.records_timeout_seconds,
        **kwargs,
    )


async def get_patient_actions() -> AsyncIterator[PatientActions]:
    async with records_client() as client:
        yield PatientActions(client)
