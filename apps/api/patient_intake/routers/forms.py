# apps/api/patient_intake/routers/forms.py
import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException, Path, Request
from pydantic import ValidationError
from sqlalchemy.orm import Session
from starlette.datastructures import UploadFile

from ..actions import PatientActions, User, get_patient_actions
from ..audit import audit_safe
from ..db import get_db
from ..errors import RecordsBackendError, UploadRejected
from ..forms import PatientForm, RegisterForm
from ..settings import settings
from ..storage import is_allowed_content_type
from ..tasks.ehr_sync import sync_patient_to_ehr
from ..validation import IdentificationDocument

logger = logging.getLogger("api")

router = APIRouter(prefix="/v1/forms", tags=["forms"])


async def _load_user(actions: PatientActions, user_id: str) -> User:
    try:
        user = await actions.get_user(user_id)
    except RecordsBackendError as e:
        raise HTTPException(502, f"Records backend error: {e}")
    if user is None:
        raise HTTPException(404, "User not found")
    return user


def _check_document(content_type: str, size: int) -> None:
    if not is_allowed_content_type(content_type):
        raise UploadRejected(f"Unsupported file type: {content_type}", 415)
    if size > settings.max_upload_bytes:
        raise UploadRejected(f"File too large (max {settings.max_upload_bytes} bytes)", 413)


async def _read_documents(files: List[Any]) -> List[IdentificationDocument]:
    """Read uploaded ID files into memory, enforcing type and size limits."""
    docs: List[IdentificationDocument] = []
    for f in files:
        # empty <input type=file> still posts a part with no filename
        if not isinstance(f, UploadFile) or not f.filename:
            continue
        _check_document(f.content_type, 0)
        data = await f.read(settings.max_upload_bytes + 1)
        _check_document(f.content_type, len(data))
        docs.append(IdentificationDocument(file_name=f.filename, content_type=f.content_type, data=data))
    return docs


def _json_documents(items: Any) -> Any:
    """Apply the upload limits to documents sent inline in a JSON body."""
    if not isinstance(items, list):
        return items
    try:
        docs = [IdentificationDocument.model_validate(item) for item in items]
    except ValidationError:
        # malformed entries are reported by the form validation
        return items
    for doc in docs:
        _check_document(doc.content_type, doc.size)
    return docs


async def _register_payload(request: Request) -> Dict[str, Any]:
    """Accept both multipart (browser form with file) and plain JSON bodies."""
    try:
        if request.headers.get("content-type", "").startswith("application/json"):
            try:
                raw = await request.json()
            except ValueError:
                raise HTTPException(400, "Invalid JSON body")
            if not isinstance(raw, dict):
                raise HTTPException(400, "JSON body must be an object")
            if raw.get("identificationDocument") is not None:
                raw["identificationDocument"] = _json_documents(raw["identificationDocument"])
            return raw

        form = await request.form()
        raw = {k: form.get(k) for k in form.keys() if k != "identificationDocument"}
        docs = await _read_documents(form.getlist("identificationDocument"))
    except UploadRejected as e:
        raise HTTPException(e.status_code, str(e))
    if docs:
        raw["identificationDocument"] = docs
    return raw


# ---------------------------
# Short form: name / email / phone
# ---------------------------
@router.get("/patient")
def get_patient_form(actions: PatientActions = Depends(get_patient_actions)):
    return {"form": PatientForm(actions).describe()}


@router.post("/patient/submit")
async def submit_patient_form(
    body: Dict[str, Any],
    actions: PatientActions = Depends(get_patient_actions),
    db: Session = Depends(get_db),
):
    form = PatientForm(actions)
    result = await form.handle_submit(body)
    if result.errors:
        # UI keeps the user on the page and highlights fields
        return {"ok": False, "errors": result.errors}
    if not result.ok:
        return {"ok": False, "errors": {}, "redirect": None}

    audit_safe(db, "USER_CREATED", actor=str(body.get("email") or "patient"), target=result.record_id)
    return {"ok": True, "redirect": result.redirect, "user_id": result.record_id}


# ---------------------------
# Registration form for an existing user
# ---------------------------
@router.get("/register/{user_id}")
async def get_register_form(
    user_id: str = Path(...),
    actions: PatientActions = Depends(get_patient_actions),
):
    user = await _load_user(actions, user_id)

    # Already registered -> straight to booking
    try:
        existing = await actions.get_patient(user_id)
    except RecordsBackendError as e:
        raise HTTPException(502, f"Records backend error: {e}")
    if existing is not None:
        return {"user_id": user_id, "registered": True, "redirect": f"/patients/{user_id}/new-appointment"}

    return {"user_id": user_id, "registered": False, "form": RegisterForm(user, actions).describe()}


@router.post("/register/{user_id}/submit")
async def submit_register_form(
    request: Request,
    user_id: str = Path(...),
    actions: PatientActions = Depends(get_patient_actions),
    db: Session = Depends(get_db),
):
    user = await _load_user(actions, user_id)
    raw = await _register_payload(request)

    form = RegisterForm(user, actions)
    result = await form.handle_submit(raw)
    if result.errors:
        return {"ok": False, "errors": result.errors}
    if not result.ok:
        return {"ok": False, "errors": {}, "redirect": None}

    record = result.record or {}
    audit_safe(
        db,
        "PATIENT_REGISTERED",
        actor=user.email or user.id,
        target=result.record_id,
        details={"user_id": user.id, "has_document": bool(record.get("identificationDocumentId"))},
    )

    if settings.ehr_sync_enabled:
        try:
            sync_patient_to_ehr.delay(record)
        except Exception as e:
            logger.warning("could not queue EHR sync for user %s: %s", user.id, e)

    return {"ok": True, "redirect": result.redirect, "patient_id": result.record_id}
