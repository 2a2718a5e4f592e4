# apps/api/patient_intake/routers/patients.py
from fastapi import APIRouter, Depends, HTTPException

from ..actions import PatientActions, get_patient_actions
from ..errors import RecordsBackendError

router = APIRouter(prefix="/v1", tags=["patients"])


@router.get("/users/{user_id}")
async def read_user(user_id: str, actions: PatientActions = Depends(get_patient_actions)):
    try:
        user = await actions.get_user(user_id)
    except RecordsBackendError as e:
        raise HTTPException(status_code=502, detail=f"Records backend error: {e}") from e
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return {"user": user.model_dump()}


@router.get("/patients/{user_id}")
async def read_patient(user_id: str, actions: PatientActions = Depends(get_patient_actions)):
    """Registered patient record for a user (used by the booking page)."""
    try:
        patient = await actions.get_patient(user_id)
    except RecordsBackendError as e:
        raise HTTPException(status_code=502, detail=f"Records backend error: {e}") from e
    if patient is None:
        raise HTTPException(status_code=404, detail="Patient not found")
    return {"patient": patient.model_dump()}
