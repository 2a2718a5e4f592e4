# apps/api/patient_intake/tasks/ehr_sync.py
import logging
from typing import Any, Dict, Optional

import httpx

from ..celery_app import celery_app
from ..settings import settings

logger = logging.getLogger("api.tasks")


def _ehr_client() -> httpx.Client:
    return httpx.Client(base_url=settings.ehr_base, timeout=5.0)


def fhir_patient(patient: Dict[str, Any]) -> Dict[str, Any]:
    """Map a registered patient record onto a minimal FHIR Patient resource."""
    name = (patient.get("name") or "").strip()
    given, _, family = name.rpartition(" ")
    res: Dict[str, Any] = {
        "resourceType": "Patient",
        "identifier": [{"system": "urn:intake:user", "value": patient.get("userId")}],
        "name": [{"text": name, "family": family or name, "given": [given] if given else []}],
        "telecom": [
            {"system": "phone", "value": patient.get("phone")},
            {"system": "email", "value": patient.get("email")},
        ],
        "gender": (patient.get("gender") or "unknown").lower(),
        "birthDate": patient.get("birthDate"),
    }
    if patient.get("address"):
        res["address"] = [{"text": patient["address"]}]
    if patient.get("emergencyContactName"):
        res["contact"] = [{
            "name": {"text": patient["emergencyContactName"]},
            "telecom": [{"system": "phone", "value": patient.get("emergencyContactNumber")}],
        }]
    return res


def fhir_document_reference(patient: Dict[str, Any], ehr_patient_id: Optional[str]) -> Dict[str, Any]:
    dr: Dict[str, Any] = {
        "resourceType": "DocumentReference",
        "status": "current",
        "type": {"text": patient.get("identificationType") or "Identification"},
        "content": [{"attachment": {"url": patient["identificationDocumentUrl"], "title": "Identification"}}],
    }
    if ehr_patient_id:
        dr["subject"] = {"reference": f"Patient/{ehr_patient_id}"}
    return dr


@celery_app.task(name="patients.sync_patient_to_ehr")
def sync_patient_to_ehr(patient: Dict[str, Any]) -> Dict[str, Any]:
    """
    - mirror the patient to the EHR mock as a FHIR Patient
    - mirror the stored ID document (if any) as a FHIR DocumentReference
    EHR errors (including non-JSON replies) are logged, never raised: the intake already succeeded.
    """
    out: Dict[str, Any] = {"patient_id": None, "document_reference_id": None}
    try:
        with _ehr_client() as client:
            r = client.post("/fhir/Patient", json=fhir_patient(patient))
            r.raise_for_status()
            out["patient_id"] = r.json().get("id")

            if patient.get("identificationDocumentUrl"):
                r = client.post("/fhir/DocumentReference", json=fhir_document_reference(patient, out["patient_id"]))
                r.raise_for_status()
                out["document_reference_id"] = r.json().get("id")
    except (httpx.HTTPError, ValueError) as e:
        logger.warning("EHR sync failed for user %s: %s", patient.get("userId"), e)
    return out
