"""
Validation schemas for the intake forms.

Python attribute names are snake_case; the wire format (and the error keys the
UI highlights) is camelCase, e.g. ``emergencyContactNumber``.
"""
from __future__ import annotations

import re
from datetime import date, datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, validate_email
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

PHONE_RE = re.compile(r"^\+\d{10,15}$")


class Gender(str, Enum):
    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"


class IdentificationDocument(BaseModel):
    """A file picked in the ID uploader, already read into memory."""
    file_name: str
    content_type: str = "application/octet-stream"
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


def _bounded(value: str, label: str, lo: int, hi: int) -> str:
    if len(value) < lo:
        raise PydanticCustomError(
            "string_too_short", "{label} must be at least {lo} characters", {"label": label, "lo": lo}
        )
    if len(value) > hi:
        raise PydanticCustomError(
            "string_too_long", "{label} must be at most {hi} characters", {"label": label, "hi": hi}
        )
    return value


def _phone(value: str) -> str:
    if not PHONE_RE.match(value or ""):
        raise PydanticCustomError("phone_format", "Invalid phone number")
    return value


def _consent(value: bool, what: str) -> bool:
    if value is not True:
        raise PydanticCustomError(
            "consent_required", "You must consent to {what} in order to proceed", {"what": what}
        )
    return value


# (label, min, max) per length-checked field
_LENGTHS = {
    "name": ("Name", 2, 50),
    "address": ("Address", 5, 500),
    "occupation": ("Occupation", 2, 500),
    "emergency_contact_name": ("Contact name", 2, 50),
    "insurance_provider": ("Insurance name", 2, 50),
    "insurance_policy_number": ("Policy number", 2, 50),
}

_CONSENTS = {
    "treatment_consent": "treatment",
    "disclosure_consent": "disclosure",
    "privacy_consent": "privacy",
}


class UserFormValidation(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    name: str
    email: str
    phone: str

    @field_validator("name")
    @classmethod
    def _check_name(cls, v: str) -> str:
        label, lo, hi = _LENGTHS["name"]
        return _bounded(v, label, lo, hi)

    @field_validator("email")
    @classmethod
    def _check_email(cls, v: str) -> str:
        try:
            _, normalized = validate_email(v)
        except PydanticCustomError:
            raise PydanticCustomError("email_format", "Invalid email address")
        return normalized

    @field_validator("phone")
    @classmethod
    def _check_phone(cls, v: str) -> str:
        return _phone(v)


class PatientFormValidation(UserFormValidation):
    birth_date: date
    gender: Gender
    address: str
    occupation: str
    emergency_contact_name: str
    emergency_contact_number: str
    primary_physician: str
    insurance_provider: str
    insurance_policy_number: str
    allergies: Optional[str] = None
    current_medication: Optional[str] = None
    family_medical_history: Optional[str] = None
    past_medical_history: Optional[str] = None
    identification_type: Optional[str] = None
    identification_number: Optional[str] = None
    identification_document: Optional[List[IdentificationDocument]] = None
    treatment_consent: bool = Field(default=False, validate_default=True)
    disclosure_consent: bool = Field(default=False, validate_default=True)
    privacy_consent: bool = Field(default=False, validate_default=True)

    @field_validator("birth_date", mode="before")
    @classmethod
    def _coerce_birth_date(cls, v):
        if isinstance(v, datetime):
            return v.date()
        if isinstance(v, str):
            try:
                return datetime.fromisoformat(v.strip().replace("Z", "+00:00")).date()
            except ValueError:
                raise PydanticCustomError("date_parsing", "Invalid date")
        return v

    @field_validator(*[k for k in _LENGTHS if k != "name"])
    @classmethod
    def _check_lengths(cls, v: str, info) -> str:
        label, lo, hi = _LENGTHS[info.field_name]
        return _bounded(v, label, lo, hi)

    @field_validator("emergency_contact_number")
    @classmethod
    def _check_emergency_phone(cls, v: str) -> str:
        return _phone(v)

    @field_validator("primary_physician")
    @classmethod
    def _check_physician(cls, v: str) -> str:
        if len(v) < 2:
            raise PydanticCustomError("physician_required", "Select at least one doctor")
        return v

    @field_validator(*_CONSENTS)
    @classmethod
    def _check_consents(cls, v: bool, info) -> bool:
        return _consent(v, _CONSENTS[info.field_name])


def form_errors(exc: ValidationError) -> Dict[str, str]:
    """
    Flatten pydantic errors to { "<fieldName>": "<message>" }, first error per
    field wins. Keys are the camelCase names used by the form descriptors.
    """
    errors: Dict[str, str] = {}
    for err in exc.errors():
        loc = err.get("loc") or ("__root__",)
        errors.setdefault(str(loc[0]), err["msg"])
    return errors
