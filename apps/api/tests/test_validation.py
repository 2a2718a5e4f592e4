from datetime import date

import pytest
from pydantic import ValidationError

from patient_intake.validation import (
    Gender,
    IdentificationDocument,
    PatientFormValidation,
    UserFormValidation,
    form_errors,
)


def _errors(model, payload):
    with pytest.raises(ValidationError) as exc:
        model.model_validate(payload)
    return form_errors(exc.value)


def test_user_form_accepts_valid_values(user_form):
    values = UserFormValidation.model_validate(user_form)
    assert values.name == "Jane Doe"
    assert values.phone == "+15551234567"


def test_user_form_name_bounds(user_form):
    assert _errors(UserFormValidation, {**user_form, "name": "J"}) == {
        "name": "Name must be at least 2 characters"
    }
    assert _errors(UserFormValidation, {**user_form, "name": "x" * 51}) == {
        "name": "Name must be at most 50 characters"
    }


@pytest.mark.parametrize("phone", ["5551234567", "+1555", "(555) 123-4567", "+1555123456789012"])
def test_user_form_rejects_bad_phone(user_form, phone):
    assert _errors(UserFormValidation, {**user_form, "phone": phone}) == {"phone": "Invalid phone number"}


def test_user_form_rejects_bad_email(user_form):
    assert _errors(UserFormValidation, {**user_form, "email": "not-an-email"}) == {
        "email": "Invalid email address"
    }


def test_user_form_reports_missing_fields():
    errors = _errors(UserFormValidation, {})
    assert set(errors) == {"name", "email", "phone"}


def test_patient_form_accepts_valid_values(register_form):
    values = PatientFormValidation.model_validate(register_form)
    assert values.birth_date == date(1990, 4, 12)
    assert values.gender is Gender.FEMALE
    assert values.identification_document is None


def test_patient_form_coerces_datetime_birth_date(register_form):
    values = PatientFormValidation.model_validate({**register_form, "birthDate": "1990-04-12T08:30:00.000Z"})
    assert values.birth_date == date(1990, 4, 12)


def test_patient_form_rejects_unparseable_birth_date(register_form):
    assert _errors(PatientFormValidation, {**register_form, "birthDate": "yesterday"}) == {
        "birthDate": "Invalid date"
    }


def test_patient_form_errors_use_wire_names(register_form):
    errors = _errors(
        PatientFormValidation,
        {**register_form, "emergencyContactNumber": "123", "address": "NY", "primaryPhysician": ""},
    )
    assert errors == {
        "emergencyContactNumber": "Invalid phone number",
        "address": "Address must be at least 5 characters",
        "primaryPhysician": "Select at least one doctor",
    }


def test_patient_form_rejects_unknown_gender(register_form):
    assert "gender" in _errors(PatientFormValidation, {**register_form, "gender": "Unknown"})


def test_patient_form_requires_every_consent(register_form):
    payload = {k: v for k, v in register_form.items() if not k.endswith("Consent")}
    assert _errors(PatientFormValidation, payload) == {
        "treatmentConsent": "You must consent to treatment in order to proceed",
        "disclosureConsent": "You must consent to disclosure in order to proceed",
        "privacyConsent": "You must consent to privacy in order to proceed",
    }


def test_patient_form_consent_from_form_strings(register_form):
    values = PatientFormValidation.model_validate(
        {**register_form, "treatmentConsent": "true", "disclosureConsent": "on", "privacyConsent": "1"}
    )
    assert values.treatment_consent and values.disclosure_consent and values.privacy_consent
    assert _errors(PatientFormValidation, {**register_form, "privacyConsent": "false"}) == {
        "privacyConsent": "You must consent to privacy in order to proceed"
    }


def test_patient_form_optional_history_fields(register_form):
    payload = {
        k: v for k, v in register_form.items()
        if k not in ("allergies", "currentMedication", "familyMedicalHistory", "pastMedicalHistory",
                     "identificationType", "identificationNumber")
    }
    values = PatientFormValidation.model_validate(payload)
    assert values.allergies is None
    assert values.identification_type is None


def test_patient_form_carries_documents(register_form):
    doc = IdentificationDocument(file_name="passport.png", content_type="image/png", data=b"\x89PNG")
    values = PatientFormValidation.model_validate({**register_form, "identificationDocument": [doc]})
    assert values.identification_document[0].file_name == "passport.png"
    assert values.identification_document[0].size == 4


def test_patient_form_dump_is_camel_case(register_form):
    dumped = PatientFormValidation.model_validate(register_form).model_dump(mode="json", by_alias=True)
    assert dumped["birthDate"] == "1990-04-12"
    assert dumped["gender"] == "Female"
    assert dumped["emergencyContactNumber"] == "+15557654321"


@pytest.mark.parametrize(
    "field, value, message",
    [
        ("address", "x" * 501, "Address must be at most 500 characters"),
        ("occupation", "x", "Occupation must be at least 2 characters"),
        ("occupation", "x" * 501, "Occupation must be at most 500 characters"),
        ("emergencyContactName", "J", "Contact name must be at least 2 characters"),
        ("emergencyContactName", "x" * 51, "Contact name must be at most 50 characters"),
        ("insuranceProvider", "B", "Insurance name must be at least 2 characters"),
        ("insuranceProvider", "x" * 51, "Insurance name must be at most 50 characters"),
        ("insurancePolicyNumber", "A", "Policy number must be at least 2 characters"),
        ("insurancePolicyNumber", "x" * 51, "Policy number must be at most 50 characters"),
    ],
)
def test_patient_form_length_bounds(register_form, field, value, message):
    assert _errors(PatientFormValidation, {**register_form, field: value}) == {field: message}


@pytest.mark.parametrize(
    "field, limit",
    [
        ("address", 500),
        ("occupation", 500),
        ("emergencyContactName", 50),
        ("insuranceProvider", 50),
        ("insurancePolicyNumber", 50),
    ],
)
def test_patient_form_accepts_values_at_the_limit(register_form, field, limit):
    PatientFormValidation.model_validate({**register_form, field: "x" * limit})
