from __future__ import annotations

import logging
from typing import Any, Dict

from ..actions import PatientActions, User
from ..constants import DOCTORS, GENDER_OPTIONS, IDENTIFICATION_TYPES, FormFieldType, patient_form_default_values
from ..otel import get_tracer
from ..settings import settings
from ..validation import PatientFormValidation
from .base import IntakeForm, SubmitResult
from .fields import FieldOption, FormField, FormSection

logger = logging.getLogger("api.forms")

_INPUT = FormFieldType.INPUT
_TEXTAREA = FormFieldType.TEXTAREA
_PHONE = FormFieldType.PHONE_INPUT


def _sections() -> list[FormSection]:
    personal = FormSection(
        title="Personal Information",
        rows=[["email", "phone"], ["birthDate", "gender"], ["address", "occupation"],
              ["emergencyContactName", "emergencyContactNumber"]],
        fields=[
            FormField(field_type=_INPUT, name="name", label="Full name", placeholder="John Doe",
                      icon_src="/assets/icons/user.svg", icon_alt="user"),
            FormField(field_type=_INPUT, name="email", label="Email", placeholder="johndoe@gmail.com",
                      icon_src="/assets/icons/email.svg", icon_alt="email"),
            FormField(field_type=_PHONE, name="phone", label="Phone number", placeholder="(555) 123-4567"),
            FormField(field_type=FormFieldType.DATE_PICKER, name="birthDate", label="Date of birth",
                      icon_src="/assets/icons/calendar.svg", icon_alt="calendar"),
            FormField(field_type=FormFieldType.SKELETON, name="gender", label="Gender", widget="radioGroup",
                      options=[FieldOption(value=g, label=g) for g in GENDER_OPTIONS]),
            FormField(field_type=_INPUT, name="address", label="Address", placeholder="14 street, New York, NY - 5101"),
            FormField(field_type=_INPUT, name="occupation", label="Occupation", placeholder="Software Engineer"),
            FormField(field_type=_INPUT, name="emergencyContactName", label="Emergency contact name",
                      placeholder="Guardian's name"),
            FormField(field_type=_PHONE, name="emergencyContactNumber", label="Emergency contact number",
                      placeholder="(555) 123-4567"),
        ],
    )
    medical = FormSection(
        title="Medical Information",
        rows=[["insuranceProvider", "insurancePolicyNumber"], ["allergies", "currentMedication"],
              ["familyMedicalHistory", "pastMedicalHistory"]],
        fields=[
            FormField(field_type=FormFieldType.SELECT, name="primaryPhysician", label="Primary care physician",
                      placeholder="Select a physician",
                      options=[FieldOption(value=d["name"], label=d["name"], image=d["image"]) for d in DOCTORS]),
            FormField(field_type=_INPUT, name="insuranceProvider", label="Insurance provider",
                      placeholder="BlueCross BlueShield"),
            FormField(field_type=_INPUT, name="insurancePolicyNumber", label="Insurance policy number",
                      placeholder="ABC123456789"),
            FormField(field_type=_TEXTAREA, name="allergies", label="Allergies (if any)",
                      placeholder="Peanuts, Penicillin, Pollen"),
            FormField(field_type=_TEXTAREA, name="currentMedication", label="Current medications",
                      placeholder="Ibuprofen 200mg, Levothyroxine 50mcg"),
            FormField(field_type=_TEXTAREA, name="familyMedicalHistory", label="Family medical history (if relevant)",
                      placeholder="Mother had brain cancer, Father has hypertension"),
            FormField(field_type=_TEXTAREA, name="pastMedicalHistory", label="Past medical history",
                      placeholder="Appendectomy in 2015, Asthma diagnosis in childhood"),
        ],
    )
    identification = FormSection(
        title="Identification and Verification",
        fields=[
            FormField(field_type=FormFieldType.SELECT, name="identificationType", label="Identification type",
                      placeholder="Select identification type",
                      options=[FieldOption(value=t, label=t) for t in IDENTIFICATION_TYPES]),
            FormField(field_type=_INPUT, name="identificationNumber", label="Identification number",
                      placeholder="123456789"),
            FormField(field_type=FormFieldType.SKELETON, name="identificationDocument",
                      label="Scanned copy of identification document", widget="fileUploader",
                      extra={"accept": ["image/*", "application/pdf"], "maxBytes": settings.max_upload_bytes}),
        ],
    )
    consent = FormSection(
        title="Consent and Privacy",
        fields=[
            FormField(field_type=FormFieldType.CHECKBOX, name="treatmentConsent",
                      label="I consent to receive treatment for my health condition."),
            FormField(field_type=FormFieldType.CHECKBOX, name="disclosureConsent",
                      label="I consent to the use and disclosure of my health information for treatment purposes."),
            FormField(field_type=FormFieldType.CHECKBOX, name="privacyConsent",
                      label="I acknowledge that I have reviewed and agree to the privacy policy"),
        ],
    )
    return [personal, medical, identification, consent]


class RegisterForm(IntakeForm):
    """Full registration for an existing user; lands on the new-appointment page."""

    title = "Welcome 👋"
    subtitle = "Let us know more about yourself."
    submit_label = "Submit and continue"
    validation = PatientFormValidation
    sections = _sections()

    def __init__(self, user: User, actions: PatientActions):
        super().__init__(actions)
        self.user = user

    def default_values(self) -> Dict[str, Any]:
        return {
            **patient_form_default_values(),
            "name": self.user.name,
            "email": self.user.email,
            "phone": self.user.phone or "",
        }

    async def on_submit(self, values: PatientFormValidation) -> SubmitResult:
        self.is_loading = True
        result = SubmitResult(ok=False)

        # only the first picked file is stored
        document = None
        if values.identification_document:
            document = values.identification_document[0]

        with get_tracer().start_as_current_span("intake.register_form.submit") as span:
            span.set_attribute("intake.has_document", document is not None)
            try:
                patient = {
                    "userId": self.user.id,
                    **values.model_dump(mode="json", by_alias=True, exclude={"identification_document"}),
                }
                new_patient = await self.actions.register_patient(patient, document)

                if new_patient:
                    result = SubmitResult(
                        ok=True,
                        redirect=f"/patients/{self.user.id}/new-appointment",
                        record_id=new_patient.id,
                        record=new_patient.model_dump(),
                    )
            except Exception:
                logger.exception("register form submit failed for user %s", self.user.id)

        self.is_loading = False
        return result
