from .base import IntakeForm, SubmitResult
from .fields import FieldOption, FormField, FormSection, render_field
from .patient_form import PatientForm
from .register_form import RegisterForm

__all__ = [
    "FieldOption",
    "FormField",
    "FormSection",
    "IntakeForm",
    "PatientForm",
    "RegisterForm",
    "SubmitResult",
    "render_field",
]
