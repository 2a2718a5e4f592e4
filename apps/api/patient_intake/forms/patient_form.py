from __future__ import annotations

import logging
from typing import Any, Dict

from ..actions import NewUser
from ..constants import USER_FORM_DEFAULT_VALUES, FormFieldType
from ..otel import get_tracer
from ..validation import UserFormValidation
from .base import IntakeForm, SubmitResult
from .fields import FormField, FormSection

logger = logging.getLogger("api.forms")


class PatientForm(IntakeForm):
    """First-visit form: name, email and phone, then on to registration."""

    title = "Hi There 👋"
    subtitle = "Schedule your first appointment."
    submit_label = "Get Started"
    validation = UserFormValidation
    sections = [
        FormSection(fields=[
            FormField(field_type=FormFieldType.INPUT, name="name", label="Full name",
                      placeholder="John Doe", icon_src="/assets/icons/user.svg", icon_alt="user"),
            FormField(field_type=FormFieldType.INPUT, name="email", label="Email",
                      placeholder="johndoe@gmail.com", icon_src="/assets/icons/email.svg", icon_alt="email"),
            FormField(field_type=FormFieldType.PHONE_INPUT, name="phone", label="Phone number",
                      placeholder="(555) 123-4567"),
        ]),
    ]

    def default_values(self) -> Dict[str, Any]:
        return dict(USER_FORM_DEFAULT_VALUES)

    async def on_submit(self, values: UserFormValidation) -> SubmitResult:
        self.is_loading = True
        result = SubmitResult(ok=False)

        with get_tracer().start_as_current_span("intake.patient_form.submit"):
            try:
                user = NewUser(name=values.name, email=values.email, phone=values.phone)
                new_user = await self.actions.create_user(user)

                if new_user:
                    result = SubmitResult(
                        ok=True,
                        redirect=f"/patients/{new_user.id}/register",
                        record_id=new_user.id,
                        record=new_user.model_dump(),
                    )
            except Exception:
                logger.exception("patient form submit failed")

        self.is_loading = False
        return result
