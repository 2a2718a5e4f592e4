from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Type

from pydantic import BaseModel, Field, ValidationError

from ..actions import PatientActions
from ..validation import form_errors
from .fields import FormSection, render_section

logger = logging.getLogger("api.forms")


class SubmitResult(BaseModel):
    ok: bool
    errors: Dict[str, str] = Field(default_factory=dict)
    redirect: Optional[str] = None
    # id of the user/patient record the action returned
    record_id: Optional[str] = None
    record: Optional[Dict[str, Any]] = None


class IntakeForm(ABC):
    title: str = ""
    subtitle: str = ""
    submit_label: str = "Submit"
    validation: Type[BaseModel]
    sections: List[FormSection] = []

    def __init__(self, actions: PatientActions):
        self.actions = actions
        self.is_loading = False

    def default_values(self) -> Dict[str, Any]:
        return {}

    def describe(self) -> Dict[str, Any]:
        values = self.default_values()
        return {
            "title": self.title,
            "subtitle": self.subtitle,
            "submitLabel": self.submit_label,
            "isLoading": self.is_loading,
            "defaultValues": values,
            "sections": [render_section(s, values) for s in self.sections],
        }

    async def handle_submit(self, raw: Dict[str, Any]) -> SubmitResult:
        """Validate, then hand over to on_submit. Invalid input never reaches the action."""
        try:
            values = self.validation.model_validate(raw)
        except ValidationError as e:
            return SubmitResult(ok=False, errors=form_errors(e))
        return await self.on_submit(values)

    @abstractmethod
    async def on_submit(self, values: Any) -> SubmitResult:
        """Run the action for validated values. Subclasses own is_loading."""
