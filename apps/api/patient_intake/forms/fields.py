from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from ..constants import FormFieldType


class FieldOption(BaseModel):
    value: str
    label: str
    image: Optional[str] = None


class FormField(BaseModel):
    """Declarative description of one form control."""
    field_type: FormFieldType
    name: str
    label: Optional[str] = None
    placeholder: Optional[str] = None
    icon_src: Optional[str] = None
    icon_alt: Optional[str] = None
    disabled: bool = False
    options: List[FieldOption] = Field(default_factory=list)
    # skeleton fields name the widget the client should mount in their place
    widget: Optional[str] = None
    date_format: str = "MM/dd/yyyy"
    show_time_select: bool = False
    extra: Dict[str, Any] = Field(default_factory=dict)


class FormSection(BaseModel):
    title: Optional[str] = None
    fields: List[FormField]
    # names of fields rendered side by side (xl breakpoint)
    rows: List[List[str]] = Field(default_factory=list)


def _json_value(value: Any) -> Any:
    if isinstance(value, date):
        return value.isoformat()
    return value


def render_field(field: FormField, value: Any = None) -> Dict[str, Any]:
    """
    Turn a FormField plus its current value into the descriptor the browser
    mounts. Keys are camelCase to match the client components.
    """
    out: Dict[str, Any] = {
        "type": field.field_type.value,
        "name": field.name,
        "label": field.label,
        "placeholder": field.placeholder,
        "disabled": field.disabled,
        "value": _json_value(value),
    }
    if field.icon_src:
        out["icon"] = {"src": field.icon_src, "alt": field.icon_alt or field.name}

    if field.field_type == FormFieldType.PHONE_INPUT:
        out.update({"defaultCountry": "US", "international": True, "withCountryCallingCode": True})
    elif field.field_type == FormFieldType.DATE_PICKER:
        out.update({"dateFormat": field.date_format, "showTimeSelect": field.show_time_select})
    elif field.field_type == FormFieldType.CHECKBOX:
        out["value"] = bool(value)
    elif field.field_type == FormFieldType.SELECT:
        out["options"] = [o.model_dump(exclude_none=True) for o in field.options]
    elif field.field_type == FormFieldType.SKELETON:
        out["widget"] = field.widget
        if field.options:
            out["options"] = [o.model_dump(exclude_none=True) for o in field.options]

    out.update(field.extra)
    return out


def render_section(section: FormSection, values: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "title": section.title,
        "rows": section.rows,
        "fields": [render_field(f, values.get(f.name)) for f in section.fields],
    }
