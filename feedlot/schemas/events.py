"""
Pydantic schemas for the three event forms (treat, death, realize).

Blank strings are treated as missing so that an untouched select box and an
absent key are rejected the same way.
"""
from datetime import date
from decimal import Decimal
from typing import Any, Optional

import pydantic
from pydantic import BaseModel, Field, field_validator

from ..exceptions import ValidationError
from ..models.enums import DeathReason, Severity


def _blank_to_none(v: Any) -> Any:
    if isinstance(v, str) and not v.strip():
        return None
    return v


class EventForm(BaseModel):
    model_config = {
        "str_strip_whitespace": True,
        "extra": "ignore",
    }


class TreatmentForm(EventForm):
    """Schema for a treatment submission.

    Attributes:
        diagnosis_id: Diagnosis being treated
        treatment_id: Drug/protocol administered; must be linked to the diagnosis
        move_to: Destination pen after treatment
        treatment_person: Who administered it; 'system' when blank
        current_weight: Optional weight at treatment time
        severity: Critical, Medium or Low
        treatment_date: Defaults to today when omitted
    """

    diagnosis_id: str = Field(..., min_length=1)
    treatment_id: str = Field(..., min_length=1)
    move_to: str = Field(..., min_length=1, description="Destination pen id")
    treatment_person: Optional[str] = Field(None, max_length=100)
    current_weight: Optional[float] = Field(None, ge=0)
    severity: Severity = Severity.MEDIUM
    treatment_date: Optional[date] = None

    @field_validator('treatment_person', 'current_weight', 'treatment_date', mode='before')
    @classmethod
    def optional_blank(cls, v: Any) -> Any:
        return _blank_to_none(v)


class DeathForm(EventForm):
    """Schema for a death submission."""

    reason: DeathReason
    necropsy: bool = False
    death_date: Optional[date] = None
    photo_url: Optional[str] = Field(None, max_length=255)

    @field_validator('reason', mode='before')
    @classmethod
    def reason_required(cls, v: Any) -> Any:
        v = _blank_to_none(v)
        if v is None:
            raise ValueError("Reason is required")
        return v.strip() if isinstance(v, str) else v

    @field_validator('death_date', 'photo_url', mode='before')
    @classmethod
    def optional_blank(cls, v: Any) -> Any:
        return _blank_to_none(v)


class RealizeForm(EventForm):
    """Schema for a realization (cull/sale) submission."""

    reason_id: str = Field(..., min_length=1, description="Diagnosis id used as reason")
    weight: Optional[float] = Field(None, ge=0)
    price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    realization_date: Optional[date] = None

    @field_validator('weight', 'price', 'realization_date', mode='before')
    @classmethod
    def optional_blank(cls, v: Any) -> Any:
        return _blank_to_none(v)


def parse_form(form_class, data):
    """Validate raw submission data into ``form_class``.

    Raises:
        ValidationError: listing every missing or malformed field
    """
    try:
        return form_class.model_validate(data or {})
    except pydantic.ValidationError as e:
        fields = []
        for error in e.errors():
            name = str(error['loc'][0]) if error.get('loc') else '__root__'
            if name not in fields:
                fields.append(name)
        raise ValidationError(f"Missing or invalid fields: {', '.join(fields)}", fields=fields) from e
