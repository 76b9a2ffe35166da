"""Pydantic v2 models for the scenario library document.

``test-definitions.json`` holds the reusable clinical scenarios, the
per-flag verification criteria, the EHR vocabulary table and the role
catalog.
"""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel

_DOCUMENT_CONFIG = {
    "alias_generator": to_camel,
    "populate_by_name": True,
    "frozen": True,
    "extra": "ignore",
}


class Criterion(BaseModel):
    """One verification step tied to a flag state."""
    role: str | None = None
    step: str

    model_config = _DOCUMENT_CONFIG


class FlagTestCriteria(BaseModel):
    """Verification steps for a flag; either side may be omitted."""
    when_enabled: list[Criterion] | None = None
    when_disabled: list[Criterion] | None = None

    model_config = _DOCUMENT_CONFIG


class Labs(BaseModel):
    orders: list[str] = Field(default_factory=list)
    results: str | None = None

    model_config = _DOCUMENT_CONFIG

    @field_validator("orders", mode="before")
    @classmethod
    def null_orders_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class PatientProfile(BaseModel):
    """Clinical data used to fill a scenario's step templates."""
    age: int | str | None = None
    sex: str | None = None
    location: str | None = None
    chief_complaint: str | None = None
    diagnosis: str | None = None
    labs: Labs | None = None
    problem_list: str | None = None
    medical_history: str | None = None
    antibiotics: str | None = None

    model_config = _DOCUMENT_CONFIG


class ScenarioStep(BaseModel):
    role: str | None = None
    action: str = ""
    expected: str = ""

    model_config = _DOCUMENT_CONFIG

    @field_validator("action", "expected", mode="before")
    @classmethod
    def null_text_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class Scenario(BaseModel):
    """A reusable clinical test workflow for one product."""
    key: str
    name: str
    product: str
    description: str = ""
    workflow: str = ""
    patient_profile: PatientProfile | None = None
    required_flags: list[str] = Field(default_factory=list)
    setup_steps: list[ScenarioStep] = Field(default_factory=list)
    core_test_steps: list[ScenarioStep] = Field(default_factory=list)

    model_config = _DOCUMENT_CONFIG

    @field_validator("description", "workflow", mode="before")
    @classmethod
    def null_text_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("required_flags", "setup_steps", "core_test_steps", mode="before")
    @classmethod
    def null_lists_as_empty(cls, value: Any) -> Any:
        # Hand-edited documents use null for "none"
        return [] if value is None else value


class EhrTerms(BaseModel):
    """Vendor vocabulary substituted into step templates."""
    flowsheet: str | None = None
    patient_list: str | None = None
    alert_flag: str | None = None
    note_type: str | None = None
    order_entry: str | None = None
    storyboard: str | None = None

    model_config = _DOCUMENT_CONFIG


class Role(BaseModel):
    label: str | None = None

    model_config = _DOCUMENT_CONFIG


class ScenarioLibrary(BaseModel):
    """The parsed ``test-definitions.json`` document."""
    scenarios: list[Scenario] = Field(default_factory=list)
    flag_test_criteria: dict[str, FlagTestCriteria] = Field(default_factory=dict)
    ehr_terminology: dict[str, EhrTerms] = Field(default_factory=dict)
    roles: dict[str, Role] = Field(default_factory=dict)

    model_config = _DOCUMENT_CONFIG
