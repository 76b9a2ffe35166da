"""Placeholder substitution for scenario and criterion step text.

Two independent token namespaces are resolved by two pure functions:
patient-profile tokens (``{chiefComplaint}``, ``{labOrders}``, ...) and
EHR vocabulary tokens (``{flowsheet}``, ``{patientList}``, ...).  Scenario
steps go through both, profile first; flag criteria only through the
vocabulary pass.
"""
from __future__ import annotations

from collections.abc import Mapping

from src.shared.constants import DEFAULT_EHR
from src.shared.models.scenarios import EhrTerms, PatientProfile, Role

# token -> EhrTerms field
EHR_TOKENS: tuple[tuple[str, str], ...] = (
    ("{flowsheet}", "flowsheet"),
    ("{patientList}", "patient_list"),
    ("{alertFlag}", "alert_flag"),
    ("{noteType}", "note_type"),
    ("{orderEntry}", "order_entry"),
    ("{storyboard}", "storyboard"),
)

PROFILE_TOKENS: tuple[str, ...] = (
    "{chiefComplaint}",
    "{diagnosis}",
    "{labOrders}",
    "{labResults}",
    "{problemList}",
    "{medicalHistory}",
    "{antibiotics}",
)

NO_ROLE_LABEL = "--"


def terms_for(ehr: str | None, terminology: Mapping[str, EhrTerms]) -> EhrTerms | None:
    """Return the vocabulary for *ehr*, falling back to the default vendor."""
    return terminology.get(ehr) or terminology.get(DEFAULT_EHR)


def resolve_ehr_terms(
    text: str, ehr: str | None, terminology: Mapping[str, EhrTerms]
) -> str:
    """Replace every EHR vocabulary token in *text* with the vendor's term.

    Tokens without a term (or every token, when neither the vendor nor the
    default vendor has an entry) are left as literal text.
    """
    terms = terms_for(ehr, terminology)
    if terms is None:
        return text
    for token, field_name in EHR_TOKENS:
        term = getattr(terms, field_name)
        if term is not None:
            text = text.replace(token, term)
    return text


def profile_values(profile: PatientProfile | None) -> dict[str, str]:
    """Map each profile token to its rendered value ("" when missing)."""
    if profile is None:
        return {token: "" for token in PROFILE_TOKENS}
    labs = profile.labs
    return {
        "{chiefComplaint}": profile.chief_complaint or "",
        "{diagnosis}": profile.diagnosis or "",
        "{labOrders}": ", ".join(labs.orders) if labs else "",
        "{labResults}": (labs.results or "") if labs else "",
        "{problemList}": profile.problem_list or "",
        "{medicalHistory}": profile.medical_history or "",
        "{antibiotics}": profile.antibiotics or "",
    }


def resolve_profile_vars(text: str, profile: PatientProfile | None) -> str:
    """Replace every patient-profile token in *text*."""
    for token, value in profile_values(profile).items():
        text = text.replace(token, value)
    return text


def resolve_step_text(
    text: str,
    profile: PatientProfile | None,
    ehr: str | None,
    terminology: Mapping[str, EhrTerms],
) -> str:
    """Resolve profile tokens, then EHR tokens, on a scenario step."""
    return resolve_ehr_terms(resolve_profile_vars(text, profile), ehr, terminology)


def role_label(role_key: str | None, roles: Mapping[str, Role]) -> str:
    """Display label of a role.

    ``--`` without a role; the raw key when the role is unknown or has no
    label.
    """
    if not role_key:
        return NO_ROLE_LABEL
    role = roles.get(role_key)
    if role is None or not role.label:
        return role_key
    return role.label
