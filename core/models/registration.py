# =============================================================================
# core/models/registration.py - Appraiser Registration Schemas
# =============================================================================
# RegistrationData is everything the six-step registration wizard collects:
# - Step 1: personal details
# - Step 2: professional licensing
# - Step 3: address
# - Step 4: business entity
# - Step 5: documents (optional)
# - Step 6: review + terms / privacy acceptance
#
# It is created fresh for each wizard, updated by shallow merge, and never
# persisted by this service.
# =============================================================================

from pydantic import BaseModel, ConfigDict, Field, field_validator

REFERENCE_COUNT = 3
TOTAL_STEPS = 6


class Reference(BaseModel):
    """A professional reference supplied by the appraiser."""

    model_config = ConfigDict(extra="forbid")

    name: str = ""
    company: str = ""
    email: str = ""
    phone: str = ""
    relationship: str = ""


def _empty_references() -> list[Reference]:
    return [Reference() for _ in range(REFERENCE_COUNT)]


class RegistrationData(BaseModel):
    """
    State of one appraiser registration.

    Unknown fields are rejected so a misspelled update fails loudly instead
    of being silently dropped.

    Example:
        data = RegistrationData(selected_company_ids=["1", "3"])
        data.step              # 1
        len(data.references)   # 3
    """

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    # Companies picked in the directory before starting the wizard
    selected_company_ids: list[str] = Field(default_factory=list)

    step: int = Field(default=1, ge=1, le=TOTAL_STEPS)

    # -------------------------------------------------------------------------
    # Step 1 - Personal
    # -------------------------------------------------------------------------
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    phone: str | None = None
    years_experience: str | None = None

    # -------------------------------------------------------------------------
    # Step 2 - Professional
    # -------------------------------------------------------------------------
    company_name: str | None = None
    license_number: str | None = None
    license_state: str | None = None
    license_expiration: str | None = None
    designations: set[str] = Field(default_factory=set)
    specialties: set[str] = Field(default_factory=set)
    languages: set[str] = Field(default_factory=set)

    # -------------------------------------------------------------------------
    # Step 3 - Address
    # -------------------------------------------------------------------------
    address1: str | None = None
    address2: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    geographic_coverage: set[str] = Field(default_factory=set)

    # -------------------------------------------------------------------------
    # Step 4 - Business
    # -------------------------------------------------------------------------
    business_type: str | None = None
    tax_id: str | None = None
    formation_date: str | None = None
    references: list[Reference] = Field(
        default_factory=_empty_references,
        min_length=REFERENCE_COUNT,
        max_length=REFERENCE_COUNT,
    )

    # -------------------------------------------------------------------------
    # Step 5 - Documents (document kind -> file reference)
    # -------------------------------------------------------------------------
    documents: dict[str, str] = Field(default_factory=dict)

    # -------------------------------------------------------------------------
    # Step 6 - Review
    # -------------------------------------------------------------------------
    terms_accepted: bool = False
    privacy_accepted: bool = False

    @field_validator("selected_company_ids")
    @classmethod
    def _dedupe_ids(cls, value: list[str]) -> list[str]:
        # Set semantics, first-seen order kept for display
        return list(dict.fromkeys(v for v in value if v))
