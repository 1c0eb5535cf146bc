# =============================================================================
# core/services/registration_wizard.py - Registration Step Machine
# =============================================================================
# Drives the six-step appraiser registration:
#
#   1 Personal -> 2 Professional -> 3 Address -> 4 Business -> 5 Documents
#     -> 6 Review & Complete
#
# Moves are one step at a time. Going forward requires the current step's
# gate (can_proceed) to hold; going back is always allowed above step 1.
# Step 6 is terminal: "Complete Registration" hands the data to a completion
# handler, and no handler is wired up yet.
#
# Usage:
#   wizard = RegistrationWizard.from_query_ids("1,3")
#   wizard.update(first_name="Ada", last_name="Lovelace", ...)
#   if wizard.can_proceed():
#       wizard.go_next()
# =============================================================================

import logging
from typing import Any, Callable, Iterable, TypeVar

from core.models.registration import TOTAL_STEPS, RegistrationData
from lib.utils import ApplicationError, is_blank

logger = logging.getLogger(__name__)

T = TypeVar("T")

CompletionHandler = Callable[[RegistrationData], Any]


# =============================================================================
# Step Definitions
# =============================================================================

STEP_TITLES: dict[int, str] = {
    1: "Personal Information",
    2: "Professional Information",
    3: "Address Information",
    4: "Business Information",
    5: "Documents",
    6: "Review & Complete",
}

STEP_DESCRIPTIONS: dict[int, str] = {
    1: "Basic information about you",
    2: "License and certification details",
    3: "Business and service locations",
    4: "Company and professional details",
    5: "Upload required documents",
    6: "Review and complete registration",
}

# Text fields that must be non-blank before leaving each step.
# Step 5 has none (documents are optional); step 6 is gated on acceptances.
STEP_REQUIRED_FIELDS: dict[int, tuple[str, ...]] = {
    1: ("first_name", "last_name", "email", "phone", "years_experience"),
    2: ("company_name", "license_number", "license_state"),
    3: ("address1", "city", "state", "zip_code"),
    4: ("business_type", "tax_id", "formation_date"),
    5: (),
}

STEP_REQUIRED_ACCEPTANCES: dict[int, tuple[str, ...]] = {
    6: ("terms_accepted", "privacy_accepted"),
}


# =============================================================================
# Errors
# =============================================================================

class WizardError(ApplicationError):
    """Base error for invalid wizard operations."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("code", "WIZARD_ERROR")
        super().__init__(message, **kwargs)


class IncompleteStepError(WizardError):
    """Raised when leaving a step whose required fields are not filled in."""

    def __init__(self, step: int, missing: list[str]):
        super().__init__(
            message=f"Step {step} is incomplete",
            code="INCOMPLETE_STEP",
            suggestion=f"Fill in: {', '.join(missing)}",
            details={"step": step, "missing_fields": missing},
        )
        self.step = step
        self.missing = missing


class RegistrationNotWiredError(WizardError):
    """Raised by the default completion handler."""

    def __init__(self):
        super().__init__(
            message="Registration completion is not connected to any backend",
            code="COMPLETION_NOT_WIRED",
            suggestion="Pass a completion_handler to RegistrationWizard",
        )


def not_wired_completion_handler(data: RegistrationData) -> Any:
    """Default "Complete Registration" effect: none is defined yet."""
    raise RegistrationNotWiredError()


# =============================================================================
# Gate
# =============================================================================

def missing_fields(step: int, data: RegistrationData) -> list[str]:
    """
    List what still blocks leaving `step`.

    Returns:
        Names of blank required fields or unaccepted checkboxes, in form
        order. Unknown steps report "step".
    """
    if step in STEP_REQUIRED_FIELDS:
        return [
            name for name in STEP_REQUIRED_FIELDS[step]
            if is_blank(getattr(data, name))
        ]
    if step in STEP_REQUIRED_ACCEPTANCES:
        return [
            name for name in STEP_REQUIRED_ACCEPTANCES[step]
            if getattr(data, name) is not True
        ]
    return ["step"]


def can_proceed(step: int, data: RegistrationData) -> bool:
    """
    Transition guard for leaving `step`.

    | step | gate                                                  |
    |------|-------------------------------------------------------|
    | 1    | first/last name, email, phone, years experience       |
    | 2    | company name, license number, license state           |
    | 3    | address line 1, city, state, zip                      |
    | 4    | business type, tax id, formation date                 |
    | 5    | always                                                |
    | 6    | terms and privacy both accepted                       |

    Any other step value is never allowed to proceed.
    """
    return not missing_fields(step, data)


def progress_percent(step: int) -> int:
    """Completion shown in the progress bar, e.g. step 2 of 6 -> 33."""
    return int(step * 100 / TOTAL_STEPS + 0.5)


def parse_selected_company_ids(raw: str | None) -> list[str]:
    """
    Parse the comma-separated `ids` query parameter.

    Example:
        parse_selected_company_ids("1,2,,3")  # ["1", "2", "3"]
    """
    if not raw:
        return []
    return [part.strip() for part in raw.split(",") if part.strip()]


# =============================================================================
# Wizard
# =============================================================================

class RegistrationWizard:
    """
    Mutable holder of one registration moving through its steps.

    Data is replaced, never edited in place: update() shallow-merges the
    given fields into a new validated RegistrationData. There is no
    field-level undo.
    """

    def __init__(
        self,
        data: RegistrationData | None = None,
        completion_handler: CompletionHandler | None = None,
    ):
        self._data = data or RegistrationData()
        self._completion_handler = completion_handler or not_wired_completion_handler

    @classmethod
    def from_query_ids(
        cls,
        raw_ids: str | None,
        completion_handler: CompletionHandler | None = None,
    ) -> "RegistrationWizard":
        """Start a wizard with companies preselected from an `ids` parameter."""
        data = RegistrationData(selected_company_ids=parse_selected_company_ids(raw_ids))
        return cls(data, completion_handler=completion_handler)

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def data(self) -> RegistrationData:
        return self._data

    @property
    def step(self) -> int:
        return self._data.step

    @property
    def step_title(self) -> str:
        return STEP_TITLES.get(self.step, "")

    @property
    def step_description(self) -> str:
        return STEP_DESCRIPTIONS.get(self.step, "")

    @property
    def progress_percent(self) -> int:
        return progress_percent(self.step)

    @property
    def is_final_step(self) -> bool:
        return self.step == TOTAL_STEPS

    def update(self, **changes: Any) -> RegistrationData:
        """
        Shallow-merge `changes` into the registration.

        Raises:
            WizardError: If `step` is passed (use go_next / go_back)
            pydantic.ValidationError: For unknown fields or bad values
        """
        if "step" in changes:
            raise WizardError(
                "The step cannot be set directly",
                suggestion="Use go_next() or go_back()",
            )
        merged = {**self._data.model_dump(), **changes}
        self._data = RegistrationData.model_validate(merged)
        return self._data

    def selected_companies(self, companies: Iterable[T]) -> list[T]:
        """Keep the companies (anything with an `id`) the user selected."""
        selected = set(self._data.selected_company_ids)
        return [c for c in companies if str(getattr(c, "id", "")) in selected]

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def missing_fields(self) -> list[str]:
        return missing_fields(self.step, self._data)

    def can_proceed(self) -> bool:
        return can_proceed(self.step, self._data)

    def go_next(self) -> bool:
        """
        Advance one step.

        Returns:
            True if the step changed; False at the final step, where
            advancing is a no-op

        Raises:
            IncompleteStepError: If the current step's gate does not hold
        """
        if self.step >= TOTAL_STEPS:
            return False

        missing = self.missing_fields()
        if missing:
            raise IncompleteStepError(self.step, missing)

        self._data = self._data.model_copy(update={"step": self.step + 1})
        logger.debug(f"Registration advanced to step {self.step}")
        return True

    def go_back(self) -> bool:
        """Retreat one step; returns False (no-op) at step 1."""
        if self.step <= 1:
            return False

        self._data = self._data.model_copy(update={"step": self.step - 1})
        logger.debug(f"Registration went back to step {self.step}")
        return True

    def complete(self) -> Any:
        """
        Finish the registration from the review step.

        Returns:
            Whatever the completion handler returns

        Raises:
            IncompleteStepError: If not on step 6 with both acceptances given
            RegistrationNotWiredError: With the default handler
        """
        if not self.is_final_step:
            raise IncompleteStepError(self.step, ["step"])

        missing = self.missing_fields()
        if missing:
            raise IncompleteStepError(self.step, missing)

        logger.info(
            f"Completing registration for {len(self._data.selected_company_ids)} companies"
        )
        return self._completion_handler(self._data)
