# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .company_service import CompanyRepository
from .database_setup import DatabaseSetupService
from .registration_wizard import (
    IncompleteStepError,
    RegistrationNotWiredError,
    RegistrationWizard,
    WizardError,
    can_proceed,
)

__all__ = [
    "CompanyRepository",
    "DatabaseSetupService",
    "RegistrationWizard",
    "WizardError",
    "IncompleteStepError",
    "RegistrationNotWiredError",
    "can_proceed",
]
