# =============================================================================
# lib/validation.py - Input Validation and Sanitization
# =============================================================================
# Pure functions that sanitize and validate untrusted input before it reaches
# the database or is echoed back to a client:
# - sanitize_string: pattern-based XSS scrubbing + length cap
# - validate_company_data: company payloads (name, phone, email, ...)
# - validate_pagination_params: page / limit query parameters
# - validate_search_params: name query / state filter
# - validate_id: numeric path identifiers
#
# Sanitization never fails (worst case it yields ""); only the pattern checks
# that follow it can reject a value. This is defense in depth, not a full
# HTML sanitizer. Every query built from these values must still use bound
# parameters.
#
# Usage:
#   from lib.validation import validate_search_params
#   result = validate_search_params(request_query, request_state)
#   if not result.is_valid:
#       ...  # result.errors -> [FieldError(field="state", ...)]
# =============================================================================

import re
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

from core.models.validation import (
    FieldError,
    PaginationParams,
    SanitizedCompany,
    SearchParams,
    ValidationResult,
)


# =============================================================================
# Constants
# =============================================================================

MAX_STRING_LENGTH = 1000
MAX_SEARCH_QUERY_LENGTH = 100
MAX_PAGE = 1000
MAX_LIMIT = 100
DEFAULT_PAGE = 1
DEFAULT_LIMIT = 20
ALL_STATES = "ALL"

# Largest integer a double can represent exactly (2**53 - 1). Ids above it
# cannot round-trip through JSON clients.
MAX_SAFE_INTEGER = 9007199254740991

US_STATES = frozenset({
    "AL", "AK", "AZ", "AR", "CA", "CO", "CT", "DE", "FL", "GA",
    "HI", "ID", "IL", "IN", "IA", "KS", "KY", "LA", "ME", "MD",
    "MA", "MI", "MN", "MS", "MO", "MT", "NE", "NV", "NH", "NJ",
    "NM", "NY", "NC", "ND", "OH", "OK", "OR", "PA", "RI", "SC",
    "SD", "TN", "TX", "UT", "VT", "VA", "WA", "WV", "WI", "WY",
})

# RFC 5322-ish email address
EMAIL_REGEX = re.compile(
    r"[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+"
    r"@[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*"
)

# Loose US phone number: +1 (800) 555-0123, 800.555.0123, 8005550123, ...
PHONE_REGEX = re.compile(
    r"[+]?[1]?[-.\s]?[(]?[0-9]{3}[)]?[-.\s]?[0-9]{3}[-.\s]?[0-9]{4}"
)

# http(s) URL with optional port, path, query string and fragment
URL_REGEX = re.compile(
    r"https?://(?:[-\w.])+(?::[0-9]+)?(?:/(?:[\w/_.])*)?"
    r"(?:\?(?:[\w&=%.])*)?(?:#(?:[\w.])*)?",
    re.ASCII,
)

# Matches up to the first closing tag, across newlines ([^<] includes "\n")
_SCRIPT_BLOCK = re.compile(
    r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE
)
_IFRAME_BLOCK = re.compile(
    r"<iframe\b[^<]*(?:(?!</iframe>)<[^<]*)*</iframe>", re.IGNORECASE
)
_JAVASCRIPT_SCHEME = re.compile(r"javascript:", re.IGNORECASE)
_EVENT_HANDLER = re.compile(r"on\w+\s*=", re.IGNORECASE)

_INTEGER_STRING = re.compile(r"\s*[+-]?[0-9]+\s*")


# =============================================================================
# Sanitization
# =============================================================================

def sanitize_string(value: Any) -> str:
    """
    Scrub an untrusted string.

    Removes <script>/<iframe> blocks, javascript: schemes and inline
    event-handler attributes (onclick=, onerror = ...) until none are left,
    then trims whitespace and caps the result at MAX_STRING_LENGTH
    characters. Sanitizing the output again returns it unchanged.

    Args:
        value: Anything; non-strings sanitize to ""

    Returns:
        The cleaned string

    Example:
        sanitize_string('  <script>alert(1)</script>Acme  ')  # "Acme"
        sanitize_string(42)                                    # ""
    """
    if not isinstance(value, str):
        return ""

    # Removing one match can splice a new one together ("jajavascript:vascript:")
    cleaned = value
    previous = None
    while cleaned != previous:
        previous = cleaned
        cleaned = _SCRIPT_BLOCK.sub("", cleaned)
        cleaned = _IFRAME_BLOCK.sub("", cleaned)
        cleaned = _JAVASCRIPT_SCHEME.sub("", cleaned)
        cleaned = _EVENT_HANDLER.sub("", cleaned)

    return cleaned.strip()[:MAX_STRING_LENGTH].strip()


def _parse_int(value: Any) -> int | None:
    """
    Parse a query-string style integer.

    Accepts ints and strings of optionally signed decimal digits. Booleans,
    fractional numbers and anything else return None.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str) and _INTEGER_STRING.fullmatch(value):
        try:
            return int(value)
        except ValueError:
            # Exceeds the interpreter's int string conversion limit
            return None
    return None


# =============================================================================
# Company Payloads
# =============================================================================

def _check_optional(
    value: Any,
    field: str,
    label: str,
    errors: list[FieldError],
    pattern: re.Pattern | None = None,
    normalize=None,
    allowed: frozenset[str] | None = None,
    invalid_message: str = "",
) -> str:
    """Sanitize and check one optional company field, recording any errors."""
    if not value:
        return ""

    if not isinstance(value, str):
        errors.append(FieldError(field=field, message=f"{label} must be a string"))
        return ""

    cleaned = sanitize_string(value)
    if normalize is not None:
        cleaned = normalize(cleaned)

    if pattern is not None and not pattern.fullmatch(cleaned):
        errors.append(FieldError(field=field, message=invalid_message))
    elif allowed is not None and cleaned not in allowed:
        errors.append(FieldError(field=field, message=invalid_message))

    return cleaned


def validate_company_data(data: Mapping[str, Any] | BaseModel) -> ValidationResult[SanitizedCompany]:
    """
    Validate and sanitize a company payload.

    Rules:
    - name: required string, 2-255 characters after sanitization
    - phone: optional, loose US phone format
    - email: optional, lower-cased, RFC 5322-ish format
    - state: optional, upper-cased, one of the 50 US state codes
    - website / signup_url: optional, lower-cased http(s) URL

    The signup URL may be sent as "signup_url" or "signupUrl"; the
    snake_case key wins when both are set. All fields are checked even
    after an earlier failure.

    Args:
        data: Raw mapping (e.g. a parsed JSON body) or a SanitizedCompany
              from a previous call

    Returns:
        ValidationResult with SanitizedCompany on success
    """
    if isinstance(data, BaseModel):
        data = data.model_dump()
    if not isinstance(data, Mapping):
        data = {}

    errors: list[FieldError] = []

    name = data.get("name")
    sanitized_name = ""
    if not name or not isinstance(name, str):
        errors.append(FieldError(field="name", message="Company name is required"))
    else:
        sanitized_name = sanitize_string(name)
        if len(sanitized_name) < 2:
            errors.append(FieldError(
                field="name", message="Company name must be at least 2 characters"
            ))
        elif len(sanitized_name) > 255:
            errors.append(FieldError(
                field="name", message="Company name must be less than 255 characters"
            ))

    phone = _check_optional(
        data.get("phone"), "phone", "Phone number", errors,
        pattern=PHONE_REGEX,
        invalid_message="Invalid phone number format",
    )
    email = _check_optional(
        data.get("email"), "email", "Email", errors,
        pattern=EMAIL_REGEX,
        normalize=str.lower,
        invalid_message="Invalid email format",
    )
    state = _check_optional(
        data.get("state"), "state", "State", errors,
        normalize=str.upper,
        allowed=US_STATES,
        invalid_message="Invalid US state code",
    )
    website = _check_optional(
        data.get("website"), "website", "Website", errors,
        pattern=URL_REGEX,
        normalize=str.lower,
        invalid_message="Invalid website URL format",
    )
    signup_url = _check_optional(
        data.get("signup_url") or data.get("signupUrl"), "signup_url", "Signup URL", errors,
        pattern=URL_REGEX,
        normalize=str.lower,
        invalid_message="Invalid signup URL format",
    )

    sanitized = None
    if not errors:
        sanitized = SanitizedCompany(
            name=sanitized_name,
            phone=phone,
            email=email,
            state=state,
            website=website,
            signup_url=signup_url,
        )

    return ValidationResult[SanitizedCompany].build(errors, sanitized)


# =============================================================================
# Query Parameters
# =============================================================================

def validate_pagination_params(page: Any = None, limit: Any = None) -> ValidationResult[PaginationParams]:
    """
    Validate page/limit query parameters.

    page defaults to 1 and must be an integer in 1..1000; limit defaults to
    20 and must be an integer in 1..100. Values out of range are errors, not
    clamped.

    Example:
        validate_pagination_params(None, None).sanitized_data
        # PaginationParams(page=1, limit=20)
        validate_pagination_params("5", "150").error_fields()
        # ["limit"]
    """
    errors: list[FieldError] = []
    page_num = DEFAULT_PAGE
    limit_num = DEFAULT_LIMIT

    if page is not None:
        parsed = _parse_int(page)
        if parsed is None or parsed < 1:
            errors.append(FieldError(field="page", message="Page must be a positive integer"))
        elif parsed > MAX_PAGE:
            errors.append(FieldError(field="page", message="Page number too large"))
        else:
            page_num = parsed

    if limit is not None:
        parsed = _parse_int(limit)
        if parsed is None or parsed < 1:
            errors.append(FieldError(field="limit", message="Limit must be a positive integer"))
        elif parsed > MAX_LIMIT:
            errors.append(FieldError(field="limit", message=f"Limit cannot exceed {MAX_LIMIT}"))
        else:
            limit_num = parsed

    sanitized = None if errors else PaginationParams(page=page_num, limit=limit_num)
    return ValidationResult[PaginationParams].build(errors, sanitized)


def validate_search_params(query: Any = None, state: Any = None) -> ValidationResult[SearchParams]:
    """
    Validate the directory search query and state filter.

    The query defaults to "" and may be at most 100 characters after
    sanitization. The state defaults to "ALL", is upper-cased, and must be
    "ALL" or a US state code.
    """
    errors: list[FieldError] = []
    sanitized_query = ""
    sanitized_state = ALL_STATES

    if query is not None:
        if not isinstance(query, str):
            errors.append(FieldError(field="query", message="Search query must be a string"))
        else:
            sanitized_query = sanitize_string(query)
            if len(sanitized_query) > MAX_SEARCH_QUERY_LENGTH:
                errors.append(FieldError(field="query", message="Search query too long"))

    if state is not None:
        if not isinstance(state, str):
            errors.append(FieldError(field="state", message="State filter must be a string"))
        else:
            sanitized_state = sanitize_string(state).upper()
            if sanitized_state != ALL_STATES and sanitized_state not in US_STATES:
                errors.append(FieldError(field="state", message="Invalid state filter"))

    sanitized = None if errors else SearchParams(query=sanitized_query, state=sanitized_state)
    return ValidationResult[SearchParams].build(errors, sanitized)


def validate_id(value: Any) -> ValidationResult[int]:
    """
    Validate a numeric record identifier.

    Example:
        validate_id("42").sanitized_data   # 42
        validate_id("0").error_fields()    # ["id"]
    """
    errors: list[FieldError] = []
    parsed = None

    if not value:
        errors.append(FieldError(field="id", message="ID is required"))
    else:
        parsed = _parse_int(value)
        if parsed is None or parsed < 1:
            errors.append(FieldError(field="id", message="ID must be a positive integer"))
        elif parsed > MAX_SAFE_INTEGER:
            errors.append(FieldError(field="id", message="ID too large"))

    return ValidationResult[int].build(errors, None if errors else parsed)
