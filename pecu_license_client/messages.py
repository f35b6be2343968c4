"""
Display copy for validation outcomes.

Maps the stable reason codes of failed validations to user-facing copy
and renders result fields for display.
"""

from datetime import date, datetime
from typing import Optional

from .models import Number, ValidationFailure

UNKNOWN_DATE = "—"
UNLIMITED = "∞"

ERROR_MESSAGES = {
    "License not found": "The license key you entered was not found. Please check your email receipt and try again.",
    "License expired": "Your license has expired. Please renew your subscription to continue using premium features.",
    "License inactive": "Your license is not active. Please contact support if you believe this is an error.",
    "Invalid hardware": "This license is registered to a different hardware. Contact support to transfer your license.",
    "Rate limit exceeded": "Too many validation attempts. Please wait a moment and try again.",
    "Request timeout": "The validation request timed out. Please check your internet connection and try again.",
    "Network error": "Unable to connect to the license server. Please check your internet connection and try again.",
    "Invalid license format": "Invalid license key format. Please check your license key and try again.",
}

def describe_failure(failure: ValidationFailure) -> str:
    return describe_reason(failure.reason_code)

def describe_reason(reason_code: str) -> str:
    return ERROR_MESSAGES.get(reason_code, f"Validation failed: {reason_code}")

def format_expiry(value: Optional[str]) -> str:
    """
    Render an expiry date as e.g. "March 5, 2027".

    Unknown or unparsable dates render as a dash.
    """
    if not value:
        return UNKNOWN_DATE

    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00")).date()
    except ValueError:
        try:
            parsed = date.fromisoformat(value[:10])
        except ValueError:
            return UNKNOWN_DATE

    return f"{parsed.strftime('%B')} {parsed.day}, {parsed.year}"

def format_downloads(downloads_remaining: Optional[Number]) -> str:
    if downloads_remaining is None:
        return UNLIMITED
    return str(downloads_remaining)
