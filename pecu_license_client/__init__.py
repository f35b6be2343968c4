"""
License Client for PECU Premium

Turns a user-supplied license key into a verdict: the key is normalized,
checked for the PECU-XXXX-XXXX-XXXX-XXXX shape locally, and confirmed with
the PECU license server over a timeout-and-retry request executor.
"""

__version__ = "1.0.0"

from .license_client import LicenseClient
from .license_key import is_valid_format, normalize, reformat_input
from .models import ErrorKind, ValidationFailure, ValidationResult

__all__ = [
    "LicenseClient",
    "ErrorKind",
    "ValidationFailure",
    "ValidationResult",
    "is_valid_format",
    "normalize",
    "reformat_input",
]
