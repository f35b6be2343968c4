import logging
from typing import Optional

from .gateway import RemoteLicenseGateway, parse_validation_payload
from .license_key import is_valid_format, mask_key, normalize
from .models import (
    INVALID_FORMAT,
    INVALID_LICENSE,
    NETWORK_ERROR,
    REQUEST_TIMEOUT,
    UNKNOWN_PLAN,
    ErrorKind,
    FailureReason,
    LicenseValidationPayload,
    RequestFailed,
    ValidationFailure,
    ValidationOutcome,
    ValidationResult,
)

logger = logging.getLogger(__name__)

class LicenseClient:
    """
    Validation workflow for user-supplied license keys.

    Normalizes the key, rejects malformed keys locally and confirms the
    rest with the license authority. Every call is independent: no retry
    state, cache or partial result is kept between calls.
    """

    normalize = staticmethod(normalize)
    is_valid_format = staticmethod(is_valid_format)

    def __init__(self, gateway: Optional[RemoteLicenseGateway] = None):
        self.gateway = gateway or RemoteLicenseGateway()

    async def validate(self, raw_input: str, hardware_hash: Optional[str] = None) -> ValidationOutcome:
        """
        Validate a license key as typed or pasted by the user.

        Returns:
            ValidationResult when the authority confirms the key, otherwise
            a ValidationFailure. Transport problems never raise.
        """
        license_key = normalize(raw_input)

        if not is_valid_format(license_key):
            logger.info("Rejected malformed license key")
            return ValidationFailure(kind=ErrorKind.MALFORMED, reason_code=INVALID_FORMAT)

        outcome = await self.gateway.validate_license(license_key, hardware_hash)

        if isinstance(outcome, RequestFailed):
            return self._failure_from_request(license_key, outcome)

        payload = parse_validation_payload(outcome.payload)
        if not payload.valid:
            reason_code = payload.error or INVALID_LICENSE
            logger.info("License %s rejected: %s", mask_key(license_key), reason_code)
            return ValidationFailure(kind=ErrorKind.REMOTE_REJECTED, reason_code=reason_code)

        logger.info("License %s is valid", mask_key(license_key))
        return self._result_from_payload(payload)

    async def check_health(self) -> bool:
        """
        Report whether the license authority answers its health probe.
        """
        outcome = await self.gateway.check_health()
        return outcome.ok

    def _failure_from_request(self, license_key: str, outcome: RequestFailed) -> ValidationFailure:
        logger.error(
            "License %s could not be validated after %d attempts: %s",
            mask_key(license_key), outcome.attempts, outcome.message
        )
        if outcome.reason == FailureReason.TIMEOUT:
            return ValidationFailure(kind=ErrorKind.TIMEOUT, reason_code=REQUEST_TIMEOUT)
        return ValidationFailure(kind=ErrorKind.NETWORK_ERROR, reason_code=NETWORK_ERROR)

    def _result_from_payload(self, payload: LicenseValidationPayload) -> ValidationResult:
        plan = payload.plan
        if not plan and payload.user:
            plan = payload.user.plan

        return ValidationResult(
            plan=plan or UNKNOWN_PLAN,
            downloads_remaining=payload.downloads_remaining,
            expiry_date=payload.expiry_date or None,
            features=list(payload.features or [])
        )
