import logging
from typing import Any, Optional

from pydantic import ValidationError

from .config import settings
from .executor import RequestOperation, ResilientExecutor
from .hardware_fingerprint import resolve_hardware_hash
from .license_key import mask_key
from .models import LicenseValidationPayload, RequestOk, RequestOutcome

logger = logging.getLogger(__name__)

def parse_validation_payload(payload: Any) -> LicenseValidationPayload:
    """
    Parse the body of a successful validate call.

    Bodies that are not an object, or that do not fit the expected schema,
    are read as an invalid verdict without a reason.
    """
    if not isinstance(payload, dict):
        logger.warning("Unexpected validation payload type: %s", type(payload).__name__)
        return LicenseValidationPayload(valid=False)

    try:
        return LicenseValidationPayload.model_validate(payload)
    except ValidationError as e:
        logger.warning("Malformed validation payload: %s", e.errors())
        return LicenseValidationPayload(valid=False)

class RemoteLicenseGateway:
    """The two calls the client makes against the PECU license authority."""

    def __init__(self, executor: Optional[ResilientExecutor] = None):
        self.executor = executor or ResilientExecutor()

    async def validate_license(self, license_key: str, hardware_hash: Optional[str] = None) -> RequestOutcome:
        """
        Ask the authority whether a canonical license key is valid.
        """
        operation = RequestOperation(
            method="POST",
            path=settings.LICENSE_VALIDATE_ENDPOINT,
            json={
                "license_key": license_key,
                "hardware_hash": resolve_hardware_hash(hardware_hash)
            }
        )
        logger.info("Validating license %s", mask_key(license_key))
        return await self.executor.execute(operation)

    async def check_health(self) -> RequestOutcome:
        """
        Probe the authority for liveness.

        The result is diagnostic only and never feeds into validation.
        """
        outcome = await self.executor.execute(
            RequestOperation(method="GET", path=settings.LICENSE_HEALTH_ENDPOINT)
        )

        if isinstance(outcome, RequestOk):
            logger.info("API health check: OK")
        else:
            logger.warning("API health check failed: %s", outcome.message or outcome.reason.value)

        return outcome
