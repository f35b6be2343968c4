from enum import Enum
from typing import Any, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

# Request outcomes produced by the resilient executor

class FailureReason(str, Enum):
    TIMEOUT = "timeout"
    TRANSPORT_ERROR = "transport-error"
    HTTP_ERROR = "http-error"

class RequestOk(BaseModel):
    model_config = ConfigDict(frozen=True)

    ok: Literal[True] = True
    payload: Any = None
    status_code: int
    attempts: int = 1

class RequestFailed(BaseModel):
    model_config = ConfigDict(frozen=True)

    ok: Literal[False] = False
    reason: FailureReason
    status_code: Optional[int] = None  # Last HTTP status seen, if any
    message: str = ""
    attempts: int = 1

RequestOutcome = Union[RequestOk, RequestFailed]

Number = Union[int, float]

# Remote license authority payloads

class LicenseUser(BaseModel):
    model_config = ConfigDict(extra="ignore")

    plan: Optional[str] = None

class LicenseValidationPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    valid: bool = False
    plan: Optional[str] = None
    user: Optional[LicenseUser] = None
    downloads_remaining: Optional[Number] = None
    expiry_date: Optional[str] = None
    features: Optional[List[str]] = None
    error: Optional[str] = None

    @field_validator("plan", "user", "downloads_remaining", "expiry_date", "error", mode="wrap")
    @classmethod
    def _unreadable_detail_is_missing(cls, value, handler):
        # Only the validity flag may decide the verdict
        try:
            return handler(value)
        except ValidationError:
            return None

    @field_validator("features", mode="before")
    @classmethod
    def _feature_names_only(cls, value):
        if not isinstance(value, list):
            return None
        return [item for item in value if isinstance(item, str)]

# Validation workflow results

UNKNOWN_PLAN = "Unknown"
INVALID_LICENSE = "Invalid license"
INVALID_FORMAT = "Invalid license format"
REQUEST_TIMEOUT = "Request timeout"
NETWORK_ERROR = "Network error"

class ValidationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    valid: Literal[True] = True
    plan: str = UNKNOWN_PLAN
    downloads_remaining: Optional[Number] = None  # None means unlimited
    expiry_date: Optional[str] = None  # None means unknown
    features: List[str] = Field(default_factory=list)

    @property
    def unlimited_downloads(self) -> bool:
        return self.downloads_remaining is None

class ErrorKind(str, Enum):
    MALFORMED = "malformed"
    TIMEOUT = "timeout"
    NETWORK_ERROR = "network_error"
    REMOTE_REJECTED = "remote_rejected"

class ValidationFailure(BaseModel):
    model_config = ConfigDict(frozen=True)

    valid: Literal[False] = False
    kind: ErrorKind
    reason_code: str

    @property
    def recoverable(self) -> bool:
        """Whether retrying the same key may succeed."""
        return self.kind in (ErrorKind.TIMEOUT, ErrorKind.NETWORK_ERROR)

ValidationOutcome = Union[ValidationResult, ValidationFailure]

# API facade models

class LicenseFormatRequest(BaseModel):
    value: str
    cursor: Optional[int] = None

class LicenseFormatResponse(BaseModel):
    licenseKey: str
    cursor: int
    validFormat: bool

class LicenseValidationRequest(BaseModel):
    licenseKey: str

class LicenseValidationResponse(BaseModel):
    valid: bool
    plan: Optional[str] = None
    downloadsRemaining: Optional[Number] = None
    unlimitedDownloads: Optional[bool] = None
    expiryDate: Optional[str] = None
    expires: Optional[str] = None
    features: List[str] = Field(default_factory=list)
    kind: Optional[ErrorKind] = None
    reason: Optional[str] = None
    recoverable: Optional[bool] = None
    message: Optional[str] = None

class RemoteHealthResponse(BaseModel):
    healthy: bool
    statusCode: Optional[int] = None
    reason: Optional[FailureReason] = None

class HealthCheckResponse(BaseModel):
    status: str
    service: str
    version: str
