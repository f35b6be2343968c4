import asyncio
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .license_client import LicenseClient
from .license_key import is_valid_format, reformat_input
from .logging_config import setup_logging
from .messages import describe_failure, format_expiry
from .models import (
    HealthCheckResponse,
    LicenseFormatRequest,
    LicenseFormatResponse,
    LicenseValidationRequest,
    LicenseValidationResponse,
    RemoteHealthResponse,
    RequestOk,
    ValidationResult,
)

setup_logging()

def get_license_client() -> LicenseClient:
    return LicenseClient()

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Probe the authority once at startup without holding up requests
    probe = asyncio.create_task(get_license_client().check_health())
    yield
    if not probe.done():
        probe.cancel()

app = FastAPI(
    title="PECU License Client Service",
    description="License key formatting and validation for the PECU premium page",
    version=__version__,
    lifespan=lifespan
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API Endpoints
@app.post("/api/license/format", response_model=LicenseFormatResponse)
async def format_license(request: LicenseFormatRequest):
    """
    Reformat a license key input field as the user types.

    Returns the canonical key, where the cursor should move to, and whether
    the key already has the full PECU-XXXX-XXXX-XXXX-XXXX shape.
    """
    cursor = request.cursor if request.cursor is not None else len(request.value)
    license_key, new_cursor = reformat_input(request.value, cursor)
    return {
        "licenseKey": license_key,
        "cursor": new_cursor,
        "validFormat": is_valid_format(license_key)
    }

@app.post("/api/license/validate", response_model=LicenseValidationResponse)
async def validate_license(
    request: LicenseValidationRequest,
    client: LicenseClient = Depends(get_license_client)
):
    """
    Validate a license key with the PECU license server.

    The verdict is always returned as data with status 200: a rejected,
    malformed or unverifiable key is a normal outcome, not a server error.
    """
    outcome = await client.validate(request.licenseKey)

    if isinstance(outcome, ValidationResult):
        return {
            "valid": True,
            "plan": outcome.plan,
            "downloadsRemaining": outcome.downloads_remaining,
            "unlimitedDownloads": outcome.unlimited_downloads,
            "expiryDate": outcome.expiry_date,
            "expires": format_expiry(outcome.expiry_date),
            "features": outcome.features
        }

    return {
        "valid": False,
        "kind": outcome.kind,
        "reason": outcome.reason_code,
        "recoverable": outcome.recoverable,
        "message": describe_failure(outcome)
    }

@app.get("/api/license/health", response_model=RemoteHealthResponse)
async def license_server_health(client: LicenseClient = Depends(get_license_client)):
    """
    Check whether the PECU license server is reachable.
    """
    outcome = await client.gateway.check_health()
    if isinstance(outcome, RequestOk):
        return {"healthy": True, "statusCode": outcome.status_code}
    return {"healthy": False, "statusCode": outcome.status_code, "reason": outcome.reason}

@app.get("/health", response_model=HealthCheckResponse)
async def health_check():
    """
    Health check endpoint for container orchestration.
    """
    return {
        "status": "healthy",
        "service": "license-client",
        "version": __version__
    }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
