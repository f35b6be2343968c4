from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    # License Server Configuration
    LICENSE_API_URL: str = "https://api.pecu.tools"
    LICENSE_VALIDATE_ENDPOINT: str = "/api/v1/license/validate"
    LICENSE_HEALTH_ENDPOINT: str = "/api/v1/health"
    LICENSE_API_TIMEOUT: float = 30.0

    # Retry Configuration
    RETRY_ATTEMPTS: int = 3
    RETRY_DELAY: float = 1.0  # seconds, multiplied by the attempt number

    # Client Identity
    USER_AGENT: str = "PECU-Web/1.0"
    DEFAULT_HARDWARE_HASH: str = "browser-check"
    USE_HARDWARE_FINGERPRINT: bool = False  # Bind validation to this machine

    # Logging
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"

settings = Settings()
