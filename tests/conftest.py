"""
License Client Tests - Test Configuration.

Provides fixtures that wire the executor to an in-memory httpx transport
and record backoff delays instead of sleeping.
"""

from typing import Any, Callable, Dict, List

import httpx
import pytest

from pecu_license_client.executor import ResilientExecutor, RetryPolicy
from pecu_license_client.gateway import RemoteLicenseGateway
from pecu_license_client.license_client import LicenseClient

TEST_BASE_URL = "https://api.pecu.test"
VALID_KEY = "PECU-AB12-CD34-EF56-GH78"


@pytest.fixture
def sleeps() -> List[float]:
    """Delays the executor asked to wait, in order."""
    return []


@pytest.fixture
def fake_sleep(sleeps: List[float]) -> Callable:
    async def _sleep(delay: float) -> None:
        sleeps.append(delay)

    return _sleep


@pytest.fixture
def make_executor(fake_sleep: Callable) -> Callable[..., ResilientExecutor]:
    """
    Build an executor whose requests are answered by `handler`.

    Args:
        handler: httpx.MockTransport handler (sync or async)
        max_attempts: Retry policy attempts
        base_delay: Retry policy base delay in seconds
        timeout: Per-attempt timeout in seconds
    """

    def _make(
        handler: Callable,
        max_attempts: int = 3,
        base_delay: float = 1.0,
        timeout: float = 5.0,
    ) -> ResilientExecutor:
        return ResilientExecutor(
            base_url=TEST_BASE_URL,
            timeout=timeout,
            policy=RetryPolicy(max_attempts=max_attempts, base_delay=base_delay),
            client_factory=lambda: httpx.AsyncClient(
                base_url=TEST_BASE_URL,
                transport=httpx.MockTransport(handler),
            ),
            sleep=fake_sleep,
        )

    return _make


@pytest.fixture
def make_client(make_executor: Callable) -> Callable[..., LicenseClient]:
    def _make(handler: Callable, **executor_options: Any) -> LicenseClient:
        executor = make_executor(handler, **executor_options)
        return LicenseClient(RemoteLicenseGateway(executor))

    return _make


@pytest.fixture
def valid_payload() -> Dict[str, Any]:
    return {
        "valid": True,
        "plan": "Pro",
        "downloads_remaining": 42,
        "expiry_date": "2027-03-05",
        "features": ["priority-support", "batch-download"],
    }
