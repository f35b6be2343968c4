"""
Resilient request execution against the license authority.

Every logical request runs as a short sequence of attempts. Each attempt
is bounded by a timeout, failed attempts are followed by a linearly growing
delay, and exactly one terminal outcome is returned to the caller.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple

import httpx
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_incrementing,
)

from .config import settings
from .models import FailureReason, RequestFailed, RequestOk, RequestOutcome

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]
ClientFactory = Callable[[], httpx.AsyncClient]

@dataclass(frozen=True)
class RequestOperation:
    """A single idempotent call to the license authority."""

    method: str
    path: str
    json: Optional[Dict[str, Any]] = None

@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = 3
    base_delay: float = 1.0

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.base_delay < 0:
            raise ValueError("base_delay cannot be negative")

    def retrying(self, sleep: Sleep) -> AsyncRetrying:
        """
        Build the attempt loop: attempt, then wait or give up, then the next
        attempt. The wait after attempt n is base_delay * n.
        """
        return AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_incrementing(start=self.base_delay, increment=self.base_delay),
            retry=retry_if_exception_type(AttemptFailed),
            sleep=sleep,
            before_sleep=before_sleep_log(logger, logging.DEBUG),
            reraise=True
        )

    @classmethod
    def from_settings(cls) -> "RetryPolicy":
        return cls(max_attempts=settings.RETRY_ATTEMPTS, base_delay=settings.RETRY_DELAY)

class AttemptFailed(Exception):
    """Raised inside the executor when one attempt does not succeed."""

    def __init__(self, reason: FailureReason, message: str, status_code: Optional[int] = None):
        self.reason = reason
        self.message = message
        self.status_code = status_code
        super().__init__(message)

class ResilientExecutor:
    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        policy: Optional[RetryPolicy] = None,
        client_factory: Optional[ClientFactory] = None,
        sleep: Optional[Sleep] = None,
    ):
        self.base_url = base_url if base_url is not None else settings.LICENSE_API_URL
        self.timeout = timeout if timeout is not None else settings.LICENSE_API_TIMEOUT
        self.policy = policy or RetryPolicy.from_settings()
        self.client_factory = client_factory or self._build_client
        self.sleep = sleep or asyncio.sleep

    def _build_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            headers={
                "Content-Type": "application/json",
                "Accept": "application/json",
                "User-Agent": settings.USER_AGENT
            }
        )

    async def _send(self, operation: RequestOperation) -> Tuple[Any, int]:
        # A fresh client per attempt, nothing is shared between attempts
        async with self.client_factory() as client:
            response = await client.request(
                operation.method,
                operation.path,
                json=operation.json
            )

        if not response.is_success:
            raise AttemptFailed(
                FailureReason.HTTP_ERROR,
                f"HTTP {response.status_code}: {response.reason_phrase}",
                response.status_code
            )

        try:
            return response.json(), response.status_code
        except ValueError as e:
            raise AttemptFailed(
                FailureReason.TRANSPORT_ERROR,
                f"Invalid JSON response: {e}",
                response.status_code
            )

    async def _attempt(self, operation: RequestOperation) -> Tuple[Any, int]:
        """
        Run one bounded attempt, translating every transport problem into
        AttemptFailed.
        """
        try:
            return await asyncio.wait_for(self._send(operation), timeout=self.timeout)
        except asyncio.TimeoutError:
            raise AttemptFailed(FailureReason.TIMEOUT, "Request timeout")
        except httpx.TimeoutException:
            raise AttemptFailed(FailureReason.TIMEOUT, "Request timeout")
        except httpx.HTTPError as e:
            raise AttemptFailed(FailureReason.TRANSPORT_ERROR, str(e) or type(e).__name__)

    async def execute(self, operation: RequestOperation) -> RequestOutcome:
        """
        Execute an operation with timeout and retry.

        Returns:
            RequestOk as soon as one attempt succeeds, otherwise RequestFailed
            once attempts are exhausted. The failure reason is timeout when any
            attempt timed out, else the reason of the last attempt.
        """
        attempt_number = 0
        timed_out = False
        last_status_code = None

        try:
            async for attempt in self.policy.retrying(self.sleep):
                with attempt:
                    attempt_number = attempt.retry_state.attempt_number
                    try:
                        payload, status_code = await self._attempt(operation)
                    except AttemptFailed as failure:
                        timed_out = timed_out or failure.reason == FailureReason.TIMEOUT
                        if failure.status_code is not None:
                            last_status_code = failure.status_code
                        logger.warning(
                            "API request %s %s attempt %d failed: %s",
                            operation.method, operation.path, attempt_number, failure.message
                        )
                        raise
        except AttemptFailed as failure:
            reason = FailureReason.TIMEOUT if timed_out else failure.reason
            logger.error(
                "API request %s %s gave up after %d attempts: %s",
                operation.method, operation.path, attempt_number, reason.value
            )
            return RequestFailed(
                reason=reason,
                status_code=last_status_code,
                message=failure.message,
                attempts=attempt_number
            )

        return RequestOk(payload=payload, status_code=status_code, attempts=attempt_number)
