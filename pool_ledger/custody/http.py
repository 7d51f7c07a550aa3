"""Custody backed by a remote custody service over HTTP."""

import logging
import time
import uuid
from typing import Optional

import httpx

from pool_ledger.errors import CustodyError, InsufficientCustodyError
from .base import Custody

logger = logging.getLogger(__name__)

# API constants
REQUEST_TIMEOUT = 10.0
MAX_RETRIES = 3
RETRY_DELAY = 1.0


class HttpCustody(Custody):
    """
    Custody implementation that delegates to a custody service.

    Expected endpoints:
    - ``GET /balance`` returning ``{"balance": <int>}``
    - ``POST /collect`` and ``POST /release`` with ``{"participant", "amount"}``

    A 409 response to ``/release`` means the service holds too little.
    Timeouts and 429 responses are retried; anything else is raised as
    CustodyError so the calling operation is rejected.

    Each ``collect`` and ``release`` carries an ``Idempotency-Key`` header
    generated once per call and resent unchanged on every retry. The service
    must apply a given key at most once, so a transfer whose response was
    lost is not moved a second time by the retry.
    """

    def __init__(
        self,
        api_url: str,
        transport: Optional[httpx.BaseTransport] = None,
        retry_delay: float = RETRY_DELAY,
        max_retries: int = MAX_RETRIES,
    ):
        """
        Initialize the custody client.

        Args:
            api_url: Base URL of the custody service
            transport: Optional httpx transport (used to stub the service in tests)
            retry_delay: Seconds to wait between retries
            max_retries: Retries for timeouts and rate limiting
        """
        self.api_url = api_url
        self.retry_delay = retry_delay
        self.max_retries = max_retries
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    def _get_client(self) -> httpx.Client:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.Client(
                base_url=self.api_url,
                headers={"Content-Type": "application/json"},
                timeout=REQUEST_TIMEOUT,
                transport=self._transport,
            )
        return self._client

    def _make_request(
        self,
        method: str,
        endpoint: str,
        payload: Optional[dict] = None,
        idempotency_key: Optional[str] = None,
        retry_count: int = 0,
    ) -> dict:
        """
        Make HTTP request with timeout handling and retries.

        Args:
            method: HTTP method
            endpoint: API endpoint path
            payload: Request payload
            idempotency_key: Key sent with every attempt of a transfer
            retry_count: Current retry attempt

        Returns:
            Response JSON data
        """
        if method != "GET" and idempotency_key is None:
            raise ValueError(f"{method} {endpoint} needs an idempotency key")
        client = self._get_client()
        headers = {"Idempotency-Key": idempotency_key} if idempotency_key else None

        try:
            response = client.request(method, endpoint, json=payload, headers=headers)
            response.raise_for_status()
            return response.json() if response.content else {}

        except httpx.TimeoutException as e:
            if retry_count < self.max_retries:
                logger.warning(
                    f"Request to {endpoint} timed out (attempt {retry_count + 1}/{self.max_retries}). "
                    f"Retrying in {self.retry_delay}s..."
                )
                time.sleep(self.retry_delay)
                return self._make_request(method, endpoint, payload, idempotency_key, retry_count + 1)
            logger.error(f"Request to {endpoint} failed after {self.max_retries} retries: {e}")
            raise CustodyError(f"custody request to {endpoint} timed out") from e

        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            if status == 429 and retry_count < self.max_retries:
                logger.warning(
                    f"Rate limited (429) on {endpoint} (attempt {retry_count + 1}/{self.max_retries}). "
                    f"Retrying in {self.retry_delay}s..."
                )
                time.sleep(self.retry_delay)
                return self._make_request(method, endpoint, payload, idempotency_key, retry_count + 1)
            if status == 409:
                raise InsufficientCustodyError(e.response.text or "custody balance too low") from e

            logger.error(f"HTTP error {status} for {endpoint}: {e}")
            raise CustodyError(f"custody returned {status} for {endpoint}") from e

        except httpx.HTTPError as e:
            logger.error(f"Unexpected error for {endpoint}: {e}")
            raise CustodyError(f"custody request to {endpoint} failed") from e

    def balance(self) -> int:
        data = self._make_request("GET", "/balance")
        return int(data.get("balance", 0))

    def collect(self, participant: str, amount: int) -> None:
        self._transfer("/collect", participant, amount)

    def release(self, participant: str, amount: int) -> None:
        self._transfer("/release", participant, amount)

    def _transfer(self, endpoint: str, participant: str, amount: int) -> None:
        key = str(uuid.uuid4())
        self._make_request(
            "POST",
            endpoint,
            {"participant": participant, "amount": amount},
            idempotency_key=key,
        )

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None
