"""
LemonSqueezy licensing API client.

Implements LicenseApiPort over HTTP with form-encoded requests and
JSON responses.
"""
import logging
import time
from typing import Any, Dict, Optional

import requests
from asgiref.sync import sync_to_async

from core.config import ApiEndpoints
from core.domain.exceptions import LicenseApiTransportError
from core.metrics import license_api_request_duration_seconds, license_api_requests_total
from licenses.application.dto.license_dto import LicenseResponseDTO
from licenses.ports.license_api import LicenseApiPort

logger = logging.getLogger(__name__)


class LemonSqueezyLicenseApiClient(LicenseApiPort):
    """Client for the LemonSqueezy license API."""

    HEADERS = {
        "Accept": "application/json",
        "Content-Type": "application/x-www-form-urlencoded",
        "User-Agent": "TextToolsPro-License-Client/1.0",
    }

    # Statuses whose JSON body is a structured rejection rather than a fault
    STRUCTURED_ERROR_STATUSES = (400, 404)

    def __init__(
        self,
        endpoints: ApiEndpoints,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize client.

        Args:
            endpoints: Licensing service URLs
            timeout: Per-request timeout in seconds
            session: requests session (a new one is created if omitted)
        """
        self.endpoints = endpoints
        self.timeout = timeout
        self.session = session or requests.Session()

    async def ping(self) -> bool:
        """
        Check whether the licensing service answers.

        Any HTTP response counts as reachable; only transport errors
        count as offline.

        Returns:
            True if a response was received
        """
        try:
            await sync_to_async(self.session.get)(self.endpoints.ping, timeout=self.timeout)
            return True
        except requests.exceptions.RequestException as e:
            logger.debug(f"Ping failed: {e}")
            return False

    async def activate(self, license_key: str, instance_name: str) -> LicenseResponseDTO:
        return await self._post(
            "activate",
            self.endpoints.activate,
            {"license_key": license_key, "instance_name": instance_name},
        )

    async def validate(self, license_key: str, instance_id: str) -> LicenseResponseDTO:
        return await self._post(
            "validate",
            self.endpoints.validate,
            {"license_key": license_key, "instance_id": instance_id},
        )

    async def deactivate(self, license_key: str, instance_id: str) -> LicenseResponseDTO:
        return await self._post(
            "deactivate",
            self.endpoints.deactivate,
            {"license_key": license_key, "instance_id": instance_id},
        )

    async def _post(self, operation: str, url: str, data: Dict[str, Any]) -> LicenseResponseDTO:
        """
        POST a form-encoded request and map the outcome.

        Args:
            operation: Operation name used in logs and metrics
            url: Endpoint URL
            data: Form fields

        Returns:
            LicenseResponseDTO for 2xx answers and structured rejections

        Raises:
            LicenseApiTransportError: On transport errors, unexpected
                statuses or undecodable bodies
        """
        start = time.perf_counter()
        try:
            response = await sync_to_async(self.session.post)(
                url, data=data, headers=self.HEADERS, timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            license_api_requests_total.labels(operation=operation, outcome="transport_error").inc()
            logger.warning(f"License {operation} request failed: {e}")
            raise LicenseApiTransportError(
                f"Could not reach the licensing service: {e}"
            ) from e
        finally:
            license_api_request_duration_seconds.labels(operation=operation).observe(
                time.perf_counter() - start
            )

        if not response.ok and response.status_code not in self.STRUCTURED_ERROR_STATUSES:
            license_api_requests_total.labels(operation=operation, outcome="http_error").inc()
            logger.warning(
                f"License {operation} returned unexpected status {response.status_code}"
            )
            raise LicenseApiTransportError(
                f"Licensing service returned HTTP {response.status_code}",
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as e:
            license_api_requests_total.labels(operation=operation, outcome="invalid_body").inc()
            logger.warning(f"License {operation} returned an undecodable body")
            raise LicenseApiTransportError(
                "Invalid response from licensing service", status_code=response.status_code
            ) from e

        try:
            dto = LicenseResponseDTO.from_dict(body)
        except (ValueError, TypeError, AttributeError) as e:
            license_api_requests_total.labels(operation=operation, outcome="invalid_body").inc()
            logger.warning(f"License {operation} returned a malformed body: {e}")
            raise LicenseApiTransportError(
                "Invalid response from licensing service", status_code=response.status_code
            ) from e

        outcome = "ok" if response.ok else "rejected"
        license_api_requests_total.labels(operation=operation, outcome=outcome).inc()
        logger.debug(f"License {operation} answered {response.status_code}")
        return dto
