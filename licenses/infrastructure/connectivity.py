"""
HTTP connectivity prober.
"""
import logging

from core.metrics import connectivity_probes_total
from licenses.ports.connectivity import ConnectivityProber
from licenses.ports.license_api import LicenseApiPort

logger = logging.getLogger(__name__)


class HttpConnectivityProber(ConnectivityProber):
    """Probes connectivity through the licensing API's ping endpoint."""

    def __init__(self, api_client: LicenseApiPort):
        self.api_client = api_client

    async def probe(self) -> bool:
        try:
            online = await self.api_client.ping()
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.debug("Connectivity probe raised: %s", e)
            online = False
        connectivity_probes_total.labels(result="online" if online else "offline").inc()
        return online
