"""
Connectivity prober port (interface).
"""
from abc import ABC, abstractmethod


class ConnectivityProber(ABC):
    """Answers whether the licensing service is reachable right now."""

    @abstractmethod
    async def probe(self) -> bool:
        """
        Probe connectivity.

        Never raises: transport errors and timeouts map to False.

        Returns:
            True if the service is reachable
        """
        pass
