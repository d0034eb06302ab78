"""Request enrichers (device description, network coarsening)."""

from src.infrastructure.enrichers.device_enricher import UserAgentDeviceEnricher
from src.infrastructure.enrichers.network_enricher import coarsen_ip_address

__all__ = ["UserAgentDeviceEnricher", "coarsen_ip_address"]
