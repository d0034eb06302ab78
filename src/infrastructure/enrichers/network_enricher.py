"""IP address coarsening for the audit trail.

Audit entries keep the network, not the host: IPv4 addresses are reduced to
their /24 and IPv6 addresses to their /48.
"""

import ipaddress

IPV4_AUDIT_PREFIX = 24
IPV6_AUDIT_PREFIX = 48


def coarsen_ip_address(ip_address: str | None) -> str | None:
    """Reduce an IP address to its audit network.

    Args:
        ip_address: Client IP address as received.

    Returns:
        Network in CIDR notation, or None for missing/unparseable input.

    Example:
        >>> coarsen_ip_address("203.0.113.77")
        '203.0.113.0/24'
        >>> coarsen_ip_address("2001:db8:abcd:12::1")
        '2001:db8:abcd::/48'
    """
    if not ip_address:
        return None
    try:
        address = ipaddress.ip_address(ip_address.strip())
    except ValueError:
        return None

    if isinstance(address, ipaddress.IPv6Address) and address.ipv4_mapped:
        address = address.ipv4_mapped

    prefix = IPV4_AUDIT_PREFIX if address.version == 4 else IPV6_AUDIT_PREFIX
    network = ipaddress.ip_network(f"{address}/{prefix}", strict=False)
    return str(network)
