"""Classify resolved IP addresses as private (internal) or public."""

import ipaddress

_PRIVATE_NETWORKS = (
    ipaddress.ip_network("10.0.0.0/8"),
    ipaddress.ip_network("172.16.0.0/12"),
    ipaddress.ip_network("192.168.0.0/16"),
    ipaddress.ip_network("127.0.0.0/8"),
    ipaddress.ip_network("169.254.0.0/16"),
    ipaddress.ip_network("0.0.0.0/32"),
    ipaddress.ip_network("fc00::/7"),
    ipaddress.ip_network("fe80::/10"),
    ipaddress.ip_network("::1/128"),
    ipaddress.ip_network("::/128"),
)


def is_private_ip(address: str) -> bool:
    """Return True if *address* is private, loopback, link-local or unspecified.

    IPv6 zone ids (``fe80::1%eth0``) are ignored and IPv4-mapped IPv6 addresses
    (``::ffff:10.0.0.1``) are judged by the IPv4 address they embed.  Strings
    that do not parse as an IP address count as private.
    """
    raw_ip = address.split("%")[0]
    try:
        addr = ipaddress.ip_address(raw_ip)
    except ValueError:
        return True

    if isinstance(addr, ipaddress.IPv6Address) and addr.ipv4_mapped is not None:
        addr = addr.ipv4_mapped

    return any(addr in net for net in _PRIVATE_NETWORKS)
