"""Name resolution helper for seed hosts."""

import logging
import socket

logger = logging.getLogger(__name__)


def resolve_addresses(hostname: str) -> list[str]:
    """Resolve a hostname to all of its A and AAAA records.

    Wraps ``socket.getaddrinfo`` and returns each IP once, in the order the
    system resolver reported them.  IP literals come back unchanged without
    touching the network.

    Args:
        hostname: Hostname or IP literal (e.g. ``"seed-1.example.com"``).

    Returns:
        A deduplicated list of IP address strings.

    Raises:
        socket.gaierror: If resolution fails entirely.
    """
    logger.debug("Resolving %s", hostname)

    results = socket.getaddrinfo(
        hostname,
        None,
        family=socket.AF_UNSPEC,
        type=socket.SOCK_STREAM,
    )

    seen: set[str] = set()
    out: list[str] = []
    for _family, _type, _proto, _canonname, sockaddr in results:
        # sockaddr is (ip, port) for AF_INET, (ip, port, flow, scope) for AF_INET6
        ip = sockaddr[0]
        if ip not in seen:
            seen.add(ip)
            out.append(ip)

    logger.debug("Resolved %s → %d unique address(es)", hostname, len(out))
    return out
