"""HostSpec parsing: ``host``, ``host:port`` and ``host:low-high``."""

from dataclasses import dataclass

from seedhosts.models import PortRange


@dataclass(frozen=True)
class HostSpec:
    """A parsed seed host entry.

    Attributes:
        host: Hostname or IP literal, without IPv6 brackets.
        ports: Ports to try against every address *host* resolves to.
    """

    host: str
    ports: PortRange


@dataclass(frozen=True)
class HostSpecError:
    """Why a seed host entry could not be parsed."""

    host_spec: str
    reason: str


def parse_host_spec(text: str, default_port: int) -> HostSpec | HostSpecError:
    """Split *text* into a host and a port range.

    The port part follows the last ``:``.  IPv6 literals must be bracketed
    to carry a port (``[::1]:9300``); an unbracketed string with several
    colons is taken as an IPv6 host without a port.  Entries without a port
    get *default_port*.

    Errors are returned rather than raised so callers can skip one bad
    entry and carry on with the rest.

    Args:
        text: Raw HostSpec string.
        default_port: Port used when *text* carries none.

    Returns:
        A ``HostSpec`` on success, otherwise a ``HostSpecError``.
    """
    spec = text.strip()
    if not spec:
        return HostSpecError(text, "empty host")

    if spec.startswith("["):
        end = spec.find("]")
        if end < 0:
            return HostSpecError(text, "unterminated '[' in IPv6 address")
        host = spec[1:end]
        rest = spec[end + 1 :]
        if not rest:
            port_part = None
        elif rest.startswith(":"):
            port_part = rest[1:]
        else:
            return HostSpecError(text, f"unexpected {rest!r} after IPv6 address")
    elif spec.count(":") == 1:
        host, _, port_part = spec.partition(":")
    else:
        host, port_part = spec, None

    if not host:
        return HostSpecError(text, "empty host")

    if port_part is None:
        return HostSpec(host, PortRange(default_port, default_port))

    ports = _parse_ports(port_part)
    if ports is None:
        return HostSpecError(text, f"invalid port or port range {port_part!r}")
    return HostSpec(host, ports)


def _parse_ports(text: str) -> PortRange | None:
    low, sep, high = text.partition("-")
    # Both bounds must be present: "-9305" and "9300-" are rejected.
    if not low.isdigit() or (sep and not high.isdigit()):
        return None
    try:
        return PortRange(int(low), int(high) if sep else int(low))
    except ValueError:
        return None
