"""Data models: ResolvedAddress, PortRange, SeedHostsConfig, ResolutionResult."""

import functools
import ipaddress
from dataclasses import dataclass, field

MIN_PORT = 0
MAX_PORT = 65535


@functools.total_ordering
@dataclass(frozen=True)
class ResolvedAddress:
    """A concrete ``(ip, port)`` endpoint produced by the resolver.

    The ip is normalised through :mod:`ipaddress` at construction, so two
    addresses are equal exactly when their raw address bytes and ports are
    equal (``"::1"`` and ``"0:0::1"`` compare equal).  Ordering is by the
    packed address bytes, then by port.

    Attributes:
        ip: IPv4 or IPv6 address in canonical text form.
        port: TCP port.
    """

    ip: str
    port: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "ip", str(ipaddress.ip_address(self.ip)))
        if not MIN_PORT <= self.port <= MAX_PORT:
            raise ValueError(f"Port out of range: {self.port}")

    @property
    def packed(self) -> bytes:
        """Raw network-order bytes of the address."""
        return ipaddress.ip_address(self.ip).packed

    @property
    def version(self) -> int:
        return ipaddress.ip_address(self.ip).version

    def sort_key(self) -> tuple[bytes, int]:
        return (self.packed, self.port)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, ResolvedAddress):
            return NotImplemented
        return self.sort_key() < other.sort_key()

    def __str__(self) -> str:
        if self.version == 6:
            return f"[{self.ip}]:{self.port}"
        return f"{self.ip}:{self.port}"


@dataclass(frozen=True)
class PortRange:
    """Inclusive range of TCP ports, e.g. the ``transport.port`` setting."""

    low: int
    high: int

    def __post_init__(self) -> None:
        if not MIN_PORT <= self.low <= self.high <= MAX_PORT:
            raise ValueError(f"Invalid port range: {self.low}-{self.high}")

    @classmethod
    def parse(cls, text: str | int) -> "PortRange":
        """Parse ``"9300"`` or ``"9300-9400"`` into a ``PortRange``.

        Raises:
            ValueError: If *text* is not a single port or a ``low-high`` pair
                of valid ports.
        """
        if isinstance(text, int):
            return cls(text, text)
        low, sep, high = str(text).strip().partition("-")
        if not low.isdigit() or (sep and not high.isdigit()):
            raise ValueError(f"Invalid port range: {text!r}")
        return cls(int(low), int(high) if sep else int(low))

    def __iter__(self):
        return iter(range(self.low, self.high + 1))

    def __len__(self) -> int:
        return self.high - self.low + 1

    def __str__(self) -> str:
        if self.low == self.high:
            return str(self.low)
        return f"{self.low}-{self.high}"


@dataclass(frozen=True)
class SeedHostsConfig:
    """Host strings and per-address port limit chosen at startup.

    Attributes:
        configured_hosts: HostSpec strings in configured order.
        limit: Maximum number of ports tried per resolved address.
    """

    configured_hosts: tuple[str, ...]
    limit: int


@dataclass(frozen=True)
class ResolutionFailure:
    """A HostSpec that contributed no addresses, and why."""

    host_spec: str
    reason: str


@dataclass
class ResolutionResult:
    """Addresses from one ``HostsResolver.resolve`` call plus its soft failures."""

    addresses: list[ResolvedAddress] = field(default_factory=list)
    failures: list[ResolutionFailure] = field(default_factory=list)
