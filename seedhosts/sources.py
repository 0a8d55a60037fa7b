"""Seed host sources: settings-driven provider and local address fallback."""

from __future__ import annotations

import logging
import socket
from typing import TYPE_CHECKING, Protocol

from seedhosts.config import SEED_HOSTS_SETTING, InvalidConfigurationError
from seedhosts.models import PortRange, SeedHostsConfig

if TYPE_CHECKING:
    from seedhosts.config import NodeSettings
    from seedhosts.models import ResolvedAddress
    from seedhosts.resolver import HostsResolver

logger = logging.getLogger(__name__)

# these limits are per-address
LIMIT_FOREIGN_PORTS_COUNT = 1
LIMIT_LOCAL_PORTS_COUNT = 5


class LocalAddressSource(Protocol):
    """Supplies the node's own addresses as HostSpec strings."""

    def get_local_addresses(self) -> list[str]: ...


class LoopbackAddressSource:
    """Local fallback: the loopback addresses on the transport port range.

    Entries look like ``127.0.0.1:9300-9400``; the resolver bounds how many
    of those ports are actually tried.
    """

    def __init__(self, port_range: PortRange) -> None:
        self.port_range = port_range

    def get_local_addresses(self) -> list[str]:
        hosts = ["127.0.0.1"]
        if socket.has_ipv6:
            hosts.append("[::1]")
        return [f"{host}:{self.port_range}" for host in hosts]


class SeedHostsSource:
    """Seed hosts taken from the ``discovery.seed_hosts`` setting.

    When the setting is present, even as an empty list, its entries are
    used and only one port is tried per resolved address.  Otherwise the
    node's local addresses are used and up to five ports are tried.

    An example setting might look as follows::

        discovery.seed_hosts: [67.81.244.10, 67.81.244.11:9305, 67.81.244.15:9400]

    Args:
        settings: Node settings holding ``discovery.seed_hosts``.
        local_addresses: Fallback used when the setting is absent.

    Raises:
        InvalidConfigurationError: If a configured entry contains ``-``.
    """

    def __init__(
        self, settings: NodeSettings, local_addresses: LocalAddressSource
    ) -> None:
        if settings.has_seed_hosts():
            hosts = tuple(settings.seed_hosts or ())
            check_invalid_ports(hosts)
            # one port per address, no point probing a whole range on a foreign host
            self.config = SeedHostsConfig(hosts, LIMIT_FOREIGN_PORTS_COUNT)
        else:
            # no seed hosts configured: fall back to this machine's addresses
            self.config = SeedHostsConfig(
                tuple(local_addresses.get_local_addresses()),
                LIMIT_LOCAL_PORTS_COUNT,
            )

        try:
            logger.debug("using initial hosts %s", list(self.config.configured_hosts))
        except Exception:  # noqa: BLE001
            # A broken log handler must not keep the node from starting.
            pass

    @property
    def configured_hosts(self) -> tuple[str, ...]:
        return self.config.configured_hosts

    @property
    def limit(self) -> int:
        return self.config.limit

    def get_seed_addresses(
        self, resolver: HostsResolver, *, deadline: float | None = None
    ) -> list[ResolvedAddress]:
        """Resolve the configured hosts afresh on every call."""
        return resolver.resolve_hosts(
            self.config.configured_hosts, self.config.limit, deadline=deadline
        )


def check_invalid_ports(hosts: tuple[str, ...] | list[str]) -> None:
    """Reject any entry containing ``-``, reporting the first one found.

    Raises:
        InvalidConfigurationError: Naming the offending entry.
    """
    for host in hosts:
        if "-" in host:
            raise InvalidConfigurationError(
                f"Configuration setting {SEED_HOSTS_SETTING} does not support "
                f"a range of ports, [{host}] was found in provided seed hosts"
            )
