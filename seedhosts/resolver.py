"""HostsResolver: turns HostSpec strings into bounded lists of addresses."""

from __future__ import annotations

import ipaddress
import logging
import time
from collections.abc import Callable, Iterable, Sequence
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError

from seedhosts import dns
from seedhosts.hostspec import HostSpec, HostSpecError, parse_host_spec
from seedhosts.models import ResolutionFailure, ResolutionResult, ResolvedAddress

logger = logging.getLogger(__name__)

DEFAULT_RESOLVE_TIMEOUT = 5.0
DEFAULT_MAX_CONCURRENT_RESOLVERS = 10


class HostsResolver:
    """Resolve seed host strings to concrete ``(ip, port)`` addresses.

    Each HostSpec is parsed, its host looked up, and for every distinct
    address the entry's ports are enumerated from the low bound up to
    ``limit_per_host`` ports.  Lookups fan out over a thread pool; a failing
    or slow entry is recorded as a ``ResolutionFailure`` and never affects
    its siblings.

    Args:
        default_port: Port applied to entries that carry none, normally the
            first port of the node's ``transport.port`` range.
        resolve_timeout: Seconds all lookups of one call may take together.
        max_concurrent_resolvers: Worker threads used for lookups.
        own_addresses: Addresses of this node, never returned as seeds.
        lookup: Name resolution function; defaults to
            ``seedhosts.dns.resolve_addresses``.
    """

    def __init__(
        self,
        default_port: int,
        *,
        resolve_timeout: float = DEFAULT_RESOLVE_TIMEOUT,
        max_concurrent_resolvers: int = DEFAULT_MAX_CONCURRENT_RESOLVERS,
        own_addresses: Iterable[ResolvedAddress] = (),
        lookup: Callable[[str], list[str]] | None = None,
    ) -> None:
        if resolve_timeout <= 0:
            raise ValueError(f"resolve_timeout must be positive, got {resolve_timeout}")
        if max_concurrent_resolvers < 1:
            raise ValueError(
                "max_concurrent_resolvers must be at least 1, "
                f"got {max_concurrent_resolvers}"
            )
        self.default_port = default_port
        self.resolve_timeout = resolve_timeout
        self.max_concurrent_resolvers = max_concurrent_resolvers
        self.own_addresses = frozenset(own_addresses)
        self._lookup = lookup or dns.resolve_addresses
        # Shared by every round, so lookups stuck in getaddrinfo never hold
        # more than max_concurrent_resolvers threads.
        self._executor = ThreadPoolExecutor(
            max_workers=max_concurrent_resolvers,
            thread_name_prefix="seedhosts-resolver",
        )

    def close(self) -> None:
        """Stop the lookup threads; lookups still in flight are abandoned."""
        self._executor.shutdown(wait=False, cancel_futures=True)

    def __enter__(self) -> HostsResolver:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def resolve_hosts(
        self,
        hosts: Sequence[str],
        limit_per_host: int,
        *,
        deadline: float | None = None,
    ) -> list[ResolvedAddress]:
        """Resolve *hosts* and return the addresses only.

        See ``resolve`` for the arguments; soft failures are logged and
        dropped.
        """
        return self.resolve(hosts, limit_per_host, deadline=deadline).addresses

    def resolve(
        self,
        hosts: Sequence[str],
        limit_per_host: int,
        *,
        deadline: float | None = None,
    ) -> ResolutionResult:
        """Resolve *hosts*, keeping per-entry failures.

        Args:
            hosts: HostSpec strings; output follows this order.
            limit_per_host: Maximum ports tried per resolved address.
            deadline: Optional ``time.monotonic()`` value bounding the whole
                call.  Entries still unresolved when it passes count as
                timed out.

        Returns:
            A ``ResolutionResult`` with the addresses and soft failures.

        Raises:
            ValueError: If *limit_per_host* is less than 1.
        """
        if limit_per_host < 1:
            raise ValueError(f"limit_per_host must be at least 1, got {limit_per_host}")

        result = ResolutionResult()
        if not hosts:
            return result

        batch_deadline = time.monotonic() + self.resolve_timeout
        if deadline is not None:
            batch_deadline = min(batch_deadline, deadline)

        parsed = [parse_host_spec(h, self.default_port) for h in hosts]

        futures: list[Future | None] = []
        try:
            futures = [
                self._executor.submit(self._lookup, spec.host)
                if isinstance(spec, HostSpec)
                else None
                for spec in parsed
            ]

            for raw, spec, future in zip(hosts, parsed, futures):
                if isinstance(spec, HostSpecError):
                    self._fail(result, raw, spec.reason)
                    continue

                remaining = max(0.0, batch_deadline - time.monotonic())
                try:
                    ips = future.result(timeout=remaining)
                except FutureTimeoutError:
                    self._fail(result, raw, "timed out while resolving")
                    continue
                except (OSError, UnicodeError) as exc:
                    self._fail(result, raw, f"failed to resolve host: {exc}")
                    continue

                result.addresses.extend(self._enumerate(spec, ips, limit_per_host))
        finally:
            # Queued lookups of this round are dropped once the round is over.
            for future in futures:
                if future is not None:
                    future.cancel()

        logger.debug(
            "Resolved %d host(s) to %d address(es), %d failure(s)",
            len(hosts),
            len(result.addresses),
            len(result.failures),
        )
        return result

    def _enumerate(
        self, spec: HostSpec, ips: Iterable[str], limit_per_host: int
    ) -> list[ResolvedAddress]:
        """Expand one parsed spec into addresses, bounded per address."""
        distinct = {ipaddress.ip_address(ip) for ip in ips}
        out: list[ResolvedAddress] = []
        for ip in sorted(distinct, key=lambda a: (a.packed, str(a))):
            for i, port in enumerate(spec.ports):
                if i >= limit_per_host:
                    break
                address = ResolvedAddress(str(ip), port)
                if address in self.own_addresses:
                    logger.debug("Skipping own address %s", address)
                    continue
                out.append(address)
        return out

    @staticmethod
    def _fail(result: ResolutionResult, host_spec: str, reason: str) -> None:
        logger.warning("Failed to resolve seed host [%s]: %s", host_spec, reason)
        result.failures.append(ResolutionFailure(host_spec, reason))
