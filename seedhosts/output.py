"""Output renderer: rich table formatter, JSON formatter, format dispatch."""

import json
import logging
import sys
from io import StringIO

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from seedhosts.models import ResolutionResult, SeedHostsConfig

logger = logging.getLogger(__name__)


def render(
    config: SeedHostsConfig,
    result: ResolutionResult,
    fmt: str,
    *,
    file: object | None = None,
    width: int | None = None,
) -> None:
    """Dispatch output to the appropriate formatter.

    Args:
        config: Hosts and limit the addresses were resolved from.
        result: Addresses and soft failures of one resolution round.
        fmt: Output format, ``"table"`` or ``"json"``.
        file: Writable file object for output (default: ``sys.stdout``).
        width: Explicit console width (default: auto-detect).

    Raises:
        ValueError: If *fmt* is not ``"table"`` or ``"json"``.
    """
    if fmt == "table":
        render_table(config, result, file=file, width=width)
    elif fmt == "json":
        render_json(config, result, file=file)
    else:
        raise ValueError(f"Unknown output format: {fmt!r}")


# ---------------------------------------------------------------------------
# Table (rich) formatter
# ---------------------------------------------------------------------------


def render_table(
    config: SeedHostsConfig,
    result: ResolutionResult,
    *,
    file: object | None = None,
    width: int | None = None,
) -> None:
    """Render the seed addresses, then any failures, as ``rich`` tables."""
    out = file or sys.stdout
    console = Console(file=out, highlight=False, width=width)

    table = Table(title="Seed addresses")
    table.add_column("Address")
    table.add_column("IP")
    table.add_column("Port", justify="right")
    for address in result.addresses:
        table.add_row(str(address), address.ip, str(address.port))
    console.print(table)

    if result.failures:
        failures = Table(title="Unresolved seed hosts")
        failures.add_column("Host")
        failures.add_column("Reason")
        for failure in result.failures:
            failures.add_row(escape(failure.host_spec), escape(failure.reason))
        console.print(failures)

    console.print(
        f"  {len(config.configured_hosts)} configured, "
        f"{len(result.addresses)} addresses, {len(result.failures)} failed "
        f"(limit {config.limit} per address)"
    )


# ---------------------------------------------------------------------------
# JSON formatter
# ---------------------------------------------------------------------------


def render_json(
    config: SeedHostsConfig,
    result: ResolutionResult,
    *,
    file: object | None = None,
) -> None:
    """Render the resolution round as a JSON object to *file*."""
    out = file or sys.stdout
    payload = {
        "limit": config.limit,
        "configured_hosts": list(config.configured_hosts),
        "addresses": [{"ip": a.ip, "port": a.port} for a in result.addresses],
        "failures": [
            {"host_spec": f.host_spec, "reason": f.reason} for f in result.failures
        ],
    }
    json.dump(payload, out, indent=2)
    out.write("\n")  # type: ignore[union-attr]


def render_to_string(
    config: SeedHostsConfig, result: ResolutionResult, fmt: str, *, width: int = 200
) -> str:
    """Render to a string instead of stdout, for tests."""
    buf = StringIO()
    render(config, result, fmt, file=buf, width=width)
    return buf.getvalue()
