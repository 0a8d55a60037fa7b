"""YAML node settings loading."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from seedhosts.models import PortRange

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path.home() / ".seedhosts"
DEFAULT_CONFIG_PATH = DEFAULT_CONFIG_DIR / "config.yaml"

SEED_HOSTS_SETTING = "discovery.seed_hosts"
TRANSPORT_PORT_SETTING = "transport.port"
RESOLVE_TIMEOUT_SETTING = "discovery.seed_resolver.timeout"
MAX_CONCURRENT_RESOLVERS_SETTING = "discovery.seed_resolver.max_concurrent_resolvers"


@dataclass(frozen=True)
class NodeSettings:
    """Node-scoped settings the seed host discovery reads.

    All fields have defaults, so a node with no configuration file probes
    its loopback addresses on the default transport ports.

    Attributes:
        seed_hosts: Value of ``discovery.seed_hosts``, or ``None`` when the
            operator did not set the key at all.  An explicit empty list is
            kept as ``()`` and is distinct from ``None``.
        transport_port: The node's transport port range; its first port is
            the default port of seed hosts without one.
        resolve_timeout: Seconds allowed for all lookups of one round.
        max_concurrent_resolvers: Lookups run in parallel.
    """

    seed_hosts: tuple[str, ...] | None = None
    transport_port: PortRange = field(default_factory=lambda: PortRange(9300, 9400))
    resolve_timeout: float = 5.0
    max_concurrent_resolvers: int = 10

    def has_seed_hosts(self) -> bool:
        """Whether ``discovery.seed_hosts`` was set, even to an empty list."""
        return self.seed_hosts is not None


class ConfigError(Exception):
    """Raised when a configuration file or value is malformed."""


class InvalidConfigurationError(ConfigError):
    """Raised when a setting holds a value the node refuses to start with."""


def load_config(path: Path | str | None = None) -> NodeSettings:
    """Load node settings from a YAML file.

    Nested mappings are flattened into dotted keys, so
    ``discovery: {seed_hosts: [...]}`` and ``discovery.seed_hosts: [...]``
    mean the same thing.

    Args:
        path: Explicit path to a YAML config file.  If ``None``, the
            default location (``~/.seedhosts/config.yaml``) is tried.  If the
            default file doesn't exist, ``NodeSettings`` with all defaults
            is returned silently.

    Returns:
        A populated ``NodeSettings`` instance.

    Raises:
        FileNotFoundError: If an explicit *path* was given but doesn't exist.
        ConfigError: If the file contains invalid YAML, has an unexpected
            top-level structure, or holds an invalid setting value.
    """
    resolved = _resolve_path(path)

    if resolved is None:
        logger.debug("No config file found; using defaults")
        return NodeSettings()

    logger.debug("Loading config from %s", resolved)
    text = resolved.read_text(encoding="utf-8")

    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {resolved}: {exc}") from exc

    if raw is None:
        # Empty file: all defaults.
        return NodeSettings()

    if not isinstance(raw, dict):
        raise ConfigError(
            f"Expected a YAML mapping at the top level in {resolved}, "
            f"got {type(raw).__name__}"
        )

    return build_settings(_flatten(raw), source=resolved)


def build_settings(flat: dict[str, object], source: object = "<settings>") -> NodeSettings:
    """Build ``NodeSettings`` from a mapping of dotted keys to values.

    Unknown keys are logged and ignored.

    Raises:
        ConfigError: If a known key holds an invalid value.
    """
    kwargs: dict[str, object] = {}

    if SEED_HOSTS_SETTING in flat:
        kwargs["seed_hosts"] = _parse_seed_hosts(flat[SEED_HOSTS_SETTING])

    if TRANSPORT_PORT_SETTING in flat:
        value = flat[TRANSPORT_PORT_SETTING]
        try:
            kwargs["transport_port"] = PortRange.parse(value)  # type: ignore[arg-type]
        except ValueError as exc:
            raise ConfigError(f"Invalid {TRANSPORT_PORT_SETTING} {value!r}") from exc

    if RESOLVE_TIMEOUT_SETTING in flat:
        value = flat[RESOLVE_TIMEOUT_SETTING]
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
            raise ConfigError(
                f"{RESOLVE_TIMEOUT_SETTING} must be a positive number of seconds, "
                f"got {value!r}"
            )
        kwargs["resolve_timeout"] = float(value)

    if MAX_CONCURRENT_RESOLVERS_SETTING in flat:
        value = flat[MAX_CONCURRENT_RESOLVERS_SETTING]
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            raise ConfigError(
                f"{MAX_CONCURRENT_RESOLVERS_SETTING} must be a positive integer, "
                f"got {value!r}"
            )
        kwargs["max_concurrent_resolvers"] = value

    unknown = set(flat) - set(_KNOWN_KEYS)
    if unknown:
        logger.warning(
            "Ignoring unknown config keys in %s: %s",
            source,
            ", ".join(sorted(unknown)),
        )

    return NodeSettings(**kwargs)  # type: ignore[arg-type]


_KNOWN_KEYS = (
    SEED_HOSTS_SETTING,
    TRANSPORT_PORT_SETTING,
    RESOLVE_TIMEOUT_SETTING,
    MAX_CONCURRENT_RESOLVERS_SETTING,
)


# ------------------------------------------------------------------
# Internal helpers
# ------------------------------------------------------------------


def _resolve_path(path: Path | str | None) -> Path | None:
    """Return a concrete ``Path`` to read, or ``None`` if nothing to read.

    Raises:
        FileNotFoundError: If the caller supplied an explicit path that
            doesn't exist on disk.
    """
    if path is not None:
        p = Path(path).expanduser()
        if not p.is_file():
            raise FileNotFoundError(f"Config file not found: {p}")
        return p

    # Try the default location.
    default = DEFAULT_CONFIG_PATH.expanduser()
    if default.is_file():
        return default
    return None


def _flatten(raw: dict, prefix: str = "") -> dict[str, object]:
    """Collapse nested mappings into ``{"a.b.c": value}``."""
    flat: dict[str, object] = {}
    for key, value in raw.items():
        name = f"{prefix}{key}"
        if isinstance(value, dict):
            flat.update(_flatten(value, prefix=f"{name}."))
        else:
            flat[name] = value
    return flat


def _parse_seed_hosts(value: object) -> tuple[str, ...]:
    """Accept a list of strings or a comma-separated string."""
    if value is None:
        return ()
    if isinstance(value, str):
        return tuple(part.strip() for part in value.split(",") if part.strip())
    if isinstance(value, list) and all(isinstance(v, str) for v in value):
        return tuple(value)
    raise ConfigError(
        f"{SEED_HOSTS_SETTING} must be a list of strings, got {value!r}"
    )
