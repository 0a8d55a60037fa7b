"""Tests for seedhosts.config — YAML settings loading."""

import textwrap

import pytest

from seedhosts.config import (
    ConfigError,
    InvalidConfigurationError,
    NodeSettings,
    build_settings,
    load_config,
)
from seedhosts.models import PortRange


class TestNodeSettingsDefaults:
    """NodeSettings should provide sensible defaults for every field."""

    def test_seed_hosts_absent_by_default(self) -> None:
        cfg = NodeSettings()
        assert cfg.seed_hosts is None
        assert cfg.has_seed_hosts() is False

    def test_empty_seed_hosts_counts_as_present(self) -> None:
        assert NodeSettings(seed_hosts=()).has_seed_hosts() is True

    def test_transport_port_default(self) -> None:
        assert NodeSettings().transport_port == PortRange(9300, 9400)

    def test_resolver_defaults(self) -> None:
        cfg = NodeSettings()
        assert cfg.resolve_timeout == 5.0
        assert cfg.max_concurrent_resolvers == 10


class TestLoadConfigExplicitPath:
    """load_config(path=...) with an explicit file path."""

    def test_full_config(self, tmp_path: pytest.TempPathFactory) -> None:
        cfg_file = tmp_path / "config.yaml"
        cfg_file.write_text(
            textwrap.dedent("""\
                discovery.seed_hosts:
                  - 67.81.244.10
                  - 67.81.244.11:9305
                  - 67.81.244.15:9400
                transport.port: 9500-9600
                discovery.seed_resolver.timeout: 2.5
                discovery.seed_resolver.max_concurrent_resolvers: 4
            """),
            encoding="utf-8",
        )

        cfg = load_config(cfg_file)

        assert cfg.seed_hosts == ("67.81.244.10", "67.81.244.11:9305", "67.81.244.15:9400")
        assert cfg.transport_port == PortRange(9500, 9600)
        assert cfg.resolve_timeout == 2.5
        assert cfg.max_concurrent_resolvers == 4

    def test_nested_keys_are_flattened(self, tmp_path: pytest.TempPathFactory) -> None:
        cfg_file = tmp_path / "config.yaml"
        cfg_file.write_text(
            textwrap.dedent("""\
                discovery:
                  seed_hosts: [10.0.0.1]
                  seed_resolver:
                    timeout: 1
                transport:
                  port: 9300
            """),
            encoding="utf-8",
        )

        cfg = load_config(cfg_file)

        assert cfg.seed_hosts == ("10.0.0.1",)
        assert cfg.resolve_timeout == 1.0
        assert cfg.transport_port == PortRange(9300, 9300)

    def test_explicit_empty_seed_hosts(self, tmp_path: pytest.TempPathFactory) -> None:
        cfg_file = tmp_path / "config.yaml"
        cfg_file.write_text("discovery.seed_hosts: []\n", encoding="utf-8")

        cfg = load_config(cfg_file)

        assert cfg.seed_hosts == ()
        assert cfg.has_seed_hosts()

    def test_comma_separated_seed_hosts(self, tmp_path: pytest.TempPathFactory) -> None:
        cfg_file = tmp_path / "config.yaml"
        cfg_file.write_text(
            'discovery.seed_hosts: "10.0.0.1, 10.0.0.2:9301"\n', encoding="utf-8"
        )

        cfg = load_config(cfg_file)

        assert cfg.seed_hosts == ("10.0.0.1", "10.0.0.2:9301")

    def test_empty_file_returns_defaults(
        self, tmp_path: pytest.TempPathFactory
    ) -> None:
        cfg_file = tmp_path / "config.yaml"
        cfg_file.write_text("", encoding="utf-8")

        assert load_config(cfg_file) == NodeSettings()

    def test_unknown_keys_are_ignored(
        self, tmp_path: pytest.TempPathFactory, caplog: pytest.LogCaptureFixture
    ) -> None:
        cfg_file = tmp_path / "config.yaml"
        cfg_file.write_text(
            textwrap.dedent("""\
                transport.port: 9300
                cluster.name: prod
            """),
            encoding="utf-8",
        )

        with caplog.at_level("WARNING", logger="seedhosts.config"):
            cfg = load_config(cfg_file)

        assert cfg.transport_port == PortRange(9300, 9300)
        assert "cluster.name" in caplog.text

    def test_accepts_string_path(self, tmp_path: pytest.TempPathFactory) -> None:
        cfg_file = tmp_path / "config.yaml"
        cfg_file.write_text("transport.port: 9301\n", encoding="utf-8")

        assert load_config(str(cfg_file)).transport_port == PortRange(9301, 9301)


class TestLoadConfigMissingFile:
    """Behavior when the config file doesn't exist."""

    def test_explicit_path_not_found_raises(
        self, tmp_path: pytest.TempPathFactory
    ) -> None:
        with pytest.raises(FileNotFoundError, match="Config file not found"):
            load_config(tmp_path / "nonexistent.yaml")

    def test_no_default_file_returns_defaults(
        self, tmp_path: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        import seedhosts.config as config_mod

        monkeypatch.setattr(
            config_mod, "DEFAULT_CONFIG_PATH", tmp_path / "nope" / "config.yaml"
        )

        assert load_config() == NodeSettings()


class TestLoadConfigInvalid:
    """load_config should raise ConfigError on malformed input."""

    def test_invalid_yaml_raises_config_error(
        self, tmp_path: pytest.TempPathFactory
    ) -> None:
        cfg_file = tmp_path / "bad.yaml"
        cfg_file.write_text(":\n  - :\n    bad: [", encoding="utf-8")

        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(cfg_file)

    def test_non_mapping_top_level_raises(
        self, tmp_path: pytest.TempPathFactory
    ) -> None:
        cfg_file = tmp_path / "list.yaml"
        cfg_file.write_text("- one\n- two\n", encoding="utf-8")

        with pytest.raises(ConfigError, match="Expected a YAML mapping"):
            load_config(cfg_file)


class TestBuildSettingsValidation:
    @pytest.mark.parametrize("value", [42, [1, 2], {"a": "b"}])
    def test_seed_hosts_wrong_type(self, value: object) -> None:
        with pytest.raises(ConfigError, match="discovery.seed_hosts"):
            build_settings({"discovery.seed_hosts": value})

    def test_null_seed_hosts_is_empty(self) -> None:
        assert build_settings({"discovery.seed_hosts": None}).seed_hosts == ()

    @pytest.mark.parametrize("value", ["abc", "9400-9300", "-9300", 70000])
    def test_bad_transport_port(self, value: object) -> None:
        with pytest.raises(ConfigError, match="transport.port"):
            build_settings({"transport.port": value})

    @pytest.mark.parametrize("value", [0, -1, "5s", True])
    def test_bad_timeout(self, value: object) -> None:
        with pytest.raises(ConfigError, match="timeout"):
            build_settings({"discovery.seed_resolver.timeout": value})

    @pytest.mark.parametrize("value", [0, 2.5, "10", False])
    def test_bad_concurrency(self, value: object) -> None:
        with pytest.raises(ConfigError, match="max_concurrent_resolvers"):
            build_settings({"discovery.seed_resolver.max_concurrent_resolvers": value})

    def test_range_entries_load_but_fail_later(self) -> None:
        """Loading accepts ranges; the seed host source rejects them."""
        cfg = build_settings({"discovery.seed_hosts": ["10.0.0.1:9300-9305"]})

        assert cfg.seed_hosts == ("10.0.0.1:9300-9305",)
        assert issubclass(InvalidConfigurationError, ConfigError)
