"""Tests for the output renderer."""

import json

import pytest

from seedhosts.models import (
    ResolutionFailure,
    ResolutionResult,
    ResolvedAddress,
    SeedHostsConfig,
)
from seedhosts.output import render, render_to_string


def _config() -> SeedHostsConfig:
    return SeedHostsConfig(("seed-a", "10.0.0.2:9301", "missing.invalid"), 1)


def _result() -> ResolutionResult:
    return ResolutionResult(
        addresses=[
            ResolvedAddress("67.81.244.10", 9300),
            ResolvedAddress("10.0.0.2", 9301),
            ResolvedAddress("2001:db8::1", 9300),
        ],
        failures=[ResolutionFailure("missing.invalid", "failed to resolve host")],
    )


class TestRenderTable:
    def test_lists_addresses(self) -> None:
        out = render_to_string(_config(), _result(), "table")

        assert "67.81.244.10:9300" in out
        assert "[2001:db8::1]:9300" in out
        assert "limit 1 per address" in out

    def test_lists_failures(self) -> None:
        out = render_to_string(_config(), _result(), "table")

        assert "Unresolved seed hosts" in out
        assert "missing.invalid" in out
        assert "3 configured, 3 addresses, 1 failed" in out

    def test_no_failure_table_when_clean(self) -> None:
        out = render_to_string(_config(), ResolutionResult(), "table")

        assert "Unresolved seed hosts" not in out


class TestRenderJson:
    def test_payload(self) -> None:
        payload = json.loads(render_to_string(_config(), _result(), "json"))

        assert payload["limit"] == 1
        assert payload["configured_hosts"] == [
            "seed-a",
            "10.0.0.2:9301",
            "missing.invalid",
        ]
        assert payload["addresses"][1] == {"ip": "10.0.0.2", "port": 9301}
        assert payload["failures"] == [
            {"host_spec": "missing.invalid", "reason": "failed to resolve host"}
        ]


class TestRenderDispatch:
    def test_unknown_format_raises(self) -> None:
        with pytest.raises(ValueError, match="Unknown output format"):
            render(_config(), _result(), "xml")
