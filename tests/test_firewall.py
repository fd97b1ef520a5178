"""Tests for the firewall command runner."""

import subprocess

import pytest

from pgnav.domains.connections.app.firewall import FirewallConfigurator
from pgnav.shared.core.errors import FirewallConfigurationError
from pgnav.shared.core.processes import run_to_completion

from .fakes import FakeProcess, FakeRunner


class TimingOutProcess(FakeProcess):
    def __init__(self):
        super().__init__(returncode=None)
        self.calls = 0

    def communicate(self, timeout=None):
        self.calls += 1
        if self.calls == 1:
            raise subprocess.TimeoutExpired(cmd="x", timeout=timeout)
        self.returncode = -9
        return "", "killed"


class TestFirewallConfigurator:
    def test_placeholders_are_substituted(self, server):
        firewall = FirewallConfigurator(["allow", "--server", "{server}", "--target={host}:{port}"], FakeRunner())
        assert firewall.build_command(server) == ["allow", "--server", "prod", "--target=db.example.com:5432"]

    def test_literal_braces_survive(self, server):
        firewall = FirewallConfigurator(["jq", "{.rules}", "{host}"], FakeRunner())
        assert firewall.build_command(server) == ["jq", "{.rules}", "db.example.com"]

    def test_from_settings_splits_string_command(self):
        firewall = FirewallConfigurator.from_settings({"firewall_command": "open-port {port}"}, FakeRunner())
        assert firewall.command == ["open-port", "{port}"]

    def test_not_configured(self, server):
        firewall = FirewallConfigurator.from_settings({}, FakeRunner())
        assert not firewall.is_configured
        with pytest.raises(FirewallConfigurationError):
            firewall.configure(server)

    def test_configure_returns_stdout(self, server):
        runner = FakeRunner(FakeProcess(stdout="rule created\n"))
        firewall = FirewallConfigurator(["allow", "{server}"], runner)
        assert firewall.configure(server) == "rule created\n"
        assert runner.commands == [["allow", "prod"]]

    def test_non_zero_exit(self, server):
        runner = FakeRunner(FakeProcess(returncode=2, stderr="permission denied"))
        with pytest.raises(FirewallConfigurationError, match="permission denied"):
            FirewallConfigurator(["allow"], runner).configure(server)

    def test_missing_executable(self, server):
        runner = FakeRunner(error=FileNotFoundError("allow"))
        with pytest.raises(FirewallConfigurationError, match="Could not run allow"):
            FirewallConfigurator(["allow"], runner).configure(server)


class TestRunToCompletion:
    def test_kills_on_timeout(self):
        process = TimingOutProcess()
        outcome = run_to_completion(FakeRunner(process), ["sleep"], timeout=0.1)
        assert process.killed
        assert outcome.returncode == -9
        assert outcome.stderr == "killed"
