import sys

import pytest

from laptop_diagnostic.inventory import (
    InventoryProvider,
    LinuxInventory,
    MacInventory,
    WindowsInventory,
    run_command,
    select_provider,
)

posix_only = pytest.mark.skipif(sys.platform.startswith("win"), reason="uses POSIX shell commands")


@pytest.mark.parametrize(
    "system, expected",
    [("Windows", WindowsInventory), ("Darwin", MacInventory), ("Linux", LinuxInventory), ("FreeBSD", LinuxInventory)],
)
def test_select_provider(system, expected):
    assert isinstance(select_provider(system), expected)


def test_every_provider_covers_every_category():
    for provider in (WindowsInventory, MacInventory, LinuxInventory):
        for category in ("storage", "gpu", "battery", "display", "thermal"):
            assert category in provider.COMMANDS or category in provider.NOTES


@posix_only
def test_run_command_returns_stdout_verbatim():
    assert run_command("echo hello") == "hello\n"


@posix_only
def test_run_command_placeholder_on_failure():
    output = run_command("exit 3")
    assert output.startswith("Unavailable: exit 3")
    assert "exit status 3" in output


def test_run_command_placeholder_on_missing_binary():
    output = run_command("laptop-diagnostic-no-such-binary --version")
    assert output.startswith("Unavailable: laptop-diagnostic-no-such-binary")


def test_windows_thermal_is_a_note():
    section = WindowsInventory().collect("thermal")
    assert section["provider"] == "windows"
    assert "additional tools" in section["note"]


@posix_only
def test_collect_runs_every_command_in_category():
    class EchoInventory(InventoryProvider):
        name = "echo"
        COMMANDS = {"gpu": {"first": "echo one", "second": "echo two"}}

    assert EchoInventory().collect("gpu") == {"provider": "echo", "first": "one\n", "second": "two\n"}


def test_collect_rejects_unknown_category():
    with pytest.raises(ValueError):
        LinuxInventory().collect("keyboard")


@posix_only
def test_pipeline_reports_missing_first_command():
    output = run_command("laptop-diagnostic-no-such-binary | sed -n '1,20p'")
    assert output.startswith("Unavailable: laptop-diagnostic-no-such-binary")


@posix_only
def test_pipeline_output_passes_through():
    assert run_command("printf 'a\\nb\\n' | sed -n '1p'") == "a\n"
