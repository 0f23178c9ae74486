"""
Tests for the GPU Hardware Inventory.

Covers CSV parsing, unknown-memory handling, tool absence and the
nvidia-smi adapter.
"""

# =========================================================================== #
#                         Standard Imports                                    #
# =========================================================================== #
import subprocess
from unittest.mock import MagicMock, patch

# =========================================================================== #
#                         Third-Party Imports                                 #
# =========================================================================== #
import pytest
from conftest import FakeDeviceQuery, FakeRunner

# =========================================================================== #
#                         Internal Imports                                    #
# =========================================================================== #
from kindling.core.environment import (
    HardwareInventory,
    NvidiaSmiQuery,
    parse_memory_mib,
    system_memory_gb,
)
from kindling.core.environment.hardware import Device, parse_query_csv
from kindling.exceptions import MissingToolError

# =========================================================================== #
#                    PARSING                                                  #
# =========================================================================== #


@pytest.mark.unit
@pytest.mark.parametrize(
    "raw, expected",
    [
        ("81920", 81920),
        (" 40960 ", 40960),
        ("24576 MiB", 24576),
        ("0", 0),
        ("[N/A]", None),
        ("", None),
        ("-1", None),
        ("12.5", None),
    ],
)
def test_parse_memory_mib(raw, expected):
    """Only non-negative integers (optionally with MiB) are accepted."""
    assert parse_memory_mib(raw) == expected


@pytest.mark.unit
def test_parse_query_csv_handles_commas_and_blank_lines():
    """Names are stripped, blank lines skipped, missing memory is empty."""
    text = "NVIDIA A100-SXM4-80GB, 81920\n\nNVIDIA RTX 4090, 24564\nBroken GPU\n"

    rows = parse_query_csv(text)

    assert rows == [
        ("NVIDIA A100-SXM4-80GB", "81920"),
        ("NVIDIA RTX 4090", "24564"),
        ("Broken GPU", ""),
    ]


# =========================================================================== #
#                    INVENTORY                                                #
# =========================================================================== #


@pytest.mark.unit
def test_enumerate_assigns_positional_indices():
    """Devices keep the tool's order and get indices 0..N-1."""
    inventory = HardwareInventory(FakeDeviceQuery([("A100", "81920"), ("L40", "46068")]))

    devices = inventory.enumerate_devices()

    assert [d.index for d in devices] == [0, 1]
    assert [d.memory_mib for d in devices] == [81920, 46068]
    assert devices[0].memory_gb == 80


@pytest.mark.unit
def test_enumerate_keeps_unknown_memory_device_in_place():
    """An unparseable memory field yields memory_mib=None without shifting indices."""
    inventory = HardwareInventory(
        FakeDeviceQuery([("A", "81920"), ("B", "[N/A]"), ("C", "40960")])
    )

    devices = inventory.enumerate_devices()

    assert [d.index for d in devices] == [0, 1, 2]
    assert devices[1].memory_mib is None
    assert devices[1].memory_known is False
    assert devices[1].memory_gb is None
    assert devices[2].memory_mib == 40960


@pytest.mark.unit
def test_enumerate_returns_empty_when_tool_missing():
    """A missing query tool is a warning, never an error."""
    log = MagicMock()
    inventory = HardwareInventory(FakeDeviceQuery(error=MissingToolError("nvidia-smi missing")), log)

    assert inventory.enumerate_devices() == []
    log.warning.assert_called()


@pytest.mark.unit
def test_enumerate_returns_empty_when_query_fails():
    """A non-zero exit from the tool yields zero devices."""
    error = subprocess.CalledProcessError(9, ["nvidia-smi"])
    inventory = HardwareInventory(FakeDeviceQuery(error=error))

    assert inventory.enumerate_devices() == []


@pytest.mark.unit
def test_enumerate_empty_output_warns():
    """No rows means no GPUs."""
    log = MagicMock()

    assert HardwareInventory(FakeDeviceQuery([]), log).enumerate_devices() == []
    log.warning.assert_called_once()


# =========================================================================== #
#                    NVIDIA-SMI ADAPTER                                       #
# =========================================================================== #


@pytest.mark.unit
def test_nvidia_smi_query_raises_when_absent():
    """The adapter reports a missing tool as MissingToolError."""
    query = NvidiaSmiQuery(FakeRunner(available=()))

    with pytest.raises(MissingToolError):
        query.rows()


@pytest.mark.unit
def test_nvidia_smi_query_runs_csv_query():
    """The adapter queries name and memory in CSV without units."""
    argv = ("nvidia-smi", *NvidiaSmiQuery.QUERY_ARGS)
    runner = FakeRunner(available={"nvidia-smi"}, outputs={argv: "GPU0, 81920\nGPU1, 24576\n"})

    rows = NvidiaSmiQuery(runner).rows()

    assert rows == [("GPU0", "81920"), ("GPU1", "24576")]
    assert runner.calls == [list(argv)]
    assert "--format=csv,noheader,nounits" in argv


# =========================================================================== #
#                    SYSTEM MEMORY                                            #
# =========================================================================== #


@pytest.mark.unit
def test_system_memory_gb_uses_psutil():
    """RAM is reported in GiB."""
    fake = MagicMock(total=64 * 1024**3)
    with patch("kindling.core.environment.hardware.psutil.virtual_memory", return_value=fake):
        assert system_memory_gb() == pytest.approx(64.0)


@pytest.mark.unit
def test_system_memory_gb_returns_none_on_error():
    """Unreadable RAM is reported as unknown."""
    with patch(
        "kindling.core.environment.hardware.psutil.virtual_memory", side_effect=OSError("boom")
    ):
        assert system_memory_gb() is None


@pytest.mark.unit
def test_device_is_frozen():
    """Devices are immutable snapshots."""
    device = Device(index=0, memory_mib=1024)
    with pytest.raises(AttributeError):
        device.index = 1  # type: ignore[misc]
