"""
Shared test fixtures and in-memory fakes.

The fakes stand in for every external collaborator the bootstrap drives
(command runner, GPU query, wallet CLI, registry, pm2, interactive
prompts) so the suite never touches the host.
"""

# =========================================================================== #
#                         Standard Imports                                    #
# =========================================================================== #
import subprocess
from pathlib import Path

# =========================================================================== #
#                         Third-Party Imports                                 #
# =========================================================================== #
import pytest

# =========================================================================== #
#                         Internal Imports                                    #
# =========================================================================== #
from kindling.exceptions import InstallFailedError, RegistrationError
from kindling.launch import SupervisedProcess


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast isolated unit test")
    config.addinivalue_line("markers", "integration: multi-component test")


# =========================================================================== #
#                         COMMAND RUNNER                                      #
# =========================================================================== #


class FakeRunner:
    """
    Records commands instead of executing them.

    Attributes:
        calls: Every argv passed to ``run``, in order.
        available: Executables ``which`` reports as present.
        outputs: argv tuple → stdout returned when captured.
        failures: argv tuples that raise CalledProcessError.
    """

    def __init__(self, available=(), outputs=None, failures=()):
        self.calls = []
        self.kwargs = []
        self.available = set(available)
        self.outputs = dict(outputs or {})
        self.failures = {tuple(f) for f in failures}
        self.extra_env = {}
        self.verbose = False
        self.timeout = None

    def update_env(self, values):
        self.extra_env.update(values)

    def which(self, name):
        return f"/usr/bin/{name}" if name in self.available else None

    def run(self, cmd, **kwargs):
        argv = tuple(cmd)
        self.calls.append(list(cmd))
        self.kwargs.append(kwargs)
        if argv in self.failures:
            if kwargs.get("check", True):
                raise subprocess.CalledProcessError(1, list(cmd))
            return subprocess.CompletedProcess(list(cmd), 1, stdout="", stderr="")
        return subprocess.CompletedProcess(
            list(cmd), 0, stdout=self.outputs.get(argv, ""), stderr=""
        )

    def output(self, cmd, cwd=None):
        return self.run(cmd, capture=True, cwd=cwd).stdout.strip()

    def succeeds(self, cmd, cwd=None):
        return self.run(cmd, capture=True, check=False, cwd=cwd).returncode == 0


# =========================================================================== #
#                         INTERACTIVE INPUT                                   #
# =========================================================================== #


class FakePrompter:
    """Scripted answers for confirmations and value prompts."""

    def __init__(self, confirm=True, answers=None):
        self._confirm = confirm
        self.answers = dict(answers or {})
        self.confirm_calls = []
        self.asked = []

    def confirm(self, message, default=False):
        self.confirm_calls.append(message)
        return self._confirm

    def ask(self, message, secret=False):
        self.asked.append((message, secret))
        for key, value in self.answers.items():
            if key in message:
                return value
        return "value"


# =========================================================================== #
#                         WALLET & REGISTRY                                   #
# =========================================================================== #


class FakeKeyStore:
    def __init__(self, coldkey=False, hotkeys=(), fail_create=()):
        self.coldkey = coldkey
        self.hotkeys = set(hotkeys)
        self.fail_create = set(fail_create)
        self.created = []

    def coldkey_exists(self):
        return self.coldkey

    def create_coldkey(self):
        if "coldkey" in self.fail_create:
            raise InstallFailedError("coldkey creation failed")
        self.coldkey = True
        self.created.append("coldkey")

    def hotkey_exists(self, hotkey):
        return hotkey in self.hotkeys

    def create_hotkey(self, hotkey):
        if hotkey in self.fail_create:
            raise InstallFailedError(f"hotkey {hotkey} creation failed")
        self.hotkeys.add(hotkey)
        self.created.append(hotkey)


class FakeRegistry:
    def __init__(self, registered=(), fail_on=()):
        self.registered = set(registered)
        self.fail_on = set(fail_on)
        self.register_calls = []

    def is_registered(self, hotkey, netuid, network):
        return hotkey in self.registered

    def register(self, hotkey, netuid, network):
        self.register_calls.append((hotkey, netuid, network))
        if hotkey in self.fail_on:
            raise RegistrationError(f"Failed to register {hotkey} on netuid {netuid}")
        self.registered.add(hotkey)


# =========================================================================== #
#                         HARDWARE & SUPERVISOR                               #
# =========================================================================== #


class FakeDeviceQuery:
    def __init__(self, rows=(), error=None):
        self._rows = list(rows)
        self.error = error

    def rows(self):
        if self.error is not None:
            raise self.error
        return list(self._rows)


class FakeSupervisor:
    """In-memory process table with pm2 semantics."""

    def __init__(self, running=()):
        self.table = {name: "running" for name in running}
        self.deleted = 0
        self.started = []

    def list_processes(self):
        return [SupervisedProcess(name=n, status=s) for n, s in self.table.items()]

    def delete_all(self):
        self.deleted += 1
        self.table.clear()

    def start(self, plan):
        self.started.append(plan)
        self.table[plan.process_name] = "running"


# =========================================================================== #
#                         FIXTURES                                            #
# =========================================================================== #


@pytest.fixture
def fake_runner():
    return FakeRunner()


@pytest.fixture
def fake_prompter():
    return FakePrompter()


@pytest.fixture
def profile_path(tmp_path) -> Path:
    return tmp_path / "home" / ".bash_profile"
