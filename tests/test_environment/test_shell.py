"""
Tests for CommandRunner: output policy, environment layering and sudo
resolution.
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

# =========================================================================== #
#                         Internal Imports                                    #
# =========================================================================== #
from kindling.core.environment import CommandRunner

_RUN = "kindling.core.environment.shell.subprocess.run"


def _completed(returncode=0, stdout=""):
    return subprocess.CompletedProcess([], returncode, stdout=stdout, stderr="")


# =========================================================================== #
#                    OUTPUT POLICY                                            #
# =========================================================================== #


@pytest.mark.unit
def test_quiet_runner_suppresses_output():
    """Without debug, stdout and stderr go to DEVNULL."""
    with patch(_RUN, return_value=_completed()) as run:
        CommandRunner(verbose=False).run(["git", "--version"])

    kwargs = run.call_args.kwargs
    assert kwargs["stdout"] is subprocess.DEVNULL
    assert kwargs["stderr"] is subprocess.DEVNULL
    assert kwargs["check"] is True


@pytest.mark.unit
def test_verbose_runner_streams_output():
    """With debug, output is inherited from the terminal."""
    with patch(_RUN, return_value=_completed()) as run:
        CommandRunner(verbose=True).run(["git", "--version"])

    assert run.call_args.kwargs["stdout"] is None


@pytest.mark.unit
def test_interactive_command_keeps_terminal_when_quiet():
    """Prompting commands stay attached even in quiet mode."""
    with patch(_RUN, return_value=_completed()) as run:
        CommandRunner(verbose=False).run(["wandb", "login"], interactive=True)

    assert run.call_args.kwargs["stdout"] is None


@pytest.mark.unit
def test_capture_overrides_policy_and_output_strips():
    """output() captures and strips stdout."""
    with patch(_RUN, return_value=_completed(stdout="  v1.2\n")) as run:
        assert CommandRunner().output(["tool", "--version"]) == "v1.2"

    assert run.call_args.kwargs["stdout"] is subprocess.PIPE


@pytest.mark.unit
def test_timeout_and_extra_env_are_applied():
    """Configured timeout and exported credentials reach every command."""
    runner = CommandRunner(timeout=30.0, extra_env={"A": "1"})
    runner.update_env({"BUCKET": "b"})

    with patch(_RUN, return_value=_completed()) as run:
        runner.run(["env"])

    kwargs = run.call_args.kwargs
    assert kwargs["timeout"] == 30.0
    assert kwargs["env"]["A"] == "1"
    assert kwargs["env"]["BUCKET"] == "b"


# =========================================================================== #
#                    SUCCEEDS                                                 #
# =========================================================================== #


@pytest.mark.unit
def test_succeeds_reports_exit_status():
    with patch(_RUN, return_value=_completed(returncode=1)):
        assert CommandRunner().succeeds(["false"]) is False
    with patch(_RUN, return_value=_completed(returncode=0)):
        assert CommandRunner().succeeds(["true"]) is True


@pytest.mark.unit
def test_succeeds_treats_missing_executable_as_failure():
    with patch(_RUN, side_effect=FileNotFoundError("nope")):
        assert CommandRunner().succeeds(["nope"]) is False


# =========================================================================== #
#                    SUDO RESOLUTION                                          #
# =========================================================================== #


@pytest.mark.unit
def test_sudo_not_used_as_root():
    runner = CommandRunner()
    with patch("kindling.core.environment.shell.os.geteuid", return_value=0, create=True), patch(
        _RUN, return_value=_completed()
    ) as run:
        runner.run(["apt-get", "update", "-y"], sudo=True)

    assert run.call_args.args[0] == ["apt-get", "update", "-y"]


@pytest.mark.unit
def test_sudo_prefix_with_preserve_env():
    """Non-root users with passwordless sudo get ``sudo -E``."""
    runner = CommandRunner()
    runner.which = MagicMock(return_value="/usr/bin/sudo")
    with patch("kindling.core.environment.shell.os.geteuid", return_value=1000, create=True), patch(
        _RUN, return_value=_completed()
    ) as run:
        runner.run(["bash", "-"], sudo=True, preserve_env=True)

    assert run.call_args.args[0] == ["sudo", "-E", "bash", "-"]


@pytest.mark.unit
def test_sudo_fallback_without_sudo_binary():
    """Missing sudo warns and runs the command directly."""
    runner = CommandRunner()
    runner.which = MagicMock(return_value=None)
    with patch("kindling.core.environment.shell.os.geteuid", return_value=1000, create=True), patch(
        _RUN, return_value=_completed()
    ) as run:
        runner.run(["apt-get", "install", "-y", "git"], sudo=True)

    assert run.call_args.args[0] == ["apt-get", "install", "-y", "git"]


@pytest.mark.unit
def test_sudo_decision_is_cached():
    """``sudo -n true`` is probed once per runner."""
    runner = CommandRunner()
    runner.which = MagicMock(return_value="/usr/bin/sudo")
    with patch("kindling.core.environment.shell.os.geteuid", return_value=1000, create=True), patch(
        _RUN, return_value=_completed()
    ) as run:
        runner.run(["a"], sudo=True)
        runner.run(["b"], sudo=True)

    probes = [c for c in run.call_args_list if c.args[0] == ["sudo", "-n", "true"]]
    assert len(probes) == 1
