"""
Tests for BootstrapOrchestrator (dependency-injected lifecycle).

Covers the four initialization phases, the context manager contract,
manifest persistence and cleanup.
"""

# =========================================================================== #
#                         Standard Imports                                    #
# =========================================================================== #
import logging
from unittest.mock import MagicMock

# =========================================================================== #
#                         Third-Party Imports                                 #
# =========================================================================== #
import pytest
from conftest import FakeRunner

# =========================================================================== #
#                         Internal Imports                                    #
# =========================================================================== #
from kindling.core import BootstrapOrchestrator, CommandRunner, Config, HostPlatform, Reporter
from kindling.core.config import ProvisionConfig, TelemetryConfig


@pytest.fixture
def cfg(tmp_path):
    return Config(
        telemetry=TelemetryConfig(
            log_to_file=False, log_dir=tmp_path / "logs", state_dir=tmp_path / "state"
        )
    )


def _orchestrator(cfg, **overrides):
    deps = dict(
        reporter=MagicMock(),
        time_tracker=MagicMock(),
        log_initializer=MagicMock(return_value=logging.getLogger("kindling.test.orch")),
        static_dir_setup=MagicMock(),
        lock_acquirer=MagicMock(),
        lock_releaser=MagicMock(),
        platform_detector=MagicMock(return_value=HostPlatform(system="Linux", distro_id="ubuntu")),
        manifest_saver=MagicMock(),
        ram_probe=MagicMock(return_value=62.8),
    )
    deps.update(overrides)
    return BootstrapOrchestrator(cfg, **deps), deps


# =========================================================================== #
#                    ORCHESTRATOR: INITIALIZATION                             #
# =========================================================================== #


@pytest.mark.unit
def test_init_defaults(cfg):
    """Nothing runs until the context is entered."""
    orch = BootstrapOrchestrator(cfg)

    assert isinstance(orch.reporter, Reporter)
    assert orch.runner is None
    assert orch.platform is None
    assert orch.run_logger is None


@pytest.mark.unit
def test_phases_run_in_order(cfg):
    orch, deps = _orchestrator(cfg)

    orch.initialize_core_services()

    deps["static_dir_setup"].assert_called_once()
    assert cfg.telemetry.state_dir.is_dir()
    deps["log_initializer"].assert_called_once_with(name="Kindling", log_dir=None, level="INFO")
    deps["lock_acquirer"].assert_called_once()
    assert deps["lock_acquirer"].call_args.args[0] == cfg.hardware.lock_file_path
    assert orch.platform.is_debian_family
    assert isinstance(orch.runner, CommandRunner)
    assert orch.runner.verbose is False


@pytest.mark.unit
def test_debug_enables_verbose_runner_and_debug_level(tmp_path):
    cfg = Config(
        telemetry=TelemetryConfig(
            debug=True, log_dir=tmp_path / "logs", state_dir=tmp_path / "state"
        ),
        provision=ProvisionConfig(command_timeout=30),
    )
    orch, deps = _orchestrator(cfg)

    orch.initialize_core_services()

    kwargs = deps["log_initializer"].call_args.kwargs
    assert kwargs["level"] == "DEBUG"
    assert kwargs["log_dir"] == tmp_path / "logs"
    assert orch.runner.verbose is True
    assert orch.runner.timeout == 30


@pytest.mark.unit
def test_injected_runner_is_kept(cfg):
    runner = FakeRunner()
    orch, _ = _orchestrator(cfg, runner=runner)

    orch.initialize_core_services()

    assert orch.runner is runner


@pytest.mark.unit
def test_initialize_is_idempotent(cfg):
    orch, deps = _orchestrator(cfg)

    orch.initialize_core_services()
    orch.initialize_core_services()

    deps["lock_acquirer"].assert_called_once()


# =========================================================================== #
#                    CONTEXT MANAGER                                          #
# =========================================================================== #


@pytest.mark.unit
def test_context_manager_releases_lock(cfg):
    orch, deps = _orchestrator(cfg)

    with orch as entered:
        assert entered is orch
        deps["lock_releaser"].assert_not_called()

    deps["time_tracker"].start.assert_called_once()
    deps["time_tracker"].stop.assert_called_once()
    deps["lock_releaser"].assert_called_once_with(cfg.hardware.lock_file_path)


@pytest.mark.unit
def test_enter_failure_cleans_up_partial_state(cfg):
    """A failure after the lock is taken still releases it."""
    orch, deps = _orchestrator(cfg, platform_detector=MagicMock(side_effect=RuntimeError("boom")))

    with pytest.raises(RuntimeError, match="boom"):
        orch.__enter__()

    deps["lock_releaser"].assert_called_once()


@pytest.mark.unit
def test_exit_does_not_swallow_exceptions(cfg):
    orch, _ = _orchestrator(cfg)

    with pytest.raises(ValueError):
        with orch:
            raise ValueError("inner")


@pytest.mark.unit
def test_cleanup_logs_release_error(cfg):
    run_logger = MagicMock()
    run_logger.handlers = []
    orch, _ = _orchestrator(
        cfg,
        log_initializer=MagicMock(return_value=run_logger),
        lock_releaser=MagicMock(side_effect=OSError("busy")),
    )
    orch.initialize_core_services()

    orch.cleanup()

    run_logger.error.assert_called_once()
    assert "busy" in run_logger.error.call_args.args[0]


@pytest.mark.unit
def test_cleanup_without_lock_skips_release(cfg):
    orch, deps = _orchestrator(cfg)

    orch.cleanup()

    deps["lock_releaser"].assert_not_called()


# =========================================================================== #
#                    REPORTING & MANIFEST                                     #
# =========================================================================== #


@pytest.mark.unit
def test_log_environment_report_passes_host_facts(cfg):
    orch, deps = _orchestrator(cfg)
    orch.initialize_core_services()

    orch.log_environment_report()

    kwargs = deps["reporter"].log_initial_status.call_args.kwargs
    assert kwargs["cfg"] is cfg
    assert kwargs["platform"] is orch.platform
    assert kwargs["ram_gb"] == 62.8


@pytest.mark.unit
def test_save_launch_manifest(cfg):
    orch, deps = _orchestrator(cfg)
    plan = MagicMock()
    plan.to_dict.return_value = {"process_name": "C0"}

    path = orch.save_launch_manifest([plan])

    assert path == cfg.telemetry.manifest_path
    kwargs = deps["manifest_saver"].call_args.kwargs
    assert kwargs["yaml_path"] == path
    assert kwargs["data"]["project"] == "aesop"
    assert kwargs["data"]["netuid"] == 220
    assert kwargs["data"]["workers"] == [{"process_name": "C0"}]
