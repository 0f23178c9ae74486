"""
Tests for repository location, virtual environment creation and
requirement installation.
"""

# =========================================================================== #
#                         Standard Imports                                    #
# =========================================================================== #
from pathlib import Path

# =========================================================================== #
#                         Third-Party Imports                                 #
# =========================================================================== #
import pytest
from conftest import FakeRunner

# =========================================================================== #
#                         Internal Imports                                    #
# =========================================================================== #
from kindling.core.config import ProvisionConfig
from kindling.exceptions import InstallFailedError, MissingToolError
from kindling.provision import Workspace, WorkspaceBuilder

REV_PARSE = ("git", "rev-parse", "--is-inside-work-tree")

# =========================================================================== #
#                    REPOSITORY                                               #
# =========================================================================== #


@pytest.mark.unit
def test_inside_work_tree_uses_cwd(tmp_path):
    runner = FakeRunner()

    repo = WorkspaceBuilder(runner, ProvisionConfig(), cwd=tmp_path).locate_repository()

    assert repo == tmp_path
    assert not any(c[:2] == ["git", "clone"] for c in runner.calls)


@pytest.mark.unit
def test_existing_checkout_is_reused(tmp_path):
    (tmp_path / "boltzmann").mkdir()
    runner = FakeRunner(failures=[REV_PARSE])

    repo = WorkspaceBuilder(runner, ProvisionConfig(), cwd=tmp_path).locate_repository()

    assert repo == tmp_path / "boltzmann"
    assert not any(c[:2] == ["git", "clone"] for c in runner.calls)


@pytest.mark.unit
def test_missing_checkout_is_cloned(tmp_path):
    cfg = ProvisionConfig()
    runner = FakeRunner(failures=[REV_PARSE])

    repo = WorkspaceBuilder(runner, cfg, cwd=tmp_path).locate_repository()

    assert repo == tmp_path / "boltzmann"
    assert ["git", "clone", cfg.repo_url, str(repo)] in runner.calls


@pytest.mark.unit
def test_clone_failure_raises(tmp_path):
    cfg = ProvisionConfig()
    clone = ("git", "clone", cfg.repo_url, str(tmp_path / "boltzmann"))
    runner = FakeRunner(failures=[REV_PARSE, clone])

    with pytest.raises(InstallFailedError, match="clone"):
        WorkspaceBuilder(runner, cfg, cwd=tmp_path).locate_repository()


# =========================================================================== #
#                    VIRTUAL ENVIRONMENT                                      #
# =========================================================================== #


@pytest.mark.unit
def test_venv_created_with_pinned_interpreter(tmp_path):
    runner = FakeRunner(available={"python3.12"})

    venv = WorkspaceBuilder(runner, ProvisionConfig(), cwd=tmp_path).ensure_venv(tmp_path)

    assert venv == tmp_path / "venv"
    assert runner.calls == [["/usr/bin/python3.12", "-m", "venv", str(venv)]]


@pytest.mark.unit
def test_existing_venv_is_kept(tmp_path):
    (tmp_path / "venv").mkdir()
    runner = FakeRunner(available={"python3.12"})

    WorkspaceBuilder(runner, ProvisionConfig(), cwd=tmp_path).ensure_venv(tmp_path)

    assert runner.calls == []


@pytest.mark.unit
def test_venv_requires_interpreter(tmp_path):
    with pytest.raises(MissingToolError, match="python3.12"):
        WorkspaceBuilder(FakeRunner(), ProvisionConfig(), cwd=tmp_path).ensure_venv(tmp_path)


# =========================================================================== #
#                    REQUIREMENTS                                             #
# =========================================================================== #


@pytest.mark.unit
def test_requirements_then_extras_inside_venv(tmp_path):
    runner = FakeRunner()
    ws = Workspace(repo_path=tmp_path, venv_path=tmp_path / "venv")

    WorkspaceBuilder(runner, ProvisionConfig(), cwd=tmp_path).install_requirements(ws)

    python = str(ws.venv_python)
    assert runner.calls == [
        [python, "-m", "pip", "install", "-r", str(tmp_path / "requirements.txt")],
        [python, "-m", "pip", "install", "--upgrade", "cryptography", "pyOpenSSL"],
    ]


@pytest.mark.unit
def test_pip_failure_raises(tmp_path):
    ws = Workspace(repo_path=tmp_path, venv_path=tmp_path / "venv")
    pip = (str(ws.venv_python), "-m", "pip", "install", "-r", str(tmp_path / "requirements.txt"))

    with pytest.raises(InstallFailedError, match="install requirements"):
        WorkspaceBuilder(FakeRunner(failures=[pip]), ProvisionConfig()).install_requirements(ws)


@pytest.mark.unit
def test_workspace_paths():
    ws = Workspace(repo_path=Path("/srv/boltzmann"), venv_path=Path("/srv/boltzmann/venv"))

    assert ws.venv_python == Path("/srv/boltzmann/venv/bin/python")
    assert ws.script("miner.py") == Path("/srv/boltzmann/miner.py")
