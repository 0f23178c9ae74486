"""
Tests for OS-specific install recipes.
"""

# =========================================================================== #
#                         Third-Party Imports                                 #
# =========================================================================== #
import pytest
from conftest import FakeRunner

# =========================================================================== #
#                         Internal Imports                                    #
# =========================================================================== #
from kindling.core.config import ProvisionConfig
from kindling.core.environment import HostPlatform
from kindling.exceptions import UnsupportedPlatformError
from kindling.provision import IdempotentInstaller, RecipeBook, StepStatus, select_action

UBUNTU = HostPlatform(system="Linux", distro_id="ubuntu", distro_like=("debian",))
FEDORA = HostPlatform(system="Linux", distro_id="fedora")
MACOS = HostPlatform(system="Darwin")


def _book(host, runner):
    return RecipeBook(host, runner, ProvisionConfig())


# =========================================================================== #
#                    ACTION SELECTION                                         #
# =========================================================================== #


@pytest.mark.unit
def test_select_action_by_family():
    def debian():
        return None

    def macos():
        return None

    assert select_action(UBUNTU, debian=debian, macos=macos, what="git") is debian
    assert select_action(MACOS, debian=debian, macos=macos, what="git") is macos


@pytest.mark.unit
def test_unsupported_platform_fails_at_install_time():
    """Selection never raises; the returned action does."""
    action = select_action(FEDORA, debian=lambda: None, macos=lambda: None, what="git")

    with pytest.raises(UnsupportedPlatformError, match="fedora"):
        action()


@pytest.mark.unit
def test_unsupported_platform_yields_failed_step():
    result = IdempotentInstaller().ensure(_book(FEDORA, FakeRunner()).git())

    assert result.status is StepStatus.FAILED
    assert isinstance(result.error, UnsupportedPlatformError)


# =========================================================================== #
#                    DEBIAN                                                   #
# =========================================================================== #


@pytest.mark.unit
def test_git_on_ubuntu_uses_apt_with_sudo():
    runner = FakeRunner()

    _book(UBUNTU, runner).git().install()

    assert runner.calls == [
        ["apt-get", "update", "-y"],
        ["apt-get", "install", "-y", "git"],
    ]
    assert all(kw.get("sudo") for kw in runner.kwargs)


@pytest.mark.unit
def test_node_on_ubuntu_pipes_nodesource_script_to_bash():
    """The setup script is downloaded, then fed to ``bash -`` with sudo -E."""
    cfg = ProvisionConfig()
    curl = ("curl", "-fsSL", cfg.nodesource_url)
    runner = FakeRunner(outputs={curl: "echo setup"})

    RecipeBook(UBUNTU, runner, cfg).node().install()

    assert runner.calls[0] == list(curl)
    assert runner.calls[1] == ["bash", "-"]
    assert runner.kwargs[1]["input"] == "echo setup"
    assert runner.kwargs[1]["sudo"] and runner.kwargs[1]["preserve_env"]
    assert runner.calls[-1] == ["apt-get", "install", "-y", "nodejs"]


@pytest.mark.unit
def test_node_probe_requires_node_and_npm():
    assert not _book(UBUNTU, FakeRunner(available={"node"})).node().probe()
    assert _book(UBUNTU, FakeRunner(available={"node", "npm"})).node().probe()


@pytest.mark.unit
def test_python_on_ubuntu_adds_deadsnakes_then_installs():
    runner = FakeRunner(available={"add-apt-repository"})

    _book(UBUNTU, runner).python().install()

    assert ["add-apt-repository", "-y", "ppa:deadsnakes/ppa"] in runner.calls
    assert runner.calls[-1] == ["apt-get", "install", "-y", "python3.12", "python3.12-venv"]
    # package lists are refreshed after the PPA is added
    ppa_at = runner.calls.index(["add-apt-repository", "-y", "ppa:deadsnakes/ppa"])
    assert ["apt-get", "update", "-y"] in runner.calls[ppa_at:]


@pytest.mark.unit
def test_python_on_ubuntu_installs_ppa_tooling_when_missing():
    runner = FakeRunner(available=())

    _book(UBUNTU, runner).python().install()

    assert ["apt-get", "install", "-y", "software-properties-common"] in runner.calls


@pytest.mark.unit
def test_python_probe_uses_pinned_executable():
    book = RecipeBook(UBUNTU, FakeRunner(available={"python3.11"}), ProvisionConfig(python_version="3.11"))

    dep = book.python()

    assert dep.name == "python3.11"
    assert dep.probe()


# =========================================================================== #
#                    MACOS                                                    #
# =========================================================================== #


@pytest.mark.unit
def test_macos_uses_existing_brew():
    runner = FakeRunner(available={"brew"})

    _book(MACOS, runner).python().install()

    assert runner.calls == [["brew", "install", "python@3.12"]]


@pytest.mark.unit
def test_macos_installs_homebrew_first():
    cfg = ProvisionConfig()
    curl = ("curl", "-fsSL", cfg.homebrew_install_url)
    runner = FakeRunner(outputs={curl: "#!/bin/bash"})

    RecipeBook(MACOS, runner, cfg).git().install()

    assert runner.calls == [list(curl), ["/bin/bash", "-"], ["brew", "install", "git"]]
    assert runner.extra_env["NONINTERACTIVE"] == "1"


# =========================================================================== #
#                    TOOLCHAIN                                                #
# =========================================================================== #


@pytest.mark.unit
def test_toolchain_order():
    names = [d.name for d in _book(UBUNTU, FakeRunner()).toolchain()]

    assert names == ["git", "npm", "pm2", "python3.12"]


@pytest.mark.unit
def test_pm2_installs_globally_with_npm():
    runner = FakeRunner()

    _book(UBUNTU, runner).pm2().install()

    assert runner.calls == [["npm", "install", "-g", "pm2"]]
