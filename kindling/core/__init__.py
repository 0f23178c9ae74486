"""
Core Utilities Package

This package exposes the essential components for configuration, logging,
host interaction and project constants. It also includes the
BootstrapOrchestrator that manages the bootstrap lifecycle.
"""

# Configuration
from .config import (
    Config,
    CredentialsConfig,
    HardwareConfig,
    InteractiveConfig,
    LaunchConfig,
    ProvisionConfig,
    ServicesConfig,
    TelemetryConfig,
    WalletConfig,
)

# Environment & Hardware
from .environment import (
    CommandRunner,
    Device,
    HardwareInventory,
    HostPlatform,
    NvidiaSmiQuery,
    detect_platform,
    ensure_single_instance,
    release_single_instance,
    system_memory_gb,
)

# Input/Output Utilities
from .io import load_config_from_yaml, save_as_yaml

# Logging
from .logger import Logger, LogStyle, Reporter, log_pipeline_summary

# Environment Orchestration
from .orchestrator import BootstrapOrchestrator, TimeTracker, TimeTrackerProtocol

# Constants & Paths
from .paths import LOG_DIR, LOGGER_NAME, STATE_DIR, STATIC_DIRS, setup_static_directories

__all__ = [
    # Configuration
    "Config",
    "ProvisionConfig",
    "CredentialsConfig",
    "WalletConfig",
    "LaunchConfig",
    "ServicesConfig",
    "InteractiveConfig",
    "TelemetryConfig",
    "HardwareConfig",
    # Constants & Paths
    "LOGGER_NAME",
    "STATE_DIR",
    "LOG_DIR",
    "STATIC_DIRS",
    "setup_static_directories",
    # Orchestration
    "BootstrapOrchestrator",
    "TimeTracker",
    "TimeTrackerProtocol",
    # Logging
    "Logger",
    "Reporter",
    "LogStyle",
    "log_pipeline_summary",
    # Environment
    "CommandRunner",
    "Device",
    "HardwareInventory",
    "HostPlatform",
    "NvidiaSmiQuery",
    "detect_platform",
    "ensure_single_instance",
    "release_single_instance",
    "system_memory_gb",
    # I/O
    "load_config_from_yaml",
    "save_as_yaml",
]
