"""Configuration models and loading."""

from dataclasses import dataclass, field
from typing import List, Optional
from pathlib import Path
import yaml
import os
from dotenv import load_dotenv


@dataclass
class HotplugConfig:
    """Hotplug controller tunables.

    Fields from ``poll_interval_ms`` to ``single_unit_on_suspend`` are the
    runtime tunables exposed through ``TunableSurface``. The rest are fixed
    once the controller is built.
    """
    poll_interval_ms: int = 100
    min_units: int = 1
    max_units: Optional[int] = None  # None means the full pool
    load_threshold_up: int = 25
    load_threshold_down: int = 5
    cycles_required_up: int = 1
    cycles_required_down: int = 5
    single_unit_on_suspend: bool = True

    enabled: bool = True
    startup_delay_ms: int = 20000
    stats_enabled: bool = False
    pool_capacity: Optional[int] = None  # None means detect from host
    actuator: str = "sysfs"  # 'sysfs' | 'simulated'
    sysfs_root: str = "/sys/devices/system/cpu"


@dataclass
class ObserverConfig:
    """Load observer configuration."""
    metric: str = "run_queue"  # 'run_queue' | 'utilization'
    sample_interval_ms: int = 20
    scale: int = 10  # run-queue depth is reported in tenths


@dataclass
class SystemConfig:
    """Main system configuration."""
    debug_mode: bool = False
    log_level: str = "INFO"
    log_dir: str = "data/logs"

    hotplug: HotplugConfig = field(default_factory=HotplugConfig)
    observer: ObserverConfig = field(default_factory=ObserverConfig)


_ENV_INT_FIELDS = {
    "AUTOSMP_POLL_INTERVAL_MS": "poll_interval_ms",
    "AUTOSMP_MIN_UNITS": "min_units",
    "AUTOSMP_MAX_UNITS": "max_units",
    "AUTOSMP_LOAD_THRESHOLD_UP": "load_threshold_up",
    "AUTOSMP_LOAD_THRESHOLD_DOWN": "load_threshold_down",
    "AUTOSMP_CYCLES_REQUIRED_UP": "cycles_required_up",
    "AUTOSMP_CYCLES_REQUIRED_DOWN": "cycles_required_down",
    "AUTOSMP_STARTUP_DELAY_MS": "startup_delay_ms",
    "AUTOSMP_POOL_CAPACITY": "pool_capacity",
}

_ENV_BOOL_FIELDS = {
    "AUTOSMP_ENABLED": "enabled",
    "AUTOSMP_SINGLE_UNIT_ON_SUSPEND": "single_unit_on_suspend",
    "AUTOSMP_STATS_ENABLED": "stats_enabled",
}


def _env_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "y", "on")


def load_config(path: Optional[str] = None) -> SystemConfig:
    """Load configuration from defaults, YAML file and environment.

    Precedence (lowest to highest): dataclass defaults, the YAML file
    (``path``, ``AUTOSMP_CONFIG`` or ``config/autosmp.yaml``), environment.
    """
    load_dotenv()

    config = SystemConfig()

    config_path = Path(path or os.getenv("AUTOSMP_CONFIG", "config/autosmp.yaml"))
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        config.debug_mode = bool(data.get("debug_mode", config.debug_mode))
        config.log_level = str(data.get("log_level", config.log_level))
        config.log_dir = str(data.get("log_dir", config.log_dir))
        if "hotplug" in data:
            config.hotplug = HotplugConfig(**data["hotplug"])
        if "observer" in data:
            config.observer = ObserverConfig(**data["observer"])

    config.debug_mode = os.getenv("DEBUG_MODE", str(config.debug_mode)).lower() == "true"
    config.log_level = os.getenv("LOG_LEVEL", config.log_level)
    config.log_dir = os.getenv("AUTOSMP_LOG_DIR", config.log_dir)

    for env_name, attr in _ENV_INT_FIELDS.items():
        raw = os.getenv(env_name)
        if raw is not None:
            setattr(config.hotplug, attr, int(raw))

    for env_name, attr in _ENV_BOOL_FIELDS.items():
        raw = os.getenv(env_name)
        if raw is not None:
            setattr(config.hotplug, attr, _env_bool(raw))

    config.hotplug.actuator = os.getenv("AUTOSMP_ACTUATOR", config.hotplug.actuator)
    config.hotplug.sysfs_root = os.getenv("AUTOSMP_SYSFS_ROOT", config.hotplug.sysfs_root)

    config.observer.metric = os.getenv("AUTOSMP_LOAD_METRIC", config.observer.metric)
    config.observer.sample_interval_ms = int(
        os.getenv("AUTOSMP_SAMPLE_INTERVAL_MS", str(config.observer.sample_interval_ms))
    )

    return config


def validate_config(config: SystemConfig, pool_capacity: Optional[int] = None) -> List[str]:
    """Validate configuration and return errors.

    The relation between the two load thresholds is deliberately not checked.
    """
    errors = []
    hp = config.hotplug

    if hp.poll_interval_ms <= 0:
        errors.append("poll_interval_ms must be positive")

    if hp.startup_delay_ms < 0:
        errors.append("startup_delay_ms must not be negative")

    if hp.min_units < 1:
        errors.append("min_units must be at least 1")

    capacity = pool_capacity if pool_capacity is not None else hp.pool_capacity
    if capacity is not None and capacity < 1:
        errors.append("pool_capacity must be at least 1")

    if hp.max_units is not None:
        if hp.max_units < hp.min_units:
            errors.append(
                f"max_units ({hp.max_units}) must not be less than min_units ({hp.min_units})"
            )
        if capacity is not None and hp.max_units > capacity:
            errors.append(
                f"max_units ({hp.max_units}) exceeds pool capacity ({capacity})"
            )
    elif capacity is not None and hp.min_units > capacity:
        errors.append(f"min_units ({hp.min_units}) exceeds pool capacity ({capacity})")

    for name in ("load_threshold_up", "load_threshold_down",
                 "cycles_required_up", "cycles_required_down"):
        if getattr(hp, name) < 0:
            errors.append(f"{name} must not be negative")

    if hp.actuator not in ("sysfs", "simulated"):
        errors.append(f"Unknown actuator '{hp.actuator}' (expected 'sysfs' or 'simulated')")

    if config.observer.metric not in ("run_queue", "utilization"):
        errors.append(
            f"Unknown load metric '{config.observer.metric}' "
            "(expected 'run_queue' or 'utilization')"
        )

    if config.observer.sample_interval_ms <= 0:
        errors.append("sample_interval_ms must be positive")

    return errors
