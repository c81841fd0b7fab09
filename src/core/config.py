"""
Startup configuration for the global path node.

Values come from a YAML file laid out as:

    global_path:
      goal_dist: 3.0
      global_lookahead: 50.0
      shutdown_behavior: 1
      loop_rate: 20.0
      report_interval: 20
      shutdown_confirm_ticks: 10
      frame_id: odom
    waypoints:
      x: [0.0, 10.0, 20.0]
      y: [0.0, 5.0, 0.0]

Anything missing keeps its default.
"""

import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml


class ConfigError(RuntimeError):
    """Configuration file exists but cannot be used."""


@dataclass
class GlobalPathConfig:
    """Global path node parameters."""
    goal_dist: float = 3.0              # meters - waypoint reached below this
    global_lookahead: float = 50.0      # meters - handed to the planner
    waypoints_x: List[float] = field(default_factory=list)
    waypoints_y: List[float] = field(default_factory=list)
    shutdown_behavior: int = 1          # 1 soft stop, 2 soft stop + shutdown, 3 hard stop + shutdown
    loop_rate: float = 20.0             # Hz
    report_interval: int = 20           # ticks between progress lines
    shutdown_confirm_ticks: int = 10
    frame_id: str = "odom"

    def __post_init__(self):
        if self.shutdown_behavior > 3 or self.shutdown_behavior < 1:
            self.shutdown_behavior = 1
        if self.loop_rate <= 0:
            raise ConfigError(f"loop_rate must be positive, got {self.loop_rate}")
        if self.report_interval < 1:
            raise ConfigError(f"report_interval must be at least 1, got {self.report_interval}")


_SCALAR_KEYS = [f.name for f in fields(GlobalPathConfig)
                if f.name not in ('waypoints_x', 'waypoints_y')]


def config_from_dict(data: Optional[Dict[str, Any]]) -> GlobalPathConfig:
    """Build a config from a parsed YAML mapping."""
    data = data or {}
    kwargs: Dict[str, Any] = {}

    params = data.get('global_path') or {}
    for key in _SCALAR_KEYS:
        if key in params:
            kwargs[key] = params[key]

    for key in ('goal_dist', 'global_lookahead', 'loop_rate'):
        if key in kwargs:
            kwargs[key] = float(kwargs[key])
    for key in ('shutdown_behavior', 'report_interval', 'shutdown_confirm_ticks'):
        if key in kwargs:
            kwargs[key] = int(kwargs[key])

    waypoints = data.get('waypoints') or {}
    kwargs['waypoints_x'] = [float(v) for v in (waypoints.get('x') or [])]
    kwargs['waypoints_y'] = [float(v) for v in (waypoints.get('y') or [])]

    return GlobalPathConfig(**kwargs)


def load_config(config_path: Optional[Union[str, Path]] = None) -> GlobalPathConfig:
    """
    Load configuration from a YAML file.

    Args:
        config_path: Path to the file (default: config/global_path.yaml)

    Returns:
        GlobalPathConfig; defaults if the file does not exist
    """
    if config_path is None:
        config_path = Path(__file__).parent.parent.parent / 'config' / 'global_path.yaml'

    if not os.path.exists(config_path):
        print(f"[CONFIG] Config file not found: {config_path}, using defaults")
        return GlobalPathConfig()

    try:
        with open(config_path, 'r') as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot read {config_path}: {e}") from e

    if data is not None and not isinstance(data, dict):
        raise ConfigError(f"{config_path}: expected a mapping at top level")

    config = config_from_dict(data)
    print(f"[CONFIG] Loaded {config_path}: goal_dist={config.goal_dist}m, "
          f"shutdown_behavior={config.shutdown_behavior}, "
          f"{len(config.waypoints_x)} waypoints")
    return config
