"""
Core infrastructure module.
- Configuration management
- Lifecycle state machine
"""

from .state_machine import LifecycleStateMachine, LifecycleState, LifecycleEvent, shutdown_state_for
from .config import GlobalPathConfig, ConfigError, load_config, config_from_dict
