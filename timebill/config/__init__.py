"""
Configuration module for the aggregation engine.
"""
from .settings import (
    EngineSettings,
    get_config,
    load_config,
    reload_config
)

__all__ = [
    'EngineSettings',
    'get_config',
    'load_config',
    'reload_config'
]
