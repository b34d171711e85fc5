"""
配置管理模块

导出配置相关的类和函数
"""

from .config import (
    Config,
    ConfigManager,
    DatabaseConfig,
    DriveConfig,
    LoggingConfig,
    get_default_storage_dir,
    get_config,
    get_config_manager,
    reload_config,
    reset_config,
)

__all__ = [
    "Config",
    "ConfigManager",
    "DatabaseConfig",
    "DriveConfig",
    "LoggingConfig",
    "get_default_storage_dir",
    "get_config",
    "get_config_manager",
    "reload_config",
    "reset_config",
]
