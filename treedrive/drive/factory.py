"""
DBDrive 工厂函数

提供便捷的 DBDrive 实例获取方法
"""

import logging
from typing import Optional

from config import Config, get_config
from treedrive.drive.drive import DBDrive

logger = logging.getLogger(__name__)


# 全局单例
_global_drive: Optional[DBDrive] = None


def create_drive(config: Config) -> DBDrive:
    """
    按配置创建 DBDrive

    Args:
        config: 总配置

    Returns:
        新的 DBDrive 实例（拥有自己的数据库连接）
    """
    return DBDrive.open(
        database_path=config.database.path,
        content_dir=config.drive.content_dir,
        table=config.drive.table,
        tree_id=config.drive.tree_id,
    )


def get_drive(
    config: Optional[Config] = None,
    force_new: bool = False
) -> DBDrive:
    """
    获取 DBDrive 实例

    Args:
        config: 总配置，为 None 则使用全局配置
        force_new: 是否强制创建新实例

    Returns:
        DBDrive 实例
    """
    global _global_drive

    if force_new or _global_drive is None:
        if _global_drive is not None:
            _global_drive.close()

        _global_drive = create_drive(config or get_config())

    return _global_drive


def reset_drive() -> None:
    """重置全局 DBDrive 实例"""
    global _global_drive

    if _global_drive is not None:
        _global_drive.close()
        _global_drive = None


__all__ = [
    "create_drive",
    "get_drive",
    "reset_drive",
]
