"""
日志配置模块

为 treedrive 提供统一的日志配置，支持文件和控制台输出。
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional


DEFAULT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    max_bytes: int = 10 * 1024 * 1024,  # 10 MB
    backup_count: int = 5,
    fmt: str = DEFAULT_FORMAT
) -> logging.Logger:
    """
    设置应用日志配置

    Args:
        log_level: 日志级别 (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: 日志文件路径，为 None 时只输出到控制台
        max_bytes: 单个日志文件最大大小
        backup_count: 保留的日志备份数量
        fmt: 日志格式

    Returns:
        treedrive 包的日志记录器
    """
    level = getattr(logging, log_level.upper())

    # 只配置本包的日志记录器，不影响宿主进程的根记录器
    package_logger = logging.getLogger("treedrive")
    package_logger.setLevel(level)

    # 清除现有的处理器
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    # 日志格式
    log_format = logging.Formatter(fmt=fmt, datefmt='%Y-%m-%d %H:%M:%S')

    # 控制台处理器
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(log_format)
    package_logger.addHandler(console_handler)

    # 文件处理器 (轮转)
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            filename=log_file,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding='utf-8'
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(log_format)
        package_logger.addHandler(file_handler)

    package_logger.info(f"Logging initialized: level={log_level}, file={log_file}")
    return package_logger


def setup_logging_from_config(logging_config) -> logging.Logger:
    """
    按 LoggingConfig 设置日志

    Args:
        logging_config: config.LoggingConfig 实例
    """
    return setup_logging(
        log_level=logging_config.level,
        log_file=logging_config.file,
        max_bytes=logging_config.max_bytes,
        backup_count=logging_config.backup_count,
        fmt=logging_config.format,
    )


__all__ = ["setup_logging", "setup_logging_from_config"]
