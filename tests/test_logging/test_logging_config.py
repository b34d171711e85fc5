"""
日志配置测试
"""

import logging
import logging.handlers

import pytest

from config import LoggingConfig
from treedrive.logging_config import setup_logging, setup_logging_from_config


@pytest.fixture(autouse=True)
def restore_package_logger():
    """测试后移除 treedrive 日志记录器上的处理器"""
    yield
    package_logger = logging.getLogger("treedrive")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.setLevel(logging.NOTSET)


class TestSetupLogging:
    """setup_logging 测试"""

    def test_console_only(self):
        """测试只输出到控制台"""
        package_logger = setup_logging(log_level="debug")

        assert package_logger.name == "treedrive"
        assert package_logger.level == logging.DEBUG
        assert len(package_logger.handlers) == 1
        assert isinstance(package_logger.handlers[0], logging.StreamHandler)

    def test_file_handler(self, tmp_path):
        """测试轮转文件输出"""
        log_file = tmp_path / "logs" / "treedrive.log"

        package_logger = setup_logging(log_level="INFO", log_file=str(log_file), backup_count=2)
        logging.getLogger("treedrive.drive.drive").info("drive opened")
        for handler in package_logger.handlers:
            handler.flush()

        rotating = [
            h for h in package_logger.handlers
            if isinstance(h, logging.handlers.RotatingFileHandler)
        ]
        assert len(rotating) == 1
        assert rotating[0].backupCount == 2
        assert "drive opened" in log_file.read_text(encoding="utf-8")

    def test_repeated_setup_replaces_handlers(self):
        """测试重复配置不会累积处理器"""
        setup_logging()
        package_logger = setup_logging()

        assert len(package_logger.handlers) == 1

    def test_invalid_level(self):
        """测试非法日志级别"""
        with pytest.raises(AttributeError):
            setup_logging(log_level="LOUD")


class TestSetupLoggingFromConfig:
    """setup_logging_from_config 测试"""

    def test_from_config(self, tmp_path):
        """测试按 LoggingConfig 配置"""
        config = LoggingConfig(level="WARNING", file=str(tmp_path / "drive.log"), format="%(message)s")

        package_logger = setup_logging_from_config(config)

        assert package_logger.level == logging.WARNING
        assert len(package_logger.handlers) == 2
        assert all(h.formatter._fmt == "%(message)s" for h in package_logger.handlers)
