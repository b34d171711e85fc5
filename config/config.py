"""
配置管理系统

支持从 YAML 文件、环境变量加载配置
"""

import copy
import os
import platform
import yaml
from pathlib import Path
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field, field_validator
from dotenv import load_dotenv

# 加载 .env 文件
load_dotenv()


# 环境变量前缀
ENV_PREFIX = "TREEDRIVE_"


def get_default_storage_dir() -> Path:
    """
    获取默认的存储目录（跨平台）

    优先级:
    1. 环境变量 TREEDRIVE_STORAGE_DIR
    2. 用户本地目录（跨平台）

    Returns:
        默认存储目录路径
    """
    # 1. 检查环境变量
    env_dir = os.getenv("TREEDRIVE_STORAGE_DIR")
    if env_dir:
        return Path(env_dir).expanduser().resolve()

    # 2. 根据平台选择用户本地目录
    system = platform.system()

    if system == "Darwin":  # macOS
        base = Path.home() / "Library" / "Application Support" / "treedrive"
    elif system == "Windows":
        appdata = os.getenv("APPDATA", "")
        base = Path(appdata) / "treedrive" if appdata else Path.home() / ".treedrive"
    else:  # Linux 及其他
        xdg_data = os.getenv("XDG_DATA_HOME")
        base = Path(xdg_data) / "treedrive" if xdg_data else Path.home() / ".local" / "share" / "treedrive"

    return base


class DatabaseConfig(BaseModel):
    """数据库配置

    记录表保存在嵌入式 SQLite 数据库中
    """

    type: str = Field(default="sqlite", description="数据库类型（仅支持 sqlite）")
    path: Path = Field(
        default_factory=lambda: get_default_storage_dir() / "treedrive.db",
        description="SQLite 数据库文件路径"
    )

    @field_validator("type")
    @classmethod
    def validate_type(cls, v: str) -> str:
        """验证数据库类型"""
        if v != "sqlite":
            raise ValueError(f"Unsupported database type: {v}")
        return v


class DriveConfig(BaseModel):
    """虚拟盘配置"""

    content_dir: Path = Field(
        default_factory=lambda: get_default_storage_dir() / "content",
        description="内容 blob 目录"
    )
    table: str = Field(default="files", description="记录表名")
    tree_id: int = Field(default=1, ge=1, description="分区 ID")


class LoggingConfig(BaseModel):
    """日志配置"""

    level: str = Field(default="INFO", description="日志级别")
    format: str = Field(
        default="%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s",
        description="日志格式"
    )
    file: Optional[str] = Field(default=None, description="日志文件路径（为空则只输出到控制台）")
    max_bytes: int = Field(default=10485760, description="日志文件最大大小（10MB）")
    backup_count: int = Field(default=5, description="日志备份数量")


class Config(BaseModel):
    """treedrive 总配置"""

    # 环境配置
    environment: str = Field(default="development", description="运行环境 (development, production, test)")
    debug: bool = Field(default=False, description="调试模式")

    # 各模块配置
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    drive: DriveConfig = Field(default_factory=DriveConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """验证环境变量"""
        valid_envs = ["development", "production", "test"]
        if v not in valid_envs:
            raise ValueError(f"Invalid environment: {v}. Must be one of {valid_envs}")
        return v


# 配置文件查找顺序（相对于当前工作目录）
CONFIG_SEARCH_PATHS = (
    Path("config") / "settings.yaml",
    Path("settings.yaml"),
)


def _set_nested(data: Dict[str, Any], keys: List[str], value: Any) -> None:
    """按键路径写入嵌套字典，中间层不是字典时替换为新字典"""
    for key in keys[:-1]:
        child = data.get(key)
        if not isinstance(child, dict):
            child = data[key] = {}
        data = child
    data[keys[-1]] = value


class ConfigManager:
    """
    配置管理器

    YAML 文件提供基础值，TREEDRIVE_ 前缀的环境变量逐项覆盖，
    结果缓存到 reload() 为止
    """

    def __init__(self, config_path: Optional[str] = None):
        """
        Args:
            config_path: YAML 配置文件路径，为 None 时按 CONFIG_SEARCH_PATHS 查找
        """
        if config_path is None:
            found = next((p for p in CONFIG_SEARCH_PATHS if p.is_file()), CONFIG_SEARCH_PATHS[0])
            config_path = str(found)
        self.config_path = config_path
        self._config: Optional[Config] = None

    def load_yaml(self) -> Dict[str, Any]:
        """读取 YAML 文件，文件不存在或为空时返回空字典"""
        path = Path(self.config_path)
        if not path.is_file():
            return {}
        return yaml.safe_load(path.read_text(encoding="utf-8")) or {}

    def _override_from_env(self, config_dict: Dict[str, Any]) -> Dict[str, Any]:
        """
        用环境变量覆盖配置

        TREEDRIVE_DRIVE__TREE_ID=3 写入 drive.tree_id，__ 分隔层级。
        返回新字典，不修改传入的字典
        """
        result = copy.deepcopy(config_dict)
        for env_key, env_value in os.environ.items():
            if env_key.startswith(ENV_PREFIX):
                keys = env_key[len(ENV_PREFIX):].lower().split("__")
                _set_nested(result, keys, self._parse_env_value(env_value))
        return result

    @staticmethod
    def _parse_env_value(value: str) -> Any:
        """
        按 YAML 标量解析环境变量值

        数字和 true/false/yes/no 转换为对应类型，其余（包括会被解析为
        列表或映射的值）保持原字符串
        """
        try:
            parsed = yaml.safe_load(value)
        except yaml.YAMLError:
            return value
        if isinstance(parsed, (bool, int, float)):
            return parsed
        return value

    def load(self) -> Config:
        """加载配置（带缓存）"""
        if self._config is None:
            self._config = Config(**self._override_from_env(self.load_yaml()))
        return self._config

    def reload(self) -> Config:
        """丢弃缓存并重新加载"""
        self._config = None
        return self.load()


# 全局配置管理器
_config_manager: Optional[ConfigManager] = None


def get_config_manager(config_path: Optional[str] = None) -> ConfigManager:
    """获取全局配置管理器，首次调用时创建"""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager(config_path)
    return _config_manager


def get_config(config_path: Optional[str] = None) -> Config:
    """获取全局配置"""
    return get_config_manager(config_path).load()


def reload_config() -> Config:
    """重新加载全局配置"""
    return get_config_manager().reload()


def reset_config() -> None:
    """丢弃全局配置管理器（下次访问时重新创建）"""
    global _config_manager
    _config_manager = None
