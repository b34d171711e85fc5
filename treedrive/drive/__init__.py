"""
虚拟盘模块

把文件树映射到关系表中的物化路径记录，内容保存在独立的 blob 目录
"""

from .errors import (
    ErrorCode,
    DriveError,
    NotFoundError,
    RecordNotFoundError,
    StoreError,
    ContentError,
    ContentNotFoundError,
)

from .tree_store import TreeStore
from .content_store import ContentStore
from .file_id import FileID, FileInfo
from .drive import DBDrive

from .factory import create_drive, get_drive, reset_drive

__all__ = [
    # Errors
    "ErrorCode",
    "DriveError",
    "NotFoundError",
    "RecordNotFoundError",
    "StoreError",
    "ContentError",
    "ContentNotFoundError",
    # Stores
    "TreeStore",
    "ContentStore",
    # Handles
    "FileID",
    "FileInfo",
    # Main
    "DBDrive",
    # Factory
    "create_drive",
    "get_drive",
    "reset_drive",
]
