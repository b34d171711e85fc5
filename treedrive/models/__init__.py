"""
treedrive 数据模型

导出所有 Pydantic 模型
"""

from .drive import (
    ROOT_ID,
    ROOT_PATH,
    FileKind,
    FileRecord,
)

__all__ = [
    "ROOT_ID",
    "ROOT_PATH",
    "FileKind",
    "FileRecord",
]
