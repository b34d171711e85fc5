"""
虚拟盘相关模型

定义树存储中的文件记录和文件类型
"""

from enum import IntEnum
from datetime import datetime

from pydantic import BaseModel, Field


# 分区根目录的合成 ID（存储分配的 ID 从 1 开始，不会冲突）
ROOT_ID = 0

# 根路径
ROOT_PATH = "/"


class FileKind(IntEnum):
    """文件类型"""

    NONE = 0    # 保留值，仅用于零值记录
    FILE = 1    # 文件
    FOLDER = 2  # 文件夹


def _epoch() -> datetime:
    return datetime.fromtimestamp(0)


class FileRecord(BaseModel):
    """
    文件记录

    树存储中的一行。path 为物化路径，在同一分区内唯一；
    文件夹的 size 始终为 0，content 只在成功写入后才会设置。
    """

    id: int = Field(
        default=0,
        ge=0,
        description="存储分配的唯一 ID"
    )
    name: str = Field(
        default="",
        description="叶子名称"
    )
    kind: FileKind = Field(
        default=FileKind.NONE,
        description="文件类型"
    )
    path: str = Field(
        default="",
        description="绝对路径（以 / 分隔）"
    )
    parent_id: int = Field(
        default=0,
        ge=0,
        description="所属文件夹 ID"
    )
    tree_id: int = Field(
        default=0,
        description="分区 ID"
    )
    size: int = Field(
        default=0,
        ge=0,
        description="文件大小（字节）"
    )
    content: str = Field(
        default="",
        description="内容 blob 引用"
    )
    modified_at: datetime = Field(
        default_factory=_epoch,
        description="最后修改时间"
    )

    def is_dir(self) -> bool:
        """是否为文件夹"""
        return self.kind == FileKind.FOLDER

    @classmethod
    def root(cls, tree_id: int) -> "FileRecord":
        """
        构造分区的合成根记录

        Args:
            tree_id: 分区 ID

        Returns:
            路径为 "/" 的根文件夹记录，其父 ID 指向自身
        """
        return cls(
            id=ROOT_ID,
            kind=FileKind.FOLDER,
            path=ROOT_PATH,
            parent_id=ROOT_ID,
            tree_id=tree_id,
        )

    class Config:
        json_schema_extra = {
            "example": {
                "id": 42,
                "name": "a.txt",
                "kind": 1,
                "path": "/docs/a.txt",
                "parent_id": 7,
                "tree_id": 1,
                "size": 5,
                "content": "c8k2j1x0",
                "modified_at": "2026-02-06T15:30:00"
            }
        }


__all__ = [
    "ROOT_ID",
    "ROOT_PATH",
    "FileKind",
    "FileRecord",
]
