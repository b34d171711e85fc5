"""
文件句柄和文件信息

FileID 把一个绝对路径绑定到一次加载得到的记录快照，
FileInfo 是记录面向调用方的投影
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from treedrive.models.drive import FileKind, FileRecord
from treedrive.drive.paths import is_descendant


class FileID(BaseModel):
    """
    文件句柄

    只持有一份记录快照，不会隐式重新读取。
    相等性和哈希都按路径计算
    """

    record: FileRecord = Field(
        default_factory=FileRecord,
        description="记录快照"
    )

    @property
    def path(self) -> str:
        return self.record.path

    @property
    def client_id(self) -> str:
        """面向客户端的标识（即路径）"""
        return self.record.path

    @property
    def is_folder(self) -> bool:
        return self.record.kind == FileKind.FOLDER

    @property
    def exists(self) -> bool:
        """零值记录（未解析的路径）返回 False"""
        return bool(self.record.path)

    def file(self) -> FileRecord:
        """返回记录快照"""
        return self.record

    def contains(self, other: "FileID") -> bool:
        """other 是否位于本句柄的子树内（不含自身）"""
        return is_descendant(other.path, self.path)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FileID):
            return NotImplemented
        return self.path == other.path

    def __hash__(self) -> int:
        return hash(self.path)

    def __str__(self) -> str:
        return self.path


class FileInfo(BaseModel):
    """
    文件信息

    记录的只读投影，可以附带预先计算好的子项列表
    """

    file_id: FileID = Field(
        ...,
        description="所属句柄"
    )
    children: Optional[List["FileInfo"]] = Field(
        None,
        description="子项列表（仅在调用方附加时存在）"
    )

    @property
    def name(self) -> str:
        return self.file_id.record.name

    @property
    def size(self) -> int:
        return self.file_id.record.size

    @property
    def mode(self) -> int:
        return 0

    @property
    def mod_time(self) -> datetime:
        return self.file_id.record.modified_at

    @property
    def is_dir(self) -> bool:
        return self.file_id.is_folder

    def file(self) -> FileID:
        return self.file_id

    def sys(self) -> FileRecord:
        """底层记录"""
        return self.file_id.record

    def get_children(self) -> Optional[List["FileInfo"]]:
        return self.children

    def set_children(self, children: List["FileInfo"]) -> None:
        self.children = children


__all__ = [
    "FileID",
    "FileInfo",
]
