"""
数据库虚拟盘

把树存储、内容存储和文件句柄组合成虚拟盘的完整操作集：
Make, Copy, Move, Remove, Read, Write, List, Search, Info, GetParent, Exists, Stats
"""

import logging
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import BinaryIO, List, Tuple

from treedrive.models.drive import ROOT_ID, FileKind, FileRecord
from treedrive.drive.content_store import ContentStore, ByteSource
from treedrive.drive.errors import (
    DriveError,
    ContentError,
    RecordNotFoundError,
    StoreError,
)
from treedrive.drive.file_id import FileID, FileInfo
from treedrive.drive.paths import (
    join_path,
    normalize_path,
    is_descendant,
    rebase_path,
    validate_name,
)
from treedrive.drive.schema import DEFAULT_TABLE, open_tree_db
from treedrive.drive.tree_store import TreeStore

logger = logging.getLogger(__name__)


class DBDrive:
    """
    数据库虚拟盘

    每个操作都是在调用方线程上顺序执行的一串独立存储调用，
    没有进程内锁，也没有跨语句事务。递归的 Copy / Move / Remove
    中途失败时保留已完成的部分，不做回滚。

    示例:
        >>> drive = DBDrive.open(Path("drive.db"), Path("content"), tree_id=1)
        >>> docs = drive.make(drive.root(), "docs", is_folder=True)
        >>> a = drive.make(docs, "a.txt", is_folder=False)
        >>> drive.write(a, b"hello")
        5
    """

    def __init__(
        self,
        db: sqlite3.Connection,
        content_dir: Path,
        table: str = DEFAULT_TABLE,
        tree_id: int = 1
    ):
        """
        初始化虚拟盘

        Args:
            db: sqlite3 数据库连接
            content_dir: 内容 blob 目录
            table: 记录表名
            tree_id: 分区 ID
        """
        self.tree_id = tree_id
        self.tree = TreeStore(db, table=table, tree_id=tree_id)
        self.content = ContentStore(content_dir)

        logger.info(
            f"DBDrive initialized: table={self.tree.table} tree={tree_id} "
            f"content={self.content.storage_dir}"
        )

    @classmethod
    def open(
        cls,
        database_path: Path,
        content_dir: Path,
        table: str = DEFAULT_TABLE,
        tree_id: int = 1
    ) -> "DBDrive":
        """
        打开数据库文件并创建虚拟盘

        Args:
            database_path: SQLite 数据库文件路径
            content_dir: 内容 blob 目录
            table: 记录表名
            tree_id: 分区 ID
        """
        try:
            db = open_tree_db(database_path)
        except sqlite3.Error as e:
            raise StoreError(f"Can't open database {database_path}: {e}") from e
        return cls(db, content_dir, table=table, tree_id=tree_id)

    # ===== 句柄解析 =====

    def root(self) -> FileID:
        """分区的合成根句柄"""
        return FileID(record=FileRecord.root(self.tree_id))

    def to_file_id(self, path: str) -> FileID:
        """
        把路径解析为句柄

        无法解析的路径返回携带零值记录的句柄，调用方需要自行检查 exists
        """
        try:
            return FileID(record=self.tree.get_by_path(normalize_path(path)))
        except DriveError as e:
            logger.debug(f"Unresolved path {path}: {e}")
            return FileID()

    def get_parent(self, f: FileID) -> FileID:
        """
        获取父句柄

        父 ID 为分区根或查找失败时返回合成根句柄，不会抛出异常
        """
        parent_id = f.record.parent_id
        if parent_id == ROOT_ID:
            return self.root()

        try:
            return FileID(record=self.tree.get_by_id(parent_id))
        except DriveError as e:
            logger.debug(f"Parent {parent_id} of {f.path} not resolved: {e}")
            return self.root()

    def comply(self, f: FileID, operation: int) -> bool:
        """访问检查钩子，本核心始终放行"""
        return True

    # ===== 结构性操作 =====

    def make(self, parent: FileID, name: str, is_folder: bool) -> FileID:
        """
        在 parent 下创建空文件或文件夹

        Raises:
            ValueError: 名称非法
            StoreError: parent 不是文件夹，或插入失败（如路径冲突）
        """
        validate_name(name)
        self._require_folder(parent)

        record = FileRecord(
            name=name,
            kind=FileKind.FOLDER if is_folder else FileKind.FILE,
            path=join_path(parent.path, name),
            parent_id=parent.record.id,
            size=0,
            modified_at=datetime.now(),
        )
        created = self.tree.insert(record)

        logger.debug(f"Made {created.path} (id={created.id})")
        return FileID(record=created)

    def copy(
        self,
        source: FileID,
        target: FileID,
        name: str,
        is_folder: bool = False
    ) -> FileID:
        """
        把 source 复制到 target 下并命名为 name

        文件夹会递归复制所有后代，父记录先于子记录插入；
        内容 blob 共享而不复制。is_folder 仅为兼容调用约定，
        类型始终取自 source 记录。

        Raises:
            RecordNotFoundError: source 未解析
            StoreError: 复制到自身子树内，或任一插入失败（不回滚）
        """
        validate_name(name)
        self._require_existing(source)
        self._require_folder(target)

        src = source.record
        if src.is_dir() and (target.path == src.path or is_descendant(target.path, src.path)):
            raise StoreError(
                f"Cannot copy {src.path} into itself",
                details={"source": src.path, "target": target.path}
            )

        full = join_path(target.path, name)
        try:
            copied = self.tree.insert(src.model_copy(update={
                "name": name,
                "path": full,
                "parent_id": target.record.id,
            }))
            if src.is_dir():
                self._copy_children(src.id, copied.id, full)
        except StoreError:
            logger.warning(f"Copy of {src.path} to {full} failed, partial copy left in place")
            raise

        logger.debug(f"Copied {src.path} to {full}")
        return FileID(record=self.tree.get_by_id(copied.id))

    def _copy_children(self, from_id: int, to_id: int, full: str) -> None:
        """递归复制 from_id 的所有子记录到 to_id 下"""
        for child in self.tree.list_children(from_id):
            child_path = join_path(full, child.name)
            copied = self.tree.insert(child.model_copy(update={
                "path": child_path,
                "parent_id": to_id,
            }))
            if child.is_dir():
                self._copy_children(child.id, copied.id, child_path)

    def move(self, source: FileID, target: FileID, name: str) -> FileID:
        """
        把 source 移动（重命名）到 target 下并命名为 name

        先原地改写 source 自身，再把所有后代路径中的旧前缀替换为新前缀；
        内容引用不变。除存储约束外不做额外的冲突检测。

        Raises:
            RecordNotFoundError: source 未解析或记录已被删除
            StoreError: 移动根目录、移动到自身子树内，或更新失败（不回滚）
        """
        validate_name(name)
        self._require_existing(source)
        self._require_folder(target)

        src = source.record
        if src.id == ROOT_ID:
            raise StoreError("Cannot move the root folder")
        if target.path == src.path or is_descendant(target.path, src.path):
            raise StoreError(
                f"Cannot move {src.path} into itself",
                details={"source": src.path, "target": target.path}
            )

        full = join_path(target.path, name)
        if self.tree.update_location(src.id, name, target.record.id, full) == 0:
            raise RecordNotFoundError(f"Record not found: id={src.id}", id=src.id)

        try:
            for child in self.tree.list_by_path_prefix(src.path):
                self.tree.update_path(child.id, rebase_path(child.path, src.path, full))
        except StoreError:
            logger.warning(f"Move of {src.path} to {full} failed, descendants partially rewritten")
            raise

        logger.debug(f"Moved {src.path} to {full}")
        return FileID(record=self.tree.get_by_id(src.id))

    def remove(self, target: FileID) -> None:
        """
        删除 target 及其所有后代

        Raises:
            RecordNotFoundError: target 未解析
            StoreError: 删除失败（已删除的部分不恢复）
        """
        self._require_existing(target)

        record = target.record
        self.tree.delete_by_id(record.id)
        removed = self.tree.delete_by_path_prefix(record.path)

        logger.debug(f"Removed {record.path} and {removed} descendants")

    # ===== 内容操作 =====

    def read(self, target: FileID) -> BinaryIO:
        """
        打开 target 引用的内容

        Returns:
            可 seek 的二进制流，由调用方关闭

        Raises:
            ContentError: target 是文件夹或没有内容
            ContentNotFoundError: blob 不存在
        """
        record = target.record
        if record.is_dir():
            raise ContentError(f"Cannot read folder {record.path}")
        if not record.content:
            raise ContentError(f"No content stored for {record.path}")

        return self.content.read(record.content)

    def write(self, target: FileID, data: ByteSource) -> int:
        """
        写入 target 的内容

        先写入新 blob，再整体替换记录的大小、内容引用和修改时间；
        旧 blob 被遗弃而不删除。target 句柄中的快照不会更新。

        Returns:
            写入字节数

        Raises:
            RecordNotFoundError: target 未解析或记录已被删除（新 blob 被回收）
            ContentError: target 是文件夹或 blob 写入失败
            StoreError: 记录更新失败
        """
        self._require_existing(target)

        record = target.record
        if record.is_dir():
            raise ContentError(f"Cannot write folder {record.path}")

        blob_id, size = self.content.write(data)
        try:
            updated = self.tree.update_content(record.id, size, blob_id, datetime.now())
        except StoreError:
            self.content.delete(blob_id)
            raise

        if updated == 0:
            # 句柄指向的记录已被删除
            self.content.delete(blob_id)
            raise RecordNotFoundError(f"Record not found: id={record.id}", id=record.id)

        logger.debug(f"Wrote {size} bytes to {record.path} (blob={blob_id})")
        return size

    # ===== 查询操作 =====

    def list(self, parent: FileID) -> List[FileInfo]:
        """
        列出 parent 的直接子项（无序）

        Raises:
            RecordNotFoundError: parent 未解析
        """
        self._require_existing(parent)
        return [
            FileInfo(file_id=FileID(record=record))
            for record in self.tree.list_children(parent.record.id)
        ]

    def search(self, scope: FileID, pattern: str) -> List[FileInfo]:
        """
        按名称子串搜索

        匹配整个分区，scope 被接受但不限制搜索范围
        """
        return [
            FileInfo(file_id=FileID(record=record))
            for record in self.tree.search_by_name(pattern)
        ]

    def info(self, target: FileID) -> FileInfo:
        """target 记录的投影"""
        return FileInfo(file_id=target)

    def exists(self, parent: FileID, name: str) -> bool:
        """
        parent 下是否存在名为 name 的记录

        parent 未解析、查找失败和查找出错都返回 False
        """
        if not parent.exists:
            return False
        try:
            self.tree.get_by_parent_and_name(parent.record.id, name)
            return True
        except DriveError as e:
            logger.debug(f"Exists lookup for {name} under {parent.path}: {e}")
            return False

    def stats(self) -> Tuple[int, int]:
        """
        分区统计

        Returns:
            (分区内总字节数, 0)
        """
        return self.tree.stats()

    # ===== 内部检查 =====

    @staticmethod
    def _require_existing(f: FileID) -> None:
        if not f.exists:
            raise RecordNotFoundError("Handle does not reference a stored record")

    @staticmethod
    def _require_folder(f: FileID) -> None:
        if not f.is_folder:
            raise StoreError(
                f"Target is not a folder: {f.path or '<unresolved>'}",
                details={"target": f.path}
            )

    def close(self) -> None:
        """关闭虚拟盘（释放数据库连接）"""
        self.tree.close()
        logger.info(f"DBDrive closed: tree={self.tree_id}")

    def __enter__(self):
        """上下文管理器入口"""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """上下文管理器退出"""
        self.close()


__all__ = [
    "DBDrive",
]
