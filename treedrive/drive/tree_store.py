"""
树存储

文件记录仓库，构造时绑定一张表和一个分区 ID，
提供按 ID / 路径 / 父 ID + 名称 的点查询和按路径前缀的批量操作
"""

import logging
import sqlite3
from datetime import datetime
from typing import List, Optional, Tuple, Sequence, Any

from treedrive.models.drive import ROOT_PATH, FileKind, FileRecord
from treedrive.drive.errors import RecordNotFoundError, StoreError
from treedrive.drive.paths import descendant_prefix
from treedrive.drive.schema import (
    DEFAULT_TABLE,
    validate_table_name,
    ensure_tree_schema,
)

logger = logging.getLogger(__name__)


_COLUMNS = "id, name, type, path, folder, tree, size, content, modified"


class TreeStore:
    """
    文件记录仓库

    所有查询都限定在构造时绑定的分区内，所有值都以绑定参数传入。
    前缀匹配使用 substr 比较而不是 LIKE，名称中的 % 和 _ 不会扩大匹配范围。

    示例:
        >>> store = TreeStore(open_tree_db(Path("drive.db")), tree_id=1)
        >>> record = store.get_by_path("/docs/a.txt")
    """

    def __init__(
        self,
        db: sqlite3.Connection,
        table: str = DEFAULT_TABLE,
        tree_id: int = 1
    ):
        """
        初始化树存储

        Args:
            db: sqlite3 数据库连接
            table: 表名
            tree_id: 分区 ID
        """
        self.db = db
        self.table = validate_table_name(table)
        self.tree_id = tree_id

        try:
            ensure_tree_schema(self.db, self.table)
        except sqlite3.Error as e:
            raise StoreError(f"Failed to create table {self.table}: {e}") from e
        self._sql = self._build_statements(self.table)

        logger.debug(f"TreeStore bound to table={self.table} tree={self.tree_id}")

    @staticmethod
    def _build_statements(table: str) -> dict:
        """构造所有语句（表名只在此处拼接一次）"""
        select = f"SELECT {_COLUMNS} FROM {table}"
        return {
            "get_by_id": f"{select} WHERE id = ? AND tree = ?",
            "get_by_path": f"{select} WHERE path = ? AND tree = ?",
            "get_by_name": f"{select} WHERE folder = ? AND name = ? AND tree = ?",
            "list_children": f"{select} WHERE folder = ? AND tree = ?",
            "search": f"{select} WHERE tree = ? AND instr(name, ?) > 0",
            "list_prefix": f"{select} WHERE tree = ? AND substr(path, 1, ?) = ?",
            "insert": (
                f"INSERT INTO {table} (name, type, path, folder, tree, size, content, modified) "
                f"VALUES (?, ?, ?, ?, ?, ?, ?, ?)"
            ),
            "update_content": (
                f"UPDATE {table} SET size = ?, content = ?, modified = ? "
                f"WHERE id = ? AND tree = ?"
            ),
            "update_location": (
                f"UPDATE {table} SET name = ?, folder = ?, path = ? "
                f"WHERE id = ? AND tree = ?"
            ),
            "update_path": f"UPDATE {table} SET path = ? WHERE id = ? AND tree = ?",
            "delete_by_id": f"DELETE FROM {table} WHERE id = ? AND tree = ?",
            "delete_prefix": f"DELETE FROM {table} WHERE tree = ? AND substr(path, 1, ?) = ?",
            "stats": f"SELECT COALESCE(SUM(size), 0) FROM {table} WHERE tree = ?",
        }

    def _execute(self, name: str, params: Sequence[Any]) -> sqlite3.Cursor:
        """执行一条语句，sqlite3 异常统一包装为 StoreError"""
        try:
            return self.db.execute(self._sql[name], params)
        except sqlite3.Error as e:
            logger.error(f"Tree store query '{name}' failed: {e}")
            raise StoreError(
                f"Tree store query '{name}' failed: {e}",
                details={"query": name, "tree": self.tree_id}
            ) from e

    def _fetch_one(self, name: str, params: Sequence[Any]) -> Optional[FileRecord]:
        row = self._execute(name, params).fetchone()
        return self._row_to_record(row) if row else None

    def _fetch_all(self, name: str, params: Sequence[Any]) -> List[FileRecord]:
        return [self._row_to_record(row) for row in self._execute(name, params).fetchall()]

    @staticmethod
    def _row_to_record(row: tuple) -> FileRecord:
        """把一行转换为 FileRecord"""
        return FileRecord(
            id=row[0],
            name=row[1],
            kind=FileKind(row[2]),
            path=row[3],
            parent_id=row[4],
            tree_id=row[5],
            size=row[6],
            content=row[7] or "",
            modified_at=datetime.fromtimestamp(row[8]),
        )

    # ===== 点查询 =====

    def get_by_id(self, record_id: int) -> FileRecord:
        """
        按 ID 获取记录

        Raises:
            RecordNotFoundError: 记录不存在
            StoreError: 查询失败
        """
        record = self._fetch_one("get_by_id", (record_id, self.tree_id))
        if record is None:
            raise RecordNotFoundError(f"Record not found: id={record_id}", id=record_id)
        return record

    def get_by_path(self, path: str) -> FileRecord:
        """
        按路径获取记录

        根路径即使没有对应的行也会解析为合成根记录

        Raises:
            RecordNotFoundError: 记录不存在
            StoreError: 查询失败
        """
        record = self._fetch_one("get_by_path", (path, self.tree_id))
        if record is not None:
            return record
        if path == ROOT_PATH:
            return FileRecord.root(self.tree_id)
        raise RecordNotFoundError(f"Record not found: path={path}", path=path)

    def get_by_parent_and_name(self, parent_id: int, name: str) -> FileRecord:
        """
        按父 ID 和名称获取记录

        Raises:
            RecordNotFoundError: 记录不存在
            StoreError: 查询失败
        """
        record = self._fetch_one("get_by_name", (parent_id, name, self.tree_id))
        if record is None:
            raise RecordNotFoundError(
                f"Record not found: parent={parent_id} name={name}",
                parent_id=parent_id,
                name=name
            )
        return record

    def list_children(self, parent_id: int) -> List[FileRecord]:
        """列出直接子记录（无序）"""
        return self._fetch_all("list_children", (parent_id, self.tree_id))

    def search_by_name(self, pattern: str) -> List[FileRecord]:
        """分区内名称包含 pattern 的所有记录（区分大小写，按字面匹配，不限深度）"""
        return self._fetch_all("search", (self.tree_id, pattern))

    def list_by_path_prefix(self, prefix: str) -> List[FileRecord]:
        """列出 path 以 prefix + "/" 开头的所有记录"""
        subtree = descendant_prefix(prefix)
        return self._fetch_all("list_prefix", (self.tree_id, len(subtree), subtree))

    # ===== 写操作 =====

    def insert(self, record: FileRecord) -> FileRecord:
        """
        插入记录

        record.id 和 record.tree_id 被忽略，ID 由存储分配，分区取自绑定值

        Returns:
            带有新 ID 的记录

        Raises:
            StoreError: 插入失败（如路径冲突）
        """
        cursor = self._execute("insert", (
            record.name,
            int(record.kind),
            record.path,
            record.parent_id,
            self.tree_id,
            record.size,
            record.content,
            record.modified_at.timestamp(),
        ))
        return record.model_copy(update={"id": cursor.lastrowid, "tree_id": self.tree_id})

    def update_content(
        self,
        record_id: int,
        size: int,
        content: str,
        modified_at: datetime
    ) -> int:
        """整体替换记录的大小、内容引用和修改时间，返回更新行数"""
        return self._execute("update_content", (
            size,
            content,
            modified_at.timestamp(),
            record_id,
            self.tree_id,
        )).rowcount

    def update_location(self, record_id: int, name: str, parent_id: int, path: str) -> int:
        """原地改写记录的名称、父 ID 和路径，返回更新行数"""
        return self._execute("update_location", (name, parent_id, path, record_id, self.tree_id)).rowcount

    def update_path(self, record_id: int, path: str) -> None:
        """只改写记录的路径"""
        self._execute("update_path", (path, record_id, self.tree_id))

    def delete_by_id(self, record_id: int) -> int:
        """按 ID 删除记录，返回删除行数"""
        return self._execute("delete_by_id", (record_id, self.tree_id)).rowcount

    def delete_by_path_prefix(self, prefix: str) -> int:
        """
        删除 path 以 prefix + "/" 开头的所有记录

        Returns:
            删除行数
        """
        subtree = descendant_prefix(prefix)
        return self._execute("delete_prefix", (self.tree_id, len(subtree), subtree)).rowcount

    # ===== 统计 =====

    def stats(self) -> Tuple[int, int]:
        """
        分区统计

        Returns:
            (分区内 size 总和, 0)，第二项为保留的数量轴
        """
        total = self._execute("stats", (self.tree_id,)).fetchone()[0]
        return int(total), 0

    def close(self) -> None:
        """关闭数据库连接"""
        self.db.close()
        logger.debug(f"TreeStore closed: table={self.table} tree={self.tree_id}")

    def __enter__(self):
        """上下文管理器入口"""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """上下文管理器退出"""
        self.close()


__all__ = [
    "TreeStore",
]
