"""
树存储数据库 Schema 定义

一张扁平表保存所有分区的文件记录，通过 tree 列区分分区
"""

import re
import sqlite3
from pathlib import Path
from typing import Optional


# 默认表名
DEFAULT_TABLE = "files"

# 默认数据库文件路径
DEFAULT_DB_PATH = "data/treedrive.db"

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def validate_table_name(table: str) -> str:
    """
    校验表名是否为合法的 SQL 标识符

    表名无法作为绑定参数传入，只能在构造时校验一次

    Raises:
        ValueError: 表名非法
    """
    if not _IDENTIFIER.match(table or ""):
        raise ValueError(f"Invalid table name: {table!r}")
    return table


def ensure_tree_schema(db: sqlite3.Connection, table: str = DEFAULT_TABLE) -> None:
    """
    确保树存储的表和索引已创建

    Args:
        db: sqlite3 数据库连接
        table: 表名
    """
    table = validate_table_name(table)

    db.execute(f"""
        CREATE TABLE IF NOT EXISTS {table} (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            type INTEGER NOT NULL,
            path TEXT NOT NULL,
            folder INTEGER NOT NULL,
            tree INTEGER NOT NULL,
            size INTEGER NOT NULL DEFAULT 0,
            content TEXT NOT NULL DEFAULT '',
            modified REAL NOT NULL,
            UNIQUE (tree, path)
        );
    """)

    # 创建索引
    db.execute(f"CREATE INDEX IF NOT EXISTS idx_{table}_folder ON {table}(tree, folder);")
    db.execute(f"CREATE INDEX IF NOT EXISTS idx_{table}_name ON {table}(tree, name);")


def open_tree_db(path: Optional[Path] = None, **kwargs) -> sqlite3.Connection:
    """
    打开树存储数据库连接

    连接处于自动提交模式，每条语句各自原子；
    允许跨线程使用，进程内不加锁

    Args:
        path: 数据库文件路径，为 None 时使用默认路径
        **kwargs: 传递给 sqlite3.connect 的参数

    Returns:
        sqlite3.Connection: 数据库连接
    """
    if path is None:
        path = Path(DEFAULT_DB_PATH)

    if str(path) != ":memory:":
        Path(path).parent.mkdir(parents=True, exist_ok=True)

    kwargs.setdefault("isolation_level", None)
    kwargs.setdefault("check_same_thread", False)

    return sqlite3.connect(str(path), **kwargs)


__all__ = [
    "DEFAULT_TABLE",
    "DEFAULT_DB_PATH",
    "validate_table_name",
    "ensure_tree_schema",
    "open_tree_db",
]
