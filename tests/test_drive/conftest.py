"""
虚拟盘测试配置

提供测试夹具和测试工具
"""

import pytest
import tempfile
from pathlib import Path

from treedrive.drive import DBDrive, TreeStore, ContentStore
from treedrive.drive.schema import open_tree_db


@pytest.fixture
def temp_dir():
    """临时目录夹具"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def db(temp_dir):
    """SQLite 连接夹具"""
    conn = open_tree_db(temp_dir / "drive.db")
    yield conn
    conn.close()


@pytest.fixture
def tree_store(db):
    """TreeStore 实例夹具（分区 1）"""
    return TreeStore(db, table="files", tree_id=1)


@pytest.fixture
def content_store(temp_dir):
    """ContentStore 实例夹具"""
    return ContentStore(temp_dir / "content")


@pytest.fixture
def drive(temp_dir):
    """DBDrive 实例夹具"""
    d = DBDrive.open(temp_dir / "drive.db", temp_dir / "content", tree_id=1)
    yield d
    d.close()


@pytest.fixture
def populated_drive(drive):
    """
    带示例目录树的 DBDrive

    /docs/
    /docs/a.txt          "hello"
    /docs/sub/
    /docs/sub/b.txt      "world!"
    /docsx/              名称与 docs 共享前缀的兄弟目录
    /docsx/c.txt         "sibling"
    """
    root = drive.root()
    docs = drive.make(root, "docs", is_folder=True)
    a = drive.make(docs, "a.txt", is_folder=False)
    drive.write(a, b"hello")
    sub = drive.make(docs, "sub", is_folder=True)
    b = drive.make(sub, "b.txt", is_folder=False)
    drive.write(b, b"world!")
    docsx = drive.make(root, "docsx", is_folder=True)
    c = drive.make(docsx, "c.txt", is_folder=False)
    drive.write(c, b"sibling")
    return drive

